"""Integer and decimal coins and the set operations on coin lists."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Sequence, TypeVar, Union

DEC_PRECISION = 18

_DENOM_PATTERN = re.compile(r"[a-zA-Z][a-zA-Z0-9/:._-]{2,127}")
_DEC_QUANTUM = Decimal(1).scaleb(-DEC_PRECISION)


def _format_dec(amount: Decimal) -> str:
    with localcontext() as ctx:
        ctx.prec = 200
        return f"{amount.quantize(_DEC_QUANTUM):f}"


@dataclass(frozen=True)
class Coin:
    """An integer amount of a denomination."""

    denom: str
    amount: int = 0

    def is_zero(self) -> bool:
        return self.amount == 0

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


@dataclass(frozen=True)
class DecCoin:
    """A fixed-point decimal amount of a denomination."""

    denom: str
    amount: Decimal = Decimal(0)

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(self.amount))

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_negative(self) -> bool:
        return self.amount < 0

    def __str__(self) -> str:
        return f"{_format_dec(self.amount)}{self.denom}"


AnyCoin = Union[Coin, DecCoin]
C = TypeVar("C", Coin, DecCoin)


def validate_denom(denom: str) -> None:
    """Raise ValueError unless the denomination is well formed."""
    if not isinstance(denom, str) or not _DENOM_PATTERN.fullmatch(denom):
        raise ValueError(f"invalid denom: {denom}")


def sort_coins(coins: Sequence[C]) -> list[C]:
    """Return the coins sorted by denomination."""
    return sorted(coins, key=lambda coin: coin.denom)


def _amount_of(coins: Sequence[AnyCoin], denom: str):
    return next((coin.amount for coin in coins if coin.denom == denom), 0)


def coins_equal(a: Sequence[AnyCoin], b: Sequence[AnyCoin]) -> bool:
    """True when both lists hold the same denominations with equal amounts."""
    if len(a) != len(b):
        return False
    return all(
        left.denom == right.denom and left.amount == right.amount
        for left, right in zip(sort_coins(a), sort_coins(b))
    )


def denoms_subset_of(coins: Sequence[AnyCoin], other: Sequence[AnyCoin]) -> bool:
    """True when every denomination of coins has a non-zero amount in other."""
    if len(coins) > len(other):
        return False
    return all(_amount_of(other, coin.denom) != 0 for coin in coins)


def is_any_gte(coins: Sequence[AnyCoin], other: Sequence[AnyCoin]) -> bool:
    """True when some coin is at least the non-zero amount of its denom in other."""
    if not other:
        return False
    for coin in coins:
        required = _amount_of(other, coin.denom)
        if required != 0 and coin.amount >= required:
            return True
    return False


def is_any_gt(coins: Sequence[AnyCoin], other: Sequence[AnyCoin]) -> bool:
    """True when some coin exceeds the non-zero amount of its denom in other."""
    if not other:
        return False
    for coin in coins:
        required = _amount_of(other, coin.denom)
        if required != 0 and coin.amount > required:
            return True
    return False


def format_coins(coins: Sequence[AnyCoin]) -> str:
    """Render coins as a comma-separated list such as '10uatom,5stake'."""
    return ",".join(str(coin) for coin in coins)