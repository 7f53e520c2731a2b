"""Helpers for combining and splitting fee requirements."""

from __future__ import annotations

from typing import AbstractSet, Optional, Sequence

from .coins import Coin, sort_coins


class FeeNotFoundError(LookupError):
    """Raised when a required fee set is missing."""


def contain_zero_coins(coins: Sequence[Coin]) -> bool:
    """True when coins are empty or hold at least one zero coin."""
    return not coins or any(coin.is_zero() for coin in coins)


def find(coins: Sequence[Coin], denom: str) -> Optional[Coin]:
    """Binary-search denom-sorted coins; return the matching coin or None."""
    low, high = 0, len(coins)
    while high > low:
        if high - low == 1:
            coin = coins[low]
            return coin if coin.denom == denom else None
        middle = low + (high - low) // 2
        coin = coins[middle]
        if denom < coin.denom:
            high = middle
        elif denom == coin.denom:
            return coin
        else:
            low = middle + 1
    return None


def combined_fee_requirement(
    global_fees: Sequence[Coin], min_gas_prices: Sequence[Coin]
) -> list[Coin]:
    """Combine global fees with local minimum gas prices, taking the higher per denom.

    Only denominations in the global fees are kept.
    """
    if not global_fees:
        raise FeeNotFoundError("global fee cannot be empty: not found")
    if not min_gas_prices:
        return list(global_fees)

    combined = []
    for fee in global_fees:
        local = find(min_gas_prices, fee.denom)
        combined.append(local if local is not None and local.amount > fee.amount else fee)
    return sort_coins(combined)


def split_coins_by_denoms(
    fee_coins: Sequence[Coin], denoms: AbstractSet[str]
) -> tuple[list[Coin], list[Coin]]:
    """Split coins into those whose denom is not in denoms and those whose denom is."""
    outside = [coin for coin in fee_coins if coin.denom not in denoms]
    inside = [coin for coin in fee_coins if coin.denom in denoms]
    return sort_coins(outside), sort_coins(inside)


def get_non_zero_fees(fees: Sequence[Coin]) -> tuple[list[Coin], set[str]]:
    """Return the non-zero fees, sorted, and the denoms of the zero fees."""
    non_zero = [fee for fee in fees if not fee.is_zero()]
    zero_denoms = {fee.denom for fee in fees if fee.is_zero()}
    return sort_coins(non_zero), zero_denoms