"""Transaction fee check combining global fees with local minimum gas prices."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_CEILING, ROUND_HALF_EVEN, Decimal, localcontext
from typing import Any, Callable, Sequence

from .coins import DEC_PRECISION, Coin, DecCoin, denoms_subset_of, format_coins, is_any_gte, sort_coins
from .fee_utils import combined_fee_requirement, get_non_zero_fees, split_coins_by_denoms
from .params import (
    PARAM_STORE_KEY_BYPASS_MIN_FEE_MSG_TYPES,
    PARAM_STORE_KEY_MAX_TOTAL_BYPASS_MIN_FEE_MSG_GAS_USAGE,
    PARAM_STORE_KEY_MIN_GAS_PRICES,
    ParamSubspace,
)

KEY_BOND_DENOM = b"BondDenom"

_DEC_QUANTUM = Decimal(1).scaleb(-DEC_PRECISION)


class FeeError(Exception):
    """Base class for fee check failures."""


class InsufficientFeeError(FeeError):
    """Raised when a transaction does not pay the required fee."""


class InvalidCoinsError(FeeError):
    """Raised when the fee coins do not fit the fee requirement."""


class TxDecodeError(FeeError):
    """Raised when a transaction does not carry fee information."""


@dataclass
class Context:
    """Execution context of a transaction check."""

    is_check_tx: bool = False
    min_gas_prices: list[DecCoin] = field(default_factory=list)


@dataclass
class FeeTx:
    """A transaction with its fee, gas limit and messages (type URLs or objects with type_url)."""

    fee: list[Coin] = field(default_factory=list)
    gas: int = 0
    msgs: list[Any] = field(default_factory=list)


NextHandler = Callable[[Context, Any, bool], Any]


def _msg_type_url(msg: Any) -> str:
    if isinstance(msg, str):
        return msg
    try:
        return msg.type_url
    except AttributeError:
        raise TypeError(f"message {msg!r} has no type URL") from None


def _required_fees(prices: Sequence[DecCoin], gas_limit: int) -> list[Coin]:
    """fee = ceil(price * gas_limit) for each price, sorted by denom."""
    gas = Decimal(gas_limit)
    fees = []
    with localcontext() as ctx:
        ctx.prec = 200
        for price in prices:
            product = (price.amount * gas).quantize(_DEC_QUANTUM, rounding=ROUND_HALF_EVEN)
            amount = int(product.to_integral_value(rounding=ROUND_CEILING))
            fees.append(Coin(price.denom, amount))
    return sort_coins(fees)


def get_min_gas_price(ctx: Context, gas_limit: int) -> list[Coin]:
    """Return the node's local minimum fees for the given gas limit."""
    prices = ctx.min_gas_prices
    if all(price.is_zero() for price in prices):
        return []
    return _required_fees(prices, gas_limit)


@dataclass
class FeeDecorator:
    """Rejects transactions whose fee is below the global and local requirements."""

    global_min_fee_param_source: ParamSubspace
    staking_subspace: ParamSubspace

    def ante_handle(self, ctx: Context, tx: Any, simulate: bool, next_handler: NextHandler) -> Any:
        if not all(hasattr(tx, name) for name in ("fee", "gas", "msgs")):
            raise TxDecodeError("Tx must implement the FeeTx interface: tx parse error")

        if simulate:
            return next_handler(ctx, tx, simulate)

        fee_required = self.get_tx_fee_required(ctx, tx)

        if len(tx.fee) > len(fee_required):
            raise InvalidCoinsError(
                f"fee is not a subset of required fees; got {format_coins(tx.fee)}, "
                f"required: {format_coins(fee_required)}: invalid coins"
            )

        fee_coins = sort_coins(tx.fee)
        gas = tx.gas

        non_zero_req, zero_denoms_req = get_non_zero_fees(fee_required)
        fee_non_zero_denom, fee_zero_denom = split_coins_by_denoms(fee_coins, zero_denoms_req)

        if not denoms_subset_of(fee_non_zero_denom, non_zero_req):
            raise InsufficientFeeError(
                f"fee is not a subset of required fees; got {format_coins(fee_coins)}, "
                f"required: {format_coins(fee_required)}: insufficient fee"
            )

        max_gas = self.get_max_total_bypass_min_fee_msg_gas_usage(ctx)
        within_max_gas = gas <= max_gas
        all_bypass = self.contains_only_bypass_min_fee_msgs(ctx, tx.msgs)
        if all_bypass and within_max_gas:
            return next_handler(ctx, tx, simulate)

        if not fee_coins:
            if zero_denoms_req:
                return next_handler(ctx, tx, simulate)
            raise InsufficientFeeError(
                f"insufficient fees; got: {format_coins(fee_coins)} "
                f"required: {format_coins(fee_required)}: insufficient fee"
            )

        if fee_zero_denom:
            return next_handler(ctx, tx, simulate)

        if not is_any_gte(fee_non_zero_denom, non_zero_req):
            message = (
                f"Insufficient fees; got: {format_coins(fee_coins)} "
                f"required: {format_coins(fee_required)}"
            )
            if all_bypass and not within_max_gas:
                message = (
                    "Insufficient fees; bypass-min-fee-msg-types with gas consumption "
                    f"{gas} exceeds the maximum allowed gas value of {max_gas}."
                )
            raise InsufficientFeeError(f"{message}: insufficient fee")

        return next_handler(ctx, tx, simulate)

    def get_tx_fee_required(self, ctx: Context, tx: Any) -> list[Coin]:
        """Global fees in DeliverTx; global fees combined with local prices in CheckTx."""
        global_fees = self.get_global_fee(ctx, tx)
        if not ctx.is_check_tx:
            return global_fees
        local_fees = get_min_gas_price(ctx, tx.gas)
        return combined_fee_requirement(global_fees, local_fees)

    def get_global_fee(self, ctx: Context, tx: Any) -> list[Coin]:
        """Return the global fees for the transaction's gas, sorted by denom."""
        prices: list[DecCoin] = []
        source = self.global_min_fee_param_source
        if source.has(PARAM_STORE_KEY_MIN_GAS_PRICES):
            prices = list(source.get(PARAM_STORE_KEY_MIN_GAS_PRICES))
        if not prices:
            prices = self.default_zero_global_fee(ctx)
        return _required_fees(prices, tx.gas)

    def default_zero_global_fee(self, ctx: Context) -> list[DecCoin]:
        """Return a zero coin in the staking bond denomination."""
        bond_denom = self._bond_denom()
        if not bond_denom:
            raise FeeError("empty staking bond denomination")
        return [DecCoin(bond_denom, Decimal(0))]

    def _bond_denom(self) -> str:
        if self.staking_subspace.has(KEY_BOND_DENOM):
            return self.staking_subspace.get(KEY_BOND_DENOM)
        return ""

    def contains_only_bypass_min_fee_msgs(self, ctx: Context, msgs: Sequence[Any]) -> bool:
        bypass_types = self.get_bypass_msg_types(ctx)
        return all(_msg_type_url(msg) in bypass_types for msg in msgs)

    def get_bypass_msg_types(self, ctx: Context) -> list[str]:
        source = self.global_min_fee_param_source
        if source.has(PARAM_STORE_KEY_BYPASS_MIN_FEE_MSG_TYPES):
            return list(source.get(PARAM_STORE_KEY_BYPASS_MIN_FEE_MSG_TYPES))
        return []

    def get_max_total_bypass_min_fee_msg_gas_usage(self, ctx: Context) -> int:
        source = self.global_min_fee_param_source
        if source.has(PARAM_STORE_KEY_MAX_TOTAL_BYPASS_MIN_FEE_MSG_GAS_USAGE):
            return source.get(PARAM_STORE_KEY_MAX_TOTAL_BYPASS_MIN_FEE_MSG_GAS_USAGE)
        return 0