"""Global fee parameters, their validation, genesis state and storage."""

from __future__ import annotations

import copy
import json
import re
from dataclasses import dataclass, field
from decimal import Decimal, localcontext
from typing import Any, Callable, Mapping

from .coins import DEC_PRECISION, DecCoin, validate_denom

MODULE_NAME = "globalfee"
QUERIER_ROUTE = MODULE_NAME

PARAM_STORE_KEY_MIN_GAS_PRICES = b"MinimumGasPricesParam"
PARAM_STORE_KEY_BYPASS_MIN_FEE_MSG_TYPES = b"BypassMinFeeMsgTypes"
PARAM_STORE_KEY_MAX_TOTAL_BYPASS_MIN_FEE_MSG_GAS_USAGE = b"MaxTotalBypassMinFeeMsgGasUsage"

DEFAULT_MIN_GAS_PRICES: tuple[DecCoin, ...] = ()
DEFAULT_BYPASS_MIN_FEE_MSG_TYPES: tuple[str, ...] = (
    "/ibc.core.channel.v1.MsgRecvPacket",
    "/ibc.core.channel.v1.MsgAcknowledgement",
    "/ibc.core.client.v1.MsgUpdateClient",
    "/ibc.core.channel.v1.MsgTimeout",
    "/ibc.core.channel.v1.MsgTimeoutOnClose",
)
DEFAULT_MAX_TOTAL_BYPASS_MIN_FEE_MSG_GAS_USAGE = 1_000_000

MSG_TYPE_URL_PREFIX = "/"
_UINT64_LIMIT = 1 << 64
_DEC_PATTERN = re.compile(r"-?\d+(?:\.(\d+))?")
_DEC_QUANTUM = Decimal(1).scaleb(-DEC_PRECISION)


class ParamsError(ValueError):
    """Raised when global fee parameters or genesis data are invalid."""


def _format_dec(amount: Decimal) -> str:
    with localcontext() as ctx:
        ctx.prec = 200
        return f"{amount.quantize(_DEC_QUANTUM):f}"


def _parse_dec(text: Any) -> Decimal:
    if not isinstance(text, str):
        raise ParamsError(f"invalid decimal amount: {text!r}")
    match = _DEC_PATTERN.fullmatch(text)
    if match is None:
        raise ParamsError(f"invalid decimal amount: {text!r}")
    fraction = match.group(1) or ""
    if len(fraction) > DEC_PRECISION:
        raise ParamsError(
            f"value '{text}' exceeds max precision by "
            f"{len(fraction) - DEC_PRECISION} decimal places"
        )
    return Decimal(text)


def _parse_uint64(value: Any) -> int:
    if isinstance(value, bool):
        raise ParamsError(f"invalid uint64 value: {value!r}")
    if isinstance(value, str):
        if not value.isdigit():
            raise ParamsError(f"invalid uint64 value: {value!r}")
        value = int(value)
    if not isinstance(value, int) or not 0 <= value < _UINT64_LIMIT:
        raise ParamsError(f"invalid uint64 value: {value!r}")
    return value


def validate_dec_coins(coins) -> None:
    """Check that coins are sorted, unique, well named and non-negative."""
    seen: set[str] = set()
    low_denom = ""
    for index, coin in enumerate(coins):
        if coin.denom in seen:
            raise ParamsError(f"duplicate denomination {coin.denom}")
        try:
            validate_denom(coin.denom)
        except ValueError as err:
            raise ParamsError(str(err)) from err
        if index != 0 and coin.denom <= low_denom:
            raise ParamsError(f"denomination {coin.denom} is not sorted")
        if coin.is_negative():
            raise ParamsError(f"coin {coin.amount} amount is negative")
        low_denom = coin.denom
        seen.add(coin.denom)


def validate_minimum_gas_prices(value: Any) -> None:
    """Validate a minimum gas price list of DecCoin values."""
    if not isinstance(value, (list, tuple)) or not all(
        isinstance(coin, DecCoin) for coin in value
    ):
        raise ParamsError(f"type: {type(value).__name__}, expected DecCoins")
    validate_dec_coins(value)


def validate_bypass_min_fee_msg_types(value: Any) -> None:
    """Validate a list of message type URLs that may bypass the minimum fee."""
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ParamsError(f"type: {type(value).__name__}, expected list of message type URLs")
    for msg_type in value:
        if msg_type == "":
            raise ParamsError("invalid empty bypass msg type")
        if not msg_type.startswith(MSG_TYPE_URL_PREFIX):
            raise ParamsError(f"invalid bypass msg type name {msg_type}")


def validate_max_total_bypass_min_fee_msg_gas_usage(value: Any) -> None:
    """Validate that the gas ceiling is an unsigned 64-bit integer."""
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < _UINT64_LIMIT:
        raise ParamsError(f"type: {type(value).__name__}, expected uint64")


@dataclass
class Params:
    """Global fee parameters."""

    minimum_gas_prices: list[DecCoin] = field(default_factory=list)
    bypass_min_fee_msg_types: list[str] = field(default_factory=list)
    max_total_bypass_min_fee_msg_gas_usage: int = 0

    def validate_basic(self) -> None:
        validate_minimum_gas_prices(self.minimum_gas_prices)
        validate_bypass_min_fee_msg_types(self.bypass_min_fee_msg_types)
        validate_max_total_bypass_min_fee_msg_gas_usage(
            self.max_total_bypass_min_fee_msg_gas_usage
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "minimum_gas_prices": [
                {"denom": coin.denom, "amount": _format_dec(coin.amount)}
                for coin in self.minimum_gas_prices
            ],
            "bypass_min_fee_msg_types": list(self.bypass_min_fee_msg_types),
            "max_total_bypass_min_fee_msg_gas_usage": str(
                self.max_total_bypass_min_fee_msg_gas_usage
            ),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Params":
        if not isinstance(data, Mapping):
            raise ParamsError("params must be an object")

        prices = []
        for item in data.get("minimum_gas_prices") or []:
            if not isinstance(item, Mapping) or not isinstance(item.get("denom", ""), str):
                raise ParamsError(f"invalid gas price entry: {item!r}")
            prices.append(DecCoin(item.get("denom", ""), _parse_dec(item.get("amount", "0"))))

        msg_types = data.get("bypass_min_fee_msg_types") or []
        if not isinstance(msg_types, list) or not all(isinstance(t, str) for t in msg_types):
            raise ParamsError("bypass_min_fee_msg_types must be a list of strings")

        max_gas = data.get("max_total_bypass_min_fee_msg_gas_usage")
        return cls(
            minimum_gas_prices=prices,
            bypass_min_fee_msg_types=list(msg_types),
            max_total_bypass_min_fee_msg_gas_usage=0 if max_gas is None else _parse_uint64(max_gas),
        )


def default_params() -> Params:
    """Return the default global fee parameters."""
    return Params(
        minimum_gas_prices=list(DEFAULT_MIN_GAS_PRICES),
        bypass_min_fee_msg_types=list(DEFAULT_BYPASS_MIN_FEE_MSG_TYPES),
        max_total_bypass_min_fee_msg_gas_usage=DEFAULT_MAX_TOTAL_BYPASS_MIN_FEE_MSG_GAS_USAGE,
    )


@dataclass
class GenesisState:
    """The module's genesis state."""

    params: Params = field(default_factory=Params)

    def to_json(self) -> str:
        return json.dumps({"params": self.params.to_dict()})

    @classmethod
    def from_json(cls, message) -> "GenesisState":
        try:
            data = json.loads(message)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as err:
            raise ParamsError(f"invalid genesis json: {err}") from err
        if not isinstance(data, dict):
            raise ParamsError("genesis state must be an object")
        raw_params = data.get("params")
        return cls(params=Params() if raw_params is None else Params.from_dict(raw_params))


def default_genesis_state() -> GenesisState:
    """Return the genesis state built from the default parameters."""
    return GenesisState(params=default_params())


def validate_genesis(state: GenesisState) -> None:
    """Validate the parameters held by a genesis state."""
    try:
        state.params.validate_basic()
    except ParamsError as err:
        raise ParamsError(f"globalfee params: {err}") from err


def genesis_state_from_app_state(app_state: Mapping[str, Any]) -> GenesisState:
    """Extract this module's genesis state from the raw application state."""
    raw = app_state.get(MODULE_NAME)
    if raw is None:
        return GenesisState()
    return GenesisState.from_json(raw)


Validator = Callable[[Any], None]

PARAM_KEY_TABLE: dict[bytes, Validator] = {
    PARAM_STORE_KEY_MIN_GAS_PRICES: validate_minimum_gas_prices,
    PARAM_STORE_KEY_BYPASS_MIN_FEE_MSG_TYPES: validate_bypass_min_fee_msg_types,
    PARAM_STORE_KEY_MAX_TOTAL_BYPASS_MIN_FEE_MSG_GAS_USAGE: (
        validate_max_total_bypass_min_fee_msg_gas_usage
    ),
}


def _param_set_pairs(params: Params) -> list[tuple[bytes, Any]]:
    return [
        (PARAM_STORE_KEY_MIN_GAS_PRICES, params.minimum_gas_prices),
        (PARAM_STORE_KEY_BYPASS_MIN_FEE_MSG_TYPES, params.bypass_min_fee_msg_types),
        (
            PARAM_STORE_KEY_MAX_TOTAL_BYPASS_MIN_FEE_MSG_GAS_USAGE,
            params.max_total_bypass_min_fee_msg_gas_usage,
        ),
    ]


class ParamSubspace:
    """In-memory parameter store keyed by registered parameter keys."""

    def __init__(self, key_table: Mapping[bytes, Validator] | None = None) -> None:
        self._key_table = dict(PARAM_KEY_TABLE if key_table is None else key_table)
        self._store: dict[bytes, Any] = {}

    def _validator(self, key: bytes) -> Validator:
        try:
            return self._key_table[key]
        except KeyError:
            raise ParamsError(
                f"parameter {key.decode(errors='replace')} not registered"
            ) from None

    def has(self, key: bytes) -> bool:
        return bytes(key) in self._store

    def get(self, key: bytes) -> Any:
        try:
            value = self._store[bytes(key)]
        except KeyError:
            raise KeyError(f"parameter {bytes(key).decode(errors='replace')} is not set") from None
        return copy.deepcopy(value)

    def set(self, key: bytes, value: Any) -> None:
        key = bytes(key)
        self._validator(key)(value)
        self._store[key] = copy.deepcopy(value)

    def set_param_set(self, params: Params) -> None:
        pairs = _param_set_pairs(params)
        for key, value in pairs:
            self._validator(key)(value)
        for key, value in pairs:
            self._store[key] = copy.deepcopy(value)

    def get_param_set(self) -> Params:
        return Params(
            minimum_gas_prices=list(self.get(PARAM_STORE_KEY_MIN_GAS_PRICES)),
            bypass_min_fee_msg_types=list(self.get(PARAM_STORE_KEY_BYPASS_MIN_FEE_MSG_TYPES)),
            max_total_bypass_min_fee_msg_gas_usage=self.get(
                PARAM_STORE_KEY_MAX_TOTAL_BYPASS_MIN_FEE_MSG_GAS_USAGE
            ),
        )