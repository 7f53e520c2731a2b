"""Genesis handling, parameter queries and store migrations of the global fee module."""

from __future__ import annotations

from dataclasses import dataclass

from .params import (
    MODULE_NAME,
    PARAM_STORE_KEY_BYPASS_MIN_FEE_MSG_TYPES,
    PARAM_STORE_KEY_MAX_TOTAL_BYPASS_MIN_FEE_MSG_GAS_USAGE,
    PARAM_STORE_KEY_MIN_GAS_PRICES,
    GenesisState,
    Params,
    ParamsError,
    ParamSubspace,
    default_params,
)

CONSENSUS_VERSION = 2


def default_genesis() -> str:
    """Return the JSON of the module's default genesis state."""
    return GenesisState(params=default_params()).to_json()


def validate_genesis_json(message: str | bytes) -> None:
    """Parse a genesis JSON message and validate its parameters."""
    state = GenesisState.from_json(message)
    try:
        state.params.validate_basic()
    except ParamsError as err:
        raise ParamsError(f"params: {err}") from err


class AppModule:
    """The global fee module bound to its parameter store."""

    name = MODULE_NAME

    def __init__(self, subspace: ParamSubspace | None = None) -> None:
        self.subspace = subspace if subspace is not None else ParamSubspace()

    def init_genesis(self, message: str | bytes) -> None:
        """Store the parameters held by a genesis JSON message."""
        state = GenesisState.from_json(message)
        self.subspace.set_param_set(state.params)

    def export_genesis(self) -> str:
        """Return the stored parameters as genesis JSON."""
        return GenesisState(params=self.subspace.get_param_set()).to_json()

    def consensus_version(self) -> int:
        return CONSENSUS_VERSION


@dataclass
class ParamsQuerier:
    """Answers parameter queries from a read-only parameter source."""

    param_source: ParamSubspace

    def params(self) -> Params:
        """Return the stored parameters, leaving unset ones empty."""
        source = self.param_source
        result = Params()
        if source.has(PARAM_STORE_KEY_MIN_GAS_PRICES):
            result.minimum_gas_prices = list(source.get(PARAM_STORE_KEY_MIN_GAS_PRICES))
        if source.has(PARAM_STORE_KEY_BYPASS_MIN_FEE_MSG_TYPES):
            result.bypass_min_fee_msg_types = list(
                source.get(PARAM_STORE_KEY_BYPASS_MIN_FEE_MSG_TYPES)
            )
        if source.has(PARAM_STORE_KEY_MAX_TOTAL_BYPASS_MIN_FEE_MSG_GAS_USAGE):
            result.max_total_bypass_min_fee_msg_gas_usage = source.get(
                PARAM_STORE_KEY_MAX_TOTAL_BYPASS_MIN_FEE_MSG_GAS_USAGE
            )
        return result


def migrate_store(subspace: ParamSubspace) -> None:
    """Keep the stored minimum gas prices and add the default bypass parameters."""
    old_min_gas_prices = subspace.get(PARAM_STORE_KEY_MIN_GAS_PRICES)
    defaults = default_params()
    subspace.set_param_set(
        Params(
            minimum_gas_prices=list(old_min_gas_prices),
            bypass_min_fee_msg_types=defaults.bypass_min_fee_msg_types,
            max_total_bypass_min_fee_msg_gas_usage=(
                defaults.max_total_bypass_min_fee_msg_gas_usage
            ),
        )
    )


@dataclass
class Migrator:
    """Runs in-place migrations of the module's parameter store."""

    subspace: ParamSubspace

    def migrate_1_to_2(self) -> None:
        migrate_store(self.subspace)