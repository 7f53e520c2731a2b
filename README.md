# feegate

feegate decides whether a transaction pays a high enough fee to be accepted.
It combines two sets of rules:

- a network-wide list of minimum gas prices, called the *global fee*;
- the node operator's own minimum gas prices.

Some message types may be sent without a fee. By default these are the IBC
relayer messages. The exemption holds only while the transaction's gas limit
stays at or below a configured ceiling.

feegate also includes a bech32 encoder and decoder. You can use it to
re-encode an address under a different human-readable prefix.

feegate has no runtime dependencies.

## Installation

```
pip install .
pip install .[test]    # also installs pytest
```

## Converting an address prefix

```
feegate bech32-convert akash1a6zlyvpnksx8wr6wz8wemur2xe8zyh0ytz6d88
feegate bech32-convert akash1a6zlyvpnksx8wr6wz8wemur2xe8zyh0ytz6d88 --prefix osmo
```

- Without `--prefix` (or `-p`), the prefix is `cosmos`.
- On success the converted address is printed to standard output.
- On failure the command prints `Error: convertation failed: ...` to standard error and exits with status 1.

The same conversion from Python:

```python
from feegate.address import convert_bech32_prefix

convert_bech32_prefix("akash1a6zlyvpnksx8wr6wz8wemur2xe8zyh0ytz6d88", "cosmos")
# 'cosmos1a6zlyvpnksx8wr6wz8wemur2xe8zyh0yxeh27a'
```

`feegate.address` also exposes the lower-level functions:

- `bech32_encode` and `bech32_decode`
- `convert_bits`
- `decode_and_convert` and `convert_and_encode`

Every failure in this module raises `Bech32Error`, a subclass of `ValueError`.

## Coins

`feegate.coins` defines two frozen dataclasses:

- `Coin(denom, amount)` holds an integer amount.
- `DecCoin(denom, amount)` holds a `Decimal` amount. A decimal amount prints with 18 fractional digits.

The module also provides these helpers:

- `validate_denom`
- `sort_coins`
- `coins_equal`
- `denoms_subset_of`
- `is_any_gte` and `is_any_gt`
- `format_coins`, which renders a list of coins as, for example, `10uatom,5stake`.

## Parameters and genesis

`feegate.params` defines `Params`, which has three fields:

| Field | Meaning |
| --- | --- |
| `minimum_gas_prices` | A list of `DecCoin`. It must be sorted by denom, have no duplicates, use valid denoms and contain no negative amounts. |
| `bypass_min_fee_msg_types` | Message type URLs. Each one must be non-empty and start with `/`. |
| `max_total_bypass_min_fee_msg_gas_usage` | An unsigned 64-bit integer. |

`default_params()` returns an empty price list, the five IBC message types as
bypass types, and a gas ceiling of 1,000,000. `Params.validate_basic()`
raises `ParamsError` when a field is invalid. `Params.to_dict()` and
`Params.from_dict()` convert to and from the JSON form.

`GenesisState` wraps `Params` and serialises with `to_json()` and
`from_json()`. Related functions:

- `default_genesis_state()`
- `validate_genesis(state)`
- `genesis_state_from_app_state(app_state)`, which reads the `globalfee` entry.

`ParamSubspace` is an in-memory parameter store with `has`, `get`, `set`,
`set_param_set` and `get_param_set`. Values are checked by a key table, which
maps keys to validator functions. By default the key table holds the three
global fee keys. Writing a key that is not registered raises `ParamsError`.
Reading a key that is not set raises `KeyError`.

## Fee checks

`feegate.ante.FeeDecorator(global_min_fee_param_source, staking_subspace)`
reads its settings from two stores:

- The first `ParamSubspace` holds the global fee parameters.
- The second holds the bond denom under `KEY_BOND_DENOM`. The global fee falls back to a zero coin in that denom when no minimum gas prices are stored.

The check is `ante_handle(ctx, tx, simulate, next_handler)`. It takes these arguments:

- `tx`: anything with `fee`, `gas` and `msgs` attributes, such as `FeeTx`. Each message is either a type URL string or an object with a `type_url` attribute.
- `ctx`: a `Context` that carries the node's `min_gas_prices` and an `is_check_tx` flag. Local prices are combined with the global fee only when `is_check_tx` is true.

If `simulate` is true, the check is skipped. When the transaction passes, the
call returns whatever `next_handler(ctx, tx, simulate)` returns. When it
fails, it raises one of these exceptions, all subclasses of `FeeError`:

- `InsufficientFeeError`
- `InvalidCoinsError`
- `TxDecodeError`
- `FeeError` itself, when the bond denom is missing.

```python
from decimal import Decimal

from feegate.ante import KEY_BOND_DENOM, Context, FeeDecorator, FeeTx
from feegate.coins import Coin, DecCoin
from feegate.params import ParamSubspace, default_params

globalfee = ParamSubspace()
params = default_params()
params.minimum_gas_prices = [DecCoin("uatom", Decimal("0.001"))]
globalfee.set_param_set(params)

staking = ParamSubspace({KEY_BOND_DENOM: lambda value: None})
staking.set(KEY_BOND_DENOM, "uatom")

decorator = FeeDecorator(globalfee, staking)
tx = FeeTx(fee=[Coin("uatom", 200)], gas=200_000, msgs=["/cosmos.bank.v1beta1.MsgSend"])
decorator.ante_handle(Context(is_check_tx=True), tx, False, lambda ctx, tx, simulate: "accepted")
# 'accepted'
```

Each required fee is `ceil(price * gas)`. `get_min_gas_price(ctx, gas_limit)`
computes the node's local fees; it returns an empty list when all local
prices are zero.

`feegate.fee_utils` holds the helpers the decorator is built on:

- `combined_fee_requirement` raises `FeeNotFoundError` when the global fees are empty.
- `split_coins_by_denoms`
- `get_non_zero_fees`
- `find`
- `contain_zero_coins`

## Module

`feegate.module` provides the module's application-level pieces:

- `default_genesis()` returns the default genesis JSON. `validate_genesis_json(message)` parses a genesis JSON message and validates it.
- `AppModule(subspace)` has three methods:
  - `init_genesis(message)` stores the parameters from a genesis JSON message.
  - `export_genesis()` returns the stored parameters as genesis JSON.
  - `consensus_version()` returns 2.
- `ParamsQuerier(param_source).params()` returns the stored parameters. Any parameter that is not set is left empty or zero.
- `migrate_store(subspace)`, also available as `Migrator(subspace).migrate_1_to_2()`, upgrades a store from version 1 to 2. It keeps the stored minimum gas prices and sets the default bypass message types and gas ceiling. It raises `KeyError` if no minimum gas prices are stored.

## What feegate does not do

feegate does not run a node and does not persist state: parameters live only
in in-memory `ParamSubspace` objects. It does not decode, sign or broadcast
transactions, and it has no network query service or key management. The
only command is `bech32-convert`.