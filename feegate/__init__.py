"""Global minimum-fee checks for transactions, fee parameters and genesis, and bech32 prefix conversion."""

__version__ = "0.1.0"

__all__ = ["address", "coins", "params", "fee_utils", "ante", "module", "cli"]