"""Command line tools of the package."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from .address import Bech32Error, convert_bech32_prefix

DEFAULT_PREFIX = "cosmos"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its subcommands."""
    parser = argparse.ArgumentParser(prog="feegate", description="Fee and address tools")
    commands = parser.add_subparsers(dest="command", required=True)

    convert = commands.add_parser(
        "bech32-convert",
        help="Convert any bech32 string to the cosmos prefix",
        description="Convert any bech32 string to the cosmos prefix",
    )
    convert.add_argument("address", help="bech32 address to convert")
    convert.add_argument(
        "-p", "--prefix", default=DEFAULT_PREFIX, help="Bech32 Prefix to encode to"
    )
    return parser


def _run_bech32_convert(args: argparse.Namespace) -> int:
    try:
        converted = convert_bech32_prefix(args.address, args.prefix)
    except Bech32Error as err:
        print(f"Error: convertation failed: {err}", file=sys.stderr)
        return 1
    print(converted)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return its exit status."""
    args = build_parser().parse_args(argv)
    if args.command == "bech32-convert":
        return _run_bech32_convert(args)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())