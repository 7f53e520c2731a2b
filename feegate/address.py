"""Bech32 encoding and conversion of addresses between prefixes."""

from __future__ import annotations

from typing import Iterable

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
MAX_LENGTH = 1023

_CHARSET_INDEX = {char: index for index, char in enumerate(CHARSET)}
_GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
_CHECKSUM_LENGTH = 6


class Bech32Error(ValueError):
    """Raised when a bech32 string cannot be encoded, decoded or converted."""


def _polymod(values: Iterable[int]) -> int:
    checksum = 1
    for value in values:
        top = checksum >> 25
        checksum = ((checksum & 0x1FFFFFF) << 5) ^ value
        for bit, generator in enumerate(_GENERATOR):
            if (top >> bit) & 1:
                checksum ^= generator
    return checksum


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(char) >> 5 for char in hrp] + [0] + [ord(char) & 31 for char in hrp]


def _create_checksum(hrp: str, data: list[int]) -> list[int]:
    polymod = _polymod(_hrp_expand(hrp) + data + [0] * _CHECKSUM_LENGTH) ^ 1
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(_CHECKSUM_LENGTH)]


def bech32_encode(hrp: str, data: Iterable[int]) -> str:
    """Encode a human-readable part and 5-bit groups as a bech32 string."""
    hrp = hrp.lower()
    values = list(data)
    for value in values:
        if not 0 <= value < 32:
            raise Bech32Error(f"invalid data value {value}")
    checksum = _create_checksum(hrp, values)
    return hrp + "1" + "".join(CHARSET[value] for value in values + checksum)


def bech32_decode(address: str) -> tuple[str, list[int]]:
    """Decode a bech32 string into its lowercase prefix and 5-bit groups."""
    length = len(address)
    if length < 8 or length > MAX_LENGTH:
        raise Bech32Error(f"invalid bech32 string length {length}")
    for char in address:
        if not 33 <= ord(char) <= 126:
            raise Bech32Error(f"invalid character in string: '{char}'")
    lower = address.lower()
    if address != lower and address != address.upper():
        raise Bech32Error("string not all lowercase or all uppercase")
    address = lower

    separator = address.rfind("1")
    if separator < 1 or separator + _CHECKSUM_LENGTH + 1 > length:
        raise Bech32Error(f"invalid separator index {separator}")

    hrp, data_part = address[:separator], address[separator + 1:]
    try:
        data = [_CHARSET_INDEX[char] for char in data_part]
    except KeyError as err:
        raise Bech32Error(f"invalid character not part of charset: {err.args[0]}") from None

    if _polymod(_hrp_expand(hrp) + data) != 1:
        expected = "".join(
            CHARSET[value] for value in _create_checksum(hrp, data[:-_CHECKSUM_LENGTH])
        )
        raise Bech32Error(
            f"invalid checksum (expected {expected} got {data_part[-_CHECKSUM_LENGTH:]})"
        )
    return hrp, data[:-_CHECKSUM_LENGTH]


def convert_bits(data: Iterable[int], from_bits: int, to_bits: int, pad: bool) -> list[int]:
    """Regroup a sequence of from_bits-wide values into to_bits-wide values."""
    if not (1 <= from_bits <= 8 and 1 <= to_bits <= 8):
        raise Bech32Error("only bit groups between 1 and 8 allowed")
    accumulator = 0
    bits = 0
    result: list[int] = []
    max_value = (1 << to_bits) - 1
    max_accumulator = (1 << (from_bits + to_bits - 1)) - 1
    for value in data:
        if value < 0 or value >> from_bits:
            raise Bech32Error(f"invalid data range: {value}")
        accumulator = ((accumulator << from_bits) | value) & max_accumulator
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            result.append((accumulator >> bits) & max_value)
    if pad:
        if bits:
            result.append((accumulator << (to_bits - bits)) & max_value)
    elif bits >= from_bits or (accumulator << (to_bits - bits)) & max_value:
        raise Bech32Error("invalid incomplete group")
    return result


def decode_and_convert(address: str) -> tuple[str, bytes]:
    """Decode a bech32 address into its prefix and raw payload bytes."""
    try:
        hrp, data = bech32_decode(address)
        payload = bytes(convert_bits(data, 5, 8, False))
    except Bech32Error as err:
        raise Bech32Error(f"decoding bech32 failed: {err}") from err
    return hrp, payload


def convert_and_encode(hrp: str, payload: bytes) -> str:
    """Encode raw payload bytes as a bech32 address with the given prefix."""
    try:
        return bech32_encode(hrp, convert_bits(payload, 8, 5, True))
    except Bech32Error as err:
        raise Bech32Error(f"encoding bech32 failed: {err}") from err


def convert_bech32_prefix(address: str, prefix: str) -> str:
    """Re-encode a bech32 address under a different prefix."""
    try:
        _, payload = decode_and_convert(address)
    except Bech32Error as err:
        raise Bech32Error(f"cannot decode {address} address: {err}") from err
    try:
        return convert_and_encode(prefix, payload)
    except Bech32Error as err:
        raise Bech32Error(f"cannot convert {address} address: {err}") from err