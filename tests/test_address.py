import pytest

from feegate.address import (
    Bech32Error,
    bech32_decode,
    bech32_encode,
    convert_and_encode,
    convert_bech32_prefix,
    convert_bits,
    decode_and_convert,
)

AKASH = "akash1a6zlyvpnksx8wr6wz8wemur2xe8zyh0ytz6d88"
COSMOS = "cosmos1a6zlyvpnksx8wr6wz8wemur2xe8zyh0yxeh27a"


def test_convert_valid_address():
    assert convert_bech32_prefix(AKASH, "cosmos") == COSMOS


def test_convert_invalid_address():
    with pytest.raises(Bech32Error) as info:
        convert_bech32_prefix("invalidaddress", "cosmos")
    assert (
        "cannot decode invalidaddress address: decoding bech32 failed: "
        "invalid separator index -1" in str(info.value)
    )


def test_convert_back_restores_original():
    assert convert_bech32_prefix(COSMOS, "akash") == AKASH


def test_decode_and_convert_same_payload_across_prefixes():
    hrp_a, payload_a = decode_and_convert(AKASH)
    hrp_c, payload_c = decode_and_convert(COSMOS)
    assert hrp_a == "akash"
    assert hrp_c == "cosmos"
    assert payload_a == payload_c


def test_convert_and_encode_round_trip():
    _, payload = decode_and_convert(COSMOS)
    assert convert_and_encode("cosmos", payload) == COSMOS


def test_known_minimal_vector():
    assert bech32_decode("A12UEL5L") == ("a", [])
    assert bech32_encode("a", []) == "a12uel5l"


def test_encode_decode_round_trip():
    data = list(range(32))
    encoded = bech32_encode("test", data)
    assert bech32_decode(encoded) == ("test", data)


def test_uppercase_address_decodes():
    assert bech32_decode(COSMOS.upper()) == bech32_decode(COSMOS)


def test_invalid_checksum():
    broken = COSMOS[:-1] + ("q" if COSMOS[-1] != "q" else "p")
    with pytest.raises(Bech32Error, match="invalid checksum"):
        bech32_decode(broken)


def test_mixed_case_rejected():
    mixed = "Cosmos" + COSMOS[6:]
    with pytest.raises(Bech32Error, match="not all lowercase or all uppercase"):
        bech32_decode(mixed)


def test_too_short_rejected():
    with pytest.raises(Bech32Error, match="invalid bech32 string length"):
        bech32_decode("a1qqqq")


def test_character_outside_charset_rejected():
    with pytest.raises(Bech32Error, match="not part of charset"):
        bech32_decode("cosmos1bbbbbbbbbb")


def test_convert_bits_round_trip():
    payload = [0, 1, 127, 128, 255]
    five = convert_bits(payload, 8, 5, True)
    assert all(0 <= value < 32 for value in five)
    assert convert_bits(five, 5, 8, False) == payload


def test_convert_bits_rejects_out_of_range():
    with pytest.raises(Bech32Error, match="invalid data range"):
        convert_bits([256], 8, 5, True)


def test_encode_rejects_wide_values():
    with pytest.raises(Bech32Error):
        bech32_encode("test", [32])