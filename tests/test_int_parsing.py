from milighthub.int_parsing import (
    bytes_to_hex_str,
    convert_unique,
    hex_str_to_bytes,
    parse_int,
    str_to_hex,
)


def test_str_to_hex_mixed_case():
    assert str_to_hex("1a2B") == 0x1A2B
    assert str_to_hex("ff") == 255


def test_str_to_hex_reads_trailing_run():
    assert str_to_hex("zz12") == 0x12
    assert str_to_hex("12zz") == 0


def test_str_to_hex_empty():
    assert str_to_hex("") == 0


def test_parse_int_hex_prefix():
    assert parse_int("0x1234") == 0x1234
    assert parse_int("0x10") == str_to_hex("10")


def test_parse_int_decimal():
    assert parse_int("42") == 42
    assert parse_int("  -7") == -7
    assert parse_int("12abc") == 12


def test_parse_int_invalid():
    assert parse_int("abc") == 0


def test_hex_str_to_bytes_with_spaces():
    assert hex_str_to_bytes("01 02 FF", 8) == bytes([0x01, 0x02, 0xFF])


def test_hex_str_to_bytes_without_spaces():
    assert hex_str_to_bytes("0A0B0C", 8) == bytes([0x0A, 0x0B, 0x0C])


def test_hex_str_to_bytes_limit():
    assert hex_str_to_bytes("01 02 03 04", 2) == bytes([0x01, 0x02])


def test_hex_round_trip():
    data = bytes([0x00, 0x7F, 0x80, 0xFF, 0x12])
    text = bytes_to_hex_str(data)
    assert text == "00 7F 80 FF 12"
    assert hex_str_to_bytes(text, len(data)) == data


def test_bytes_to_hex_str_empty():
    assert bytes_to_hex_str(b"") == ""


def test_convert_unique():
    assert convert_unique(["1", "2", "1", "3"], int) == [1, 2, 3]


def test_convert_not_unique():
    assert convert_unique(["1", "2", "1"], int, unique=False) == [1, 2, 1]