import pytest

from subclient.errors import InvalidHexCharacter, InvalidStringLength, OddLength
from subclient.hexutil import bytes_from_hex, hash_from_hex


def test_hexstr_to_vec():
    assert bytes_from_hex("0x01020a") == bytes([1, 2, 10])


def test_hexstr_to_vec_null():
    with pytest.raises(InvalidHexCharacter) as info:
        bytes_from_hex("null")
    assert info.value == InvalidHexCharacter("n", 0)
    assert (info.value.c, info.value.index) == ("n", 0)


def test_hexstr_to_vec_bad_char():
    with pytest.raises(InvalidHexCharacter) as info:
        bytes_from_hex("0x0q")
    assert (info.value.c, info.value.index) == ("q", 1)


def test_hexstr_to_hash_zero():
    assert hash_from_hex(
        "0x0000000000000000000000000000000000000000000000000000000000000000"
    ) == bytes(32)


def test_hexstr_to_hash_wrong_length():
    with pytest.raises(InvalidStringLength):
        hash_from_hex("0x010000000000000000")


def test_hexstr_to_hash_bad_char():
    with pytest.raises(InvalidHexCharacter) as info:
        hash_from_hex("0x0q")
    assert (info.value.c, info.value.index) == ("q", 1)


def test_quotes_are_stripped():
    assert bytes_from_hex('"0x01020a"') == bytes([1, 2, 10])


def test_odd_length():
    with pytest.raises(OddLength):
        bytes_from_hex("0x123")


def test_empty():
    assert bytes_from_hex("0x") == b""


def test_round_trip_with_hex():
    data = bytes(range(32))
    assert hash_from_hex("0x" + data.hex()) == data
    assert bytes_from_hex(data.hex().upper()) == data