import pytest

from subclient.hashing import blake2_128, blake2_256, twox_64, twox_128, twox_256


@pytest.mark.parametrize(
    "name, expected",
    [
        (b"System", "26aa394eea5630e07c48ae0c9558cef7"),
        (b"Number", "02a5c1b19ab7a04f536c519aca4983ac"),
        (b"ExecutionPhase", "ff553b5a9862a516939d82b3d3d8661a"),
        (b"EventCount", "0a98fdbe9ce6c55837576c60c7af3850"),
        (b"Events", "80d41e5e16056765bc8461851072c9d7"),
        (b"Account", "b99d880ec681799c0cf30e8886371da9"),
        (b"Balances", "c2261276cc9d1f8598ea4b6a74b15c2f"),
        (b"TotalIssuance", "57c875e4cff74148e4628f264b974c80"),
    ],
)
def test_twox_128_of_storage_names(name, expected):
    assert twox_128(name).hex() == expected


def test_blake2_128_of_account_id():
    account = bytes.fromhex(
        "d43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d"
    )
    assert blake2_128(account).hex() == "de1e86a9a8c739864cf3cc5ec2bea59f"


@pytest.mark.parametrize("size", [0, 3, 4, 7, 8, 31, 32, 33, 64, 100])
def test_twox_variants_share_prefix(size):
    data = bytes(range(size))
    assert twox_64(data) == twox_128(data)[:8]
    assert twox_256(data)[:16] == twox_128(data)
    assert len(twox_256(data)) == 32


def test_twox_distinguishes_inputs_on_long_path():
    first = bytes(range(64))
    second = bytes(range(1, 65))
    assert twox_128(first) != twox_128(second)
    assert twox_128(first) == twox_128(bytearray(first))


def test_blake2_lengths_and_relationship():
    data = b"placeholder data"
    assert len(blake2_128(data)) == 16
    assert len(blake2_256(data)) == 32
    assert blake2_128(data) != blake2_256(data)[:16]