import pytest

from subclient.errors import StorageTypeError
from subclient.hashing import twox_128
from subclient.portable import StorageEntry, StorageEntryType, StorageHasher
from subclient.storage import (
    StorageDoubleMapKey,
    StorageMapKey,
    StorageValueKey,
    key_hash,
    storage_double_map,
    storage_map,
    storage_map_prefix,
    storage_value,
)

ALICE = bytes.fromhex("d43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d")
ALICE_ACCOUNT_KEY = bytes.fromhex(
    "26aa394eea5630e07c48ae0c9558cef7b99d880ec681799c0cf30e8886371da9"
    "de1e86a9a8c739864cf3cc5ec2bea59fd43593c715fdd31c61141abd04a99fd6"
    "822c8558854ccde39a5684e7a56da27d"
)


def _plain(name: str) -> StorageEntry:
    return StorageEntry(name, StorageEntryType.plain(0))


def _map(name: str, *hashers: StorageHasher) -> StorageEntry:
    return StorageEntry(name, StorageEntryType.map(hashers, 0, 1))


class _EncodedKey:
    def __init__(self, raw: bytes) -> None:
        self.raw = raw

    def encode(self) -> bytes:
        return self.raw


def test_system_account_key_for_alice():
    entry = _map("Account", StorageHasher.BLAKE2_128_CONCAT)
    assert storage_map(entry, "System").key(ALICE) == ALICE_ACCOUNT_KEY


@pytest.mark.parametrize(
    "pallet, name, expected",
    [
        ("System", "Number", "26aa394eea5630e07c48ae0c9558cef702a5c1b19ab7a04f536c519aca4983ac"),
        ("Balances", "TotalIssuance", "c2261276cc9d1f8598ea4b6a74b15c2f57c875e4cff74148e4628f264b974c80"),
        ("System", "ExecutionPhase", "26aa394eea5630e07c48ae0c9558cef7ff553b5a9862a516939d82b3d3d8661a"),
        ("System", "EventCount", "26aa394eea5630e07c48ae0c9558cef70a98fdbe9ce6c55837576c60c7af3850"),
        ("System", "Events", "26aa394eea5630e07c48ae0c9558cef780d41e5e16056765bc8461851072c9d7"),
    ],
)
def test_value_keys(pallet, name, expected):
    assert storage_value(_plain(name), pallet).key() == bytes.fromhex(expected)


def test_map_prefix_is_start_of_map_keys():
    entry = _map("Account", StorageHasher.BLAKE2_128_CONCAT)
    prefix = storage_map_prefix(entry, "System")
    assert prefix == ALICE_ACCOUNT_KEY[:32]
    assert StorageValueKey(b"System", b"Account").key() == prefix


def test_blake2_128_concat_of_alice():
    assert key_hash(ALICE, StorageHasher.BLAKE2_128_CONCAT) == ALICE_ACCOUNT_KEY[32:]


@pytest.mark.parametrize(
    "hasher, extra",
    [
        (StorageHasher.IDENTITY, 0),
        (StorageHasher.BLAKE2_128_CONCAT, 16),
        (StorageHasher.TWOX_64_CONCAT, 8),
    ],
)
def test_transparent_hashers_keep_the_key(hasher, extra):
    key = b"\x01\x02\x03"
    hashed = key_hash(key, hasher)
    assert hashed.endswith(key)
    assert len(hashed) == len(key) + extra


@pytest.mark.parametrize(
    "hasher, length",
    [
        (StorageHasher.BLAKE2_128, 16),
        (StorageHasher.BLAKE2_256, 32),
        (StorageHasher.TWOX_128, 16),
        (StorageHasher.TWOX_256, 32),
    ],
)
def test_opaque_hashers_have_fixed_length(hasher, length):
    assert len(key_hash(b"key", hasher)) == length
    assert len(key_hash(b"a much longer key than before", hasher)) == length


def test_twox_256_extends_twox_128():
    assert key_hash(b"key", StorageHasher.TWOX_256)[:16] == key_hash(
        b"key", StorageHasher.TWOX_128
    )


def test_key_with_encode_method_matches_bytes():
    builder = StorageMapKey(b"System", b"Account", StorageHasher.BLAKE2_128_CONCAT)
    assert builder.key(_EncodedKey(ALICE)) == builder.key(ALICE)


def test_text_key_is_rejected():
    with pytest.raises(TypeError):
        key_hash("not bytes", StorageHasher.IDENTITY)


def test_double_map_key_layout():
    entry = _map("Pair", StorageHasher.TWOX_64_CONCAT, StorageHasher.IDENTITY)
    builder = storage_double_map(entry, "Template")
    assert builder == StorageDoubleMapKey(
        b"Template", b"Pair", StorageHasher.TWOX_64_CONCAT, StorageHasher.IDENTITY
    )
    key = builder.key(b"\x01", b"\x02\x03")
    assert key.startswith(storage_map_prefix(entry, "Template"))
    assert key.endswith(b"\x01\x02\x03")
    assert len(key) == 32 + 8 + 1 + 2


def test_map_uses_first_hasher():
    entry = _map("Pair", StorageHasher.IDENTITY, StorageHasher.BLAKE2_256)
    assert storage_map(entry, "Template").hasher is StorageHasher.IDENTITY
    assert storage_map(entry, "Template").key(b"\x09")[-1:] == b"\x09"


def test_value_builder_keeps_prefixes():
    builder = storage_value(_plain("Something"), "TemplateModule")
    assert builder == StorageValueKey(b"TemplateModule", b"Something")
    assert builder.key()[:16] == twox_128(b"TemplateModule")


def test_value_of_map_entry_fails():
    with pytest.raises(StorageTypeError):
        storage_value(_map("Account", StorageHasher.IDENTITY), "System")


def test_map_of_plain_entry_fails():
    with pytest.raises(StorageTypeError):
        storage_map(_plain("Number"), "System")


def test_map_without_hashers_fails():
    with pytest.raises(StorageTypeError):
        storage_map(_map("Account"), "System")


def test_double_map_needs_two_hashers():
    with pytest.raises(StorageTypeError):
        storage_double_map(_map("Account", StorageHasher.IDENTITY), "System")


def test_map_prefix_of_plain_entry_fails():
    with pytest.raises(StorageTypeError):
        storage_map_prefix(_plain("Number"), "System")