import pytest

from subclient.errors import (
    CallNotFound,
    ConstantNotFound,
    ErrorNotFound,
    EventNotFound,
    InvalidPrefix,
    InvalidVersion,
    MissingType,
    PalletNotFound,
    StorageNotFound,
    StorageTypeError,
    TypeDefNotVariant,
)
from subclient.hashing import twox_64, twox_128
from subclient.metadata import Metadata
from subclient.portable import (
    PalletConstant,
    PalletInfo,
    PortableRegistry,
    PortableType,
    RuntimeMetadataPrefixed,
    RuntimeMetadataV14,
    StorageEntry,
    StorageEntryType,
    StorageHasher,
    Variant,
)
from subclient.scale import encode_uint

SYSTEM_NUMBER_KEY = bytes.fromhex(
    "26aa394eea5630e07c48ae0c9558cef702a5c1b19ab7a04f536c519aca4983ac"
)
ALICE = bytes.fromhex("d43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d")
ALICE_ACCOUNT_KEY = bytes.fromhex(
    "26aa394eea5630e07c48ae0c9558cef7b99d880ec681799c0cf30e8886371da9"
    "de1e86a9a8c739864cf3cc5ec2bea59f"
    "d43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d"
)


def _registry() -> PortableRegistry:
    return PortableRegistry(
        (
            PortableType(0, "primitive", primitive="u32"),
            PortableType(
                1,
                "variant",
                variant_list=(Variant("transfer", 0), Variant("set_balance", 1)),
            ),
            PortableType(2, "variant", variant_list=(Variant("Transfer", 0, docs=("A transfer",)),)),
            PortableType(
                3, "variant", variant_list=(Variant("InsufficientBalance", 0, docs=("Not enough",)),)
            ),
            PortableType(4, "primitive", primitive="u128"),
        )
    )


def _pallets() -> tuple[PalletInfo, ...]:
    system = PalletInfo(
        "System",
        0,
        storage=(
            StorageEntry("Number", StorageEntryType.plain(0)),
            StorageEntry(
                "Account",
                StorageEntryType.map((StorageHasher.BLAKE2_128_CONCAT,), 0, 4),
            ),
        ),
    )
    balances = PalletInfo(
        "Balances",
        5,
        storage=(
            StorageEntry("TotalIssuance", StorageEntryType.plain(4)),
            StorageEntry(
                "Pair",
                StorageEntryType.map(
                    (StorageHasher.TWOX_64_CONCAT, StorageHasher.IDENTITY), 0, 4
                ),
            ),
        ),
        calls=1,
        event=2,
        constants=(PalletConstant("ExistentialDeposit", 4, encode_uint(500, 16)),),
        error=3,
    )
    return system, balances


def _prefixed(pallets=None) -> RuntimeMetadataPrefixed:
    runtime = RuntimeMetadataV14(_registry(), _pallets() if pallets is None else pallets)
    return RuntimeMetadataPrefixed(metadata=runtime)


@pytest.fixture
def metadata() -> Metadata:
    return Metadata.from_runtime_metadata(_prefixed())


def test_pallet_call_index(metadata):
    assert metadata.pallet_call_index("Balances", "transfer") == bytes([5, 0])
    assert metadata.pallet_call_index("Balances", "set_balance") == bytes([5, 1])


def test_unknown_call_and_pallet(metadata):
    with pytest.raises(CallNotFound):
        metadata.pallet_call_index("Balances", "burn")
    with pytest.raises(PalletNotFound):
        metadata.pallet("Nope")


def test_pallet_without_calls_has_empty_calls(metadata):
    assert metadata.pallet("System").calls == {}


def test_encode_call(metadata):
    pallet = metadata.pallet("Balances")
    assert pallet.encode_call("transfer", b"\x01\x02") == bytes([5, 0, 1, 2])
    with pytest.raises(CallNotFound):
        pallet.encode_call("missing", b"")


def test_events(metadata):
    event = metadata.get_event(5, 0)
    assert (event.pallet, event.event) == ("Balances", "Transfer")
    assert [e.event for e in metadata.get_events(5)] == ["Transfer"]
    assert metadata.get_events(0) == []
    with pytest.raises(EventNotFound):
        metadata.get_event(5, 9)


def test_errors(metadata):
    error = metadata.get_error(5, 0)
    assert error.error == "InsufficientBalance"
    assert error.description() == ("Not enough",)
    assert [e.error for e in metadata.get_errors(5)] == ["InsufficientBalance"]
    with pytest.raises(ErrorNotFound):
        metadata.get_error(1, 0)


def test_constants(metadata):
    pallet = metadata.pallet("Balances")
    assert pallet.constant("ExistentialDeposit").value == encode_uint(500, 16)
    with pytest.raises(ConstantNotFound):
        pallet.constant("Missing")


def test_storage_types(metadata):
    assert metadata.storage_value_type("Balances", "TotalIssuance") == metadata.get_resolve_type(4)
    assert metadata.storage_value_type("Balances", "Pair") is None
    key_ty, value_ty = metadata.storage_map_type("System", "Account")
    assert (key_ty.id, value_ty.id) == (0, 4)
    assert metadata.storage_map_type("System", "Number") is None
    with pytest.raises(StorageNotFound):
        metadata.storage_value_type("System", "Missing")


def test_storage_value_key_matches_known_key(metadata):
    assert metadata.storage_value_key("System", "Number") == SYSTEM_NUMBER_KEY


def test_storage_map_key_matches_known_key(metadata):
    assert metadata.storage_map_key("System", "Account", ALICE) == ALICE_ACCOUNT_KEY
    assert metadata.storage_map_key_prefix("System", "Account") == ALICE_ACCOUNT_KEY[:32]


def test_storage_double_map_key_layout(metadata):
    first, second = b"\x01\x00\x00\x00", b"\x07\x08"
    key = metadata.storage_double_map_key("Balances", "Pair", first, second)
    prefix = twox_128(b"Balances") + twox_128(b"Pair")
    assert key == prefix + twox_64(first) + first + second


def test_storage_kind_mismatch(metadata):
    with pytest.raises(StorageTypeError):
        metadata.storage_map_key("System", "Number", b"\x00")
    with pytest.raises(StorageTypeError):
        metadata.storage_value_key("System", "Account")
    with pytest.raises(StorageTypeError):
        metadata.storage_map_key_prefix("System", "Number")
    with pytest.raises(StorageTypeError):
        metadata.storage_double_map_key("System", "Account", b"\x00", b"\x00")


def test_invalid_prefix():
    prefixed = RuntimeMetadataPrefixed(magic=0, metadata=_prefixed().metadata)
    with pytest.raises(InvalidPrefix):
        Metadata.from_runtime_metadata(prefixed)


def test_invalid_version():
    with pytest.raises(InvalidVersion):
        Metadata.from_runtime_metadata(RuntimeMetadataPrefixed(version=13, raw=b""))


def test_missing_call_type():
    with pytest.raises(MissingType) as info:
        Metadata.from_runtime_metadata(_prefixed((PalletInfo("X", 1, calls=42),)))
    assert info.value.type_id == 42


def test_call_type_not_variant():
    with pytest.raises(TypeDefNotVariant) as info:
        Metadata.from_runtime_metadata(_prefixed((PalletInfo("X", 1, event=0),)))
    assert info.value.type_id == 0


def test_from_bytes_round_trip():
    prefixed = _prefixed()
    decoded = Metadata.from_bytes(prefixed.encode())
    direct = Metadata.from_runtime_metadata(prefixed)
    assert decoded.pallets == direct.pallets
    assert decoded.events == direct.events
    assert decoded.errors == direct.errors