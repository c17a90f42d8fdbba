"""High-level client that prefetches metadata, genesis hash and runtime version."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, TypeVar

from .account_info import AccountInfo
from .base_api import BaseApi, RuntimeVersion, _expect_str
from .errors import CodecError, NoGenesisHashError, NoMetadataError, NoRuntimeVersionError
from .extrinsic_params import AdditionalSigned, Era, GenericExtra, SignedPayload
from .extrinsics import MultiAddress, MultiSignature, SignatureScheme, UncheckedExtrinsicV4
from .hashing import blake2_256
from .hexutil import bytes_from_hex
from .metadata import Metadata
from .portable import PalletConstant, PortableType
from .scale import ScaleReader, encode_compact

T = TypeVar("T")
Decoder = Callable[[ScaleReader], T]

BALANCES = "Balances"


class Signer(Protocol):
    """A key pair able to sign payloads."""

    scheme: SignatureScheme
    public_key: bytes

    def sign(self, message: bytes) -> bytes:
        """Return the raw signature of ``message``."""
        ...


def _hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


class Api:
    """Client bound to one chain, holding its metadata, genesis hash and runtime version."""

    def __init__(
        self,
        base_api: BaseApi,
        metadata: Metadata,
        genesis_hash: bytes,
        runtime_version: RuntimeVersion,
    ) -> None:
        self.base_api = base_api
        self.metadata = metadata
        self.genesis_hash = bytes(genesis_hash)
        self.runtime_version = runtime_version

    def __repr__(self) -> str:
        return f"Api({self.base_api.url!r})"

    @classmethod
    async def connect(cls, url: str) -> "Api":
        """Connect to the node at ``url`` and prefetch what signing needs."""
        base_api = BaseApi(url)
        metadata = await base_api.fetch_metadata()
        if metadata is None:
            raise NoMetadataError()
        genesis_hash = await base_api.fetch_genesis_hash()
        if genesis_hash is None:
            raise NoGenesisHashError()
        runtime_version = await base_api.fetch_runtime_version()
        if runtime_version is None:
            raise NoRuntimeVersionError()
        return cls(base_api, metadata, genesis_hash, runtime_version)

    # Calls passed straight to the base api.

    async def chain_get_finalized_head(self) -> Optional[bytes]:
        return await self.base_api.fetch_finalized_head()

    async def chain_get_header(self, block_hash: bytes) -> Optional[dict]:
        return await self.base_api.fetch_header(block_hash)

    async def author_submit_extrinsic(self, hex_extrinsic: str) -> Optional[bytes]:
        return await self.base_api.author_submit_extrinsic(hex_extrinsic)

    async def fetch_block_hash(self, n: int) -> Optional[bytes]:
        return await self.base_api.fetch_block_hash(n)

    async def fetch_genesis_hash(self) -> Optional[bytes]:
        return await self.base_api.fetch_genesis_hash()

    # Accounts and extrinsics.

    @staticmethod
    def signer_account(signer: Signer) -> bytes:
        """The account id of a signer; ECDSA keys are hashed to 32 bytes."""
        public = bytes(signer.public_key)
        if SignatureScheme(signer.scheme) is SignatureScheme.ECDSA:
            return blake2_256(public)
        return public

    async def get_nonce_for_account(self, account: bytes) -> int:
        info = await self.get_account_info(account)
        return 0 if info is None else info.nonce

    async def get_nonce(self, signer: Signer) -> int:
        return await self.get_nonce_for_account(self.signer_account(signer))

    async def get_account_info(self, account_id: bytes) -> Optional[AccountInfo]:
        return await self.fetch_storage_map(
            "System", "Account", bytes(account_id), AccountInfo.decode
        )

    def pallet_call_index(self, pallet_name: str, call_name: str) -> bytes:
        return self.metadata.pallet_call_index(pallet_name, call_name)

    def unsigned_extrinsic(self, call: Any) -> UncheckedExtrinsicV4:
        return UncheckedExtrinsicV4.new_unsigned(call)

    def compose_payload(
        self, call: Any, extra: GenericExtra, head_hash: Optional[bytes] = None
    ) -> SignedPayload:
        """The payload to sign; the head hash defaults to the genesis hash."""
        additional = AdditionalSigned(
            self.runtime_version.spec_version,
            self.runtime_version.transaction_version,
            self.genesis_hash,
            self.genesis_hash if head_hash is None else bytes(head_hash),
        )
        return SignedPayload.from_raw(call, extra, additional)

    @staticmethod
    def sign_message(signer: Signer, payload: bytes) -> bytes:
        """Sign bytes with the given signer."""
        return signer.sign(payload)

    async def submit_extrinsic(self, xt: UncheckedExtrinsicV4) -> Optional[bytes]:
        return await self.author_submit_extrinsic(xt.hex_encode())

    def compose_payload_and_extra(
        self,
        nonce: int,
        call: Any,
        era: Optional[Era] = None,
        head_hash: Optional[bytes] = None,
        tip: Optional[int] = None,
    ) -> tuple[SignedPayload, GenericExtra]:
        """Payload and extra; a mortal era needs the head hash of its start block."""
        extra = GenericExtra(
            Era.immortal() if era is None else era, nonce, 0 if tip is None else tip
        )
        return self.compose_payload(call, extra, head_hash), extra

    async def sign_extrinsic_with_era(
        self,
        signer: Signer,
        call: Any,
        era: Optional[Era] = None,
        head_hash: Optional[bytes] = None,
        tip: Optional[int] = None,
    ) -> UncheckedExtrinsicV4:
        account = self.signer_account(signer)
        nonce = await self.get_nonce_for_account(account)
        payload, extra = self.compose_payload_and_extra(nonce, call, era, head_hash, tip)
        signature = MultiSignature(
            SignatureScheme(signer.scheme), signer.sign(payload.payload_for_signing())
        )
        return UncheckedExtrinsicV4.new_signed(
            call, MultiAddress.from_account_id(account), signature, extra
        )

    async def sign_extrinsic(
        self, signer: Signer, call: Any, tip: Optional[int] = None
    ) -> UncheckedExtrinsicV4:
        return await self.sign_extrinsic_with_era(signer, call, None, None, tip)

    def compose_opaque_payload_and_extra(
        self,
        nonce: int,
        call: Any,
        era: Optional[Era] = None,
        head_hash: Optional[bytes] = None,
        tip: Optional[int] = None,
    ) -> tuple[bytes, bytes]:
        """Bytes ready for signing and the encoded extra."""
        payload, extra = self.compose_payload_and_extra(nonce, call, era, head_hash, tip)
        return payload.payload_for_signing(), extra.encode()

    async def submit_signed_call(
        self,
        call: Any,
        signer_account: bytes,
        multi_signature: MultiSignature,
        extra: bytes,
    ) -> Optional[bytes]:
        """Submit a call signed elsewhere, together with its encoded extra."""
        decoded_extra = GenericExtra.from_bytes(extra)
        xt = UncheckedExtrinsicV4.new_signed(
            call, MultiAddress.from_account_id(signer_account), multi_signature, decoded_extra
        )
        return await self.author_submit_extrinsic(xt.hex_encode())

    # Storage.

    async def fetch_storage_value(
        self, module: str, storage_name: str, decoder: Decoder
    ) -> Any:
        key = self.metadata.storage_value_key(module, storage_name)
        return await self.fetch_storage_by_key_hash(key, decoder)

    async def fetch_opaque_storage_value(
        self, module: str, storage_name: str
    ) -> Optional[bytes]:
        key = self.metadata.storage_value_key(module, storage_name)
        return await self.fetch_opaque_storage_by_key_hash(key)

    async def fetch_storage_map(
        self, module: str, storage_name: str, key: Any, decoder: Decoder
    ) -> Any:
        storage_key = self.metadata.storage_map_key(module, storage_name, key)
        return await self.fetch_storage_by_key_hash(storage_key, decoder)

    async def fetch_opaque_storage_map(
        self, module: str, storage_name: str, key: Any
    ) -> Optional[bytes]:
        storage_key = self.metadata.storage_map_key(module, storage_name, key)
        return await self.fetch_opaque_storage_by_key_hash(storage_key)

    async def fetch_storage_double_map(
        self, module: str, storage_name: str, first: Any, second: Any, decoder: Decoder
    ) -> Any:
        storage_key = self.metadata.storage_double_map_key(module, storage_name, first, second)
        return await self.fetch_storage_by_key_hash(storage_key, decoder)

    async def fetch_opaque_storage_double_map(
        self, module: str, storage_name: str, first: Any, second: Any
    ) -> Optional[bytes]:
        storage_key = self.metadata.storage_double_map_key(module, storage_name, first, second)
        return await self.fetch_opaque_storage_by_key_hash(storage_key)

    async def fetch_storage_by_key_hash(self, storage_key: bytes, decoder: Decoder) -> Any:
        """Fetch a storage item and decode it; None when the item is absent."""
        data = await self.fetch_opaque_storage_by_key_hash(storage_key)
        if data is None:
            return None
        return decoder(ScaleReader(data))

    async def fetch_opaque_storage_by_key_hash(self, storage_key: bytes) -> Optional[bytes]:
        value = await self.base_api.json_request_value("state_getStorage", [_hex(storage_key)])
        if value is None:
            return None
        return bytes_from_hex(_expect_str(value, "storage value"))

    async def fetch_opaque_storage_map_paged(
        self, module: str, storage_name: str, count: int, start_key: Any = None
    ) -> Optional[list[bytes]]:
        """Values of a page of map keys; absent values are skipped."""
        keys = await self.fetch_opaque_storage_keys_paged(
            module, storage_name, count, start_key
        )
        if keys is None:
            return None
        values = []
        for key in keys:
            data = await self.fetch_opaque_storage_by_key_hash(key)
            if data is not None:
                values.append(data)
        return values

    def storage_map_type(
        self, module: str, storage_name: str
    ) -> Optional[tuple[PortableType, PortableType]]:
        return self.metadata.storage_map_type(module, storage_name)

    async def fetch_opaque_storage_keys_paged(
        self, module: str, storage_name: str, count: int, start_key: Any = None
    ) -> Optional[list[bytes]]:
        prefix = self.metadata.storage_map_key_prefix(module, storage_name)
        start = None
        if start_key is not None:
            start = _hex(self.metadata.storage_map_key(module, storage_name, start_key))
        value = await self.base_api.json_request_value(
            "state_getKeysPaged", [_hex(prefix), count, start]
        )
        if value is None:
            return None
        if not isinstance(value, list):
            raise CodecError("Error decoding json: expected an array of keys")
        return [bytes_from_hex(_expect_str(item, "storage key")) for item in value]

    # Constants.

    def constant_metadata(self, module: str, constant_name: str) -> PalletConstant:
        return self.metadata.pallet(module).constant(constant_name)

    def fetch_constant_type(self, module: str, constant_name: str) -> Optional[PortableType]:
        constant = self.constant_metadata(module, constant_name)
        return self.metadata.get_resolve_type(constant.ty)

    def fetch_constant_opaque_value(self, module: str, constant_name: str) -> bytes:
        return bytes(self.constant_metadata(module, constant_name).value)

    # Balances.

    async def balance_transfer(
        self, signer: Signer, to: bytes, amount: int, tip: Optional[int] = None
    ) -> Optional[bytes]:
        """Transfer ``amount`` from the signer to account ``to``."""
        call_index = self.pallet_call_index(BALANCES, "transfer")
        call = call_index + MultiAddress.from_account_id(to).encode() + encode_compact(amount)
        xt = await self.sign_extrinsic(signer, call, tip)
        return await self.author_submit_extrinsic(xt.hex_encode())