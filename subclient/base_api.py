"""JSON-RPC access to a node that needs no prefetched chain state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from .errors import CodecError, ResponseJsonError
from .hexutil import bytes_from_hex, hash_from_hex
from .metadata import Metadata
from .portable import RuntimeMetadataPrefixed, decode_runtime_metadata


def _hash_param(block_hash: bytes) -> str:
    return "0x" + bytes(block_hash).hex()


def _expect_str(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise CodecError(f"Error decoding json: expected a string for {what}")
    return value


def _expect_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise CodecError(f"Error decoding json: invalid {name}")
    return value


@dataclass(frozen=True)
class RuntimeVersion:
    """Version information of the runtime a node runs."""

    spec_name: str
    impl_name: str
    authoring_version: int
    spec_version: int
    impl_version: int
    apis: tuple[tuple[bytes, int], ...]
    transaction_version: int
    state_version: int = 0

    @classmethod
    def from_json(cls, value: Any) -> "RuntimeVersion":
        """Build from the object returned by ``state_getRuntimeVersion``."""
        if not isinstance(value, dict):
            raise CodecError("Error decoding json: runtime version must be an object")
        try:
            apis = []
            for api in value["apis"]:
                api_id, version = api
                apis.append((bytes_from_hex(_expect_str(api_id, "api id")),
                             _expect_int(version, "api version")))
            return cls(
                spec_name=_expect_str(value["specName"], "specName"),
                impl_name=_expect_str(value["implName"], "implName"),
                authoring_version=_expect_int(value["authoringVersion"], "authoringVersion"),
                spec_version=_expect_int(value["specVersion"], "specVersion"),
                impl_version=_expect_int(value["implVersion"], "implVersion"),
                apis=tuple(apis),
                transaction_version=_expect_int(
                    value["transactionVersion"], "transactionVersion"
                ),
                state_version=_expect_int(value.get("stateVersion", 0), "stateVersion"),
            )
        except KeyError as exc:
            raise CodecError(f"Error decoding json: missing field {exc.args[0]}") from None
        except (TypeError, ValueError) as exc:
            if isinstance(exc, CodecError):
                raise
            raise CodecError(f"Error decoding json: {exc}") from exc


class BaseApi:
    """Fetches data from a node right away, without prefetched metadata."""

    def __init__(
        self,
        url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ) -> None:
        self.url = url
        self._client = client
        self._timeout = timeout

    def __repr__(self) -> str:
        return f"BaseApi({self.url!r})"

    async def fetch_runtime_metadata(self) -> Optional[RuntimeMetadataPrefixed]:
        """The runtime metadata as returned by ``state_getMetadata``."""
        value = await self.json_request_value("state_getMetadata", None)
        if value is None:
            return None
        data = bytes_from_hex(_expect_str(value, "metadata"))
        return decode_runtime_metadata(data)

    async def fetch_metadata(self) -> Optional[Metadata]:
        prefixed = await self.fetch_runtime_metadata()
        if prefixed is None:
            return None
        return Metadata.from_runtime_metadata(prefixed)

    async def fetch_rpc_methods(self) -> Optional[list[str]]:
        value = await self.json_request_value("rpc_methods", None)
        if value is None:
            return None
        methods = value.get("methods") if isinstance(value, dict) else None
        if not isinstance(methods, list) or not all(isinstance(m, str) for m in methods):
            raise CodecError("Error decoding json: methods must be a list of strings")
        return list(methods)

    async def fetch_block_hash(self, n: int) -> Optional[bytes]:
        """The hash of block number ``n``."""
        value = await self.json_request_value("chain_getBlockHash", [n])
        if not isinstance(value, str):
            return None
        return hash_from_hex(value)

    async def fetch_block(self, n: int) -> Optional[dict]:
        """The block with number ``n``, without its justifications."""
        signed = await self.fetch_signed_block(n)
        if signed is None:
            return None
        try:
            return signed["block"]
        except KeyError:
            raise CodecError("Error decoding json: missing field block") from None

    async def fetch_genesis_hash(self) -> Optional[bytes]:
        return await self.fetch_block_hash(0)

    async def fetch_signed_block(self, n: int) -> Optional[dict]:
        block_hash = await self.fetch_block_hash(n)
        if block_hash is None:
            return None
        return await self.fetch_signed_block_by_hash(block_hash)

    async def fetch_finalized_head(self) -> Optional[bytes]:
        value = await self.json_request_value("chain_getFinalizedHead", None)
        if value is None:
            return None
        return hash_from_hex(_expect_str(value, "finalized head"))

    async def fetch_header(self, block_hash: bytes) -> Optional[dict]:
        value = await self.json_request_value("chain_getHeader", [_hash_param(block_hash)])
        if value is None:
            return None
        if not isinstance(value, dict):
            raise CodecError("Error decoding json: header must be an object")
        return value

    async def fetch_signed_block_by_hash(self, block_hash: bytes) -> Optional[dict]:
        value = await self.json_request_value("chain_getBlock", [_hash_param(block_hash)])
        if value is None:
            return None
        if not isinstance(value, dict):
            raise CodecError("Error decoding json: block must be an object")
        return value

    async def fetch_runtime_version(self) -> Optional[RuntimeVersion]:
        value = await self.json_request_value("state_getRuntimeVersion", None)
        if value is None:
            return None
        return RuntimeVersion.from_json(value)

    async def author_submit_extrinsic(self, hex_extrinsic: str) -> Optional[bytes]:
        """Submit a hex-encoded extrinsic and return its transaction hash."""
        value = await self.json_request_value("author_submitExtrinsic", [hex_extrinsic])
        if value is None:
            return None
        return hash_from_hex(_expect_str(value, "transaction hash"))

    async def json_request_value(self, method: str, params: Any = None) -> Any:
        """Make an RPC call and return its result, or None when the result is null."""
        response = await self._json_request(method, params)
        return response["result"]

    async def _post(self, payload: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(self.url, json=payload)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(self.url, json=payload)

    async def _json_request(self, method: str, params: Any) -> dict:
        payload = {"id": 1, "jsonrpc": "2.0", "method": method, "params": params}
        response = await self._post(payload)
        try:
            body = response.json()
        except ValueError as exc:
            raise CodecError(f"Error decoding json: {exc}") from exc
        if not isinstance(body, dict):
            raise CodecError("Error decoding json: response must be an object")
        if "error" in body:
            raise ResponseJsonError(body["error"])
        for name in ("id", "jsonrpc", "result"):
            if name not in body:
                raise CodecError(f"Error decoding json: missing field {name}")
        return body