# subclient

An asynchronous client library for Substrate-based chains. It talks to a
node over HTTP JSON-RPC, decodes version 14 runtime metadata, builds storage
keys, and composes, signs and submits version 4 extrinsics.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
pytest
```

## Modules

- `subclient.base_api`
  - `BaseApi(url)` makes JSON-RPC calls that need no prefetched state:
    `fetch_runtime_metadata`, `fetch_metadata`, `fetch_rpc_methods`,
    `fetch_block_hash`, `fetch_genesis_hash`, `fetch_block`,
    `fetch_signed_block`, `fetch_signed_block_by_hash`, `fetch_header`,
    `fetch_finalized_head`, `fetch_runtime_version`,
    `author_submit_extrinsic` and the lower-level `json_request_value`.
    A null result comes back as `None`. Blocks and headers are returned as the
    JSON objects the node sent.
  - `RuntimeVersion.from_json` reads the `state_getRuntimeVersion` object.
- `subclient.api`
  - `Api.connect(url)` fetches metadata, genesis hash and runtime version
    once, raising `NoMetadataError`, `NoGenesisHashError` or
    `NoRuntimeVersionError` when the node has none.
  - Storage: `fetch_storage_value`, `fetch_storage_map`,
    `fetch_storage_double_map`, `fetch_storage_by_key_hash` (each taking a
    decoder such as `AccountInfo.decode`) and their `fetch_opaque_*`
    counterparts returning raw bytes; paged keys and values with
    `fetch_opaque_storage_keys_paged` and `fetch_opaque_storage_map_paged`.
  - Accounts: `get_account_info`, `get_nonce`, `get_nonce_for_account`,
    `signer_account`.
  - Extrinsics: `compose_payload`, `compose_payload_and_extra`,
    `compose_opaque_payload_and_extra`, `sign_extrinsic`,
    `sign_extrinsic_with_era`, `submit_extrinsic`, `submit_signed_call`,
    `unsigned_extrinsic`, and `balance_transfer` for `Balances.transfer`.
  - Constants: `constant_metadata`, `fetch_constant_type`,
    `fetch_constant_opaque_value`.
  - `Signer` is the protocol a key pair must meet: a `scheme`
    (`SignatureScheme`), a `public_key` and a `sign(message)` method.
- `subclient.metadata` — `Metadata` (built with `Metadata.from_bytes` or
  `Metadata.from_runtime_metadata`) looks up pallets, call indices, events,
  errors, storage types and constants, and builds storage keys;
  `PalletMetadata.encode_call` prefixes arguments with the call index.
- `subclient.portable` — the version 14 metadata structures, the portable
  type registry and `decode_runtime_metadata`.
- `subclient.storage` — `key_hash` and key builders for plain values, maps
  and double maps.
- `subclient.hashing` — `twox_64`, `twox_128`, `twox_256`, `blake2_128`,
  `blake2_256`.
- `subclient.scale` — SCALE primitives: fixed-width and compact integers,
  byte strings, strings, booleans, options and vectors, read through a
  `ScaleReader`.
- `subclient.extrinsics` — `UncheckedExtrinsicV4`, `MultiAddress`,
  `MultiSignature`, `SignatureScheme`.
- `subclient.extrinsic_params` — `Era`, `GenericExtra`, `PlainTip`,
  `AssetTip`, `BaseExtrinsicParamsBuilder`, `BaseExtrinsicParams`,
  `AdditionalSigned`, `SignedPayload` (payloads over 256 bytes are hashed
  with BLAKE2-256 before signing).
- `subclient.account_info` — `AccountInfo` and `AccountData` as stored
  under `System.Account`.
- `subclient.hexutil` — `bytes_from_hex` and `hash_from_hex` for node hex
  strings.
- `subclient.origin`, `subclient.template_pallet`, `subclient.forum_pallet`
  — in-memory models of a template pallet (store a number, increment it) and
  a forum pallet (posts, comments and their hierarchy), with `Origin` and
  `ensure_signed`.

## Examples

Querying a node:

```python
import asyncio
from subclient.api import Api
from subclient.account_info import AccountInfo

async def main():
    api = await Api.connect("http://localhost:9933")
    print(api.genesis_hash.hex())
    head = await api.chain_get_finalized_head()
    print(head.hex() if head else None)
    print(api.pallet_call_index("Balances", "transfer"))
    info = await api.get_account_info(bytes(32))
    print(info)

asyncio.run(main())
```

The forum model, offline:

```python
from subclient.forum_pallet import ForumPallet
from subclient.origin import Origin

forum = ForumPallet()
forum.post_content(Origin.signed(1000), b"hello")
forum.comment_on(Origin.signed(2000), 0, b"first comment")
print(forum.get_post(0), forum.kids(0), forum.item_counter())
```

## Errors

Client errors derive from `subclient.errors.SubstrateError`: `FromHexError`
(`InvalidHexCharacter`, `InvalidStringLength`, `OddLength`), `CodecError`,
`MetadataError` (`PalletNotFound`, `CallNotFound`, `StorageNotFound`,
`StorageTypeError`, `ConstantNotFound`, …), `InvalidMetadataError`
(`InvalidPrefix`, `InvalidVersion`, `MissingType`, `TypeDefNotVariant`) and
`ResponseJsonError` when the node answers with a JSON-RPC error. The pallet
models raise their own `TemplateError`, `ForumError` and `BadOrigin`.

## What it does not do

- It holds no keys and implements no signature scheme: signing needs a
  `Signer` supplied by the caller.
- It speaks JSON-RPC over HTTP only; there are no subscriptions.
- It decodes version 14 metadata only; older versions are rejected.
- It does not decode blocks or headers beyond the node's JSON.
- The pallet models keep their state in memory; they are not a node or a
  runtime.
- There is no command-line tool.