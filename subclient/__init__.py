"""Asynchronous client for Substrate-based chains: JSON-RPC, SCALE, metadata, storage keys and extrinsics."""

__version__ = "0.1.0"