import json
from decimal import Decimal
from pathlib import Path
from typing import Union

import base58
import yaml
from hexbytes import HexBytes
from web3 import Web3

# sha2-256 multihash header of a CIDv0
MULTIHASH_PREFIX = bytes([0x12, 0x20])


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def to_base_units(amount: Union[str, int, Decimal]) -> int:
    """
    Converts a human-readable token amount (e.g. "5000" or "0.25")
    into the token's base unit (18 decimals, same as ether).
    """
    return Web3.to_wei(Decimal(amount), "ether")


def ipfs_hash_to_bytes32(ipfs_hash: str) -> HexBytes:
    """Strips the multihash header from a base58 CIDv0, leaving the 32 byte digest."""
    decoded = base58.b58decode(ipfs_hash)
    if len(decoded) != 34 or decoded[:2] != MULTIHASH_PREFIX:
        raise ValueError(f"{ipfs_hash} is not a sha2-256 CIDv0")
    return HexBytes(decoded[2:])


def bytes32_to_ipfs_hash(digest: Union[str, bytes]) -> str:
    """Prepends the sha2-256 multihash header to a digest and base58 encodes it."""
    digest = HexBytes(digest)
    if len(digest) != 32:
        raise ValueError(f"Expected a 32 byte digest, got {len(digest)} bytes")
    return base58.b58encode(MULTIHASH_PREFIX + bytes(digest)).decode()
