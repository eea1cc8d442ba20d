"""
Shelley address utilities.
"""

from __future__ import annotations

import hashlib

import bech32

from votereg.constants import BASE_ADDRESS_KEY_KEY, KEY_HASH_SIZE, VERIFICATION_KEY_SIZE
from votereg.models import NetworkId


def key_hash(verification_key: bytes) -> bytes:
    """blake2b-224 hash of a verification key"""
    if len(verification_key) != VERIFICATION_KEY_SIZE:
        raise ValueError(f"Invalid verification key length: {len(verification_key)}")
    return hashlib.blake2b(verification_key, digest_size=KEY_HASH_SIZE).digest()


def base_address(network: NetworkId, payment_key_hash: bytes, stake_key_hash: bytes) -> bytes:
    """
    Build a Shelley base address (key payment credential, key stake credential).

    Layout: header byte (address type << 4 | network tag), payment key hash,
    stake key hash.
    """
    if len(payment_key_hash) != KEY_HASH_SIZE or len(stake_key_hash) != KEY_HASH_SIZE:
        raise ValueError(f"Key hashes must be {KEY_HASH_SIZE} bytes")

    header = (BASE_ADDRESS_KEY_KEY << 4) | network.address_tag
    return bytes([header]) + payment_key_hash + stake_key_hash


def address_hrp(network: NetworkId) -> str:
    return "addr" if network.is_mainnet else "addr_test"


def address_to_bech32(address: bytes, network: NetworkId) -> str:
    """Encode raw address bytes as bech32 (CIP-5 prefixes)."""
    data = bech32.convertbits(address, 8, 5)
    if data is None:
        raise ValueError(f"Failed to convert address: {address.hex()}")
    return bech32.bech32_encode(address_hrp(network), data)
