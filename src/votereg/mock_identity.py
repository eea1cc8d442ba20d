"""
Deterministic synthetic identity used only to probe transaction fees.

The keys here come from a fixed, public seed. They are never used to sign
anything and must not be mixed with real key handling: fee probes only need
an address and an input reference of the right shape.
"""

from __future__ import annotations

from dataclasses import dataclass

import libnacl

from votereg.address import base_address, key_hash
from votereg.constants import MOCK_TX_IN_INDEX, SEED_SIZE
from votereg.models import NetworkId, TxIn
from votereg.tx_builder import blake2b_256, encode_cbor

MOCK_SEED = b"x" * SEED_SIZE


@dataclass(frozen=True)
class MockIdentity:
    """Synthetic payment/stake keys and the base address derived from them."""

    payment_verification_key: bytes
    stake_verification_key: bytes
    address: bytes


def mock_verification_key(seed: bytes = MOCK_SEED) -> bytes:
    """Ed25519 verification key derived from the fixed seed."""
    if len(seed) != SEED_SIZE:
        raise ValueError(f"Seed must be {SEED_SIZE} bytes, got {len(seed)}")
    verification_key, _ = libnacl.crypto_sign_seed_keypair(seed)
    return verification_key


def mock_identity(network: NetworkId) -> MockIdentity:
    """
    Build the synthetic identity for a network.

    Payment and stake keys share the fixed seed, so the same call always
    yields the same address.
    """
    payment_vkey = mock_verification_key()
    stake_vkey = mock_verification_key()
    address = base_address(network, key_hash(payment_vkey), key_hash(stake_vkey))
    return MockIdentity(
        payment_verification_key=payment_vkey,
        stake_verification_key=stake_vkey,
        address=address,
    )


def mock_tx_in() -> TxIn:
    """A well-formed input reference that does not exist on chain."""
    return TxIn(tx_id=blake2b_256(encode_cbor(None)).hex(), index=MOCK_TX_IN_INDEX)
