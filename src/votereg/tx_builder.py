"""
Transaction builder for vote registration transactions.

Builds Shelley-shaped transactions from:
- Spending inputs and a single output
- Fee and time-to-live
- Transaction metadata (the vote registration payload)

Certificates, withdrawals and update proposals are never used by vote
transactions and are omitted from the body, as the ledger does for empty
fields. Serialization is canonical CBOR so that the transaction size, and
with it the fee, is a deterministic function of the transaction shape.
"""

from __future__ import annotations

import hashlib
import struct
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger

from votereg.constants import TX_ID_SIZE
from votereg.metadata import TxMetadata, validate_metadata
from votereg.models import TxIn, TxOut

# Transaction body map keys
BODY_INPUTS = 0
BODY_OUTPUTS = 1
BODY_FEE = 2
BODY_TTL = 3
BODY_METADATA_HASH = 7

# Witness set map keys
WITNESS_VKEY = 0

CBOR_NULL = bytes([0xF6])


def cbor_head(major: int, n: int) -> bytes:
    """Encode a CBOR item head using the shortest argument encoding."""
    if n < 0:
        raise ValueError(f"CBOR argument must be non-negative, got {n}")
    if n < 24:
        return bytes([(major << 5) | n])
    elif n <= 0xFF:
        return bytes([(major << 5) | 24, n])
    elif n <= 0xFFFF:
        return bytes([(major << 5) | 25]) + struct.pack(">H", n)
    elif n <= 0xFFFFFFFF:
        return bytes([(major << 5) | 26]) + struct.pack(">I", n)
    elif n <= 0xFFFFFFFFFFFFFFFF:
        return bytes([(major << 5) | 27]) + struct.pack(">Q", n)
    raise ValueError(f"CBOR argument too large: {n}")


def encode_cbor(value: Any) -> bytes:
    """
    Encode a value as canonical CBOR.

    Supports None, ints, bytes, str, lists/tuples and dicts. Map keys are
    ordered by their encoded form (shorter first, then bytewise).
    """
    if value is None:
        return CBOR_NULL
    if isinstance(value, bool):
        raise TypeError("Booleans are not valid in transaction CBOR")
    if isinstance(value, int):
        if value >= 0:
            return cbor_head(0, value)
        return cbor_head(1, -1 - value)
    if isinstance(value, (bytes, bytearray)):
        return cbor_head(2, len(value)) + bytes(value)
    if isinstance(value, str):
        encoded = value.encode("utf-8")
        return cbor_head(3, len(encoded)) + encoded
    if isinstance(value, (list, tuple)):
        return cbor_head(4, len(value)) + b"".join(encode_cbor(item) for item in value)
    if isinstance(value, dict):
        items = sorted(
            ((encode_cbor(k), encode_cbor(v)) for k, v in value.items()),
            key=lambda kv: (len(kv[0]), kv[0]),
        )
        return cbor_head(5, len(items)) + b"".join(k + v for k, v in items)
    raise TypeError(f"Cannot CBOR-encode {type(value).__name__}")


def blake2b_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=TX_ID_SIZE).digest()


@dataclass(frozen=True)
class TxBody:
    """Unsigned transaction body."""

    tx_ins: tuple[TxIn, ...]
    tx_outs: tuple[TxOut, ...]
    fee: int
    ttl: int
    metadata: TxMetadata | None = None

    def metadata_hash(self) -> bytes | None:
        if self.metadata is None:
            return None
        return blake2b_256(encode_cbor(self.metadata))

    def to_cbor_value(self) -> dict[int, Any]:
        body: dict[int, Any] = {
            BODY_INPUTS: [[txin.tx_id_bytes, txin.index] for txin in self.tx_ins],
            BODY_OUTPUTS: [[out.address, out.value] for out in self.tx_outs],
            BODY_FEE: self.fee,
            BODY_TTL: self.ttl,
        }
        metadata_hash = self.metadata_hash()
        if metadata_hash is not None:
            body[BODY_METADATA_HASH] = metadata_hash
        return body

    def serialize(self) -> bytes:
        return encode_cbor(self.to_cbor_value())

    @property
    def tx_id(self) -> str:
        """Transaction id: blake2b-256 of the serialized body."""
        return blake2b_256(self.serialize()).hex()


@dataclass(frozen=True)
class Tx:
    """Transaction: body, verification key witnesses and metadata."""

    body: TxBody
    witnesses: tuple[tuple[bytes, bytes], ...] = field(default_factory=tuple)

    def witness_set(self) -> dict[int, Any]:
        if not self.witnesses:
            return {}
        return {WITNESS_VKEY: [[vkey, sig] for vkey, sig in self.witnesses]}

    def serialize(self) -> bytes:
        return encode_cbor([self.body.to_cbor_value(), self.witness_set(), self.body.metadata])

    @property
    def size(self) -> int:
        return len(self.serialize())


class TransactionBuilder(Protocol):
    """Assembles candidate transactions for fee estimation and submission."""

    def build_body(
        self,
        tx_ins: Sequence[TxIn],
        tx_outs: Sequence[TxOut],
        ttl: int,
        fee: int,
        metadata: TxMetadata | None,
    ) -> TxBody: ...

    def make_signed_transaction(
        self, witnesses: Sequence[tuple[bytes, bytes]], body: TxBody
    ) -> Tx: ...


class VoteTxBuilder:
    """
    Builds vote registration transactions.

    The transaction structure:
    - Inputs: funding UTxOs, in the order given
    - Outputs: a single output back to the registering wallet
    - Metadata: vote registration payload, hashed into the body
    """

    def build_body(
        self,
        tx_ins: Sequence[TxIn],
        tx_outs: Sequence[TxOut],
        ttl: int,
        fee: int,
        metadata: TxMetadata | None,
    ) -> TxBody:
        """
        Build an unsigned transaction body.

        Args:
            tx_ins: Spending inputs (may be empty for fee probing)
            tx_outs: Transaction outputs
            ttl: Slot after which the transaction is invalid
            fee: Fee in lovelace
            metadata: Transaction metadata, or None

        Returns:
            The transaction body
        """
        if not tx_outs:
            raise ValueError("Transaction needs at least one output")
        if ttl < 0:
            raise ValueError(f"TTL must be non-negative, got {ttl}")
        if fee < 0:
            raise ValueError(f"Fee must be non-negative, got {fee}")
        if metadata is not None:
            validate_metadata(metadata)

        body = TxBody(
            tx_ins=tuple(tx_ins),
            tx_outs=tuple(tx_outs),
            fee=fee,
            ttl=ttl,
            metadata=metadata,
        )
        logger.debug(
            f"Built tx body: {len(body.tx_ins)} inputs, {len(body.tx_outs)} outputs, "
            f"fee={fee}, ttl={ttl}"
        )
        return body

    def make_signed_transaction(
        self, witnesses: Sequence[tuple[bytes, bytes]], body: TxBody
    ) -> Tx:
        """Attach (vkey, signature) witnesses; an empty list yields an unsigned tx."""
        return Tx(body=body, witnesses=tuple(witnesses))
