"""
Core data models for fee estimation and UTxO selection.

Amounts are lovelace held in plain ints; all fee arithmetic is exact.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from votereg.constants import (
    MAINNET_ADDRESS_TAG,
    MAINNET_MAGIC,
    TESTNET_ADDRESS_TAG,
    TESTNET_MAGIC,
    TX_ID_SIZE,
)


class NetworkType(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"


@dataclass(frozen=True)
class NetworkId:
    """Cardano network identifier: network type plus protocol magic."""

    network: NetworkType = NetworkType.MAINNET
    magic: int = MAINNET_MAGIC

    @classmethod
    def mainnet(cls) -> NetworkId:
        return cls(NetworkType.MAINNET, MAINNET_MAGIC)

    @classmethod
    def testnet(cls, magic: int = TESTNET_MAGIC) -> NetworkId:
        return cls(NetworkType.TESTNET, magic)

    @property
    def address_tag(self) -> int:
        """Network tag stored in the low nibble of a Shelley address header."""
        if self.network == NetworkType.MAINNET:
            return MAINNET_ADDRESS_TAG
        return TESTNET_ADDRESS_TAG

    @property
    def is_mainnet(self) -> bool:
        return self.network == NetworkType.MAINNET


class ProtocolParams(BaseModel):
    """
    Ledger protocol parameters relevant to fee computation.

    Accepts the JSON produced by ``cardano-cli query protocol-parameters``
    (``minFeeA`` / ``minFeeB``); unrelated keys are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    min_fee_a: int = Field(..., ge=0, alias="minFeeA", description="Fee per transaction byte")
    min_fee_b: int = Field(..., ge=0, alias="minFeeB", description="Constant fee per transaction")


@dataclass(frozen=True)
class TxIn:
    """Reference to a transaction output: transaction id and output index."""

    tx_id: str
    index: int

    def __post_init__(self) -> None:
        try:
            raw = bytes.fromhex(self.tx_id)
        except ValueError as e:
            raise ValueError(f"Invalid transaction id: {self.tx_id!r}") from e
        if len(raw) != TX_ID_SIZE:
            raise ValueError(f"Transaction id must be {TX_ID_SIZE} bytes, got {len(raw)}")
        if self.index < 0:
            raise ValueError(f"Output index must be non-negative, got {self.index}")

    @classmethod
    def from_string(cls, value: str) -> TxIn:
        """Parse ``<txid>#<index>`` (cardano-cli notation)."""
        tx_id, sep, index = value.strip().partition("#")
        if not sep or not index.isdigit():
            raise ValueError(f"Invalid TxIn {value!r}, expected <txid>#<index>")
        return cls(tx_id=tx_id.lower(), index=int(index))

    @property
    def tx_id_bytes(self) -> bytes:
        return bytes.fromhex(self.tx_id)

    def __str__(self) -> str:
        return f"{self.tx_id}#{self.index}"


@dataclass(frozen=True)
class TxOut:
    """Transaction output paying ``value`` lovelace to a raw address."""

    address: bytes
    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"Output value must be non-negative, got {self.value}")


@dataclass(frozen=True)
class UnspentSource:
    """A candidate spendable fund: input reference and its unspent lovelace."""

    reference: TxIn
    amount: int

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"Unspent amount must be non-negative, got {self.amount}")


@dataclass(frozen=True)
class FeeParams:
    """
    Linear fee model of a vote transaction.

    ``fee_base`` is the fee with no inputs, ``fee_per_input`` the increase for
    each input added. Valid only for the network, protocol parameters and
    metadata payload it was estimated with.
    """

    fee_base: int
    fee_per_input: int

    def __post_init__(self) -> None:
        if self.fee_base < 0:
            raise ValueError(f"fee_base must be non-negative, got {self.fee_base}")
        if self.fee_per_input < 0:
            raise ValueError(f"fee_per_input must be non-negative, got {self.fee_per_input}")

    def fee_for(self, num_inputs: int) -> int:
        """Fee target for a transaction spending ``num_inputs`` inputs."""
        return self.fee_base + num_inputs * self.fee_per_input


@dataclass(frozen=True)
class FeeCoverage:
    """Outcome of walking the candidate sources until the fee is covered."""

    selected: list[UnspentSource] = field(default_factory=list)
    accumulated: int = 0
    target: int = 0

    @property
    def is_sufficient(self) -> bool:
        return self.accumulated >= self.target


def unspent_value(sources: Iterable[UnspentSource]) -> int:
    """Total unspent lovelace of the given sources."""
    return sum(source.amount for source in sources)


def unspent_references(sources: Iterable[UnspentSource]) -> list[TxIn]:
    """Input references of the given sources, in order."""
    return [source.reference for source in sources]
