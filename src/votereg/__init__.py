"""
votereg - Fee estimation and UTxO selection for vote registration transactions

Derives a linear fee model from a fee oracle and selects the UTxOs that pay
for a vote transaction's fee.
"""

__version__ = "0.1.0"

from votereg.errors import (
    FeeOracleError,
    InsufficientFundsError,
    MetadataError,
    VoteRegError,
)
from votereg.fee import estimate_fee_params, estimate_vote_tx_fee
from votereg.fee_oracle import FeeOracle, estimate_transaction_fee
from votereg.metadata import TxMetadata, metadata_from_json, vote_registration_metadata
from votereg.models import (
    FeeCoverage,
    FeeParams,
    NetworkId,
    NetworkType,
    ProtocolParams,
    TxIn,
    TxOut,
    UnspentSource,
    unspent_references,
    unspent_value,
)
from votereg.selection import find_unspent, select_unspent_sources, take_until_fee_paid
from votereg.tx_builder import TransactionBuilder, Tx, TxBody, VoteTxBuilder

__all__ = [
    "FeeCoverage",
    "FeeOracle",
    "FeeOracleError",
    "FeeParams",
    "InsufficientFundsError",
    "MetadataError",
    "NetworkId",
    "NetworkType",
    "ProtocolParams",
    "TransactionBuilder",
    "Tx",
    "TxBody",
    "TxIn",
    "TxMetadata",
    "TxOut",
    "UnspentSource",
    "VoteRegError",
    "VoteTxBuilder",
    "estimate_fee_params",
    "estimate_transaction_fee",
    "estimate_vote_tx_fee",
    "find_unspent",
    "metadata_from_json",
    "select_unspent_sources",
    "take_until_fee_paid",
    "unspent_references",
    "unspent_value",
    "vote_registration_metadata",
]
