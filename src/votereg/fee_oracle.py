"""
Fee oracle: the ledger fee of a fully specified candidate transaction.

The estimator only relies on the FeeOracle signature. The reference oracle
below uses the Shelley linear fee rule, ``min_fee_a * size + min_fee_b``, with
the witnesses that will be added at signing time accounted for by size.
"""

from __future__ import annotations

from typing import Protocol

from votereg.constants import (
    BYRON_ATTRIBUTES_SIZE_MAINNET,
    BYRON_ATTRIBUTES_SIZE_TESTNET,
    CHAIN_CODE_OBJ_SIZE,
    SHELLEY_WITNESS_SIZE,
)
from votereg.errors import FeeOracleError
from votereg.models import NetworkId
from votereg.tx_builder import Tx


class FeeOracle(Protocol):
    def __call__(
        self,
        network: NetworkId,
        min_fee_a: int,
        min_fee_b: int,
        tx: Tx,
        num_inputs: int,
        num_outputs: int,
        num_shelley_witnesses: int,
        num_byron_witnesses: int,
    ) -> int: ...


def byron_witness_size(network: NetworkId) -> int:
    """Size of a Byron bootstrap witness: key, signature, chain code, attributes."""
    attributes = (
        BYRON_ATTRIBUTES_SIZE_MAINNET if network.is_mainnet else BYRON_ATTRIBUTES_SIZE_TESTNET
    )
    return SHELLEY_WITNESS_SIZE + CHAIN_CODE_OBJ_SIZE + 2 + attributes


def estimate_transaction_fee(
    network: NetworkId,
    min_fee_a: int,
    min_fee_b: int,
    tx: Tx,
    num_inputs: int,
    num_outputs: int,
    num_shelley_witnesses: int,
    num_byron_witnesses: int,
) -> int:
    """
    Estimate the fee of a transaction once it carries its witnesses.

    Input and output counts are already reflected in the serialized size and
    are only checked for consistency.

    Args:
        network: Network the transaction is for
        min_fee_a: Fee per byte
        min_fee_b: Constant fee
        tx: Candidate transaction (usually unsigned)
        num_inputs: Number of inputs in the transaction
        num_outputs: Number of outputs in the transaction
        num_shelley_witnesses: Key witnesses that will be attached
        num_byron_witnesses: Bootstrap witnesses that will be attached

    Returns:
        Fee in lovelace

    Raises:
        FeeOracleError: On negative coefficients/counts or inconsistent counts
    """
    if min_fee_a < 0 or min_fee_b < 0:
        raise FeeOracleError(
            f"Fee coefficients must be non-negative: minFeeA={min_fee_a}, minFeeB={min_fee_b}"
        )
    if min(num_inputs, num_outputs, num_shelley_witnesses, num_byron_witnesses) < 0:
        raise FeeOracleError("Input, output and witness counts must be non-negative")
    if num_inputs != len(tx.body.tx_ins) or num_outputs != len(tx.body.tx_outs):
        raise FeeOracleError(
            f"Counts ({num_inputs} in, {num_outputs} out) do not match transaction "
            f"({len(tx.body.tx_ins)} in, {len(tx.body.tx_outs)} out)"
        )

    extra_bytes = (
        num_shelley_witnesses * SHELLEY_WITNESS_SIZE
        + num_byron_witnesses * byron_witness_size(network)
    )
    return min_fee_b + min_fee_a * (tx.size + extra_bytes)
