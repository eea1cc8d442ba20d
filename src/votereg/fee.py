"""
Fee model estimation for vote transactions.

Two heuristics describe the fee of a vote transaction:
1. A base fee, estimated from a vote transaction with no inputs.
2. A per-input fee. If the first UTxO cannot cover the fee, more UTxOs are
   needed, and every input added makes the transaction (and its fee) larger.
   In the pathological case each extra input costs more than it brings, and
   the per-input fee lets selection detect that.

Both numbers come from the fee oracle, probed with a synthetic identity, and
are returned as FeeParams.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from votereg.constants import MOCK_TTL
from votereg.errors import FeeOracleError
from votereg.fee_oracle import FeeOracle, estimate_transaction_fee
from votereg.metadata import TxMetadata
from votereg.mock_identity import mock_identity, mock_tx_in
from votereg.models import FeeParams, NetworkId, ProtocolParams, TxIn, TxOut
from votereg.tx_builder import TransactionBuilder, VoteTxBuilder

# Vote transactions are signed by the payment key only
VOTE_TX_SHELLEY_WITNESSES = 1
VOTE_TX_BYRON_WITNESSES = 0


def estimate_vote_tx_fee(
    network: NetworkId,
    protocol_params: ProtocolParams,
    ttl: int,
    tx_ins: Sequence[TxIn],
    address: bytes,
    base_value: int,
    metadata: TxMetadata | None,
    oracle: FeeOracle = estimate_transaction_fee,
    builder: TransactionBuilder | None = None,
) -> int:
    """
    Estimate the fee of a vote transaction with the given inputs.

    The candidate has a single output paying ``base_value`` to ``address``,
    the metadata, zero fee and no witnesses; the oracle is told one key
    witness will be added.
    """
    if builder is None:
        builder = VoteTxBuilder()

    tx_outs = [TxOut(address=address, value=base_value)]
    body = builder.build_body(tx_ins, tx_outs, ttl, 0, metadata)
    tx = builder.make_signed_transaction([], body)

    return oracle(
        network,
        protocol_params.min_fee_a,
        protocol_params.min_fee_b,
        tx,
        len(tx_ins),
        len(tx_outs),
        VOTE_TX_SHELLEY_WITNESSES,
        VOTE_TX_BYRON_WITNESSES,
    )


def estimate_fee_params(
    network: NetworkId,
    protocol_params: ProtocolParams,
    metadata: TxMetadata | None,
    ttl: int = MOCK_TTL,
    oracle: FeeOracle = estimate_transaction_fee,
    builder: TransactionBuilder | None = None,
) -> FeeParams:
    """
    Estimate the base fee of a vote transaction and how it grows per input.

    Args:
        network: Network the transaction will be submitted to
        protocol_params: Current protocol parameters
        metadata: The metadata payload of the real transaction
        ttl: Time-to-live used for the probes
        oracle: Fee oracle
        builder: Transaction builder, VoteTxBuilder by default

    Returns:
        FeeParams for this network, protocol parameters and metadata

    Raises:
        FeeOracleError: If the oracle reports a negative fee, or adding an
            input lowers the fee
    """
    identity = mock_identity(network)

    fee_base = estimate_vote_tx_fee(
        network, protocol_params, ttl, [], identity.address, 0, metadata, oracle, builder
    )
    fee_with_mock_tx_in = estimate_vote_tx_fee(
        network,
        protocol_params,
        ttl,
        [mock_tx_in()],
        identity.address,
        0,
        metadata,
        oracle,
        builder,
    )
    logger.debug(f"Fee probes: no inputs={fee_base}, one input={fee_with_mock_tx_in}")

    if fee_base < 0:
        raise FeeOracleError(f"Fee oracle returned a negative base fee: {fee_base}")

    fee_per_input = fee_with_mock_tx_in - fee_base
    if fee_per_input < 0:
        raise FeeOracleError(
            f"Adding an input lowered the fee ({fee_base} -> {fee_with_mock_tx_in}); "
            "the oracle is not linear in the number of inputs"
        )

    fee_params = FeeParams(fee_base=fee_base, fee_per_input=fee_per_input)
    logger.info(
        f"Estimated fee params: base={fee_params.fee_base}, "
        f"per_input={fee_params.fee_per_input} lovelace"
    )
    return fee_params
