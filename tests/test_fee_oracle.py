"""
Tests for the reference fee oracle.
"""

from __future__ import annotations

import pytest

from tests.conftest import make_tx_in
from votereg.errors import FeeOracleError
from votereg.fee_oracle import byron_witness_size, estimate_transaction_fee
from votereg.models import NetworkId, TxOut
from votereg.tx_builder import Tx, TxBody


@pytest.fixture
def tx() -> Tx:
    body = TxBody(
        tx_ins=(make_tx_in(1),),
        tx_outs=(TxOut(address=bytes(57), value=1_000_000),),
        fee=0,
        ttl=1,
    )
    return Tx(body=body)


class TestEstimateTransactionFee:
    """Tests for estimate_transaction_fee."""

    def test_linear_in_size(self, mainnet: NetworkId, tx: Tx) -> None:
        fee = estimate_transaction_fee(mainnet, 44, 155381, tx, 1, 1, 0, 0)
        assert fee == 155381 + 44 * tx.size

    def test_shelley_witness_padding(self, mainnet: NetworkId, tx: Tx) -> None:
        no_witness = estimate_transaction_fee(mainnet, 44, 155381, tx, 1, 1, 0, 0)
        two_witnesses = estimate_transaction_fee(mainnet, 44, 155381, tx, 1, 1, 2, 0)

        assert two_witnesses - no_witness == 44 * 2 * 101

    def test_byron_witness_padding(self, mainnet: NetworkId, testnet: NetworkId, tx: Tx) -> None:
        assert byron_witness_size(mainnet) == 101 + 34 + 2 + 1
        assert byron_witness_size(testnet) == 101 + 34 + 2 + 8

        base = estimate_transaction_fee(testnet, 1, 0, tx, 1, 1, 0, 0)
        with_byron = estimate_transaction_fee(testnet, 1, 0, tx, 1, 1, 0, 1)
        assert with_byron - base == byron_witness_size(testnet)

    def test_zero_coefficients(self, mainnet: NetworkId, tx: Tx) -> None:
        assert estimate_transaction_fee(mainnet, 0, 0, tx, 1, 1, 1, 0) == 0

    @pytest.mark.parametrize(("a", "b"), [(-1, 0), (0, -1)])
    def test_negative_coefficients(self, mainnet: NetworkId, tx: Tx, a: int, b: int) -> None:
        with pytest.raises(FeeOracleError):
            estimate_transaction_fee(mainnet, a, b, tx, 1, 1, 1, 0)

    def test_negative_counts(self, mainnet: NetworkId, tx: Tx) -> None:
        with pytest.raises(FeeOracleError):
            estimate_transaction_fee(mainnet, 44, 155381, tx, 1, 1, -1, 0)

    def test_mismatched_counts(self, mainnet: NetworkId, tx: Tx) -> None:
        with pytest.raises(FeeOracleError):
            estimate_transaction_fee(mainnet, 44, 155381, tx, 2, 1, 1, 0)
        with pytest.raises(FeeOracleError):
            estimate_transaction_fee(mainnet, 44, 155381, tx, 1, 0, 1, 0)
