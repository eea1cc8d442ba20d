"""
Test configuration for votereg tests.
"""

from __future__ import annotations

import pytest

from votereg.models import FeeParams, NetworkId, ProtocolParams, TxIn, UnspentSource


def make_tx_in(n: int, index: int = 0) -> TxIn:
    """Deterministic, distinct TxIn for test number ``n``."""
    return TxIn(tx_id=f"{n:064x}", index=index)


def make_source(n: int, amount: int) -> UnspentSource:
    return UnspentSource(reference=make_tx_in(n), amount=amount)


@pytest.fixture
def mainnet() -> NetworkId:
    return NetworkId.mainnet()


@pytest.fixture
def testnet() -> NetworkId:
    return NetworkId.testnet()


@pytest.fixture
def protocol_params() -> ProtocolParams:
    """Shelley mainnet fee coefficients."""
    return ProtocolParams(min_fee_a=44, min_fee_b=155381)


@pytest.fixture
def fee_params() -> FeeParams:
    return FeeParams(fee_base=170_000, fee_per_input=5_000)


@pytest.fixture
def vote_public_key() -> bytes:
    return bytes(range(32))


@pytest.fixture
def stake_verification_key() -> bytes:
    return bytes(range(32, 64))
