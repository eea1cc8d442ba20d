"""
UTxO selection for vote transaction fees.

Sources are consumed strictly in the order given (no sorting), until their
total covers the fee of a transaction spending exactly the sources taken.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from votereg.errors import InsufficientFundsError
from votereg.models import FeeCoverage, FeeParams, UnspentSource


def take_until_fee_paid(fee_params: FeeParams, sources: Sequence[UnspentSource]) -> FeeCoverage:
    """
    Take sources from the front until they pay for their own fee.

    The target starts at ``fee_base`` and grows by ``fee_per_input`` with each
    source taken. Stops as soon as the accumulated value meets the target, or
    when the sources run out.
    """
    target = fee_params.fee_base
    acc = 0
    selected: list[UnspentSource] = []

    index = 0
    while acc < target and index < len(sources):
        source = sources[index]
        selected.append(source)
        acc += source.amount
        target += fee_params.fee_per_input
        index += 1

    return FeeCoverage(selected=selected, accumulated=acc, target=target)


def select_unspent_sources(
    fee_params: FeeParams,
    sources: Sequence[UnspentSource],
    require_sufficient: bool = False,
) -> list[UnspentSource] | None:
    """
    Select the shortest prefix of ``sources`` that covers its own fee.

    Args:
        fee_params: Fee model for the transaction being funded
        sources: Candidate UTxOs, in the order they should be spent
        require_sufficient: Raise instead of returning a prefix that ran out
            of sources before covering the fee

    Returns:
        The selected prefix, or None when no source was consumed (no sources,
        or a zero base fee)

    Raises:
        InsufficientFundsError: If ``require_sufficient`` is set and all
            sources together do not cover the fee
    """
    coverage = take_until_fee_paid(fee_params, sources)

    if not coverage.selected:
        logger.debug("No unspent sources selected")
        return None

    if not coverage.is_sufficient:
        if require_sufficient:
            raise InsufficientFundsError(
                available=coverage.accumulated,
                required=coverage.target,
                consumed=len(coverage.selected),
            )
        logger.warning(
            f"All {len(coverage.selected)} sources consumed but fee not covered: "
            f"have {coverage.accumulated}, need {coverage.target}"
        )
        return coverage.selected

    logger.debug(
        f"Selected {len(coverage.selected)} of {len(sources)} sources: "
        f"{coverage.accumulated} lovelace covers fee target {coverage.target}"
    )
    return coverage.selected


find_unspent = select_unspent_sources
