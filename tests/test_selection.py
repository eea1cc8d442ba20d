"""
Tests for UTxO selection.
"""

from __future__ import annotations

import pytest

from tests.conftest import make_source
from votereg.errors import InsufficientFundsError
from votereg.models import FeeParams
from votereg.selection import find_unspent, select_unspent_sources, take_until_fee_paid


class TestSelectUnspentSources:
    """Tests for select_unspent_sources."""

    def test_two_sources_needed(self, fee_params: FeeParams) -> None:
        """First source alone is short, the second covers the fee for two inputs."""
        a = make_source(1, 100_000)
        b = make_source(2, 100_000)

        assert select_unspent_sources(fee_params, [a, b]) == [a, b]

    def test_single_source_suffices(self, fee_params: FeeParams) -> None:
        """One large source stops selection immediately."""
        a = make_source(1, 500_000)

        assert select_unspent_sources(fee_params, [a]) == [a]

    def test_exhausted_returns_consumed_sources(self, fee_params: FeeParams) -> None:
        """By default running out of sources still returns everything consumed."""
        a = make_source(1, 1_000)

        assert select_unspent_sources(fee_params, [a]) == [a]

    def test_exhausted_raises_when_sufficiency_required(self, fee_params: FeeParams) -> None:
        """require_sufficient turns the short selection into an error."""
        a = make_source(1, 1_000)

        with pytest.raises(InsufficientFundsError) as exc_info:
            select_unspent_sources(fee_params, [a], require_sufficient=True)

        assert exc_info.value.available == 1_000
        assert exc_info.value.required == 175_000
        assert exc_info.value.consumed == 1

    def test_sufficient_selection_passes_strict_check(self, fee_params: FeeParams) -> None:
        """A covering selection is unaffected by require_sufficient."""
        a = make_source(1, 100_000)
        b = make_source(2, 100_000)

        assert select_unspent_sources(fee_params, [a, b], require_sufficient=True) == [a, b]

    def test_empty_sources(self, fee_params: FeeParams) -> None:
        """No sources means no selection, not an error."""
        assert select_unspent_sources(fee_params, []) is None
        assert select_unspent_sources(fee_params, [], require_sufficient=True) is None

    @pytest.mark.parametrize(
        "params",
        [FeeParams(0, 0), FeeParams(1, 0), FeeParams(170_000, 5_000), FeeParams(10**12, 10**9)],
    )
    def test_empty_sources_any_params(self, params: FeeParams) -> None:
        assert select_unspent_sources(params, []) is None

    def test_zero_base_fee_selects_nothing(self) -> None:
        """A target met before taking anything yields no selection."""
        sources = [make_source(1, 1_000_000)]

        assert select_unspent_sources(FeeParams(0, 5_000), sources) is None

    def test_stops_at_first_sufficient_prefix(self, fee_params: FeeParams) -> None:
        """Sources after the first covering prefix are left alone."""
        sources = [
            make_source(1, 100_000),
            make_source(2, 100_000),
            make_source(3, 900_000),
            make_source(4, 900_000),
        ]

        assert select_unspent_sources(fee_params, sources) == sources[:2]

    def test_does_not_sort(self, fee_params: FeeParams) -> None:
        """A small source first is still consumed first."""
        small = make_source(1, 10)
        large = make_source(2, 1_000_000)

        assert select_unspent_sources(fee_params, [small, large]) == [small, large]

    def test_duplicates_processed_in_order(self, fee_params: FeeParams) -> None:
        """The same source twice is taken twice."""
        a = make_source(1, 90_000)

        assert select_unspent_sources(fee_params, [a, a, a]) == [a, a]

    def test_input_not_mutated(self, fee_params: FeeParams) -> None:
        sources = [make_source(1, 100_000), make_source(2, 100_000), make_source(3, 1)]
        snapshot = list(sources)

        select_unspent_sources(fee_params, sources)

        assert sources == snapshot

    def test_pathological_fee_per_input(self) -> None:
        """Each source costs more than it brings: everything is consumed and still short."""
        params = FeeParams(fee_base=1_000, fee_per_input=2_000)
        sources = [make_source(i, 1_500) for i in range(10)]

        assert select_unspent_sources(params, sources) == sources
        with pytest.raises(InsufficientFundsError):
            select_unspent_sources(params, sources, require_sufficient=True)

    def test_find_unspent_alias(self, fee_params: FeeParams) -> None:
        a = make_source(1, 500_000)

        assert find_unspent(fee_params, [a]) == [a]


class TestTakeUntilFeePaid:
    """Tests for the greedy walk."""

    def test_coverage_values(self, fee_params: FeeParams) -> None:
        coverage = take_until_fee_paid(
            fee_params, [make_source(1, 100_000), make_source(2, 100_000)]
        )

        assert len(coverage.selected) == 2
        assert coverage.accumulated == 200_000
        assert coverage.target == 180_000
        assert coverage.is_sufficient

    def test_short_coverage(self, fee_params: FeeParams) -> None:
        coverage = take_until_fee_paid(fee_params, [make_source(1, 1_000)])

        assert coverage.accumulated == 1_000
        assert coverage.target == 175_000
        assert not coverage.is_sufficient

    def test_empty(self, fee_params: FeeParams) -> None:
        coverage = take_until_fee_paid(fee_params, [])

        assert coverage.selected == []
        assert coverage.accumulated == 0
        assert coverage.target == 170_000

    def test_exact_amount_is_sufficient(self) -> None:
        """Meeting the target exactly stops the walk."""
        params = FeeParams(fee_base=100, fee_per_input=10)
        sources = [make_source(1, 110), make_source(2, 1)]

        coverage = take_until_fee_paid(params, sources)

        assert coverage.selected == sources[:1]
        assert coverage.is_sufficient

    def test_prefix_and_minimality(self) -> None:
        """The result is the shortest prefix k with sum(amounts[:k]) >= fee_for(k)."""
        params = FeeParams(fee_base=1_000, fee_per_input=100)
        amounts = [300, 200, 50, 400, 700, 20, 5_000]
        sources = [make_source(i, amount) for i, amount in enumerate(amounts)]

        coverage = take_until_fee_paid(params, sources)

        k = len(coverage.selected)
        assert coverage.selected == sources[:k]
        assert sum(amounts[:k]) >= params.fee_for(k)
        for shorter in range(1, k):
            assert sum(amounts[:shorter]) < params.fee_for(shorter)

    def test_target_is_monotonic(self) -> None:
        """The fee target never decreases as more inputs are added."""
        params = FeeParams(fee_base=170_000, fee_per_input=5_000)
        targets = [params.fee_for(k) for k in range(20)]

        assert targets == sorted(targets)

        walked = [
            take_until_fee_paid(params, [make_source(i, 1) for i in range(n)]).target
            for n in range(20)
        ]
        assert walked == sorted(walked)
