"""Tests for reliability score arithmetic."""

import random

import pytest

from estate_map.models import VoteType
from estate_map.reliability import clamp, is_directional, next_reliability


class TestIsDirectional:
    """Tests for directional vote classification."""

    def test_disputes_are_directional(self) -> None:
        assert is_directional(VoteType.LOWER)
        assert is_directional(VoteType.HIGHER)

    def test_confirmation_is_not_directional(self) -> None:
        assert not is_directional(VoteType.EQUAL)


class TestNextReliability:
    """Tests for next_reliability."""

    @pytest.mark.parametrize("vote_type", [VoteType.LOWER, VoteType.HIGHER])
    def test_dispute_lowers_score(self, vote_type: VoteType) -> None:
        assert next_reliability(50.0, vote_type) == 48.0

    def test_confirmation_raises_score(self) -> None:
        assert next_reliability(50.0, VoteType.EQUAL) == 52.0

    @pytest.mark.parametrize("vote_type", list(VoteType))
    def test_removal_undoes_addition(self, vote_type: VoteType) -> None:
        added = next_reliability(50.0, vote_type)
        assert next_reliability(added, vote_type, is_removal=True) == 50.0

    def test_custom_step(self) -> None:
        assert next_reliability(50.0, VoteType.LOWER, step=5.0) == 45.0
        assert next_reliability(50.0, VoteType.EQUAL, is_removal=True, step=0.5) == 49.5

    def test_clamped_at_upper_bound(self) -> None:
        assert next_reliability(100.0, VoteType.EQUAL) == 100.0
        assert next_reliability(99.0, VoteType.EQUAL) == 100.0
        assert next_reliability(100.0, VoteType.LOWER, is_removal=True) == 100.0

    def test_clamped_at_lower_bound(self) -> None:
        assert next_reliability(0.0, VoteType.HIGHER) == 0.0
        assert next_reliability(1.0, VoteType.LOWER) == 0.0
        assert next_reliability(0.0, VoteType.EQUAL, is_removal=True) == 0.0

    def test_never_leaves_bounds(self, seed: int) -> None:
        rng = random.Random(seed)
        value = 100.0
        for _ in range(2000):
            value = next_reliability(
                value,
                rng.choice(list(VoteType)),
                is_removal=rng.random() < 0.5,
                step=rng.uniform(0.1, 30.0),
            )
            assert 0.0 <= value <= 100.0


class TestClamp:
    """Tests for clamp."""

    def test_clamp(self) -> None:
        assert clamp(-5.0) == 0.0
        assert clamp(105.0) == 100.0
        assert clamp(42.5) == 42.5
