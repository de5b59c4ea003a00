"""Price-reliability score arithmetic.

Reliability is a 0-100 proxy for how much the crowd disputes a listing's
stated price. Confirmations (``equal``) raise it by a flat step, disputes
(``lower``/``higher``) lower it by the same step, and withdrawing a vote
applies the opposite push, so an unclamped vote/unvote pair is an exact
no-op.
"""

from estate_map.models.enums import VoteType

MIN_RELIABILITY = 0.0
MAX_RELIABILITY = 100.0
DEFAULT_STEP = 2.0

DIRECTIONAL_VOTES = frozenset({VoteType.LOWER, VoteType.HIGHER})


def is_directional(vote_type: VoteType) -> bool:
    """Whether the vote disputes the price rather than confirming it."""
    return vote_type in DIRECTIONAL_VOTES


def clamp(value: float) -> float:
    return max(MIN_RELIABILITY, min(MAX_RELIABILITY, value))


def next_reliability(
    current: float,
    vote_type: VoteType,
    is_removal: bool = False,
    step: float = DEFAULT_STEP,
) -> float:
    """Compute the reliability after adding or withdrawing one vote.

    Parameters
    ----------
    current : float
        Reliability before the vote.
    vote_type : VoteType
        Type of the vote being added or withdrawn.
    is_removal : bool
        True when the vote is being withdrawn.
    step : float
        Flat amount a single vote moves the score.

    Returns
    -------
    float
        New reliability, clamped to [0, 100].
    """
    impact = -step if is_directional(vote_type) else step
    if is_removal:
        impact = -impact
    return clamp(current + impact)
