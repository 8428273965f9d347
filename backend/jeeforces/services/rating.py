"""Elo-style rating changes after a contest"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

DEFAULT_RATING = 1000


@dataclass(frozen=True)
class RatedParticipant:
    user_id: int
    rank: int
    rating: int


@dataclass(frozen=True)
class RatingChange:
    user_id: int
    old_rating: int
    new_rating: int
    title: str

    @property
    def delta(self) -> int:
        return self.new_rating - self.old_rating


def title_for(rating: int) -> str:
    if rating >= 2100:
        return "Candidate Master"
    if rating >= 1900:
        return "Expert"
    if rating >= 1000:
        return "Pupil"
    return "Newbie"


def k_factor(rating: int) -> int:
    if rating < 1200:
        return 40
    if rating < 2000:
        return 32
    if rating < 2400:
        return 24
    return 16


def expected_score(rating: int, others: Sequence[int]) -> float:
    """Sum of win probabilities against every other participant"""
    return sum(1 / (1 + math.pow(10, (other - rating) / 400)) for other in others)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def compute_rating_changes(participants: Sequence[RatedParticipant]) -> List[RatingChange]:
    """
    New ratings for one contest

    A participant ranked r among n scores n - r; the change is
    K * (actual - expected), rounded half up.
    """
    n = len(participants)
    changes = []
    for index, participant in enumerate(participants):
        others = [p.rating for i, p in enumerate(participants) if i != index]
        expected = expected_score(participant.rating, others)
        actual = n - participant.rank
        delta = _round_half_up(k_factor(participant.rating) * (actual - expected))
        new_rating = participant.rating + delta
        changes.append(RatingChange(
            user_id=participant.user_id,
            old_rating=participant.rating,
            new_rating=new_rating,
            title=title_for(new_rating),
        ))
    return changes
