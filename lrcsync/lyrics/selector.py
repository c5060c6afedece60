"""
Candidate selection by duration proximity

Search results are ranked by how close their duration is to the local file's
duration and filtered through a tolerance window. The selector does not look
at lyrics content: whether the winner has synchronized lyrics is the
resolver's concern.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from .models import LyricsCandidate


@dataclass(frozen=True)
class SelectionResult:
    """
    Outcome of a selection

    Attributes:
        candidate: Best candidate, or None when no usable candidate remains
        considered: Number of candidates that survived tolerance filtering
    """
    candidate: Optional[LyricsCandidate] = None
    considered: int = 0

    @property
    def found(self) -> bool:
        return self.candidate is not None


def duration_delta(candidate: LyricsCandidate, target_duration: float) -> float:
    """
    Absolute distance between a candidate's duration and the target

    NaN on either side is treated as maximally distant so that it sorts last
    and never passes a tolerance window.
    """
    delta = abs(candidate.duration - target_duration)
    if math.isnan(delta):
        return math.inf
    return delta


def select_candidate(
    candidates: Sequence[LyricsCandidate],
    target_duration: Optional[float],
    tolerance: float
) -> SelectionResult:
    """
    Pick the candidate whose duration is closest to the target

    Without a target duration there is nothing to rank by: the first candidate
    wins and the tolerance is ignored.

    With a target, candidates are stably sorted by absolute duration delta
    (ties keep service order). A positive tolerance then drops every candidate
    whose delta is not strictly below it; zero or a negative tolerance keeps
    the full list.

    Args:
        candidates: Search results in service order (not modified)
        target_duration: Duration of the local file, or None
        tolerance: Maximum allowed delta in seconds; <= 0 disables filtering

    Returns:
        SelectionResult with the head of the ranked list, if any
    """
    if target_duration is None:
        if not candidates:
            return SelectionResult()
        return SelectionResult(candidate=candidates[0], considered=len(candidates))

    ranked = sorted(candidates, key=lambda c: duration_delta(c, target_duration))

    if tolerance > 0:
        ranked = [c for c in ranked if duration_delta(c, target_duration) < tolerance]

    if not ranked:
        return SelectionResult()
    return SelectionResult(candidate=ranked[0], considered=len(ranked))
