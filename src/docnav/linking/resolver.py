"""Overlap resolution for reference candidates."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Sequence

from docnav.models import MatchCandidate, Segment

Resolver = Callable[[Iterable[MatchCandidate]], List[MatchCandidate]]

DEFAULT_POLICY = "leftmost-longest"


def resolve(candidates: Iterable[MatchCandidate]) -> List[MatchCandidate]:
    """Greedy leftmost-longest cover.

    Candidates are ordered by start, longer first on equal starts, then
    accepted left to right whenever they begin at or after the end of the
    last accepted span.
    """
    ordered = sorted(candidates, key=lambda candidate: (candidate.start, -candidate.length))
    accepted: List[MatchCandidate] = []
    last_end = 0
    for candidate in ordered:
        if candidate.length <= 0 or candidate.start < last_end:
            continue
        accepted.append(candidate)
        last_end = candidate.end
    return accepted


def resolve_longest_first(candidates: Iterable[MatchCandidate]) -> List[MatchCandidate]:
    """Prefer longer references over earlier ones, tracking coverage per offset."""
    ordered = sorted(candidates, key=lambda candidate: (-candidate.length, candidate.start))
    covered: set[int] = set()
    accepted: List[MatchCandidate] = []
    for candidate in ordered:
        if candidate.length <= 0:
            continue
        span = range(candidate.start, candidate.end)
        if any(offset in covered for offset in span):
            continue
        covered.update(span)
        accepted.append(candidate)
    accepted.sort(key=lambda candidate: candidate.start)
    return accepted


RESOLVERS: Dict[str, Resolver] = {
    "leftmost-longest": resolve,
    "longest-first": resolve_longest_first,
}


def get_resolver(policy: str = DEFAULT_POLICY) -> Resolver:
    try:
        return RESOLVERS[policy]
    except KeyError:
        raise ValueError(
            f"Unknown resolve policy {policy!r}, expected one of {sorted(RESOLVERS)}"
        ) from None


def build_segments(text: str, accepted: Sequence[MatchCandidate]) -> List[Segment]:
    """Interleave literal runs with references; the texts concatenate back to ``text``.

    ``accepted`` must be start-ordered and non-overlapping.
    """
    segments: List[Segment] = []
    cursor = 0
    for candidate in accepted:
        if candidate.start > cursor:
            segments.append(Segment(text=text[cursor : candidate.start]))
        segments.append(
            Segment(text=text[candidate.start : candidate.end], target_id=candidate.target_id)
        )
        cursor = candidate.end
    if cursor < len(text):
        segments.append(Segment(text=text[cursor:]))
    return segments
