"""
Post-classification filters.

Every predicate looks at ride attributes only and treats ``connected``
and ``other`` candidates identically.  Name similarity is the fuzzy
place-name comparison riders know from the text search; it never feeds
back into geometric matching.
"""

from __future__ import annotations

import re
from typing import Iterable

from .entities import SearchCandidate, SearchFilters

_NON_WORD = re.compile(r"[^\w\s]")
_SPACES = re.compile(r"\s+")


def normalize_place(text: str) -> str:
    text = _SPACES.sub(" ", text.lower().strip())
    return _NON_WORD.sub("", text)


def name_similarity(a: str, b: str) -> float:
    """
    1.0 for equal names, 0.8 when one contains the other, otherwise the
    Jaccard index of their character sets.
    """
    s1, s2 = normalize_place(a), normalize_place(b)
    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0
    if s1 in s2 or s2 in s1:
        return 0.8
    set1, set2 = set(s1), set(s2)
    return len(set1 & set2) / len(set1 | set2)


def accepts(
    candidate: SearchCandidate,
    filters: SearchFilters,
    origin_text: str = "",
    destination_text: str = "",
) -> bool:
    offer = candidate.offer

    if filters.min_seats is not None:
        if offer is None or offer.available_seats < filters.min_seats:
            return False

    if filters.max_fare is not None and candidate.effective_fare > filters.max_fare:
        return False

    if filters.vehicle_type is not None:
        if offer is None or offer.vehicle_type != filters.vehicle_type:
            return False

    if filters.amenities:
        if offer is None or not filters.amenities <= offer.amenities:
            return False

    if filters.min_name_similarity is not None:
        if offer is None:
            return False
        score = (
            name_similarity(offer.start_name, origin_text)
            + name_similarity(offer.end_name, destination_text)
        ) / 2
        if score < filters.min_name_similarity:
            return False

    return True


def apply_filters(
    candidates: Iterable[SearchCandidate],
    filters: SearchFilters,
    origin_text: str = "",
    destination_text: str = "",
) -> list[SearchCandidate]:
    """Keep the candidates every declared filter accepts, order preserved."""
    return [
        c for c in candidates
        if accepts(c, filters, origin_text, destination_text)
    ]
