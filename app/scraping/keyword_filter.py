"""
Case-insensitive keyword predicate for candidate titles.
"""

from __future__ import annotations

from collections.abc import Iterable

from app.domain.closed_auctions import CandidateItem


def matches_keyword(title: str, keyword: str | None) -> bool:
    """
    Return True when `keyword` is blank or appears in `title`, ignoring case.
    """

    if not keyword or not keyword.strip():
        return True
    return keyword.strip().lower() in (title or "").lower()


def filter_candidates(
    candidates: Iterable[CandidateItem],
    keyword: str | None,
) -> list[CandidateItem]:
    return [item for item in candidates if matches_keyword(item.title, keyword)]
