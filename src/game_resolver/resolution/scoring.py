"""
Composite title scoring.

Every candidate is scored with the same weighted blend of exact-match
flags, rapidfuzz similarity ratios and word-level bonuses and penalties.
The weights live in ``ScoreWeights`` so tuning happens in one place.
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from rapidfuzz import fuzz

from game_resolver.catalog.models import CatalogEntry
from game_resolver.resolution.aliases import STOPWORDS
from game_resolver.resolution.normalizer import NormalizedQuery, normalize_title

_SEGMENT_SEPARATORS = re.compile(r"[:|\-]")


@dataclass(frozen=True)
class ScoreWeights:
    """Weights and constants of the composite score."""

    exact_match: float = 0.35
    main_title_exact: float = 0.25
    partial_ratio: float = 0.15
    token_sort_ratio: float = 0.10
    token_set_ratio: float = 0.10
    flag_value: float = 100.0
    word_overlap_bonus: float = 30.0
    overlap_min_word_length: int = 3
    short_query_penalty: float = -50.0
    stopword_penalty: float = -50.0
    short_query_length: int = 3


@dataclass(frozen=True)
class SplitTitle:
    """A catalog name cut into its scoring segments."""

    full: str
    main_title: str
    prefix: str


def split_title(name: str) -> SplitTitle:
    """
    Split a catalog name on ``:``, ``|`` and ``-``.

    The main title is the last non-empty segment and the prefix the first;
    a name without separators is its own main title with no prefix.
    """
    parts = [normalize_title(part) for part in _SEGMENT_SEPARATORS.split(name.lower())]
    parts = [part for part in parts if part]
    full = normalize_title(name)
    if not parts:
        return SplitTitle(full=full, main_title=full, prefix="")
    return SplitTitle(
        full=full,
        main_title=parts[-1],
        prefix=parts[0] if len(parts) > 1 else "",
    )


@dataclass(frozen=True)
class ScoreBreakdown:
    """Individual signals and the resulting total for one query form."""

    query: str
    exact_match: float
    main_title_exact: float
    partial_ratio: float
    token_sort_ratio: float
    token_set_ratio: float
    word_overlap: float
    penalties: float
    total: float


@dataclass(frozen=True)
class ScoredCandidate:
    """A catalog entry with its best score across query forms."""

    entry: CatalogEntry
    score: float
    breakdown: ScoreBreakdown


class TitleScorer:
    """
    Scores catalog names against a query.

    Example:
        >>> scorer = TitleScorer()
        >>> scorer.score("portal", split_title("Portal")).total
        125.0
    """

    def __init__(
        self,
        weights: ScoreWeights | None = None,
        stopwords: Iterable[str] | None = None,
    ) -> None:
        self.weights = weights or ScoreWeights()
        self._stopwords = frozenset(STOPWORDS if stopwords is None else stopwords)

    def score(self, query: str, title: SplitTitle) -> ScoreBreakdown:
        """Score one query form against one split catalog name."""
        w = self.weights
        query_words = query.split()
        candidate_words = set(title.full.split())

        exact = w.flag_value if title.full == query else 0.0
        main_exact = w.flag_value if title.main_title == query else 0.0
        partial = fuzz.partial_ratio(query, title.main_title)
        token_sort = fuzz.token_sort_ratio(query, title.full)
        token_set = fuzz.token_set_ratio(query, title.main_title)

        overlap = 0.0
        if query_words:
            hits = sum(
                1
                for word in query_words
                if len(word) >= w.overlap_min_word_length and word in candidate_words
            )
            overlap = hits / len(query_words) * w.word_overlap_bonus

        penalties = 0.0
        if len(query) < w.short_query_length:
            penalties += w.short_query_penalty
        if query_words and all(word in self._stopwords for word in query_words):
            penalties += w.stopword_penalty

        total = (
            exact * w.exact_match
            + main_exact * w.main_title_exact
            + partial * w.partial_ratio
            + token_sort * w.token_sort_ratio
            + token_set * w.token_set_ratio
            + overlap
            + penalties
        )

        return ScoreBreakdown(
            query=query,
            exact_match=exact,
            main_title_exact=main_exact,
            partial_ratio=partial,
            token_sort_ratio=token_sort,
            token_set_ratio=token_set,
            word_overlap=overlap,
            penalties=penalties,
            total=total,
        )

    def rank(
        self,
        query: NormalizedQuery,
        candidates: Sequence[CatalogEntry],
    ) -> list[ScoredCandidate]:
        """
        Score every candidate against each query form and keep the best.

        Returns:
            Candidates by descending score; ties go to the shorter name,
            then the lower id
        """
        scored: list[ScoredCandidate] = []
        for entry in candidates:
            title = split_title(entry.name)
            best = max(
                (self.score(form, title) for form in query.forms),
                key=lambda breakdown: breakdown.total,
            )
            scored.append(ScoredCandidate(entry=entry, score=best.total, breakdown=best))

        scored.sort(key=lambda c: (-c.score, len(c.entry.name), c.entry.id))
        return scored
