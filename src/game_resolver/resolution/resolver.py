"""
Fuzzy game resolver.

A request moves through validate, filter, score and decide exactly once.
The catalog store narrows the search with ``LIKE`` patterns so scoring only
ever sees a bounded candidate set.
"""

from collections.abc import Iterable

from game_resolver.catalog.store import CatalogStore, StoreError, escape_like
from game_resolver.config import ResolverConfig, get_settings
from game_resolver.logger import get_logger
from game_resolver.resolution.aliases import LEADING_ARTICLES, STOPWORDS
from game_resolver.resolution.normalizer import NormalizedQuery, QueryNormalizer
from game_resolver.resolution.outcomes import (
    Ambiguous,
    Confident,
    InvalidQuery,
    NotFound,
    ResolutionOutcome,
)
from game_resolver.resolution.scoring import ScoredCandidate, TitleScorer

MIN_SIGNIFICANT_WORD_LENGTH = 4
APP_ID_MATCH_SCORE = 100.0


def candidate_patterns(
    query: NormalizedQuery,
    *,
    stopwords: Iterable[str] = STOPWORDS,
) -> list[str]:
    """
    Build the ``LIKE`` patterns used to pull candidates from the store.

    Patterns come strictest first, across both query forms: each form as a
    substring, each form without a leading article, its words joined by
    ``%`` in order, then reversed, and finally its longest significant word.
    """
    stopwords = frozenset(stopwords)
    split_forms = [form.split() for form in query.forms]
    tiers: list[list[list[str]]] = [[], [], [], [], []]

    for words in split_forms:
        tiers[0].append([" ".join(words)])
        if len(words) > 1 and words[0] in LEADING_ARTICLES:
            tiers[1].append([" ".join(words[1:])])
        if len(words) > 1:
            tiers[2].append(words)
            tiers[3].append(list(reversed(words)))
        significant = [
            word
            for word in words
            if len(word) >= MIN_SIGNIFICANT_WORD_LENGTH and word not in stopwords
        ]
        if significant:
            tiers[4].append([max(significant, key=len)])

    patterns: list[str] = []
    for tier in tiers:
        for pieces in tier:
            pieces = [piece for piece in pieces if piece]
            if not pieces:
                continue
            pattern = "%" + "%".join(escape_like(piece) for piece in pieces) + "%"
            if pattern not in patterns:
                patterns.append(pattern)
    return patterns


class GameResolver:
    """
    Resolves free-text queries against the local catalog.

    Example:
        >>> resolver = GameResolver(store)
        >>> (await resolver.resolve("gta5")).to_dict()
        {'status': 'confident', 'id': 271590, 'name': 'Grand Theft Auto V'}
    """

    def __init__(
        self,
        store: CatalogStore,
        *,
        normalizer: QueryNormalizer | None = None,
        scorer: TitleScorer | None = None,
        config: ResolverConfig | None = None,
    ) -> None:
        self._store = store
        self._normalizer = normalizer or QueryNormalizer()
        self._scorer = scorer or TitleScorer(stopwords=self._normalizer.stopwords)
        self._config = config or get_settings().resolver
        self._logger = get_logger(__name__, component="resolver")

    @property
    def normalizer(self) -> QueryNormalizer:
        return self._normalizer

    async def resolve(self, raw_query: str) -> ResolutionOutcome:
        """Normalize and resolve a raw user query."""
        return await self.resolve_query(self._normalizer.normalize(raw_query))

    async def resolve_app_id(self, app_id: int) -> Confident | NotFound:
        """Look a catalog entry up by its Steam app id."""
        try:
            entry = await self._store.get_entry(app_id)
        except StoreError as e:
            self._logger.error("App id lookup failed", app_id=app_id, error=str(e))
            return NotFound(reason="catalog_unavailable")
        if entry is None:
            return NotFound()
        return Confident(entry=entry, score=APP_ID_MATCH_SCORE)

    def validate(self, query: NormalizedQuery) -> InvalidQuery | None:
        """Reject queries that cannot produce a meaningful match."""
        if not query.literal:
            return InvalidQuery(reason="empty")
        if len(query.canonical) < self._config.min_query_length:
            return InvalidQuery(reason="too_short")
        if self._normalizer.is_stopword_only(query.canonical):
            return InvalidQuery(reason="stopwords_only")
        return None

    async def resolve_query(self, query: NormalizedQuery) -> ResolutionOutcome:
        """Resolve an already-normalized query."""
        invalid = self.validate(query)
        if invalid is not None:
            self._logger.debug("Query rejected", query=query.raw, reason=invalid.reason)
            return invalid

        patterns = candidate_patterns(query, stopwords=self._normalizer.stopwords)
        try:
            candidates = await self._store.find_candidates(
                patterns,
                limit=self._config.candidate_limit,
            )
        except StoreError as e:
            self._logger.error(
                "Candidate lookup failed",
                query=query.canonical,
                operation=e.operation,
                error=str(e),
            )
            return NotFound(reason="catalog_unavailable")

        ranked = self._scorer.rank(query, candidates) if candidates else []
        outcome = self.decide(ranked)

        self._logger.debug(
            "Query resolved",
            query=query.raw,
            canonical=query.canonical,
            alias=query.alias_kind,
            candidates=len(candidates),
            best_score=round(ranked[0].score, 2) if ranked else None,
            status=outcome.status.value,
        )
        return outcome

    def decide(self, ranked: list[ScoredCandidate]) -> ResolutionOutcome:
        """
        Apply the decision policy to candidates already sorted by score.

        Confident needs a best score at or above the confident threshold and
        either no eligible rival or a lead of at least the configured margin.
        """
        cfg = self._config
        eligible = [c for c in ranked if c.score > cfg.eligibility_threshold]
        if not eligible:
            return NotFound()

        best = eligible[0]
        clear_lead = len(eligible) == 1 or best.score - eligible[1].score >= cfg.confident_margin
        if best.score >= cfg.confident_threshold and clear_lead:
            return Confident(entry=best.entry, score=best.score)

        return Ambiguous(candidates=tuple(eligible[: cfg.max_suggestions]))
