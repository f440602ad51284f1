"""
Game-title resolution.

Normalization and alias expansion, composite fuzzy scoring and the
confident / ambiguous / not-found decision policy.
"""

from game_resolver.resolution.normalizer import NormalizedQuery, QueryNormalizer, normalize_title
from game_resolver.resolution.outcomes import (
    Ambiguous,
    Confident,
    InvalidQuery,
    NotFound,
    ResolutionOutcome,
    ResolutionStatus,
)
from game_resolver.resolution.resolver import GameResolver, candidate_patterns
from game_resolver.resolution.scoring import (
    ScoreBreakdown,
    ScoredCandidate,
    ScoreWeights,
    SplitTitle,
    TitleScorer,
    split_title,
)

__all__ = [
    "Ambiguous",
    "Confident",
    "GameResolver",
    "InvalidQuery",
    "NormalizedQuery",
    "NotFound",
    "QueryNormalizer",
    "ResolutionOutcome",
    "ResolutionStatus",
    "ScoreBreakdown",
    "ScoreWeights",
    "ScoredCandidate",
    "SplitTitle",
    "TitleScorer",
    "candidate_patterns",
    "normalize_title",
    "split_title",
]
