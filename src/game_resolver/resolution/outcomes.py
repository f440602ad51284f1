"""
Resolution outcomes.

``GameResolver.resolve`` returns exactly one of these; ``to_dict`` gives the
wire shape consumed by callers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from game_resolver.catalog.models import CatalogEntry
from game_resolver.resolution.scoring import ScoredCandidate


class ResolutionStatus(str, Enum):
    """Terminal states of a resolution."""

    CONFIDENT = "confident"
    AMBIGUOUS = "ambiguous"
    NOT_FOUND = "not_found"
    INVALID_QUERY = "invalid_query"


@dataclass(frozen=True)
class Confident:
    """A single clear winner."""

    entry: CatalogEntry
    score: float
    status: ResolutionStatus = field(default=ResolutionStatus.CONFIDENT, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status.value, "id": self.entry.id, "name": self.entry.name}


@dataclass(frozen=True)
class Ambiguous:
    """Several plausible candidates, best first."""

    candidates: tuple[ScoredCandidate, ...]
    status: ResolutionStatus = field(default=ResolutionStatus.AMBIGUOUS, init=False)

    @property
    def suggestions(self) -> list[str]:
        """Candidate names in rank order."""
        return [candidate.entry.name for candidate in self.candidates]

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status.value, "suggestions": self.suggestions}


@dataclass(frozen=True)
class NotFound:
    """Nothing scored above the eligibility threshold."""

    reason: str | None = None
    status: ResolutionStatus = field(default=ResolutionStatus.NOT_FOUND, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status.value}


@dataclass(frozen=True)
class InvalidQuery:
    """The query was rejected before any lookup."""

    reason: str
    status: ResolutionStatus = field(default=ResolutionStatus.INVALID_QUERY, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status.value, "reason": self.reason}


ResolutionOutcome = Confident | Ambiguous | NotFound | InvalidQuery
