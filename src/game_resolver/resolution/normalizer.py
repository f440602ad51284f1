"""
Text normalizer and alias resolver.

Turns raw user text into a ``NormalizedQuery`` carrying both the literal
normalized form and the alias-expanded canonical form.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from game_resolver.resolution.aliases import (
    DIRECT_ABBREVIATIONS,
    PATTERN_SUBSTITUTIONS,
    STOPWORDS,
)

_PUNCTUATION = re.compile(r"[!?:™®©]")
_WHITESPACE = re.compile(r"\s+")


def normalize_title(text: str) -> str:
    """Lowercase, drop ``! ? :`` and trademark symbols, collapse whitespace."""
    text = _PUNCTUATION.sub("", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


@dataclass(frozen=True)
class NormalizedQuery:
    """A query in its literal (pre-alias) and canonical (post-alias) forms."""

    raw: str
    literal: str
    canonical: str
    alias_kind: str | None = None

    @property
    def words(self) -> list[str]:
        return self.canonical.split()

    @property
    def forms(self) -> tuple[str, ...]:
        """Distinct non-empty forms, canonical first."""
        if self.literal and self.literal != self.canonical:
            return (self.canonical, self.literal)
        return (self.canonical,)


def _compile_pattern(key: str) -> re.Pattern[str]:
    if re.fullmatch(r"[\w\s'-]+", key):
        return re.compile(rf"(?<!\w){re.escape(key)}(?!\w)")
    return re.compile(re.escape(key))


class QueryNormalizer:
    """
    Normalizes queries and applies the alias tables.

    Tables are normalized and frozen at construction; passing custom tables
    replaces the defaults entirely.

    Example:
        >>> QueryNormalizer().normalize("GTA 5").canonical
        'grand theft auto v'
    """

    def __init__(
        self,
        direct_abbreviations: Mapping[str, str] | None = None,
        pattern_substitutions: Mapping[str, str] | None = None,
        stopwords: Iterable[str] | None = None,
    ) -> None:
        direct = DIRECT_ABBREVIATIONS if direct_abbreviations is None else direct_abbreviations
        patterns = PATTERN_SUBSTITUTIONS if pattern_substitutions is None else pattern_substitutions

        self.direct_abbreviations: Mapping[str, str] = MappingProxyType(
            {normalize_title(k): normalize_title(v) for k, v in direct.items()}
        )
        self.pattern_substitutions: Mapping[str, str] = MappingProxyType(
            {normalize_title(k): normalize_title(v) for k, v in patterns.items()}
        )
        self.stopwords: frozenset[str] = frozenset(
            normalize_title(w) for w in (STOPWORDS if stopwords is None else stopwords)
        )
        self._compiled = tuple(
            (_compile_pattern(key), value) for key, value in self.pattern_substitutions.items()
        )

    def is_stopword_only(self, text: str) -> bool:
        """True when every word of ``text`` is a stopword."""
        words = text.split()
        return bool(words) and all(word in self.stopwords for word in words)

    def apply_patterns(self, text: str) -> str:
        """Apply every pattern substitution in table order."""
        for pattern, replacement in self._compiled:
            # padded so symbol replacements never fuse with neighbours
            padded = f" {replacement} "
            text = pattern.sub(lambda _match, padded=padded: padded, text)
        return _WHITESPACE.sub(" ", text).strip()

    def normalize(self, raw: str) -> NormalizedQuery:
        """
        Normalize ``raw`` and resolve aliases.

        Direct abbreviations are matched against the whole literal first;
        pattern substitutions only run when there is no direct hit.
        """
        literal = normalize_title(raw)

        direct = self.direct_abbreviations.get(literal)
        if direct is not None:
            return NormalizedQuery(raw=raw, literal=literal, canonical=direct, alias_kind="direct")

        canonical = self.apply_patterns(literal)
        return NormalizedQuery(
            raw=raw,
            literal=literal,
            canonical=canonical,
            alias_kind="pattern" if canonical != literal else None,
        )
