"""Canonical entity resolution for free-text names and codes.

Matching is staged and stops at the first stage that succeeds:

1. exact lower-cased lookup against names and codes
2. lookup after normalization (leading articles and trailing qualifiers stripped) and
   through the static alias table
3. reverse alias scan over every variant sharing the candidate's canonical name
4. substring fallback, only when enabled

Stages 1 to 3 are precise. The substring stage trades precision for coverage, so it
is optional, refuses ambiguous candidates and logs each match on the
``travelref.domain.resolver.fuzzy`` logger for audit.
"""

from __future__ import annotations

import logging
import re
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from travelref.domain.mappings import COUNTRY_NAME_ALIASES, LEADING_ARTICLES

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from travelref.domain.outcome import Document

log = logging.getLogger(__name__)
fuzzy_log = logging.getLogger(f"{__name__}.fuzzy")

DEFAULT_FUZZY_MIN_LENGTH: Final[int] = 4

_TRAILING_PARENTHETICAL_RE: Final = re.compile(r"\s+\(.*\)$")
_TRAILING_ARTICLE_RE: Final = re.compile(r",\s+the$")
_WHITESPACE_RE: Final = re.compile(r"\s+")


class MatchKind(StrEnum):
    EXACT = "exact"
    NORMALIZED = "normalized"
    ALIAS = "alias"
    FUZZY = "fuzzy"


@dataclass(slots=True, frozen=True)
class Match:
    document: Document
    kind: MatchKind
    matched_key: str

    @property
    def confident(self) -> bool:
        return self.kind is not MatchKind.FUZZY


def _lower(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip().lower()


@dataclass(slots=True)
class CanonicalResolver:
    """In-memory resolver over one collection of already-seeded canonical documents.

    Build it with :meth:`from_documents` once per stage; it is never shared between
    runs.
    """

    aliases: Mapping[str, str] = field(default_factory=dict[str, str])
    prefixes: Sequence[str] = ()
    fuzzy: bool = True
    fuzzy_min_length: int = DEFAULT_FUZZY_MIN_LENGTH
    label: str = "entity"
    counts: Counter[MatchKind] = field(default_factory=Counter[MatchKind])
    _index: dict[str, Document] = field(default_factory=dict[str, Document], init=False)
    _names: dict[str, Document] = field(default_factory=dict[str, Document], init=False)
    _variants: dict[str, list[str]] = field(default_factory=dict[str, list[str]], init=False)

    def __post_init__(self) -> None:
        variants: defaultdict[str, list[str]] = defaultdict(list)
        for variant, canonical in self.aliases.items():
            variants[canonical].append(variant)
        self._variants = dict(variants)

    @classmethod
    def from_documents(
        cls,
        documents: Iterable[Document],
        *,
        name_field: str = "name",
        code_fields: Sequence[str] = ("code",),
        aliases: Mapping[str, str] | None = None,
        prefixes: Sequence[str] = (),
        fuzzy: bool = True,
        fuzzy_min_length: int = DEFAULT_FUZZY_MIN_LENGTH,
        label: str = "entity",
    ) -> CanonicalResolver:
        resolver = cls(
            aliases=aliases or {},
            prefixes=prefixes,
            fuzzy=fuzzy,
            fuzzy_min_length=fuzzy_min_length,
            label=label,
        )
        for document in documents:
            resolver.add(document, name_field=name_field, code_fields=code_fields)
        return resolver

    def add(
        self,
        document: Document,
        *,
        name_field: str = "name",
        code_fields: Sequence[str] = ("code",),
    ) -> None:
        """Index ``document`` under its name, normalized name, alias target and codes.

        Keys already taken by an earlier document are left untouched.
        """

        name = document.get(name_field)
        if isinstance(name, str) and name.strip():
            lowered = _lower(name)
            keys = [lowered, self.normalize(lowered)]
            canonical = self.aliases.get(lowered)
            if canonical is not None:
                keys.append(canonical)
            for key in keys:
                if key:
                    self._index.setdefault(key, document)
                    self._names.setdefault(key, document)
        for code_field in code_fields:
            code = document.get(code_field)
            if isinstance(code, str) and code.strip():
                self._index.setdefault(code.strip().lower(), document)

    def __len__(self) -> int:
        return len(self._names)

    def normalize(self, text: str) -> str:
        normalized = _lower(text)
        stripped = True
        while stripped:
            stripped = False
            for prefix in self.prefixes:
                if normalized.startswith(prefix):
                    normalized = normalized[len(prefix) :]
                    stripped = True
        normalized = _TRAILING_PARENTHETICAL_RE.sub("", normalized)
        return _TRAILING_ARTICLE_RE.sub("", normalized).strip()

    def resolve(self, text: object) -> Match | None:
        if not isinstance(text, str) or not text.strip():
            return None
        match = self._resolve(_lower(text))
        if match is not None:
            self.counts[match.kind] += 1
        return match

    def resolve_document(self, text: object) -> Document | None:
        match = self.resolve(text)
        return match.document if match is not None else None

    def _resolve(self, candidate: str) -> Match | None:
        document = self._index.get(candidate)
        if document is not None:
            return Match(document, MatchKind.EXACT, candidate)

        normalized = self.normalize(candidate)
        document = self._index.get(normalized)
        if document is not None:
            return Match(document, MatchKind.NORMALIZED, normalized)

        for key in (candidate, normalized):
            canonical = self.aliases.get(key)
            if canonical is not None and canonical in self._index:
                return Match(self._index[canonical], MatchKind.ALIAS, canonical)

        canonical = self.aliases.get(candidate) or self.aliases.get(normalized)
        if canonical is None and candidate in self._variants:
            canonical = candidate
        if canonical is not None:
            for variant in self._variants.get(canonical, ()):
                document = self._index.get(variant)
                if document is not None:
                    return Match(document, MatchKind.ALIAS, variant)

        if self.fuzzy:
            return self._resolve_substring(candidate)
        return None

    def _resolve_substring(self, candidate: str) -> Match | None:
        if len(candidate) < self.fuzzy_min_length:
            return None
        hits: dict[int, tuple[str, Document]] = {}
        for name, document in self._names.items():
            if len(name) < self.fuzzy_min_length:
                continue
            if name in candidate or candidate in name:
                hits.setdefault(id(document), (name, document))
        if len(hits) != 1:
            if hits:
                fuzzy_log.info(
                    "Ambiguous %s %r matches %d candidates; left unresolved",
                    self.label,
                    candidate,
                    len(hits),
                )
            return None
        name, document = next(iter(hits.values()))
        fuzzy_log.info("Fuzzy %s match %r -> %r", self.label, candidate, name)
        return Match(document, MatchKind.FUZZY, name)


def country_resolver(
    countries: Iterable[Document],
    *,
    fuzzy: bool = True,
    fuzzy_min_length: int = DEFAULT_FUZZY_MIN_LENGTH,
) -> CanonicalResolver:
    """Resolver over country documents by name, alpha-2 and alpha-3 code."""

    return CanonicalResolver.from_documents(
        countries,
        code_fields=("code", "code3"),
        aliases=COUNTRY_NAME_ALIASES,
        prefixes=LEADING_ARTICLES,
        fuzzy=fuzzy,
        fuzzy_min_length=fuzzy_min_length,
        label="country",
    )
