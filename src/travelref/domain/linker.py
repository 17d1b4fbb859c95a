"""Multi-key foreign key resolution against per-run lookup tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from travelref.domain.lookup import LookupTable
    from travelref.domain.outcome import Document


@dataclass(slots=True, frozen=True)
class KeyCandidate:
    """One ``(key space, value)`` attempt; ``None`` values are skipped."""

    space: str
    value: object


@dataclass(slots=True, frozen=True)
class Reference:
    """A foreign key of a dependent record.

    ``candidates`` are tried in order against ``table``; the first hit wins. An
    unresolved required reference rejects the record under ``reason``.
    """

    name: str
    table: LookupTable
    candidates: Sequence[KeyCandidate]
    required: bool = True
    reason: str = "reference_not_found"

    def resolve(self) -> Document | None:
        for candidate in self.candidates:
            document = self.table.get(candidate.space, candidate.value)
            if document is not None:
                return document
        return None


@dataclass(slots=True)
class LinkResult:
    resolved: dict[str, Document | None] = field(default_factory=dict[str, Document | None])
    missing: list[str] = field(default_factory=list[str])
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    def id_of(self, name: str) -> object:
        document = self.resolved.get(name)
        return document.get("id") if document is not None else None


def code_candidates(
    external_id: object, code: str | None, *, id_space: str = "openflights_id"
) -> list[KeyCandidate]:
    """Key spaces in priority order: external numeric id, IATA-shaped, ICAO-shaped code."""

    candidates = [KeyCandidate(id_space, external_id)]
    if code:
        normalized = code.strip().upper()
        candidates.append(KeyCandidate("iata", normalized))
        candidates.append(KeyCandidate("icao", normalized))
    return candidates


class CrossReferenceLinker:
    """Resolves every reference of one dependent record or rejects it as a whole."""

    def link(self, references: Sequence[Reference]) -> LinkResult:
        result = LinkResult()
        for reference in references:
            document = reference.resolve()
            result.resolved[reference.name] = document
            if document is None and reference.required:
                result.missing.append(reference.name)
                if result.reason is None:
                    result.reason = reference.reason
        return result

    def link_ids(self, references: Sequence[Reference]) -> tuple[Mapping[str, object], str | None]:
        """Shortcut returning ``{name: id}`` for resolved references plus the reject reason."""

        result = self.link(references)
        return {name: result.id_of(name) for name in result.resolved}, result.reason
