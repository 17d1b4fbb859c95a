"""Record-level outcomes and their per-stage aggregation."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

type Document = dict[str, Any]


class OutcomeKind(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass(slots=True, frozen=True, kw_only=True)
class Outcome:
    """Result of one record-level operation.

    Every operation that touches a single source record returns one of these instead
    of raising, so a bad row can never abort its batch.
    """

    kind: OutcomeKind
    reason: str | None = None
    detail: str | None = None
    document: Document | None = None

    @classmethod
    def created(cls, document: Document) -> Outcome:
        return cls(kind=OutcomeKind.CREATED, document=document)

    @classmethod
    def updated(cls, document: Document) -> Outcome:
        return cls(kind=OutcomeKind.UPDATED, document=document)

    @classmethod
    def skipped(
        cls,
        reason: str,
        *,
        detail: str | None = None,
        document: Document | None = None,
    ) -> Outcome:
        return cls(kind=OutcomeKind.SKIPPED, reason=reason, detail=detail, document=document)

    @classmethod
    def error(cls, detail: str, *, reason: str = "store_error") -> Outcome:
        return cls(kind=OutcomeKind.ERROR, reason=reason, detail=detail)

    @property
    def written(self) -> bool:
        return self.kind in {OutcomeKind.CREATED, OutcomeKind.UPDATED}


@dataclass(slots=True)
class StageStats:
    """Created/updated/skipped/error totals with a breakdown of reasons."""

    name: str
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    reasons: Counter[str] = field(default_factory=Counter[str])
    notes: Counter[str] = field(default_factory=Counter[str])
    error_details: list[str] = field(default_factory=list[str])
    max_error_details: int = 20

    def record(self, outcome: Outcome) -> Outcome:
        match outcome.kind:
            case OutcomeKind.CREATED:
                self.created += 1
            case OutcomeKind.UPDATED:
                self.updated += 1
            case OutcomeKind.SKIPPED:
                self.skipped += 1
                self.reasons[outcome.reason or "unspecified"] += 1
            case OutcomeKind.ERROR:
                self.errors += 1
                self.reasons[outcome.reason or "error"] += 1
                if outcome.detail and len(self.error_details) < self.max_error_details:
                    self.error_details.append(outcome.detail)
        return outcome

    def record_all(self, outcomes: Iterable[Outcome]) -> None:
        for outcome in outcomes:
            self.record(outcome)

    def skip(self, reason: str, *, detail: str | None = None) -> Outcome:
        return self.record(Outcome.skipped(reason, detail=detail))

    def note(self, label: str) -> None:
        """Count a non-skip event worth reporting, such as a fallback being used."""

        self.notes[label] += 1

    def count(self, reason: str) -> int:
        return self.reasons.get(reason, 0)

    def noted(self, label: str) -> int:
        return self.notes.get(label, 0)

    @property
    def total(self) -> int:
        return self.created + self.updated + self.skipped + self.errors

    def top_reasons(self, limit: int = 3) -> list[tuple[str, int]]:
        return self.reasons.most_common(limit)

    def summary(self) -> str:
        text = (
            f"{self.name}: created={self.created}, updated={self.updated}, "
            f"skipped={self.skipped}, errors={self.errors}"
        )
        top = self.top_reasons()
        if top:
            text += " (" + ", ".join(f"{reason}={count}" for reason, count in top) + ")"
        if self.notes:
            noted = ", ".join(f"{label}={count}" for label, count in self.notes.items())
            text += f" [{noted}]"
        return text
