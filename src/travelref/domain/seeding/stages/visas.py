"""Visa requirements per passport/destination country pair."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Final

from travelref.domain.collection import Collection
from travelref.domain.lookup import upper_field_key
from travelref.domain.outcome import Outcome
from travelref.domain.ports.sources import Dataset
from travelref.domain.records import VisaRequirementRecord, decode
from travelref.domain.seeding.orchestrator import StageName

if TYPE_CHECKING:
    from travelref.domain.lookup import LookupTable
    from travelref.domain.outcome import StageStats
    from travelref.domain.seeding.context import SeedContext
    from travelref.domain.upsert import UpsertItem

_REQUIREMENTS: Final[dict[str, str]] = {
    "visa free": "visa_free",
    "visa-free": "visa_free",
    "visa on arrival": "visa_on_arrival",
    "visa-on-arrival": "visa_on_arrival",
    "e-visa": "evisa",
    "evisa": "evisa",
    "eta": "eta",
    "visa required": "visa_required",
    "visa-required": "visa_required",
    "no admission": "no_admission",
    "-1": "no_admission",
}


@dataclass(slots=True, frozen=True)
class VisaRequirement:
    requirement: str
    days: int | None = None


def normalize_requirement(raw: str | None) -> VisaRequirement | None:
    """Map a free-text requirement onto the fixed set.

    A positive integer is a visa-free stay of that many days.

    >>> normalize_requirement("90")
    VisaRequirement(requirement='visa_free', days=90)
    """

    if raw is None:
        return None
    text = raw.strip().lower()
    if text.isdigit() and int(text) > 0:
        return VisaRequirement("visa_free", int(text))
    requirement = _REQUIREMENTS.get(text)
    if requirement is None:
        return None
    return VisaRequirement(requirement)


def build_visa_requirement(
    record: VisaRequirementRecord, countries: LookupTable
) -> UpsertItem | Outcome:
    passport_code = record.passport.strip().upper()
    destination_code = record.destination.strip().upper()
    if passport_code == destination_code:
        return Outcome.skipped("self", detail=passport_code)

    passport = countries.get("code", passport_code)
    destination = countries.get("code", destination_code)
    if passport is None or destination is None:
        return Outcome.skipped("country_not_found", detail=f"{passport_code}-{destination_code}")

    normalized = normalize_requirement(record.requirement)
    if normalized is None:
        return Outcome.skipped("bad_requirement", detail=record.requirement)

    return (
        {"passport_country": passport["id"], "destination_country": destination["id"]},
        {"requirement": normalized.requirement, "days": normalized.days},
    )


class VisaRequirementsStage:
    name: ClassVar[StageName] = StageName.VISA_REQUIREMENTS
    collections: ClassVar[tuple[Collection, ...]] = (Collection.VISA_REQUIREMENTS,)
    depends_on: ClassVar[frozenset[StageName]] = frozenset({StageName.COUNTRIES})

    async def run(self, context: SeedContext) -> list[StageStats]:
        stats = context.stats("visa-requirements")
        if not await context.should_seed(Collection.VISA_REQUIREMENTS, stats):
            return [stats]

        rows = await context.sources.rows(Dataset.VISA_REQUIREMENTS)
        countries = await context.lookup(Collection.COUNTRIES, {"code": upper_field_key("code")})

        items: list[UpsertItem] = []
        for record in decode(rows, VisaRequirementRecord, stats=stats):
            built = build_visa_requirement(record, countries)
            if isinstance(built, Outcome):
                stats.record(built)
            else:
                items.append(built)

        engine = context.engine(stats)
        await engine.preload(
            Collection.VISA_REQUIREMENTS, ("passport_country", "destination_country")
        )
        await engine.upsert_many(
            Collection.VISA_REQUIREMENTS,
            items,
            batch_size=context.options.large_batch_size,
            duplicate_reason="duplicate_pair",
        )
        return [stats]
