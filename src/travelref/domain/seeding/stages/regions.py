"""Administrative regions of each country."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Final

from travelref.domain.collection import Collection
from travelref.domain.lookup import upper_field_key
from travelref.domain.ports.sources import Dataset
from travelref.domain.records import RegionCountryRecord, decode
from travelref.domain.seeding.orchestrator import StageName

if TYPE_CHECKING:
    from travelref.domain.outcome import StageStats
    from travelref.domain.seeding.context import SeedContext
    from travelref.domain.upsert import UpsertItem

_STATE_COUNTRIES: Final = frozenset({"US", "IN"})
_PROVINCE_COUNTRIES: Final = frozenset({"CA", "CN"})
_AUSTRALIAN_TERRITORIES: Final = frozenset({"ACT", "NT"})


def infer_region_type(country_code: str, short_code: str | None) -> str:
    if country_code in _STATE_COUNTRIES:
        return "state"
    if country_code in _PROVINCE_COUNTRIES:
        return "province"
    if country_code == "AU":
        return "territory" if short_code in _AUSTRALIAN_TERRITORIES else "state"
    return "region"


class RegionsStage:
    name: ClassVar[StageName] = StageName.REGIONS
    collections: ClassVar[tuple[Collection, ...]] = (Collection.REGIONS,)
    depends_on: ClassVar[frozenset[StageName]] = frozenset({StageName.COUNTRIES})

    async def run(self, context: SeedContext) -> list[StageStats]:
        stats = context.stats("regions")
        if not await context.should_seed(Collection.REGIONS, stats):
            return [stats]

        rows = await context.sources.rows(Dataset.REGIONS)
        countries = await context.lookup(Collection.COUNTRIES, {"code": upper_field_key("code")})

        items: list[UpsertItem] = []
        for record in decode(rows, RegionCountryRecord, stats=stats):
            country_code = record.country_short_code.strip().upper()
            country = countries.get("code", country_code)
            if country is None:
                for _ in record.regions:
                    stats.skip(
                        "country_not_found",
                        detail=f"{country_code} ({record.country_name})",
                    )
                continue
            for region in record.regions:
                items.append(
                    (
                        {"country": country["id"], "name": region.name.strip()},
                        {
                            "code": region.short_code,
                            "type": infer_region_type(country_code, region.short_code),
                        },
                    )
                )

        engine = context.engine(stats)
        await engine.preload(Collection.REGIONS, ("country", "name"))
        await engine.upsert_many(
            Collection.REGIONS,
            items,
            batch_size=context.options.large_batch_size,
            duplicate_reason="duplicate_region",
        )
        return [stats]
