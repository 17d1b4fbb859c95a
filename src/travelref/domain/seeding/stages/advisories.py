"""Travel advisories from the State Department feed, one per country tag."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Final

from bs4 import BeautifulSoup

from travelref.domain.collection import Collection
from travelref.domain.lookup import upper_field_key
from travelref.domain.normalizers import clean_text
from travelref.domain.outcome import Outcome
from travelref.domain.ports.sources import Dataset
from travelref.domain.records import AdvisoryRecord, decode

if TYPE_CHECKING:
    from travelref.domain.lookup import LookupTable
    from travelref.domain.outcome import StageStats
    from travelref.domain.resolver import CanonicalResolver
    from travelref.domain.seeding.context import SeedContext
    from travelref.domain.upsert import UpsertItem

log = logging.getLogger(__name__)

MAX_DESCRIPTION_LENGTH: Final = 500
MIN_TITLE_LENGTH: Final = 5
MIN_TAG_LENGTH: Final = 2
DEFAULT_THREAT_LEVEL: Final = 1

# feed markup that leaks into item titles
_NON_ADVISORY_MARKERS: Final = ("iparsys", "image", "menu", "NAME")
_TAG_RE: Final = re.compile(r"^(.+?)\s*Travel Advisory", re.IGNORECASE)
_TAG_LEVEL_SUFFIX_RE: Final = re.compile(r"\s*-\s*level\s*\d+.*$", re.IGNORECASE)
_LEVEL_RE: Final = re.compile(r"\blevel\s*([1-4])\s*:", re.IGNORECASE)
_LEVEL_PHRASES: Final[tuple[tuple[str, int], ...]] = (
    ("do not travel", 4),
    ("reconsider travel", 3),
    ("exercise increased caution", 2),
    ("exercise normal precautions", 1),
)


def is_advisory_title(title: str | None) -> bool:
    if title is None or len(title.strip()) < MIN_TITLE_LENGTH:
        return False
    return not any(marker in title for marker in _NON_ADVISORY_MARKERS)


def country_tag(title: str) -> str | None:
    """``"Burma (Myanmar) Travel Advisory"`` -> ``"Burma (Myanmar)"``."""

    match = _TAG_RE.match(title.strip())
    tag = match.group(1) if match is not None else title
    tag = _TAG_LEVEL_SUFFIX_RE.sub("", tag).strip()
    if len(tag) < MIN_TAG_LENGTH:
        return None
    return tag


def threat_level(text: str) -> int:
    """Level from an explicit ``Level N:`` marker, else from the advisory wording."""

    match = _LEVEL_RE.search(text)
    if match is not None:
        return int(match.group(1))
    lowered = text.lower()
    for phrase, level in _LEVEL_PHRASES:
        if phrase in lowered:
            return level
    return DEFAULT_THREAT_LEVEL


def strip_html(value: str | None) -> str | None:
    if not value:
        return None
    text = BeautifulSoup(value, "html.parser").get_text(" ")
    return clean_text(text, max_length=MAX_DESCRIPTION_LENGTH)


def build_advisory(
    record: AdvisoryRecord,
    *,
    countries: LookupTable,
    resolver: CanonicalResolver,
) -> UpsertItem | Outcome:
    title = (record.title or "").strip()
    if not is_advisory_title(title):
        return Outcome.skipped("not_an_advisory", detail=title)
    tag = country_tag(title)
    if tag is None:
        return Outcome.skipped("missing_country_tag", detail=title)

    description = strip_html(record.description)
    level = record.level or threat_level(f"{title} {description or ''}")

    country = None
    if record.country_code:
        country = countries.get("code", record.country_code.upper())
    if country is None:
        country = resolver.resolve_document(tag)
    if country is None:
        return Outcome.skipped("country_not_found", detail=tag)
    tag = str(country["name"])

    return (
        {"country_tag": tag},
        {
            "title": f"{tag} Travel Advisory",
            "country": country["id"],
            "threat_level": level,
            "description": description,
            "link": record.link,
            "pub_date": record.pub_date,
            "category": "advisory",
            "is_active": True,
        },
    )


async def seed_travel_advisories(context: SeedContext) -> list[StageStats]:
    stats = context.stats("travel-advisories")
    if not await context.should_seed(Collection.TRAVEL_ADVISORIES, stats):
        return [stats]

    rows = await context.sources.rows(Dataset.TRAVEL_ADVISORIES)
    countries = await context.lookup(Collection.COUNTRIES, {"code": upper_field_key("code")})
    resolver = await context.country_resolver()

    items: list[UpsertItem] = []
    for record in decode(rows, AdvisoryRecord, stats=stats):
        built = build_advisory(record, countries=countries, resolver=resolver)
        if isinstance(built, Outcome):
            stats.record(built)
        else:
            items.append(built)

    engine = context.engine(stats)
    await engine.preload(Collection.TRAVEL_ADVISORIES, ("country_tag",))
    await engine.upsert_many(
        Collection.TRAVEL_ADVISORIES,
        items,
        batch_size=context.options.batch_size,
        duplicate_reason="duplicate_country_tag",
    )
    return [stats]
