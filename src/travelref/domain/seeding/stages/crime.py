"""Organised crime index scores and the per-indicator trends derived from their deltas."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from travelref.domain.collection import Collection
from travelref.domain.lookup import upper_field_key
from travelref.domain.mappings import CRIME_INDEX_COUNTRY_CODES
from travelref.domain.ports.sources import Dataset
from travelref.domain.records import CrimeDataRecord

if TYPE_CHECKING:
    from travelref.domain.lookup import LookupTable
    from travelref.domain.outcome import Document, StageStats
    from travelref.domain.records import CriminalityScoreRecord, CriminalMarketScoreRecord
    from travelref.domain.resolver import CanonicalResolver
    from travelref.domain.seeding.context import SeedContext
    from travelref.domain.upsert import UpsertItem

log = logging.getLogger(__name__)

CRIME_INDEX_YEAR: Final = 2024
TREND_THRESHOLD: Final = 0.05
MIN_SCORE: Final = 0.0
MAX_SCORE: Final = 10.0


class Trend(StrEnum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


@dataclass(slots=True, frozen=True)
class IndicatorChange:
    indicator: str
    current: float
    change: float

    @property
    def previous(self) -> float:
        return self.current - self.change


def classify_trend(change: float) -> Trend:
    if change > TREND_THRESHOLD:
        return Trend.INCREASING
    if change < -TREND_THRESHOLD:
        return Trend.DECREASING
    return Trend.STABLE


def clamp_score(value: float) -> float:
    return max(MIN_SCORE, min(MAX_SCORE, value))


def _mean(*values: float) -> float:
    return round(sum(values) / len(values), 2)


def market_payload(market: CriminalMarketScoreRecord | None) -> dict[str, float]:
    if market is None:
        return {}
    return {
        "human_trafficking": market.human_trafficking_score,
        "human_smuggling": market.human_smuggling_score,
        "extortion_protection": market.extortion_protection_score,
        "arms_trafficking": market.arms_trafficking_score,
        "counterfeiting": market.counterfeit_goods_score,
        "illicit_drugs": _mean(
            market.heroin_trade_score,
            market.cocaine_trade_score,
            market.cannabis_trade_score,
            market.synthetic_drug_trade_score,
        ),
        "environmental_crimes": _mean(
            market.flora_crimes_score,
            market.fauna_crimes_score,
            market.non_renewable_resource_crimes_score,
        ),
        "financial_crimes": market.financial_crimes_score,
        "cyber_crimes": market.cyber_dependent_crimes_score,
        "heroin_trade": market.heroin_trade_score,
        "synthetic_drug_trade": market.synthetic_drug_trade_score,
    }


def indicator_changes(
    score: CriminalityScoreRecord, market: CriminalMarketScoreRecord | None
) -> list[IndicatorChange]:
    """Indicators whose delta is non-zero; market indicators need market data."""

    changes = [IndicatorChange("Overall Criminality", score.score, score.delta)]
    if market is not None:
        changes.extend(
            [
                IndicatorChange(
                    "Human Trafficking",
                    market.human_trafficking_score,
                    market.human_trafficking_delta or 0.0,
                ),
                IndicatorChange(
                    "Arms Trafficking",
                    market.arms_trafficking_score,
                    market.arms_trafficking_delta or 0.0,
                ),
                IndicatorChange("Drug Trade", market.average_score, market.average_delta or 0.0),
                IndicatorChange(
                    "Financial Crimes",
                    market.financial_crimes_score,
                    market.financial_crimes_delta or 0.0,
                ),
                IndicatorChange(
                    "Cyber Crimes",
                    market.cyber_dependent_crimes_score,
                    market.cyber_dependent_crimes_delta or 0.0,
                ),
            ]
        )
    return [change for change in changes if change.change != 0]


def trend_payload(change: IndicatorChange) -> Document:
    previous = clamp_score(change.previous)
    current = clamp_score(change.current)
    change_percent = round((change.change / previous) * 100, 2) if previous else None
    return {
        "category": "markets",
        "previous_score": round(previous, 2),
        "current_score": round(current, 2),
        "trend": classify_trend(change.change),
        "change_percent": change_percent,
        "previous_year": CRIME_INDEX_YEAR - 1,
    }


def resolve_crime_country(
    name: str, countries: LookupTable, resolver: CanonicalResolver
) -> Document | None:
    """Crime index spelling -> ISO via the bundled table, else the name resolver."""

    code = CRIME_INDEX_COUNTRY_CODES.get(name.strip().upper())
    if code is not None:
        country = countries.get("code", code)
        if country is not None:
            return country
    return resolver.resolve_document(name)


async def seed_crime_data(context: SeedContext) -> list[StageStats]:
    scores = context.stats("crime-index-scores")
    trends = context.stats("crime-trends")
    if not await context.should_seed(Collection.CRIME_INDEX_SCORES, scores):
        return [scores]

    raw = await context.sources.document(Dataset.CRIME)
    if raw is None:
        scores.skip("document_not_found", detail=Dataset.CRIME)
        return [scores, trends]
    try:
        data = CrimeDataRecord.model_validate(raw)
    except ValidationError as exc:
        scores.skip("invalid_record", detail=str(exc).splitlines()[0])
        return [scores, trends]

    countries = await context.lookup(Collection.COUNTRIES, {"code": upper_field_key("code")})
    resolver = await context.country_resolver()
    markets = {market.country: market for market in data.criminal_market_scores}

    score_items: list[UpsertItem] = []
    trend_items: list[UpsertItem] = []
    for score in data.criminality_scores:
        country = resolve_crime_country(score.country, countries, resolver)
        if country is None:
            log.warning("No country for crime index entry %r", score.country)
            scores.skip("country_not_found", detail=score.country)
            continue
        market = markets.get(score.country)
        score_items.append(
            (
                {"country": country["id"], "year": CRIME_INDEX_YEAR},
                {
                    "criminality_score": score.score,
                    "rank": score.rank,
                    "criminal_markets": market_payload(market),
                },
            )
        )
        if market is None:
            continue
        for change in indicator_changes(score, market):
            trend_items.append(
                (
                    {
                        "country": country["id"],
                        "indicator": change.indicator,
                        "year": CRIME_INDEX_YEAR,
                    },
                    trend_payload(change),
                )
            )

    score_engine = context.engine(scores)
    await score_engine.preload(Collection.CRIME_INDEX_SCORES, ("country", "year"))
    await score_engine.upsert_many(
        Collection.CRIME_INDEX_SCORES,
        score_items,
        batch_size=context.options.batch_size,
        duplicate_reason="duplicate_country",
    )

    trend_engine = context.engine(trends)
    await trend_engine.preload(Collection.CRIME_TRENDS, ("country", "indicator", "year"))
    await trend_engine.upsert_many(
        Collection.CRIME_TRENDS,
        trend_items,
        batch_size=context.options.batch_size,
        duplicate_reason="duplicate_indicator",
    )
    return [scores, trends]
