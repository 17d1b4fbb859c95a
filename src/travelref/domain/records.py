"""Typed raw records, one model per source format.

Source rows are decoded into these models right after reading so every stage works on
typed, partial data. Unknown columns are ignored and blank strings become ``None``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from travelref.domain.outcome import StageStats

log = logging.getLogger(__name__)

OPENFLIGHTS_NULL = "\\N"


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _openflights_null(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped or stripped == OPENFLIGHTS_NULL:
            return None
        return stripped
    return value


def _yes_flag(value: object) -> object:
    if isinstance(value, str):
        return value.strip().upper() == "Y"
    return value


class RawRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# --- base reference data -------------------------------------------------------------


class CurrencyRecord(RawRecord):
    code: str
    name: str
    symbol: str | None = None

    _normalize_blanks = field_validator("symbol", mode="before")(_blank_to_none)


class LanguageRecord(RawRecord):
    code: str
    name: str
    native_name: str | None = Field(default=None, alias="nativeName")

    _normalize_blanks = field_validator("native_name", mode="before")(_blank_to_none)


class TimezoneRecord(RawRecord):
    name: str
    alternative_name: str | None = Field(default=None, alias="alternativeName")
    raw_offset_in_minutes: int = Field(default=0, alias="rawOffsetInMinutes")

    _normalize_blanks = field_validator("alternative_name", mode="before")(_blank_to_none)


class DestinationMetadataRecord(RawRecord):
    name: str
    slug: str
    description: str | None = None
    icon: str | None = None

    _normalize_blanks = field_validator("description", "icon", mode="before")(_blank_to_none)


# --- countries -----------------------------------------------------------------------


class CountryNamePayload(RawRecord):
    common: str
    official: str | None = None


class DialingCodePayload(RawRecord):
    root: str | None = None
    suffixes: list[str] = Field(default_factory=list)

    _normalize_root = field_validator("root", mode="before")(_blank_to_none)


class CountryCurrencyPayload(RawRecord):
    name: str | None = None
    symbol: str | None = None


class CountryRecord(RawRecord):
    """One entry of the world-countries dataset."""

    name: CountryNamePayload
    cca2: str
    cca3: str | None = None
    ccn3: str | None = None
    region: str | None = None
    subregion: str | None = None
    capital: list[str] = Field(default_factory=list)
    tld: list[str] = Field(default_factory=list)
    idd: DialingCodePayload = Field(default_factory=DialingCodePayload)
    demonyms: dict[str, dict[str, str]] = Field(default_factory=dict)
    currencies: dict[str, CountryCurrencyPayload] = Field(default_factory=dict)
    languages: dict[str, str] = Field(default_factory=dict)
    borders: list[str] = Field(default_factory=list)

    _normalize_blanks = field_validator("cca3", "ccn3", "region", "subregion", mode="before")(
        _blank_to_none
    )

    @model_validator(mode="before")
    @classmethod
    def _normalize_compact_name(cls, value: object) -> object:
        if isinstance(value, Mapping):
            mapping_value = cast(Mapping[str, object], value)
            if isinstance(mapping_value.get("name"), str):
                data: dict[str, object] = dict(mapping_value)
                data["name"] = {"common": mapping_value["name"]}
                return data
            return mapping_value
        return value

    @field_validator("currencies", "demonyms", "languages", mode="before")
    @classmethod
    def _null_to_empty(cls, value: object) -> object:
        return {} if value is None else value

    @property
    def demonym(self) -> str | None:
        english = self.demonyms.get("eng") or {}
        return english.get("m") or english.get("f")


class CountryExtraRecord(RawRecord):
    """Supplementary per-country currency/language fallbacks and timezone names."""

    code: str
    currency: str | None = None
    language: str | None = None
    timezones: list[str] = Field(default_factory=list)

    _normalize_blanks = field_validator("currency", "language", mode="before")(_blank_to_none)


class RegionEntry(RawRecord):
    name: str
    short_code: str | None = Field(default=None, alias="shortCode")

    _normalize_blanks = field_validator("short_code", mode="before")(_blank_to_none)


class RegionCountryRecord(RawRecord):
    country_short_code: str = Field(alias="countryShortCode")
    country_name: str | None = Field(default=None, alias="countryName")
    regions: list[RegionEntry] = Field(default_factory=list)


# --- airports ------------------------------------------------------------------------


class AirportCodeRecord(RawRecord):
    """Row of the airport-codes CSV extract."""

    ident: str | None = None
    type: str | None = None
    name: str
    elevation_ft: float | None = None
    continent: str | None = None
    iso_country: str | None = None
    iso_region: str | None = None
    municipality: str | None = None
    icao_code: str | None = None
    iata_code: str | None = None
    coordinates: str | None = None

    _normalize_blanks = field_validator(
        "ident",
        "type",
        "elevation_ft",
        "continent",
        "iso_country",
        "iso_region",
        "municipality",
        "icao_code",
        "iata_code",
        "coordinates",
        mode="before",
    )(_blank_to_none)


class AirportTimezoneRecord(RawRecord):
    code: str
    timezone: str


# --- visas and indicators ------------------------------------------------------------


class VisaRequirementRecord(RawRecord):
    passport: str = Field(alias="Passport")
    destination: str = Field(alias="Destination")
    requirement: str | None = Field(default=None, alias="Requirement")

    _normalize_blanks = field_validator("requirement", mode="before")(_blank_to_none)


class CriminalityScoreRecord(RawRecord):
    country: str
    rank: int | None = None
    score: float
    delta: float = 0.0

    @field_validator("delta", mode="before")
    @classmethod
    def _null_delta(cls, value: object) -> object:
        return 0.0 if value is None else value


class CriminalMarketScoreRecord(RawRecord):
    country: str
    average_score: float = 0.0
    average_delta: float | None = None
    human_trafficking_score: float = 0.0
    human_trafficking_delta: float | None = None
    human_smuggling_score: float = 0.0
    extortion_protection_score: float = 0.0
    arms_trafficking_score: float = 0.0
    arms_trafficking_delta: float | None = None
    counterfeit_goods_score: float = 0.0
    flora_crimes_score: float = 0.0
    fauna_crimes_score: float = 0.0
    non_renewable_resource_crimes_score: float = 0.0
    heroin_trade_score: float = 0.0
    cocaine_trade_score: float = 0.0
    cannabis_trade_score: float = 0.0
    synthetic_drug_trade_score: float = 0.0
    cyber_dependent_crimes_score: float = 0.0
    cyber_dependent_crimes_delta: float | None = None
    financial_crimes_score: float = 0.0
    financial_crimes_delta: float | None = None


class CrimeDataRecord(RawRecord):
    criminality_scores: list[CriminalityScoreRecord] = Field(default_factory=list)
    criminal_market_scores: list[CriminalMarketScoreRecord] = Field(default_factory=list)


class AdvisoryRecord(RawRecord):
    """Feed item, HTML table row or cached advisory entry."""

    title: str | None = None
    description: str | None = None
    link: str | None = None
    pub_date: str | None = Field(default=None, alias="pubDate")
    country_code: str | None = Field(default=None, alias="code")
    level: int | None = None

    _normalize_blanks = field_validator(
        "title", "description", "link", "pub_date", "country_code", mode="before"
    )(_blank_to_none)


class FactbookDocument(RawRecord):
    """Factbook country document; sections stay nested ``{"text": ...}`` mappings."""

    introduction: dict[str, Any] = Field(default_factory=dict, alias="Introduction")
    geography: dict[str, Any] = Field(default_factory=dict, alias="Geography")
    people: dict[str, Any] = Field(default_factory=dict, alias="People and Society")
    government: dict[str, Any] = Field(default_factory=dict, alias="Government")
    economy: dict[str, Any] = Field(default_factory=dict, alias="Economy")
    energy: dict[str, Any] = Field(default_factory=dict, alias="Energy")
    communications: dict[str, Any] = Field(default_factory=dict, alias="Communications")
    transnational: dict[str, Any] = Field(default_factory=dict, alias="Transnational Issues")

    def text(self, section: str, *path: str) -> str | None:
        """Return the ``text`` leaf at ``section/path``; ``None`` when any step is missing."""

        node: object = getattr(self, section)
        for key in path:
            if not isinstance(node, Mapping):
                return None
            node = cast(Mapping[str, object], node).get(key)
        if isinstance(node, Mapping):
            node = cast(Mapping[str, object], node).get("text")
        if isinstance(node, str) and node.strip():
            return node.strip()
        return None


# --- OpenFlights ---------------------------------------------------------------------


class OpenFlightsAirlineRecord(RawRecord):
    id: int
    name: str | None = None
    alias: str | None = None
    iata: str | None = None
    icao: str | None = None
    callsign: str | None = None
    country: str | None = None
    active: bool = False

    _normalize_nulls = field_validator(
        "name", "alias", "iata", "icao", "callsign", "country", mode="before"
    )(_openflights_null)
    _parse_active = field_validator("active", mode="before")(_yes_flag)


class OpenFlightsAirportRecord(RawRecord):
    id: int
    name: str | None = None
    city: str | None = None
    country: str | None = None
    iata: str | None = None
    icao: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    altitude: float | None = None
    utc_offset: float | None = None
    dst: str | None = None
    tz: str | None = None
    type: str | None = None
    source: str | None = None

    _normalize_nulls = field_validator(
        "name",
        "city",
        "country",
        "iata",
        "icao",
        "latitude",
        "longitude",
        "altitude",
        "utc_offset",
        "dst",
        "tz",
        "type",
        "source",
        mode="before",
    )(_openflights_null)


class OpenFlightsRouteRecord(RawRecord):
    airline: str | None = None
    airline_id: int | None = None
    source_airport: str | None = None
    source_airport_id: int | None = None
    destination_airport: str | None = None
    destination_airport_id: int | None = None
    codeshare: bool = False
    stops: int = 0
    equipment: str | None = None

    _normalize_nulls = field_validator(
        "airline",
        "airline_id",
        "source_airport",
        "source_airport_id",
        "destination_airport",
        "destination_airport_id",
        "equipment",
        mode="before",
    )(_openflights_null)
    _parse_codeshare = field_validator("codeshare", mode="before")(_yes_flag)

    @field_validator("stops", mode="before")
    @classmethod
    def _default_stops(cls, value: object) -> object:
        cleaned = _openflights_null(value)
        if cleaned is None:
            return 0
        try:
            return int(cast(str, cleaned))
        except (TypeError, ValueError):
            return 0


# --- decoding ------------------------------------------------------------------------


@dataclass(slots=True)
class DecodedRecords[TRecord: RawRecord]:
    """Lazily validates raw rows into ``model`` instances.

    Rows that fail validation are skipped and recorded on ``stats`` (when given) under
    the ``invalid_record`` reason.
    """

    rows: Iterable[Mapping[str, object]]
    model: type[TRecord]
    stats: StageStats | None = None
    invalid: int = field(default=0, init=False)

    def __iter__(self) -> Iterator[TRecord]:
        for row in self.rows:
            try:
                yield self.model.model_validate(row)
            except ValidationError as exc:
                self.invalid += 1
                log.debug("Invalid %s row skipped: %s", self.model.__name__, exc)
                if self.stats is not None:
                    self.stats.skip("invalid_record", detail=str(exc).splitlines()[0])


def decode[TRecord: RawRecord](
    rows: Iterable[Mapping[str, object]],
    model: type[TRecord],
    *,
    stats: StageStats | None = None,
) -> DecodedRecords[TRecord]:
    return DecodedRecords(rows=rows, model=model, stats=stats)
