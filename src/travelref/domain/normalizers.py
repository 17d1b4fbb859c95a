"""Free-text field normalizers.

Every function here takes one loosely-typed source value and returns a typed value or
``None``. Malformed input never raises; callers treat ``None`` as "field absent".
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Final

_QUALIFIERS_RE: Final = re.compile(
    r"\b(?:approximately|approx\.|about|around|nearly|almost|over|more than|less than|"
    r"up to|at least|roughly|est\.|estimated)\b",
    re.IGNORECASE,
)
_NUMBER_RE: Final = re.compile(r"(?<![\w.])(-?\d[\d,]*(?:\.\d+)?|-?\.\d+)")
_MULTIPLIER_RE: Final = re.compile(r"^\s*(million|billion|trillion)\b", re.IGNORECASE)
_MULTIPLIERS: Final[dict[str, float]] = {
    "million": 1e6,
    "billion": 1e9,
    "trillion": 1e12,
}
_PERCENT_RE: Final = re.compile(r"(-?\d+(?:\.\d+)?)\s*%")

_DECIMAL_PAIR_RE: Final = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")
_DMS_RE: Final = re.compile(
    r"(\d{1,3})\s+(\d{1,2})(?:\s+\d{1,2})?\s*([NS])\s*,?\s*(\d{1,3})\s+(\d{1,2})(?:\s+\d{1,2})?\s*([EW])",
    re.IGNORECASE,
)

_MONTHS: Final[dict[str, int]] = {
    "january": 1,
    "jan": 1,
    "february": 2,
    "feb": 2,
    "march": 3,
    "mar": 3,
    "april": 4,
    "apr": 4,
    "may": 5,
    "june": 6,
    "jun": 6,
    "july": 7,
    "jul": 7,
    "august": 8,
    "aug": 8,
    "september": 9,
    "sept": 9,
    "sep": 9,
    "october": 10,
    "oct": 10,
    "november": 11,
    "nov": 11,
    "december": 12,
    "dec": 12,
}
_DAY_MONTH_YEAR_RE: Final = re.compile(r"\b(\d{1,2})\s+([A-Za-z]+)\.?,?\s+(\d{4})\b")
_MONTH_YEAR_RE: Final = re.compile(r"\b([A-Za-z]+)\.?,?\s+(\d{4})\b")
_YEAR_RE: Final = re.compile(r"\b(\d{4})\b")
_MIN_YEAR: Final = 1000
_MAX_YEAR: Final = 3000

_INDEPENDENCE_FROM_RE: Final = re.compile(r"\bfrom\s+(.+?)(?:\s*[()]|;|$)", re.IGNORECASE)
_PARENTHETICAL_RE: Final = re.compile(r"\s*\([^)]*\)")
_GROUP_PERCENT_FIRST_RE: Final = re.compile(r"^(-?\d+(?:\.\d+)?)\s*%\s+(.+)$")
_GROUP_NAME_FIRST_RE: Final = re.compile(r"^(.+?)\s+(-?\d+(?:\.\d+)?)\s*%")
_VIRTUALLY_ALL_RE: Final = re.compile(r"\b(?:virtually|nearly|almost)\s+all\b", re.IGNORECASE)
_NOTE_RE: Final = re.compile(r"\bnote:", re.IGNORECASE)
_WHITESPACE_RE: Final = re.compile(r"\s+")


@dataclass(slots=True, frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(slots=True, frozen=True)
class PercentageGroup:
    name: str
    percentage: float


def _finite(value: float) -> float | None:
    return value if math.isfinite(value) else None


def parse_number(value: object) -> float | None:
    """Parse the first number in ``value``.

    Qualifier words ("approximately", "over", ...) and unit suffixes are ignored and a
    trailing million/billion/trillion multiplies the result.

    >>> parse_number("approximately 1.2 million sq km")
    1200000.0
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return _finite(float(value))
    if not isinstance(value, str):
        return None

    text = _QUALIFIERS_RE.sub(" ", value)
    match = _NUMBER_RE.search(text)
    if match is None:
        return None
    raw = match.group(1).replace(",", "")
    try:
        number = float(raw)
    except ValueError:
        return None

    multiplier = _MULTIPLIER_RE.match(text[match.end() :])
    if multiplier is not None:
        number *= _MULTIPLIERS[multiplier.group(1).lower()]
    return _finite(number)


def parse_integer(value: object) -> int | None:
    number = parse_number(value)
    if number is None:
        return None
    return round(number)


def parse_percentage(value: object) -> float | None:
    """Return the first ``N%`` token, falling back to :func:`parse_number`."""

    if isinstance(value, str):
        match = _PERCENT_RE.search(value)
        if match is not None:
            return _finite(float(match.group(1)))
    return parse_number(value)


def parse_coordinates(value: object) -> Coordinates | None:
    """Parse ``"lat, lon"`` decimals or degree/minute/hemisphere text."""

    if not isinstance(value, str):
        return None

    decimal = _DECIMAL_PAIR_RE.match(value)
    if decimal is not None:
        latitude = float(decimal.group(1))
        longitude = float(decimal.group(2))
    else:
        dms = _DMS_RE.search(value)
        if dms is None:
            return None
        latitude = int(dms.group(1)) + int(dms.group(2)) / 60
        longitude = int(dms.group(4)) + int(dms.group(5)) / 60
        if dms.group(3).upper() == "S":
            latitude = -latitude
        if dms.group(6).upper() == "W":
            longitude = -longitude

    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        return None
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):  # noqa: PLR2004
        return None
    return Coordinates(latitude=latitude, longitude=longitude)


def _safe_date(year: int, month: int, day: int) -> date | None:
    if not _MIN_YEAR <= year <= _MAX_YEAR:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date(value: object) -> date | None:
    """Parse ``"D Month YYYY"``, ``"Month YYYY"`` or a bare ``"YYYY"``.

    Returns ``None`` whenever the text does not yield a real calendar date, so prose
    such as "a long time ago" never turns into an invalid date downstream.
    """

    if not isinstance(value, str) or not value.strip():
        return None

    for match in _DAY_MONTH_YEAR_RE.finditer(value):
        month = _MONTHS.get(match.group(2).lower())
        if month is None:
            continue
        # invalid day/month combination: no fallback to a coarser pattern
        return _safe_date(int(match.group(3)), month, int(match.group(1)))

    for match in _MONTH_YEAR_RE.finditer(value):
        month = _MONTHS.get(match.group(1).lower())
        if month is None:
            continue
        parsed = _safe_date(int(match.group(2)), month, 1)
        if parsed is not None:
            return parsed

    year = _YEAR_RE.search(value)
    if year is not None:
        return _safe_date(int(year.group(1)), 1, 1)
    return None


def parse_independence_from(value: object) -> str | None:
    """Extract the party independence was gained from ("... from Spain (...)")."""

    if not isinstance(value, str):
        return None
    match = _INDEPENDENCE_FROM_RE.search(value)
    if match is None:
        return None
    party = match.group(1).strip().rstrip(".,")
    return party or None


def _clean_group_name(name: str) -> str:
    cleaned = _PARENTHETICAL_RE.sub("", name)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned)
    return cleaned.strip(" .;:-")


def parse_percentage_groups(value: object) -> list[PercentageGroup]:
    """Split ``"83% Sunni, 17% Shia"`` into ordered (name, percentage) groups.

    Text without any percentage yields a single group at 0 rather than being dropped.
    """

    if not isinstance(value, str) or not value.strip():
        return []

    segments = [segment.strip() for segment in re.split(r"[;,]", value) if segment.strip()]
    if not segments:
        return []

    if _VIRTUALLY_ALL_RE.search(segments[0]) and not _PERCENT_RE.search(segments[0]):
        name = _clean_group_name(_VIRTUALLY_ALL_RE.sub("", segments[0]))
        return [PercentageGroup(name=name, percentage=99.0)] if name else []

    groups: list[PercentageGroup] = []
    for segment in segments:
        if _NOTE_RE.search(segment):
            break
        match = _GROUP_PERCENT_FIRST_RE.match(segment)
        if match is not None:
            name, percentage = match.group(2), float(match.group(1))
        else:
            match = _GROUP_NAME_FIRST_RE.match(segment)
            if match is None:
                continue
            name, percentage = match.group(1), float(match.group(2))
        cleaned = _clean_group_name(name)
        if cleaned and percentage > 0:
            groups.append(PercentageGroup(name=cleaned, percentage=percentage))

    if groups:
        return groups

    first = segments[0]
    if _NOTE_RE.search(first):
        return []
    cleaned = _clean_group_name(first)
    return [PercentageGroup(name=cleaned, percentage=0.0)] if cleaned else []


def parse_equipment(value: object) -> list[str]:
    """Whitespace separated aircraft codes; empty input is an empty list."""

    if not isinstance(value, str):
        return []
    return value.split()


def clean_text(value: object, *, max_length: int | None = None) -> str | None:
    """Collapse whitespace, drop blanks and optionally cap the length with an ellipsis."""

    if not isinstance(value, str):
        return None
    text = _WHITESPACE_RE.sub(" ", value).strip()
    if not text:
        return None
    if max_length is not None and len(text) > max_length:
        text = text[: max_length - 3].rstrip() + "..."
    return text


def slugify(value: str) -> str:
    """Lower-case and replace runs of ``/``, whitespace and ``_`` with ``-``."""

    return re.sub(r"[/\s_]+", "-", value.strip().lower())


def format_utc_offset(minutes: int) -> str:
    """Format an offset in minutes as ``+HH:MM`` / ``-HH:MM``."""

    sign = "-" if minutes < 0 else "+"
    hours, remainder = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{remainder:02d}"
