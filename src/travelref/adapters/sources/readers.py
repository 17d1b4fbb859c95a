"""Text -> row parsers for every dataset format."""

from __future__ import annotations

import csv
import io
import json
import logging
import re
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING, Final, cast

from bs4 import BeautifulSoup

from travelref.domain.errors import SourceUnavailableError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from bs4 import Tag

log = logging.getLogger(__name__)

_ADVISORY_LEVEL_RE: Final = re.compile(r"level\s*([1-4])", re.IGNORECASE)


def parse_json(text: str, *, dataset: str) -> object:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise SourceUnavailableError(f"{dataset}: invalid JSON: {exc}", dataset=dataset) from exc


def json_rows(text: str, *, dataset: str) -> list[Mapping[str, object]]:
    """Top-level JSON array of objects; non-object entries are dropped."""

    payload = parse_json(text, dataset=dataset)
    if not isinstance(payload, list):
        raise SourceUnavailableError(f"{dataset}: expected a JSON array", dataset=dataset)
    rows = cast("list[object]", payload)
    return [cast("Mapping[str, object]", row) for row in rows if isinstance(row, dict)]


def json_document(text: str, *, dataset: str) -> Mapping[str, object]:
    payload = parse_json(text, dataset=dataset)
    if not isinstance(payload, dict):
        raise SourceUnavailableError(f"{dataset}: expected a JSON object", dataset=dataset)
    return cast("Mapping[str, object]", payload)


def csv_rows(text: str) -> list[Mapping[str, object]]:
    return list(csv.DictReader(io.StringIO(text.lstrip("\ufeff"))))


def dat_rows(text: str, columns: Sequence[str]) -> list[Mapping[str, object]]:
    """Headerless CSV; short rows are padded with ``None``."""

    rows: list[Mapping[str, object]] = []
    for values in csv.reader(io.StringIO(text)):
        if not values:
            continue
        padded = [*values, *([None] * (len(columns) - len(values)))]
        rows.append(dict(zip(columns, padded, strict=False)))
    return rows


def _child_text(item: ET.Element, name: str) -> str | None:
    child = item.find(name)
    if child is None or child.text is None:
        return None
    return child.text.strip() or None


def rss_items(text: str) -> list[Mapping[str, object]]:
    """``<item>`` entries of an RSS feed as advisory rows."""

    try:
        root = ET.fromstring(text)  # noqa: S314
    except ET.ParseError as exc:
        log.warning("Advisory feed is not valid XML: %s", exc)
        return []
    return [
        {
            "title": _child_text(item, "title"),
            "description": _child_text(item, "description"),
            "link": _child_text(item, "link"),
            "pubDate": _child_text(item, "pubDate"),
        }
        for item in root.iter("item")
    ]


def advisory_table_rows(html: str) -> list[Mapping[str, object]]:
    """Rows of the State Department advisory table: country link, level, date."""

    soup = BeautifulSoup(html, "html.parser")
    rows: list[Mapping[str, object]] = []
    for tr in soup.find_all("tr"):
        cells = cast("list[Tag]", tr.find_all("td"))
        if len(cells) < 2:  # noqa: PLR2004
            continue
        title = cells[0].get_text(" ", strip=True)
        level_text = cells[1].get_text(" ", strip=True)
        anchor = cells[0].find("a")
        level = _ADVISORY_LEVEL_RE.search(level_text)
        rows.append(
            {
                "title": title,
                "description": level_text,
                "link": anchor.get("href") if anchor is not None else None,
                "pubDate": cells[2].get_text(" ", strip=True) if len(cells) > 2 else None,  # noqa: PLR2004
                "level": int(level.group(1)) if level is not None else None,
            }
        )
    return rows
