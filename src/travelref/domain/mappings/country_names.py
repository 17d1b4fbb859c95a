"""Country name aliases shared by every name-based country lookup."""

from __future__ import annotations

from typing import Final

# variant (lower-case) -> canonical lower-case name
COUNTRY_NAME_ALIASES: Final[dict[str, str]] = {
    "united states": "united states",
    "united states of america": "united states",
    "usa": "united states",
    "us": "united states",
    "america": "united states",
    "united kingdom": "united kingdom",
    "uk": "united kingdom",
    "great britain": "united kingdom",
    "britain": "united kingdom",
    "england": "united kingdom",
    "burma": "myanmar",
    "macedonia": "north macedonia",
    "swaziland": "eswatini",
    "czech republic": "czechia",
    "turkey": "türkiye",
    "congo": "republic of the congo",
    "congo (brazzaville)": "republic of the congo",
    "congo-brazzaville": "republic of the congo",
    "republic of congo": "republic of the congo",
    "congo (kinshasa)": "democratic republic of the congo",
    "congo-kinshasa": "democratic republic of the congo",
    "dr congo": "democratic republic of the congo",
    "drc": "democratic republic of the congo",
    "congo (democratic republic)": "democratic republic of the congo",
    "zaire": "democratic republic of the congo",
    "cote d'ivoire": "côte d'ivoire",
    "ivory coast": "côte d'ivoire",
    "cote divoire": "côte d'ivoire",
    "south korea": "south korea",
    "korea, south": "south korea",
    "republic of korea": "south korea",
    "rok": "south korea",
    "north korea": "north korea",
    "korea, north": "north korea",
    "democratic peoples republic of korea": "north korea",
    "dprk": "north korea",
    "china": "china",
    "peoples republic of china": "china",
    "prc": "china",
    "mainland china": "china",
    "hong kong": "hong kong",
    "hong kong sar": "hong kong",
    "macau": "macao",
    "macao": "macao",
    "macao sar": "macao",
    "virgin islands": "united states virgin islands",
    "us virgin islands": "united states virgin islands",
    "british virgin islands": "british virgin islands",
    "netherlands antilles": "sint maarten",
    "curacao": "curaçao",
    "east timor": "timor-leste",
    "timor leste": "timor-leste",
    "sao tome and principe": "são tomé and príncipe",
    "sao tome & principe": "são tomé and príncipe",
    "st. tome and principe": "são tomé and príncipe",
    "st. lucia": "saint lucia",
    "st lucia": "saint lucia",
    "st. vincent and the grenadines": "saint vincent and the grenadines",
    "st vincent and the grenadines": "saint vincent and the grenadines",
    "st. kitts and nevis": "saint kitts and nevis",
    "st kitts and nevis": "saint kitts and nevis",
    "reunion": "réunion",
    "la reunion": "réunion",
    "svalbard": "svalbard and jan mayen",
    "saint helena": "saint helena, ascension and tristan da cunha",
    "palestine": "palestine",
    "palestinian territories": "palestine",
    "west bank": "palestine",
    "west bank and gaza": "palestine",
    "johnston atoll": "united states minor outlying islands",
    "wake island": "united states minor outlying islands",
    "midway islands": "united states minor outlying islands",
    "russia": "russia",
    "russian federation": "russia",
    "vatican": "vatican city",
    "vatican city state": "vatican city",
    "holy see": "vatican city",
    "micronesia": "micronesia",
    "federated states of micronesia": "micronesia",
    "fsm": "micronesia",
    "laos": "laos",
    "lao pdr": "laos",
    "lao people's democratic republic": "laos",
    "brunei": "brunei",
    "brunei darussalam": "brunei",
    "cape verde": "cabo verde",
    "gambia": "gambia",
    "the gambia": "gambia",
    "bahamas": "bahamas",
    "the bahamas": "bahamas",
    "netherlands": "netherlands",
    "the netherlands": "netherlands",
    "holland": "netherlands",
    "marshall islands": "marshall islands",
    "the marshall islands": "marshall islands",
    "solomon islands": "solomon islands",
    "the solomon islands": "solomon islands",
    "philippines": "philippines",
    "the philippines": "philippines",
    "maldives": "maldives",
    "the maldives": "maldives",
    "seychelles": "seychelles",
    "the seychelles": "seychelles",
    "comoros": "comoros",
    "the comoros": "comoros",
}

LEADING_ARTICLES: Final[tuple[str, ...]] = (
    "the ",
    "republic of ",
    "kingdom of ",
    "state of ",
    "commonwealth of ",
    "union of ",
)
