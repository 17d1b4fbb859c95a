"""Static lookup tables translating between competing identifier spaces."""

from __future__ import annotations

from .cia_codes import CIA_CODE_TO_ISO, ISO_TO_CIA_CODE, cia_to_iso, iso_to_cia
from .country_names import COUNTRY_NAME_ALIASES, LEADING_ARTICLES
from .crime_countries import CRIME_INDEX_COUNTRY_CODES
from .languages import ISO_639_2_TO_1, LANGUAGE_CODE_FIXES, fix_language_code, to_iso_639_1
from .religions import RELIGION_NAME_ALIASES, RELIGIONS, ReligionSeed, canonical_religion_name

__all__ = [
    "CIA_CODE_TO_ISO",
    "COUNTRY_NAME_ALIASES",
    "CRIME_INDEX_COUNTRY_CODES",
    "ISO_639_2_TO_1",
    "ISO_TO_CIA_CODE",
    "LANGUAGE_CODE_FIXES",
    "LEADING_ARTICLES",
    "RELIGIONS",
    "RELIGION_NAME_ALIASES",
    "ReligionSeed",
    "canonical_religion_name",
    "cia_to_iso",
    "fix_language_code",
    "iso_to_cia",
    "to_iso_639_1",
]
