"""Language code tables: ISO 639-2 to ISO 639-1 and source-specific code fixes."""

from __future__ import annotations

import re
from typing import Final

ISO_639_2_TO_1: Final[dict[str, str]] = {
    "aar": "aa",
    "abk": "ab",
    "afr": "af",
    "aka": "ak",
    "alb": "sq",
    "sqi": "sq",
    "amh": "am",
    "ara": "ar",
    "arg": "an",
    "arm": "hy",
    "hye": "hy",
    "asm": "as",
    "ava": "av",
    "ave": "ae",
    "aym": "ay",
    "aze": "az",
    "bak": "ba",
    "bam": "bm",
    "baq": "eu",
    "eus": "eu",
    "bel": "be",
    "ben": "bn",
    "bih": "bh",
    "bis": "bi",
    "bos": "bs",
    "bre": "br",
    "bul": "bg",
    "bur": "my",
    "mya": "my",
    "cat": "ca",
    "cha": "ch",
    "che": "ce",
    "chi": "zh",
    "zho": "zh",
    "chu": "cu",
    "chv": "cv",
    "cor": "kw",
    "cos": "co",
    "cre": "cr",
    "cze": "cs",
    "ces": "cs",
    "dan": "da",
    "div": "dv",
    "dut": "nl",
    "nld": "nl",
    "dzo": "dz",
    "eng": "en",
    "epo": "eo",
    "est": "et",
    "ewe": "ee",
    "fao": "fo",
    "fij": "fj",
    "fin": "fi",
    "fre": "fr",
    "fra": "fr",
    "fry": "fy",
    "ful": "ff",
    "geo": "ka",
    "kat": "ka",
    "ger": "de",
    "deu": "de",
    "gla": "gd",
    "gle": "ga",
    "glg": "gl",
    "glv": "gv",
    "gre": "el",
    "ell": "el",
    "grn": "gn",
    "guj": "gu",
    "hat": "ht",
    "hau": "ha",
    "heb": "he",
    "her": "hz",
    "hin": "hi",
    "hmo": "ho",
    "hrv": "hr",
    "hun": "hu",
    "ibo": "ig",
    "ice": "is",
    "isl": "is",
    "ido": "io",
    "iii": "ii",
    "iku": "iu",
    "ile": "ie",
    "ina": "ia",
    "ind": "id",
    "ipk": "ik",
    "ita": "it",
    "jav": "jv",
    "jpn": "ja",
    "kal": "kl",
    "kan": "kn",
    "kas": "ks",
    "kau": "kr",
    "kaz": "kk",
    "khm": "km",
    "kik": "ki",
    "kin": "rw",
    "kir": "ky",
    "kom": "kv",
    "kon": "kg",
    "kor": "ko",
    "kua": "kj",
    "kur": "ku",
    "lao": "lo",
    "lat": "la",
    "lav": "lv",
    "lim": "li",
    "lin": "ln",
    "lit": "lt",
    "ltz": "lb",
    "lub": "lu",
    "lug": "lg",
    "mac": "mk",
    "mkd": "mk",
    "mah": "mh",
    "mal": "ml",
    "mao": "mi",
    "mri": "mi",
    "mar": "mr",
    "may": "ms",
    "msa": "ms",
    "mlg": "mg",
    "mlt": "mt",
    "mon": "mn",
    "nau": "na",
    "nav": "nv",
    "nbl": "nr",
    "nde": "nd",
    "ndo": "ng",
    "nep": "ne",
    "nno": "nn",
    "nob": "nb",
    "nor": "no",
    "nya": "ny",
    "oci": "oc",
    "oji": "oj",
    "ori": "or",
    "orm": "om",
    "oss": "os",
    "pan": "pa",
    "per": "fa",
    "fas": "fa",
    "pli": "pi",
    "pol": "pl",
    "por": "pt",
    "pus": "ps",
    "que": "qu",
    "roh": "rm",
    "rum": "ro",
    "ron": "ro",
    "run": "rn",
    "rus": "ru",
    "sag": "sg",
    "san": "sa",
    "sin": "si",
    "slo": "sk",
    "slk": "sk",
    "slv": "sl",
    "sme": "se",
    "smo": "sm",
    "sna": "sn",
    "snd": "sd",
    "som": "so",
    "sot": "st",
    "spa": "es",
    "srd": "sc",
    "srp": "sr",
    "ssw": "ss",
    "sun": "su",
    "swa": "sw",
    "swe": "sv",
    "tah": "ty",
    "tam": "ta",
    "tat": "tt",
    "tel": "te",
    "tgk": "tg",
    "tgl": "tl",
    "tha": "th",
    "tib": "bo",
    "bod": "bo",
    "tir": "ti",
    "ton": "to",
    "tsn": "tn",
    "tso": "ts",
    "tuk": "tk",
    "tur": "tr",
    "twi": "tw",
    "uig": "ug",
    "ukr": "uk",
    "urd": "ur",
    "uzb": "uz",
    "ven": "ve",
    "vie": "vi",
    "vol": "vo",
    "wel": "cy",
    "cym": "cy",
    "wln": "wa",
    "wol": "wo",
    "xho": "xh",
    "yid": "yi",
    "yor": "yo",
    "zha": "za",
    "zul": "zu",
}

LANGUAGE_CODE_FIXES: Final[dict[str, str]] = {
    "ven": "ve",
    "vec": "ve",
    "scn": "sc",
    "nap": "na",
    "lmo": "lm",
    "lij": "lj",
    "eml": "em",
    "rgn": "rg",
    "fur": "fu",
    "lld": "ll",
    "srd": "sr",
    "pms": "pm",
    "zh-CN": "zh",
    "zh-TW": "zh",
    "no-NO": "no",
    "sv-SE": "sv",
    "da-DK": "da",
}

_PLAIN_CODE_RE: Final = re.compile(r"^[a-z]{2,3}$")
_REGION_SUFFIXED_RE: Final = re.compile(r"^([a-z]{2,3})-", re.IGNORECASE)


def fix_language_code(code: str) -> str:
    """Reduce a source language tag to a bare 2-3 letter code."""

    stripped = code.strip()
    fixed = LANGUAGE_CODE_FIXES.get(stripped)
    if fixed is not None:
        return fixed
    if _PLAIN_CODE_RE.match(stripped):
        return stripped
    match = _REGION_SUFFIXED_RE.match(stripped)
    if match is not None:
        return match.group(1).lower()
    return stripped[:2].lower()


def to_iso_639_1(code: str) -> str | None:
    """Map a 2- or 3-letter language code to ISO 639-1, or ``None`` when unknown."""

    lowered = code.strip().lower()
    if len(lowered) == 2:  # noqa: PLR2004
        return lowered
    return ISO_639_2_TO_1.get(lowered)
