"""CIA World Factbook country codes and their ISO 3166-1 alpha-2 equivalents."""

from __future__ import annotations

from typing import Final

CIA_CODE_TO_ISO: Final[dict[str, str]] = {
    "aa": "AW",
    "ac": "AG",
    "ae": "AE",
    "af": "AF",
    "ag": "DZ",
    "aj": "AZ",
    "al": "AL",
    "am": "AM",
    "an": "AD",
    "ao": "AO",
    "ar": "AR",
    "as": "AU",
    "au": "AT",
    "av": "AI",
    "ax": "AX",
    "ay": "AQ",
    "ba": "BH",
    "bb": "BB",
    "bc": "BW",
    "bd": "BM",
    "be": "BE",
    "bf": "BS",
    "bg": "BD",
    "bh": "BZ",
    "bk": "BA",
    "bl": "BO",
    "bm": "MM",
    "bn": "BJ",
    "bo": "BY",
    "bp": "SB",
    "br": "BR",
    "bt": "BT",
    "bu": "BG",
    "bv": "BV",
    "bx": "BN",
    "by": "BI",
    "ca": "CA",
    "cb": "KH",
    "cc": "CC",
    "cd": "TD",
    "ce": "LK",
    "cf": "CG",
    "cg": "CD",
    "ch": "CN",
    "ci": "CL",
    "cj": "KY",
    "ck": "CK",
    "cm": "CM",
    "cn": "KM",
    "co": "CO",
    "cr": "CR",
    "cs": "CR",
    "ct": "CF",
    "cu": "CU",
    "cv": "CV",
    "cw": "CK",
    "cy": "CY",
    "cz": "CZ",
    "da": "DK",
    "dj": "DJ",
    "do": "DM",
    "dr": "DO",
    "dx": "DK",
    "ec": "EC",
    "ee": "EU",
    "eg": "EG",
    "ei": "IE",
    "ek": "GQ",
    "en": "EE",
    "er": "ER",
    "es": "SV",
    "et": "ET",
    "ez": "CZ",
    "fi": "FI",
    "fj": "FJ",
    "fk": "FK",
    "fm": "FM",
    "fo": "FO",
    "fp": "PF",
    "fr": "FR",
    "fs": "TF",
    "ga": "GM",
    "gb": "GA",
    "gd": "GD",
    "gg": "GE",
    "gh": "GH",
    "gi": "GI",
    "gj": "GD",
    "gk": "GG",
    "gl": "GL",
    "gm": "DE",
    "gp": "GP",
    "gq": "GU",
    "gr": "GR",
    "gt": "GT",
    "gv": "GN",
    "gy": "GY",
    "gz": "PS",
    "ha": "HT",
    "hk": "HK",
    "hm": "HM",
    "ho": "HN",
    "hr": "HR",
    "hu": "HU",
    "ic": "IS",
    "id": "ID",
    "im": "IM",
    "in": "IN",
    "io": "IO",
    "ip": "FK",
    "ir": "IR",
    "is": "IL",
    "it": "IT",
    "iv": "CI",
    "iz": "IQ",
    "ja": "JP",
    "je": "JE",
    "jm": "JM",
    "jn": "SJ",
    "jo": "JO",
    "jq": "UM",
    "ju": "UM",
    "ka": "KZ",
    "kb": "KG",
    "ke": "KE",
    "kg": "KG",
    "kn": "KP",
    "kr": "KI",
    "ks": "KR",
    "kt": "CX",
    "ku": "KW",
    "kv": "XK",
    "kz": "KZ",
    "la": "LA",
    "le": "LB",
    "lg": "LV",
    "lh": "LT",
    "li": "LR",
    "lo": "SK",
    "ls": "LI",
    "lt": "LS",
    "lu": "LU",
    "ly": "LY",
    "ma": "MG",
    "mb": "MQ",
    "mc": "MO",
    "md": "MD",
    "mf": "YT",
    "mg": "MN",
    "mh": "MS",
    "mi": "MW",
    "mj": "ME",
    "mk": "MK",
    "ml": "ML",
    "mn": "MC",
    "mo": "MA",
    "mp": "MU",
    "mq": "UM",
    "mr": "MR",
    "mt": "MT",
    "mu": "OM",
    "mv": "MV",
    "mx": "MX",
    "my": "MY",
    "mz": "MZ",
    "nc": "NC",
    "ne": "NU",
    "nf": "NF",
    "ng": "NE",
    "nh": "VU",
    "ni": "NG",
    "nk": "MK",
    "nl": "NL",
    "nn": "SX",
    "no": "NO",
    "np": "NP",
    "nr": "NR",
    "ns": "SR",
    "nt": "AN",
    "nu": "NI",
    "nz": "NZ",
    "od": "SS",
    "pa": "PY",
    "pc": "PN",
    "pe": "PE",
    "pf": "PF",
    "pg": "PL",
    "ph": "PH",
    "pk": "PK",
    "pl": "PL",
    "pm": "PA",
    "po": "PT",
    "pp": "PG",
    "ps": "PW",
    "pu": "GW",
    "qa": "QA",
    "rb": "RS",
    "re": "RE",
    "ri": "RS",
    "rm": "MH",
    "rn": "MF",
    "ro": "RO",
    "rp": "PH",
    "rq": "PR",
    "rs": "RU",
    "ru": "RU",
    "rw": "RW",
    "sa": "SA",
    "sb": "PM",
    "sc": "KN",
    "se": "SC",
    "sf": "ZA",
    "sg": "SN",
    "sh": "SH",
    "si": "SI",
    "sk": "SK",
    "sl": "SL",
    "sm": "SM",
    "sn": "SG",
    "so": "SO",
    "sp": "ES",
    "sr": "RS",
    "st": "LC",
    "su": "SD",
    "sv": "SE",
    "sw": "SE",
    "sx": "GS",
    "sy": "SY",
    "sz": "CH",
    "tb": "BL",
    "td": "TT",
    "te": "TF",
    "th": "TH",
    "ti": "TJ",
    "tk": "TC",
    "tl": "TK",
    "tn": "TO",
    "to": "TG",
    "tp": "ST",
    "ts": "TN",
    "tt": "TL",
    "tu": "TR",
    "tv": "TV",
    "tw": "TW",
    "tx": "TM",
    "tz": "TZ",
    "uc": "CW",
    "ug": "UG",
    "uk": "GB",
    "um": "UM",
    "up": "UA",
    "us": "US",
    "uv": "BF",
    "uy": "UY",
    "uz": "UZ",
    "vc": "VC",
    "ve": "VE",
    "vi": "VG",
    "vj": "VI",
    "vm": "VN",
    "vn": "VN",
    "vq": "VI",
    "vt": "VA",
    "vu": "VU",
    "wa": "NA",
    "we": "PS",
    "wf": "WF",
    "wi": "EH",
    "wq": "UM",
    "ws": "WS",
    "wz": "SZ",
    "xx": "XX",
    "ym": "YE",
    "yo": "YE",
    "za": "ZM",
    "zi": "ZW",
    "zn": "TW",
}


def _reverse_first_wins(mapping: dict[str, str]) -> dict[str, str]:
    reverse: dict[str, str] = {}
    for cia, iso in mapping.items():
        reverse.setdefault(iso, cia)
    return reverse


# Several ISO codes appear under more than one factbook code; the first listed is primary.
ISO_TO_CIA_CODE: Final[dict[str, str]] = _reverse_first_wins(CIA_CODE_TO_ISO)


def cia_to_iso(code: str | None) -> str | None:
    if not code:
        return None
    return CIA_CODE_TO_ISO.get(code.strip().lower())


def iso_to_cia(code: str | None) -> str | None:
    if not code:
        return None
    return ISO_TO_CIA_CODE.get(code.strip().upper())
