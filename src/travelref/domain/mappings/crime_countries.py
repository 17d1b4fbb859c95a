"""Country names used by the organised crime index and their ISO alpha-2 codes."""

from __future__ import annotations

from typing import Final

CRIME_INDEX_COUNTRY_CODES: Final[dict[str, str]] = {
    "MYANMAR": "MM",
    "COLOMBIA": "CO",
    "MEXICO": "MX",
    "PARAGUAY": "PY",
    "CONGO, DEM. REP": "CD",
    "NIGERIA": "NG",
    "SOUTH AFRICA": "ZA",
    "IRAQ": "IQ",
    "AFGHANISTAN": "AF",
    "LEBANON": "LB",
    "ECUADOR": "EC",
    "SYRIA": "SY",
    "HONDURAS": "HN",
    "IRAN": "IR",
    "TURKEY": "TR",
    "KENYA": "KE",
    "PANAMA": "PA",
    "LIBYA": "LY",
    "RUSSIA": "RU",
    "CAMBODIA": "KH",
    "INDONESIA": "ID",
    "BRAZIL": "BR",
    "CENTRAL AFRICAN REPUBLIC": "CF",
    "VENEZUELA": "VE",
    "PHILIPPINES": "PH",
    "GUATEMALA": "GT",
    "NEPAL": "NP",
    "YEMEN": "YE",
    "UGANDA": "UG",
    "VIETNAM": "VN",
    "UKRAINE": "UA",
    "PERU": "PE",
    "CHINA": "CN",
    "SUDAN": "SD",
    "UNITED ARAB EMIRATES": "AE",
    "SOUTH SUDAN": "SS",
    "CAMEROON": "CM",
    "MALAYSIA": "MY",
    "SAUDI ARABIA": "SA",
    "ITALY": "IT",
    "SERBIA": "RS",
    "MOZAMBIQUE": "MZ",
    "TANZANIA": "TZ",
    "THAILAND": "TH",
    "SOMALIA": "SO",
    "LAOS": "LA",
    "PAKISTAN": "PK",
    "CÔTE D'IVOIRE": "CI",
    "GUYANA": "GY",
    "HAITI": "HT",
    "MALI": "ML",
    "BURKINA FASO": "BF",
    "EL SALVADOR": "SV",
    "MONTENEGRO": "ME",
    "SPAIN": "ES",
    "BELARUS": "BY",
    "BOSNIA AND HERZEGOVINA": "BA",
    "FRANCE": "FR",
    "GHANA": "GH",
    "JAMAICA": "JM",
    "INDIA": "IN",
    "UNITED KINGDOM": "GB",
    "NICARAGUA": "NI",
    "PAPUA NEW GUINEA": "PG",
    "NIGER": "NE",
    "ETHIOPIA": "ET",
    "UNITED STATES": "US",
    "BULGARIA": "BG",
    "MOLDOVA": "MD",
    "ANGOLA": "AO",
    "MADAGASCAR": "MG",
    "COSTA RICA": "CR",
    "KOREA, DPR": "KP",
    "SENEGAL": "SN",
    "CHAD": "TD",
    "LIBERIA": "LR",
    "ZIMBABWE": "ZW",
    "QATAR": "QA",
    "TAJIKISTAN": "TJ",
    "SLOVAKIA": "SK",
    "GREECE": "GR",
    "GERMANY": "DE",
    "BENIN": "BJ",
    "TOGO": "TG",
    "KUWAIT": "KW",
    "TRINIDAD AND TOBAGO": "TT",
    "CHILE": "CL",
    "ALBANIA": "AL",
    "CROATIA": "HR",
    "BANGLADESH": "BD",
    "GUINEA-BISSAU": "GW",
    "IRELAND": "IE",
    "EGYPT": "EG",
    "NORTH MACEDONIA": "MK",
    "DOMINICAN REPUBLIC": "DO",
    "ARGENTINA": "AR",
    "MALTA": "MT",
    "KOSOVO": "XK",
    "NETHERLANDS": "NL",
    "BAHRAIN": "BH",
    "BOLIVIA": "BO",
    "SIERRA LEONE": "SL",
    "UZBEKISTAN": "UZ",
    "AUSTRIA": "AT",
    "DENMARK": "DK",
}
