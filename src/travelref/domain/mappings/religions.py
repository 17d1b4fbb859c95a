"""Bundled religion taxonomy and the factbook spellings that map onto it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(slots=True, frozen=True)
class ReligionSeed:
    name: str
    description: str
    parent: str | None = None


RELIGIONS: Final[tuple[ReligionSeed, ...]] = (
    ReligionSeed("Christianity", "Abrahamic religion based on the teachings of Jesus Christ"),
    ReligionSeed("Catholic", "Largest denomination of Christianity", "Christianity"),
    ReligionSeed("Protestant", "Denominations originating from the Reformation", "Christianity"),
    ReligionSeed("Orthodox", "Eastern Orthodox Christianity", "Christianity"),
    ReligionSeed("Anglican", "Church of England and related churches", "Protestant"),
    ReligionSeed("Baptist", "Protestant denomination emphasizing baptism", "Protestant"),
    ReligionSeed("Methodist", "Protestant denomination founded by John Wesley", "Protestant"),
    ReligionSeed("Lutheran", "Protestant denomination following Martin Luther", "Protestant"),
    ReligionSeed("Presbyterian", "Reformed Protestant tradition", "Protestant"),
    ReligionSeed("Pentecostal", "Protestant movement emphasizing the Holy Spirit", "Protestant"),
    ReligionSeed("Evangelical", "Protestant movement emphasizing conversion", "Protestant"),
    ReligionSeed("Coptic", "Egyptian Christian tradition", "Christianity"),
    ReligionSeed("Maronite", "Eastern Catholic Church primarily in Lebanon", "Catholic"),
    ReligionSeed("Islam", "Abrahamic religion based on the teachings of Muhammad"),
    ReligionSeed("Sunni Islam", "Largest denomination of Islam", "Islam"),
    ReligionSeed("Shia Islam", "Second largest denomination of Islam", "Islam"),
    ReligionSeed("Sufi", "Mystical tradition within Islam", "Islam"),
    ReligionSeed("Ibadi", "Branch of Islam dominant in Oman", "Islam"),
    ReligionSeed("Ahmadiyya", "Islamic revival movement", "Islam"),
    ReligionSeed("Judaism", "Abrahamic religion of the Jewish people"),
    ReligionSeed("Hinduism", "Ancient religion originating in India"),
    ReligionSeed("Buddhism", "Religion based on the teachings of the Buddha"),
    ReligionSeed("Theravada", "School of Buddhism", "Buddhism"),
    ReligionSeed("Mahayana", "School of Buddhism", "Buddhism"),
    ReligionSeed("Tibetan Buddhism", "Buddhism practiced in Tibet", "Buddhism"),
    ReligionSeed("Sikhism", "Religion founded by Guru Nanak"),
    ReligionSeed("Jainism", "Ancient Indian religion"),
    ReligionSeed("Taoism", "Chinese philosophical religion"),
    ReligionSeed("Confucianism", "Chinese ethical and philosophical system"),
    ReligionSeed("Shinto", "Indigenous religion of Japan"),
    ReligionSeed("Baha'i", "Religion emphasizing the unity of all religions"),
    ReligionSeed("Zoroastrianism", "Ancient Persian religion"),
    ReligionSeed("Druze", "Monotheistic religion in the Middle East"),
    ReligionSeed("Yazidi", "Ancient religion primarily in Iraq"),
    ReligionSeed("Traditional Beliefs", "Indigenous African spiritual practices"),
    ReligionSeed("Indigenous Beliefs", "Indigenous spiritual practices"),
    ReligionSeed("Animism", "Belief that natural objects have spirits"),
    ReligionSeed("Vodou", "Religion practiced in Haiti"),
    ReligionSeed("Folk Religion", "Traditional folk beliefs"),
    ReligionSeed("Chinese Folk Religion", "Traditional Chinese religious practices", "Folk Religion"),
    ReligionSeed("Atheism", "Does not believe in deities"),
    ReligionSeed("None", "No religious affiliation"),
    ReligionSeed("Other", "Other religious beliefs"),
    ReligionSeed("Unspecified", "Religious affiliation not stated"),
)

# factbook spelling -> bundled religion name
RELIGION_NAME_ALIASES: Final[dict[str, str]] = {
    "christian": "Christianity",
    "christians": "Christianity",
    "roman catholic": "Catholic",
    "roman catholics": "Catholic",
    "catholics": "Catholic",
    "greek orthodox": "Orthodox",
    "eastern orthodox": "Orthodox",
    "orthodox christian": "Orthodox",
    "protestants": "Protestant",
    "muslim": "Islam",
    "muslims": "Islam",
    "sunni": "Sunni Islam",
    "sunni muslim": "Sunni Islam",
    "sunni muslims": "Sunni Islam",
    "shia": "Shia Islam",
    "shiite": "Shia Islam",
    "shia muslim": "Shia Islam",
    "shia muslims": "Shia Islam",
    "jewish": "Judaism",
    "jews": "Judaism",
    "hindu": "Hinduism",
    "hindus": "Hinduism",
    "buddhist": "Buddhism",
    "buddhists": "Buddhism",
    "sikh": "Sikhism",
    "animist": "Animism",
    "atheist": "Atheism",
    "folk religion": "Folk Religion",
    "traditional": "Traditional Beliefs",
    "indigenous beliefs": "Indigenous Beliefs",
    "none": "None",
    "other": "Other",
    "unspecified": "Unspecified",
}

MAX_RELIGION_NAME_LENGTH: Final = 100


def canonical_religion_name(name: str) -> str | None:
    """Map a factbook religion label onto the bundled taxonomy spelling."""

    cleaned = " ".join(name.replace("<", "").replace(">", "").replace('"', "").split())
    if not cleaned:
        return None
    return RELIGION_NAME_ALIASES.get(cleaned.lower(), cleaned)[:MAX_RELIGION_NAME_LENGTH]
