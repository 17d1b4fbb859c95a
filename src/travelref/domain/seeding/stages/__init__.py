"""Concrete seed stages in dependency order."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .airports import AirportsStage
from .countries import CountriesStage
from .destinations import DestinationMetadataStage
from .indicators import DerivedIndicatorsStage
from .openflights import AirlinesAndRoutesStage
from .reference import BaseReferenceDataStage
from .regions import RegionsStage
from .visas import VisaRequirementsStage

if TYPE_CHECKING:
    from travelref.domain.seeding.orchestrator import SeedStage


def default_stages() -> list[SeedStage]:
    return [
        BaseReferenceDataStage(),
        CountriesStage(),
        RegionsStage(),
        AirportsStage(),
        DestinationMetadataStage(),
        VisaRequirementsStage(),
        DerivedIndicatorsStage(),
        AirlinesAndRoutesStage(),
    ]


__all__ = [
    "AirlinesAndRoutesStage",
    "AirportsStage",
    "BaseReferenceDataStage",
    "CountriesStage",
    "DerivedIndicatorsStage",
    "DestinationMetadataStage",
    "RegionsStage",
    "VisaRequirementsStage",
    "default_stages",
]
