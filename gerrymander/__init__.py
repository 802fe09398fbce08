"""
Efficiency gap redistricting toolkit.

Splits an in-memory graph of voting precincts into contiguous,
population-balanced districts, scores plans with the Efficiency Gap, and
generates random or deliberately gerrymandered plans.

Modules:
- precincts: Precinct records and the PrecinctRegistry that owns them
- redistricting: Plan validation and efficiency gap scoring
- random_districts: District builders and the Districter plan generator
- data_loading: Bundled precinct fixtures
- plotting: Plan and score plots
- scenarios: Timed demo runs
"""

__version__ = "0.1.0"

from .constants import INVALID_SCORE, POPULATION_MARGIN
from .exceptions import (
    DegenerateInput,
    GenerationExhausted,
    GerrymanderError,
    InvalidDistrictCount,
    PrecinctNotFound,
)
from .precincts import Demographic, Party, Precinct, PrecinctRegistry
from .random_districts import Builder, Districter
from .redistricting import efficiency_gap, is_gerrymandered, is_valid_plan

__all__ = [
    "INVALID_SCORE",
    "POPULATION_MARGIN",
    "Builder",
    "DegenerateInput",
    "Demographic",
    "Districter",
    "GenerationExhausted",
    "GerrymanderError",
    "InvalidDistrictCount",
    "Party",
    "Precinct",
    "PrecinctNotFound",
    "PrecinctRegistry",
    "efficiency_gap",
    "is_gerrymandered",
    "is_valid_plan",
]
