"""
This module contains the plan validation and efficiency gap scoring logic.
"""

from typing import FrozenSet, Hashable, Iterable, List, Optional

import networkx as nx
import pandas as pd

from gerrymander.constants import INVALID_SCORE, POPULATION_MARGIN
from gerrymander.exceptions import DegenerateInput, InvalidDistrictCount
from gerrymander.precincts import Demographic, PrecinctRegistry
from gerrymander.utils import dem_wasted, district_winner, rep_wasted

District = FrozenSet[Hashable]
Plan = List[District]


def as_plan(plan: Iterable[Iterable[Hashable]]) -> Plan:
    """Normalizes any iterable of id collections into a list of frozensets."""
    return [frozenset(district) for district in plan]


def check_district_count(registry: PrecinctRegistry, num_districts: int) -> None:
    if num_districts <= 0 or num_districts > len(registry):
        raise InvalidDistrictCount(
            f"Number of districts must be between 1 and {len(registry)}, "
            f"got {num_districts}"
        )


def district_demographic(
    registry: PrecinctRegistry, district: Iterable[Hashable]
) -> Demographic:
    """Sums the votes and population of every precinct in a district."""
    total = Demographic()
    for precinct_id in district:
        total = total + registry.demographics_of(precinct_id)
    return total


def is_continuous(registry: PrecinctRegistry, district: Iterable[Hashable]) -> bool:
    """
    Checks whether every precinct of a district can be reached from any other
    one through adjacencies that stay inside the district.

    Adjacency is read as undirected: a link declared by either precinct
    joins the two.

    Raises:
        PrecinctNotFound: The district holds an unregistered precinct.
    """
    district = frozenset(district)
    if not district:
        return False
    for precinct_id in district:
        # The graph view would silently drop unknown ids
        registry.get(precinct_id)
    return nx.is_connected(registry.graph.subgraph(district))


def is_valid_plan(
    registry: PrecinctRegistry,
    plan: Iterable[Iterable[Hashable]],
    margin: float = POPULATION_MARGIN,
    num_districts: Optional[int] = None,
) -> bool:
    """
    Checks a plan for continuity, population balance and full coverage.

    Args:
        registry: The precincts being districted.
        plan: Collection of districts, each a collection of precinct ids.
        margin: Allowed fractional deviation of a district's population from
                the mean district population (bounds inclusive).
        num_districts: If given, the plan must have exactly this many
                       districts.

    Returns:
        True if every district is continuous and balanced, and every
        registered precinct sits in exactly one district.

    Raises:
        InvalidDistrictCount: The plan has no districts.
        PrecinctNotFound: The plan references an unregistered precinct.
    """
    districts = as_plan(plan)
    if not districts:
        raise InvalidDistrictCount("A plan needs at least one district")
    if num_districts is not None and len(districts) != num_districts:
        return False

    mean = registry.total_population() / len(districts)
    unassigned = set(registry.all_precinct_ids())

    for district in districts:
        if not district:
            return False

        # Population first so unknown ids fail loudly before the graph walk
        district_pop = district_demographic(registry, district).pop
        if not is_continuous(registry, district):
            return False
        if district_pop > mean * (1 + margin) or district_pop < mean * (1 - margin):
            return False

        # Assigned twice
        if not district <= unassigned:
            return False
        unassigned -= district

    return not unassigned


def efficiency_gap(
    registry: PrecinctRegistry,
    plan: Iterable[Iterable[Hashable]],
    margin: float = POPULATION_MARGIN,
) -> int:
    """
    Scores how disproportionate a plan is using the Efficiency Gap.

    Wasted votes are every vote for the losing side plus every vote for the
    winner beyond a bare majority. The score is

        100 * |dem wasted - rep wasted| / total votes

    rounded down. See
    https://www.quantamagazine.org/the-mathematics-behind-gerrymandering-20170404/

    Returns:
        The score in [0, 100], or INVALID_SCORE if the plan is not valid at
        ``margin``.

    Raises:
        DegenerateInput: The plan's precincts hold no votes.
    """
    districts = as_plan(plan)
    if not districts or not is_valid_plan(registry, districts, margin):
        return INVALID_SCORE

    dem_waste = 0
    rep_waste = 0
    total_votes = 0
    for district in districts:
        demographic = district_demographic(registry, district)
        dem_waste += dem_wasted(demographic.dem, demographic.rep)
        rep_waste += rep_wasted(demographic.dem, demographic.rep)
        total_votes += demographic.total_votes

    if total_votes == 0:
        raise DegenerateInput("Cannot score a plan with no votes cast")
    return 100 * abs(dem_waste - rep_waste) // total_votes


def is_gerrymandered(
    registry: PrecinctRegistry,
    plan: Iterable[Iterable[Hashable]],
    threshold: int,
    margin: float = POPULATION_MARGIN,
) -> bool:
    """Returns whether a plan's efficiency gap is above ``threshold``.

    Invalid plans are never gerrymandered.
    """
    score = efficiency_gap(registry, plan, margin)
    if score == INVALID_SCORE:
        return False
    return score > threshold


def district_summary(
    registry: PrecinctRegistry, plan: Iterable[Iterable[Hashable]]
) -> pd.DataFrame:
    """
    Tabulates each district's votes, population, wasted votes and winner.

    The plan is not validated; this is a reporting helper.
    """
    rows = []
    for i, district in enumerate(as_plan(plan)):
        demographic = district_demographic(registry, district)
        rows.append(
            {
                "district": i,
                "n_precincts": len(district),
                "pop": demographic.pop,
                "dem": demographic.dem,
                "rep": demographic.rep,
                "dem_wasted": dem_wasted(demographic.dem, demographic.rep),
                "rep_wasted": rep_wasted(demographic.dem, demographic.rep),
                "winner": district_winner(demographic).value,
            }
        )
    return pd.DataFrame(
        rows,
        columns=[
            "district",
            "n_precincts",
            "pop",
            "dem",
            "rep",
            "dem_wasted",
            "rep_wasted",
            "winner",
        ],
    ).set_index("district")
