"""
Precinct records and the registry that owns them.

The registry is the only store of precinct data. Everything else in the
package reads it through the lookups below and never mutates it.
"""

import collections.abc
import dataclasses
import enum
from typing import Any, Dict, FrozenSet, Hashable, Iterable, Iterator

import networkx as nx
import pandas as pd

from gerrymander.constants import ADJ_COL, DEM_COL, GOP_COL, ID_COL, POP_COL
from gerrymander.exceptions import PrecinctNotFound


class Party(enum.Enum):
    DEMOCRATIC = "D"
    REPUBLICAN = "R"


@dataclasses.dataclass
class Demographic:
    """Vote and population totals for a precinct or a growing district."""

    dem: int = 0
    rep: int = 0
    pop: int = 0

    def __add__(self, other: "Demographic") -> "Demographic":
        return Demographic(
            self.dem + other.dem, self.rep + other.rep, self.pop + other.pop
        )

    @property
    def total_votes(self) -> int:
        return self.dem + self.rep


@dataclasses.dataclass(frozen=True)
class Precinct:
    precinct_id: Hashable
    dem: int
    rep: int
    pop: int
    adjacent: FrozenSet[Hashable] = frozenset()

    @property
    def demographic(self) -> Demographic:
        return Demographic(self.dem, self.rep, self.pop)


class PrecinctRegistry:
    """
    Owning mapping from precinct id to its record, plus adjacency lookups.

    Adjacency is taken as declared by each precinct and assumed symmetric.
    Registration is idempotent: adding an id that is already present keeps
    the first record and does nothing else.
    """

    def __init__(self, precincts: Iterable[Precinct] = ()):
        self._precincts: Dict[Hashable, Precinct] = {}
        self._total_population = 0
        self._graph = None
        for precinct in precincts:
            self.add(precinct)

    def add(self, precinct: Precinct) -> bool:
        """
        Registers a precinct.

        Returns:
            True if the precinct was added, False if its id was already taken.
        """
        if precinct.precinct_id in self._precincts:
            return False
        self._precincts[precinct.precinct_id] = precinct
        self._total_population += precinct.pop
        self._graph = None
        return True

    def add_precinct(
        self,
        precinct_id: Hashable,
        dem: int,
        rep: int,
        pop: int,
        adjacent: Iterable[Hashable] = (),
    ) -> bool:
        return self.add(Precinct(precinct_id, dem, rep, pop, frozenset(adjacent)))

    def __len__(self) -> int:
        return len(self._precincts)

    def __contains__(self, precinct_id: Hashable) -> bool:
        return precinct_id in self._precincts

    def __iter__(self) -> Iterator[Precinct]:
        return iter(self._precincts.values())

    def contains(self, precinct_id: Hashable) -> bool:
        return precinct_id in self

    def total_population(self) -> int:
        return self._total_population

    def all_precinct_ids(self) -> FrozenSet[Hashable]:
        return frozenset(self._precincts)

    def get(self, precinct_id: Hashable) -> Precinct:
        try:
            return self._precincts[precinct_id]
        except KeyError:
            raise PrecinctNotFound(precinct_id) from None

    def demographics_of(self, precinct_id: Hashable) -> Demographic:
        return self.get(precinct_id).demographic

    def adjacent_ids_of(self, precinct_id: Hashable) -> FrozenSet[Hashable]:
        return self.get(precinct_id).adjacent

    def is_adjacent(self, precinct_id: Hashable, other_id: Hashable) -> bool:
        precinct = self._precincts.get(precinct_id)
        if precinct is None:
            return False
        return other_id in precinct.adjacent

    @property
    def graph(self) -> nx.Graph:
        """
        Undirected NetworkX view of the registry.

        Nodes carry dem/rep/pop attributes. Declared neighbors that are not
        registered are left out. The graph is rebuilt after registrations.
        """
        if self._graph is None:
            graph = nx.Graph()
            for precinct in self._precincts.values():
                graph.add_node(
                    precinct.precinct_id,
                    dem=precinct.dem,
                    rep=precinct.rep,
                    pop=precinct.pop,
                )
            graph.add_edges_from(
                (precinct.precinct_id, neighbor)
                for precinct in self._precincts.values()
                for neighbor in precinct.adjacent
                if neighbor in self._precincts
            )
            self._graph = graph
        return self._graph

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        id_column: str = ID_COL,
        dem_column: str = DEM_COL,
        rep_column: str = GOP_COL,
        pop_column: str = POP_COL,
        adjacency_column: str = ADJ_COL,
    ) -> "PrecinctRegistry":
        """
        Builds a registry from a precinct table.

        Args:
            df: One row per precinct. The adjacency column holds an iterable
                of neighboring precinct ids.
            id_column, dem_column, rep_column, pop_column, adjacency_column:
                Column names to read.

        Returns:
            A registry holding every row of the table. Duplicate ids keep the
            first row.
        """
        registry = cls()
        for row in df.to_dict("records"):
            adjacent = row[adjacency_column]
            if isinstance(adjacent, (str, bytes)) or not isinstance(
                adjacent, collections.abc.Iterable
            ):
                raise ValueError(
                    f"Adjacency of precinct {row[id_column]!r} must be a "
                    f"collection of ids, got {adjacent!r}"
                )
            registry.add_precinct(
                row[id_column],
                int(row[dem_column]),
                int(row[rep_column]),
                int(row[pop_column]),
                adjacent,
            )
        return registry

    def to_dataframe(self) -> pd.DataFrame:
        rows: Dict[str, Any] = {
            column: [] for column in (ID_COL, DEM_COL, GOP_COL, POP_COL, ADJ_COL)
        }
        for precinct in self._precincts.values():
            rows[ID_COL].append(precinct.precinct_id)
            rows[DEM_COL].append(precinct.dem)
            rows[GOP_COL].append(precinct.rep)
            rows[POP_COL].append(precinct.pop)
            rows[ADJ_COL].append(sorted(precinct.adjacent))
        return pd.DataFrame(rows)
