"""
District builders and the rejection-sampling loops that turn them into
valid (and optionally gerrymandered) plans.
"""

import enum
import time
from typing import Callable, Hashable, Optional, Set

import numpy as np
from tqdm import trange

from gerrymander.constants import MAX_ATTEMPTS, POPULATION_MARGIN
from gerrymander.exceptions import GenerationExhausted
from gerrymander.precincts import Demographic, Party, PrecinctRegistry
from gerrymander.redistricting import (
    District,
    Plan,
    check_district_count,
    efficiency_gap,
    is_gerrymandered,
    is_valid_plan,
)
from gerrymander.utils import shuffled, wasted_vote_gap


class Builder(enum.Enum):
    RANDOM = "random"
    BIASED = "biased"


def grow_random_district(
    registry: PrecinctRegistry,
    seed_id: Hashable,
    free_ids: Set[Hashable],
    target_pop: float,
    rng: np.random.Generator,
) -> District:
    """
    Grows a district depth-first through randomly ordered adjacencies.

    Each precinct's neighbors are tried in a freshly shuffled order and every
    neighbor that is still free gets explored before backtracking. Growth
    stops as soon as the district population reaches ``target_pop``. Because
    it always pushes through a single link, the districts come out long and
    snakey, which is what makes these plans useful for gerrymander search.

    Args:
        registry: The precincts being districted.
        seed_id: Precinct to start from.
        free_ids: Precincts not yet in any district. Consumed in place.
        target_pop: Population at which the district is complete.
        rng: Source of randomness.

    Returns:
        The precinct ids of the new district.
    """
    district = set()
    district_pop = 0

    def visit(precinct_id):
        nonlocal district_pop
        district.add(precinct_id)
        free_ids.discard(precinct_id)
        district_pop += registry.demographics_of(precinct_id).pop
        return iter(shuffled(registry.adjacent_ids_of(precinct_id), rng))

    # Explicit stack of neighbor iterators instead of recursion
    stack = [visit(seed_id)]
    while stack and district_pop < target_pop:
        neighbors = stack[-1]
        for neighbor in neighbors:
            if neighbor in free_ids:
                stack.append(visit(neighbor))
                break
        else:
            stack.pop()

    return frozenset(district)


def grow_biased_district(
    registry: PrecinctRegistry,
    seed_id: Hashable,
    free_ids: Set[Hashable],
    target_pop: float,
    favored_party: Party,
    rng: np.random.Generator,
) -> District:
    """
    Grows a district greedily toward the largest wasted-vote advantage for
    ``favored_party``.

    At each step every free precinct bordering the district is scored by the
    wasted-vote differential the district would have with it added, and the
    best one joins. Ties are settled by a coin flip between the current best
    and the tied candidate, in sorted id order. The district stops at
    ``target_pop`` or when no free precinct borders it, whichever comes
    first, so it may end up under target.
    """
    district = set()
    demographic = Demographic()
    frontier: Set[Hashable] = set()
    current = seed_id

    while True:
        district.add(current)
        free_ids.discard(current)
        demographic = demographic + registry.demographics_of(current)
        if demographic.pop >= target_pop:
            break

        frontier |= registry.adjacent_ids_of(current)
        frontier = {precinct_id for precinct_id in frontier if precinct_id in free_ids}
        if not frontier:
            break

        best_id = None
        best_gap = None
        for candidate in sorted(frontier):
            combined = demographic + registry.demographics_of(candidate)
            gap = wasted_vote_gap(combined.dem, combined.rep, favored_party)
            if best_id is None or gap > best_gap:
                best_id, best_gap = candidate, gap
            elif gap == best_gap and rng.random() < 0.5:
                best_id = candidate
        current = best_id

    return frozenset(district)


class Districter:
    """
    Builds whole plans by repeated random construction.

    Every generator is rejection sampling: it builds a complete candidate
    plan, checks it, and starts over from scratch if it fails. The loops are
    bounded by ``max_attempts`` and, optionally, by ``time_limit`` seconds
    per public call; running out raises GenerationExhausted.
    """

    def __init__(
        self,
        registry: PrecinctRegistry,
        margin: float = POPULATION_MARGIN,
        max_attempts: int = MAX_ATTEMPTS,
        time_limit: Optional[float] = None,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        verbose: bool = False,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.registry = registry
        self.margin = margin
        self.max_attempts = max_attempts
        self.time_limit = time_limit
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.verbose = verbose
        # Attempts used by the most recent successful generation
        self.last_attempts = 0

    # --- Evaluation ---

    def is_valid_plan(self, plan, margin: Optional[float] = None) -> bool:
        if margin is None:
            margin = self.margin
        return is_valid_plan(self.registry, plan, margin)

    def score(self, plan) -> int:
        return efficiency_gap(self.registry, plan, self.margin)

    def is_gerrymandered(self, plan, threshold: int) -> bool:
        return is_gerrymandered(self.registry, plan, threshold, self.margin)

    # --- Construction ---

    def build_plan(
        self,
        num_districts: int,
        builder: Builder = Builder.RANDOM,
        favored_party: Optional[Party] = None,
    ) -> Plan:
        """
        Makes a single, unchecked attempt at a plan.

        Precincts are visited in a random order; each one that is still free
        seeds a new district grown by the chosen builder up to the mean
        district population.
        """
        check_district_count(self.registry, num_districts)
        if builder is Builder.BIASED and favored_party is None:
            raise ValueError("The biased builder needs a favored party")

        target_pop = self.registry.total_population() / num_districts
        free_ids = set(self.registry.all_precinct_ids())

        districts = []
        for seed_id in shuffled(free_ids, self.rng):
            if seed_id not in free_ids:
                continue
            if builder is Builder.BIASED:
                district = grow_biased_district(
                    self.registry,
                    seed_id,
                    free_ids,
                    target_pop,
                    favored_party,
                    self.rng,
                )
            else:
                district = grow_random_district(
                    self.registry, seed_id, free_ids, target_pop, self.rng
                )
            districts.append(district)
        return districts

    def generate_plan(
        self,
        num_districts: int,
        builder: Builder = Builder.RANDOM,
        favored_party: Optional[Party] = None,
    ) -> Plan:
        """
        Generates plans until one is valid.

        Args:
            num_districts: Number of districts the plan must have.
            builder: Which district builder to grow districts with.
            favored_party: Party the biased builder works for.

        Returns:
            A valid plan with exactly ``num_districts`` districts.

        Raises:
            InvalidDistrictCount: ``num_districts`` cannot partition the registry.
            GenerationExhausted: No valid plan within the attempt/time budget.
        """
        check_district_count(self.registry, num_districts)
        if self.verbose:
            print(f"Generating {builder.value} plan with {num_districts} districts...")
        return self._generate_plan(
            num_districts, builder, favored_party, self._deadline(), progress=True
        )

    def generate_random_plan(self, num_districts: int) -> Plan:
        return self.generate_plan(num_districts, Builder.RANDOM)

    def generate_biased_plan(self, num_districts: int, favored_party: Party) -> Plan:
        return self.generate_plan(num_districts, Builder.BIASED, favored_party)

    def gerrymander(self, num_districts: int, favored_party: Party) -> Plan:
        """
        Draws a valid plan skewed toward ``favored_party``.

        Each district is grown greedily for the favored party, so this finds
        a lopsided plan much faster than search_for_gerrymander.
        """
        return self.generate_biased_plan(num_districts, favored_party)

    def search_for_gerrymander(self, num_districts: int, threshold: int) -> Plan:
        """
        Generates unbiased random plans until one has an efficiency gap above
        ``threshold``.
        """
        check_district_count(self.registry, num_districts)
        if self.verbose:
            print(
                f"Searching for a plan with {num_districts} districts "
                f"and an efficiency gap above {threshold}..."
            )
        deadline = self._deadline()
        return self._retry(
            lambda: self._generate_plan(
                num_districts, Builder.RANDOM, None, deadline, progress=False
            ),
            lambda plan: self.is_gerrymandered(plan, threshold),
            "Gerrymander search",
            deadline,
            progress=True,
        )

    def sample_efficiency_gaps(self, num_districts: int, n_plans: int) -> np.ndarray:
        """Scores ``n_plans`` independently generated random plans."""
        check_district_count(self.registry, num_districts)
        scores = np.zeros(n_plans, dtype=int)
        for i in trange(n_plans, desc="Sampling plans", disable=not self.verbose):
            plan = self._generate_plan(
                num_districts, Builder.RANDOM, None, self._deadline(), progress=False
            )
            scores[i] = self.score(plan)
        return scores

    # --- Internals ---

    def _deadline(self) -> Optional[float]:
        if self.time_limit is None:
            return None
        return time.monotonic() + self.time_limit

    def _generate_plan(self, num_districts, builder, favored_party, deadline, progress):
        return self._retry(
            lambda: self.build_plan(num_districts, builder, favored_party),
            lambda plan: is_valid_plan(self.registry, plan, self.margin, num_districts),
            f"{builder.value.capitalize()} plan",
            deadline,
            progress=progress,
        )

    def _retry(
        self,
        propose: Callable[[], Plan],
        accept: Callable[[Plan], bool],
        desc: str,
        deadline: Optional[float],
        progress: bool,
    ) -> Plan:
        for attempt in trange(
            1,
            self.max_attempts + 1,
            desc=desc,
            disable=not (self.verbose and progress),
        ):
            if deadline is not None and time.monotonic() > deadline:
                raise GenerationExhausted(
                    f"{desc}: time limit of {self.time_limit}s reached after "
                    f"{attempt - 1} attempts",
                    attempt - 1,
                )
            candidate = propose()
            if accept(candidate):
                self.last_attempts = attempt
                return candidate

        raise GenerationExhausted(
            f"{desc}: nothing acceptable in {self.max_attempts} attempts",
            self.max_attempts,
        )
