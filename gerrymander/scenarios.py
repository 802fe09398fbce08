"""
Demo runs on the bundled fixtures, with wall-clock timing of each generator.

Run with ``python -m gerrymander.scenarios``.
"""

import itertools
import time

from gerrymander.constants import DEFAULT_SEED
from gerrymander.data_loading import (
    grid_precincts,
    load_registry,
    texas_sample_precincts,
)
from gerrymander.precincts import Party
from gerrymander.random_districts import Districter
from gerrymander.redistricting import district_summary


def time_operation(label, func, *args, **kwargs):
    """Calls ``func`` once, printing how long it took.

    Returns:
        A tuple of the call's result and the elapsed seconds.
    """
    start = time.perf_counter()
    result = func(*args, **kwargs)
    elapsed = time.perf_counter() - start
    print(f"{label}: {elapsed:.3f}s")
    return result, elapsed


def report(districter, label, plan):
    print(f"--- {label}: efficiency gap {districter.score(plan)} ---")
    print(district_summary(districter.registry, plan))


def main(seed=DEFAULT_SEED):
    grid = Districter(load_registry(grid_precincts()), seed=seed)

    # Intentional gerrymanders, one party at a time
    for num_districts, party in itertools.product([2, 4, 5], Party):
        plan, _ = time_operation(
            f"gerrymander({num_districts}, {party.name})",
            grid.gerrymander,
            num_districts,
            party,
        )
        report(grid, f"{num_districts} districts for {party.name}", plan)

    # Naive search: random plans until one is skewed enough
    for threshold in [15, 16, 18, 20, 25]:
        plan, _ = time_operation(
            f"search_for_gerrymander(5, {threshold})",
            grid.search_for_gerrymander,
            5,
            threshold,
        )
        print(f"accepted after {grid.last_attempts} plans")
        report(grid, f"naive search above {threshold}", plan)

    texas = Districter(load_registry(texas_sample_precincts()), seed=seed)
    plan, _ = time_operation("texas random plan", texas.generate_random_plan, 3)
    report(texas, "texas random plan", plan)


if __name__ == "__main__":
    main()
