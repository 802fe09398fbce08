import pytest

from gerrymander.constants import INVALID_SCORE, POPULATION_MARGIN
from gerrymander.exceptions import (
    DegenerateInput,
    InvalidDistrictCount,
    PrecinctNotFound,
)
from gerrymander.precincts import Party, PrecinctRegistry
from gerrymander.redistricting import (
    check_district_count,
    district_demographic,
    district_summary,
    efficiency_gap,
    is_continuous,
    is_gerrymandered,
    is_valid_plan,
)
from gerrymander.utils import dem_wasted, district_winner, rep_wasted, wasted_vote_gap

TEXAS_PLAN = [{50003, 50005}, {50001, 50002, 50004}, {50006, 50007}]


def line_registry(pops):
    registry = PrecinctRegistry()
    for i, pop in enumerate(pops):
        neighbors = [j for j in (i - 1, i + 1) if 0 <= j < len(pops)]
        registry.add_precinct(i, 1, 1, pop, neighbors)
    return registry


class TestWastedVotes:
    def test_democratic_win(self):
        assert dem_wasted(10, 4) == 5
        assert rep_wasted(10, 4) == 4

    def test_republican_win(self):
        assert dem_wasted(4, 10) == 4
        assert rep_wasted(4, 10) == 5

    def test_gap_sign_follows_favored_party(self):
        assert wasted_vote_gap(10, 4, Party.REPUBLICAN) == 1
        assert wasted_vote_gap(10, 4, Party.DEMOCRATIC) == -1
        assert wasted_vote_gap(4, 10, Party.DEMOCRATIC) == 1

    def test_district_winner(self, texas_registry):
        blue = district_demographic(texas_registry, [50002])
        red = district_demographic(texas_registry, [50003])
        assert district_winner(blue) is Party.DEMOCRATIC
        assert district_winner(red) is Party.REPUBLICAN


class TestValidation:
    def test_cracked_grid_is_valid(self, grid_registry, cracked_plan):
        assert is_valid_plan(grid_registry, cracked_plan, 0.1)
        assert is_valid_plan(grid_registry, cracked_plan, 0.1, num_districts=5)

    def test_wrong_district_count_is_invalid(self, grid_registry, cracked_plan):
        assert not is_valid_plan(grid_registry, cracked_plan, 0.1, num_districts=4)

    def test_non_adjacent_district_is_not_continuous(self, texas_registry):
        assert not is_continuous(texas_registry, {50001, 50005})
        assert not is_valid_plan(texas_registry, [{50001, 50005}], POPULATION_MARGIN)

    def test_continuity_follows_paths_inside_district(self, grid_registry):
        assert is_continuous(grid_registry, {0, 1, 6, 11, 12})
        assert is_continuous(grid_registry, {42})
        # 0 and 2 are only joined through 1
        assert not is_continuous(grid_registry, {0, 2, 5, 7})
        assert not is_continuous(grid_registry, set())

    def test_continuity_rejects_unregistered_precincts(self, path_registry):
        with pytest.raises(PrecinctNotFound):
            is_continuous(path_registry, {99})
        with pytest.raises(PrecinctNotFound):
            is_continuous(path_registry, {0, 99})

    def test_continuity_reads_adjacency_both_ways(self, texas_registry):
        # Only 50005 lists 50002 as a neighbor
        assert 50005 not in texas_registry.adjacent_ids_of(50002)
        assert 50002 in texas_registry.adjacent_ids_of(50005)
        assert is_continuous(texas_registry, {50002, 50005})

    def test_disconnected_district_invalid_regardless_of_population(self):
        registry = PrecinctRegistry()
        registry.add_precinct("a", 1, 0, 5, [])
        registry.add_precinct("b", 0, 1, 5, [])
        assert not is_valid_plan(registry, [{"a", "b"}], 1.0)

    def test_population_bounds_are_inclusive(self):
        # Mean 10, margin 0.1: districts of 9 and 11 are on the edges
        registry = line_registry([4, 5, 5, 6])
        assert is_valid_plan(registry, [{0, 1}, {2, 3}], 0.1)

        registry = line_registry([4, 4, 6, 6])
        assert not is_valid_plan(registry, [{0, 1}, {2, 3}], 0.1)
        assert is_valid_plan(registry, [{0, 1}, {2, 3}], 0.2)

    def test_uncovered_precincts_invalid(self, path_registry):
        assert not is_valid_plan(path_registry, [{0, 1}], 1.0)

    def test_double_assignment_invalid(self, path_registry):
        assert not is_valid_plan(path_registry, [{0, 1}, {1, 2, 3}], 0.5)
        assert is_valid_plan(path_registry, [{0, 1}, {2, 3}], 0.5)

    def test_empty_district_invalid(self, path_registry):
        assert not is_valid_plan(path_registry, [{0, 1, 2, 3}, set()], 1.0)

    def test_empty_plan_raises(self, path_registry):
        with pytest.raises(InvalidDistrictCount):
            is_valid_plan(path_registry, [], 0.2)

    def test_unknown_precinct_raises(self, path_registry):
        with pytest.raises(PrecinctNotFound):
            is_valid_plan(path_registry, [{0, 1}, {2, 3, 99}], 0.5)

    def test_plan_is_not_mutated(self, grid_registry, cracked_plan):
        before = [set(d) for d in cracked_plan]
        is_valid_plan(grid_registry, cracked_plan, 0.1)
        assert cracked_plan == before

    def test_check_district_count(self, texas_registry):
        check_district_count(texas_registry, 1)
        check_district_count(texas_registry, 7)
        for bad in (0, -1, 8):
            with pytest.raises(InvalidDistrictCount):
                check_district_count(texas_registry, bad)


class TestEfficiencyGap:
    def test_cracked_grid_score(self, grid_registry, cracked_plan):
        # Every district: 4 D / 6 R, so 4 D and 1 R wasted
        assert efficiency_gap(grid_registry, cracked_plan) == 30
        assert is_gerrymandered(grid_registry, cracked_plan, 7)

    def test_texas_plan_score(self, texas_registry):
        assert is_valid_plan(texas_registry, TEXAS_PLAN, POPULATION_MARGIN)
        assert efficiency_gap(texas_registry, TEXAS_PLAN) == 25

    def test_invalid_plan_gets_sentinel(self, texas_registry):
        assert efficiency_gap(texas_registry, [{50001, 50005}]) == INVALID_SCORE
        assert efficiency_gap(texas_registry, [{50001, 50002}]) == INVALID_SCORE
        assert efficiency_gap(texas_registry, []) == INVALID_SCORE

    def test_threshold_monotonicity(self, grid_registry, cracked_plan):
        score = efficiency_gap(grid_registry, cracked_plan)
        for threshold in range(0, 101):
            assert is_gerrymandered(grid_registry, cracked_plan, threshold) == (
                threshold < score
            )

    def test_invalid_plan_never_gerrymandered(self, texas_registry):
        assert not is_gerrymandered(texas_registry, [{50001, 50005}], -100)

    def test_zero_votes_raise(self):
        registry = PrecinctRegistry()
        registry.add_precinct(1, 0, 0, 10, [2])
        registry.add_precinct(2, 0, 0, 10, [1])
        with pytest.raises(DegenerateInput):
            efficiency_gap(registry, [{1, 2}])
        with pytest.raises(ZeroDivisionError):
            efficiency_gap(registry, [{1}, {2}])

    def test_margin_is_forwarded(self):
        registry = line_registry([4, 4, 6, 6])
        plan = [{0, 1}, {2, 3}]
        assert efficiency_gap(registry, plan, margin=0.1) == INVALID_SCORE
        assert efficiency_gap(registry, plan, margin=0.2) != INVALID_SCORE


def test_district_summary(texas_registry):
    summary = district_summary(texas_registry, TEXAS_PLAN)

    assert len(summary) == 3
    assert summary["pop"].sum() == texas_registry.total_population()
    assert summary["dem_wasted"].sum() == 1406
    assert summary["rep_wasted"].sum() == 3025
    assert sorted(summary["winner"]) == ["D", "R", "R"]
