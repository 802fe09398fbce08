from typing import Hashable, Iterable, List

import numpy as np

from gerrymander.precincts import Demographic, Party


def dem_wasted(dem: int, rep: int) -> int:
    """Democratic votes wasted in a two-party district race."""
    if dem > rep:
        return dem - rep - 1
    return dem


def rep_wasted(dem: int, rep: int) -> int:
    """Republican votes wasted in a two-party district race."""
    if dem > rep:
        return rep
    return rep - dem - 1


def wasted_vote_gap(dem: int, rep: int, favored_party: Party) -> int:
    """
    Wasted-vote differential the greedy builder maximizes.

    Favoring Republicans scores Democratic waste minus Republican waste;
    favoring Democrats scores the mirror image.
    """
    if favored_party is Party.REPUBLICAN:
        return dem_wasted(dem, rep) - rep_wasted(dem, rep)
    return rep_wasted(dem, rep) - dem_wasted(dem, rep)


def district_winner(demographic: Demographic) -> Party:
    # Ties go to the Republican side, matching the wasted-vote formula
    if demographic.dem > demographic.rep:
        return Party.DEMOCRATIC
    return Party.REPUBLICAN


def shuffled(ids: Iterable[Hashable], rng: np.random.Generator) -> List[Hashable]:
    """Returns the ids in a random order drawn from ``rng``.

    Ids are sorted first so the order only depends on the generator state,
    not on set iteration order.
    """
    ordered = sorted(ids)
    return [ordered[i] for i in rng.permutation(len(ordered))]
