import pandas as pd

from gerrymander.constants import ADJ_COL, DEM_COL, GOP_COL, ID_COL, POP_COL
from gerrymander.precincts import PrecinctRegistry


def grid_adjacency(precinct_id, width, height):
    """Left/right/up/down neighbors of a cell in a row-major grid."""
    row, col = divmod(precinct_id, width)
    adjacent = []
    if row > 0:
        adjacent.append(precinct_id - width)
    if col > 0:
        adjacent.append(precinct_id - 1)
    if col < width - 1:
        adjacent.append(precinct_id + 1)
    if row < height - 1:
        adjacent.append(precinct_id + width)
    return adjacent


def grid_precincts(width=5, height=10, dem_columns=2):
    """
    Builds the grid used in most efficiency gap explainers.

    Precinct ids run row-major from 0. Every precinct holds one person who
    casts one vote: Democratic in the first ``dem_columns`` cells of each
    row, Republican elsewhere.

    Returns:
        pd.DataFrame: One row per precinct.
    """
    rows = []
    for precinct_id in range(width * height):
        is_dem = precinct_id % width < dem_columns
        rows.append(
            {
                ID_COL: precinct_id,
                DEM_COL: int(is_dem),
                GOP_COL: int(not is_dem),
                POP_COL: 1,
                ADJ_COL: grid_adjacency(precinct_id, width, height),
            }
        )
    return pd.DataFrame(rows)


def texas_sample_precincts():
    """
    Seven precincts loosely modelled on a small area in Texas.

    Adjacency is listed as recorded and is not symmetric (50005 and 50006
    list 50002, which does not list them back). Continuity checks treat a
    link declared on either side as a border; the district builders only
    step along links the current precinct declares.
    """
    records = [
        (50001, 121, 162, 636, [50002, 50007]),
        (50002, 1011, 351, 2837, [50001, 50003, 50004]),
        (50003, 234, 1141, 2527, [50002, 50005]),
        (50004, 366, 452, 1223, [50002, 50005]),
        (50005, 468, 611, 2168, [50002, 50004, 50003, 50006]),
        (50006, 51, 275, 619, [50002, 50005, 50007]),
        (50007, 121, 909, 2918, [50001, 50006]),
    ]
    columns = [ID_COL, DEM_COL, GOP_COL, POP_COL, ADJ_COL]
    return pd.DataFrame([dict(zip(columns, record)) for record in records])


def load_registry(df):
    return PrecinctRegistry.from_dataframe(df)
