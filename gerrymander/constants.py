# Allowed fractional deviation of a district's population from the mean.
# Real maps sit closer to 0.05, but small test datasets with coarse precincts
# cannot be balanced that tightly, so the default stays loose.
POPULATION_MARGIN = 0.2

# Returned by the efficiency gap scorer for a plan that fails validation
INVALID_SCORE = -1

# Upper bound on rejection-sampling attempts for every generation loop
MAX_ATTEMPTS = 10000

# Seed used by the demo runner for reproducible output
DEFAULT_SEED = 101

# Column names of in-memory precinct tables
ID_COL = "precinct_id"
DEM_COL = "DEM"
GOP_COL = "GOP"
POP_COL = "POP"
ADJ_COL = "adjacent"
