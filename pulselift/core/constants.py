"""Application constants."""

# Rep-target PRs: a set counts toward a target when reps are within the tolerance
REP_TARGETS = (3, 5, 10)
REP_TARGET_TOLERANCE = 2

# Unit conversion (display only)
KG_TO_LB = 2.20462
LB_TO_KG = 1 / KG_TO_LB

# Progress dashboard defaults
DEFAULT_PROGRESS_WEEKS = 8
DEFAULT_RECENT_PRS_LIMIT = 10
DEFAULT_TOP_EXERCISES_LIMIT = 5
