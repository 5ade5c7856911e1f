from mfe_fold.rules.constraints import (
    CLOSING_AT_PENALTY,
    ISOLATED_BASE_PAIR_PENALTY,
    LOOPS_ASYMMETRY_PENALTY,
    MAX_LEN_PRECALCULATED,
    MIN_HAIRPIN_UNPAIRED,
    MIN_LEN_FOR_STRUCT,
    MIN_SEQ_LEN_FOR_STRUCT,
    can_pair,
    hairpin_size,
    is_min_hairpin_size,
    is_strong_pair,
    is_weak_base,
)

__all__ = [
    "CLOSING_AT_PENALTY",
    "ISOLATED_BASE_PAIR_PENALTY",
    "LOOPS_ASYMMETRY_PENALTY",
    "MAX_LEN_PRECALCULATED",
    "MIN_HAIRPIN_UNPAIRED",
    "MIN_LEN_FOR_STRUCT",
    "MIN_SEQ_LEN_FOR_STRUCT",
    "can_pair",
    "hairpin_size",
    "is_min_hairpin_size",
    "is_strong_pair",
    "is_weak_base",
]
