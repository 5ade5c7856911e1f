from __future__ import annotations
from typing import Final, Mapping

# Shortest span (j - i) that can hold a structure; pentanucleotides form none.
MIN_LEN_FOR_STRUCT: Final[int] = 4

# Minimum number of unpaired nucleotides enclosed by a hairpin.
MIN_HAIRPIN_UNPAIRED: Final[int] = MIN_LEN_FOR_STRUCT - 1

# Sequences shorter than this cannot close a hairpin and an adjacent stack.
MIN_SEQ_LEN_FOR_STRUCT: Final[int] = MIN_LEN_FOR_STRUCT + 2

# Loop tables are tabulated up to this length; longer loops are extrapolated.
MAX_LEN_PRECALCULATED: Final[int] = 30

# Interior loops pay this per unit of |left - right| (SantaLucia 2004, formula 12).
LOOPS_ASYMMETRY_PENALTY: Final[float] = 0.3

# Helices closed by a weak (non G·C) pair pay this (SantaLucia 2004, formula 8).
CLOSING_AT_PENALTY: Final[float] = 0.5

# Added to V(i, j) when (i, j) is an isolated pair, from
# https://www.ncbi.nlm.nih.gov/pubmed/10329189
ISOLATED_BASE_PAIR_PENALTY: Final[float] = 1600.0

_STRONG_PAIRS: Final[frozenset[str]] = frozenset({"GC", "CG"})
_WEAK_BASES: Final[frozenset[str]] = frozenset("ATU")


def can_pair(complements: Mapping[str, str], base_i: str, base_j: str) -> bool:
    """
    Return True if `base_i` and `base_j` form a canonical Watson–Crick pair.

    Only the strict complement of the polymer's model is accepted (A·T or A·U,
    G·C); wobble pairs are not part of the nearest-neighbor tables used here.

    Parameters
    ----------
    complements : Mapping[str, str]
        Complement map of the energy model, e.g. ``{"A": "T", ...}``.
    base_i, base_j : str
        Upper-cased single-character nucleotides.

    Returns
    -------
    bool
    """
    return complements.get(base_i) == base_j


def is_strong_pair(base_i: str, base_j: str) -> bool:
    """True for G·C and C·G pairs."""
    return (base_i + base_j) in _STRONG_PAIRS


def is_weak_base(base: str) -> bool:
    """True for A, T and U, the bases that make a closing pair weak."""
    return base in _WEAK_BASES


def hairpin_size(i: int, j: int) -> int:
    """
    Number of unpaired nucleotides inside a hairpin closed by (i, j).

    Parameters
    ----------
    i, j : int
        Zero-based indices with i < j.

    Returns
    -------
    int
        `j - i - 1`.
    """
    return j - i - 1


def is_min_hairpin_size(i: int, j: int, min_unpaired: int = MIN_HAIRPIN_UNPAIRED) -> bool:
    """True if the pair (i, j) encloses at least `min_unpaired` bases."""
    return hairpin_size(i, j) >= min_unpaired
