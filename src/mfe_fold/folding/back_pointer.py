from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

__all__ = ["FoldBacktrackOp", "FoldBackPointer", "Interval"]

Interval = Tuple[int, int]


class FoldBacktrackOp(Enum):
    """
    Recursion rule that produced the optimum of a V or W cell.

    Storing one of these per cell lets the traceback re-walk the winning
    decisions without recomputing any energy.

    NONE            : Not set (unresolved or invalid cell).
    HAIRPIN         : V[i,j] closes a hairpin.
    STACK           : V[i,j] stacks on V[i+1,j-1].
    BULGE           : V[i,j] encloses V[k,l] with unpaired bases on one side.
    INTERNAL        : V[i,j] encloses V[k,l] with unpaired bases on both sides.
    MULTILOOP       : V[i,j] closes a junction of two or more helices.
    PAIR            : W[i,j] takes V[i,j].
    BIFURCATION     : W[i,j] splits into W[i,k] + W[k+1,j].
    UNPAIRED_LEFT   : W[i,j] leaves i unpaired (uses W[i+1,j]).
    UNPAIRED_RIGHT  : W[i,j] leaves j unpaired (uses W[i,j-1]).
    """
    NONE = auto()
    HAIRPIN = auto()
    STACK = auto()
    BULGE = auto()
    INTERNAL = auto()
    MULTILOOP = auto()
    PAIR = auto()
    BIFURCATION = auto()
    UNPAIRED_LEFT = auto()
    UNPAIRED_RIGHT = auto()


@dataclass(frozen=True, slots=True)
class FoldBackPointer:
    """
    Stores the information needed to backtrack a single step in the V/W caches.

    Attributes
    ----------
    operation : FoldBacktrackOp
        The recursion rule chosen as optimal for this cell.
    split_k : Optional[int]
        The split index `k` of a `BIFURCATION` (`[i,k]` + `[k+1,j]`) or of the
        `MULTILOOP` closure (`W[i+1,k]` + `W[k+1,j-1]`).
    inner : Optional[Interval]
        The enclosed pair `(k, l)` of a `STACK`, `BULGE` or `INTERNAL` rule.
    segs : Tuple[Interval, ...]
        Outermost helices reachable from this cell. For W cells these are the
        helices a multiloop closure may gather; for a `MULTILOOP` V cell they
        are its branches.
    note : Optional[str]
        Motif detail for debugging, e.g. the nearest-neighbor key or loop sizes.
    """
    operation: FoldBacktrackOp = FoldBacktrackOp.NONE
    split_k: Optional[int] = None
    inner: Optional[Interval] = None
    segs: Tuple[Interval, ...] = ()
    note: Optional[str] = None
