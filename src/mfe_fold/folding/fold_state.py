from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from mfe_fold.folding.back_pointer import FoldBackPointer
from mfe_fold.structures import FoldTriMatrix, Subsequence


class CellStatus(Enum):
    """
    Tag carried by every cache cell.

    UNRESOLVED : Not computed yet; only seen while the caches are being filled.
    INVALID    : No legal structure exists for the cell.
    RESOLVED   : The cell holds a finite optimum.
    """
    UNRESOLVED = "unresolved"
    INVALID = "invalid"
    RESOLVED = "resolved"


@dataclass(frozen=True, slots=True, eq=False)
class NucleicAcidStructure:
    """
    One DP solution: a motif with its free energy and the intervals it encloses.

    The same record type is used for cache cells and for the structures the
    traceback emits. In a V cell `inner` lists the pairs the loop encloses; in
    an emitted record a single interval is the pair the record closes and two
    intervals are the halves of a bifurcation.

    Attributes
    ----------
    description : str
        Motif label, e.g. "hairpin", "stack", "bulge".
    inner : Tuple[Subsequence, ...]
        Zero, one or more enclosed intervals.
    energy : int
        Free energy in the integer units of the parameter tables.
    status : CellStatus
        Whether the record is a real optimum or one of the two sentinels.
    back_ptr : FoldBackPointer
        Recursion rule that produced the record.
    """
    description: str = ""
    inner: Tuple[Subsequence, ...] = ()
    energy: int = 0
    status: CellStatus = CellStatus.RESOLVED
    back_ptr: FoldBackPointer = FoldBackPointer()

    @property
    def valid(self) -> bool:
        """True if the record holds a finite energy."""
        return self.status is CellStatus.RESOLVED

    def equal(self, other: "NucleicAcidStructure") -> bool:
        """
        Semantic equality: same enclosed intervals element-wise and same energy.

        Sentinels only equal sentinels with the same tag.
        """
        if self.status is not other.status:
            return False
        if len(self.inner) != len(other.inner):
            return False
        if any(mine != theirs for mine, theirs in zip(self.inner, other.inner)):
            return False
        return self.energy == other.energy

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NucleicAcidStructure):
            return NotImplemented
        return self.equal(other)

    def __hash__(self) -> int:
        return hash((self.status, self.inner, self.energy))


# Cache fill value: nothing has been computed for the cell yet.
UNRESOLVED_STRUCTURE = NucleicAcidStructure(status=CellStatus.UNRESOLVED)

# No legal structure for the cell; never wins a comparison.
INVALID_STRUCTURE = NucleicAcidStructure(status=CellStatus.INVALID)


@dataclass(frozen=True, slots=True)
class FoldState:
    """
    The two caches of the folding dynamic program.

    Attributes
    ----------
    v_cache : FoldTriMatrix[NucleicAcidStructure]
        V[i, j]: best structure given that `i` and `j` pair with each other.
    w_cache : FoldTriMatrix[NucleicAcidStructure]
        W[i, j]: best structure over `[i, j]`, pairing optional.
    """
    v_cache: FoldTriMatrix[NucleicAcidStructure]
    w_cache: FoldTriMatrix[NucleicAcidStructure]

    @property
    def seq_len(self) -> int:
        return self.v_cache.size

    def is_complete(self) -> bool:
        """True once no cell of either cache is UNRESOLVED."""
        for i, j in self.w_cache.iter_upper_indices():
            if self.v_cache.get(i, j).status is CellStatus.UNRESOLVED:
                return False
            if self.w_cache.get(i, j).status is CellStatus.UNRESOLVED:
                return False
        return True


def make_fold_state(seq_len: int) -> FoldState:
    """
    Allocates the V and W caches for a sequence of `seq_len` nucleotides.

    Every cell starts as `UNRESOLVED_STRUCTURE`; the recurrence engine turns
    each one into a resolved or an invalid record exactly once.
    """
    return FoldState(
        v_cache=FoldTriMatrix[NucleicAcidStructure](seq_len, UNRESOLVED_STRUCTURE),
        w_cache=FoldTriMatrix[NucleicAcidStructure](seq_len, UNRESOLVED_STRUCTURE),
    )
