from __future__ import annotations
from dataclasses import dataclass
import logging
import math
from typing import Iterator, List, Tuple

from mfe_fold.folding.back_pointer import FoldBacktrackOp, Interval
from mfe_fold.folding.context import FoldingContext
from mfe_fold.folding.fold_state import CellStatus, FoldState, NucleicAcidStructure
from mfe_fold.structures import Subsequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Result:
    """
    The optimal structure of a sequence as an ordered list of structure records.

    Records are listed in traceback order: a loop-closing record precedes the
    records of the loops it encloses, and bifurcation halves are listed 5' to
    3'. Every record carrying a single interval is one base pair.

    Attributes
    ----------
    structures : Tuple[NucleicAcidStructure, ...]
        Records emitted by the traceback.
    scale : int
        Integer units per kcal/mol of the record energies.
    """
    structures: Tuple[NucleicAcidStructure, ...]
    scale: int

    def __len__(self) -> int:
        return len(self.structures)

    def __iter__(self) -> Iterator[NucleicAcidStructure]:
        return iter(self.structures)

    def pairs(self) -> List[Tuple[int, int]]:
        """Base pairs `(i, j)` of the structure, sorted by their 5' index."""
        return sorted(record.inner[0].as_tuple() for record in self.structures if len(record.inner) == 1)

    def dot_bracket(self) -> str:
        """
        Renders the structure in dot-bracket notation.

        The string spans up to the furthest interval end seen in any record, so
        trailing unpaired bases past the last structure are not represented.
        An empty result renders as an empty string.
        """
        if not self.structures:
            return ""

        last_end = max(interval.end for record in self.structures for interval in record.inner)
        chars = ["."] * (last_end + 1)
        for record in self.structures:
            if len(record.inner) == 1:
                pair = record.inner[0]
                chars[pair.start] = "("
                chars[pair.end] = ")"

        return "".join(chars)

    def minimum_free_energy(self) -> float:
        """
        Total free energy in kcal/mol, the sum of every record energy.

        Returns `math.inf` when no structure could form.
        """
        if not self.structures:
            return math.inf

        return sum(record.energy for record in self.structures) / self.scale


def traceback(context: FoldingContext) -> Result:
    """
    Reconstructs the optimal structure from the filled caches of `context`.

    Parameters
    ----------
    context : FoldingContext
        A fully built context.

    Returns
    -------
    Result
        The records of the optimal structure, empty if `W[0, N-1]` is invalid.
    """
    structures = _traceback_core(context.state, context.seq_len)
    logger.debug(f"Traceback produced {len(structures)} records")

    return Result(structures=tuple(structures), scale=context.scale)


def _traceback_core(state: FoldState, seq_len: int) -> List[NucleicAcidStructure]:
    """
    Stack-based traceback over the stored back pointers.

    W frames follow the unpaired, pair and bifurcation rules; V frames emit one
    record for the loop closed by `(i, j)` and push the pairs it encloses. The
    energy of a V record is the cell energy minus the cells it encloses, so
    the record energies add up to `W[0, N-1]`.
    """
    if seq_len == 0:
        return []

    structures: List[NucleicAcidStructure] = []
    stack: List[Tuple[str, int, int]] = [('W', 0, seq_len - 1)]

    w_cache = state.w_cache
    v_cache = state.v_cache

    while stack:
        which, i, j = stack.pop()

        # --- 'W' Cache Traceback ---
        if which == 'W':
            cell = w_cache.get(i, j)
            if not cell.valid:
                continue

            bp = cell.back_ptr
            op = bp.operation

            if op is FoldBacktrackOp.UNPAIRED_LEFT:
                stack.append(('W', i + 1, j))

            elif op is FoldBacktrackOp.UNPAIRED_RIGHT:
                stack.append(('W', i, j - 1))

            elif op is FoldBacktrackOp.PAIR:
                stack.append(('V', i, j))

            elif op is FoldBacktrackOp.BIFURCATION and bp.split_k is not None:
                k = bp.split_k
                structures.append(NucleicAcidStructure(
                    description="bifurcation",
                    inner=(Subsequence(i, k), Subsequence(k + 1, j)),
                    energy=0,
                    status=CellStatus.RESOLVED,
                    back_ptr=bp,
                ))
                # Right half pushed first so the left half is traced first.
                stack.append(('W', k + 1, j))
                stack.append(('W', i, k))

        # --- 'V' Cache Traceback ---
        elif which == 'V':
            cell = v_cache.get(i, j)
            if not cell.valid:
                continue

            children = _enclosed_pairs(cell)
            local_energy = cell.energy - sum(v_cache.get(p, q).energy for p, q in children)

            structures.append(NucleicAcidStructure(
                description=cell.description,
                inner=(Subsequence(i, j),),
                energy=local_energy,
                status=CellStatus.RESOLVED,
                back_ptr=cell.back_ptr,
            ))

            for p, q in reversed(children):
                stack.append(('V', p, q))

    return structures


def _enclosed_pairs(cell: NucleicAcidStructure) -> Tuple[Interval, ...]:
    bp = cell.back_ptr
    if bp.operation is FoldBacktrackOp.MULTILOOP:
        return bp.segs
    if bp.operation in (FoldBacktrackOp.STACK, FoldBacktrackOp.BULGE, FoldBacktrackOp.INTERNAL) and bp.inner is not None:
        return (bp.inner,)
    return ()
