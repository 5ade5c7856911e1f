from __future__ import annotations
from dataclasses import dataclass, field
import logging
import time
from typing import Optional, Tuple

from tqdm import tqdm

from mfe_fold.energies.energy_ops import (
    bulge_energy,
    hairpin_energy,
    internal_loop_energy,
    multibranch_energy,
    stack_energy,
)
from mfe_fold.energies.energy_params import DEFAULT_SCALE, EnergyParams
from mfe_fold.folding.back_pointer import FoldBackPointer, FoldBacktrackOp, Interval
from mfe_fold.folding.fold_state import (
    INVALID_STRUCTURE,
    CellStatus,
    FoldState,
    NucleicAcidStructure,
)
from mfe_fold.rules import (
    ISOLATED_BASE_PAIR_PENALTY,
    MIN_LEN_FOR_STRUCT,
    MIN_SEQ_LEN_FOR_STRUCT,
    can_pair,
)
from mfe_fold.structures import Subsequence
from mfe_fold.utils.energy_utils import scale_energy
from mfe_fold.utils.nucleotide_utils import pair_key

logger = logging.getLogger(__name__)

Candidate = Tuple[Optional[int], FoldBackPointer, str]


@dataclass(slots=True)
class FoldingConfig:
    """
    Configuration settings for the folding dynamic program.

    Attributes
    ----------
    temp_c : float
        Folding temperature in °C. Defaults to 37 °C.
    scale : int
        Integer units per kcal/mol of the DP tables. Defaults to 100.
    verbose : bool
        If True, shows a progress bar over the spans.
    isolated_pair_penalty : float
        Penalty in kcal/mol added to V[i, j] when (i, j) could stack on neither
        side.
    """
    temp_c: float = 37.0
    scale: int = DEFAULT_SCALE
    verbose: bool = False
    isolated_pair_penalty: float = ISOLATED_BASE_PAIR_PENALTY


@dataclass(slots=True)
class FoldingEngine:
    """
    Fills the V and W caches of the nearest-neighbor MFE dynamic program.

    Cells are filled by increasing span so that every cell only reads cells
    of strictly smaller span, and each cell is computed exactly once. Every
    cell ends up either RESOLVED with its optimum and a back pointer, or
    INVALID.

    Attributes
    ----------
    params : EnergyParams
        Scaled parameter tables at the folding temperature.
    config : FoldingConfig
        Folding settings.
    """
    params: EnergyParams
    config: FoldingConfig = field(default_factory=FoldingConfig)

    def fill_all_matrices(self, seq: str, state: FoldState) -> None:
        """
        Executes the dynamic program over the whole sequence.

        Parameters
        ----------
        seq : str
            Upper-cased sequence matching the alphabet of `params`.
        state : FoldState
            Freshly allocated caches, filled in place.
        """
        start_time = time.perf_counter()
        n = len(seq)

        if n == 0:
            logger.info("Folding DP: empty sequence; nothing to fill.")
            return

        logger.info("=" * 60)
        logger.info(f"Folding DP for {self.params.kind} sequence length N={n} at {self.params.temp_k:.2f} K")
        logger.info(f"Expected complexity: O(N⁴) ≈ {n ** 4:,} operations")
        logger.info("=" * 60)

        if n < MIN_SEQ_LEN_FOR_STRUCT:
            for i, j in state.w_cache.iter_upper_indices():
                state.v_cache.set(i, j, INVALID_STRUCTURE)
                state.w_cache.set(i, j, INVALID_STRUCTURE)
            logger.info(f"Sequence shorter than {MIN_SEQ_LEN_FOR_STRUCT} nt; no structure can form.")
            return

        isolated_penalty = scale_energy(self.config.isolated_pair_penalty, self.params.scale)

        show_progress = self.config.verbose or logger.isEnabledFor(logging.INFO)
        span_iter = tqdm(range(0, n), desc="Folding DP", leave=True, disable=not show_progress)

        # The main DP loop: by subsequence span 'd', then by start index 'i'.
        for d in span_iter:
            for i in range(0, n - d):
                j = i + d

                # V first: W[i, j] reads V[i, j].
                self._fill_v_cell(seq, i, j, state, isolated_penalty)
                self._fill_w_cell(seq, i, j, state)

        elapsed = time.perf_counter() - start_time
        final = state.w_cache.get(0, n - 1)

        logger.info(f"Folding DP completed in {elapsed:.2f}s ({elapsed * 1000:.0f}ms)")
        if final.valid:
            logger.info(f"Final W[0,{n - 1}] = {final.energy / self.params.scale:.2f} kcal/mol")
        else:
            logger.info(f"Final W[0,{n - 1}] is invalid; the sequence stays unpaired.")
        logger.info(f"Average time per cell: {elapsed * 1000 * 1000 / (n * (n + 1) / 2):.2f} μs")

    def _fill_v_cell(self, seq: str, i: int, j: int, state: FoldState, isolated_penalty: int) -> None:
        """
        Fills a single cell V[i, j], the best structure closed by the pair (i, j).

        Notes
        -----
        The value is the minimum over, in this scan order:
        1.  **Hairpin** closed by (i, j).
        2.  **Stack, bulge or interior loop** between (i, j) and every inner
            pair (i1, j1) with `j1 - i1 >= 4`: loop energy + V[i1, j1]. Interior
            loops are skipped when either closing pair could stack instead.
        3.  **Multiloop** W[i+1, k] + W[k+1, j-1] gathering two or more helices,
            scored with the linear multibranch model plus their dangling ends.
            Not tried for pairs that are isolated on the outside unless they
            touch a sequence end.
        If (i, j) can stack on neither side, `isolated_penalty` is added.
        """
        n = len(seq)
        params = self.params
        comp = params.complements
        v_cache = state.v_cache
        w_cache = state.w_cache

        # V(i,j) is only defined if 'i' and 'j' pair and can enclose a hairpin.
        if j - i < MIN_LEN_FOR_STRUCT or not can_pair(comp, seq[i], seq[j]):
            v_cache.set(i, j, INVALID_STRUCTURE)
            return

        # Sequence ends count as not complementary.
        isolated_outer = True
        if i > 0 and j < n - 1:
            isolated_outer = not can_pair(comp, seq[i - 1], seq[j + 1])
        isolated_inner = not can_pair(comp, seq[i + 1], seq[j - 1])

        best_energy: Optional[int] = None
        best_back_ptr = FoldBackPointer()
        best_desc = ""

        # --- Case 1: (i,j) closes a hairpin loop ---
        delta_g_hp = hairpin_energy(seq, i, j, params)
        if delta_g_hp is not None:
            best_energy, best_back_ptr, best_desc = self._compare_candidates(
                (delta_g_hp, FoldBackPointer(FoldBacktrackOp.HAIRPIN, note=seq[i:j + 1]), "hairpin"),
                (best_energy, best_back_ptr, best_desc),
            )

        # --- Case 2: (i,j) encloses a single inner pair (i1, j1) ---
        dangling = (i > 0 and j == n - 1) or (i == 0 and j < n - 1)
        for i1 in range(i + 1, j - MIN_LEN_FOR_STRUCT):
            for j1 in range(i1 + MIN_LEN_FOR_STRUCT, j):
                if not can_pair(comp, seq[i1], seq[j1]):
                    continue
                inner_cell = v_cache.get(i1, j1)
                if not inner_cell.valid:
                    continue

                bulge_left = i1 > i + 1
                bulge_right = j1 < j - 1

                if not bulge_left and not bulge_right:
                    delta_g_loop = stack_energy(seq, i, i1, j, j1, params)
                    op, desc = FoldBacktrackOp.STACK, "stack (dangling end)" if dangling else "stack"
                elif bulge_left and bulge_right:
                    if not isolated_inner or can_pair(comp, seq[i1 - 1], seq[j1 + 1]):
                        continue
                    delta_g_loop = internal_loop_energy(seq, i, i1, j, j1, params)
                    single_mismatch = i1 - i == 2 and j - j1 == 2
                    op, desc = FoldBacktrackOp.INTERNAL, "mismatch" if single_mismatch else "interior loop"
                else:
                    delta_g_loop = bulge_energy(seq, i, i1, j, j1, params)
                    op, desc = FoldBacktrackOp.BULGE, "bulge"

                if delta_g_loop is None:
                    continue

                # Back pointers are only built for candidates that win.
                cand_energy = delta_g_loop + inner_cell.energy
                if best_energy is not None and cand_energy >= best_energy:
                    continue

                best_energy = cand_energy
                best_back_ptr = FoldBackPointer(op, inner=(i1, j1), note=f"{i1 - i - 1}x{j - j1 - 1}")
                best_desc = desc

        # --- Case 3: (i,j) closes a multiloop ---
        if not isolated_outer or i == 0 or j == n - 1:
            for k in range(i + 1, j - 1):
                left = w_cache.get(i + 1, k)
                right = w_cache.get(k + 1, j - 1)
                if not (left.valid and right.valid):
                    continue

                branches = left.back_ptr.segs + right.back_ptr.segs
                if len(branches) < 2:
                    continue

                cand_energy = self._multiloop_energy(seq, i, j, branches) + left.energy + right.energy
                if best_energy is not None and cand_energy >= best_energy:
                    continue

                best_energy, best_back_ptr, best_desc = self._compare_candidates(
                    (cand_energy, FoldBackPointer(FoldBacktrackOp.MULTILOOP, split_k=k, segs=branches,
                                                  note=f"{len(branches) + 1} helices"), "multiloop"),
                    (best_energy, best_back_ptr, best_desc),
                )

        if best_energy is None:
            v_cache.set(i, j, INVALID_STRUCTURE)
            return

        if isolated_outer and isolated_inner:
            best_energy += isolated_penalty

        if best_back_ptr.operation is FoldBacktrackOp.MULTILOOP:
            inner = tuple(Subsequence(p, q) for p, q in best_back_ptr.segs)
        elif best_back_ptr.inner is not None:
            inner = (Subsequence(*best_back_ptr.inner),)
        else:
            inner = ()

        v_cache.set(i, j, NucleicAcidStructure(
            description=best_desc,
            inner=inner,
            energy=best_energy,
            status=CellStatus.RESOLVED,
            back_ptr=best_back_ptr,
        ))

    def _fill_w_cell(self, seq: str, i: int, j: int, state: FoldState) -> None:
        """
        Fills a single cell W[i, j], the best structure over `[i, j]`.

        Notes
        -----
        The value is the minimum over, in this scan order:
        1.  `W[i+1, j]`: base `i` is left unpaired.
        2.  `W[i, j-1]`: base `j` is left unpaired.
        3.  `V[i, j]`: bases `i` and `j` pair.
        4.  `min_k W[i, k] + W[k+1, j]`: two independent adjacent structures.
        Spans shorter than 4 hold no structure and are INVALID. Each back
        pointer also records the outermost helices under the cell, which the
        multiloop case of V gathers as branches.
        """
        w_cache = state.w_cache

        if j - i < MIN_LEN_FOR_STRUCT:
            w_cache.set(i, j, INVALID_STRUCTURE)
            return

        best_energy: Optional[int] = None
        best_back_ptr = FoldBackPointer()
        best_desc = ""
        best_inner: Tuple[Subsequence, ...] = ()

        # --- Case 1: Leave base 'i' unpaired ---
        cell = w_cache.get(i + 1, j)
        if cell.valid:
            best_energy, best_back_ptr, best_desc = self._compare_candidates(
                (cell.energy, FoldBackPointer(FoldBacktrackOp.UNPAIRED_LEFT, segs=cell.back_ptr.segs), cell.description),
                (best_energy, best_back_ptr, best_desc),
            )
            best_inner = (Subsequence(i + 1, j),)

        # --- Case 2: Leave base 'j' unpaired ---
        cell = w_cache.get(i, j - 1)
        if cell.valid and (best_energy is None or cell.energy < best_energy):
            best_energy, best_back_ptr, best_desc = self._compare_candidates(
                (cell.energy, FoldBackPointer(FoldBacktrackOp.UNPAIRED_RIGHT, segs=cell.back_ptr.segs), cell.description),
                (best_energy, best_back_ptr, best_desc),
            )
            best_inner = (Subsequence(i, j - 1),)

        # --- Case 3: The pair (i,j) is formed ---
        cell = state.v_cache.get(i, j)
        if cell.valid and (best_energy is None or cell.energy < best_energy):
            best_energy, best_back_ptr, best_desc = self._compare_candidates(
                (cell.energy, FoldBackPointer(FoldBacktrackOp.PAIR, segs=((i, j),)), cell.description),
                (best_energy, best_back_ptr, best_desc),
            )
            best_inner = (Subsequence(i, j),)

        # --- Case 4: Bifurcation into [i,k] and [k+1,j] ---
        for k in range(i + 1, j - 1):
            left = w_cache.get(i, k)
            right = w_cache.get(k + 1, j)
            if not (left.valid and right.valid):
                continue

            cand_energy = left.energy + right.energy
            if best_energy is not None and cand_energy >= best_energy:
                continue

            best_energy = cand_energy
            best_back_ptr = FoldBackPointer(
                FoldBacktrackOp.BIFURCATION, split_k=k, segs=left.back_ptr.segs + right.back_ptr.segs
            )
            best_desc = "bifurcation"
            best_inner = (Subsequence(i, k), Subsequence(k + 1, j))

        if i == 0 and j == len(seq) - 1:
            logger.debug(f"=== W[0,{j}] Final ===")
            logger.debug(f"Best energy: {best_energy}")
            logger.debug(f"Best operation: {best_back_ptr.operation}")
            logger.debug(f"Helices at the exterior loop: {best_back_ptr.segs}")

        if best_energy is None:
            w_cache.set(i, j, INVALID_STRUCTURE)
            return

        w_cache.set(i, j, NucleicAcidStructure(
            description=best_desc,
            inner=best_inner,
            energy=best_energy,
            status=CellStatus.RESOLVED,
            back_ptr=best_back_ptr,
        ))

    def _multiloop_energy(self, seq: str, i: int, j: int, branches: Tuple[Interval, ...]) -> int:
        """
        Junction energy of the multiloop closed by (i, j) around `branches`.

        Walks the loop from `i` to `j`, counting unpaired nucleotides and flush
        helix ends (candidate coaxial stacks), and adds the dangling-end or
        terminal-mismatch term of every helix end facing the loop, the closing
        pair included. Missing dangle or mismatch entries contribute nothing.
        """
        unpaired = 0
        coaxial_stacks = 0
        terminal_mismatches = 0
        dangle_total = 0

        prev_end = i
        for index, (i2, j2) in enumerate(branches):
            next_start = branches[index + 1][0] if index + 1 < len(branches) else j
            gap_5p = i2 - prev_end - 1
            gap_3p = next_start - j2 - 1

            unpaired += gap_5p
            if gap_5p == 0:
                coaxial_stacks += 1

            delta_g, is_mismatch = self._helix_end_energy(seq, i2, j2, i2 - 1, j2 + 1, gap_5p > 0, gap_3p > 0)
            dangle_total += delta_g
            terminal_mismatches += is_mismatch
            prev_end = j2

        last_gap = j - prev_end - 1
        unpaired += last_gap
        if last_gap == 0:
            coaxial_stacks += 1

        # The closing pair seen from inside the loop: j-1 is 5' of j, i+1 is 3' of i.
        first_gap = branches[0][0] - i - 1
        delta_g, is_mismatch = self._helix_end_energy(seq, j, i, j - 1, i + 1, last_gap > 0, first_gap > 0)
        dangle_total += delta_g
        terminal_mismatches += is_mismatch

        return dangle_total + multibranch_energy(
            helices=len(branches) + 1,
            unpaired=unpaired,
            coaxial_stacks=coaxial_stacks,
            terminal_mismatches=terminal_mismatches,
            closing_pair=(seq[i], seq[j]),
            params=self.params,
        )

    def _helix_end_energy(
        self,
        seq: str,
        base_5p: int,
        base_3p: int,
        flank_5p: int,
        flank_3p: int,
        has_5p: bool,
        has_3p: bool,
    ) -> Tuple[int, bool]:
        """
        Dangling-end or mismatch energy of one helix end facing a loop.

        `base_5p` pairs with `base_3p`; `flank_5p` is the loop nucleotide 5' of
        `base_5p` and `flank_3p` the one 3' of `base_3p`. Returns the scaled
        energy and whether a terminal mismatch was used.
        """
        params = self.params
        if has_5p and has_3p:
            key = pair_key(seq, base_3p, flank_3p, base_5p, flank_5p)
            return params.terminal_mismatch.get(key, 0), True
        if has_3p:
            return params.dangles.get(pair_key(seq, -1, base_5p, flank_3p, base_3p), 0), False
        if has_5p:
            return params.dangles.get(pair_key(seq, flank_5p, base_5p, -1, base_3p), 0), False
        return 0, False

    @staticmethod
    def _compare_candidates(candidate: Candidate, best: Candidate) -> Candidate:
        """
        Selects the better of two `(energy, back pointer, description)` candidates.

        A strictly lower energy wins; on a tie the incumbent is kept, so the
        first candidate in scan order survives and the fill is deterministic.
        """
        cand_energy = candidate[0]
        best_energy = best[0]
        if cand_energy is not None and (best_energy is None or cand_energy < best_energy):
            return candidate

        return best
