from __future__ import annotations
from typing import Dict, Optional

from mfe_fold.energies.energy_params import EnergyParams
from mfe_fold.rules.constraints import hairpin_size, is_min_hairpin_size, is_strong_pair, is_weak_base
from mfe_fold.utils.nucleotide_utils import pair_key


def _lookup(key: str, primary: Dict[str, int], fallback: Dict[str, int]) -> Optional[int]:
    value = primary.get(key)
    if value is None:
        value = fallback.get(key)
    return value


def stack_energy(seq: str, base_i: int, base_i1: int, base_j: int, base_j1: int, params: EnergyParams) -> Optional[int]:
    """
    Calculates the scaled free energy of two facing dinucleotides.

    The pair `(base_i, base_j)` sits on top of `(base_i1, base_j1)`. Where the
    four bases form two Watson–Crick pairs this is the nearest-neighbor stack;
    otherwise the mismatch table appropriate to the position is used. The
    position in the sequence decides which tables apply:

    - an index of -1 marks a dangling end, read from the dangle table;
    - a pair away from both sequence ends uses stacks, then internal mismatches;
    - a pair touching a sequence end uses stacks, then terminal mismatches, and
      when exactly one end is free the overhanging base adds a dangling-end term.

    Parameters
    ----------
    seq : str
        Upper-cased sequence.
    base_i, base_i1 : int
        Top strand indices, 5'→3' (or -1).
    base_j, base_j1 : int
        Bottom strand indices facing `base_i` and `base_i1` (or -1).
    params : EnergyParams
        Scaled parameter tables.

    Returns
    -------
    Optional[int]
        Scaled ΔG, or None if the motif is not covered by the tables.
    """
    seq_len = len(seq)
    if any(index >= seq_len for index in (base_i, base_i1, base_j, base_j1)):
        return 0

    key = pair_key(seq, base_i, base_i1, base_j, base_j1)

    # --- 1. Dangling End ---
    if -1 in (base_i, base_i1, base_j, base_j1):
        return params.dangles.get(key)

    # --- 2. Interior Position ---
    if base_i > 0 and base_j < seq_len - 1:
        return _lookup(key, params.stack, params.internal_mismatch)

    # --- 3. At a Sequence End ---
    delta_g = _lookup(key, params.stack, params.terminal_mismatch)
    if delta_g is None:
        return None

    if base_i > 0 and base_j == seq_len - 1:
        # 5' overhang on the left of the helix end
        dangle_key = pair_key(seq, base_i - 1, base_i, -1, base_j)
    elif base_i == 0 and base_j < seq_len - 1:
        # 3' overhang on the right of the helix end
        dangle_key = pair_key(seq, -1, base_i, base_j + 1, base_j)
    else:
        return delta_g

    return delta_g + params.dangles.get(dangle_key, 0)


def hairpin_energy(seq: str, base_i: int, base_j: int, params: EnergyParams) -> Optional[int]:
    """
    Calculates the scaled free energy of a hairpin loop closed by `(base_i, base_j)`.

    The total is the length-dependent initiation term (extrapolated beyond the
    tabulated range), a bonus for known tri-, tetra- and hexaloop sequences, a
    terminal mismatch on the closing pair for loops longer than three, and the
    closing A·T / A·U penalty for triloops (SantaLucia & Hicks 2004, formula 8).

    Returns
    -------
    Optional[int]
        Scaled ΔG, or None if the geometry cannot form a hairpin.
    """
    # --- 1. Validate Geometry ---
    if not is_min_hairpin_size(base_i, base_j):
        return None
    if params.complements.get(seq[base_i]) != seq[base_j]:
        return None

    hairpin = seq[base_i:base_j + 1]
    hairpin_len = hairpin_size(base_i, base_j)

    # --- 2. Special Loop Bonus and Initiation ---
    delta_g = params.special_hairpin_bonus(hairpin)
    delta_g += params.loop_energy(params.hairpin_loops, hairpin_len)

    # --- 3. Terminal Mismatch ---
    if hairpin_len > 3:
        mismatch = params.terminal_mismatch.get(pair_key(seq, base_i, base_i + 1, base_j, base_j - 1))
        if mismatch is not None:
            delta_g += mismatch

    # --- 4. Weak Closing Pair on Triloops ---
    if hairpin_len == 3 and (is_weak_base(hairpin[0]) or is_weak_base(hairpin[-1])):
        delta_g += params.closing_at_penalty

    return delta_g


def bulge_energy(seq: str, base_i: int, base_i1: int, base_j: int, base_j1: int, params: EnergyParams) -> Optional[int]:
    """
    Calculates the scaled free energy of a bulge between `(i, j)` and `(i1, j1)`.

    A single-nucleotide bulge keeps the stacking of the two flanking pairs, so
    their stack energy is added on top of the initiation term. Any A, T or U
    among the four closing bases costs the weak closing penalty.

    Returns
    -------
    Optional[int]
        Scaled ΔG, or None if there is no bulge or the flanking stack is unknown.
    """
    loop_len = max(base_i1 - base_i - 1, base_j - base_j1 - 1)
    if loop_len <= 0:
        return None

    delta_g = params.loop_energy(params.bulge_loops, loop_len)

    if loop_len == 1:
        stack = stack_energy(seq, base_i, base_i1, base_j, base_j1, params)
        if stack is None:
            return None
        delta_g += stack

    if any(is_weak_base(seq[k]) for k in (base_i, base_i1, base_j, base_j1)):
        delta_g += params.closing_at_penalty

    return delta_g


def internal_loop_energy(seq: str, base_i: int, base_i1: int, base_j: int, base_j1: int, params: EnergyParams) -> Optional[int]:
    """
    Calculates the scaled free energy of an interior loop between `(i, j)` and `(i1, j1)`.

    Parameters
    ----------
    seq : str
        Upper-cased sequence.
    base_i, base_j : int
        Outer closing pair.
    base_i1, base_j1 : int
        Inner closing pair, `base_i < base_i1 < base_j1 < base_j`.
    params : EnergyParams
        Scaled parameter tables.

    Returns
    -------
    Optional[int]
        Scaled ΔG, or None if either side of the loop is empty or a mismatch
        is missing from the tables.

    Notes
    -----
    A 1×1 loop is a single mismatch and is scored as the two mismatch stacks
    on either side. Larger loops follow formula 12 of SantaLucia & Hicks (2004):
    initiation by total length, plus `0.3 · |left − right|`, plus a terminal
    mismatch on each closing pair.
    """
    loop_left = base_i1 - base_i - 1
    loop_right = base_j - base_j1 - 1
    if loop_left < 1 or loop_right < 1:
        return None

    # --- 1. Single Mismatch ---
    if loop_left == 1 and loop_right == 1:
        mm_left = stack_energy(seq, base_i, base_i + 1, base_j, base_j - 1, params)
        mm_right = stack_energy(seq, base_j1, base_j1 + 1, base_i1, base_i1 - 1, params)
        if mm_left is None or mm_right is None:
            return None
        return mm_left + mm_right

    # --- 2. Initiation and Asymmetry ---
    delta_g = params.loop_energy(params.interior_loops, loop_left + loop_right)
    delta_g += params.asymmetry_penalty * abs(loop_left - loop_right)

    # --- 3. Terminal Mismatches on Both Closing Pairs ---
    mm_left = params.terminal_mismatch.get(pair_key(seq, base_i, base_i + 1, base_j, base_j - 1))
    mm_right = params.terminal_mismatch.get(pair_key(seq, base_j1, base_j1 + 1, base_i1, base_i1 - 1))
    if mm_left is None or mm_right is None:
        return None

    return delta_g + mm_left + mm_right


def multibranch_energy(
    helices: int,
    unpaired: int,
    coaxial_stacks: int,
    terminal_mismatches: int,
    closing_pair: tuple[str, str],
    params: EnergyParams,
) -> int:
    """
    Linear multibranch free energy.

    ΔG = a · helices + b · unpaired + c · coaxial_stacks + d · terminal_mismatches,
    plus the weak closing penalty when `closing_pair` is not G·C.

    Parameters
    ----------
    helices : int
        Helices meeting at the junction, the closing helix included.
    unpaired : int
        Unpaired nucleotides inside the junction.
    coaxial_stacks : int
        Adjacent helix ends with no unpaired nucleotide between them.
    terminal_mismatches : int
        Helix ends flanked by unpaired nucleotides on both sides.
    closing_pair : tuple[str, str]
        Bases of the pair that closes the multiloop.
    params : EnergyParams
        Scaled parameter tables.

    Returns
    -------
    int
        Scaled ΔG.
    """
    a, b, c, d = params.multibranch
    delta_g = a * helices + b * unpaired + c * coaxial_stacks + d * terminal_mismatches

    if not is_strong_pair(*closing_pair):
        delta_g += params.closing_at_penalty

    return delta_g
