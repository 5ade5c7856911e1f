from __future__ import annotations
from dataclasses import dataclass, fields
from math import log
from typing import Dict, Mapping

import numpy as np

from mfe_fold.energies.energy_types import Kind, LoopTable, NucleicAcidEnergies, PairTable, read_only
from mfe_fold.rules.constraints import (
    CLOSING_AT_PENALTY,
    LOOPS_ASYMMETRY_PENALTY,
    MAX_LEN_PRECALCULATED,
)
from mfe_fold.utils.energy_utils import calculate_delta_g, jacobson_stockmayer_coefficient, scale_energy

# Units per kcal/mol used by the DP tables (hundredths of kcal/mol).
DEFAULT_SCALE = 100

# Hairpin sequence lengths (closing pair included) of tri-, tetra- and hexaloops.
TRILOOP_LEN = 5
TETRALOOP_LEN = 6
HEXALOOP_LEN = 8


@dataclass(frozen=True, slots=True)
class EnergyParams:
    """
    Temperature-resolved, integer-scaled view of a `NucleicAcidEnergies` bundle.

    Every value is a free energy at `temp_k` multiplied by `scale` and rounded
    to an integer, so the dynamic program only ever adds integers. Loop tables
    are dense numpy arrays indexed by loop length `0..MAX_LEN_PRECALCULATED`;
    motif tables are read-only mappings keyed exactly like the source tables.

    Attributes
    ----------
    kind : Kind
        Polymer the tables describe.
    temp_k : float
        Absolute temperature the free energies were evaluated at.
    scale : int
        Units per kcal/mol.
    complements : Mapping[str, str]
        Base complement map of the polymer.
    stack, internal_mismatch, terminal_mismatch, dangles : Mapping[str, int]
        Scaled nearest-neighbor tables, as read-only views.
    hairpin_loops, bulge_loops, interior_loops : np.ndarray
        Scaled loop initiation terms by length, gaps in the source tables
        filled by linear interpolation.
    triloop_bonus, tetraloop_bonus, hexaloop_bonus : Mapping[str, int]
        Sequence-specific hairpin bonuses split by hairpin length.
    multibranch : tuple[int, int, int, int]
        Scaled (helices, unpaired, coaxial_stacks, terminal_mismatches) coefficients.
    closing_at_penalty, asymmetry_penalty : int
        Scaled constant penalties.
    log_extrapolation_constant : float
        Jacobson–Stockmayer coefficient `2.44 · R · T · scale` used beyond the
        tabulated loop lengths.
    """
    kind: Kind
    temp_k: float
    scale: int
    complements: Mapping[str, str]
    stack: Mapping[str, int]
    internal_mismatch: Mapping[str, int]
    terminal_mismatch: Mapping[str, int]
    dangles: Mapping[str, int]
    hairpin_loops: np.ndarray
    bulge_loops: np.ndarray
    interior_loops: np.ndarray
    triloop_bonus: Mapping[str, int]
    tetraloop_bonus: Mapping[str, int]
    hexaloop_bonus: Mapping[str, int]
    multibranch: tuple[int, int, int, int]
    closing_at_penalty: int
    asymmetry_penalty: int
    log_extrapolation_constant: float

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, Mapping):
                object.__setattr__(self, field.name, read_only(value))
            elif isinstance(value, np.ndarray):
                value.flags.writeable = False

    def loop_energy(self, table: np.ndarray, loop_len: int) -> int:
        """
        Scaled loop initiation energy for a loop of `loop_len` nucleotides.

        Lengths up to `MAX_LEN_PRECALCULATED` are read from `table`; longer loops
        are extrapolated from the last tabulated entry with
        ``ΔG(n) = ΔG(30) + coefficient · ln(n / 30)``.
        """
        if loop_len <= MAX_LEN_PRECALCULATED:
            return int(table[loop_len])

        increment = self.log_extrapolation_constant * log(loop_len / float(MAX_LEN_PRECALCULATED))
        return int(table[MAX_LEN_PRECALCULATED]) + int(round(increment))

    def special_hairpin_bonus(self, hairpin: str) -> int:
        """Bonus for an exact tri-, tetra- or hexaloop sequence, 0 if it is not listed."""
        bonus_table = {
            TRILOOP_LEN: self.triloop_bonus,
            TETRALOOP_LEN: self.tetraloop_bonus,
            HEXALOOP_LEN: self.hexaloop_bonus,
        }.get(len(hairpin))
        if bonus_table is None:
            return 0

        return bonus_table.get(hairpin, 0)


def _scaled_table(terms: PairTable, temp_k: float, scale: int) -> Dict[str, int]:
    return {key: scale_energy(calculate_delta_g(term, temp_k), scale) for key, term in terms.items()}


def _scaled_loop_array(loops: LoopTable, temp_k: float, scale: int) -> np.ndarray:
    """
    Dense scaled loop table indexed `0..MAX_LEN_PRECALCULATED`.

    Missing lengths are linearly interpolated between their tabulated
    neighbours; lengths outside the tabulated range take the nearest entry.
    """
    lengths = np.arange(MAX_LEN_PRECALCULATED + 1)
    if not loops:
        return np.zeros(lengths.shape, dtype=np.int64)

    known_lengths = sorted(n for n in loops if n <= MAX_LEN_PRECALCULATED)
    known_dg = [calculate_delta_g(loops[n], temp_k) for n in known_lengths]
    interpolated = np.interp(lengths, known_lengths, known_dg)

    return np.rint(interpolated * scale).astype(np.int64)


def to_energy_params(energies: NucleicAcidEnergies, temp_c: float, scale: int = DEFAULT_SCALE) -> EnergyParams:
    """
    Resolve a parameter bundle at one temperature into integer DP tables.

    Parameters
    ----------
    energies : NucleicAcidEnergies
        Temperature-independent (ΔH, ΔS) tables.
    temp_c : float
        Folding temperature in °C.
    scale : int, optional
        Units per kcal/mol, by default 100.

    Returns
    -------
    EnergyParams
        Immutable scaled tables for O(1) lookup during folding.

    Raises
    ------
    ValueError
        If `scale` is not a positive integer.
    """
    if scale <= 0:
        raise ValueError(f"scale must be a positive integer, got {scale}.")

    temp_k = temp_c + 273.15

    special = _scaled_table(energies.TRI_TETRA_LOOPS, temp_k, scale)
    loops_by_len: Dict[int, Dict[str, int]] = {TRILOOP_LEN: {}, TETRALOOP_LEN: {}, HEXALOOP_LEN: {}}
    for hairpin, bonus in special.items():
        if len(hairpin) in loops_by_len:
            loops_by_len[len(hairpin)][hairpin] = bonus

    helices, unpaired, coaxial, mismatches = energies.MULTIBRANCH

    return EnergyParams(
        kind=energies.KIND,
        temp_k=temp_k,
        scale=scale,
        complements=energies.COMPLEMENT_BASES,
        stack=_scaled_table(energies.NN_STACK, temp_k, scale),
        internal_mismatch=_scaled_table(energies.INTERNAL_MISMATCH, temp_k, scale),
        terminal_mismatch=_scaled_table(energies.TERMINAL_MISMATCH, temp_k, scale),
        dangles=_scaled_table(energies.DANGLES, temp_k, scale),
        hairpin_loops=_scaled_loop_array(energies.HAIRPIN, temp_k, scale),
        bulge_loops=_scaled_loop_array(energies.BULGE, temp_k, scale),
        interior_loops=_scaled_loop_array(energies.INTERNAL, temp_k, scale),
        triloop_bonus=loops_by_len[TRILOOP_LEN],
        tetraloop_bonus=loops_by_len[TETRALOOP_LEN],
        hexaloop_bonus=loops_by_len[HEXALOOP_LEN],
        multibranch=(
            scale_energy(helices, scale),
            scale_energy(unpaired, scale),
            scale_energy(coaxial, scale),
            scale_energy(mismatches, scale),
        ),
        closing_at_penalty=scale_energy(CLOSING_AT_PENALTY, scale),
        asymmetry_penalty=scale_energy(LOOPS_ASYMMETRY_PENALTY, scale),
        log_extrapolation_constant=jacobson_stockmayer_coefficient(temp_k, scale),
    )
