from __future__ import annotations
from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Dict, Literal, Mapping, NamedTuple, Tuple

# Which polymer a parameter set describes.
Kind = Literal["DNA", "RNA"]

# A mapping from a base to its canonical complement, e.g., {"A": "T", "C": "G"}.
BasePairMap = Mapping[str, str]

# A single nearest-neighbor term: (ΔH [kcal/mol], ΔS [cal/(K·mol)]).
EnergyTerm = Tuple[float, float]

# A dictionary mapping a motif key (e.g., a stacking dimer "AA/TT") to its (ΔH, ΔS).
PairEnergies = Dict[str, EnergyTerm]

# A dictionary mapping a loop length (integer) to its (ΔH, ΔS).
LoopEnergies = Dict[int, EnergyTerm]

# Read-only views of the two tables above, as stored on a built bundle.
PairTable = Mapping[str, EnergyTerm]
LoopTable = Mapping[int, EnergyTerm]


class MultibranchCoeffs(NamedTuple):
    """
    Coefficients of the linear multibranch free energy change.

    ΔG = helices · #helices + unpaired · #unpaired
         + coaxial_stacks · #coaxial stacks + terminal_mismatches · #mismatches

    Inferred from the supplemental material of SantaLucia & Hicks (2004),
    Annu. Rev. Biophys. Biomol. Struct. 33:415-40.
    """
    helices: float
    unpaired: float
    coaxial_stacks: float
    terminal_mismatches: float


@dataclass(frozen=True, slots=True)
class NucleicAcidEnergies:
    """
    Immutable container for the nearest-neighbor thermodynamic parameters of one polymer.

    One instance exists per polymer type (DNA, RNA). It is built once from a
    YAML parameter file and shared read-only by every folding context; the
    temperature-specific, scaled view used by the dynamic program is derived
    from it with :func:`mfe_fold.energies.energy_params.to_energy_params`.

    Energies are (ΔH [kcal/mol], ΔS [cal/(K·mol)]). Every table is copied into
    a read-only `MappingProxyType` on construction.

    Parameters
    ----------
    KIND : Kind
        "DNA" or "RNA".
    COMPLEMENT_BASES : BasePairMap
        Map of canonical complements for this nucleic acid.
    NN_STACK : PairTable
        Stacks of two adjacent base pairs, keyed `"XY/ZW"` (top strand 5'→3',
        bottom strand 3'→5'), e.g. `"GC/CG"`.
    INTERNAL_MISMATCH : PairTable
        Single-mismatch stacks inside a helix, same key convention.
    TERMINAL_MISMATCH : PairTable
        Mismatches adjacent to a helix end, same key convention.
    DANGLES : PairTable
        Dangling ends, keyed `"XY/.Z"` (3' overhang) or `".X/YZ"` (5' overhang).
    HAIRPIN, BULGE, INTERNAL : LoopTable
        Loop initiation terms by total loop length (nt), tabulated to 30.
    TRI_TETRA_LOOPS : PairTable
        Sequence-specific hairpin bonuses keyed by the full hairpin including
        its closing pair (5, 6 or 8 nt for tri-, tetra- and hexaloops).
    MULTIBRANCH : MultibranchCoeffs
        Linear multibranch coefficients.
    """
    KIND: Kind
    COMPLEMENT_BASES: BasePairMap
    NN_STACK: PairTable
    INTERNAL_MISMATCH: PairTable
    TERMINAL_MISMATCH: PairTable
    DANGLES: PairTable
    HAIRPIN: LoopTable
    BULGE: LoopTable
    INTERNAL: LoopTable
    TRI_TETRA_LOOPS: PairTable
    MULTIBRANCH: MultibranchCoeffs

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, Mapping):
                object.__setattr__(self, field.name, read_only(value))


def read_only(table: Mapping) -> Mapping:
    """
    Returns a read-only view over a private copy of `table`.

    Views that are already read-only are returned unchanged.
    """
    if isinstance(table, MappingProxyType):
        return table
    return MappingProxyType(dict(table))
