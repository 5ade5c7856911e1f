from __future__ import annotations
from typing import Any, Iterable, Mapping, Optional

from mfe_fold.energies.energy_types import (
    BasePairMap,
    EnergyTerm,
    Kind,
    LoopEnergies,
    MultibranchCoeffs,
    PairEnergies,
)
from mfe_fold.energies.data.thermo_math import resolve_dh_ds


# ---------- Top-level config helpers ----------

def get_temperature_kelvin(data: Mapping[str, Any]) -> float:
    """
    Return the reference temperature (Kelvin) that `dg` entries are quoted at.

    Prefers `metadata.temperature_kelvin`, then a top-level
    `temperature_kelvin`, else 310.15 K (37 °C).
    """
    metadata = data.get("metadata") or {}
    temp_k = metadata.get("temperature_kelvin") or data.get("temperature_kelvin") or 310.15

    return float(temp_k)


def parse_complements(data: Mapping[str, Any]) -> BasePairMap:
    """
    Parse and normalize the base complement map.

    Raises
    ------
    ValueError
        If the `complements` mapping is missing or empty.
    """
    complements_data = data.get("complements")
    if not isinstance(complements_data, dict) or not complements_data:
        raise ValueError("YAML must contain a non-empty 'complements' mapping.")

    return {str(k).upper(): str(v).upper() for k, v in complements_data.items()}


def validate_complements(complements: BasePairMap, kind: Kind) -> None:
    """
    Check that a complement map matches the polymer it claims to describe.

    DNA maps must pair A with T and must not mention U; RNA maps must pair A
    with U and must not mention T. G·C must be present for both, in both
    orientations.

    Raises
    ------
    ValueError
        On any mismatch.
    """
    own, foreign = ("T", "U") if kind == "DNA" else ("U", "T")
    symbols = set(complements.keys()) | set(complements.values())

    if foreign in symbols:
        raise ValueError(f"{kind} complements must not contain '{foreign}'.")
    if complements.get("A") != own or complements.get(own) != "A":
        raise ValueError(f"{kind} complements must pair 'A' with '{own}'.")
    if complements.get("G") != "C" or complements.get("C") != "G":
        raise ValueError(f"{kind} complements must pair 'G' with 'C'.")


def _resolve_entry(entry: Any, temp_k: float) -> Optional[EnergyTerm]:
    """
    Turn one `{dh, ds, dg}` entry into `(ΔH, ΔS)`.

    Accepts a two-element list `[dh, ds]` as shorthand. Returns `None` when the
    entry carries no values at all.
    """
    if entry is None:
        return None

    if isinstance(entry, (list, tuple)):
        if len(entry) != 2:
            raise ValueError(f"Expected [dh, ds], got {entry!r}.")
        return resolve_dh_ds(dh=entry[0], ds=entry[1], dg=None, temp_k=temp_k)

    if not isinstance(entry, Mapping):
        raise ValueError(f"Unsupported thermodynamic entry {entry!r}.")

    dh = entry.get("dh")
    ds = entry.get("ds")
    dg = entry.get("dg") if "dg" in entry else entry.get("dg_37")
    if dh is None and ds is None and dg is None:
        return None

    return resolve_dh_ds(dh=dh, ds=ds, dg=dg, temp_k=temp_k)


# ---------- Multibranch ----------

def parse_multibranch(data: Mapping[str, Any]) -> MultibranchCoeffs:
    """
    Parse the linear multibranch coefficients.

    The section may be a mapping with the named fields of
    :class:`MultibranchCoeffs` or a plain four-element list.

    Raises
    ------
    ValueError
        If the `multibranch` section is missing or malformed.
    """
    node = data.get("multibranch")
    if isinstance(node, (list, tuple)) and len(node) == 4:
        return MultibranchCoeffs(*(float(v) for v in node))

    if not isinstance(node, dict):
        raise ValueError("Missing 'multibranch' section.")

    return MultibranchCoeffs(
        helices=float(node.get("helices", 0.0)),
        unpaired=float(node.get("unpaired", 0.0)),
        coaxial_stacks=float(node.get("coaxial_stacks", 0.0)),
        terminal_mismatches=float(node.get("terminal_mismatches", 0.0)),
    )


# ---------- Loop length tables ----------

def parse_loop_table(data: Mapping[str, Any], keys: Iterable[str], temp_k: float) -> LoopEnergies:
    """
    Parse loop initiation energies indexed by loop length (nt).

    The first key of `keys` present in `data` is used (e.g.
    `("hairpin_loops", "hairpin_loop")`). Each entry maps a length to any two
    of `dh`, `ds`, `dg`.

    Returns
    -------
    LoopEnergies
        Mapping `length → (ΔH, ΔS)`; empty if no table is present.
    """
    loop = None
    for loop_type in keys:
        if loop_type in data:
            loop = data[loop_type]
            break

    if not isinstance(loop, dict):
        return {}

    loop_energies: LoopEnergies = {}
    for length_str, entry in loop.items():
        delta_h_delta_s = _resolve_entry(entry, temp_k)
        if delta_h_delta_s is None:
            continue
        loop_energies[int(length_str)] = delta_h_delta_s

    return loop_energies


# ---------- Keyed motif tables ----------

def parse_pair_table(data: Mapping[str, Any], section: str, temp_k: float) -> PairEnergies:
    """
    Parse a motif table keyed by sequence (stacks, mismatches, dangles, special loops).

    Keys are kept verbatim apart from upper-casing, so the YAML can use the
    same `"XY/ZW"`, `"XY/.Z"` or hairpin-sequence keys the energy functions
    build at lookup time.

    Parameters
    ----------
    data : Mapping[str, Any]
        Parsed YAML tree.
    section : str
        Section name, e.g. `"stacks"` or `"terminal_mismatches"`.
    temp_k : float
        Reference temperature for entries quoted by `dg`.

    Returns
    -------
    PairEnergies
        Mapping `key → (ΔH, ΔS)`; empty if the section is absent.
    """
    node = data.get(section)
    if not isinstance(node, dict):
        return {}

    pair_energies: PairEnergies = {}
    for key, entry in node.items():
        delta_h_delta_s = _resolve_entry(entry, temp_k)
        if delta_h_delta_s is None:
            continue
        pair_energies[str(key).upper()] = delta_h_delta_s

    return pair_energies
