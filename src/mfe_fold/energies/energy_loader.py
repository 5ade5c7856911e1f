from __future__ import annotations
import logging
from functools import lru_cache
from importlib.resources import files as ir_files
from importlib.resources.abc import Traversable
from pathlib import Path

from mfe_fold.energies.data.yaml_io import read_yaml
from mfe_fold.energies.data.parsers import (
    get_temperature_kelvin,
    parse_complements,
    validate_complements,
    parse_multibranch,
    parse_loop_table,
    parse_pair_table,
)
from mfe_fold.energies.energy_types import Kind, NucleicAcidEnergies
from mfe_fold.folding.errors import AlphabetError
from mfe_fold.utils.nucleotide_utils import is_dna, is_rna

logger = logging.getLogger(__name__)

# Parameter files shipped inside the package, keyed by polymer.
DEFAULT_PARAMETER_FILES: dict[str, str] = {
    "DNA": "dna_santalucia2004.yaml",
    "RNA": "rna_turner2004.yaml",
}


def default_parameter_path(kind: Kind) -> Traversable:
    """Return the packaged YAML parameter file for `kind`."""
    return ir_files("mfe_fold.energies") / "data" / DEFAULT_PARAMETER_FILES[kind]


class NucleicAcidEnergyLoader:
    """
    Loads and parses nearest-neighbor energy parameters from a YAML file.

    This class reads a YAML file containing thermodynamic parameters (ΔH and
    ΔS, or ΔG at the file's reference temperature) for the motifs of a DNA or
    RNA secondary structure and parses them into an immutable
    `NucleicAcidEnergies` object.
    """
    def load(self, kind: Kind = "DNA", yaml_path: str | Path | Traversable | None = None) -> NucleicAcidEnergies:
        """
        Loads the thermodynamic parameter bundle for a given nucleic acid.

        Parameters
        ----------
        kind : {"DNA", "RNA"}, optional
            The polymer whose parameters are loaded, by default "DNA".
        yaml_path : str | Path | Traversable | None
            Parameter file to read. When omitted the file packaged under
            `mfe_fold/energies/data/` for `kind` is used.

        Returns
        -------
        NucleicAcidEnergies
            An immutable data object with every table the folding engine needs.

        Raises
        ------
        ValueError
            If `kind` is neither "DNA" nor "RNA", or the file is malformed.

        Notes
        -----
        - Energies are stored as `(ΔH [kcal/mol], ΔS [cal/(K·mol)])`.
        - Conversion to free energy at temperature `T` (Kelvin) is:
          `ΔG = ΔH - T * (ΔS / 1000)`.
        """
        kind_upper = kind.upper()
        if kind_upper not in DEFAULT_PARAMETER_FILES:
            raise ValueError(f"Unsupported nucleic acid kind {kind!r}; expected 'DNA' or 'RNA'.")

        if yaml_path is None:
            yaml_path = default_parameter_path(kind_upper)

        return self._build(kind_upper, yaml_path)

    def _build(self, kind: Kind, yaml_path: str | Path | Traversable) -> NucleicAcidEnergies:
        """
        Constructs the parameter tables for `kind` from a YAML file.

        References
        ----------
        1. SantaLucia, J. Jr. & Hicks, D. (2004). The thermodynamics of DNA
           structural motifs. Annu. Rev. Biophys. Biomol. Struct., 33, 415–440.
        2. Xia, T. et al. (1998). Thermodynamic parameters for an expanded nearest
           neighbor model for formation of RNA duplexes with Watson–Crick base pairs.
           Biochemistry, 37(42), 14719–14735.
        """
        data = read_yaml(yaml_path)
        temp_k = get_temperature_kelvin(data)

        declared = str((data.get("metadata") or {}).get("kind", kind)).upper()
        if declared != kind:
            raise ValueError(f"Parameter file declares kind {declared!r}, expected {kind!r}.")

        # --- Parse each section of the YAML file ---
        complements = parse_complements(data)
        validate_complements(complements, kind)
        multibranch = parse_multibranch(data)
        nn_stack = parse_pair_table(data, "stacks", temp_k)
        internal_mm = parse_pair_table(data, "internal_mismatches", temp_k)
        terminal_mm = parse_pair_table(data, "terminal_mismatches", temp_k)
        dangles = parse_pair_table(data, "dangles", temp_k)
        tri_tetra = parse_pair_table(data, "tri_tetra_loops", temp_k)
        hairpin = parse_loop_table(data, ("hairpin_loops", "hairpin_loop"), temp_k)
        bulge = parse_loop_table(data, ("bulge_loops", "bulge_loop"), temp_k)
        internal = parse_loop_table(data, ("internal_loops", "internal_loop"), temp_k)

        if not nn_stack:
            raise ValueError("Parameter file must contain a non-empty 'stacks' section.")

        logger.debug(
            "Loaded %s parameters from %s: %d stacks, %d mismatches, %d dangles, %d special hairpins",
            kind, getattr(yaml_path, "name", yaml_path), len(nn_stack),
            len(internal_mm) + len(terminal_mm), len(dangles), len(tri_tetra),
        )

        return NucleicAcidEnergies(
            KIND=kind,
            COMPLEMENT_BASES=complements,
            NN_STACK=nn_stack,
            INTERNAL_MISMATCH=internal_mm,
            TERMINAL_MISMATCH=terminal_mm,
            DANGLES=dangles,
            HAIRPIN=hairpin,
            BULGE=bulge,
            INTERNAL=internal,
            TRI_TETRA_LOOPS=tri_tetra,
            MULTIBRANCH=multibranch,
        )


@lru_cache(maxsize=None)
def _load_packaged(kind: Kind) -> NucleicAcidEnergies:
    return NucleicAcidEnergyLoader().load(kind)


def get_energies(kind: Kind) -> NucleicAcidEnergies:
    """
    Return the packaged parameter set for `kind`, loading it on first use.

    `kind` is case-insensitive. The result is immutable and shared by every
    folding context.
    """
    return _load_packaged(kind.upper())


def select_energies(seq: str) -> NucleicAcidEnergies:
    """
    Pick the parameter set matching the alphabet of `seq`.

    Parameters
    ----------
    seq : str
        Upper-cased nucleotide sequence.

    Returns
    -------
    NucleicAcidEnergies
        DNA parameters if `seq` only contains A/C/G/T, RNA parameters if it
        only contains A/C/G/U.

    Raises
    ------
    AlphabetError
        If `seq` is neither DNA nor RNA.
    """
    if is_dna(seq):
        return get_energies("DNA")
    if is_rna(seq):
        return get_energies("RNA")

    raise AlphabetError(seq)
