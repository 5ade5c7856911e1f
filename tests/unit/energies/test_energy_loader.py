"""
Tests for the NucleicAcidEnergyLoader and the polymer selection helpers.

These tests load the packaged DNA and RNA parameter files, check that each
section is parsed into the expected structure, and exercise the validation
paths with small YAML files written to a temporary directory.
"""
from __future__ import annotations

# --- Standard Library Imports ---
import math
from types import MappingProxyType
import textwrap

# --- Third-Party Imports ---
import pytest

# --- Local Application Imports ---
from mfe_fold.energies.energy_loader import (
    NucleicAcidEnergyLoader,
    default_parameter_path,
    get_energies,
    select_energies,
)
from mfe_fold.energies.energy_types import MultibranchCoeffs, NucleicAcidEnergies
from mfe_fold.folding.errors import AlphabetError
from mfe_fold.utils.energy_utils import calculate_delta_g


MINIMAL_DNA_YAML = """
metadata:
  kind: DNA
  temperature_kelvin: 310.15
complements: {A: T, T: A, G: C, C: G}
multibranch: [2.6, 0.2, 0.2, 2.0]
stacks:
  gg/cc: [-8.0, -19.9]
hairpin_loops:
  3: {dh: 0.0, dg: 3.5}
"""


# ---------------------- Fixtures ----------------------
@pytest.fixture
def write_yaml(tmp_path):
    """
    Provides a factory that writes YAML text to a temporary file and returns its path.
    """
    def make(text: str, name: str = "params.yaml"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(text), encoding="utf-8")
        return path

    return make


# ---------------------- Packaged parameter files ----------------------
@pytest.mark.parametrize("kind, partner", [("DNA", "T"), ("RNA", "U")])
def test_load_packaged_bundle(kind, partner):
    """
    Tests that the packaged parameter file of each polymer loads into a fully
    populated `NucleicAcidEnergies` with the right complement map.
    """
    bundle = NucleicAcidEnergyLoader().load(kind)

    assert isinstance(bundle, NucleicAcidEnergies)
    assert bundle.KIND == kind
    assert bundle.COMPLEMENT_BASES["A"] == partner
    assert bundle.COMPLEMENT_BASES["G"] == "C"

    # All 16 orientations of the Watson-Crick stacks are tabulated.
    assert len(bundle.NN_STACK) == 16
    assert bundle.TERMINAL_MISMATCH and bundle.DANGLES
    assert bundle.HAIRPIN and bundle.BULGE and bundle.INTERNAL
    assert isinstance(bundle.MULTIBRANCH, MultibranchCoeffs)


def test_default_parameter_path_points_at_yaml():
    """
    The packaged parameter files live under `mfe_fold/energies/data/`.
    """
    assert default_parameter_path("DNA").name == "dna_santalucia2004.yaml"
    assert default_parameter_path("RNA").name == "rna_turner2004.yaml"


def test_dna_stack_matches_santalucia_table():
    """
    Checks one published value: GG/CC has ΔH = -8.0 kcal/mol, ΔS = -19.9 cal/(K·mol).
    """
    bundle = NucleicAcidEnergyLoader().load("DNA")
    assert bundle.NN_STACK["GG/CC"] == (-8.0, -19.9)
    assert bundle.NN_STACK["CC/GG"] == bundle.NN_STACK["GG/CC"]


def test_loop_entries_quoted_by_dg_reproduce_dg_at_reference():
    """
    Loop entries given as (dh, dg) are converted to (ΔH, ΔS) so that ΔG at
    37 °C is recovered.
    """
    bundle = NucleicAcidEnergyLoader().load("DNA")
    delta_g = calculate_delta_g(bundle.HAIRPIN[4], 310.15)
    assert math.isclose(delta_g, 3.5, abs_tol=0.01)


def test_bundle_tables_are_read_only():
    """
    Every table of a loaded bundle is a `MappingProxyType` that rejects writes.
    """
    bundle = NucleicAcidEnergyLoader().load("DNA")

    for table in (bundle.COMPLEMENT_BASES, bundle.NN_STACK, bundle.DANGLES, bundle.HAIRPIN):
        assert isinstance(table, MappingProxyType)

    with pytest.raises(TypeError):
        bundle.NN_STACK["GG/CC"] = (0.0, 0.0)  # type: ignore[index]
    with pytest.raises(TypeError):
        bundle.HAIRPIN[3] = (0.0, 0.0)  # type: ignore[index]


def test_bundle_copies_the_tables_it_is_given():
    """
    Mutating the dictionary a bundle was built from does not change the bundle.
    """
    stacks = {"GG/CC": (-8.0, -19.9)}
    bundle = NucleicAcidEnergies(
        KIND="DNA",
        COMPLEMENT_BASES={"G": "C", "C": "G"},
        NN_STACK=stacks,
        INTERNAL_MISMATCH={},
        TERMINAL_MISMATCH={},
        DANGLES={},
        HAIRPIN={},
        BULGE={},
        INTERNAL={},
        TRI_TETRA_LOOPS={},
        MULTIBRANCH=MultibranchCoeffs(2.6, 0.2, 0.2, 2.0),
    )
    stacks["GG/CC"] = (0.0, 0.0)

    assert bundle.NN_STACK["GG/CC"] == (-8.0, -19.9)


# ---------------------- RNA tables ----------------------
@pytest.mark.parametrize(
    "section, key, dg",
    [
        # Hairpin terminal mismatches, Turner 1999.
        ("TERMINAL_MISMATCH", "CG/GA", -2.20),
        ("TERMINAL_MISMATCH", "CC/GG", -2.90),
        ("TERMINAL_MISMATCH", "GG/CC", -2.90),
        ("TERMINAL_MISMATCH", "AG/UU", 0.20),
        ("TERMINAL_MISMATCH", "UU/AU", -0.80),
        # Interior-loop mismatches: G-A first mismatches and A-U closures.
        ("INTERNAL_MISMATCH", "CA/GG", -1.10),
        ("INTERNAL_MISMATCH", "GU/CU", -0.70),
        ("INTERNAL_MISMATCH", "AC/UC", 0.70),
        ("INTERNAL_MISMATCH", "UG/AA", -0.40),
        # Dangling ends.
        ("DANGLES", ".G/AC", -1.70),
        ("DANGLES", ".C/GG", -1.30),
        ("DANGLES", ".U/CA", -0.50),
        ("DANGLES", "AC/.G", -0.50),
        ("DANGLES", "GA/.U", -0.40),
    ],
)
def test_rna_motif_tables_match_published_values(section, key, dg):
    """
    Pins published Turner free energies of the RNA mismatch and dangle
    tables. They are quoted without ΔH, so ΔG is the same at every temperature.
    """
    bundle = get_energies("RNA")
    term = getattr(bundle, section)[key]

    assert math.isclose(calculate_delta_g(term, 310.15), dg, abs_tol=1e-9)
    assert math.isclose(calculate_delta_g(term, 343.15), dg, abs_tol=1e-9)


@pytest.mark.parametrize("section", ["TERMINAL_MISMATCH", "INTERNAL_MISMATCH"])
def test_rna_mismatch_tables_are_complete(section):
    """
    Each of the four Watson-Crick closing pairs has all 16 mismatch entries.
    """
    table = getattr(get_energies("RNA"), section)

    for closing in ("CG", "GC", "AU", "UA"):
        keys = [f"{closing[0]}{a}/{closing[1]}{b}" for a in "ACGU" for b in "ACGU"]
        assert all(key in table for key in keys)


def test_rna_terminal_mismatches_vary_per_motif():
    """
    The hairpin mismatch of a C-G closing pair depends on both mismatched
    bases, not only on the closing pair.
    """
    table = get_energies("RNA").TERMINAL_MISMATCH
    values = {table[f"C{a}/G{b}"] for a in "ACGU" for b in "ACGU"}
    assert len(values) > 10


def test_rna_dangles_cover_every_pair_and_side():
    """
    All four bases dangle on both sides of all four Watson-Crick pairs.
    """
    dangles = get_energies("RNA").DANGLES
    pairs = ("CG", "GC", "AU", "UA")

    three_prime = {f".{x}/{y}{z}" for x, z in pairs for y in "ACGU"}
    five_prime = {f"{y}{x}/.{z}" for x, z in pairs for y in "ACGU"}

    assert three_prime <= set(dangles)
    assert five_prime <= set(dangles)
    assert len(dangles) == 32


def test_kind_is_case_insensitive():
    """
    'dna' and 'DNA' select the same parameter file.
    """
    assert NucleicAcidEnergyLoader().load("dna").KIND == "DNA"


def test_unsupported_kind_raises():
    """
    Only DNA and RNA have parameter files.
    """
    with pytest.raises(ValueError):
        NucleicAcidEnergyLoader().load("PNA")


# ---------------------- Custom files ----------------------
def test_load_custom_file(write_yaml):
    """
    A minimal file with list shorthands and lower-case keys is accepted.
    """
    bundle = NucleicAcidEnergyLoader().load("DNA", yaml_path=write_yaml(MINIMAL_DNA_YAML))

    assert bundle.NN_STACK == {"GG/CC": (-8.0, -19.9)}
    assert bundle.MULTIBRANCH == MultibranchCoeffs(2.6, 0.2, 0.2, 2.0)
    assert set(bundle.HAIRPIN) == {3}
    assert bundle.DANGLES == {}


def test_declared_kind_must_match(write_yaml):
    """
    A DNA file cannot be loaded as RNA parameters.
    """
    with pytest.raises(ValueError, match="declares kind"):
        NucleicAcidEnergyLoader().load("RNA", yaml_path=write_yaml(MINIMAL_DNA_YAML))


def test_foreign_base_in_complements_raises(write_yaml):
    """
    DNA complement maps must not mention uracil.
    """
    text = MINIMAL_DNA_YAML.replace("{A: T, T: A, G: C, C: G}", "{A: U, U: A, G: C, C: G}")
    with pytest.raises(ValueError, match="must not contain 'U'"):
        NucleicAcidEnergyLoader().load("DNA", yaml_path=write_yaml(text))


def test_missing_stacks_raise(write_yaml):
    """
    A parameter file without stacks cannot drive the folding engine.
    """
    text = MINIMAL_DNA_YAML.replace("  gg/cc: [-8.0, -19.9]\n", "").replace("stacks:\n", "")
    with pytest.raises(ValueError, match="stacks"):
        NucleicAcidEnergyLoader().load("DNA", yaml_path=write_yaml(text))


def test_non_yaml_suffix_raises(write_yaml):
    """
    Only `.yaml` / `.yml` files are read.
    """
    with pytest.raises(ValueError, match="Only YAML"):
        NucleicAcidEnergyLoader().load("DNA", yaml_path=write_yaml(MINIMAL_DNA_YAML, name="params.txt"))


# ---------------------- Selection ----------------------
def test_get_energies_is_memoised():
    """
    The canonical parameter sets are built once and shared.
    """
    assert get_energies("DNA") is get_energies("DNA")
    assert get_energies("DNA") is not get_energies("RNA")


@pytest.mark.parametrize("kind", ["dna", "Dna", "DNA"])
def test_get_energies_shares_one_bundle_across_spellings(kind):
    """
    Any capitalisation of the kind returns the same cached bundle.
    """
    assert get_energies(kind) is get_energies("DNA")
    assert get_energies(kind).KIND == "DNA"


@pytest.mark.parametrize("seq, kind", [("ACGT", "DNA"), ("ACGU", "RNA"), ("GGCC", "DNA"), ("", "DNA")])
def test_select_energies_by_alphabet(seq, kind):
    """
    A/C/G/T selects DNA, A/C/G/U selects RNA; sequences without T or U fold as DNA.
    """
    assert select_energies(seq).KIND == kind


@pytest.mark.parametrize("seq", ["ACGTU", "ACGN", "acgt"])
def test_select_energies_rejects_other_alphabets(seq):
    """
    Mixed T/U, ambiguity codes and un-normalized input raise `AlphabetError`.
    """
    with pytest.raises(AlphabetError):
        select_energies(seq)
