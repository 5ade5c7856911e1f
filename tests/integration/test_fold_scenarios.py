"""
Integration tests for end-to-end folding through the public `mfe_fold` API.

These tests fold whole sequences, from alphabet detection through the cache
fill to the traceback, and check the properties every prediction must have:
balanced brackets, reproducible output, energies that add up across
independent domains, and mirror-image folds for reverse complements.

Attributes
----------
pytestmark : list
    Marks every test in this module as 'integration'.
"""
from __future__ import annotations

# --- Standard Library Imports ---
import math

# --- Third-Party Imports ---
import pytest

# --- Local Application Imports ---
import mfe_fold
from mfe_fold import AlphabetError, FoldingContext, dot_bracket, fold, mfe
from mfe_fold.folding import FoldBacktrackOp
from mfe_fold.utils.nucleotide_utils import is_valid_dot_bracket

pytestmark = [pytest.mark.integration]

HAIRPIN = "GGGGAAAACCCC"
SECOND_HAIRPIN = "GCGCAAAAGCGC"
LINKER = "AAAAA"

DNA_COMPLEMENT = str.maketrans("ACGT", "TGCA")


# --------------------------
# Test Helper Functions
# --------------------------
def reverse_complement(seq: str) -> str:
    return seq.translate(DNA_COMPLEMENT)[::-1]


def mirror(structure: str) -> str:
    """Reverses a dot-bracket string and swaps the bracket direction."""
    return structure[::-1].translate(str.maketrans("()", ")("))


def is_balanced(structure: str) -> bool:
    """True if no prefix closes more pairs than it opens and every pair is closed."""
    depth = 0
    for symbol in structure:
        if symbol == "(":
            depth += 1
        elif symbol == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


# --------------------------
# Scenarios
# --------------------------
def test_single_hairpin():
    """
    A 4-bp G·C stem around a tetraloop folds into one hairpin with negative ΔG.
    """
    result = fold(HAIRPIN)

    assert result.dot_bracket() == "((((....))))"
    assert result.minimum_free_energy() < 0
    assert math.isfinite(result.minimum_free_energy())


def test_single_hairpin_rna():
    """
    The same stem in RNA folds with the RNA tables into the same hairpin.
    """
    context = FoldingContext.create("GGGGUUUUCCCC")
    assert context.energies.KIND == "RNA"
    assert dot_bracket("GGGGUUUUCCCC") == "((((....))))"


def test_module_helpers_agree_with_fold():
    """
    `dot_bracket` and `mfe` are shorthands for the corresponding `Result` methods.
    """
    result = fold(HAIRPIN)
    assert dot_bracket(HAIRPIN) == result.dot_bracket()
    assert mfe(HAIRPIN) == result.minimum_free_energy()
    assert mfe_fold.__version__


@pytest.mark.parametrize("seq", ["", "A", "AAAA", "ACGTA", "AAAAAAAAAAAA"])
def test_sequences_without_structure(seq):
    """
    Sequences that are too short, or have nothing to pair, give an empty
    result with infinite free energy.
    """
    result = fold(seq)
    assert len(result) == 0
    assert result.dot_bracket() == ""
    assert math.isinf(result.minimum_free_energy())


@pytest.mark.parametrize("seq", ["GGGGAAAXCCCC", "GGGGAAAACCCC1", "ACGTU"])
def test_invalid_alphabet_produces_no_result(seq):
    """
    An unsupported alphabet fails before any folding happens.
    """
    with pytest.raises(AlphabetError):
        fold(seq)


def test_two_disjoint_hairpins():
    """
    Two hairpins separated by a linker fold independently; the total is the
    sum of both hairpins folded on their own.
    """
    seq = HAIRPIN + LINKER + SECOND_HAIRPIN
    result = fold(seq)

    assert result.dot_bracket() == "((((....))))" + "." * len(LINKER) + "((((....))))"
    assert any(record.description == "bifurcation" for record in result)
    assert result.minimum_free_energy() == pytest.approx(
        mfe(HAIRPIN + LINKER) + mfe(LINKER + SECOND_HAIRPIN), abs=1e-9
    )


def test_three_way_junction_folds_into_multiloop():
    """
    Two hairpins enclosed by an outer 7-bp stem form a multiloop. The junction
    is reported as a "multiloop" record closing the innermost outer pair, and
    the record energies add up to W[0, N-1].
    """
    seq = "GGCGCGGA" + "CAGTCAGAAAACTGACTG" + "AA" + "GTCACTCAAAAGAGTGAC" + "ACCGCGCC"
    context = FoldingContext.create(seq)
    result = fold(seq)

    assert result.dot_bracket() == "(((((((.(((((((....)))))))..(((((((....))))))).)))))))"

    junctions = [record for record in result if record.description == "multiloop"]
    assert len(junctions) == 1
    junction = junctions[0]
    assert junction.back_ptr.operation is FoldBacktrackOp.MULTILOOP
    assert junction.inner[0].as_tuple() == (6, 47)
    assert set(junction.back_ptr.segs) == {(8, 25), (28, 45)}

    w_top = context.state.w_cache.get(0, len(seq) - 1)
    assert sum(record.energy for record in result) == w_top.energy
    assert result.minimum_free_energy() == pytest.approx(w_top.energy / 100)


def test_fold_is_idempotent():
    """
    Folding twice yields identical strings and identical energies.
    """
    seq = "GGGAGGTCGTTACATCTGGGTAACACCGGTACTGATCCGGTGACCTCCC"
    first = fold(seq)
    second = fold(seq)

    assert first.dot_bracket() == second.dot_bracket()
    assert first.minimum_free_energy() == second.minimum_free_energy()
    assert first.structures == second.structures


@pytest.mark.parametrize(
    "seq",
    [
        HAIRPIN,
        HAIRPIN + LINKER + SECOND_HAIRPIN,
        "GGGAGGTCGTTACATCTGGGTAACACCGGTACTGATCCGGTGACCTCCC",
        "ACCCGCAAGGCCGACGGCGCCGCCGCTGGTGCAAGTCCAGCCACGCTTCGGCGTGGGCGCTCATGGGT",
    ],
)
def test_dot_bracket_is_balanced(seq):
    """
    Every prediction renders as a well-formed dot-bracket string.
    """
    structure = dot_bracket(seq)
    assert is_valid_dot_bracket(structure)
    assert is_balanced(structure)
    assert len(structure) <= len(seq)


def test_self_complementary_fold_is_mirror_symmetric():
    """
    A sequence equal to its own reverse complement folds into a structure
    equal to its own mirror image.
    """
    seq = "GGGGAAATTTCCCC"
    assert reverse_complement(seq) == seq

    structure = dot_bracket(seq)
    assert len(structure) == len(seq)
    assert structure == mirror(structure)


def test_reverse_complement_hairpin_is_mirrored():
    """
    A hairpin spanning the whole strand and its reverse complement fold into
    mirror images of one another.
    """
    seq = "GCGCTTTTGCGC"
    other = reverse_complement(seq)

    assert other == "GCGCAAAAGCGC"
    assert dot_bracket(other) == mirror(dot_bracket(seq))


def test_energy_rises_with_temperature():
    """
    Heating weakens the stem: the MFE never decreases from 37 °C to 50 °C to 70 °C.
    """
    cold, warm, hot = (mfe(HAIRPIN, temp) for temp in (37.0, 50.0, 70.0))
    assert cold <= warm <= hot
    assert cold < hot


def test_strong_melting_leaves_no_structure():
    """
    Far above the melting point no helix is favourable enough to form.
    """
    result = fold("GCAAAAGC", 95.0)
    assert result.minimum_free_energy() > 0 or math.isinf(result.minimum_free_energy())
