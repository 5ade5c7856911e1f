from typing import Final

_DNA_BASES: Final[frozenset[str]] = frozenset("ACTG")
_RNA_BASES: Final[frozenset[str]] = frozenset("ACUG")
_DOT_BRACKET_SYMBOLS: Final[frozenset[str]] = frozenset("().")


def is_dna(seq: str) -> bool:
    """Return True if every symbol of `seq` is one of A, C, T, G."""
    return all(base in _DNA_BASES for base in seq)


def is_rna(seq: str) -> bool:
    """Return True if every symbol of `seq` is one of A, C, U, G."""
    return all(base in _RNA_BASES for base in seq)


def is_valid_dot_bracket(structure: str) -> bool:
    """Return True if `structure` only uses the dot-bracket alphabet '(', ')', '.'."""
    return all(symbol in _DOT_BRACKET_SYMBOLS for symbol in structure)


def gc_content(seq: str) -> float:
    """
    Fraction of G and C bases in a sequence (case-insensitive).

    Returns
    -------
    float
        (G + C) / len(seq); 0.0 for an empty sequence.
    """
    if not seq:
        return 0.0

    seq_upper = seq.upper()
    return (seq_upper.count("G") + seq_upper.count("C")) / len(seq_upper)


def pair_key(seq: str, base_i: int, base_i1: int, base_j: int, base_j1: int) -> str:
    """
    Build the nearest-neighbor lookup key "XY/ZW" for two facing dinucleotides.

    The top dimer "XY" reads `seq[i]`, `seq[i1]` 5'→3' and the bottom dimer "ZW"
    reads `seq[j]`, `seq[j1]`, i.e. the complementary strand 3'→5'. An index of
    -1 marks a missing neighbour (a dangling end) and is rendered as `"."`.

    Example
    -------
    seq = "GGGAAATCCC", i=0, i1=1, j=9, j1=8
    key = "GG/CC"

    Parameters
    ----------
    seq : str
        Upper-cased nucleotide sequence.
    base_i, base_i1 : int
        Indices of the top dimer (or -1).
    base_j, base_j1 : int
        Indices of the bottom dimer (or -1).

    Returns
    -------
    str
        The lookup key, e.g. ``"GA/CT"`` or ``".G/AC"``.
    """
    def _at(index: int) -> str:
        return seq[index] if index >= 0 else "."

    return f"{_at(base_i)}{_at(base_i1)}/{_at(base_j)}{_at(base_j1)}"
