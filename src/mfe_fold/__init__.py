"""
Minimum free energy secondary structure prediction for single DNA and RNA strands.

    >>> from mfe_fold import fold
    >>> result = fold("GGGGAAAACCCC")
    >>> result.dot_bracket()
    '((((....))))'
"""
from mfe_fold.folding.context import FoldingContext
from mfe_fold.folding.errors import AlphabetError, CacheFillError, FoldingError
from mfe_fold.folding.recurrences import FoldingConfig, FoldingEngine
from mfe_fold.folding.traceback import Result, traceback

__version__ = "0.1.0"


def fold(seq: str, temp: float = 37.0) -> Result:
    """
    Folds `seq` at `temp` °C and returns its minimum free energy structure.

    Raises
    ------
    AlphabetError
        If `seq` is neither DNA nor RNA.
    """
    return traceback(FoldingContext.create(seq, temp))


def dot_bracket(seq: str, temp: float = 37.0) -> str:
    """Dot-bracket notation of the minimum free energy structure of `seq`."""
    return fold(seq, temp).dot_bracket()


def mfe(seq: str, temp: float = 37.0) -> float:
    """Minimum free energy of `seq` in kcal/mol, `math.inf` if nothing can fold."""
    return fold(seq, temp).minimum_free_energy()


__all__ = [
    "AlphabetError",
    "CacheFillError",
    "FoldingConfig",
    "FoldingContext",
    "FoldingEngine",
    "FoldingError",
    "Result",
    "dot_bracket",
    "fold",
    "mfe",
    "traceback",
]
