from __future__ import annotations


class FoldingError(ValueError):
    """Base class for errors that abort the construction of a folding context."""


class AlphabetError(FoldingError):
    """
    Raised when a sequence is neither DNA (A, C, G, T) nor RNA (A, C, G, U).

    Parameters
    ----------
    seq : str
        The offending (upper-cased) sequence.
    """
    def __init__(self, seq: str):
        self.seq = seq
        invalid = sorted({base for base in seq if base not in "ACGTU"})
        if invalid:
            detail = f"unsupported symbols {', '.join(repr(b) for b in invalid)}"
        else:
            detail = "it mixes 'T' and 'U'"
        super().__init__(f"The sequence {seq!r} is not RNA or DNA: {detail}.")


class CacheFillError(FoldingError):
    """Raised when filling the V/W caches fails; the original exception is chained."""
