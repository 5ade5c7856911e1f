from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Subsequence:
    """
    Immutable inclusive interval `[start, end]` over a 0-based sequence.

    A single `Subsequence` attached to a structure record stands for the base
    pair `(start, end)`. Two of them describe the independent halves of a
    bifurcation.

    Parameters
    ----------
    start : int
        Left index (0-based).
    end : int
        Right index (0-based), `end >= start` in valid uses.
    """
    start: int
    end: int

    @property
    def span(self) -> int:
        """Inclusive length of the interval, ``end - start + 1``."""
        return self.end - self.start + 1

    @property
    def loop_len(self) -> int:
        """Number of positions strictly inside the interval, ``end - start - 1``."""
        return self.end - self.start - 1

    def as_tuple(self) -> tuple[int, int]:
        """The interval as a plain ``(start, end)`` tuple."""
        return self.start, self.end
