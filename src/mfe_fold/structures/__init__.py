from mfe_fold.structures.subsequence import Subsequence
from mfe_fold.structures.tri_matrix import FoldTriMatrix

__all__ = [
    "Subsequence",
    "FoldTriMatrix",
]
