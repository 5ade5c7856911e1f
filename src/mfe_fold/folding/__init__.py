from mfe_fold.folding.back_pointer import FoldBacktrackOp, FoldBackPointer
from mfe_fold.folding.errors import AlphabetError, CacheFillError, FoldingError
from mfe_fold.folding.fold_state import (
    INVALID_STRUCTURE,
    UNRESOLVED_STRUCTURE,
    CellStatus,
    FoldState,
    NucleicAcidStructure,
    make_fold_state,
)

__all__ = [
    "FoldBacktrackOp",
    "FoldBackPointer",
    "AlphabetError",
    "CacheFillError",
    "FoldingError",
    "INVALID_STRUCTURE",
    "UNRESOLVED_STRUCTURE",
    "CellStatus",
    "FoldState",
    "NucleicAcidStructure",
    "make_fold_state",
]
