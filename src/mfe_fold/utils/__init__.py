from mfe_fold.utils.energy_utils import calculate_delta_g, jacobson_stockmayer_coefficient, scale_energy
from mfe_fold.utils.nucleotide_utils import pair_key, is_dna, is_rna, gc_content

__all__ = [
    "calculate_delta_g",
    "jacobson_stockmayer_coefficient",
    "scale_energy",
    "pair_key",
    "is_dna",
    "is_rna",
    "gc_content",
]
