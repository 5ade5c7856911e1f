from mfe_fold.energies.energy_types import MultibranchCoeffs, NucleicAcidEnergies
from mfe_fold.energies.energy_loader import NucleicAcidEnergyLoader, get_energies, select_energies
from mfe_fold.energies.energy_params import DEFAULT_SCALE, EnergyParams, to_energy_params

__all__ = [
    "MultibranchCoeffs",
    "NucleicAcidEnergies",
    "NucleicAcidEnergyLoader",
    "get_energies",
    "select_energies",
    "DEFAULT_SCALE",
    "EnergyParams",
    "to_energy_params",
]
