from __future__ import annotations
from typing import Optional

# Ideal Gas Constant in kcal mol⁻¹ K⁻¹
R_KCAL = 1.9872e-3

# Jacobson–Stockmayer loop-entropy coefficient used for long loops.
JS_ALPHA = 2.44


def calculate_delta_g(delta_h_delta_s: Optional[tuple[float, float]], temp_k: float) -> float:
    """
    Compute Gibbs free energy change, ΔG, from enthalpy/entropy at a temperature.

    Uses the thermodynamic relation `ΔG = ΔH − T * (ΔS / 1000)`
    Where:
        - ΔH is in kcal/mol
        - ΔS is in cal/(K·mol)
        - T is in Kelvin.

    Parameters
    ----------
    delta_h_delta_s : tuple[float, float] or None
        Two-tuple `(ΔH, ΔS)`. If `None`, the value is considered unavailable
        and `+∞` is returned.
    temp_k : float
        Absolute temperature in Kelvin.

    Returns
    -------
    float
        Free energy change in `kcal/mol`.
    """
    if delta_h_delta_s is None:
        return float("inf")
    delta_h, delta_s = delta_h_delta_s

    return delta_h - temp_k * (delta_s / 1000.0)


def scale_energy(delta_g: float, scale: int) -> int:
    """
    Convert a free energy in kcal/mol to the integer units used by the DP tables.

    Parameters
    ----------
    delta_g : float
        Free energy in kcal/mol.
    scale : int
        Units per kcal/mol (100 → hundredths of kcal/mol).

    Returns
    -------
    int
        `round(delta_g * scale)`.
    """
    return int(round(delta_g * scale))


def jacobson_stockmayer_coefficient(temp_k: float, scale: int = 1) -> float:
    """
    Order-1 Jacobson–Stockmayer coefficient `α · R · T`, optionally scaled.

    Multiplying this by `ln(n / n_max)` gives the free-energy increment of a
    loop of length `n` relative to the longest tabulated loop `n_max`.
    """
    return JS_ALPHA * R_KCAL * temp_k * scale
