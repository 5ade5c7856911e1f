"""
Unit tests for core thermodynamic utility functions.

This module validates helper functions from `energy_utils` that convert
enthalpy/entropy pairs into free energies, scale them to the integer units of
the DP tables and compute the Jacobson-Stockmayer coefficient for long loops.
"""
import math

from mfe_fold.utils.energy_utils import (
    JS_ALPHA,
    R_KCAL,
    calculate_delta_g,
    jacobson_stockmayer_coefficient,
    scale_energy,
)


# ------------------------------
# calculate_delta_g
# ------------------------------
def test_calculate_delta_g_none_returns_inf():
    """
    A missing (ΔH, ΔS) pair has an undefined free energy, reported as +infinity.
    """
    assert math.isinf(calculate_delta_g(None, 310.15))


def test_calculate_delta_g_matches_formula():
    """
    Verifies ΔG = ΔH - T * ΔS / 1000 with ΔS in cal/(K·mol).
    """
    dh, ds = -8.0, -19.9
    temp_k = 310.15
    expected = dh - temp_k * (ds / 1000.0)
    assert math.isclose(calculate_delta_g((dh, ds), temp_k), expected, rel_tol=1e-12)


# ------------------------------
# scale_energy
# ------------------------------
def test_scale_energy_rounds_to_integer_units():
    """
    Free energies are multiplied by the scale and rounded to an int.
    """
    assert scale_energy(-1.834, 100) == -183
    assert scale_energy(3.5, 100) == 350
    assert isinstance(scale_energy(0.1, 100), int)


def test_scale_energy_rounds_half_to_even():
    """
    Exact halves follow Python's round-half-to-even rule.
    """
    assert scale_energy(0.5, 1) == 0
    assert scale_energy(1.5, 1) == 2


# ------------------------------
# Jacobson-Stockmayer
# ------------------------------
def test_jacobson_stockmayer_coefficient_scales_linearly():
    """
    The coefficient is α·R·T and scales with the integer unit factor.
    """
    temp_k = 310.15
    base = jacobson_stockmayer_coefficient(temp_k)
    assert math.isclose(base, JS_ALPHA * R_KCAL * temp_k)
    assert math.isclose(jacobson_stockmayer_coefficient(temp_k, 100), base * 100)
