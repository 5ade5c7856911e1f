from __future__ import annotations


def resolve_dh_ds(*, dh: float | None, ds: float | None, dg: float | None, temp_k: float) -> tuple[float, float]:
    """
    Resolve (ΔH, ΔS) from any two of (ΔH, ΔS, ΔG(T)).

    Parameter files quote some motifs by ΔH/ΔS (stacks, dangling ends) and
    others only by their free energy at the reference temperature (loop
    initiation terms). Given two of the three values the missing one follows
    from ``ΔG(T) = ΔH − T * (ΔS / 1000)``. When all three are present `dg` is
    ignored.

    Parameters
    ----------
    dh : float or None
        Enthalpy change ΔH in kcal/mol.
    ds : float or None
        Entropy change ΔS in cal/(K·mol).
    dg : float or None
        Free energy change ΔG(T) in kcal/mol at `temp_k`.
    temp_k : float
        Reference temperature of the parameter file, in Kelvin.

    Returns
    -------
    tuple[float, float]
        ``(ΔH, ΔS)`` rounded to 2 decimal places.

    Raises
    ------
    ValueError
        If fewer than two of ``dh``, ``ds``, ``dg`` are provided.
    """
    present = sum(v is not None for v in (dh, ds, dg))
    if present < 2:
        raise ValueError("Insufficient thermo terms; need two of (dh, ds, dg).")

    if dh is not None and ds is not None:
        return round(float(dh), 2), round(float(ds), 2)

    if dh is not None and dg is not None:
        # ds = 1000 * (dh − dg) / T
        return round(float(dh), 2), round(1000.0 * (float(dh) - float(dg)) / float(temp_k), 2)

    # dh = dg + T * (ds / 1000)
    return round(float(dg) + float(temp_k) * (float(ds) / 1000.0), 2), round(float(ds), 2)
