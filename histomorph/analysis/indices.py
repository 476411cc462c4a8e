"""Dynamic histomorphometry indices derived from label measurements.

Names follow the ASBMR nomenclature:

* ``MS/BS``  mineralizing surface per bone surface, ``(dL.Pm + sL.Pm / 2) / B.Pm``
* ``MAR``    mineral apposition rate, ``Ir.L.Th / interval``
* ``BFR/BS`` bone formation rate per bone surface, ``MAR * MS/BS``
"""

from __future__ import annotations

from dataclasses import dataclass

from .types import PerimeterResult, ThicknessUnitResult


@dataclass(frozen=True)
class DynamicIndices:
    ms_bs: float | None
    mar: float | None
    bfr_bs: float | None


# Mineralizing surface as a percentage of bone surface
def mineralizing_surface(double_length: float, single_length: float, bone_surface: float) -> float | None:
    if bone_surface <= 0.0:
        return None
    return 100.0 * (double_length + 0.5 * single_length) / bone_surface


# Mineral apposition rate in length units per day
def mineral_apposition_rate(interlabel_thickness: float | None, interval_days: float) -> float | None:
    if interlabel_thickness is None:
        return None
    if interval_days <= 0.0:
        raise ValueError(f"interval_days must be positive, got {interval_days}")
    return interlabel_thickness / interval_days


# Bone formation rate; ms_bs is a percentage so the result is per unit surface
def bone_formation_rate(mar: float | None, ms_bs: float | None) -> float | None:
    if mar is None or ms_bs is None:
        return None
    return mar * ms_bs / 100.0


def dynamic_indices(
    perimeter: PerimeterResult,
    thickness: ThicknessUnitResult | None,
    interval_days: float,
) -> DynamicIndices:
    """Combine one perimeter and its label thickness into MS/BS, MAR, BFR/BS."""

    ms_bs = mineralizing_surface(
        perimeter.double_length, perimeter.single_length, perimeter.perimeter_length
    )
    mean = thickness.mean_thickness if thickness is not None else None
    mar = mineral_apposition_rate(mean, interval_days)
    return DynamicIndices(ms_bs=ms_bs, mar=mar, bfr_bs=bone_formation_rate(mar, ms_bs))
