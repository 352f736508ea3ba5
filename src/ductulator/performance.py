"""
performance.py

Hydraulic performance of a straight rectangular duct carrying moist air.

`evaluate` is the single source of truth for every solver: given a cross-section,
a volume flow and an air state it returns velocity, Reynolds number, Darcy friction
factor, pressure drop per metre and velocity pressure. It never raises for
degenerate geometry; a collapsed section gives zero velocity, nan friction factor
and an infinite pressure drop so callers can branch on ``math.isfinite``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Literal

import numpy as np

from ductulator.correlations import (
    LAMINAR_REYNOLDS,
    dp_per_length,
    haaland_friction_factor,
    reynolds_number,
    velocity_pressure,
)
from ductulator.fluids.protocols import AirState
from ductulator.geometry import area_rectangular, hydraulic_diameter, perimeter_rectangular
from ductulator.materials import DEFAULT_MATERIAL, roughness

logger = logging.getLogger(__name__)

# floor on D_h when forming eps/D_h
MIN_HYDRAULIC_DIAMETER = 1e-9


@dataclass(frozen=True)
class DuctPerformance:
    """Result of one duct evaluation. SI units throughout."""

    velocity: float  # m/s
    reynolds: float  # -
    friction_factor: float  # - (Darcy)
    dp_per_m: float  # Pa/m
    velocity_pressure: float  # Pa
    hydraulic_diameter: float  # m
    area: float  # m^2
    perimeter: float  # m
    rho: float  # kg/m^3
    mu: float  # Pa·s

    @property
    def regime(self) -> Literal["laminar", "turbulent", "undefined"]:
        if not math.isfinite(self.friction_factor):
            return "undefined"
        return "laminar" if self.reynolds < LAMINAR_REYNOLDS else "turbulent"


def evaluate_with_roughness(
    width: float, height: float, flow: float, air: AirState, roughness_m: float
) -> DuctPerformance:
    """Same as :func:`evaluate` with the absolute roughness [m] given directly."""
    rho = air.rho
    mu = air.mu
    area = area_rectangular(width, height)
    perimeter = perimeter_rectangular(width, height)
    d_h = hydraulic_diameter(area, perimeter)
    velocity = flow / area if area > 0 else 0.0
    # air states at absolute zero carry nan/0 properties
    with np.errstate(divide="ignore", invalid="ignore"):
        reynolds = reynolds_number(rho, velocity, d_h, mu)
        f = haaland_friction_factor(reynolds, roughness_m / max(d_h, MIN_HYDRAULIC_DIAMETER))
        dp = dp_per_length(f, rho, velocity, d_h)
    return DuctPerformance(
        velocity=velocity,
        reynolds=reynolds,
        friction_factor=f,
        dp_per_m=dp,
        velocity_pressure=velocity_pressure(rho, velocity),
        hydraulic_diameter=d_h,
        area=area,
        perimeter=perimeter,
        rho=rho,
        mu=mu,
    )


def evaluate(
    width: float,
    height: float,
    flow: float,
    air: AirState,
    material: str = DEFAULT_MATERIAL,
) -> DuctPerformance:
    """
    Evaluate a rectangular duct.

    Args:
        width: Duct width (m)
        height: Duct height (m)
        flow: Volume flow rate (m^3/s)
        air: Air state providing rho (kg/m^3) and mu (Pa·s)
        material: Duct material name, unknown names use galvanised steel roughness

    Returns:
        DuctPerformance
    """
    return evaluate_with_roughness(width, height, flow, air, roughness(material))


def sweep_dimension(
    values,
    fixed: float,
    flow: float,
    air: AirState,
    material: str = DEFAULT_MATERIAL,
    vary: Literal["width", "height"] = "height",
) -> dict[str, np.ndarray]:
    """
    Evaluate the duct over a grid of one free dimension with the other held at `fixed`.

    Returns arrays keyed "dimension", "velocity", "reynolds", "dp_per_m" and
    "velocity_pressure", in the order of `values`.
    """
    assert vary in ("width", "height"), f"vary must be 'width' or 'height', not {vary!r}"
    eps = roughness(material)
    dims = np.asarray(values, dtype=float)
    results = []
    for d in dims:
        w, h = (fixed, d) if vary == "height" else (d, fixed)
        results.append(evaluate_with_roughness(w, h, flow, air, eps))
    return {
        "dimension": dims,
        "velocity": np.array([r.velocity for r in results]),
        "reynolds": np.array([r.reynolds for r in results]),
        "dp_per_m": np.array([r.dp_per_m for r in results]),
        "velocity_pressure": np.array([r.velocity_pressure for r in results]),
    }


__all__ = ["DuctPerformance", "evaluate", "evaluate_with_roughness", "sweep_dimension"]
