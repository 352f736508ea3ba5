"""
air_properties.py

Closed-form moist-air properties for duct sizing at HVAC conditions.
Pressure is fixed at one standard atmosphere; no altitude correction is applied.
"""

from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger(__name__)

P_ATM = 101325.0  # Pa
KELVIN_OFFSET = 273.15

R_DRY_AIR = 287.058  # J/(kg·K)
R_WATER_VAPOUR = 461.495  # J/(kg·K)

# Sutherland's law, air referenced at 0 °C
MU_REF = 1.716e-5  # Pa·s
T_REF = 273.15  # K
SUTHERLAND_S = 110.4  # K

# Typical room/process conditions (temperature °C, relative humidity %)
AIR_PROFILES: dict[str, tuple[float, float]] = {
    "Office HVAC": (20.0, 50.0),
    "Commercial Kitchen": (30.0, 60.0),
    "Industrial Process": (40.0, 30.0),
    "Cold Storage": (5.0, 70.0),
}


def saturation_vapor_pressure(temperature_c: float) -> float:
    """
    Saturation vapour pressure of water [Pa] from the Magnus (Tetens-like) approximation:
        e_s = 610.94 * exp(17.625 T / (243.04 + T)),  T in °C

    Accurate to a few tenths of a percent over roughly -40..50 °C. Not clamped outside it;
    the pole at T = -243.04 °C gives an IEEE inf/0 result rather than an exception.
    """
    T = np.asarray(temperature_c, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        return 610.94 * np.exp(17.625 * T / (243.04 + T))


def moist_air_density(pressure_pa: float, temperature_c: float, rh_percent: float) -> float:
    """
    Density of moist air [kg/m^3] as an ideal mixture of dry air and water vapour.

    Args:
        pressure_pa: Total pressure (Pa)
        temperature_c: Dry-bulb temperature (°C)
        rh_percent: Relative humidity (%), values outside 0-100 are extrapolated

    Returns:
        float: rho = p_d / (R_d T) + p_v / (R_v T), nan or inf at absolute zero

    The dry-air partial pressure is clamped at zero so that absurd RH/pressure
    combinations cannot produce a negative density.
    """
    T = np.asarray(temperature_c, dtype=float) + KELVIN_OFFSET
    p_v = rh_percent / 100.0 * saturation_vapor_pressure(temperature_c)
    p_d = np.maximum(pressure_pa - p_v, 0.0)
    with np.errstate(divide="ignore", invalid="ignore"):
        return p_d / (R_DRY_AIR * T) + p_v / (R_WATER_VAPOUR * T)


def dynamic_viscosity(temperature_c: float) -> float:
    """Dynamic viscosity of air [Pa·s] via Sutherland's law (humidity neglected)."""
    T = np.asarray(temperature_c, dtype=float) + KELVIN_OFFSET
    with np.errstate(divide="ignore", invalid="ignore"):
        return MU_REF * (T / T_REF) ** 1.5 * ((T_REF + SUTHERLAND_S) / (T + SUTHERLAND_S))


def available_profiles() -> tuple[str, ...]:
    return tuple(AIR_PROFILES)


def air_profile(name: str):
    """Return the closed-form air state for one of the named presets (case-insensitive)."""
    # deferred: fluids.protocols imports the property functions above
    from ductulator.fluids.protocols import air_state

    lookup = {key.lower(): key for key in AIR_PROFILES}
    canonical = lookup.get(name.strip().lower())
    if canonical is None:
        available = ", ".join(available_profiles())
        logger.error("Unknown air profile '%s'. Available profiles: %s", name, available)
        raise ValueError(f"Unknown air profile '{name}'. Available: {available}")
    temperature_c, rh_percent = AIR_PROFILES[canonical]
    return air_state(temperature_c, rh_percent)


__all__ = [
    "P_ATM",
    "AIR_PROFILES",
    "saturation_vapor_pressure",
    "moist_air_density",
    "dynamic_viscosity",
    "available_profiles",
    "air_profile",
]
