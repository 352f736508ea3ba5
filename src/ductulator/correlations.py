"""
correlations.py

Friction and pressure-drop relations for fully developed flow in straight ducts.
All friction factors here are Darcy (= 4 x Fanning) friction factors.
"""

import math

import numpy as np

LAMINAR_REYNOLDS = 2300.0


def reynolds_number(rho, velocity, length, mu):
    """
    Reynolds number based on a characteristic length (hydraulic diameter for ducts).

        Re = rho |V| L / mu
    """
    return rho * abs(velocity) * length / mu


def haaland_friction_factor(reynolds, relative_roughness):
    """
    Calculate Darcy friction factor with a laminar branch and the Haaland correlation.

    Args:
        reynolds: Reynolds number
        relative_roughness: Absolute roughness over hydraulic diameter (eps/D_h)

    Returns:
        Darcy friction factor, nan when reynolds is not a positive finite number

    Laminar (Re < 2300): f = 64 / Re
    Turbulent: 1/sqrt(f) = -1.8 log10[(eps/D/3.7)^1.11 + 6.9/Re]  (Haaland 1983)

    No transition blending: f is discontinuous at Re = 2300.
    """
    if not math.isfinite(reynolds) or reynolds <= 0:
        return math.nan
    if reynolds < LAMINAR_REYNOLDS:
        return 64.0 / reynolds
    a = (relative_roughness / 3.7) ** 1.11 + 6.9 / reynolds
    return 1.0 / (-1.8 * np.log10(a)) ** 2


def dp_per_length(friction_factor, rho, velocity, hydraulic_diameter):
    """
    Darcy-Weisbach frictional pressure drop per unit length [Pa/m].

        dp/L = f rho V^2 / (2 D_h)

    Returns inf for a zero hydraulic diameter (collapsed duct).
    """
    if hydraulic_diameter <= 0:
        return math.inf
    return friction_factor * rho * velocity**2 / (2 * hydraulic_diameter)


def velocity_pressure(rho, velocity):
    """Dynamic pressure [Pa]: 0.5 rho V^2."""
    return 0.5 * rho * velocity**2
