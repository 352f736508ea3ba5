"""Unit helpers for the calculator boundary: dimensions in mm, flow in L/s, m³/s or m³/h."""

from __future__ import annotations

import logging
import math
from typing import Literal

logger = logging.getLogger(__name__)

FlowUnit = Literal["L/s", "m³/s", "m³/h"]

# multiply by factor to get m^3/s
_FLOW_FACTORS: dict[str, float] = {
    "L/s": 1e-3,
    "m³/s": 1.0,
    "m³/h": 1.0 / 3600.0,
}
_FLOW_UNIT_ALIASES: dict[str, str] = {
    "l/s": "L/s",
    "lps": "L/s",
    "m³/s": "m³/s",
    "m3/s": "m³/s",
    "m^3/s": "m³/s",
    "m³/h": "m³/h",
    "m3/h": "m³/h",
    "m^3/h": "m³/h",
    "cmh": "m³/h",
}


def mm_to_m(x_mm: float) -> float:
    """Millimetres → metres."""
    return x_mm / 1000


def m_to_mm(x_m: float) -> float:
    """Metres → millimetres."""
    return x_m * 1000


def ls_to_m3s(q_ls: float) -> float:
    """L/s → m³/s."""
    return q_ls * 1e-3


def m3h_to_m3s(q_m3h: float) -> float:
    """m³/h → m³/s."""
    return q_m3h / 3600


def _canonical_flow_unit(unit: str) -> str:
    canonical = _FLOW_UNIT_ALIASES.get(unit.strip().lower())
    if canonical is None:
        valid = ", ".join(_FLOW_FACTORS)
        logger.error("Unknown flow unit '%s'. Valid units: %s", unit, valid)
        raise ValueError(f"Unknown flow unit '{unit}'. Valid: {valid}")
    return canonical


def flow_to_m3s(value: float | None, unit: str = "L/s") -> float:
    """
    Normalise a flow rate to m³/s. None or non-finite values are treated as an empty field (0).
    """
    factor = _FLOW_FACTORS[_canonical_flow_unit(unit)]
    if value is None or not math.isfinite(value):
        return 0.0
    return value * factor


def flow_from_m3s(q_m3s: float, unit: str = "L/s") -> float:
    """Express a flow rate given in m³/s in `unit`."""
    return q_m3s / _FLOW_FACTORS[_canonical_flow_unit(unit)]


__all__ = ["FlowUnit", "mm_to_m", "m_to_mm", "ls_to_m3s", "m3h_to_m3s", "flow_to_m3s", "flow_from_m3s"]
