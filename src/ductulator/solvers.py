"""Bisection solvers inverting the duct evaluation for one unknown.

Both searches rely on the pressure drop per metre being monotone in the unknown:
decreasing in a free dimension (bigger duct, slower air) and increasing in flow.
A non-finite pressure drop aborts the search immediately.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import NamedTuple

from ductulator.fluids.protocols import AirState
from ductulator.materials import DEFAULT_MATERIAL, roughness
from ductulator.performance import evaluate_with_roughness

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BisectionOptions:
    """Search bracket and stopping rule for a bisection solve."""

    lower: float
    upper: float
    max_iter: int
    rel_tol: float = 1e-4

    def __post_init__(self):
        if not 0 < self.lower < self.upper:
            raise ValueError(f"Bracket must satisfy 0 < lower < upper, got [{self.lower}, {self.upper}]")
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {self.max_iter}")
        if self.rel_tol <= 0:
            raise ValueError(f"rel_tol must be > 0, got {self.rel_tol}")


DIMENSION_SEARCH = BisectionOptions(lower=1e-4, upper=5.0, max_iter=60)  # m
FLOW_SEARCH = BisectionOptions(lower=1e-6, upper=10.0, max_iter=80)  # m^3/s


class DimensionSolution(NamedTuple):
    dimension: float  # m
    dp_per_m: float  # Pa/m, achieved at `dimension`


def _relative_error(dp: float, target: float) -> float:
    return abs(dp - target) / max(target, 1e-6)


def solve_missing_dimension(
    fixed_dimension: float,
    flow: float,
    target_dp: float,
    air: AirState,
    material: str = DEFAULT_MATERIAL,
    *,
    fixed_is_width: bool = True,
    options: BisectionOptions = DIMENSION_SEARCH,
) -> DimensionSolution | None:
    """
    Find the free side of a rectangular duct giving `target_dp` [Pa/m].

    Args:
        fixed_dimension: The known side (m), width if `fixed_is_width` else height
        flow: Volume flow (m^3/s)
        target_dp: Target pressure drop per metre (Pa/m)

    Returns:
        DimensionSolution for the last bisection midpoint, or None when an input
        is non-positive or no finite evaluation was ever produced.
    """
    if not (fixed_dimension > 0 and flow > 0 and target_dp > 0):
        return None

    eps = roughness(material)
    lo, hi = options.lower, options.upper
    best: DimensionSolution | None = None
    for i in range(options.max_iter):
        mid = 0.5 * (lo + hi)
        w, h = (fixed_dimension, mid) if fixed_is_width else (mid, fixed_dimension)
        dp = evaluate_with_roughness(w, h, flow, air, eps).dp_per_m
        if not math.isfinite(dp):
            logger.warning("Dimension search aborted: non-finite dp at %.4g m (iteration %d)", mid, i)
            break
        # too much drop -> duct too small
        if dp > target_dp:
            lo = mid
        else:
            hi = mid
        best = DimensionSolution(mid, dp)
        if _relative_error(dp, target_dp) < options.rel_tol:
            break

    if best is None:
        return None
    logger.debug(
        "Solved %s = %.5g m for dp = %.5g Pa/m (target %.5g) after %d iterations",
        "height" if fixed_is_width else "width",
        best.dimension,
        best.dp_per_m,
        target_dp,
        i + 1,
    )
    return best


def solve_max_flow(
    width: float,
    height: float,
    target_dp: float,
    air: AirState,
    material: str = DEFAULT_MATERIAL,
    *,
    options: BisectionOptions = FLOW_SEARCH,
) -> float:
    """
    Largest flow [m^3/s] whose pressure drop does not exceed `target_dp` [Pa/m].

    Only midpoints with dp <= target are ever returned. Returns 0.0 if an input is
    non-positive or no feasible flow was seen before the search stopped.
    """
    if not (width > 0 and height > 0 and target_dp > 0):
        return 0.0

    eps = roughness(material)
    lo, hi = options.lower, options.upper
    best_flow = 0.0
    for i in range(options.max_iter):
        mid = 0.5 * (lo + hi)
        dp = evaluate_with_roughness(width, height, mid, air, eps).dp_per_m
        if not math.isfinite(dp):
            logger.warning("Flow search aborted: non-finite dp at %.4g m^3/s (iteration %d)", mid, i)
            break
        if dp > target_dp:
            hi = mid
        else:
            lo = mid
            best_flow = mid
        if _relative_error(dp, target_dp) < options.rel_tol:
            break

    logger.debug("Max flow %.5g m^3/s for dp <= %.5g Pa/m after %d iterations", best_flow, target_dp, i + 1)
    return best_flow


__all__ = [
    "BisectionOptions",
    "DIMENSION_SEARCH",
    "FLOW_SEARCH",
    "DimensionSolution",
    "solve_missing_dimension",
    "solve_max_flow",
]
