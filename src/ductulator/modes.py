"""
modes.py

Operating modes of the duct calculator. Takes the raw field values as the shell
holds them (dimensions in mm, flow in a chosen unit) and returns a `SolveResult`
with the solved quantities and any advisory warnings. Each call is independent:
nothing is cached or mutated between solves.

Modes:
  - "pressure_drop":   all geometry and flow known, evaluate once
  - "fixed_dimension": one side known, size the other from velocity and/or dp targets
  - "max_flow":        both sides known, largest flow for a velocity or dp target
  - "magic":           2-3 locked quantities, coordinate-descent search for the rest
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields
from typing import Iterator, Literal, Mapping

from ductulator.fluids.protocols import AirState, air_state
from ductulator.geometry import area_rectangular
from ductulator.magic import MAGIC_OPTIONS, ConstraintSet, MagicOptions, solve_magic
from ductulator.materials import DEFAULT_MATERIAL
from ductulator.performance import DuctPerformance, evaluate
from ductulator.solvers import solve_max_flow, solve_missing_dimension
from ductulator.units import flow_to_m3s, m_to_mm, mm_to_m

logger = logging.getLogger(__name__)

Mode = Literal["pressure_drop", "fixed_dimension", "max_flow", "magic"]
MODES: tuple[str, ...] = ("pressure_drop", "fixed_dimension", "max_flow", "magic")

HIGH_VELOCITY_LIMIT = 15.0  # m/s

HIGH_VELOCITY = "Velocity high (>15 m/s): check suitability."
VELOCITY_AND_DP = "Enter either Velocity OR Pressure Drop in Max Flow mode, not both."
NO_MAX_FLOW_TARGET = "Enter a Velocity or a Pressure Drop target in Max Flow mode."
NO_FIXED_DIMENSION = "Enter duct width or height to size the other side."
NO_DIMENSION_CANDIDATE = "Could not size the missing side: provide flow with a velocity or pressure drop target."


def _field(value: float | None, default: float = 0.0) -> float:
    """Empty (None) or non-finite entries take `default`, 0 like a blank text box."""
    return value if value is not None and math.isfinite(value) else default


@dataclass(frozen=True)
class DuctInputs:
    """Field values as entered, None for a blank field. Defaults are the calculator's reset state."""

    mode: Mode = "pressure_drop"
    width_mm: float = 200.0
    height_mm: float = 200.0
    flow: float = 100.0
    flow_unit: str = "L/s"
    velocity: float = 0.0  # m/s
    target_dp: float = 1.0  # Pa/m
    temperature_c: float = 20.0
    rh_percent: float = 50.0
    material: str = DEFAULT_MATERIAL
    locks: frozenset[str] = frozenset()  # names of locked magic-mode quantities

    def __post_init__(self):
        # accept a {name: locked} mapping as the shell holds it
        locks = self.locks
        if isinstance(locks, Mapping):
            locks = (name for name, locked in locks.items() if locked)
        object.__setattr__(self, "locks", frozenset(locks))

    @property
    def flow_m3s(self) -> float:
        return flow_to_m3s(self.flow, self.flow_unit)

    def air(self) -> AirState:
        return air_state(_field(self.temperature_c, 20.0), _field(self.rh_percent, 50.0))


@dataclass(frozen=True)
class SolveResult:
    """
    Outcome of one solve. Fields that do not apply to the mode, or that could not be
    computed, are None. `warnings` is empty for a clean solve.
    """

    mode: str
    width_mm: float | None = None
    height_mm: float | None = None
    flow_m3s: float | None = None
    velocity_ms: float | None = None
    dp_pa_per_m: float | None = None
    velocity_pressure_pa: float | None = None
    hydraulic_diameter_m: float | None = None
    reynolds: float | None = None
    friction_factor: float | None = None
    target_dp_pa_per_m: float | None = None
    rms: float | None = None
    converged: bool | None = None
    warnings: tuple[str, ...] = ()

    @property
    def has_result(self) -> bool:
        return self.flow_m3s is not None

    def as_rows(self) -> Iterator[tuple[str, object]]:
        """(key, value) pairs of the populated fields, ready for a CSV writer."""
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "warnings":
                for w in value:
                    yield ("warning", w)
            elif value is not None:
                yield (f.name, value)


def _with_performance(mode: str, width_mm: float, height_mm: float, flow: float, perf: DuctPerformance, **extra):
    return SolveResult(
        mode=mode,
        width_mm=width_mm,
        height_mm=height_mm,
        flow_m3s=flow,
        velocity_ms=perf.velocity,
        dp_pa_per_m=perf.dp_per_m,
        velocity_pressure_pa=perf.velocity_pressure,
        hydraulic_diameter_m=perf.hydraulic_diameter,
        reynolds=perf.reynolds,
        friction_factor=perf.friction_factor,
        **extra,
    )


def _solve_pressure_drop(inputs: DuctInputs, air: AirState) -> SolveResult:
    w_mm, h_mm, q = _field(inputs.width_mm), _field(inputs.height_mm), inputs.flow_m3s
    perf = evaluate(mm_to_m(w_mm), mm_to_m(h_mm), q, air, inputs.material)
    warnings = (HIGH_VELOCITY,) if perf.velocity > HIGH_VELOCITY_LIMIT else ()
    return _with_performance("pressure_drop", w_mm, h_mm, q, perf, warnings=warnings)


def _solve_fixed_dimension(inputs: DuctInputs, air: AirState) -> SolveResult:
    w_mm, h_mm = _field(inputs.width_mm), _field(inputs.height_mm)
    need_v, need_dp = _field(inputs.velocity), _field(inputs.target_dp)
    q = inputs.flow_m3s
    if q <= 0:
        # velocity-implied flow; zero when a side is missing
        q = need_v * area_rectangular(mm_to_m(w_mm), mm_to_m(h_mm)) if need_v > 0 else 0.0

    width_known, height_known = w_mm > 0, h_mm > 0
    if not width_known and not height_known:
        return SolveResult(mode="fixed_dimension", warnings=(NO_FIXED_DIMENSION,))

    if width_known != height_known:
        fixed_is_width = width_known
        fixed_m = mm_to_m(w_mm if fixed_is_width else h_mm)
        candidates: list[float] = []
        if need_v > 0 and q > 0:
            candidates.append(m_to_mm(q / need_v / fixed_m))
        if need_dp > 0 and q > 0:
            sol = solve_missing_dimension(
                fixed_m, q, need_dp, air, inputs.material, fixed_is_width=fixed_is_width
            )
            if sol is not None:
                candidates.append(m_to_mm(sol.dimension))
        if not candidates:
            return SolveResult(mode="fixed_dimension", warnings=(NO_DIMENSION_CANDIDATE,))
        # larger side -> lower velocity
        solved = max(candidates)
        logger.debug("Fixed-dimension candidates %s mm, picked %.1f mm", candidates, solved)
        if fixed_is_width:
            h_mm = solved
        else:
            w_mm = solved

    perf = evaluate(mm_to_m(w_mm), mm_to_m(h_mm), q, air, inputs.material)
    return _with_performance(
        "fixed_dimension", w_mm, h_mm, q, perf, target_dp_pa_per_m=need_dp if need_dp > 0 else None
    )


def _solve_max_flow(inputs: DuctInputs, air: AirState) -> SolveResult:
    w_mm, h_mm = _field(inputs.width_mm), _field(inputs.height_mm)
    need_v, need_dp = _field(inputs.velocity), _field(inputs.target_dp)
    if need_v > 0 and need_dp > 0:
        return SolveResult(mode="max_flow", warnings=(VELOCITY_AND_DP,))
    w, h = mm_to_m(w_mm), mm_to_m(h_mm)
    if need_v > 0:
        q = need_v * area_rectangular(w, h)
    elif need_dp > 0:
        q = solve_max_flow(w, h, need_dp, air, inputs.material)
    else:
        return SolveResult(mode="max_flow", warnings=(NO_MAX_FLOW_TARGET,))
    perf = evaluate(w, h, q, air, inputs.material)
    return _with_performance(
        "max_flow", w_mm, h_mm, q, perf, target_dp_pa_per_m=need_dp if need_dp > 0 else None
    )


def _solve_magic(inputs: DuctInputs, air: AirState, options: MagicOptions) -> SolveResult:
    constraints = ConstraintSet.from_mappings(
        dict.fromkeys(inputs.locks, True),
        {
            "flow": inputs.flow_m3s,
            "width": mm_to_m(_field(inputs.width_mm)),
            "height": mm_to_m(_field(inputs.height_mm)),
            "velocity": _field(inputs.velocity),
            "dp": _field(inputs.target_dp),
        },
    )
    solution, warnings = solve_magic(constraints, air, inputs.material, options=options)
    if solution is None:
        return SolveResult(mode="magic", warnings=tuple(warnings))
    return _with_performance(
        "magic",
        m_to_mm(solution.width),
        m_to_mm(solution.height),
        solution.flow,
        solution.performance,
        rms=solution.rms,
        converged=solution.converged,
        warnings=tuple(warnings),
    )


def solve(inputs: DuctInputs, *, magic_options: MagicOptions = MAGIC_OPTIONS) -> SolveResult:
    """Run the solver(s) for `inputs.mode` and return the result record."""
    if inputs.mode not in MODES:
        logger.error("Unknown mode '%s'. Valid modes: %s", inputs.mode, ", ".join(MODES))
        raise ValueError(f"Unknown mode '{inputs.mode}'. Valid: {', '.join(MODES)}")
    air = inputs.air()
    if inputs.mode == "pressure_drop":
        result = _solve_pressure_drop(inputs, air)
    elif inputs.mode == "fixed_dimension":
        result = _solve_fixed_dimension(inputs, air)
    elif inputs.mode == "max_flow":
        result = _solve_max_flow(inputs, air)
    else:
        result = _solve_magic(inputs, air, magic_options)
    for w in result.warnings:
        logger.info("%s: %s", inputs.mode, w)
    return result


__all__ = ["Mode", "MODES", "HIGH_VELOCITY_LIMIT", "DuctInputs", "SolveResult", "solve"]
