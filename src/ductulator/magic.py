"""Constrained multi-variable duct solve ("magic" mode).

Any two or three of flow, width, height, velocity and pressure drop per metre can be
locked to a target. The search only moves flow, width and height; velocity and
pressure drop are always derived through the duct evaluation. Each locked quantity
contributes a normalised residual (value - target) / max(target, 1e-6) and the
objective is the RMS of those residuals.

The search is greedy coordinate descent with fixed geometric steps: every round
tries one step down and one step up on each unlocked variable and keeps the best
of the two only if it lowers the RMS. It finds a local optimum reachable from the
starting point, not a global one, and can stop above tolerance when the target
lies between lattice points of the step ratios.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Mapping, NamedTuple

from ductulator.fluids.protocols import AirState
from ductulator.materials import DEFAULT_MATERIAL, roughness
from ductulator.performance import DuctPerformance, evaluate_with_roughness

logger = logging.getLogger(__name__)

CONSTRAINT_NAMES = ("flow", "width", "height", "velocity", "dp")
SEARCH_VARIABLES = ("flow", "width", "height")
MIN_LOCKED = 2
MAX_LOCKED = 3

TOO_MANY_LOCKED = "Too many locked fields: unlock one to allow solving."
NOT_ENOUGH_CONSTRAINTS = "Not enough constraints: {suggestion}."
FAILED_TO_CONVERGE = "Magic solver failed to converge: try different locks or starting values."
STOPPED_ABOVE_TOLERANCE = (
    "Magic solver stopped at RMS residual {rms:.2e} (tolerance {tol:.0e}); showing the closest match found."
)


@dataclass(frozen=True)
class MagicOptions:
    """Step ratios, floors and stopping rule for the coordinate-descent search (SI units)."""

    max_rounds: int = 200
    flow_step: float = 1.1
    dimension_step: float = 1.05
    rms_tol: float = 1e-4
    min_dimension: float = 0.01  # m
    min_flow: float = 1e-6  # m^3/s
    default_flow: float = 0.1  # m^3/s
    default_dimension: float = 0.2  # m

    def __post_init__(self):
        if self.max_rounds < 1:
            raise ValueError(f"max_rounds must be >= 1, got {self.max_rounds}")
        if self.flow_step <= 1 or self.dimension_step <= 1:
            raise ValueError(
                f"Step ratios must be > 1, got flow_step={self.flow_step}, dimension_step={self.dimension_step}"
            )
        if self.min_dimension <= 0 or self.min_flow <= 0:
            raise ValueError("Floors min_dimension and min_flow must be > 0")


MAGIC_OPTIONS = MagicOptions()


@dataclass(frozen=True)
class Constraint:
    locked: bool = False
    target: float = 0.0


@dataclass(frozen=True)
class ConstraintSet:
    """
    Locked flags and targets for the magic solve.

    Targets are SI: flow [m^3/s], width/height [m], velocity [m/s], dp [Pa/m].
    Unlocked targets are still used as the starting point for flow, width and height.
    """

    flow: Constraint = field(default_factory=Constraint)
    width: Constraint = field(default_factory=Constraint)
    height: Constraint = field(default_factory=Constraint)
    velocity: Constraint = field(default_factory=Constraint)
    dp: Constraint = field(default_factory=Constraint)

    @classmethod
    def from_mappings(cls, locks: Mapping[str, bool], targets: Mapping[str, float]) -> ConstraintSet:
        unknown = (set(locks) | set(targets)) - set(CONSTRAINT_NAMES)
        if unknown:
            raise ValueError(f"Unknown constraint names {sorted(unknown)}. Valid: {', '.join(CONSTRAINT_NAMES)}")
        return cls(
            **{
                name: Constraint(locked=bool(locks.get(name, False)), target=float(targets.get(name, 0.0)))
                for name in CONSTRAINT_NAMES
            }
        )

    def get(self, name: str) -> Constraint:
        return getattr(self, name)

    @property
    def locked(self) -> tuple[str, ...]:
        return tuple(name for name in CONSTRAINT_NAMES if self.get(name).locked)


class MagicState(NamedTuple):
    flow: float  # m^3/s
    width: float  # m
    height: float  # m


@dataclass(frozen=True)
class MagicSolution:
    width: float  # m
    height: float  # m
    flow: float  # m^3/s
    velocity: float  # m/s
    dp_per_m: float  # Pa/m
    rms: float
    rounds: int
    converged: bool
    performance: DuctPerformance


def lock_count_warning(constraints: ConstraintSet) -> str | None:
    """Warning for an ill-posed lock set, or None when 2 or 3 quantities are locked."""
    locked = set(constraints.locked)
    if len(locked) > MAX_LOCKED:
        return TOO_MANY_LOCKED
    if len(locked) < MIN_LOCKED:
        if "width" not in locked:
            suggestion = "enter duct width"
        elif "height" not in locked:
            suggestion = "enter duct height"
        elif "flow" not in locked and "velocity" not in locked:
            suggestion = "enter flow rate or velocity"
        else:
            suggestion = "provide additional locked input"
        return NOT_ENOUGH_CONSTRAINTS.format(suggestion=suggestion)
    return None


def initial_state(constraints: ConstraintSet, options: MagicOptions = MAGIC_OPTIONS) -> MagicState:
    """Start from the current targets, with defaults for empty (non-positive) fields."""
    flow = constraints.flow.target
    width = constraints.width.target
    height = constraints.height.target
    return MagicState(
        flow=flow if flow > 0 else options.default_flow,
        width=width if width > 0 else options.default_dimension,
        height=height if height > 0 else options.default_dimension,
    )


def _residuals(state: MagicState, perf: DuctPerformance, constraints: ConstraintSet) -> list[float]:
    values = {
        "flow": state.flow,
        "width": state.width,
        "height": state.height,
        "velocity": perf.velocity,
        "dp": perf.dp_per_m,
    }
    out = []
    for name in constraints.locked:
        target = constraints.get(name).target
        out.append((values[name] - target) / max(target, 1e-6))
    return out


def _rms(residuals: list[float]) -> float:
    if not residuals:
        return 0.0
    return math.sqrt(sum(r * r for r in residuals) / len(residuals))


def rms_residual(
    state: MagicState,
    constraints: ConstraintSet,
    air: AirState,
    material: str = DEFAULT_MATERIAL,
) -> float:
    """RMS of the normalised residuals of all locked constraints at `state`."""
    perf = evaluate_with_roughness(state.width, state.height, state.flow, air, roughness(material))
    return _rms(_residuals(state, perf, constraints))


def solve_magic(
    constraints: ConstraintSet,
    air: AirState,
    material: str = DEFAULT_MATERIAL,
    *,
    initial: MagicState | None = None,
    options: MagicOptions = MAGIC_OPTIONS,
) -> tuple[MagicSolution | None, list[str]]:
    """
    Search flow, width and height so that all locked targets are met simultaneously.

    Returns:
        (solution, warnings). solution is None when the lock count is not 2 or 3,
        or when no finite RMS was ever produced; the warnings then say why. A
        finite best state above tolerance is returned with converged=False and
        an advisory warning.
    """
    message = lock_count_warning(constraints)
    if message is not None:
        logger.debug("Magic solve rejected: %s (locked=%s)", message, constraints.locked)
        return None, [message]

    eps = roughness(material)

    def score(s: MagicState) -> tuple[float, DuctPerformance]:
        perf = evaluate_with_roughness(s.width, s.height, s.flow, air, eps)
        return _rms(_residuals(s, perf, constraints)), perf

    def clamp(s: MagicState) -> MagicState:
        return MagicState(
            flow=max(s.flow, options.min_flow),
            width=max(s.width, options.min_dimension),
            height=max(s.height, options.min_dimension),
        )

    steps = {"flow": options.flow_step, "width": options.dimension_step, "height": options.dimension_step}
    free = [name for name in SEARCH_VARIABLES if not constraints.get(name).locked]

    state = initial if initial is not None else initial_state(constraints, options)
    current_rms, _ = score(state)
    if not math.isfinite(current_rms):
        current_rms = math.inf

    best: tuple[MagicState, float, DuctPerformance] | None = None
    rounds = 0
    for rounds in range(1, options.max_rounds + 1):
        for name in free:
            base = getattr(state, name)
            chosen_value, chosen_rms = base, current_rms
            for factor in (1 / steps[name], steps[name]):
                trial = clamp(state._replace(**{name: base * factor}))
                trial_rms, _ = score(trial)
                # nan never compares lower
                if trial_rms < chosen_rms:
                    chosen_value, chosen_rms = getattr(trial, name), trial_rms
            state = state._replace(**{name: chosen_value})
            current_rms = chosen_rms

        rms, perf = score(state)
        if math.isfinite(rms) and (best is None or rms < best[1]):
            best = (state, rms, perf)
        if best is not None and best[1] < options.rms_tol:
            break

    if best is None:
        logger.warning("Magic solve produced no finite residual in %d rounds (locked=%s)", rounds, constraints.locked)
        return None, [FAILED_TO_CONVERGE]

    best_state, best_rms, best_perf = best
    converged = best_rms < options.rms_tol
    solution = MagicSolution(
        width=best_state.width,
        height=best_state.height,
        flow=best_state.flow,
        velocity=best_perf.velocity,
        dp_per_m=best_perf.dp_per_m,
        rms=best_rms,
        rounds=rounds,
        converged=converged,
        performance=best_perf,
    )
    warnings: list[str] = []
    if converged:
        logger.debug("Magic solve converged in %d rounds: rms=%.2e, state=%s", rounds, best_rms, best_state)
    else:
        logger.warning(
            "Magic solve stopped above tolerance after %d rounds: rms=%.2e (want < %.0e), locked=%s",
            rounds,
            best_rms,
            options.rms_tol,
            constraints.locked,
        )
        warnings.append(STOPPED_ABOVE_TOLERANCE.format(rms=best_rms, tol=options.rms_tol))
    return solution, warnings


__all__ = [
    "CONSTRAINT_NAMES",
    "Constraint",
    "ConstraintSet",
    "MagicOptions",
    "MAGIC_OPTIONS",
    "MagicState",
    "MagicSolution",
    "lock_count_warning",
    "initial_state",
    "rms_residual",
    "solve_magic",
    "TOO_MANY_LOCKED",
    "FAILED_TO_CONVERGE",
]
