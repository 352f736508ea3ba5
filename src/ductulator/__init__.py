__all__ = [
    "evaluate",
    "solve",
    "solve_missing_dimension",
    "solve_max_flow",
    "solve_magic",
    "air_state",
    "DuctInputs",
    "SolveResult",
    "ConstraintSet",
]  # Makes these functions imported when import * but also important for general code working


from ductulator.air_properties import (
    P_ATM,
    air_profile,
    dynamic_viscosity,
    moist_air_density,
    saturation_vapor_pressure,
)
from ductulator.correlations import haaland_friction_factor
from ductulator.fluids.protocols import CoolPropHumidAir, MagnusAir, air_state
from ductulator.geometry import RectangularDuct, hydraulic_diameter
from ductulator.magic import Constraint, ConstraintSet, MagicOptions, MagicState, solve_magic
from ductulator.materials import ROUGHNESS, roughness
from ductulator.modes import DuctInputs, SolveResult, solve
from ductulator.performance import DuctPerformance, evaluate, sweep_dimension
from ductulator.solvers import BisectionOptions, solve_max_flow, solve_missing_dimension

# The physics lives in the leaf modules (air_properties, correlations, geometry),
# performance.evaluate combines them, and solvers/magic invert it. modes.solve is
# the entry point for a calculator front-end:
#
#   from ductulator import DuctInputs, solve
#   solve(DuctInputs(mode="fixed_dimension", width_mm=300, height_mm=0, target_dp=1.0))
