import logging

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.ticker import LogLocator

from ductulator.fluids.protocols import air_state
from ductulator.logging_utils import configure_logging
from ductulator.performance import evaluate
from ductulator.solvers import solve_max_flow

logger = logging.getLogger(__name__)

# ---------------------------
# Quick plot configuration
# ---------------------------
SQUARE_SIDES_MM = [100, 150, 200, 300, 400, 600, 800, 1000]
VELOCITY_LINES = [2.0, 4.0, 6.0, 8.0, 10.0, 15.0]  # m/s
MATERIAL = "Galvanised steel"
TEMPERATURE_C, RH_PERCENT = 20.0, 50.0
DESIGN_DP = 1.0  # Pa/m, marked on the chart

flows = np.logspace(-2.5, 1.0, 200)  # m^3/s


def plot_friction_chart():
    air = air_state(TEMPERATURE_C, RH_PERCENT)
    fig, ax = plt.subplots(figsize=(9, 7))

    for side_mm in SQUARE_SIDES_MM:
        side = side_mm / 1000
        dps = [evaluate(side, side, q, air, MATERIAL).dp_per_m for q in flows]
        ax.loglog(flows * 1000, dps, color="tab:blue", lw=1)
        q_design = solve_max_flow(side, side, DESIGN_DP, air, MATERIAL)
        ax.plot(q_design * 1000, DESIGN_DP, "o", color="tab:red", ms=4)
        ax.annotate(f"{side_mm}", (flows[-1] * 1000, dps[-1]), fontsize=8)
        logger.info("%4d mm square: %.0f L/s at %.1f Pa/m", side_mm, q_design * 1000, DESIGN_DP)

    # constant-velocity lines: for each side, the flow giving V
    for v in VELOCITY_LINES:
        sides = np.array(SQUARE_SIDES_MM) / 1000
        q_v = v * sides**2
        dps = [evaluate(s, s, q, air, MATERIAL).dp_per_m for s, q in zip(sides, q_v, strict=True)]
        ax.loglog(q_v * 1000, dps, "--", color="grey", lw=0.8)
        ax.annotate(f"{v:g} m/s", (q_v[0] * 1000, dps[0]), fontsize=7, color="grey")

    ax.axhline(DESIGN_DP, color="tab:red", lw=0.6, ls=":")
    ax.set_xlabel("Flow rate [L/s]")
    ax.set_ylabel("Pressure drop [Pa/m]")
    ax.set_title(f"Square duct friction chart, {MATERIAL}, {TEMPERATURE_C:g} °C / {RH_PERCENT:g} % RH")
    ax.yaxis.set_major_locator(LogLocator(base=10))
    ax.grid(True, which="both", alpha=0.3)
    ax.set_ylim(0.05, 20)
    fig.tight_layout()
    plt.show()


if __name__ == "__main__":
    configure_logging(logging.INFO)
    plot_friction_chart()
