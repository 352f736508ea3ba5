import logging
import math

from tabulate import tabulate

from ductulator.logging_utils import configure_logging
from ductulator.modes import DuctInputs, solve

# One office supply branch worked through every mode
CASES = {
    "Direct 300x200 @ 200 L/s": DuctInputs(mode="pressure_drop", width_mm=300, height_mm=200, flow=200),
    "Height for 1 Pa/m": DuctInputs(mode="fixed_dimension", width_mm=300, height_mm=0, flow=200, target_dp=1.0),
    "Height for 1 Pa/m or 4 m/s": DuctInputs(
        mode="fixed_dimension", width_mm=300, height_mm=0, flow=200, velocity=4.0, target_dp=1.0
    ),
    "Max flow at 1 Pa/m": DuctInputs(mode="max_flow", width_mm=300, height_mm=200, target_dp=1.0),
    "Max flow at 5 m/s": DuctInputs(mode="max_flow", width_mm=300, height_mm=200, velocity=5.0, target_dp=0.0),
    "Magic: W, V, dp locked": DuctInputs(
        mode="magic",
        width_mm=300,
        height_mm=200,
        flow=200,
        velocity=4.0,
        target_dp=1.0,
        locks={"width": True, "velocity": True, "dp": True},
    ),
    "Magic: 4 locks": DuctInputs(
        mode="magic", locks={"flow": True, "width": True, "height": True, "velocity": True}
    ),
}


def _fmt(value, digits=3):
    if value is None:
        return "-"
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return f"{value:.{digits}f}"


def main():
    rows = []
    for label, inputs in CASES.items():
        r = solve(inputs)
        rows.append(
            [
                label,
                _fmt(r.width_mm, 1),
                _fmt(r.height_mm, 1),
                _fmt(None if r.flow_m3s is None else r.flow_m3s * 1000, 1),
                _fmt(r.velocity_ms, 2),
                _fmt(r.dp_pa_per_m, 3),
                _fmt(r.rms, 5),
                "; ".join(r.warnings),
            ]
        )
    headers = ["Case", "W [mm]", "H [mm]", "Q [L/s]", "V [m/s]", "dp [Pa/m]", "RMS", "Warnings"]
    print(tabulate(rows, headers=headers, tablefmt="grid"))


if __name__ == "__main__":
    configure_logging(logging.WARNING, solver_level=logging.INFO)
    main()
