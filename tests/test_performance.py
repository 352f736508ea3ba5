import math

import numpy as np
import pytest

from ductulator.fluids.protocols import air_state
from ductulator.modes import DuctInputs, solve
from ductulator.performance import evaluate, sweep_dimension


def _hand_calculation(width, height, flow, temperature_c, rh_percent, eps):
    """Independent step-by-step calculation with plain math."""
    T = temperature_c + 273.15
    p_v = rh_percent / 100 * 610.94 * math.exp(17.625 * temperature_c / (243.04 + temperature_c))
    rho = (101325 - p_v) / (287.058 * T) + p_v / (461.495 * T)
    mu = 1.716e-5 * (T / 273.15) ** 1.5 * (273.15 + 110.4) / (T + 110.4)
    area = width * height
    d_h = 4 * area / (2 * (width + height))
    v = flow / area
    re = rho * v * d_h / mu
    f = (-1.8 * math.log10((eps / d_h / 3.7) ** 1.11 + 6.9 / re)) ** -2
    return {"velocity": v, "d_h": d_h, "reynolds": re, "f": f, "dp": f * rho * v**2 / (2 * d_h), "pv": 0.5 * rho * v**2}


class TestEvaluate:
    def test_square_galvanised_duct(self, office_air):
        """200 x 200 mm, 100 L/s, galvanised steel, 20 °C / 50 % RH."""
        perf = evaluate(0.2, 0.2, 0.1, office_air, "Galvanised steel")
        ref = _hand_calculation(0.2, 0.2, 0.1, 20.0, 50.0, 1.5e-4)

        assert perf.velocity == pytest.approx(2.5, rel=1e-12)
        assert perf.hydraulic_diameter == pytest.approx(0.2, rel=1e-12)
        assert perf.reynolds == pytest.approx(33_000, rel=2e-2)
        assert perf.regime == "turbulent"
        assert perf.reynolds == pytest.approx(ref["reynolds"], rel=1e-6)
        assert perf.friction_factor == pytest.approx(ref["f"], rel=1e-6)
        assert perf.dp_per_m == pytest.approx(ref["dp"], rel=1e-6)
        assert perf.velocity_pressure == pytest.approx(ref["pv"], rel=1e-6)

    def test_typical_low_pressure_duct_range(self, office_air):
        perf = evaluate(0.2, 0.2, 0.1, office_air)
        assert 0.3 < perf.dp_per_m < 0.6

    @pytest.mark.parametrize("width,height", [(0.0, 0.2), (0.2, 0.0), (0.0, 0.0)])
    def test_zero_area(self, office_air, width, height):
        perf = evaluate(width, height, 0.1, office_air)
        assert perf.velocity == 0.0
        assert perf.reynolds == 0.0
        assert math.isnan(perf.friction_factor)
        assert perf.dp_per_m == math.inf
        assert perf.velocity_pressure == 0.0
        assert perf.regime == "undefined"

    def test_zero_flow(self, office_air):
        perf = evaluate(0.3, 0.2, 0.0, office_air)
        assert perf.velocity == 0.0
        assert math.isnan(perf.friction_factor)
        assert math.isnan(perf.dp_per_m)

    def test_identical_inputs_identical_outputs(self, office_air):
        first = evaluate(0.35, 0.25, 0.4, office_air, "Mild steel")
        second = evaluate(0.35, 0.25, 0.4, air_state(20.0, 50.0), "Mild steel")
        assert first == second

    def test_laminar_regime(self, office_air):
        perf = evaluate(0.2, 0.2, 0.001, office_air)
        assert perf.regime == "laminar"
        assert perf.friction_factor == pytest.approx(64 / perf.reynolds)

    def test_smoother_material_lower_drop(self, office_air):
        dps = [evaluate(0.3, 0.2, 0.2, office_air, m).dp_per_m for m in ("Galvanised steel", "Mild steel", "PVC")]
        assert dps == sorted(dps, reverse=True)

    def test_unknown_material_uses_galvanised(self, office_air):
        assert evaluate(0.3, 0.2, 0.2, office_air, "Cardboard") == evaluate(0.3, 0.2, 0.2, office_air)

    def test_absolute_zero_gives_undefined_drop(self):
        perf = evaluate(0.2, 0.2, 0.1, air_state(-273.15, 50.0))
        assert perf.velocity == pytest.approx(2.5)
        assert not math.isfinite(perf.dp_per_m)
        assert perf.regime == "undefined"

    def test_magnus_pole_is_extrapolated(self):
        """At -243.04 °C the saturation pressure collapses to 0 and the air is treated as dry."""
        air = air_state(-243.04, 50.0)
        perf = evaluate(0.2, 0.2, 0.1, air)
        assert air.rho == pytest.approx(101325 / (287.058 * (273.15 - 243.04)))
        assert math.isfinite(perf.dp_per_m)

    @pytest.mark.parametrize("temperature_c", [-273.15, -243.04])
    def test_extreme_temperatures_do_not_raise_in_solve(self, temperature_c):
        result = solve(DuctInputs(temperature_c=temperature_c))
        assert result.has_result
        assert result.velocity_ms == pytest.approx(2.5)


class TestMonotonicity:
    """Bisection relies on dp decreasing as the free side grows."""

    @pytest.mark.parametrize("vary", ["height", "width"])
    @pytest.mark.parametrize("flow", [0.05, 0.2, 1.0])
    def test_dp_non_increasing_over_search_range(self, office_air, vary, flow):
        sides = np.linspace(1e-3, 5.0, 500)
        sweep = sweep_dimension(sides, 0.3, flow, office_air, vary=vary)
        assert np.all(np.isfinite(sweep["dp_per_m"]))
        assert np.all(np.diff(sweep["dp_per_m"]) <= 0)
        assert np.all(np.diff(sweep["velocity"]) < 0)

    def test_sweep_is_symmetric(self, office_air):
        sides = np.linspace(0.05, 1.0, 20)
        by_height = sweep_dimension(sides, 0.3, 0.2, office_air, vary="height")
        by_width = sweep_dimension(sides, 0.3, 0.2, office_air, vary="width")
        np.testing.assert_allclose(by_height["dp_per_m"], by_width["dp_per_m"], rtol=1e-12)
