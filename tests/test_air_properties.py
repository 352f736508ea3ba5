import math

import pytest

from ductulator.air_properties import (
    P_ATM,
    R_DRY_AIR,
    R_WATER_VAPOUR,
    air_profile,
    available_profiles,
    dynamic_viscosity,
    moist_air_density,
    saturation_vapor_pressure,
)
from ductulator.fluids.protocols import CoolPropHumidAir, MagnusAir, air_state


class TestSaturationVapourPressure:
    def test_reference_at_zero_celsius(self):
        assert saturation_vapor_pressure(0.0) == pytest.approx(610.94, rel=1e-12)

    @pytest.mark.parametrize(
        "temperature_c,expected_pa",
        [
            (10.0, 1228.0),  # steam tables
            (20.0, 2339.0),
            (30.0, 4247.0),
        ],
    )
    def test_close_to_steam_tables(self, temperature_c, expected_pa):
        assert saturation_vapor_pressure(temperature_c) == pytest.approx(expected_pa, rel=1e-2)

    def test_pole_does_not_raise(self):
        assert saturation_vapor_pressure(-243.04) == 0.0


class TestMoistAirDensity:
    def test_dry_air_at_zero_celsius(self):
        expected = P_ATM / (R_DRY_AIR * 273.15)
        assert moist_air_density(P_ATM, 0.0, 0.0) == pytest.approx(expected, rel=1e-12)
        assert expected == pytest.approx(1.292, rel=1e-3)

    def test_humid_air_is_lighter(self):
        dry = moist_air_density(P_ATM, 25.0, 0.0)
        humid = moist_air_density(P_ATM, 25.0, 90.0)
        assert humid < dry

    def test_dry_partial_pressure_clamped(self):
        """Vapour pressure above total pressure leaves only the vapour term."""
        p_v = saturation_vapor_pressure(20.0)
        rho = moist_air_density(1000.0, 20.0, 100.0)
        assert rho == pytest.approx(p_v / (R_WATER_VAPOUR * 293.15), rel=1e-12)
        assert rho > 0

    def test_rh_above_100_is_extrapolated(self):
        assert math.isfinite(moist_air_density(P_ATM, 20.0, 150.0))

    def test_absolute_zero_is_not_finite(self):
        assert not math.isfinite(moist_air_density(P_ATM, -273.15, 50.0))
        assert dynamic_viscosity(-273.15) == 0.0


class TestViscosity:
    def test_reference_at_zero_celsius(self):
        assert dynamic_viscosity(0.0) == pytest.approx(1.716e-5, rel=1e-12)

    def test_increases_with_temperature(self):
        mus = [dynamic_viscosity(t) for t in (-10.0, 0.0, 20.0, 40.0, 80.0)]
        assert mus == sorted(mus)

    def test_room_temperature(self):
        assert dynamic_viscosity(20.0) == pytest.approx(1.81e-5, rel=1e-2)


class TestAirStates:
    def test_state_matches_functions(self):
        state = air_state(30.0, 60.0)
        assert state.rho == moist_air_density(P_ATM, 30.0, 60.0)
        assert state.mu == dynamic_viscosity(30.0)

    def test_model_pressure(self):
        low = MagnusAir(pressure_pa=80_000.0).state(20.0, 50.0)
        assert low.rho < air_state(20.0, 50.0).rho

    @pytest.mark.parametrize("temperature_c,rh_percent", [(5.0, 70.0), (20.0, 50.0), (40.0, 30.0)])
    def test_closed_form_against_coolprop(self, temperature_c, rh_percent):
        closed = air_state(temperature_c, rh_percent)
        reference = CoolPropHumidAir().state(temperature_c, rh_percent)
        assert closed.rho == pytest.approx(reference.rho, rel=5e-3)
        assert closed.mu == pytest.approx(reference.mu, rel=3e-2)


class TestProfiles:
    def test_all_profiles_resolve(self):
        for name in available_profiles():
            assert air_profile(name).rho > 0

    def test_lookup_is_case_insensitive(self):
        state = air_profile("  cold storage ")
        assert (state.temperature_c, state.rh_percent) == (5.0, 70.0)

    def test_unknown_profile(self):
        with pytest.raises(ValueError, match="Unknown air profile"):
            air_profile("Sauna")
