from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Protocol

import numpy as np
from CoolProp.HumidAirProp import HAPropsSI

from ductulator.air_properties import (
    KELVIN_OFFSET,
    P_ATM,
    dynamic_viscosity,
    moist_air_density,
)

logger = logging.getLogger(__name__)


class AirState(Protocol):
    """
    Moist-air state at a dry-bulb temperature and relative humidity, at atmospheric pressure.

    Units:
      - temperature_c [°C]
      - rh_percent [%]
      - rho [kg/m^3]
      - mu [Pa·s]
    """

    @property
    def temperature_c(self) -> float: ...

    @property
    def rh_percent(self) -> float: ...

    @property
    def rho(self) -> float: ...

    @property
    def mu(self) -> float: ...


class AirModel(Protocol):
    """Air model producing a state from (temperature [°C], relative humidity [%])."""

    def state(self, temperature_c: float, rh_percent: float) -> AirState: ...


class MagnusAir:
    # region Docstring
    """
    Closed-form moist air: Magnus saturation pressure, ideal-gas mixture density and
    Sutherland viscosity. This is the model every solver uses by default; it is cheap
    enough to be evaluated tens of thousands of times per solve.

    Parameters
    ----------
    pressure_pa : float, default 101325
        Total pressure [Pa]. Duct sizing always uses one standard atmosphere.
    """

    # endregion
    def __init__(self, pressure_pa: float = P_ATM) -> None:
        self.pressure_pa = pressure_pa

    def state(self, temperature_c: float, rh_percent: float) -> AirState:
        return _MagnusAirState(temperature_c=temperature_c, rh_percent=rh_percent, _model=self)


@dataclass(frozen=True)
class _MagnusAirState:
    """
    Closed-form air state. Properties are cached and depend only on (T, RH)
    and the model pressure.
    """

    temperature_c: float  # °C
    rh_percent: float  # %
    _model: MagnusAir

    @cached_property
    def rho(self) -> float:
        """Density [kg/m^3] of the dry air + water vapour mixture."""
        return moist_air_density(self._model.pressure_pa, self.temperature_c, self.rh_percent)

    @cached_property
    def mu(self) -> float:
        """Dynamic viscosity [Pa·s] via Sutherland's law."""
        return dynamic_viscosity(self.temperature_c)


class CoolPropHumidAir:
    """
    Humid-air reference model using CoolProp's HAPropsSI (ASHRAE RP-1485 formulation).

    Too slow for the interactive solvers but useful to check the closed-form
    model over the HVAC range.

    Examples
    --------
    >>> air = CoolPropHumidAir()
    >>> air.state(20.0, 50.0).rho
    1.19...
    """

    def __init__(self, pressure_pa: float = P_ATM) -> None:
        self.pressure_pa = pressure_pa

    def state(self, temperature_c: float, rh_percent: float) -> AirState:
        return _CoolPropHumidAirState(temperature_c=temperature_c, rh_percent=rh_percent, _model=self)


@dataclass(frozen=True)
class _CoolPropHumidAirState:
    temperature_c: float  # °C
    rh_percent: float  # %
    _model: CoolPropHumidAir

    def _props(self, output: str) -> float:
        T = self.temperature_c + KELVIN_OFFSET
        R = np.clip(self.rh_percent / 100.0, 0.0, 1.0)
        try:
            return HAPropsSI(output, "T", T, "P", self._model.pressure_pa, "R", R)
        except ValueError as e:
            logger.error(
                "HAPropsSI failed for %s at T=%.2f °C, RH=%.1f %%: %s",
                output,
                self.temperature_c,
                self.rh_percent,
                e,
            )
            raise

    @cached_property
    def rho(self) -> float:
        """Density [kg/m^3] of humid air, 1 / (volume per kg humid air)."""
        return 1.0 / self._props("Vha")

    @cached_property
    def mu(self) -> float:
        """Dynamic viscosity [Pa·s] from CoolProp."""
        return self._props("mu")


_DEFAULT_MODEL = MagnusAir()


def air_state(temperature_c: float = 20.0, rh_percent: float = 50.0) -> AirState:
    """Closed-form air state at atmospheric pressure (the solvers' default model)."""
    return _DEFAULT_MODEL.state(temperature_c, rh_percent)


__all__ = [
    "AirState",
    "AirModel",
    "MagnusAir",
    "CoolPropHumidAir",
    "air_state",
]
