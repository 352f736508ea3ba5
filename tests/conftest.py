import pytest

from ductulator.fluids.protocols import air_state


@pytest.fixture
def office_air():
    """20 °C / 50 % RH, the calculator's default air."""
    return air_state(20.0, 50.0)
