import logging
import math

import pytest

from ductulator.geometry import (
    RectangularDuct,
    area_rectangular,
    hydraulic_diameter,
    perimeter_rectangular,
)
from ductulator.materials import DEFAULT_MATERIAL, ROUGHNESS, available_materials, roughness
from ductulator.units import flow_from_m3s, flow_to_m3s, ls_to_m3s, m3h_to_m3s, m_to_mm, mm_to_m


class TestRectangularGeometry:
    def test_square(self):
        duct = RectangularDuct(width=0.2, height=0.2)
        assert duct.area == pytest.approx(0.04)
        assert duct.perimeter == pytest.approx(0.8)
        assert duct.hydraulic_diameter == pytest.approx(0.2)
        assert duct.aspect_ratio == 1.0

    def test_flat_duct(self):
        duct = RectangularDuct.from_mm(400, 200)
        assert duct.hydraulic_diameter == pytest.approx(4 * 0.08 / 1.2)
        assert duct.aspect_ratio == pytest.approx(2.0)

    @pytest.mark.parametrize("width,height", [(0.0, 0.3), (0.3, 0.0), (-0.1, 0.3), (0.0, 0.0)])
    def test_collapsed_section(self, width, height):
        area = area_rectangular(width, height)
        assert area == 0.0
        assert hydraulic_diameter(area, perimeter_rectangular(width, height)) == 0.0

    def test_aspect_ratio_of_collapsed_section(self):
        assert math.isinf(RectangularDuct(0.0, 0.2).aspect_ratio)


class TestUnits:
    def test_lengths(self):
        assert mm_to_m(250.0) == pytest.approx(0.25)
        assert m_to_mm(0.25) == pytest.approx(250.0)

    @pytest.mark.parametrize(
        "value,unit,expected",
        [
            (100.0, "L/s", 0.1),
            (0.1, "m³/s", 0.1),
            (0.1, "m3/s", 0.1),
            (360.0, "m³/h", 0.1),
            (360.0, "M3/H", 0.1),
        ],
    )
    def test_flow_to_m3s(self, value, unit, expected):
        assert flow_to_m3s(value, unit) == pytest.approx(expected, rel=1e-12)

    def test_helpers_agree(self):
        assert ls_to_m3s(250.0) == flow_to_m3s(250.0, "L/s")
        assert m3h_to_m3s(900.0) == pytest.approx(flow_to_m3s(900.0, "m³/h"))

    def test_flow_from_m3s(self):
        assert flow_from_m3s(0.25, "m³/h") == pytest.approx(900.0)

    def test_non_finite_flow_is_empty(self):
        assert flow_to_m3s(math.nan, "L/s") == 0.0
        assert flow_to_m3s(None, "m³/h") == 0.0

    def test_unknown_unit(self):
        with pytest.raises(ValueError, match="Unknown flow unit"):
            flow_to_m3s(1.0, "cfm")


class TestMaterials:
    @pytest.mark.parametrize(
        "material,expected",
        [
            ("Galvanised steel", 1.5e-4),
            ("Mild steel", 4.5e-5),
            ("Aluminium", 1.8e-6),
            ("PVC", 5e-7),
            ("galvanized steel", 1.5e-4),
            ("Aluminum", 1.8e-6),
        ],
    )
    def test_roughness(self, material, expected):
        assert roughness(material) == expected

    def test_unknown_material_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="ductulator.materials"):
            assert roughness("Fabric") == ROUGHNESS[DEFAULT_MATERIAL]
        assert "Unknown duct material" in caplog.text

    def test_table(self):
        assert available_materials() == ("Galvanised steel", "Mild steel", "Aluminium", "PVC")
