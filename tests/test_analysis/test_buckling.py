import logging
import math

import pytest

from laminates.analysis.buckling import (
    NO_COMPRESSION,
    BucklingDimensions,
    _round_half_up,
    compute_buckling,
)
from laminates.clt.data.lamina_props import DEFAULT_MATERIALS
from laminates.clt.data_utils import ABDMatrix, GeometryType, Loads
from laminates.clt.laminate import compute_abd
from laminates.clt.utils import laminate_builder


@pytest.fixture
def abd():
    return compute_abd(laminate_builder([0, 45, -45, 90], True, True, 1), DEFAULT_MATERIALS)


def test_plate_axial_compression(abd) -> None:
    result = compute_buckling(abd, Loads(Nx=-4750.0), GeometryType.PLATE)
    D = abd.D
    expected = -(math.pi**2 / 1000.0**2) * (D[0, 0] + 2 * (D[0, 1] + 2 * D[2, 2]) + D[1, 1])

    assert result.buckling_mode == "Nx buckling (m=1, n=1)"
    assert result.critical_load_Nx == pytest.approx(expected)
    assert result.critical_load_Nx < 0
    assert result.critical_load_Ny is None
    assert result.critical_load_Nxy is None
    assert result.buckling_factor == pytest.approx(abs(expected / -4750.0))


def test_tube_axial_compression(abd) -> None:
    result = compute_buckling(abd, Loads(Nx=-4750.0), "tube")
    D = abd.D
    assert result.buckling_mode == "Axial compression buckling"
    expected = -2 * math.pi * math.sqrt(D[0, 0] * D[1, 1]) / 50.0
    assert result.critical_load_Nx == pytest.approx(expected)


def test_no_compression(abd) -> None:
    result = compute_buckling(abd, Loads(Nx=100.0, Nxy=50.0), GeometryType.TUBE)
    assert result.buckling_mode == NO_COMPRESSION
    assert result.critical_load_Nx is None
    assert result.critical_load_Ny is None
    assert result.critical_load_Nxy is None
    assert result.buckling_factor is None
    assert not result.is_buckling_concern


def test_plate_transverse_and_shear(abd) -> None:
    dims = BucklingDimensions(a=500.0, b=250.0)
    result = compute_buckling(abd, Loads(Ny=-1.0, Nxy=2.0), GeometryType.PLATE, dims)
    D = abd.D
    r = 500.0 / 250.0
    expected_ny = -(math.pi**2 / 500.0**2) * (
        D[1, 1] * r**4 + 2 * (D[0, 1] + 2 * D[2, 2]) * r**2 + D[0, 0]
    )
    expected_nxy = 5.35 * math.pi**2 * math.sqrt(D[0, 0] * D[1, 1]) / 250.0**2

    assert result.buckling_mode == "Ny buckling (m=1, n=1)"
    assert result.critical_load_Ny == pytest.approx(expected_ny)
    assert result.critical_load_Nxy == pytest.approx(expected_nxy)
    assert result.buckling_factor == pytest.approx(min(abs(expected_ny), expected_nxy / 2.0))


def test_tube_hoop_and_torsion(abd) -> None:
    dims = BucklingDimensions(outer_diameter=2000.0)
    result = compute_buckling(abd, Loads(Ny=-1.0, Nxy=1.0), GeometryType.TUBE, dims)
    assert result.buckling_mode.startswith("Hoop buckling (n=")
    assert result.buckling_mode.endswith(" waves)")
    assert result.critical_load_Ny < 0
    D = abd.D
    assert result.critical_load_Nxy == pytest.approx(math.sqrt(D[0, 0] * D[1, 1]) / 1000.0)


def test_buckling_concern_is_logged(abd, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="laminates.analysis.buckling"):
        result = compute_buckling(abd, Loads(Nx=-1e6), GeometryType.PLATE)
    assert result.is_buckling_concern
    assert result.buckling_factor < 1.5
    assert "Buckling factor" in caplog.text


def test_small_load_is_not_a_concern(abd) -> None:
    result = compute_buckling(abd, Loads(Nx=-1e-3), GeometryType.PLATE)
    assert result.buckling_factor > 1.5
    assert not result.is_buckling_concern


def test_unknown_geometry(abd) -> None:
    with pytest.raises(ValueError):
        compute_buckling(abd, Loads(Nx=-1.0), "shell")


@pytest.mark.parametrize("value, expected", [(2.5, 3), (2.49, 2), (3.0, 3), (0.5, 1)])
def test_round_half_up(value: float, expected: int) -> None:
    assert _round_half_up(value) == expected


@pytest.mark.parametrize("geometry_type", ["plate", "tube"])
@pytest.mark.parametrize("loads", [Loads(Ny=-1.0), Loads(Nx=-1.0, Ny=-1.0, Nxy=1.0)])
def test_empty_laminate_has_zero_capacity(geometry_type: str, loads: Loads) -> None:
    result = compute_buckling(ABDMatrix.zeros(), loads, geometry_type)
    assert result.critical_load_Ny == 0.0
    assert result.buckling_factor == 0.0
    assert result.is_buckling_concern
    assert result.buckling_mode


def test_empty_stack_tube_hoop_compression() -> None:
    result = compute_buckling(compute_abd([], DEFAULT_MATERIALS), Loads(Ny=-100.0), "tube")
    assert result.buckling_mode == "Hoop buckling"
    assert result.critical_load_Ny == 0.0
    assert result.buckling_factor == 0.0
