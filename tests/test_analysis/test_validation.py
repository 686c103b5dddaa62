import logging
import math

import pytest

from laminates.analysis.validation import (
    ExperimentalDataPoint,
    SurfaceLocation,
    ValidationResult,
    parse_experimental_data,
    validate_experimental_data,
    validation_metrics,
)
from laminates.clt.data.lamina_props import MATERIAL_LIBRARY
from laminates.clt.data_utils import Loads
from laminates.clt.laminate import compute_stress_strain
from laminates.clt.utils import laminate_builder
from laminates.errors import ConfigurationError


@pytest.fixture
def stresses():
    plies = laminate_builder([0, 90], True, True, 1, material="Christos")
    return compute_stress_strain(plies, MATERIAL_LIBRARY, Loads(Nx=200.0))


def test_exact_measurement_has_zero_error(stresses) -> None:
    top = stresses[1].top
    point = ExperimentalDataPoint(
        ply_index=1, location=SurfaceLocation.TOP, epsilon_1=top.epsilon_1, sigma_2=top.sigma_2
    )
    validations = validate_experimental_data(stresses, [point])
    assert [v.parameter for v in validations] == ["epsilon_1", "sigma_2"]
    assert all(v.error == 0.0 for v in validations)
    assert all(v.percent_error == 0.0 for v in validations)


def test_error_is_theory_minus_measurement(stresses) -> None:
    bottom = stresses[0].bottom
    point = ExperimentalDataPoint(ply_index=0, location="bottom", sigma_1=bottom.sigma_1 * 0.9)
    (validation,) = validate_experimental_data(stresses, [point])
    assert validation.location is SurfaceLocation.BOTTOM
    assert validation.theoretical == bottom.sigma_1
    assert validation.error == pytest.approx(bottom.sigma_1 * 0.1)
    assert validation.percent_error == pytest.approx(100.0 / 9.0)


def test_zero_measurement_uses_absolute_error(stresses) -> None:
    point = ExperimentalDataPoint(ply_index=0, tau_12=0.0)
    (validation,) = validate_experimental_data(stresses, [point])
    assert validation.percent_error == pytest.approx(abs(validation.theoretical) * 100.0)


def test_unknown_ply_is_ignored(stresses) -> None:
    points = [
        ExperimentalDataPoint(ply_index=17, epsilon_1=1e-3),
        ExperimentalDataPoint(ply_index=0),
    ]
    assert validate_experimental_data(stresses, points) == []


def make_validation(error: float, percent_error: float) -> ValidationResult:
    return ValidationResult(
        ply_index=0,
        location=SurfaceLocation.TOP,
        parameter="sigma_1",
        theoretical=error,
        experimental=0.0,
        error=error,
        percent_error=percent_error,
    )


def test_validation_metrics() -> None:
    metrics = validation_metrics([make_validation(3.0, 10.0), make_validation(-4.0, 20.0)])
    assert metrics.rmse == pytest.approx(math.sqrt(12.5))
    assert metrics.mean_error == pytest.approx(3.5)
    assert metrics.max_error == pytest.approx(4.0)
    assert metrics.mean_percent_error == pytest.approx(15.0)


def test_validation_metrics_empty() -> None:
    metrics = validation_metrics([])
    assert (metrics.rmse, metrics.mean_error, metrics.max_error, metrics.mean_percent_error) == (
        0.0,
        0.0,
        0.0,
        0.0,
    )


def test_parse_csv_measurements() -> None:
    text = (
        "Ply_Index,Location,Epsilon_1,Sigma_2\n"
        "0,bottom,0.0012,\n"
        "1,TOP,,35.5\n"
        "2,,,\n"
    )
    first, second, third = parse_experimental_data(text)
    assert first == ExperimentalDataPoint(
        ply_index=0, location=SurfaceLocation.BOTTOM, epsilon_1=0.0012
    )
    assert second.location is SurfaceLocation.TOP
    assert second.sigma_2 == 35.5
    assert second.epsilon_1 is None
    assert third == ExperimentalDataPoint(ply_index=2)


def test_parse_csv_ply_column_alias() -> None:
    (point,) = parse_experimental_data("ply,tau_12\n3,12.5\n")
    assert point.ply_index == 3
    assert point.tau_12 == 12.5


def test_parse_csv_skips_ragged_rows(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="laminates.analysis.validation"):
        points = parse_experimental_data("ply_index,sigma_1\n0,10.0,extra\n1,20.0\n")
    assert [point.ply_index for point in points] == [1]
    assert "line 2" in caplog.text


@pytest.mark.parametrize(
    "text",
    [
        "",
        "ply_index,sigma_1\n",
        "location,sigma_1\ntop,1.0\n",
        "ply_index,sigma_1\nfirst,1.0\n",
        "ply_index,sigma_1\n0,high\n",
        "ply_index,location\n0,middle\n",
    ],
)
def test_parse_csv_rejects_unreadable_data(text: str) -> None:
    with pytest.raises(ConfigurationError):
        parse_experimental_data(text)


def test_parsed_measurements_feed_validation(stresses) -> None:
    sigma_1 = stresses[0].top.sigma_1
    points = parse_experimental_data(f"ply_index,location,sigma_1\n0,top,{sigma_1!r}\n")
    (validation,) = validate_experimental_data(stresses, points)
    assert validation.error == pytest.approx(0.0, abs=1e-9)
