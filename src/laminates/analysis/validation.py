"""Comparison of recovered ply strains and stresses against measurements."""

import csv
import enum
import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

import numpy as np

from laminates.clt.data_utils import StressResult
from laminates.errors import ConfigurationError

logger = logging.getLogger(__name__)


class SurfaceLocation(str, enum.Enum):
    TOP = "top"
    BOTTOM = "bottom"


@dataclass(frozen=True)
class ExperimentalDataPoint:
    """Measured values at one ply surface, in material axes.

    Only the values that were measured need to be given.
    """

    ply_index: int
    location: SurfaceLocation = SurfaceLocation.TOP
    epsilon_1: Optional[float] = None
    epsilon_2: Optional[float] = None
    gamma_12: Optional[float] = None
    sigma_1: Optional[float] = None
    sigma_2: Optional[float] = None
    tau_12: Optional[float] = None


@dataclass(frozen=True)
class ValidationResult:
    ply_index: int
    location: SurfaceLocation
    parameter: str
    theoretical: float
    experimental: float
    error: float
    percent_error: float


@dataclass(frozen=True)
class ValidationMetrics:
    rmse: float
    mean_error: float
    max_error: float
    mean_percent_error: float


COMPARED_PARAMETERS = ("epsilon_1", "epsilon_2", "gamma_12", "sigma_1", "sigma_2", "tau_12")
PLY_COLUMNS = ("ply_index", "ply")


def parse_experimental_data(text: str) -> list[ExperimentalDataPoint]:
    """Read measurements from CSV text with a header row.

    Header names are case-insensitive. The ply is given in a ``ply_index``
    (or ``ply``) column, ``location`` defaults to top and any of
    ``COMPARED_PARAMETERS`` may appear as a column. Empty cells count as not
    measured. Rows with a different field count than the header are skipped
    with a warning.

    Raises:
        ConfigurationError: without a header and a data row, without a ply
            column, or for a value that cannot be read.
    """
    rows = [row for row in csv.reader(io.StringIO(text.strip())) if row]
    if len(rows) < 2:
        raise ConfigurationError("CSV data needs a header and at least one data row")

    headers = [header.strip().lower() for header in rows[0]]
    ply_column = next((column for column in PLY_COLUMNS if column in headers), None)
    if ply_column is None:
        raise ConfigurationError(f"CSV data needs one of the columns {PLY_COLUMNS}")

    points = []
    for line_number, row in enumerate(rows[1:], start=2):
        if len(row) != len(headers):
            logger.warning(
                "Skipping CSV line %d: %d fields for %d columns",
                line_number,
                len(row),
                len(headers),
            )
            continue
        record = {header: value.strip() for header, value in zip(headers, row)}
        try:
            measured = {
                parameter: float(record[parameter])
                for parameter in COMPARED_PARAMETERS
                if record.get(parameter)
            }
            points.append(
                ExperimentalDataPoint(
                    ply_index=int(record[ply_column]),
                    location=SurfaceLocation((record.get("location") or "top").lower()),
                    **measured,
                )
            )
        except ValueError as exc:
            raise ConfigurationError(f"CSV line {line_number}: {exc}") from exc
    return points


def validate_experimental_data(
    theoretical: Sequence[StressResult], experimental: Sequence[ExperimentalDataPoint]
) -> list[ValidationResult]:
    """One comparison per measured value; points for unknown plies are ignored.

    The error is theory minus measurement. The percent error is taken
    relative to the measurement, or to 1 when the measurement is zero.
    """
    by_ply = {result.ply_index: result for result in theoretical}

    validations = []
    for point in experimental:
        result = by_ply.get(point.ply_index)
        if result is None:
            continue
        location = SurfaceLocation(point.location)
        surface = result.top if location is SurfaceLocation.TOP else result.bottom

        for parameter in COMPARED_PARAMETERS:
            measured = getattr(point, parameter)
            if measured is None:
                continue
            predicted = getattr(surface, parameter)
            error = predicted - measured
            validations.append(
                ValidationResult(
                    ply_index=point.ply_index,
                    location=location,
                    parameter=parameter,
                    theoretical=predicted,
                    experimental=measured,
                    error=error,
                    percent_error=abs(error / (measured or 1.0)) * 100.0,
                )
            )
    return validations


def validation_metrics(validations: Sequence[ValidationResult]) -> ValidationMetrics:
    if not validations:
        return ValidationMetrics(0.0, 0.0, 0.0, 0.0)

    errors = np.array([validation.error for validation in validations])
    percent = np.array([validation.percent_error for validation in validations])
    return ValidationMetrics(
        rmse=float(np.sqrt(np.mean(errors**2))),
        mean_error=float(np.mean(np.abs(errors))),
        max_error=float(np.max(np.abs(errors))),
        mean_percent_error=float(np.mean(percent)),
    )
