"""
Closed-form buckling estimates from the bending stiffness D.

Flat plates use the simply supported orthotropic solution with a single
half-wave in each direction and k_s = 5.35 for shear. Tubes use Donnell's
axial formula, a ring-type hoop estimate and a torsional estimate. Nothing is
evaluated unless Nx or Ny is compressive.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

from laminates.clt.data_utils import ABDMatrix, GeometryType, Loads

logger = logging.getLogger(__name__)

BUCKLING_CONCERN_FACTOR = 1.5
SHEAR_BUCKLING_COEFFICIENT = 5.35
NO_COMPRESSION = "No compression loading"


@dataclass(frozen=True)
class BucklingDimensions:
    """Panel or tube dimensions in mm.

    Attributes:
        a: Plate length along x.
        b: Plate width along y.
        outer_diameter: Tube outer diameter.
        length: Tube length.
    """

    a: float = 1000.0
    b: float = 1000.0
    outer_diameter: float = 100.0
    length: float = 1000.0


@dataclass(frozen=True)
class BucklingResult:
    critical_load_Nx: Optional[float]
    critical_load_Ny: Optional[float]
    critical_load_Nxy: Optional[float]
    buckling_factor: Optional[float]
    buckling_mode: str
    is_buckling_concern: bool


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _plate_critical_loads(D, loads: Loads, dims: BucklingDimensions):
    a, b = dims.a, dims.b
    m = n = 1
    Nx_cr = Ny_cr = Nxy_cr = None
    mode = ""

    if loads.Nx < 0:
        r = (m * b) / (n * a)
        Nx_cr = -(math.pi**2 / b**2) * (
            D[0, 0] * r**4 + 2 * (D[0, 1] + 2 * D[2, 2]) * r**2 + D[1, 1]
        )
        mode = f"Nx buckling (m={m}, n={n})"

    if loads.Ny < 0:
        r = (n * a) / (m * b)
        Ny_cr = -(math.pi**2 / a**2) * (
            D[1, 1] * r**4 + 2 * (D[0, 1] + 2 * D[2, 2]) * r**2 + D[0, 0]
        )
        mode = mode or f"Ny buckling (m={m}, n={n})"

    if loads.Nxy != 0:
        D_s = math.sqrt(D[0, 0] * D[1, 1])
        Nxy_cr = SHEAR_BUCKLING_COEFFICIENT * math.pi**2 * D_s / min(a, b) ** 2
        mode = mode or "Shear buckling"

    return Nx_cr, Ny_cr, Nxy_cr, mode


def _tube_critical_loads(D, loads: Loads, dims: BucklingDimensions):
    R = dims.outer_diameter / 2.0
    Nx_cr = Ny_cr = Nxy_cr = None
    mode = ""

    if loads.Nx < 0:
        Nx_cr = -(2 * math.pi * math.sqrt(D[0, 0] * D[1, 1])) / R
        mode = "Axial compression buckling"

    if loads.Ny < 0:
        # Equivalent wall thickness from D, then the governing circumferential wave count.
        D_eq = (D[0, 0] * D[1, 1] ** 3) ** 0.25
        h_eq = (12 * D_eq) ** (1.0 / 3.0)
        if h_eq > 0:
            n = _round_half_up(1.5 * math.sqrt(R / h_eq))
            Ny_cr = -(D[1, 1] / R**2) * (n**2 - 1) ** 2
            mode = mode or f"Hoop buckling (n={n} waves)"
        else:
            # No bending stiffness, no wave count.
            Ny_cr = 0.0
            mode = mode or "Hoop buckling"

    if loads.Nxy != 0:
        Nxy_cr = math.sqrt(D[0, 0] * D[1, 1]) / R
        mode = mode or "Torsional buckling"

    return Nx_cr, Ny_cr, Nxy_cr, mode


def compute_buckling(
    abd: ABDMatrix,
    loads: Loads,
    geometry_type: Union[GeometryType, str] = GeometryType.PLATE,
    dims: BucklingDimensions = BucklingDimensions(),
) -> BucklingResult:
    """Critical buckling resultants and the buckling factor for a load case.

    The factor is the smallest |critical / applied| ratio over the loaded
    directions. Compressive critical loads are negative. Without a compressive
    Nx or Ny, every value is None and the mode reads "No compression loading".

    Raises:
        ValueError: for an unknown geometry type.
    """
    if not loads.has_compression:
        return BucklingResult(None, None, None, None, NO_COMPRESSION, False)

    geometry_type = GeometryType(geometry_type)
    if geometry_type is GeometryType.PLATE:
        Nx_cr, Ny_cr, Nxy_cr, mode = _plate_critical_loads(abd.D, loads, dims)
    else:
        Nx_cr, Ny_cr, Nxy_cr, mode = _tube_critical_loads(abd.D, loads, dims)

    factors = []
    if Nx_cr is not None and loads.Nx < 0:
        factors.append(abs(Nx_cr / loads.Nx))
    if Ny_cr is not None and loads.Ny < 0:
        factors.append(abs(Ny_cr / loads.Ny))
    if Nxy_cr is not None and loads.Nxy != 0:
        factors.append(abs(Nxy_cr / loads.Nxy))
    factor = min(factors) if factors else None

    concern = factor is not None and factor < BUCKLING_CONCERN_FACTOR
    if concern:
        logger.warning(
            "Buckling factor %.3f below %.1f (%s)", factor, BUCKLING_CONCERN_FACTOR, mode
        )

    return BucklingResult(
        critical_load_Nx=Nx_cr,
        critical_load_Ny=Ny_cr,
        critical_load_Nxy=Nxy_cr,
        buckling_factor=factor,
        buckling_mode=mode,
        is_buckling_concern=concern,
    )
