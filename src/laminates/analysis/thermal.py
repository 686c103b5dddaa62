"""
Residual stresses from a uniform temperature change.

Two estimates are offered. ``compute_thermal_stress`` treats every ply as
fully restrained, so its free expansion in material axes is resisted through
Q and no shear develops. ``compute_thermal_mismatch_stress`` lets the laminate
expand with the thickness-weighted average of the ply expansion coefficients
and loads each ply with the mismatch between that average and its own free
strain. Neither is coupled to the mechanical load solution.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from laminates.clt.base_components.lamina import Lamina
from laminates.clt.data_utils import MaterialProperties, MaterialRegistry, Ply, PlyOverrides
from laminates.clt.laminate import build_laminas


@dataclass(frozen=True)
class ThermalStrains:
    epsilon_x_thermal: float
    epsilon_y_thermal: float
    gamma_xy_thermal: float

    @property
    def array(self) -> NDArray[np.float64]:
        return np.array([self.epsilon_x_thermal, self.epsilon_y_thermal, self.gamma_xy_thermal])


@dataclass(frozen=True)
class ThermalStressResult:
    ply_index: int
    material: str
    angle: float
    sigma_1_thermal: float
    sigma_2_thermal: float
    tau_12_thermal: float


def free_thermal_strain(
    material: MaterialProperties, angle: float, delta_t: float
) -> NDArray[np.float64]:
    """Unconstrained thermal strain of a ply in laminate axes (engineering shear).

    Missing expansion coefficients count as zero.
    """
    alpha1 = material.thermal_properties.alpha1 or 0.0
    alpha2 = material.thermal_properties.alpha2 or 0.0
    c = np.cos(np.deg2rad(angle))
    s = np.sin(np.deg2rad(angle))
    alpha = np.array(
        [
            alpha1 * c * c + alpha2 * s * s,
            alpha1 * s * s + alpha2 * c * c,
            2.0 * (alpha1 - alpha2) * s * c,
        ]
    )
    return alpha * delta_t


def compute_thermal_strains(
    plies: Sequence[Ply],
    materials: MaterialRegistry,
    delta_t: float,
    overrides: Optional[PlyOverrides] = None,
) -> ThermalStrains:
    """Thickness-weighted average free thermal strain of the laminate."""
    laminas = build_laminas(plies, materials, overrides)
    h = sum(lamina.t for lamina in laminas)
    if not laminas or delta_t == 0 or h <= 0:
        return ThermalStrains(0.0, 0.0, 0.0)

    weighted = sum(
        free_thermal_strain(lamina.material, lamina.theta_deg, delta_t) * lamina.t
        for lamina in laminas
    )
    average = weighted / h
    return ThermalStrains(float(average[0]), float(average[1]), float(average[2]))


def service_temperature_limit(
    plies: Sequence[Ply],
    materials: MaterialRegistry,
    overrides: Optional[PlyOverrides] = None,
) -> Optional[float]:
    """Lowest thermal resistance (degC) over the resolved plies.

    Plies whose material gives no thermal resistance are ignored; None when
    no ply gives one.
    """
    limits = [
        lamina.material.thermal_properties.thermal_resistance
        for lamina in build_laminas(plies, materials, overrides)
        if lamina.material.thermal_properties.thermal_resistance is not None
    ]
    return min(limits) if limits else None


def _result(lamina: Lamina, sigma: Sequence[float]) -> ThermalStressResult:
    return ThermalStressResult(
        ply_index=lamina.index,
        material=lamina.material.name,
        angle=lamina.theta_deg,
        sigma_1_thermal=float(sigma[0]),
        sigma_2_thermal=float(sigma[1]),
        tau_12_thermal=float(sigma[2]),
    )


def compute_thermal_stress(
    plies: Sequence[Ply],
    materials: MaterialRegistry,
    delta_t: float,
    overrides: Optional[PlyOverrides] = None,
) -> list[ThermalStressResult]:
    """Resisted thermal stress of every resolved ply after a change ``delta_t``.

    Each ply's free strain [alpha1, alpha2, 0] * delta_t in material axes is
    fully restrained, giving sigma = -Q eps. The shear stress is always zero
    and the ply angle does not enter.
    """
    results = []
    for lamina in build_laminas(plies, materials, overrides):
        alpha = lamina.material.thermal_properties
        free = np.array([(alpha.alpha1 or 0.0) * delta_t, (alpha.alpha2 or 0.0) * delta_t, 0.0])
        results.append(_result(lamina, -(lamina.Q @ free)))
    return results


def compute_thermal_mismatch_stress(
    plies: Sequence[Ply],
    materials: MaterialRegistry,
    delta_t: float,
    overrides: Optional[PlyOverrides] = None,
) -> list[ThermalStressResult]:
    """Material-axis stress from the mismatch between laminate and ply free strain.

    A stack of a single angle and material expands without residual stress.
    """
    laminas = build_laminas(plies, materials, overrides)
    laminate_strain = compute_thermal_strains(plies, materials, delta_t, overrides).array

    results = []
    for lamina in laminas:
        mismatch = laminate_strain - free_thermal_strain(lamina.material, lamina.theta_deg, delta_t)
        results.append(_result(lamina, lamina.surface_state(mismatch).stresses))
    return results
