"""
Interlaminar stress estimates at ply interfaces.

This is a screening approximation, not a three-dimensional elasticity
solution. Transverse shear follows a parabolic distribution through the
thickness, driven by the summed shear-coupling stiffness of the two adjacent
plies. The peel stress comes from the Poisson ratio mismatch across the
interface.
"""

import enum
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

import numpy as np

from laminates.clt.data_utils import Loads, MaterialRegistry, Ply, PlyOverrides
from laminates.clt.laminate import (
    assemble_abd,
    build_laminas,
    solve_midplane_strains,
    total_thickness,
)

DEFAULT_SHEAR_STRENGTH = 50.0
PEEL_STRESS_SCALE = 0.1


class DelaminationRisk(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class RiskThresholds:
    """Limits above which an interface is rated Medium or High."""

    shear_ratio: float
    angle_mismatch: float
    sigma_z: float


HIGH_RISK = RiskThresholds(shear_ratio=0.6, angle_mismatch=45.0, sigma_z=15.0)
MEDIUM_RISK = RiskThresholds(shear_ratio=0.4, angle_mismatch=30.0, sigma_z=8.0)


@dataclass(frozen=True)
class InterlaminarStressResult:
    """Estimated stresses at the interface directly above stack ply ``interface_number - 1``.

    Attributes:
        z: Interface height relative to the mid-plane (mm).
        sigma_z: Peel stress (MPa).
        tau_xz, tau_yz: Transverse shear stresses (MPa).
        interface_number: Stack index of the lower ply plus one. Plies skipped
            for a missing material leave gaps in the numbering.
        delamination_risk: Screening rating of the interface.
    """

    z: float
    sigma_z: float
    tau_xz: float
    tau_yz: float
    interface_number: int
    delamination_risk: DelaminationRisk

    @property
    def tau_max(self) -> float:
        return float(np.hypot(self.tau_xz, self.tau_yz))


@dataclass(frozen=True)
class DelaminationAssessment:
    overall_risk: DelaminationRisk
    critical_interfaces: tuple[int, ...]
    max_shear_stress: float


def _exceeds(
    shear_ratio: float, angle_mismatch: float, sigma_z: float, limits: RiskThresholds
) -> bool:
    return (
        shear_ratio > limits.shear_ratio
        or angle_mismatch > limits.angle_mismatch
        or abs(sigma_z) > limits.sigma_z
    )


def classify_risk(shear_ratio: float, angle_mismatch: float, sigma_z: float) -> DelaminationRisk:
    if _exceeds(shear_ratio, angle_mismatch, sigma_z, HIGH_RISK):
        return DelaminationRisk.HIGH
    if _exceeds(shear_ratio, angle_mismatch, sigma_z, MEDIUM_RISK):
        return DelaminationRisk.MEDIUM
    return DelaminationRisk.LOW


def compute_interlaminar_stress(
    plies: Sequence[Ply],
    materials: MaterialRegistry,
    loads: Loads,
    overrides: Optional[PlyOverrides] = None,
) -> list[InterlaminarStressResult]:
    """Interlaminar stress estimate for every interface between resolved plies.

    Raises:
        SingularMatrixError: if the laminate stiffness cannot be inverted.
    """
    laminas = build_laminas(plies, materials, overrides)
    if len(laminas) < 2:
        return []

    midplane = solve_midplane_strains(assemble_abd(laminas), loads)
    strains = midplane.strains
    curvatures = midplane.curvatures
    h = total_thickness(laminas)
    h_half = h / 2.0

    results = []
    for lower, upper in zip(laminas, laminas[1:]):
        z = lower.z1
        eps = strains + z * curvatures
        Qbar_sum = lower.Qbar + upper.Qbar

        parabolic = 1.0 - (z / h_half) ** 2
        tau_xz = float(Qbar_sum[:, 2] @ strains / (2.0 * h) * parabolic)
        # The shear-coupling column drives both transverse components equally.
        tau_yz = tau_xz

        lower_elastic = lower.material.elastic_properties
        nu_mismatch = abs(lower_elastic.v21 - upper.material.elastic_properties.v21)
        sigma_z = float(
            nu_mismatch
            * (abs(eps[0] * lower_elastic.E1) + abs(eps[1] * lower_elastic.E2))
            * PEEL_STRESS_SCALE
        )

        avg_shear_strength = (
            (lower.material.strength_properties.shear or DEFAULT_SHEAR_STRENGTH)
            + (upper.material.strength_properties.shear or DEFAULT_SHEAR_STRENGTH)
        ) / 2.0
        shear_ratio = float(np.hypot(tau_xz, tau_yz)) / avg_shear_strength
        angle_mismatch = abs(lower.theta_deg - upper.theta_deg)

        results.append(
            InterlaminarStressResult(
                z=z,
                sigma_z=sigma_z,
                tau_xz=tau_xz,
                tau_yz=tau_yz,
                interface_number=lower.index + 1,
                delamination_risk=classify_risk(shear_ratio, angle_mismatch, sigma_z),
            )
        )
    return results


def assess_delamination_risk(results: Sequence[InterlaminarStressResult]) -> DelaminationAssessment:
    """Overall rating: High if any interface is High or most are Medium."""
    if not results:
        return DelaminationAssessment(DelaminationRisk.LOW, (), 0.0)

    high = [result for result in results if result.delamination_risk is DelaminationRisk.HIGH]
    medium_count = sum(result.delamination_risk is DelaminationRisk.MEDIUM for result in results)

    if high or medium_count > len(results) / 2:
        overall = DelaminationRisk.HIGH
    elif medium_count:
        overall = DelaminationRisk.MEDIUM
    else:
        overall = DelaminationRisk.LOW

    return DelaminationAssessment(
        overall_risk=overall,
        critical_interfaces=tuple(result.interface_number for result in high),
        max_shear_stress=max(result.tau_max for result in results),
    )
