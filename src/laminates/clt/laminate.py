import logging
from collections.abc import Sequence
from typing import Optional

import numpy as np

from laminates.clt.base_components.lamina import Lamina
from laminates.clt.data_utils import (
    ABDMatrix,
    BendingProperties,
    EngineeringProperties,
    GeometryConfig,
    GeometryType,
    Loads,
    MaterialProperties,
    MaterialRegistry,
    MidplaneStrains,
    Ply,
    PlyOverrides,
    PlyPosition,
    StressResult,
)
from laminates.clt.math_utils import invert_6x6
from laminates.errors import MissingMaterialError

logger = logging.getLogger(__name__)

# Tubes with a larger mid-radius to wall-thickness ratio get the shell correction.
THIN_WALL_RATIO = 10.0


def resolve_material(
    index: int,
    ply: Ply,
    materials: MaterialRegistry,
    overrides: Optional[PlyOverrides] = None,
    strict: bool = False,
) -> Optional[MaterialProperties]:
    """Material acting on ply ``index``: its override if any, else the registry entry.

    Missing materials are skipped with a warning, or raise MissingMaterialError
    when ``strict`` is set.
    """
    if overrides and index in overrides:
        return overrides[index]
    material = materials.get(ply.material)
    if material is None:
        if strict:
            raise MissingMaterialError(ply.material, index)
        logger.warning("Skipping ply %d: unknown material '%s'", index, ply.material)
    return material


def build_laminas(
    plies: Sequence[Ply],
    materials: MaterialRegistry,
    overrides: Optional[PlyOverrides] = None,
    strict: bool = False,
) -> list[Lamina]:
    """Resolve the stack bottom-to-top and assign z0/z1 centred on the mid-plane.

    Plies whose material cannot be resolved contribute no thickness and are left out.
    """
    resolved = []
    for index, ply in enumerate(plies):
        material = resolve_material(index, ply, materials, overrides, strict)
        if material is not None:
            resolved.append((index, ply, material))

    h = sum(material.t for _, _, material in resolved)
    z = -0.5 * h
    laminas = []
    for index, ply, material in resolved:
        laminas.append(Lamina(index, ply, material, z0=z, z1=z + material.t))
        z += material.t
    return laminas


def ply_positions(
    plies: Sequence[Ply],
    materials: MaterialRegistry,
    overrides: Optional[PlyOverrides] = None,
    strict: bool = False,
) -> list[PlyPosition]:
    return [
        PlyPosition(lamina.index, lamina.z0, lamina.z1)
        for lamina in build_laminas(plies, materials, overrides, strict)
    ]


def total_thickness(laminas: Sequence[Lamina]) -> float:
    return sum(lamina.t for lamina in laminas)


def lamina_ABD(Qbar: np.ndarray, z1: float, z0: float) -> ABDMatrix:
    """Contribution of a single lamina between z0 and z1."""
    A_matrix = Qbar * (z1 - z0)
    B_matrix = 0.5 * Qbar * (z1**2 - z0**2)
    D_matrix = Qbar * (z1**3 - z0**3) / 3.0
    return ABDMatrix(A_matrix, B_matrix, D_matrix)


def assemble_abd(laminas: Sequence[Lamina]) -> ABDMatrix:
    A = np.zeros((3, 3))
    B = np.zeros((3, 3))
    D = np.zeros((3, 3))
    for lamina in laminas:
        contribution = lamina_ABD(lamina.Qbar, z1=lamina.z1, z0=lamina.z0)
        A += contribution.A
        B += contribution.B
        D += contribution.D
    return ABDMatrix(A, B, D)


def compute_abd(
    plies: Sequence[Ply],
    materials: MaterialRegistry,
    overrides: Optional[PlyOverrides] = None,
    strict: bool = False,
) -> ABDMatrix:
    """Calculate the A, B and D matrices of the stack.

    An empty stack yields zero matrices.
    """
    return assemble_abd(build_laminas(plies, materials, overrides, strict))


def compute_equivalent_properties(
    plies: Sequence[Ply],
    materials: MaterialRegistry,
    overrides: Optional[PlyOverrides] = None,
    strict: bool = False,
) -> EngineeringProperties:
    """Calculate membrane-equivalent engineering properties from A and h.

    B and D are ignored, which is exact for symmetric stacks and an
    approximation otherwise. Returns an all-zero result for an empty stack.
    """
    laminas = build_laminas(plies, materials, overrides, strict)
    h = total_thickness(laminas)
    if not laminas or h <= 0:
        return EngineeringProperties(Ex=0.0, Ey=0.0, Gxy=0.0, nuxy=0.0, thickness=0.0)

    A = assemble_abd(laminas).A
    det = A[0, 0] * A[1, 1] - A[0, 1] ** 2
    return EngineeringProperties(
        Ex=float(det / (A[1, 1] * h)),
        Ey=float(det / (A[0, 0] * h)),
        Gxy=float(A[2, 2] / h),
        nuxy=float(A[0, 1] / A[1, 1]),
        thickness=float(h),
        nuyx=float(A[0, 1] / A[0, 0]),
    )


def compute_bending_properties(
    plies: Sequence[Ply],
    materials: MaterialRegistry,
    overrides: Optional[PlyOverrides] = None,
    strict: bool = False,
) -> BendingProperties:
    """Calculate bending-equivalent engineering properties from D and h."""
    laminas = build_laminas(plies, materials, overrides, strict)
    if not laminas:
        return BendingProperties(0.0, 0.0, 0.0, 0.0, 0.0)
    h = total_thickness(laminas)
    d = np.linalg.inv(assemble_abd(laminas).D)
    return BendingProperties(
        Exb=float(12.0 / (h**3 * d[0, 0])),
        Eyb=float(12.0 / (h**3 * d[1, 1])),
        Gxyb=float(12.0 / (h**3 * d[2, 2])),
        nuxyb=float(-d[0, 1] / d[0, 0]),
        nuyxb=float(-d[0, 1] / d[1, 1]),
    )


def areal_weight(
    plies: Sequence[Ply],
    materials: MaterialRegistry,
    overrides: Optional[PlyOverrides] = None,
) -> float:
    """Mass per unit area of the stack (sum of density x thickness)."""
    return sum(
        lamina.calculate_weight_per_area() for lamina in build_laminas(plies, materials, overrides)
    )


def solve_midplane_strains(abd: ABDMatrix, loads: Loads) -> MidplaneStrains:
    """Mid-plane strains and curvatures from [ABD]^-1 [N, M].

    Raises:
        SingularMatrixError: for an empty or degenerate laminate.
    """
    compliance = invert_6x6(abd.matrix)
    return MidplaneStrains(compliance @ loads.array)


def _strains_at(
    z: float,
    strains: np.ndarray,
    curvatures: np.ndarray,
    shell_radius: Optional[float] = None,
    z_mid: float = 0.0,
) -> np.ndarray:
    """Global strains eps0 + z*kappa, with the hoop term scaled by (1 + z/R_ply) on shells."""
    eps = strains + z * curvatures
    if shell_radius is not None:
        eps[1] *= 1.0 + z / (shell_radius + z_mid)
    return eps


def compute_stress_strain(
    plies: Sequence[Ply],
    materials: MaterialRegistry,
    loads: Loads,
    geometry: Optional[GeometryConfig] = None,
    overrides: Optional[PlyOverrides] = None,
    strict: bool = False,
) -> list[StressResult]:
    """Carry out stress analysis for all plies of the stack.

    Strains are evaluated at each ply's bottom and top surface, rotated to
    material axes and converted to stresses with Q. For thin-walled tubes the
    hoop strain receives the cylindrical shell curvature correction. An empty
    stack returns an empty list without solving.
    """
    laminas = build_laminas(plies, materials, overrides, strict)
    if not laminas:
        return []

    midplane = solve_midplane_strains(assemble_abd(laminas), loads)
    strains = midplane.strains
    curvatures = midplane.curvatures.copy()

    shell_radius = None
    if geometry is not None and geometry.type is GeometryType.TUBE:
        r_mid = geometry.mid_radius
        if r_mid / total_thickness(laminas) > THIN_WALL_RATIO:
            shell_radius = r_mid
            curvatures[1] += strains[1] / r_mid

    results = []
    for lamina in laminas:
        bottom = lamina.surface_state(
            _strains_at(lamina.z0, strains, curvatures, shell_radius, lamina.z_mid)
        )
        top = lamina.surface_state(
            _strains_at(lamina.z1, strains, curvatures, shell_radius, lamina.z_mid)
        )
        sigma_global = lamina.Qbar @ _strains_at(
            lamina.z_mid, strains, curvatures, shell_radius, lamina.z_mid
        )

        # Extrema of |sigma_1|, |sigma_2| over both surfaces, not Mohr principal stresses.
        max_sigma_1 = max(abs(bottom.sigma_1), abs(top.sigma_1))
        max_sigma_2 = max(abs(bottom.sigma_2), abs(top.sigma_2))
        principal_max = max(max_sigma_1, max_sigma_2)
        principal_min = min(max_sigma_1, max_sigma_2)

        results.append(
            StressResult(
                ply_index=lamina.index,
                material=lamina.material.name,
                angle=lamina.theta_deg,
                z_bottom=lamina.z0,
                z_top=lamina.z1,
                bottom=bottom,
                top=top,
                sigma_x=float(sigma_global[0]),
                sigma_y=float(sigma_global[1]),
                tau_xy=float(sigma_global[2]),
                sigma_principal_max=principal_max,
                sigma_principal_min=principal_min,
                tau_max=(principal_max - principal_min) / 2.0,
                von_mises=float(
                    np.sqrt(principal_max**2 - principal_max * principal_min + principal_min**2)
                ),
            )
        )
    return results
