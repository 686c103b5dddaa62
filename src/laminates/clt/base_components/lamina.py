import numpy as np
from numpy.typing import NDArray

from laminates.clt.data_utils import ElasticProperties, MaterialProperties, Ply, SurfaceState
from laminates.clt.math_utils import strain_rotation_matrix


def reduced_stiffness(elastic: ElasticProperties) -> NDArray[np.float64]:
    """Plane-stress reduced stiffness Q in material axes.

    Constants are assumed valid (see ``ElasticProperties.validate``).
    """
    denom = 1.0 - elastic.v12 * elastic.v21

    Q11 = elastic.E1 / denom
    Q12 = elastic.v12 * elastic.E2 / denom
    Q22 = elastic.E2 / denom
    Q66 = elastic.G12

    return np.array([[Q11, Q12, 0.0], [Q12, Q22, 0.0], [0.0, 0.0, Q66]], dtype=float)


def transformed_stiffness(elastic: ElasticProperties, theta_deg: float) -> NDArray[np.float64]:
    """Reduced stiffness rotated to laminate axes (Q-bar) for a ply at ``theta_deg``."""
    Q = reduced_stiffness(elastic)
    Q11, Q12, Q22, Q66 = Q[0, 0], Q[0, 1], Q[1, 1], Q[2, 2]

    c = np.cos(np.deg2rad(theta_deg))
    s = np.sin(np.deg2rad(theta_deg))
    c2, s2 = c * c, s * s
    c4, s4 = c2 * c2, s2 * s2

    Qxx = Q11 * c4 + 2.0 * (Q12 + 2.0 * Q66) * s2 * c2 + Q22 * s4
    Qxy = (Q11 + Q22 - 4.0 * Q66) * s2 * c2 + Q12 * (s4 + c4)
    Qxs = (Q11 - Q12 - 2.0 * Q66) * s * c2 * c + (Q12 - Q22 + 2.0 * Q66) * s2 * s * c
    Qyy = Q11 * s4 + 2.0 * (Q12 + 2.0 * Q66) * s2 * c2 + Q22 * c4
    Qys = (Q11 - Q12 - 2.0 * Q66) * s2 * s * c + (Q12 - Q22 + 2.0 * Q66) * s * c2 * c
    Qss = (Q11 + Q22 - 2.0 * Q12 - 2.0 * Q66) * s2 * c2 + Q66 * (s4 + c4)

    return np.array([[Qxx, Qxy, Qxs], [Qxy, Qyy, Qys], [Qxs, Qys, Qss]], dtype=float)


class Lamina:
    """A ply resolved against its material and placed in the stack.

    Attributes:
        index: Position in the stacking sequence (0 = bottom).
        ply: The Ply entry (material name and angle).
        material: Resolved MaterialProperties (possibly a degraded override).
        z0, z1: Bottom and top z-coordinates relative to the mid-plane.
        Q: Reduced stiffness in material axes.
        Qbar: Reduced stiffness in laminate axes.
    """

    def __init__(
        self, index: int, ply: Ply, material: MaterialProperties, z0: float, z1: float
    ) -> None:
        self.index: int = index
        self.ply: Ply = ply
        self.material: MaterialProperties = material
        self.z0: float = z0
        self.z1: float = z1

        self.Q: NDArray[np.float64] = reduced_stiffness(material.elastic_properties)
        self.Qbar: NDArray[np.float64] = transformed_stiffness(
            material.elastic_properties, ply.angle
        )

    @property
    def theta_deg(self) -> float:
        return self.ply.angle

    @property
    def t(self) -> float:
        return self.z1 - self.z0

    @property
    def z_mid(self) -> float:
        return 0.5 * (self.z0 + self.z1)

    def material_strains(self, global_strains: NDArray[np.float64]) -> NDArray[np.float64]:
        """Transform [eps_x, eps_y, gamma_xy] to [eps_1, eps_2, gamma_12]."""
        return strain_rotation_matrix(np.deg2rad(self.theta_deg)) @ global_strains

    def surface_state(self, global_strains: NDArray[np.float64]) -> SurfaceState:
        """Material-axis strains and stresses (via Q) for a global strain state."""
        eps = self.material_strains(np.asarray(global_strains, dtype=float))
        sigma = self.Q @ eps
        return SurfaceState(
            epsilon_1=float(eps[0]),
            epsilon_2=float(eps[1]),
            gamma_12=float(eps[2]),
            sigma_1=float(sigma[0]),
            sigma_2=float(sigma[1]),
            tau_12=float(sigma[2]),
        )

    def calculate_weight_per_area(self) -> float:
        """Mass per unit area of the ply."""
        return self.t * self.material.rho
