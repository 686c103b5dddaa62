import enum
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Optional

import numpy as np

from laminates.errors import ConfigurationError

loads_strains_size = 6

MaterialRegistry = Mapping[str, "MaterialProperties"]
PlyOverrides = Mapping[int, "MaterialProperties"]


@dataclass(frozen=True)
class ElasticProperties:
    """Orthotropic in-plane elastic properties of a lamina.

    Attributes:
        E1: Modulus along fiber direction 1 (MPa).
        E2: Modulus transverse to fiber direction 2 (MPa).
        G12: In-plane shear modulus (MPa).
        v12: Major Poisson's ratio (strain in 2 due to stress in 1).
    """

    E1: float
    E2: float
    G12: float
    v12: float

    @property
    def v21(self) -> float:
        """Minor Poisson's ratio."""
        return self.v12 * self.E2 / self.E1

    def validate(self) -> None:
        """Raise ConfigurationError when the constants cannot form a stiffness matrix."""
        for key in ("E1", "E2", "G12"):
            value = getattr(self, key)
            if not value > 0:
                raise ConfigurationError(f"{key} must be positive, got {value}")
        if not 1.0 - self.v12 * self.v21 > 0:
            raise ConfigurationError(
                f"degenerate Poisson ratio v12={self.v12}: 1 - v12*v21 must be positive"
            )


@dataclass(frozen=True)
class StrengthProperties:
    """Lamina strength limits, positive magnitudes in MPa.

    Any limit may be None when the datasheet does not provide it; failure
    criteria then fall back to ``laminates.failure.criteria.STRENGTH_DEFAULTS``.

    Attributes:
        tensile: Tensile strength.
        compressive: Compressive strength (positive magnitude).
        shear: In-plane shear strength.
    """

    tensile: Optional[float] = None
    compressive: Optional[float] = None
    shear: Optional[float] = None

    def validate(self) -> None:
        for key in ("tensile", "compressive", "shear"):
            value = getattr(self, key)
            if value is not None and value < 0:
                raise ConfigurationError(f"{key} strength must not be negative, got {value}")


@dataclass(frozen=True)
class ThermalProperties:
    """Thermal data of a lamina.

    Attributes:
        alpha1, alpha2: Expansion coefficients in material axes (1/degC).
        thermal_resistance: Maximum service temperature (degC).
    """

    alpha1: Optional[float] = None
    alpha2: Optional[float] = None
    thermal_resistance: Optional[float] = None

    def validate(self) -> None:
        if self.thermal_resistance is not None and self.thermal_resistance < 0:
            raise ConfigurationError(
                f"thermal resistance must not be negative, got {self.thermal_resistance}"
            )


@dataclass(frozen=True)
class MaterialProperties:
    """Composite material definition.

    Constants are validated on construction, so a material that exists can
    always be fed to the stiffness kernel.

    Attributes:
        name: Unique name of the material within a registry.
        t: Ply thickness (mm).
        rho: Density (g/cm3).
        elastic_properties: ElasticProperties of the ply.
        strength_properties: StrengthProperties of the ply.
        thermal_properties: ThermalProperties of the ply.
        material_type: Free-form family label (e.g. "Carbon Fiber").
        color: Display color used by front ends.
    """

    name: str
    t: float
    rho: float
    elastic_properties: ElasticProperties
    strength_properties: StrengthProperties = field(default_factory=StrengthProperties)
    thermal_properties: ThermalProperties = field(default_factory=ThermalProperties)
    material_type: str = ""
    color: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("material name must not be empty")
        if not self.t > 0:
            raise ConfigurationError(f"ply thickness of '{self.name}' must be positive")
        try:
            self.elastic_properties.validate()
            self.strength_properties.validate()
            self.thermal_properties.validate()
        except ConfigurationError as exc:
            raise ConfigurationError(f"material '{self.name}': {exc}") from exc

    def degraded(self, factor: float) -> "MaterialProperties":
        """Return a copy with E1, E2 and G12 scaled by ``factor``."""
        elastic = self.elastic_properties
        return replace(
            self,
            elastic_properties=replace(
                elastic,
                E1=elastic.E1 * factor,
                E2=elastic.E2 * factor,
                G12=elastic.G12 * factor,
            ),
        )


def material_registry(*materials: MaterialProperties) -> MaterialRegistry:
    """Build a read-only name -> material mapping.

    Raises:
        ConfigurationError: if two materials share a name.
    """
    registry: dict[str, MaterialProperties] = {}
    for material in materials:
        if material.name in registry:
            raise ConfigurationError(f"duplicate material name '{material.name}'")
        registry[material.name] = material
    return MappingProxyType(registry)


def with_material(
    registry: MaterialRegistry, material: MaterialProperties, replaces: Optional[str] = None
) -> MaterialRegistry:
    """Return a new registry containing ``material``.

    ``replaces`` names the entry being edited (which may be renamed). Adding a
    name that already exists without declaring it as the edited entry raises
    ConfigurationError.
    """
    updated = {name: value for name, value in registry.items() if name != replaces}
    if material.name in updated:
        raise ConfigurationError(f"duplicate material name '{material.name}'")
    updated[material.name] = material
    return MappingProxyType(updated)


def without_material(registry: MaterialRegistry, name: str) -> MaterialRegistry:
    return MappingProxyType({key: value for key, value in registry.items() if key != name})


@dataclass(frozen=True)
class Ply:
    """One entry of the stacking sequence; index 0 is the bottom ply."""

    material: str
    angle: float


@dataclass(frozen=True)
class PlyPosition:
    index: int
    z_bottom: float
    z_top: float

    @property
    def z_mid(self) -> float:
        return 0.5 * (self.z_bottom + self.z_top)


@dataclass(frozen=True)
class Loads:
    """
    Load case for a laminate: force and moment resultants per unit width.

    Attributes:
        Nx: normal load intensity in x direction (N/mm)
        Ny: normal load intensity in y direction (N/mm)
        Nxy: shear load intensity in xy direction (N/mm)
        Mx: bending moment intensity (bending the x axis around the y axis)
        My: bending moment intensity (bending the y axis around the x axis)
        Mxy: twisting moment intensity

    ┌─────►
    │    x
    │       Nxy  ▲
    │y       ◄───┤Ny
    ▼     ┌──────┴──────┐
          │             │
      Nxy▲│             │
         ││             │ Nx
      ◄──┴┤             ├┬──►
       Nx │             ││
          │             ││
          │             │▼Nxy
          └──────┬──────┘
               Ny├──►
                 ▼  Nxy
    """

    Nx: float
    Ny: float
    Nxy: float
    Mx: float
    My: float
    Mxy: float

    def __init__(self, *args: Any, **kwargs: Any):
        fields = ["Nx", "Ny", "Nxy", "Mx", "My", "Mxy"]
        if len(args) == 1 and not kwargs:
            arr = np.asarray(args[0], dtype=float).ravel()
            if arr.size != loads_strains_size:
                raise ValueError("array must have 6 elements")
            for name, val in zip(fields, arr):
                object.__setattr__(self, name, float(val))
        elif not args:
            unknown = [key for key in kwargs if key not in fields]
            if unknown:
                raise TypeError(f"unexpected keyword arguments: {unknown}")
            for name in fields:
                object.__setattr__(self, name, float(kwargs.get(name, 0.0)))
        else:
            raise TypeError("Use Loads(array) or Loads(Nx=..., Ny=..., ...)")

    @property
    def array(self) -> np.ndarray:
        return np.array([self.Nx, self.Ny, self.Nxy, self.Mx, self.My, self.Mxy])

    @property
    def has_compression(self) -> bool:
        return self.Nx < 0 or self.Ny < 0

    def scaled(self, factor: float) -> "Loads":
        return Loads(self.array * factor)


@dataclass(frozen=True)
class MidplaneStrains:
    """
    Mid-plane strains and curvatures of a laminate.

    Directions are the same as loads.
    """

    epsilon_xo: float
    epsilon_yo: float
    gamma_xyo: float
    kappa_x: float
    kappa_y: float
    kappa_xy: float

    def __init__(self, *args: Any, **kwargs: Any):
        fields = ["epsilon_xo", "epsilon_yo", "gamma_xyo", "kappa_x", "kappa_y", "kappa_xy"]
        if len(args) == 1 and not kwargs:
            arr = np.asarray(args[0], dtype=float).ravel()
            if arr.size != loads_strains_size:
                raise ValueError("array must have 6 elements")
            for name, val in zip(fields, arr):
                object.__setattr__(self, name, float(val))
        elif not args:
            missing = [f for f in fields if f not in kwargs]
            if missing:
                raise TypeError(f"missing keyword arguments: {missing}")
            for name in fields:
                object.__setattr__(self, name, float(kwargs[name]))
        else:
            raise TypeError("Use MidplaneStrains(array) or MidplaneStrains(epsilon_xo=..., ...)")

    @property
    def array(self) -> np.ndarray:
        return np.array(
            [
                self.epsilon_xo,
                self.epsilon_yo,
                self.gamma_xyo,
                self.kappa_x,
                self.kappa_y,
                self.kappa_xy,
            ]
        )

    @property
    def strains(self) -> np.ndarray:
        return self.array[:3]

    @property
    def curvatures(self) -> np.ndarray:
        return self.array[3:]


@dataclass(frozen=True, eq=False)
class ABDMatrix:
    """Extensional (A), coupling (B) and bending (D) stiffness of a laminate."""

    A: np.ndarray
    B: np.ndarray
    D: np.ndarray

    @classmethod
    def zeros(cls) -> "ABDMatrix":
        return cls(np.zeros((3, 3)), np.zeros((3, 3)), np.zeros((3, 3)))

    @property
    def matrix(self) -> np.ndarray:
        """The 6x6 block matrix [[A, B], [B, D]]."""
        return np.block([[self.A, self.B], [self.B, self.D]])


@dataclass(frozen=True)
class EngineeringProperties:
    """Membrane-equivalent engineering constants; all zero means "no data"."""

    Ex: float
    Ey: float
    Gxy: float
    nuxy: float
    thickness: float
    nuyx: float = 0.0


@dataclass(frozen=True)
class BendingProperties:
    Exb: float
    Eyb: float
    Gxyb: float
    nuxyb: float
    nuyxb: float


class GeometryType(str, enum.Enum):
    PLATE = "plate"
    TUBE = "tube"


@dataclass(frozen=True)
class GeometryConfig:
    """Structural geometry the laminate belongs to (mm).

    Tubes use the diameters, plates use width and length.
    """

    type: GeometryType = GeometryType.TUBE
    outer_diameter: float = 130.0
    inner_diameter: float = 124.0
    width: float = 1000.0
    length: float = 1000.0

    @property
    def mid_radius(self) -> float:
        return (self.outer_diameter + self.inner_diameter) / 4.0


PLATE_GEOMETRY = GeometryConfig(type=GeometryType.PLATE)


@dataclass(frozen=True)
class SurfaceState:
    """Strains and stresses in material axes at one ply surface."""

    epsilon_1: float
    epsilon_2: float
    gamma_12: float
    sigma_1: float
    sigma_2: float
    tau_12: float

    @property
    def stresses(self) -> tuple[float, float, float]:
        return (self.sigma_1, self.sigma_2, self.tau_12)


@dataclass(frozen=True)
class StressResult:
    """Recovered ply state.

    ``sigma_principal_max``/``sigma_principal_min`` are extrema of the absolute
    material-axis normal stresses over both surfaces, not per-surface Mohr
    principal stresses. ``von_mises`` is built from those two values.
    """

    ply_index: int
    material: str
    angle: float
    z_bottom: float
    z_top: float
    bottom: SurfaceState
    top: SurfaceState
    sigma_x: float
    sigma_y: float
    tau_xy: float
    sigma_principal_max: float
    sigma_principal_min: float
    tau_max: float
    von_mises: float

    @property
    def surfaces(self) -> tuple[SurfaceState, SurfaceState]:
        return (self.bottom, self.top)

    def all_values(self) -> np.ndarray:
        """Every load-proportional quantity of this result as one flat array."""
        values = [
            self.sigma_x,
            self.sigma_y,
            self.tau_xy,
            self.sigma_principal_max,
            self.sigma_principal_min,
            self.tau_max,
            self.von_mises,
        ]
        for surface in self.surfaces:
            values.extend(
                [
                    surface.epsilon_1,
                    surface.epsilon_2,
                    surface.gamma_12,
                    surface.sigma_1,
                    surface.sigma_2,
                    surface.tau_12,
                ]
            )
        return np.array(values)
