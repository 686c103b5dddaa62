from dataclasses import dataclass

from laminates.clt.data_utils import Loads


@dataclass(frozen=True)
class LoadCase:
    name: str
    description: str
    loads: Loads


# Axial maps to Nx, bending to Mx and torsion to the in-plane shear flow Nxy.
DEFAULT_LOAD_CASES: tuple[LoadCase, ...] = (
    LoadCase("Compression", "Axial compression loading", Loads(Nx=-4750)),
    LoadCase("Tension", "Axial tension loading", Loads(Nx=4750)),
    LoadCase("Bending", "Pure bending moment", Loads(Mx=10000)),
    LoadCase("Torsion", "Pure torsional loading", Loads(Nxy=5000)),
    LoadCase("Combined Loading", "Axial + Bending + Torsion", Loads(Nx=3000, Mx=5000, Nxy=2000)),
)
