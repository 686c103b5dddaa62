from typing import Optional

from laminates.clt.data.lamina_props import DEFAULT_MATERIAL
from laminates.clt.data_utils import Ply


def laminate_builder(
    angleslist: list[float],
    symmetry: bool,
    copycenter: bool,
    multiplicity: int,
    material: Optional[str] = None,
) -> tuple[Ply, ...]:
    """Build a stacking sequence of plies of a single material.

    With ``symmetry`` the angles are mirrored about the mid-plane; ``copycenter``
    decides whether the centre ply is duplicated. The resulting sequence is
    repeated ``multiplicity`` times.
    """
    if symmetry:
        if copycenter:
            angleslist = angleslist + angleslist[-1::-1]
        else:
            angleslist = angleslist + angleslist[-2::-1]
    angleslist = angleslist * multiplicity

    if not material:
        material = DEFAULT_MATERIAL.name

    return tuple(Ply(material=material, angle=float(angle)) for angle in angleslist)


def parse_angles(text: str) -> list[float]:
    """Parse a comma or slash separated angle list such as ``"0/45/-45/90"``."""
    tokens = text.replace("[", "").replace("]", "").replace("/", ",").split(",")
    return [float(token) for token in (t.strip() for t in tokens) if token]
