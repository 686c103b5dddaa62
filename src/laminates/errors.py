"""Exceptions raised by the laminate analysis engine."""

import numpy as np


class LaminateError(Exception):
    """Base class for all laminate analysis errors."""


class ConfigurationError(LaminateError, ValueError):
    """Invalid material constants or an inconsistent material set."""


class SingularMatrixError(LaminateError, np.linalg.LinAlgError):
    """The ABD matrix could not be inverted (empty or degenerate laminate)."""


class MissingMaterialError(LaminateError, KeyError):
    """A ply references a material that is not in the material registry."""

    def __init__(self, material: str, ply_index: int) -> None:
        super().__init__(material)
        self.material = material
        self.ply_index = ply_index

    def __str__(self) -> str:
        return f"ply {self.ply_index} references unknown material '{self.material}'"
