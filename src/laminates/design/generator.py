"""
Brute-force generation of candidate stacking sequences.

Every angle pattern is combined with every selected material, repeated until
the stack is close to the target thickness, and scored by

    score = Ex / 1e5 - |h - target| - areal_weight / 100

Higher is better.
"""

import logging
import math
from collections.abc import Sequence
from concurrent.futures import Executor
from dataclasses import dataclass
from functools import partial
from typing import Optional

from laminates.clt.data_utils import EngineeringProperties, MaterialRegistry, Ply
from laminates.clt.laminate import areal_weight, compute_equivalent_properties

logger = logging.getLogger(__name__)

ANGLE_PATTERNS: tuple[tuple[float, ...], ...] = (
    (0, 90, 0, 90),  # cross-ply
    (0, 45, -45, 90),  # quasi-isotropic
    (0, 0, 90, 90),
    (45, -45, 45, -45),  # shear
    (0, 30, -30, 60, -60, 90),
    (0, 45, 90, -45),
)
DEFAULT_TOP_N = 6


@dataclass(frozen=True)
class GeneratedConfiguration:
    material: str
    pattern: tuple[float, ...]
    repeats: int
    plies: tuple[Ply, ...]
    properties: EngineeringProperties
    weight: float
    score: float

    @property
    def thickness(self) -> float:
        return self.properties.thickness


def pattern_repeats(pattern_length: int, ply_thickness: float, target_thickness: float) -> int:
    """Number of pattern repetitions nearest to the target thickness, at least one."""
    return max(1, math.floor(target_thickness / (pattern_length * ply_thickness) + 0.5))


def score_configuration(
    properties: EngineeringProperties, weight: float, target_thickness: float
) -> float:
    return properties.Ex / 1e5 - abs(properties.thickness - target_thickness) - weight / 100.0


def build_configuration(
    material: str,
    pattern: Sequence[float],
    materials: MaterialRegistry,
    target_thickness: float,
) -> GeneratedConfiguration:
    repeats = pattern_repeats(len(pattern), materials[material].t, target_thickness)
    plies = tuple(Ply(material, float(angle)) for _ in range(repeats) for angle in pattern)
    properties = compute_equivalent_properties(plies, materials)
    weight = areal_weight(plies, materials)
    return GeneratedConfiguration(
        material=material,
        pattern=tuple(pattern),
        repeats=repeats,
        plies=plies,
        properties=properties,
        weight=weight,
        score=score_configuration(properties, weight, target_thickness),
    )


def _build_job(
    job: tuple[str, Sequence[float]], materials: MaterialRegistry, target_thickness: float
) -> GeneratedConfiguration:
    material, pattern = job
    return build_configuration(material, pattern, materials, target_thickness)


def generate_configurations(
    materials: MaterialRegistry,
    selected_materials: Sequence[str],
    target_thickness: float,
    top_n: int = DEFAULT_TOP_N,
    patterns: Sequence[Sequence[float]] = ANGLE_PATTERNS,
    executor: Optional[Executor] = None,
) -> list[GeneratedConfiguration]:
    """Enumerate and rank candidate laminates, best first.

    Selected names missing from ``materials`` are skipped with a warning. When
    an ``executor`` is given, candidates are evaluated through its ``map``.
    Registries are mapping proxies and do not pickle, so pass a thread pool.
    """
    jobs = []
    for name in selected_materials:
        if name not in materials:
            logger.warning("Skipping unknown material '%s'", name)
            continue
        jobs.extend((name, pattern) for pattern in patterns)

    build = partial(_build_job, materials=materials, target_thickness=target_thickness)
    mapper = map if executor is None else executor.map
    configurations = list(mapper(build, jobs))

    configurations.sort(key=lambda configuration: configuration.score, reverse=True)
    return configurations[:top_n]
