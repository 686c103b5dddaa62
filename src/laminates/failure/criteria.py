"""
Failure criteria for fiber-reinforced plies.

Three interchangeable criteria share the ``FailureModel.evaluate`` contract and
are selected through the ``FailureCriterion`` enum:

- Maximum stress: largest single stress/strength ratio.
- Tsai-Wu: quadratic interaction criterion, square root of the polynomial.
- Tsai-Hill: quadratic interaction criterion, square root of the polynomial.

Missing strengths fall back to ``STRENGTH_DEFAULTS`` (1000 MPa tensile and
compressive, 100 MPa shear). A zero strength is treated as missing.
"""

import enum
import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional, Union

from laminates.clt.data_utils import (
    MaterialProperties,
    MaterialRegistry,
    Ply,
    PlyOverrides,
    StressResult,
    SurfaceState,
)
from laminates.clt.laminate import resolve_material

NO_FAILURE = "No failure"
NO_DATA = "No data"


class FailureCriterion(str, enum.Enum):
    MAX_STRESS = "max_stress"
    TSAI_WU = "tsai_wu"
    TSAI_HILL = "tsai_hill"


@dataclass(frozen=True)
class StrengthDefaults:
    """Strengths assumed when a material does not provide them (MPa)."""

    tensile: float = 1000.0
    compressive: float = 1000.0
    shear: float = 100.0


STRENGTH_DEFAULTS = StrengthDefaults()


@dataclass(frozen=True)
class ResolvedStrengths:
    tensile: float
    compressive: float
    shear: float


def resolve_strengths(
    material: MaterialProperties, defaults: StrengthDefaults = STRENGTH_DEFAULTS
) -> ResolvedStrengths:
    strength = material.strength_properties
    return ResolvedStrengths(
        tensile=strength.tensile or defaults.tensile,
        compressive=strength.compressive or defaults.compressive,
        shear=strength.shear or defaults.shear,
    )


@dataclass(frozen=True)
class FailureResult:
    """Failure state of one ply.

    Attributes:
        ply_index: Position in the stack (0 = bottom).
        failure_index: Criterion value, >= 1 means failure.
        safety_margin: (1 / failure_index - 1) * 100 percent; inf when unloaded.
        failure_mode: Human readable mode label.
        passed: failure_index * safety_factor < 1.
    """

    ply_index: int
    material: str
    angle: float
    failure_index: float
    safety_margin: float
    failure_mode: str
    passed: bool


@dataclass(frozen=True)
class SafetySummary:
    minimum_safety_factor: float
    critical_ply: Optional[int]
    max_failure_index: float
    design_meets_safety: bool


class FailureModel(ABC):
    criterion: FailureCriterion

    def __init__(self, defaults: StrengthDefaults = STRENGTH_DEFAULTS) -> None:
        self.defaults = defaults

    @abstractmethod
    def evaluate(self, stress: SurfaceState, material: MaterialProperties) -> tuple[float, str]:
        """Return (failure_index, failure_mode) for a material-axis stress state."""
        raise NotImplementedError


class MaxStress(FailureModel):
    """
    Maximum stress criterion.

    The longitudinal and transverse ratios use the tensile or compressive limit
    depending on the sign of the stress.
    """

    criterion = FailureCriterion.MAX_STRESS

    def ratios(
        self, stress: SurfaceState, material: MaterialProperties
    ) -> tuple[float, float, float]:
        strengths = resolve_strengths(material, self.defaults)
        s1, s2, t12 = stress.stresses
        fi1 = abs(s1) / (strengths.tensile if s1 >= 0 else strengths.compressive)
        fi2 = abs(s2) / (strengths.tensile if s2 >= 0 else strengths.compressive)
        fi12 = abs(t12) / strengths.shear
        return fi1, fi2, fi12

    def evaluate(self, stress: SurfaceState, material: MaterialProperties) -> tuple[float, str]:
        fi1, fi2, fi12 = self.ratios(stress, material)
        index = max(fi1, fi2, fi12)

        if index < 1:
            mode = NO_FAILURE
        elif fi1 == index:
            mode = "Longitudinal tension" if stress.sigma_1 >= 0 else "Longitudinal compression"
        elif fi2 == index:
            mode = "Transverse tension" if stress.sigma_2 >= 0 else "Transverse compression"
        else:
            mode = "Shear failure"
        return index, mode


class TsaiWu(FailureModel):
    """
    Tsai-Wu quadratic interaction criterion.

    F1 s1 + F2 s2 + F11 s1^2 + F22 s2^2 + F66 t12^2 + 2 F12 s1 s2, clamped at 0,
    square-rooted. The transverse terms (Y) reuse the tensile and compressive
    limits of the material, which carry no separate transverse strength.
    F12 = -0.5 sqrt(F11 F22).
    """

    criterion = FailureCriterion.TSAI_WU

    def evaluate(self, stress: SurfaceState, material: MaterialProperties) -> tuple[float, str]:
        strengths = resolve_strengths(material, self.defaults)
        Xt = Yt = strengths.tensile
        Xc = Yc = strengths.compressive
        S = strengths.shear

        F1 = 1 / Xt - 1 / Xc
        F2 = 1 / Yt - 1 / Yc
        F11 = 1 / (Xt * Xc)
        F22 = 1 / (Yt * Yc)
        F66 = 1 / (S * S)
        F12 = -0.5 * math.sqrt(F11 * F22)

        s1, s2, t12 = stress.stresses
        value = (
            F1 * s1
            + F2 * s2
            + F11 * s1 * s1
            + F22 * s2 * s2
            + F66 * t12 * t12
            + 2 * F12 * s1 * s2
        )
        return math.sqrt(max(0.0, value)), "Tsai-Wu criterion"


class TsaiHill(FailureModel):
    """Tsai-Hill criterion with X and Y picked by the sign of s1 and s2."""

    criterion = FailureCriterion.TSAI_HILL

    def evaluate(self, stress: SurfaceState, material: MaterialProperties) -> tuple[float, str]:
        strengths = resolve_strengths(material, self.defaults)
        s1, s2, t12 = stress.stresses
        X = strengths.tensile if s1 >= 0 else strengths.compressive
        Y = strengths.tensile if s2 >= 0 else strengths.compressive
        S = strengths.shear

        value = (
            (s1 * s1) / (X * X)
            - (s1 * s2) / (X * X)
            + (s2 * s2) / (Y * Y)
            + (t12 * t12) / (S * S)
        )
        return math.sqrt(max(0.0, value)), "Tsai-Hill criterion"


FAILURE_MODELS: dict[FailureCriterion, type[FailureModel]] = {
    FailureCriterion.MAX_STRESS: MaxStress,
    FailureCriterion.TSAI_WU: TsaiWu,
    FailureCriterion.TSAI_HILL: TsaiHill,
}


def get_failure_model(
    criterion: Union[FailureCriterion, str], defaults: StrengthDefaults = STRENGTH_DEFAULTS
) -> FailureModel:
    """Instantiate the model for a criterion given as enum member or its value.

    Raises:
        ValueError: for an unknown criterion name.
    """
    return FAILURE_MODELS[FailureCriterion(criterion)](defaults)


def safety_margin(failure_index: float) -> float:
    if failure_index == 0:
        return math.inf
    return (1.0 / failure_index - 1.0) * 100.0


def evaluate_ply(
    stress: StressResult, material: MaterialProperties, model: FailureModel
) -> tuple[float, str]:
    """Evaluate both surfaces of a ply and keep the governing one."""
    return max(
        (model.evaluate(surface, material) for surface in stress.surfaces),
        key=lambda result: result[0],
    )


def evaluate_failure(
    plies: Sequence[Ply],
    materials: MaterialRegistry,
    stresses: Sequence[StressResult],
    safety_factor: float,
    criterion: Union[FailureCriterion, str],
    overrides: Optional[PlyOverrides] = None,
) -> list[FailureResult]:
    """Failure result for every ply of the stack, in stack order.

    Stresses are matched to plies by ``ply_index``. A ply without material or
    stress gets a "No data" result that does not pass.
    """
    model = get_failure_model(criterion)
    stress_by_ply = {stress.ply_index: stress for stress in stresses}

    results = []
    for index, ply in enumerate(plies):
        material = resolve_material(index, ply, materials, overrides)
        stress = stress_by_ply.get(index)
        if material is None or stress is None:
            results.append(
                FailureResult(
                    ply_index=index,
                    material=ply.material,
                    angle=ply.angle,
                    failure_index=0.0,
                    safety_margin=0.0,
                    failure_mode=NO_DATA,
                    passed=False,
                )
            )
            continue

        failure_index, mode = evaluate_ply(stress, material, model)
        results.append(
            FailureResult(
                ply_index=index,
                material=ply.material,
                angle=ply.angle,
                failure_index=failure_index,
                safety_margin=safety_margin(failure_index),
                failure_mode=mode,
                passed=failure_index * safety_factor < 1,
            )
        )
    return results


def safety_summary(results: Sequence[FailureResult], safety_factor: float) -> SafetySummary:
    """Governing ply and overall verdict of a failure evaluation."""
    if not results:
        return SafetySummary(
            minimum_safety_factor=0.0,
            critical_ply=None,
            max_failure_index=0.0,
            design_meets_safety=False,
        )

    critical = max(results, key=lambda result: result.failure_index)
    max_failure_index = critical.failure_index
    return SafetySummary(
        minimum_safety_factor=math.inf if max_failure_index == 0 else 1.0 / max_failure_index,
        critical_ply=critical.ply_index,
        max_failure_index=max_failure_index,
        design_meets_safety=max_failure_index * safety_factor < 1,
    )
