from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional, Union

from laminates.clt.data.load_cases import DEFAULT_LOAD_CASES, LoadCase
from laminates.clt.data_utils import GeometryConfig, MaterialRegistry, Ply, StressResult
from laminates.clt.laminate import compute_stress_strain
from laminates.failure.criteria import (
    FailureCriterion,
    FailureResult,
    SafetySummary,
    evaluate_failure,
    safety_summary,
)


@dataclass(frozen=True)
class LoadCaseResult:
    load_case: LoadCase
    stress: tuple[StressResult, ...]
    failure: tuple[FailureResult, ...]
    summary: SafetySummary


@dataclass(frozen=True)
class LoadCaseEvaluation:
    results: tuple[LoadCaseResult, ...]
    governing_case: Optional[LoadCaseResult]


def evaluate_load_cases(
    plies: Sequence[Ply],
    materials: MaterialRegistry,
    safety_factor: float,
    criterion: Union[FailureCriterion, str],
    load_cases: Sequence[LoadCase] = DEFAULT_LOAD_CASES,
    geometry: Optional[GeometryConfig] = None,
) -> LoadCaseEvaluation:
    """Run stress recovery and failure evaluation for each load case.

    The governing case is the one with the largest failure index; the first
    case wins on ties.
    """
    results = []
    for load_case in load_cases:
        stress = compute_stress_strain(plies, materials, load_case.loads, geometry)
        failure = evaluate_failure(plies, materials, stress, safety_factor, criterion)
        results.append(
            LoadCaseResult(
                load_case=load_case,
                stress=tuple(stress),
                failure=tuple(failure),
                summary=safety_summary(failure, safety_factor),
            )
        )

    governing = max(results, key=lambda result: result.summary.max_failure_index, default=None)
    return LoadCaseEvaluation(results=tuple(results), governing_case=governing)
