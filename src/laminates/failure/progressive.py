import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional, Union

from laminates.clt.data_utils import (
    GeometryConfig,
    Loads,
    MaterialProperties,
    MaterialRegistry,
    Ply,
    PlyOverrides,
    StressResult,
)
from laminates.clt.laminate import compute_stress_strain, resolve_material
from laminates.failure.criteria import FailureCriterion, FailureResult, evaluate_failure

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 100


@dataclass(frozen=True)
class ProgressiveFailureSettings:
    """Tunables of the progressive failure simulation.

    Attributes:
        degradation_factor: Scale applied to E1, E2 and G12 of a failed ply.
        load_step: Load multiplier increment when no new ply fails.
        failure_threshold: Failure index at which a ply counts as failed.
        catastrophic_index: Maximum failure index that ends the run.
    """

    degradation_factor: float = 0.01
    load_step: float = 0.1
    failure_threshold: float = 1.0
    catastrophic_index: float = 10.0


@dataclass(frozen=True)
class FirstPlyFailure:
    ply: int
    iteration: int
    failure_index: float


@dataclass(frozen=True)
class LastPlyFailure:
    ply: int
    iteration: int
    load_multiplier: float


@dataclass(frozen=True)
class ProgressiveFailureStep:
    iteration: int
    failed_plies: tuple[int, ...]
    max_failure_index: float
    critical_ply: Optional[int]
    load_multiplier: float
    degraded_materials: PlyOverrides
    stress_results: tuple[StressResult, ...]
    failure_results: tuple[FailureResult, ...]


@dataclass(frozen=True)
class ProgressiveFailureAnalysis:
    steps: tuple[ProgressiveFailureStep, ...]
    first_ply_failure: Optional[FirstPlyFailure]
    last_ply_failure: Optional[LastPlyFailure]
    ultimate_strength: float
    cancelled: bool = False
    failed_plies: frozenset[int] = field(default_factory=frozenset)


def _critical(failure_results: Sequence[FailureResult]) -> tuple[float, Optional[int]]:
    if not failure_results:
        return 0.0, None
    critical = max(failure_results, key=lambda result: result.failure_index)
    return critical.failure_index, critical.ply_index


class ProgressiveFailureSimulation:
    """
    Orchestrates progressive failure of a stack under a growing load.

    State is the set of failed plies, a per-ply map of degraded materials and
    the current load multiplier. The caller's plies and registry are only read;
    degraded materials live in the override map.
    """

    def __init__(
        self,
        plies: Sequence[Ply],
        materials: MaterialRegistry,
        loads: Loads,
        safety_factor: float,
        criterion: Union[FailureCriterion, str],
        geometry: Optional[GeometryConfig] = None,
        settings: ProgressiveFailureSettings = ProgressiveFailureSettings(),
    ) -> None:
        self.plies: tuple[Ply, ...] = tuple(plies)
        self.materials: MaterialRegistry = materials
        self.loads: Loads = loads
        self.safety_factor: float = safety_factor
        self.criterion = FailureCriterion(criterion)
        self.geometry: Optional[GeometryConfig] = geometry
        self.settings: ProgressiveFailureSettings = settings

        self.failed_plies: set[int] = set()
        self.overrides: dict[int, MaterialProperties] = {}
        self.load_increments: int = 0

    @property
    def load_multiplier(self) -> float:
        return 1.0 + self.load_increments * self.settings.load_step

    def analyse(self) -> tuple[list[StressResult], list[FailureResult]]:
        """Stress and failure state at the current multiplier and degradation."""
        stresses = compute_stress_strain(
            self.plies,
            self.materials,
            self.loads.scaled(self.load_multiplier),
            self.geometry,
            overrides=self.overrides,
        )
        failures = evaluate_failure(
            self.plies,
            self.materials,
            stresses,
            self.safety_factor,
            self.criterion,
            overrides=self.overrides,
        )
        return stresses, failures

    def degrade(self, index: int) -> None:
        """Substitute a degraded copy of the ply's registry material."""
        material = resolve_material(index, self.plies[index], self.materials)
        if material is not None:
            self.overrides[index] = material.degraded(self.settings.degradation_factor)

    def step(
        self,
        iteration: int,
        stresses: Sequence[StressResult],
        failures: Sequence[FailureResult],
    ) -> ProgressiveFailureStep:
        max_index, critical_ply = _critical(failures)
        return ProgressiveFailureStep(
            iteration=iteration,
            failed_plies=tuple(sorted(self.failed_plies)),
            max_failure_index=max_index,
            critical_ply=critical_ply,
            load_multiplier=self.load_multiplier,
            degraded_materials=MappingProxyType(dict(self.overrides)),
            stress_results=tuple(stresses),
            failure_results=tuple(failures),
        )

    def run(
        self,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        cancel: Optional[Callable[[int], bool]] = None,
    ) -> ProgressiveFailureAnalysis:
        """Run until every ply failed, the failure index turns catastrophic,
        ``max_iterations`` is reached, or ``cancel(iteration)`` returns True.
        """
        stresses, failures = self.analyse()
        steps = [self.step(0, stresses, failures)]
        first_ply_failure: Optional[FirstPlyFailure] = None
        last_ply_failure: Optional[LastPlyFailure] = None
        cancelled = False
        iteration = 0

        while iteration < max_iterations and len(self.failed_plies) < len(self.plies):
            if cancel is not None and cancel(iteration):
                logger.debug("Progressive failure cancelled after iteration %d", iteration)
                cancelled = True
                break
            iteration += 1

            new_failures = [
                result
                for result in failures
                if result.failure_index >= self.settings.failure_threshold
                and result.ply_index not in self.failed_plies
            ]
            for result in new_failures:
                self.failed_plies.add(result.ply_index)
                self.degrade(result.ply_index)
                if first_ply_failure is None:
                    first_ply_failure = FirstPlyFailure(
                        ply=result.ply_index,
                        iteration=iteration,
                        failure_index=result.failure_index,
                    )
                logger.debug(
                    "Ply %d failed at iteration %d (index %.3f, multiplier %.2f)",
                    result.ply_index,
                    iteration,
                    result.failure_index,
                    self.load_multiplier,
                )

            if not new_failures:
                self.load_increments += 1

            stresses, failures = self.analyse()
            step = self.step(iteration, stresses, failures)
            steps.append(step)

            if (
                len(self.failed_plies) == len(self.plies)
                or step.max_failure_index > self.settings.catastrophic_index
            ):
                last_ply_failure = LastPlyFailure(
                    ply=step.critical_ply, iteration=iteration, load_multiplier=self.load_multiplier
                )
                logger.debug(
                    "Laminate collapsed at iteration %d, multiplier %.2f",
                    iteration,
                    self.load_multiplier,
                )
                break

        return ProgressiveFailureAnalysis(
            steps=tuple(steps),
            first_ply_failure=first_ply_failure,
            last_ply_failure=last_ply_failure,
            ultimate_strength=self.load_multiplier if first_ply_failure is not None else 1.0,
            cancelled=cancelled,
            failed_plies=frozenset(self.failed_plies),
        )


def run_progressive_failure(
    plies: Sequence[Ply],
    materials: MaterialRegistry,
    loads: Loads,
    safety_factor: float,
    criterion: Union[FailureCriterion, str],
    geometry: Optional[GeometryConfig] = None,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    settings: ProgressiveFailureSettings = ProgressiveFailureSettings(),
    cancel: Optional[Callable[[int], bool]] = None,
) -> ProgressiveFailureAnalysis:
    """Simulate sequential ply failure under a proportionally increasing load.

    The ultimate strength is the load multiplier at termination, or 1.0 when
    no ply failed.
    """
    simulation = ProgressiveFailureSimulation(
        plies, materials, loads, safety_factor, criterion, geometry, settings
    )
    return simulation.run(max_iterations=max_iterations, cancel=cancel)
