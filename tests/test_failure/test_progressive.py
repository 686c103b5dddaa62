import copy
import logging

import pytest

from laminates.clt.data.lamina_props import Christos, MATERIAL_LIBRARY, carbon_fiber_twill
from laminates.clt.data_utils import GeometryConfig, Loads, Ply
from laminates.failure.criteria import FailureCriterion
from laminates.failure.progressive import ProgressiveFailureSettings, run_progressive_failure


def unidirectional(count: int = 4) -> list[Ply]:
    return [Ply(Christos.name, 0.0) for _ in range(count)]


def test_inputs_are_not_mutated() -> None:
    plies = [Ply(Christos.name, angle) for angle in (0, 45, -45, 90)]
    materials = dict(MATERIAL_LIBRARY)
    loads = Loads(Nx=900.0, Nxy=150.0)
    plies_before = copy.deepcopy(plies)
    materials_before = copy.deepcopy(materials)

    analysis = run_progressive_failure(plies, materials, loads, 1.5, FailureCriterion.TSAI_WU)

    assert analysis.first_ply_failure is not None
    assert plies == plies_before
    assert materials == materials_before
    assert set(materials) == set(MATERIAL_LIBRARY)
    assert loads == Loads(Nx=900.0, Nxy=150.0)


def test_unloaded_laminate_never_fails() -> None:
    analysis = run_progressive_failure(
        unidirectional(), MATERIAL_LIBRARY, Loads(), 1.5, "max_stress", max_iterations=5
    )
    assert len(analysis.steps) == 6
    assert analysis.first_ply_failure is None
    assert analysis.last_ply_failure is None
    assert analysis.ultimate_strength == 1.0
    assert [step.load_multiplier for step in analysis.steps] == pytest.approx(
        [1.0, 1.1, 1.2, 1.3, 1.4, 1.5]
    )


def test_load_increases_until_first_failure() -> None:
    """Nx gives a failure index of 0.85; all plies fail once the load reaches 1.2x."""
    loads = Loads(Nx=0.85 * 2200.0 * 0.8)
    analysis = run_progressive_failure(unidirectional(), MATERIAL_LIBRARY, loads, 1.0, "max_stress")

    assert [step.iteration for step in analysis.steps] == [0, 1, 2, 3]
    assert analysis.steps[0].max_failure_index == pytest.approx(0.85)
    assert analysis.steps[2].max_failure_index == pytest.approx(1.02)
    assert analysis.first_ply_failure is not None
    assert analysis.first_ply_failure.iteration == 3
    assert analysis.first_ply_failure.failure_index == pytest.approx(1.02)
    assert analysis.last_ply_failure is not None
    assert analysis.last_ply_failure.iteration == 3
    assert analysis.ultimate_strength == pytest.approx(1.2)
    assert analysis.failed_plies == frozenset(range(4))
    assert not analysis.cancelled


def test_failed_plies_carry_degraded_overrides() -> None:
    analysis = run_progressive_failure(
        unidirectional(), MATERIAL_LIBRARY, Loads(Nx=3000.0), 1.0, "max_stress"
    )
    last = analysis.steps[-1]
    assert last.failed_plies == (0, 1, 2, 3)
    assert set(last.degraded_materials) == {0, 1, 2, 3}
    for material in last.degraded_materials.values():
        assert material.name == Christos.name
        assert material.elastic_properties.E1 == pytest.approx(1420.0)
        assert material.elastic_properties.G12 == pytest.approx(50.0)
    assert analysis.steps[0].degraded_materials == {}
    assert analysis.ultimate_strength == pytest.approx(1.0)


def test_weak_plies_fail_first() -> None:
    plies = [Ply(Christos.name, 0.0), Ply(carbon_fiber_twill.name, 0.0), Ply(Christos.name, 0.0)]
    analysis = run_progressive_failure(plies, MATERIAL_LIBRARY, Loads(Nx=300.0), 1.0, "max_stress")
    assert analysis.first_ply_failure is not None
    assert analysis.first_ply_failure.ply == 1
    multipliers = [step.load_multiplier for step in analysis.steps]
    assert multipliers == sorted(multipliers)
    assert analysis.ultimate_strength >= 1.0


def test_iteration_cap() -> None:
    analysis = run_progressive_failure(
        unidirectional(), MATERIAL_LIBRARY, Loads(Nx=1.0), 1.0, "tsai_hill", max_iterations=3
    )
    assert len(analysis.steps) == 4
    assert analysis.last_ply_failure is None


def test_cancellation_between_iterations() -> None:
    seen = []

    def cancel(iteration: int) -> bool:
        seen.append(iteration)
        return iteration >= 2

    analysis = run_progressive_failure(
        unidirectional(), MATERIAL_LIBRARY, Loads(Nx=1.0), 1.0, "max_stress", cancel=cancel
    )
    assert analysis.cancelled
    assert seen == [0, 1, 2]
    assert [step.iteration for step in analysis.steps] == [0, 1, 2]


def test_custom_settings() -> None:
    settings = ProgressiveFailureSettings(load_step=0.5)
    analysis = run_progressive_failure(
        unidirectional(),
        MATERIAL_LIBRARY,
        Loads(Nx=0.85 * 2200.0 * 0.8),
        1.0,
        "max_stress",
        settings=settings,
    )
    assert analysis.ultimate_strength == pytest.approx(1.5)


def test_tube_geometry_and_logging(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="laminates.failure.progressive"):
        analysis = run_progressive_failure(
            unidirectional(),
            MATERIAL_LIBRARY,
            Loads(Nx=3000.0),
            1.0,
            "max_stress",
            geometry=GeometryConfig(),
        )
    assert analysis.last_ply_failure is not None
    assert "failed at iteration 1" in caplog.text


def test_empty_stack() -> None:
    analysis = run_progressive_failure([], MATERIAL_LIBRARY, Loads(Nx=100.0), 1.5, "tsai_wu")
    assert len(analysis.steps) == 1
    assert analysis.steps[0].failure_results == ()
    assert analysis.ultimate_strength == 1.0
