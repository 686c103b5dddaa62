import pytest

from laminates.analysis.load_cases import evaluate_load_cases
from laminates.clt.data.lamina_props import DEFAULT_MATERIALS
from laminates.clt.data.load_cases import DEFAULT_LOAD_CASES, LoadCase
from laminates.clt.data_utils import Loads
from laminates.clt.utils import laminate_builder
from laminates.failure.criteria import FailureCriterion


@pytest.fixture
def plies():
    return laminate_builder([0, 45, -45, 90], True, True, 2)


def test_default_load_cases() -> None:
    names = [case.name for case in DEFAULT_LOAD_CASES]
    assert names == ["Compression", "Tension", "Bending", "Torsion", "Combined Loading"]
    assert DEFAULT_LOAD_CASES[0].loads.Nx == -4750


def test_evaluate_default_cases(plies) -> None:
    evaluation = evaluate_load_cases(plies, DEFAULT_MATERIALS, 1.5, FailureCriterion.TSAI_WU)
    assert len(evaluation.results) == len(DEFAULT_LOAD_CASES)
    for case_result in evaluation.results:
        assert len(case_result.stress) == len(plies)
        assert len(case_result.failure) == len(plies)

    governing = evaluation.governing_case
    assert governing is not None
    assert governing.summary.max_failure_index == max(
        case_result.summary.max_failure_index for case_result in evaluation.results
    )


def test_governing_case_is_the_heaviest(plies) -> None:
    cases = [
        LoadCase("Light", "", Loads(Nx=10.0)),
        LoadCase("Heavy", "", Loads(Nx=1000.0)),
        LoadCase("Unloaded", "", Loads()),
    ]
    evaluation = evaluate_load_cases(plies, DEFAULT_MATERIALS, 1.5, "max_stress", cases)
    assert evaluation.governing_case.load_case.name == "Heavy"


def test_no_load_cases(plies) -> None:
    evaluation = evaluate_load_cases(plies, DEFAULT_MATERIALS, 1.5, "max_stress", [])
    assert evaluation.results == ()
    assert evaluation.governing_case is None
