import numpy as np
import pytest

from laminates.clt.math_utils import invert_6x6, rotation_matrix, strain_rotation_matrix
from laminates.errors import SingularMatrixError


def test_invert_matches_numpy() -> None:
    rng = np.random.default_rng(3)
    matrix = rng.normal(size=(6, 6)) + 6 * np.eye(6)
    np.testing.assert_allclose(invert_6x6(matrix), np.linalg.inv(matrix), rtol=1e-9, atol=1e-12)


def test_invert_requires_row_exchange() -> None:
    matrix = np.eye(6)[[1, 0, 2, 3, 4, 5]]
    np.testing.assert_allclose(invert_6x6(matrix) @ matrix, np.eye(6), atol=1e-12)


def test_zero_matrix_is_singular() -> None:
    with pytest.raises(SingularMatrixError):
        invert_6x6(np.zeros((6, 6)))


def test_singular_error_is_a_linalg_error() -> None:
    matrix = np.ones((6, 6))
    with pytest.raises(np.linalg.LinAlgError):
        invert_6x6(matrix)


def test_non_square_input_rejected() -> None:
    with pytest.raises(ValueError):
        invert_6x6(np.zeros((3, 6)))


def test_input_is_not_modified() -> None:
    matrix = np.diag([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    before = matrix.copy()
    invert_6x6(matrix)
    np.testing.assert_array_equal(matrix, before)


@pytest.mark.parametrize("theta", [0.0, np.pi / 6, np.pi / 4, np.pi / 2])
def test_strain_rotation_explicit_terms(theta: float) -> None:
    c, s = np.cos(theta), np.sin(theta)
    expected = np.array(
        [
            [c**2, s**2, c * s],
            [s**2, c**2, -c * s],
            [-2 * c * s, 2 * c * s, c**2 - s**2],
        ]
    )
    np.testing.assert_allclose(strain_rotation_matrix(theta), expected, atol=1e-12)


def test_pure_shear_strain_at_45_degrees() -> None:
    """gamma_xy alone becomes equal and opposite normal strains in the 45 degree frame."""
    eps = strain_rotation_matrix(np.pi / 4) @ np.array([0.0, 0.0, 2e-3])
    np.testing.assert_allclose(eps, [1e-3, -1e-3, 0.0], atol=1e-15)


def test_stress_rotation_at_90_degrees_swaps_normal_stresses() -> None:
    sigma = rotation_matrix(np.pi / 2) @ np.array([10.0, -4.0, 3.0])
    np.testing.assert_allclose(sigma, [-4.0, 10.0, -3.0], atol=1e-12)
