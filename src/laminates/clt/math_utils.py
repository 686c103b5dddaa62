import numpy as np

from laminates.errors import SingularMatrixError

PIVOT_TOLERANCE = 1e-10
REUTER = np.diag([1.0, 1.0, 2.0])
REUTER_INVERSE = np.diag([1.0, 1.0, 0.5])


def rotation_matrix(theta: float) -> np.ndarray:
    """Return the 3x3 global -> material stress transformation for an angle in radians."""
    c = np.cos(theta)
    s = np.sin(theta)
    return np.array(
        [
            [c**2, s**2, 2 * c * s],
            [s**2, c**2, -2 * c * s],
            [-c * s, c * s, c**2 - s**2],
        ]
    )


def strain_rotation_matrix(theta: float) -> np.ndarray:
    """Return the 3x3 global -> material transformation for engineering strains.

    The stress transformation conjugated by the Reuter matrix diag(1, 1, 2), so
    gamma_12 picks up the factor -2 on the (eps_x - eps_y) cross term.
    """
    return REUTER @ rotation_matrix(theta) @ REUTER_INVERSE


def invert_6x6(matrix: np.ndarray, tolerance: float = PIVOT_TOLERANCE) -> np.ndarray:
    """Invert a square matrix by Gauss-Jordan elimination with partial pivoting.

    The pivot row is the one with the largest magnitude in the current column;
    on ties the upper row wins.

    Raises:
        SingularMatrixError: if a pivot magnitude falls below ``tolerance``.
    """
    a = np.array(matrix, dtype=float)
    n = a.shape[0]
    if a.shape != (n, n):
        raise ValueError(f"expected a square matrix, got shape {a.shape}")
    augmented = np.hstack([a, np.eye(n)])

    for i in range(n):
        pivot_row = i + int(np.argmax(np.abs(augmented[i:, i])))
        if pivot_row != i:
            augmented[[i, pivot_row]] = augmented[[pivot_row, i]]

        pivot = augmented[i, i]
        if abs(pivot) < tolerance:
            raise SingularMatrixError(f"matrix is singular (pivot {pivot:.3e} in column {i})")
        augmented[i] /= pivot

        for k in range(n):
            if k != i:
                augmented[k] -= augmented[k, i] * augmented[i]

    return augmented[:, n:]
