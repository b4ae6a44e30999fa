"""
Small dense linear solves used by the boundary-value solvers.
"""

import logging

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ur5e_pmp.config import SINGULAR_TOL, TRACE
from ur5e_pmp.utils.errors import DimensionMismatchError, SingularSystemError

logger = logging.getLogger(__name__)

SYSTEM_SIZE = 6


def solve6(A: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
    """
    Solve the 6x6 system A x = b by Gaussian elimination with partial pivoting.

    Args:
        A: 6x6 coefficient matrix
        b: Right-hand side of length 6

    Returns:
        Solution vector x of length 6

    Raises:
        DimensionMismatchError: If A is not 6x6 or b is not length 6
        SingularSystemError: If a pivot magnitude falls below SINGULAR_TOL or is NaN
    """
    n = SYSTEM_SIZE
    try:
        A_arr = np.array(A, dtype=np.float64)
        b_arr = np.array(b, dtype=np.float64)
    except ValueError as e:
        # Ragged rows cannot form a matrix
        raise DimensionMismatchError(f"solve6: bad dimensions ({e})") from e
    if A_arr.shape != (n, n):
        raise DimensionMismatchError(f"solve6: matrix must be {n}x{n}, got shape {A_arr.shape}")
    if b_arr.shape != (n,):
        raise DimensionMismatchError(f"solve6: vector must have length {n}, got shape {b_arr.shape}")

    # Augment [A | b]
    M = np.hstack([A_arr, b_arr.reshape(n, 1)])

    # Forward elimination
    for col in range(n):
        piv = col + int(np.argmax(np.abs(M[col:, col])))
        best = abs(M[piv, col])
        if not best >= SINGULAR_TOL:
            raise SingularSystemError(f"solve6: pivot {best:.3e} in column {col} below {SINGULAR_TOL:g}")
        if piv != col:
            M[[col, piv]] = M[[piv, col]]

        M[col, col:] /= M[col, col]
        for r in range(col + 1, n):
            f = M[r, col]
            if f != 0.0:
                M[r, col:] -= f * M[col, col:]

    # Back substitution; diagonal is 1 after normalization
    x = np.zeros(n, dtype=np.float64)
    for r in range(n - 1, -1, -1):
        x[r] = M[r, n] - np.dot(M[r, r + 1 : n], x[r + 1 :])

    logger.log(TRACE, "solve6 x=%s", x)
    return x
