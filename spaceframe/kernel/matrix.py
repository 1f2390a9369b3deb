# spaceframe/kernel/matrix.py
"""
MATRIX: Dense Matrix Type and Direct Solver
===========================================

PURPOSE:
--------
A small dense matrix type used by assembly and post-processing. Storage is a
float numpy array; the class adds the operations the direct stiffness method
needs with explicit shape checks:

    - construction (zeros, identity, from nested lists)
    - element get / set / add (scatter-add during assembly)
    - plus / minus / scale / multiply / transpose
    - sub_matrix(rows, cols)      -> DOF partitioning (K_ff, K_sf, ...)
    - extract_vector / set_vector -> gather/scatter of load & displacement vectors
    - solve(b)                    -> Gaussian elimination with partial pivoting

WHY A HAND-WRITTEN SOLVE?
-------------------------
The solver has to fail deterministically when the free-free stiffness block is
singular (an unstable or under-supported structure). Elimination with an
explicit pivot threshold gives exactly that contract: any pivot smaller than
``pivot_tolerance`` raises SingularMatrixError instead of returning a huge,
meaningless displacement vector.
"""

from typing import Iterable, Sequence

import numpy as np

from ..config import CONFIG
from ..errors import DimensionError, SingularMatrixError


class Matrix:
    """
    Dense rows × cols matrix of floats.

    Examples:
    ---------
    >>> K = Matrix.zeros(2, 2)
    >>> K.add(0, 0, 4.0); K.add(1, 1, 2.0)
    >>> K.solve([8.0, 2.0])
    array([2., 1.])
    """

    __slots__ = ("_data",)

    def __init__(self, rows: int, cols: int, initial_value: float = 0.0):
        self._data = np.full((rows, cols), float(initial_value), dtype=float)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def zeros(cls, rows: int, cols: int) -> "Matrix":
        return cls(rows, cols)

    @classmethod
    def identity(cls, n: int) -> "Matrix":
        return cls._wrap(np.eye(n, dtype=float))

    @classmethod
    def from_array(cls, arr) -> "Matrix":
        """Build from a nested sequence or a 2D numpy array (copied)."""
        data = np.array(arr, dtype=float)
        if data.ndim != 2:
            raise DimensionError(f"Expected a 2D array, got shape {data.shape}")
        return cls._wrap(data)

    @classmethod
    def _wrap(cls, data: np.ndarray) -> "Matrix":
        m = cls.__new__(cls)
        m._data = data
        return m

    # ------------------------------------------------------------------
    # Shape and element access
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self):
        return self._data.shape

    def get(self, row: int, col: int) -> float:
        return float(self._data[row, col])

    def set(self, row: int, col: int, value: float) -> None:
        self._data[row, col] = value

    def add(self, row: int, col: int, value: float) -> None:
        self._data[row, col] += value

    def copy(self) -> "Matrix":
        return Matrix._wrap(self._data.copy())

    def to_array(self) -> np.ndarray:
        """Copy of the underlying data as a numpy array."""
        return self._data.copy()

    def __repr__(self) -> str:
        return f"Matrix({self.rows}x{self.cols})"

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _check_same_shape(self, other: "Matrix", op: str) -> None:
        if self.shape != other.shape:
            raise DimensionError(
                f"Matrix dimensions must match for {op}: "
                f"{self.rows}x{self.cols} vs {other.rows}x{other.cols}"
            )

    def plus(self, other: "Matrix") -> "Matrix":
        self._check_same_shape(other, "addition")
        return Matrix._wrap(self._data + other._data)

    def minus(self, other: "Matrix") -> "Matrix":
        self._check_same_shape(other, "subtraction")
        return Matrix._wrap(self._data - other._data)

    def scale(self, scalar: float) -> "Matrix":
        return Matrix._wrap(self._data * scalar)

    def multiply(self, other: "Matrix") -> "Matrix":
        if self.cols != other.rows:
            raise DimensionError(
                f"Cannot multiply {self.rows}x{self.cols} with {other.rows}x{other.cols}"
            )
        return Matrix._wrap(self._data @ other._data)

    def multiply_vector(self, vec: Sequence[float]) -> np.ndarray:
        v = np.asarray(vec, dtype=float)
        if v.shape != (self.cols,):
            raise DimensionError(
                f"Vector length {v.size} must match matrix columns {self.cols}"
            )
        return self._data @ v

    def transpose(self) -> "Matrix":
        return Matrix._wrap(self._data.T.copy())

    # ------------------------------------------------------------------
    # Partitioning
    # ------------------------------------------------------------------

    def sub_matrix(self, row_indices: Sequence[int], col_indices: Sequence[int]) -> "Matrix":
        """Gather arbitrary rows and columns, e.g. K_ff = K.sub_matrix(free, free)."""
        rows = np.asarray(row_indices, dtype=int)
        cols = np.asarray(col_indices, dtype=int)
        return Matrix._wrap(self._data[np.ix_(rows, cols)].copy())

    @staticmethod
    def extract_vector(vec: Sequence[float], indices: Iterable[int]) -> np.ndarray:
        v = np.asarray(vec, dtype=float)
        return v[np.asarray(list(indices), dtype=int)].copy()

    @staticmethod
    def set_vector(vec: np.ndarray, indices: Sequence[int], values: Sequence[float]) -> None:
        """Scatter values into vec at indices (in place)."""
        if len(indices) != len(values):
            raise DimensionError(
                f"Got {len(values)} values for {len(indices)} indices"
            )
        for i, value in zip(indices, values):
            vec[i] = value

    # ------------------------------------------------------------------
    # Solve
    # ------------------------------------------------------------------

    def solve(self, b: Sequence[float], pivot_tolerance: float = None) -> np.ndarray:
        """
        Solve A·x = b by Gaussian elimination with partial pivoting.

        The matrix itself is not modified; elimination runs on a copy.

        Parameters:
        -----------
        b : sequence of float
            Right-hand side, length must equal the number of rows
        pivot_tolerance : float, optional
            Smallest acceptable pivot magnitude (default CONFIG.pivot_tolerance)

        Returns:
        --------
        np.ndarray
            Solution vector x

        Raises:
        -------
        DimensionError
            Matrix is not square or b has the wrong length
        SingularMatrixError
            A pivot magnitude fell below pivot_tolerance
        """
        if self.rows != self.cols:
            raise DimensionError("Matrix must be square for solving")
        x = np.array(b, dtype=float)
        if x.shape != (self.rows,):
            raise DimensionError("Vector b length must match matrix rows")
        if pivot_tolerance is None:
            pivot_tolerance = CONFIG.pivot_tolerance

        n = self.rows
        A = self._data.copy()

        # Forward elimination
        for k in range(n):
            p = k + int(np.argmax(np.abs(A[k:, k])))
            if p != k:
                A[[k, p], :] = A[[p, k], :]
                x[k], x[p] = x[p], x[k]

            akk = A[k, k]
            if abs(akk) < pivot_tolerance:
                raise SingularMatrixError("Matrix is singular or nearly singular")

            if k + 1 < n:
                factors = A[k + 1:, k] / akk
                A[k + 1:, k:] -= np.outer(factors, A[k, k:])
                x[k + 1:] -= factors * x[k]

        # Back substitution
        for i in range(n - 1, -1, -1):
            x[i] = (x[i] - A[i, i + 1:] @ x[i + 1:]) / A[i, i]

        return x
