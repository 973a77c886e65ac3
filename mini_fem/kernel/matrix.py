# mini_fem/kernel/matrix.py
"""
Index-safe dense containers for the global system.

StiffnessMatrix and ForceVector wrap a numpy array and check every index
against [0, ndof) before touching it, so a wrong DOF map fails loudly
instead of writing into a neighbouring row. Both expose the underlying
data through __array__, which lets numpy functions consume them directly.
"""

import numpy as np
from typing import Sequence

from ..errors import OutOfRangeError


class _DenseSystemPart:
    _data: np.ndarray

    @property
    def size(self) -> int:
        return self._data.shape[0]

    def _check(self, i: int) -> int:
        if not 0 <= i < self.size:
            raise OutOfRangeError(f"Index {i} outside [0, {self.size})")
        return i

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self._data
        return self._data.astype(dtype)

    def to_numpy(self) -> np.ndarray:
        """Independent copy of the data."""
        return self._data.copy()

    def view(self) -> np.ndarray:
        """Read-only view of the data."""
        v = self._data.view()
        v.flags.writeable = False
        return v

    def copy(self):
        other = self.__class__.__new__(self.__class__)
        other._data = self._data.copy()
        return other


class StiffnessMatrix(_DenseSystemPart):
    """Square ndof x ndof matrix, zero-initialised, built by scatter-add."""

    def __init__(self, ndof: int):
        self._data = np.zeros((ndof, ndof), dtype=float)

    @property
    def shape(self):
        return self._data.shape

    def __getitem__(self, ij) -> float:
        i, j = ij
        return float(self._data[self._check(i), self._check(j)])

    def add(self, i: int, j: int, value: float) -> None:
        self._data[self._check(i), self._check(j)] += value

    def scatter_add(self, dof_map: Sequence[int], ke: np.ndarray) -> None:
        """
        K[dof_map[a], dof_map[b]] += ke[a, b] for every local pair.

        Repeated indices in dof_map accumulate, matching the loop form.
        """
        idx = np.asarray([self._check(int(i)) for i in dof_map], dtype=int)
        if ke.shape != (len(idx), len(idx)):
            raise ValueError(
                f"Element ke shape {ke.shape} doesn't match dof_map length {len(idx)}"
            )
        np.add.at(self._data, np.ix_(idx, idx), ke)

    def diagonal(self) -> np.ndarray:
        return self._data.diagonal().copy()

    def is_symmetric(self, rtol: float = 1e-10, atol: float = 0.0) -> bool:
        return bool(np.allclose(self._data, self._data.T, rtol=rtol, atol=atol))


class ForceVector(_DenseSystemPart):
    """Global load vector of length ndof."""

    def __init__(self, ndof: int):
        self._data = np.zeros(ndof, dtype=float)

    @property
    def shape(self):
        return self._data.shape

    def __getitem__(self, i: int) -> float:
        return float(self._data[self._check(i)])

    def __setitem__(self, i: int, value: float) -> None:
        self._data[self._check(i)] = value

    def add(self, i: int, value: float) -> None:
        self._data[self._check(i)] += value

    def scatter_add(self, dof_map: Sequence[int], fe: np.ndarray) -> None:
        idx = np.asarray([self._check(int(i)) for i in dof_map], dtype=int)
        if fe.shape != (len(idx),):
            raise ValueError(
                f"Element fe shape {fe.shape} doesn't match dof_map length {len(idx)}"
            )
        np.add.at(self._data, idx, fe)
