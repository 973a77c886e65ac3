# mini_fem/continuum/quadrature.py
"""Tensor-product Gauss-Legendre rules on the reference cube [-1, 1]^dim."""

import itertools
from typing import List, Tuple

import numpy as np

GAUSS_2 = (-1.0 / np.sqrt(3.0), 1.0 / np.sqrt(3.0))


def gauss_points(dim: int, order: int = 2) -> List[Tuple[np.ndarray, float]]:
    """
    Integration points and weights for an order x ... x order rule.

    The 2-point rule (+-1/sqrt(3), weight 1) is exact for cubics in each
    direction, which covers the bilinear quad and trilinear hex on
    parallelogram / parallelepiped shapes.

    >>> len(gauss_points(3))
    8
    """
    if order == 2:
        pts, wts = np.array(GAUSS_2), np.ones(2)
    else:
        pts, wts = np.polynomial.legendre.leggauss(order)
    rule = []
    for idx in itertools.product(range(order), repeat=dim):
        rule.append((pts[list(idx)], float(np.prod(wts[list(idx)]))))
    return rule
