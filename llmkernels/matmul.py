# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np

from .tensor import Tensor
from .utils import ShapeError, check_rank, check_size

logger = logging.getLogger(__name__)


def matmul_transb(
    c: Tensor, beta: float, a: Tensor, b: Tensor, alpha: float
) -> None:
    """
    C <- beta * C + alpha * A @ B^T, in place.

    B is stored row-major as (n, k); the transpose is never materialised.
    When beta == 0 the previous contents of C are not read, so NaN/Inf
    left in C do not leak into the result (same convention as BLAS gemm).

    Parameters
    ----------
    c : Tensor   (m, n)
    beta : float
    a : Tensor   (m, k)
    b : Tensor   (n, k)
    alpha : float
    """
    for name, t in (("c", c), ("a", a), ("b", b)):
        check_rank("matmul_transb", name, t.shape(), 2)
    m, n = c.shape()
    if a.shape()[0] != m or b.shape()[0] != n or a.shape()[1] != b.shape()[1]:
        raise ShapeError(
            f"matmul_transb: C{c.shape()} != A{a.shape()} @ B{b.shape()}^T"
        )
    k = a.shape()[1]

    A = a.data().reshape(m, k)
    B = b.data().reshape(n, k)
    C = c.data_mut().reshape(m, n)
    AB = A @ B.T
    if beta == 0:
        logger.debug("matmul_transb: beta == 0, overwriting C (%d x %d)", m, n)
        C[:] = np.float32(alpha) * AB
    else:
        C[:] = np.float32(beta) * C + np.float32(alpha) * AB


def dot(x: Tensor, y: Tensor) -> float:
    """Inner product of two tensors viewed as flat vectors."""
    check_size("dot", "y", y.size(), x.size())
    return float(np.dot(x.data(), y.data()))
