# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Root Mean Square normalization.

Simpler than LayerNorm, no mean centering:
    rms = sqrt(mean(x^2) + eps)
    y = (x / rms) * w

Used in LLaMA, Gemma, and other modern architectures.
"""

import numpy as np

from .tensor import Tensor
from .utils import DEFAULT_RMS_EPS, check_size


def rms_norm(
    y: Tensor, x: Tensor, w: Tensor, epsilon: float = DEFAULT_RMS_EPS
) -> None:
    """
    Normalize every row (last axis) of `x` and scale it by `w`.

    Args:
        y: Output, same number of elements as x. May be x itself.
        x: Input of shape (..., D).
        w: Learned scale with D elements.
        epsilon: Added to the mean square; keeps all-zero rows finite.
    """
    check_size("rms_norm", "y", y.size(), x.size())
    D = x.shape()[-1]
    check_size("rms_norm", "w", w.size(), D)

    X = x.data().reshape(-1, D)
    rms = np.sqrt((X * X).mean(axis=-1, keepdims=True) + np.float32(epsilon))
    y.data_mut().reshape(-1, D)[:] = w.data() * X / rms
