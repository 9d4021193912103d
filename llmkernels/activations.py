# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Gated activations for the feed-forward block.

- SiLU: x * sigmoid(x)
- SwiGLU: gate * SiLU(up), applied in place on the gate tensor
"""

import numpy as np

from .tensor import Tensor
from .utils import check_size


def silu(x: np.ndarray) -> np.ndarray:
    """
    Sigmoid Linear Unit: x / (1 + exp(-x)).

    Args:
        x: Input array of any shape.

    Returns:
        SiLU applied element-wise.
    """
    # exp(-x) overflows to inf for very negative x, giving the right limit (-0.0)
    with np.errstate(over="ignore"):
        return x / (1.0 + np.exp(-x))


def swiglu(y: Tensor, x: Tensor) -> None:
    """
    y <- y * silu(x), element-wise and in place.

    Args:
        y: Gate values, overwritten with the result.
        x: Pre-activation values, same number of elements as y.
    """
    check_size("swiglu", "x", x.size(), y.size())
    Y = y.data_mut()
    Y *= silu(x.data())
