# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Rotary Position Embeddings (RoPE), Su et al., 2021.

Instead of adding position information, RoPE rotates each head vector by a
position-dependent angle. Dimension i is paired with dimension i + d/2
(the "rotate half" layout used by LLaMA checkpoints):

    freq   = pos / theta^(2i/d)
    x[i]   <- x[i] * cos(freq) - x[i+d/2] * sin(freq)
    x[i+d/2] <- x[i+d/2] * cos(freq) + x[i] * sin(freq)
"""

import numpy as np

from .tensor import Tensor
from .utils import DEFAULT_ROPE_THETA, ShapeError, check_rank


def rope(y: Tensor, start_pos: int, theta: float = DEFAULT_ROPE_THETA) -> None:
    """
    Rotate `y` in place.

    Args:
        y: Tensor of shape (seq_len, n_heads, head_dim); head_dim must be even.
        start_pos: Absolute position of the first token (KV-cache offset).
        theta: Frequency base.
    """
    check_rank("rope", "y", y.shape(), 3)
    seq_len, n_heads, d = y.shape()
    if d % 2:
        raise ShapeError(f"rope: head_dim must be even, got {d}")
    half = d // 2

    pos = np.arange(start_pos, start_pos + seq_len, dtype=np.float32)[:, None]
    exponent = (2 * np.arange(half, dtype=np.float32)) / np.float32(d)
    freq = pos / np.power(np.float32(theta), exponent)  # (T, d/2)
    cos = np.cos(freq)[:, None, :]  # broadcast over heads
    sin = np.sin(freq)[:, None, :]

    x = y.data_mut().reshape(seq_len, n_heads, d)
    a = x[..., :half].copy()
    b = x[..., half:].copy()
    x[..., :half] = a * cos - b * sin
    x[..., half:] = b * cos + a * sin
