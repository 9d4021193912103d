# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Causal softmax over attention scores.

The scores tensor has shape (..., T_q, T_kv). The last T_q keys are the
new tokens and the first T_kv - T_q come from the KV cache, so query i
may look at keys [0, T_kv - T_q + i].
"""

import numpy as np

from .tensor import Tensor
from .utils import ShapeError


def causal_boundary(seq_len: int, total_seq_len: int) -> np.ndarray:
    """Number of visible keys for each query row, shape (seq_len,)."""
    return total_seq_len - seq_len + np.arange(seq_len) + 1


def masked_softmax(y: Tensor) -> None:
    """
    Softmax along the last axis with a causal mask, in place.

    Visible entries of each row are exp(x - max) / sum(exp(x - max));
    masked entries become exactly 0.0.

    Args:
        y: Scores of rank >= 2, shape (..., T_q, T_kv) with T_kv >= T_q.
    """
    shape = y.shape()
    if len(shape) < 2:
        raise ShapeError(f"masked_softmax: y must be rank >= 2, got shape {shape}")
    seq_len, total_seq_len = shape[-2], shape[-1]
    if total_seq_len < seq_len:
        raise ShapeError(
            f"masked_softmax: {total_seq_len} keys cannot cover {seq_len} queries"
        )
    batch = y.size() // (seq_len * total_seq_len)

    S = y.data_mut().reshape(batch, seq_len, total_seq_len)
    visible = (
        np.arange(total_seq_len)[None, :]
        < causal_boundary(seq_len, total_seq_len)[:, None]
    )  # (T_q, T_kv)

    Z = np.where(visible, S, -np.inf)
    Z = Z - Z.max(axis=-1, keepdims=True)
    E = np.where(visible, np.exp(Z), 0.0)
    P = E / E.sum(axis=-1, keepdims=True)
    S[:] = np.where(visible, P, 0.0)
