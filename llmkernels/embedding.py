# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np

from .tensor import Tensor
from .utils import check_rank, check_size


def gather(y: Tensor, indices: Tensor, table: Tensor) -> None:
    """
    Embedding lookup: copy row `table[indices[i]]` into row i of `y`.

    Parameters
    ----------
    y : Tensor          (len(indices) * dim,) elements, any shape
        Output, fully overwritten.
    indices : Tensor    integer token ids
    table : Tensor      (rows, dim)

    Raises
    ------
    ShapeError
        `table` is not rank 2 or `y` has the wrong element count.
    IndexError
        An index falls outside [0, rows).
    """
    check_rank("gather", "table", table.shape(), 2)
    rows, dim = table.shape()
    length = indices.size()
    check_size("gather", "y", y.size(), length * dim)

    idx = indices.data().astype(np.int64)
    if length and (idx.min() < 0 or idx.max() >= rows):
        bad = int(idx[(idx < 0) | (idx >= rows)][0])
        raise IndexError(f"gather: index {bad} out of range for {rows} rows")

    out = y.data_mut().reshape(length, dim)
    out[:] = table.data().reshape(rows, dim)[idx]
