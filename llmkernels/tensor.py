# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Dense row-major tensor used by every kernel.

A `Tensor` is a flat, contiguous NumPy buffer plus an ordered shape.
The last axis varies fastest. Kernels only touch tensors through
`shape()`, `size()`, `data()` (read-only flat view) and `data_mut()`
(writable flat view), so the buffer can be shared between tensors
created with `slice`.
"""

from typing import Sequence, Tuple

import numpy as np

from .utils import ShapeError, numel


class Tensor:
    """
    Contiguous numeric buffer with a shape.

    Attributes:
        dtype: NumPy dtype of the buffer (float32 for activations,
               uint32 for token ids).
    """

    def __init__(self, data, shape: Sequence[int], dtype=np.float32) -> None:
        """
        Args:
            data: Anything `np.array` accepts; it is copied and flattened.
            shape: Dimension sizes, row-major.
            dtype: Element type of the new buffer.
        """
        buf = np.array(data, dtype=dtype).reshape(-1)
        shape = tuple(int(d) for d in shape)
        if buf.size != numel(shape):
            raise ShapeError(
                f"Tensor: {buf.size} values do not fill shape {shape} "
                f"({numel(shape)} elements)"
            )
        self._buf = buf
        self._shape = shape

    @classmethod
    def default(cls, shape: Sequence[int], dtype=np.float32) -> "Tensor":
        """Zero-filled tensor of the given shape."""
        return cls(np.zeros(numel(shape), dtype=dtype), shape, dtype=dtype)

    @classmethod
    def _view(cls, buf: np.ndarray, shape: Tuple[int, ...]) -> "Tensor":
        t = cls.__new__(cls)
        t._buf = buf
        t._shape = shape
        return t

    @property
    def dtype(self):
        return self._buf.dtype

    def shape(self) -> Tuple[int, ...]:
        return self._shape

    def size(self) -> int:
        return self._buf.size

    def data(self) -> np.ndarray:
        """Read-only flat view of the buffer."""
        view = self._buf.view()
        view.flags.writeable = False
        return view

    def data_mut(self) -> np.ndarray:
        """Writable flat view of the buffer; writes land in this tensor."""
        return self._buf

    def reshape(self, new_shape: Sequence[int]) -> "Tensor":
        """
        Change the shape in place, keeping the element count.

        Returns:
            self, so calls can be chained.
        """
        new_shape = tuple(int(d) for d in new_shape)
        if numel(new_shape) != self.size():
            raise ShapeError(
                f"reshape: cannot view {self._shape} as {new_shape}"
            )
        self._shape = new_shape
        return self

    def slice(self, start: int, shape: Sequence[int]) -> "Tensor":
        """
        Tensor sharing this buffer, covering `prod(shape)` elements
        starting at flat offset `start`.
        """
        shape = tuple(int(d) for d in shape)
        end = start + numel(shape)
        if start < 0 or end > self.size():
            raise ShapeError(
                f"slice: [{start}, {end}) is outside a buffer of {self.size()}"
            )
        return Tensor._view(self._buf[start:end], shape)

    def close_to(self, other: "Tensor", tol: float) -> bool:
        """True when shapes match and every element differs by at most `tol`."""
        if self._shape != other.shape():
            return False
        diff = np.abs(self._buf.astype(np.float64) - other.data().astype(np.float64))
        return bool(np.all(diff <= tol))

    def numpy(self) -> np.ndarray:
        """Copy of the buffer shaped like the tensor."""
        return self._buf.reshape(self._shape).copy()

    def __repr__(self) -> str:
        return (
            f"Tensor(shape={self._shape}, dtype={self.dtype}, "
            f"data={np.array2string(self._buf, threshold=16)})"
        )
