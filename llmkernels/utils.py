# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from typing import Sequence

DEFAULT_ROPE_THETA: float = 10000.0
DEFAULT_RMS_EPS: float = 1e-6


class ShapeError(ValueError):
    """Raised when a tensor's rank, size or shape breaks a kernel's contract."""


def numel(shape: Sequence[int]) -> int:
    """Return the number of elements described by `shape`."""
    n = 1
    for d in shape:
        n *= int(d)
    return n


def check_rank(op: str, name: str, shape: Sequence[int], rank: int) -> None:
    if len(shape) != rank:
        raise ShapeError(
            f"{op}: {name} must be rank {rank}, got shape {tuple(shape)}"
        )


def check_size(op: str, name: str, actual: int, expected: int) -> None:
    if actual != expected:
        raise ShapeError(f"{op}: {name} has {actual} elements, expected {expected}")
