# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
llmkernels
==========

Reference CPU kernels for a LLaMA-style transformer forward pass, written
against a small dense `Tensor` (flat NumPy buffer + shape).

Public API
~~~~~~~~~~
- Container
    - `Tensor`
- Structured kernels
    - `gather`, `rope`, `matmul_transb`
- Element-wise / reductions
    - `rms_norm`, `swiglu`, `silu`, `dot`
- Attention
    - `masked_softmax`
- Decoding
    - `random_sample`, `argmax`, `SamplingParams`
- Errors
    - `ShapeError`

Kernels write into caller-owned tensors and allocate no tensors of their
own. Shape contract violations raise `ShapeError` before anything is
written.

Example
-------
>>> from llmkernels import Tensor, matmul_transb
>>> c = Tensor([1, 2, 3, 4], [2, 2])
>>> a = Tensor([1, 2, 3, 4, 5, 6], [2, 3])
>>> matmul_transb(c, 1.0, a, a, 1.0)
>>> c.close_to(Tensor([15, 34, 35, 81], [2, 2]), 1e-3)
True
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from .activations import silu, swiglu
from .attention import causal_boundary, masked_softmax
from .embedding import gather
from .matmul import dot, matmul_transb
from .normalization import rms_norm
from .positional import rope
from .sampling import SamplingParams, argmax, random_sample
from .tensor import Tensor
from .utils import DEFAULT_RMS_EPS, DEFAULT_ROPE_THETA, ShapeError

__all__ = [
    "Tensor",
    "gather",
    "rope",
    "masked_softmax",
    "causal_boundary",
    "rms_norm",
    "silu",
    "swiglu",
    "matmul_transb",
    "dot",
    "random_sample",
    "argmax",
    "SamplingParams",
    "ShapeError",
    "DEFAULT_ROPE_THETA",
    "DEFAULT_RMS_EPS",
]

# ---------------------------------------------------------------------
# Version string (helps "pip show llmkernels", Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version(__name__)
except PackageNotFoundError:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Library logging stays silent unless the application configures it.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
