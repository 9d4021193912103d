# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Next-token sampling with temperature, top-k and top-p (nucleus) truncation.

The sampler never normalises the distribution. It sorts the logits, builds
a running sum of exp((v - max) / T) in descending order, and draws a
threshold below min(mass of top-k, top_p * total mass). The first token
whose running sum reaches the threshold is returned, so the result always
lies in both the top-k set and the nucleus.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .tensor import Tensor
from .utils import ShapeError

logger = logging.getLogger(__name__)

_default_rng = np.random.default_rng()


def argmax(x: Tensor) -> int:
    """Index of the largest logit; the first one wins on ties."""
    return int(np.argmax(x.data()))


def random_sample(
    x: Tensor,
    top_p: float,
    top_k: int,
    temperature: float,
    rng: Optional[np.random.Generator] = None,
) -> int:
    """
    Draw a token id from the logits `x`.

    Parameters
    ----------
    x : Tensor
        Logits; every axis but the last must have size 1.
    top_p : float
        Nucleus mass in (0, 1].
    top_k : int
        Number of most likely tokens kept.
    temperature : float
        Softmax temperature.
    rng : object with a ``random()`` method, optional
        Source of uniform [0, 1) draws. Defaults to a module-level
        ``numpy.random.Generator``; pass a seeded one for reproducibility.

    Returns
    -------
    int
        Original index of the chosen logit. Greedy argmax when
        ``temperature <= 0``, ``top_k < 2`` or ``top_p <= 0``.
    """
    shape = x.shape()
    if not shape or shape[-1] != x.size():
        raise ShapeError(f"random_sample: logits must be a single row, got {shape}")
    logits = x.data()
    if np.isnan(logits).any():
        raise ValueError("random_sample: logits contain NaN")

    if temperature <= 0 or top_k < 2 or top_p <= 0:
        logger.debug(
            "greedy sampling (temperature=%s, top_k=%s, top_p=%s)",
            temperature,
            top_k,
            top_p,
        )
        return argmax(x)

    # descending by value, ascending by index among equal values
    order = np.argsort(-logits, kind="stable")
    vals = logits[order].astype(np.float32)

    weights = np.exp((vals - vals[0]) / np.float32(temperature))
    weights[0] = 1.0
    cum = np.cumsum(weights, dtype=np.float32)

    n = cum.size
    pk = cum[min(int(top_k), n) - 1]
    pp = cum[-1] * np.float32(top_p)
    if rng is None:
        rng = _default_rng
    plimit = np.float32(rng.random()) * min(pk, pp)
    logger.debug("pk=%.6g pp=%.6g plimit=%.6g", pk, pp, plimit)

    # cum is non-decreasing: first position with cum >= plimit
    pos = int(np.searchsorted(cum, plimit, side="left"))
    return int(order[pos])


@dataclass(frozen=True)
class SamplingParams:
    """
    Decoding settings for `random_sample`.

    Attributes:
        top_p: Nucleus mass, at most 1.
        top_k: Candidate count; values below 2 mean greedy decoding.
        temperature: Softmax temperature; 0 means greedy decoding.
    """

    top_p: float = 0.9
    top_k: int = 50
    temperature: float = 1.0

    def __post_init__(self) -> None:
        if self.top_p > 1.0:
            raise ValueError(f"top_p must be <= 1, got {self.top_p}")
        if self.top_k < 0:
            raise ValueError(f"top_k must be >= 0, got {self.top_k}")
        if self.temperature < 0:
            raise ValueError(f"temperature must be >= 0, got {self.temperature}")

    @property
    def is_greedy(self) -> bool:
        return self.temperature <= 0 or self.top_k < 2 or self.top_p <= 0

    def sample(self, x: Tensor, rng: Optional[np.random.Generator] = None) -> int:
        return random_sample(x, self.top_p, self.top_k, self.temperature, rng=rng)
