# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np
import pytest

from llmkernels.sampling import SamplingParams, argmax, random_sample
from llmkernels.tensor import Tensor
from llmkernels.utils import ShapeError

logger = logging.getLogger(__name__)


class FixedDraws:
    """Stand-in generator returning a fixed sequence of uniform draws."""

    def __init__(self, *draws):
        self._draws = list(draws)

    def random(self):
        return self._draws.pop(0)


# Sorted order is 1, 3 (tie broken by lower index first), 2, 0.
# Running sums of exp(v - max): 1, 2, 2 + e^-1, 2 + e^-1 + e^-2
LOGITS = Tensor([1.0, 3.0, 2.0, 3.0], [4])


@pytest.mark.parametrize(
    "temperature,top_k,top_p",
    [(0.0, 10, 0.9), (-1.0, 10, 0.9), (1.0, 1, 0.9), (1.0, 0, 0.9), (1.0, 10, 0.0)],
)
def test_degenerate_parameters_are_greedy(temperature, top_k, top_p):
    x = Tensor([0.5, 2.0, -1.0, 2.0, 1.9], [5])
    rng = FixedDraws()  # greedy path must not draw
    assert random_sample(x, top_p, top_k, temperature, rng=rng) == 1


def test_argmax_first_occurrence():
    assert argmax(Tensor([1.0, 5.0, 5.0, 2.0], [4])) == 1
    assert argmax(Tensor([-3.0], [1])) == 0


@pytest.mark.parametrize(
    "draw,expected", [(0.0, 1), (0.3, 1), (0.5, 3), (0.9, 2), (0.99, 0)]
)
def test_fixed_draws_full_distribution(draw, expected):
    assert random_sample(LOGITS, 1.0, 4, 1.0, rng=FixedDraws(draw)) == expected


@pytest.mark.parametrize("draw,expected", [(0.0, 1), (0.49, 1), (0.51, 3), (0.99, 3)])
def test_top_k_truncates(draw, expected):
    # pk = 2.0 caps the threshold inside the two tied leaders
    assert random_sample(LOGITS, 1.0, 2, 1.0, rng=FixedDraws(draw)) == expected


@pytest.mark.parametrize("draw,expected", [(0.3, 1), (0.99, 3)])
def test_top_p_truncates(draw, expected):
    # pp = 0.5 * 2.503 ~ 1.25, so only tokens 1 and 3 are reachable
    assert random_sample(LOGITS, 0.5, 4, 1.0, rng=FixedDraws(draw)) == expected


def test_top_k_larger_than_vocab():
    assert random_sample(LOGITS, 1.0, 1000, 1.0, rng=FixedDraws(0.99)) == 0


def test_temperature_sharpens():
    # with T = 0.1 the runner-up weights vanish: 1, 2, 2 + e^-10, ...
    assert random_sample(LOGITS, 1.0, 4, 0.1, rng=FixedDraws(0.99)) == 3


def _allowed_tokens(logits, top_p, top_k, temperature):
    order = np.argsort(-logits, kind="stable")
    v = logits[order].astype(np.float64)
    cum = np.cumsum(np.exp((v - v[0]) / temperature))
    limit = min(cum[min(top_k, len(cum)) - 1], cum[-1] * top_p)
    reachable = np.concatenate([[True], cum[:-1] < limit])
    return set(order[reachable].tolist())


@pytest.mark.parametrize(
    "top_p,top_k,temperature", [(0.8, 5, 0.7), (0.3, 20, 1.0), (1.0, 3, 2.0)]
)
def test_draws_stay_inside_truncated_set(top_p, top_k, temperature):
    rng = np.random.default_rng(seed=top_k)
    logits = rng.standard_normal(20).astype(np.float32) * 2
    x = Tensor(logits, [1, 20])
    allowed = _allowed_tokens(logits, top_p, top_k, temperature)
    logger.debug(f"allowed tokens: {sorted(allowed)}")

    counts = np.zeros(20, dtype=int)
    for _ in range(2000):
        counts[random_sample(x, top_p, top_k, temperature, rng=rng)] += 1

    assert set(np.flatnonzero(counts).tolist()) <= allowed
    assert counts[int(np.argmax(logits))] > 0


def test_seeded_generator_is_reproducible():
    logits = Tensor(np.linspace(-1, 1, 50), [50])
    a = [random_sample(logits, 0.95, 40, 1.0, rng=np.random.default_rng(42)) for _ in range(5)]
    b = [random_sample(logits, 0.95, 40, 1.0, rng=np.random.default_rng(42)) for _ in range(5)]
    assert a == b


def test_default_generator():
    idx = random_sample(LOGITS, 0.9, 4, 1.0)
    assert idx in {0, 1, 2, 3}


def test_logits_must_be_one_row():
    with pytest.raises(ShapeError):
        random_sample(Tensor.default([2, 3]), 0.9, 4, 1.0)


def test_nan_logits_rejected():
    with pytest.raises(ValueError, match="NaN"):
        random_sample(Tensor([0.0, np.nan], [2]), 0.9, 4, 1.0)


def test_sampling_params_defaults_and_forwarding():
    params = SamplingParams()
    assert (params.top_p, params.top_k, params.temperature) == (0.9, 50, 1.0)
    assert not params.is_greedy
    assert params.sample(LOGITS, rng=FixedDraws(0.0)) == 1
    assert SamplingParams(temperature=0.0).is_greedy
    assert SamplingParams(top_k=1).sample(LOGITS) == 1


@pytest.mark.parametrize(
    "kwargs", [{"top_p": 1.5}, {"top_k": -1}, {"temperature": -0.1}]
)
def test_sampling_params_validation(kwargs):
    with pytest.raises(ValueError):
        SamplingParams(**kwargs)
