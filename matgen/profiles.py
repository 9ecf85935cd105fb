# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Singular-value profiles for the synthetic matrix families.

Each function is deterministic in its arguments and returns a float64
vector whose first entry is 1. The ratio between the largest and the
smallest entry is the requested condition number.
"""

import math

import numpy as np

from .errors import InvalidSpec
from .utils import BAD_CHOLQR_TAIL_START, FLAT_FRACTION, STAIRCASE_LEVELS


def _check(k: int, cond: float) -> None:
    if k < 1:
        raise InvalidSpec(f"rank must be at least 1, got {k}")
    if not math.isfinite(cond) or cond < 1.0:
        raise InvalidSpec(f"condition number must be finite and >= 1, got {cond}")


def polynomial_profile(k: int, cond: float, flat_fraction: float = FLAT_FRACTION) -> np.ndarray:
    """
    sigma = 1 for the first floor(flat_fraction * k) entries, then
    sigma_i = 1 / i**t for i = 1, 2, ... over the tail.

    The tail starts at 1 and the exponent t = log(cond) / log(tail length)
    puts its last entry exactly at 1/cond.
    """
    _check(k, cond)
    s = np.ones(k)
    offset = int(math.floor(k * flat_fraction))
    tail = k - offset
    if tail < 2:
        return s
    t = math.log2(cond) / math.log2(tail)
    s[offset:] = 1.0 / np.arange(1, tail + 1, dtype=float) ** t
    return s


def exponential_profile(k: int, cond: float, flat_fraction: float = FLAT_FRACTION) -> np.ndarray:
    """
    sigma = 1 on the leading flat segment, then sigma_i = exp(-t * i) for
    i = 1, 2, ... with t = -ln(1/cond) / (tail length), so the last entry
    is 1/cond.

    Unlike the polynomial tail this one starts below 1, so the flat segment
    always keeps at least the first entry.
    """
    _check(k, cond)
    s = np.ones(k)
    offset = max(int(math.floor(k * flat_fraction)), 1)
    tail = k - offset
    if tail < 1:
        return s
    t = -math.log(1.0 / cond) / tail
    s[offset:] = np.exp(-t * np.arange(1, tail + 1, dtype=float))
    return s


def staircase_profile(k: int, cond: float, levels=STAIRCASE_LEVELS) -> np.ndarray:
    """
    Four equal-length steps at 1, 8/cond, 4/cond and 1/cond; the last step
    absorbs the remainder when k is not a multiple of four.
    """
    _check(k, cond)
    first, *rest = levels
    heights = [first] + [lv / cond for lv in rest]
    step = max(k // len(heights), 1)
    s = np.empty(k)
    for i, h in enumerate(heights):
        start = min(i * step, k)
        stop = k if i == len(heights) - 1 else min((i + 1) * step, k)
        s[start:stop] = h
    return s


def bad_cholqr_profile(
    n: int, k: int, cond: float, tail_start: float = BAD_CHOLQR_TAIL_START
) -> np.ndarray:
    """
    Full-rank profile of length n that defeats Cholesky QR on rank-k sketches.

    The first k entries are 1. The tail jumps down to `tail_start` and then
    decays as exp(t) * tail_start * exp(-t * i), i = 1, 2, ..., with
    t = ln(1 / (tail_start * cond)) / (1 - (n - k)), landing on 1/cond.
    """
    _check(n, cond)
    if k < 1 or k > n:
        raise InvalidSpec(f"bad-CholQR needs 1 <= k <= n, got k={k}, n={n}")
    s = np.ones(n)
    tail = n - k
    if tail == 0:
        return s
    if tail == 1:
        # single tail entry: every finite t gives tail_start
        t = 0.0
    else:
        t = math.log(1.0 / (tail_start * cond)) / (1 - tail)
    i = np.arange(1, tail + 1, dtype=float)
    s[k:] = math.exp(t) * tail_start * np.exp(-t * i)
    return s
