# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from typing import Sequence

import numpy as np

from .errors import InvalidArgument

EPS: float = float(np.finfo(np.float64).eps)

# Profile shapes
FLAT_FRACTION: float = 0.1
STAIRCASE_LEVELS = (1.0, 8.0, 4.0, 1.0)
BAD_CHOLQR_TAIL_START: float = 1e-8

# Adversarial construction (reproduces a known rank-revealing counterexample)
ADVERSARIAL_SCALED_ROWS: int = 10
ADVERSARIAL_DIAGONAL_START: int = 11
ADVERSARIAL_DIAGONAL_SCALE: float = 10e-3

# Diagnostics
RANK_TOL_FACTOR: float = 5.0
ORTHOGONALITY_TOL: float = 1e-10


def check_size(name: str, value: int) -> int:
    """Reject negative or non-integral sizes."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidArgument(f"{name} must be non-negative, got {value}")
    return int(value)


def check_permutation(perm: Sequence[int], n: int) -> list[int]:
    """
    Validate a 1-based permutation of length k <= n whose entries are
    distinct and lie in [1, n]. Returns a plain list copy.
    """
    perm = [int(p) for p in perm]
    if len(perm) > n:
        raise InvalidArgument(
            f"permutation has {len(perm)} entries but the buffer has {n} columns"
        )
    seen = [False] * n
    for p in perm:
        if p < 1 or p > n:
            raise InvalidArgument(f"permutation entry {p} outside [1, {n}]")
        if seen[p - 1]:
            raise InvalidArgument(f"permutation entry {p} repeated")
        seen[p - 1] = True
    return perm


def invert_permutation(perm: Sequence[int]) -> list[int]:
    """Inverse of a full 1-based permutation: inv[perm[i] - 1] = i + 1."""
    perm = check_permutation(perm, len(perm))
    inv = [0] * len(perm)
    for i, p in enumerate(perm):
        inv[p - 1] = i + 1
    return inv
