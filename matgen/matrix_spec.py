# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Request and result records for matrix generation.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import numpy as np

from .backend import as_matrix
from .errors import InvalidSpec, UnsupportedFamily
from .rng import RNGState


class MatrixFamily(str, Enum):
    POLYNOMIAL = "polynomial"
    EXPONENTIAL = "exponential"
    GAUSSIAN = "gaussian"
    STAIRCASE = "staircase"
    SPIKED = "spiked"
    ADVERSARIAL = "adversarial"
    BAD_CHOLQR = "bad_cholqr"

    @classmethod
    def parse(cls, tag: Union[str, "MatrixFamily"]) -> "MatrixFamily":
        try:
            return cls(tag)
        except ValueError:
            raise UnsupportedFamily(f"unknown matrix family {tag!r}") from None


# Families whose spectrum comes from a profile (and so have a diagonal-only path)
PROFILE_FAMILIES = frozenset(
    {
        MatrixFamily.POLYNOMIAL,
        MatrixFamily.EXPONENTIAL,
        MatrixFamily.STAIRCASE,
        MatrixFamily.BAD_CHOLQR,
    }
)


@dataclass
class MatrixSpec:
    """
    Declarative description of a test matrix.

    Attributes
    ----------
    rows, cols : int
        Requested shape m x n.
    family : MatrixFamily or str
        Which construction to use.
    rank : int or None
        Target rank k (defaults to cols). For bad_cholqr this is the sketch
        dimension: the number of leading unit singular values.
    cond_num : float
        Target condition number for the profile families.
    scaling : float
        Spike magnitude (spiked) or first-rows scale sigma (adversarial).
    diagonal : bool
        Build diag(profile) directly instead of embedding it. The result is
        r x r (r = profile length), so only rank <= cols is required.
    check_true_rank : bool
        Replace the nominal rank in the result by the measured numerical rank.
    """

    rows: int
    cols: int
    family: Union[MatrixFamily, str]
    rank: Optional[int] = None
    cond_num: float = 1.0
    scaling: float = 1.0
    diagonal: bool = False
    check_true_rank: bool = False

    def __post_init__(self):
        if self.rank is None:
            self.rank = self.cols

    def validate(self) -> MatrixFamily:
        """Check the shape constraints and return the parsed family."""
        family = MatrixFamily.parse(self.family)
        m, n, k = self.rows, self.cols, self.rank
        for name, v in (("rows", m), ("cols", n), ("rank", k)):
            if isinstance(v, bool) or not isinstance(v, (int, np.integer)):
                raise InvalidSpec(f"{name} must be an integer, got {v!r}")
        if m < 1 or n < 1:
            raise InvalidSpec(f"shape must be positive, got {m}x{n}")
        if k < 1 or k > n:
            raise InvalidSpec(f"rank {k} must lie in [1, cols={n}]")
        if family in PROFILE_FAMILIES:
            if not math.isfinite(self.cond_num) or self.cond_num < 1.0:
                raise InvalidSpec(f"cond_num must be finite and >= 1, got {self.cond_num}")
        if family is MatrixFamily.BAD_CHOLQR:
            if m < n and not self.diagonal:
                raise InvalidSpec(f"bad_cholqr is full rank and needs rows >= cols, got {m}x{n}")
        elif family in PROFILE_FAMILIES and not self.diagonal:
            if k > min(m, n):
                raise InvalidSpec(f"rank {k} exceeds min({m}, {n})")
        if family is MatrixFamily.SPIKED and m < n:
            raise InvalidSpec(f"spiked matrices stack n x n blocks and need rows >= cols, got {m}x{n}")
        if family is MatrixFamily.ADVERSARIAL and m < n:
            raise InvalidSpec(f"adversarial matrices need rows >= cols, got {m}x{n}")
        if self.diagonal and family not in PROFILE_FAMILIES:
            raise InvalidSpec(f"diagonal-only generation is not available for {family.value}")
        return family


@dataclass
class GeneratedMatrix:
    """
    Result of `generate`.

    `buffer` is caller-owned; the matrix occupies its leading rows*cols
    slots in column-major order. `rank` is the nominal rank, or the
    measured one when the request asked for it.
    """

    buffer: np.ndarray
    rows: int
    cols: int
    rank: int
    state: RNGState

    @property
    def matrix(self) -> np.ndarray:
        return as_matrix(self.buffer, self.rows, self.cols)
