# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
matgen
======

Synthetic test matrices with engineered singular-value profiles, plus the
numerical checks used to verify them (or any other dense matrix).

Public API
~~~~~~~~~~
- Generation
    - `MatrixSpec`, `MatrixFamily`, `generate`, `GeneratedMatrix`
    - `RNGState` (explicit, counter-based random state)
- Singular-value profiles
    - `polynomial_profile`, `exponential_profile`, `staircase_profile`,
      `bad_cholqr_profile`
- Orthogonal factors
    - `random_orthonormal`, `embed_profile`
- Diagnostics
    - `cond_num_check`, `rank_check`, `rank_search_binary`, `rank_search`,
      `orthogonality_check`, `orthogonality_residual`,
      `estimate_spectral_norm`
- Buffer utilities
    - `ensure_capacity`, `reshape_rows`, `permute_columns`,
      `normalize_columns`, ... (see `matgen.buffers`)

Everything else lives in sub-modules and is **not** considered part of the
stable interface.

Example
-------
>>> import matgen as mg
>>> spec = mg.MatrixSpec(50, 20, "polynomial", rank=20, cond_num=100.0)
>>> out = mg.generate(spec, None, mg.RNGState(key=42))
>>> round(mg.cond_num_check(out.matrix))
100
"""

from importlib.metadata import version as _pkg_version

from .buffers import (
    compact_stride,
    ensure_capacity,
    extract_diagonal,
    eye,
    log_diagonal,
    lower_triangle_to_identity_diagonal,
    normalize_columns,
    permute_columns,
    reshape_rows,
    transpose_in_place_square,
    upper_triangle_extract,
    write_diagonal,
    zero_below_diagonal,
)
from .diagnostics import (
    StorageFormat,
    cond_num_check,
    estimate_spectral_norm,
    orthogonality_check,
    orthogonality_residual,
    rank_check,
    rank_search,
    rank_search_binary,
    trailing_norm_oracle,
)

# ---------------------------------------------------------------------
# Re-export the high-level functions users are expected to call.
# Each of these names is implemented in one of the internal sub-modules.
# ---------------------------------------------------------------------
from .dispatch import generate
from .errors import InvalidArgument, InvalidSpec, MatgenError, UnsupportedFamily
from .matrix_spec import GeneratedMatrix, MatrixFamily, MatrixSpec
from .profiles import (
    bad_cholqr_profile,
    exponential_profile,
    polynomial_profile,
    staircase_profile,
)
from .rng import RNGState
from .synth import embed_profile, random_orthonormal

__all__ = [
    "MatrixSpec",
    "MatrixFamily",
    "GeneratedMatrix",
    "generate",
    "RNGState",
    "polynomial_profile",
    "exponential_profile",
    "staircase_profile",
    "bad_cholqr_profile",
    "random_orthonormal",
    "embed_profile",
    "StorageFormat",
    "cond_num_check",
    "rank_check",
    "rank_search_binary",
    "rank_search",
    "trailing_norm_oracle",
    "orthogonality_check",
    "orthogonality_residual",
    "estimate_spectral_norm",
    "ensure_capacity",
    "reshape_rows",
    "extract_diagonal",
    "write_diagonal",
    "eye",
    "log_diagonal",
    "lower_triangle_to_identity_diagonal",
    "upper_triangle_extract",
    "zero_below_diagonal",
    "permute_columns",
    "normalize_columns",
    "transpose_in_place_square",
    "compact_stride",
    "MatgenError",
    "InvalidSpec",
    "UnsupportedFamily",
    "InvalidArgument",
]

# ---------------------------------------------------------------------
# Version string (helps “pip show matgen”, Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version(__name__)
except Exception:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Optional: lightweight default logging config so users see warnings
# only if they deliberately enable them.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
