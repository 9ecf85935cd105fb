# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from typing import Callable, Dict, Optional

import numpy as np

from .builders import (
    gen_adversarial_mat,
    gen_bad_cholqr_mat,
    gen_exp_mat,
    gen_gaussian_mat,
    gen_poly_mat,
    gen_spiked_mat,
    gen_step_mat,
)
from .diagnostics import rank_check
from .matrix_spec import GeneratedMatrix, MatrixFamily, MatrixSpec
from .rng import RNGState

logger = logging.getLogger(__name__)

Builder = Callable[[MatrixSpec, Optional[np.ndarray], RNGState], GeneratedMatrix]

BUILDERS: Dict[MatrixFamily, Builder] = {
    MatrixFamily.POLYNOMIAL: gen_poly_mat,
    MatrixFamily.EXPONENTIAL: gen_exp_mat,
    MatrixFamily.GAUSSIAN: gen_gaussian_mat,
    MatrixFamily.STAIRCASE: gen_step_mat,
    MatrixFamily.SPIKED: gen_spiked_mat,
    MatrixFamily.ADVERSARIAL: gen_adversarial_mat,
    MatrixFamily.BAD_CHOLQR: gen_bad_cholqr_mat,
}


def generate(
    spec: MatrixSpec, buffer: Optional[np.ndarray], state: RNGState
) -> GeneratedMatrix:
    """
    Build the matrix described by `spec`.

    Parameters
    ----------
    spec : MatrixSpec
        Validated before anything is computed; InvalidSpec and
        UnsupportedFamily are raised without touching `buffer`.
    buffer : 1-D ndarray or None
        Destination. It is grown (never shrunk) to fit; the returned
        GeneratedMatrix holds the buffer actually used.
    state : RNGState
        Where to start sampling. The advanced state comes back in the result.

    Returns
    -------
    GeneratedMatrix
        Diagonal-only requests come back as r x r, r = profile length.
    """
    family = spec.validate()
    logger.debug(
        f"generate: {family.value} {spec.rows}x{spec.cols} rank={spec.rank} "
        f"cond={spec.cond_num:g} scaling={spec.scaling:g} diagonal={spec.diagonal}"
    )
    result = BUILDERS[family](spec, buffer, state)

    if spec.check_true_rank:
        measured = rank_check(result.buffer, result.rows, result.cols)
        if measured != result.rank:
            logger.debug(f"generate: nominal rank {result.rank}, numerical rank {measured}")
        result.rank = measured
    return result
