# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np
import pytest

pd = pytest.importorskip("pandas")

from matgen.benchmark_generators import run  # noqa: E402
from matgen.matrix_spec import MatrixFamily  # noqa: E402


def test_benchmark_table():
    df = run(sizes=[(40, 12)], repeats=1, key=3)
    assert isinstance(df, pd.DataFrame)
    assert list(df["family"]) == [f.value for f in MatrixFamily]
    assert np.all(df["sec"] >= 0.0)
    assert np.all(df["norm2_est"] > 0.0)
    gaussian = df[df["family"] == "gaussian"].iloc[0]
    assert gaussian["num_rank"] == 12
    poly = df[df["family"] == "polynomial"].iloc[0]
    assert poly["cond"] == pytest.approx(1e4, rel=1e-6)
