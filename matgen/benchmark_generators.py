#!/usr/bin/python3
# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Time every matrix family and check what came out.

    python -m matgen.benchmark_generators

Needs the `bench` extra (pandas + tabulate).
"""

import time

import pandas as pd

from matgen import (
    MatrixFamily,
    MatrixSpec,
    RNGState,
    cond_num_check,
    estimate_spectral_norm,
    generate,
    rank_check,
)

REPEATS = 5  # best of 5 runs
SIZES = [(300, 100), (1000, 300), (3000, 500)]
COND = 1e4


def wall(f, *args, **kwargs):
    t0 = time.perf_counter()
    f(*args, **kwargs)
    return time.perf_counter() - t0


def run(sizes=SIZES, repeats=REPEATS, key=0) -> pd.DataFrame:
    records = []
    state = RNGState(key)
    for m, n in sizes:
        for family in MatrixFamily:
            spec = MatrixSpec(m, n, family, cond_num=COND, scaling=1e3)
            t = min(wall(generate, spec, None, state) for _ in range(repeats))
            out = generate(spec, None, state)
            state = out.state
            norm2, state = estimate_spectral_norm(out.matrix, 20, state)
            records.append(
                (
                    family.value,
                    f"{m}×{n}",
                    t,
                    cond_num_check(out.matrix),
                    rank_check(out.matrix),
                    norm2,
                )
            )
    return pd.DataFrame(
        records,
        columns=["family", "size", "sec", "cond", "num_rank", "norm2_est"],
    )


if __name__ == "__main__":
    df = run()
    print(df.to_markdown(index=False))
    df.to_csv("bench_results.csv", index=False)
