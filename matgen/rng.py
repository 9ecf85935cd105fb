# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Explicit, value-type random state.

An RNGState is a Philox (key, counter) pair. Every sampling function takes
a state and hands back the advanced one; nothing in the package touches
numpy's global random state. Rebuilding a state from the same two integers
replays exactly the same stream.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import InvalidArgument
from .utils import check_size

_KEY_BITS = 128
_COUNTER_BITS = 256


def _words_to_int(words) -> int:
    value = 0
    for i, w in enumerate(words):
        value |= int(w) << (64 * i)
    return value


@dataclass(frozen=True)
class RNGState:
    """
    Counter-based random state.

    Attributes
    ----------
    key : int
        Philox key in [0, 2**128); selects the stream.
    counter : int
        Philox counter in [0, 2**256); position inside the stream.
    """

    key: int
    counter: int = 0

    def __post_init__(self):
        if not 0 <= self.key < 2**_KEY_BITS:
            raise InvalidArgument(f"key must lie in [0, 2**{_KEY_BITS})")
        if not 0 <= self.counter < 2**_COUNTER_BITS:
            raise InvalidArgument(f"counter must lie in [0, 2**{_COUNTER_BITS})")

    def generator(self) -> np.random.Generator:
        """A fresh Generator positioned at this state."""
        return np.random.Generator(np.random.Philox(key=self.key, counter=self.counter))

    def advanced(self, gen: np.random.Generator) -> "RNGState":
        """State after the draws already taken from `gen`."""
        counter = gen.bit_generator.state["state"]["counter"]
        return RNGState(self.key, _words_to_int(counter))


def fill_dense(rows: int, cols: int, state: RNGState) -> Tuple[np.ndarray, RNGState]:
    """
    Sample a (rows, cols) standard-normal matrix in Fortran order.

    Returns
    -------
    G : (rows, cols) ndarray
    state : RNGState
        State to use for the next draw.
    """
    rows = check_size("rows", rows)
    cols = check_size("cols", cols)
    gen = state.generator()
    G = gen.standard_normal((cols, rows)).T
    return np.asfortranarray(G), state.advanced(gen)


def sample_without_replacement(
    population: int, count: int, state: RNGState
) -> Tuple[np.ndarray, RNGState]:
    """Draw `count` distinct indices from range(population)."""
    population = check_size("population", population)
    count = check_size("count", count)
    if count > population:
        raise InvalidArgument(
            f"cannot draw {count} distinct indices from {population}"
        )
    gen = state.generator()
    idx = gen.choice(population, size=count, replace=False)
    return np.sort(idx), state.advanced(gen)
