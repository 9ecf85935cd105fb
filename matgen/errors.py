# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Exceptions raised by matgen.

All of them derive from ValueError so existing ``except ValueError``
handlers keep catching bad input.
"""


class MatgenError(Exception):
    """Base class for every error raised by this package."""


class InvalidSpec(MatgenError, ValueError):
    """A MatrixSpec violates its rank / dimension constraints."""


class UnsupportedFamily(MatgenError, ValueError):
    """The requested matrix family is not one the dispatcher knows."""


class InvalidArgument(MatgenError, ValueError):
    """A buffer, size or index argument to a utility is malformed."""
