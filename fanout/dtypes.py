# This file is licensed under the Prosperity Public License 3.0.0.
# You may use, copy, and share it for noncommercial purposes.
# Commercial use is allowed for a 30-day trial only.
#
# Contributor: Scienting Studio
# Source Code: https://github.com/scienting/simlify
#
# See the LICENSE.md file for full license terms.


from typing import TypeVar

from collections.abc import Callable

KeyType = TypeVar("KeyType")
"""
An opaque identifier (usually a `str`) naming one remote resource, such as a
node or client name.
"""

ResultType = TypeVar("ResultType")
"""
Output of an [`Operation`][dtypes.Operation] applied to one
[`KeyType`][dtypes.KeyType].
"""

Operation = Callable[[KeyType], ResultType]
"""A single-key remote call (fetch, delete, ...) that may raise."""

KeyPredicate = Callable[[KeyType], bool]
"""Selects which keys of an enumerated universe are dispatched."""
