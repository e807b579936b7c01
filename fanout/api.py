# This file is licensed under the Prosperity Public License 3.0.0.
# You may use, copy, and share it for noncommercial purposes.
# Commercial use is allowed for a 30-day trial only.
#
# Contributor: Scienting Studio
# Source Code: https://github.com/scienting/simlify
#
# See the LICENSE.md file for full license terms.


from typing import Protocol, TypeVar

from collections.abc import Iterable

K = TypeVar("K")
R_co = TypeVar("R_co", covariant=True)


class ResourceApi(Protocol[K, R_co]):
    """Remote API client performing single-key calls.

    Implementations must be safe to call concurrently from several workers.
    Any method may raise; the batch layer reports it as an
    [`OperationFailure`][errors.OperationFailure].
    """

    def list_keys(self) -> Iterable[K]:
        """Enumerates every key known to the remote system."""
        ...

    def fetch(self, key: K) -> R_co:
        """Retrieves the resource named by *key*."""
        ...

    def delete(self, key: K) -> object:
        """Deletes the resource named by *key*."""
        ...
