# This file is licensed under the Prosperity Public License 3.0.0.
# You may use, copy, and share it for noncommercial purposes.
# Commercial use is allowed for a 30-day trial only.
#
# Contributor: Scienting Studio
# Source Code: https://github.com/scienting/simlify
#
# See the LICENSE.md file for full license terms.


from typing import Generic, TypeVar

import threading
from collections.abc import Sequence
from concurrent.futures import CancelledError, Future

T = TypeVar("T")

_MISSING = object()


class _Aggregate(Generic[T]):
    """Bookkeeping behind [`all_as_list`][futures.all_as_list].

    Each constituent writes only its own slot; the aggregate future is resolved
    once, either by the last success or by the first failure.
    """

    def __init__(self, futures: Sequence["Future[T]"]) -> None:
        self.slots: list[object] = [_MISSING] * len(futures)
        self.remaining: int = len(futures)
        self.lock = threading.Lock()
        self.combined: Future[list[T]] = Future()
        self.combined.set_running_or_notify_cancel()

    def on_done(self, index: int, future: "Future[T]") -> None:
        if future.cancelled():
            self._fail(CancelledError(f"unit {index} was cancelled"))
            return
        exc = future.exception()
        if exc is not None:
            self._fail(exc)
            return
        with self.lock:
            if self.combined.done():
                return
            self.slots[index] = future.result()
            self.remaining -= 1
            if self.remaining:
                return
            results: list[T] = list(self.slots)  # type: ignore[arg-type]
        self.combined.set_result(results)

    def _fail(self, exc: BaseException) -> None:
        with self.lock:
            if self.combined.done():
                return
            self.combined.set_exception(exc)


def all_as_list(futures: Sequence["Future[T]"]) -> "Future[list[T]]":
    """Combines futures into one future of their results in input order.

    The combined future succeeds once every constituent has succeeded and fails
    with the first constituent exception observed. Completion order never
    affects the position of a result.

    Args:
        futures: Futures to combine. An empty sequence yields an already
            resolved future holding `[]`.

    Returns:
        A future resolving to the list of results.
    """
    aggregate = _Aggregate(futures)
    if not futures:
        aggregate.combined.set_result([])
        return aggregate.combined
    for index, future in enumerate(futures):
        future.add_done_callback(
            lambda f, index=index: aggregate.on_done(index, f)
        )
    return aggregate.combined
