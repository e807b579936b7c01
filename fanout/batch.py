# This file is licensed under the Prosperity Public License 3.0.0.
# You may use, copy, and share it for noncommercial purposes.
# Commercial use is allowed for a 30-day trial only.
#
# Contributor: Scienting Studio
# Source Code: https://github.com/scienting/simlify
#
# See the LICENSE.md file for full license terms.


from typing import Generic

from collections.abc import Iterable
from concurrent.futures import CancelledError, Executor, Future
from dataclasses import dataclass

from loguru import logger

from fanout.config import Deadline
from fanout.dtypes import KeyType, Operation, ResultType
from fanout.errors import (
    BatchExecutionError,
    BatchFailure,
    InterruptedFailure,
    OperationFailure,
    TimeoutFailure,
)
from fanout.executors import shared_executor
from fanout.futures import all_as_list
from fanout.sinks import NULL_SINK, DiagnosticSink, emit


@dataclass(frozen=True, slots=True)
class WorkItem(Generic[KeyType, ResultType]):
    """One key paired with the single-key operation to run on it."""

    key: KeyType
    operation: Operation[KeyType, ResultType]

    def __call__(self) -> ResultType:
        try:
            return self.operation(self.key)
        except Exception as exc:
            raise OperationFailure(self.key, exc) from exc


def _as_failure(exc: BaseException) -> BatchFailure:
    if isinstance(exc, BatchFailure):
        return exc
    if isinstance(exc, CancelledError):
        failure: BatchFailure = InterruptedFailure("a unit of work was cancelled")
    else:
        # Executors that re-wrap worker exceptions lose the WorkItem tag.
        failure = OperationFailure(None, exc)
    failure.__cause__ = exc
    return failure


def execute_batch(
    executor: Executor | None,
    keys: Iterable[KeyType],
    operation: Operation[KeyType, ResultType],
    deadline: Deadline | float | None = None,
    sink: DiagnosticSink = NULL_SINK,
    description: str = "processing keys",
) -> list[ResultType]:
    """Runs *operation* once per key on *executor* and waits for all of them.

    One [`WorkItem`][batch.WorkItem] is submitted per key, duplicates included.
    The per-key futures are combined with
    [`all_as_list`][futures.all_as_list] and the caller blocks on the
    combined future until it resolves or *deadline* elapses.

    Args:
        executor: Shared worker pool. `None` uses the
            [process-wide pool][executors.shared_executor].
        keys: Keys to process in order. May be empty.
        operation: Single-key remote call. May raise.
        deadline: Bound on the whole batch, in milliseconds or as a
            [`Deadline`][config.Deadline]. `None` waits indefinitely.
        sink: Receives one trace line listing the keys before dispatch.
        description: Prefix of that trace line.

    Returns:
        The result of *operation* for each key, at the key's input position.

    Raises:
        BatchExecutionError: A unit failed, the deadline elapsed, or the wait
            was interrupted. The cause is an
            [`OperationFailure`][errors.OperationFailure],
            [`TimeoutFailure`][errors.TimeoutFailure] or
            [`InterruptedFailure`][errors.InterruptedFailure]. Remote side
            effects of units that already ran are not rolled back, and units
            still running after a timeout are abandoned, not cancelled.
    """
    assert callable(operation), "operation must be callable"
    deadline = Deadline.of(deadline)
    batch: list[KeyType] = list(keys)
    if not batch:
        return []
    if executor is None:
        executor = shared_executor()

    emit(sink, f"{description}: {','.join(str(key) for key in batch)}")
    logger.debug(f"Submitting {len(batch)} units of work to {executor!r}")
    futures: list[Future[ResultType]] = [
        executor.submit(WorkItem(key, operation)) for key in batch
    ]
    combined = all_as_list(futures)

    try:
        results = combined.result(timeout=deadline.seconds)
    except TimeoutError as exc:
        pending = sum(1 for future in futures if not future.done())
        assert deadline.millis is not None
        failure: BatchFailure = TimeoutFailure(deadline.millis, pending)
        failure.__cause__ = exc
        raise BatchExecutionError(failure) from failure
    except KeyboardInterrupt as exc:
        failure = InterruptedFailure("interrupted while waiting for the batch")
        failure.__cause__ = exc
        raise BatchExecutionError(failure) from failure
    except BaseException as exc:
        # SystemExit and friends raised inside a unit bypass the WorkItem tag.
        failure = _as_failure(exc)
        raise BatchExecutionError(failure) from failure

    logger.debug(f"Batch of {len(results)} units completed")
    return results
