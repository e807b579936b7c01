# This file is licensed under the Prosperity Public License 3.0.0.
# You may use, copy, and share it for noncommercial purposes.
# Commercial use is allowed for a 30-day trial only.
#
# Contributor: Scienting Studio
# Source Code: https://github.com/scienting/simlify
#
# See the LICENSE.md file for full license terms.


from typing import Any


class BatchFailure(Exception):
    """Base class for the tagged causes carried by
    [`BatchExecutionError`][errors.BatchExecutionError]."""


class OperationFailure(BatchFailure):
    """A single unit's operation raised.

    The original exception is chained as `__cause__`.
    """

    def __init__(self, key: Any, original: BaseException) -> None:
        self.key: Any = key
        """Key whose operation failed."""
        self.original: BaseException = original
        """Exception raised by the operation."""
        super().__init__(f"operation failed for key {key!r}: {original!r}")

    def __reduce__(self):
        return (type(self), (self.key, self.original))


class TimeoutFailure(BatchFailure):
    """The batch deadline elapsed before every unit finished."""

    def __init__(self, timeout_ms: float, pending: int) -> None:
        self.timeout_ms: float = timeout_ms
        self.pending: int = pending
        """Number of units that had not finished when the deadline elapsed."""
        super().__init__(
            f"batch did not complete within {timeout_ms:g} ms ({pending} pending)"
        )

    def __reduce__(self):
        return (type(self), (self.timeout_ms, self.pending))


class InterruptedFailure(BatchFailure):
    """The wait for the batch was interrupted or the aggregate was cancelled."""


class BatchExecutionError(RuntimeError):
    """
    The single aggregate failure of a batch.

    Callers tell causes apart by inspecting [`cause`][errors.BatchExecutionError.cause]
    (also available as `__cause__`), which is always an
    [`OperationFailure`][errors.OperationFailure],
    [`TimeoutFailure`][errors.TimeoutFailure], or
    [`InterruptedFailure`][errors.InterruptedFailure].

    Example:
        ```python
        try:
            execute_batch(pool, names, api.delete)
        except BatchExecutionError as err:
            if isinstance(err.cause, OperationFailure):
                print(f"{err.cause.key} failed")
        ```
    """

    def __init__(self, cause: BatchFailure) -> None:
        self.cause: BatchFailure = cause
        super().__init__(str(cause))
        self.__cause__ = cause
