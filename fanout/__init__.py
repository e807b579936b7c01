# This file is licensed under the Prosperity Public License 3.0.0.
# You may use, copy, and share it for noncommercial purposes.
# Commercial use is allowed for a 30-day trial only.
#
# Contributor: Scienting Studio
# Source Code: https://github.com/scienting/simlify
#
# See the LICENSE.md file for full license terms.

"""Concurrent fan-out of single-key remote operations over a worker pool."""

from typing import Any

import sys

from loguru import logger

from .batch import WorkItem, execute_batch
from .config import Deadline, FanoutSettings
from .errors import (
    BatchExecutionError,
    BatchFailure,
    InterruptedFailure,
    OperationFailure,
    TimeoutFailure,
)
from .executors import (
    InlineExecutor,
    get_executor,
    shared_executor,
    shutdown_shared_executor,
)
from .futures import all_as_list
from .sinks import NULL_SINK, DiagnosticSink, ListSink, LoguruSink, NullSink
from .strategies import BatchStrategy, DeleteAllInList, ListResources

__all__ = [
    "BatchExecutionError",
    "BatchFailure",
    "BatchStrategy",
    "Deadline",
    "DeleteAllInList",
    "DiagnosticSink",
    "FanoutSettings",
    "InlineExecutor",
    "InterruptedFailure",
    "ListResources",
    "ListSink",
    "LoguruSink",
    "NULL_SINK",
    "NullSink",
    "OperationFailure",
    "TimeoutFailure",
    "WorkItem",
    "all_as_list",
    "enable_logging",
    "execute_batch",
    "get_executor",
    "shared_executor",
    "shutdown_shared_executor",
]

logger.disable("fanout")


def enable_logging(
    level_set: int = 20,
    file_path: str | None = None,
    log_format: str = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
) -> None:
    """Enables logging from the `fanout` package.

    Args:
        level_set: Minimum level to emit. `5` includes the TRACE lines sent
            through a [`LoguruSink`][sinks.LoguruSink].
        file_path: Also write records to this file.
        log_format: loguru format string.
    """
    logger.enable("fanout")
    handlers: list[dict[str, Any]] = [
        {"sink": sys.stderr, "level": level_set, "format": log_format}
    ]
    if file_path is not None:
        handlers.append({"sink": file_path, "level": level_set, "format": log_format})
    logger.configure(handlers=handlers)
