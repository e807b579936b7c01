# This file is licensed under the Prosperity Public License 3.0.0.
# You may use, copy, and share it for noncommercial purposes.
# Commercial use is allowed for a 30-day trial only.
#
# Contributor: Scienting Studio
# Source Code: https://github.com/scienting/simlify
#
# See the LICENSE.md file for full license terms.


from typing import Protocol, override

from loguru import logger


class DiagnosticSink(Protocol):
    """Receives trace-level messages about batches being dispatched."""

    def trace(self, message: str) -> None: ...


class NullSink:
    """Drops every message."""

    def trace(self, message: str) -> None:
        pass


NULL_SINK = NullSink()


class LoguruSink:
    """Forwards messages to loguru at TRACE level.

    The package is silent until [`enable_logging`][enable_logging] is called;
    choosing this sink opts in to records from this module only, so the host's
    own handlers receive the trace lines without further setup.
    """

    def __init__(self, name: str = "fanout") -> None:
        logger.enable(__name__)
        self.logger = logger.bind(sink=name)

    def trace(self, message: str) -> None:
        self.logger.trace(message)


class ListSink:
    """Keeps messages in memory; handy for inspecting what a batch reported."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def trace(self, message: str) -> None:
        self.messages.append(message)

    @override
    def __repr__(self) -> str:
        return f"<ListSink messages={len(self.messages)}>"


def emit(sink: DiagnosticSink, message: str) -> None:
    """Sends *message* to *sink*; a failing sink is reported and otherwise ignored."""
    try:
        sink.trace(message)
    except Exception as exc:
        logger.warning(f"Diagnostic sink {sink!r} failed: {exc!r}")
