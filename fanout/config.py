# This file is licensed under the Prosperity Public License 3.0.0.
# You may use, copy, and share it for noncommercial purposes.
# Commercial use is allowed for a 30-day trial only.
#
# Contributor: Scienting Studio
# Source Code: https://github.com/scienting/simlify
#
# See the LICENSE.md file for full license terms.


from typing import ClassVar, Self

import os
from collections.abc import Mapping
from dataclasses import dataclass

ENV_REQUEST_TIMEOUT = "FANOUT_REQUEST_TIMEOUT"
"""Environment variable holding the default batch deadline in milliseconds."""

ENV_USER_THREADS = "FANOUT_USER_THREADS"
"""Environment variable holding the size of the shared worker pool."""


@dataclass(frozen=True, slots=True)
class Deadline:
    """Optional wall-clock bound on a single batch invocation."""

    millis: float | None = None
    """Milliseconds to wait for the whole batch; `None` waits indefinitely."""

    UNBOUNDED: ClassVar["Deadline"]

    def __post_init__(self) -> None:
        if isinstance(self.millis, bool):
            raise ValueError("deadline must be a number of ms, not a bool")
        if self.millis is not None and self.millis < 0:
            raise ValueError(f"deadline must be non-negative, got {self.millis}")

    @classmethod
    def of(cls, value: "Deadline | float | None") -> "Deadline":
        """Normalizes milliseconds, `None`, or an existing `Deadline`."""
        if value is None:
            return cls.UNBOUNDED
        if isinstance(value, Deadline):
            return value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"deadline must be a number of ms, got {value!r}")
        return cls(float(value))

    @property
    def bounded(self) -> bool:
        return self.millis is not None

    @property
    def seconds(self) -> float | None:
        """Timeout in the unit `concurrent.futures` expects."""
        if self.millis is None:
            return None
        return self.millis / 1000.0


Deadline.UNBOUNDED = Deadline()


def _optional_number(env: Mapping[str, str], name: str) -> float | None:
    raw = env.get(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _optional_int(env: Mapping[str, str], name: str) -> int | None:
    raw = env.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True, slots=True)
class FanoutSettings:
    """Process-level defaults for batch execution."""

    timeout_ms: float | None = None
    """
    Default deadline for every batch in milliseconds. `None` means batches wait
    until all units resolve.
    """

    max_workers: int | None = None
    """
    Number of threads in the [shared pool][executors.shared_executor]. `None`
    uses the `ThreadPoolExecutor` default.
    """

    def __post_init__(self) -> None:
        if self.max_workers is not None and self.max_workers <= 0:
            raise ValueError("max_workers must be positive")

    @property
    def deadline(self) -> Deadline:
        return Deadline.of(self.timeout_ms)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Self:
        """Reads settings from `FANOUT_REQUEST_TIMEOUT` and `FANOUT_USER_THREADS`.

        Args:
            env: Mapping to read from. Defaults to `os.environ`.
        """
        if env is None:
            env = os.environ
        return cls(
            timeout_ms=_optional_number(env, ENV_REQUEST_TIMEOUT),
            max_workers=_optional_int(env, ENV_USER_THREADS),
        )
