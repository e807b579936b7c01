# This file is licensed under the Prosperity Public License 3.0.0.
# You may use, copy, and share it for noncommercial purposes.
# Commercial use is allowed for a 30-day trial only.
#
# Contributor: Scienting Studio
# Source Code: https://github.com/scienting/simlify
#
# See the LICENSE.md file for full license terms.


from typing import Any

import threading
from collections.abc import Callable, Generator
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from contextlib import contextmanager

try:
    import ray

    has_ray = True
except ImportError:
    has_ray = False
from loguru import logger

from fanout.config import FanoutSettings


class InlineExecutor(Executor):
    """Minimal drop‑in Executor that runs work synchronously in the caller."""

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future:  # type: ignore[override]  # noqa: D401,E501
        f: Future = Future()
        if f.set_running_or_notify_cancel():
            try:
                result = fn(*args, **kwargs)
            except BaseException as exc:
                f.set_exception(exc)
            else:
                f.set_result(result)
        return f

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        pass  # nothing to clean up


if has_ray:

    @ray.remote
    def _ray_wrapper(fn, *args, **kwargs):
        return fn(*args, **kwargs)

    class RayExecutor(Executor):
        """Thin adapter so Ray conforms to the Executor protocol.

        Every submission becomes one Ray task; the returned future is the
        `concurrent.futures.Future` view of its `ObjectRef`, so it composes with
        [`all_as_list`][futures.all_as_list] like any thread-pool future.
        Work and its arguments must be serializable by Ray.
        """

        def __init__(self, **remote_options: Any) -> None:
            """
            Args:
                **remote_options: Ray remote options applied to every task, such as
                    `num_cpus` or `resources`.
            """
            self._remote_options: dict[str, Any] = remote_options
            self._inflight: set["ray.ObjectRef"] = set()
            """Refs of unfinished tasks; each is dropped once its future resolves."""
            self._lock = threading.Lock()

        def _discard(self, obj_ref: "ray.ObjectRef") -> None:
            with self._lock:
                self._inflight.discard(obj_ref)

        def submit(self, fn, /, *args, **kwargs):
            if not ray.is_initialized():
                logger.info("Initializing Ray.")
                ray.init()
            remote = _ray_wrapper
            if self._remote_options:
                remote = remote.options(**self._remote_options)
            obj_ref = remote.remote(fn, *args, **kwargs)
            with self._lock:
                self._inflight.add(obj_ref)
            future = obj_ref.future()
            future.add_done_callback(lambda _: self._discard(obj_ref))
            return future

        def shutdown(self, wait: bool = True, *, cancel_futures: bool = False):
            with self._lock:
                inflight, self._inflight = list(self._inflight), set()
            if cancel_futures:
                for obj_ref in inflight:
                    ray.cancel(obj_ref)
            elif wait and inflight:
                ray.wait(inflight, num_returns=len(inflight))


@contextmanager
def get_executor(
    parallel: bool, max_workers: int | None = None
) -> Generator[Executor, None, None]:
    """
    Context manager yielding an Executor owned by the caller.

    * If *parallel* is False → InlineExecutor (synchronous).
    * If *parallel* is True  → Ray (if installed) else ThreadPoolExecutor.

    The executor is shut down, waiting for outstanding work, on exit.
    """
    if parallel:
        if has_ray:
            exec_: Executor = RayExecutor()
        else:
            exec_ = ThreadPoolExecutor(max_workers=max_workers)
    else:
        exec_ = InlineExecutor()

    try:
        yield exec_
    finally:
        exec_.shutdown(wait=True)


_shared: ThreadPoolExecutor | None = None
_shared_lock = threading.Lock()


def shared_executor(settings: FanoutSettings | None = None) -> Executor:
    """Returns the process-wide worker pool, creating it on first use.

    Args:
        settings: Used only when the pool does not exist yet. Defaults to
            [`FanoutSettings.from_env`][config.FanoutSettings.from_env].
    """
    global _shared
    with _shared_lock:
        if _shared is None:
            if settings is None:
                settings = FanoutSettings.from_env()
            _shared = ThreadPoolExecutor(
                max_workers=settings.max_workers, thread_name_prefix="fanout"
            )
            logger.info(
                "Created shared worker pool with max_workers={}", _shared._max_workers
            )
        return _shared


def shutdown_shared_executor(wait: bool = True) -> None:
    """Shuts down the shared pool; the next call to `shared_executor` recreates it."""
    global _shared
    with _shared_lock:
        pool, _shared = _shared, None
    if pool is not None:
        logger.debug("Shutting down shared worker pool")
        pool.shutdown(wait=wait)
