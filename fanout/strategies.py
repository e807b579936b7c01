# This file is licensed under the Prosperity Public License 3.0.0.
# You may use, copy, and share it for noncommercial purposes.
# Commercial use is allowed for a 30-day trial only.
#
# Contributor: Scienting Studio
# Source Code: https://github.com/scienting/simlify
#
# See the LICENSE.md file for full license terms.


from typing import Generic, TypeVar

from collections.abc import Iterable
from concurrent.futures import Executor

from loguru import logger

from fanout.api import ResourceApi
from fanout.batch import execute_batch
from fanout.config import Deadline, FanoutSettings
from fanout.dtypes import KeyPredicate
from fanout.sinks import NULL_SINK, DiagnosticSink

K = TypeVar("K")
R = TypeVar("R")


class BatchStrategy(Generic[K, R]):
    """
    Binds a [`ResourceApi`][api.ResourceApi] to the worker pool, deadline, and
    diagnostic sink that every batch it runs will use.
    """

    def __init__(
        self,
        api: ResourceApi[K, R],
        executor: Executor | None = None,
        deadline: Deadline | float | None = None,
        sink: DiagnosticSink = NULL_SINK,
        settings: FanoutSettings | None = None,
    ) -> None:
        """
        Args:
            api: Remote API client performing the single-key calls.
            executor: Worker pool used when a call does not supply one. `None`
                uses the [shared pool][executors.shared_executor].
            deadline: Bound on each batch in milliseconds. When `None`, the
                deadline from *settings* applies.
            sink: Receives the list of keys of every batch.
            settings: Defaults read from the environment when not given.
        """
        assert api is not None, "api must not be None"

        self.api: ResourceApi[K, R] = api
        """Remote API client performing the single-key calls."""

        if settings is None:
            settings = FanoutSettings.from_env()
        self.settings: FanoutSettings = settings

        self.executor: Executor | None = executor
        """
        Worker pool that batches are submitted to unless a call overrides it.

        The strategy never shuts this pool down; its lifecycle belongs to
        whoever created it.
        """

        self.deadline: Deadline = (
            settings.deadline if deadline is None else Deadline.of(deadline)
        )
        """
        Bound on the whole wait of each batch (not on individual units).
        [`Deadline.UNBOUNDED`][config.Deadline] waits indefinitely.
        """

        self.sink: DiagnosticSink = sink

    def _resolve_executor(self, executor: Executor | None) -> Executor | None:
        return self.executor if executor is None else executor


class DeleteAllInList(BatchStrategy[K, R]):
    """Concurrently deletes all given resources.

    On failure some resources may already be deleted; nothing is restored.

    Example:
        ```python
        strategy = DeleteAllInList(api, deadline=30_000)
        strategy.execute(["client-1", "client-2"])
        ```
    """

    def execute(self, keys: Iterable[K], *, executor: Executor | None = None) -> None:
        """
        Args:
            keys: Names of the resources to delete.
            executor: Worker pool for this call only.

        Raises:
            BatchExecutionError: When any deletion fails or the deadline elapses.
        """
        execute_batch(
            self._resolve_executor(executor),
            keys,
            self.api.delete,
            deadline=self.deadline,
            sink=self.sink,
            description="deleting resources",
        )


class ListResources(BatchStrategy[K, R]):
    """Concurrently retrieves resources by key.

    Three entry shapes share the same batch:

    ```python
    nodes = ListResources(api)
    nodes.execute()                                   # every key from api.list_keys()
    nodes.execute(predicate=lambda n: n.startswith("web"))
    nodes.execute(["web-1", "db-1"])                  # exactly these, no listing
    ```
    """

    def execute(
        self,
        keys: Iterable[K] | None = None,
        *,
        predicate: KeyPredicate[K] | None = None,
        executor: Executor | None = None,
    ) -> list[R]:
        """
        Args:
            keys: Keys to fetch. When omitted, every key from
                [`list_keys`][api.ResourceApi.list_keys] is considered.
            predicate: Keeps only the enumerated keys it accepts. Cannot be
                combined with *keys*.
            executor: Worker pool for this call only.

        Returns:
            Fetched resources in the order of the resolved keys.

        Raises:
            ValueError: Both *keys* and *predicate* were given.
            BatchExecutionError: When any fetch fails or the deadline elapses.
        """
        if keys is not None and predicate is not None:
            raise ValueError("pass either keys or predicate, not both")
        if keys is None:
            keys = self.api.list_keys()
            if predicate is not None:
                keys = filter(predicate, keys)
        else:
            logger.debug("Explicit keys given; skipping enumeration")
        return execute_batch(
            self._resolve_executor(executor),
            keys,
            self.api.fetch,
            deadline=self.deadline,
            sink=self.sink,
            description="getting resources",
        )
