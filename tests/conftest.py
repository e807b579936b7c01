# This file is licensed under the Prosperity Public License 3.0.0.
# You may use, copy, and share it for noncommercial purposes.
# Commercial use is allowed for a 30-day trial only.
#
# Contributor: Scientific Computing Studio
# Source Code: https://github.com/scienting/simlify
#
# See the LICENSE.md file for full license terms.

import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from fanout import enable_logging, shutdown_shared_executor

TEST_DIR = os.path.dirname(__file__)


class FakeApi:
    """In-memory stand-in for a remote API client.

    Resources are named by key; `fetch` returns `f"{key}-resource"`.
    """

    def __init__(
        self,
        keys=(),
        failing=(),
        delays=None,
        gate: threading.Event | None = None,
    ):
        self.keys = list(keys)
        self.failing = set(failing)
        self.delays = dict(delays or {})
        self.gate = gate
        self.deleted: list[str] = []
        self.fetched: list[str] = []
        self.listed = 0
        self._lock = threading.Lock()

    def _call(self, key, record):
        if self.gate is not None:
            self.gate.wait(timeout=5)
        time.sleep(self.delays.get(key, 0))
        if key in self.failing:
            raise LookupError(f"{key} not found")
        with self._lock:
            record.append(key)

    def list_keys(self):
        self.listed += 1
        return iter(self.keys)

    def fetch(self, key):
        self._call(key, self.fetched)
        return f"{key}-resource"

    def delete(self, key):
        self._call(key, self.deleted)
        return key


@pytest.fixture(scope="session", autouse=True)
def setup_tests():
    enable_logging(10)
    yield
    shutdown_shared_executor()


@pytest.fixture
def pool():
    executor = ThreadPoolExecutor(max_workers=8)
    yield executor
    executor.shutdown(wait=True)


@pytest.fixture
def gate():
    """Blocks FakeApi calls until the test finishes."""
    event = threading.Event()
    yield event
    event.set()


@pytest.fixture(scope="session")
def ray_session():
    ray = pytest.importorskip("ray")
    ray.init(runtime_env={}, num_cpus=2, include_dashboard=False, ignore_reinit_error=True)
    yield ray
    ray.shutdown()


@pytest.fixture
def make_api():
    return FakeApi
