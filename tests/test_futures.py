from concurrent.futures import CancelledError, Future

import pytest

from fanout import all_as_list


def _resolved(value):
    f = Future()
    f.set_result(value)
    return f


def test_all_as_list_empty():
    combined = all_as_list([])
    assert combined.done()
    assert combined.result() == []


def test_all_as_list_keeps_input_order():
    """Results land at their input position regardless of completion order."""
    futures = [Future() for _ in range(3)]
    combined = all_as_list(futures)

    futures[2].set_result("c")
    futures[0].set_result("a")
    assert not combined.done()
    futures[1].set_result("b")

    assert combined.result(timeout=1) == ["a", "b", "c"]


def test_all_as_list_already_resolved():
    combined = all_as_list([_resolved(1), _resolved(2)])
    assert combined.result(timeout=0) == [1, 2]


def test_all_as_list_fails_fast():
    futures = [Future(), Future()]
    combined = all_as_list(futures)

    futures[1].set_exception(LookupError("boom"))
    assert combined.done()
    with pytest.raises(LookupError, match="boom"):
        combined.result()

    # A later success does not change the outcome.
    futures[0].set_result("late")
    assert isinstance(combined.exception(), LookupError)


def test_all_as_list_first_failure_wins():
    futures = [Future(), Future()]
    combined = all_as_list(futures)
    futures[0].set_exception(ValueError("first"))
    futures[1].set_exception(KeyError("second"))
    assert isinstance(combined.exception(), ValueError)


def test_all_as_list_cancelled_constituent():
    futures = [Future(), _resolved(1)]
    combined = all_as_list(futures)
    futures[0].cancel()
    with pytest.raises(CancelledError):
        combined.result(timeout=1)
