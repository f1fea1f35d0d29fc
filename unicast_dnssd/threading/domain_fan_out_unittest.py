import threading
import time
from typing import List

import pytest

from unicast_dnssd.errors import InvalidArgumentError, TransportError
from unicast_dnssd.threading.domain_fan_out import DomainFanOut
from unicast_dnssd.threading.throwing_thread_pool_executor import (
    ThrowingThreadPoolExecutor,
)


class TestDomainFanOut:
    def test_results_keep_item_order(self):
        def slow_for_small(value: int) -> int:
            time.sleep(0.01 * (5 - value))
            return value * 10

        assert DomainFanOut().map(slow_for_small, [1, 2, 3, 4]) == [
            10,
            20,
            30,
            40,
        ]

    def test_empty_items(self):
        assert DomainFanOut().map(lambda x: x, []) == []

    def test_single_item_runs_inline(self):
        caller = threading.get_ident()
        assert DomainFanOut().map(lambda _: threading.get_ident(), ["a"]) == [
            caller
        ]

    def test_one_worker_runs_inline(self):
        caller = threading.get_ident()
        results = DomainFanOut(max_workers=1).map(
            lambda _: threading.get_ident(), ["a", "b", "c"]
        )
        assert results == [caller, caller, caller]

    def test_first_error_raised_after_all_tasks_finish(self):
        finished: List[str] = []
        lock = threading.Lock()

        def task(item: str) -> str:
            if item == "bad-1":
                raise TransportError("first")
            if item == "bad-2":
                raise TransportError("second")
            time.sleep(0.05)
            with lock:
                finished.append(item)
            return item

        with pytest.raises(TransportError, match="first"):
            DomainFanOut().map(task, ["ok-1", "bad-1", "bad-2", "ok-2"])
        assert sorted(finished) == ["ok-1", "ok-2"]

    def test_failures_are_logged(self, caplog):
        def task(item: str) -> str:
            raise TransportError(f"failed {item}")

        with pytest.raises(TransportError):
            DomainFanOut().map(task, ["a", "b"])
        messages = [r.getMessage() for r in caplog.records]
        assert any("failed a" in m for m in messages)
        assert any("failed b" in m for m in messages)

    def test_invalid_max_workers(self):
        with pytest.raises(InvalidArgumentError):
            DomainFanOut(max_workers=0)


class TestThrowingThreadPoolExecutor:
    def test_error_callback_receives_exception(self):
        errors: List[Exception] = []
        error = ValueError("boom")

        def fail() -> None:
            raise error

        with ThrowingThreadPoolExecutor(errors.append, max_workers=1) as pool:
            future = pool.submit(fail)
            with pytest.raises(ValueError):
                future.result()
        assert errors == [error]

    def test_success_does_not_call_callback(self):
        errors: List[Exception] = []
        with ThrowingThreadPoolExecutor(errors.append, max_workers=2) as pool:
            assert pool.submit(lambda a, b: a + b, 2, b=3).result() == 5
        assert errors == []
