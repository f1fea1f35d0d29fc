import threading
from concurrent.futures import Future
from typing import Any, List

import pytest

from unicast_dnssd.errors import TransportError
from unicast_dnssd.threading.throwing_thread_pool_executor import (
    ThrowingThreadPoolExecutor,
)


def lookup(domain: str) -> str:
    return f"b._dns-sd._udp.{domain}"


def failing_lookup(domain: str) -> None:
    raise TransportError(f"Timed out querying {domain}")


class TestThrowingThreadPoolExecutor:
    def setup_method(self) -> None:
        self.errors_received: List[Exception] = []
        self.error_lock = threading.Lock()

    def error_callback(self, e: Exception) -> None:
        with self.error_lock:
            self.errors_received.append(e)

    def test_successful_task(self) -> None:
        with ThrowingThreadPoolExecutor(
            error_cb=self.error_callback, max_workers=1
        ) as executor:
            future: Future[Any] = executor.submit(lookup, "example.com.")
            assert future.result(timeout=1.0) == "b._dns-sd._udp.example.com."

        assert not self.errors_received

    def test_failing_task_reports_and_raises(self) -> None:
        with ThrowingThreadPoolExecutor(
            error_cb=self.error_callback, max_workers=1
        ) as executor:
            future: Future[None] = executor.submit(
                failing_lookup, "example.com."
            )
            with pytest.raises(TransportError, match="example.com."):
                future.result(timeout=1.0)

        assert len(self.errors_received) == 1
        assert isinstance(self.errors_received[0], TransportError)

    def test_mixed_tasks(self) -> None:
        with ThrowingThreadPoolExecutor(
            error_cb=self.error_callback, max_workers=2
        ) as executor:
            good = executor.submit(lookup, "a.example.")
            bad = executor.submit(failing_lookup, "b.example.")
            assert good.result(timeout=1.0) == "b._dns-sd._udp.a.example."
            assert isinstance(bad.exception(timeout=1.0), TransportError)

        assert [str(e) for e in self.errors_received] == [
            "Timed out querying b.example."
        ]

    def test_kwargs_forwarded(self) -> None:
        with ThrowingThreadPoolExecutor(
            error_cb=self.error_callback,
            max_workers=1,
            thread_name_prefix="fan-out",
        ) as executor:
            future = executor.submit(threading.current_thread)
            assert future.result(timeout=1.0).name.startswith("fan-out")
