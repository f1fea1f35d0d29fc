"""DomainFanOut runs one lookup per domain, in parallel where it helps."""

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import Future
from typing import List, Optional, TypeVar

from unicast_dnssd.errors import InvalidArgumentError
from unicast_dnssd.threading.throwing_thread_pool_executor import (
    ThrowingThreadPoolExecutor,
)

_logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")
ResultT = TypeVar("ResultT")


class DomainFanOut:
    """
    Applies a function to every item and returns the results in item order.

    Each `map()` call owns a short-lived pool. Every task runs to completion
    before results are merged; if any failed, each failure is logged and the
    first one (in item order) is raised.
    """

    def __init__(self, max_workers: Optional[int] = None) -> None:
        if max_workers is not None and max_workers < 1:
            raise InvalidArgumentError(
                f"max_workers must be at least 1, got {max_workers}."
            )
        self.__max_workers = max_workers

    @property
    def max_workers(self) -> Optional[int]:
        return self.__max_workers

    def map(
        self, fn: Callable[[ItemT], ResultT], items: Iterable[ItemT]
    ) -> List[ResultT]:
        """Returns `[fn(item) for item in items]`, computed concurrently.

        Raises:
            Exception: The first exception raised by `fn`, once all calls
                have finished.
        """
        items = list(items)
        if len(items) <= 1 or self.__max_workers == 1:
            return [fn(item) for item in items]

        with ThrowingThreadPoolExecutor(
            self.__on_error,
            max_workers=self.__max_workers,
            thread_name_prefix="dnssd-fan-out",
        ) as executor:
            futures: List[Future[ResultT]] = [
                executor.submit(fn, item) for item in items
            ]
        # Leaving the executor context waits for every future.

        for future in futures:
            error = future.exception()
            if error is not None:
                raise error
        return [future.result() for future in futures]

    def __on_error(self, error: Exception) -> None:
        _logger.warning("Per-domain lookup failed: %s", error, exc_info=error)
