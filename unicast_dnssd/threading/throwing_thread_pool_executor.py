"""ThreadPoolExecutor that reports task failures through a callback."""

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, ParamSpec, TypeVar

P = ParamSpec("P")
T = TypeVar("T")


class ThrowingThreadPoolExecutor(ThreadPoolExecutor):
    """
    `ThreadPoolExecutor` whose tasks hand any exception to `error_cb` before
    re-raising it, so failures are seen even if no one calls `result()`.
    """

    def __init__(
        self,
        error_cb: Callable[[Exception], None],
        *args: Any,
        **kwargs: Any,
    ) -> None:
        """
        Initializes a ThrowingThreadPoolExecutor.

        Args:
            error_cb: Called from the worker thread with the exception raised
                by a task.
            *args: Forwarded to `ThreadPoolExecutor`.
            **kwargs: Forwarded to `ThreadPoolExecutor`.
        """
        assert error_cb is not None, "error_cb cannot be None"
        self.__error_cb = error_cb
        super().__init__(*args, **kwargs)

    def submit(
        self, fn: Callable[P, T], /, *args: P.args, **kwargs: P.kwargs
    ) -> Future[T]:
        def wrapper(*args2: P.args, **kwargs2: P.kwargs) -> T:
            try:
                return fn(*args2, **kwargs2)
            except Exception as e:
                self.__error_cb(e)
                raise

        return super().submit(wrapper, *args, **kwargs)
