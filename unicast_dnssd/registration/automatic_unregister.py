"""Unregisters tracked services when the interpreter exits."""

import atexit
import sys
import threading
from typing import Callable, Set

from unicast_dnssd.registration.registrator import DnsSDRegistrator
from unicast_dnssd.service.service_name import ServiceName


class AutomaticUnregister:
    """
    Keeps a set of registered services and unregisters them at exit.

    The exit hook is only installed while the component is started and at
    least one service is tracked. Hook failures are written to stderr since
    logging may already be shut down when it runs.
    """

    def __init__(
        self,
        registrator: DnsSDRegistrator,
        *,
        register_exit_hook: Callable[[Callable[[], None]], object] = atexit.register,
        unregister_exit_hook: Callable[[Callable[[], None]], None] = atexit.unregister,
    ) -> None:
        """Initializes the AutomaticUnregister.

        Args:
            registrator: Registrator used to unregister the services.
            register_exit_hook: Installs the exit hook.
            unregister_exit_hook: Removes the exit hook.
        """
        if registrator is None:
            raise ValueError("registrator cannot be None.")
        self.__registrator = registrator
        self.__register_exit_hook = register_exit_hook
        self.__unregister_exit_hook = unregister_exit_hook
        self.__lock = threading.Lock()
        self.__services: Set[ServiceName] = set()
        self.__started = False
        self.__hook_installed = False

    @property
    def is_started(self) -> bool:
        with self.__lock:
            return self.__started

    @property
    def hook_installed(self) -> bool:
        with self.__lock:
            return self.__hook_installed

    def start(self) -> None:
        """Enables the exit hook, installing it if services are tracked."""
        with self.__lock:
            self.__started = True
            self.__update_hook_locked()

    def stop(self) -> None:
        """Removes the exit hook. Tracked services are kept."""
        with self.__lock:
            self.__started = False
            self.__update_hook_locked()

    def add_service(self, name: ServiceName) -> None:
        with self.__lock:
            self.__services.add(name)
            self.__update_hook_locked()

    def remove_service(self, name: ServiceName) -> None:
        with self.__lock:
            self.__services.discard(name)
            self.__update_hook_locked()

    def registered_services(self) -> Set[ServiceName]:
        with self.__lock:
            return set(self.__services)

    def unregister_all(self) -> None:
        """Unregisters every tracked service and forgets them all."""
        with self.__lock:
            services = list(self.__services)
            self.__services.clear()
            self.__update_hook_locked()

        for name in services:
            try:
                self.__registrator.unregister_service(name)
            except Exception as e:  # pylint: disable=W0718
                print(
                    f"WARNING: Failed to unregister service {name}: {e}",
                    file=sys.stderr,
                )

    def __update_hook_locked(self) -> None:
        wanted = self.__started and bool(self.__services)
        if wanted and not self.__hook_installed:
            self.__register_exit_hook(self.unregister_all)
            self.__hook_installed = True
        elif not wanted and self.__hook_installed:
            self.__unregister_exit_hook(self.unregister_all)
            self.__hook_installed = False
