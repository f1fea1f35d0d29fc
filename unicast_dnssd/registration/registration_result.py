"""Outcome of the two-phase unregistration of a service."""

import dataclasses
import enum
from typing import Optional


class UnregisterOutcome(enum.Enum):
    """Result of removing the instance records."""

    REMOVED = "removed"
    NOT_FOUND = "not_found"


class CleanupOutcome(enum.Enum):
    """Result of removing the now unused service type advertisement."""

    # The type had no instances left and its PTR was removed.
    DONE = "done"
    # Other instances of the type remain.
    SKIPPED = "skipped"
    # The server answered with an unexpected response code.
    WARNED = "warned"
    # The cleanup update could not be sent.
    FAILED = "failed"


@dataclasses.dataclass(frozen=True)
class UnregistrationResult:
    """Pairs the primary outcome with the best-effort cleanup outcome.

    `cleanup` is None when the instance was not found, since no cleanup is
    attempted then.
    """

    outcome: UnregisterOutcome
    cleanup: Optional[CleanupOutcome] = None

    @property
    def removed(self) -> bool:
        return self.outcome is UnregisterOutcome.REMOVED
