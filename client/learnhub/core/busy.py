"""In-flight action tracking.

An action keyed by ``(action, entity_id)`` may have exactly one outstanding
request. Different entities are independent, so enrolling in two courses at
once is fine while double-clicking one course's button is not.
"""

from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager

import structlog

from learnhub.core.errors import ActionInProgressError


logger = structlog.get_logger(__name__)


class BusyTracker:
    """Registry of actions currently awaiting a response."""

    def __init__(self) -> None:
        self._in_flight: set[tuple[str, Hashable]] = set()

    def is_busy(self, action: str, entity_id: Hashable) -> bool:
        """Check whether an action is in flight for an entity."""
        return (action, entity_id) in self._in_flight

    @property
    def in_flight(self) -> frozenset[tuple[str, Hashable]]:
        return frozenset(self._in_flight)

    @asynccontextmanager
    async def track(self, action: str, entity_id: Hashable) -> AsyncIterator[None]:
        """Mark an action busy for the duration of the block.

        Raises:
            ActionInProgressError: If the same action is already in flight
                for this entity.
        """
        key = (action, entity_id)
        if key in self._in_flight:
            logger.debug("action_rejected_busy", action=action, entity_id=str(entity_id))
            raise ActionInProgressError(f"{action} already in progress for {entity_id}")

        self._in_flight.add(key)
        try:
            yield
        finally:
            self._in_flight.discard(key)
