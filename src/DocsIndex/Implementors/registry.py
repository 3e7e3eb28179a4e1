"""One-shot handoff between the implementor table loader and its consumer.

The loader runs once and cannot know whether the consumer (a search index or
renderer) has registered yet. The registry holds at most one pending mapping
and at most one consumer callback; whichever side arrives second triggers the
delivery. Callbacks run outside the lock so a consumer may inspect the
registry while handling a mapping.
"""

import logging
import threading
from enum import Enum
from typing import Callable, Optional

from .logging import log_event
from .types import GroupMapping

logger = logging.getLogger(__name__)

Consumer = Callable[[GroupMapping], None]

# ============================================================================
# Handoff Registry
# ============================================================================


class DeliveryOutcome(str, Enum):
    """Which sink received a mapping."""

    CALLBACK = "callback"
    PENDING = "pending"


def _log_delivery(message: str, outcome: DeliveryOutcome, mapping: GroupMapping) -> None:
    log_event(
        logger,
        "info",
        message,
        outcome=outcome.value,
        groups=len(mapping),
        descriptors=sum(len(descriptors) for descriptors in mapping.values()),
    )


class HandoffRegistry:
    """Process-wide slot pair: one pending mapping, one consumer callback."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: Optional[GroupMapping] = None
        self._consumer: Optional[Consumer] = None

    @property
    def pending(self) -> Optional[GroupMapping]:
        """Mapping waiting for a consumer, if any."""
        with self._lock:
            return self._pending

    def has_consumer(self) -> bool:
        with self._lock:
            return self._consumer is not None

    def register(self, mapping: GroupMapping) -> DeliveryOutcome:
        """Hand ``mapping`` to the consumer, or park it in the pending slot.

        Exactly one of the two happens. A later ``register`` while a mapping is
        still pending replaces it. A consumer that raises has still been
        handed the mapping; the exception propagates and nothing is parked.

        Args:
            mapping: Group name to implementor descriptors.

        Returns:
            ``DeliveryOutcome.CALLBACK`` if the consumer was invoked,
            ``DeliveryOutcome.PENDING`` if the mapping was stored.
        """
        with self._lock:
            consumer = self._consumer
            if consumer is None:
                self._pending = mapping
        if consumer is None:
            _log_delivery("Implementor mapping parked", DeliveryOutcome.PENDING, mapping)
            return DeliveryOutcome.PENDING
        consumer(mapping)
        _log_delivery("Implementor mapping delivered", DeliveryOutcome.CALLBACK, mapping)
        return DeliveryOutcome.CALLBACK

    def try_set_consumer(self, callback: Consumer) -> bool:
        """Install ``callback`` as the consumer.

        A pending mapping is handed to ``callback`` immediately and the slot is
        cleared. If ``callback`` raises while draining, the mapping goes back
        into the slot (unless a newer one arrived meanwhile), the consumer stays
        installed, and the exception propagates; ``take_pending`` recovers it.

        Returns:
            ``False`` if a consumer was already installed (nothing changes),
            ``True`` otherwise.
        """
        with self._lock:
            if self._consumer is not None:
                return False
            self._consumer = callback
            pending, self._pending = self._pending, None
        if pending is not None:
            try:
                callback(pending)
            except Exception:
                with self._lock:
                    if self._pending is None:
                        self._pending = pending
                raise
            _log_delivery("Pending implementor mapping drained", DeliveryOutcome.CALLBACK, pending)
        return True

    def take_pending(self) -> Optional[GroupMapping]:
        """Return the pending mapping and clear the slot."""
        with self._lock:
            pending, self._pending = self._pending, None
        return pending

    def reset(self) -> None:
        """Drop the consumer and any pending mapping."""
        with self._lock:
            self._pending = None
            self._consumer = None


# ============================================================================
# Singleton API
# ============================================================================

_registry: Optional[HandoffRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> HandoffRegistry:
    """Get or create the global handoff registry."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = HandoffRegistry()
    return _registry


def reset_registry() -> None:
    """Clear the global registry's consumer and pending slot."""
    get_registry().reset()


__all__ = [
    "Consumer",
    "DeliveryOutcome",
    "HandoffRegistry",
    "get_registry",
    "reset_registry",
]
