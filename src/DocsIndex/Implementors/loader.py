"""Implementor table loader.

Builds the literal implementors table and hands its group mapping to the
handoff registry exactly once. The registry either invokes an already
installed consumer or keeps the mapping in its pending slot until one arrives.

Example:
    >>> from DocsIndex.Implementors.registry import HandoffRegistry
    >>> registry = HandoffRegistry()
    >>> ImplementorTableLoader(registry=registry).load()
    <DeliveryOutcome.PENDING: 'pending'>
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from .errors import AlreadyDeliveredError
from .logging import LoggerLike, log_event
from .registry import DeliveryOutcome, HandoffRegistry, get_registry
from .table import build_error_compat_table
from .types import ImplementorTable

__all__ = ["LoaderState", "ImplementorTableLoader", "load_implementors"]

logger = logging.getLogger(__name__)

TableBuilder = Callable[[], ImplementorTable]


class LoaderState(str, Enum):
    UNINITIALIZED = "uninitialized"
    DELIVERED = "delivered"


class ImplementorTableLoader:
    """Deliver one implementors table to a handoff registry, once."""

    def __init__(
        self,
        build: TableBuilder = build_error_compat_table,
        registry: Optional[HandoffRegistry] = None,
        log: Optional[LoggerLike] = None,
    ) -> None:
        self._build = build
        self._registry = registry
        self._log = log if log is not None else logger
        self._state = LoaderState.UNINITIALIZED
        self._table: Optional[ImplementorTable] = None

    @property
    def state(self) -> LoaderState:
        return self._state

    @property
    def table(self) -> Optional[ImplementorTable]:
        """The delivered table, or ``None`` before ``load``."""
        return self._table

    def load(self) -> DeliveryOutcome:
        """Construct the table and deliver its groups.

        The handoff is attempted once. If the consumer raises, the loader is
        still ``DELIVERED`` and the consumer's exception propagates; the table
        is never handed over a second time.

        Raises:
            AlreadyDeliveredError: If this loader already delivered.
        """
        if self._state is LoaderState.DELIVERED:
            raise AlreadyDeliveredError("implementor table was already delivered")
        table = self._build()
        registry = self._registry if self._registry is not None else get_registry()
        self._table = table
        self._state = LoaderState.DELIVERED
        try:
            outcome = registry.register(table.groups)
        except Exception:
            log_event(self._log, "error", "Implementor consumer failed", trait=table.trait)
            raise
        log_event(
            self._log,
            "info",
            "Implementor table delivered",
            trait=table.trait,
            outcome=outcome.value,
            groups=len(table.groups),
            descriptors=len(table),
        )
        return outcome


def load_implementors(
    registry: Optional[HandoffRegistry] = None,
    build: TableBuilder = build_error_compat_table,
    log: Optional[LoggerLike] = None,
) -> DeliveryOutcome:
    """Run a fresh loader once against ``registry`` (the global one by default)."""
    return ImplementorTableLoader(build=build, registry=registry, log=log).load()
