"""
DocsIndex.Implementors loads rustdoc implementor tables into a documentation
search index.

A rustdoc build emits, per trait, a script listing every implementing type
grouped by crate. This package carries such a table as literal data and hands
it to whichever consumer indexes it:

- ``types`` defines ``ImplementorDescriptor`` and the read-only group mapping.
- ``table`` builds the ``snafu::ErrorCompat`` implementors table.
- ``registry`` is the one-shot handoff between the loader and a consumer that
  may register before or after the loader runs.
- ``loader`` builds the table and delivers it exactly once.
- ``codec`` reads and writes the rustdoc ``implementors/*.js`` script format.
- ``settings``, ``logging`` and ``cli`` provide configuration, structured
  logs and the ``docsindex-implementors`` command.
"""

from .errors import (
    AlreadyDeliveredError,
    ImplementorIndexError,
    MalformedTableError,
    TableFormatError,
)
from .loader import ImplementorTableLoader, LoaderState, load_implementors
from .registry import DeliveryOutcome, HandoffRegistry, get_registry, reset_registry
from .table import TRAIT_PATH, build_error_compat_table
from .types import GroupMapping, ImplementorDescriptor, ImplementorTable, validate_groups

__all__ = [
    "AlreadyDeliveredError",
    "DeliveryOutcome",
    "GroupMapping",
    "HandoffRegistry",
    "ImplementorDescriptor",
    "ImplementorIndexError",
    "ImplementorTable",
    "ImplementorTableLoader",
    "LoaderState",
    "MalformedTableError",
    "TRAIT_PATH",
    "TableFormatError",
    "build_error_compat_table",
    "get_registry",
    "load_implementors",
    "reset_registry",
    "validate_groups",
]
