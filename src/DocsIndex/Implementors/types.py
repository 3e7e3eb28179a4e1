"""
Typed records for rustdoc implementor tables.

An implementors table lists, for a single trait, every type implementing it,
partitioned by the crate that defines the type. Each entry is an
``ImplementorDescriptor`` carrying the rendered ``impl`` line (HTML markup as
emitted by rustdoc), the link to the documented type, whether the impl is
synthetic (auto-derived, e.g. ``Send``/``Sync``), and the fully-qualified type
paths the impl mentions.

All records are immutable. Group mappings handed out by this module are
read-only views over tuples so that a delivered table cannot be altered by the
consumer that receives it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Tuple

from bs4 import BeautifulSoup

from .errors import MalformedTableError, TableFormatError

__all__ = [
    "ImplementorDescriptor",
    "GroupMapping",
    "ImplementorTable",
    "validate_groups",
]


def _first_href(markup: str) -> Optional[str]:
    soup = BeautifulSoup(markup, "html.parser")
    anchor = soup.find("a", href=True)
    if anchor is None:
        return None
    return str(anchor["href"])


@dataclass(frozen=True, slots=True)
class ImplementorDescriptor:
    """One type's implementation of the documented trait.

    Attributes:
        text: Rendered ``impl`` line; may contain rustdoc anchor markup.
        synthetic: ``True`` for auto-derived impls, ``False`` for explicit ones.
        types: Fully-qualified type paths associated with the impl.
        href: Link to the documented type. Derived from the first anchor in
            ``text`` when omitted.

    Examples:
        >>> desc = ImplementorDescriptor(
        ...     text='impl Foo for <a href="c/struct.Bar.html">Bar</a>',
        ...     synthetic=False,
        ...     types=("c::Bar",),
        ... )
        >>> desc.href
        'c/struct.Bar.html'
        >>> desc.label
        'impl Foo for Bar'
    """

    text: str
    synthetic: bool = False
    types: Tuple[str, ...] = ()
    href: Optional[str] = field(default=None)

    def __post_init__(self) -> None:
        if not isinstance(self.types, tuple):
            object.__setattr__(self, "types", tuple(self.types))
        if self.href is None:
            object.__setattr__(self, "href", _first_href(self.text))

    @property
    def label(self) -> str:
        """Return ``text`` with markup stripped."""

        return BeautifulSoup(self.text, "html.parser").get_text()

    def to_dict(self) -> Dict[str, Any]:
        """Return the record in rustdoc key order (``text``, ``synthetic``, ``types``)."""

        return {"text": self.text, "synthetic": self.synthetic, "types": list(self.types)}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ImplementorDescriptor":
        """Build a descriptor from a decoded rustdoc record."""

        if not isinstance(payload, Mapping):
            raise TableFormatError(f"implementor record must be an object, got {type(payload).__name__}")
        text = payload.get("text")
        if not isinstance(text, str):
            raise TableFormatError("implementor record is missing string field 'text'")
        synthetic = payload.get("synthetic", False)
        if not isinstance(synthetic, bool):
            raise TableFormatError("field 'synthetic' must be a boolean")
        types = payload.get("types", [])
        if not isinstance(types, list) or not all(isinstance(item, str) for item in types):
            raise TableFormatError("field 'types' must be a list of strings")
        return cls(text=text, synthetic=synthetic, types=tuple(types))


GroupMapping = Mapping[str, Tuple[ImplementorDescriptor, ...]]


def validate_groups(groups: Mapping[str, Sequence[ImplementorDescriptor]]) -> GroupMapping:
    """Check well-formedness and return a read-only copy of ``groups``.

    Every group name must be a non-empty string mapping to a non-empty sequence
    of ``ImplementorDescriptor`` instances.

    Raises:
        MalformedTableError: If any group violates the rules above.
    """

    frozen: Dict[str, Tuple[ImplementorDescriptor, ...]] = {}
    for name, descriptors in groups.items():
        if not isinstance(name, str) or not name:
            raise MalformedTableError(f"group name must be a non-empty string, got {name!r}")
        items = tuple(descriptors)
        if not items:
            raise MalformedTableError(f"group {name!r} has no implementors")
        for item in items:
            if not isinstance(item, ImplementorDescriptor):
                raise MalformedTableError(
                    f"group {name!r} contains {type(item).__name__}, expected ImplementorDescriptor"
                )
        frozen[name] = items
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class ImplementorTable:
    """All implementors of ``trait`` grouped by crate name.

    Hashing uses ``trait`` only; the read-only ``groups`` view is not hashable.
    """

    trait: str
    groups: GroupMapping = field(hash=False)

    def group_sizes(self) -> Dict[str, int]:
        return {name: len(descriptors) for name, descriptors in self.groups.items()}

    def iter_descriptors(self) -> Iterator[Tuple[str, ImplementorDescriptor]]:
        for name, descriptors in self.groups.items():
            for descriptor in descriptors:
                yield name, descriptor

    def type_paths(self) -> Tuple[str, ...]:
        """Return every type path in table order."""

        return tuple(path for _, desc in self.iter_descriptors() for path in desc.types)

    def __len__(self) -> int:
        return sum(len(descriptors) for descriptors in self.groups.values())
