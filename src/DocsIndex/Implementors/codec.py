"""Read and write rustdoc ``implementors/<crate>/trait.<Name>.js`` scripts.

rustdoc writes one script per trait. The script builds an ``implementors``
object one crate at a time and then either calls
``window.register_implementors`` or stores the object in
``window.pending_implementors``::

    (function() {var implementors = {};
    implementors["my_crate"] = [{"text":"impl ...","synthetic":false,"types":["my_crate::Ty"]}];
    if (window.register_implementors) {window.register_implementors(implementors);} else {window.pending_implementors = implementors;}})()

Each right-hand side is a JSON array, so decoding is line oriented: the
prelude and the dispatch footer are recognised verbatim and every other
non-blank line must be a single group assignment.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .errors import TableFormatError
from .logging import LoggerLike, log_event
from .types import ImplementorDescriptor, ImplementorTable, validate_groups

__all__ = [
    "parse_implementors_js",
    "dump_implementors_js",
    "read_implementors_file",
    "write_implementors_file",
    "trait_path_from_filename",
    "implementors_relpath",
    "table_to_json",
]

logger = logging.getLogger(__name__)

PRELUDE = "(function() {var implementors = {};"
FOOTER = (
    "if (window.register_implementors) {window.register_implementors(implementors);} "
    "else {window.pending_implementors = implementors;}})()"
)
_FOOTER_START = "if (window.register_implementors)"
_ASSIGNMENT_RE = re.compile(r'^implementors\[("(?:[^"\\]|\\.)*")\]\s*=\s*(.*?);?\s*$')
_TRAIT_FILE_RE = re.compile(r"^trait\.(?P<name>[A-Za-z_][A-Za-z0-9_]*)\.js$")


def _decode_assignment(line: str, lineno: int) -> Tuple[str, List[ImplementorDescriptor]]:
    match = _ASSIGNMENT_RE.match(line)
    if match is None:
        raise TableFormatError(f"unexpected statement {line[:60]!r}", line=lineno)
    try:
        name = json.loads(match.group(1))
        records = json.loads(match.group(2))
    except json.JSONDecodeError as exc:
        raise TableFormatError(f"invalid JSON in assignment: {exc.msg}", line=lineno) from exc
    if not isinstance(records, list):
        raise TableFormatError(f"group {name!r} must be assigned an array", line=lineno)
    try:
        descriptors = [ImplementorDescriptor.from_dict(record) for record in records]
    except TableFormatError as exc:
        raise TableFormatError(f"group {name!r}: {exc}", line=lineno) from exc
    return name, descriptors


def parse_implementors_js(
    source: str,
    trait: str = "",
    *,
    strict: bool = True,
    log: Optional[LoggerLike] = None,
) -> ImplementorTable:
    """Decode a rustdoc implementors script.

    Args:
        source: Script text.
        trait: Trait path to record on the table (the script does not name it).
        strict: When ``False``, empty groups are dropped with a warning instead
            of failing validation.
        log: Logger for the empty-group warnings; defaults to this module's.

    Returns:
        ``ImplementorTable`` with groups in script order.

    Raises:
        TableFormatError: If the prelude or dispatch footer is missing, a line
            is not a group assignment, text follows the footer, a group name
            repeats, or a record is malformed.
        MalformedTableError: In strict mode, if a group is empty.
    """

    groups: Dict[str, List[ImplementorDescriptor]] = {}
    seen_prelude = False
    seen_footer = False
    for lineno, raw in enumerate(source.splitlines(), start=1):
        line = raw.strip()
        if seen_footer:
            if line:
                raise TableFormatError("unexpected text after dispatch footer", line=lineno)
            continue
        if not seen_prelude:
            if not line:
                continue
            if not line.startswith(PRELUDE):
                raise TableFormatError("missing 'var implementors' prelude", line=lineno)
            seen_prelude = True
            line = line[len(PRELUDE):].strip()
        if not line:
            continue
        if line.startswith(_FOOTER_START):
            seen_footer = True
            continue
        name, descriptors = _decode_assignment(line, lineno)
        if name in groups:
            raise TableFormatError(f"duplicate group {name!r}", line=lineno)
        groups[name] = descriptors

    if not seen_prelude:
        raise TableFormatError("missing 'var implementors' prelude")
    if not seen_footer:
        raise TableFormatError("missing dispatch footer")

    if not strict:
        for name in [key for key, value in groups.items() if not key or not value]:
            log_event(log or logger, "warning", "Dropping empty implementor group", group=name, trait=trait)
            del groups[name]
    return ImplementorTable(trait=trait, groups=validate_groups(groups))


def _dump_group(descriptors: Any) -> str:
    return json.dumps(
        [descriptor.to_dict() for descriptor in descriptors],
        separators=(",", ":"),
        ensure_ascii=False,
    )


def dump_implementors_js(table: ImplementorTable) -> str:
    """Encode ``table`` in the rustdoc implementors script format."""

    lines = [PRELUDE]
    for name, descriptors in table.groups.items():
        lines.append(f"implementors[{json.dumps(name, ensure_ascii=False)}] = {_dump_group(descriptors)};")
    lines.append(FOOTER)
    return "\n".join(lines)


def trait_path_from_filename(path: Path | str) -> str:
    """Derive ``crate::Trait`` from ``.../implementors/<crate>/trait.<Trait>.js``.

    Nested module directories between the crate and the file are kept, e.g.
    ``implementors/core/fmt/trait.Debug.js`` gives ``core::fmt::Debug``.
    """

    path = Path(path)
    match = _TRAIT_FILE_RE.match(path.name)
    if match is None:
        raise TableFormatError(f"not an implementors script name: {path.name!r}")
    parts = path.parent.parts
    if "implementors" in parts:
        modules = list(parts[len(parts) - parts[::-1].index("implementors"):])
    else:
        modules = list(parts[-1:])
    if not modules:
        raise TableFormatError(f"cannot determine crate for {str(path)!r}")
    return "::".join(modules + [match.group("name")])


def implementors_relpath(trait: str) -> Path:
    """Inverse of ``trait_path_from_filename`` relative to the docs root."""

    *modules, name = trait.split("::")
    if not modules or not name:
        raise TableFormatError(f"trait path must be crate-qualified: {trait!r}")
    return Path("implementors", *modules, f"trait.{name}.js")


def read_implementors_file(
    path: Path | str,
    *,
    strict: bool = True,
    trait: Optional[str] = None,
    log: Optional[LoggerLike] = None,
) -> ImplementorTable:
    """Read and decode the script at ``path``.

    Unreadable or non-UTF-8 files raise ``TableFormatError`` like any other
    malformed script.
    """

    path = Path(path)
    if trait is None:
        try:
            trait = trait_path_from_filename(path)
        except TableFormatError:
            trait = ""
    try:
        source = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise TableFormatError(f"{path.name} is not valid UTF-8 (byte {exc.start})") from exc
    except OSError as exc:
        raise TableFormatError(f"cannot read {path}: {exc.strerror or exc}") from exc
    return parse_implementors_js(source, trait, strict=strict, log=log)


def write_implementors_file(
    table: ImplementorTable, path: Path | str, *, log: Optional[LoggerLike] = None
) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_implementors_js(table), encoding="utf-8")
    log_event(
        log or logger,
        "info",
        "Wrote implementors script",
        path=str(path),
        trait=table.trait,
        groups=len(table.groups),
    )
    return path


def table_to_json(table: ImplementorTable) -> Dict[str, Any]:
    """Plain JSON-ready view of ``table``."""

    return {
        "trait": table.trait,
        "implementors": {
            name: [descriptor.to_dict() for descriptor in descriptors]
            for name, descriptors in table.groups.items()
        },
    }
