"""Simplex system parser — JSON text → validated SimplexDocument.

The ``encodingVersion`` field picks the version parser. Every failure is
raised as SchemaError carrying the byte offset of the problem when one is
known (JSON syntax errors), 0 otherwise.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from pydantic import ValidationError

from simplex.models.schema import ComboEntry, SimplexDocument
from simplex.utils.math_helpers import nearly_equal

logger = logging.getLogger(__name__)


class SchemaError(ValueError):
    """Malformed or structurally invalid simplex document."""

    def __init__(self, message: str, offset: int = 0) -> None:
        super().__init__(message)
        self.offset = offset


def parse_document(text: str | bytes) -> SimplexDocument:
    """Parse and validate a simplex document, including cross-references."""
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SchemaError(f"Invalid UTF-8: {e.reason}", offset=e.start) from e

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaError(
            f"JSON syntax error: {e.msg} (line {e.lineno} column {e.colno})",
            offset=_byte_offset(text, e.pos),
        ) from e
    except (ValueError, RecursionError) as e:
        # Over-long integer literals and runaway nesting
        raise SchemaError(f"JSON decode error: {e}") from e

    if not isinstance(raw, dict):
        raise SchemaError("Top level of a simplex document must be an object")

    version = raw.get("encodingVersion")
    parser = _PARSERS.get(version) if isinstance(version, int) and not isinstance(version, bool) else None
    if parser is None:
        raise SchemaError(f"Unsupported encodingVersion: {version!r}")

    doc = parser(raw)
    check_references(doc)
    logger.debug(
        "Parsed v%d document %r: %d shapes, %d sliders, %d combos, %d floaters, %d traversals",
        doc.encoding_version,
        doc.system_name,
        len(doc.shapes),
        len(doc.sliders),
        len(doc.combos),
        len(doc.floaters),
        len(doc.traversals),
    )
    return doc


def is_floater(entry: ComboEntry) -> bool:
    """A combo with any target short of full activation describes a floater."""
    return any(not nearly_equal(abs(t), 1.0) for _, t in entry.pairs)


def check_references(doc: SimplexDocument) -> None:
    """Reject dangling indices and invalid progressions/combos."""
    n_shapes = len(doc.shapes)
    n_progs = len(doc.progressions)
    n_sliders = len(doc.sliders)

    for prog in doc.progressions:
        for shape, _ in prog.pairs:
            if shape is not None and not 0 <= shape < n_shapes:
                raise SchemaError(f"Progression {prog.name!r} references missing shape {shape}")
        times = sorted(t for _, t in prog.pairs)
        for lo, hi in zip(times, times[1:]):
            if hi <= lo:
                raise SchemaError(f"Progression {prog.name!r} has duplicate position {hi}")

    for slider in doc.sliders:
        _check_prog(slider.name, slider.prog, n_progs)

    for kind, entries in (("Combo", doc.combos), ("Floater", doc.floaters)):
        for entry in entries:
            _check_prog(entry.name, entry.prog, n_progs)
            if not entry.pairs:
                raise SchemaError(f"{kind} {entry.name!r} has no slider pairs")
            seen: set[int] = set()
            for slider, target in entry.pairs:
                if not 0 <= slider < n_sliders:
                    raise SchemaError(f"{kind} {entry.name!r} references missing slider {slider}")
                if slider in seen:
                    raise SchemaError(f"{kind} {entry.name!r} uses slider {slider} twice")
                if target == 0.0 or abs(target) > 1.0:
                    raise SchemaError(f"{kind} {entry.name!r} has target {target} outside the nonzero range [-1, 1]")
                seen.add(slider)

    counts = {
        "slider": n_sliders,
        "combo": len(doc.combos),
        "floater": len(doc.floaters),
        "traversal": len(doc.traversals),
    }
    for trav in doc.traversals:
        _check_prog(trav.name, trav.prog, n_progs)
        for kind, index in ((trav.progress_type, trav.progress_control), (trav.multiplier_type, trav.multiplier_control)):
            if not 0 <= index < counts[kind]:
                raise SchemaError(f"Traversal {trav.name!r} references missing {kind} {index}")


def _check_prog(name: str, prog: int, n_progs: int) -> None:
    if not 0 <= prog < n_progs:
        raise SchemaError(f"{name!r} references missing progression {prog}")


def _byte_offset(text: str, pos: int) -> int:
    return len(text[:pos].encode("utf-8", errors="surrogatepass"))


def _validate(data: dict[str, Any]) -> SimplexDocument:
    try:
        return SimplexDocument.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first["loc"]) or "document"
        raise SchemaError(f"{loc}: {first['msg']}") from e


def _parse_v2(raw: dict[str, Any]) -> SimplexDocument:
    return _validate(raw)


def _parse_v1(raw: dict[str, Any]) -> SimplexDocument:
    """Version 1 stores every entity as a positional array."""
    data: dict[str, Any] = {
        "encodingVersion": 1,
        "systemName": raw.get("systemName", ""),
        "shapes": [{"name": name} for name in _v1_list(raw, "shapes")],
        "progressions": [],
        "sliders": [],
        "combos": [],
    }

    for i, entry in enumerate(_v1_list(raw, "progressions")):
        row = _v1_row(entry, "progressions", i, 3)
        shapes, times = row[1], row[2]
        if not isinstance(shapes, list) or not isinstance(times, list) or len(shapes) != len(times):
            raise SchemaError(f"progressions.{i}: shape and time lists must have equal length")
        prog: dict[str, Any] = {"name": row[0], "pairs": [list(p) for p in zip(shapes, times)]}
        if len(row) > 3:
            prog["interp"] = row[3]
        data["progressions"].append(prog)

    for i, entry in enumerate(_v1_list(raw, "sliders")):
        row = _v1_row(entry, "sliders", i, 2)
        data["sliders"].append({"name": row[0], "prog": row[1]})

    for i, entry in enumerate(_v1_list(raw, "combos")):
        row = _v1_row(entry, "combos", i, 3)
        data["combos"].append({"name": row[0], "prog": row[1], "pairs": row[2]})

    return _validate(data)


def _v1_list(raw: dict[str, Any], key: str) -> list[Any]:
    value = raw.get(key, [])
    if not isinstance(value, list):
        raise SchemaError(f"{key}: expected an array")
    return value


def _v1_row(entry: Any, key: str, index: int, min_len: int) -> list[Any]:
    if not isinstance(entry, list) or len(entry) < min_len:
        raise SchemaError(f"{key}.{index}: expected an array of at least {min_len} items")
    return entry


_PARSERS: dict[int, Callable[[dict[str, Any]], SimplexDocument]] = {
    1: _parse_v1,
    2: _parse_v2,
}
