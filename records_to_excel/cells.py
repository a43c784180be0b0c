"""
Cell value coercion: turn a record field value into something the sheet
sink can store, based on the field's kind.
"""

import collections.abc
import dataclasses
import json

from .descriptor import FieldKind


def _key_text(key) -> str:
    """Render a mapping key the way JSON renders scalar keys."""
    if isinstance(key, str):
        return key
    if key is None or isinstance(key, (bool, int, float)):
        return json.dumps(key)
    return str(key)


def _to_plain(value):
    """Rewrite *value* into JSON-ready data with string keys only."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)
    if isinstance(value, collections.abc.Mapping):
        return {_key_text(k): _to_plain(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted((_to_plain(v) for v in value), key=repr)
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    return value


def encode_structured(value) -> str:
    """Serialise *value* as JSON text with sorted keys."""
    return json.dumps(_to_plain(value), sort_keys=True, ensure_ascii=False, default=str)


def coerce_cell_value(kind: FieldKind, value):
    """Return the sink-writable form of *value* for a field of *kind*."""
    if kind is FieldKind.OTHER:
        return encode_structured(value)
    if value is None:
        return None
    if kind is FieldKind.TEXT:
        return value
    if kind in (FieldKind.SIGNED, FieldKind.UNSIGNED):
        return int(value)
    if kind is FieldKind.BOOL:
        return bool(value)
    if kind is FieldKind.FLOAT:
        return float(value)
    raise ValueError(f"Unknown field kind: {kind!r}")
