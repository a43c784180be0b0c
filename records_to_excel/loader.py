"""
Build dataclass records from plain dicts (for example a JSON array).

Field names come from the first row.  Each field is typed from its first
non-null value across all rows: ``str``, ``bool``, ``int`` and ``float``
values keep their type (as ``Optional``), a list of objects becomes a list of
a nested dataclass, anything else is typed ``Any``.  Optional ``tags``
and ``sub_tags`` map field names to ``xlsx`` annotations.
"""

import json
import keyword
import logging
import re
from dataclasses import field, make_dataclass
from typing import Any, List, Optional

from .descriptor import XLSX_TAG_NAME
from .errors import RecordTypeError, SliceEmptyError

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _check_field_name(name):
    if not isinstance(name, str) or not _IDENTIFIER_RE.match(name) or keyword.iskeyword(name):
        raise RecordTypeError(f"field name is not a valid identifier: {name!r}")


def _infer_type(values):
    """Type of the first non-null value in *values*, as ``Optional[...]``."""
    for value in values:
        if value is None:
            continue
        for candidate in (bool, str, int, float):
            if type(value) is candidate:
                if candidate is int and any(type(v) is float for v in values):
                    return Optional[float]
                return Optional[candidate]
        return Any
    return Any


def build_record_type(class_name: str, rows: List[dict], tags: Optional[dict] = None,
                      sub_field_name: str = "", sub_tags: Optional[dict] = None):
    """
    Create a dataclass type describing *rows*, keyed like the first row.

    Returns:
        (record_type, sub_record_type) – the second item is ``None`` unless
        *sub_field_name* names a list of objects in *rows*.
    """
    tags = tags or {}
    sub_type = None
    fields = []
    for name in rows[0]:
        _check_field_name(name)
        values = [row.get(name) for row in rows]
        annotation = _infer_type(values)
        if name == sub_field_name and any(isinstance(v, list) for v in values):
            items = [item for v in values if isinstance(v, list)
                     for item in v if isinstance(item, dict)]
            if items:
                sub_type, _ = build_record_type(f"{class_name}Item", items, sub_tags)
                annotation = List[sub_type]
            else:
                annotation = list
        metadata = {XLSX_TAG_NAME: tags[name]} if name in tags else {}
        fields.append((name, annotation, field(default=None, metadata=metadata)))
    return make_dataclass(class_name, fields), sub_type


def records_from_dicts(rows: List[dict], class_name: str = "Record",
                       tags: Optional[dict] = None, sub_field_name: str = "",
                       sub_tags: Optional[dict] = None) -> list:
    """Convert *rows* into instances of a dataclass inferred from the rows."""
    if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
        raise RecordTypeError("records must be a list of objects")
    if not rows:
        raise SliceEmptyError()

    record_type, sub_type = build_record_type(
        class_name, rows, tags, sub_field_name, sub_tags)
    known = set(rows[0])

    records = []
    for row in rows:
        values = {k: v for k, v in row.items() if k in known}
        if sub_type is not None and isinstance(values.get(sub_field_name), list):
            values[sub_field_name] = [
                sub_type(**{k: v for k, v in item.items()
                            if k in sub_type.__dataclass_fields__})
                for item in values[sub_field_name]
            ]
        records.append(record_type(**values))
    logger.debug(f"Loaded {len(records)} records as {class_name}")
    return records


def load_records(json_path: str, **kwargs) -> list:
    """Read a JSON array of objects from *json_path* and build records."""
    with open(json_path, "r", encoding="utf-8") as f:
        rows = json.load(f)
    return records_from_dicts(rows, **kwargs)
