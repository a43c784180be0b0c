"""
Record Descriptor Module
========================
Introspects one sample record (a dataclass instance) and describes its
fields: name, semantic kind, whether it holds a nested sequence, and the
optional ``xlsx`` column annotation carried in the field metadata.

The descriptor is built once per export from the first record and reused
for every other record.
"""

import collections.abc
import dataclasses
import logging
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NewType, Optional, Union

from .errors import RecordTypeError

logger = logging.getLogger(__name__)

XLSX_TAG_NAME = "xlsx"

# Marks an ``int`` field as unsigned; it is still a plain int at runtime.
UInt = NewType("UInt", int)

_SEQUENCE_ORIGINS = (list, tuple, collections.abc.Sequence,
                     collections.abc.MutableSequence)

_BUILTIN_NAMES = {"str": str, "int": int, "float": float, "bool": bool,
                  "UInt": UInt}


class FieldKind(Enum):
    TEXT = "text"
    SIGNED = "signed"
    UNSIGNED = "unsigned"
    BOOL = "bool"
    FLOAT = "float"
    OTHER = "other"


@dataclass
class FieldInfo:
    """Stores what the exporter needs to know about one record field."""
    name: str
    kind: FieldKind
    is_sequence: bool = False
    tag: Optional[str] = None


@dataclass
class RecordDescriptor:
    """Ordered field list of one record type."""
    type_name: str
    fields: list = field(default_factory=list)  # [FieldInfo]
    _by_name: dict = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        self._by_name = {f.name: f for f in self.fields}

    @property
    def field_names(self):
        return [f.name for f in self.fields]

    def get(self, name: str) -> Optional[FieldInfo]:
        return self._by_name.get(name)

    def __contains__(self, name):
        return name in self._by_name

    def __len__(self):
        return len(self.fields)


def _unwrap_optional(annotation):
    """Return ``X`` for ``Optional[X]``; anything else unchanged."""
    if typing.get_origin(annotation) is Union:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_sequence_annotation(annotation) -> bool:
    if annotation in (list, tuple):
        return True
    return typing.get_origin(annotation) in _SEQUENCE_ORIGINS


def classify_annotation(annotation) -> FieldKind:
    """Map a type annotation to a :class:`FieldKind`."""
    if isinstance(annotation, str):
        annotation = _BUILTIN_NAMES.get(annotation.strip(), annotation)
    annotation = _unwrap_optional(annotation)
    if annotation is UInt:
        return FieldKind.UNSIGNED
    # bool before int: bool is an int subclass
    if annotation is bool:
        return FieldKind.BOOL
    if annotation is str:
        return FieldKind.TEXT
    if annotation is int:
        return FieldKind.SIGNED
    if annotation is float:
        return FieldKind.FLOAT
    return FieldKind.OTHER


def describe_record(sample: Any) -> RecordDescriptor:
    """
    Build the descriptor of *sample*'s type.

    Args:
        sample: A dataclass instance (not a dataclass type)

    Returns:
        RecordDescriptor listing the fields in declaration order

    Raises:
        RecordTypeError: if *sample* is not a dataclass instance
    """
    if not dataclasses.is_dataclass(sample) or isinstance(sample, type):
        raise RecordTypeError(
            f"records must be dataclass instances, got {type(sample).__name__}")

    record_type = type(sample)
    try:
        hints = typing.get_type_hints(record_type)
    except (NameError, TypeError):
        # Unresolvable forward references; fall back to the raw annotations.
        hints = {}

    fields = []
    for f in dataclasses.fields(record_type):
        annotation = hints.get(f.name, f.type)
        inner = _unwrap_optional(annotation)
        fields.append(FieldInfo(
            name=f.name,
            kind=classify_annotation(annotation),
            is_sequence=_is_sequence_annotation(inner),
            tag=f.metadata.get(XLSX_TAG_NAME),
        ))

    descriptor = RecordDescriptor(type_name=record_type.__name__, fields=fields)
    logger.debug(f"Described {descriptor.type_name}: {descriptor.field_names}")
    return descriptor
