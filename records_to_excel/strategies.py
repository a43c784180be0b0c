"""
Export Strategies
=================
Decide which record fields become columns, the header text of each
column and where the column sits.

Three strategies share one interface:

  * **TaggedFieldStrategy** – only fields annotated ``"<axis>-<header>"``
    in their ``xlsx`` metadata; the annotation fixes the column letter.
  * **AllFieldStrategy** – every field, headers are the field names,
    columns assigned left to right.
  * **ByHeadersStrategy** – the caller lists headers and maps each one
    to a field name.

A strategy is initialised once against the first record.  When the
config names a nested sequence field, that field is appended to the
headers as a pseudo-header mapping to itself, and the sub-headers are
resolved from the first element of the first record's sequence.
"""

import logging
from typing import Any, List, Optional

from .axis import index_to_col_letter
from .config import ExportConfig, ExportMode
from .descriptor import RecordDescriptor, describe_record
from .errors import (
    AxisOutOfIndexError,
    ExportModeNotExistError,
    FieldNotExistError,
    HeaderConfigError,
    NoXlsxTagFoundError,
    SubFieldNotExistError,
    SubSliceEmptyError,
    SubSliceNotExistError,
    SubSliceTypeError,
)

logger = logging.getLogger(__name__)


def parse_xlsx_tag(tag: Optional[str]):
    """Split ``"A-Name"`` into ``("A", "Name")``; ``None`` if malformed."""
    if not tag:
        return None
    parts = tag.split("-")
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


# ------------------------------------------------------------------
# Base class
# ------------------------------------------------------------------

class ExportStrategy:
    """Common state and nested-sequence handling for all strategies."""

    def __init__(self):
        self.descriptor: Optional[RecordDescriptor] = None
        self.sub_descriptor: Optional[RecordDescriptor] = None
        self.headers: List[str] = []
        self.sub_headers: List[str] = []

    def init(self, descriptor: RecordDescriptor, sample: Any,
             config: ExportConfig) -> None:
        raise NotImplementedError

    def get_headers(self) -> List[str]:
        return self.headers

    def get_sub_headers(self) -> List[str]:
        return self.sub_headers

    def get_field_name_by_header(self, header: str) -> str:
        raise NotImplementedError

    def get_sub_field_name_by_header(self, header: str) -> str:
        raise NotImplementedError

    def get_col_axis(self, column_num: int) -> str:
        """Column letter for the 0-based resolved column *column_num*."""
        return index_to_col_letter(column_num + 1)

    def _resolve_sub_slice(self, sample, config: ExportConfig) -> RecordDescriptor:
        """Check the configured nested field and describe its first element."""
        name = config.sub_slice_field_name
        info = self.descriptor.get(name)
        if info is None:
            raise SubSliceNotExistError()
        if not info.is_sequence:
            raise SubSliceTypeError()
        sub_slice = getattr(sample, name)
        if sub_slice is None or len(sub_slice) == 0:
            raise SubSliceEmptyError()
        self.sub_descriptor = describe_record(sub_slice[0])
        return self.sub_descriptor


# ------------------------------------------------------------------
# Tagged fields
# ------------------------------------------------------------------

class TaggedFieldStrategy(ExportStrategy):
    """Export only the fields carrying an ``xlsx`` annotation."""

    def __init__(self):
        super().__init__()
        self.column_axis: List[str] = []
        self.header_to_field: dict = {}
        self.sub_header_to_field: dict = {}

    def init(self, descriptor, sample, config):
        self.descriptor = descriptor
        for info in descriptor.fields:
            parsed = parse_xlsx_tag(info.tag)
            if parsed is None:
                continue
            axis, header = parsed
            self.column_axis.append(axis)
            self.headers.append(header)
            self.header_to_field[header] = info.name
        if not self.headers:
            raise NoXlsxTagFoundError()

        if config.sub_slice_field_name:
            name = config.sub_slice_field_name
            self.headers.append(name)
            self.header_to_field[name] = name
            sub_descriptor = self._resolve_sub_slice(sample, config)
            for info in sub_descriptor.fields:
                parsed = parse_xlsx_tag(info.tag)
                if parsed is None:
                    continue
                axis, header = parsed
                # Sub-columns follow the nested pseudo-header's axis slot.
                self.column_axis.append(axis)
                self.sub_headers.append(header)
                self.sub_header_to_field[header] = info.name

    def get_field_name_by_header(self, header):
        try:
            return self.header_to_field[header]
        except KeyError:
            raise FieldNotExistError() from None

    def get_sub_field_name_by_header(self, header):
        try:
            return self.sub_header_to_field[header]
        except KeyError:
            raise SubFieldNotExistError() from None

    def get_col_axis(self, column_num):
        if 0 <= column_num < len(self.column_axis):
            return self.column_axis[column_num]
        raise AxisOutOfIndexError()


# ------------------------------------------------------------------
# All fields
# ------------------------------------------------------------------

class AllFieldStrategy(ExportStrategy):
    """Export every field, headed by its own name."""

    def init(self, descriptor, sample, config):
        self.descriptor = descriptor
        self.headers = [name for name in descriptor.field_names
                        if name != config.sub_slice_field_name]
        if not self.headers:
            raise NoXlsxTagFoundError()

        if config.sub_slice_field_name:
            self.headers.append(config.sub_slice_field_name)
            sub_descriptor = self._resolve_sub_slice(sample, config)
            self.sub_headers = list(sub_descriptor.field_names)

    def get_field_name_by_header(self, header):
        return header

    def get_sub_field_name_by_header(self, header):
        return header


# ------------------------------------------------------------------
# Caller-chosen headers
# ------------------------------------------------------------------

class ByHeadersStrategy(ExportStrategy):
    """Export the fields named by ``config.headers``/``header_to_field``."""

    def __init__(self):
        super().__init__()
        self.header_to_field: dict = {}
        self.sub_header_to_field: dict = {}

    def init(self, descriptor, sample, config):
        if not config.headers or len(config.header_to_field) != len(config.headers):
            raise HeaderConfigError()
        self.descriptor = descriptor
        self.header_to_field = dict(config.header_to_field)
        field_to_header = {f: h for h, f in config.header_to_field.items()}

        # Field declaration order; headers naming absent fields are dropped.
        for name in descriptor.field_names:
            if name == config.sub_slice_field_name:
                continue
            if name in field_to_header:
                self.headers.append(field_to_header[name])
        dropped = [h for h, f in config.header_to_field.items() if f not in descriptor]
        if dropped:
            logger.debug(f"Headers without a matching field were skipped: {dropped}")

        if config.sub_slice_field_name:
            name = config.sub_slice_field_name
            self.header_to_field[name] = name
            self.headers.append(name)
            sub_descriptor = self._resolve_sub_slice(sample, config)
            if config.sub_header_to_field:
                self.sub_header_to_field = dict(config.sub_header_to_field)
                sub_field_to_header = {f: h for h, f in config.sub_header_to_field.items()}
                self.sub_headers = [sub_field_to_header[n] for n in sub_descriptor.field_names
                                    if n in sub_field_to_header]
            else:
                self.sub_headers = list(sub_descriptor.field_names)
                self.sub_header_to_field = {n: n for n in self.sub_headers}

    def get_field_name_by_header(self, header):
        try:
            return self.header_to_field[header]
        except KeyError:
            raise FieldNotExistError() from None

    def get_sub_field_name_by_header(self, header):
        try:
            return self.sub_header_to_field[header]
        except KeyError:
            raise SubFieldNotExistError() from None


_STRATEGIES = {
    ExportMode.TAGGED_FIELD: TaggedFieldStrategy,
    ExportMode.ALL_FIELD: AllFieldStrategy,
    ExportMode.BY_HEADERS: ByHeadersStrategy,
}


def get_export_strategy(mode) -> ExportStrategy:
    """Return a fresh strategy for *mode*."""
    strategy_cls = _STRATEGIES.get(ExportMode.parse(mode))
    if strategy_cls is None:
        raise ExportModeNotExistError()
    return strategy_cls()
