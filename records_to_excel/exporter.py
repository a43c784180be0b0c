"""
Record exporter: writes a list of dataclass records into a sheet.

Layout:
  * Row 1 holds the headers, written while emitting the first output row.
  * Data starts at row 2; output row ``n`` (0-based) lands on row ``n + 2``.
  * A record whose nested sequence has ``k`` elements occupies
    ``max(1, k)`` rows.  The parent's plain columns are written once, on
    the first of those rows; each nested element fills the sub-columns of
    its own row.
"""

import logging
from typing import Any, Optional, Sequence

from .axis import cell_ref
from .cells import coerce_cell_value
from .config import ExportConfig, ExportMode
from .descriptor import describe_record
from .errors import (
    ConfigError,
    FieldNotExistError,
    RecordTypeError,
    SliceEmptyError,
    SubFieldNotExistError,
    SubSliceTypeError,
)
from .sink import OpenpyxlSheetSink, SheetSink
from .strategies import ExportStrategy, get_export_strategy

logger = logging.getLogger(__name__)

SHEET_NAME = "Sheet1"
HEADER_ROW = 1
DATA_ROW_OFFSET = 2


class RowEmitter:
    """Writes records row by row using a resolved export strategy."""

    def __init__(self, sink: SheetSink, sheet_name: str,
                 strategy: ExportStrategy, config: ExportConfig):
        self.sink = sink
        self.sheet_name = sheet_name
        self.strategy = strategy
        self.config = config
        self.headers = strategy.get_headers()

    def _write(self, axis, row, value):
        self.sink.set_cell_value(self.sheet_name, cell_ref(axis, row), value)

    def emit_record(self, record: Any, row: int) -> int:
        """Write *record* starting at output row *row*; return the next row."""
        descriptor = self.strategy.descriptor
        next_row = row + 1
        for i, header in enumerate(self.headers):
            field_name = self.strategy.get_field_name_by_header(header)
            info = descriptor.get(field_name)
            if info is None:
                raise FieldNotExistError()

            if field_name == self.config.sub_slice_field_name:
                if not info.is_sequence:
                    raise SubSliceTypeError()
                next_row = max(next_row, self.emit_sub_rows(record, row, i))
                continue

            axis = self.strategy.get_col_axis(i)
            if row == 0:
                self._write(axis, HEADER_ROW, header)
            value = coerce_cell_value(info.kind, getattr(record, field_name))
            self._write(axis, row + DATA_ROW_OFFSET, value)
        return next_row

    def emit_sub_rows(self, record: Any, row: int, col_index_begin: int) -> int:
        """
        Flatten the record's nested sequence into consecutive rows.

        Sub-column ``j`` is placed at resolved column ``col_index_begin + j``.

        Returns:
            The next free output row, ``row + max(1, len(sequence))``
        """
        sub_descriptor = self.strategy.sub_descriptor
        sub_headers = self.strategy.get_sub_headers()
        sub_items = getattr(record, self.config.sub_slice_field_name) or ()

        for offset, sub_item in enumerate(sub_items):
            cursor = row + offset
            for j, sub_header in enumerate(sub_headers):
                sub_field_name = self.strategy.get_sub_field_name_by_header(sub_header)
                info = sub_descriptor.get(sub_field_name)
                if info is None:
                    raise SubFieldNotExistError()
                axis = self.strategy.get_col_axis(col_index_begin + j)
                if cursor == 0:
                    self._write(axis, HEADER_ROW, sub_header)
                value = coerce_cell_value(info.kind, getattr(sub_item, sub_field_name))
                self._write(axis, cursor + DATA_ROW_OFFSET, value)

        return row + max(1, len(sub_items))


def export_excel_from_slice(records: Sequence[Any], export_config: Optional[ExportConfig],
                            sink: Optional[SheetSink] = None) -> None:
    """
    Export *records* to a single-sheet workbook.

    Args:
        records: Non-empty list or tuple of dataclass instances of one type
        export_config: Mode, destination and header mappings
        sink: Sheet sink to populate; defaults to a new openpyxl workbook

    Raises:
        ExportExcelError subclasses for invalid input or configuration;
        IO errors from the sink are passed through unchanged.
    """
    if not isinstance(records, (list, tuple)):
        raise RecordTypeError()
    if len(records) == 0:
        raise SliceEmptyError()
    if export_config is None or not export_config.has_destination():
        raise ConfigError()

    sink = sink if sink is not None else OpenpyxlSheetSink()
    index = sink.new_sheet(SHEET_NAME)

    strategy = get_export_strategy(export_config.mode)
    sample = records[0]
    strategy.init(describe_record(sample), sample, export_config)
    logger.info(f"Exporting {len(records)} {type(sample).__name__} records "
                f"with {type(strategy).__name__}")
    logger.debug(f"  Headers: {strategy.get_headers()}")
    if export_config.sub_slice_field_name:
        logger.debug(f"  Sub headers: {strategy.get_sub_headers()}")

    emitter = RowEmitter(sink, SHEET_NAME, strategy, export_config)
    row = 0
    for record in records:
        row = emitter.emit_record(record, row)
    logger.info(f"  Wrote {row} data rows")

    sink.set_active_sheet(index)
    if export_config.output_path:
        sink.save_as(export_config.output_path)
    else:
        sink.write(export_config.output_writer)


def export_excel(records: Sequence[Any], output_path: str) -> None:
    """Export the ``xlsx``-tagged fields of *records* to *output_path*."""
    export_excel_from_slice(records, ExportConfig(mode=ExportMode.TAGGED_FIELD,
                                                  output_path=output_path))
