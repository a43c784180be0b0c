"""Records-to-Excel exporter.

Writes a list of dataclass records into a single worksheet.  Which fields
become columns, and under which headers, is decided by one of three
strategies selected through :class:`ExportConfig.mode`:

  * **Tagged field** – fields annotated ``metadata={"xlsx": "A-Name"}``,
    placed at the annotated column.
  * **All field** – every field, headed by its name.
  * **By headers** – caller-supplied headers mapped to field names.

One nested list field per record can be flattened into extra rows.
"""

from .axis import col_letter_to_index, index_to_col_letter
from .config import ExportConfig, ExportMode, load_export_config
from .descriptor import UInt, FieldKind, describe_record
from .errors import (
    AxisOutOfIndexError,
    ConfigError,
    ExportExcelError,
    ExportModeNotExistError,
    FieldNotExistError,
    HeaderConfigError,
    NoXlsxTagFoundError,
    RecordTypeError,
    SliceEmptyError,
    SubFieldNotExistError,
    SubSliceEmptyError,
    SubSliceNotExistError,
    SubSliceTypeError,
)
from .exporter import export_excel, export_excel_from_slice

__all__ = [
    "export_excel",
    "export_excel_from_slice",
    "ExportConfig",
    "ExportMode",
    "load_export_config",
    "describe_record",
    "FieldKind",
    "UInt",
    "index_to_col_letter",
    "col_letter_to_index",
    "ExportExcelError",
    "RecordTypeError",
    "SubSliceTypeError",
    "ConfigError",
    "SliceEmptyError",
    "SubSliceEmptyError",
    "HeaderConfigError",
    "FieldNotExistError",
    "SubFieldNotExistError",
    "SubSliceNotExistError",
    "ExportModeNotExistError",
    "NoXlsxTagFoundError",
    "AxisOutOfIndexError",
]
