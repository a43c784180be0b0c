"""
Exceptions raised while exporting records to a sheet.

Every error derives from :class:`ExportExcelError` so callers can catch
the whole family at once.  Messages are fixed strings; there is no
partial-success mode, the first error aborts the export.
"""


class ExportExcelError(Exception):
    """Base class for all export failures."""

    message = "export failed"

    def __init__(self, message=None):
        super().__init__(message or self.message)


class RecordTypeError(ExportExcelError):
    message = "records is not slice"


class SubSliceTypeError(ExportExcelError):
    message = "sub slice's field type is not slice"


class ConfigError(ExportExcelError):
    message = "export config err"


class SliceEmptyError(ExportExcelError):
    message = "slice is empty"


class SubSliceEmptyError(ExportExcelError):
    message = "sub slice is empty"


class HeaderConfigError(ExportExcelError):
    message = "header config err"


class FieldNotExistError(ExportExcelError):
    message = "header field not exist"


class SubFieldNotExistError(ExportExcelError):
    message = "sub field not exist"


class SubSliceNotExistError(ExportExcelError):
    message = "header sub slice not exist"


class ExportModeNotExistError(ExportExcelError):
    message = "export mode not exist"


class NoXlsxTagFoundError(ExportExcelError):
    message = "xlsx tag not found"


class AxisOutOfIndexError(ExportExcelError):
    message = "column axis out of index"
