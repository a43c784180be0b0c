"""
Sheet sink: the object that stores cell values and persists the workbook.

The exporter only talks to the small :class:`SheetSink` interface;
:class:`OpenpyxlSheetSink` implements it on top of an openpyxl workbook.
"""

import logging
import os
from typing import IO, Any

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

logger = logging.getLogger(__name__)


class SheetSink:
    """Interface of a sheet sink."""

    def new_sheet(self, name: str) -> int:
        """Create (or select) sheet *name* and return its index."""
        raise NotImplementedError

    def set_cell_value(self, sheet: str, ref: str, value: Any) -> None:
        raise NotImplementedError

    def set_active_sheet(self, index: int) -> None:
        raise NotImplementedError

    def save_as(self, path: str) -> None:
        raise NotImplementedError

    def write(self, stream: IO[bytes]) -> None:
        raise NotImplementedError


class OpenpyxlSheetSink(SheetSink):
    """Sheet sink backed by an in-memory :class:`openpyxl.Workbook`."""

    def __init__(self):
        self.workbook = Workbook()
        # Drop the default "Sheet"; sheets are created on demand.
        self.workbook.remove(self.workbook.active)

    def new_sheet(self, name):
        if name not in self.workbook.sheetnames:
            self.workbook.create_sheet(title=name)
        return self.workbook.sheetnames.index(name)

    def set_cell_value(self, sheet, ref, value):
        if isinstance(value, str):
            # Control characters cannot be stored in xlsx XML.
            value = ILLEGAL_CHARACTERS_RE.sub("", value)
        cell = self.workbook[sheet][ref]
        cell.value = value
        if isinstance(value, str):
            # Text is stored as text, never as a formula.
            cell.data_type = "s"

    def set_active_sheet(self, index):
        self.workbook.active = index

    def save_as(self, path):
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        self.workbook.save(path)
        logger.info(f"Saved workbook: {path}")

    def write(self, stream):
        self.workbook.save(stream)
        logger.info("Wrote workbook to output stream")
