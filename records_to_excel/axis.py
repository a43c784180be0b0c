"""
Column axis helpers: convert between 1-based column positions and the
letter identifiers used in spreadsheet cell references (A, B, ..., Z, AA).
"""

import re

_LETTERS_RE = re.compile(r"^[A-Za-z]+$")


def index_to_col_letter(index: int) -> str:
    """Convert 1-based column index to letter(s). 1=A, 2=B, ..., 26=Z, 27=AA."""
    if index < 1:
        raise ValueError(f"Column index must be positive, got {index}")
    result = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        result = chr(65 + remainder) + result
    return result


def col_letter_to_index(col_str: str) -> int:
    """Convert column letter(s) to 1-based index. A=1, B=2, ..., Z=26, AA=27."""
    if not _LETTERS_RE.match(col_str or ""):
        raise ValueError(f"Invalid column letters: {col_str!r}")
    result = 0
    for char in col_str.upper():
        result = result * 26 + (ord(char) - ord('A') + 1)
    return result


def cell_ref(col_letter: str, row: int) -> str:
    """Build an A1-style reference such as ``"C12"``."""
    return f"{col_letter}{row}"
