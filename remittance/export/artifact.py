"""Spreadsheet artifacts expressed as data.

Exporters build these descriptors; only the workbook writer turns them into
an .xlsx file. Tests can therefore inspect values and formats directly.
"""

from dataclasses import dataclass, field
from typing import Any, Literal

DATE_FORMAT = "dd/mm/yyyy"
AMOUNT_FORMAT = "#,##0.00"


@dataclass(frozen=True)
class CellFormat:
    """Visual format of one cell. Never affects the stored value."""

    bold: bool = False
    font_size: int | None = None
    number_format: str | None = None
    border: Literal["thin"] | None = None
    bottom_border: Literal["thin", "double"] | None = None
    fill: str | None = None  # RGB hex, e.g. "EEEEEE"
    horizontal: Literal["left", "center", "right"] | None = None

    @property
    def is_plain(self) -> bool:
        return self == PLAIN


PLAIN = CellFormat()


@dataclass(frozen=True)
class Cell:
    value: Any
    format: CellFormat = PLAIN


Row = list[Cell]


@dataclass
class Sheet:
    """One worksheet: title, rows (row 1 first) and column widths in characters."""

    title: str
    rows: list[Row] = field(default_factory=list)
    column_widths: list[int] = field(default_factory=list)

    def append(self, *cells: Cell) -> None:
        self.rows.append(list(cells))

    def append_blank(self) -> None:
        self.rows.append([])

    def cell(self, row: int, column: int) -> Cell | None:
        """Cell at 1-based (row, column), or None if nothing is there."""
        if row < 1 or row > len(self.rows):
            return None
        cells = self.rows[row - 1]
        if column < 1 or column > len(cells):
            return None
        return cells[column - 1]

    def values(self) -> list[list[Any]]:
        return [[cell.value for cell in row] for row in self.rows]


@dataclass
class Artifact:
    """A complete workbook ready to be written."""

    basename: str
    sheets: list[Sheet] = field(default_factory=list)

    @property
    def filename(self) -> str:
        return f"{self.basename}.xlsx"

    def sheet(self, title: str) -> Sheet:
        for sheet in self.sheets:
            if sheet.title == title:
                return sheet
        raise KeyError(title)
