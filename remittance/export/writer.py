"""Render schedule artifacts to .xlsx with openpyxl.

This is the only module that touches the spreadsheet engine. Formats are
applied on top of values; a value is written exactly as the exporter built it.

Based on openpyxl documentation:
https://openpyxl.readthedocs.io/en/stable/styles.html
"""

import io
import logging
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from remittance.export.artifact import Artifact, Cell, CellFormat, Sheet

logger = logging.getLogger(__name__)


class WorkbookWriter:
    """Writes Artifact descriptors as Excel workbooks."""

    def render(self, artifact: Artifact) -> Workbook:
        """Build an in-memory openpyxl workbook for the artifact."""
        workbook = Workbook()
        # Drop the default empty sheet; the artifact defines every sheet
        workbook.remove(workbook.active)

        for sheet in artifact.sheets:
            worksheet = workbook.create_sheet(title=sheet.title)
            self._fill_sheet(worksheet, sheet)

        return workbook

    def to_bytes(self, artifact: Artifact) -> bytes:
        """Serialize the artifact to .xlsx bytes."""
        buffer = io.BytesIO()
        self.render(artifact).save(buffer)
        return buffer.getvalue()

    def write(self, artifact: Artifact, output_dir: Path) -> Path:
        """Write the artifact into output_dir under its synthesized filename.

        Returns:
            Path of the written file
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / artifact.filename
        self.render(artifact).save(path)
        logger.info(f"Wrote schedule to {path}")
        return path

    def _fill_sheet(self, worksheet: Worksheet, sheet: Sheet) -> None:
        for row_index, row in enumerate(sheet.rows, start=1):
            for column_index, cell in enumerate(row, start=1):
                if cell.value is None and cell.format.is_plain:
                    continue
                self._write_cell(worksheet, row_index, column_index, cell)

        for column_index, width in enumerate(sheet.column_widths, start=1):
            worksheet.column_dimensions[get_column_letter(column_index)].width = width

    def _write_cell(self, worksheet: Worksheet, row: int, column: int, cell: Cell) -> None:
        target = worksheet.cell(row=row, column=column, value=cell.value)
        fmt = cell.format
        if fmt.is_plain:
            return

        if fmt.bold or fmt.font_size is not None:
            target.font = Font(bold=fmt.bold, size=fmt.font_size)
        if fmt.number_format is not None:
            target.number_format = fmt.number_format
        border = _border(fmt)
        if border is not None:
            target.border = border
        if fmt.fill is not None:
            target.fill = PatternFill(fill_type="solid", fgColor=fmt.fill)
        if fmt.horizontal is not None:
            target.alignment = Alignment(horizontal=fmt.horizontal, vertical="center")


def _border(fmt: CellFormat) -> Border | None:
    if fmt.border is None and fmt.bottom_border is None:
        return None
    edge = Side(style=fmt.border) if fmt.border else Side()
    bottom = Side(style=fmt.bottom_border) if fmt.bottom_border else edge
    return Border(left=edge, right=edge, top=edge, bottom=bottom)
