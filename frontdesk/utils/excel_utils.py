"""
Excel workbook generation for history exports
"""

import io
import re
from typing import Any, Dict, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

MAX_SHEET_NAME_LENGTH = 31
_INVALID_SHEET_CHARS = re.compile(r'[\[\]:*?/\\]')


def safe_sheet_name(name: str) -> str:
    """Strip characters Excel rejects and cut to its 31-character limit."""
    return _INVALID_SHEET_CHARS.sub('', name)[:MAX_SHEET_NAME_LENGTH]


class ExcelGenerator:
    """Build a workbook sheet by sheet and hand it back as bytes"""

    def __init__(self):
        self.workbook = None
        self.default_styles = self._create_default_styles()

    def _create_default_styles(self) -> Dict[str, Dict[str, Any]]:
        """Create default cell styles"""
        thin = Side(style='thin')
        return {
            'header': {
                'font': Font(bold=True, color='FFFFFF'),
                'fill': PatternFill(start_color='366092', end_color='366092', fill_type='solid'),
                'alignment': Alignment(horizontal='center', vertical='center'),
                'border': Border(left=thin, right=thin, top=thin, bottom=thin),
            },
            'data': {
                'font': Font(size=10),
                'alignment': Alignment(horizontal='left', vertical='center'),
                'border': Border(left=thin, right=thin, top=thin, bottom=thin),
            },
        }

    def create_workbook(self) -> Workbook:
        """Create a new Excel workbook"""
        self.workbook = Workbook()
        # Remove default sheet
        self.workbook.remove(self.workbook.active)
        return self.workbook

    def add_worksheet(
        self,
        name: str,
        headers: Sequence[str],
        data: List[Sequence[Any]],
        column_widths: Optional[Sequence[int]] = None,
    ) -> str:
        """
        Add a sheet with a styled header row followed by data rows.

        Returns:
            The sheet name actually used
        """
        if not self.workbook:
            self.create_workbook()

        sheet_name = safe_sheet_name(name)
        ws = self.workbook.create_sheet(title=sheet_name)

        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=header)
            self._apply_style(cell, self.default_styles['header'])

        for row_idx, row_data in enumerate(data, 2):
            for col_idx, cell_value in enumerate(row_data, 1):
                cell = ws.cell(row=row_idx, column=col_idx, value=cell_value)
                self._apply_style(cell, self.default_styles['data'])

        if column_widths:
            for col, width in enumerate(column_widths, 1):
                ws.column_dimensions[get_column_letter(col)].width = width
        else:
            self._auto_adjust_columns(ws)

        ws.freeze_panes = 'A2'
        return sheet_name

    def _apply_style(self, cell, style_dict: Dict[str, Any]):
        """Apply style to a cell"""
        for attr, value in style_dict.items():
            setattr(cell, attr, value)

    def _auto_adjust_columns(self, worksheet):
        """Auto-adjust column widths"""
        for column_cells in worksheet.columns:
            length = max(len(str(cell.value or '')) for cell in column_cells)
            worksheet.column_dimensions[get_column_letter(column_cells[0].column)].width = min(length + 2, 50)

    def to_bytes(self) -> bytes:
        """Serialize the workbook to .xlsx bytes"""
        if not self.workbook:
            raise ValueError("No workbook to save")
        buffer = io.BytesIO()
        self.workbook.save(buffer)
        return buffer.getvalue()
