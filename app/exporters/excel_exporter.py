"""
Excel export helper wrapping xlsxwriter.

Provides ``ExcelExporter`` — a builder that writes one styled worksheet in
memory and returns its bytes for streaming via FastAPI's
``StreamingResponse``.

Usage example::

    exporter = ExcelExporter(title="Contratos", filters={"Búsqueda": "frutas"})
    exporter.add_header()
    exporter.add_kpi_row({"Registros": 12})
    exporter.add_data_table(headers, rows)
    file_bytes = exporter.finalize()

Design notes
------------
- Column widths follow the longest value in each column, capped at 60.
- Numeric cells use ``#,##0.00`` and are right-aligned; every other cell is
  written as text.
- Data rows alternate white / light grey.
"""

from __future__ import annotations

import io
from datetime import datetime
from typing import Any, Sequence

try:
    import xlsxwriter
    from xlsxwriter.workbook import Workbook
    from xlsxwriter.worksheet import Worksheet
    _XLSXWRITER_AVAILABLE = True
except ImportError:
    _XLSXWRITER_AVAILABLE = False


_COLOR_PRIMARY = "#3B82F6"
_COLOR_WHITE = "#FFFFFF"
_COLOR_LIGHT_GREY = "#F3F4F6"
_COLOR_SUBHEADER_BG = "#1E3A5F"
_COLOR_BORDER = "#E5E7EB"

_MAX_COL_WIDTH = 60
_MIN_COL_WIDTH = 8
_HEADER_MIN_COLS = 5

_APP_TITLE = "SAV-Faa"


class ExcelExporter:
    """Single-sheet workbook builder for table exports.

    Args:
        title: Title shown in the merged header row, e.g. ``"Contratos"``.
        filters: Applied filters to list under the title,
                 e.g. ``{"Búsqueda": "frutas", "Orden": "monto_maximo desc"}``.
        sheet_name: Worksheet tab name (Excel caps it at 31 characters).

    Raises:
        ImportError: If ``xlsxwriter`` is not installed.
    """

    def __init__(
        self,
        title: str,
        filters: dict[str, str] | None = None,
        sheet_name: str = "Datos",
    ) -> None:
        if not _XLSXWRITER_AVAILABLE:
            raise ImportError(
                "xlsxwriter is required for Excel export. "
                "Install it with: pip install xlsxwriter"
            )

        self._title = title
        self._filters = filters or {}

        self._buffer = io.BytesIO()
        self._workbook: Workbook = xlsxwriter.Workbook(self._buffer, {"in_memory": True})
        self._worksheet: Worksheet = self._workbook.add_worksheet(sheet_name[:31])

        self._current_row: int = 0
        self._num_cols: int = _HEADER_MIN_COLS
        self._formats: dict[str, Any] = self._build_formats()

    # -----------------------------------------------------------------------
    # Format factory
    # -----------------------------------------------------------------------

    def _build_formats(self) -> dict[str, Any]:
        wb = self._workbook
        base_cell = {
            "font_size": 9,
            "font_color": "#111827",
            "valign": "vcenter",
            "border": 1,
            "border_color": _COLOR_BORDER,
        }
        return {
            "title": wb.add_format({
                "bold": True, "font_size": 16, "font_color": _COLOR_WHITE,
                "bg_color": _COLOR_PRIMARY, "align": "center", "valign": "vcenter",
            }),
            "subtitle": wb.add_format({
                "font_size": 10, "font_color": _COLOR_WHITE,
                "bg_color": _COLOR_SUBHEADER_BG, "align": "center", "valign": "vcenter",
            }),
            "filter_key": wb.add_format({
                "bold": True, "font_size": 9, "font_color": "#374151",
                "bg_color": _COLOR_BORDER, "align": "right", "valign": "vcenter",
            }),
            "filter_value": wb.add_format({
                "font_size": 9, "font_color": "#111827",
                "bg_color": "#F9FAFB", "align": "left", "valign": "vcenter",
            }),
            "kpi_label": wb.add_format({
                "bold": True, "font_size": 10, "font_color": "#374151",
                "bg_color": "#EFF6FF", "align": "center", "valign": "vcenter",
                "border": 1, "border_color": "#BFDBFE",
            }),
            "kpi_value": wb.add_format({
                "bold": True, "font_size": 12, "font_color": _COLOR_PRIMARY,
                "bg_color": "#EFF6FF", "align": "center", "valign": "vcenter",
                "num_format": "#,##0.##", "border": 1, "border_color": "#BFDBFE",
            }),
            "col_header": wb.add_format({
                "bold": True, "font_size": 10, "font_color": _COLOR_WHITE,
                "bg_color": _COLOR_SUBHEADER_BG, "align": "center", "valign": "vcenter",
                "border": 1, "border_color": "#CBD5E1", "text_wrap": True,
            }),
            "text": wb.add_format({**base_cell, "bg_color": _COLOR_WHITE, "align": "left"}),
            "text_alt": wb.add_format({**base_cell, "bg_color": _COLOR_LIGHT_GREY, "align": "left"}),
            "number": wb.add_format({
                **base_cell, "bg_color": _COLOR_WHITE, "align": "right", "num_format": "#,##0.00",
            }),
            "number_alt": wb.add_format({
                **base_cell, "bg_color": _COLOR_LIGHT_GREY, "align": "right",
                "num_format": "#,##0.00",
            }),
        }

    # -----------------------------------------------------------------------
    # Public builder methods
    # -----------------------------------------------------------------------

    def set_columns(self, num_cols: int) -> "ExcelExporter":
        """Declare the table width so the header spans every column."""
        self._num_cols = max(num_cols, 1)
        return self

    def add_header(self) -> "ExcelExporter":
        """Write the title row, the generation timestamp and one row per filter.

        Returns:
            ``self`` for method chaining.
        """
        ws = self._worksheet
        last_col = max(self._num_cols, 3) - 1

        ws.set_row(self._current_row, 32)
        ws.merge_range(
            self._current_row, 0, self._current_row, last_col,
            f"{_APP_TITLE} — {self._title}",
            self._formats["title"],
        )
        self._current_row += 1

        generado = datetime.now().strftime("%d/%m/%Y %H:%M")
        ws.set_row(self._current_row, 18)
        ws.merge_range(
            self._current_row, 0, self._current_row, last_col,
            f"Generado: {generado}",
            self._formats["subtitle"],
        )
        self._current_row += 1

        for key, value in self._filters.items():
            ws.write(self._current_row, 0, key, self._formats["filter_key"])
            ws.merge_range(
                self._current_row, 1, self._current_row, last_col,
                value, self._formats["filter_value"],
            )
            self._current_row += 1

        self._current_row += 1
        return self

    def add_kpi_row(self, kpis: dict[str, Any]) -> "ExcelExporter":
        """Write ``{label: value}`` pairs as a label row above a value row.

        Returns:
            ``self`` for method chaining.
        """
        ws = self._worksheet
        for col, (label, value) in enumerate(kpis.items()):
            ws.write(self._current_row, col, label, self._formats["kpi_label"])
            ws.write(self._current_row + 1, col, value, self._formats["kpi_value"])
        ws.set_row(self._current_row + 1, 22)

        self._current_row += 3
        return self

    def add_data_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
    ) -> "ExcelExporter":
        """Write column headers and data rows with alternating shading.

        Args:
            headers: Column header strings.
            rows: Data rows, each as long as ``headers``.  ``int``/``float``
                  cells are written as numbers, anything else as text.

        Returns:
            ``self`` for method chaining.
        """
        ws = self._worksheet
        col_widths: list[int] = [len(str(h)) for h in headers]

        ws.set_row(self._current_row, 20)
        for ci, header in enumerate(headers):
            ws.write(self._current_row, ci, header, self._formats["col_header"])
        self._current_row += 1

        for ri, data_row in enumerate(rows):
            alt = ri % 2 == 1
            for ci, value in enumerate(data_row):
                numeric = isinstance(value, (int, float)) and not isinstance(value, bool)
                if numeric:
                    fmt = self._formats["number_alt" if alt else "number"]
                    ws.write_number(self._current_row, ci, value, fmt)
                    shown = f"{value:,.2f}"
                else:
                    fmt = self._formats["text_alt" if alt else "text"]
                    shown = "" if value is None else str(value)
                    ws.write_string(self._current_row, ci, shown, fmt)
                col_widths[ci] = min(_MAX_COL_WIDTH, max(col_widths[ci], len(shown)))
            self._current_row += 1

        for ci, width in enumerate(col_widths):
            ws.set_column(ci, ci, max(width + 2, _MIN_COL_WIDTH))

        return self

    def finalize(self) -> bytes:
        """Close the workbook and return the ``.xlsx`` bytes.

        The exporter must not be reused afterwards.
        """
        self._workbook.close()
        self._buffer.seek(0)
        return self._buffer.read()
