"""
Export service: renders a table view into an ``.xlsx`` workbook.

The exported rows are exactly the rows the table view shows for the same
sort and search parameters.  Numeric raw values (amounts, codes) are
written as real numbers so they stay usable in Excel; every other cell is
the rendered display text.
"""

from __future__ import annotations

import logging
from typing import Any

from app.exporters.excel_exporter import ExcelExporter
from app.schemas.catalogo import VistaDatos
from app.services.tabla_service import SortConfig, Tabla, TablaDef
from app.utils.formato import es_numero

logger = logging.getLogger(__name__)


def _valor_exportado(item: dict[str, Any], key: str, celda: str) -> Any:
    valor = item.get(key)
    if es_numero(valor):
        return valor
    return celda


def export_excel(
    definicion: TablaDef,
    vista: VistaDatos,
    sort: SortConfig | None = None,
    termino: str = "",
) -> bytes:
    """Build an Excel workbook for one table view.

    Args:
        definicion: Table definition to export.
        vista: Joined dataset view.
        sort: Sort to apply, ``None`` for dataset order.
        termino: Search term applied before exporting.

    Returns:
        Raw bytes of the ``.xlsx`` file.

    Raises:
        ImportError: If ``xlsxwriter`` is not installed.
    """
    tabla = Tabla(definicion, definicion.registros(vista))
    tabla.sort = sort
    tabla.buscar(termino)
    filas = tabla.filas

    headers = [col.label for col in definicion.columnas]
    rows = [
        [_valor_exportado(item, col.key, col.celda(item)) for col in definicion.columnas]
        for item in filas
    ]

    filtros: dict[str, str] = {}
    if termino:
        filtros["Búsqueda"] = termino
    if sort is not None:
        filtros["Orden"] = f"{sort.key} {sort.direction}"

    exporter = ExcelExporter(title=definicion.titulo, filters=filtros, sheet_name=definicion.titulo)
    exporter.set_columns(len(headers))
    exporter.add_header()
    exporter.add_kpi_row({"Registros": len(rows), "Total sin filtro": len(tabla.registros)})
    exporter.add_data_table(headers, rows)

    logger.info("export_excel: vista=%s filas=%d", definicion.vista, len(rows))
    return exporter.finalize()
