"""
Exportación router.

Mounts under ``/api/exportar`` (prefix set in ``main.py``).

The endpoint streams its response using FastAPI's ``StreamingResponse``.
The ``Content-Disposition`` header uses the ``attachment; filename=...``
pattern so that browsers prompt a download rather than displaying the
file inline.

Endpoints
---------
GET /{vista}/excel  — Export a table view to .xlsx (same ``sort_key``,
                      ``sort_dir`` and ``q`` parameters as ``/api/tablas``).
"""

from __future__ import annotations

import io
import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from app.dependencies import get_sort, get_tabla_def, get_vista
from app.schemas.catalogo import VistaDatos
from app.schemas.common import ErrorResponse
from app.services import exportacion_service
from app.services.tabla_service import SortConfig, TablaDef

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Exportación"])

_XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _make_filename(vista: str, ext: str) -> str:
    """Build a timestamped filename, e.g. ``"savfaa_contratos_2026-02-17.xlsx"``."""
    today = date.today().isoformat()
    return f"savfaa_{vista}_{today}.{ext}"


@router.get(
    "/{vista}/excel",
    summary="Exportar tabla a Excel (.xlsx)",
    description=(
        "Genera y descarga un archivo Excel con las filas de la vista indicada, "
        "respetando el orden y la búsqueda solicitados."
    ),
    response_class=StreamingResponse,
    responses={
        200: {
            "description": "Archivo Excel generado exitosamente.",
            "content": {_XLSX_MEDIA_TYPE: {}},
        },
        400: {"model": ErrorResponse, "description": "Columna de orden inválida."},
        404: {"model": ErrorResponse, "description": "Vista no encontrada."},
        500: {"model": ErrorResponse, "description": "Error generando el archivo."},
    },
)
def export_excel(
    definicion: Annotated[TablaDef, Depends(get_tabla_def)],
    sort: Annotated[SortConfig | None, Depends(get_sort)],
    vista: Annotated[VistaDatos, Depends(get_vista)],
    q: Annotated[
        str,
        Query(description="Texto a buscar (sin distinguir mayúsculas).", max_length=200),
    ] = "",
) -> StreamingResponse:
    """Generate and stream an Excel file for a table view.

    Args:
        definicion: Resolved table definition.
        sort: Active sort or ``None``.
        vista: Joined dataset view.
        q: Search term.

    Returns:
        A ``StreamingResponse`` with the ``.xlsx`` file attached.

    Raises:
        HTTPException 500: If Excel generation fails.
    """
    logger.info("GET /exportar/%s/excel sort=%s q=%r", definicion.vista, sort, q)

    try:
        file_bytes = exportacion_service.export_excel(definicion, vista, sort, q)
    except ImportError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Dependencia faltante para exportación Excel: {exc}",
        ) from exc
    except Exception as exc:
        logger.exception("export_excel: unexpected error for vista=%s", definicion.vista)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error generando el archivo Excel: {exc}",
        ) from exc

    filename = _make_filename(definicion.vista, "xlsx")
    return StreamingResponse(
        io.BytesIO(file_bytes),
        media_type=_XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
