"""
Table views router.

Mounts under ``/api/tablas`` (prefix set in ``main.py``).

Serves the generic sortable/searchable tables.  The server is stateless:
the client sends the active sort and search term as query parameters and
each column header in the response says which direction the next click on
it should request.

Endpoints
---------
GET /          — Available views with their columns and search keys.
GET /{vista}   — Sorted, filtered, rendered rows of one view.

Query parameters for ``/{vista}``
---------------------------------
- ``sort_key``  column key to sort by (omit for dataset order)
- ``sort_dir``  ``asc`` (default) or ``desc``
- ``q``         case-insensitive search term
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_sort, get_tabla_def, get_vista
from app.schemas.catalogo import VistaDatos
from app.schemas.common import ErrorResponse
from app.schemas.tabla import TablaResponse, VistaTablaInfo
from app.services.tabla_service import TABLAS, SortConfig, TablaDef, construir_tabla

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Tablas"])


@router.get(
    "",
    response_model=list[VistaTablaInfo],
    summary="Vistas de tabla disponibles",
)
def list_tablas() -> list[VistaTablaInfo]:
    """Return the definition of every table view."""
    return [definicion.info() for definicion in TABLAS.values()]


@router.get(
    "/{vista}",
    response_model=TablaResponse,
    summary="Tabla ordenable y filtrable",
    description=(
        "Retorna las filas de la vista indicada ya ordenadas (una sola columna a la vez) "
        "y filtradas por el término de búsqueda. El orden se aplica antes del filtro."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Columna de orden inválida."},
        404: {"model": ErrorResponse, "description": "Vista no encontrada."},
    },
)
def get_tabla(
    definicion: Annotated[TablaDef, Depends(get_tabla_def)],
    sort: Annotated[SortConfig | None, Depends(get_sort)],
    vista: Annotated[VistaDatos, Depends(get_vista)],
    q: Annotated[
        str,
        Query(description="Texto a buscar (sin distinguir mayúsculas).", max_length=200),
    ] = "",
) -> TablaResponse:
    """Render one table view.

    Args:
        definicion: Resolved table definition.
        sort: Active sort or ``None``.
        vista: Joined dataset view.
        q: Search term.

    Returns:
        A ``TablaResponse`` with headers and rendered rows.
    """
    logger.debug("GET /tablas/%s sort=%s q=%r", definicion.vista, sort, q)
    return construir_tabla(definicion, vista, sort, q)
