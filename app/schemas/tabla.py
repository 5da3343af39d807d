"""
Pydantic v2 schemas for the generic sortable/searchable table views.

A table response carries everything the frontend needs to draw the table
without further logic: column headers with their sort indicator, the
direction the next click on each header would request, and the rows
already rendered to display strings.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Direccion = Literal["asc", "desc"]


class OrdenTabla(BaseModel):
    """Active sort state of a table.

    Attributes:
        key: Column key the rows are sorted by.
        direccion: ``"asc"`` or ``"desc"``.
    """

    key: str
    direccion: Direccion


class ColumnaTabla(BaseModel):
    """Column header of a rendered table.

    Attributes:
        key: Record field the column displays and sorts by.
        label: Header text.
        activa: Whether the rows are currently sorted by this column.
        direccion: Current direction when ``activa``; ``None`` otherwise.
        siguiente_direccion: Direction a sort request on this column yields.
    """

    key: str
    label: str
    activa: bool = False
    direccion: Direccion | None = None
    siguiente_direccion: Direccion = "asc"


class FilaTabla(BaseModel):
    """Rendered row keyed by the record's natural id (or its position)."""

    id: int | str
    celdas: dict[str, str] = Field(default_factory=dict)


class TablaResponse(BaseModel):
    """Sorted, filtered and rendered table view.

    Attributes:
        vista: Table identifier, e.g. ``"contratos"``.
        titulo: Human-readable title.
        columnas: Ordered column headers.
        filas: Rows after sorting and filtering.
        total: Number of rows in ``filas``.
        total_sin_filtro: Number of rows before the search filter.
        orden: Active sort, ``None`` for dataset order.
        busqueda: Search term applied.
    """

    vista: str
    titulo: str
    columnas: list[ColumnaTabla]
    filas: list[FilaTabla]
    total: int = Field(..., ge=0)
    total_sin_filtro: int = Field(..., ge=0)
    orden: OrdenTabla | None = None
    busqueda: str = ""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "vista": "proveedores",
                "titulo": "Proveedores",
                "columnas": [
                    {"key": "id_proveedor", "label": "ID", "activa": False,
                     "direccion": None, "siguiente_direccion": "asc"},
                    {"key": "proveedor", "label": "Nombre", "activa": True,
                     "direccion": "asc", "siguiente_direccion": "desc"},
                ],
                "filas": [
                    {"id": 7, "celdas": {"id_proveedor": "7",
                                         "proveedor": "ABASTECEDORA DEL CENTRO"}},
                ],
                "total": 1,
                "total_sin_filtro": 31,
                "orden": {"key": "proveedor", "direccion": "asc"},
                "busqueda": "abastecedora",
            }
        }
    )


class VistaTablaInfo(BaseModel):
    """Description of an available table view (``GET /api/tablas``)."""

    vista: str
    titulo: str
    columnas: list[ColumnaTabla]
    claves_busqueda: list[str]
