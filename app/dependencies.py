"""Shared FastAPI dependencies: dataset store, joined view, table resolution, explorer."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Path, Query, status

from app.config import get_settings
from app.schemas.catalogo import VistaDatos
from app.schemas.tabla import Direccion
from app.services.dataset_service import DatasetStore
from app.services.explorador_service import ExploradorService
from app.services.llm_client import OpenAIGenerador
from app.services.tabla_service import TABLAS, SortConfig, TablaDef

# Process-wide dataset; filled by the lifespan handler in ``main.py``
_store = DatasetStore()


def get_store() -> DatasetStore:
    return _store


def get_vista(store: Annotated[DatasetStore, Depends(get_store)]) -> VistaDatos:
    """Joined view of the current dataset (memoised by the store)."""
    return store.vista()


@lru_cache
def _explorador() -> ExploradorService:
    settings = get_settings()
    return ExploradorService(
        OpenAIGenerador.desde_settings(settings),
        max_filas=settings.EXPLORADOR_MAX_FILAS,
    )


def get_explorador() -> ExploradorService:
    return _explorador()


def get_tabla_def(
    vista: Annotated[str, Path(description="Vista de tabla, ej. 'contratos'.")],
) -> TablaDef:
    """Resolve a table view name.

    Raises:
        HTTPException 404: If the view does not exist.
    """
    definicion = TABLAS.get(vista.lower())
    if definicion is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Vista '{vista}' no encontrada. Valores válidos: {sorted(TABLAS)}.",
        )
    return definicion


def get_sort(
    definicion: Annotated[TablaDef, Depends(get_tabla_def)],
    sort_key: Annotated[
        str | None,
        Query(description="Columna por la que ordenar. Omitir para el orden original."),
    ] = None,
    sort_dir: Annotated[
        Direccion,
        Query(description="Dirección del orden: 'asc' o 'desc'."),
    ] = "asc",
) -> SortConfig | None:
    """Build the sort state from query parameters.

    Raises:
        HTTPException 400: If ``sort_key`` is not a column of the view.
    """
    if sort_key is None:
        return None
    if definicion.columna(sort_key) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"La columna '{sort_key}' no existe en la vista '{definicion.vista}'. "
                f"Valores válidos: {[col.key for col in definicion.columnas]}."
            ),
        )
    return SortConfig(key=sort_key, direction=sort_dir)
