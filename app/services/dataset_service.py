"""
Static dataset loading and the in-memory store that serves it.

The dataset is a set of flat tables (see ``TABLAS_DATASET``) stored either
as a single JSON document ``{"articulos": [...], "contratos": [...], ...}``
or as an Excel workbook with one sheet per table.  It is read once at
startup, validated into a frozen ``DatasetBase`` and kept in a
``DatasetStore``.

The store memoises the joined ``VistaDatos``: the view is rebuilt only when
the stored snapshot object changes, so no manual invalidation is needed.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

import pandas as pd

from app.schemas.catalogo import DatasetBase, VistaDatos
from app.services.join_service import construir_vista
from app.utils.constants import TABLAS_DATASET

logger = logging.getLogger(__name__)

_EXTENSIONES_EXCEL = frozenset({".xlsx", ".xlsm", ".xls"})


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------


def dataset_desde_dict(datos: dict[str, Any]) -> DatasetBase:
    """Validate raw table rows into a ``DatasetBase``.

    Tables missing from ``datos`` (or set to ``None``) load as empty.

    Raises:
        pydantic.ValidationError: If a row does not match its schema.
    """
    return DatasetBase.model_validate(
        {tabla: datos.get(tabla) or [] for tabla in TABLAS_DATASET}
    )


def _leer_json(ruta: Path) -> dict[str, Any]:
    datos = json.loads(ruta.read_text(encoding="utf-8"))
    if not isinstance(datos, dict):
        raise ValueError(f"{ruta.name}: se esperaba un objeto JSON con una clave por tabla")
    return datos


def _filas_hoja(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert a sheet to row dicts, mapping NaN/NaT cells to ``None``."""
    df = df.dropna(how="all")
    df.columns = [str(col).strip() for col in df.columns]
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")


def _leer_excel(ruta: Path) -> dict[str, Any]:
    hojas = pd.read_excel(ruta, sheet_name=None, dtype=object)
    datos: dict[str, Any] = {}
    for nombre, df in hojas.items():
        tabla = str(nombre).strip().lower()
        if tabla not in TABLAS_DATASET:
            logger.debug("_leer_excel: ignoring sheet %r", nombre)
            continue
        datos[tabla] = _filas_hoja(df)
    return datos


def cargar_dataset(ruta: Path) -> DatasetBase:
    """Read and validate the dataset at ``ruta``.

    Args:
        ruta: Path to a ``.json`` document or an Excel workbook.

    Returns:
        The validated dataset snapshot.

    Raises:
        FileNotFoundError: If ``ruta`` does not exist.
        ValueError: If the extension is not supported or the JSON root is
            not an object.
        pydantic.ValidationError: If a row does not match its schema.
    """
    ruta = Path(ruta)
    if not ruta.exists():
        raise FileNotFoundError(f"Dataset no encontrado: {ruta}")

    sufijo = ruta.suffix.lower()
    if sufijo == ".json":
        datos = _leer_json(ruta)
    elif sufijo in _EXTENSIONES_EXCEL:
        datos = _leer_excel(ruta)
    else:
        raise ValueError(f"Formato de dataset no soportado: '{sufijo}'")

    base = dataset_desde_dict(datos)
    logger.info(
        "cargar_dataset: %s articulos=%d proveedores=%d contratos=%d adjudicados=%d",
        ruta.name, len(base.articulos), len(base.proveedores),
        len(base.contratos), len(base.adjudicados),
    )
    return base


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class DatasetStore:
    """Holds the current dataset snapshot and its memoised join view.

    Args:
        base: Initial snapshot; an empty dataset when omitted.
    """

    def __init__(self, base: DatasetBase | None = None) -> None:
        self._base: DatasetBase = base if base is not None else DatasetBase()
        self._vista: VistaDatos | None = None
        self._fuente_vista: DatasetBase | None = None
        self._lock = threading.Lock()

    @property
    def base(self) -> DatasetBase:
        return self._base

    def reemplazar(self, base: DatasetBase) -> None:
        """Swap in a new snapshot; the view is rebuilt on next access."""
        self._base = base

    def cargar(self, ruta: Path) -> DatasetBase:
        """Load ``ruta`` with :func:`cargar_dataset` and make it current."""
        base = cargar_dataset(ruta)
        self.reemplazar(base)
        return base

    def vista(self) -> VistaDatos:
        """Return the joined view for the current snapshot."""
        base = self._base
        with self._lock:
            if self._vista is None or self._fuente_vista is not base:
                self._vista = construir_vista(base)
                self._fuente_vista = base
            return self._vista
