"""
Generic sortable/searchable table views.

A ``TablaDef`` describes one view: its ordered columns (``Columna``: key,
label and optional render function), the keys the search box matches
against, and which collection of the joined dataset it shows.  The same
machinery serves contracts, products, suppliers, users and bidding
processes.

Sorting and searching compose in a fixed order: rows are sorted on the
full list first, then filtered, so the filter never changes sort order.

Comparison rules
----------------
- ``None`` sorts last whatever the direction.
- Two strings compare case-insensitively; two numbers compare directly.
- Any other pair compares equal and keeps its relative input order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Callable, Sequence

from pydantic import BaseModel

from app.schemas.catalogo import VistaDatos
from app.schemas.tabla import (
    ColumnaTabla,
    Direccion,
    FilaTabla,
    OrdenTabla,
    TablaResponse,
    VistaTablaInfo,
)
from app.utils.constants import CLAVES_ID_FILA
from app.utils.formato import es_numero, format_moneda

logger = logging.getLogger(__name__)

Registro = dict[str, Any]
Render = Callable[[Registro], str]


# ---------------------------------------------------------------------------
# Column and sort state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Columna:
    """Column descriptor: record key, header label and optional renderer."""

    key: str
    label: str
    render: Render | None = None

    def celda(self, item: Registro) -> str:
        if self.render is not None:
            return self.render(item)
        valor = item.get(self.key)
        return "" if valor is None else str(valor)


@dataclass(frozen=True)
class SortConfig:
    key: str
    direction: Direccion


def solicitar_orden(actual: SortConfig | None, key: str) -> SortConfig:
    """Sort state after a request to sort by ``key``.

    Re-requesting the active ascending key flips it to descending; every
    other request (new key, or the active key while descending) sorts
    ``key`` ascending.
    """
    if actual is not None and actual.key == key and actual.direction == "asc":
        return SortConfig(key=key, direction="desc")
    return SortConfig(key=key, direction="asc")


def comparar_valores(a: Any, b: Any, direction: Direccion) -> int:
    """Three-way comparison used by :func:`ordenar`."""
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1

    if isinstance(a, str) and isinstance(b, str):
        a, b = a.lower(), b.lower()
    elif not (es_numero(a) and es_numero(b)):
        return 0

    if a < b:
        return -1 if direction == "asc" else 1
    if a > b:
        return 1 if direction == "asc" else -1
    return 0


def ordenar(items: Sequence[Registro], sort: SortConfig | None) -> list[Registro]:
    """Return a sorted copy of ``items``; input order when ``sort`` is None."""
    copia = list(items)
    if sort is None:
        return copia
    clave = cmp_to_key(
        lambda x, y: comparar_valores(x.get(sort.key), y.get(sort.key), sort.direction)
    )
    return sorted(copia, key=clave)


def filtrar(items: Sequence[Registro], termino: str, claves: Sequence[str]) -> list[Registro]:
    """Keep rows where any of ``claves`` contains ``termino`` (case-insensitive)."""
    if not termino:
        return list(items)
    termino = termino.lower()

    def coincide(item: Registro) -> bool:
        for clave in claves:
            valor = item.get(clave)
            if valor is not None and termino in str(valor).lower():
                return True
        return False

    return [item for item in items if coincide(item)]


def id_fila(item: Registro, indice: int) -> int | str:
    """Natural id of a row, falling back to its position."""
    for clave in CLAVES_ID_FILA:
        valor = item.get(clave)
        if valor:
            return valor
    return indice


# ---------------------------------------------------------------------------
# Table definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TablaDef:
    """One table view over the joined dataset."""

    vista: str
    titulo: str
    columnas: tuple[Columna, ...]
    claves_busqueda: tuple[str, ...]
    fuente: Callable[[VistaDatos], Sequence[BaseModel]]

    def columna(self, key: str) -> Columna | None:
        for col in self.columnas:
            if col.key == key:
                return col
        return None

    def registros(self, vista: VistaDatos) -> list[Registro]:
        return [registro.model_dump() for registro in self.fuente(vista)]

    def info(self) -> VistaTablaInfo:
        return VistaTablaInfo(
            vista=self.vista,
            titulo=self.titulo,
            columnas=columnas_respuesta(self, None),
            claves_busqueda=list(self.claves_busqueda),
        )


def _render_moneda(key: str) -> Render:
    return lambda item: format_moneda(item.get(key))


def _render_precio(item: Registro) -> str:
    precio = item.get("precio_medio")
    if es_numero(precio):
        return format_moneda(precio)
    return "" if precio is None else str(precio)


def _render_proveedor(item: Registro) -> str:
    proveedor = item.get("proveedor")
    if proveedor:
        return str(proveedor["proveedor"])
    return str(item.get("proveedor_fk") or "")


TABLAS: dict[str, TablaDef] = {
    tabla.vista: tabla
    for tabla in (
        TablaDef(
            vista="contratos",
            titulo="Contratos",
            columnas=(
                Columna("contrato", "Contrato ID"),
                Columna("proveedor_fk", "Proveedor", _render_proveedor),
                Columna("monto_maximo", "Monto Máximo", _render_moneda("monto_maximo")),
                Columna("inicio_vigencia", "Inicio Vigencia"),
                Columna("fin_vigencia", "Fin Vigencia"),
            ),
            claves_busqueda=("contrato", "proveedor_fk"),
            fuente=lambda v: v.contratos,
        ),
        TablaDef(
            vista="productos",
            titulo="Productos",
            columnas=(
                Columna("codigo", "Código"),
                Columna("descripcion_articulo", "Descripción"),
                Columna("unidad_medida", "Unidad"),
                Columna("precio_medio", "Precio Medio", _render_precio),
                Columna("ultima_fecha", "Última Fecha"),
            ),
            claves_busqueda=("codigo", "descripcion_articulo"),
            fuente=lambda v: v.articulos,
        ),
        TablaDef(
            vista="proveedores",
            titulo="Proveedores",
            columnas=(
                Columna("id_proveedor", "ID"),
                Columna("proveedor", "Nombre"),
                Columna("domicilio", "Domicilio"),
                Columna("ciudad", "Ciudad"),
                Columna("giro_comercial", "Giro Comercial"),
            ),
            claves_busqueda=("proveedor", "domicilio", "giro_comercial"),
            fuente=lambda v: v.proveedores,
        ),
        TablaDef(
            vista="usuarios",
            titulo="Usuarios",
            columnas=(
                Columna("rud", "RUD"),
                Columna("nombre", "Nombre"),
                Columna("rol", "Rol"),
            ),
            claves_busqueda=("nombre", "rol", "rud"),
            fuente=lambda v: v.usuarios,
        ),
        TablaDef(
            vista="licitaciones",
            titulo="Licitaciones",
            columnas=(
                Columna("licitacion", "Licitación"),
                Columna("denominacion", "Denominación"),
                Columna("fecha_convocatoria", "Convocatoria"),
                Columna("fecha_apertura", "Apertura"),
                Columna("fecha_fallo", "Fallo"),
            ),
            claves_busqueda=("licitacion", "denominacion"),
            fuente=lambda v: v.licitaciones,
        ),
    )
}


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def columnas_respuesta(definicion: TablaDef, sort: SortConfig | None) -> list[ColumnaTabla]:
    columnas: list[ColumnaTabla] = []
    for col in definicion.columnas:
        activa = sort is not None and sort.key == col.key
        columnas.append(
            ColumnaTabla(
                key=col.key,
                label=col.label,
                activa=activa,
                direccion=sort.direction if activa else None,
                siguiente_direccion=solicitar_orden(sort, col.key).direction,
            )
        )
    return columnas


def filas_visibles(
    definicion: TablaDef,
    registros: Sequence[Registro],
    sort: SortConfig | None,
    termino: str,
) -> list[Registro]:
    """Sort the full list, then apply the search filter."""
    return filtrar(ordenar(registros, sort), termino, definicion.claves_busqueda)


def construir_tabla(
    definicion: TablaDef,
    vista: VistaDatos,
    sort: SortConfig | None = None,
    termino: str = "",
) -> TablaResponse:
    """Render one table view.

    Args:
        definicion: Table definition from :data:`TABLAS`.
        vista: Joined dataset view.
        sort: Active sort, or ``None`` for dataset order.
        termino: Search term; empty shows every row.

    Returns:
        A ``TablaResponse`` with headers and rendered rows.
    """
    registros = definicion.registros(vista)
    visibles = filas_visibles(definicion, registros, sort, termino)

    filas = [
        FilaTabla(
            id=id_fila(item, indice),
            celdas={col.key: col.celda(item) for col in definicion.columnas},
        )
        for indice, item in enumerate(visibles)
    ]

    logger.debug(
        "construir_tabla: vista=%s sort=%s termino=%r filas=%d/%d",
        definicion.vista, sort, termino, len(filas), len(registros),
    )

    return TablaResponse(
        vista=definicion.vista,
        titulo=definicion.titulo,
        columnas=columnas_respuesta(definicion, sort),
        filas=filas,
        total=len(filas),
        total_sin_filtro=len(registros),
        orden=OrdenTabla(key=sort.key, direccion=sort.direction) if sort else None,
        busqueda=termino,
    )


class Tabla:
    """Stateful table over a fixed set of rows.

    Keeps the sort state and search term the way an interactive table
    does: :meth:`solicitar_orden` plays the role of a header click.

    Args:
        definicion: Table definition (columns and search keys).
        registros: Rows to display.
    """

    def __init__(self, definicion: TablaDef, registros: Sequence[Registro]) -> None:
        self.definicion = definicion
        self.registros = list(registros)
        self.sort: SortConfig | None = None
        self.busqueda: str = ""

    def solicitar_orden(self, key: str) -> SortConfig:
        self.sort = solicitar_orden(self.sort, key)
        return self.sort

    def buscar(self, termino: str) -> None:
        self.busqueda = termino

    @property
    def filas(self) -> list[Registro]:
        return filas_visibles(self.definicion, self.registros, self.sort, self.busqueda)
