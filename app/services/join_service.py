"""
Join layer: denormalises the dataset's fact tables against its reference tables.

``construir_vista`` turns a ``DatasetBase`` into a ``VistaDatos`` where

- every award carries its resolved ``Articulo`` (by ``codigo_fk``), and
- every contract carries its resolved ``Proveedor`` (by ``proveedor_fk``)
  plus the awards whose ``contrato_fk`` equals its ``contrato`` code.

Design notes
------------
- Lookup maps are built in a single pass per reference table; when a key
  repeats, the last record wins.
- Awards are grouped by contract code before contracts are visited, so the
  whole join is linear in the size of the dataset.
- Dangling foreign keys never fail: the resolved reference is ``None`` and
  the raw key stays on the record for display.
- Input order is preserved in every output collection.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from app.schemas.catalogo import (
    Adjudicado,
    AdjudicadoConArticulo,
    Articulo,
    Contrato,
    ContratoConProveedor,
    DatasetBase,
    Proveedor,
    VistaDatos,
)

logger = logging.getLogger(__name__)


def mapa_articulos(articulos: tuple[Articulo, ...]) -> dict[int, Articulo]:
    """Index articles by ``codigo``."""
    return {articulo.codigo: articulo for articulo in articulos}


def mapa_proveedores(proveedores: tuple[Proveedor, ...]) -> dict[str, Proveedor]:
    """Index suppliers by name (``proveedor``), the key contracts use."""
    return {proveedor.proveedor: proveedor for proveedor in proveedores}


def unir_adjudicados(
    adjudicados: tuple[Adjudicado, ...],
    articulos: dict[int, Articulo],
) -> tuple[AdjudicadoConArticulo, ...]:
    """Attach the referenced article to every award.

    Args:
        adjudicados: Awards in dataset order.
        articulos: ``codigo → Articulo`` map from :func:`mapa_articulos`.

    Returns:
        Awards with ``articulo`` set, or ``None`` when the code is unknown.
    """
    return tuple(
        AdjudicadoConArticulo(**adj.model_dump(), articulo=articulos.get(adj.codigo_fk))
        for adj in adjudicados
    )


def unir_contratos(
    contratos: tuple[Contrato, ...],
    proveedores: dict[str, Proveedor],
    adjudicados: tuple[AdjudicadoConArticulo, ...],
) -> tuple[ContratoConProveedor, ...]:
    """Attach supplier and awards to every contract.

    Args:
        contratos: Contracts in dataset order.
        proveedores: ``proveedor → Proveedor`` map from :func:`mapa_proveedores`.
        adjudicados: Awards already joined with their articles.

    Returns:
        Contracts with ``proveedor`` and ``adjudicados`` populated.
    """
    por_contrato: dict[str, list[AdjudicadoConArticulo]] = defaultdict(list)
    for adj in adjudicados:
        por_contrato[adj.contrato_fk].append(adj)

    return tuple(
        ContratoConProveedor(
            **con.model_dump(),
            proveedor=proveedores.get(con.proveedor_fk),
            adjudicados=tuple(por_contrato.get(con.contrato, ())),
        )
        for con in contratos
    )


def construir_vista(base: DatasetBase) -> VistaDatos:
    """Build the denormalised view used by the dashboard, tables and explorer.

    Args:
        base: Dataset snapshot as loaded.

    Returns:
        A frozen ``VistaDatos`` sharing the reference tables with ``base``.
    """
    articulos = mapa_articulos(base.articulos)
    proveedores = mapa_proveedores(base.proveedores)

    adjudicados = unir_adjudicados(base.adjudicados, articulos)
    contratos = unir_contratos(base.contratos, proveedores, adjudicados)

    sin_proveedor = sum(1 for c in contratos if c.proveedor is None)
    sin_articulo = sum(1 for a in adjudicados if a.articulo is None)
    logger.debug(
        "construir_vista: contratos=%d adjudicados=%d sin_proveedor=%d sin_articulo=%d",
        len(contratos), len(adjudicados), sin_proveedor, sin_articulo,
    )

    return VistaDatos(
        articulos=base.articulos,
        proveedores=base.proveedores,
        contratos=contratos,
        adjudicados=adjudicados,
        licitaciones=base.licitaciones,
        usuarios=base.usuarios,
    )
