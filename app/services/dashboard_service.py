"""
Dashboard aggregation service.

Every function receives the joined ``VistaDatos`` (or its contracts) and
returns schema instances ready for serialisation by FastAPI.

Design notes
------------
- Spend is keyed by the resolved supplier name; contracts whose
  ``proveedor_fk`` dangles are accumulated under the raw key.
- Ranking ties keep first-seen order (Python's sort is stable).
- Contract status compares the parsed ``fin_vigencia`` against "now";
  dates that cannot be parsed are left out of both buckets.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from app.schemas.catalogo import ContratoConProveedor, VistaDatos
from app.schemas.dashboard import DashboardResponse, GraficoItem, KpiDashboardResponse
from app.utils.constants import ESTADO_EXPIRADO, ESTADO_VIGENTE
from app.utils.fechas import parse_fecha
from app.utils.formato import format_moneda

logger = logging.getLogger(__name__)


def total_monto_maximo(contratos: Iterable[ContratoConProveedor]) -> float:
    """Sum of every contract ceiling."""
    return sum(c.monto_maximo for c in contratos)


def get_kpis(vista: VistaDatos) -> KpiDashboardResponse:
    """Compute the four KPI cards.

    Args:
        vista: Joined dataset view.

    Returns:
        A ``KpiDashboardResponse`` with counts and the formatted total.
    """
    monto_total = total_monto_maximo(vista.contratos)
    logger.debug(
        "get_kpis: contratos=%d monto_total=%.2f", len(vista.contratos), monto_total,
    )
    return KpiDashboardResponse(
        total_contratos=len(vista.contratos),
        total_proveedores=len(vista.proveedores),
        total_articulos=len(vista.articulos),
        monto_total=monto_total,
        monto_total_formateado=format_moneda(monto_total),
    )


def get_gasto_por_proveedor(
    contratos: Iterable[ContratoConProveedor], limite: int = 10
) -> list[GraficoItem]:
    """Rank suppliers by the sum of their contract ceilings.

    Args:
        contratos: Joined contracts.
        limite: Number of suppliers to keep after sorting.

    Returns:
        Up to ``limite`` ``GraficoItem`` entries ordered by ``valor``
        descending.
    """
    gasto: dict[str, float] = {}
    for contrato in contratos:
        nombre = contrato.nombre_proveedor
        gasto[nombre] = gasto.get(nombre, 0) + contrato.monto_maximo

    ranking = sorted(gasto.items(), key=lambda par: par[1], reverse=True)
    return [GraficoItem(nombre=nombre, valor=valor) for nombre, valor in ranking[:limite]]


def get_estado_contratos(
    contratos: Iterable[ContratoConProveedor], ahora: datetime | None = None
) -> list[GraficoItem]:
    """Count current vs expired contracts by their end-of-validity date.

    Args:
        contratos: Joined contracts.
        ahora: Reference instant; ``datetime.now()`` when omitted.

    Returns:
        Two items, ``Vigente`` then ``Expirado``.
    """
    ahora = ahora or datetime.now()
    vigentes = 0
    expirados = 0
    omitidos = 0
    for contrato in contratos:
        fin = parse_fecha(contrato.fin_vigencia)
        if fin is None:
            omitidos += 1
            continue
        if fin > ahora:
            vigentes += 1
        else:
            expirados += 1

    if omitidos:
        logger.debug("get_estado_contratos: %d contracts with unparseable fin_vigencia", omitidos)

    return [
        GraficoItem(nombre=ESTADO_VIGENTE, valor=vigentes),
        GraficoItem(nombre=ESTADO_EXPIRADO, valor=expirados),
    ]


def get_dashboard(
    vista: VistaDatos, limite_proveedores: int = 10, ahora: datetime | None = None
) -> DashboardResponse:
    """Assemble KPIs and both chart series in one response."""
    return DashboardResponse(
        kpis=get_kpis(vista),
        gasto_por_proveedor=get_gasto_por_proveedor(vista.contratos, limite_proveedores),
        estado_contratos=get_estado_contratos(vista.contratos, ahora),
    )
