"""
Dashboard router.

Mounts under ``/api/dashboard`` (prefix set in ``main.py``).

Every endpoint works on the memoised joined view of the dataset, so the
aggregates are recomputed only when a new dataset snapshot is loaded.

Endpoints
---------
GET /                    — KPIs and both charts in one payload.
GET /kpis                — Four KPI header cards.
GET /gasto-proveedores   — Bar chart: top suppliers by contract ceiling.
GET /estado-contratos    — Pie chart: current vs expired contracts.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.config import get_settings
from app.dependencies import get_vista
from app.schemas.catalogo import VistaDatos
from app.schemas.dashboard import DashboardResponse, GraficoItem, KpiDashboardResponse
from app.services import dashboard_service

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(tags=["Dashboard"])


# ---------------------------------------------------------------------------
# GET /
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=DashboardResponse,
    summary="Resumen completo del dashboard",
    description="Retorna los KPIs, el gasto por proveedor y el estado de contratos.",
)
def get_dashboard(
    vista: Annotated[VistaDatos, Depends(get_vista)],
) -> DashboardResponse:
    """Return every dashboard figure in a single response."""
    logger.debug("GET /dashboard")
    return dashboard_service.get_dashboard(vista, settings.TOP_PROVEEDORES)


# ---------------------------------------------------------------------------
# GET /kpis
# ---------------------------------------------------------------------------


@router.get(
    "/kpis",
    response_model=KpiDashboardResponse,
    summary="KPIs del dashboard",
    description=(
        "Contratos totales, proveedores registrados, productos en catálogo "
        "y monto total contratado."
    ),
)
def get_kpis(
    vista: Annotated[VistaDatos, Depends(get_vista)],
) -> KpiDashboardResponse:
    """Return the four KPI cards.

    Args:
        vista: Joined dataset view.

    Returns:
        A ``KpiDashboardResponse``.
    """
    return dashboard_service.get_kpis(vista)


# ---------------------------------------------------------------------------
# GET /gasto-proveedores
# ---------------------------------------------------------------------------


@router.get(
    "/gasto-proveedores",
    response_model=list[GraficoItem],
    summary="Gasto por proveedor (Top N)",
    description=(
        "Suma del monto máximo de los contratos agrupada por proveedor, "
        "ordenada de mayor a menor. Los contratos sin proveedor registrado "
        "se agrupan por la clave original."
    ),
)
def get_gasto_por_proveedor(
    vista: Annotated[VistaDatos, Depends(get_vista)],
    limite: Annotated[
        int | None,
        Query(description="Cantidad de proveedores a retornar.", ge=1, le=100),
    ] = None,
) -> list[GraficoItem]:
    """Return the spend-by-supplier ranking.

    Args:
        vista: Joined dataset view.
        limite: Optional override of ``TOP_PROVEEDORES``.

    Returns:
        Bar-chart items ordered by amount descending.
    """
    limite = limite or settings.TOP_PROVEEDORES
    logger.debug("GET /dashboard/gasto-proveedores limite=%d", limite)
    return dashboard_service.get_gasto_por_proveedor(vista.contratos, limite)


# ---------------------------------------------------------------------------
# GET /estado-contratos
# ---------------------------------------------------------------------------


@router.get(
    "/estado-contratos",
    response_model=list[GraficoItem],
    summary="Estado de contratos",
    description=(
        "Cantidad de contratos vigentes y expirados según su fecha de fin de "
        "vigencia. Las fechas que no se pueden interpretar no se cuentan."
    ),
)
def get_estado_contratos(
    vista: Annotated[VistaDatos, Depends(get_vista)],
) -> list[GraficoItem]:
    """Return the current / expired contract counts."""
    return dashboard_service.get_estado_contratos(vista.contratos)
