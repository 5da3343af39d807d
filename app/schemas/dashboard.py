"""
Pydantic v2 schemas for the main dashboard.

These models define the exact JSON shapes returned by every endpoint in
``app/routers/dashboard.py``: the four KPI cards, the spend-by-supplier
bar chart and the contract-status pie chart.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# KPI summary cards
# ---------------------------------------------------------------------------


class KpiDashboardResponse(BaseModel):
    """Figures shown in the KPI cards at the top of the dashboard.

    Attributes:
        total_contratos: Number of contracts in the dataset.
        total_proveedores: Number of registered suppliers.
        total_articulos: Number of catalogue products.
        monto_total: Sum of every contract ceiling (``monto_maximo``) in MXN.
        monto_total_formateado: ``monto_total`` formatted for display.
    """

    total_contratos: int = Field(..., ge=0, description="Contratos totales.")
    total_proveedores: int = Field(..., ge=0, description="Proveedores registrados.")
    total_articulos: int = Field(..., ge=0, description="Productos en catálogo.")
    monto_total: float = Field(..., description="Monto total contratado en MXN.")
    monto_total_formateado: str = Field(..., description="Monto total con formato es-MX.")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "total_contratos": 48,
                "total_proveedores": 31,
                "total_articulos": 1250,
                "monto_total": 15_320_000.0,
                "monto_total_formateado": "$15,320,000.00",
            }
        }
    )


# ---------------------------------------------------------------------------
# Charts
# ---------------------------------------------------------------------------


class GraficoItem(BaseModel):
    """Single ``{nombre, valor}`` data point for the bar and pie charts.

    Attributes:
        nombre: Category label (supplier name or contract status).
        valor: Aggregated amount in MXN, or an integer count for status charts.
    """

    nombre: str = Field(..., description="Etiqueta de la categoría.")
    valor: int | float = Field(..., description="Valor agregado (monto o conteo).")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"nombre": "COME FRUTAS Y VERDURAS, S.A DE C.V", "valor": 2_450_000.0}
        }
    )


class DashboardResponse(BaseModel):
    """Everything the dashboard view needs in a single payload."""

    kpis: KpiDashboardResponse
    gasto_por_proveedor: list[GraficoItem] = Field(
        default_factory=list, description="Top proveedores por monto máximo."
    )
    estado_contratos: list[GraficoItem] = Field(
        default_factory=list, description="Conteo de contratos vigentes y expirados."
    )
