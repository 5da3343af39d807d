"""
Application-wide constants for the procurement dashboard.

Defines lookup tables, dashboard labels, and record-identity rules used
across routers and services.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Spanish month names → calendar month (1–12)
# ---------------------------------------------------------------------------

MESES: Final[dict[str, int]] = {
    "enero": 1,
    "febrero": 2,
    "marzo": 3,
    "abril": 4,
    "mayo": 5,
    "junio": 6,
    "julio": 7,
    "agosto": 8,
    "septiembre": 9,
    "octubre": 10,
    "noviembre": 11,
    "diciembre": 12,
}

# ---------------------------------------------------------------------------
# Contract status buckets (pie chart)
# ---------------------------------------------------------------------------

ESTADO_VIGENTE: Final[str] = "Vigente"
ESTADO_EXPIRADO: Final[str] = "Expirado"

# ---------------------------------------------------------------------------
# Table views
# ---------------------------------------------------------------------------

# Natural id fields tried in order when keying a rendered row
CLAVES_ID_FILA: Final[tuple[str, ...]] = (
    "id_contrato",
    "codigo",
    "id_proveedor",
    "rud",
)

# ---------------------------------------------------------------------------
# Dataset tables (JSON keys / Excel sheet names)
# ---------------------------------------------------------------------------

TABLAS_DATASET: Final[tuple[str, ...]] = (
    "articulos",
    "proveedores",
    "contratos",
    "adjudicados",
    "licitaciones",
    "usuarios",
)
