"""
Contracts router.

Mounts under ``/api/contratos`` (prefix set in ``main.py``).

Endpoints
---------
GET /{contrato}  — One contract with its supplier and awarded line items.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_vista
from app.schemas.catalogo import ContratoDetalleResponse, VistaDatos
from app.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Contratos"])


@router.get(
    "/{contrato}",
    response_model=ContratoDetalleResponse,
    summary="Detalle de contrato",
    description=(
        "Retorna el contrato con su proveedor resuelto y las partidas adjudicadas, "
        "cada una con su artículo. Si el proveedor no está registrado, "
        "``proveedor`` es nulo y se conserva la clave original."
    ),
    responses={404: {"model": ErrorResponse, "description": "Contrato no encontrado."}},
)
def get_contrato(
    contrato: str,
    vista: Annotated[VistaDatos, Depends(get_vista)],
) -> ContratoDetalleResponse:
    """Return a single joined contract by its code.

    Args:
        contrato: Contract code (``Contrato.contrato``).
        vista: Joined dataset view.

    Returns:
        A ``ContratoDetalleResponse``.

    Raises:
        HTTPException 404: If no contract has that code.
    """
    encontrado = next((c for c in vista.contratos if c.contrato == contrato), None)
    if encontrado is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Contrato '{contrato}' no encontrado.",
        )

    return ContratoDetalleResponse(
        contrato=encontrado,
        nombre_proveedor=encontrado.nombre_proveedor,
        proveedor_resuelto=encontrado.proveedor is not None,
        total_adjudicados=len(encontrado.adjudicados),
        importe_adjudicado=sum(a.importe_maximo for a in encontrado.adjudicados),
    )
