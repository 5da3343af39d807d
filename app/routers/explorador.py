"""
AI data explorer router.

Mounts under ``/api/explorador`` (prefix set in ``main.py``).

Endpoints
---------
POST /consulta  — Ask a natural-language question about the dataset.
GET  /estado    — Whether a question is currently being answered.

Only one question is answered at a time; while one is in flight further
requests get ``409`` immediately.  Failures of the text-generation
service, including non-JSON answers, are reported as ``502`` with a single
user-facing message.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_explorador, get_vista
from app.schemas.catalogo import VistaDatos
from app.schemas.common import ErrorResponse
from app.schemas.explorador import ConsultaRequest, ConsultaResponse, EstadoExploradorResponse
from app.services.explorador_service import (
    ConsultaEnCursoError,
    ExploradorError,
    ExploradorService,
    tabla_resultado,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Explorador IA"])


@router.post(
    "/consulta",
    response_model=ConsultaResponse,
    summary="Consulta en lenguaje natural",
    description=(
        "Envía la pregunta junto con una muestra de los datos (primeros 100 registros "
        "de artículos, contratos y proveedores) al servicio de IA y retorna el JSON "
        "que responde."
    ),
    responses={
        409: {"model": ErrorResponse, "description": "Ya hay una consulta en curso."},
        502: {"model": ErrorResponse, "description": "La IA falló o no respondió JSON."},
    },
)
def post_consulta(
    payload: ConsultaRequest,
    vista: Annotated[VistaDatos, Depends(get_vista)],
    explorador: Annotated[ExploradorService, Depends(get_explorador)],
) -> ConsultaResponse:
    """Answer a natural-language question about the dataset.

    Args:
        payload: The question.
        vista: Joined dataset view.
        explorador: Explorer service (single-flight).

    Returns:
        A ``ConsultaResponse`` with the parsed answer and, for arrays of
        objects, a table rendering.

    Raises:
        HTTPException 409: If another question is in flight.
        HTTPException 502: If the AI call fails or the answer is not JSON.
    """
    try:
        resultado = explorador.consultar(payload.consulta, vista)
    except ConsultaEnCursoError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ExploradorError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.mensaje) from exc

    return ConsultaResponse(
        consulta=payload.consulta,
        resultado=resultado,
        tabla=tabla_resultado(resultado),
    )


@router.get(
    "/estado",
    response_model=EstadoExploradorResponse,
    summary="Estado del explorador",
)
def get_estado(
    explorador: Annotated[ExploradorService, Depends(get_explorador)],
) -> EstadoExploradorResponse:
    """Report whether a question is in flight."""
    return EstadoExploradorResponse(cargando=explorador.cargando)
