"""
Natural-language data explorer.

Forwards a user question plus a bounded sample of the dataset to the
external text-generation service and parses the JSON it answers with.

Flow
----
1. ``construir_contexto`` takes the first N rows of articles, contracts
   and suppliers.  Contracts drop their resolved supplier object and carry
   only the number of awards, which keeps the prompt small.
2. ``construir_prompt`` embeds that context and the question in a fixed
   instruction that demands a JSON-only answer.
3. ``extraer_json`` strips an optional Markdown code fence and parses the
   remaining text.

Any failure of the service call or of the parsing (transport error,
non-JSON answer) is logged and re-raised as ``ExploradorError`` carrying
a single user-facing message.
There is no retry and no partial result.

Only one query may be in flight per ``ExploradorService``; a concurrent
request raises ``ConsultaEnCursoError`` immediately instead of queuing.
"""

from __future__ import annotations

import json
import logging
import re
import threading
from typing import Any

from app.schemas.catalogo import VistaDatos
from app.schemas.explorador import ResultadoTabla
from app.services.llm_client import GeneradorTexto

logger = logging.getLogger(__name__)

MENSAJE_ERROR: str = (
    "No se pudo obtener una respuesta válida de la IA. Es posible que haya "
    "devuelto un texto que no es JSON o que haya ocurrido un error."
)
MENSAJE_EN_CURSO: str = "Ya hay una consulta en curso. Espera a que termine."

_PROMPT_TEMPLATE = """
You are an expert data analyst for a government procurement system.
Your task is to answer user questions by querying the provided JSON data.
You MUST only return a valid JSON array of the results. Do not add any explanation or conversational text.
If the user asks for a summary or calculation, return a JSON object with the answer.
The data is in Spanish. The user queries will also be in Spanish.

Data:
{datos}

User Query: "{consulta}"

Result (JSON array or object only):
"""

# ```json\n ... \n```  (language tag optional)
_FENCE_RE = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)


class ExploradorError(Exception):
    """The text-generation service failed or answered with invalid JSON."""

    def __init__(self, mensaje: str = MENSAJE_ERROR) -> None:
        super().__init__(mensaje)
        self.mensaje = mensaje


class ConsultaEnCursoError(Exception):
    """Another query is already in flight on this explorer."""


# ---------------------------------------------------------------------------
# Prompt construction
# ---------------------------------------------------------------------------


def construir_contexto(vista: VistaDatos, limite: int = 100) -> dict[str, list[dict[str, Any]]]:
    """Bounded sample of the dataset sent along with the question.

    Args:
        vista: Joined dataset view.
        limite: Maximum rows taken from each table.

    Returns:
        ``{"articulos": [...], "contratos": [...], "proveedores": [...]}``
        with JSON-serialisable rows.
    """
    contratos = []
    for contrato in vista.contratos[:limite]:
        fila = contrato.model_dump(mode="json", exclude={"proveedor", "adjudicados"})
        fila["adjudicados"] = len(contrato.adjudicados)
        contratos.append(fila)

    return {
        "articulos": [a.model_dump(mode="json") for a in vista.articulos[:limite]],
        "contratos": contratos,
        "proveedores": [p.model_dump(mode="json") for p in vista.proveedores[:limite]],
    }


def construir_prompt(consulta: str, contexto: dict[str, Any]) -> str:
    datos = json.dumps(contexto, indent=2, ensure_ascii=False)
    return _PROMPT_TEMPLATE.format(datos=datos, consulta=consulta)


def extraer_json(texto: str) -> Any:
    """Parse the service's answer, tolerating a surrounding code fence.

    Raises:
        json.JSONDecodeError: If the (unfenced) text is not valid JSON.
    """
    texto = texto.strip()
    match = _FENCE_RE.match(texto)
    if match and match.group(2):
        texto = match.group(2).strip()
    return json.loads(texto)


# ---------------------------------------------------------------------------
# Result rendering
# ---------------------------------------------------------------------------


def _celda(valor: Any) -> str:
    if isinstance(valor, (dict, list, bool)) or valor is None:
        return json.dumps(valor, ensure_ascii=False)
    return str(valor)


def tabla_resultado(resultado: Any) -> ResultadoTabla | None:
    """Table rendering for a non-empty array of objects, else ``None``.

    Headers come from the first row; nested values are JSON-encoded.
    """
    if not isinstance(resultado, list) or not resultado:
        return None
    if not isinstance(resultado[0], dict):
        return None

    encabezados = list(resultado[0].keys())
    filas = [
        [_celda(fila.get(h) if isinstance(fila, dict) else None) for h in encabezados]
        for fila in resultado
    ]
    return ResultadoTabla(
        encabezados=encabezados,
        etiquetas=[h.replace("_", " ") for h in encabezados],
        filas=filas,
    )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ExploradorService:
    """Single-flight bridge between the explorer view and the AI service.

    Args:
        generador: Text-generation client.
        max_filas: Rows per table included in the prompt context.
    """

    def __init__(self, generador: GeneradorTexto, max_filas: int = 100) -> None:
        self._generador = generador
        self._max_filas = max_filas
        self._lock = threading.Lock()

    @property
    def cargando(self) -> bool:
        return self._lock.locked()

    def consultar(self, consulta: str, vista: VistaDatos) -> Any:
        """Ask ``consulta`` about ``vista`` and return the parsed JSON answer.

        Raises:
            ConsultaEnCursoError: If another query is still in flight.
            ExploradorError: If the service call fails or its answer is
                not valid JSON.
        """
        if not self._lock.acquire(blocking=False):
            raise ConsultaEnCursoError(MENSAJE_EN_CURSO)
        try:
            contexto = construir_contexto(vista, self._max_filas)
            prompt = construir_prompt(consulta, contexto)
            logger.info("consultar: %d chars prompt, consulta=%r", len(prompt), consulta)
            try:
                texto = self._generador.generar(prompt)
                return extraer_json(texto)
            except Exception as exc:
                logger.exception("consultar: text-generation query failed")
                raise ExploradorError() from exc
        finally:
            self._lock.release()
