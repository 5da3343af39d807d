"""
Pydantic v2 schemas for the natural-language data explorer.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConsultaRequest(BaseModel):
    """Question typed into the explorer's query box.

    Attributes:
        consulta: Natural-language question in Spanish. Surrounding
            whitespace is stripped; blank questions are rejected.
    """

    consulta: str = Field(..., max_length=2000, description="Pregunta en lenguaje natural.")

    @field_validator("consulta")
    @classmethod
    def no_vacia(cls, valor: str) -> str:
        valor = valor.strip()
        if not valor:
            raise ValueError("La consulta no puede estar vacía.")
        return valor

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"consulta": "¿Cuáles son los 10 productos más caros?"}
        }
    )


class ResultadoTabla(BaseModel):
    """Tabular rendering of an array-of-objects answer.

    Attributes:
        encabezados: Keys of the first row, in order.
        etiquetas: Header labels (underscores replaced by spaces).
        filas: One list of display strings per row.
    """

    encabezados: list[str]
    etiquetas: list[str]
    filas: list[list[str]]


class ConsultaResponse(BaseModel):
    """Answer returned by the text-generation service, parsed as JSON.

    Attributes:
        consulta: The question as sent.
        resultado: Parsed JSON answer (array of rows or a single object).
        tabla: Table rendering when ``resultado`` is a non-empty array of
            objects; ``None`` otherwise.
    """

    consulta: str
    resultado: Any = None
    tabla: ResultadoTabla | None = None


class EstadoExploradorResponse(BaseModel):
    """Whether a query is currently in flight."""

    cargando: bool
