"""
Shared Pydantic v2 schemas reused across multiple routers.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every ``HTTPException`` raised by the API.

    Attributes:
        detail: Human-readable error message (Spanish, shown in the UI).
    """

    detail: str = Field(..., description="Descripción del error.")


class HealthResponse(BaseModel):
    """Liveness payload with the size of each loaded table.

    Attributes:
        status: Always ``"ok"`` when the process answers.
        app: Application name from settings.
        registros: Row count per dataset table.
    """

    status: str = "ok"
    app: str
    registros: dict[str, int] = Field(default_factory=dict)
