from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

# Project root (the directory holding ``app/`` and ``data/``)
_BACKEND_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    # App
    APP_NAME: str = "SAV-Faa Dashboard de Adquisiciones"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS — se puede sobreescribir con env var CORS_ORIGINS como JSON array
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Static dataset (.json or .xlsx)
    DATA_PATH: Path = _BACKEND_ROOT / "data" / "dataset.json"

    # Text-generation service (OpenAI-compatible endpoint, Gemini by default)
    LLM_API_KEY: str = ""
    LLM_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    LLM_MODEL: str = "gemini-2.5-flash"
    LLM_TIMEOUT_SECONDS: float = 60.0

    # Dashboard / explorer limits
    EXPLORADOR_MAX_FILAS: int = 100
    TOP_PROVEEDORES: int = 10

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
