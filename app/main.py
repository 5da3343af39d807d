import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.dependencies import get_store
from app.schemas.common import HealthResponse
from app.services.dataset_service import DatasetStore

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: load the static dataset once for the whole process
    store = get_store()
    try:
        store.cargar(settings.DATA_PATH)
    except Exception as exc:
        logger.warning("Could not load dataset from %s: %s", settings.DATA_PATH, exc)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health", response_model=HealthResponse)
def health_check(store: DatasetStore = Depends(get_store)) -> HealthResponse:
    base = store.base
    return HealthResponse(
        app=settings.APP_NAME,
        registros={
            "articulos": len(base.articulos),
            "proveedores": len(base.proveedores),
            "contratos": len(base.contratos),
            "adjudicados": len(base.adjudicados),
            "licitaciones": len(base.licitaciones),
            "usuarios": len(base.usuarios),
        },
    )


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

# Dashboard cards and charts
from app.routers import dashboard  # noqa: E402

app.include_router(
    dashboard.router,
    prefix="/api/dashboard",
    tags=["Dashboard"],
)

# Sortable / searchable table views
from app.routers import tablas  # noqa: E402

app.include_router(
    tablas.router,
    prefix="/api/tablas",
    tags=["Tablas"],
)

# Contract detail with joins
from app.routers import contratos  # noqa: E402

app.include_router(
    contratos.router,
    prefix="/api/contratos",
    tags=["Contratos"],
)

# Explorador IA
from app.routers import explorador  # noqa: E402

app.include_router(
    explorador.router,
    prefix="/api/explorador",
    tags=["Explorador IA"],
)

# Exportación (Excel)
from app.routers import exportacion  # noqa: E402

app.include_router(
    exportacion.router,
    prefix="/api/exportar",
    tags=["Exportación"],
)
