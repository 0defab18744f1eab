import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import api_router
from .config import ensure_data_dir, get_settings
from .database import close_database, is_database_open, open_database
from .errors import ServiceError

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    if not is_database_open():
        ensure_data_dir(settings)
        open_database(settings.database_path)
        logger.info("Opened database at %s", settings.database_path)
    yield
    # Cleanup on shutdown
    close_database()


app = FastAPI(
    title="Subkeep",
    description="Subscription cost tracking: normalization, calendar and what-if simulations",
    version="0.1.0",
    lifespan=lifespan
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Translate service errors into the same shape as HTTPException."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# API routes
app.include_router(api_router, prefix="/api")


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
