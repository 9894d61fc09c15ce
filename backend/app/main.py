# backend/app/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from starlette.middleware.gzip import GZipMiddleware

from .core.config import settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .core.logging import setup_logging
from .database import init_db
from .errors import register_error_handlers
from .middleware.prometheus_middleware import PrometheusMiddleware
from .routes import prometheus
from .routes.v1 import (
    banners as banners_v1,
    blogs as blogs_v1,
    bookings as bookings_v1,
    categories as categories_v1,
    counselors as counselors_v1,
    health as health_v1,
    lead_activities as lead_activities_v1,
    leads as leads_v1,
    materials as materials_v1,
    media as media_v1,
    summary as summary_v1,
    team as team_v1,
    testimonials as testimonials_v1,
    users as users_v1,
)
from .schemas.main_responses import RootResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    setup_logging(settings.log_level)
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")

    init_db()

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")


def _unique_operation_id(route: APIRoute) -> str:
    methods = "_".join(sorted(m.lower() for m in route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "").strip("_")
    name = (route.name or "operation").lower().replace(" ", "_")
    return f"{methods}__{path}__{name}".strip("_")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
    generate_unique_id_function=_unique_operation_id,
)
# Register unified error envelope handlers
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)
logger.info("CORS allow_origins=%s", settings.cors_origins)

app.add_middleware(PrometheusMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=500)

# Create API v1 router
api_v1 = APIRouter(prefix="/api/v1")

api_v1.include_router(health_v1.router, prefix="/health")
api_v1.include_router(users_v1.router, prefix="/users")
api_v1.include_router(counselors_v1.router, prefix="/counselors")
api_v1.include_router(bookings_v1.router, prefix="/bookings")
api_v1.include_router(leads_v1.router, prefix="/leads")
api_v1.include_router(lead_activities_v1.router, prefix="/lead-activities")
api_v1.include_router(blogs_v1.router, prefix="/blogs")
api_v1.include_router(categories_v1.router, prefix="/categories")
api_v1.include_router(testimonials_v1.router, prefix="/testimonials")
api_v1.include_router(team_v1.router, prefix="/team")
api_v1.include_router(media_v1.reels_router, prefix="/reels")
api_v1.include_router(media_v1.videos_router, prefix="/videos")
api_v1.include_router(materials_v1.router, prefix="/materials")
api_v1.include_router(banners_v1.router, prefix="/banners")
api_v1.include_router(summary_v1.router, prefix="/summary")

app.include_router(api_v1)

# Prometheus metrics - standard /metrics/prometheus path, PUBLIC like any scrape target
app.include_router(prometheus.router, prefix="/metrics")


@app.get("/", response_model=RootResponse)
def read_root() -> RootResponse:
    """Root endpoint - API information"""
    return RootResponse(
        message=f"Welcome to the {BRAND_NAME} API!",
        version=API_VERSION,
        docs="/docs",
        environment=settings.environment,
    )


@app.get("/health", include_in_schema=False)
def health_check() -> dict:
    return health_v1.health_check().model_dump()
