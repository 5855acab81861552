import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.admin_api import config, db, repositories
from src.admin_api.error_handlers import register_error_handlers
from src.admin_api.observability import setup_logging
from src.admin_api.routes import routers

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Service health checks."},
    {"name": "Auth", "description": "Login/logout and current user."},
    {"name": "Users", "description": "User accounts and their address book."},
    {"name": "Addresses", "description": "Postal addresses."},
    {"name": "Catalog", "description": "Products, images, paragraphs, status and colors."},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    setup_logging(config.log_level(), config.log_format())
    db.init_db_pool()
    repositories.get("sessions").purge_expired()
    logger.info("Shop admin API started")
    yield
    db.close_db_pool()
    logger.info("Shop admin API shut down")


app = FastAPI(
    title="Shop Admin API",
    description=(
        "Backend API for the shop admin panel. "
        "CRUD endpoints for users, addresses, products, images, paragraphs, status and colors.\n\n"
        "Auth: log in through `/api/login`; the session travels in the `session` cookie "
        "or the `Authorization: Bearer <token>` header."
    ),
    version="1.0.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

# Content-Range must be exposed or the admin UI cannot read list totals.
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Range"],
)

register_error_handlers(app)

for router in routers:
    app.include_router(router)
