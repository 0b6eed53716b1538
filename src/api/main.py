"""FastAPI application entry point."""

import logging
import warnings
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import auth_router, health_router, tempestive_router, users_router
from core.config import API_DEBUG, API_VERSION, CORS_ORIGINS, LOG_LEVEL
from core.database import get_connection, init_database, seed_default_user

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup: create schema, seed the default admin, verify the template
    from services.alfa_report import TEMPLATE_PATH

    conn = get_connection()
    try:
        init_database(conn)
        if seed_default_user(conn):
            logger.info("Default user created")
    finally:
        conn.close()

    if not TEMPLATE_PATH.exists():
        warnings.warn(f"Report template not found at {TEMPLATE_PATH.resolve()}")

    yield


app = FastAPI(
    title="Dashboard API",
    description="REST API for user management and monthly alfa timesheet reports",
    version=API_VERSION,
    debug=API_DEBUG,
    lifespan=lifespan,
)

# Cookies are sent cross-origin by the SPA, so origins must be explicit
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code=ErrorCodes.INTERNAL_ERROR,
            details=[],
        ).model_dump(),
    )


# Include routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(tempestive_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )
