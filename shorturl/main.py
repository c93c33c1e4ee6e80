"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes
- Middleware (logging, CORS)
- Database startup and shutdown
- Application metadata

Run with:
    uvicorn shorturl.main:app
or:
    shorturl  (console script, binds settings.HOST:settings.PORT)
"""

import uvicorn
from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shorturl.api import endpoints
from shorturl.api.schemas import HealthResponse
from shorturl.core.lifecycle import initialize_database, is_database_ready, shutdown_database
from shorturl.core.logging_config import configure_logging
from shorturl.core.setting import settings
from shorturl.db.session import check_database, get_session
from shorturl.middleware.logging import add_logging_middleware

logger = configure_logging()

app = FastAPI(
    title="URL Shortener Service",
    description="Maps long URLs to short numeric codes and redirects back",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Health"])
async def root():
    """Service information."""
    return {
        "message": "URL Shortener Service",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"], response_model=HealthResponse)
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    Health check endpoint for monitoring.

    Returns 503 when the database does not answer.
    """
    database_ok = await check_database(session)
    body = HealthResponse(
        status="healthy" if database_ok else "unhealthy",
        database="ok" if database_ok else "unavailable",
        initialized=is_database_ready(),
    )
    if not database_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump()
        )
    return body


app.include_router(endpoints.router, tags=["URL Shortener"])


@app.on_event("startup")
async def startup_event():
    """Initialize the database on startup."""
    await initialize_database()


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    await shutdown_database()


def run() -> None:
    """Start the service with uvicorn."""
    logger.info(f"Starting URL shortener on {settings.HOST}:{settings.PORT}")
    uvicorn.run(
        "shorturl.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
