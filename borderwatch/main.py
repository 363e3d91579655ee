"""
Main application for BorderWatch.

This module sets up the FastAPI application with CORS and WebSocket integration.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import uvicorn

from borderwatch.core.config import settings
from borderwatch.core.logging import logger
from borderwatch.core.database import init_db
from borderwatch.api.admin import router as admin_router
from borderwatch.api.ai import router as ai_router
from borderwatch.api.alerts import router as alerts_router
from borderwatch.api.chat import router as chat_router
from borderwatch.api.contacts import router as contacts_router
from borderwatch.api.dashboard import router as dashboard_router
from borderwatch.api.deps import require_admin_key
from borderwatch.api.education import router as education_router
from borderwatch.api.health import router as health_router
from borderwatch.api.location import router as location_router
from borderwatch.api.reports import router as reports_router
from borderwatch.api.safe_zones import router as safe_zones_router
from borderwatch.api.threats import router as threats_router
from borderwatch.api.uploads import router as uploads_router
from borderwatch.api.users import router as users_router
from borderwatch.api.websocket import router as websocket_router
from borderwatch.services.ai_processor import AIProcessor
from borderwatch.services.alert_feed import AlertFeedCollector
from borderwatch.services.broadcast_hub import BroadcastHub
from borderwatch.services.location_cache import LocationCache


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for the FastAPI application.

    Args:
        app: FastAPI application.
    """
    # Startup
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")

    logger.info("Initializing database")
    init_db()

    app.state.hub = BroadcastHub()
    app.state.location_cache = LocationCache()
    app.state.alert_feed = AlertFeedCollector()
    app.state.ai_processor = AIProcessor()

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.PROJECT_NAME}")

    logger.info("Closing outbound HTTP sessions")
    await app.state.alert_feed.close()
    await app.state.ai_processor.close()


# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.DESCRIPTION,
    version=settings.VERSION,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        Basic API information.
    """
    return {
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "description": settings.DESCRIPTION
    }


# Error handlers
@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """
    Database error handler.

    Returns:
        JSON response with a generic database error.
    """
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler.

    Args:
        request: Request that caused the exception.
        exc: Exception that was raised.

    Returns:
        JSON response with error details.
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


# Include routers
app.include_router(ai_router, prefix="/api/ai", tags=["AI"])
app.include_router(location_router, prefix="/api/location", tags=["Location"])
app.include_router(alerts_router, prefix="/api/alerts", tags=["Alerts"])
app.include_router(threats_router, prefix="/api/threats", tags=["Threats"])
app.include_router(reports_router, prefix="/api/reports", tags=["Reports"])
app.include_router(safe_zones_router, prefix="/api/safe-zones", tags=["Safe Zones"])
app.include_router(education_router, prefix="/api/education", tags=["Education"])
app.include_router(contacts_router, prefix="/api/emergency-contacts", tags=["Emergency Contacts"])
app.include_router(chat_router, prefix="/api/chat", tags=["Chat"])
app.include_router(users_router, prefix="/api/users", tags=["Users"])
app.include_router(dashboard_router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(health_router, prefix="/api/health", tags=["Health"])

app.include_router(
    admin_router,
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin_key)]
)

app.include_router(uploads_router, prefix="/uploads", tags=["Uploads"])

app.include_router(
    websocket_router,
    tags=["WebSocket"]
)


# Run the application
if __name__ == "__main__":
    uvicorn.run(
        "borderwatch.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG
    )
