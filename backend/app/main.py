"""
Main FastAPI application entry point.
Initializes the app, middleware, and routes.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from app.config import settings
from app.services.practice_session import session_registry

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Cantonese character handwriting practice with spaced repetition",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """
    Run on application startup.
    The Cosmos DB client connects lazily on first use.
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info("Application started successfully")


@app.on_event("shutdown")
async def shutdown_event():
    """
    Run on application shutdown.
    Writes out every practice session that is still open.
    """
    logger.info("Shutting down application...")

    open_sessions = len(session_registry)
    await session_registry.close_all()
    logger.info(f"Saved {open_sessions} open sessions")

    logger.info("Application shutdown complete")


@app.get("/")
async def root():
    """Health check endpoint"""
    return JSONResponse(content={
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "healthy",
        "environment": settings.ENVIRONMENT
    })


@app.get("/health")
async def health_check():
    """
    Detailed health check endpoint.
    """
    health_status = {
        "status": "healthy",
        "services": {
            "api": "up",
            "cosmos_db": "configured" if settings.COSMOS_DB_KEY else "not configured",
            "open_sessions": len(session_registry)
        }
    }

    return JSONResponse(content=health_status)


# Include routers
from app.api.v1.endpoints import attempts
from app.api.v1.endpoints import exercises
from app.api.v1.endpoints import sessions
from app.api.v1.endpoints import strokes
from app.api.v1.endpoints import users
app.include_router(attempts.router, prefix=f"{settings.API_V1_PREFIX}/attempts", tags=["attempts"])
app.include_router(exercises.router, prefix=f"{settings.API_V1_PREFIX}/exercises", tags=["exercises"])
app.include_router(sessions.router, prefix=f"{settings.API_V1_PREFIX}/sessions", tags=["sessions"])
app.include_router(strokes.router, prefix=f"{settings.API_V1_PREFIX}/strokes", tags=["strokes"])
app.include_router(users.router, prefix=f"{settings.API_V1_PREFIX}/users", tags=["users"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
