"""
Main FastAPI application for the ride booking service.
Restores the system snapshot at startup and saves it at shutdown.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from ride_booking.core.config import settings
from ride_booking.core.exceptions import RideBookingError, SnapshotSaveError
from ride_booking.api.v1.api import api_router
from ride_booking.api.v1.schemas import ErrorResponse
from ride_booking.services.persistence import PersistenceManager
from ride_booking.core.logging import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    # Startup
    logger.info("Starting Ride Booking Application...")

    persistence = PersistenceManager()
    try:
        await persistence.initialize()
    except Exception:
        logger.exception("Could not prepare snapshot storage")
    app.state.persistence = persistence
    app.state.system = await persistence.load()

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    try:
        await persistence.save(app.state.system)
    except SnapshotSaveError as e:
        logger.error(f"Shutdown snapshot failed: {e}")
    await persistence.engine.dispose()

# Create FastAPI app
app = FastAPI(
    title="Ride Booking API",
    description="Ride booking with fare negotiation, earnings and complaints",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
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

@app.exception_handler(RideBookingError)
async def ride_booking_error_handler(request: Request, exc: RideBookingError):
    """Render domain errors as recoverable client errors."""
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.code, message=exc.message).model_dump()
    )

# Include API routes
app.include_router(api_router, prefix=settings.API_V1_STR)

@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Ride Booking API",
        "version": "1.0.0",
        "docs": "/docs"
    }

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "ride-booking"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "ride_booking.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
