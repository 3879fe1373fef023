import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_cors_origins, get_gemini_key, get_log_level, is_debug
from .routes.forecast import router as forecast_router
from .services.forecast_dependency import build_services

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):

    # Startup
    print("Starting CropSense forecast service")
    print(f"   Gemini Key:  {' Configured' if get_gemini_key() else ' Not set (using mock data)'}")
    build_services(app)
    print("   Ready to forecast crop demand!")

    yield

    print("Shutting down CropSense forecast service")


app = FastAPI(
    title="CropSense: Crop Demand & Glut-Risk Forecasting",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(forecast_router)


@app.get(
    "/",
    summary="API Root",
    description="Welcome endpoint with API information",
    tags=["General"]
)
async def root():
    """Root endpoint with API information."""
    return {
        "name": "CropSense",
        "version": "0.1.0",
        "description": "AI-assisted crop demand forecasting and glut-risk advice",
        "docs": "/docs",
        "endpoints": {
            "forecast": "POST /api/forecast - Forecast demand, price and glut risk",
            "simulate": "POST /api/simulate - Project revenue and profit for a market",
            "health": "GET /health - Service health check"
        }
    }


@app.get(
    "/health",
    summary="Global Health Check",
    description="Check if the API server is running",
    tags=["General"]
)
async def health():
    """Global health check endpoint."""
    return {
        "status": "healthy",
        "service": "cropsense",
        "version": "0.1.0",
        "ai_configured": bool(get_gemini_key()),
    }


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "detail": str(exc) if is_debug() else "An unexpected error occurred"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cropsense.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=is_debug(),
    )
