"""FastAPI application entrypoint for the Drill Extraction Service."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .routes import drills

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Drill Extraction Service starting up")
    logger.info(f"Max content length: {settings.max_content_chars} chars")
    yield
    logger.info("Drill Extraction Service shutting down")


app = FastAPI(
    title="Drill Extraction Service",
    description=(
        "Find animated drill diagrams in coaching chat replies, repair "
        "them and return renderer-ready drill JSON."
    ),
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(drills.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "drill-extraction"}


@app.get("/")
async def root():
    """Root endpoint with service info."""
    return {
        "service": "Drill Extraction",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8005)
