"""
FastAPI Application - Product Service
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from app.api import health, products
from app.core.config import config
from app.core.errors import (
    ErrorResponse,
    error_response_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.core.logger import logger
from app.db.mongodb import close_mongo_connection, connect_to_mongo, get_product_collection
from app.db.seed import load_seed_data
from app.repositories.product import ProductRepository
from app.telemetry import get_telemetry_client, shutdown_telemetry
from app.middleware import TelemetryMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("Starting Product Service...")
    get_telemetry_client()
    await connect_to_mongo()

    if config.seed_on_startup:
        await load_seed_data(ProductRepository(await get_product_collection()))

    logger.info(
        "Product Service started successfully",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port
        }
    )

    yield

    # Shutdown
    logger.info("Shutting down Product Service...")
    await close_mongo_connection()
    shutdown_telemetry()


def create_app() -> FastAPI:
    """Build the FastAPI application"""
    application = FastAPI(
        title="Product Service",
        description="API for managing products including creation, retrieval, updates, and inventory management",
        version=config.service_version,
        lifespan=lifespan
    )

    # Configure error handlers
    application.add_exception_handler(ErrorResponse, error_response_handler)
    application.add_exception_handler(HTTPException, http_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Trace every request
    application.add_middleware(TelemetryMiddleware)

    # Include API routers
    application.include_router(health.router, prefix="/api", tags=["health"])
    application.include_router(products.router, prefix="/api/products", tags=["products"])

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(
        f"Starting {config.service_name} on port {config.port}",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port
        }
    )

    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.environment == "development"
    )
