"""
Auto-parts Storefront - Main FastAPI Application

Single entry point for all API routes (deployed as one serverless function).
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront import config
from storefront.logging import get_logger
from storefront.routers import router as api_router

logger = get_logger(__name__)


# ==================== FASTAPI APP ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    logger.info("Storefront API starting (CORS origins: %s)", ", ".join(config.CORS_ORIGINS))
    yield


app = FastAPI(
    title="Auto-parts Storefront",
    description="Catalog, vehicle fitment, cart and account API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type", "x-cart-session"],
    expose_headers=["x-cart-session"],
)

app.include_router(api_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "storefront"}
