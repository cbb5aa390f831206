# app/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from app.core.config import get_settings

# Routers
from app.routers.cart import router as cart_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Log which free item checks are active.

    Shutdown:
      - Nothing to clean up; carts live in memory only.
    """
    logger.info("🔄 Startup: cart service ready (carts are kept in memory).")
    if settings.FREE_ITEM_HISTORY_CHECK_ENABLED:
        logger.info("✅ Free item order history check ENABLED.")
    else:
        logger.info("ℹ️ Free item order history check disabled; cart-level check only.")
    yield


app = FastAPI(
    title=settings.PROJECT_NAME or "Farm Marketplace Cart API",
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(cart_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "farm-cart-backend"}
