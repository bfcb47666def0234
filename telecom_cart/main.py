# telecom_cart/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from sqlalchemy.orm import sessionmaker

from telecom_cart.api.errors import register_exception_handlers
from telecom_cart.api.routers import carts, health
from telecom_cart.data.database import SessionLocal, init_db
from telecom_cart.repos.memory_cart_store import InMemoryCartStore
from telecom_cart.services.snapshot_cache import CartSnapshotCache
from telecom_cart.utils import settings
from telecom_cart.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

API_VERSION = "1.0.0"

ENDPOINTS = {
    "cart": "GET /api/cart/:userId",
    "addItem": "POST /api/cart/:userId/items",
    "updateItem": "PUT /api/cart/:userId/items/:itemId",
    "removeItem": "DELETE /api/cart/:userId/items/:itemId",
    "clearCart": "DELETE /api/cart/:userId",
    "getTotal": "GET /api/cart/:userId/total",
    "health": "GET /api/health",
}


def create_app(
    store_backend: str | None = None,
    fallback_cache: bool | None = None,
    session_factory: sessionmaker | None = None,
) -> FastAPI:
    backend = (store_backend or settings.CART_STORE).lower()
    if backend not in ("sql", "memory"):
        raise ValueError(f"Unknown CART_STORE '{backend}', expected 'sql' or 'memory'")

    use_cache = settings.CART_FALLBACK_CACHE if fallback_cache is None else fallback_cache

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()
        if backend == "sql":
            init_db()
        logger.info(f"Cart service gotowy (store={backend}, fallback_cache={use_cache})")
        yield

    app = FastAPI(
        title="Telecom Cart Experience API",
        version=API_VERSION,
        lifespan=lifespan,
    )

    app.state.memory_store = InMemoryCartStore() if backend == "memory" else None
    app.state.session_factory = (session_factory or SessionLocal) if backend == "sql" else None
    app.state.snapshot_cache = CartSnapshotCache(settings.CART_FALLBACK_CACHE_SIZE) if use_cache else None

    @app.get("/", tags=["meta"])
    def root():
        return {
            "message": "Telecom Cart Experience API",
            "version": API_VERSION,
            "endpoints": ENDPOINTS,
        }

    # Include routers
    app.include_router(health.router)
    app.include_router(carts.router)

    register_exception_handlers(app)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
