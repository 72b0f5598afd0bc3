# main.py

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from storefront.core.config import settings
from storefront.core.error_handlers import setup_error_handlers, add_request_id_middleware
from storefront.logging import setup_logging, logger

from storefront.auth.controller import router as auth_router
from storefront.products.controller import router as products_router
from storefront.cart.controller import router as cart_router
from storefront.orders.controller import router as orders_router

# Import models to ensure they are registered with SQLAlchemy
from storefront.database import models  # noqa: F401
from storefront.database.core import Base, SessionLocal, engine
from storefront.database.seed import seed_database

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and load the sample catalogue on startup."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

    if settings.SEED_DATA:
        db = SessionLocal()
        try:
            seed_database(db)
        finally:
            db.close()

    logger.info("Storefront API startup completed")
    yield
    logger.info("Storefront API shutting down")


app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan,
)

setup_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add request ID middleware for better error tracking
app.middleware("http")(add_request_id_middleware)

app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(products_router, prefix=settings.API_PREFIX)
app.include_router(cart_router, prefix=settings.API_PREFIX)
app.include_router(orders_router, prefix=settings.API_PREFIX)


@app.get("/health")
async def health_check():
    """Simple health check endpoint."""
    return {"status": "ok"}


@app.get("/", tags=["Root"])
async def read_root():
    return {"status": "ok", "message": f"{settings.API_TITLE} is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
