# shopping_cart/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from shopping_cart.api.routers import carts
from shopping_cart.data.database import get_engine, init_db
from shopping_cart.errors import StorageError
from shopping_cart.utils.config import ConfigAccessor
from shopping_cart.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = ConfigAccessor()
    if config.storage_driver == "database":
        logger.info("Creating cart tables")
        init_db(get_engine(config.database_connection))
    yield


async def storage_error_handler(request: Request, exc: StorageError):
    return JSONResponse(status_code=503, content={"detail": "Cart storage unavailable"})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Shopping Cart",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.get("/health", tags=["health"])
    def health():
        return {"status": "ok"}

    app.include_router(carts.router)
    app.add_exception_handler(StorageError, storage_error_handler)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
