# shopping/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from sqlalchemy.engine import Engine

from shopping.api.errors import register_error_handlers
from shopping.api.routers import health, orders
from shopping.data import database
from shopping.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(engine: Engine | None = None) -> FastAPI:
    """
    engine to jawny uchwyt do bazy (wspolna pula polaczen).
    Tabele tworzymy raz, przy starcie, zanim przyjdzie pierwszy request.
    """
    engine = engine or database.engine

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.init_db(app.state.engine)
        logger.info("Order service started")
        yield
        app.state.engine.dispose()
        logger.info("Order service stopped, connection pool closed")

    app = FastAPI(
        title="Order Service",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.session_factory = database.make_session_factory(engine)

    register_error_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(orders.router)

    return app


configure_logging()
app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
