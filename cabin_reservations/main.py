# cabin_reservations/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cabin_reservations.config import settings
from cabin_reservations.database import Base, engine
from cabin_reservations.routes import bookings, cabins, statistics, users

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        # Alembic owns the schema in production
        Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        lifespan=lifespan,
        title=settings.APP_NAME,
        description="Cabin reservations for the family: requests, approvals, payments and usage statistics",
        version=settings.APP_VERSION,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(users.router)
    app.include_router(cabins.router)
    app.include_router(bookings.router)
    app.include_router(statistics.router)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    @app.get("/", tags=["Root"])
    def read_root():
        return {"message": f"Welcome to {settings.APP_NAME}"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cabin_reservations.main:app", host="0.0.0.0", port=8000)
