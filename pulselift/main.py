"""FastAPI application factory and lifespan."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pulselift.api.v1 import api_router
from pulselift.core.config import get_settings
from pulselift.core.errors import NotFoundError, WorkoutStateError
from pulselift.db.session import engine

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: nothing to warm up (schema is managed by Alembic); shutdown: dispose the pool."""
    yield
    await engine.dispose()


def create_application() -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # CORS: allow everything in debug; otherwise localhost in dev and CORS_ORIGINS in production
    if settings.debug:
        cors_origins = ["*"]
    elif settings.environment == "development":
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:8081"]
    else:
        cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(WorkoutStateError)
    async def workout_state_handler(request: Request, exc: WorkoutStateError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.get("/")
    def root():
        return {"status": "ok", "message": "PulseLift API"}

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_application()
