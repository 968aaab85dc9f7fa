import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mixtape.api.routes import router
from mixtape.config import settings
from mixtape.db.connection import run_migrations
from mixtape.repositories.catalog_repository import CatalogRepository
from mixtape.repositories.submission_repository import SubmissionRepository
from mixtape.schemas.submission import FlashResponse
from mixtape.services.submission_service import (
    NotAuthenticated,
    NotAuthorized,
    SubmissionError,
    SubmissionInvalid,
    SubmissionNotFound,
    SubmissionService,
    TrackAppendFailed,
)

_ERROR_STATUS_CODES = {
    NotAuthenticated: 401,
    NotAuthorized: 403,
    SubmissionNotFound: 404,
    SubmissionInvalid: 422,
    TrackAppendFailed: 422,
}


def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    _configure_logging()
    logger = logging.getLogger(__name__)
    db_path = app.state.db_path
    logger.info("Mixtape submissions starting | db=%s | port=%s", db_path, settings.PORT)
    run_migrations(db_path)
    app.state.submission_service = SubmissionService(
        SubmissionRepository(db_path), CatalogRepository(db_path)
    )
    yield
    logger.info("Mixtape submissions shutting down")


def create_app(db_path: str | None = None) -> FastAPI:
    app = FastAPI(title="Mixtape Submissions", version="1.0.0", lifespan=lifespan)
    app.state.db_path = db_path or settings.DB_PATH

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.exception_handler(SubmissionError)
    async def submission_exception_handler(request: Request, exc: SubmissionError) -> JSONResponse:
        body = FlashResponse(
            status="error",
            message=exc.message,
            redirect_to=exc.redirect_to,
            errors=getattr(exc, "errors", None),
            assets=getattr(exc, "assets", None),
        )
        logging.getLogger(__name__).info(
            "[http] %s %s -> %s | %s", request.method, request.url.path, type(exc).__name__, exc.message
        )
        return JSONResponse(
            status_code=_ERROR_STATUS_CODES.get(type(exc), 400),
            content=body.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logging.getLogger(__name__).exception("Unhandled exception")
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": "Internal server error"},
        )

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("mixtape.main:app", host="0.0.0.0", port=settings.PORT, log_level=settings.LOG_LEVEL)
