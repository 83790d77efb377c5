from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .errors import AmbiguousResultError, DirectoryError, NotFoundError
from .log_config import setup_logging
from .routers.directory import router as directory_router
from .settings import get_settings

log = logging.getLogger(__name__)


def _status_for(exc: DirectoryError) -> int:
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, AmbiguousResultError):
        return status.HTTP_409_CONFLICT
    # Connection, bind and search failures are upstream problems.
    return status.HTTP_502_BAD_GATEWAY


def create_app() -> FastAPI:
    st = get_settings()
    setup_logging(level=st.log_level, log_dir=st.log_dir, retention_days=st.log_retention_days)

    app = FastAPI(title=st.app_name)
    app.include_router(directory_router)

    @app.exception_handler(DirectoryError)
    async def directory_error_handler(request: Request, exc: DirectoryError) -> JSONResponse:
        code = _status_for(exc)
        if code >= 500:
            log.error("%s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=code, content={"detail": str(exc)})

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
