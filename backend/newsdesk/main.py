"""FastAPI application entry point."""

import logging
import os

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S")

# Apply the same format to Uvicorn's loggers so they also show timestamps.
for _uvicorn_logger in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    _log = logging.getLogger(_uvicorn_logger)
    _log.handlers.clear()
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S"))
    _log.addHandler(_handler)
    _log.propagate = False

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from newsdesk.schemas.errors import ErrorResponse
from newsdesk.services.account import ConfirmationError
from newsdesk.services.identity import IdentityError
from newsdesk.services.note_store import StorageError
from newsdesk.services.session import UnauthenticatedError

logger = logging.getLogger(__name__)

app = FastAPI(title="Newsdesk")

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])


def _allowed_origins() -> list[str]:
    raw = os.environ.get("ALLOWED_ORIGINS", "").strip()
    if not raw:
        return ["http://localhost:3000", "http://127.0.0.1:3000"]
    return [o.strip() for o in raw.split(",") if o.strip()]


app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "dev-secret-change-me"),
)


@app.on_event("startup")
def startup() -> None:
    from newsdesk.api.deps import notes_backend
    from newsdesk.db import create_tables

    if notes_backend() == "sql":
        create_tables()


def _error_response(status_code: int, error: str, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=str(exc)).model_dump(),
    )


@app.exception_handler(UnauthenticatedError)
async def _unauthenticated_handler(request: Request, exc: UnauthenticatedError) -> JSONResponse:
    return _error_response(401, "unauthenticated", exc)


@app.exception_handler(ConfirmationError)
async def _confirmation_handler(request: Request, exc: ConfirmationError) -> JSONResponse:
    return _error_response(400, "confirmation_required", exc)


@app.exception_handler(StorageError)
async def _storage_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("storage error on %s %s: %s", request.method, request.url.path, exc)
    return _error_response(502, "storage_error", exc)


@app.exception_handler(IdentityError)
async def _identity_handler(request: Request, exc: IdentityError) -> JSONResponse:
    logger.error("identity error on %s %s: %s", request.method, request.url.path, exc)
    return _error_response(502, "identity_error", exc)


@app.exception_handler(Exception)
async def _global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error_response(500, "internal_error", exc)


# Import and register routers after app is defined to avoid circular imports.
from newsdesk.api import account, auth, health, news, notes  # noqa: E402

app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(notes.router, prefix="/notes", tags=["notes"])
app.include_router(account.router, prefix="/account", tags=["account"])
app.include_router(news.router, tags=["news"])
