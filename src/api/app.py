"""FastAPI application: finance routers, error rendering and lifecycle."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.cards import router as cards_router
from src.api.debts import router as debts_router
from src.api.financial_profile import router as financial_profile_router
from src.api.reserves import router as reserves_router
from src.models import Base
from src.services import engine
from src.services.config import settings
from src.services.errors import HTTP_422_UNPROCESSABLE, FinanceError, error_response

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle (startup and shutdown)."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized")
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title=settings.api_title,
    description="Debts, reserves and ledger for personal finance tracking",
    version=settings.api_version,
    lifespan=lifespan,
)

# The React frontend is served from a different origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FinanceError)
async def finance_error_handler(request: Request, exc: FinanceError) -> JSONResponse:
    """Render domain errors as {error, details, ...} with their HTTP status."""
    if exc.http_status >= 500:
        logger.error("api.error: path=%s code=%s", request.url.path, exc.code)
    else:
        logger.info("api.error: path=%s code=%s detail=%s", request.url.path, exc.code, exc.message)
    return JSONResponse(error_response(exc), status_code=exc.http_status)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed request bodies in the same error shape."""
    logger.warning("api.validation: path=%s errors=%s", request.url.path, exc.errors())
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return JSONResponse(
        {"error": "validation_error", "details": details},
        status_code=HTTP_422_UNPROCESSABLE,
    )


app.include_router(debts_router)
app.include_router(financial_profile_router)
app.include_router(reserves_router)
app.include_router(cards_router)


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint for monitoring."""
    return {"status": "ok"}


__all__ = ["app"]
