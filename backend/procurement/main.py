import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from procurement.config import CORS_ORIGINS, LOG_LEVEL

logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s %(message)s")

from procurement.database import engine
from procurement.errors import PersistenceError, ProcurementError
from procurement.models.base import Base
import procurement.models  # noqa: F401 - register history and decision tables for create_all
from procurement.api.endpoints import bids, tenders

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="Procurement Tender API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tenders.router)
app.include_router(bids.router)


@app.exception_handler(ProcurementError)
async def procurement_error_handler(request: Request, exc: ProcurementError):
    if isinstance(exc, PersistenceError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.reason, exc_info=exc)
    else:
        logger.warning("%s %s rejected (%s): %s", request.method, request.url.path, exc.http_status, exc.reason)
    return JSONResponse(status_code=exc.http_status, content={"reason": exc.reason})


def _validation_reason(exc: RequestValidationError) -> str:
    """First offending parameter, phrased the way clients expect it."""
    errors = exc.errors()
    if not errors:
        return "incorrect request"
    err = errors[0]
    loc = err.get("loc") or ()
    if not loc or loc[0] == "body":
        return "incorrect request body"
    name = loc[-1] if len(loc) > 1 else loc[0]
    if err.get("type") == "missing":
        return f"{name} param is required"
    return f"incorrect {name}"


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    reason = _validation_reason(exc)
    logger.warning("%s %s rejected (400): %s", request.method, request.url.path, reason)
    return JSONResponse(status_code=400, content={"reason": reason})


@app.get("/api/ping", response_class=PlainTextResponse)
def ping():
    """Liveness probe."""
    return "ok"
