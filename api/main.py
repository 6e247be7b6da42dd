"""
api.main
========

FastAPI application: routers, CORS, and the translation of core errors
into JSON responses that name the offending field.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from meridian import __version__, presentation
from meridian.db import create_all
from meridian.errors import ConcurrentModification, MeridianError, NotFound
from meridian.models import Company
from meridian.service import BackOffice
from meridian.settings import API_DEBUG, API_HOST, API_PORT, settings
from .communications import router as communications_router
from .deps import get_office
from .enquiries import router as enquiries_router
from .quotations import router as quotations_router
from .schemas import CompanyCreate
from .tasks import router as tasks_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_all()
    yield


app = FastAPI(
    title="Meridian Back Office API",
    version=__version__,
    description="Enquiries, quotations, communications and the derived task worklist.",
    debug=API_DEBUG,
    lifespan=lifespan,
)

# --- CORS ----------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)

# --- Include Routers ----------------------------------------------------------
app.include_router(enquiries_router)
app.include_router(quotations_router)
app.include_router(communications_router)
app.include_router(tasks_router)


# --- Error translation ------------------------------------------------
def _status_for(exc: MeridianError) -> int:
    if isinstance(exc, NotFound):
        return 404
    if isinstance(exc, ConcurrentModification):
        return 409
    return 422


@app.exception_handler(MeridianError)
async def meridian_error_handler(request: Request, exc: MeridianError):
    status_code = _status_for(exc)
    logger.warning(f"{request.method} {request.url.path} rejected ({status_code}): {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": str(exc), **exc.details()},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies get the same shape as core InvalidValue errors."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    return JSONResponse(
        status_code=422,
        content={
            "error": "invalid_value",
            "message": first.get("msg", "invalid request"),
            "field": loc[-1] if loc else None,
            "reason": first.get("msg"),
            "errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors],
        },
    )


# ---------- health-check ----------
@app.get("/")
def root():
    return {"status": "ok", "msg": "Meridian API is alive"}


# ---------- POST /companies ----------
@app.post("/companies", status_code=201, response_model=Company)
def add_company(data: CompanyCreate, office: BackOffice = Depends(get_office)):
    return office.create_company(data.name)


# ---------- GET /meta ----------
@app.get("/meta")
def metadata():
    """Labels, colours and icons for every status, priority and type."""
    return presentation.as_json()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=API_HOST, port=API_PORT, reload=API_DEBUG)
