# Backend/app/main.py
from __future__ import annotations

# --- make `api.*`, `app.*` and `services.*` importable when run as `uvicorn app.main:app` from Backend/ ---
import sys
from pathlib import Path
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))
# -------------------------------------------------------------------------

from fastapi import APIRouter, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_log_level, settings
from app.core.logging import configure_logging, get_logger
from app.core.request_id import REQUEST_ID_HEADER, RequestIdMiddleware

from api.routers.neu_yz import router as neu_yz_router

APP_TITLE = "NEU Admissions Feed"

configure_logging(service_name="api", level=get_log_level())
logger = get_logger(module="main")

app = FastAPI(title=APP_TITLE, version=settings.APP_VERSION)

# Feeds are read-only: GET/HEAD plus preflight.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["GET", "HEAD", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER],
)
app.add_middleware(RequestIdMiddleware)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", path=request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


# --- Health ---
@app.get("/")
async def root():
    return {"ok": True, "app": APP_TITLE, "version": settings.APP_VERSION}

@app.head("/")
async def root_head():
    return Response(status_code=200)

@app.get("/health")
async def health():
    return {"ok": True}

@app.get("/healthz")
async def healthz():
    return {"status": "healthy"}


# --- /api/v1 ---
api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(neu_yz_router)
app.include_router(api_v1_router)

logger.info("routers_registered", routers=["neu_yz"], cors_origins=settings.CORS_ALLOW_ORIGINS)
