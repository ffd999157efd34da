"""FastAPI application entrypoint.

This module wires the JapWord API together: logging, the session gate,
request logging, CORS, error handlers and the routers. Controllers are
intentionally thin: they accept requests, delegate to services, and
return JSON responses. Every error body is `{"message": ...}`.

Endpoints implemented:
- POST /api/registration, /api/login, /api/logout, /api/jwt/verify-token
- GET|POST /api/admin/lessons, GET|PATCH|DELETE /api/admin/lessons/{lessonNumber}
- GET|POST /api/admin/words, GET|PATCH|DELETE /api/admin/words/{wordID}
- GET|POST /api/admin/tutorials, GET|PATCH|DELETE /api/admin/tutorials/{tutorialID}
- GET /api/admin/users, GET|PATCH|DELETE /api/admin/users/{userID}
- GET /api/user/lessons, GET /api/user/lessons/{lessonNumber}
- GET /api/user/lessons/{lessonNumber}/practice, POST .../practice/complete
- GET /api/user/tutorials
- GET /health
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import os
import json
import logging
import time
import uuid
from . import gate
from .config import settings
from .database import create_db_and_tables
from .errors import validation_message
from .routes import admin_routes, auth_routes, user_routes

app = FastAPI(title="JapWord API")
logger = logging.getLogger("app.api")
if not logger.handlers:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

create_db_and_tables()

# Registered first so it sits inside the request logger below.
app.middleware("http")(gate.session_gate)


def _request_log(request: Request, req_id: str, started: float, **extra) -> str:
    """One JSON line describing a request, for the request logger."""
    record = {
        "request_id": req_id,
        "path": request.url.path,
        "method": request.method,
        **extra,
        "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
        "client": request.client.host if request.client else "unknown",
    }
    return json.dumps(record, ensure_ascii=True)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("request_failed %s", _request_log(request, req_id, started))
        raise
    response.headers["X-Request-ID"] = req_id
    if request.url.path.startswith("/api"):
        logger.info(
            "request_done %s",
            _request_log(request, req_id, started, status_code=response.status_code),
        )
    return response


# Outermost, so preflight requests are answered before the gate runs.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"message": validation_message(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error."})


app.include_router(auth_routes.router, prefix="/api")
app.include_router(admin_routes.router, prefix="/api/admin")
app.include_router(user_routes.router, prefix="/api/user")


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}
