"""Session gate: per-request authentication and role-based routing.

Every request passes through `session_gate`. It reads the session token
from the cookie, exchanges it for the stored user and then applies
`decide()`:

- anonymous callers are redirected to the login page unless the path is
  public (login/registration and their API endpoints, health, docs);
- signed-in callers on `/` (or on the login/registration pages) are sent
  to their role's landing page;
- `/admin` and `/api/admin` paths need the `admin` role, `/user` and
  `/api/user` paths need the `standard` role; anything else gets 401.

Allowed requests carry the caller on `request.state.identity` so handlers
take it from the request context rather than from any ambient state.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool

from . import database
from .auth import Identity
from .config import settings
from .models import ROLE_ADMIN, ROLE_STANDARD
from .services import AuthService

logger = logging.getLogger("app.gate")

LOGIN_PATH = "/login"
REGISTRATION_PATH = "/registration"
LANDING_PAGES = {
    ROLE_ADMIN: "/admin/dashboard",
    ROLE_STANDARD: "/user/lessons",
}
PUBLIC_PATHS = (
    LOGIN_PATH,
    REGISTRATION_PATH,
    "/api/login",
    "/api/registration",
    "/api/logout",
    "/api/jwt/verify-token",
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
)
ROLE_PREFIXES = (
    ("/api/admin", ROLE_ADMIN),
    ("/admin", ROLE_ADMIN),
    ("/api/user", ROLE_STANDARD),
    ("/user", ROLE_STANDARD),
)


@dataclass(frozen=True)
class GateDecision:
    """Outcome of the gate: pass through, redirect, or reject."""
    action: str  # "allow" | "redirect" | "reject"
    location: Optional[str] = None

    @classmethod
    def allow(cls) -> "GateDecision":
        return cls("allow")

    @classmethod
    def redirect(cls, location: str) -> "GateDecision":
        return cls("redirect", location)

    @classmethod
    def reject(cls) -> "GateDecision":
        return cls("reject")


def is_under(path: str, prefix: str) -> bool:
    """True when `path` is `prefix` itself or one of its sub-paths."""
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def is_public(path: str) -> bool:
    return any(is_under(path, p) for p in PUBLIC_PATHS)


def landing_page(role: str) -> str:
    return LANDING_PAGES.get(role, LOGIN_PATH)


def decide(path: str, identity: Optional[Identity]) -> GateDecision:
    """Routing decision for `path` given the (possibly anonymous) caller."""
    if identity is None:
        if is_public(path):
            return GateDecision.allow()
        return GateDecision.redirect(LOGIN_PATH)

    if path == "/" or is_under(path, LOGIN_PATH) or is_under(path, REGISTRATION_PATH):
        return GateDecision.redirect(landing_page(identity.role))

    for prefix, role in ROLE_PREFIXES:
        if is_under(path, prefix):
            return GateDecision.allow() if identity.role == role else GateDecision.reject()
    return GateDecision.allow()


def resolve_identity(token: Optional[str]) -> Optional[Identity]:
    """Exchange the cookie token for an identity; any failure means anonymous."""
    if not token:
        return None
    try:
        with Session(database.engine) as session:
            return AuthService(session).resolve_identity(token)
    except SQLAlchemyError:
        logger.exception("token verification failed against the store")
        return None


async def session_gate(request: Request, call_next):
    path = request.url.path
    # the lookup is a blocking store query
    identity = await run_in_threadpool(resolve_identity, request.cookies.get(settings.TOKEN_COOKIE_NAME))
    decision = decide(path, identity)

    if decision.action == "redirect":
        return RedirectResponse(url=decision.location, status_code=307)
    if decision.action == "reject":
        logger.info("gate rejected path=%s role=%s", path, identity.role if identity else "anonymous")
        return JSONResponse(status_code=401, content={"message": "Unauthorized"})

    request.state.identity = identity
    response = await call_next(request)
    response.headers["X-User-Logged-In"] = "true" if identity else "false"
    response.headers["X-User-Role"] = identity.role if identity else "guest"
    response.headers["X-Current-Pathname"] = path
    return response
