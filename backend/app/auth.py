"""Authentication helpers and FastAPI identity dependencies.

This module signs and decodes session tokens (PyJWT), hashes passwords
(passlib) and exposes dependencies that read the caller identity the
session gate attached to `request.state`. Routes never decode tokens
themselves; by the time a handler runs the gate has already decided
whether the caller may reach it.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import HTTPException, Request
from passlib.context import CryptContext

from .config import settings
from .models import ROLE_ADMIN, User

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as propagated through the request context."""
    user_id: int
    name: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(user_id=user.id, name=user.name, email=user.email, role=user.role)


def hash_password(password: str) -> str:
    return PWD_CTX.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Check `password` against a stored hash; unknown hash formats never match."""
    if not password_hash:
        return False
    try:
        return PWD_CTX.verify(password, password_hash)
    except ValueError:
        return False


def create_token(user: User, expires_minutes: Optional[int] = None) -> str:
    """Sign a session token for `user`.

    The payload carries the display name, email and role plus issue and
    expiry timestamps. The password hash is deliberately not included.
    """
    now = datetime.now(timezone.utc)
    if expires_minutes is None:
        expires_minutes = settings.JWT_EXPIRE_MINUTES
    expire = now + timedelta(minutes=expires_minutes)
    payload = {
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "timestamp": int(now.timestamp() * 1000),
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify a session token.

    Returns the payload, or `None` when the signature is wrong, the token
    has expired or the string is not a token at all.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError:
        return None


def get_identity(request: Request) -> Identity:
    """FastAPI dependency returning the identity set by the session gate.

    Raises 401 if the gate did not authenticate the request (which only
    happens for routes reachable anonymously).
    """
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return identity
