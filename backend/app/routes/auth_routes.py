"""Registration, login, logout and token verification endpoints.

These paths are public: the session gate lets anonymous callers reach
them. Login stores the signed token in an HttpOnly cookie, which the
gate reads on every later request.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse
from sqlmodel import Session

from .. import services
from ..config import settings
from ..database import get_session
from ..errors import service_errors
from ..schemas import TokenIn
from ..utils.imgbb import ImageUploadError

router = APIRouter(tags=["auth"])
logger = logging.getLogger("app.api")


@router.post('/registration')
def register(
    name: Optional[str] = Form(default=None),
    email: Optional[str] = Form(default=None),
    password: Optional[str] = Form(default=None),
    photo: Optional[UploadFile] = File(default=None),
    db: Session = Depends(get_session),
):
    """Register a `standard` user with a profile photo.

    The photo is pushed to the image host and only its URL is stored.
    """
    payload = None
    filename = None
    if photo is not None and photo.filename:
        filename = photo.filename
        # read one byte past the limit so oversize uploads are detectable
        payload = photo.file.read(settings.MAX_UPLOAD_BYTES + 1)
    svc = services.AuthService(db)
    try:
        with service_errors("Failed to register user."):
            svc.register(name, email, password, payload, filename)
    except ImageUploadError:
        logger.exception("photo upload failed during registration")
        raise HTTPException(status_code=500, detail="Failed to upload photo.")
    return {'message': 'Registration successful!'}


@router.post('/login')
def login(
    email: Optional[str] = Form(default=None),
    password: Optional[str] = Form(default=None),
    db: Session = Depends(get_session),
):
    """Authenticate and set the session cookie.

    The role is returned in the body so the client can route without
    keeping its own copy of the session.
    """
    svc = services.AuthService(db)
    with service_errors("Failed to log in."):
        user, token = svc.authenticate(email, password)
    response = JSONResponse({'message': 'Login successful', 'user': services.user_payload(user)})
    response.set_cookie(
        key=settings.TOKEN_COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRE_MINUTES * 60,
        path="/",
        httponly=True,
        secure=settings.secure_cookies,
        samesite="strict",
    )
    return response


@router.post('/logout')
def logout():
    """Expire the session cookie immediately."""
    response = JSONResponse({'message': 'Logged out'})
    response.set_cookie(
        key=settings.TOKEN_COOKIE_NAME,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        secure=settings.secure_cookies,
    )
    return response


@router.post('/jwt/verify-token')
def verify_token(payload: TokenIn, db: Session = Depends(get_session)):
    """Check a token and return the user it belongs to."""
    svc = services.AuthService(db)
    with service_errors("Failed to verify token."):
        user = svc.verify_token(payload.token)
    return {'message': 'Token OK!', 'user': services.user_payload(user)}
