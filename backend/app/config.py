"""Application settings and validation."""

import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent


class Settings:
    ENV: str
    DATABASE_URL: str
    JWT_SECRET: str
    JWT_ALGORITHM: str
    JWT_EXPIRE_MINUTES: int
    ALLOW_INSECURE_JWT: bool
    ALLOW_DEV_CORS: bool
    TOKEN_COOKIE_NAME: str
    IMGBB_API_KEY: str
    IMGBB_UPLOAD_URL: str
    IMGBB_TIMEOUT_SECONDS: float
    MAX_UPLOAD_BYTES: int

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'app.db'}")
        self.JWT_SECRET = os.getenv("JWT_SECRET", "change_me_for_prod")
        self.JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
        self.JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", "60"))
        self.ALLOW_INSECURE_JWT = os.getenv("ALLOW_INSECURE_JWT", "false").lower() == "true"
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self.TOKEN_COOKIE_NAME = os.getenv("TOKEN_COOKIE_NAME", "token")
        self.IMGBB_API_KEY = os.getenv("IMGBB_API_KEY", "")
        self.IMGBB_UPLOAD_URL = os.getenv("IMGBB_UPLOAD_URL", "https://api.imgbb.com/1/upload")
        self.IMGBB_TIMEOUT_SECONDS = float(os.getenv("IMGBB_TIMEOUT_SECONDS", "30"))
        self.MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))  # 5 MB default
        self._validate()

    @property
    def secure_cookies(self) -> bool:
        return self.ENV == "production"

    def _validate(self):
        if self.ENV != "dev" and not self.ALLOW_INSECURE_JWT and self.JWT_SECRET == "change_me_for_prod":
            raise RuntimeError("JWT_SECRET must be set to a non-default value in non-dev environments")
        if self.JWT_EXPIRE_MINUTES <= 0:
            raise RuntimeError("JWT_EXPIRE_MINUTES must be a positive number of minutes")


settings = Settings()
