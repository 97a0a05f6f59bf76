from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any

import jwt
from fastapi import HTTPException
from passlib.context import CryptContext

from app.config import JWT_SECRET, SESSION_TTL_HOURS, UPLOAD_TOKEN_TTL_MINUTES

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")
ALGORITHM = "HS256"
UPLOAD_SCOPE = "upload"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


class TokenError(Exception):
    """Raised when a token fails verification."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class SessionTokenCodec:
    """
    Issues and verifies signed session tokens.

    The key material is handed in at construction so callers (and tests) control
    which secret is in force; nothing here reads process configuration.
    """

    def __init__(self, secret: str, ttl_hours: int = 24, algorithm: str = ALGORITHM):
        if not secret:
            raise ValueError("secret must be non-empty")
        self._secret = secret
        self.ttl_hours = ttl_hours
        self.algorithm = algorithm

    @property
    def max_age_seconds(self) -> int:
        return self.ttl_hours * 3600

    def _encode(self, payload: dict[str, Any], ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {**payload, "iat": int(now.timestamp()), "exp": int((now + ttl).timestamp())}
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def _decode(self, token: str) -> dict[str, Any]:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise TokenError("token_expired") from exc
        except jwt.PyJWTError as exc:
            raise TokenError("signature_invalid") from exc
        if not isinstance(payload, dict):
            raise TokenError("signature_invalid")
        return payload

    def issue(self, user_id: str) -> str:
        return self._encode({"sub": str(user_id)}, timedelta(hours=self.ttl_hours))

    def decode(self, token: str) -> dict[str, Any]:
        payload = self._decode(token)
        if payload.get("scope"):
            raise TokenError("wrong_scope")
        if not str(payload.get("sub") or ""):
            raise TokenError("token_missing_subject")
        return payload

    def issue_upload_token(self, uploader_id: str, pathname: str, ttl_minutes: int = UPLOAD_TOKEN_TTL_MINUTES) -> str:
        return self._encode(
            {"sub": uploader_id, "scope": UPLOAD_SCOPE, "pathname": pathname},
            timedelta(minutes=ttl_minutes),
        )

    def decode_upload_token(self, token: str) -> dict[str, Any]:
        payload = self._decode(token)
        if payload.get("scope") != UPLOAD_SCOPE:
            raise TokenError("wrong_scope")
        return payload


@lru_cache(maxsize=1)
def _codec_for(secret: str, ttl_hours: int) -> SessionTokenCodec:
    return SessionTokenCodec(secret, ttl_hours=ttl_hours)


def get_token_codec() -> SessionTokenCodec:
    if not JWT_SECRET:
        raise HTTPException(status_code=500, detail="JWT secret not configured")
    return _codec_for(JWT_SECRET, SESSION_TTL_HOURS)
