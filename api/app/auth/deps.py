"""
Authentication dependencies for FastAPI.

Two ways to carry the session token:
1. Cookie-based session (primary for web): httpOnly cookie holds the token
2. Bearer token (API clients): Authorization header with Bearer token

Verification is stateless. A valid signature and expiry are enough; the
identity is not looked up in the store here.
"""

import logging
import uuid
from typing import Any

from fastapi import Cookie, Depends, Header, HTTPException
from pydantic import BaseModel

from app.auth.security import SessionTokenCodec, TokenError, get_token_codec
from app.config import DEV_MODE, SESSION_COOKIE_NAME

logger = logging.getLogger(__name__)


class AuthErrorDetail(BaseModel):
    message: str
    reason: str
    trace_id: str


def _log_auth_failure(
    reason: str,
    trace_id: str,
    token_prefix: str | None = None,
    auth_source: str | None = None,
) -> None:
    log_data = {
        "trace_id": trace_id,
        "reason": reason,
        "auth_source": auth_source,
        "token_prefix": token_prefix,
    }
    logger.warning(f"[AUTH_FAILURE] {log_data}")


def _unauthorized(trace_id: str, reason: str, message: str = "Unauthorized") -> HTTPException:
    # Dev builds echo the failure reason back to the client.
    detail: Any = message
    if DEV_MODE:
        detail = AuthErrorDetail(message=message, reason=reason, trace_id=trace_id).model_dump()
    return HTTPException(status_code=401, detail=detail, headers={"X-Trace-Id": trace_id})


def _extract_bearer(authorization: str | None) -> str:
    """Extract Bearer token from Authorization header."""
    if not authorization:
        raise TokenError("missing_token")
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise TokenError("malformed_token")
    return parts[1].strip()


def _resolve_token(session_token: str | None, authorization: str | None) -> tuple[str, str]:
    if session_token:
        return session_token, "cookie"
    return _extract_bearer(authorization), "bearer"


def get_current_user(
    session_token: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    authorization: str | None = Header(default=None, alias="Authorization"),
    codec: SessionTokenCodec = Depends(get_token_codec),
) -> dict[str, Any]:
    """
    Resolve the caller from the session cookie, falling back to a bearer token.

    Any failure (missing, malformed, expired, bad signature) is a 401.
    """
    trace_id = str(uuid.uuid4())
    auth_source = "none"
    token = ""
    try:
        token, auth_source = _resolve_token(session_token, authorization)
        payload = codec.decode(token)
    except TokenError as e:
        token_prefix = token[:8] + "..." if token else None
        _log_auth_failure(e.reason, trace_id, token_prefix, auth_source)
        message = "Authentication required" if e.reason == "missing_token" else "Unauthorized"
        raise _unauthorized(trace_id, e.reason, message)

    logger.debug(f"[auth] token valid via {auth_source}, sub={payload.get('sub')}")
    return {"id": str(payload["sub"])}


def get_optional_user(
    session_token: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    authorization: str | None = Header(default=None, alias="Authorization"),
    codec: SessionTokenCodec = Depends(get_token_codec),
) -> dict[str, Any] | None:
    """Like get_current_user, but anonymous or invalid callers resolve to None."""
    if not session_token and not authorization:
        return None
    try:
        token, _ = _resolve_token(session_token, authorization)
        payload = codec.decode(token)
    except TokenError as e:
        logger.info(f"[auth] optional session rejected ({e.reason}), continuing as guest")
        return None
    return {"id": str(payload["sub"])}
