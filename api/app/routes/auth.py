import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response

from .. import repo as auth_repo
from ..auth.deps import get_current_user
from ..auth.security import SessionTokenCodec, get_token_codec, hash_password, verify_password
from ..config import COOKIE_SECURE, SESSION_COOKIE_NAME, USER_ID_COOKIE_NAME
from ..http_helpers import normalize_email, serialize_profile, validate_registration_payload

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_session_cookies(response: Response, codec: SessionTokenCodec, user_id: str) -> None:
    """Set the httpOnly session cookie plus the readable user id cookie."""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=codec.issue(user_id),
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        path="/",
        max_age=codec.max_age_seconds,
    )
    response.set_cookie(
        key=USER_ID_COOKIE_NAME,
        value=user_id,
        secure=COOKIE_SECURE,
        samesite="lax",
        path="/",
        max_age=codec.max_age_seconds,
    )


def _clear_session_cookies(response: Response) -> None:
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")
    response.delete_cookie(key=USER_ID_COOKIE_NAME, path="/")


@router.post("/register")
def auth_register(
    payload: dict[str, Any],
    response: Response,
    codec: SessionTokenCodec = Depends(get_token_codec),
) -> dict[str, Any]:
    data = validate_registration_payload(payload)

    if auth_repo.get_user_by_email(data["email"]):
        raise HTTPException(status_code=400, detail="User already exists")

    created = auth_repo.create_user(
        email=data["email"],
        password_hash=hash_password(data["password"]),
        name=data["name"],
        age=data["age"],
        gender=data["gender"],
        interested_in=data["interested_in"],
        image=data["image"],
        instagram=data["instagram"],
        bio=data["bio"],
    )
    if not created:
        # Lost a race against a concurrent registration for the same email.
        raise HTTPException(status_code=400, detail="User already exists")

    logger.info(f"[auth] registered user_id={created['id']}")
    _set_session_cookies(response, codec, str(created["id"]))
    return {"user": serialize_profile(created)}


@router.post("/login")
def auth_login(
    payload: dict[str, Any],
    response: Response,
    codec: SessionTokenCodec = Depends(get_token_codec),
) -> dict[str, Any]:
    email = normalize_email(str(payload.get("email") or ""))
    password = str(payload.get("password") or "")
    if not email or not password:
        raise HTTPException(status_code=400, detail="Email and password required")

    user = auth_repo.get_user_by_email(email)
    if not user or not verify_password(password, str(user["password_hash"])):
        logger.info("[auth] login rejected: invalid credentials")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    _set_session_cookies(response, codec, str(user["id"]))
    return {"success": True, "userId": str(user["id"])}


@router.post("/logout")
def auth_logout(response: Response) -> dict[str, Any]:
    _clear_session_cookies(response)
    return {"success": True}


@router.get("/me")
def auth_me(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    return {"id": str(current_user["id"])}
