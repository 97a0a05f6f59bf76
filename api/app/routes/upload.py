import logging
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from ..auth.deps import get_optional_user
from ..auth.security import SessionTokenCodec, TokenError, get_token_codec
from ..config import ALLOWED_UPLOAD_CONTENT_TYPES, UPLOAD_TOKEN_TTL_MINUTES
from ..http_helpers import safe_upload_pathname, store_uploaded_photo

logger = logging.getLogger(__name__)

router = APIRouter()

GUEST_UPLOADER = "guest_registration"


@router.post("/upload")
def create_upload_handle(
    payload: dict[str, Any],
    current_user: dict[str, Any] | None = Depends(get_optional_user),
    codec: SessionTokenCodec = Depends(get_token_codec),
) -> dict[str, Any]:
    """Hand out a short-lived, write-capable token for one photo blob.

    Guests may upload so the registration form can attach a photo before the
    account exists.
    """
    content_type = str(payload.get("contentType") or "").strip().lower()
    if content_type and content_type not in ALLOWED_UPLOAD_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail="Only JPG, PNG, WEBP and GIF images are allowed")

    uploader_id = str(current_user["id"]) if current_user else GUEST_UPLOADER
    pathname = safe_upload_pathname(str(payload.get("pathname") or ""))
    token = codec.issue_upload_token(uploader_id, pathname, ttl_minutes=UPLOAD_TOKEN_TTL_MINUTES)
    logger.info(f"[upload] handle issued uploader={uploader_id} pathname={pathname}")
    return {
        "uploadUrl": f"/upload/{token}",
        "token": token,
        "pathname": pathname,
        "allowedContentTypes": ALLOWED_UPLOAD_CONTENT_TYPES,
        "expiresIn": UPLOAD_TOKEN_TTL_MINUTES * 60,
    }


@router.put("/upload/{upload_token}")
async def write_upload(
    upload_token: str,
    request: Request,
    file: UploadFile = File(...),
    codec: SessionTokenCodec = Depends(get_token_codec),
) -> dict[str, Any]:
    try:
        grant = codec.decode_upload_token(upload_token)
    except TokenError as e:
        logger.warning(f"[upload] rejected handle reason={e.reason}")
        raise HTTPException(status_code=401, detail="Invalid upload token")

    url = await store_uploaded_photo(file, str(grant["sub"]), str(grant.get("pathname") or ""), request)
    logger.info(f"[upload] blob stored uploader={grant['sub']} url={url}")
    return {"url": url, "pathname": grant.get("pathname")}
