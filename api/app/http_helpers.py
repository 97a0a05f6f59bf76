import re
import uuid
from pathlib import Path
from typing import Any

from fastapi import HTTPException, Request, UploadFile

from .config import ALLOWED_UPLOAD_CONTENT_TYPES, MAX_UPLOAD_BYTES, UPLOADS_DIR
from .models import GENDERS, PREFERENCES

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}
# Wire name -> column name for the owner-editable profile fields.
PROFILE_UPDATE_ALLOWLIST = {
    "bio": "bio",
    "image": "image",
    "interestedIn": "interested_in",
    "instagram": "instagram",
}


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=400, detail=detail)


def _coerce_age(raw: Any) -> int:
    if isinstance(raw, bool):
        raise _bad_request("Age must be a number")
    try:
        age = float(str(raw).strip())
    except (TypeError, ValueError):
        raise _bad_request("Age must be a number")
    if not age.is_integer():
        raise _bad_request("Age must be a whole number")
    return int(age)


def validate_registration_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Check a registration body; the first failing rule is reported."""
    email = normalize_email(str(payload.get("email") or ""))
    if not EMAIL_RE.match(email) or len(email) > 254:
        raise _bad_request("Invalid email address")

    password = payload.get("password")
    if not isinstance(password, str) or len(password) < 6:
        raise _bad_request("Password must be at least 6 characters")

    name = str(payload.get("name") or "").strip()
    if len(name) < 2:
        raise _bad_request("Name must be at least 2 characters")

    age = _coerce_age(payload.get("age"))
    if age < 18:
        raise _bad_request("You must be at least 18 years old")

    gender = str(payload.get("gender") or "").strip().upper()
    if gender not in GENDERS:
        raise _bad_request("gender must be one of: " + ", ".join(GENDERS))

    interested_in = str(payload.get("interestedIn") or "").strip().upper()
    if interested_in not in PREFERENCES:
        raise _bad_request("interestedIn must be one of: " + ", ".join(PREFERENCES))

    image = str(payload.get("image") or "").strip()
    if not image:
        raise _bad_request("Profile photo is required")

    instagram = str(payload.get("instagram") or "").strip()
    if not instagram:
        raise _bad_request("Instagram handle is required")

    bio = payload.get("bio")
    return {
        "email": email,
        "password": password,
        "name": name,
        "age": age,
        "gender": gender,
        "interested_in": interested_in,
        "image": image,
        "instagram": instagram,
        "bio": str(bio) if bio is not None else None,
    }


def sanitize_profile_update(payload: dict[str, Any]) -> dict[str, Any]:
    """Keep only the allowlisted keys present in the body; values are stored verbatim."""
    out: dict[str, Any] = {}
    for wire_name, column in PROFILE_UPDATE_ALLOWLIST.items():
        if wire_name not in payload:
            continue
        value = payload[wire_name]
        if value is not None and not isinstance(value, str):
            raise _bad_request(f"{wire_name} must be a string")
        if column == "interested_in" and value not in PREFERENCES:
            raise _bad_request("interestedIn must be one of: " + ", ".join(PREFERENCES))
        out[column] = value
    return out


def serialize_profile(row: dict[str, Any], include_email: bool = True) -> dict[str, Any]:
    out = {
        "id": str(row["id"]),
        "name": row.get("name"),
        "age": row.get("age"),
        "bio": row.get("bio"),
        "image": row.get("image"),
        "gender": row.get("gender"),
        "interestedIn": row.get("interested_in"),
        "instagram": row.get("instagram"),
    }
    if include_email:
        out["email"] = row.get("email")
    return out


def safe_upload_pathname(pathname: str) -> str:
    name = Path(str(pathname or "").strip()).name
    stem = re.sub(r"[^A-Za-z0-9._-]", "_", Path(name).stem)[:64]
    return stem or "photo"


def public_upload_url(request: Request, filename: str) -> str:
    return f"{str(request.base_url).rstrip('/')}/uploads/{filename}"


async def store_uploaded_photo(file: UploadFile, owner_id: str, pathname: str, request: Request) -> str:
    content_type = (file.content_type or "").lower()
    if content_type == "image/jpg":
        content_type = "image/jpeg"
    if content_type not in ALLOWED_UPLOAD_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail="Only JPG, PNG, WEBP and GIF images are allowed")

    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded image is empty")
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail=f"Each image must be <= {MAX_UPLOAD_BYTES // (1024 * 1024)}MB")

    UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
    fname = f"{safe_upload_pathname(owner_id)}_{safe_upload_pathname(pathname)}_{uuid.uuid4().hex}{CONTENT_TYPE_EXTENSIONS[content_type]}"
    (UPLOADS_DIR / fname).write_bytes(data)
    return public_upload_url(request, fname)
