from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from .. import repo as auth_repo
from ..auth.deps import get_current_user
from ..http_helpers import sanitize_profile_update, serialize_profile

router = APIRouter()


@router.get("/profile")
def get_profile(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    row = auth_repo.get_user_profile(str(current_user["id"]))
    if not row:
        raise HTTPException(status_code=404, detail="User not found")
    return {"user": serialize_profile(row)}


@router.patch("/profile")
def update_profile(payload: dict[str, Any], current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    fields = sanitize_profile_update(payload)
    row = auth_repo.update_user_profile(str(current_user["id"]), fields)
    if not row:
        raise HTTPException(status_code=404, detail="User not found")
    return {"user": serialize_profile(row)}
