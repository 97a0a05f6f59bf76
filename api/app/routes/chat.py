from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from .. import repo as auth_repo
from ..auth.deps import get_current_user
from ..config import MESSAGE_MAX_LENGTH

router = APIRouter()


def _require_membership(match_id: str, user_id: str) -> dict[str, Any]:
    match = auth_repo.get_match_by_id(match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")
    if user_id not in {str(match["user1_id"]), str(match["user2_id"])}:
        raise HTTPException(status_code=403, detail="Forbidden")
    return match


def _other_party(match: dict[str, Any], user_id: str) -> str:
    a = str(match["user1_id"])
    b = str(match["user2_id"])
    return b if user_id == a else a


def _serialize_message(m: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": str(m["id"]),
        "matchId": str(m["match_id"]),
        "senderId": str(m["sender_id"]),
        "receiverId": str(m["receiver_id"]),
        "content": m["content"],
        "createdAt": m.get("created_at"),
    }


@router.get("/messages")
def list_messages(matchId: str | None = None, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    match_id = str(matchId or "").strip()
    if not match_id:
        raise HTTPException(status_code=400, detail="Missing matchId")

    uid = str(current_user["id"])
    match = _require_membership(match_id, uid)
    other_id = _other_party(match, uid)
    other = auth_repo.get_user_profile(other_id) or {}
    return {
        "messages": [_serialize_message(m) for m in auth_repo.get_match_messages(match_id)],
        "otherUser": {
            "id": other_id,
            "name": other.get("name"),
            "image": other.get("image"),
        },
    }


@router.post("/messages")
def send_message(payload: dict[str, Any], current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    match_id = str(payload.get("matchId") or "").strip()
    content = str(payload.get("content") or "").strip()
    if not match_id or not content:
        raise HTTPException(status_code=400, detail="Missing fields")
    if len(content) > MESSAGE_MAX_LENGTH:
        raise HTTPException(status_code=400, detail="Message too long")

    uid = str(current_user["id"])
    match = _require_membership(match_id, uid)
    message = auth_repo.create_message(
        match_id=match_id,
        sender_id=uid,
        receiver_id=_other_party(match, uid),
        content=content,
    )
    return {"message": _serialize_message(message)}
