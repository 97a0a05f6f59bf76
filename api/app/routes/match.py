from typing import Any

from fastapi import APIRouter, Depends

from .. import repo as auth_repo
from ..auth.deps import get_current_user
from ..database import SessionLocal
from ..http_helpers import serialize_profile
from ..services.feed import list_candidates
from ..services.matching import record_swipe

router = APIRouter()


@router.get("/users")
def get_candidate_feed(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    with SessionLocal() as db:
        candidates = list_candidates(db, str(current_user["id"]))
    return {
        "users": [
            {**serialize_profile(c, include_email=False), "hasFriendedMe": bool(c["has_friended_me"])}
            for c in candidates
        ]
    }


@router.post("/swipe")
def post_swipe(payload: dict[str, Any], current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    target_id = str(payload.get("toId") or "").strip()
    direction = str(payload.get("direction") or "").strip().upper()
    with SessionLocal() as db:
        outcome = record_swipe(db, str(current_user["id"]), target_id, direction)
        db.commit()
    return {"success": True, "match": outcome.matched}


@router.get("/matches")
def list_matches(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    rows = auth_repo.get_user_matches(str(current_user["id"]))
    return {
        "matches": [
            {
                "id": str(r["id"]),
                "type": r["type"],
                "createdAt": r.get("created_at"),
                "user": {
                    "id": str(r["other_user_id"]),
                    "name": r.get("other_name"),
                    "image": r.get("other_image"),
                    "instagram": r.get("other_instagram"),
                },
                "lastMessage": r.get("latest_message_body") or "New Match!",
                "lastMessageAt": r.get("latest_message_at"),
            }
            for r in rows
        ]
    }
