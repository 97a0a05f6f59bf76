from __future__ import annotations

from typing import Any

from fastapi import HTTPException
from sqlalchemy import and_, select

from app import repo
from app.config import FEED_BATCH_SIZE

users = repo.users
swipes = repo.swipes


def _preference_filter(requester: dict[str, Any]):
    """Both sides' stated preferences must admit the other's gender."""
    preference = requester["interested_in"]
    if preference == "FRIENDS":
        return users.c.interested_in == "FRIENDS"
    clauses = [users.c.interested_in.in_([requester["gender"], "BOTH"])]
    if preference != "BOTH":
        clauses.append(users.c.gender == preference)
    return and_(*clauses)


def list_candidates(db, requester_id: str, limit: int = FEED_BATCH_SIZE) -> list[dict[str, Any]]:
    requester = db.execute(
        select(users.c.id, users.c.gender, users.c.interested_in).where(users.c.id == requester_id)
    ).mappings().first()
    if not requester:
        raise HTTPException(status_code=404, detail="User not found")

    already_swiped = select(swipes.c.to_id).where(swipes.c.from_id == requester_id)
    rows = db.execute(
        select(*repo.PUBLIC_PROFILE_COLUMNS)
        .where(
            users.c.id != requester_id,
            users.c.id.not_in(already_swiped),
            _preference_filter(dict(requester)),
        )
        .order_by(users.c.created_at, users.c.id)
        .limit(limit)
    ).mappings().all()
    candidates = [dict(r) for r in rows]
    if not candidates:
        return []

    friended_me = set(
        db.execute(
            select(swipes.c.from_id).where(
                swipes.c.to_id == requester_id,
                swipes.c.from_id.in_([c["id"] for c in candidates]),
                swipes.c.direction == "FRIEND",
            )
        ).scalars()
    )
    for candidate in candidates:
        candidate["has_friended_me"] = candidate["id"] in friended_me
    return candidates
