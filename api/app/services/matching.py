from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import HTTPException
from sqlalchemy import select

from app import repo
from app.services.state_machine import MATCHED, ONE_SIDED, is_interested, is_valid_direction, match_type_for

logger = logging.getLogger(__name__)


@dataclass
class SwipeOutcome:
    matched: bool
    state: str
    match_type: str | None = None


def _require_target(db, actor_id: str, target_id: str) -> None:
    if not target_id:
        raise HTTPException(status_code=400, detail="Missing fields")
    if target_id == actor_id:
        raise HTTPException(status_code=400, detail="You cannot swipe on yourself")
    exists = db.execute(select(repo.users.c.id).where(repo.users.c.id == target_id)).first()
    if not exists:
        raise HTTPException(status_code=404, detail="User not found")


def record_swipe(db, actor_id: str, target_id: str, direction: str) -> SwipeOutcome:
    """
    Record actor's decision about target and materialize a match on mutual interest.

    The caller owns the transaction: the ledger write and the match write are
    committed together. Both identities are row-locked first, so two opposite
    swipes on a pair are serialized and the later one sees the earlier one's
    ledger row. ``matched`` is True only when this call created the pair's
    match; the unique pair key still turns a duplicate insert into a no-op.
    """
    if not is_valid_direction(direction):
        raise HTTPException(status_code=400, detail="direction must be one of: LEFT, RIGHT, FRIEND")
    _require_target(db, actor_id, target_id)

    repo.lock_pair(db, actor_id, target_id)
    repo.upsert_swipe(db, actor_id, target_id, direction)

    existing = repo.get_match_for_pair(db, actor_id, target_id)
    if existing:
        return SwipeOutcome(matched=False, state=MATCHED, match_type=existing["type"])
    if not is_interested(direction):
        return SwipeOutcome(matched=False, state=ONE_SIDED)

    reverse = repo.get_swipe(db, target_id, actor_id)
    reverse_direction = reverse["direction"] if reverse else None
    if not is_interested(reverse_direction):
        return SwipeOutcome(matched=False, state=ONE_SIDED)

    match_type = match_type_for(direction, reverse_direction)
    created = repo.insert_match_if_absent(db, actor_id, target_id, match_type)
    if created:
        logger.info(f"[swipe] match created type={match_type} pair={repo.canonical_pair(actor_id, target_id)}")
    else:
        logger.info(f"[swipe] match already present for pair={repo.canonical_pair(actor_id, target_id)}")
    return SwipeOutcome(matched=created, state=MATCHED, match_type=match_type)
