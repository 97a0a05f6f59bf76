import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import and_, case, desc, or_, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from app.database import SessionLocal
from app.models import Match, Message, Swipe, UserAccount

users = UserAccount.__table__
swipes = Swipe.__table__
matches = Match.__table__
messages = Message.__table__

PROFILE_COLUMNS = (
    users.c.id,
    users.c.name,
    users.c.email,
    users.c.age,
    users.c.bio,
    users.c.image,
    users.c.gender,
    users.c.interested_in,
    users.c.instagram,
)
PUBLIC_PROFILE_COLUMNS = tuple(c for c in PROFILE_COLUMNS if c.name != "email")
PROFILE_UPDATE_FIELDS = ("bio", "image", "interested_in", "instagram")


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def dialect_insert(db, table):
    """Insert construct that supports ON CONFLICT for the bound dialect."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(table)
    if dialect == "sqlite":
        return sqlite.insert(table)
    raise RuntimeError(f"Unsupported database dialect for upserts: {dialect}")


def canonical_pair(user_a: str, user_b: str) -> tuple[str, str]:
    a, b = sorted([str(user_a), str(user_b)])
    return a, b


def create_user(
    email: str,
    password_hash: str,
    name: str,
    age: int,
    gender: str,
    interested_in: str,
    image: str | None = None,
    instagram: str | None = None,
    bio: str | None = None,
) -> dict[str, Any] | None:
    user_id = str(uuid.uuid4())
    try:
        with SessionLocal() as db:
            db.execute(
                users.insert().values(
                    id=user_id,
                    email=email,
                    password_hash=password_hash,
                    name=name,
                    age=age,
                    gender=gender,
                    interested_in=interested_in,
                    image=image,
                    instagram=instagram,
                    bio=bio,
                )
            )
            db.commit()
    except IntegrityError:
        return None
    return get_user_profile(user_id)


def get_user_by_email(email: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        row = db.execute(select(users).where(users.c.email == email)).mappings().first()
    return dict(row) if row else None


def get_user_profile(user_id: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        row = db.execute(select(*PROFILE_COLUMNS).where(users.c.id == user_id)).mappings().first()
    return dict(row) if row else None


def update_user_profile(user_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
    values = {k: v for k, v in fields.items() if k in PROFILE_UPDATE_FIELDS}
    if values:
        with SessionLocal() as db:
            db.execute(update(users).where(users.c.id == user_id).values(**values))
            db.commit()
    return get_user_profile(user_id)


def delete_all_users(db) -> None:
    for table in (messages, matches, swipes, users):
        db.execute(table.delete())


def pair_lock_statement(user_a: str, user_b: str):
    return (
        select(users.c.id)
        .where(users.c.id.in_(canonical_pair(user_a, user_b)))
        .order_by(users.c.id)
        .with_for_update()
    )


def lock_pair(db, user_a: str, user_b: str) -> None:
    """Row-lock both identities in canonical order until the transaction ends.

    Opposite swipes on the same pair then run one after the other, so the
    second always sees the first one's ledger row. SQLite drops FOR UPDATE;
    its single writer lock gives the same ordering.
    """
    db.execute(pair_lock_statement(user_a, user_b)).all()


def upsert_swipe(db, from_id: str, to_id: str, direction: str) -> None:
    """Insert or replace the single ledger row for the ordered (from, to) pair."""
    now = _now_utc()
    stmt = dialect_insert(db, swipes).values(
        from_id=from_id,
        to_id=to_id,
        direction=direction,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[swipes.c.from_id, swipes.c.to_id],
        set_={"direction": stmt.excluded.direction, "updated_at": stmt.excluded.updated_at},
    )
    db.execute(stmt)


def get_swipe(db, from_id: str, to_id: str) -> dict[str, Any] | None:
    row = db.execute(
        select(swipes).where(and_(swipes.c.from_id == from_id, swipes.c.to_id == to_id))
    ).mappings().first()
    return dict(row) if row else None


def get_match_for_pair(db, user_a: str, user_b: str) -> dict[str, Any] | None:
    a, b = canonical_pair(user_a, user_b)
    row = db.execute(
        select(matches).where(and_(matches.c.user1_id == a, matches.c.user2_id == b))
    ).mappings().first()
    return dict(row) if row else None


def insert_match_if_absent(db, user_a: str, user_b: str, match_type: str) -> bool:
    """Create the pair's match; False when the unique pair key already holds one."""
    a, b = canonical_pair(user_a, user_b)
    stmt = (
        dialect_insert(db, matches)
        .values(user1_id=a, user2_id=b, type=match_type)
        .on_conflict_do_nothing(index_elements=[matches.c.user1_id, matches.c.user2_id])
    )
    result = db.execute(stmt)
    return result.rowcount == 1


def get_match_by_id(match_id: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        row = db.execute(select(matches).where(matches.c.id == match_id)).mappings().first()
    return dict(row) if row else None


def get_user_matches(user_id: str) -> list[dict[str, Any]]:
    other_id = case((matches.c.user1_id == user_id, matches.c.user2_id), else_=matches.c.user1_id)

    def _latest(column):
        return (
            select(column)
            .where(messages.c.match_id == matches.c.id)
            .order_by(desc(messages.c.created_at), desc(messages.c.id))
            .limit(1)
            .scalar_subquery()
        )

    with SessionLocal() as db:
        rows = db.execute(
            select(
                matches.c.id,
                matches.c.type,
                matches.c.created_at,
                users.c.id.label("other_user_id"),
                users.c.name.label("other_name"),
                users.c.image.label("other_image"),
                users.c.instagram.label("other_instagram"),
                _latest(messages.c.content).label("latest_message_body"),
                _latest(messages.c.created_at).label("latest_message_at"),
            )
            .select_from(matches)
            .join(users, users.c.id == other_id)
            .where(or_(matches.c.user1_id == user_id, matches.c.user2_id == user_id))
            .order_by(desc(matches.c.created_at), desc(matches.c.id))
        ).mappings().all()
    return [dict(r) for r in rows]


def get_match_messages(match_id: str) -> list[dict[str, Any]]:
    with SessionLocal() as db:
        rows = db.execute(
            select(messages)
            .where(messages.c.match_id == match_id)
            .order_by(messages.c.created_at, messages.c.id)
        ).mappings().all()
    return [dict(r) for r in rows]


def create_message(match_id: str, sender_id: str, receiver_id: str, content: str) -> dict[str, Any]:
    message_id = str(uuid.uuid4())
    with SessionLocal() as db:
        db.execute(
            messages.insert().values(
                id=message_id,
                match_id=match_id,
                sender_id=sender_id,
                receiver_id=receiver_id,
                content=content,
                created_at=_now_utc(),
            )
        )
        db.commit()
    with SessionLocal() as db:
        row = db.execute(select(messages).where(messages.c.id == message_id)).mappings().one()
    return dict(row)
