import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from .database import Base

GENDERS = ("MALE", "FEMALE", "OTHER")
PREFERENCES = ("MALE", "FEMALE", "BOTH", "FRIENDS")
DIRECTIONS = ("LEFT", "RIGHT", "FRIEND")


def _new_id() -> str:
    return str(uuid.uuid4())


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class UserAccount(Base):
    __tablename__ = "user_account"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String, nullable=False, unique=True)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    age = Column(Integer, nullable=False)
    gender = Column(String, nullable=False)
    interested_in = Column(String, nullable=False)
    bio = Column(Text, nullable=True)
    image = Column(String, nullable=True)
    instagram = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now_utc)

    __table_args__ = (
        Index("idx_user_account_interested_in", "interested_in"),
        Index("idx_user_account_created_at", "created_at"),
    )


class Swipe(Base):
    __tablename__ = "swipe"

    id = Column(String(36), primary_key=True, default=_new_id)
    from_id = Column(String(36), ForeignKey("user_account.id", ondelete="CASCADE"), nullable=False)
    to_id = Column(String(36), ForeignKey("user_account.id", ondelete="CASCADE"), nullable=False)
    direction = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now_utc)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now_utc)

    __table_args__ = (
        UniqueConstraint("from_id", "to_id", name="uq_swipe_from_to"),
        Index("idx_swipe_to_id", "to_id"),
    )


class Match(Base):
    __tablename__ = "user_match"

    id = Column(String(36), primary_key=True, default=_new_id)
    # Canonical ordering: user1_id < user2_id.
    user1_id = Column(String(36), ForeignKey("user_account.id", ondelete="CASCADE"), nullable=False)
    user2_id = Column(String(36), ForeignKey("user_account.id", ondelete="CASCADE"), nullable=False)
    type = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now_utc)

    __table_args__ = (
        UniqueConstraint("user1_id", "user2_id", name="uq_match_pair"),
        Index("idx_user_match_user2_id", "user2_id"),
    )


class Message(Base):
    __tablename__ = "chat_message"

    id = Column(String(36), primary_key=True, default=_new_id)
    match_id = Column(String(36), ForeignKey("user_match.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(String(36), ForeignKey("user_account.id", ondelete="CASCADE"), nullable=False)
    receiver_id = Column(String(36), ForeignKey("user_account.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now_utc)

    __table_args__ = (
        Index("idx_chat_message_match_created", "match_id", "created_at"),
    )
