"""SQLAlchemy models for interaction analytics."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import BigInteger, Boolean, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for ORM models."""

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Interaction(Base):
    """Any message or button press handled by the bot."""

    __tablename__ = "user_interactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, index=True)
    username: Mapped[str | None] = mapped_column(String(64))
    first_name: Mapped[str | None] = mapped_column(String(128))
    message_type: Mapped[str] = mapped_column(String(32))
    message_content: Mapped[str | None] = mapped_column(Text)
    response_type: Mapped[str | None] = mapped_column(String(32))
    confidence_score: Mapped[float | None] = mapped_column(Float)


class FAQQuery(Base):
    __tablename__ = "faq_queries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, index=True)
    question: Mapped[str] = mapped_column(Text)
    faq_id: Mapped[str | None] = mapped_column(String(64))
    match_type: Mapped[str] = mapped_column(String(16))
    confidence_score: Mapped[float] = mapped_column(Float, default=0.0)
    project_reference: Mapped[str | None] = mapped_column(String(256))


class Web3Query(Base):
    __tablename__ = "web3_queries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, index=True)
    query_type: Mapped[str] = mapped_column(String(32))
    query_params: Mapped[str | None] = mapped_column(String(128))
    success: Mapped[bool] = mapped_column(Boolean, default=True)
    response_time_ms: Mapped[int | None] = mapped_column(Integer)


class ForwardedMessage(Base):
    """Message escalated to the human-staffed action group."""

    __tablename__ = "message_forwarding"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, index=True)
    original_message: Mapped[str] = mapped_column(Text)
    forwarded_to: Mapped[str] = mapped_column(String(64))
    forward_reason: Mapped[str] = mapped_column(String(32))
    priority: Mapped[str] = mapped_column(String(16))


class AdminAction(Base):
    __tablename__ = "admin_actions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    admin_id: Mapped[int] = mapped_column(BigInteger, index=True)
    action_type: Mapped[str] = mapped_column(String(32))
    action_details: Mapped[str | None] = mapped_column(Text)
