"""Chat message, document and AI edit tables."""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Integer, String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class ChatMessageRow(Base):
    __tablename__ = "chat_messages"

    # Insertion counter; breaks timestamp ties when listing.
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, default=_new_id)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)  # "user" or "assistant"
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )
    # "metadata" is reserved on declarative classes
    metadata_json: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)


class DocumentRow(Base):
    __tablename__ = "documents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[Any] = mapped_column(JSON, nullable=False)
    is_default: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_modified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class AiEditRow(Base):
    __tablename__ = "ai_edits"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    original_text: Mapped[str] = mapped_column(Text, nullable=False)
    suggested_text: Mapped[str] = mapped_column(Text, nullable=False)
    operation: Mapped[str] = mapped_column(String(20), nullable=False)
    applied: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
