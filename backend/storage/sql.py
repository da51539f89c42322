"""SQLAlchemy storage backend.

Works with any async SQLAlchemy URL. Tables are created and the default
document seeded on first use.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select

from models import (
    AiEdit,
    AiEditRow,
    Base,
    ChatMessage,
    ChatMessageCreate,
    ChatMessageRow,
    Document,
    DocumentRow,
    EditOperation,
    EditStatus,
    make_engine,
    make_session_factory,
)

from .base import DEFAULT_DOCUMENT_CONTENT, DEFAULT_DOCUMENT_TITLE, WELCOME_MESSAGE, Storage

logger = logging.getLogger(__name__)


def _utc(ts: datetime) -> datetime:
    # SQLite drops the offset; stored values are always UTC
    return ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts


def _message_out(row: ChatMessageRow) -> ChatMessage:
    return ChatMessage(
        id=row.id,
        content=row.content,
        role=row.role,
        timestamp=_utc(row.timestamp),
        metadata=row.metadata_json,
    )


def _document_out(row: DocumentRow) -> Document:
    return Document(
        id=row.id,
        title=row.title,
        content=row.content,
        last_modified=_utc(row.last_modified),
    )


def _edit_out(row: AiEditRow) -> AiEdit:
    return AiEdit(
        id=row.id,
        original_text=row.original_text,
        suggested_text=row.suggested_text,
        operation=row.operation,
        applied=row.applied,
        timestamp=_utc(row.timestamp),
    )


class SqlStorage(Storage):
    def __init__(self, database_url: str):
        self._engine = make_engine(database_url)
        self._session_factory = make_session_factory(self._engine)
        self._ready = False
        self._init_lock = asyncio.Lock()

    async def initialize(self) -> None:
        if self._ready:
            return
        async with self._init_lock:
            if self._ready:
                return
            logger.info("Creating storage tables...")
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            async with self._session_factory() as session:
                result = await session.execute(
                    select(DocumentRow).where(DocumentRow.is_default == 1)
                )
                if result.scalar_one_or_none() is None:
                    session.add(DocumentRow(
                        title=DEFAULT_DOCUMENT_TITLE,
                        content=DEFAULT_DOCUMENT_CONTENT,
                        is_default=1,
                    ))
                    session.add(ChatMessageRow(content=WELCOME_MESSAGE, role="assistant"))
                    await session.commit()
            self._ready = True
            logger.info("Storage tables ready.")

    async def dispose(self) -> None:
        await self._engine.dispose()

    async def get_chat_messages(self) -> list[ChatMessage]:
        await self.initialize()
        async with self._session_factory() as session:
            result = await session.execute(
                select(ChatMessageRow).order_by(ChatMessageRow.timestamp, ChatMessageRow.seq)
            )
            return [_message_out(row) for row in result.scalars().all()]

    async def add_chat_message(self, message: ChatMessageCreate) -> ChatMessage:
        await self.initialize()
        metadata = message.metadata.model_dump(by_alias=True) if message.metadata else None
        async with self._session_factory() as session:
            row = ChatMessageRow(content=message.content, role=message.role, metadata_json=metadata)
            session.add(row)
            await session.commit()
            return _message_out(row)

    async def clear_chat_history(self) -> None:
        await self.initialize()
        async with self._session_factory() as session:
            await session.execute(delete(ChatMessageRow))
            await session.commit()

    async def get_document(self, document_id: str) -> Document | None:
        await self.initialize()
        async with self._session_factory() as session:
            row = await session.get(DocumentRow, document_id)
            return _document_out(row) if row else None

    async def create_document(self, title: str, content: Any) -> Document:
        await self.initialize()
        async with self._session_factory() as session:
            row = DocumentRow(title=title, content=content)
            session.add(row)
            await session.commit()
            return _document_out(row)

    async def update_document(self, document_id: str, content: Any) -> Document | None:
        await self.initialize()
        async with self._session_factory() as session:
            row = await session.get(DocumentRow, document_id)
            if row is None:
                return None
            row.content = content
            await session.commit()
            return _document_out(row)

    async def get_default_document(self) -> Document:
        await self.initialize()
        async with self._session_factory() as session:
            result = await session.execute(
                select(DocumentRow).where(DocumentRow.is_default == 1)
            )
            return _document_out(result.scalar_one())

    async def create_ai_edit(
        self, original_text: str, suggested_text: str, operation: EditOperation
    ) -> AiEdit:
        await self.initialize()
        async with self._session_factory() as session:
            row = AiEditRow(
                original_text=original_text,
                suggested_text=suggested_text,
                operation=operation,
                applied="pending",
            )
            session.add(row)
            await session.commit()
            return _edit_out(row)

    async def get_ai_edit(self, edit_id: str) -> AiEdit | None:
        await self.initialize()
        async with self._session_factory() as session:
            row = await session.get(AiEditRow, edit_id)
            return _edit_out(row) if row else None

    async def update_ai_edit_status(self, edit_id: str, status: EditStatus) -> AiEdit | None:
        await self.initialize()
        async with self._session_factory() as session:
            row = await session.get(AiEditRow, edit_id)
            if row is None:
                return None
            row.applied = status
            await session.commit()
            return _edit_out(row)
