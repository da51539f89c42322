"""In-memory storage backend. Contents live for the lifetime of the process."""

import copy
import threading
import uuid
from datetime import datetime, timezone
from typing import Any

from models import AiEdit, ChatMessage, ChatMessageCreate, Document, EditOperation, EditStatus

from .base import DEFAULT_DOCUMENT_CONTENT, DEFAULT_DOCUMENT_TITLE, WELCOME_MESSAGE, Storage


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStorage(Storage):
    def __init__(self):
        self._messages: dict[str, ChatMessage] = {}
        self._documents: dict[str, Document] = {}
        self._edits: dict[str, AiEdit] = {}
        self._lock = threading.Lock()

        self._default_document_id = str(uuid.uuid4())
        self._documents[self._default_document_id] = Document(
            id=self._default_document_id,
            title=DEFAULT_DOCUMENT_TITLE,
            content=copy.deepcopy(DEFAULT_DOCUMENT_CONTENT),
            last_modified=_now(),
        )
        welcome = ChatMessage(
            id=str(uuid.uuid4()),
            content=WELCOME_MESSAGE,
            role="assistant",
            timestamp=_now(),
        )
        self._messages[welcome.id] = welcome

    async def get_chat_messages(self) -> list[ChatMessage]:
        with self._lock:
            # sorted() is stable, so insertion order breaks timestamp ties
            return sorted(self._messages.values(), key=lambda m: m.timestamp)

    async def add_chat_message(self, message: ChatMessageCreate) -> ChatMessage:
        stored = ChatMessage(
            id=str(uuid.uuid4()),
            content=message.content,
            role=message.role,
            metadata=message.metadata,
            timestamp=_now(),
        )
        with self._lock:
            self._messages[stored.id] = stored
        return stored

    async def clear_chat_history(self) -> None:
        with self._lock:
            self._messages.clear()

    async def get_document(self, document_id: str) -> Document | None:
        with self._lock:
            return self._documents.get(document_id)

    async def create_document(self, title: str, content: Any) -> Document:
        document = Document(
            id=str(uuid.uuid4()),
            title=title,
            content=copy.deepcopy(content),
            last_modified=_now(),
        )
        with self._lock:
            self._documents[document.id] = document
        return document

    async def update_document(self, document_id: str, content: Any) -> Document | None:
        with self._lock:
            document = self._documents.get(document_id)
            if document is None:
                return None
            updated = document.model_copy(
                update={"content": copy.deepcopy(content), "last_modified": _now()}
            )
            self._documents[document_id] = updated
            return updated

    async def get_default_document(self) -> Document:
        with self._lock:
            return self._documents[self._default_document_id]

    async def create_ai_edit(
        self, original_text: str, suggested_text: str, operation: EditOperation
    ) -> AiEdit:
        edit = AiEdit(
            id=str(uuid.uuid4()),
            original_text=original_text,
            suggested_text=suggested_text,
            operation=operation,
            applied="pending",
            timestamp=_now(),
        )
        with self._lock:
            self._edits[edit.id] = edit
        return edit

    async def get_ai_edit(self, edit_id: str) -> AiEdit | None:
        with self._lock:
            return self._edits.get(edit_id)

    async def update_ai_edit_status(self, edit_id: str, status: EditStatus) -> AiEdit | None:
        with self._lock:
            edit = self._edits.get(edit_id)
            if edit is None:
                return None
            updated = edit.model_copy(update={"applied": status})
            self._edits[edit_id] = updated
            return updated
