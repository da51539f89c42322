"""Storage interface shared by the in-memory and SQL backends."""

from abc import ABC, abstractmethod
from typing import Any

from models import AiEdit, ChatMessage, ChatMessageCreate, Document, EditOperation, EditStatus

DEFAULT_DOCUMENT_TITLE = "AI Collaborative Editor Demo"

DEFAULT_DOCUMENT_CONTENT: dict[str, Any] = {
    "type": "doc",
    "content": [
        {
            "type": "heading",
            "attrs": {"level": 1},
            "content": [{"type": "text", "text": "Project Proposal: AI-Powered Content Management System"}],
        },
        {
            "type": "paragraph",
            "content": [{
                "type": "text",
                "text": (
                    "This document outlines our comprehensive approach to developing a next-generation "
                    "content management system that leverages artificial intelligence to streamline "
                    "content creation, editing, and optimization processes."
                ),
            }],
        },
        {
            "type": "heading",
            "attrs": {"level": 2},
            "content": [{"type": "text", "text": "Executive Summary"}],
        },
        {
            "type": "paragraph",
            "content": [{
                "type": "text",
                "text": (
                    "In today's digital landscape, organizations struggle with managing large volumes "
                    "of content efficiently. Our proposed AI-powered CMS addresses these challenges by "
                    "providing intelligent content suggestions, automated editing capabilities, and "
                    "real-time collaboration features."
                ),
            }],
        },
    ],
}

WELCOME_MESSAGE = (
    "Hello! I'm your AI writing assistant. I can help you edit text, improve grammar, "
    "and even search for information to add to your document. How can I assist you today?"
)


class Storage(ABC):
    """Chat history, the shared document and AI edit suggestions.

    Implementations seed a default document and a welcome message on first use.
    """

    async def initialize(self) -> None:
        """Prepare backing resources. Safe to call more than once."""

    # Chat messages
    @abstractmethod
    async def get_chat_messages(self) -> list[ChatMessage]:
        """Return all messages ordered by timestamp."""

    @abstractmethod
    async def add_chat_message(self, message: ChatMessageCreate) -> ChatMessage: ...

    @abstractmethod
    async def clear_chat_history(self) -> None: ...

    # Documents
    @abstractmethod
    async def get_document(self, document_id: str) -> Document | None: ...

    @abstractmethod
    async def create_document(self, title: str, content: Any) -> Document: ...

    @abstractmethod
    async def update_document(self, document_id: str, content: Any) -> Document | None: ...

    @abstractmethod
    async def get_default_document(self) -> Document: ...

    # AI edits
    @abstractmethod
    async def create_ai_edit(
        self, original_text: str, suggested_text: str, operation: EditOperation
    ) -> AiEdit: ...

    @abstractmethod
    async def get_ai_edit(self, edit_id: str) -> AiEdit | None: ...

    @abstractmethod
    async def update_ai_edit_status(self, edit_id: str, status: EditStatus) -> AiEdit | None:
        """Set the edit's status; None if no edit has that id."""
