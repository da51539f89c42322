from .base import Base, make_engine, make_session_factory
from .tables import AiEditRow, ChatMessageRow, DocumentRow
from .schemas import (
    ActionMetadata,
    AgentMetadata,
    AgentReply,
    AiEdit,
    ChatMessage,
    ChatMessageCreate,
    CrawlResult,
    Document,
    EditOperation,
    EditStatus,
    MessageAction,
    MessageMetadata,
    ThinkingMetadata,
    ToolDecision,
    ToolUsage,
    UnknownMetadata,
)

__all__ = [
    "Base",
    "make_engine",
    "make_session_factory",
    "AiEditRow",
    "ChatMessageRow",
    "DocumentRow",
    "ActionMetadata",
    "AgentMetadata",
    "AgentReply",
    "AiEdit",
    "ChatMessage",
    "ChatMessageCreate",
    "CrawlResult",
    "Document",
    "EditOperation",
    "EditStatus",
    "MessageAction",
    "MessageMetadata",
    "ThinkingMetadata",
    "ToolDecision",
    "ToolUsage",
    "UnknownMetadata",
]
