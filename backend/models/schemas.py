"""Wire models for chat messages, documents, AI edits and agent tooling.

Fields are snake_case in Python and camelCase on the wire, matching the
editor client's JSON contract.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, model_serializer, model_validator
from pydantic.alias_generators import to_camel

Role = Literal["user", "assistant"]
EditOperation = Literal["shorten", "lengthen", "table", "edit"]
EditStatus = Literal["pending", "applied", "rejected"]
ToolName = Literal["web_search", "web_crawl"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------- Message metadata (tagged union) ----------

class ToolUsage(CamelModel):
    """Redacted record of one tool call: the tool and its query or URL.

    Exactly one of ``query`` and ``url`` is set; the unset one is left off
    the wire.
    """

    tool: ToolName
    query: str | None = None
    url: str | None = None

    @model_validator(mode="after")
    def _one_target(self) -> "ToolUsage":
        if (self.query is None) == (self.url is None):
            raise ValueError("exactly one of query or url is required")
        return self

    @model_serializer(mode="wrap")
    def _omit_missing_target(self, handler):
        return {k: v for k, v in handler(self).items() if v is not None}


class MessageAction(CamelModel):
    label: str
    type: str
    content: str


class AgentMetadata(CamelModel):
    kind: Literal["agent"] = "agent"
    is_agent: bool = True
    tools_used: list[ToolUsage] = Field(default_factory=list)
    reasoning: str | None = None
    usage: dict[str, Any] | None = None


class ThinkingMetadata(CamelModel):
    kind: Literal["thinking"] = "thinking"
    status: str = "searching"
    query: str | None = None


class ActionMetadata(CamelModel):
    kind: Literal["actions"] = "actions"
    actions: list[MessageAction] | None = None
    usage: dict[str, Any] | None = None


class UnknownMetadata(CamelModel):
    """Any payload this version does not recognize; extra keys are kept."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    kind: str = "unknown"


_KNOWN_KINDS = {"agent", "thinking", "actions"}


def _metadata_kind(value: Any) -> str:
    if isinstance(value, BaseModel):
        kind = getattr(value, "kind", "unknown")
        return kind if kind in _KNOWN_KINDS else "unknown"
    if not isinstance(value, dict):
        return "unknown"
    kind = value.get("kind")
    if kind in _KNOWN_KINDS:
        return kind
    if kind is None:
        # Payloads written before metadata carried a kind
        if value.get("isAgent") or value.get("is_agent"):
            return "agent"
        if "actions" in value:
            return "actions"
    return "unknown"


MessageMetadata = Annotated[
    Union[
        Annotated[AgentMetadata, Tag("agent")],
        Annotated[ThinkingMetadata, Tag("thinking")],
        Annotated[ActionMetadata, Tag("actions")],
        Annotated[UnknownMetadata, Tag("unknown")],
    ],
    Discriminator(_metadata_kind),
]


# ---------- Stored entities ----------

class ChatMessageCreate(CamelModel):
    content: str
    role: Role
    metadata: MessageMetadata | None = None


class ChatMessage(ChatMessageCreate):
    id: str
    timestamp: datetime


class Document(CamelModel):
    id: str
    title: str
    content: Any
    last_modified: datetime


class AiEdit(CamelModel):
    id: str
    original_text: str
    suggested_text: str
    operation: EditOperation
    applied: EditStatus = "pending"
    timestamp: datetime


# ---------- Agent tooling ----------

class ToolDecision(CamelModel):
    needs_search: bool = False
    search_query: str | None = None
    needs_crawl: bool = False
    url_to_crawl: str | None = None
    reasoning: str = ""


class CrawlResult(CamelModel):
    url: str
    title: str
    content: str
    timestamp: str


class AgentReply(CamelModel):
    reply: str
    tools_used: list[ToolUsage] = Field(default_factory=list)
    reasoning: str = ""
    usage: dict[str, Any] | None = None
