"""Per-turn chat coordination: plain chat or search-and-insert.

A turn moves idle → sending → (awaiting_ai | searching) → idle. Failures are
turned into an apology message; the session never stays in ``sending``.
"""

import enum
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from agent.query_extractor import extract_search_query
from llm.assistant import ChatReply, chat_reply
from models import ActionMetadata, ChatMessage, ChatMessageCreate, MessageMetadata, ThinkingMetadata
from search.providers import NO_SUMMARY, web_search
from storage import Storage

logger = logging.getLogger(__name__)

CONTEXT_WINDOW = 5
FRAGMENT_RESULTS = 3
FRAGMENT_TOPICS = 3

CHAT_APOLOGY = "I'm sorry, I encountered an error processing your message. Please try again."
SEARCH_APOLOGY = "I'm sorry, I couldn't complete the search and insert request. Please try again."

InsertContent = Callable[[str], Awaitable[None]]
ChatFn = Callable[[str, list[dict[str, str]]], Awaitable[ChatReply]]
SearchFn = Callable[[str], Awaitable[dict[str, Any]]]


class SessionState(str, enum.Enum):
    IDLE = "idle"
    SENDING = "sending"
    AWAITING_AI = "awaiting_ai"
    SEARCHING = "searching"


def _result_text(result: dict[str, Any]) -> str | None:
    # DuckDuckGo results carry Text/Result; Tavily and Serper use content/snippet
    return result.get("Text") or result.get("Result") or result.get("content") or result.get("snippet")


def build_search_fragment(query: str, results: dict[str, Any]) -> str:
    """Assemble a Markdown fragment from search results for insertion into the document."""
    parts = [f"# {query}\n\n"]

    abstract = results.get("abstract")
    if abstract and abstract != NO_SUMMARY:
        parts.append(f"{abstract}\n\n")
        if results.get("abstractSource"):
            parts.append(f"*Source: {results['abstractSource']}*\n\n")

    items = results.get("results") or []
    if items:
        parts.append("## Key Information:\n\n")
        for index, item in enumerate(items[:FRAGMENT_RESULTS]):
            text = _result_text(item) if isinstance(item, dict) else None
            if text:
                parts.append(f"{index + 1}. {text}\n\n")

    topics = results.get("relatedTopics") or []
    if topics:
        parts.append("## Related Topics:\n\n")
        for topic in topics[:FRAGMENT_TOPICS]:
            if isinstance(topic, dict) and topic.get("Text"):
                parts.append(f"- {topic['Text']}\n")

    return "".join(parts).strip()


class ChatSession:
    """Runs chat turns against a storage backend.

    Args:
        storage: Where user and assistant messages are appended.
        insert_content: Receives the assembled fragment in search mode. Without
            it, search mode falls back to plain chat.
        chat: Plain chat completion; defaults to the writing assistant.
        search: Web search; defaults to DuckDuckGo.
    """

    def __init__(
        self,
        storage: Storage,
        insert_content: InsertContent | None = None,
        chat: ChatFn = chat_reply,
        search: SearchFn = web_search,
    ):
        self.storage = storage
        self.state = SessionState.IDLE
        self._insert_content = insert_content
        self._chat = chat
        self._search = search

    async def _add(
        self, content: str, role: str, metadata: MessageMetadata | None = None
    ) -> ChatMessage:
        return await self.storage.add_chat_message(
            ChatMessageCreate(content=content, role=role, metadata=metadata)
        )

    async def send(self, content: str, mode: str = "chat") -> list[ChatMessage]:
        """Run one turn and return the messages it appended, in order."""
        if not content.strip():
            return []

        appended: list[ChatMessage] = []
        self.state = SessionState.SENDING
        try:
            history = await self.storage.get_chat_messages()
            appended.append(await self._add(content, "user"))

            if mode == "search" and self._insert_content is not None:
                await self._search_and_insert(content, appended)
            else:
                context = [
                    {"role": m.role, "content": m.content}
                    for m in history[-CONTEXT_WINDOW:]
                ]
                self.state = SessionState.AWAITING_AI
                reply = await self._chat(content, context)
                metadata = None
                if reply.actions or reply.usage:
                    metadata = ActionMetadata(actions=reply.actions or None, usage=reply.usage)
                appended.append(await self._add(reply.reply, "assistant", metadata))
        except Exception as e:
            logger.error(f"Failed to send message: {e}", exc_info=True)
            appended.append(await self._add(CHAT_APOLOGY, "assistant"))
        finally:
            self.state = SessionState.IDLE
        return appended

    async def _search_and_insert(self, user_query: str, appended: list[ChatMessage]) -> None:
        try:
            query = extract_search_query(user_query)
            appended.append(await self._add(
                f"🔍 Searching for: \"{query}\"...",
                "assistant",
                ThinkingMetadata(status="searching", query=query),
            ))

            self.state = SessionState.SEARCHING
            results = await self._search(query)
            fragment = build_search_fragment(query, results)
            if fragment.strip():
                await self._insert_content(fragment)

            appended.append(await self._add(
                f"✅ Found information about \"{query}\" and inserted it into your document!",
                "assistant",
            ))
        except Exception as e:
            logger.error(f"Search and insert failed: {e}", exc_info=True)
            appended.append(await self._add(SEARCH_APOLOGY, "assistant"))
