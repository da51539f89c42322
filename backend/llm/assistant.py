"""Plain writing-assistant chat turn."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from agent.actions import ActionClassifier, default_classifier
from llm.client import complete
from models import MessageAction

logger = logging.getLogger(__name__)

ASSISTANT_SYSTEM_PROMPT = (
    "You are a helpful AI writing assistant integrated into a collaborative text editor. "
    "You can help users edit text, improve grammar, provide writing suggestions, and search "
    "for information. Be concise and helpful in your responses."
)

NO_REPLY = "I'm sorry, I couldn't process your request."


@dataclass
class ChatReply:
    reply: str
    usage: dict[str, Any] | None = None
    actions: list[MessageAction] = field(default_factory=list)


async def chat_reply(
    message: str,
    context: Sequence[dict[str, str]],
    classifier: ActionClassifier = default_classifier,
) -> ChatReply:
    """Answer a chat message and offer insertable content when the reply has some."""
    completion = await complete(
        [
            {"role": "system", "content": ASSISTANT_SYSTEM_PROMPT},
            *[{"role": m["role"], "content": m["content"]} for m in context],
            {"role": "user", "content": message},
        ],
        temperature=0.7,
        max_tokens=1000,
    )
    reply = completion.text or NO_REPLY
    decision = classifier.classify(message, reply)
    return ChatReply(reply=reply, usage=completion.usage, actions=decision.actions)
