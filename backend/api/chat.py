"""Chat history endpoints and the server-side chat turn."""

import asyncio
import logging
import weakref
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from agent.session import ChatSession
from document.fragment import append_fragment
from models import ChatMessage, ChatMessageCreate
from storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])

# Read-modify-write of the shared document; one lock per storage backend
_insert_locks: "weakref.WeakKeyDictionary[Storage, asyncio.Lock]" = weakref.WeakKeyDictionary()


class SendRequest(BaseModel):
    content: str
    mode: Literal["chat", "search"] = "chat"


class SendResponse(BaseModel):
    state: str
    messages: list[ChatMessage]


@router.get("/messages", response_model=list[ChatMessage])
async def list_messages(storage: Storage = Depends(get_storage)):
    """Return the chat history, oldest first."""
    return await storage.get_chat_messages()


@router.post("/messages", response_model=ChatMessage)
async def add_message(body: ChatMessageCreate, storage: Storage = Depends(get_storage)):
    return await storage.add_chat_message(body)


@router.delete("/messages")
async def clear_messages(storage: Storage = Depends(get_storage)):
    await storage.clear_chat_history()
    logger.info("Chat history cleared")
    return {"success": True}


async def insert_into_document(storage: Storage, fragment: str) -> None:
    """Append a search fragment to the default document.

    Concurrent inserts into the same storage are serialized so none is lost.
    """
    lock = _insert_locks.setdefault(storage, asyncio.Lock())
    async with lock:
        document = await storage.get_default_document()
        await storage.update_document(document.id, append_fragment(document.content, fragment))


@router.post("/send", response_model=SendResponse)
async def send_message(body: SendRequest, storage: Storage = Depends(get_storage)):
    """Run one chat turn; search mode inserts the findings into the shared document."""

    async def insert(fragment: str) -> None:
        await insert_into_document(storage, fragment)

    session = ChatSession(storage, insert_content=insert)
    messages = await session.send(body.content, body.mode)
    return SendResponse(state=session.state.value, messages=messages)
