"""Writing-assistant chat and AI text edit endpoints."""

import logging
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field

from document.editor import explain_edit, suggest_edit
from errors import ConfigurationError, TransportError
from llm.assistant import chat_reply
from models import AiEdit, EditOperation, MessageAction
from models.schemas import CamelModel
from storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])


class ContextMessage(CamelModel):
    role: Literal["user", "assistant"]
    content: str


class ChatTurnRequest(CamelModel):
    message: str = Field(min_length=1)
    context: list[ContextMessage] = Field(default_factory=list)


class AiChatResponse(CamelModel):
    reply: str
    usage: dict[str, Any] | None = None
    actions: list[MessageAction] | None = None


class EditRequest(CamelModel):
    text: str = Field(min_length=1)
    operation: EditOperation


class EditResponse(CamelModel):
    edit_id: str
    original_text: str
    suggested_text: str
    operation: EditOperation
    explanation: str


@router.post("/chat", response_model=AiChatResponse, response_model_exclude_none=True)
async def ai_chat(body: ChatTurnRequest):
    """One writing-assistant turn, with insertable-content actions when detected."""
    context = [m.model_dump() for m in body.context]
    try:
        result = await chat_reply(body.message, context)
    except (ConfigurationError, TransportError) as e:
        logger.error(f"Upstream call failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"AI chat error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get AI response")

    return AiChatResponse(
        reply=result.reply,
        usage=result.usage,
        actions=result.actions or None,
    )


@router.post("/edit", response_model=EditResponse)
async def ai_edit(body: EditRequest, storage: Storage = Depends(get_storage)):
    """Suggest an edit for a text selection and record it as pending."""
    try:
        suggested = await suggest_edit(body.text, body.operation)
    except (ConfigurationError, TransportError) as e:
        logger.error(f"Upstream call failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"AI edit error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to process AI edit request")

    edit = await storage.create_ai_edit(body.text, suggested, body.operation)
    return EditResponse(
        edit_id=edit.id,
        original_text=body.text,
        suggested_text=suggested,
        operation=body.operation,
        explanation=explain_edit(body.operation),
    )


@router.put("/edit/{edit_id}/apply", response_model=AiEdit)
async def apply_edit(edit_id: str, storage: Storage = Depends(get_storage)):
    updated = await storage.update_ai_edit_status(edit_id, "applied")
    if updated is None:
        raise HTTPException(status_code=404, detail="AI edit not found")
    return updated


@router.put("/edit/{edit_id}/reject", response_model=AiEdit)
async def reject_edit(edit_id: str, storage: Storage = Depends(get_storage)):
    updated = await storage.update_ai_edit_status(edit_id, "rejected")
    if updated is None:
        raise HTTPException(status_code=404, detail="AI edit not found")
    return updated
