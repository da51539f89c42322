"""Shared document endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from models import Document
from storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/document", tags=["document"])


class DocumentUpdate(BaseModel):
    content: Any


@router.get("", response_model=Document)
async def get_document(storage: Storage = Depends(get_storage)):
    return await storage.get_default_document()


@router.put("", response_model=Document)
async def update_document(body: DocumentUpdate, storage: Storage = Depends(get_storage)):
    """Replace the shared document's content. Content is stored as sent."""
    document = await storage.get_default_document()
    updated = await storage.update_document(document.id, body.content)
    if updated is None:
        raise HTTPException(status_code=404, detail="Document not found")
    return updated
