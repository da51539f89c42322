"""Coedit FastAPI application."""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import agent, ai, chat, documents, search
from config import settings
from storage import get_storage

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Coedit API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat.router)
app.include_router(ai.router)
app.include_router(search.router)
app.include_router(agent.router)
app.include_router(documents.router)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.on_event("startup")
async def startup():
    """Prepare the storage backend."""
    logger.info(f"Initializing {settings.storage_backend} storage...")
    await get_storage().initialize()
    logger.info("Storage ready.")


@app.get("/api/health")
async def health():
    return {"status": "ok"}
