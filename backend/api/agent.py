"""Agent endpoint: tool-using assistant turn."""

import logging

from fastapi import APIRouter, HTTPException

from agent.orchestrator import run_agent
from api.ai import ChatTurnRequest
from errors import ConfigurationError, TransportError
from models import AgentReply

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["agent"])


@router.post("/agent", response_model=AgentReply)
async def agent(body: ChatTurnRequest):
    """Decide on web search / crawl, run them, and answer with the results folded in."""
    context = [m.model_dump() for m in body.context]
    try:
        return await run_agent(body.message, context)
    except (ConfigurationError, TransportError) as e:
        logger.error(f"Upstream call failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Agent error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to process agent request")
