"""Web search and page crawl endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from errors import ConfigurationError, TransportError
from models import CrawlResult
from search.providers import web_search
from search.web_fetch import crawl_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["search"])


class SearchRequest(BaseModel):
    query: str = Field(min_length=1)
    provider: str = "duckduckgo"


class CrawlRequest(BaseModel):
    url: str = Field(min_length=1)


@router.post("/search")
async def search(body: SearchRequest) -> dict[str, Any]:
    """Search the web; unknown providers fall back to DuckDuckGo."""
    try:
        return await web_search(body.query, body.provider)
    except (ConfigurationError, TransportError) as e:
        logger.error(f"Upstream call failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Search error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to perform web search")


@router.post("/crawl", response_model=CrawlResult)
async def crawl(body: CrawlRequest):
    try:
        return await crawl_url(body.url)
    except TransportError as e:
        logger.error(f"Upstream call failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Crawl error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to crawl URL")
