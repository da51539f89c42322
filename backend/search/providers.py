"""Web search across interchangeable providers, normalized into one result shape.

DuckDuckGo's instant-answer API needs no key; Tavily and Serper each need
their own API key, read at call time.
"""

import logging
from typing import Any

import httpx

from config import settings
from errors import TransportError

logger = logging.getLogger(__name__)

DDG_API_URL = "https://api.duckduckgo.com/"
TAVILY_API_URL = "https://api.tavily.com/search"
SERPER_API_URL = "https://google.serper.dev/search"

NO_SUMMARY = "No summary available"
SEARCH_PROVIDERS = ("duckduckgo", "tavily", "serper")


def _check(resp: httpx.Response, service: str) -> None:
    if not resp.is_success:
        logger.error(f"{service} HTTP {resp.status_code}: {resp.text[:500]}")
        raise TransportError(service, resp.status_code, resp.reason_phrase)


async def search_duckduckgo(query: str) -> dict[str, Any]:
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        resp = await client.get(
            DDG_API_URL,
            params={"q": query, "format": "json", "no_html": "1", "skip_disambig": "1"},
        )
    _check(resp, "DuckDuckGo API")
    data = resp.json()

    return {
        "provider": "duckduckgo",
        "query": query,
        "abstract": data.get("Abstract") or NO_SUMMARY,
        "abstractSource": data.get("AbstractSource") or "",
        "abstractUrl": data.get("AbstractURL") or "",
        "relatedTopics": (data.get("RelatedTopics") or [])[:5],
        "results": (data.get("Results") or [])[:10],
    }


async def search_tavily(query: str) -> dict[str, Any]:
    api_key = settings.tavily_api_key

    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        resp = await client.post(
            TAVILY_API_URL,
            headers={"Authorization": f"Bearer {api_key}"},
            json={
                "query": query,
                "search_depth": "basic",
                "include_answer": True,
                "include_images": False,
                "include_raw_content": False,
                "max_results": 10,
            },
        )
    _check(resp, "Tavily API")
    data = resp.json()

    return {
        "provider": "tavily",
        "query": query,
        "answer": data.get("answer") or "",
        "results": [
            {
                "title": r.get("title"),
                "url": r.get("url"),
                "content": r.get("content"),
                "score": r.get("score"),
            }
            for r in data.get("results") or []
        ],
    }


async def search_serper(query: str) -> dict[str, Any]:
    api_key = settings.serper_api_key

    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        resp = await client.post(
            SERPER_API_URL,
            headers={"X-API-KEY": api_key},
            json={"q": query, "num": 10},
        )
    _check(resp, "Serper API")
    data = resp.json()

    return {
        "provider": "serper",
        "query": query,
        "knowledgeGraph": data.get("knowledgeGraph"),
        "answerBox": data.get("answerBox"),
        "results": [
            {
                "title": r.get("title"),
                "url": r.get("link"),
                "snippet": r.get("snippet"),
                "position": r.get("position"),
            }
            for r in data.get("organic") or []
        ],
    }


async def web_search(query: str, provider: str = "duckduckgo") -> dict[str, Any]:
    """Search the web with the given provider.

    Args:
        query: The search query string.
        provider: "duckduckgo", "tavily" or "serper". Anything else is
            treated as "duckduckgo".

    Returns:
        Normalized result dict carrying at least ``provider`` and ``query``.

    Raises:
        ConfigurationError: The selected provider's API key is missing.
        TransportError: The provider answered with a non-success status.
    """
    logger.info(f"Web search ({provider}): {query!r}")

    if provider == "tavily":
        return await search_tavily(query)
    if provider == "serper":
        return await search_serper(query)
    if provider not in SEARCH_PROVIDERS:
        logger.debug(f"Unknown search provider {provider!r}, using duckduckgo")
    return await search_duckduckgo(query)
