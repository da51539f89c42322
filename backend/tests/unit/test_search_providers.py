"""Tests for search.providers using respx."""

import json
import os
from unittest.mock import patch

import pytest
import respx
from httpx import Response

from errors import ConfigurationError, TransportError
from search.providers import (
    DDG_API_URL,
    NO_SUMMARY,
    SERPER_API_URL,
    TAVILY_API_URL,
    web_search,
)

DDG_PAYLOAD = {
    "Abstract": "Python is a programming language.",
    "AbstractSource": "Wikipedia",
    "AbstractURL": "https://en.wikipedia.org/wiki/Python",
    "RelatedTopics": [{"Text": f"Topic {i}"} for i in range(8)],
    "Results": [{"Text": f"Result {i}"} for i in range(12)],
}


class TestDuckDuckGo:
    async def test_maps_instant_answer_fields(self):
        with respx.mock:
            route = respx.get(url__startswith=DDG_API_URL).mock(return_value=Response(200, json=DDG_PAYLOAD))
            result = await web_search("python")

        assert result["provider"] == "duckduckgo"
        assert result["query"] == "python"
        assert result["abstract"] == "Python is a programming language."
        assert result["abstractSource"] == "Wikipedia"
        assert len(result["relatedTopics"]) == 5
        assert len(result["results"]) == 10
        params = route.calls[0].request.url.params
        assert params["q"] == "python"
        assert params["format"] == "json"

    async def test_missing_abstract_uses_sentinel(self):
        with respx.mock:
            respx.get(url__startswith=DDG_API_URL).mock(return_value=Response(200, json={}))
            result = await web_search("obscure")
        assert result["abstract"] == NO_SUMMARY
        assert result["relatedTopics"] == []
        assert result["results"] == []

    async def test_unknown_provider_behaves_like_duckduckgo(self):
        with respx.mock:
            respx.get(url__startswith=DDG_API_URL).mock(return_value=Response(200, json=DDG_PAYLOAD))
            default = await web_search("python", "duckduckgo")
            unknown = await web_search("python", "unknown-value")
        assert unknown == default

    async def test_non_success_raises_transport_error(self):
        with respx.mock:
            respx.get(url__startswith=DDG_API_URL).mock(return_value=Response(503))
            with pytest.raises(TransportError) as exc_info:
                await web_search("python")
        assert exc_info.value.status_code == 503
        assert "Service Unavailable" in str(exc_info.value)


class TestTavily:
    async def test_requires_api_key(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("TAVILY_API_KEY", None)
            with pytest.raises(ConfigurationError, match="Tavily API key not configured"):
                await web_search("python", "tavily")

    async def test_maps_results(self):
        payload = {
            "answer": "A language.",
            "results": [
                {"title": "Python", "url": "https://python.org", "content": "Official", "score": 0.9, "raw": "x"},
            ],
        }
        with patch.dict(os.environ, {"TAVILY_API_KEY": "tv-key"}):
            with respx.mock:
                route = respx.post(TAVILY_API_URL).mock(return_value=Response(200, json=payload))
                result = await web_search("python", "tavily")

        assert result["provider"] == "tavily"
        assert result["answer"] == "A language."
        assert result["results"] == [
            {"title": "Python", "url": "https://python.org", "content": "Official", "score": 0.9}
        ]
        request = route.calls[0].request
        assert request.headers["authorization"] == "Bearer tv-key"
        body = json.loads(request.content)
        assert body["search_depth"] == "basic"
        assert body["include_answer"] is True

    async def test_non_success_raises_transport_error(self):
        with patch.dict(os.environ, {"TAVILY_API_KEY": "tv-key"}):
            with respx.mock:
                respx.post(TAVILY_API_URL).mock(return_value=Response(401))
                with pytest.raises(TransportError, match="Unauthorized"):
                    await web_search("python", "tavily")


class TestSerper:
    async def test_requires_api_key(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("SERPER_API_KEY", None)
            with pytest.raises(ConfigurationError, match="Serper API key not configured"):
                await web_search("python", "serper")

    async def test_maps_organic_results_and_passthrough(self):
        payload = {
            "knowledgeGraph": {"title": "Python"},
            "organic": [
                {"title": "Python", "link": "https://python.org", "snippet": "Official site", "position": 1},
            ],
        }
        with patch.dict(os.environ, {"SERPER_API_KEY": "sp-key"}):
            with respx.mock:
                route = respx.post(SERPER_API_URL).mock(return_value=Response(200, json=payload))
                result = await web_search("python", "serper")

        assert result["provider"] == "serper"
        assert result["knowledgeGraph"] == {"title": "Python"}
        assert result["answerBox"] is None
        assert result["results"] == [
            {"title": "Python", "url": "https://python.org", "snippet": "Official site", "position": 1}
        ]
        request = route.calls[0].request
        assert request.headers["x-api-key"] == "sp-key"
        assert json.loads(request.content) == {"q": "python", "num": 10}
