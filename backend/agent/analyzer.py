"""Ask the completion service whether a message needs web search or a page crawl."""

import json
import logging

from pydantic import ValidationError

from llm.client import complete
from models import ToolDecision

logger = logging.getLogger(__name__)

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert at analyzing user requests and determining what tools an AI agent "
    "should use. Always respond with valid JSON."
)

ANALYSIS_FAILED = "Failed to analyze tool requirements"

_NULL_STRINGS = {"", "null", "none"}


def _build_analysis_prompt(message: str) -> str:
    return f"""
Analyze the following user message and determine what tools the AI agent should use to provide the best response.

Message: "{message}"

Based on this message, determine:
1. Does it need web search? (true/false)
2. If search is needed, what should be the search query?
3. Does it need to crawl a specific URL? (true/false)
4. If crawling is needed, what URL?
5. Brief reasoning for tool selection

Respond in valid JSON format:
{{
  "needsSearch": boolean,
  "searchQuery": "string or null",
  "needsCrawl": boolean,
  "urlToCrawl": "string or null",
  "reasoning": "brief explanation"
}}
"""


def no_tools_decision() -> ToolDecision:
    return ToolDecision(reasoning=ANALYSIS_FAILED)


def parse_tool_decision(raw: str) -> ToolDecision:
    """Parse the classifier's reply, degrading to "no tools" on any malformed input."""
    raw = raw.strip()
    # Strip markdown code fences if present
    if raw.startswith("```"):
        raw = raw.split("\n", 1)[1] if "\n" in raw else raw[3:]
        if raw.endswith("```"):
            raw = raw[:-3].strip()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Tool analysis returned invalid JSON: %s", e)
        return no_tools_decision()
    if not isinstance(data, dict):
        logger.warning("Tool analysis returned %s instead of an object", type(data).__name__)
        return no_tools_decision()

    for key in ("searchQuery", "urlToCrawl"):
        value = data.get(key)
        if isinstance(value, str) and value.strip().lower() in _NULL_STRINGS:
            data[key] = None
    if data.get("reasoning") is None:
        data["reasoning"] = ""

    try:
        return ToolDecision.model_validate(data)
    except ValidationError as e:
        logger.warning("Tool analysis JSON did not match the decision schema: %s", e)
        return no_tools_decision()


async def analyze_tool_need(message: str) -> ToolDecision:
    """Classify whether ``message`` needs web search and/or a URL crawl.

    Never raises on a malformed classifier reply; completion-service failures
    (network, auth) do propagate.
    """
    completion = await complete(
        [
            {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
            {"role": "user", "content": _build_analysis_prompt(message)},
        ],
        temperature=0.1,
        max_tokens=500,
    )
    decision = parse_tool_decision(completion.text or "{}")
    logger.info(
        "Tool decision: search=%s (%r), crawl=%s (%r)",
        decision.needs_search, decision.search_query,
        decision.needs_crawl, decision.url_to_crawl,
    )
    return decision
