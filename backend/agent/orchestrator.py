"""Agent turn: decide on tools, run them, and synthesize one reply.

The chain is strictly sequential: analysis, then search, then crawl, then
synthesis. A failed search fails the turn; a failed crawl is logged and the
turn continues without it.
"""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from agent.analyzer import analyze_tool_need
from llm.client import complete
from models import AgentReply, ToolDecision, ToolUsage
from search.providers import web_search
from search.web_fetch import crawl_url

logger = logging.getLogger(__name__)

NO_REPLY = "I apologize, I couldn't generate a proper response."


@dataclass
class ToolInvocation:
    tool: str
    result: dict[str, Any]
    query: str | None = None
    url: str | None = None

    @property
    def target(self) -> str:
        return self.query if self.query is not None else (self.url or "")

    def summary(self) -> ToolUsage:
        return ToolUsage(tool=self.tool, query=self.target)


def _build_synthesis_prompt(invocations: Sequence[ToolInvocation]) -> str:
    sections = []
    for inv in invocations:
        target = f"Query: {inv.query}" if inv.query is not None else f"URL: {inv.url}"
        sections.append(
            f"\nTool: {inv.tool}\n{target}\nResult: {json.dumps(inv.result, indent=2, default=str)}\n"
        )
    return (
        "You are an intelligent AI agent with access to web search and crawling tools. "
        "You have just used tools to gather information and should now provide a "
        "comprehensive response.\n\n"
        "Tools used and results:\n"
        + "\n".join(sections)
        + "\n\nProvide a helpful response that incorporates the tool results. "
        "Be specific and cite sources when possible."
    )


async def _run_tools(decision: ToolDecision) -> list[ToolInvocation]:
    invocations: list[ToolInvocation] = []

    if decision.needs_search and decision.search_query:
        result = await web_search(decision.search_query, "duckduckgo")
        invocations.append(ToolInvocation(
            tool="web_search", query=decision.search_query, result=result,
        ))

    if decision.needs_crawl and decision.url_to_crawl:
        try:
            crawl = await crawl_url(decision.url_to_crawl)
        except Exception as e:
            logger.error(f"Crawl failed for {decision.url_to_crawl!r}, continuing without it: {e}")
        else:
            invocations.append(ToolInvocation(
                tool="web_crawl", url=decision.url_to_crawl, result=crawl.model_dump(),
            ))

    return invocations


async def run_agent(message: str, context: Sequence[dict[str, str]]) -> AgentReply:
    """Run one agent turn.

    Args:
        message: The user's message.
        context: Prior conversation as ``{"role", "content"}`` dicts, oldest first.

    Returns:
        The synthesized reply, a redacted tool summary, the analyzer's
        reasoning and completion token usage.
    """
    decision = await analyze_tool_need(message)
    invocations = await _run_tools(decision)

    completion = await complete(
        [
            {"role": "system", "content": _build_synthesis_prompt(invocations)},
            *[{"role": m["role"], "content": m["content"]} for m in context],
            {"role": "user", "content": message},
        ],
        temperature=0.7,
        max_tokens=1500,
    )

    return AgentReply(
        reply=completion.text or NO_REPLY,
        tools_used=[inv.summary() for inv in invocations],
        reasoning=decision.reasoning,
        usage=completion.usage,
    )
