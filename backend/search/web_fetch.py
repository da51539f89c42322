"""Fetch a URL and reduce it to a title and plain text."""

import logging
import re
from datetime import datetime, timezone

import httpx
from bs4 import BeautifulSoup

from config import settings
from errors import TransportError
from models import CrawlResult

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; AI Assistant Bot)"
NO_TITLE = "No title found"
MAX_PARSE_CHARS = 500_000  # chars to feed parser
MAX_TEXT_LENGTH = 5_000  # chars to return


async def crawl_url(url: str) -> CrawlResult:
    """Fetch a URL and return its title and readable text.

    Args:
        url: The URL to fetch. A missing scheme defaults to https.

    Returns:
        CrawlResult with at most MAX_TEXT_LENGTH characters of content.

    Raises:
        TransportError: The server answered with a non-success status.
    """
    logger.info(f"Web fetch: {url!r}")

    if not url.startswith(("http://", "https://")):
        url = "https://" + url

    async with httpx.AsyncClient(
        timeout=settings.http_timeout,
        follow_redirects=True,
        max_redirects=5,
    ) as client:
        resp = await client.get(url, headers={"User-Agent": USER_AGENT})

    if not resp.is_success:
        logger.error(f"Web fetch HTTP {resp.status_code}: {url!r}")
        raise TransportError("Failed to fetch URL", resp.status_code, resp.reason_phrase)

    title, content = extract_text(resp.text)
    return CrawlResult(
        url=url,
        title=title,
        content=content,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


def extract_text(html: str) -> tuple[str, str]:
    """Return (title, plain text) for an HTML page.

    Best-effort: scripts and styles are dropped, remaining tags stripped and
    whitespace collapsed. Malformed markup is tolerated by the parser.
    """
    soup = BeautifulSoup(html[:MAX_PARSE_CHARS], "html.parser")

    title = NO_TITLE
    title_tag = soup.find("title")
    if title_tag is not None and title_tag.get_text().strip():
        title = title_tag.get_text().strip()

    for tag in soup(["script", "style"]):
        tag.decompose()

    text = soup.get_text(separator=" ")
    text = re.sub(r"\s+", " ", text).strip()
    return title, text[:MAX_TEXT_LENGTH]
