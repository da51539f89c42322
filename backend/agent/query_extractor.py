"""Turn a chat message into a short web-search query."""

import re

_QUOTED = re.compile(r"[\"'](.*?)[\"']")

# Order matters: the first pattern with a non-empty capture wins.
_QUERY_PATTERNS = [
    re.compile(
        r"(?:find|get|search for)\s+(?:the\s+)?(?:latest\s+)?(.*?)"
        r"(?:\s+(?:and\s+)?(?:insert|add)(?:\s+(?:into|to)\s+(?:editor|document))?)?$",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:news|information|details)\s+(?:about|on|for)\s+(.*?)"
        r"(?:\s+(?:and\s+)?(?:insert|add))?$",
        re.IGNORECASE,
    ),
]

_LEADING_VERB = re.compile(r"^(?:find|get|search for)\s+", re.IGNORECASE)
_TRAILING_INSERT = re.compile(
    r"\s+(?:and\s+)?(?:insert|add)(?:\s+(?:into|to)\s+(?:editor|document))?$",
    re.IGNORECASE,
)


def extract_search_query(message: str) -> str:
    """Extract a search query from a free-form request.

    Tries, in order: the first quoted span, the imperative phrasing patterns,
    stripping the leading verb and trailing "insert" clause, and finally the
    trimmed message itself. Matching is case-insensitive; an empty quoted
    span ("") is ignored.
    """
    quoted = _QUOTED.search(message)
    if quoted and quoted.group(1):
        return quoted.group(1)

    for pattern in _QUERY_PATTERNS:
        match = pattern.search(message)
        if match and match.group(1).strip():
            return match.group(1).strip()

    query = _LEADING_VERB.sub("", message)
    query = _TRAILING_INSERT.sub("", query)
    return query.strip() or message.strip()
