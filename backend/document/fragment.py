"""Convert Markdown fragments into editor document nodes and append them."""

import copy
import re
from typing import Any

_BLOCK_SPLIT = re.compile(r"\n\s*\n")
_HEADING = re.compile(r"^(#{1,6})\s+(.*)$")


def _text_node(text: str, italic: bool = False) -> dict[str, Any]:
    node: dict[str, Any] = {"type": "text", "text": text}
    if italic:
        node["marks"] = [{"type": "italic"}]
    return node


def _paragraph(text: str) -> dict[str, Any]:
    # *whole line* is rendered italic (source citations)
    if len(text) > 2 and text.startswith("*") and text.endswith("*") and not text.startswith("**"):
        return {"type": "paragraph", "content": [_text_node(text[1:-1], italic=True)]}
    return {"type": "paragraph", "content": [_text_node(text)]}


def fragment_to_nodes(fragment: str) -> list[dict[str, Any]]:
    """Split a Markdown fragment into heading, bullet list and paragraph nodes.

    Only the constructs produced by search fragments are recognized; any
    other block becomes a plain paragraph.
    """
    nodes: list[dict[str, Any]] = []
    for block in _BLOCK_SPLIT.split(fragment.strip()):
        lines = [line.strip() for line in block.splitlines() if line.strip()]
        if not lines:
            continue

        if all(line.startswith("- ") for line in lines):
            nodes.append({
                "type": "bulletList",
                "content": [
                    {"type": "listItem", "content": [_paragraph(line[2:].strip())]}
                    for line in lines
                    if line[2:].strip()
                ],
            })
            continue

        heading = _HEADING.match(lines[0])
        if heading and len(lines) == 1:
            nodes.append({
                "type": "heading",
                "attrs": {"level": len(heading.group(1))},
                "content": [_text_node(heading.group(2).strip())],
            })
            continue

        nodes.append(_paragraph(" ".join(lines)))
    return nodes


def append_fragment(content: Any, fragment: str) -> Any:
    """Return a copy of ``content`` with ``fragment`` appended.

    Editor documents (``{"type": "doc", ...}``) get converted nodes; plain
    string content gets the Markdown appended as-is.
    """
    if isinstance(content, str):
        return f"{content.rstrip()}\n\n{fragment}" if content.strip() else fragment

    if isinstance(content, dict) and content.get("type") == "doc":
        doc = copy.deepcopy(content)
    else:
        doc = {"type": "doc", "content": []}
    doc.setdefault("content", []).extend(fragment_to_nodes(fragment))
    return doc
