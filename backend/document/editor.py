"""AI text edits: shorten, lengthen, convert to table, or general improvement."""

import logging

from llm.client import complete
from models import EditOperation

logger = logging.getLogger(__name__)

EDITOR_SYSTEM_PROMPT = (
    "You are an expert editor. Provide only the edited text as your response, "
    "without any explanations or additional commentary."
)

_EDIT_PROMPTS: dict[str, str] = {
    "shorten": "Please shorten the following text while maintaining its key meaning and impact: \"{text}\"",
    "lengthen": "Please expand and elaborate on the following text, adding more detail and depth: \"{text}\"",
    "table": "Convert the following text into a well-structured table format: \"{text}\"",
    "edit": "Please improve the following text for clarity, grammar, and impact: \"{text}\"",
}

_EXPLANATIONS: dict[str, str] = {
    "shorten": "shortened",
    "lengthen": "expanded",
    "table": "converted to table format",
    "edit": "improved",
}


def build_edit_prompt(text: str, operation: EditOperation) -> str:
    template = _EDIT_PROMPTS.get(operation, "Please improve the following text: \"{text}\"")
    return template.format(text=text)


def explain_edit(operation: EditOperation) -> str:
    return f"I've {_EXPLANATIONS.get(operation, 'improved')} the text as requested."


async def suggest_edit(text: str, operation: EditOperation) -> str:
    """Return the model's rewrite of ``text``, or ``text`` itself if it returned nothing."""
    logger.info(f"AI edit ({operation}): {len(text)} chars")
    completion = await complete(
        [
            {"role": "system", "content": EDITOR_SYSTEM_PROMPT},
            {"role": "user", "content": build_edit_prompt(text, operation)},
        ],
        temperature=0.3,
        max_tokens=1000,
    )
    return completion.text or text
