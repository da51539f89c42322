"""Decide whether an assistant reply carries content worth inserting into the document.

Callers go through ``ActionClassifier.classify`` only, so the keyword
heuristic below can be replaced by a model-based classifier.
"""

from dataclasses import dataclass, field

from models import MessageAction

INSERT_LABEL = "📝 Insert into Document"

_REQUEST_VERBS = ("write", "create", "generate")
_REPLY_MARKERS = ("Here's", "Here is")
_SKIP_PREFIXES = ("Here", "I", "This")
MIN_LINE_LENGTH = 20
MIN_CONTENT_LENGTH = 50


@dataclass
class ActionDecision:
    actions: list[MessageAction] = field(default_factory=list)

    @property
    def has_actions(self) -> bool:
        return bool(self.actions)


class ActionClassifier:
    def classify(self, message: str, reply: str) -> ActionDecision:
        raise NotImplementedError


class HeuristicActionClassifier(ActionClassifier):
    """Keyword sniffing on the request and the reply."""

    def classify(self, message: str, reply: str) -> ActionDecision:
        lowered = message.lower()
        triggered = any(verb in lowered for verb in _REQUEST_VERBS) or any(
            marker in reply for marker in _REPLY_MARKERS
        )
        if not triggered:
            return ActionDecision()

        content_lines = [
            line for line in reply.split("\n")
            if line.strip()
            and not line.startswith(_SKIP_PREFIXES)
            and len(line) > MIN_LINE_LENGTH
        ]
        content = "\n".join(content_lines).strip()
        if len(content) <= MIN_CONTENT_LENGTH:
            return ActionDecision()

        return ActionDecision(actions=[
            MessageAction(label=INSERT_LABEL, type="insert", content=content)
        ])


default_classifier = HeuristicActionClassifier()
