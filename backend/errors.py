"""Domain errors surfaced by the search, crawl and completion layers."""


class ConfigurationError(ValueError):
    """Raised when a required credential or setting is missing."""


class TransportError(Exception):
    """Raised when an upstream HTTP service answers with a non-success status."""

    def __init__(self, service: str, status_code: int, reason: str):
        self.service = service
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"{service} error: {reason} (HTTP {status_code})")
