"""Error taxonomy shared by the ingestion, gateway and chat modules."""


class ChatbotError(Exception):
    pass


class ExtractionError(ChatbotError):
    """A single file could not be turned into plain text."""

    def __init__(self, filename: str, reason: str = ""):
        self.filename = filename
        self.reason = reason
        super().__init__(f"Could not extract text from {filename}: {reason}" if reason else
                         f"Could not extract text from {filename}")


class GatewayError(ChatbotError):
    """The language-model backend failed or returned no usable text."""


class ConfigurationError(ChatbotError):
    """Fatal setup problem, raised before any request is attempted."""


class SyncPathError(ChatbotError):
    """A folder sync was requested outside the configured sync root."""
