class ChatError(Exception):
    """Base class for errors raised by the chat pipeline."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ChatError):
    """The inbound request is missing its required text."""


class BackendError(ChatError):
    """The analytics backend call failed (auth, network, timeout, bad query)."""


class UpstreamGenerationError(ChatError):
    """The language-model call failed."""
