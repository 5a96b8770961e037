"""
Error taxonomy shared by the key pool, the response decoder and the pipeline.
"""

from typing import Optional


class BookcastError(Exception):
    """Base class for every error raised by Bookcast itself."""


class MissingCredentialError(BookcastError):
    """No usable API key is available for the selected provider."""

    def __init__(self, provider: str = "gemini", message: Optional[str] = None):
        self.provider = provider
        super().__init__(
            message
            or f"No {provider} API key configured. Open the API & model settings and add at least one key."
        )


class AllCandidatesFailedError(BookcastError):
    """Every candidate key failed and no underlying error was recorded."""

    def __init__(self, message: str = "All provided API keys failed."):
        super().__init__(message)


class ResponseDecodeError(BookcastError):
    """Provider text could not be interpreted as the expected structure.

    ``raw_text`` is kept for diagnostics only and is not part of ``str(error)``.
    """

    def __init__(self, parser_message: str, raw_text: str = ""):
        self.parser_message = parser_message
        self.raw_text = raw_text
        super().__init__(f"Could not decode the AI response: {parser_message}")


class PreconditionNotMetError(BookcastError):
    """A stage was triggered without its required predecessor state."""


class StageBusyError(PreconditionNotMetError):
    """A stage was triggered while another stage of the same pipeline is running."""

    def __init__(self, busy_stage: str):
        self.busy_stage = busy_stage
        super().__init__(f"Stage '{busy_stage}' is still running. Wait for it to finish.")


class InputValidationError(BookcastError):
    """Required top-level input is missing or a provider credential requirement is unmet."""
