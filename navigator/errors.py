"""
Error types for the analysis pipeline.

Two kinds of failure leave the navigator package:
- SchemaValidationError: the model returned JSON that does not match the
  response contract. Raised by the schema layer with a descriptive message.
- AnalysisError: the single opaque failure the UI sees. Every transport,
  decoding and validation failure in the client is collapsed into it.
"""


class SchemaValidationError(ValueError):
    """Raised when a model payload does not conform to the response schema."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class AnalysisError(Exception):
    """Analysis failed. The cause is chained, never shown to the user."""

    USER_MESSAGE = "Analysis failed. Please try again."

    def __init__(self, message: str = USER_MESSAGE):
        super().__init__(message)
