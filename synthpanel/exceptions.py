"""synthpanel exception hierarchy.

All custom exceptions inherit from SynthPanelError, so callers can
catch the whole family or a single failure category.

Fatal categories (abort a test run):
  PersonaGenerationError, RecommendationError, PersistenceError,
  RunTimeoutError, InvalidRequestError, AccessDeniedError.

Recoverable category (swallowed by the evaluation fan-out):
  EvaluationError.
"""


class SynthPanelError(Exception):
    """Base exception for all synthpanel errors."""

    def __init__(self, message: str = "", test_id: str | None = None) -> None:
        self.test_id = test_id
        super().__init__(message)


class ExternalAPIError(SynthPanelError):
    """Raised when the text-generation oracle call fails.

    Examples: HTTP timeout, rate limiting, authentication failure,
    empty content in the reply.
    """

    def __init__(
        self,
        message: str = "",
        test_id: str | None = None,
        status_code: int | None = None,
        service: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.service = service
        super().__init__(message, test_id)


class ResponseParseError(SynthPanelError):
    """Raised when oracle text cannot be decoded into the expected shape.

    Carries the name of the expected shape and a short preview of the
    offending text for diagnostics.
    """

    def __init__(
        self,
        message: str = "",
        expected: str | None = None,
        preview: str | None = None,
    ) -> None:
        self.expected = expected
        self.preview = preview
        super().__init__(message)


class PersonaGenerationError(SynthPanelError):
    """Raised when the persona batch cannot be produced."""


class EvaluationError(SynthPanelError):
    """Raised when a single persona evaluation fails.

    Never escapes the evaluation fan-out; the failing persona gets a
    fallback response instead.
    """

    def __init__(self, message: str = "", persona_name: str | None = None) -> None:
        self.persona_name = persona_name
        super().__init__(message)


class RecommendationError(SynthPanelError):
    """Raised when the final recommendations call fails."""


class PersistenceError(SynthPanelError):
    """Raised when a finished test record cannot be stored."""


class InvalidRequestError(SynthPanelError):
    """Raised when an inbound request or aggregation input is invalid.

    Examples: persona_count below 1, empty response list handed to
    the aggregator.
    """


class AccessDeniedError(SynthPanelError):
    """Raised when the requester may not run the requested operation."""

    def __init__(
        self,
        message: str = "",
        test_id: str | None = None,
        feature: str | None = None,
    ) -> None:
        self.feature = feature
        super().__init__(message, test_id)


class RunTimeoutError(SynthPanelError):
    """Raised when a test run exceeds its overall time ceiling."""


class ConfigurationError(SynthPanelError):
    """Raised when required configuration is missing or malformed."""
