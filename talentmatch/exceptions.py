"""
Error taxonomy for the evaluation pipeline.

Every error carries the HTTP status it maps to when it escapes a route
before a batch starts, and whether it is fatal to a running batch.
"""


class PipelineError(Exception):
    """Base class for all pipeline failures."""

    status_code: int = 500
    fatal: bool = False

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class NotFound(PipelineError):
    status_code = 404


class Unauthorized(PipelineError):
    """Interview token does not map to an active session."""
    status_code = 403


class ConfigurationError(PipelineError):
    """A required credential or setting is missing."""
    status_code = 500
    fatal = True


class InputValidationError(PipelineError):
    status_code = 400


class RateLimited(PipelineError):
    status_code = 429


class QuotaExhausted(PipelineError):
    """The scoring service refused payment; nothing further will succeed."""
    status_code = 402
    fatal = True


class UpstreamError(PipelineError):
    status_code = 502


class MalformedResponse(PipelineError):
    status_code = 502


class PersistenceError(PipelineError):
    status_code = 500
