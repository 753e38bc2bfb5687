"""Domain errors raised by the search and cache services."""


class InputError(ValueError):
    """The caller supplied no usable ingredients."""


class UpstreamError(Exception):
    """The remote recipe provider failed.

    Carries the HTTP status the API layer should answer with and a short
    machine-readable code so callers can tell the failure modes apart.
    """

    status_code = 502
    code = "upstream_error"

    def __init__(self, message: str, upstream_status: int | None = None):
        super().__init__(message)
        self.message = message
        self.upstream_status = upstream_status


class QuotaExceededError(UpstreamError):
    """The provider rejected the request because the daily quota is used up."""

    status_code = 402
    code = "quota_exceeded"


class UpstreamAuthError(UpstreamError):
    """The provider rejected the API key (or none is configured)."""

    status_code = 401
    code = "auth_failed"
