"""Exception types shared across quillmind."""

from __future__ import annotations


class QuillMindError(Exception):
    """Base class for quillmind errors."""


class ConfigurationError(QuillMindError):
    """Missing or invalid configuration (e.g. an API key). Not retried."""


class UpstreamServiceError(QuillMindError):
    """An embedding or completion call failed.

    ``message`` is short and safe to show to a user; the raw upstream
    detail only goes to the log.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidRequestError(QuillMindError):
    """The request cannot be handled as given (e.g. missing project id)."""
