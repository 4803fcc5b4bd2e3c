"""Error taxonomy shared by the GitHub and generative clients.

Both clients convert low-level failures into one of these kinds at their
boundary. Callers above them never look at HTTP status codes or provider
error text; they only catch these classes and show ``str(error)`` to the
user.

Hierarchy:
    GitCastError
    ├── InvalidCredentials
    ├── RateLimited
    ├── DailyQuotaExceeded
    ├── RemoteError
    │   └── NotFound
    └── ServiceUnavailable
"""
from __future__ import annotations
from datetime import datetime
from typing import Optional


class GitCastError(Exception):
    """Base class; the message is meant to be shown to the user as is."""


class InvalidCredentials(GitCastError):
    """A token or API key was rejected (or missing).

    Attributes:
        service: Which credential failed, ``"github"`` or ``"gemini"``.
    """

    def __init__(self, message: str, service: str = "github"):
        super().__init__(message)
        self.service = service


class RateLimited(GitCastError):
    """Transient rate limit. ``reset_at`` is set when the remote told us."""

    def __init__(self, message: str, reset_at: Optional[datetime] = None):
        super().__init__(message)
        self.reset_at = reset_at


class DailyQuotaExceeded(GitCastError):
    """The daily cap on generation calls was reached."""


class RemoteError(GitCastError):
    """Any other non-2xx answer from the hosting API.

    Attributes:
        status_code: HTTP status, or 0 when the request never got an answer.
        message: Best-effort message taken from the response body.
    """

    def __init__(self, status_code: int, message: str):
        super().__init__(f"GitHub API Error ({status_code}): {message}")
        self.status_code = status_code
        self.message = message


class NotFound(RemoteError):
    """404 from the hosting API."""

    def __init__(self, message: str = "Not Found"):
        super().__init__(404, message)


class ServiceUnavailable(GitCastError):
    """Generic generation-provider failure."""
