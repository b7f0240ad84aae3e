"""Error taxonomy shared by the fetcher and the tool handlers.

Every error carries a `kind` label that ends up in the error envelope returned
to MCP callers, so clients can tell a bad argument from an upstream outage.
"""
from typing import Any, Dict, Optional


class RoadmapError(Exception):
    kind = "RoadmapError"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "message": self.message}


class ValidationError(RoadmapError):
    """Tool arguments outside the declared schema."""

    kind = "ValidationError"


class InvalidFilterError(RoadmapError):
    """Filter expression rejected by the sanitizer."""

    kind = "InvalidFilterError"


class UpstreamTimeoutError(RoadmapError):
    """The roadmap API did not answer before the deadline."""

    kind = "TimeoutError"


class UpstreamError(RoadmapError):
    """The roadmap API answered with a non-success status or could not be reached."""

    kind = "UpstreamError"

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["status"] = self.status
        if self.body:
            data["body"] = self.body
        return data


class NotFoundError(RoadmapError):
    kind = "NotFoundError"
