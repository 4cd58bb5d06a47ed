from __future__ import annotations

"""Exception hierarchy shared by the pipeline, the service and the web layer."""


class AnalyzerError(Exception):
    """Base class for all channel analyzer errors."""


class NotFoundError(AnalyzerError):
    """A lookup yielded nothing. User-correctable."""


class ChannelNotFoundError(NotFoundError):
    """The channel input could not be resolved to a YouTube channel."""

    def __init__(self, channel_input: str):
        self.channel_input = channel_input
        super().__init__(f"Channel not found: {channel_input}")


class ValidationError(AnalyzerError):
    """Malformed input or a read model that does not match its schema."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class UpstreamError(AnalyzerError):
    """The YouTube Data API or the LLM service failed or returned garbage."""

    def __init__(self, service: str, message: str, status_code: int | None = None):
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service}: {message}")
