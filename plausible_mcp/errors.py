"""Error taxonomy for tool dispatch and process startup."""

from __future__ import annotations


class ToolError(Exception):
    """Base for every failure that ends up in a tool ``Failure`` envelope."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ToolError):
    """Invocation arguments are absent or incomplete."""


class UnknownToolError(ToolError):
    """The requested tool name is not registered."""

    def __init__(self, tool_name: str):
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class UpstreamError(ToolError):
    """The Plausible API answered with a non-2xx status or could not be reached.

    ``status_code`` and ``status_text`` are ``None`` for transport failures.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        status_text: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text


class StartupError(Exception):
    """Required configuration is missing. Fatal, never caught by the dispatcher."""
