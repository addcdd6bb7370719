"""Error kinds and exception types raised while invoking tools."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Categories a tool failure is reported under."""

    CONFIGURATION = "configuration"
    UNKNOWN_TOOL = "unknown_tool"
    INVALID_ARGUMENTS = "invalid_arguments"
    REMOTE_HTTP = "remote_http"
    NETWORK = "network"
    INTERNAL = "internal"


class ToolError(Exception):
    """Base class for failures surfaced to the tool caller."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.INTERNAL) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


class ConfigurationError(ToolError):
    """A required setting (the API credential) is missing."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorKind.CONFIGURATION)


class UnknownToolError(ToolError):
    """The requested tool name is not in the catalog."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}", ErrorKind.UNKNOWN_TOOL)
        self.tool_name = tool_name


class InvalidArgumentsError(ToolError):
    """Tool arguments failed validation against the tool's input contract."""

    def __init__(self, tool_name: str, detail: str) -> None:
        super().__init__(f"Invalid arguments for {tool_name}: {detail}", ErrorKind.INVALID_ARGUMENTS)
        self.tool_name = tool_name
        self.detail = detail


class RemoteHTTPError(ToolError):
    """The remote service answered with a non-success status.

    The status code and raw body are kept verbatim; no attempt is made to
    classify them further.
    """

    def __init__(self, status_code: int, body: str, source: str = "Gemini API") -> None:
        super().__init__(f"{source} Error ({status_code}): {body}", ErrorKind.REMOTE_HTTP)
        self.status_code = status_code
        self.body = body
