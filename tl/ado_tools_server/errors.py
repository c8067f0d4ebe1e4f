"""Error types raised by the Azure DevOps tool server.

Every error is caught at the MCP boundary and returned to the caller as a tool
failure. Only ``ConfigurationError`` is fatal, and only at startup.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence


class ADOToolsError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(ADOToolsError):
    """Startup configuration is missing or malformed."""


@dataclass(frozen=True)
class FieldViolation:
    """A single field-level validation failure."""

    field: str
    message: str
    kind: str = 'invalid'

    def __str__(self) -> str:
        return f'{self.field}: {self.message}'


class InvalidArgumentsError(ADOToolsError):
    """Tool arguments failed schema validation."""

    def __init__(self, tool_name: str, violations: Sequence[FieldViolation]):
        """Initialize the error.

        Args:
            tool_name: Name of the tool whose arguments were rejected
            violations: Field-level violations, in the order they were found
        """
        self.tool_name = tool_name
        self.violations: List[FieldViolation] = list(violations)
        details = '; '.join(str(v) for v in self.violations)
        super().__init__(f'Invalid arguments for tool "{tool_name}": {details}')


class UnknownToolError(ADOToolsError):
    """An invocation named a tool that is not registered."""

    def __init__(self, name: str, available: Sequence[str] = ()):
        self.name = name
        self.available = list(available)
        message = f'Unknown tool "{name}"'
        if self.available:
            message += f'. Available tools: {", ".join(self.available)}'
        super().__init__(message)


class RemoteApiError(ADOToolsError):
    """The Azure DevOps REST API answered with a non-success status."""

    def __init__(
        self,
        status_code: int,
        body: Any,
        method: Optional[str] = None,
        url: Optional[str] = None,
    ):
        """Initialize the error.

        Args:
            status_code: HTTP status code returned by the service
            body: Decoded JSON body when available, otherwise the raw text
            method: HTTP method of the failed request
            url: URL of the failed request
        """
        self.status_code = status_code
        self.body = body
        self.method = method
        self.url = url

        message = f'Azure DevOps API returned HTTP {status_code}'
        if method and url:
            message += f' for {method} {url}'
        remote_message = self.remote_message
        if remote_message:
            message += f': {remote_message}'
        super().__init__(message)

    @property
    def remote_message(self) -> Optional[str]:
        """Human-readable message reported by the service, if any."""
        if isinstance(self.body, dict):
            message = self.body.get('message')
            return str(message) if message else None
        if isinstance(self.body, str) and self.body.strip():
            return self.body.strip()[:500]
        return None
