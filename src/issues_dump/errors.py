"""Exception types raised by the issues dump workflow."""

from __future__ import annotations


class ExportError(RuntimeError):
    """Base class for fatal export errors; the runner maps these to exit code 1."""


class ConfigurationError(ExportError):
    """Raised when required configuration (e.g. the API token) is missing."""


class TransportError(ExportError):
    """Raised when a request never produced an HTTP response."""


class ApiError(ExportError):
    """Raised when GraphQL returns errors or a payload without the issues envelope."""


class PageLimitError(ExportError):
    """Raised when pagination exceeds the configured safety cap."""


class DumpFormatError(ExportError):
    """Raised when a dump file contains a line that is not a JSON object."""


__all__ = [
    "ExportError",
    "ConfigurationError",
    "TransportError",
    "ApiError",
    "PageLimitError",
    "DumpFormatError",
]
