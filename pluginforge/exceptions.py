# File: pluginforge/exceptions.py
"""
NexaFlow PluginForge - Error Taxonomy
======================================
Every failure the pipeline surfaces to a caller is one of the classes below.
Each one also derives from the closest built-in exception, so callers that
only know about ``ValueError`` / ``LookupError`` / ``RuntimeError`` keep
working.

    PluginForgeError
    ├── InputValidationError        (ValueError)   bad extension, empty input
    ├── SpecParseError              (ValueError)   fetch / syntax / $ref failures
    ├── SessionNotFoundError        (LookupError)  unknown or cleaned-up session
    ├── PlatformNotSupportedError   (LookupError)  no transformer registered
    ├── EngineUnavailableError      (RuntimeError) stub engine transform calls
    ├── EngineInitializationError   (RuntimeError) full engine failed to build
    ├── TemplateError               (ValueError)
    │   ├── TemplateDefinitionError
    │   └── TemplateRenderError
    └── ExportError                 (OSError)      unsafe path / write failure
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.exceptions")

UNAVAILABLE_MESSAGE: str = (
    "Transformation features are temporarily unavailable. Please try again later."
)


class PluginForgeError(Exception):
    """Base class for all PluginForge errors."""


class InputValidationError(PluginForgeError, ValueError):
    """Raised before parsing when the raw input has the wrong shape."""


class SpecParseError(PluginForgeError, ValueError):
    """
    A document could not be fetched, decoded, or dereferenced.

    ``cause`` holds the underlying message; the original exception is chained
    via ``__cause__``.  No partial ``ParsedAPI`` is ever produced alongside
    this error.
    """

    def __init__(self, message: str, cause: Optional[str] = None) -> None:
        super().__init__(message)
        self.cause: Optional[str] = cause

    @classmethod
    def from_url(cls, cause: str) -> "SpecParseError":
        return cls(f"Failed to parse OpenAPI specification: {cause}", cause)

    @classmethod
    def from_file(cls, cause: str) -> "SpecParseError":
        return cls(f"Failed to parse OpenAPI file: {cause}", cause)


class SessionNotFoundError(PluginForgeError, LookupError):
    """The session id is unknown (never created, or already cleaned up)."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Analysis session not found: {session_id}")
        self.session_id: str = session_id


class PlatformNotSupportedError(PluginForgeError, LookupError):
    """No transformer is registered for the requested platform id."""

    def __init__(self, platform: str, supported: Sequence[str] = ()) -> None:
        message: str = f"Platform not supported: {platform}"
        if supported:
            message += f" (supported: {', '.join(supported)})"
        super().__init__(message)
        self.platform: str = platform
        self.supported: List[str] = list(supported)


class EngineUnavailableError(PluginForgeError, RuntimeError):
    """Raised by every ``transform*`` call of the stub engine."""

    def __init__(self, message: str = UNAVAILABLE_MESSAGE) -> None:
        super().__init__(message)


class EngineInitializationError(PluginForgeError, RuntimeError):
    """The full transformation engine could not be constructed."""


class TemplateError(PluginForgeError, ValueError):
    """Base class for template definition and rendering problems."""


class TemplateDefinitionError(TemplateError):
    """A template's declared parameters do not match its placeholders."""


class TemplateRenderError(TemplateError):
    """A render call supplied missing, unexpected, or non-string values."""


class ExportError(PluginForgeError, OSError):
    """A bundle could not be written safely to disk."""


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "UNAVAILABLE_MESSAGE",
    "PluginForgeError",
    "InputValidationError",
    "SpecParseError",
    "SessionNotFoundError",
    "PlatformNotSupportedError",
    "EngineUnavailableError",
    "EngineInitializationError",
    "TemplateError",
    "TemplateDefinitionError",
    "TemplateRenderError",
    "ExportError",
]
logger.debug("pluginforge.exceptions loaded — %d public symbols.", len(__all__))
