# File: pluginforge/validators.py
"""
NexaFlow PluginForge - Input, Document & Bundle Validators
===========================================================
A **pure-function validation pipeline** around the models defined in
``pluginforge.models``.

Pydantic handles per-field structural correctness.  This module adds the
checks that span several records:

- Raw input shape (file extension, empty content, URL scheme) before the
  parser is ever invoked.
- Raw document shape (mapping, ``openapi``/``swagger`` key, ``paths``).
- Parsed API sanity (path template parameters, placeholder auth).
- Session consistency (required features selected, focused endpoints exist).
- Transformation bundles (unique safe paths, parseable JSON artifacts,
  placeholder markers).

Usage by downstream modules:
    from pluginforge.validators import validate_transformation
    result = validate_transformation(bundle)
    if not result.is_valid:
        raise SystemExit(...)
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import PurePosixPath
from typing import Any, Dict, List, Mapping, Optional, Set, Union
from urllib.parse import urlparse

from pluginforge.exceptions import InputValidationError
from pluginforge.models import (
    AnalysisSession,
    CodeLanguage,
    ParsedAPI,
    PlatformTransformation,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationIssue:
    """Lightweight issue descriptor (no Pydantic overhead)."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning" | "info"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class ValidationResult:
    """Accumulates ``ValidationIssue`` instances produced by the pipeline."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationIssue] = []

    # -- Mutation -----------------------------------------------------------

    def add_error(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationIssue("error", code, message, context))

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationIssue("warning", code, message, context))

    def add_info(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationIssue("info", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def errors(self) -> List[ValidationIssue]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [e for e in self._items if e.is_warning]

    @property
    def all_items(self) -> List[ValidationIssue]:
        return list(self._items)

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self._items]

    @property
    def has_errors(self) -> bool:
        return any(e.is_error for e in self._items)

    @property
    def error_count(self) -> int:
        return sum(1 for e in self._items if e.is_error)

    @property
    def warning_count(self) -> int:
        return sum(1 for e in self._items if e.is_warning)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def summary(self) -> str:
        return (
            f"Validation: {self.error_count} error(s), "
            f"{self.warning_count} warning(s), "
            f"{len(self._items)} total item(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors (i.e. valid)."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def format_report(self, include_info: bool = False) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary(), ""]
        for item in self._items:
            if not include_info and item.level == "info":
                continue
            prefix: str = {
                "error": "❌",
                "warning": "⚠️",
                "info": "ℹ️",
            }.get(item.level, "•")
            lines.append(f"  {prefix} [{item.code}] {item.message}")
            if item.context:
                for k, v in item.context.items():
                    lines.append(f"       {k}: {v}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Constants & patterns
# ---------------------------------------------------------------------------

ALLOWED_EXTENSIONS: tuple = (".json", ".yaml", ".yml")

_PATH_TEMPLATE_RE: re.Pattern[str] = re.compile(r"\{([^}/]+)\}")
_MAX_RECOMMENDED_ENDPOINTS: int = 200


# ---------------------------------------------------------------------------
# Raw input
# ---------------------------------------------------------------------------


def validate_upload(
    filename: str, content: Optional[Union[bytes, str]]
) -> ValidationResult:
    """
    Check an uploaded file before it reaches the parser: extension must be
    ``.json``, ``.yaml`` or ``.yml`` and the content must not be blank.
    """
    result: ValidationResult = ValidationResult()
    ctx: Dict[str, Any] = {"filename": filename}

    if not filename or not filename.strip():
        result.add_error("EMPTY_FILENAME", "No file was provided.", ctx)
        return result

    if not filename.lower().endswith(ALLOWED_EXTENSIONS):
        result.add_error(
            "UNSUPPORTED_EXTENSION",
            f"Unsupported file type '{filename}'. "
            f"Please upload a {', '.join(ALLOWED_EXTENSIONS)} file.",
            ctx,
        )

    if content is None or not (
        content.strip() if isinstance(content, str) else content.strip(b" \t\r\n")
    ):
        result.add_error("EMPTY_CONTENT", f"File '{filename}' is empty.", ctx)

    return result


def validate_spec_url(url: str) -> ValidationResult:
    """A spec URL must be a non-empty absolute http(s) URL."""
    result: ValidationResult = ValidationResult()
    if not url or not url.strip():
        result.add_error("EMPTY_URL", "No specification URL was provided.")
        return result

    parsed = urlparse(url.strip())
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        result.add_error(
            "INVALID_URL",
            f"'{url}' is not an absolute http(s) URL.",
            {"url": url},
        )
    return result


def ensure_valid(result: ValidationResult) -> None:
    """Raise ``InputValidationError`` carrying the first error, if any."""
    if result.has_errors:
        raise InputValidationError(result.errors[0].message)


# ---------------------------------------------------------------------------
# Raw document
# ---------------------------------------------------------------------------


def validate_document(document: Any) -> ValidationResult:
    """Structural checks on a decoded (but not yet parsed) document."""
    result: ValidationResult = ValidationResult()

    if not isinstance(document, Mapping):
        result.add_error(
            "DOCUMENT_NOT_MAPPING",
            f"Top level of the document must be a mapping, got "
            f"{type(document).__name__}.",
        )
        return result

    if "openapi" not in document and "swagger" not in document:
        result.add_error(
            "NOT_OPENAPI",
            "Document has neither an 'openapi' nor a 'swagger' version key.",
        )

    info: Any = document.get("info")
    if not isinstance(info, Mapping):
        result.add_warning("MISSING_INFO", "Document has no 'info' object.")
    elif not info.get("title"):
        result.add_warning(
            "MISSING_TITLE", "Document has no info.title; 'Untitled API' is used."
        )

    paths: Any = document.get("paths")
    if paths is None:
        result.add_warning("MISSING_PATHS", "Document declares no 'paths'.")
    elif not isinstance(paths, Mapping):
        result.add_error(
            "PATHS_NOT_MAPPING",
            f"'paths' must be a mapping, got {type(paths).__name__}.",
        )

    return result


# ---------------------------------------------------------------------------
# Parsed API
# ---------------------------------------------------------------------------


def validate_path_parameters(api: ParsedAPI) -> ValidationResult:
    """
    Every ``{name}`` in a path template should be declared as a path
    parameter; generated clients substitute only declared ones.
    """
    result: ValidationResult = ValidationResult()
    for endpoint in api.endpoints:
        declared: Set[str] = {p.name for p in endpoint.path_parameters}
        for placeholder in _PATH_TEMPLATE_RE.findall(endpoint.path):
            if placeholder not in declared:
                result.add_warning(
                    "UNDECLARED_PATH_PARAMETER",
                    f"Endpoint '{endpoint.id}' uses '{{{placeholder}}}' in its "
                    f"path but does not declare it as a path parameter.",
                    {"endpoint": endpoint.id, "parameter": placeholder},
                )
    return result


def validate_parsed_api(api: ParsedAPI) -> ValidationResult:
    """Semantic checks on a parsed API."""
    result: ValidationResult = ValidationResult()

    if not api.endpoints:
        result.add_warning(
            "NO_ENDPOINTS",
            f"'{api.name}' declares no GET/POST/PUT/DELETE/PATCH operations.",
        )
    elif len(api.endpoints) > _MAX_RECOMMENDED_ENDPOINTS:
        result.add_info(
            "LARGE_API",
            f"'{api.name}' has {len(api.endpoints)} endpoints; generated "
            f"bundles will be large.",
        )

    if not api.authentication:
        result.add_info(
            "NO_AUTH_DECLARED",
            "No security scheme declared; generated code uses a placeholder "
            "Authorization header.",
        )

    if api.base_url is None:
        result.add_info(
            "NO_BASE_URL", "No server URL declared; a placeholder base URL is used."
        )

    result.merge(validate_path_parameters(api))
    return result


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


def validate_session(session: AnalysisSession) -> ValidationResult:
    """Consistency of a session's choices with its intelligence and API."""
    result: ValidationResult = ValidationResult()
    ctx: Dict[str, Any] = {"session": session.id}

    selected: Set[str] = set(session.user_choices.selected_features)
    known: Set[str] = set(session.intelligence.feature_ids)

    for feature_id in session.intelligence.required_feature_ids:
        if feature_id not in selected:
            result.add_error(
                "REQUIRED_FEATURE_NOT_SELECTED",
                f"Required feature '{feature_id}' is not selected.",
                {**ctx, "feature": feature_id},
            )

    for feature_id in session.user_choices.selected_features:
        if feature_id not in known:
            result.add_error(
                "UNKNOWN_FEATURE_SELECTED",
                f"Selected feature '{feature_id}' is not offered for this API.",
                {**ctx, "feature": feature_id},
            )

    endpoint_ids: Set[str] = set(session.original_api.endpoint_ids)
    for endpoint_id in session.refined_spec.focused_endpoints:
        if endpoint_id not in endpoint_ids:
            result.add_error(
                "UNKNOWN_FOCUSED_ENDPOINT",
                f"Focused endpoint '{endpoint_id}' does not exist in the API.",
                {**ctx, "endpoint": endpoint_id},
            )

    if not selected:
        result.add_warning("NOTHING_SELECTED", "No features are selected.", ctx)

    return result


# ---------------------------------------------------------------------------
# Transformation bundle
# ---------------------------------------------------------------------------


def is_safe_relative_path(path: str) -> bool:
    """Relative, POSIX-style, no ``..`` segments, no drive letters."""
    if not path or path.startswith(("/", "\\")) or "\\" in path:
        return False
    if re.match(r"^[A-Za-z]:", path):
        return False
    parts = PurePosixPath(path).parts
    return ".." not in parts and "" not in parts


def validate_transformation(bundle: PlatformTransformation) -> ValidationResult:
    """
    Checks a transformer's output before it is handed to the exporter:
    unique safe file paths, non-empty files, parseable JSON artifacts and
    flagged placeholders.
    """
    result: ValidationResult = ValidationResult()
    seen: Set[str] = set()

    if not bundle.code_files:
        result.add_error("EMPTY_BUNDLE", "Transformation produced no code files.")

    for code_file in bundle.code_files:
        ctx: Dict[str, Any] = {"path": code_file.path}
        if code_file.path in seen:
            result.add_error(
                "DUPLICATE_FILE_PATH",
                f"File '{code_file.path}' is produced more than once.",
                ctx,
            )
        seen.add(code_file.path)

        if not is_safe_relative_path(code_file.path):
            result.add_error(
                "UNSAFE_FILE_PATH",
                f"File path '{code_file.path}' escapes the bundle directory.",
                ctx,
            )

        if not code_file.content.strip():
            result.add_warning(
                "EMPTY_FILE", f"File '{code_file.path}' is empty.", ctx
            )

        if code_file.language == CodeLanguage.JSON.value:
            try:
                json.loads(code_file.content)
            except json.JSONDecodeError as exc:
                result.add_error(
                    "INVALID_JSON_FILE",
                    f"File '{code_file.path}' is not valid JSON: {exc}",
                    ctx,
                )

    for key in ("auth", "baseUrl"):
        entry: Any = bundle.configuration.get(key)
        if isinstance(entry, Mapping) and entry.get("placeholder"):
            result.add_warning(
                "PLACEHOLDER_CONFIGURATION",
                f"Configuration '{key}' is a placeholder; review it before "
                f"installing the plugin.",
                {"key": key},
            )

    if not bundle.documentation.strip():
        result.add_warning("NO_DOCUMENTATION", "Transformation has no documentation.")

    logger.info("Bundle validation complete: %s", result.summary())
    return result


def validate_full(
    api: ParsedAPI,
    bundle: PlatformTransformation,
    session: Optional[AnalysisSession] = None,
) -> ValidationResult:
    """
    **Master validation entry point** used by the generator after a
    transformation: parsed API, session (when there is one) and bundle.
    """
    result: ValidationResult = ValidationResult()
    result.merge(validate_parsed_api(api))
    if session is not None:
        result.merge(validate_session(session))
    result.merge(validate_transformation(bundle))

    if result.has_errors:
        logger.error(
            "Validation FAILED with %d error(s). %s",
            result.error_count,
            result.summary(),
        )
    else:
        logger.info("Validation PASSED. %s", result.summary())
    return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ALLOWED_EXTENSIONS",
    "ValidationIssue",
    "ValidationResult",
    "validate_upload",
    "validate_spec_url",
    "ensure_valid",
    "validate_document",
    "validate_path_parameters",
    "validate_parsed_api",
    "validate_session",
    "is_safe_relative_path",
    "validate_transformation",
    "validate_full",
]

logger.debug("pluginforge.validators loaded — %d public symbols.", len(__all__))
