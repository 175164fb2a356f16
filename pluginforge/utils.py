# File: pluginforge/utils.py
"""
NexaFlow PluginForge - Utility Functions & Helpers
===================================================
String transformation, escaping, file I/O, and timing utilities used
throughout the transformation pipeline.

Performance strategy:
- Name-conversion functions are decorated with ``@lru_cache(maxsize=None)``;
  transformers call them for every endpoint of every render, so repeated
  calls are amortised to O(1).
- File I/O helpers use atomic rename so an interrupted export never leaves
  a half-written file behind.
- No external dependencies beyond the Python standard library.
"""

from __future__ import annotations

import functools
import hashlib
import json
import logging
import os
import re
import shutil
import tempfile
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.utils")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (compiled once at module load)
# ---------------------------------------------------------------------------

_CAMEL_TO_SNAKE_RE1: re.Pattern[str] = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_TO_SNAKE_RE2: re.Pattern[str] = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALPHANUM_RE: re.Pattern[str] = re.compile(r"[^a-zA-Z0-9]")
_NON_ALPHANUM_RUN_RE: re.Pattern[str] = re.compile(r"[^a-zA-Z0-9]+")
_MULTI_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"_{2,}")
_LEADING_TRAILING_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"^_+|_+$")
_SPLIT_WORDS_RE: re.Pattern[str] = re.compile(
    r"[A-Z]?[a-z]+|[A-Z]+(?=[A-Z][a-z]|\d|\b)|[A-Z]|\d+"
)


# ---------------------------------------------------------------------------
# Cached string transformation functions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def to_snake_case(name: str) -> str:
    """
    Convert any string to snake_case.

    Examples:
        >>> to_snake_case("listUsers")
        'list_users'
        >>> to_snake_case("get__users__id_")
        'get_users_id'
        >>> to_snake_case("getHTTPResponse")
        'get_http_response'
    """
    if not name:
        return ""
    s: str = _CAMEL_TO_SNAKE_RE1.sub(r"\1_\2", name)
    s = _CAMEL_TO_SNAKE_RE2.sub(r"\1_\2", s)
    s = _NON_ALPHANUM_RE.sub("_", s)
    s = _MULTI_UNDERSCORE_RE.sub("_", s)
    s = _LEADING_TRAILING_UNDERSCORE_RE.sub("", s)
    return s.lower()


@functools.lru_cache(maxsize=None)
def to_camel_case(name: str) -> str:
    """
    Convert any string to camelCase.

    Examples:
        >>> to_camel_case("get__users__id_")
        'getUsersId'
        >>> to_camel_case("listUsers")
        'listUsers'
    """
    if not name:
        return ""
    words: Tuple[str, ...] = _extract_words(name)
    if not words:
        return ""
    first: str = words[0].lower()
    rest: str = "".join(w.capitalize() for w in words[1:])
    return first + rest


@functools.lru_cache(maxsize=None)
def _extract_words(name: str) -> Tuple[str, ...]:
    """
    Extract individual words from any casing style.

    Returns a tuple (hashable for LRU cache) of lowercase word strings.
    """
    cleaned: str = _NON_ALPHANUM_RE.sub(" ", name)
    words: List[str] = _SPLIT_WORDS_RE.findall(cleaned)
    return tuple(w.lower() for w in words if w)


# ---------------------------------------------------------------------------
# Naming helpers for generated plugin artifacts
# ---------------------------------------------------------------------------
# These split on non-alphanumeric runs only, so brand casing such as "DeepL"
# survives into class names ("DeepL_API") while slugs stay lowercase.


@functools.lru_cache(maxsize=None)
def _raw_words(name: str) -> Tuple[str, ...]:
    return tuple(w for w in _NON_ALPHANUM_RUN_RE.split(name) if w)


@functools.lru_cache(maxsize=None)
def slugify(name: str) -> str:
    """
    Lowercase, hyphen-separated slug used for file names and handles.

    Examples:
        >>> slugify("DeepL API")
        'deepl-api'
        >>> slugify("Post & Page Translation")
        'post-page-translation'
    """
    slug: str = "-".join(w.lower() for w in _raw_words(name))
    return slug or "api"


@functools.lru_cache(maxsize=None)
def to_php_prefix(name: str) -> str:
    """
    WordPress-style class prefix: words joined by underscores, first letter
    of each word upper-cased, the rest left alone.

    Examples:
        >>> to_php_prefix("DeepL API")
        'DeepL_API'
        >>> to_php_prefix("acme store")
        'Acme_Store'
    """
    words: Tuple[str, ...] = _raw_words(name)
    if not words:
        return "Api"
    prefix: str = "_".join(w[0].upper() + w[1:] for w in words)
    if prefix[0].isdigit():
        prefix = f"Api_{prefix}"
    return prefix


@functools.lru_cache(maxsize=None)
def to_class_name(name: str) -> str:
    """
    JavaScript / Prisma class name with brand casing preserved.

    Examples:
        >>> to_class_name("DeepL API")
        'DeepLAPI'
    """
    return to_php_prefix(name).replace("_", "")


@functools.lru_cache(maxsize=None)
def to_constant_name(name: str) -> str:
    """
    Upper-case constant / environment variable stem.

    Examples:
        >>> to_constant_name("DeepL API")
        'DEEPL_API'
    """
    return to_php_prefix(name).upper()


@functools.lru_cache(maxsize=None)
def sanitize_identifier(value: str) -> str:
    """Replace every non-alphanumeric character with an underscore."""
    return _NON_ALPHANUM_RE.sub("_", value)


def unique_names(names: Iterable[str]) -> List[str]:
    """
    Disambiguate colliding generated names by appending ``_2``, ``_3`` ...
    in order of appearance.
    """
    seen: Dict[str, int] = {}
    result: List[str] = []
    for name in names:
        count: int = seen.get(name, 0) + 1
        seen[name] = count
        result.append(name if count == 1 else f"{name}_{count}")
    return result


def dedupe(items: Iterable[str]) -> List[str]:
    """Order-preserving de-duplication."""
    seen: Dict[str, None] = {}
    for item in items:
        seen.setdefault(item, None)
    return list(seen)


# ---------------------------------------------------------------------------
# Indentation & literal helpers
# ---------------------------------------------------------------------------


def indent(text: str, level: int = 1, size: int = 4) -> str:
    """Indent every non-blank line of *text* by *level* × *size* spaces."""
    prefix: str = " " * (level * size)
    lines: List[str] = text.split("\n")
    return "\n".join(prefix + line if line.strip() else line for line in lines)


def to_json(value: Any, indent_size: Optional[int] = 2) -> str:
    """
    Deterministic JSON text.

    Key order follows insertion order, which the transformers control, so
    the same input always yields byte-identical output.
    """
    return json.dumps(value, indent=indent_size, ensure_ascii=False)


_SCRIPT_UNSAFE: Dict[str, str] = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026"}


def to_script_json(value: Any) -> str:
    """
    Compact JSON safe to place inside an inline HTML ``<script>`` element.

    ``<``, ``>`` and ``&`` become ``\\u`` escapes, so text such as
    ``</script>`` in an endpoint description cannot close the element.
    """
    text: str = to_json(value, indent_size=None)
    return "".join(_SCRIPT_UNSAFE.get(ch, ch) for ch in text)


def php_string(value: str) -> str:
    """Single-quoted PHP string literal."""
    escaped: str = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def js_string(value: str) -> str:
    """Single-quoted JavaScript string literal."""
    escaped: str = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f"'{escaped}'"


def toml_string(value: str) -> str:
    """Basic TOML string literal."""
    escaped: str = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)


def write_file(path: Path, content: str, atomic: bool = True) -> int:
    """
    Write *content* to *path*.

    When *atomic* is True, writes to a temporary file in the same directory
    first and then renames it over the target.

    Returns the number of bytes written.
    """
    ensure_directory(path.parent)

    encoded: bytes = content.encode("utf-8")
    byte_count: int = len(encoded)

    if atomic:
        fd: int
        tmp_path: str
        fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(encoded)
            shutil.move(tmp_path, str(path))
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
    else:
        path.write_bytes(encoded)

    logger.debug("Wrote %d bytes to %s", byte_count, path)
    return byte_count


def clean_directory(path: Path) -> None:
    """
    Remove all contents of a directory without removing the directory itself.

    ``.git`` and ``.gitignore`` are preserved.
    """
    if not path.exists():
        return

    for item in path.iterdir():
        if item.name in {".git", ".gitignore"}:
            continue
        if item.is_dir():
            shutil.rmtree(item)
        else:
            item.unlink()

    logger.debug("Cleaned directory: %s", path)


# ---------------------------------------------------------------------------
# Checksum & metrics
# ---------------------------------------------------------------------------


def sha256_hex(content: str) -> str:
    """Return SHA-256 hex digest of a string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Count the number of lines in a string."""
    if not content:
        return 0
    return content.count("\n") + (1 if not content.endswith("\n") else 0)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling pipeline steps.

    Usage:
        with Timer("parse document") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.info(
            "Timer [%s]: %.4f seconds",
            self.label,
            self.elapsed,
        )

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "to_snake_case",
    "to_camel_case",
    "slugify",
    "to_php_prefix",
    "to_class_name",
    "to_constant_name",
    "sanitize_identifier",
    "unique_names",
    "dedupe",
    "indent",
    "to_json",
    "to_script_json",
    "php_string",
    "js_string",
    "toml_string",
    "ensure_directory",
    "write_file",
    "clean_directory",
    "sha256_hex",
    "count_lines",
    "Timer",
]

logger.debug("pluginforge.utils loaded — %d public symbols.", len(__all__))
