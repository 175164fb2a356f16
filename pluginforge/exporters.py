# File: pluginforge/exporters.py
"""
NexaFlow PluginForge - Bundle Exporter (File-System Manager)
=============================================================

Writes a ``PlatformTransformation`` to disk:

    1. Optionally cleans the output directory first.
    2. Checks every relative path before anything is written; an absolute
       path or a ``..`` segment raises ``ExportError``.
    3. Writes each code file atomically (temp file + rename).
    4. Writes ``configuration.json`` and the documentation as ``README.md``
       (``DOCUMENTATION.md`` when a code file already claims ``README.md``).
    5. Writes a deterministic ``manifest.json``: platform, files, sizes,
       line counts and SHA-256 checksums.  No timestamps, so the same bundle
       always produces the same manifest.

A write failure raises ``ExportError`` chained to the ``OSError``.  Files
written before the failure stay on disk; each one is individually atomic.

Complexity: O(F) where F = total number of output files.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Set, Tuple

from pluginforge.exceptions import ExportError
from pluginforge.models import PlatformTransformation
from pluginforge.utils import (
    Timer,
    clean_directory,
    count_lines,
    sha256_hex,
    to_json,
    write_file,
)
from pluginforge.validators import is_safe_relative_path

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.exporters")

CONFIGURATION_FILE: str = "configuration.json"
MANIFEST_FILE: str = "manifest.json"
README_FILE: str = "README.md"
FALLBACK_DOCUMENTATION_FILE: str = "DOCUMENTATION.md"


# ---------------------------------------------------------------------------
# Data classes for export results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single exported file."""

    relative_path: str
    size_bytes: int
    line_count: int
    sha256: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.relative_path,
            "size": self.size_bytes,
            "lines": self.line_count,
            "sha256": self.sha256,
        }


@dataclass(frozen=False, slots=True)
class ExportManifest:
    """
    Manifest of every exported file, in write order.

    The manifest never lists itself and never records the absolute output
    directory, so it is stable across machines.
    """

    platform: str = ""
    files: List[FileRecord] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def total_bytes(self) -> int:
        return sum(f.size_bytes for f in self.files)

    @property
    def total_lines(self) -> int:
        return sum(f.line_count for f in self.files)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "platform": self.platform,
            "totalFiles": self.total_files,
            "totalBytes": self.total_bytes,
            "totalLines": self.total_lines,
            "files": [f.to_dict() for f in self.files],
        }

    def to_json(self, indent_size: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent_size, ensure_ascii=False)


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Returned by ``BundleExporter.export()``."""

    output_directory: str
    manifest: ExportManifest
    elapsed_seconds: float

    @property
    def paths(self) -> Tuple[str, ...]:
        return tuple(f.relative_path for f in self.manifest.files)


def documentation_filename(bundle: PlatformTransformation) -> str:
    """``README.md`` unless a code file already claims it."""
    claimed: Set[str] = {f.path for f in bundle.code_files}
    return FALLBACK_DOCUMENTATION_FILE if README_FILE in claimed else README_FILE


def planned_files(bundle: PlatformTransformation) -> List[Tuple[str, str]]:
    """Every ``(relative_path, content)`` the exporter writes, manifest excluded."""
    files: List[Tuple[str, str]] = [(f.path, f.content) for f in bundle.code_files]
    files.append((CONFIGURATION_FILE, to_json(bundle.configuration) + "\n"))
    if bundle.documentation.strip():
        files.append((documentation_filename(bundle), bundle.documentation))
    return files


# ---------------------------------------------------------------------------
# BundleExporter class
# ---------------------------------------------------------------------------


class BundleExporter:
    """
    Writes a transformation bundle below one output directory.

    Usage::

        exporter = BundleExporter(Path("./out"), clean_before_export=True)
        result = exporter.export(bundle)
        print(result.manifest.to_json())

    Thread-safety: NOT thread-safe.  Use one exporter per output directory.
    """

    def __init__(
        self,
        output_dir: Path,
        *,
        clean_before_export: bool = False,
        atomic_writes: bool = True,
        generate_manifest: bool = True,
    ) -> None:
        self._output_dir: Path = Path(output_dir).resolve()
        self._clean_before_export: bool = clean_before_export
        self._atomic_writes: bool = atomic_writes
        self._generate_manifest: bool = generate_manifest

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def export(self, bundle: PlatformTransformation) -> ExportResult:
        files: List[Tuple[str, str]] = planned_files(bundle)
        self.check_paths(rel for rel, _ in files)

        with Timer("export bundle") as timer:
            if self._clean_before_export and self._output_dir.exists():
                logger.info("Cleaning output directory: %s", self._output_dir)
                try:
                    clean_directory(self._output_dir)
                except OSError as exc:
                    raise ExportError(f"Could not clean {self._output_dir}: {exc}") from exc

            manifest: ExportManifest = ExportManifest(platform=str(bundle.platform))
            for rel_path, content in files:
                manifest.files.append(self._write(rel_path, content))

            if self._generate_manifest:
                self._write_raw(MANIFEST_FILE, manifest.to_json() + "\n")

        logger.info(
            "Export completed: %d files, %d bytes to %s",
            manifest.total_files,
            manifest.total_bytes,
            self._output_dir,
        )
        return ExportResult(
            output_directory=str(self._output_dir),
            manifest=manifest,
            elapsed_seconds=timer.elapsed,
        )

    def check_paths(self, paths: Any) -> None:
        """Raise ``ExportError`` for the first unsafe or duplicate path."""
        seen: Set[str] = set()
        for rel_path in paths:
            if not is_safe_relative_path(rel_path):
                raise ExportError(f"Refusing to write outside the output directory: {rel_path!r}")
            target: Path = (self._output_dir / rel_path).resolve()
            if self._output_dir not in target.parents:
                raise ExportError(f"Refusing to write outside the output directory: {rel_path!r}")
            if rel_path in seen or rel_path == MANIFEST_FILE:
                raise ExportError(f"File would be written twice: {rel_path!r}")
            seen.add(rel_path)

    # -----------------------------------------------------------------
    # Internal: file writing
    # -----------------------------------------------------------------

    def _write(self, rel_path: str, content: str) -> FileRecord:
        size: int = self._write_raw(rel_path, content)
        return FileRecord(
            relative_path=rel_path,
            size_bytes=size,
            line_count=count_lines(content),
            sha256=sha256_hex(content),
        )

    def _write_raw(self, rel_path: str, content: str) -> int:
        target: Path = self._output_dir / rel_path
        try:
            size: int = write_file(target, content, atomic=self._atomic_writes)
        except OSError as exc:
            raise ExportError(f"Failed to write {rel_path}: {exc}") from exc
        logger.debug("Wrote %s (%d bytes)", rel_path, size)
        return size


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "CONFIGURATION_FILE",
    "MANIFEST_FILE",
    "FileRecord",
    "ExportManifest",
    "ExportResult",
    "documentation_filename",
    "planned_files",
    "BundleExporter",
]

logger.debug("pluginforge.exporters loaded — %d public symbols.", len(__all__))
