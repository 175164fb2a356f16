# File: pluginforge/generator.py
"""
NexaFlow PluginForge - Master Generation Pipeline (Orchestrator)
=================================================================

Connects every phase together:

    Document → Parse → Analysis Session → Transformation → Validation → Export

The ``PluginGenerator`` class is both the programmatic API and the backend
for the CLI.

Workflow::

    1. Load the document (file path or URL) and check the input shape.
    2. Parse it into a ``ParsedAPI`` (parser.py).
    3. Start an analysis session (sessions.py).
    4. Apply the run's choices to the session: purpose, feature selection,
       UI style and advanced settings, then finalize it.
    5. Transform the session for the target platform (engine.py).
    6. Validate the parsed API, the session and the bundle (validators.py).
    7. Hand the bundle to ``BundleExporter`` (exporters.py), unless dry-run.
    8. Return a ``GenerationReport`` with metrics and status.

Error handling strategy:
    - Failures are recorded in the report under the stage that raised them
      (input, validation, generation, export) and stop the pipeline.
    - Validation warnings never stop the pipeline.
    - The final report gives a clear pass/fail verdict; the CLI turns the
      failing stage into its exit code.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import ValidationError

from pluginforge.engine import Engine, SpecUpload, get_transformation_engine
from pluginforge.exceptions import (
    EngineUnavailableError,
    ExportError,
    InputValidationError,
    PlatformNotSupportedError,
    SpecParseError,
)
from pluginforge.exporters import BundleExporter, ExportManifest, ExportResult, planned_files
from pluginforge.models import (
    AnalysisSession,
    GenerationConfig,
    ParsedAPI,
    PlatformTransformation,
)
from pluginforge.parser import SpecParser, decode_document
from pluginforge.sessions import InteractiveAnalyzer
from pluginforge.utils import Timer, count_lines
from pluginforge.validators import (
    ValidationResult,
    ensure_valid,
    validate_full,
    validate_spec_url,
    validate_upload,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.generator")

STAGE_INPUT: str = "input"
STAGE_VALIDATION: str = "validation"
STAGE_GENERATION: str = "generation"
STAGE_EXPORT: str = "export"


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """
    Report produced by every ``PluginGenerator`` run.

    ``session`` and ``transformation`` hold the intermediate results when the
    pipeline got that far, so callers can print or serialise them.
    """

    success: bool = False
    api_name: str = ""
    platform: str = ""
    output_directory: str = ""
    dry_run: bool = False
    analyze_only: bool = False

    # Metrics
    total_endpoints: int = 0
    total_features: int = 0
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    total_elapsed_seconds: float = 0.0

    # Sub-reports
    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    input_errors: List[str] = field(default_factory=list)
    validation_errors: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    generation_errors: List[str] = field(default_factory=list)
    export_errors: List[str] = field(default_factory=list)

    # Intermediate results
    session: Optional[AnalysisSession] = None
    transformation: Optional[PlatformTransformation] = None
    manifest: Optional[ExportManifest] = None

    @property
    def failed_stage(self) -> Optional[str]:
        """The stage whose errors stopped the run, or None."""
        if self.input_errors:
            return STAGE_INPUT
        if self.validation_errors:
            return STAGE_VALIDATION
        if self.generation_errors:
            return STAGE_GENERATION
        if self.export_errors:
            return STAGE_EXPORT
        return None

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        mode: str = "analyze only" if self.analyze_only else (
            "dry run" if self.dry_run else "export"
        )
        lines.append(f"{'='*60}")
        lines.append(f"  NexaFlow PluginForge — Generation Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:           {status}")
        lines.append(f"  API:              {self.api_name}")
        lines.append(f"  Platform:         {self.platform}")
        lines.append(f"  Mode:             {mode}")
        lines.append(f"  Output:           {self.output_directory or '-'}")
        lines.append(f"  Endpoints:        {self.total_endpoints}")
        lines.append(f"  Features:         {self.total_features}")
        lines.append(f"  Files generated:  {self.total_files}")
        lines.append(f"  Total lines:      {self.total_lines:,}")
        lines.append(f"  Total bytes:      {self.total_bytes:,}")
        lines.append(
            f"  Total time:       {self.total_elapsed_seconds:.3f}s"
        )
        lines.append(f"{'─'*60}")

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<28s} "
                    f"{step.elapsed_seconds:>7.3f}s  "
                    f"{step.detail}"
                )

        sections = (
            ("Input Errors", self.input_errors, "✗"),
            ("Validation Errors", self.validation_errors, "✗"),
            ("Validation Warnings", self.validation_warnings, "⚠"),
            ("Generation Errors", self.generation_errors, "✗"),
            ("Export Errors", self.export_errors, "✗"),
        )
        for title, items, icon in sections:
            if items:
                lines.append(f"{'─'*60}")
                lines.append(f"  {title} ({len(items)}):")
                for item in items:
                    lines.append(f"    {icon} {item}")

        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Config loader helpers
# ---------------------------------------------------------------------------


def load_generation_config(
    path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> GenerationConfig:
    """
    Build a ``GenerationConfig`` from defaults, an optional JSON/YAML file
    and explicit overrides, in that order of precedence.

    Raises:
        InputValidationError: unreadable file, bad syntax or invalid values.
    """
    data: Dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        try:
            text: str = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InputValidationError(f"Cannot read config file '{path}': {exc}") from exc
        try:
            # blank or comment-only files mean "all defaults"
            loaded: Any = decode_document(text, filename=path.name) if text.strip() else None
        except (ValueError, yaml.YAMLError) as exc:
            raise InputValidationError(f"Invalid config file '{path}': {exc}") from exc
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, Mapping):
            raise InputValidationError(
                f"Config file '{path}' must contain a mapping, got {type(loaded).__name__}."
            )
        data.update(loaded)

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    try:
        return GenerationConfig.model_validate(data)
    except ValidationError as exc:
        raise InputValidationError(f"Invalid generation config: {exc}") from exc


# ---------------------------------------------------------------------------
# PluginGenerator: master orchestrator
# ---------------------------------------------------------------------------


class PluginGenerator:
    """
    Master pipeline orchestrator for PluginForge.

    Usage::

        generator = PluginGenerator(GenerationConfig(platform="shopify"))
        report = generator.generate_from_path(Path("openapi.yaml"), Path("./out"))
        print(report.summary())

    The generator is reusable; create once, call ``generate*`` many times.
    Sessions it starts are cleaned up when the run finishes.
    """

    def __init__(
        self,
        config: Optional[GenerationConfig] = None,
        *,
        parser: Optional[SpecParser] = None,
        analyzer: Optional[InteractiveAnalyzer] = None,
        engine: Optional[Engine] = None,
    ) -> None:
        self.config: GenerationConfig = config or GenerationConfig()
        self.parser: SpecParser = parser or SpecParser(
            timeout=self.config.http_timeout,
            resolve_external_refs=self.config.resolve_external_refs,
        )
        self.analyzer: InteractiveAnalyzer = analyzer or InteractiveAnalyzer()
        self._engine: Optional[Engine] = engine

        logger.debug(
            "PluginGenerator initialised: platform=%s, dry_run=%s, clean=%s.",
            self.config.platform,
            self.config.dry_run,
            self.config.clean_output,
        )

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = get_transformation_engine()
        return self._engine

    # -----------------------------------------------------------------
    # Public entry points
    # -----------------------------------------------------------------

    def generate_from_path(
        self,
        spec_path: Path,
        output_dir: Optional[Path] = None,
        *,
        analyze_only: bool = False,
    ) -> GenerationReport:
        """Full pipeline from a document on disk."""
        report: GenerationReport = self._new_report(output_dir, analyze_only)
        start: float = time.perf_counter()
        spec_path = Path(spec_path)

        with Timer("load_document") as t_load:
            try:
                content: bytes = spec_path.read_bytes()
                upload: SpecUpload = SpecUpload(filename=spec_path.name, content=content)
                ensure_valid(validate_upload(upload.filename, upload.content))
            except OSError as exc:
                report.input_errors.append(f"Cannot read specification file '{spec_path}': {exc}")
            except InputValidationError as exc:
                report.input_errors.append(str(exc))
        self._record(report, "Load Document", t_load, report.input_errors, f"from {spec_path.name}")
        if report.input_errors:
            return self._finalise_report(report, start)

        with Timer("parse_document") as t_parse:
            api: Optional[ParsedAPI] = None
            try:
                api = self.parser.parse_from_file(
                    upload.filename, upload.content, base=str(spec_path.resolve())
                )
            except SpecParseError as exc:
                report.input_errors.append(str(exc))
        return self._after_parse(report, api, t_parse, output_dir, start)

    def generate_from_url(
        self,
        url: str,
        output_dir: Optional[Path] = None,
        *,
        analyze_only: bool = False,
    ) -> GenerationReport:
        """Full pipeline from a document fetched over HTTP(S)."""
        report: GenerationReport = self._new_report(output_dir, analyze_only)
        start: float = time.perf_counter()
        url = url.strip()

        with Timer("load_document") as t_load:
            try:
                ensure_valid(validate_spec_url(url))
            except InputValidationError as exc:
                report.input_errors.append(str(exc))
        self._record(report, "Load Document", t_load, report.input_errors, url)
        if report.input_errors:
            return self._finalise_report(report, start)

        with Timer("parse_document") as t_parse:
            api: Optional[ParsedAPI] = None
            try:
                api = self.parser.parse_from_url(url)
            except SpecParseError as exc:
                report.input_errors.append(str(exc))
        return self._after_parse(report, api, t_parse, output_dir, start)

    def generate(
        self,
        api: ParsedAPI,
        output_dir: Optional[Path] = None,
        *,
        analyze_only: bool = False,
    ) -> GenerationReport:
        """Pipeline from an already-parsed API."""
        report: GenerationReport = self._new_report(output_dir, analyze_only)
        start: float = time.perf_counter()
        self._run_pipeline(api, output_dir, report)
        return self._finalise_report(report, start)

    # -----------------------------------------------------------------
    # Internal: master pipeline
    # -----------------------------------------------------------------

    def _after_parse(
        self,
        report: GenerationReport,
        api: Optional[ParsedAPI],
        t_parse: Timer,
        output_dir: Optional[Path],
        start: float,
    ) -> GenerationReport:
        detail: str = f"{len(api.endpoints)} endpoints" if api is not None else ""
        self._record(report, "Parse Document", t_parse, report.input_errors, detail)
        if api is not None:
            self._run_pipeline(api, output_dir, report)
        return self._finalise_report(report, start)

    def _run_pipeline(
        self,
        api: ParsedAPI,
        output_dir: Optional[Path],
        report: GenerationReport,
    ) -> None:
        report.api_name = api.name
        report.total_endpoints = len(api.endpoints)

        session: Optional[AnalysisSession] = self._step_analyze(api, report)
        if session is None:
            return
        try:
            session = self._step_configure_session(session, report)
            if session is None or report.analyze_only:
                return

            bundle: Optional[PlatformTransformation] = self._step_transform(session, report)
            if bundle is None:
                return
            if not self._step_validate(api, bundle, session, report):
                return
            if self.config.dry_run:
                self._record_dry_run(bundle, report)
                return
            if output_dir is None:
                report.export_errors.append("No output directory given.")
                return
            self._step_export(bundle, Path(output_dir), report)
        finally:
            self.analyzer.cleanup_session(report.session.id)

    # -----------------------------------------------------------------
    # Pipeline step: Analysis
    # -----------------------------------------------------------------

    def _step_analyze(
        self, api: ParsedAPI, report: GenerationReport
    ) -> Optional[AnalysisSession]:
        with Timer("analyze") as t:
            session: AnalysisSession = self.analyzer.start_analysis(api)
        report.session = session
        self._record(
            report,
            "Analyze API",
            t,
            [],
            f"{session.intelligence.primary_category}, "
            f"confidence {session.intelligence.confidence:.2f}",
        )
        return session

    # -----------------------------------------------------------------
    # Pipeline step: Session configuration
    # -----------------------------------------------------------------

    def _step_configure_session(
        self, session: AnalysisSession, report: GenerationReport
    ) -> Optional[AnalysisSession]:
        """Apply the run's choices in state-machine order, then finalize."""
        config: GenerationConfig = self.config
        sid: str = session.id
        errors: List[str] = []

        with Timer("configure_session") as t:
            try:
                purpose: str = config.purpose or session.intelligence.detected_purpose
                session = self.analyzer.confirm_purpose(sid, purpose)

                selection: List[str] = (
                    list(config.selected_features)
                    if config.selected_features is not None
                    else list(session.user_choices.selected_features)
                )
                customizations: Dict[str, Any] = {}
                if config.wordpress_features is not None:
                    customizations["wordpress_features"] = list(config.wordpress_features)
                session = self.analyzer.update_feature_selection(sid, selection, customizations)

                session = self.analyzer.update_ui_preferences(sid, {"style": config.ui_style})
                session = self.analyzer.update_advanced_settings(
                    sid,
                    {
                        "authentication_strategy": config.auth_strategy,
                        "error_handling": config.error_handling,
                    },
                )
                session = self.analyzer.finalize_analysis(sid)
            except InputValidationError as exc:
                errors.append(str(exc))
            except ValidationError as exc:
                errors.append(f"Invalid session settings: {exc}")

        report.input_errors.extend(errors)
        report.session = session
        report.total_features = len(session.refined_spec.enabled_features)
        self._record(
            report,
            "Configure Session",
            t,
            errors,
            f"{report.total_features} features, "
            f"{len(session.refined_spec.focused_endpoints)} focused endpoints",
        )
        return None if errors else session

    # -----------------------------------------------------------------
    # Pipeline step: Transformation
    # -----------------------------------------------------------------

    def _step_transform(
        self, session: AnalysisSession, report: GenerationReport
    ) -> Optional[PlatformTransformation]:
        bundle: Optional[PlatformTransformation] = None
        with Timer("transform") as t:
            try:
                bundle = self.engine.transform_session(session, self.config.platform)
            except (PlatformNotSupportedError, EngineUnavailableError) as exc:
                report.generation_errors.append(str(exc))

        detail: str = ""
        if bundle is not None:
            report.transformation = bundle
            detail = f"{len(bundle.code_files)} files, {len(bundle.features)} features"
        self._record(report, "Transform", t, report.generation_errors, detail)
        return bundle

    # -----------------------------------------------------------------
    # Pipeline step: Validation
    # -----------------------------------------------------------------

    def _step_validate(
        self,
        api: ParsedAPI,
        bundle: PlatformTransformation,
        session: AnalysisSession,
        report: GenerationReport,
    ) -> bool:
        with Timer("validation") as t:
            result: ValidationResult = validate_full(api, bundle, session)

        report.validation_errors.extend(str(e) for e in result.errors)
        report.validation_warnings.extend(str(w) for w in result.warnings)

        if result.has_errors:
            detail: str = f"{result.error_count} error(s)"
            for err in result.errors:
                logger.error("  ✗ %s", err)
        elif result.warnings:
            detail = f"{result.warning_count} warning(s)"
            for warn in result.warnings:
                logger.warning("  ⚠ %s", warn)
        else:
            detail = "all checks passed"

        self._record(report, "Validate Bundle", t, report.validation_errors, detail)
        return result.is_valid

    # -----------------------------------------------------------------
    # Pipeline step: Export
    # -----------------------------------------------------------------

    def _step_export(
        self,
        bundle: PlatformTransformation,
        output_dir: Path,
        report: GenerationReport,
    ) -> None:
        report.output_directory = str(output_dir.resolve())
        result: Optional[ExportResult] = None
        with Timer("export") as t:
            exporter: BundleExporter = BundleExporter(
                output_dir,
                clean_before_export=self.config.clean_output,
            )
            try:
                result = exporter.export(bundle)
            except ExportError as exc:
                report.export_errors.append(str(exc))

        detail: str = ""
        if result is not None:
            report.manifest = result.manifest
            report.total_files = result.manifest.total_files
            report.total_bytes = result.manifest.total_bytes
            report.total_lines = result.manifest.total_lines
            detail = f"{report.total_files} files → {report.output_directory}"
        self._record(report, "Export", t, report.export_errors, detail)

    def _record_dry_run(self, bundle: PlatformTransformation, report: GenerationReport) -> None:
        files = planned_files(bundle)
        report.total_files = len(files)
        report.total_bytes = sum(len(content.encode("utf-8")) for _, content in files)
        report.total_lines = sum(count_lines(content) for _, content in files)
        report.step_metrics.append(GenerationStepMetric(
            step_name="Export",
            success=True,
            elapsed_seconds=0.0,
            detail=f"dry run, {report.total_files} files not written",
        ))
        logger.info("Dry run: %d files would be written.", report.total_files)

    # -----------------------------------------------------------------
    # Internal: helpers
    # -----------------------------------------------------------------

    def _new_report(self, output_dir: Optional[Path], analyze_only: bool) -> GenerationReport:
        report: GenerationReport = GenerationReport(
            platform=str(self.config.platform),
            dry_run=self.config.dry_run,
            analyze_only=analyze_only,
        )
        if output_dir is not None:
            report.output_directory = str(Path(output_dir).resolve())
        return report

    @staticmethod
    def _record(
        report: GenerationReport,
        step_name: str,
        timer: Timer,
        errors: List[str],
        detail: str,
    ) -> None:
        report.step_metrics.append(GenerationStepMetric(
            step_name=step_name,
            success=not errors,
            elapsed_seconds=timer.elapsed,
            detail=errors[-1] if errors else detail,
        ))

    @staticmethod
    def _finalise_report(report: GenerationReport, start: float) -> GenerationReport:
        report.total_elapsed_seconds = time.perf_counter() - start
        report.success = report.failed_stage is None

        if report.success:
            logger.info(
                "Generation SUCCEEDED: %d files in %.3fs.",
                report.total_files,
                report.total_elapsed_seconds,
            )
        else:
            logger.error(
                "Generation FAILED at the %s stage in %.3fs.",
                report.failed_stage,
                report.total_elapsed_seconds,
            )
        return report


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "STAGE_INPUT",
    "STAGE_VALIDATION",
    "STAGE_GENERATION",
    "STAGE_EXPORT",
    "GenerationStepMetric",
    "GenerationReport",
    "load_generation_config",
    "PluginGenerator",
]

logger.debug("pluginforge.generator loaded — %d public symbols.", len(__all__))
