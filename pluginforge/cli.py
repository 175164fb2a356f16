# File: pluginforge/cli.py
"""
NexaFlow PluginForge - Command-Line Interface
==============================================

CLI built with the standard-library ``argparse`` module.

Usage examples::

    # Generate a WordPress plugin from a local document
    python -m pluginforge --spec openapi.yaml --platform wordpress --output ./wp

    # Fetch the document, override the purpose and pick features
    python -m pluginforge -u https://api.example.com/openapi.json -p shopify \\
        -o ./shop --purpose "Language Translation Service" \\
        --features text-translation,language-detection

    # Show the analysis only (no transformation, no files)
    python -m pluginforge -s openapi.yaml --analyze-only

    # Run the HTTP session service
    python -m pluginforge --serve --port 8080

Exit codes:
    0 — success
    1 — validation error
    2 — generation error
    3 — export error
    4 — input/argument error
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, Sequence

from pluginforge.exceptions import InputValidationError
from pluginforge.models import (
    AuthenticationStrategy,
    ErrorHandlingMode,
    GenerationConfig,
    PlatformKind,
    UIStyle,
)

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4

_STAGE_EXIT_CODES: Dict[str, int] = {
    "input": EXIT_INPUT_ERROR,
    "validation": EXIT_VALIDATION_ERROR,
    "generation": EXIT_GENERATION_ERROR,
    "export": EXIT_EXPORT_ERROR,
}


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root pluginforge logger based on verbosity level.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    formatter: logging.Formatter = logging.Formatter(fmt, datefmt=datefmt)
    handler.setFormatter(formatter)

    root_logger: logging.Logger = logging.getLogger("pluginforge")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _comma_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from pluginforge import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="pluginforge",
        description=(
            "NexaFlow PluginForge — OpenAPI to Platform Plugin Generator.\n\n"
            "Analyses an OpenAPI 3 / Swagger 2 document and generates an "
            "installable Figma, WordPress or Shopify plugin bundle."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -s openapi.yaml -p wordpress -o ./wp\n"
            "  %(prog)s -u https://api.example.com/openapi.json -p figma -o ./figma\n"
            "  %(prog)s -s openapi.yaml --analyze-only\n"
            "  %(prog)s --serve --port 8080\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"NexaFlow PluginForge v{__version__}",
    )

    # --- Input ---
    input_group = parser.add_argument_group("input")
    source = input_group.add_mutually_exclusive_group()
    source.add_argument(
        "-s", "--spec",
        type=str,
        default=None,
        metavar="PATH",
        help="Path to the OpenAPI/Swagger document (JSON or YAML).",
    )
    source.add_argument(
        "-u", "--url",
        type=str,
        default=None,
        metavar="URL",
        help="HTTP(S) URL of the OpenAPI/Swagger document.",
    )

    # --- Output ---
    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "-p", "--platform",
        type=str,
        default=None,
        choices=[p.value for p in PlatformKind],
        help="Target platform (default: wordpress).",
    )
    output_group.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="DIR",
        help=(
            "Output directory for the generated bundle. "
            "Required unless --analyze-only or --dry-run is set."
        ),
    )

    # --- Session choices ---
    session_group = parser.add_argument_group("session choices")
    session_group.add_argument(
        "--purpose",
        type=str,
        default=None,
        metavar="TEXT",
        help="Override the detected purpose (regenerates the feature list).",
    )
    session_group.add_argument(
        "--features",
        type=_comma_list,
        default=None,
        metavar="IDS",
        help="Comma-separated feature ids. Required features are always kept.",
    )
    session_group.add_argument(
        "--wordpress-features",
        type=_comma_list,
        default=None,
        metavar="IDS",
        help="Comma-separated WordPress feature ids (wordpress platform only).",
    )
    session_group.add_argument(
        "--ui-style",
        type=str,
        default=None,
        choices=[s.value for s in UIStyle],
        help="UI layout of the generated plugin.",
    )
    session_group.add_argument(
        "--auth-strategy",
        type=str,
        default=None,
        choices=[a.value for a in AuthenticationStrategy],
        help="How the generated plugin obtains credentials.",
    )
    session_group.add_argument(
        "--error-handling",
        type=str,
        default=None,
        choices=[e.value for e in ErrorHandlingMode],
        help="Error handling mode recorded in the session settings.",
    )

    # --- Run options ---
    run_group = parser.add_argument_group("run options")
    run_group.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="JSON/YAML file with generation settings; flags override it.",
    )
    run_group.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="HTTP timeout for fetching documents and external $refs.",
    )
    run_group.add_argument(
        "--no-external-refs",
        action="store_true",
        default=False,
        help="Do not fetch external $ref targets; leave placeholders instead.",
    )
    run_group.add_argument(
        "--analyze-only",
        action="store_true",
        default=False,
        help="Parse and analyse, print the session as JSON, generate nothing.",
    )
    run_group.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Run the full pipeline but don't write files to disk.",
    )
    run_group.add_argument(
        "--clean",
        action="store_true",
        default=False,
        help="Clean the output directory before writing.",
    )

    # --- Other modes ---
    mode_group = parser.add_argument_group("other modes")
    mode_group.add_argument(
        "--list-platforms",
        action="store_true",
        default=False,
        help="Print the supported platforms and exit.",
    )
    mode_group.add_argument(
        "--serve",
        action="store_true",
        default=False,
        help="Run the HTTP session service.",
    )
    mode_group.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Bind address for --serve (default: 127.0.0.1).",
    )
    mode_group.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for --serve (default: 8000).",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all log output.",
    )

    return parser


# ---------------------------------------------------------------------------
# Config builder
# ---------------------------------------------------------------------------


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Config values set explicitly on the command line."""
    overrides: Dict[str, Any] = {
        "platform": args.platform,
        "purpose": args.purpose,
        "selected_features": args.features,
        "wordpress_features": args.wordpress_features,
        "ui_style": args.ui_style,
        "auth_strategy": args.auth_strategy,
        "error_handling": args.error_handling,
        "http_timeout": args.timeout,
    }
    if args.no_external_refs:
        overrides["resolve_external_refs"] = False
    if args.clean:
        overrides["clean_output"] = True
    if args.dry_run:
        overrides["dry_run"] = True
    return {key: value for key, value in overrides.items() if value is not None}


def _load_config(args: argparse.Namespace) -> GenerationConfig:
    from pluginforge.generator import load_generation_config

    config_path: Optional[Path] = Path(args.config) if args.config else None
    return load_generation_config(config_path, _build_config_overrides(args))


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


def _run_list_platforms() -> int:
    from pluginforge.engine import get_transformation_engine

    for platform in get_transformation_engine().get_supported_platforms():
        print(platform)
    return EXIT_SUCCESS


def _run_serve(host: str, port: int) -> int:
    from pluginforge.api import run_server

    run_server(host=host, port=port)
    return EXIT_SUCCESS


def _run_generation(config: GenerationConfig, args: argparse.Namespace) -> int:
    """
    Run the pipeline and print its report.

    Returns the appropriate exit code.
    """
    from pluginforge.generator import GenerationReport, PluginGenerator

    generator: PluginGenerator = PluginGenerator(config)
    output_dir: Optional[Path] = Path(args.output).resolve() if args.output else None

    if config.dry_run:
        logger.info("Dry-run mode: files will not be written to disk.")

    if args.spec:
        report: GenerationReport = generator.generate_from_path(
            Path(args.spec), output_dir, analyze_only=args.analyze_only
        )
    else:
        report = generator.generate_from_url(
            args.url, output_dir, analyze_only=args.analyze_only
        )

    if args.analyze_only and report.success and report.session is not None:
        print(json.dumps(report.session.model_dump(by_alias=True, mode="json"), indent=2))
    else:
        print(report.summary())

    if not report.success:
        return _STAGE_EXIT_CODES.get(report.failed_stage or "", EXIT_GENERATION_ERROR)
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    # --- Verbosity ---
    if args.quiet:
        verbosity: int = -1
        logging.disable(logging.CRITICAL)
    else:
        verbosity = args.verbose

    _setup_logging(verbosity)

    if args.list_platforms:
        sys.exit(_run_list_platforms())

    if args.serve:
        sys.exit(_run_serve(args.host, args.port))

    # --- Input ---
    if not args.spec and not args.url:
        logger.error("An input document is required: use -s/--spec or -u/--url.")
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_INPUT_ERROR)

    try:
        config: GenerationConfig = _load_config(args)
    except InputValidationError as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_INPUT_ERROR)

    # --- Output directory validation ---
    if args.output is None and not (args.analyze_only or config.dry_run):
        logger.error(
            "Output directory is required for generation. "
            "Use -o/--output, --dry-run or --analyze-only."
        )
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_INPUT_ERROR)

    logger.info("Input:    %s", args.spec or args.url)
    logger.info("Platform: %s", config.platform)
    logger.info("Output:   %s", args.output)

    exit_code: int = _run_generation(config, args)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("pluginforge.cli loaded.")
