# File: pluginforge/__init__.py
"""
NexaFlow PluginForge — OpenAPI to Platform Plugin Generator
============================================================

Turns an OpenAPI 3 / Swagger 2 document into an installable plugin bundle
for Figma, WordPress or Shopify.  Between parsing and code generation sits
an interactive analysis session: the API is classified, a purpose and a set
of features are proposed, and the user confirms or adjusts them.

Architecture overview::

    ┌──────────────┐     ┌────────────────┐     ┌──────────────────────┐
    │ CLI / HTTP   │────▶│ PluginGenerator │────▶│ TransformationEngine │
    │ (cli, api)   │     │ (generator.py)  │     │     (engine.py)      │
    └──────────────┘     └───────┬────────┘     └──────────┬───────────┘
                                 │                         │
                 ┌───────────────┼──────────────┐          ▼
                 ▼               ▼              ▼    ┌─────────────┐
           ┌──────────┐   ┌────────────┐  ┌─────────┐│transformers/│
           │  parser  │   │  sessions  │  │exporters││figma · wp · │
           │          │   │intelligence│  │         ││  shopify    │
           └──────────┘   └────────────┘  └─────────┘└─────────────┘

Usage::

    # As a library
    from pluginforge import PluginGenerator, GenerationConfig
    report = PluginGenerator(GenerationConfig(platform="figma")).generate_from_path(
        Path("openapi.yaml"), Path("./figma-out")
    )

    # From the command line
    python -m pluginforge --spec openapi.yaml --platform wordpress --output ./wp

Public API:
    - PluginGenerator       — Master orchestrator
    - SpecParser            — OpenAPI/Swagger parser
    - InteractiveAnalyzer   — Analysis session state machine
    - TransformationEngine  — Platform transforms behind a loader
    - BundleExporter        — File-system writer
"""

from __future__ import annotations

__version__: str = "1.0.0"
__author__: str = "NexaFlow Team"
__license__: str = "MIT"

from pluginforge.models import (
    AnalysisSession,
    APIEndpoint,
    APIIntelligence,
    GenerationConfig,
    ParsedAPI,
    PlatformKind,
    PlatformTransformation,
    PluginFeature,
    TransformOptions,
    WordPressIntelligence,
)
from pluginforge.exceptions import (
    EngineUnavailableError,
    ExportError,
    InputValidationError,
    PlatformNotSupportedError,
    PluginForgeError,
    SessionNotFoundError,
    SpecParseError,
)
from pluginforge.parser import SpecParser
from pluginforge.intelligence import IntelligenceEngine
from pluginforge.wordpress_intelligence import WordPressIntelligenceEngine
from pluginforge.sessions import InteractiveAnalyzer
from pluginforge.engine import (
    EngineLoader,
    TransformationEngine,
    UnavailableEngine,
    get_transformation_engine,
)
from pluginforge.exporters import BundleExporter, ExportManifest, ExportResult
from pluginforge.generator import GenerationReport, PluginGenerator
from pluginforge.validators import ValidationResult, validate_full

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Core orchestrator
    "PluginGenerator",
    "GenerationReport",
    # Models
    "AnalysisSession",
    "APIEndpoint",
    "APIIntelligence",
    "GenerationConfig",
    "ParsedAPI",
    "PlatformKind",
    "PlatformTransformation",
    "PluginFeature",
    "TransformOptions",
    "WordPressIntelligence",
    # Errors
    "PluginForgeError",
    "InputValidationError",
    "SpecParseError",
    "SessionNotFoundError",
    "PlatformNotSupportedError",
    "EngineUnavailableError",
    "ExportError",
    # Pipeline pieces
    "SpecParser",
    "IntelligenceEngine",
    "WordPressIntelligenceEngine",
    "InteractiveAnalyzer",
    "EngineLoader",
    "TransformationEngine",
    "UnavailableEngine",
    "get_transformation_engine",
    "BundleExporter",
    "ExportManifest",
    "ExportResult",
    # Validation
    "validate_full",
    "ValidationResult",
]
