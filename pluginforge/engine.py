# File: pluginforge/engine.py
"""
NexaFlow PluginForge - Transformation Engine Facade & Loader
=============================================================
The single entry point callers use to analyse a document and transform it
for a platform:

    ┌───────────────────────┐      ┌──────────────────────┐
    │ get_transformation_   │─────▶│     EngineLoader      │
    │ engine()              │      │ (double-checked lock) │
    └───────────────────────┘      └──────────┬───────────┘
                                   ok          │         ImportError /
                              ┌────────────────┴──────┐  EngineInitializationError
                              ▼                       ▼
                   TransformationEngine        UnavailableEngine
                   (parser + transformers)     (same interface, stub)

Both engines expose the same methods, so callers never branch on which one
was loaded.  The stub's ``transform*`` calls raise
``EngineUnavailableError``; its ``analyze_api`` returns a placeholder
``ParsedAPI`` with zero endpoints.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence, Tuple, Type, Union

from pluginforge.exceptions import (
    EngineInitializationError,
    EngineUnavailableError,
    InputValidationError,
    PluginForgeError,
)
from pluginforge.models import (
    AnalysisSession,
    ParsedAPI,
    PlatformKind,
    PlatformTransformation,
    TransformOptions,
    WordPressIntelligence,
)
from pluginforge.parser import SpecParser
from pluginforge.utils import dedupe
from pluginforge.validators import ensure_valid, validate_spec_url, validate_upload
from pluginforge.wordpress_intelligence import WordPressIntelligenceEngine

if TYPE_CHECKING:
    from pluginforge.transformers.base import TransformerRegistry

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.engine")

SOURCE_URL: str = "url"
SOURCE_FILE: str = "file"

PLACEHOLDER_DESCRIPTION: str = "API analysis temporarily unavailable"
PLACEHOLDER_VERSION: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class SpecUpload:
    """An uploaded document: original file name plus raw content."""

    filename: str
    content: Union[bytes, str]


FileSource = Union[SpecUpload, Path, str]


def _read_upload(data: FileSource) -> Tuple[SpecUpload, Optional[str]]:
    """Normalise a file source; paths also yield a base for relative ``$ref``."""
    if isinstance(data, SpecUpload):
        return data, None
    path: Path = Path(data)
    try:
        content: bytes = path.read_bytes()
    except OSError as exc:
        raise InputValidationError(f"Cannot read specification file '{path}': {exc}") from exc
    return SpecUpload(filename=path.name, content=content), str(path.resolve())


# ---------------------------------------------------------------------------
# Full engine
# ---------------------------------------------------------------------------


class TransformationEngine:
    """
    Parser plus the platform transformer registry.

    Args:
        parser: ``SpecParser`` used by ``analyze_api``; a default one is
            created when omitted.
        registry: ``TransformerRegistry``; defaults to all built-in
            transformers.  Template definition problems surface as
            ``EngineInitializationError``.
        wordpress_engine: WordPress synthesizer used by ``transform_session``.
    """

    def __init__(
        self,
        parser: Optional[SpecParser] = None,
        registry: Optional[TransformerRegistry] = None,
        wordpress_engine: Optional[WordPressIntelligenceEngine] = None,
    ) -> None:
        self.parser: SpecParser = parser or SpecParser()
        self.registry: TransformerRegistry = (
            registry if registry is not None else _load_registry()
        )
        self.wordpress_engine: WordPressIntelligenceEngine = (
            wordpress_engine or WordPressIntelligenceEngine()
        )

    # -- analysis ------------------------------------------------------------

    def analyze_api(self, source: str, data: Union[str, FileSource]) -> ParsedAPI:
        """
        Parse a document from ``source`` ``"url"`` (``data`` is the URL) or
        ``"file"`` (``data`` is a ``SpecUpload`` or a filesystem path).
        """
        if source == SOURCE_URL:
            url: str = str(data).strip()
            ensure_valid(validate_spec_url(url))
            return self.parser.parse_from_url(url)
        if source == SOURCE_FILE:
            upload, base = _read_upload(data)
            ensure_valid(validate_upload(upload.filename, upload.content))
            return self.parser.parse_from_file(upload.filename, upload.content, base=base)
        raise InputValidationError(
            f"Unknown analysis source '{source}' (expected '{SOURCE_URL}' or '{SOURCE_FILE}')"
        )

    # -- transformation ------------------------------------------------------

    def transform(
        self,
        api: ParsedAPI,
        platform: str,
        options: Optional[TransformOptions] = None,
    ) -> PlatformTransformation:
        transformer = self.registry.get(platform)
        transformation: PlatformTransformation = transformer.transform(api, options)
        logger.info(
            "Transformed %r for %s: %d files",
            api.name,
            transformation.platform,
            len(transformation.code_files),
        )
        return transformation

    def transform_from_url(
        self, url: str, platform: str, options: Optional[TransformOptions] = None
    ) -> PlatformTransformation:
        self.registry.get(platform)
        return self.transform(self.analyze_api(SOURCE_URL, url), platform, options)

    def transform_from_file(
        self, data: FileSource, platform: str, options: Optional[TransformOptions] = None
    ) -> PlatformTransformation:
        self.registry.get(platform)
        return self.transform(self.analyze_api(SOURCE_FILE, data), platform, options)

    def transform_session(
        self, session: AnalysisSession, platform: str
    ) -> PlatformTransformation:
        """Transform a session's API with its choices, focus and intelligence."""
        self.registry.get(platform)
        options: TransformOptions = self.session_options(session, platform)
        return self.transform(session.original_api, platform, options)

    def session_options(self, session: AnalysisSession, platform: str) -> TransformOptions:
        focused: List[str] = list(session.refined_spec.focused_endpoints)
        wp_intelligence: Optional[WordPressIntelligence] = None
        wp_selected: Optional[List[str]] = None

        if PlatformKind(platform) == PlatformKind.WORDPRESS:
            wp_intelligence = self.wordpress_engine.analyze(session.original_api)
            wp_selected = self.select_wordpress_features(session, wp_intelligence, focused)

        return TransformOptions(
            user_choices=session.user_choices,
            intelligence=session.intelligence,
            wordpress_intelligence=wp_intelligence,
            selected_wordpress_features=wp_selected,
            focused_endpoints=focused or None,
        )

    @staticmethod
    def select_wordpress_features(
        session: AnalysisSession,
        intelligence: WordPressIntelligence,
        focused: Sequence[str],
    ) -> List[str]:
        """
        Explicit ``feature_customizations["wordpress_features"]`` when given,
        otherwise the features whose endpoints overlap the focused endpoints.
        Required features are appended either way.
        """
        requested = session.user_choices.feature_customizations.get("wordpress_features")
        if requested is not None:
            selected: List[str] = dedupe(str(i) for i in requested)
        else:
            wanted: set = set(focused)
            selected = [
                f.id for f in intelligence.wordpress_features if wanted.intersection(f.endpoints)
            ]
        required: List[str] = [f.id for f in intelligence.wordpress_features if f.required]
        return dedupe(selected + required)

    # -- platforms -----------------------------------------------------------

    def get_supported_platforms(self) -> List[str]:
        return self.registry.platforms()

    def has_platform_support(self, platform: str) -> bool:
        return self.registry.supports(platform)


# ---------------------------------------------------------------------------
# Stub engine
# ---------------------------------------------------------------------------


class UnavailableEngine:
    """Degraded engine with the same interface; every transform fails."""

    def analyze_api(self, source: str, data: object = None) -> ParsedAPI:
        return ParsedAPI(
            name="API from URL" if source == SOURCE_URL else "API from File",
            description=PLACEHOLDER_DESCRIPTION,
            version=PLACEHOLDER_VERSION,
        )

    def transform(self, api: ParsedAPI, platform: str, options: object = None) -> PlatformTransformation:
        raise EngineUnavailableError()

    def transform_from_url(self, url: str, platform: str, options: object = None) -> PlatformTransformation:
        raise EngineUnavailableError()

    def transform_from_file(self, data: object, platform: str, options: object = None) -> PlatformTransformation:
        raise EngineUnavailableError()

    def transform_session(self, session: AnalysisSession, platform: str) -> PlatformTransformation:
        raise EngineUnavailableError()

    def get_supported_platforms(self) -> List[str]:
        return [p.value for p in PlatformKind]

    def has_platform_support(self, platform: str) -> bool:
        key: str = platform.value if isinstance(platform, PlatformKind) else str(platform)
        return key in self.get_supported_platforms()


Engine = Union[TransformationEngine, UnavailableEngine]


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class EngineLoader:
    """
    Resolves one engine instance, once.

    Concurrent first calls to ``get()`` converge on a single factory call
    (double-checked locking).  When the factory raises one of
    ``fallback_on`` the loader logs a WARNING and caches the fallback
    instead.  Any other exception propagates and nothing is cached.
    """

    def __init__(
        self,
        factory: Callable[[], Engine] = TransformationEngine,
        fallback_factory: Callable[[], Engine] = UnavailableEngine,
        fallback_on: Tuple[Type[BaseException], ...] = (ImportError, EngineInitializationError),
    ) -> None:
        self._factory: Callable[[], Engine] = factory
        self._fallback_factory: Callable[[], Engine] = fallback_factory
        self._fallback_on: Tuple[Type[BaseException], ...] = fallback_on
        self._lock: threading.Lock = threading.Lock()
        self._instance: Optional[Engine] = None
        self._degraded: bool = False

    def get(self) -> Engine:
        instance: Optional[Engine] = self._instance
        if instance is not None:
            return instance
        with self._lock:
            if self._instance is None:
                self._instance = self._resolve()
            return self._instance

    def _resolve(self) -> Engine:
        try:
            engine: Engine = self._factory()
        except self._fallback_on as exc:
            logger.warning("Transformation engine failed to load (%s); using the stub engine", exc)
            self._degraded = True
            return self._fallback_factory()
        self._degraded = False
        logger.info("Transformation engine loaded: %s", type(engine).__name__)
        return engine

    @property
    def loaded(self) -> bool:
        return self._instance is not None

    @property
    def degraded(self) -> bool:
        """True when the cached instance came from the fallback factory."""
        return self._instance is not None and self._degraded

    def reset(self) -> None:
        with self._lock:
            self._instance = None
            self._degraded = False


def _load_registry() -> TransformerRegistry:
    try:
        from pluginforge.transformers import default_registry

        return default_registry()
    except (PluginForgeError, ValueError) as exc:
        # ImportError is left to the loader, which falls back on it directly
        raise EngineInitializationError(f"Transformers failed to load: {exc}") from exc


_default_loader: EngineLoader = EngineLoader()


def get_transformation_engine() -> Engine:
    """Process-wide engine, resolved on first use."""
    return _default_loader.get()


def reset_transformation_engine() -> None:
    """Forget the cached engine; the next call resolves again."""
    _default_loader.reset()


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "SOURCE_URL",
    "SOURCE_FILE",
    "SpecUpload",
    "TransformationEngine",
    "UnavailableEngine",
    "Engine",
    "EngineLoader",
    "get_transformation_engine",
    "reset_transformation_engine",
]

logger.debug("pluginforge.engine loaded — %d public symbols.", len(__all__))
