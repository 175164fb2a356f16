# File: pluginforge/api.py
"""
NexaFlow PluginForge - HTTP Session Service
============================================
FastAPI application exposing the interactive session API and platform
transforms.  ``create_app()`` builds a fresh application; the analyzer
and engine loader are injectable so tests can isolate state.

Domain errors map to status codes:

    InputValidationError        400
    SessionNotFoundError        404
    PlatformNotSupportedError   404
    SpecParseError              422
    pydantic ValidationError    422
    EngineUnavailableError      503

Every response model serialises with camelCase aliases.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from pluginforge import __version__
from pluginforge.engine import (
    SOURCE_FILE,
    SOURCE_URL,
    Engine,
    EngineLoader,
    SpecUpload,
    get_transformation_engine,
)
from pluginforge.exceptions import (
    EngineUnavailableError,
    InputValidationError,
    PlatformNotSupportedError,
    SessionNotFoundError,
    SpecParseError,
)
from pluginforge.models import (
    AnalysisSession,
    ParsedAPI,
    PlatformTransformation,
    PluginFeature,
)
from pluginforge.sessions import InteractiveAnalyzer

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.api")

ERROR_STATUS: Dict[type, int] = {
    InputValidationError: 400,
    SessionNotFoundError: 404,
    PlatformNotSupportedError: 404,
    SpecParseError: 422,
    EngineUnavailableError: 503,
}


# ---------------------------------------------------------------------------
# Request / response bodies
# ---------------------------------------------------------------------------

_BODY_CONFIG: ConfigDict = ConfigDict(
    populate_by_name=True,
    alias_generator=to_camel,
    extra="forbid",
)


class AnalyzeUrlRequest(BaseModel):
    model_config = _BODY_CONFIG

    url: str = Field(..., description="HTTP(S) location of the document.")


class PurposeRequest(BaseModel):
    model_config = _BODY_CONFIG

    purpose: str


class FeatureSelectionRequest(BaseModel):
    model_config = _BODY_CONFIG

    selected_features: List[str] = Field(default_factory=list)
    customizations: Dict[str, Any] = Field(default_factory=dict)


class PlatformsResponse(BaseModel):
    model_config = _BODY_CONFIG

    platforms: List[str]
    degraded: bool = False


class SessionListResponse(BaseModel):
    model_config = _BODY_CONFIG

    sessions: List[str]


class SessionDeletedResponse(BaseModel):
    model_config = _BODY_CONFIG

    session_id: str
    deleted: bool = True


class HealthResponse(BaseModel):
    model_config = _BODY_CONFIG

    status: str
    version: str
    engine: str
    active_sessions: int


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


def _domain_error_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        logger.info("%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handler


async def _model_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("%s %s -> 422: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors(include_url=False, include_context=False, include_input=False)},
    )


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(
    analyzer: Optional[InteractiveAnalyzer] = None,
    loader: Optional[EngineLoader] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app: FastAPI = FastAPI(
        title="PluginForge",
        description="Turn OpenAPI documents into Figma, WordPress and Shopify plugins",
        version=__version__,
    )
    app.state.analyzer = analyzer or InteractiveAnalyzer()
    app.state.loader = loader

    for exc_type, status_code in ERROR_STATUS.items():
        app.add_exception_handler(exc_type, _domain_error_handler(status_code))
    app.add_exception_handler(ValidationError, _model_error_handler)

    def sessions() -> InteractiveAnalyzer:
        return app.state.analyzer

    def engine() -> Engine:
        if app.state.loader is not None:
            return app.state.loader.get()
        return get_transformation_engine()

    def degraded() -> bool:
        return app.state.loader.degraded if app.state.loader is not None else False

    def supported(platform: str) -> Engine:
        current: Engine = engine()
        if not current.has_platform_support(platform):
            raise PlatformNotSupportedError(platform, current.get_supported_platforms())
        return current

    # -- meta ----------------------------------------------------------------

    @app.get("/health", response_model=HealthResponse, tags=["meta"])
    def health() -> HealthResponse:
        # resolve first; degraded() is only meaningful after a load attempt
        current: Engine = engine()
        return HealthResponse(
            status="degraded" if degraded() else "ok",
            version=__version__,
            engine=type(current).__name__,
            active_sessions=len(sessions().get_active_sessions()),
        )

    @app.get("/platforms", response_model=PlatformsResponse, tags=["meta"])
    def list_platforms() -> PlatformsResponse:
        return PlatformsResponse(
            platforms=engine().get_supported_platforms(), degraded=degraded()
        )

    # -- analysis ------------------------------------------------------------

    @app.post("/analyze/url", response_model=ParsedAPI, tags=["analysis"])
    def analyze_url(body: AnalyzeUrlRequest) -> ParsedAPI:
        return engine().analyze_api(SOURCE_URL, body.url)

    @app.post("/analyze/file", response_model=ParsedAPI, tags=["analysis"])
    def analyze_file(file: UploadFile = File(...)) -> ParsedAPI:
        content: bytes = file.file.read()
        upload: SpecUpload = SpecUpload(filename=file.filename or "", content=content)
        return engine().analyze_api(SOURCE_FILE, upload)

    # -- sessions ------------------------------------------------------------

    @app.post("/sessions", response_model=AnalysisSession, status_code=201, tags=["sessions"])
    def start_session(api: ParsedAPI) -> AnalysisSession:
        return sessions().start_analysis(api)

    @app.get("/sessions", response_model=SessionListResponse, tags=["sessions"])
    def list_sessions() -> SessionListResponse:
        return SessionListResponse(sessions=sessions().get_active_sessions())

    @app.get("/sessions/{session_id}", response_model=AnalysisSession, tags=["sessions"])
    def get_session(session_id: str) -> AnalysisSession:
        return sessions().get_session(session_id)

    @app.post("/sessions/{session_id}/purpose", response_model=AnalysisSession, tags=["sessions"])
    def confirm_purpose(session_id: str, body: PurposeRequest) -> AnalysisSession:
        return sessions().confirm_purpose(session_id, body.purpose)

    @app.post("/sessions/{session_id}/features", response_model=AnalysisSession, tags=["sessions"])
    def update_features(session_id: str, body: FeatureSelectionRequest) -> AnalysisSession:
        return sessions().update_feature_selection(
            session_id, body.selected_features, body.customizations
        )

    @app.patch(
        "/sessions/{session_id}/ui-preferences", response_model=AnalysisSession, tags=["sessions"]
    )
    def update_ui_preferences(session_id: str, updates: Dict[str, Any]) -> AnalysisSession:
        return sessions().update_ui_preferences(session_id, updates)

    @app.patch(
        "/sessions/{session_id}/advanced-settings",
        response_model=AnalysisSession,
        tags=["sessions"],
    )
    def update_advanced_settings(session_id: str, updates: Dict[str, Any]) -> AnalysisSession:
        return sessions().update_advanced_settings(session_id, updates)

    @app.post("/sessions/{session_id}/finalize", response_model=AnalysisSession, tags=["sessions"])
    def finalize(session_id: str) -> AnalysisSession:
        return sessions().finalize_analysis(session_id)

    @app.get(
        "/sessions/{session_id}/focus-adjustments",
        response_model=List[PluginFeature],
        tags=["sessions"],
    )
    def focus_adjustments(session_id: str, purpose: str) -> List[PluginFeature]:
        return sessions().get_suggested_focus_adjustments(session_id, purpose)

    @app.delete(
        "/sessions/{session_id}", response_model=SessionDeletedResponse, tags=["sessions"]
    )
    def cleanup(session_id: str) -> SessionDeletedResponse:
        sessions().cleanup_session(session_id)
        return SessionDeletedResponse(session_id=session_id)

    # -- transforms ----------------------------------------------------------

    @app.post(
        "/sessions/{session_id}/transform/{platform}",
        response_model=PlatformTransformation,
        tags=["transform"],
    )
    def transform_session(session_id: str, platform: str) -> PlatformTransformation:
        session: AnalysisSession = sessions().get_session(session_id)
        return supported(platform).transform_session(session, platform)

    @app.post("/transform/{platform}", response_model=PlatformTransformation, tags=["transform"])
    def transform(platform: str, api: ParsedAPI) -> PlatformTransformation:
        return supported(platform).transform(api, platform)

    logger.debug("PluginForge app created with %d routes.", len(app.routes))
    return app


def run_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    """Serve a fresh application with uvicorn (blocking)."""
    import uvicorn

    logger.info("Serving PluginForge on http://%s:%d", host, port)
    uvicorn.run(create_app(), host=host, port=port, log_level="info")


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ERROR_STATUS",
    "create_app",
    "run_server",
]

logger.debug("pluginforge.api loaded.")
