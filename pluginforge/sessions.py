# File: pluginforge/sessions.py
"""
NexaFlow PluginForge - Interactive Session State Machine
=========================================================
Drives the multi-step confirmation flow that sits between analysis and
transformation::

    analyzing → confirming-purpose → selecting-features → configuring → ready

Sessions live in an explicit ``SessionStore`` owned by the
``InteractiveAnalyzer``.  There is no expiry: a session exists from
``start_analysis`` until ``cleanup_session`` and every later call on that id
raises ``SessionNotFoundError``.

Callers serialise operations per session id.  The store lock only protects
the mapping itself, so two sessions never share mutable state.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Dict, List, Mapping, Optional

from pluginforge.exceptions import InputValidationError, SessionNotFoundError
from pluginforge.intelligence import IntelligenceEngine
from pluginforge.models import (
    AdvancedSettings,
    AnalysisSession,
    APIIntelligence,
    CategorySummary,
    CustomizedAPISpec,
    ParsedAPI,
    PluginFeature,
    PrimaryAction,
    SessionStatus,
    UIConfiguration,
    UIPreferences,
    UserCustomization,
    merge_model,
    ordered_union,
)
from pluginforge.utils import dedupe

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.sessions")

SESSION_ID_PREFIX: str = "analysis_"
MAX_PRIMARY_ENDPOINTS: int = 5
MAX_PRIMARY_ACTIONS: int = 3


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class SessionStore:
    """Thread-safe keyed map of live sessions."""

    def __init__(self) -> None:
        self._sessions: Dict[str, AnalysisSession] = {}
        self._lock: threading.Lock = threading.Lock()

    def create(self, session: AnalysisSession) -> AnalysisSession:
        with self._lock:
            if session.id in self._sessions:
                raise ValueError(f"Session id already in use: {session.id}")
            self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> AnalysisSession:
        with self._lock:
            session: Optional[AnalysisSession] = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def save(self, session: AnalysisSession) -> AnalysisSession:
        with self._lock:
            if session.id not in self._sessions:
                raise SessionNotFoundError(session.id)
            self._sessions[session.id] = session
        return session

    def delete(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFoundError(session_id)

    def ids(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


def new_session_id() -> str:
    return f"{SESSION_ID_PREFIX}{uuid.uuid4().hex}"


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------


def _primary_actions(
    features: List[PluginFeature], selected: List[str]
) -> List[PrimaryAction]:
    chosen: List[PluginFeature] = [
        f for f in features if f.required or f.id in selected
    ]
    return [
        PrimaryAction(id=f.id, name=f.name, description=f.description)
        for f in chosen[:MAX_PRIMARY_ACTIONS]
    ]


def build_refined_spec(session: AnalysisSession) -> CustomizedAPISpec:
    """Recompute the session's derived view from its current choices."""
    choices: UserCustomization = session.user_choices
    selected: List[str] = choices.selected_features
    features: List[PluginFeature] = session.intelligence.suggested_features
    enabled: List[PluginFeature] = [f for f in features if f.id in selected]
    naming: Dict[str, str] = choices.ui_preferences.custom_naming

    return CustomizedAPISpec(
        name=session.original_api.name,
        description=choices.confirmed_purpose,
        focused_endpoints=ordered_union([f.endpoints for f in enabled]),
        enabled_features=enabled,
        ui_configuration=UIConfiguration(
            layout=choices.ui_preferences.style,
            primary_actions=_primary_actions(features, selected),
            categories=[
                CategorySummary(
                    name=c.name,
                    description=c.description,
                    endpoints=len(c.endpoints),
                )
                for c in session.intelligence.endpoint_categories
            ],
            custom_naming=dict(naming) if naming else None,
        ),
    )


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class InteractiveAnalyzer:
    """
    Session API surface consumed by the HTTP service and the CLI.

    Every operation returns the full, updated ``AnalysisSession`` or raises.
    Required features are always kept in the selection.
    """

    def __init__(
        self,
        engine: Optional[IntelligenceEngine] = None,
        store: Optional[SessionStore] = None,
    ) -> None:
        self.engine: IntelligenceEngine = engine or IntelligenceEngine()
        self.store: SessionStore = store if store is not None else SessionStore()

    # -- lifecycle -----------------------------------------------------------

    def start_analysis(self, api: ParsedAPI) -> AnalysisSession:
        intelligence: APIIntelligence = self.engine.analyze(api)
        required_endpoints: List[str] = ordered_union(
            [f.endpoints for f in intelligence.suggested_features if f.required]
        )
        choices: UserCustomization = UserCustomization(
            confirmed_purpose=intelligence.detected_purpose,
            selected_features=[f.id for f in intelligence.suggested_features if f.enabled],
            ui_preferences=UIPreferences(
                primary_endpoints=required_endpoints[:MAX_PRIMARY_ENDPOINTS]
            ),
            advanced_settings=AdvancedSettings(),
        )
        session: AnalysisSession = AnalysisSession(
            id=new_session_id(),
            original_api=api,
            intelligence=intelligence,
            user_choices=choices,
            refined_spec=CustomizedAPISpec(name=api.name),
            status=SessionStatus.ANALYZING,
        )
        session.refined_spec = build_refined_spec(session)
        session.status = SessionStatus.CONFIRMING_PURPOSE
        self.store.create(session)
        logger.info(
            "Started session %s for %r (%d endpoints)",
            session.id,
            api.name,
            len(api.endpoints),
        )
        return session

    def get_session(self, session_id: str) -> AnalysisSession:
        return self.store.get(session_id)

    def get_active_sessions(self) -> List[str]:
        return self.store.ids()

    def cleanup_session(self, session_id: str) -> None:
        self.store.delete(session_id)
        logger.info("Session %s cleaned up", session_id)

    # -- transitions ---------------------------------------------------------

    def confirm_purpose(self, session_id: str, purpose: str) -> AnalysisSession:
        """
        Record the user's purpose.  A purpose that differs from the detected
        one re-runs classification, regenerates the feature list from the new
        purpose and resets the selection to the regenerated enabled features.
        """
        session: AnalysisSession = self.store.get(session_id)
        purpose = purpose.strip()
        if not purpose:
            raise InputValidationError("Purpose must not be empty")

        # nothing on the stored session changes until every step has succeeded
        intelligence: APIIntelligence = session.intelligence
        updates: Dict[str, Any] = {"confirmed_purpose": purpose}
        if purpose != intelligence.detected_purpose:
            api: ParsedAPI = session.original_api
            fresh: APIIntelligence = self.engine.analyze(api)
            features: List[PluginFeature] = self.engine.regenerate_features(api, purpose)
            intelligence = fresh.model_copy(
                update={"detected_purpose": purpose, "suggested_features": features}
            )
            updates["selected_features"] = [f.id for f in features if f.enabled]
            logger.info(
                "Session %s purpose overridden to %r; features now %s",
                session_id,
                purpose,
                [f.id for f in features],
            )
        choices: UserCustomization = merge_model(session.user_choices, updates)

        session.intelligence = intelligence
        session.user_choices = choices
        session.status = SessionStatus.SELECTING_FEATURES
        return self._commit(session)

    def update_feature_selection(
        self,
        session_id: str,
        selected_ids: List[str],
        customizations: Optional[Mapping[str, Any]] = None,
    ) -> AnalysisSession:
        session: AnalysisSession = self.store.get(session_id)
        intelligence: APIIntelligence = session.intelligence
        known: List[str] = intelligence.feature_ids

        requested: List[str] = dedupe(selected_ids)
        unknown: List[str] = [fid for fid in requested if fid not in known]
        if unknown:
            logger.warning("Session %s: dropping unknown feature ids %s", session_id, unknown)
        selection: List[str] = [fid for fid in requested if fid in known]
        for required_id in intelligence.required_feature_ids:
            if required_id not in selection:
                selection.append(required_id)

        session.user_choices.selected_features = selection
        if customizations:
            merged: Dict[str, Any] = dict(session.user_choices.feature_customizations)
            merged.update(customizations)
            session.user_choices.feature_customizations = merged
        session.status = SessionStatus.CONFIGURING
        return self._commit(session)

    def update_ui_preferences(
        self, session_id: str, updates: Mapping[str, Any]
    ) -> AnalysisSession:
        session: AnalysisSession = self.store.get(session_id)
        session.user_choices.ui_preferences = merge_model(
            session.user_choices.ui_preferences, updates
        )
        return self._commit(session)

    def update_advanced_settings(
        self, session_id: str, updates: Mapping[str, Any]
    ) -> AnalysisSession:
        session: AnalysisSession = self.store.get(session_id)
        session.user_choices.advanced_settings = merge_model(
            session.user_choices.advanced_settings, updates
        )
        return self._commit(session)

    def finalize_analysis(self, session_id: str) -> AnalysisSession:
        session: AnalysisSession = self.store.get(session_id)
        session.status = SessionStatus.READY
        session = self._commit(session)
        logger.info(
            "Session %s ready: %d features, %d focused endpoints",
            session_id,
            len(session.refined_spec.enabled_features),
            len(session.refined_spec.focused_endpoints),
        )
        return session

    def get_suggested_focus_adjustments(
        self, session_id: str, new_purpose: str
    ) -> List[PluginFeature]:
        """Preview the features a purpose override would produce; no mutation."""
        session: AnalysisSession = self.store.get(session_id)
        return self.engine.regenerate_features(session.original_api, new_purpose)

    # -- internals -----------------------------------------------------------

    def _commit(self, session: AnalysisSession) -> AnalysisSession:
        session.refined_spec = build_refined_spec(session)
        return self.store.save(session)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "SESSION_ID_PREFIX",
    "SessionStore",
    "new_session_id",
    "build_refined_spec",
    "InteractiveAnalyzer",
]

logger.debug("pluginforge.sessions loaded — %d public symbols.", len(__all__))
