"""
tests/test_sessions.py
Tests for SessionStore and the InteractiveAnalyzer state machine.
"""

from __future__ import annotations

import logging
import re
import threading
from typing import List

import pytest
from pydantic import ValidationError

from pluginforge.exceptions import InputValidationError, SessionNotFoundError
from pluginforge.models import ParsedAPI
from pluginforge.sessions import InteractiveAnalyzer, SessionStore, new_session_id


# ===========================================================================
# Store
# ===========================================================================


class TestSessionStore:
    def test_create_get_delete(self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI) -> None:
        session = analyzer.start_analysis(deepl_api)
        store = SessionStore()
        store.create(session)

        assert session.id in store
        assert len(store) == 1
        assert store.get(session.id) is session
        assert store.ids() == [session.id]

        store.delete(session.id)
        assert session.id not in store
        with pytest.raises(SessionNotFoundError):
            store.get(session.id)

    def test_duplicate_create(self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI) -> None:
        session = analyzer.start_analysis(deepl_api)
        with pytest.raises(ValueError, match="already in use"):
            analyzer.store.create(session)

    def test_save_requires_existing_session(
        self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI
    ) -> None:
        session = analyzer.start_analysis(deepl_api)
        with pytest.raises(SessionNotFoundError):
            SessionStore().save(session)

    def test_delete_unknown(self) -> None:
        with pytest.raises(SessionNotFoundError, match="analysis_missing"):
            SessionStore().delete("analysis_missing")

    def test_session_ids_are_unique(self) -> None:
        ids = {new_session_id() for _ in range(200)}
        assert len(ids) == 200
        assert all(re.fullmatch(r"analysis_[0-9a-f]{32}", i) for i in ids)

    def test_concurrent_starts(self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI) -> None:
        created: List[str] = []

        def worker() -> None:
            created.append(analyzer.start_analysis(deepl_api).id)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(created) == sorted(analyzer.get_active_sessions())
        assert len(set(created)) == 8


# ===========================================================================
# Starting a session
# ===========================================================================


class TestStartAnalysis:
    def test_initial_state(self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI) -> None:
        session = analyzer.start_analysis(deepl_api)

        assert session.status == "confirming-purpose"
        assert session.progress == pytest.approx(0.4)
        assert session.original_api == deepl_api
        assert session.user_choices.confirmed_purpose == "Language Translation Service"
        assert session.user_choices.selected_features == [
            "text-translation",
            "language-detection",
        ]
        assert session.user_choices.ui_preferences.primary_endpoints == ["translateText"]
        assert session.can_proceed()

    def test_refined_spec(self, analyzer: InteractiveAnalyzer, store_api: ParsedAPI) -> None:
        session = analyzer.start_analysis(store_api)
        refined = session.refined_spec

        assert refined.name == "Store Service"
        assert refined.description == "Store Service Integration"
        assert refined.focused_endpoints == store_api.endpoint_ids
        assert [f.id for f in refined.enabled_features] == ["api-integration", "authentication"]
        assert [a.id for a in refined.ui_configuration.primary_actions] == [
            "api-integration",
            "authentication",
        ]
        assert [(c.name, c.endpoints) for c in refined.ui_configuration.categories] == [
            ("General API", 8),
            ("Authentication", 1),
        ]
        assert refined.ui_configuration.custom_naming is None

    def test_session_is_registered(self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI) -> None:
        session = analyzer.start_analysis(deepl_api)
        assert analyzer.get_active_sessions() == [session.id]
        assert analyzer.get_session(session.id) is session

    def test_dump_uses_camel_case_aliases(
        self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI
    ) -> None:
        dumped = analyzer.start_analysis(deepl_api).model_dump(by_alias=True)
        assert "originalAPI" in dumped
        assert "userChoices" in dumped
        assert dumped["progress"] == pytest.approx(0.4)


# ===========================================================================
# Transitions
# ===========================================================================


class TestConfirmPurpose:
    def test_same_purpose_keeps_features(
        self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI
    ) -> None:
        session = analyzer.start_analysis(deepl_api)
        updated = analyzer.confirm_purpose(session.id, "  Language Translation Service ")

        assert updated.status == "selecting-features"
        assert updated.progress == pytest.approx(0.6)
        assert updated.user_choices.confirmed_purpose == "Language Translation Service"
        assert updated.intelligence.feature_ids == ["text-translation", "language-detection"]

    def test_override_regenerates_features(
        self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI
    ) -> None:
        session = analyzer.start_analysis(deepl_api)
        updated = analyzer.confirm_purpose(session.id, "Image Enhancement and Processing API")

        assert updated.intelligence.detected_purpose == "Image Enhancement and Processing API"
        assert updated.intelligence.feature_ids == [
            "process-selection",
            "batch-processing",
            "quality-settings",
        ]
        assert updated.user_choices.selected_features == updated.intelligence.feature_ids
        assert updated.refined_spec.description == "Image Enhancement and Processing API"
        # no image endpoints in a translation API
        assert updated.refined_spec.focused_endpoints == []

    def test_empty_purpose(self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI) -> None:
        session = analyzer.start_analysis(deepl_api)
        with pytest.raises(InputValidationError):
            analyzer.confirm_purpose(session.id, "   ")
        assert analyzer.get_session(session.id).status == "confirming-purpose"

    def test_failed_regeneration_leaves_session_unchanged(
        self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI, monkeypatch
    ) -> None:
        session = analyzer.start_analysis(deepl_api)
        before = analyzer.get_session(session.id).model_dump()

        def broken(api, purpose):
            raise RuntimeError("regeneration failed")

        monkeypatch.setattr(analyzer.engine, "regenerate_features", broken)
        with pytest.raises(RuntimeError):
            analyzer.confirm_purpose(session.id, "Image Enhancement and Processing API")

        after = analyzer.get_session(session.id)
        assert after.user_choices.confirmed_purpose == "Language Translation Service"
        assert after.model_dump() == before


class TestFeatureSelection:
    def test_required_features_are_kept(
        self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI
    ) -> None:
        session = analyzer.start_analysis(deepl_api)
        updated = analyzer.update_feature_selection(session.id, ["language-detection"])

        assert updated.user_choices.selected_features == [
            "language-detection",
            "text-translation",
        ]
        assert updated.status == "configuring"
        assert updated.progress == pytest.approx(0.8)

    def test_unknown_ids_are_dropped_with_warning(
        self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI, caplog
    ) -> None:
        session = analyzer.start_analysis(deepl_api)
        with caplog.at_level(logging.WARNING, logger="pluginforge.sessions"):
            updated = analyzer.update_feature_selection(
                session.id, ["text-translation", "no-such-feature", "text-translation"]
            )

        assert updated.user_choices.selected_features == ["text-translation"]
        assert "no-such-feature" in caplog.text

    def test_empty_selection_still_has_required(
        self, analyzer: InteractiveAnalyzer, store_api: ParsedAPI
    ) -> None:
        session = analyzer.start_analysis(store_api)
        updated = analyzer.update_feature_selection(session.id, [])
        assert updated.user_choices.selected_features == ["api-integration", "authentication"]
        assert updated.can_proceed()

    def test_customizations_are_merged(
        self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI
    ) -> None:
        session = analyzer.start_analysis(deepl_api)
        analyzer.update_feature_selection(session.id, [], {"formality": "more"})
        updated = analyzer.update_feature_selection(
            session.id, [], {"wordpress_features": ["wp-post-translation"]}
        )
        assert updated.user_choices.feature_customizations == {
            "formality": "more",
            "wordpress_features": ["wp-post-translation"],
        }

    def test_refined_spec_follows_selection(
        self, analyzer: InteractiveAnalyzer, image_api: ParsedAPI
    ) -> None:
        session = analyzer.start_analysis(image_api)
        updated = analyzer.update_feature_selection(session.id, ["process-selection"])
        assert [f.id for f in updated.refined_spec.enabled_features] == [
            "process-selection",
            "authentication",
        ]


class TestPreferencesAndSettings:
    def test_ui_preferences_accept_aliases(
        self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI
    ) -> None:
        session = analyzer.start_analysis(deepl_api)
        updated = analyzer.update_ui_preferences(
            session.id,
            {"style": "minimal", "customNaming": {"translateText": "Translate"}},
        )
        prefs = updated.user_choices.ui_preferences
        assert prefs.style == "minimal"
        assert prefs.primary_endpoints == ["translateText"]
        assert updated.refined_spec.ui_configuration.layout == "minimal"
        assert updated.refined_spec.ui_configuration.custom_naming == {
            "translateText": "Translate"
        }

    @pytest.mark.parametrize("updates", [{"style": "fancy"}, {"colour": "red"}])
    def test_ui_preferences_reject_bad_values(
        self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI, updates
    ) -> None:
        session = analyzer.start_analysis(deepl_api)
        with pytest.raises(ValidationError):
            analyzer.update_ui_preferences(session.id, updates)
        assert analyzer.get_session(session.id).user_choices.ui_preferences.style == (
            "full-featured"
        )

    def test_advanced_settings(self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI) -> None:
        session = analyzer.start_analysis(deepl_api)
        updated = analyzer.update_advanced_settings(
            session.id, {"authenticationStrategy": "user-input", "debug_mode": True}
        )
        settings = updated.user_choices.advanced_settings
        assert settings.authentication_strategy == "user-input"
        assert settings.debug_mode is True
        assert settings.error_handling == "graceful"

    def test_advanced_settings_reject_bad_mode(
        self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI
    ) -> None:
        session = analyzer.start_analysis(deepl_api)
        with pytest.raises(ValidationError):
            analyzer.update_advanced_settings(session.id, {"errorHandling": "loud"})


class TestFinalizeAndPreview:
    def test_finalize(self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI) -> None:
        session = analyzer.start_analysis(deepl_api)
        ready = analyzer.finalize_analysis(session.id)
        assert ready.status == "ready"
        assert ready.progress == pytest.approx(1.0)
        assert ready.can_proceed()

    def test_focus_adjustments_do_not_mutate(
        self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI
    ) -> None:
        session = analyzer.start_analysis(deepl_api)
        before = session.model_dump()

        preview = analyzer.get_suggested_focus_adjustments(
            session.id, "Image Enhancement and Processing API"
        )

        assert [f.id for f in preview] == [
            "process-selection",
            "batch-processing",
            "quality-settings",
        ]
        assert analyzer.get_session(session.id).model_dump() == before


# ===========================================================================
# Cleanup
# ===========================================================================


class TestCleanup:
    def test_every_operation_fails_after_cleanup(
        self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI
    ) -> None:
        session = analyzer.start_analysis(deepl_api)
        analyzer.cleanup_session(session.id)

        assert analyzer.get_active_sessions() == []
        calls = [
            lambda: analyzer.get_session(session.id),
            lambda: analyzer.confirm_purpose(session.id, "x"),
            lambda: analyzer.update_feature_selection(session.id, []),
            lambda: analyzer.update_ui_preferences(session.id, {}),
            lambda: analyzer.update_advanced_settings(session.id, {}),
            lambda: analyzer.finalize_analysis(session.id),
            lambda: analyzer.get_suggested_focus_adjustments(session.id, "x"),
            lambda: analyzer.cleanup_session(session.id),
        ]
        for call in calls:
            with pytest.raises(SessionNotFoundError):
                call()

    def test_other_sessions_survive(
        self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI, store_api: ParsedAPI
    ) -> None:
        first = analyzer.start_analysis(deepl_api)
        second = analyzer.start_analysis(store_api)
        analyzer.cleanup_session(first.id)
        assert analyzer.get_active_sessions() == [second.id]
        assert analyzer.get_session(second.id).original_api.name == "Store Service"


# ===========================================================================
# Isolation
# ===========================================================================


class TestIsolation:
    def test_changes_to_one_session_leave_another_untouched(
        self, analyzer: InteractiveAnalyzer, deepl_api: ParsedAPI
    ) -> None:
        first = analyzer.start_analysis(deepl_api)
        second = analyzer.start_analysis(deepl_api)
        before = analyzer.get_session(second.id).model_dump()

        analyzer.update_ui_preferences(first.id, {"style": "minimal"})
        analyzer.update_feature_selection(first.id, ["language-detection"], {"tone": "formal"})
        analyzer.update_advanced_settings(first.id, {"debug_mode": True})
        analyzer.finalize_analysis(first.id)

        after = analyzer.get_session(second.id)
        assert after.model_dump() == before
        assert after.user_choices.ui_preferences.style != "minimal"
        assert after.user_choices.feature_customizations == {}
        assert after.refined_spec.focused_endpoints == before["refined_spec"]["focused_endpoints"]
