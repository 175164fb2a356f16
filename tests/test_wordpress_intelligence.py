"""
tests/test_wordpress_intelligence.py
Tests for the WordPress-specific synthesizer: buckets, features, site
context, strategy and security considerations.
"""

from __future__ import annotations

import pytest

from pluginforge.models import APIEndpoint, AuthenticationMethod, ParsedAPI
from pluginforge.wordpress_intelligence import (
    ADMIN_DASHBOARD_ID,
    WordPressIntelligenceEngine,
    bucket_for,
)


@pytest.fixture()
def wp_engine() -> WordPressIntelligenceEngine:
    return WordPressIntelligenceEngine()


def _endpoint(endpoint_id: str, method: str, path: str, name: str = "") -> APIEndpoint:
    return APIEndpoint(id=endpoint_id, name=name or f"{method} {path}", method=method, path=path)


@pytest.fixture()
def content_api() -> ParsedAPI:
    return ParsedAPI(
        name="Content Hub",
        description="Summaries and exports",
        endpoints=[
            _endpoint("summarize", "POST", "/text/summarize"),
            _endpoint("exportData", "GET", "/data/export"),
            _endpoint("uploadFile", "POST", "/upload"),
        ],
    )


# ===========================================================================
# Buckets
# ===========================================================================


class TestBuckets:
    @pytest.mark.parametrize(
        "path, name, expected",
        [
            ("/translate", "", "translation"),
            ("/v2/jobs", "Translate job", "translation"),
            ("/upscale", "", "image-processing"),
            ("/images/{id}", "", "image-processing"),
            ("/x", "Fetch image", "image-processing"),
            ("/text/clean", "", "text-processing"),
            ("/data/rows", "", "data-management"),
            ("/orders", "", "general"),
        ],
    )
    def test_bucket_for(self, path: str, name: str, expected: str) -> None:
        assert bucket_for(_endpoint("e", "GET", path, name)) == expected

    def test_category_names_and_priorities(self, wp_engine, deepl_api, content_api) -> None:
        [translation] = wp_engine.categorize(deepl_api.endpoints)
        assert translation.name == "Translation"
        assert translation.priority == 1.0

        names = {c.name: c.priority for c in wp_engine.categorize(content_api.endpoints)}
        assert names == {
            "Text-processing": 0.5,
            "Data-management": 0.5,
            "General": 0.5,
        }


# ===========================================================================
# Features
# ===========================================================================


class TestTranslationFeatures:
    def test_feature_ids(self, wp_engine, deepl_api) -> None:
        intelligence = wp_engine.analyze(deepl_api)
        assert [f.id for f in intelligence.wordpress_features] == [
            ADMIN_DASHBOARD_ID,
            "wp-post-translation",
            "wp-bulk-translation",
        ]

    def test_post_translation_metadata(self, wp_engine, deepl_api) -> None:
        feature = wp_engine.analyze(deepl_api).get_wordpress_feature("wp-post-translation")
        assert feature.endpoints == ["translateText"]
        assert feature.enabled is False
        assert feature.wordpress_integration.type == "gutenberg-block"
        assert "enqueue_block_editor_assets" in feature.wordpress_integration.hook_points
        assert feature.wp_compatibility.min_version == "5.0"
        assert feature.php_requirements.extensions == ["curl", "json"]
        assert feature.priority == "high"

    def test_admin_dashboard_is_required(self, wp_engine, deepl_api) -> None:
        dashboard = wp_engine.analyze(deepl_api).get_wordpress_feature(ADMIN_DASHBOARD_ID)
        assert dashboard.required is True
        assert dashboard.enabled is True
        assert dashboard.endpoints == []
        assert "DeepL API" in dashboard.description


class TestImageFeatures:
    def test_auto_enhancement_covers_upscale_only(self, wp_engine, image_api) -> None:
        intelligence = wp_engine.analyze(image_api)
        [category] = intelligence.endpoint_categories
        assert category.name == "Image-processing"
        enhancement = intelligence.get_wordpress_feature("wp-auto-image-enhancement")
        assert enhancement.endpoints == ["upscaleImage"]
        assert "gd" in enhancement.php_requirements.extensions

    def test_bulk_processing_is_not_multisite(self, wp_engine, image_api) -> None:
        bulk = wp_engine.analyze(image_api).get_wordpress_feature("wp-bulk-image-processing")
        assert bulk.endpoints == ["upscaleImage", "getImage", "deleteImage"]
        assert bulk.wp_compatibility.multisite is False


class TestOtherBuckets:
    def test_text_data_and_general_features(self, wp_engine, content_api) -> None:
        ids = [f.id for f in wp_engine.analyze(content_api).wordpress_features]
        assert ids == [
            ADMIN_DASHBOARD_ID,
            "wp-content-enhancement",
            "wp-data-sync",
            "wp-general-integration",
        ]

    def test_general_integration_is_named_after_bucket(self, wp_engine, store_api) -> None:
        feature = wp_engine.analyze(store_api).get_wordpress_feature("wp-general-integration")
        assert feature.name == "General Integration"
        assert feature.endpoints == store_api.endpoint_ids
        assert "wp_ajax_general" in feature.wordpress_integration.hook_points


# ===========================================================================
# Context, strategy, confidence
# ===========================================================================


class TestContext:
    def test_translation_context(self, wp_engine, deepl_api) -> None:
        intelligence = wp_engine.analyze(deepl_api)
        context = intelligence.wordpress_context
        assert context.primary_use_case == "content-management"
        assert context.suggested_plugin_type == "content-enhancement"
        assert context.multisite_compatible is True
        assert context.performance_impact == "low"
        strategy = intelligence.integration_strategy
        assert strategy.primary == "gutenberg-block"
        assert strategy.secondary == ["admin-page", "shortcode"]
        assert strategy.caching is True
        assert strategy.background_processing is False

    def test_store_context(self, wp_engine, store_api) -> None:
        intelligence = wp_engine.analyze(store_api)
        context = intelligence.wordpress_context
        # "/auth/login" hits the user-management needles before "/products"
        assert context.primary_use_case == "user-management"
        assert context.woo_commerce_compatible is True
        assert context.performance_impact == "medium"
        assert intelligence.integration_strategy.primary == "admin-page"
        assert intelligence.integration_strategy.background_processing is True

    def test_media_context(self, wp_engine, image_api) -> None:
        context = wp_engine.analyze(image_api).wordpress_context
        assert context.primary_use_case == "media-processing"
        assert context.suggested_plugin_type == "media-tool"

    def test_uploads_are_heavy_and_single_site(self, wp_engine, content_api) -> None:
        context = wp_engine.analyze(content_api).wordpress_context
        assert context.primary_use_case == "external-integration"
        assert context.suggested_plugin_type == "utility"
        assert context.performance_impact == "high"
        assert context.multisite_compatible is False


class TestSecurity:
    def test_baseline_considerations(self, wp_engine, deepl_api) -> None:
        types = [c.type for c in wp_engine.analyze(deepl_api).security_considerations]
        assert types == ["capability-check", "nonce-verification", "data-validation"]

    def test_declared_auth_adds_credential_handling(self, wp_engine, deepl_api) -> None:
        api = deepl_api.model_copy(
            update={"authentication": [AuthenticationMethod(type="apiKey", parameter_name="k")]}
        )
        types = [c.type for c in wp_engine.analyze(api).security_considerations]
        assert types[-1] == "authentication"


class TestConfidenceAndPurpose:
    def test_translation_api(self, wp_engine, deepl_api) -> None:
        intelligence = wp_engine.analyze(deepl_api)
        assert intelligence.confidence == pytest.approx(0.9)
        assert intelligence.detected_purpose == "Translation Service API"
        assert intelligence.focus_areas[0].confidence == pytest.approx(0.8)

    def test_image_api(self, wp_engine, image_api) -> None:
        intelligence = wp_engine.analyze(image_api)
        assert intelligence.confidence == pytest.approx(0.7)
        assert intelligence.detected_purpose == "Image Processing API"

    def test_general_api(self, wp_engine, store_api) -> None:
        intelligence = wp_engine.analyze(store_api)
        assert intelligence.confidence == pytest.approx(0.8)
        assert intelligence.detected_purpose == "Store Service Integration"

    def test_text_bucket_first(self, wp_engine, content_api) -> None:
        intelligence = wp_engine.analyze(content_api)
        assert intelligence.detected_purpose == "Text Processing API"
        assert intelligence.confidence == pytest.approx(0.9)

    def test_empty_api(self, wp_engine) -> None:
        intelligence = wp_engine.analyze(ParsedAPI(name="Nothing"))
        assert intelligence.confidence == pytest.approx(0.5)
        assert intelligence.primary_category == "general"
        assert [f.id for f in intelligence.wordpress_features] == [ADMIN_DASHBOARD_ID]
