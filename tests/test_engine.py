"""
tests/test_engine.py
Tests for the TransformationEngine facade, the stub engine and the
thread-safe EngineLoader.
"""

from __future__ import annotations

import json
import threading
import time
from typing import List

import pytest
import yaml

from pluginforge.engine import (
    EngineLoader,
    SpecUpload,
    TransformationEngine,
    UnavailableEngine,
    get_transformation_engine,
    reset_transformation_engine,
)
from pluginforge.exceptions import (
    UNAVAILABLE_MESSAGE,
    EngineInitializationError,
    EngineUnavailableError,
    InputValidationError,
    PlatformNotSupportedError,
    SpecParseError,
)
from pluginforge.parser import SpecParser
from pluginforge.sessions import InteractiveAnalyzer


@pytest.fixture()
def engine() -> TransformationEngine:
    return TransformationEngine()


# ===========================================================================
# Analysis
# ===========================================================================


class TestAnalyzeApi:
    def test_from_upload(self, engine: TransformationEngine, deepl_doc) -> None:
        upload = SpecUpload(filename="deepl.yaml", content=yaml.dump(deepl_doc).encode("utf-8"))
        api = engine.analyze_api("file", upload)
        assert api.name == "DeepL API"

    def test_from_path(self, engine: TransformationEngine, store_json_path) -> None:
        assert engine.analyze_api("file", store_json_path).version == "3.1.0"

    def test_from_url(self, mock_client_factory, deepl_doc) -> None:
        url = "https://specs.example.com/deepl.json"
        client = mock_client_factory({url: (200, json.dumps(deepl_doc), "application/json")})
        engine = TransformationEngine(parser=SpecParser(client=client))
        assert engine.analyze_api("url", url).endpoint_ids == ["translateText"]

    def test_bad_extension(self, engine: TransformationEngine) -> None:
        with pytest.raises(InputValidationError, match="Unsupported file type"):
            engine.analyze_api("file", SpecUpload(filename="spec.txt", content="openapi: 3.0.0"))

    def test_empty_upload(self, engine: TransformationEngine) -> None:
        with pytest.raises(InputValidationError):
            engine.analyze_api("file", SpecUpload(filename="spec.yaml", content=b""))

    def test_missing_path(self, engine: TransformationEngine, tmp_path) -> None:
        with pytest.raises(InputValidationError, match="Cannot read"):
            engine.analyze_api("file", tmp_path / "missing.yaml")

    def test_invalid_url(self, engine: TransformationEngine) -> None:
        with pytest.raises(InputValidationError):
            engine.analyze_api("url", "ftp://example.com/spec.yaml")

    def test_unknown_source(self, engine: TransformationEngine) -> None:
        with pytest.raises(InputValidationError, match="Unknown analysis source"):
            engine.analyze_api("carrier-pigeon", "x")

    def test_parse_failure(self, engine: TransformationEngine) -> None:
        upload = SpecUpload(filename="bad.yaml", content="just: a mapping\n")
        with pytest.raises(SpecParseError):
            engine.analyze_api("file", upload)


# ===========================================================================
# Transformation
# ===========================================================================


class TestTransform:
    def test_transform(self, engine: TransformationEngine, store_api) -> None:
        result = engine.transform(store_api, "shopify")
        assert result.platform == "shopify"

    def test_unknown_platform(self, engine: TransformationEngine, store_api) -> None:
        with pytest.raises(PlatformNotSupportedError):
            engine.transform(store_api, "sketch")

    def test_unknown_platform_is_checked_before_parsing(
        self, engine: TransformationEngine, tmp_path
    ) -> None:
        # the file does not exist; the platform error must come first
        with pytest.raises(PlatformNotSupportedError):
            engine.transform_from_file(tmp_path / "missing.yaml", "sketch")

    def test_transform_from_file(self, engine: TransformationEngine, deepl_yaml_path) -> None:
        result = engine.transform_from_file(deepl_yaml_path, "figma")
        assert "figma-plugin/manifest.json" in result.file_paths

    def test_transform_from_url(self, mock_client_factory, store_doc) -> None:
        url = "https://specs.example.com/store.json"
        client = mock_client_factory({url: (200, json.dumps(store_doc), "application/json")})
        engine = TransformationEngine(parser=SpecParser(client=client))
        result = engine.transform_from_url(url, "wordpress")
        assert "store-service-integration.php" in result.file_paths

    def test_platforms(self, engine: TransformationEngine) -> None:
        assert engine.get_supported_platforms() == ["figma", "wordpress", "shopify"]
        assert engine.has_platform_support("wordpress")
        assert not engine.has_platform_support("sketch")


class TestTransformSession:
    def test_focus_narrows_the_bundle(
        self,
        engine: TransformationEngine,
        analyzer: InteractiveAnalyzer,
        parser: SpecParser,
        deepl_doc,
    ) -> None:
        deepl_doc["paths"]["/usage"] = {"get": {"responses": {"200": {"description": "ok"}}}}
        api = parser.parse_document(deepl_doc)
        session = analyzer.start_analysis(api)
        session = analyzer.finalize_analysis(session.id)

        # translation features only cover /translate
        assert session.refined_spec.focused_endpoints == ["translateText"]
        result = engine.transform_session(session, "figma")
        assert result.features[1].api_endpoints == ["translateText"]

    def test_wordpress_features_follow_focus(
        self, engine: TransformationEngine, analyzer: InteractiveAnalyzer, deepl_api
    ) -> None:
        session = analyzer.start_analysis(deepl_api)
        options = engine.session_options(session, "wordpress")
        assert options.selected_wordpress_features == [
            "wp-post-translation",
            "wp-bulk-translation",
            "wp-admin-dashboard",
        ]
        assert options.focused_endpoints == ["translateText"]
        assert options.wordpress_intelligence is not None

        result = engine.transform_session(session, "wordpress")
        assert [f.name for f in result.features] == [
            "Plugin Dashboard",
            "Post & Page Translation",
            "Bulk Content Translation",
        ]

    def test_explicit_wordpress_features(
        self, engine: TransformationEngine, analyzer: InteractiveAnalyzer, deepl_api
    ) -> None:
        session = analyzer.start_analysis(deepl_api)
        session = analyzer.update_feature_selection(
            session.id, [], {"wordpress_features": ["wp-bulk-translation", "wp-bulk-translation"]}
        )
        options = engine.session_options(session, "wordpress")
        assert options.selected_wordpress_features == [
            "wp-bulk-translation",
            "wp-admin-dashboard",
        ]

    def test_other_platforms_skip_wordpress_analysis(
        self, engine: TransformationEngine, analyzer: InteractiveAnalyzer, deepl_api
    ) -> None:
        session = analyzer.start_analysis(deepl_api)
        options = engine.session_options(session, "shopify")
        assert options.wordpress_intelligence is None
        assert options.selected_wordpress_features is None
        assert options.user_choices == session.user_choices


# ===========================================================================
# Stub engine
# ===========================================================================


class TestUnavailableEngine:
    def test_placeholder_analysis(self) -> None:
        stub = UnavailableEngine()
        from_url = stub.analyze_api("url", "https://example.com/spec.json")
        from_file = stub.analyze_api("file", SpecUpload("spec.yaml", b""))
        assert from_url.name == "API from URL"
        assert from_file.name == "API from File"
        assert from_url.endpoints == []
        assert from_url.description == "API analysis temporarily unavailable"

    def test_transforms_raise(self, store_api, analyzer: InteractiveAnalyzer) -> None:
        stub = UnavailableEngine()
        session = analyzer.start_analysis(store_api)
        calls = [
            lambda: stub.transform(store_api, "figma"),
            lambda: stub.transform_from_url("https://example.com/x.json", "figma"),
            lambda: stub.transform_from_file("x.yaml", "figma"),
            lambda: stub.transform_session(session, "figma"),
        ]
        for call in calls:
            with pytest.raises(EngineUnavailableError, match="temporarily unavailable"):
                call()
        assert str(EngineUnavailableError()) == UNAVAILABLE_MESSAGE

    def test_platforms(self) -> None:
        stub = UnavailableEngine()
        assert stub.get_supported_platforms() == ["figma", "wordpress", "shopify"]
        assert stub.has_platform_support("shopify")
        assert not stub.has_platform_support("sketch")


# ===========================================================================
# Loader
# ===========================================================================


class TestEngineLoader:
    def test_loads_factory_once(self) -> None:
        calls: List[int] = []

        def factory() -> TransformationEngine:
            calls.append(1)
            return TransformationEngine()

        loader = EngineLoader(factory=factory)
        assert not loader.loaded
        first = loader.get()
        assert loader.get() is first
        assert calls == [1]
        assert loader.loaded
        assert not loader.degraded

    def test_import_error_falls_back(self, caplog) -> None:
        def factory():
            raise ImportError("no module named 'jinja'")

        loader = EngineLoader(factory=factory)
        engine = loader.get()
        assert isinstance(engine, UnavailableEngine)
        assert loader.degraded
        assert "using the stub engine" in caplog.text

    def test_initialization_error_falls_back(self) -> None:
        def factory():
            raise EngineInitializationError("templates broken")

        assert isinstance(EngineLoader(factory=factory).get(), UnavailableEngine)

    def test_broken_transformer_registry_falls_back(self, monkeypatch) -> None:
        def broken_registry():
            raise ValueError("bad default in a transformer model")

        monkeypatch.setattr("pluginforge.transformers.default_registry", broken_registry)
        with pytest.raises(EngineInitializationError, match="Transformers failed to load"):
            TransformationEngine()

        loader = EngineLoader()
        assert isinstance(loader.get(), UnavailableEngine)
        assert loader.degraded

    def test_other_errors_propagate_and_are_not_cached(self) -> None:
        attempts: List[int] = []

        def factory():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("boom")
            return TransformationEngine()

        loader = EngineLoader(factory=factory)
        with pytest.raises(RuntimeError, match="boom"):
            loader.get()
        assert not loader.loaded
        assert isinstance(loader.get(), TransformationEngine)
        assert len(attempts) == 2

    def test_concurrent_first_calls_share_one_instance(self) -> None:
        calls: List[int] = []
        barrier = threading.Barrier(8)
        results: List[object] = []

        def factory() -> UnavailableEngine:
            calls.append(1)
            time.sleep(0.05)
            return UnavailableEngine()

        loader = EngineLoader(factory=factory)

        def worker() -> None:
            barrier.wait()
            results.append(loader.get())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert all(r is results[0] for r in results)

    def test_reset(self) -> None:
        loader = EngineLoader(factory=UnavailableEngine)
        first = loader.get()
        loader.reset()
        assert not loader.loaded
        assert loader.get() is not first


class TestProcessWideEngine:
    def test_default_engine_is_full(self) -> None:
        reset_transformation_engine()
        try:
            engine = get_transformation_engine()
            assert isinstance(engine, TransformationEngine)
            assert get_transformation_engine() is engine
        finally:
            reset_transformation_engine()
