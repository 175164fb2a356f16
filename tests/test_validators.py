"""
tests/test_validators.py
Unit tests for pluginforge.validators.

Tests cover:
- Upload and URL input checks (ensure_valid messages)
- Raw document shape
- Parsed API sanity (path template parameters, informational notes)
- Session consistency
- Transformation bundle checks (paths, JSON artifacts, placeholders)
- ValidationResult bookkeeping and report formatting
"""

from __future__ import annotations

import logging

import pytest

from pluginforge.engine import TransformationEngine
from pluginforge.exceptions import InputValidationError
from pluginforge.models import (
    APIEndpoint,
    CodeFile,
    EndpointParameter,
    ParsedAPI,
    PlatformTransformation,
)
from pluginforge.sessions import InteractiveAnalyzer
from pluginforge.validators import (
    ValidationResult,
    ensure_valid,
    is_safe_relative_path,
    validate_document,
    validate_full,
    validate_parsed_api,
    validate_path_parameters,
    validate_session,
    validate_spec_url,
    validate_transformation,
    validate_upload,
)


def _file(path: str, content: str = "x", language: str = "javascript") -> CodeFile:
    return CodeFile(path=path, content=content, type="component", language=language)


def _bundle(*files: CodeFile, **fields) -> PlatformTransformation:
    fields.setdefault("documentation", "# Plugin\n")
    return PlatformTransformation(platform="figma", code_files=list(files), **fields)


# ===========================================================================
# Raw input
# ===========================================================================


class TestValidateUpload:
    @pytest.mark.parametrize("name", ["api.json", "api.yaml", "API.YML"])
    def test_accepted_extensions(self, name: str) -> None:
        assert validate_upload(name, b"openapi: 3.0.0").is_valid

    def test_unsupported_extension(self) -> None:
        result = validate_upload("spec.txt", "openapi: 3.0.0")
        assert result.codes == ["UNSUPPORTED_EXTENSION"]
        assert result.errors[0].message == (
            "Unsupported file type 'spec.txt'. Please upload a .json, .yaml, .yml file."
        )

    @pytest.mark.parametrize("content", [b"", b"  \n\t", "   ", None])
    def test_blank_content(self, content) -> None:
        result = validate_upload("spec.yaml", content)
        assert result.codes == ["EMPTY_CONTENT"]
        assert result.errors[0].message == "File 'spec.yaml' is empty."

    def test_both_problems_are_reported(self) -> None:
        assert validate_upload("notes.md", b"").codes == [
            "UNSUPPORTED_EXTENSION",
            "EMPTY_CONTENT",
        ]

    def test_missing_filename_short_circuits(self) -> None:
        assert validate_upload("  ", b"x").codes == ["EMPTY_FILENAME"]


class TestValidateSpecUrl:
    def test_https_url(self) -> None:
        assert validate_spec_url("https://api.example.com/openapi.json").is_valid

    @pytest.mark.parametrize("url", ["ftp://example.com/spec", "/local/spec.json", "example.com"])
    def test_not_absolute_http(self, url: str) -> None:
        result = validate_spec_url(url)
        assert result.codes == ["INVALID_URL"]
        assert result.errors[0].context == {"url": url}

    def test_empty(self) -> None:
        assert validate_spec_url("").codes == ["EMPTY_URL"]


class TestEnsureValid:
    def test_raises_first_error_message(self) -> None:
        with pytest.raises(InputValidationError, match="No specification URL was provided"):
            ensure_valid(validate_spec_url(" "))

    def test_warnings_do_not_raise(self) -> None:
        result = ValidationResult()
        result.add_warning("W", "just a warning")
        ensure_valid(result)


# ===========================================================================
# Raw document
# ===========================================================================


class TestValidateDocument:
    def test_clean_document(self, deepl_doc) -> None:
        result = validate_document(deepl_doc)
        assert len(result) == 0

    def test_not_a_mapping(self) -> None:
        result = validate_document(["openapi"])
        assert result.codes == ["DOCUMENT_NOT_MAPPING"]
        assert "list" in result.errors[0].message

    def test_missing_version_key(self) -> None:
        result = validate_document({"info": {"title": "X"}, "paths": {}})
        assert result.codes == ["NOT_OPENAPI"]

    def test_swagger_key_is_enough(self, swagger_doc) -> None:
        assert validate_document(swagger_doc).is_valid

    def test_info_warnings(self) -> None:
        assert validate_document({"openapi": "3.0.0", "paths": {}}).codes == ["MISSING_INFO"]
        assert validate_document(
            {"openapi": "3.0.0", "info": {"version": "1"}, "paths": {}}
        ).codes == ["MISSING_TITLE"]

    def test_paths(self) -> None:
        no_paths = validate_document({"openapi": "3.0.0", "info": {"title": "X"}})
        assert no_paths.codes == ["MISSING_PATHS"]
        assert no_paths.is_valid

        bad_paths = validate_document({"openapi": "3.0.0", "info": {"title": "X"}, "paths": []})
        assert bad_paths.codes == ["PATHS_NOT_MAPPING"]
        assert not bad_paths.is_valid


# ===========================================================================
# Parsed API
# ===========================================================================


class TestValidateParsedApi:
    def test_translation_api_notes(self, deepl_api: ParsedAPI) -> None:
        result = validate_parsed_api(deepl_api)
        assert result.codes == ["NO_AUTH_DECLARED"]
        assert result.is_valid
        assert result.warning_count == 0

    def test_fully_declared_api_is_clean(self, image_api: ParsedAPI) -> None:
        assert len(validate_parsed_api(image_api)) == 0

    def test_empty_api(self) -> None:
        result = validate_parsed_api(ParsedAPI(name="Empty"))
        assert result.codes == ["NO_ENDPOINTS", "NO_AUTH_DECLARED", "NO_BASE_URL"]
        assert [w.code for w in result.warnings] == ["NO_ENDPOINTS"]

    def test_large_api(self) -> None:
        endpoints = [
            APIEndpoint(id=f"op{i}", name=f"op {i}", method="GET", path=f"/r{i}")
            for i in range(201)
        ]
        result = validate_parsed_api(ParsedAPI(name="Huge", endpoints=endpoints))
        assert "LARGE_API" in result.codes
        assert "201 endpoints" in next(
            i.message for i in result.all_items if i.code == "LARGE_API"
        )


class TestValidatePathParameters:
    def test_undeclared_placeholder(self) -> None:
        endpoint = APIEndpoint(
            id="getOrderItem",
            name="Get item",
            method="GET",
            path="/orders/{orderId}/items/{itemId}",
            parameters=[EndpointParameter(name="orderId", location="path", required=True)],
        )
        result = validate_path_parameters(ParsedAPI(name="Shop", endpoints=[endpoint]))
        assert result.codes == ["UNDECLARED_PATH_PARAMETER"]
        assert result.warnings[0].context == {"endpoint": "getOrderItem", "parameter": "itemId"}
        assert "'{itemId}'" in result.warnings[0].message

    def test_query_parameter_does_not_count(self) -> None:
        endpoint = APIEndpoint(
            id="getUser",
            name="Get user",
            method="GET",
            path="/users/{id}",
            parameters=[EndpointParameter(name="id", location="query")],
        )
        assert validate_path_parameters(ParsedAPI(name="U", endpoints=[endpoint])).codes == [
            "UNDECLARED_PATH_PARAMETER"
        ]


# ===========================================================================
# Session
# ===========================================================================


class TestValidateSession:
    def test_fresh_session_is_valid(self, analyzer: InteractiveAnalyzer, deepl_api) -> None:
        session = analyzer.start_analysis(deepl_api)
        assert len(validate_session(session)) == 0

    def test_missing_required_feature(self, analyzer: InteractiveAnalyzer, deepl_api) -> None:
        session = analyzer.start_analysis(deepl_api)
        broken = session.model_copy(deep=True)
        broken.user_choices.selected_features = ["language-detection"]
        result = validate_session(broken)
        assert result.codes == ["REQUIRED_FEATURE_NOT_SELECTED"]
        assert result.errors[0].context["feature"] == "text-translation"

    def test_unknown_feature_and_endpoint(
        self, analyzer: InteractiveAnalyzer, deepl_api
    ) -> None:
        broken = analyzer.start_analysis(deepl_api).model_copy(deep=True)
        broken.user_choices.selected_features.append("teleportation")
        broken.refined_spec.focused_endpoints.append("ghostEndpoint")
        assert validate_session(broken).codes == [
            "UNKNOWN_FEATURE_SELECTED",
            "UNKNOWN_FOCUSED_ENDPOINT",
        ]

    def test_nothing_selected(self, analyzer: InteractiveAnalyzer, deepl_api) -> None:
        broken = analyzer.start_analysis(deepl_api).model_copy(deep=True)
        broken.user_choices.selected_features = []
        result = validate_session(broken)
        assert result.codes == ["REQUIRED_FEATURE_NOT_SELECTED", "NOTHING_SELECTED"]
        assert result.warnings[0].context == {"session": broken.id}


# ===========================================================================
# Transformation bundle
# ===========================================================================


class TestIsSafeRelativePath:
    @pytest.mark.parametrize(
        "path", ["manifest.json", "figma-plugin/code.js", "a/b/c.php", "./notes.md"]
    )
    def test_safe(self, path: str) -> None:
        assert is_safe_relative_path(path)

    @pytest.mark.parametrize(
        "path",
        ["", "/etc/passwd", "../escape.js", "a/../../b", "C:/win.ini", "a\\b.js"],
    )
    def test_unsafe(self, path: str) -> None:
        assert not is_safe_relative_path(path)


class TestValidateTransformation:
    def test_real_bundle_is_valid(self, store_api) -> None:
        bundle = TransformationEngine().transform(store_api, "shopify")
        result = validate_transformation(bundle)
        assert result.is_valid
        assert "PLACEHOLDER_CONFIGURATION" not in result.codes

    def test_empty_bundle(self) -> None:
        assert validate_transformation(_bundle()).codes == ["EMPTY_BUNDLE"]

    def test_duplicate_and_unsafe_paths(self) -> None:
        result = validate_transformation(
            _bundle(_file("a.js"), _file("a.js"), _file("../b.js"))
        )
        assert result.codes == ["DUPLICATE_FILE_PATH", "UNSAFE_FILE_PATH"]
        assert result.error_count == 2

    def test_empty_file_is_a_warning(self) -> None:
        result = validate_transformation(_bundle(_file("a.js", content="  \n")))
        assert result.codes == ["EMPTY_FILE"]
        assert result.is_valid

    def test_invalid_json_artifact(self) -> None:
        result = validate_transformation(
            _bundle(
                _file("ok.json", content='{"a": 1}', language="json"),
                _file("bad.json", content="{a: 1}", language="json"),
            )
        )
        assert result.codes == ["INVALID_JSON_FILE"]
        assert result.errors[0].context == {"path": "bad.json"}

    def test_placeholder_configuration(self) -> None:
        bundle = _bundle(
            _file("a.js"),
            configuration={
                "auth": {"header": "Authorization", "placeholder": True},
                "baseUrl": {"url": "https://api.example.com", "placeholder": False},
            },
        )
        result = validate_transformation(bundle)
        assert result.codes == ["PLACEHOLDER_CONFIGURATION"]
        assert result.warnings[0].context == {"key": "auth"}

    def test_missing_documentation(self) -> None:
        result = validate_transformation(_bundle(_file("a.js"), documentation="  "))
        assert result.codes == ["NO_DOCUMENTATION"]


class TestValidateFull:
    def test_combines_all_stages(
        self, analyzer: InteractiveAnalyzer, deepl_api
    ) -> None:
        session = analyzer.start_analysis(deepl_api).model_copy(deep=True)
        session.user_choices.selected_features = ["language-detection"]
        result = validate_full(deepl_api, _bundle(), session)
        assert result.codes == [
            "NO_AUTH_DECLARED",
            "REQUIRED_FEATURE_NOT_SELECTED",
            "EMPTY_BUNDLE",
        ]
        assert not result

    def test_without_session(self, image_api, caplog) -> None:
        caplog.set_level(logging.INFO, logger="pluginforge")
        result = validate_full(image_api, _bundle(_file("a.js")))
        assert result
        assert "Validation PASSED" in caplog.text


# ===========================================================================
# Result container
# ===========================================================================


class TestValidationResult:
    def test_counts_and_summary(self) -> None:
        result = ValidationResult()
        result.add_error("E1", "broken", {"path": "a.js"})
        result.add_warning("W1", "odd")
        result.add_info("I1", "fyi")
        assert result.has_errors
        assert (result.error_count, result.warning_count, len(result)) == (1, 1, 3)
        assert result.summary() == "Validation: 1 error(s), 1 warning(s), 3 total item(s)."
        assert not result

    def test_merge(self) -> None:
        first, second = ValidationResult(), ValidationResult()
        first.add_info("A", "a")
        second.add_warning("B", "b")
        first.merge(second)
        assert first.codes == ["A", "B"]

    def test_format_report_hides_info_by_default(self) -> None:
        result = ValidationResult()
        result.add_error("E1", "broken", {"path": "a.js"})
        result.add_info("I1", "fyi")
        report = result.format_report()
        assert "[E1] broken" in report
        assert "path: a.js" in report
        assert "I1" not in report
        assert "[I1] fyi" in result.format_report(include_info=True)

    def test_issue_repr(self) -> None:
        result = ValidationResult()
        result.add_warning("W1", "odd")
        assert repr(result.warnings[0]) == "[WARNING] W1: odd"
        assert result.warnings[0].to_dict()["level"] == "warning"
