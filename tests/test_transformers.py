"""
tests/test_transformers.py
Tests for the transformer contract, the shared auth / base-URL bindings and
the Figma, Shopify and WordPress bundles.
"""

from __future__ import annotations

import json
import logging
from typing import List

import pytest

from pluginforge.exceptions import PlatformNotSupportedError
from pluginforge.models import (
    APIEndpoint,
    AuthenticationMethod,
    ParsedAPI,
    TransformOptions,
    UIPreferences,
    UserCustomization,
)
from pluginforge.transformers import (
    FigmaTransformer,
    ShopifyTransformer,
    WordPressTransformer,
    default_registry,
)
from pluginforge.transformers.base import (
    DEEPL_BASE_URL,
    PLACEHOLDER_BASE_URL,
    api_key_env_var,
    endpoint_component,
    is_deepl_like,
    path_segments,
    resolve_auth_binding,
    resolve_base_url,
    select_endpoints,
)
from pluginforge.transformers.figma import MAX_RUNNER_ENDPOINTS
from pluginforge.transformers.wordpress import php_method_names
from pluginforge.wordpress_intelligence import WordPressIntelligenceEngine


def _bare_api(name: str = "Widget Hub", count: int = 1, **fields) -> ParsedAPI:
    endpoints: List[APIEndpoint] = [
        APIEndpoint(id=f"op{i}", name=f"Operation {i}", method="GET", path=f"/things/{i}")
        for i in range(count)
    ]
    return ParsedAPI(name=name, endpoints=endpoints, **fields)


# ===========================================================================
# Bindings
# ===========================================================================


class TestAuthBinding:
    def test_api_key_header(self, store_api: ParsedAPI) -> None:
        binding = resolve_auth_binding(store_api)
        assert binding.header == "X-API-Key"
        assert binding.location == "header"
        assert binding.prefix == ""
        assert binding.placeholder is False

    def test_api_key_in_query(self) -> None:
        api = _bare_api(
            authentication=[
                AuthenticationMethod(type="apiKey", parameter_name="api_key", location="query")
            ]
        )
        binding = resolve_auth_binding(api)
        assert (binding.header, binding.location) == ("api_key", "query")

    def test_deepl_authorization_api_key(self) -> None:
        api = _bare_api(
            name="DeepL API",
            authentication=[
                AuthenticationMethod(
                    type="apiKey", parameter_name="Authorization", location="header"
                )
            ],
        )
        assert resolve_auth_binding(api).prefix == "DeepL-Auth-Key "

    def test_bearer(self, image_api: ParsedAPI) -> None:
        binding = resolve_auth_binding(image_api)
        assert (binding.header, binding.prefix) == ("Authorization", "Bearer ")

    def test_basic(self) -> None:
        api = _bare_api(authentication=[AuthenticationMethod(type="http", scheme="basic")])
        assert resolve_auth_binding(api).prefix == "Basic "

    def test_oauth2_uses_bearer(self) -> None:
        api = _bare_api(authentication=[AuthenticationMethod(type="oauth2")])
        assert resolve_auth_binding(api).prefix == "Bearer "

    def test_nothing_declared_deepl_is_still_a_placeholder(self, deepl_api: ParsedAPI) -> None:
        binding = resolve_auth_binding(deepl_api)
        assert binding.header == "Authorization"
        assert binding.prefix == "DeepL-Auth-Key "
        assert binding.placeholder is True

    def test_usage_path_alone_is_flagged(self) -> None:
        metrics = ParsedAPI(
            name="Metrics",
            endpoints=[APIEndpoint(id="usage", name="Usage", method="GET", path="/usage")],
        )
        auth = resolve_auth_binding(metrics)
        base_url = resolve_base_url(metrics)
        assert auth.prefix == "DeepL-Auth-Key "
        assert auth.placeholder and base_url.placeholder

        config = FigmaTransformer().transform(metrics).configuration
        assert config["auth"]["placeholder"] is True
        assert config["baseUrl"]["placeholder"] is True

    def test_nothing_declared_is_placeholder(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="pluginforge.transformers.base"):
            binding = resolve_auth_binding(_bare_api())
        assert binding.to_config() == {
            "header": "Authorization",
            "location": "header",
            "prefix": "Bearer ",
            "placeholder": True,
        }
        assert "No authentication declared" in caplog.text


class TestBaseUrlAndNames:
    def test_declared_url(self, store_api: ParsedAPI) -> None:
        assert resolve_base_url(store_api).url == "https://store.example.org/v1"

    def test_relative_url_falls_back(self) -> None:
        binding = resolve_base_url(_bare_api(base_url="/v1"))
        assert binding.url == PLACEHOLDER_BASE_URL
        assert binding.placeholder is True

    def test_deepl_default(self) -> None:
        binding = resolve_base_url(_bare_api(name="DeepL"))
        assert (binding.url, binding.placeholder) == (DEEPL_BASE_URL, True)

    def test_deepl_detection_by_path(self) -> None:
        api = ParsedAPI(
            name="Anything",
            endpoints=[APIEndpoint(id="u", name="Usage", method="GET", path="/v2/usage")],
        )
        assert is_deepl_like(api)
        assert not is_deepl_like(_bare_api())

    def test_api_key_env_var(self, deepl_api: ParsedAPI, store_api: ParsedAPI) -> None:
        assert api_key_env_var(deepl_api) == "DEEPL_API_KEY"
        assert api_key_env_var(store_api) == "STORE_SERVICE_API_KEY"

    def test_path_segments(self) -> None:
        assert path_segments("/users/{id}/posts") == [
            (False, "/users/"),
            (True, "id"),
            (False, "/posts"),
        ]

    def test_select_endpoints(self, store_api: ParsedAPI) -> None:
        assert select_endpoints(store_api, None) == store_api.endpoints
        focused = TransformOptions(focused_endpoints=["get__orders", "login"])
        # document order, not focus order
        assert [e.id for e in select_endpoints(store_api, focused)] == ["login", "get__orders"]

    def test_delete_component_asks_for_confirmation(self, image_api: ParsedAPI) -> None:
        component = endpoint_component(image_api.get_endpoint("deleteImage"), "Remove")
        assert component.actions[0].type == "delete"
        assert component.actions[0].confirmation_message == "Really call Remove?"
        assert [f.name for f in component.fields] == ["imageId"]

    def test_body_field(self, image_api: ParsedAPI) -> None:
        component = endpoint_component(image_api.get_endpoint("upscaleImage"), "Upscale")
        assert [f.name for f in component.fields] == ["body"]


# ===========================================================================
# Registry
# ===========================================================================


class TestRegistry:
    def test_default_registry(self) -> None:
        registry = default_registry()
        assert registry.platforms() == ["figma", "wordpress", "shopify"]
        assert isinstance(registry.get("figma"), FigmaTransformer)
        assert registry.supports("shopify")
        assert not registry.supports("sketch")

    def test_unknown_platform(self) -> None:
        with pytest.raises(PlatformNotSupportedError) as excinfo:
            default_registry().get("sketch")
        assert excinfo.value.platform == "sketch"
        assert "figma" in str(excinfo.value)


# ===========================================================================
# Figma
# ===========================================================================


class TestFigmaTransformer:
    def test_bundle_files(self, deepl_api: ParsedAPI) -> None:
        result = FigmaTransformer().transform(deepl_api)
        assert result.platform == "figma"
        assert result.file_paths == [
            "figma-plugin/manifest.json",
            "figma-plugin/code.js",
            "figma-plugin/ui.html",
            "figma-plugin/styles.css",
            "figma-plugin/README.md",
        ]
        manifest = json.loads(result.get_file("figma-plugin/manifest.json").content)
        assert manifest["name"] == "DeepL API Figma Plugin"
        assert manifest["id"] == "deepl-api-plugin"
        assert manifest["editorType"] == ["figma", "figjam"]

    def test_translation_feature(self, deepl_api: ParsedAPI) -> None:
        result = FigmaTransformer().transform(deepl_api)
        assert [f.name for f in result.features] == [
            "API Settings",
            "Endpoint Runner",
            "Apply Translation to Selection",
        ]
        assert result.features[2].api_endpoints == ["translateText"]
        assert 'id="apply"' in result.get_file("figma-plugin/ui.html").content

    def test_configuration(self, deepl_api: ParsedAPI, store_api: ParsedAPI) -> None:
        config = FigmaTransformer().transform(deepl_api).configuration
        assert config["editorType"] == ["figma", "figjam"]
        assert config["auth"]["prefix"] == "DeepL-Auth-Key "
        assert config["baseUrl"] == {"url": DEEPL_BASE_URL, "placeholder": False}
        assert config["declaredAuth"] is None

        store_config = FigmaTransformer().transform(store_api).configuration
        assert store_config["declaredAuth"] == {
            "type": "apiKey",
            "name": "ApiKeyAuth",
            "parameterName": "X-API-Key",
            "location": "header",
        }

    def test_no_translation_feature_without_translate_paths(self, store_api: ParsedAPI) -> None:
        result = FigmaTransformer().transform(store_api)
        assert [f.name for f in result.features] == ["API Settings", "Endpoint Runner"]
        assert 'id="apply"' not in result.get_file("figma-plugin/ui.html").content

    def test_hostile_description_stays_inside_the_script(self) -> None:
        api = ParsedAPI(
            name="Widget Hub",
            endpoints=[
                APIEndpoint(
                    id="op0",
                    name="Operation",
                    method="GET",
                    path="/things",
                    description="</script><script>alert(1)</script>",
                )
            ],
        )
        ui_html = FigmaTransformer().transform(api).get_file("figma-plugin/ui.html").content
        assert "alert(1)" in ui_html
        assert "</script><script>alert" not in ui_html
        assert ui_html.count("</script>") == 1

    def test_runner_is_capped(self) -> None:
        result = FigmaTransformer().transform(_bare_api(count=MAX_RUNNER_ENDPOINTS + 3))
        assert len(result.features[1].api_endpoints) == MAX_RUNNER_ENDPOINTS

    def test_focus_and_custom_naming(self, store_api: ParsedAPI) -> None:
        options = TransformOptions(
            focused_endpoints=["get__items"],
            user_choices=UserCustomization(
                ui_preferences=UIPreferences(custom_naming={"get__items": "Browse items"})
            ),
        )
        runner = FigmaTransformer().transform(store_api, options).features[1]
        assert runner.api_endpoints == ["get__items"]
        assert runner.user_interface[0].name == "Browse items"

    def test_placeholders_are_documented(self) -> None:
        result = FigmaTransformer().transform(_bare_api())
        assert result.configuration["auth"]["placeholder"] is True
        assert result.configuration["baseUrl"]["placeholder"] is True
        assert "placeholder" in result.documentation


# ===========================================================================
# Shopify
# ===========================================================================


class TestShopifyTransformer:
    def test_bundle_files(self, store_api: ParsedAPI) -> None:
        result = ShopifyTransformer().transform(store_api)
        assert result.file_paths == [
            "shopify.app.toml",
            "package.json",
            "app/shopify.server.js",
            "app/db.server.js",
            "app/services/api-service.js",
            "app/routes/app.api-settings.jsx",
            "app/routes/app.api-authentication.jsx",
            "prisma/schema.prisma",
        ]
        package = json.loads(result.get_file("package.json").content)
        assert package["name"] == "store-service-shopify-app"

    def test_api_key_header_reaches_the_client(self, store_api: ParsedAPI) -> None:
        result = ShopifyTransformer().transform(store_api)
        assert "X-API-Key" in result.get_file("app/services/api-service.js").content
        assert [f.name for f in result.features] == ["API Settings", "API Authentication"]

    def test_configuration(self, store_api: ParsedAPI) -> None:
        config = ShopifyTransformer().transform(store_api).configuration
        assert config["appName"] == "Store Service Integration"
        assert config["requiredScopes"] == ["read_products", "write_products"]
        assert config["apiVersion"] == "2024-01"
        assert config["environment"] == "STORE_SERVICE_API_KEY"
        assert config["webhooks"] == ["app/uninstalled"]

    def test_translation_api(self, deepl_api: ParsedAPI) -> None:
        result = ShopifyTransformer().transform(deepl_api)
        assert [f.name for f in result.features] == ["API Settings", "Product Translation"]
        assert result.configuration["requiredScopes"] == [
            "read_products",
            "write_products",
            "read_translations",
            "write_translations",
        ]
        assert "app/routes/app.product-translation.jsx" in result.file_paths
        assert result.features[1].user_interface[0].name == "product-translation"
        assert "translateText" in result.get_file("app/services/api-service.js").content

    def test_toml_scopes(self, deepl_api: ParsedAPI) -> None:
        toml = ShopifyTransformer().transform(deepl_api).get_file("shopify.app.toml").content
        assert '"read_products,write_products,read_translations,write_translations"' in toml


# ===========================================================================
# WordPress
# ===========================================================================


class TestWordPressTransformer:
    def test_bundle_files(self, deepl_api: ParsedAPI) -> None:
        result = WordPressTransformer().transform(deepl_api)
        assert result.file_paths == [
            "deepl-api-integration.php",
            "includes/class-api-service.php",
            "includes/class-admin.php",
            "includes/class-shortcodes.php",
            "includes/class-widget.php",
            "admin/pages/api-settings.php",
            "admin/pages/content-translation.php",
            "assets/admin.css",
            "assets/admin.js",
            "includes/class-activator.php",
            "uninstall.php",
        ]

    def test_translation_extras(self, deepl_api: ParsedAPI) -> None:
        result = WordPressTransformer().transform(deepl_api)
        assert [f.name for f in result.features] == ["API Settings", "Content Translation"]
        assert result.configuration["recommendedPlugins"] == ["WPML", "Polylang"]
        assert result.configuration["endpoints"] == [
            {
                "id": "translateText",
                "wordpressAction": "wp_ajax_deepl_api_translateText",
                "capability": "edit_posts",
            }
        ]
        shortcodes = result.get_file("includes/class-shortcodes.php").content
        assert "add_shortcode('deepl_api_translate'" in shortcodes
        assert "api_translate_text" in result.get_file("includes/class-api-service.php").content

    def test_no_translation_extras(self, store_api: ParsedAPI) -> None:
        result = WordPressTransformer().transform(store_api)
        assert [f.name for f in result.features] == ["API Settings", "API Authentication"]
        assert result.configuration["recommendedPlugins"] == []
        shortcodes = result.get_file("includes/class-shortcodes.php").content
        assert "_translate'" not in shortcodes
        service = result.get_file("includes/class-api-service.php").content
        assert "'X-API-Key'" in service
        assert "api_get_items" in service

    def test_php_method_names_collide_case_insensitively(self) -> None:
        endpoints = [
            APIEndpoint(id="getItem", name="a", method="GET", path="/a"),
            APIEndpoint(id="get_item", name="b", method="GET", path="/b"),
        ]
        assert php_method_names(endpoints) == {
            "getItem": "api_get_item",
            "get_item": "api_get_item_2",
        }

    def test_intelligent_selection(self, deepl_api: ParsedAPI) -> None:
        intelligence = WordPressIntelligenceEngine().analyze(deepl_api)
        options = TransformOptions(
            wordpress_intelligence=intelligence,
            selected_wordpress_features=["wp-post-translation"],
        )
        result = WordPressTransformer().transform(deepl_api, options)

        assert [(f.name, f.implementation) for f in result.features] == [
            ("Plugin Dashboard", "admin-ui"),
            ("Post & Page Translation", "block"),
        ]
        assert "admin/pages/plugin-dashboard.php" in result.file_paths
        assert result.configuration["context"]["primaryUseCase"] == "content-management"
        assert result.configuration["integrationStrategy"]["primary"] == "gutenberg-block"
        assert len(result.configuration["securityConsiderations"]) == 3

    def test_dashboard_leads_whatever_the_selection_order(self, deepl_api: ParsedAPI) -> None:
        options = TransformOptions(
            wordpress_intelligence=WordPressIntelligenceEngine().analyze(deepl_api),
            selected_wordpress_features=[
                "wp-bulk-translation",
                "wp-post-translation",
                "wp-admin-dashboard",
            ],
        )
        names = [f.name for f in WordPressTransformer().transform(deepl_api, options).features]
        assert names[0] == "Plugin Dashboard"
        assert len(names) == 3

    def test_intelligent_defaults_to_enabled_features(self, deepl_api: ParsedAPI) -> None:
        options = TransformOptions(
            wordpress_intelligence=WordPressIntelligenceEngine().analyze(deepl_api)
        )
        result = WordPressTransformer().transform(deepl_api, options)
        assert [f.name for f in result.features] == ["Plugin Dashboard"]

    def test_unknown_wordpress_features_are_ignored(self, deepl_api: ParsedAPI, caplog) -> None:
        options = TransformOptions(
            wordpress_intelligence=WordPressIntelligenceEngine().analyze(deepl_api),
            selected_wordpress_features=["wp-nope"],
        )
        with caplog.at_level(logging.WARNING, logger="pluginforge.transformers.wordpress"):
            result = WordPressTransformer().transform(deepl_api, options)
        assert [f.name for f in result.features] == ["Plugin Dashboard"]
        assert "wp-nope" in caplog.text


# ===========================================================================
# Cross-platform properties
# ===========================================================================


@pytest.mark.parametrize("transformer_cls", [FigmaTransformer, ShopifyTransformer, WordPressTransformer])
class TestAllTransformers:
    def test_deterministic(self, transformer_cls, store_api: ParsedAPI) -> None:
        first = transformer_cls().transform(store_api)
        second = transformer_cls().transform(store_api)
        assert first == second
        assert [f.content for f in first.code_files] == [f.content for f in second.code_files]

    def test_unique_relative_paths(self, transformer_cls, image_api: ParsedAPI) -> None:
        paths = transformer_cls().transform(image_api).file_paths
        assert len(paths) == len(set(paths))
        assert all(not p.startswith("/") and ".." not in p.split("/") for p in paths)

    def test_no_template_markers_survive(self, transformer_cls, deepl_api: ParsedAPI) -> None:
        result = transformer_cls().transform(deepl_api)
        for code_file in result.code_files:
            assert "@@" not in code_file.content, code_file.path
        assert result.documentation.strip()

    def test_empty_api(self, transformer_cls) -> None:
        result = transformer_cls().transform(ParsedAPI(name="Empty"))
        assert result.code_files
        assert result.features[0].name == "API Settings"
