"""
tests/test_templates.py
Tests for the named-template layer and the built-in platform registries.
"""

from __future__ import annotations

import pytest

from pluginforge.exceptions import TemplateDefinitionError, TemplateError, TemplateRenderError
from pluginforge.templates import NamedTemplate, TemplateRegistry, placeholders_of
from pluginforge.transformers import figma_templates, shopify_templates, wordpress_templates


class TestNamedTemplate:
    def test_render_substitutes_values(self) -> None:
        greeting = NamedTemplate("greeting", "Hello @@who, from @@{place}!", ["who", "place"])
        assert greeting.render(who="world", place="PHP") == "Hello world, from PHP!"

    def test_php_and_js_dollars_are_left_alone(self) -> None:
        snippet = NamedTemplate("php", "$value = '@@name'; const x = `${y}`;", ["name"])
        assert snippet.render(name="n") == "$value = 'n'; const x = `${y}`;"

    def test_escaped_delimiter(self) -> None:
        template = NamedTemplate("escaped", "@@@@decorator @@name", ["name"])
        assert template.render(name="x") == "@@decorator x"

    def test_undeclared_placeholder_is_a_definition_error(self) -> None:
        with pytest.raises(TemplateDefinitionError, match="undeclared"):
            NamedTemplate("bad", "@@a @@b", ["a"])

    def test_unused_parameter_is_a_definition_error(self) -> None:
        with pytest.raises(TemplateDefinitionError, match="unused"):
            NamedTemplate("bad", "@@a", ["a", "b"])

    def test_malformed_placeholder(self) -> None:
        with pytest.raises(TemplateDefinitionError, match="line 2"):
            placeholders_of("ok\n@@1oops")

    def test_missing_value(self) -> None:
        template = NamedTemplate("t", "@@a @@b", ["a", "b"])
        with pytest.raises(TemplateRenderError, match="missing"):
            template.render(a="1")

    def test_extra_value(self) -> None:
        template = NamedTemplate("t", "@@a", ["a"])
        with pytest.raises(TemplateRenderError, match="unexpected"):
            template.render(a="1", b="2")

    def test_non_string_value(self) -> None:
        template = NamedTemplate("t", "@@a", ["a"])
        with pytest.raises(TemplateRenderError, match="must be str"):
            template.render(a=3)  # type: ignore[arg-type]


class TestTemplateRegistry:
    def test_lookup_and_render(self) -> None:
        registry = TemplateRegistry([NamedTemplate("x", "<@@v>", ["v"])])
        assert "x" in registry
        assert len(registry) == 1
        assert registry.render("x", v="1") == "<1>"

    def test_name_placeholder_does_not_clash_with_template_name(self) -> None:
        registry = TemplateRegistry([NamedTemplate("field", "id=@@name", ["name"])])
        assert registry.render("field", name="api_key") == "id=api_key"

    def test_unknown_template(self) -> None:
        with pytest.raises(TemplateError, match="Unknown template"):
            TemplateRegistry().get("missing")

    def test_duplicate_registration(self) -> None:
        registry = TemplateRegistry([NamedTemplate("x", "", [])])
        with pytest.raises(TemplateDefinitionError):
            registry.register(NamedTemplate("x", "", []))


class TestBuiltinRegistries:
    @pytest.mark.parametrize(
        "registry, prefix",
        [
            (figma_templates.REGISTRY, "figma."),
            (shopify_templates.REGISTRY, "shopify."),
            (wordpress_templates.REGISTRY, "wordpress."),
        ],
    )
    def test_names_are_namespaced(self, registry: TemplateRegistry, prefix: str) -> None:
        assert len(registry) > 0
        assert all(name.startswith(prefix) for name in registry.names())
