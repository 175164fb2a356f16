# File: pluginforge/transformers/wordpress.py
"""
NexaFlow PluginForge - WordPress Transformer
=============================================
Renders a classic WordPress plugin:

    {slug}-integration.php            bootstrap singleton and asset loading
    includes/class-api-service.php    one ``api_<id>`` method per endpoint
    includes/class-admin.php          menu, settings, AJAX handlers
    includes/class-shortcodes.php
    includes/class-widget.php
    includes/class-activator.php      tables, default options, cron
    admin/pages/{feature}.php         one per admin-ui feature
    assets/admin.css, assets/admin.js
    uninstall.php

Feature selection has two modes.  With WordPress intelligence in the
options, the selected WordPress features (required ones always kept) are
mapped through their integration type.  Without it, "API Settings" comes
first and the parse-time endpoint categories add the rest.

Translation extras (``translate_text``, the translate and language switcher
shortcodes, the translation widget and table) are only rendered when a
selected endpoint has the first-pass category ``translation``.
"""

from __future__ import annotations

import html
import logging
from typing import Any, Dict, List, Optional, Tuple

from pluginforge.models import (
    APIEndpoint,
    CodeFile,
    CodeFileType,
    CodeLanguage,
    ComponentAction,
    FeatureImplementation,
    FormField,
    FormFieldOption,
    ParsedAPI,
    PlatformFeature,
    PlatformKind,
    PlatformTransformation,
    TransformOptions,
    UIComponent,
    WordPressFeature,
    WordPressIntegrationType,
    WordPressIntelligence,
)
from pluginforge.transformers import wordpress_templates
from pluginforge.transformers.base import (
    AuthBinding,
    BaseUrlBinding,
    PlatformTransformer,
    category_features,
    custom_naming,
    path_segments,
    query_parameter_names,
    resolve_auth_binding,
    resolve_base_url,
    select_endpoints,
    settings_feature,
)
from pluginforge.templates import TemplateRegistry
from pluginforge.utils import (
    dedupe,
    indent,
    php_string,
    sanitize_identifier,
    slugify,
    to_php_prefix,
    to_snake_case,
    unique_names,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.transformers.wordpress")

PHP_VERSION: str = "7.4+"
WORDPRESS_VERSION: str = "5.0+"
TRANSLATION_PLUGINS: List[str] = ["WPML", "Polylang"]

# WordPress integration type -> platform feature implementation
IMPLEMENTATION_MAP: Dict[str, FeatureImplementation] = {
    WordPressIntegrationType.GUTENBERG_BLOCK.value: FeatureImplementation.BLOCK,
    WordPressIntegrationType.THEME_INTEGRATION.value: FeatureImplementation.THEME_EXTENSION,
    WordPressIntegrationType.REST_ENDPOINT.value: FeatureImplementation.API_INTEGRATION,
    WordPressIntegrationType.CRON_JOB.value: FeatureImplementation.WEBHOOK,
}

# (first-pass category, feature name, description, implementation)
CATEGORY_TABLE: Tuple[Tuple[str, str, str, FeatureImplementation], ...] = (
    (
        "translation",
        "Content Translation",
        "Translate posts, pages, and custom content using AI",
        FeatureImplementation.ADMIN_UI,
    ),
    (
        "language-support",
        "Language Management",
        "Manage supported languages and translation settings",
        FeatureImplementation.ADMIN_UI,
    ),
    (
        "document-processing",
        "Bulk Translation",
        "Translate multiple posts and pages in bulk",
        FeatureImplementation.ADMIN_UI,
    ),
    (
        "authentication",
        "API Authentication",
        "Manage API authentication and connection status",
        FeatureImplementation.ADMIN_UI,
    ),
)

SWITCHER_LANGUAGES: Tuple[Tuple[str, str], ...] = (
    ("en_US", "English"),
    ("es_ES", "Español"),
    ("fr_FR", "Français"),
    ("de_DE", "Deutsch"),
    ("it_IT", "Italiano"),
)

FORM_LANGUAGES: Tuple[Tuple[str, str], ...] = (
    ("en", "English"),
    ("es", "Spanish"),
    ("fr", "French"),
    ("de", "German"),
)

QUALITY_OPTIONS: Tuple[Tuple[str, str], ...] = (("High", "high"), ("Medium", "medium"), ("Low", "low"))


def implementation_for(wp_type: str) -> FeatureImplementation:
    """Integration type → implementation; anything unmapped is ``admin-ui``."""
    return IMPLEMENTATION_MAP.get(str(wp_type), FeatureImplementation.ADMIN_UI)


def option_prefix(api: ParsedAPI) -> str:
    """``DeepL API`` → ``deepl_api`` (option names, AJAX actions, hooks)."""
    return to_php_prefix(api.name).lower()


def php_method_names(endpoints: List[APIEndpoint]) -> Dict[str, str]:
    """
    ``api_<snake id>`` per endpoint.  PHP method names are case-insensitive,
    so collisions are resolved on the lower-cased name.
    """
    stems: List[str] = [
        to_snake_case(e.id) or sanitize_identifier(e.id).lower() or "endpoint" for e in endpoints
    ]
    names: List[str] = unique_names(f"api_{stem}" for stem in stems)
    return {e.id: name for e, name in zip(endpoints, names)}


def ajax_actions(api: ParsedAPI, endpoints: List[APIEndpoint]) -> Dict[str, str]:
    prefix: str = option_prefix(api)
    names: List[str] = unique_names(f"{prefix}_{sanitize_identifier(e.id)}" for e in endpoints)
    return {e.id: name for e, name in zip(endpoints, names)}


def intelligent_ui(feature: WordPressFeature) -> List[UIComponent]:
    """Form descriptor matching the feature's WordPress integration type."""
    endpoint: Optional[str] = feature.endpoints[0] if feature.endpoints else None
    wp_type: str = str(feature.wordpress_integration.type)
    if wp_type == WordPressIntegrationType.GUTENBERG_BLOCK.value:
        return [
            UIComponent(
                type="form",
                name=f"{feature.id}-block",
                fields=[
                    FormField(name="content", type="textarea", label="Content to Process", required=True)
                ],
                actions=[ComponentAction(name="process", type="submit", endpoint=endpoint)],
            )
        ]
    if wp_type == WordPressIntegrationType.MEDIA_LIBRARY.value:
        return [
            UIComponent(
                type="form",
                name=f"{feature.id}-media",
                fields=[
                    FormField(name="auto-process", type="checkbox", label="Auto-process uploads"),
                    FormField(
                        name="quality",
                        type="select",
                        label="Processing Quality",
                        options=[FormFieldOption(label=l, value=v) for l, v in QUALITY_OPTIONS],
                    ),
                ],
                actions=[ComponentAction(name="save-settings", type="submit", endpoint=endpoint)],
            )
        ]
    if not feature.endpoints:
        return []
    return [
        UIComponent(
            type="form",
            name=f"{feature.id}-form",
            fields=[FormField(name="input", type="text", label="Input", required=True)],
            actions=[ComponentAction(name="submit", type="submit", endpoint=endpoint)],
        )
    ]


class WordPressTransformer(PlatformTransformer):
    platform: PlatformKind = PlatformKind.WORDPRESS
    templates: TemplateRegistry = wordpress_templates.REGISTRY

    def transform(
        self, api: ParsedAPI, options: Optional[TransformOptions] = None
    ) -> PlatformTransformation:
        auth: AuthBinding = resolve_auth_binding(api)
        base_url: BaseUrlBinding = resolve_base_url(api)
        endpoints: List[APIEndpoint] = select_endpoints(api, options)
        intelligence: Optional[WordPressIntelligence] = (
            options.wordpress_intelligence if options is not None else None
        )

        if intelligence is not None:
            features: List[PlatformFeature] = self.map_intelligent_features(
                intelligence, options.selected_wordpress_features if options else None
            )
        else:
            features = self.map_features(api, auth, endpoints, custom_naming(options))

        translation_ids: List[str] = [e.id for e in endpoints if e.category == "translation"]
        method_names: Dict[str, str] = php_method_names(endpoints)
        actions: Dict[str, str] = ajax_actions(api, endpoints)

        code_files: List[CodeFile] = self.render_files(
            api, auth, base_url, endpoints, features, method_names, actions, translation_ids
        )
        configuration: Dict[str, Any] = self.build_configuration(
            endpoints, actions, auth, base_url, bool(translation_ids), intelligence
        )
        transformation: PlatformTransformation = PlatformTransformation(
            platform=self.platform,
            features=features,
            code_files=code_files,
            configuration=configuration,
            documentation=self.render_documentation(
                api, auth, base_url, endpoints, features, method_names, bool(translation_ids),
                intelligence,
            ),
        )
        logger.info(
            "WordPress bundle for %r: %d features, %d files%s",
            api.name,
            len(features),
            len(code_files),
            " (intelligent)" if intelligence is not None else "",
        )
        return transformation

    # -- features ------------------------------------------------------------

    @staticmethod
    def map_features(
        api: ParsedAPI,
        auth: AuthBinding,
        endpoints: List[APIEndpoint],
        naming: Dict[str, str],
    ) -> List[PlatformFeature]:
        return [settings_feature(api, auth)] + category_features(endpoints, CATEGORY_TABLE, naming)

    @staticmethod
    def map_intelligent_features(
        intelligence: WordPressIntelligence, selected: Optional[List[str]]
    ) -> List[PlatformFeature]:
        """
        Selected WordPress features in analysis order.  With no explicit
        selection the enabled features are used; required features are
        always kept.
        """
        if selected is None:
            wanted: set = {f.id for f in intelligence.wordpress_features if f.enabled}
        else:
            wanted = set(selected)
        known: set = {f.id for f in intelligence.wordpress_features}
        unknown: List[str] = [i for i in dedupe(selected or []) if i not in known]
        if unknown:
            logger.warning("Ignoring unknown WordPress feature ids: %s", ", ".join(unknown))

        return [
            PlatformFeature(
                name=f.name,
                description=f.description,
                api_endpoints=list(f.endpoints),
                implementation=implementation_for(f.wordpress_integration.type),
                user_interface=intelligent_ui(f),
            )
            for f in intelligence.wordpress_features
            if f.required or f.id in wanted
        ]

    # -- configuration -------------------------------------------------------

    @staticmethod
    def build_configuration(
        endpoints: List[APIEndpoint],
        actions: Dict[str, str],
        auth: AuthBinding,
        base_url: BaseUrlBinding,
        translating: bool,
        intelligence: Optional[WordPressIntelligence],
    ) -> Dict[str, Any]:
        configuration: Dict[str, Any] = {
            "phpVersion": PHP_VERSION,
            "wordpressVersion": WORDPRESS_VERSION,
            "requiredPlugins": [],
            "recommendedPlugins": list(TRANSLATION_PLUGINS) if translating else [],
            "permissions": {
                "manage_options": "Required for plugin settings",
                "edit_posts": "Required for running API actions",
                "edit_pages": "Required for page actions",
            },
            "hooks": {
                "activation": "Plugin activation and database setup",
                "deactivation": "Cleanup and unscheduling",
                "uninstall": "Complete data removal",
            },
            "endpoints": [
                {
                    "id": e.id,
                    "wordpressAction": f"wp_ajax_{actions[e.id]}",
                    "capability": "edit_posts",
                }
                for e in endpoints
            ],
            "auth": auth.to_config(),
            "baseUrl": base_url.to_config(),
        }
        if intelligence is not None:
            configuration["context"] = intelligence.wordpress_context.model_dump(by_alias=True)
            configuration["integrationStrategy"] = intelligence.integration_strategy.model_dump(
                by_alias=True
            )
            configuration["securityConsiderations"] = [
                s.model_dump(by_alias=True) for s in intelligence.security_considerations
            ]
        return configuration

    # -- files ---------------------------------------------------------------

    def render_files(
        self,
        api: ParsedAPI,
        auth: AuthBinding,
        base_url: BaseUrlBinding,
        endpoints: List[APIEndpoint],
        features: List[PlatformFeature],
        method_names: Dict[str, str],
        actions: Dict[str, str],
        translation_ids: List[str],
    ) -> List[CodeFile]:
        names: Dict[str, str] = {
            "prefix": to_php_prefix(api.name),
            "option": option_prefix(api),
            "slug": slugify(api.name),
            "const": to_php_prefix(api.name).upper(),
        }
        translating: bool = bool(translation_ids)
        pages: List[PlatformFeature] = [
            f for f in features if f.implementation == FeatureImplementation.ADMIN_UI.value
        ]
        page_slugs: List[str] = unique_names(slugify(f.name) for f in pages)

        files: List[CodeFile] = [
            self._php(
                f"{names['slug']}-integration.php",
                self.templates.render(
                    "wordpress.main_php",
                    plugin_name=_comment_text(f"{api.name} Integration"),
                    description=_comment_text(api.description or f"WordPress integration for {api.name}"),
                    version=_comment_text(api.version),
                    version_literal=php_string(api.version),
                    **names,
                ),
                CodeFileType.COMPONENT,
            ),
            self._php(
                "includes/class-api-service.php",
                self.render_api_service(
                    api, auth, base_url, endpoints, method_names, actions, translation_ids, names
                ),
                CodeFileType.API,
            ),
            self._php(
                "includes/class-admin.php",
                self.templates.render(
                    "wordpress.admin_php",
                    menu_title=php_string(api.name),
                    pages="\n".join(
                        f"        {php_string(names['slug'] if i == 0 else names['slug'] + '-' + s)} => "
                        f"array('title' => {php_string(f.name)}, 'file' => {php_string(s + '.php')}),"
                        for i, (f, s) in enumerate(zip(pages, page_slugs))
                    ),
                    translate_action=(
                        f"        add_action('wp_ajax_{names['option']}_translate_content', "
                        "array($this, 'ajax_translate_content'));"
                        if translating
                        else ""
                    ),
                    translate_handler=(
                        self.templates.render("wordpress.translate_handler", option=names["option"])
                        if translating
                        else ""
                    ),
                    **names,
                ),
                CodeFileType.COMPONENT,
            ),
            self._php(
                "includes/class-shortcodes.php",
                self.render_shortcodes(names, translating),
                CodeFileType.COMPONENT,
            ),
            self._php(
                "includes/class-widget.php",
                self.render_widget(api, names, translating),
                CodeFileType.COMPONENT,
            ),
        ]

        for feature, page_slug in zip(pages, page_slugs):
            files.append(
                self._php(
                    f"admin/pages/{page_slug}.php",
                    self.render_admin_page(api, auth, feature, names),
                    CodeFileType.COMPONENT,
                )
            )

        files.extend(
            [
                CodeFile(
                    path="assets/admin.css",
                    content=self.templates.render(
                        "wordpress.admin_css", api_name=api.name, slug=names["slug"]
                    ),
                    type=CodeFileType.STYLE,
                    language=CodeLanguage.CSS,
                ),
                CodeFile(
                    path="assets/admin.js",
                    content=self.templates.render(
                        "wordpress.admin_js",
                        api_name=api.name,
                        option=names["option"],
                        slug=names["slug"],
                    ),
                    type=CodeFileType.COMPONENT,
                    language=CodeLanguage.JAVASCRIPT,
                ),
                self._php(
                    "includes/class-activator.php",
                    self.templates.render(
                        "wordpress.activator_php",
                        prefix=names["prefix"],
                        option=names["option"],
                        base_url=php_string(base_url.url),
                        translation_table=(
                            self.templates.render(
                                "wordpress.translation_table", option=names["option"]
                            )
                            if translating
                            else ""
                        ),
                    ),
                    CodeFileType.CONFIG,
                ),
                self._php(
                    "uninstall.php",
                    self.templates.render(
                        "wordpress.uninstall_php",
                        api_name=_comment_text(api.name),
                        prefix=names["prefix"],
                        option=names["option"],
                        options="\n".join(
                            f"    '{names['option']}_{o}'," for o in _OPTION_SUFFIXES
                        ),
                        tables="\n".join(
                            f"    '{t}'," for t in database_tables(names["option"], translating)
                        ),
                    ),
                    CodeFileType.CONFIG,
                ),
            ]
        )
        return files

    @staticmethod
    def _php(path: str, content: str, file_type: CodeFileType) -> CodeFile:
        return CodeFile(path=path, content=content, type=file_type, language=CodeLanguage.PHP)

    def render_api_service(
        self,
        api: ParsedAPI,
        auth: AuthBinding,
        base_url: BaseUrlBinding,
        endpoints: List[APIEndpoint],
        method_names: Dict[str, str],
        actions: Dict[str, str],
        translation_ids: List[str],
        names: Dict[str, str],
    ) -> str:
        endpoint_map: List[str] = [
            f"        {php_string(e.id)} => array('method' => '{method_names[e.id]}', "
            f"'action' => '{actions[e.id]}', 'http' => '{e.method}'),"
            for e in endpoints
        ]
        probe: str = next(
            (e.path for e in endpoints if e.method == "GET" and "{" not in e.path), "/"
        )
        return self.templates.render(
            "wordpress.api_service_php",
            api_name=_comment_text(api.name),
            auth_summary=_comment_text(_auth_summary(auth)),
            prefix=names["prefix"],
            option=names["option"],
            base_url=php_string(base_url.url),
            auth_header=php_string(auth.header),
            auth_location=php_string(auth.location),
            auth_prefix=php_string(auth.prefix),
            endpoint_map="\n".join(endpoint_map),
            probe_path=php_string(probe),
            methods="\n".join(
                self.render_endpoint_method(e, method_names[e.id]) for e in endpoints
            ),
            translation_helpers=(
                self.templates.render(
                    "wordpress.translation_helpers",
                    option=names["option"],
                    endpoint_id=php_string(translation_ids[0]),
                )
                if translation_ids
                else ""
            ),
        )

    def render_endpoint_method(self, endpoint: APIEndpoint, method_name: str) -> str:
        pieces: List[str] = []
        for is_param, text in path_segments(endpoint.path):
            if is_param:
                pieces.append(f"$this->path_param($params, {php_string(text)})")
            else:
                pieces.append(php_string(text))
        query: List[str] = query_parameter_names(endpoint)
        query_expr: str = (
            "array_intersect_key($params, array_flip(array("
            + ", ".join(php_string(n) for n in query)
            + ")))"
            if query
            else "array()"
        )
        summary: str = next(
            iter((endpoint.description or endpoint.name).strip().splitlines()), endpoint.id
        )
        return self.templates.render(
            "wordpress.endpoint_method",
            summary=_comment_text(summary),
            http_method=endpoint.method,
            path=_comment_text(endpoint.path),
            method_name=method_name,
            path_expr=" . ".join(pieces) or "''",
            query_expr=query_expr,
        )

    def render_shortcodes(self, names: Dict[str, str], translating: bool) -> str:
        option: str = names["option"]
        registrations: str = ""
        shortcodes: str = ""
        if translating:
            registrations = "\n".join(
                [
                    f"        add_shortcode('{option}_translate', array($this, 'translate_shortcode'));",
                    f"        add_shortcode('{option}_language_switcher', "
                    "array($this, 'language_switcher_shortcode'));",
                ]
            )
            shortcodes = self.templates.render(
                "wordpress.translation_shortcodes",
                option=option,
                slug=names["slug"],
                languages="\n".join(
                    f"            {php_string(code)} => {php_string(label)},"
                    for code, label in SWITCHER_LANGUAGES
                ),
            )
        return self.templates.render(
            "wordpress.shortcodes_php",
            prefix=names["prefix"],
            option=option,
            slug=names["slug"],
            translation_registrations=registrations,
            translation_shortcodes=shortcodes,
        )

    def render_widget(self, api: ParsedAPI, names: Dict[str, str], translating: bool) -> str:
        types: List[Tuple[str, str]] = widget_types(translating)

        def options(first: int) -> str:
            ordered: List[Tuple[str, str]] = list(FORM_LANGUAGES[first:]) + list(
                FORM_LANGUAGES[:first]
            )
            return "\n".join(
                f'                    <option value="{code}">{label}</option>'
                for code, label in ordered
            )

        return self.templates.render(
            "wordpress.widget_php",
            prefix=names["prefix"],
            option=names["option"],
            widget_title=php_string(f"{api.name} Widget"),
            widget_description=php_string(f"Display {api.name} data on your site"),
            widget_types="\n".join(
                f"        {php_string(value)} => {php_string(label)}," for value, label in types
            ),
            default_type=types[0][0],
            widget_cases=(
                self.templates.render("wordpress.widget_translation_cases", option=names["option"])
                if translating
                else ""
            ),
            translate_form=(
                self.templates.render(
                    "wordpress.widget_translate_form",
                    slug=names["slug"],
                    source_options=options(0),
                    target_options=options(1),
                )
                if translating
                else ""
            ),
        )

    def render_admin_page(
        self,
        api: ParsedAPI,
        auth: AuthBinding,
        feature: PlatformFeature,
        names: Dict[str, str],
    ) -> str:
        common: Dict[str, str] = {
            "feature_name": _comment_text(feature.name),
            "feature_title": php_string(feature.name),
            "feature_description": php_string(feature.description),
            "prefix": names["prefix"],
            "option": names["option"],
            "slug": names["slug"],
        }
        if not feature.api_endpoints:
            return self.templates.render(
                "wordpress.settings_page_php",
                key_label=_html(f"{api.name} API Key"),
                auth_summary=_html(_auth_summary(auth)),
                **common,
            )

        forms: List[str] = []
        for component in feature.user_interface:
            endpoint_id: str = (
                component.actions[0].endpoint
                if component.actions and component.actions[0].endpoint
                else feature.api_endpoints[0]
            )
            label: str = component.actions[0].name if component.actions else "Run"
            forms.append(
                self.templates.render(
                    "wordpress.feature_form",
                    title=php_string(component.name),
                    option=names["option"],
                    endpoint_id=_html(endpoint_id),
                    fields="\n".join(self.render_form_field(f) for f in component.fields),
                    button_label=php_string(label),
                    button_class=(
                        "'delete'"
                        if component.actions and component.actions[0].type == "delete"
                        else "'primary'"
                    ),
                )
            )
        if not forms:
            forms.append(
                self.templates.render(
                    "wordpress.feature_form",
                    title=php_string(feature.name),
                    option=names["option"],
                    endpoint_id=_html(feature.api_endpoints[0]),
                    fields="",
                    button_label=php_string(f"Run {feature.name}"),
                    button_class="'primary'",
                )
            )
        return self.templates.render(
            "wordpress.feature_page_php",
            allowed_endpoints=", ".join(php_string(i) for i in feature.api_endpoints),
            forms="\n\n".join(forms),
            **common,
        )

    @staticmethod
    def render_form_field(field: FormField) -> str:
        """One ``form-table`` row; values are posted as ``params[name]``."""
        field_id: str = _html(sanitize_identifier(field.name))
        name: str = "body" if field.name == "body" else f"params[{_html(field.name)}]"
        label: str = _html(field.label)
        required: str = " required" if field.required else ""
        if field.type == "checkbox":
            control: str = f'<input type="checkbox" id="{field_id}" name="{name}" value="1"{required}>'
        elif field.type == "select":
            options: str = "".join(
                f'<option value="{_html(o.value)}">{_html(o.label)}</option>' for o in field.options
            )
            control = f'<select id="{field_id}" name="{name}"{required}>{options}</select>'
        elif field.type == "textarea":
            control = f'<textarea id="{field_id}" name="{name}" rows="5"{required}></textarea>'
        else:
            input_type: str = field.type if field.type in ("number", "password") else "text"
            control = (
                f'<input type="{input_type}" id="{field_id}" name="{name}" '
                f'class="regular-text"{required}>'
            )
        return indent(
            "\n".join(
                [
                    "<tr>",
                    f'    <th scope="row"><label for="{field_id}">{label}</label></th>',
                    f"    <td>{control}</td>",
                    "</tr>",
                ]
            ),
            level=4,
        )

    # -- documentation -------------------------------------------------------

    def render_documentation(
        self,
        api: ParsedAPI,
        auth: AuthBinding,
        base_url: BaseUrlBinding,
        endpoints: List[APIEndpoint],
        features: List[PlatformFeature],
        method_names: Dict[str, str],
        translating: bool,
        intelligence: Optional[WordPressIntelligence],
    ) -> str:
        slug: str = slugify(api.name)
        option: str = option_prefix(api)

        sections: List[str] = []
        for feature in features:
            sections.append("")
            sections.append(f"### {feature.name}")
            sections.append(feature.description)
            sections.append("")
            used: str = ", ".join(feature.api_endpoints) if feature.api_endpoints else "none"
            sections.append(f"**Available endpoints:** {used}")
            sections.append(f"**Implementation:** {feature.implementation}")
        sections.append("")

        shortcodes: List[str] = [
            "",
            "### Endpoint Data",
            "```",
            f'[{option}_data endpoint="<endpoint id>"]',
            "```",
            "",
            "Renders the JSON result of a GET endpoint. Results are cached for an hour "
            '(`cache="false"` disables it).',
        ]
        if translating:
            shortcodes.extend(
                [
                    "",
                    "### Translation Shortcode",
                    "```",
                    f'[{option}_translate text="Hello World" source="en" target="es"]',
                    "```",
                    "",
                    "**Parameters:**",
                    "- `text` (required): Text to translate",
                    "- `source` (optional): Source language code (default: en)",
                    "- `target` (optional): Target language code (default: es)",
                    "- `cache` (optional): Enable caching (default: true)",
                    "",
                    "### Language Switcher",
                    "```",
                    f'[{option}_language_switcher style="dropdown" show_flags="false"]',
                    "```",
                    "",
                    "**Parameters:**",
                    "- `style` (optional): 'dropdown' or 'list' (default: dropdown)",
                    "- `show_flags` (optional): Show country flags (default: false)",
                ]
            )
        shortcodes.append("")

        method_list: List[str] = []
        for endpoint in endpoints:
            method_list.append("")
            method_list.append(f"#### {endpoint.name or endpoint.id}")
            method_list.append(f"- **PHP method:** `{method_names[endpoint.id]}($params, $data)`")
            method_list.append(f"- **Method:** {endpoint.method}")
            method_list.append(f"- **Path:** {endpoint.path}")
            method_list.append(
                f"- **Description:** {endpoint.description or 'No description available'}"
            )
        if not method_list:
            method_list = ["", "No endpoints were selected."]

        extra_actions: List[str] = []
        extra_filters: List[str] = []
        if translating:
            extra_actions = [
                f"- `{option}_before_translation` - Fired before translation starts",
                f"- `{option}_after_translation` - Fired after translation completes",
                f"- `{option}_translation_failed` - Fired when translation fails",
            ]
            extra_filters = [
                f"- `{option}_translation_text` - Filter the text before translation",
                f"- `{option}_translated_result` - Filter the translation result",
                f"- `{option}_supported_languages` - Filter the list of supported languages",
            ]

        tables: List[str] = []
        for table in database_tables(option, translating):
            tables.append("")
            tables.append(f"### wp_{table}")
            tables.append(_TABLE_DESCRIPTIONS[table[len(option) + 1 :]])

        security: List[str] = []
        if intelligence is not None:
            security = [
                f"- **{s.type}** ({s.priority}): {s.description}"
                for s in intelligence.security_considerations
            ]

        notes: List[str] = []
        if auth.placeholder:
            notes.append(
                "> The API declares no authentication scheme; the Authorization/Bearer "
                "binding above is a placeholder."
            )
        if base_url.placeholder:
            notes.append(f"> `{base_url.url}` is a placeholder base URL.")

        return self.templates.render(
            "wordpress.documentation",
            api_name=api.name,
            description=api.description or f"WordPress integration for the {api.name} API.",
            slug=slug,
            menu_title=api.name,
            base_url=base_url.url,
            auth_summary=_auth_summary(auth),
            placeholder_note="\n" + "\n".join(notes) + "\n" if notes else "",
            feature_sections="\n".join(sections),
            shortcodes="\n".join(shortcodes),
            widget_list="\n".join(f"- {label}" for _, label in widget_types(translating)),
            method_list="\n".join(method_list),
            option=option,
            extra_actions="\n".join(extra_actions) + "\n" if extra_actions else "",
            extra_filters="\n".join(extra_filters) + "\n" if extra_filters else "",
            tables="\n".join(tables),
            security_list="\n".join(security),
        )


_OPTION_SUFFIXES: Tuple[str, ...] = (
    "api_key",
    "base_url",
    "enabled",
    "activated",
    "cache_enabled",
    "cache_duration",
    "rate_limit",
)

_TABLE_DESCRIPTIONS: Dict[str, str] = {
    "cache": "Stores cached API responses with an expiry date",
    "translations": "Stores translation history",
}


def database_tables(option: str, translating: bool) -> List[str]:
    tables: List[str] = [f"{option}_cache"]
    if translating:
        tables.append(f"{option}_translations")
    return tables


def widget_types(translating: bool) -> List[Tuple[str, str]]:
    types: List[Tuple[str, str]] = []
    if translating:
        types.extend([("language_switcher", "Language Switcher"), ("translate_form", "Translation Form")])
    types.append(("endpoint_data", "Endpoint Data"))
    return types


def _auth_summary(auth: AuthBinding) -> str:
    if auth.location == "header":
        return f"{auth.header}: {auth.prefix}<key>"
    return f"{auth.header} ({auth.location})"


def _comment_text(value: str) -> str:
    """First line of *value*, safe inside a PHP doc comment."""
    first: str = next(iter(value.strip().splitlines()), "")
    return first.replace("*/", "* /")


def _html(value: str) -> str:
    return html.escape(value, quote=True)


__all__: List[str] = [
    "WordPressTransformer",
    "CATEGORY_TABLE",
    "IMPLEMENTATION_MAP",
    "implementation_for",
    "option_prefix",
    "php_method_names",
    "intelligent_ui",
]

logger.debug("pluginforge.transformers.wordpress loaded.")
