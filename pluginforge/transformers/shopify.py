# File: pluginforge/transformers/shopify.py
"""
NexaFlow PluginForge - Shopify Transformer
===========================================
Renders a Remix + Polaris Shopify app:

    shopify.app.toml
    package.json
    app/shopify.server.js
    app/db.server.js
    app/services/api-service.js        one method per endpoint
    app/routes/app.{feature}.jsx       one per admin-ui feature
    prisma/schema.prisma

Features start with "API Settings"; the rest come from the parse-time
endpoint categories (translation, language-support, document-processing,
authentication).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from pluginforge.models import (
    APIEndpoint,
    CodeFile,
    CodeFileType,
    CodeLanguage,
    FeatureImplementation,
    FormField,
    FormFieldOption,
    ParsedAPI,
    PlatformFeature,
    PlatformKind,
    PlatformTransformation,
    TransformOptions,
    UIComponent,
)
from pluginforge.transformers import shopify_templates
from pluginforge.transformers.base import (
    AuthBinding,
    BaseUrlBinding,
    PlatformTransformer,
    api_key_env_var,
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
    indent,
    js_string,
    slugify,
    to_camel_case,
    to_class_name,
    to_json,
    toml_string,
    unique_names,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.transformers.shopify")

API_VERSION: str = "2024-01"
BASE_SCOPES: List[str] = ["read_products", "write_products"]
TRANSLATION_SCOPES: List[str] = ["read_translations", "write_translations"]

_MONTHS: Tuple[str, ...] = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

# (first-pass category, feature name, description, implementation)
CATEGORY_TABLE: Tuple[Tuple[str, str, str, FeatureImplementation], ...] = (
    (
        "translation",
        "Product Translation",
        "Automatically translate product titles, descriptions, and metadata",
        FeatureImplementation.ADMIN_UI,
    ),
    (
        "language-support",
        "Language Management",
        "Manage supported languages and translation preferences",
        FeatureImplementation.ADMIN_UI,
    ),
    (
        "document-processing",
        "Bulk Translation",
        "Translate multiple products or pages in bulk",
        FeatureImplementation.ADMIN_UI,
    ),
    (
        "authentication",
        "API Authentication",
        "Manage API authentication and connection status",
        FeatureImplementation.ADMIN_UI,
    ),
)

LANGUAGE_OPTIONS: Tuple[Tuple[str, str], ...] = (
    ("English", "en"),
    ("Spanish", "es"),
    ("French", "fr"),
    ("German", "de"),
    ("Italian", "it"),
    ("Portuguese", "pt"),
    ("Dutch", "nl"),
    ("Japanese", "ja"),
    ("Chinese (Simplified)", "zh-CN"),
    ("Chinese (Traditional)", "zh-TW"),
)

PACKAGE_DEPENDENCIES: Dict[str, str] = {
    "@prisma/client": "^5.11.0",
    "@remix-run/node": "^2.0.0",
    "@remix-run/react": "^2.0.0",
    "@remix-run/serve": "^2.0.0",
    "@shopify/polaris": "^12.0.0",
    "@shopify/shopify-app-remix": "^2.0.0",
    "@shopify/shopify-app-session-storage-prisma": "^4.0.0",
    "isbot": "^3.6.8",
    "prisma": "^5.11.0",
    "react": "^18.2.0",
    "react-dom": "^18.2.0",
}

PACKAGE_DEV_DEPENDENCIES: Dict[str, str] = {
    "@remix-run/dev": "^2.0.0",
    "@shopify/app": "^3.0.0",
    "@types/react": "^18.2.0",
    "@types/react-dom": "^18.2.0",
    "typescript": "^5.0.0",
}


def api_version_constant(version: str) -> str:
    """``2024-01`` → ``January24`` (the ``ApiVersion`` enum member)."""
    year, month = version.split("-")
    return f"{_MONTHS[int(month) - 1]}{year[2:]}"


def auth_summary(auth: AuthBinding) -> str:
    if auth.location == "header":
        return f"`{auth.header}: {auth.prefix}<key>`"
    return f"`{auth.header}` ({auth.location})"


def _js_method_name(endpoint_id: str) -> str:
    name: str = to_camel_case(endpoint_id) or "callEndpoint"
    return f"call{name[0].upper()}{name[1:]}" if name[0].isdigit() else name


def _language_field(name: str, label: str) -> FormField:
    return FormField(
        name=name,
        type="select",
        label=label,
        required=True,
        options=[FormFieldOption(label=lbl, value=val) for lbl, val in LANGUAGE_OPTIONS],
    )


class ShopifyTransformer(PlatformTransformer):
    platform: PlatformKind = PlatformKind.SHOPIFY
    templates: TemplateRegistry = shopify_templates.REGISTRY

    def transform(
        self, api: ParsedAPI, options: Optional[TransformOptions] = None
    ) -> PlatformTransformation:
        auth: AuthBinding = resolve_auth_binding(api)
        base_url: BaseUrlBinding = resolve_base_url(api)
        endpoints: List[APIEndpoint] = select_endpoints(api, options)
        features: List[PlatformFeature] = self.map_features(
            api, auth, endpoints, custom_naming(options)
        )
        scopes: List[str] = self.required_scopes(endpoints)
        method_names: Dict[str, str] = self.method_names(endpoints)

        code_files: List[CodeFile] = self.render_files(
            api, auth, base_url, endpoints, features, scopes, method_names
        )
        transformation: PlatformTransformation = PlatformTransformation(
            platform=self.platform,
            features=features,
            code_files=code_files,
            configuration={
                "appName": f"{api.name} Integration",
                "requiredScopes": scopes,
                "webhooks": ["app/uninstalled"],
                "extensionPoints": ["admin_navigation"],
                "apiVersion": API_VERSION,
                "auth": auth.to_config(),
                "baseUrl": base_url.to_config(),
                "environment": api_key_env_var(api),
            },
            documentation=self.render_documentation(
                api, auth, base_url, endpoints, features, method_names
            ),
        )
        logger.info(
            "Shopify bundle for %r: %d features, %d files",
            api.name,
            len(features),
            len(code_files),
        )
        return transformation

    # -- mapping -------------------------------------------------------------

    @staticmethod
    def map_features(
        api: ParsedAPI,
        auth: AuthBinding,
        endpoints: List[APIEndpoint],
        naming: Dict[str, str],
    ) -> List[PlatformFeature]:
        features: List[PlatformFeature] = [settings_feature(api, auth)]
        for feature in category_features(endpoints, CATEGORY_TABLE, naming):
            if feature.name == "Product Translation":
                translate_form: UIComponent = UIComponent(
                    type="form",
                    name="product-translation",
                    fields=[
                        _language_field("sourceLanguage", "Source Language"),
                        _language_field("targetLanguages", "Target Languages"),
                        FormField(
                            name="includeDescriptions",
                            type="checkbox",
                            label="Include Product Descriptions",
                        ),
                    ],
                    actions=[],
                )
                feature = feature.model_copy(
                    update={"user_interface": [translate_form] + list(feature.user_interface)}
                )
            features.append(feature)
        return features

    @staticmethod
    def required_scopes(endpoints: List[APIEndpoint]) -> List[str]:
        scopes: List[str] = list(BASE_SCOPES)
        if any(e.category in ("translation", "language-support") for e in endpoints):
            scopes.extend(TRANSLATION_SCOPES)
        return scopes

    @staticmethod
    def method_names(endpoints: List[APIEndpoint]) -> Dict[str, str]:
        names: List[str] = unique_names(_js_method_name(e.id) for e in endpoints)
        return {e.id: name for e, name in zip(endpoints, names)}

    # -- rendering -----------------------------------------------------------

    def render_files(
        self,
        api: ParsedAPI,
        auth: AuthBinding,
        base_url: BaseUrlBinding,
        endpoints: List[APIEndpoint],
        features: List[PlatformFeature],
        scopes: List[str],
        method_names: Dict[str, str],
    ) -> List[CodeFile]:
        handle: str = slugify(api.name)
        class_name: str = to_class_name(api.name)
        settings_client: str = class_name[0].lower() + class_name[1:] + "Settings"

        package: Dict[str, Any] = {
            "name": f"{handle}-shopify-app",
            "version": "1.0.0",
            "private": True,
            "description": f"{api.description or api.name} - Shopify App Integration",
            "scripts": {
                "dev": "shopify app dev",
                "build": "remix build",
                "start": "remix-serve build",
                "deploy": "shopify app deploy",
                "setup": "prisma generate && prisma db push",
            },
            "dependencies": dict(PACKAGE_DEPENDENCIES),
            "devDependencies": dict(PACKAGE_DEV_DEPENDENCIES),
        }

        files: List[CodeFile] = [
            CodeFile(
                path="shopify.app.toml",
                content=self.templates.render(
                    "shopify.app_toml",
                    api_name=api.name,
                    app_name=toml_string(f"{handle}-integration"),
                    scopes=toml_string(",".join(scopes)),
                    api_version=toml_string(API_VERSION),
                ),
                type=CodeFileType.CONFIG,
                language=CodeLanguage.TOML,
            ),
            CodeFile(
                path="package.json",
                content=to_json(package) + "\n",
                type=CodeFileType.CONFIG,
                language=CodeLanguage.JSON,
            ),
            CodeFile(
                path="app/shopify.server.js",
                content=self.templates.render(
                    "shopify.server_js",
                    api_version=API_VERSION,
                    api_version_const=api_version_constant(API_VERSION),
                    scopes_json=to_json(scopes, indent_size=None),
                ),
                type=CodeFileType.API,
                language=CodeLanguage.JAVASCRIPT,
            ),
            CodeFile(
                path="app/db.server.js",
                content=self.templates.render("shopify.db_server_js"),
                type=CodeFileType.API,
                language=CodeLanguage.JAVASCRIPT,
            ),
            CodeFile(
                path="app/services/api-service.js",
                content=self.render_api_service(api, auth, base_url, endpoints, method_names),
                type=CodeFileType.API,
                language=CodeLanguage.JAVASCRIPT,
            ),
        ]

        for feature in features:
            if feature.implementation != FeatureImplementation.ADMIN_UI.value:
                continue
            if not feature.api_endpoints:
                content: str = self.templates.render(
                    "shopify.settings_route_jsx",
                    settings_client=settings_client,
                    base_url=js_string(base_url.url),
                    api_name=api.name,
                    key_label_json=to_json(f"{api.name} API Key"),
                    auth_summary=auth_summary(auth).replace("`", ""),
                )
            else:
                content = self.render_feature_route(feature, class_name, settings_client)
            files.append(
                CodeFile(
                    path=f"app/routes/app.{slugify(feature.name)}.jsx",
                    content=content,
                    type=CodeFileType.COMPONENT,
                    language=CodeLanguage.JAVASCRIPT,
                )
            )

        translating: bool = any(f.name == "Product Translation" for f in features)
        files.append(
            CodeFile(
                path="prisma/schema.prisma",
                content=self.templates.render(
                    "shopify.prisma_schema",
                    model_name=f"{class_name}Settings",
                    extra_models=(
                        self.templates.render("shopify.translation_job_model")
                        if translating
                        else ""
                    ),
                ),
                type=CodeFileType.SCHEMA,
                language=CodeLanguage.PRISMA,
            )
        )
        return files

    def render_api_service(
        self,
        api: ParsedAPI,
        auth: AuthBinding,
        base_url: BaseUrlBinding,
        endpoints: List[APIEndpoint],
        method_names: Dict[str, str],
    ) -> str:
        methods: List[str] = [
            self.render_endpoint_method(e, method_names[e.id]) for e in endpoints
        ]
        return self.templates.render(
            "shopify.api_service_js",
            api_name=api.name,
            auth_summary=auth_summary(auth).replace("`", ""),
            auth_json=to_json(auth.to_config()),
            base_url=js_string(base_url.url),
            class_name=to_class_name(api.name),
            env_var=api_key_env_var(api),
            methods="\n\n".join(methods),
            methods_json=to_json(method_names),
        )

    def render_endpoint_method(self, endpoint: APIEndpoint, method_name: str) -> str:
        pieces: List[str] = []
        for is_param, text in path_segments(endpoint.path):
            if is_param:
                pieces.append("${encodeURIComponent(params[" + js_string(text) + "])}")
            else:
                pieces.append(text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${"))
        names: List[str] = query_parameter_names(endpoint)
        query_block: str = (
            self.templates.render("shopify.query_block", names_json=to_json(names, indent_size=None))
            if names
            else "    const finalEndpoint = endpoint;"
        )
        summary: str = next(
            iter((endpoint.description or endpoint.name).strip().splitlines()), endpoint.id
        )
        return self.templates.render(
            "shopify.endpoint_method",
            summary=summary.replace("*/", "* /"),
            http_method=endpoint.method,
            path=endpoint.path.replace("*/", "* /"),
            method_name=method_name,
            path_expr="`" + "".join(pieces) + "`",
            query_block=query_block,
        )

    def render_feature_route(
        self, feature: PlatformFeature, class_name: str, settings_client: str
    ) -> str:
        forms: List[str] = []
        for component in feature.user_interface:
            endpoint_id: Optional[str] = component.actions[0].endpoint if component.actions else None
            if endpoint_id is None:
                endpoint_id = feature.api_endpoints[0]
            fields: List[str] = [self.render_field(f) for f in component.fields]
            forms.append(
                self.templates.render(
                    "shopify.feature_form_jsx",
                    title_json=to_json(component.name),
                    endpoint_json=to_json(endpoint_id),
                    fields=indent("\n".join(fields), level=9, size=2) if fields else "",
                    action_json=to_json(
                        component.actions[0].name if component.actions else f"Run {feature.name}"
                    ),
                )
            )
        return self.templates.render(
            "shopify.feature_route_jsx",
            class_name=class_name,
            feature_json=to_json(feature.model_dump(by_alias=True)),
            settings_client=settings_client,
            component_name=f"{to_class_name(feature.name)}Page",
            forms="\n".join(forms),
        )

    @staticmethod
    def render_field(field: FormField) -> str:
        label: str = to_json(field.label)
        name: str = to_json(field.name)
        if field.type == "select":
            options: str = to_json(
                [{"label": o.label, "value": o.value} for o in field.options], indent_size=None
            )
            return f"<Select label={{{label}}} name={{{name}}} options={{{options}}} />"
        if field.type == "checkbox":
            return f"<Checkbox label={{{label}}} name={{{name}}} />"
        extra: str = ""
        if field.type == "number":
            extra = ' type="number"'
        elif field.type == "password":
            extra = ' type="password"'
        elif field.type == "textarea":
            extra = " multiline={4}"
        required: str = " requiredIndicator" if field.required else ""
        return (
            f'<TextField label={{{label}}} name={{{name}}}{extra}{required} autoComplete="off" />'
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
    ) -> str:
        sections: List[str] = []
        usage: List[str] = []
        for feature in features:
            sections.append(f"### {feature.name}")
            sections.append(feature.description)
            sections.append("")
            sections.append(f"**Implementation:** {feature.implementation}")
            used: str = ", ".join(feature.api_endpoints) if feature.api_endpoints else "none"
            sections.append(f"**API Endpoints Used:** {used}")
            sections.append("")
            usage.append(f"### {feature.name}")
            usage.append(
                f"Navigate to the {feature.name} section in your Shopify admin "
                f"(`app/routes/app.{slugify(feature.name)}.jsx`) to use this feature."
            )
            usage.append("")

        method_list: List[str] = [
            f"- `{method_names[e.id]}(params, options)`: `{e.method} {e.path}`" for e in endpoints
        ] or ["- (no endpoints)"]

        notes: List[str] = []
        if auth.placeholder:
            notes.append(
                "> The API declares no authentication scheme; the Authorization/Bearer "
                "binding above is a placeholder."
            )
        if base_url.placeholder:
            notes.append(f"> `{base_url.url}` is a placeholder base URL.")

        return self.templates.render(
            "shopify.documentation",
            api_name=api.name,
            description=api.description or f"Shopify app for the {api.name} API.",
            feature_sections="\n".join(sections),
            env_var=api_key_env_var(api),
            base_url=base_url.url,
            auth_summary=auth_summary(auth),
            placeholder_note="\n".join(notes) + "\n" if notes else "",
            method_list="\n".join(method_list),
            usage_sections="\n".join(usage),
        )


__all__: List[str] = ["ShopifyTransformer", "API_VERSION", "CATEGORY_TABLE"]

logger.debug("pluginforge.transformers.shopify loaded.")
