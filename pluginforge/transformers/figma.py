# File: pluginforge/transformers/figma.py
"""
NexaFlow PluginForge - Figma Transformer
=========================================
Renders a ``figma-plugin/`` bundle: manifest, main-thread code, a UI with
a settings card and a generic endpoint runner, styles and a README.

The runner covers at most ``MAX_RUNNER_ENDPOINTS`` endpoints (the focused
ones when a session narrowed the selection).  An "Apply Translation to
Selection" feature is added when any path mentions translate/translation.
"""

from __future__ import annotations

import html
import logging
import re
from typing import Any, Dict, List, Optional

from pluginforge.models import (
    APIEndpoint,
    CodeFile,
    CodeFileType,
    CodeLanguage,
    FeatureImplementation,
    ParsedAPI,
    PlatformFeature,
    PlatformKind,
    PlatformTransformation,
    TransformOptions,
    UIComponent,
)
from pluginforge.transformers import figma_templates
from pluginforge.transformers.base import (
    AuthBinding,
    BaseUrlBinding,
    PlatformTransformer,
    custom_naming,
    endpoint_component,
    endpoint_label,
    query_parameter_names,
    resolve_auth_binding,
    resolve_base_url,
    select_endpoints,
    settings_feature,
)
from pluginforge.templates import TemplateRegistry
from pluginforge.utils import slugify, to_json, to_script_json

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.transformers.figma")

BUNDLE_DIR: str = "figma-plugin"
MAX_RUNNER_ENDPOINTS: int = 12
EDITOR_TYPES: List[str] = ["figma", "figjam"]

_TRANSLATE_RE: re.Pattern[str] = re.compile(r"translate|translation", re.IGNORECASE)
_INPUT_TYPES: Dict[str, str] = {"password": "password"}


class FigmaTransformer(PlatformTransformer):
    platform: PlatformKind = PlatformKind.FIGMA
    templates: TemplateRegistry = figma_templates.REGISTRY

    def transform(
        self, api: ParsedAPI, options: Optional[TransformOptions] = None
    ) -> PlatformTransformation:
        auth: AuthBinding = resolve_auth_binding(api)
        base_url: BaseUrlBinding = resolve_base_url(api)
        naming: Dict[str, str] = custom_naming(options)
        runner: List[APIEndpoint] = select_endpoints(api, options)[:MAX_RUNNER_ENDPOINTS]
        translating: List[APIEndpoint] = [
            e for e in select_endpoints(api, options) if _TRANSLATE_RE.search(e.path)
        ]

        features: List[PlatformFeature] = self.map_features(
            api, auth, runner, translating, naming
        )
        code_files: List[CodeFile] = self.render_files(
            api, auth, base_url, features, runner, bool(translating)
        )
        transformation: PlatformTransformation = PlatformTransformation(
            platform=self.platform,
            features=features,
            code_files=code_files,
            configuration={
                "editorType": list(EDITOR_TYPES),
                "auth": auth.to_config(),
                "baseUrl": base_url.to_config(),
                "declaredAuth": (
                    api.authentication[0].model_dump(by_alias=True, exclude_none=True)
                    if api.authentication
                    else None
                ),
            },
            documentation=self.render_documentation(api, features, auth, base_url),
        )
        logger.info(
            "Figma bundle for %r: %d features, %d files",
            api.name,
            len(features),
            len(code_files),
        )
        return transformation

    # -- features ------------------------------------------------------------

    @staticmethod
    def map_features(
        api: ParsedAPI,
        auth: AuthBinding,
        runner: List[APIEndpoint],
        translating: List[APIEndpoint],
        naming: Dict[str, str],
    ) -> List[PlatformFeature]:
        features: List[PlatformFeature] = [
            settings_feature(api, auth),
            PlatformFeature(
                name="Endpoint Runner",
                description="Browse endpoints and call them from the plugin UI",
                api_endpoints=[e.id for e in runner],
                implementation=FeatureImplementation.ADMIN_UI,
                user_interface=[endpoint_component(e, endpoint_label(e, naming)) for e in runner],
            ),
        ]
        if translating:
            features.append(
                PlatformFeature(
                    name="Apply Translation to Selection",
                    description="Apply API translation results to selected text nodes in Figma",
                    api_endpoints=[e.id for e in translating],
                    implementation=FeatureImplementation.ADMIN_UI,
                )
            )
        return features

    # -- files ---------------------------------------------------------------

    def render_files(
        self,
        api: ParsedAPI,
        auth: AuthBinding,
        base_url: BaseUrlBinding,
        features: List[PlatformFeature],
        runner: List[APIEndpoint],
        translating: bool,
    ) -> List[CodeFile]:
        manifest: Dict[str, Any] = {
            "name": f"{api.name} Figma Plugin",
            "id": f"{slugify(api.name)}-plugin",
            "api": "1.0.0",
            "main": "code.js",
            "ui": "ui.html",
            "editorType": list(EDITOR_TYPES),
            "networkAccess": {"allowedDomains": ["*"]},
        }
        components: Dict[str, UIComponent] = {
            c.actions[0].endpoint: c
            for c in features[1].user_interface
            if c.actions and c.actions[0].endpoint
        }
        endpoints_data: List[Dict[str, Any]] = [
            {
                "id": e.id,
                "label": components[e.id].name,
                "method": e.method,
                "path": e.path,
                "description": e.description,
                "queryParams": query_parameter_names(e),
                "fields": [
                    {"name": f.name, "type": f.type, "label": f.label, "required": f.required}
                    for f in components[e.id].fields
                ],
            }
            for e in runner
        ]
        defaults: Dict[str, Any] = {"baseUrl": base_url.url, "auth": auth.to_config()}

        settings: UIComponent = features[0].user_interface[0]
        settings_fields: str = "\n".join(
            self.templates.render(
                "figma.settings_field",
                label=html.escape(field.label),
                field_name=field.name,
                input_type=_INPUT_TYPES.get(field.type, "text"),
            )
            for field in settings.fields
            if field.name in ("api_key", "base_url")
        )

        ui_html: str = self.templates.render(
            "figma.ui_html",
            api_name=html.escape(api.name),
            description=html.escape(api.description or "Run your API directly from Figma"),
            settings_fields=settings_fields,
            apply_button=(
                '        <button id="apply" class="secondary">Apply to Selection</button>'
                if translating
                else ""
            ),
            endpoints_json=to_script_json(endpoints_data),
            defaults_json=to_script_json(defaults),
            apply_script=self.templates.render("figma.apply_script") if translating else "",
        )
        readme: str = self.templates.render(
            "figma.readme_md",
            api_name=api.name,
            base_url=base_url.url,
            apply_step=(
                '4. For translation endpoints, click "Apply to Selection" to write the '
                "result into the selected text nodes.\n"
                if translating
                else ""
            ),
            auth_header=auth.header,
            auth_location=auth.location,
            auth_prefix=auth.prefix,
        )

        return [
            CodeFile(
                path=f"{BUNDLE_DIR}/manifest.json",
                content=to_json(manifest) + "\n",
                type=CodeFileType.CONFIG,
                language=CodeLanguage.JSON,
            ),
            CodeFile(
                path=f"{BUNDLE_DIR}/code.js",
                content=self.templates.render("figma.code_js", api_name=api.name),
                type=CodeFileType.COMPONENT,
                language=CodeLanguage.JAVASCRIPT,
            ),
            CodeFile(
                path=f"{BUNDLE_DIR}/ui.html",
                content=ui_html,
                type=CodeFileType.COMPONENT,
                language=CodeLanguage.HTML,
            ),
            CodeFile(
                path=f"{BUNDLE_DIR}/styles.css",
                content=self.templates.render("figma.styles_css"),
                type=CodeFileType.STYLE,
                language=CodeLanguage.CSS,
            ),
            CodeFile(
                path=f"{BUNDLE_DIR}/README.md",
                content=readme,
                type=CodeFileType.DOCUMENTATION,
                language=CodeLanguage.MARKDOWN,
            ),
        ]

    # -- documentation -------------------------------------------------------

    def render_documentation(
        self,
        api: ParsedAPI,
        features: List[PlatformFeature],
        auth: AuthBinding,
        base_url: BaseUrlBinding,
    ) -> str:
        feature_list: str = "\n".join(f"- **{f.name}**: {f.description}" for f in features)
        sections: List[str] = []
        for feature in features:
            sections.append(f"### {feature.name}")
            sections.append("")
            sections.append(feature.description)
            if feature.api_endpoints:
                sections.append("")
                sections.append("Endpoints: " + ", ".join(f"`{i}`" for i in feature.api_endpoints))
            sections.append("")

        notes: List[str] = []
        if auth.placeholder:
            notes.append(
                f"> The API declares no authentication; `{auth.header}` with prefix "
                f'"{auth.prefix}" is a placeholder.'
            )
        if base_url.placeholder:
            notes.append(f"> `{base_url.url}` is a placeholder base URL; set the real one.")

        return self.templates.render(
            "figma.documentation",
            api_name=api.name,
            feature_list=feature_list,
            feature_sections="\n".join(sections),
            placeholder_note="\n".join(notes) + "\n" if notes else "",
        )


__all__: List[str] = ["FigmaTransformer", "MAX_RUNNER_ENDPOINTS"]

logger.debug("pluginforge.transformers.figma loaded.")
