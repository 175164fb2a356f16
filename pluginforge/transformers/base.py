# File: pluginforge/transformers/base.py
"""
NexaFlow PluginForge - Transformer Contract & Shared Bindings
==============================================================
Everything the platform transformers have in common:

    - ``PlatformTransformer``: the one ``transform(api, options)`` contract.
    - ``TransformerRegistry``: closed lookup keyed by ``PlatformKind`` that
      fails loudly with ``PlatformNotSupportedError``.
    - ``resolve_auth_binding`` / ``resolve_base_url``: how generated code
      authenticates and where it sends requests.  Substituted defaults are
      flagged ``placeholder=True`` and end up in the bundle configuration.
    - UI descriptors (``UIComponent``) built from endpoint parameters, which
      each platform renders as its own form scaffold.
    - Path-parameter and query-parameter bindings for generated clients.
"""

from __future__ import annotations

import abc
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from pluginforge.exceptions import PlatformNotSupportedError
from pluginforge.models import (
    APIEndpoint,
    AuthenticationMethod,
    AuthType,
    ComponentAction,
    EndpointParameter,
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
from pluginforge.templates import TemplateRegistry
from pluginforge.utils import to_constant_name

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.transformers.base")

DEEPL_BASE_URL: str = "https://api-free.deepl.com/v2"
PLACEHOLDER_BASE_URL: str = "https://api.example.com"
DEEPL_PREFIX: str = "DeepL-Auth-Key "
AUTHORIZATION: str = "Authorization"

PATH_PARAM_RE: re.Pattern[str] = re.compile(r"\{([^}/]+)\}")

_FIELD_TYPES: Dict[str, str] = {
    "integer": "number",
    "number": "number",
    "boolean": "checkbox",
    "object": "textarea",
    "array": "textarea",
}


# ---------------------------------------------------------------------------
# Auth & base URL bindings
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AuthBinding:
    """Where the credential travels and how it is prefixed."""

    header: str
    location: str = "header"
    prefix: str = ""
    placeholder: bool = False

    def to_config(self) -> Dict[str, Any]:
        return {
            "header": self.header,
            "location": self.location,
            "prefix": self.prefix,
            "placeholder": self.placeholder,
        }


@dataclass(frozen=True, slots=True)
class BaseUrlBinding:
    url: str
    placeholder: bool = False

    def to_config(self) -> Dict[str, Any]:
        return {"url": self.url, "placeholder": self.placeholder}


def is_deepl_like(api: ParsedAPI) -> bool:
    """DeepL-shaped APIs get DeepL's auth prefix and base URL by default."""
    if "deepl" in api.name.lower():
        return True
    return any("/translate" in e.path or "/usage" in e.path for e in api.endpoints)


def resolve_auth_binding(api: ParsedAPI) -> AuthBinding:
    """
    Binding for the first declared security scheme.

    ``apiKey`` keeps its declared name and location; ``http`` / ``bearer`` /
    ``oauth2`` / ``openIdConnect`` use ``Authorization``.  With nothing
    declared the binding is flagged as a placeholder: DeepL-like APIs get
    ``Authorization: DeepL-Auth-Key``, everything else ``Authorization: Bearer``.
    """
    deepl: bool = is_deepl_like(api)
    if not api.authentication:
        logger.warning("No authentication declared by %r; using a placeholder binding", api.name)
        return AuthBinding(
            header=AUTHORIZATION,
            prefix=DEEPL_PREFIX if deepl else "Bearer ",
            placeholder=True,
        )

    method: AuthenticationMethod = api.authentication[0]
    if method.type == AuthType.API_KEY.value:
        header: str = method.parameter_name or method.name or AUTHORIZATION
        prefix: str = DEEPL_PREFIX if deepl and header.lower() == "authorization" else ""
        return AuthBinding(
            header=header,
            location=method.location or "header",
            prefix=prefix,
        )
    if method.type == AuthType.HTTP.value and (method.scheme or "").lower() == "basic":
        return AuthBinding(header=AUTHORIZATION, prefix="Basic ")
    return AuthBinding(header=AUTHORIZATION, prefix="Bearer ")


def resolve_base_url(api: ParsedAPI) -> BaseUrlBinding:
    if api.base_url and api.base_url.startswith(("http://", "https://")):
        return BaseUrlBinding(url=api.base_url.rstrip("/"))
    logger.warning("No absolute base URL for %r; using a placeholder", api.name)
    if is_deepl_like(api):
        return BaseUrlBinding(url=DEEPL_BASE_URL, placeholder=True)
    return BaseUrlBinding(url=PLACEHOLDER_BASE_URL, placeholder=True)


def api_key_env_var(api: ParsedAPI) -> str:
    """``DeepL API`` → ``DEEPL_API_KEY``."""
    stem: str = to_constant_name(api.name)
    if stem.endswith("_API"):
        stem = stem[: -len("_API")]
    return f"{stem}_API_KEY"


# ---------------------------------------------------------------------------
# Endpoint selection & parameter binding
# ---------------------------------------------------------------------------


def select_endpoints(api: ParsedAPI, options: Optional[TransformOptions]) -> List[APIEndpoint]:
    """Focused endpoints in document order; all endpoints when no focus is set."""
    if options is None or not options.focused_endpoints:
        return list(api.endpoints)
    wanted: set = set(options.focused_endpoints)
    return [e for e in api.endpoints if e.id in wanted]


def custom_naming(options: Optional[TransformOptions]) -> Dict[str, str]:
    if options is None or options.user_choices is None:
        return {}
    return dict(options.user_choices.ui_preferences.custom_naming)


def endpoint_label(endpoint: APIEndpoint, naming: Dict[str, str]) -> str:
    return naming.get(endpoint.id) or endpoint.name


def path_segments(path: str) -> List[Tuple[bool, str]]:
    """
    Split a path template into ``(is_param, text)`` pieces.

    Example:
        >>> path_segments("/users/{id}/posts")
        [(False, '/users/'), (True, 'id'), (False, '/posts')]
    """
    pieces: List[Tuple[bool, str]] = []
    cursor: int = 0
    for match in PATH_PARAM_RE.finditer(path):
        if match.start() > cursor:
            pieces.append((False, path[cursor : match.start()]))
        pieces.append((True, match.group(1)))
        cursor = match.end()
    if cursor < len(path):
        pieces.append((False, path[cursor:]))
    return pieces


def query_parameter_names(endpoint: APIEndpoint) -> List[str]:
    return [p.name for p in endpoint.query_parameters]


# ---------------------------------------------------------------------------
# UI descriptors
# ---------------------------------------------------------------------------


def field_for_parameter(param: EndpointParameter) -> FormField:
    return FormField(
        name=param.name,
        type=_FIELD_TYPES.get(param.type, "text"),
        label=param.description or param.name,
        required=param.required,
    )


def endpoint_component(endpoint: APIEndpoint, label: str) -> UIComponent:
    """Form descriptor for one endpoint: one field per parameter, plus a body."""
    fields: List[FormField] = [
        field_for_parameter(p)
        for p in endpoint.parameters
        if p.location in ("path", "query")
    ]
    if endpoint.request_body is not None:
        fields.append(FormField(name="body", type="textarea", label="Request body (JSON)"))
    confirmation: Optional[str] = (
        f"Really call {label}?" if endpoint.method == "DELETE" else None
    )
    return UIComponent(
        type="form",
        name=label,
        fields=fields,
        actions=[
            ComponentAction(
                name=label,
                type="delete" if endpoint.method == "DELETE" else "submit",
                endpoint=endpoint.id,
                confirmation_message=confirmation,
            )
        ],
    )


def settings_component(api: ParsedAPI, auth: AuthBinding) -> UIComponent:
    return UIComponent(
        type="settings",
        name="API Settings",
        fields=[
            FormField(name="api_key", type="password", label=f"{api.name} API Key", required=True),
            FormField(name="base_url", type="text", label="API Base URL"),
            FormField(
                name="auth_location",
                type="select",
                label="Credential location",
                options=[FormFieldOption(label=auth.location, value=auth.location)],
            ),
        ],
        actions=[ComponentAction(name="Save Settings", type="submit")],
    )


def settings_feature(api: ParsedAPI, auth: AuthBinding) -> PlatformFeature:
    """The API settings feature every bundle starts with."""
    return PlatformFeature(
        name="API Settings",
        description=f"Configure {api.name} credentials and connection settings",
        api_endpoints=[],
        implementation=FeatureImplementation.ADMIN_UI,
        user_interface=[settings_component(api, auth)],
    )


def category_features(
    endpoints: Sequence[APIEndpoint],
    table: Sequence[Tuple[str, str, str, FeatureImplementation]],
    naming: Dict[str, str],
) -> List[PlatformFeature]:
    """
    One feature per ``(category, name, description, implementation)`` row
    whose first-pass category has endpoints, in table order.
    """
    features: List[PlatformFeature] = []
    for category, name, description, implementation in table:
        members: List[APIEndpoint] = [e for e in endpoints if e.category == category]
        if not members:
            continue
        features.append(
            PlatformFeature(
                name=name,
                description=description,
                api_endpoints=[e.id for e in members],
                implementation=implementation,
                user_interface=[endpoint_component(e, endpoint_label(e, naming)) for e in members],
            )
        )
    return features


# ---------------------------------------------------------------------------
# Contract & registry
# ---------------------------------------------------------------------------


class PlatformTransformer(abc.ABC):
    """Renders a ``PlatformTransformation`` for one platform kind."""

    platform: PlatformKind
    templates: TemplateRegistry

    @abc.abstractmethod
    def transform(
        self, api: ParsedAPI, options: Optional[TransformOptions] = None
    ) -> PlatformTransformation:
        """Produce the bundle; same inputs give byte-identical output."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} platform={self.platform.value}>"


class TransformerRegistry:
    """Closed platform → transformer lookup."""

    def __init__(self, transformers: Iterable[PlatformTransformer] = ()) -> None:
        self._transformers: Dict[str, PlatformTransformer] = {}
        for transformer in transformers:
            self.register(transformer)

    def register(self, transformer: PlatformTransformer) -> None:
        key: str = PlatformKind(transformer.platform).value
        self._transformers[key] = transformer
        logger.debug("Registered transformer for %s", key)

    def get(self, platform: str) -> PlatformTransformer:
        key: str = platform.value if isinstance(platform, PlatformKind) else str(platform)
        transformer: Optional[PlatformTransformer] = self._transformers.get(key)
        if transformer is None:
            raise PlatformNotSupportedError(key, self.platforms())
        return transformer

    def platforms(self) -> List[str]:
        return list(self._transformers)

    def supports(self, platform: str) -> bool:
        key: str = platform.value if isinstance(platform, PlatformKind) else str(platform)
        return key in self._transformers


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "DEEPL_BASE_URL",
    "PLACEHOLDER_BASE_URL",
    "PlatformKind",
    "AuthBinding",
    "BaseUrlBinding",
    "is_deepl_like",
    "resolve_auth_binding",
    "resolve_base_url",
    "api_key_env_var",
    "select_endpoints",
    "custom_naming",
    "endpoint_label",
    "path_segments",
    "query_parameter_names",
    "field_for_parameter",
    "endpoint_component",
    "settings_component",
    "settings_feature",
    "category_features",
    "PlatformTransformer",
    "TransformerRegistry",
]

logger.debug("pluginforge.transformers.base loaded — %d public symbols.", len(__all__))
