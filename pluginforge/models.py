# File: pluginforge/models.py
"""
NexaFlow PluginForge - Core Data Models
========================================
Pydantic V2 models for every record that flows through the pipeline:
Spec Parsing → Intelligence → Interactive Session → Platform Transformation
→ Export.

All models serialise with camelCase aliases (``requestBody``,
``suggestedFeatures``...) so the HTTP service and the exported
``configuration.json`` speak the same dialect as browser collaborators,
while Python code keeps using snake_case attribute names.

The parsed API records (``ParsedAPI`` and everything below it) are frozen:
they are created once by the parser and only ever read downstream.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Set, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.models")

# ---------------------------------------------------------------------------
# Enums: fixed sets used across the project
# ---------------------------------------------------------------------------


class PlatformKind(str, Enum):
    """Closed set of target platforms a transformer can be registered for."""

    FIGMA = "figma"
    WORDPRESS = "wordpress"
    SHOPIFY = "shopify"


class ParameterLocation(str, Enum):
    """Where an operation parameter travels."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class AuthType(str, Enum):
    """Security scheme kinds understood by the pipeline."""

    API_KEY = "apiKey"
    OAUTH2 = "oauth2"
    HTTP = "http"
    BEARER = "bearer"
    OPENID_CONNECT = "openIdConnect"


class IntegrationType(str, Enum):
    """How a plugin feature attaches to the target platform."""

    SELECTION = "selection"
    CANVAS = "canvas"
    UI = "ui"
    BATCH = "batch"
    WORKFLOW = "workflow"


class SessionStatus(str, Enum):
    """Interactive session state machine positions, in forward order."""

    ANALYZING = "analyzing"
    CONFIRMING_PURPOSE = "confirming-purpose"
    SELECTING_FEATURES = "selecting-features"
    CONFIGURING = "configuring"
    READY = "ready"


class UIStyle(str, Enum):
    MINIMAL = "minimal"
    FULL_FEATURED = "full-featured"
    WORKFLOW_BASED = "workflow-based"


class AuthenticationStrategy(str, Enum):
    PLUGIN_MANAGED = "plugin-managed"
    USER_INPUT = "user-input"
    ENV_VARIABLE = "env-variable"


class ErrorHandlingMode(str, Enum):
    STRICT = "strict"
    GRACEFUL = "graceful"
    SILENT = "silent"


class WordPressIntegrationType(str, Enum):
    """WordPress surfaces a feature can hook into."""

    ADMIN_PAGE = "admin-page"
    MEDIA_LIBRARY = "media-library"
    GUTENBERG_BLOCK = "gutenberg-block"
    SHORTCODE = "shortcode"
    WIDGET = "widget"
    REST_ENDPOINT = "rest-endpoint"
    CRON_JOB = "cron-job"
    THEME_INTEGRATION = "theme-integration"
    EDITOR_PLUGIN = "editor-plugin"


class Rating(str, Enum):
    """Three-level scale used for priority, complexity and impact."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FeatureImplementation(str, Enum):
    """How a platform feature is realised in the generated bundle."""

    ADMIN_UI = "admin-ui"
    WEBHOOK = "webhook"
    API_INTEGRATION = "api-integration"
    THEME_EXTENSION = "theme-extension"
    BLOCK = "block"


class CodeFileType(str, Enum):
    COMPONENT = "component"
    CONFIG = "config"
    API = "api"
    SCHEMA = "schema"
    DOCUMENTATION = "documentation"
    STYLE = "style"


class CodeLanguage(str, Enum):
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    JSON = "json"
    YAML = "yaml"
    LIQUID = "liquid"
    PHP = "php"
    HTML = "html"
    CSS = "css"
    MARKDOWN = "markdown"
    TOML = "toml"
    PRISMA = "prisma"


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    use_enum_values=True,
    validate_default=True,
    frozen=False,
    extra="forbid",
    alias_generator=to_camel,
)

_FROZEN_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    use_enum_values=True,
    validate_default=True,
    frozen=True,
    extra="forbid",
    alias_generator=to_camel,
)


# ---------------------------------------------------------------------------
# Parsed API: immutable parser output
# ---------------------------------------------------------------------------


class EndpointParameter(BaseModel):
    """One declared operation parameter."""

    model_config = _FROZEN_CONFIG

    name: str = Field(..., min_length=1, description="Parameter name.")
    type: str = Field(default="string", description="Inferred JSON type.")
    required: bool = Field(default=False, description="Must the caller send it?")
    location: ParameterLocation = Field(..., description="query/header/path/cookie.")
    description: Optional[str] = Field(default=None, description="Free text.")
    example: Optional[Any] = Field(default=None, description="Example value.")

    def __repr__(self) -> str:
        flag: str = " required" if self.required else ""
        return f"<Param {self.location}:{self.name} {self.type}{flag}>"


class AuthenticationMethod(BaseModel):
    """A declared security scheme, carried verbatim."""

    model_config = _FROZEN_CONFIG

    type: AuthType = Field(..., description="Scheme kind.")
    name: Optional[str] = Field(
        default=None, description="Security scheme key in the document."
    )
    parameter_name: Optional[str] = Field(
        default=None,
        description="apiKey only: the header/query/cookie name the key travels in.",
    )
    location: Optional[ParameterLocation] = Field(
        default=None, description="apiKey location (header/query/cookie)."
    )
    scheme: Optional[str] = Field(
        default=None, description="HTTP auth scheme, e.g. 'bearer' or 'basic'."
    )
    bearer_format: Optional[str] = Field(default=None, description="e.g. 'JWT'.")
    flows: Optional[Dict[str, Any]] = Field(
        default=None, description="OAuth2 flow descriptors, passed through."
    )
    description: Optional[str] = Field(default=None, description="Free text.")

    def __repr__(self) -> str:
        return f"<Auth {self.type} {self.parameter_name or self.name or ''}>"


class APIEndpoint(BaseModel):
    """
    One operation of the parsed document.

    ``id`` is the stable key every downstream record (features, categories,
    focus areas) uses to refer back to the endpoint.
    """

    model_config = _FROZEN_CONFIG

    id: str = Field(..., min_length=1, description="Stable endpoint identifier.")
    name: str = Field(..., description="Human label, falls back to 'METHOD PATH'.")
    method: str = Field(..., description="Upper-cased HTTP verb.")
    path: str = Field(..., description="Path template, e.g. '/users/{id}'.")
    description: str = Field(default="", description="Operation description.")
    parameters: List[EndpointParameter] = Field(default_factory=list)
    request_body: Optional[Any] = Field(default=None, description="Opaque passthrough.")
    responses: Dict[str, Any] = Field(default_factory=dict)
    tags: List[str] = Field(default_factory=list)
    category: Optional[str] = Field(
        default=None, description="First-pass category assigned at parse time."
    )

    @field_validator("method")
    @classmethod
    def _upper_method(cls, v: str) -> str:
        return v.upper()

    @property
    def path_parameters(self) -> List[EndpointParameter]:
        return [p for p in self.parameters if p.location == ParameterLocation.PATH.value]

    @property
    def query_parameters(self) -> List[EndpointParameter]:
        return [p for p in self.parameters if p.location == ParameterLocation.QUERY.value]

    def __repr__(self) -> str:
        return f"<Endpoint {self.id} {self.method} {self.path}>"


class ParsedAPI(BaseModel):
    """
    Canonical representation of an input specification.

    Invariant: endpoint ids are unique within one document.
    """

    model_config = _FROZEN_CONFIG

    name: str = Field(..., description="info.title")
    description: str = Field(default="", description="info.description")
    version: str = Field(default="1.0.0", description="info.version")
    base_url: Optional[str] = Field(
        default=None, description="First server URL (or Swagger host/basePath)."
    )
    authentication: List[AuthenticationMethod] = Field(default_factory=list)
    endpoints: List[APIEndpoint] = Field(default_factory=list)
    schemas: Dict[str, Any] = Field(default_factory=dict)
    tags: List[str] = Field(default_factory=list)

    @field_validator("endpoints")
    @classmethod
    def _unique_endpoint_ids(cls, v: List[APIEndpoint]) -> List[APIEndpoint]:
        ids: List[str] = [e.id for e in v]
        if len(ids) != len(set(ids)):
            dupes: List[str] = sorted({x for x in ids if ids.count(x) > 1})
            raise ValueError(f"Duplicate endpoint ids detected: {dupes}")
        return v

    @property
    def endpoint_ids(self) -> List[str]:
        return [e.id for e in self.endpoints]

    def get_endpoint(self, endpoint_id: str) -> Optional[APIEndpoint]:
        for endpoint in self.endpoints:
            if endpoint.id == endpoint_id:
                return endpoint
        return None

    def __repr__(self) -> str:
        return (
            f"<ParsedAPI {self.name!r} v{self.version} "
            f"({len(self.endpoints)} endpoints, {len(self.authentication)} auth)>"
        )


# ---------------------------------------------------------------------------
# Intelligence: classifier and synthesizer output
# ---------------------------------------------------------------------------


class EndpointCategory(BaseModel):
    """A classifier bucket."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1)
    endpoints: List[APIEndpoint] = Field(default_factory=list)
    description: str = Field(default="")
    priority: float = Field(default=0.0, ge=0)

    @property
    def endpoint_ids(self) -> List[str]:
        return [e.id for e in self.endpoints]

    def __repr__(self) -> str:
        return f"<Category {self.name} ({len(self.endpoints)}) p={self.priority:.2f}>"


class FocusArea(BaseModel):
    """A category promoted to a user-facing, confidence-scored signal."""

    model_config = _SHARED_CONFIG

    name: str
    description: str = ""
    confidence: float = Field(..., ge=0.0, le=1.0)
    endpoints: List[str] = Field(default_factory=list)


class FeatureIntegration(BaseModel):
    """How a feature attaches to the host platform."""

    model_config = _SHARED_CONFIG

    type: IntegrationType
    description: str = ""


class PluginFeature(BaseModel):
    """A candidate feature offered to the user."""

    model_config = _SHARED_CONFIG

    id: str = Field(..., min_length=1, description="Stable slug.")
    name: str
    description: str = ""
    enabled: bool = Field(default=True, description="Recommended by default.")
    required: bool = Field(default=False, description="Cannot be deselected.")
    category: str = Field(default="", description="UI grouping label.")
    endpoints: List[str] = Field(default_factory=list)
    integration: FeatureIntegration

    def __repr__(self) -> str:
        flag: str = " required" if self.required else ""
        return f"<Feature {self.id}{flag} ({len(self.endpoints)} endpoints)>"


class APIIntelligence(BaseModel):
    """Classifier + synthesizer output for one API."""

    model_config = _SHARED_CONFIG

    detected_purpose: str
    confidence: float = Field(..., ge=0.0, le=0.95)
    primary_category: str
    suggested_features: List[PluginFeature] = Field(default_factory=list)
    endpoint_categories: List[EndpointCategory] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    focus_areas: List[FocusArea] = Field(default_factory=list)

    @property
    def feature_ids(self) -> List[str]:
        return [f.id for f in self.suggested_features]

    @property
    def required_feature_ids(self) -> List[str]:
        return [f.id for f in self.suggested_features if f.required]

    def get_feature(self, feature_id: str) -> Optional[PluginFeature]:
        for feature in self.suggested_features:
            if feature.id == feature_id:
                return feature
        return None

    def get_category(self, name: str) -> Optional[EndpointCategory]:
        for category in self.endpoint_categories:
            if category.name == name:
                return category
        return None


# ---------------------------------------------------------------------------
# WordPress intelligence
# ---------------------------------------------------------------------------


class WordPressIntegration(BaseModel):
    model_config = _SHARED_CONFIG

    type: WordPressIntegrationType
    hook_points: List[str] = Field(default_factory=list)
    capabilities: List[str] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    placement: Optional[str] = None
    trigger: Optional[str] = None


class WPCompatibility(BaseModel):
    model_config = _SHARED_CONFIG

    min_version: str
    max_version: Optional[str] = None
    multisite: bool = True


class PHPRequirements(BaseModel):
    model_config = _SHARED_CONFIG

    min_version: str = "7.4"
    extensions: List[str] = Field(default_factory=list)


class WordPressFeature(PluginFeature):
    """A plugin feature enriched with WordPress integration metadata."""

    wordpress_integration: WordPressIntegration
    wp_compatibility: WPCompatibility
    php_requirements: PHPRequirements
    priority: Rating = Rating.MEDIUM
    estimated_complexity: Rating = Rating.MEDIUM
    user_benefit: str = ""


class WordPressContext(BaseModel):
    model_config = _SHARED_CONFIG

    primary_use_case: str
    suggested_plugin_type: str
    woo_commerce_compatible: bool = False
    multisite_compatible: bool = True
    performance_impact: Rating = Rating.LOW


class IntegrationStrategy(BaseModel):
    model_config = _SHARED_CONFIG

    primary: WordPressIntegrationType
    secondary: List[WordPressIntegrationType] = Field(default_factory=list)
    background_processing: bool = False
    caching: bool = False
    api_rate_limit: bool = True


class SecurityConsideration(BaseModel):
    model_config = _SHARED_CONFIG

    type: str
    description: str
    implementation: str
    priority: Rating = Rating.HIGH


class WordPressIntelligence(APIIntelligence):
    """Base intelligence plus the WordPress-specific analysis."""

    wordpress_context: WordPressContext
    wordpress_features: List[WordPressFeature] = Field(default_factory=list)
    integration_strategy: IntegrationStrategy
    security_considerations: List[SecurityConsideration] = Field(default_factory=list)

    def get_wordpress_feature(self, feature_id: str) -> Optional[WordPressFeature]:
        for feature in self.wordpress_features:
            if feature.id == feature_id:
                return feature
        return None


# ---------------------------------------------------------------------------
# Interactive session
# ---------------------------------------------------------------------------


class UIPreferences(BaseModel):
    model_config = _SHARED_CONFIG

    style: UIStyle = UIStyle.FULL_FEATURED
    primary_endpoints: List[str] = Field(default_factory=list)
    custom_naming: Dict[str, str] = Field(
        default_factory=dict, description="Endpoint/feature id → display label."
    )


class AdvancedSettings(BaseModel):
    model_config = _SHARED_CONFIG

    authentication_strategy: AuthenticationStrategy = AuthenticationStrategy.PLUGIN_MANAGED
    error_handling: ErrorHandlingMode = ErrorHandlingMode.GRACEFUL
    performance_optimization: bool = True
    debug_mode: bool = False


class UserCustomization(BaseModel):
    """Everything the user has chosen so far in a session."""

    model_config = _SHARED_CONFIG

    confirmed_purpose: str = ""
    selected_features: List[str] = Field(default_factory=list)
    feature_customizations: Dict[str, Any] = Field(default_factory=dict)
    ui_preferences: UIPreferences = Field(default_factory=UIPreferences)
    advanced_settings: AdvancedSettings = Field(default_factory=AdvancedSettings)


class PrimaryAction(BaseModel):
    model_config = _SHARED_CONFIG

    id: str
    name: str
    description: str = ""


class CategorySummary(BaseModel):
    model_config = _SHARED_CONFIG

    name: str
    description: str = ""
    endpoints: int = Field(default=0, ge=0, description="Endpoint count.")


class UIConfiguration(BaseModel):
    model_config = _SHARED_CONFIG

    layout: UIStyle = UIStyle.FULL_FEATURED
    primary_actions: List[PrimaryAction] = Field(default_factory=list)
    categories: List[CategorySummary] = Field(default_factory=list)
    custom_naming: Optional[Dict[str, str]] = None


class CustomizedAPISpec(BaseModel):
    """Derived view of a session; recomputed whenever choices change."""

    model_config = _SHARED_CONFIG

    name: str
    description: str = ""
    focused_endpoints: List[str] = Field(default_factory=list)
    enabled_features: List[PluginFeature] = Field(default_factory=list)
    ui_configuration: UIConfiguration = Field(default_factory=UIConfiguration)


_STATUS_PROGRESS: Dict[str, float] = {
    SessionStatus.ANALYZING.value: 0.2,
    SessionStatus.CONFIRMING_PURPOSE.value: 0.4,
    SessionStatus.SELECTING_FEATURES.value: 0.6,
    SessionStatus.CONFIGURING.value: 0.8,
    SessionStatus.READY.value: 1.0,
}


class AnalysisSession(BaseModel):
    """
    Mutable per-interaction state, keyed by ``id``.

    ``original_api`` is never mutated; ``intelligence`` may be replaced when
    the user overrides the detected purpose.
    """

    model_config = _SHARED_CONFIG

    id: str = Field(..., min_length=1)
    original_api: ParsedAPI = Field(..., alias="originalAPI")
    intelligence: APIIntelligence
    user_choices: UserCustomization = Field(default_factory=UserCustomization)
    refined_spec: CustomizedAPISpec
    status: SessionStatus = SessionStatus.ANALYZING

    @model_validator(mode="before")
    @classmethod
    def _drop_progress(cls, data: Any) -> Any:
        # progress is derived from status; dumps carry it, inputs ignore it
        if isinstance(data, Mapping) and "progress" in data:
            return {k: v for k, v in data.items() if k != "progress"}
        return data

    @computed_field  # type: ignore[misc]
    @property
    def progress(self) -> float:
        return _STATUS_PROGRESS.get(self.status, 0.0)

    def can_proceed(self) -> bool:
        """Whether the current step has what it needs to move forward."""
        if self.status == SessionStatus.CONFIRMING_PURPOSE.value:
            return bool(self.user_choices.confirmed_purpose.strip())
        if self.status == SessionStatus.SELECTING_FEATURES.value:
            return len(self.user_choices.selected_features) > 0
        if self.status in {SessionStatus.CONFIGURING.value, SessionStatus.READY.value}:
            return True
        return False

    def __repr__(self) -> str:
        return f"<AnalysisSession {self.id} {self.status}>"


# ---------------------------------------------------------------------------
# Platform transformation output
# ---------------------------------------------------------------------------


class FormFieldOption(BaseModel):
    model_config = _FROZEN_CONFIG

    label: str
    value: str


class FormField(BaseModel):
    model_config = _FROZEN_CONFIG

    name: str
    type: str = Field(default="text", description="text/select/checkbox/textarea/number")
    label: str
    required: bool = False
    options: List[FormFieldOption] = Field(default_factory=list)


class ComponentAction(BaseModel):
    model_config = _FROZEN_CONFIG

    name: str
    type: str = Field(default="submit", description="submit/cancel/delete/edit")
    endpoint: Optional[str] = None
    confirmation_message: Optional[str] = None


class UIComponent(BaseModel):
    """Descriptor a transformer turns into a form/page scaffold."""

    model_config = _FROZEN_CONFIG

    type: str = Field(default="form", description="form/list/card/modal/settings")
    name: str
    fields: List[FormField] = Field(default_factory=list)
    actions: List[ComponentAction] = Field(default_factory=list)


class PlatformFeature(BaseModel):
    model_config = _FROZEN_CONFIG

    name: str
    description: str = ""
    api_endpoints: List[str] = Field(default_factory=list)
    implementation: FeatureImplementation = FeatureImplementation.ADMIN_UI
    user_interface: List[UIComponent] = Field(default_factory=list)


class CodeFile(BaseModel):
    model_config = _FROZEN_CONFIG

    path: str = Field(..., min_length=1, description="Relative file path.")
    content: str
    type: CodeFileType
    language: CodeLanguage

    def __repr__(self) -> str:
        return f"<CodeFile {self.path} ({len(self.content)} chars)>"


class PlatformTransformation(BaseModel):
    """Transformer output; immutable once produced."""

    model_config = _FROZEN_CONFIG

    platform: PlatformKind
    features: List[PlatformFeature] = Field(default_factory=list)
    code_files: List[CodeFile] = Field(default_factory=list)
    configuration: Dict[str, Any] = Field(default_factory=dict)
    documentation: str = ""

    @property
    def file_paths(self) -> List[str]:
        return [f.path for f in self.code_files]

    def get_file(self, path: str) -> Optional[CodeFile]:
        for code_file in self.code_files:
            if code_file.path == path:
                return code_file
        return None

    def __repr__(self) -> str:
        return (
            f"<PlatformTransformation {self.platform} "
            f"{len(self.features)} features, {len(self.code_files)} files>"
        )


class TransformOptions(BaseModel):
    """Optional session context handed to a transformer."""

    model_config = _SHARED_CONFIG

    user_choices: Optional[UserCustomization] = None
    intelligence: Optional[APIIntelligence] = None
    wordpress_intelligence: Optional[WordPressIntelligence] = None
    selected_wordpress_features: Optional[List[str]] = None
    focused_endpoints: Optional[List[str]] = None


# ---------------------------------------------------------------------------
# Run configuration
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """
    Options for one pipeline run (CLI or programmatic).

    Precedence, lowest first: defaults, ``--config`` file, CLI flags.
    """

    model_config = _SHARED_CONFIG

    platform: PlatformKind = Field(default=PlatformKind.WORDPRESS)
    purpose: Optional[str] = Field(
        default=None, description="Override for the detected purpose."
    )
    selected_features: Optional[List[str]] = Field(
        default=None, description="Feature ids; required features are always kept."
    )
    wordpress_features: Optional[List[str]] = Field(
        default=None, description="WordPress feature ids to include."
    )
    ui_style: UIStyle = Field(default=UIStyle.FULL_FEATURED)
    auth_strategy: AuthenticationStrategy = Field(
        default=AuthenticationStrategy.PLUGIN_MANAGED
    )
    error_handling: ErrorHandlingMode = Field(default=ErrorHandlingMode.GRACEFUL)
    http_timeout: float = Field(default=30.0, gt=0, description="Seconds.")
    resolve_external_refs: bool = Field(default=True)
    clean_output: bool = Field(default=False)
    dry_run: bool = Field(default=False)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_M = TypeVar("_M", bound=BaseModel)


def merge_model(model: _M, updates: Mapping[str, Any]) -> _M:
    """
    Shallow-merge *updates* into a copy of *model* and re-validate.

    Keys may use either the attribute name or its camelCase alias.  Unknown
    keys and bad values raise ``pydantic.ValidationError``.
    """
    by_alias: Dict[str, str] = {}
    for field_name, info in type(model).model_fields.items():
        by_alias[field_name] = field_name
        if info.alias:
            by_alias[info.alias] = field_name
    merged: Dict[str, Any] = model.model_dump()
    for key, value in updates.items():
        merged[by_alias.get(key, key)] = value
    return type(model).model_validate(merged)


def ordered_union(groups: List[List[str]]) -> List[str]:
    """Order-preserving union of id lists."""
    seen: Set[str] = set()
    result: List[str] = []
    for group in groups:
        for item in group:
            if item not in seen:
                seen.add(item)
                result.append(item)
    return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "PlatformKind",
    "ParameterLocation",
    "AuthType",
    "IntegrationType",
    "SessionStatus",
    "UIStyle",
    "AuthenticationStrategy",
    "ErrorHandlingMode",
    "WordPressIntegrationType",
    "Rating",
    "FeatureImplementation",
    "CodeFileType",
    "CodeLanguage",
    "EndpointParameter",
    "AuthenticationMethod",
    "APIEndpoint",
    "ParsedAPI",
    "EndpointCategory",
    "FocusArea",
    "FeatureIntegration",
    "PluginFeature",
    "APIIntelligence",
    "WordPressIntegration",
    "WPCompatibility",
    "PHPRequirements",
    "WordPressFeature",
    "WordPressContext",
    "IntegrationStrategy",
    "SecurityConsideration",
    "WordPressIntelligence",
    "UIPreferences",
    "AdvancedSettings",
    "UserCustomization",
    "PrimaryAction",
    "CategorySummary",
    "UIConfiguration",
    "CustomizedAPISpec",
    "AnalysisSession",
    "FormFieldOption",
    "FormField",
    "ComponentAction",
    "UIComponent",
    "PlatformFeature",
    "CodeFile",
    "PlatformTransformation",
    "TransformOptions",
    "GenerationConfig",
    "merge_model",
    "ordered_union",
]

logger.debug("pluginforge.models loaded — %d public symbols.", len(__all__))
