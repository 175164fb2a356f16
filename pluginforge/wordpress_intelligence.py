# File: pluginforge/wordpress_intelligence.py
"""
NexaFlow PluginForge - WordPress Intelligence
==============================================
A parallel, richer synthesizer used only by the WordPress transformer.

It buckets endpoints with its own WordPress-oriented vocabulary
(translation, image-processing, text-processing, data-management, general),
emits WordPress features carrying hook points, capabilities, version
requirements and complexity ratings, and describes the site context the
plugin will live in: use case, plugin type, WooCommerce and multisite
compatibility, performance impact, integration strategy and security
considerations.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from pluginforge.models import (
    APIEndpoint,
    EndpointCategory,
    FeatureIntegration,
    FocusArea,
    IntegrationStrategy,
    IntegrationType,
    ParsedAPI,
    PHPRequirements,
    Rating,
    SecurityConsideration,
    WordPressContext,
    WordPressFeature,
    WordPressIntegration,
    WordPressIntegrationType,
    WordPressIntelligence,
    WPCompatibility,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.wordpress_intelligence")

ADMIN_DASHBOARD_ID: str = "wp-admin-dashboard"
BASE_CONFIDENCE: float = 0.5
FOCUS_CONFIDENCE: float = 0.8

_HIGH_PRIORITY_BUCKETS: frozenset = frozenset({"translation", "image-processing"})

# (needles, use case, plugin type); first hit wins
_USE_CASES: tuple = (
    (("translate", "language"), "content-management", "content-enhancement"),
    (("image", "media", "upscale"), "media-processing", "media-tool"),
    (("user", "auth"), "user-management", "admin-tool"),
    (("product", "order", "payment"), "e-commerce", "integration"),
)

_STRATEGIES: Dict[str, tuple] = {
    "content-management": ("gutenberg-block", ["admin-page", "shortcode"]),
    "media-processing": ("media-library", ["admin-page", "cron-job"]),
    "user-management": ("admin-page", ["rest-endpoint"]),
    "e-commerce": ("admin-page", ["shortcode", "widget"]),
}


def bucket_for(endpoint: APIEndpoint) -> str:
    """WordPress-vocabulary bucket on lower-cased path and name."""
    path: str = endpoint.path.lower()
    name: str = endpoint.name.lower()
    if "translate" in path or "translate" in name:
        return "translation"
    if "image" in path or "upscale" in path or "image" in name:
        return "image-processing"
    if "text" in path or "text" in name:
        return "text-processing"
    if "data" in path or "data" in name:
        return "data-management"
    return "general"


def _wp_feature(
    feature_id: str,
    name: str,
    description: str,
    category: str,
    endpoints: List[str],
    integration: IntegrationType,
    integration_description: str,
    priority: Rating,
    complexity: Rating,
    benefit: str,
    wp_type: WordPressIntegrationType,
    hooks: List[str],
    capabilities: List[str],
    dependencies: List[str],
    min_wp: str,
    multisite: bool = True,
    extensions: Optional[List[str]] = None,
    placement: Optional[str] = None,
    trigger: Optional[str] = None,
    enabled: bool = False,
    required: bool = False,
) -> WordPressFeature:
    return WordPressFeature(
        id=feature_id,
        name=name,
        description=description,
        enabled=enabled,
        required=required,
        category=category,
        endpoints=endpoints,
        integration=FeatureIntegration(type=integration, description=integration_description),
        wordpress_integration=WordPressIntegration(
            type=wp_type,
            hook_points=hooks,
            capabilities=capabilities,
            dependencies=dependencies,
            placement=placement,
            trigger=trigger,
        ),
        wp_compatibility=WPCompatibility(min_version=min_wp, multisite=multisite),
        php_requirements=PHPRequirements(
            min_version="7.4",
            extensions=["curl", "json"] if extensions is None else extensions,
        ),
        priority=priority,
        estimated_complexity=complexity,
        user_benefit=benefit,
    )


class WordPressIntelligenceEngine:
    """Builds ``WordPressIntelligence`` for a parsed API."""

    def analyze(self, api: ParsedAPI) -> WordPressIntelligence:
        categories: List[EndpointCategory] = self.categorize(api.endpoints)
        context: WordPressContext = self.context(api)
        features: List[WordPressFeature] = [self._admin_dashboard(api)]
        for category in categories:
            features.extend(self._bucket_features(category, api))

        primary: str = categories[0].name if categories else "general"
        intelligence: WordPressIntelligence = WordPressIntelligence(
            detected_purpose=self.purpose(api, categories),
            confidence=self.confidence(api, categories),
            primary_category=primary,
            suggested_features=[],
            endpoint_categories=categories,
            recommendations=[],
            focus_areas=[
                FocusArea(
                    name=c.name,
                    description=c.description,
                    confidence=FOCUS_CONFIDENCE,
                    endpoints=c.endpoint_ids,
                )
                for c in categories
            ],
            wordpress_context=context,
            wordpress_features=features,
            integration_strategy=self.strategy(api, context),
            security_considerations=self.security(api),
        )
        logger.info(
            "WordPress analysis of %r: use case=%s, %d features",
            api.name,
            context.primary_use_case,
            len(features),
        )
        return intelligence

    # -- buckets -------------------------------------------------------------

    @staticmethod
    def categorize(endpoints: List[APIEndpoint]) -> List[EndpointCategory]:
        buckets: Dict[str, List[APIEndpoint]] = {}
        for endpoint in endpoints:
            buckets.setdefault(bucket_for(endpoint), []).append(endpoint)
        return [
            EndpointCategory(
                name=key[0].upper() + key[1:],
                endpoints=members,
                description=f"{key} related functionality",
                priority=1.0 if key in _HIGH_PRIORITY_BUCKETS else 0.5,
            )
            for key, members in buckets.items()
        ]

    def _bucket_features(
        self, category: EndpointCategory, api: ParsedAPI
    ) -> List[WordPressFeature]:
        key: str = category.name.lower()
        ids: List[str] = category.endpoint_ids

        if key == "translation":
            return [
                _wp_feature(
                    "wp-post-translation",
                    "Post & Page Translation",
                    "Translate WordPress posts and pages directly from the editor",
                    "translation",
                    [e.id for e in category.endpoints if "/translate" in e.path],
                    IntegrationType.UI,
                    "Gutenberg sidebar integration for content translation",
                    Rating.HIGH,
                    Rating.MEDIUM,
                    "Streamline multilingual content creation",
                    WordPressIntegrationType.GUTENBERG_BLOCK,
                    ["enqueue_block_editor_assets", "init"],
                    ["edit_posts", "edit_pages"],
                    ["gutenberg"],
                    "5.0",
                    placement="editor-sidebar",
                    trigger="translate-button",
                ),
                _wp_feature(
                    "wp-bulk-translation",
                    "Bulk Content Translation",
                    "Translate multiple posts, pages, and custom content in batches",
                    "translation",
                    ids,
                    IntegrationType.BATCH,
                    "Bulk processing interface for multiple content items",
                    Rating.HIGH,
                    Rating.HIGH,
                    "Efficiently localize large content volumes",
                    WordPressIntegrationType.ADMIN_PAGE,
                    ["admin_menu", "wp_ajax_bulk_translate"],
                    ["manage_options", "edit_posts"],
                    ["wp-cron"],
                    "4.9",
                    placement="tools-menu",
                ),
            ]

        if key == "image-processing":
            return [
                _wp_feature(
                    "wp-auto-image-enhancement",
                    "Automatic Image Enhancement",
                    "Automatically enhance images upon upload to media library",
                    "media",
                    [
                        e.id
                        for e in category.endpoints
                        if "/upscale" in e.path or "/enhance" in e.path
                    ],
                    IntegrationType.WORKFLOW,
                    "Automated image processing workflow",
                    Rating.HIGH,
                    Rating.MEDIUM,
                    "Improve image quality without manual intervention",
                    WordPressIntegrationType.MEDIA_LIBRARY,
                    ["wp_handle_upload", "add_attachment"],
                    ["upload_files"],
                    ["wp-cron"],
                    "4.7",
                    extensions=["curl", "json", "gd"],
                    trigger="automatic",
                ),
                _wp_feature(
                    "wp-bulk-image-processing",
                    "Bulk Image Processing",
                    "Process existing media library images in background batches",
                    "media",
                    ids,
                    IntegrationType.BATCH,
                    "Bulk image processing with progress tracking",
                    Rating.MEDIUM,
                    Rating.HIGH,
                    "Optimize entire media library efficiently",
                    WordPressIntegrationType.CRON_JOB,
                    ["wp_ajax_bulk_process_images", "wp_cron"],
                    ["manage_options"],
                    ["wp-cron"],
                    "4.7",
                    multisite=False,
                    extensions=["curl", "json", "gd"],
                    placement="media-menu",
                ),
            ]

        if key == "text-processing":
            return [
                _wp_feature(
                    "wp-content-enhancement",
                    "AI Content Enhancement",
                    "Enhance post content with AI processing and optimization",
                    "content",
                    ids,
                    IntegrationType.UI,
                    "Content enhancement from Gutenberg editor",
                    Rating.HIGH,
                    Rating.MEDIUM,
                    "Improve content quality and engagement",
                    WordPressIntegrationType.GUTENBERG_BLOCK,
                    ["enqueue_block_editor_assets", "wp_ajax_enhance_content"],
                    ["edit_posts"],
                    ["gutenberg"],
                    "5.0",
                    placement="gutenberg-sidebar",
                )
            ]

        if key == "data-management":
            return [
                _wp_feature(
                    "wp-data-sync",
                    "External Data Synchronization",
                    "Sync WordPress content with external API data sources",
                    "integration",
                    ids,
                    IntegrationType.WORKFLOW,
                    "Background data synchronization workflow",
                    Rating.MEDIUM,
                    Rating.HIGH,
                    "Keep content synchronized with external systems",
                    WordPressIntegrationType.CRON_JOB,
                    ["wp_cron", "admin_menu"],
                    ["manage_options"],
                    ["wp-cron"],
                    "4.9",
                    placement="tools-menu",
                )
            ]

        label: str = key[0].upper() + key[1:]
        return [
            _wp_feature(
                f"wp-{key}-integration",
                f"{label} Integration",
                f"WordPress integration for {api.name} {key} functionality",
                "integration",
                ids,
                IntegrationType.UI,
                f"Integration interface for {key} functionality",
                Rating.MEDIUM,
                Rating.MEDIUM,
                f"Access {api.name} {key} features from WordPress",
                WordPressIntegrationType.ADMIN_PAGE,
                ["admin_menu", f"wp_ajax_{key}"],
                ["manage_options"],
                [],
                "4.7",
                placement="main-menu",
            )
        ]

    @staticmethod
    def _admin_dashboard(api: ParsedAPI) -> WordPressFeature:
        return _wp_feature(
            ADMIN_DASHBOARD_ID,
            "Plugin Dashboard",
            f"Centralized dashboard for managing {api.name} integration settings and features",
            "admin",
            [],
            IntegrationType.UI,
            "Administrative dashboard interface",
            Rating.HIGH,
            Rating.LOW,
            "Unified control panel for all plugin features",
            WordPressIntegrationType.ADMIN_PAGE,
            ["admin_menu", "admin_init"],
            ["manage_options"],
            [],
            "4.7",
            extensions=[],
            placement="main-menu",
            enabled=True,
            required=True,
        )

    # -- context -------------------------------------------------------------

    @staticmethod
    def _pattern_text(api: ParsedAPI) -> str:
        return " ".join(f"{e.path.lower()} {e.name.lower()}" for e in api.endpoints)

    @staticmethod
    def performance_impact(api: ParsedAPI) -> Rating:
        if len(api.endpoints) > 10:
            return Rating.HIGH
        if any("/upload" in e.path or "/file" in e.path for e in api.endpoints):
            return Rating.HIGH
        if len(api.endpoints) > 5:
            return Rating.MEDIUM
        return Rating.LOW

    def context(self, api: ParsedAPI) -> WordPressContext:
        text: str = self._pattern_text(api)
        use_case: str = "external-integration"
        plugin_type: str = "utility"
        for needles, case, kind in _USE_CASES:
            if any(needle in text for needle in needles):
                use_case, plugin_type = case, kind
                break

        return WordPressContext(
            primary_use_case=use_case,
            suggested_plugin_type=plugin_type,
            woo_commerce_compatible=use_case == "e-commerce" or "product" in text,
            multisite_compatible="file" not in text and "upload" not in text,
            performance_impact=self.performance_impact(api),
        )

    @staticmethod
    def strategy(api: ParsedAPI, context: WordPressContext) -> IntegrationStrategy:
        primary, secondary = _STRATEGIES.get(context.primary_use_case, ("admin-page", []))
        return IntegrationStrategy(
            primary=primary,
            secondary=list(secondary),
            background_processing=context.performance_impact == Rating.HIGH.value
            or len(api.endpoints) > 5,
            caching=any(e.method == "GET" for e in api.endpoints),
            api_rate_limit=True,
        )

    @staticmethod
    def security(api: ParsedAPI) -> List[SecurityConsideration]:
        considerations: List[SecurityConsideration] = [
            SecurityConsideration(
                type="capability-check",
                description="Implement proper WordPress capability checks for all admin functions",
                implementation="current_user_can() checks before any admin operations",
            ),
            SecurityConsideration(
                type="nonce-verification",
                description="Use WordPress nonces for all AJAX requests and form submissions",
                implementation="wp_nonce_field() and wp_verify_nonce() for security",
            ),
            SecurityConsideration(
                type="data-validation",
                description="Sanitize and validate all user input and API responses",
                implementation="sanitize_text_field(), wp_kses(), and custom validation",
            ),
        ]
        if api.authentication:
            considerations.append(
                SecurityConsideration(
                    type="authentication",
                    description="Securely store and handle API credentials",
                    implementation="Use WordPress options API with proper encryption",
                )
            )
        return considerations

    @staticmethod
    def confidence(api: ParsedAPI, categories: List[EndpointCategory]) -> float:
        score: float = BASE_CONFIDENCE
        if len(api.description) > 10:
            score += 0.2
        if categories:
            score += 0.2
        if len(api.endpoints) > 3:
            score += 0.1
        return min(score, 0.95)

    @staticmethod
    def purpose(api: ParsedAPI, categories: List[EndpointCategory]) -> str:
        top: str = categories[0].name.lower() if categories else "general"
        name: str = api.name.lower()
        if "translation" in top or "translate" in name:
            return "Translation Service API"
        if "image" in top or "image" in name:
            return "Image Processing API"
        if "text" in top or "text" in name:
            return "Text Processing API"
        return f"{api.name} Integration"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ADMIN_DASHBOARD_ID",
    "bucket_for",
    "WordPressIntelligenceEngine",
]

logger.debug("pluginforge.wordpress_intelligence loaded.")
