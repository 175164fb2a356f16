# File: pluginforge/intelligence.py
"""
NexaFlow PluginForge - Endpoint Classifier & Feature Synthesizer
=================================================================
Reads a ``ParsedAPI`` and answers three questions:

1. **What does each endpoint do?**  Keyword sets are tested against
   ``"{path} {name} {description}"`` (case-folded) in a fixed order:
   image processing, translation, authentication, document processing,
   user management, AI/ML.  First match wins; no match is "General API".
2. **What is the API for?**  Buckets are ranked by
   ``base_priority + min(2, count / 5)``, promoted to focus areas with
   ``confidence = min(0.9, priority / 10)``, and the top one picks the
   detected purpose from a fixed table.
3. **Which plugin features should be offered?**  A fixed template per
   primary category, plus a required "API Authentication" feature whenever
   authentication endpoints exist or auth is declared.

The keyword heuristic has a known accuracy ceiling: an endpoint such as
``/convert-locale`` lands wherever its words first match, and anything
without a listed keyword falls through to "General API".
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from pluginforge.models import (
    APIEndpoint,
    APIIntelligence,
    EndpointCategory,
    FeatureIntegration,
    FocusArea,
    IntegrationType,
    ParsedAPI,
    PluginFeature,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.intelligence")

# ---------------------------------------------------------------------------
# Taxonomy tables
# ---------------------------------------------------------------------------

IMAGE_PROCESSING: str = "Image Processing"
TRANSLATION: str = "Translation"
AUTHENTICATION: str = "Authentication"
DOCUMENT_PROCESSING: str = "Document Processing"
USER_MANAGEMENT: str = "User Management"
AI_ML_PROCESSING: str = "AI/ML Processing"
GENERAL_API: str = "General API"

# Order is precedence: an endpoint matching several sets takes the first.
CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (IMAGE_PROCESSING, ("upscal", "enhance", "resize", "image", "photo", "picture")),
    (TRANSLATION, ("translat", "language", "locale", "detect")),
    (AUTHENTICATION, ("auth", "login", "token", "key", "credential")),
    (DOCUMENT_PROCESSING, ("document", "pdf", "file", "convert", "parse")),
    (USER_MANAGEMENT, ("user", "account", "profile", "manage")),
    (AI_ML_PROCESSING, ("ai", "ml", "predict", "classify", "analyze")),
)

CATEGORY_DESCRIPTIONS: Dict[str, str] = {
    IMAGE_PROCESSING: "Endpoints for image enhancement, processing, and manipulation",
    TRANSLATION: "Language translation and localization services",
    AUTHENTICATION: "User authentication and authorization endpoints",
    DOCUMENT_PROCESSING: "Document conversion and processing capabilities",
    USER_MANAGEMENT: "User account and profile management",
    AI_ML_PROCESSING: "AI-powered analysis and processing services",
    GENERAL_API: "General purpose API endpoints",
}
DEFAULT_CATEGORY_DESCRIPTION: str = "API endpoints for various operations"

BASE_PRIORITY: Dict[str, float] = {
    IMAGE_PROCESSING: 9,
    TRANSLATION: 8,
    AI_ML_PROCESSING: 7,
    DOCUMENT_PROCESSING: 6,
    USER_MANAGEMENT: 5,
    AUTHENTICATION: 4,
    GENERAL_API: 3,
}

PURPOSES: Dict[str, str] = {
    IMAGE_PROCESSING: "Image Enhancement and Processing API",
    TRANSLATION: "Language Translation Service",
    AUTHENTICATION: "Authentication and Authorization Service",
    DOCUMENT_PROCESSING: "Document Processing and Conversion API",
    USER_MANAGEMENT: "User Management and Profile API",
    AI_ML_PROCESSING: "AI-Powered Analysis and Processing API",
}

NO_FOCUS_CONFIDENCE: float = 0.3
MAX_CONFIDENCE: float = 0.95
MAX_FOCUS_CONFIDENCE: float = 0.9
LARGE_API_THRESHOLD: int = 10


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def classify_text(text: str) -> str:
    """Category for free text, or "General API" when no keyword matches."""
    lowered: str = text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return GENERAL_API


def classify_endpoint(endpoint: APIEndpoint) -> str:
    return classify_text(f"{endpoint.path} {endpoint.name} {endpoint.description}")


def category_priority(category: str, endpoint_count: int) -> float:
    return BASE_PRIORITY.get(category, 3) + min(2.0, endpoint_count / 5)


def purpose_for_category(category: str, api_name: str) -> str:
    return PURPOSES.get(category, f"{api_name} Integration")


def category_for_purpose(purpose: str, fallback: str) -> str:
    """
    Reverse of the purpose table, used when the user overrides the detected
    purpose:

    1. exact (case-insensitive) purpose phrase,
    2. otherwise the first keyword set matching the text,
    3. otherwise *fallback*.
    """
    normalised: str = purpose.strip().lower()
    for category, phrase in PURPOSES.items():
        if phrase.lower() == normalised:
            return category
    matched: str = classify_text(normalised)
    if matched != GENERAL_API:
        return matched
    return fallback


def _feature(
    feature_id: str,
    name: str,
    description: str,
    required: bool,
    category: str,
    endpoints: List[str],
    integration: IntegrationType,
    integration_description: str,
) -> PluginFeature:
    return PluginFeature(
        id=feature_id,
        name=name,
        description=description,
        enabled=True,
        required=required,
        category=category,
        endpoints=list(endpoints),
        integration=FeatureIntegration(
            type=integration, description=integration_description
        ),
    )


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class IntelligenceEngine:
    """Stateless classifier + synthesizer.  Safe to share between sessions."""

    def analyze(self, api: ParsedAPI) -> APIIntelligence:
        categories: List[EndpointCategory] = self.categorize(api.endpoints)
        focus_areas: List[FocusArea] = self.focus_areas(categories)
        primary: str = focus_areas[0].name if focus_areas else GENERAL_API
        confidence: float = self.confidence(focus_areas, len(api.endpoints))

        intelligence: APIIntelligence = APIIntelligence(
            detected_purpose=purpose_for_category(primary, api.name),
            confidence=confidence,
            primary_category=primary,
            suggested_features=self.synthesize_features(api, primary, categories),
            endpoint_categories=categories,
            recommendations=self.recommendations(api, primary),
            focus_areas=focus_areas,
        )
        logger.info(
            "Analyzed %r: primary=%s confidence=%.3f features=%s",
            api.name,
            primary,
            confidence,
            intelligence.feature_ids,
        )
        return intelligence

    def regenerate_features(self, api: ParsedAPI, purpose: str) -> List[PluginFeature]:
        """Feature list for a user-supplied purpose (see ``category_for_purpose``)."""
        categories: List[EndpointCategory] = self.categorize(api.endpoints)
        focus_areas: List[FocusArea] = self.focus_areas(categories)
        detected: str = focus_areas[0].name if focus_areas else GENERAL_API
        category: str = category_for_purpose(purpose, detected)
        logger.debug("Purpose %r maps to category %s", purpose, category)
        return self.synthesize_features(api, category, categories)

    # -- classification ------------------------------------------------------

    def categorize(self, endpoints: List[APIEndpoint]) -> List[EndpointCategory]:
        buckets: Dict[str, List[APIEndpoint]] = {}
        for endpoint in endpoints:
            category: str = classify_endpoint(endpoint)
            logger.debug("Endpoint %s classified as %s", endpoint.id, category)
            buckets.setdefault(category, []).append(endpoint)

        categories: List[EndpointCategory] = [
            EndpointCategory(
                name=name,
                endpoints=members,
                description=CATEGORY_DESCRIPTIONS.get(name, DEFAULT_CATEGORY_DESCRIPTION),
                priority=category_priority(name, len(members)),
            )
            for name, members in buckets.items()
        ]
        return sorted(categories, key=lambda c: -c.priority)

    @staticmethod
    def focus_areas(categories: List[EndpointCategory]) -> List[FocusArea]:
        areas: List[FocusArea] = [
            FocusArea(
                name=c.name,
                description=c.description,
                confidence=min(MAX_FOCUS_CONFIDENCE, c.priority / 10),
                endpoints=c.endpoint_ids,
            )
            for c in categories
            if c.endpoints
        ]
        return sorted(areas, key=lambda a: -a.confidence)

    @staticmethod
    def confidence(focus_areas: List[FocusArea], endpoint_count: int) -> float:
        if not focus_areas or endpoint_count == 0:
            return NO_FOCUS_CONFIDENCE
        top: FocusArea = focus_areas[0]
        coverage: float = len(top.endpoints) / endpoint_count
        return min(MAX_CONFIDENCE, top.confidence * 0.6 + coverage * 0.4)

    # -- synthesis -----------------------------------------------------------

    def synthesize_features(
        self,
        api: ParsedAPI,
        primary_category: str,
        categories: List[EndpointCategory],
    ) -> List[PluginFeature]:
        features: List[PluginFeature]
        if primary_category == IMAGE_PROCESSING:
            image: List[str] = _bucket_ids(categories, IMAGE_PROCESSING)
            features = [
                _feature(
                    "process-selection",
                    "Process Selected Images",
                    "Apply image processing to the current selection",
                    True,
                    "Core Features",
                    image,
                    IntegrationType.SELECTION,
                    "Works with the selected image items",
                ),
                _feature(
                    "batch-processing",
                    "Batch Image Processing",
                    "Process multiple images at once with progress tracking",
                    False,
                    "Productivity",
                    image,
                    IntegrationType.BATCH,
                    "Processes multiple selected images with progress indicator",
                ),
                _feature(
                    "quality-settings",
                    "Processing Settings",
                    "Adjust processing parameters and preview results",
                    False,
                    "Configuration",
                    image,
                    IntegrationType.UI,
                    "Settings panel for processing options",
                ),
            ]
        elif primary_category == TRANSLATION:
            translation: List[str] = _bucket_ids(categories, TRANSLATION)
            features = [
                _feature(
                    "text-translation",
                    "Translate Selected Text",
                    "Translate the text of the current selection",
                    True,
                    "Core Features",
                    translation,
                    IntegrationType.SELECTION,
                    "Works with the selected text items",
                ),
                _feature(
                    "language-detection",
                    "Auto Language Detection",
                    "Automatically detect source language",
                    False,
                    "Smart Features",
                    translation,
                    IntegrationType.WORKFLOW,
                    "Enhances translation workflow with auto-detection",
                ),
            ]
        else:
            features = [
                _feature(
                    "api-integration",
                    "API Integration",
                    f"Connect the plugin with the {api.name} endpoints",
                    True,
                    "Core Features",
                    api.endpoint_ids,
                    IntegrationType.UI,
                    "General API integration interface",
                )
            ]

        auth_ids: List[str] = _bucket_ids(categories, AUTHENTICATION)
        if (auth_ids or api.authentication) and not any(
            f.id == "authentication" for f in features
        ):
            features.append(
                _feature(
                    "authentication",
                    "API Authentication",
                    "Manage API credentials and authentication",
                    True,
                    "Setup",
                    auth_ids,
                    IntegrationType.UI,
                    "Secure credential management interface",
                )
            )
        return features

    @staticmethod
    def recommendations(api: ParsedAPI, primary_category: str) -> List[str]:
        tips: List[str] = []
        if primary_category == IMAGE_PROCESSING:
            tips.extend(
                [
                    "Consider adding image format validation to ensure compatibility",
                    "Include progress indicators for processing operations",
                    "Add undo/redo functionality for processed images",
                ]
            )
        elif primary_category == TRANSLATION:
            tips.extend(
                [
                    "Include language auto-detection for better user experience",
                    "Add support for batch translation of multiple text layers",
                    "Consider caching translations to improve performance",
                ]
            )
        if api.authentication:
            tips.append("Implement secure API key storage and management")
        if len(api.endpoints) > LARGE_API_THRESHOLD:
            tips.append("Group endpoints by functionality for better organization")
        return tips


def _bucket_ids(categories: List[EndpointCategory], name: str) -> List[str]:
    for category in categories:
        if category.name == name:
            return category.endpoint_ids
    return []


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "IMAGE_PROCESSING",
    "TRANSLATION",
    "AUTHENTICATION",
    "DOCUMENT_PROCESSING",
    "USER_MANAGEMENT",
    "AI_ML_PROCESSING",
    "GENERAL_API",
    "CATEGORY_KEYWORDS",
    "CATEGORY_DESCRIPTIONS",
    "BASE_PRIORITY",
    "PURPOSES",
    "classify_text",
    "classify_endpoint",
    "category_priority",
    "purpose_for_category",
    "category_for_purpose",
    "IntelligenceEngine",
]

logger.debug("pluginforge.intelligence loaded — %d public symbols.", len(__all__))
