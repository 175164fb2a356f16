# File: pluginforge/transformers/__init__.py
"""
NexaFlow PluginForge - Platform Transformers
=============================================
One transformer per supported platform, plus the shared contract and
bindings in ``base``.  ``default_registry()`` wires all three.
"""

from __future__ import annotations

from typing import List

from pluginforge.transformers.base import (
    AuthBinding,
    BaseUrlBinding,
    PlatformTransformer,
    TransformerRegistry,
    resolve_auth_binding,
    resolve_base_url,
)
from pluginforge.transformers.figma import FigmaTransformer
from pluginforge.transformers.shopify import ShopifyTransformer
from pluginforge.transformers.wordpress import WordPressTransformer


def default_registry() -> TransformerRegistry:
    """A fresh registry holding the Figma, WordPress and Shopify transformers."""
    return TransformerRegistry([FigmaTransformer(), WordPressTransformer(), ShopifyTransformer()])


__all__: List[str] = [
    "AuthBinding",
    "BaseUrlBinding",
    "PlatformTransformer",
    "TransformerRegistry",
    "resolve_auth_binding",
    "resolve_base_url",
    "FigmaTransformer",
    "ShopifyTransformer",
    "WordPressTransformer",
    "default_registry",
]
