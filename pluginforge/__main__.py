# File: pluginforge/__main__.py
"""
NexaFlow PluginForge — Module entry point.

Allows running the generator directly via::

    python -m pluginforge --spec openapi.yaml --platform figma --output ./out

This module simply delegates to the CLI entry point defined in ``pluginforge.cli``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from pluginforge.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
