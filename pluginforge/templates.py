# File: pluginforge/templates.py
"""
NexaFlow PluginForge - Named Code Templates
============================================
Small, explicit templating layer used by every platform transformer.

Each ``NamedTemplate`` declares the exact set of substitution parameters it
accepts.  The declaration is checked against the placeholders found in the
template body when the template is created, and every render checks the
supplied values against the declaration:

    - a missing, extra or non-``str`` value raises ``TemplateRenderError``;
    - a template whose declared parameters differ from its placeholders
      raises ``TemplateDefinitionError`` at import time.

Placeholders use ``@@name`` / ``@@{name}`` so that ``$`` (PHP variables,
JavaScript template literals) passes through untouched.  ``@@@@`` renders
a literal ``@@``.

**Determinism contract:**
    - Templates are plain data; a render is a pure function of its values.
    - Callers assemble repeated sections with ``List[str]`` +
      ``"\\n".join()`` and pass the joined text in as one parameter.
"""

from __future__ import annotations

import logging
import string
from typing import Dict, FrozenSet, Iterable, List, Set

from pluginforge.exceptions import (
    TemplateDefinitionError,
    TemplateError,
    TemplateRenderError,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.templates")


class CodeTemplate(string.Template):
    """``string.Template`` with an ``@@`` delimiter."""

    delimiter = "@@"


def placeholders_of(source: str) -> Set[str]:
    """Names referenced by *source*; raises on a malformed placeholder."""
    found: Set[str] = set()
    for match in CodeTemplate.pattern.finditer(source):
        if match.group("invalid") is not None:
            line: int = source.count("\n", 0, match.start()) + 1
            raise TemplateDefinitionError(f"Malformed placeholder on line {line}")
        name: str = match.group("named") or match.group("braced")
        if name:
            found.add(name)
    return found


class NamedTemplate:
    """
    A template body plus its declared parameters.

    Example:
        >>> greeting = NamedTemplate("greeting", "Hello @@who", ["who"])
        >>> greeting.render(who="world")
        'Hello world'
    """

    __slots__ = ("name", "params", "_template")

    def __init__(self, name: str, source: str, params: Iterable[str]) -> None:
        self.name: str = name
        self.params: FrozenSet[str] = frozenset(params)
        found: Set[str] = placeholders_of(source)
        if found != self.params:
            undeclared: List[str] = sorted(found - self.params)
            unused: List[str] = sorted(self.params - found)
            raise TemplateDefinitionError(
                f"Template '{name}' parameters do not match its placeholders "
                f"(undeclared: {undeclared}, unused: {unused})"
            )
        self._template: CodeTemplate = CodeTemplate(source)

    def render(self, **values: str) -> str:
        supplied: Set[str] = set(values)
        missing: List[str] = sorted(self.params - supplied)
        if missing:
            raise TemplateRenderError(f"Template '{self.name}' is missing values for {missing}")
        extra: List[str] = sorted(supplied - self.params)
        if extra:
            raise TemplateRenderError(f"Template '{self.name}' got unexpected values {extra}")
        for key, value in values.items():
            if not isinstance(value, str):
                raise TemplateRenderError(
                    f"Template '{self.name}' value '{key}' must be str, "
                    f"got {type(value).__name__}"
                )
        logger.debug("Rendering template %s", self.name)
        return self._template.substitute(values)

    def __repr__(self) -> str:
        return f"<NamedTemplate {self.name} params={sorted(self.params)}>"


class TemplateRegistry:
    """Name → ``NamedTemplate`` lookup for one platform."""

    def __init__(self, templates: Iterable[NamedTemplate] = ()) -> None:
        self._templates: Dict[str, NamedTemplate] = {}
        for template in templates:
            self.register(template)

    def register(self, template: NamedTemplate) -> NamedTemplate:
        if template.name in self._templates:
            raise TemplateDefinitionError(f"Template already registered: {template.name}")
        self._templates[template.name] = template
        return template

    def get(self, name: str) -> NamedTemplate:
        try:
            return self._templates[name]
        except KeyError:
            raise TemplateError(f"Unknown template: {name}") from None

    def render(self, name: str, /, **values: str) -> str:
        return self.get(name).render(**values)

    def names(self) -> List[str]:
        return list(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "CodeTemplate",
    "placeholders_of",
    "NamedTemplate",
    "TemplateRegistry",
]

logger.debug("pluginforge.templates loaded.")
