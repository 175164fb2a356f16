# File: pluginforge/parser.py
"""
NexaFlow PluginForge - OpenAPI / Swagger Spec Parser
=====================================================
Turns a raw OpenAPI 3.x or Swagger 2 document (from a URL, an uploaded
file, or an already-decoded mapping) into the canonical, immutable
``ParsedAPI`` model.

Every document is fully dereferenced first: downstream stages assume no
``$ref`` survives.  Any failure (network, syntax, broken pointer, document
that is not OpenAPI at all) surfaces as a single ``SpecParseError`` carrying
the underlying cause; no partial ``ParsedAPI`` is ever returned.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Tuple, Union
from urllib.parse import unquote, urljoin, urlparse

import httpx
import yaml
from pydantic import ValidationError

from pluginforge.exceptions import SpecParseError
from pluginforge.models import (
    APIEndpoint,
    AuthenticationMethod,
    AuthType,
    EndpointParameter,
    ParameterLocation,
    ParsedAPI,
)
from pluginforge.utils import unique_names

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("pluginforge.parser")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

HTTP_METHODS: Tuple[str, ...] = ("get", "post", "put", "delete", "patch")

_NON_ALNUM_RE: re.Pattern[str] = re.compile(r"[^a-zA-Z0-9]")
_SERVER_VARIABLE_RE: re.Pattern[str] = re.compile(r"\{([^}]+)\}")
_PARAMETER_LOCATIONS: Set[str] = {loc.value for loc in ParameterLocation}

DEFAULT_TITLE: str = "Untitled API"
DEFAULT_VERSION: str = "1.0.0"


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def decode_document(
    text: str,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
) -> Any:
    """
    Decode JSON or YAML text.

    JSON is chosen when the content type says so, the name ends in
    ``.json``, or the text starts with ``{``; everything else is YAML.
    Syntax errors propagate as ``ValueError`` / ``yaml.YAMLError``.
    """
    if not text or not text.strip():
        raise ValueError("Document is empty.")

    name: str = (filename or "").lower()
    ctype: str = (content_type or "").lower()
    if "json" in ctype or name.endswith(".json") or text.lstrip().startswith("{"):
        return json.loads(text)
    return yaml.safe_load(text)


# ---------------------------------------------------------------------------
# $ref resolution
# ---------------------------------------------------------------------------


def _decode_pointer_token(token: str) -> str:
    return unquote(token).replace("~1", "/").replace("~0", "~")


def resolve_pointer(document: Any, fragment: str) -> Any:
    """
    Follow an RFC 6901 JSON pointer (the part after ``#``) inside *document*.

    Raises ``KeyError`` when the pointer does not resolve.
    """
    if fragment == "":
        return document
    if not fragment.startswith("/"):
        raise KeyError(f"Unsupported JSON pointer '#{fragment}'")

    node: Any = document
    for raw in fragment[1:].split("/"):
        token: str = _decode_pointer_token(raw)
        if isinstance(node, Mapping) and token in node:
            node = node[token]
        elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
            node = node[int(token)]
        else:
            raise KeyError(f"'#{fragment}' does not resolve (missing '{token}')")
    return node


class RefResolver:
    """
    Recursive ``$ref`` dereferencer.

    - Internal pointers resolve against the document that contains them.
    - External references (``common.yaml#/Pet``, absolute URLs) are loaded
      once through *loader* and cached by absolute location.
    - Keys next to a ``$ref`` are merged over the resolved target.
    - A reference that is already being expanded further up the tree is
      replaced by ``{"type": "object", "x-circular-ref": "<ref>"}``.
    """

    def __init__(
        self,
        loader: Optional[Callable[[str], Any]] = None,
        base_uri: Optional[str] = None,
        resolve_external: bool = True,
    ) -> None:
        self._loader: Optional[Callable[[str], Any]] = loader
        self._base_uri: str = base_uri or ""
        self._resolve_external: bool = resolve_external
        self._documents: Dict[str, Any] = {}
        self._cache: Dict[str, Any] = {}
        self._cycles: int = 0
        self.resolved_count: int = 0

    def resolve(self, document: Any) -> Any:
        self._documents[self._base_uri] = document
        return self._walk(document, self._base_uri, ())

    # -- internals -----------------------------------------------------------

    def _walk(self, node: Any, doc_uri: str, stack: Tuple[str, ...]) -> Any:
        if isinstance(node, Mapping):
            ref: Any = node.get("$ref")
            if isinstance(ref, str):
                resolved: Any = self._follow(ref, doc_uri, stack)
                siblings: Dict[str, Any] = {
                    k: self._walk(v, doc_uri, stack)
                    for k, v in node.items()
                    if k != "$ref"
                }
                if siblings and isinstance(resolved, Mapping):
                    return {**resolved, **siblings}
                return resolved
            return {k: self._walk(v, doc_uri, stack) for k, v in node.items()}
        if isinstance(node, list):
            return [self._walk(item, doc_uri, stack) for item in node]
        return node

    def _follow(self, ref: str, doc_uri: str, stack: Tuple[str, ...]) -> Any:
        location, _, fragment = ref.partition("#")
        target_uri: str = self._join(doc_uri, location) if location else doc_uri
        key: str = f"{target_uri}#{fragment}"

        if key in stack:
            self._cycles += 1
            logger.debug("Circular reference %s replaced by placeholder", ref)
            return {"type": "object", "x-circular-ref": ref}

        if key in self._cache:
            return self._cache[key]

        if location and not self._resolve_external:
            logger.warning("External reference %s left unresolved", ref)
            return {"type": "object", "x-external-ref": ref}

        if location and not doc_uri and not urlparse(location).scheme:
            raise SpecParseError(
                f"Cannot resolve relative reference '{ref}' without a base location"
            )

        document: Any = self._document(target_uri, ref)
        try:
            target: Any = resolve_pointer(document, fragment)
        except KeyError as exc:
            raise SpecParseError(
                f"Could not resolve reference '{ref}': {exc.args[0]}"
            ) from exc

        cycles_before: int = self._cycles
        result: Any = self._walk(target, target_uri, stack + (key,))
        if self._cycles == cycles_before:
            self._cache[key] = result
        self.resolved_count += 1
        logger.debug("Dereferenced %s", ref)
        return result

    def _document(self, uri: str, ref: str) -> Any:
        if uri in self._documents:
            return self._documents[uri]
        if self._loader is None:
            raise SpecParseError(
                f"No loader configured for external reference '{ref}'"
            )
        logger.debug("Loading external document %s", uri)
        document: Any = self._loader(uri)
        self._documents[uri] = document
        return document

    @staticmethod
    def _join(base: str, location: str) -> str:
        if urlparse(location).scheme in {"http", "https", "file"}:
            return location
        if urlparse(base).scheme in {"http", "https"}:
            return urljoin(base, location)
        if not base:
            return location
        return str((Path(base).parent / location).resolve())


# ---------------------------------------------------------------------------
# First-pass categorisation
# ---------------------------------------------------------------------------


def categorize_endpoint(method: str, path: str, tags: List[str]) -> str:
    """
    Coarse, parse-time category from tag 0 and path shape.

    Keyword tests are case-insensitive; REST-convention fallbacks use the
    real HTTP method.
    """
    tag: str = tags[0].lower() if tags else ""
    lowered: str = path.lower()
    segments: List[str] = [s for s in lowered.split("/") if s]
    verb: str = method.upper()

    if "auth" in tag or "auth" in lowered or "login" in lowered:
        return "authentication"
    if "user" in tag or "user" in lowered:
        return "user-management"
    if "translate" in tag or "translate" in lowered:
        return "translation"
    if "document" in tag or "document" in lowered:
        return "document-processing"
    if "language" in tag or "language" in lowered:
        return "language-support"
    if verb == "GET" and len(segments) == 1:
        return "listing"
    if verb == "POST" and len(segments) == 1:
        return "creation"
    if verb == "GET" and "{" in path:
        return "retrieval"
    if verb in {"PUT", "PATCH"}:
        return "modification"
    if verb == "DELETE":
        return "deletion"
    return "general"


def synthesize_endpoint_id(method: str, path: str) -> str:
    """``GET /users/{id}`` → ``get__users__id_``."""
    return f"{method.lower()}_{_NON_ALNUM_RE.sub('_', path)}"


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class SpecParser:
    """
    Parse OpenAPI 3.x / Swagger 2 documents into ``ParsedAPI``.

    Args:
        client: Optional ``httpx.Client`` used for every fetch (tests pass
            one built on ``httpx.MockTransport``).  Without one, a
            short-lived client is created per request.
        timeout: Seconds for each HTTP request.
        resolve_external_refs: When False, external ``$ref`` targets are
            replaced by an ``x-external-ref`` placeholder instead of fetched.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
        resolve_external_refs: bool = True,
    ) -> None:
        self._client: Optional[httpx.Client] = client
        self._timeout: float = timeout
        self._resolve_external_refs: bool = resolve_external_refs

    # -- public entry points -------------------------------------------------

    def parse_from_url(self, url: str) -> ParsedAPI:
        try:
            document: Any = self._fetch(url)
            return self.parse_document(document, base=url)
        except SpecParseError as exc:
            raise SpecParseError.from_url(exc.cause or str(exc)) from exc
        except (httpx.HTTPError, ValueError, yaml.YAMLError) as exc:
            raise SpecParseError.from_url(_describe(exc)) from exc

    def parse_from_file(
        self,
        filename: str,
        content: Union[str, bytes],
        base: Optional[str] = None,
    ) -> ParsedAPI:
        try:
            text: str = content.decode("utf-8") if isinstance(content, bytes) else content
            document: Any = decode_document(text, filename=filename)
            return self.parse_document(document, base=base)
        except SpecParseError as exc:
            raise SpecParseError.from_file(exc.cause or str(exc)) from exc
        except (ValueError, yaml.YAMLError) as exc:
            raise SpecParseError.from_file(_describe(exc)) from exc

    def parse_from_path(self, path: Path) -> ParsedAPI:
        path = Path(path)
        try:
            content: bytes = path.read_bytes()
        except OSError as exc:
            raise SpecParseError.from_file(str(exc)) from exc
        return self.parse_from_file(path.name, content, base=str(path.resolve()))

    def parse_document(
        self, document: Any, base: Optional[str] = None
    ) -> ParsedAPI:
        """Dereference and normalise an already-decoded document."""
        if not isinstance(document, Mapping):
            raise SpecParseError("Document top level must be a mapping")
        if "openapi" not in document and "swagger" not in document:
            raise SpecParseError(
                "Not an OpenAPI or Swagger document (no 'openapi'/'swagger' key)"
            )

        resolver: RefResolver = RefResolver(
            loader=self._load_external,
            base_uri=base,
            resolve_external=self._resolve_external_refs,
        )
        spec: Dict[str, Any] = resolver.resolve(document)
        logger.debug("Resolved %d references", resolver.resolved_count)

        try:
            api: ParsedAPI = self._build(spec, base)
        except ValidationError as exc:
            raise SpecParseError(str(exc), _describe(exc)) from exc

        logger.info(
            "Parsed %r v%s: %d endpoints, %d auth methods",
            api.name,
            api.version,
            len(api.endpoints),
            len(api.authentication),
        )
        return api

    # -- I/O -----------------------------------------------------------------

    def _fetch(self, url: str) -> Any:
        logger.debug("Fetching %s", url)
        if self._client is not None:
            response: httpx.Response = self._client.get(url, timeout=self._timeout)
        else:
            with httpx.Client(timeout=self._timeout, follow_redirects=True) as client:
                response = client.get(url)
        response.raise_for_status()
        return decode_document(
            response.text,
            filename=urlparse(url).path,
            content_type=response.headers.get("content-type"),
        )

    def _load_external(self, uri: str) -> Any:
        try:
            if urlparse(uri).scheme in {"http", "https"}:
                return self._fetch(uri)
            local: str = uri[len("file://"):] if uri.startswith("file://") else uri
            path: Path = Path(local)
            return decode_document(path.read_text(encoding="utf-8"), filename=path.name)
        except (httpx.HTTPError, OSError, ValueError, yaml.YAMLError) as exc:
            raise SpecParseError(
                f"Could not load external document '{uri}': {_describe(exc)}"
            ) from exc

    # -- normalisation -------------------------------------------------------

    def _build(self, spec: Mapping[str, Any], base: Optional[str]) -> ParsedAPI:
        info: Mapping[str, Any] = spec.get("info") or {}
        is_swagger: bool = "swagger" in spec and "openapi" not in spec

        components: Mapping[str, Any] = spec.get("components") or {}
        schemas: Any = spec.get("definitions") if is_swagger else components.get("schemas")
        schemes: Any = (
            spec.get("securityDefinitions") if is_swagger else components.get("securitySchemes")
        )

        endpoints: List[APIEndpoint] = self._parse_endpoints(spec, is_swagger)

        return ParsedAPI(
            name=str(info.get("title") or DEFAULT_TITLE),
            description=str(info.get("description") or ""),
            version=str(info.get("version") or DEFAULT_VERSION),
            base_url=self._base_url(spec, is_swagger, base),
            authentication=self._parse_authentication(schemes or {}),
            endpoints=endpoints,
            schemas=dict(schemas or {}),
            tags=self._extract_tags(endpoints),
        )

    def _parse_endpoints(
        self, spec: Mapping[str, Any], is_swagger: bool
    ) -> List[APIEndpoint]:
        paths: Any = spec.get("paths") or {}
        if not isinstance(paths, Mapping):
            raise SpecParseError("'paths' must be a mapping")

        raw: List[Dict[str, Any]] = []
        for path, path_item in paths.items():
            if not isinstance(path_item, Mapping):
                continue
            shared: List[Any] = list(path_item.get("parameters") or [])
            for method, operation in path_item.items():
                if str(method).lower() not in HTTP_METHODS or not isinstance(operation, Mapping):
                    continue
                raw.append(
                    self._endpoint_fields(
                        str(path), method, operation, shared, spec, is_swagger
                    )
                )

        ids: List[str] = unique_names(item["id"] for item in raw)
        endpoints: List[APIEndpoint] = []
        for item, endpoint_id in zip(raw, ids):
            if endpoint_id != item["id"]:
                logger.warning(
                    "Duplicate endpoint id %r renamed to %r", item["id"], endpoint_id
                )
                item["id"] = endpoint_id
            endpoints.append(APIEndpoint(**item))
        return endpoints

    def _endpoint_fields(
        self,
        path: str,
        method: str,
        operation: Mapping[str, Any],
        shared: List[Any],
        spec: Mapping[str, Any],
        is_swagger: bool,
    ) -> Dict[str, Any]:
        verb: str = method.upper()
        tags: List[str] = [str(t) for t in operation.get("tags") or []]
        summary: str = str(operation.get("summary") or "")

        merged: Dict[Tuple[str, str], Mapping[str, Any]] = {}
        for param in list(shared) + list(operation.get("parameters") or []):
            if isinstance(param, Mapping) and param.get("name") and param.get("in"):
                merged[(str(param["name"]), str(param["in"]))] = param

        parameters: List[EndpointParameter] = []
        body_params: List[Mapping[str, Any]] = []
        form_params: List[Mapping[str, Any]] = []
        for (name, location), param in merged.items():
            if location == "body":
                body_params.append(param)
            elif location == "formData":
                form_params.append(param)
            elif location in _PARAMETER_LOCATIONS:
                parameters.append(self._parse_parameter(name, location, param))

        request_body: Any = operation.get("requestBody")
        if is_swagger and (body_params or form_params):
            request_body = self._swagger_request_body(
                body_params, form_params, operation, spec
            )

        endpoint_id: str = str(operation.get("operationId") or "") or synthesize_endpoint_id(
            method, path
        )
        category: str = categorize_endpoint(verb, path, tags)
        logger.debug("Endpoint %s %s → id=%s category=%s", verb, path, endpoint_id, category)

        return {
            "id": endpoint_id,
            "name": summary or f"{verb} {path}",
            "method": verb,
            "path": path,
            "description": str(operation.get("description") or summary or ""),
            "parameters": parameters,
            "request_body": request_body,
            "responses": {str(k): v for k, v in (operation.get("responses") or {}).items()},
            "tags": tags,
            "category": category,
        }

    @staticmethod
    def _parse_parameter(
        name: str, location: str, param: Mapping[str, Any]
    ) -> EndpointParameter:
        schema: Mapping[str, Any] = param.get("schema") or {}
        declared: Any = schema.get("type") or param.get("type") or "string"
        if isinstance(declared, list):
            declared = next((t for t in declared if t != "null"), "string")
        example: Any = param.get("example")
        if example is None:
            example = schema.get("example")
        return EndpointParameter(
            name=name,
            type=str(declared),
            required=bool(param.get("required", False)),
            location=location,
            description=param.get("description"),
            example=example,
        )

    @staticmethod
    def _swagger_request_body(
        body_params: List[Mapping[str, Any]],
        form_params: List[Mapping[str, Any]],
        operation: Mapping[str, Any],
        spec: Mapping[str, Any],
    ) -> Dict[str, Any]:
        consumes: List[str] = list(operation.get("consumes") or spec.get("consumes") or [])
        if body_params:
            param: Mapping[str, Any] = body_params[0]
            media: str = next((c for c in consumes if "json" in c), "application/json")
            return {
                "required": bool(param.get("required", False)),
                "description": param.get("description"),
                "content": {media: {"schema": param.get("schema") or {}}},
            }

        has_file: bool = any(p.get("type") == "file" for p in form_params)
        media = "multipart/form-data" if has_file else "application/x-www-form-urlencoded"
        properties: Dict[str, Any] = {}
        required: List[str] = []
        for p in form_params:
            prop: Dict[str, Any] = {"type": p.get("type") or "string"}
            if p.get("type") == "file":
                prop = {"type": "string", "format": "binary"}
            if p.get("description"):
                prop["description"] = p["description"]
            properties[str(p["name"])] = prop
            if p.get("required"):
                required.append(str(p["name"]))
        schema: Dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        return {"required": bool(required), "content": {media: {"schema": schema}}}

    @staticmethod
    def _parse_authentication(schemes: Mapping[str, Any]) -> List[AuthenticationMethod]:
        methods: List[AuthenticationMethod] = []
        known: Set[str] = {t.value for t in AuthType}
        for key, scheme in schemes.items():
            if not isinstance(scheme, Mapping):
                continue
            kind: str = str(scheme.get("type") or "")
            http_scheme: Optional[str] = scheme.get("scheme")
            flows: Any = scheme.get("flows")

            if kind == "basic":
                kind, http_scheme = AuthType.HTTP.value, "basic"
            elif kind == "oauth2" and flows is None and scheme.get("flow"):
                flows = {
                    str(scheme["flow"]): {
                        k: scheme[k]
                        for k in ("authorizationUrl", "tokenUrl", "scopes")
                        if k in scheme
                    }
                }
            if kind not in known:
                logger.debug("Skipping unsupported security scheme %s (%s)", key, kind)
                continue

            location: Any = scheme.get("in")
            methods.append(
                AuthenticationMethod(
                    type=kind,
                    name=str(key),
                    parameter_name=scheme.get("name") if kind == AuthType.API_KEY.value else None,
                    location=location if location in _PARAMETER_LOCATIONS else None,
                    scheme=http_scheme,
                    bearer_format=scheme.get("bearerFormat"),
                    flows=flows,
                    description=scheme.get("description"),
                )
            )
        return methods

    @staticmethod
    def _base_url(
        spec: Mapping[str, Any], is_swagger: bool, base: Optional[str]
    ) -> Optional[str]:
        url: Optional[str] = None
        if is_swagger:
            host: Optional[str] = spec.get("host")
            base_path: str = str(spec.get("basePath") or "")
            if host:
                schemes: List[str] = list(spec.get("schemes") or ["https"])
                scheme: str = "https" if "https" in schemes else str(schemes[0])
                url = f"{scheme}://{host}{base_path}"
            elif base_path:
                url = base_path
        else:
            servers: Any = spec.get("servers") or []
            if servers and isinstance(servers[0], Mapping) and servers[0].get("url"):
                server: Mapping[str, Any] = servers[0]
                variables: Mapping[str, Any] = server.get("variables") or {}
                url = _SERVER_VARIABLE_RE.sub(
                    lambda m: str((variables.get(m.group(1)) or {}).get("default", m.group(0))),
                    str(server["url"]),
                )

        if url and base and urlparse(base).scheme in {"http", "https"}:
            if not urlparse(url).scheme:
                url = urljoin(base, url)
        if url and len(url) > 1:
            url = url.rstrip("/")
        return url

    @staticmethod
    def _extract_tags(endpoints: List[APIEndpoint]) -> List[str]:
        seen: Dict[str, None] = {}
        for endpoint in endpoints:
            for tag in endpoint.tags:
                seen.setdefault(tag, None)
        return list(seen)


def _describe(exc: BaseException) -> str:
    if isinstance(exc, SpecParseError) and exc.cause:
        return exc.cause
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code} fetching {exc.request.url}"
    message: str = str(exc).strip()
    return message or type(exc).__name__


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "HTTP_METHODS",
    "DEFAULT_TITLE",
    "DEFAULT_VERSION",
    "decode_document",
    "resolve_pointer",
    "RefResolver",
    "categorize_endpoint",
    "synthesize_endpoint_id",
    "SpecParser",
]

logger.debug("pluginforge.parser loaded — %d public symbols.", len(__all__))
