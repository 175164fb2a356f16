"""
tests/conftest.py
Shared fixtures for the pluginforge test suite.

Documents are plain dicts; fixtures that need a file write them into
pytest's tmp_path with yaml.dump / json.dump.  Nothing here touches the
network: URL fetching is exercised through httpx.MockTransport.
"""

from __future__ import annotations

import copy
import json
import logging
import pathlib
from typing import Any, Callable, Dict

import httpx
import pytest
import yaml

from pluginforge.models import ParsedAPI
from pluginforge.parser import SpecParser
from pluginforge.sessions import InteractiveAnalyzer


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _restore_pluginforge_logger():
    """The CLI reconfigures the ``pluginforge`` logger; undo it after each test."""
    yield
    root = logging.getLogger("pluginforge")
    root.handlers.clear()
    root.propagate = True
    root.setLevel(logging.NOTSET)
    logging.disable(logging.NOTSET)


# ---------------------------------------------------------------------------
# Raw document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def deepl_doc() -> Dict[str, Any]:
    """One translation endpoint, no declared security."""
    return {
        "openapi": "3.0.3",
        "info": {
            "title": "DeepL API",
            "version": "2.0.0",
            "description": "Machine translation for text and documents",
        },
        "servers": [{"url": "https://api-free.deepl.com/v2"}],
        "paths": {
            "/translate": {
                "get": {
                    "operationId": "translateText",
                    "summary": "Translate text",
                    "tags": ["translation"],
                    "parameters": [
                        {
                            "name": "text",
                            "in": "query",
                            "required": True,
                            "schema": {"type": "string"},
                        },
                        {
                            "name": "target_lang",
                            "in": "query",
                            "required": True,
                            "schema": {"type": "string"},
                            "example": "DE",
                        },
                    ],
                    "responses": {"200": {"description": "Translated text"}},
                }
            }
        },
    }


@pytest.fixture()
def store_doc() -> Dict[str, Any]:
    """A login endpoint plus eight plain resource endpoints, apiKey security."""
    resources = [
        "items", "orders", "stores", "carts",
        "products", "invoices", "shipments", "coupons",
    ]
    paths: Dict[str, Any] = {
        "/auth/login": {
            "post": {
                "operationId": "login",
                "summary": "Log in",
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/Credentials"}
                        }
                    }
                },
                "responses": {"200": {"description": "Session token"}},
            }
        }
    }
    for name in resources:
        paths[f"/{name}"] = {
            "get": {"responses": {"200": {"description": f"All {name}"}}}
        }
    return {
        "openapi": "3.0.0",
        "info": {"title": "Store Service", "version": "3.1.0"},
        "servers": [{"url": "https://store.example.org/v1/"}],
        "components": {
            "schemas": {
                "Credentials": {
                    "type": "object",
                    "properties": {
                        "username": {"type": "string"},
                        "password": {"type": "string"},
                    },
                }
            },
            "securitySchemes": {
                "ApiKeyAuth": {"type": "apiKey", "in": "header", "name": "X-API-Key"}
            },
        },
        "paths": paths,
    }


@pytest.fixture()
def image_doc() -> Dict[str, Any]:
    """Image processing API with a path parameter and bearer auth."""
    return {
        "openapi": "3.0.0",
        "info": {"title": "Pixel Studio", "version": "1.2.0"},
        "servers": [{"url": "https://pixels.example.com"}],
        "components": {
            "securitySchemes": {"bearer": {"type": "http", "scheme": "bearer"}}
        },
        "paths": {
            "/upscale": {
                "post": {
                    "operationId": "upscaleImage",
                    "summary": "Upscale an image",
                    "requestBody": {
                        "content": {"application/json": {"schema": {"type": "object"}}}
                    },
                    "responses": {"200": {"description": "Upscaled"}},
                }
            },
            "/images/{imageId}": {
                "parameters": [
                    {
                        "name": "imageId",
                        "in": "path",
                        "required": True,
                        "schema": {"type": "string"},
                    }
                ],
                "get": {
                    "operationId": "getImage",
                    "summary": "Fetch an image",
                    "responses": {"200": {"description": "The image"}},
                },
                "delete": {
                    "operationId": "deleteImage",
                    "summary": "Remove an image",
                    "responses": {"204": {"description": "Gone"}},
                },
            },
        },
    }


@pytest.fixture()
def swagger_doc() -> Dict[str, Any]:
    """Swagger 2.0 document with a body parameter and basic auth."""
    return {
        "swagger": "2.0",
        "info": {"title": "Legacy Pets", "version": "0.9"},
        "host": "pets.example.com",
        "basePath": "/api",
        "schemes": ["http", "https"],
        "securityDefinitions": {"basicAuth": {"type": "basic"}},
        "definitions": {
            "Pet": {
                "type": "object",
                "properties": {"name": {"type": "string"}},
            }
        },
        "paths": {
            "/pets": {
                "post": {
                    "operationId": "createPet",
                    "consumes": ["application/json"],
                    "parameters": [
                        {
                            "name": "pet",
                            "in": "body",
                            "required": True,
                            "schema": {"$ref": "#/definitions/Pet"},
                        }
                    ],
                    "responses": {"201": {"description": "Created"}},
                },
                "get": {
                    "parameters": [
                        {"name": "limit", "in": "query", "type": "integer"}
                    ],
                    "responses": {"200": {"description": "Pets"}},
                },
            }
        },
    }


@pytest.fixture()
def circular_doc() -> Dict[str, Any]:
    """A schema that refers to itself through a child property."""
    return {
        "openapi": "3.0.0",
        "info": {"title": "Tree API", "version": "1.0.0"},
        "components": {
            "schemas": {
                "Node": {
                    "type": "object",
                    "properties": {
                        "label": {"type": "string"},
                        "child": {"$ref": "#/components/schemas/Node"},
                    },
                }
            }
        },
        "paths": {
            "/nodes": {
                "get": {
                    "responses": {
                        "200": {
                            "description": "Root node",
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/Node"}
                                }
                            },
                        }
                    }
                }
            }
        },
    }


# ---------------------------------------------------------------------------
# Files on disk
# ---------------------------------------------------------------------------


def write_yaml(directory: pathlib.Path, name: str, data: Any) -> pathlib.Path:
    path = directory / name
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(data, fh, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return path


def write_json(directory: pathlib.Path, name: str, data: Any) -> pathlib.Path:
    path = directory / name
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=2)
    return path


@pytest.fixture()
def deepl_yaml_path(deepl_doc: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    return write_yaml(tmp_path, "deepl.yaml", deepl_doc)


@pytest.fixture()
def store_json_path(store_doc: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    return write_json(tmp_path, "store.json", store_doc)


@pytest.fixture()
def image_yaml_path(image_doc: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    return write_yaml(tmp_path, "pixels.yml", image_doc)


# ---------------------------------------------------------------------------
# Parsed APIs
# ---------------------------------------------------------------------------


@pytest.fixture()
def parser() -> SpecParser:
    return SpecParser()


@pytest.fixture()
def deepl_api(parser: SpecParser, deepl_doc: Dict[str, Any]) -> ParsedAPI:
    return parser.parse_document(copy.deepcopy(deepl_doc))


@pytest.fixture()
def store_api(parser: SpecParser, store_doc: Dict[str, Any]) -> ParsedAPI:
    return parser.parse_document(copy.deepcopy(store_doc))


@pytest.fixture()
def image_api(parser: SpecParser, image_doc: Dict[str, Any]) -> ParsedAPI:
    return parser.parse_document(copy.deepcopy(image_doc))


@pytest.fixture()
def analyzer() -> InteractiveAnalyzer:
    return InteractiveAnalyzer()


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_client_factory() -> Callable[[Dict[str, Any]], httpx.Client]:
    """
    Build an ``httpx.Client`` whose transport serves the given
    ``{url: (status, body, content_type)}`` table; anything else is a 404.
    """
    clients = []

    def factory(routes: Dict[str, Any]) -> httpx.Client:
        def handler(request: httpx.Request) -> httpx.Response:
            entry = routes.get(str(request.url))
            if entry is None:
                return httpx.Response(404, text="not found")
            status, body, content_type = entry
            return httpx.Response(status, text=body, headers={"content-type": content_type})

        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
