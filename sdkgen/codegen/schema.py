"""Schema loading and resolution utilities for OpenAPI documents.

This module provides utilities for:
- Loading OpenAPI 3.x documents from URLs or local files (YAML/JSON)
- Resolving local $ref references to parameters, request bodies and responses
"""

import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import httpx
import yaml
from pydantic import ValidationError

from sdkgen.exceptions import (
    SchemaLoadError,
    SchemaReferenceError,
    SchemaValidationError,
)
from sdkgen.openapi import (
    OpenAPI,
    Parameter,
    Reference,
    RequestBody,
    Response,
)

logger = logging.getLogger(__name__)

__all__ = [
    'SchemaLoader',
    'SchemaResolver',
]


# =============================================================================
# Schema Loader
# =============================================================================


class SchemaLoader:
    """Loads OpenAPI documents from URLs or file paths.

    Both JSON and YAML are accepted. Only OpenAPI 3.x documents are supported;
    Swagger 2.0 and documents without an ``openapi`` version are rejected.

    Example:
        >>> loader = SchemaLoader()
        >>> document = loader.load('https://api.example.com/openapi.json')
        >>> # or
        >>> document = loader.load('/path/to/openapi.yaml')
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        base_path: str | Path | None = None,
    ):
        """Initialize the schema loader.

        Args:
            http_client: Optional HTTP client to use for URL requests.
                        If not provided, a default client will be created.
            base_path: Base path for resolving relative file paths.
                      Defaults to current working directory.
        """
        self._http_client = http_client
        self._base_path = Path(base_path) if base_path else Path.cwd()

    def load(self, source: str) -> OpenAPI:
        """Load and validate an OpenAPI document from a URL or file path.

        Args:
            source: URL or file path to the OpenAPI document.

        Returns:
            Validated OpenAPI object.

        Raises:
            SchemaLoadError: If the document cannot be loaded from the source.
            SchemaValidationError: If the document is not valid OpenAPI 3.x.
        """
        try:
            if self._is_url(source):
                content = self._load_from_url(source)
            else:
                content = self._load_from_file(source)
        except (SchemaLoadError, SchemaValidationError):
            raise
        except Exception as e:
            raise SchemaLoadError(source, cause=e)

        return self.parse(content, source)

    def parse(self, content: Any, source: str = '<memory>') -> OpenAPI:
        """Validate already parsed document content.

        Args:
            content: The parsed JSON/YAML content.
            source: Label used in error messages.

        Raises:
            SchemaValidationError: If the content is not a valid OpenAPI 3.x document.
        """
        if not isinstance(content, dict):
            raise SchemaValidationError(source, errors=['Document is not a mapping'])

        version = self.get_detected_version(content)
        if version is None:
            raise SchemaValidationError(
                source, errors=["Missing 'openapi' version field"]
            )
        if not version.startswith('3.'):
            raise SchemaValidationError(
                source,
                errors=[f'Unsupported document version {version}, expected OpenAPI 3.x'],
            )

        try:
            document = OpenAPI.model_validate(content)
        except ValidationError as e:
            errors = [
                f'{".".join(str(part) for part in error["loc"])}: {error["msg"]}'
                for error in e.errors()
            ]
            raise SchemaValidationError(source, errors=errors)

        logger.debug(
            f'Loaded {document.info.title} {document.info.version} '
            f'(OpenAPI {document.openapi}) from {source}'
        )
        return document

    def get_detected_version(self, content: dict) -> str | None:
        """Detect the OpenAPI/Swagger version from document content."""
        if 'swagger' in content:
            return str(content.get('swagger', '2.0'))
        if 'openapi' not in content:
            return None
        return str(content['openapi'])

    def _is_url(self, text: str) -> bool:
        """Check if a string is a URL."""
        try:
            result = urlparse(text)
            return result.scheme in ('http', 'https')
        except ValueError:
            return False

    def _load_from_url(self, url: str) -> dict:
        """Load document content from a URL."""
        try:
            if self._http_client:
                response = self._http_client.get(url)
            else:
                response = httpx.get(url, follow_redirects=True, timeout=30.0)

            response.raise_for_status()
            content_type = response.headers.get('content-type', '')
            content = response.text

            if 'yaml' in content_type or url.endswith(('.yaml', '.yml')):
                return yaml.safe_load(content)
            else:
                return json.loads(content)

        except httpx.HTTPError as e:
            raise SchemaLoadError(url, cause=e)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SchemaLoadError(url, cause=e)

    def _load_from_file(self, file_path: str) -> dict:
        """Load document content from a file."""
        path = Path(file_path)
        if not path.is_absolute():
            path = self._base_path / path

        if not path.exists():
            raise SchemaLoadError(
                str(file_path), cause=FileNotFoundError(f'File not found: {path}')
            )

        try:
            content = path.read_text(encoding='utf-8')
            if path.suffix.lower() in ('.yaml', '.yml'):
                return yaml.safe_load(content)
            else:
                return json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SchemaLoadError(str(file_path), cause=e)
        except OSError as e:
            raise SchemaLoadError(str(file_path), cause=e)


# =============================================================================
# Schema Resolver
# =============================================================================


class SchemaResolver:
    """Resolves local $ref references to reusable components.

    Schemas are never dereferenced here: schema references become Ref nodes in
    the IR. Parameters, request bodies and responses, on the other hand, are
    inlined by the operation collector and resolved through this class.

    Example:
        >>> resolver = SchemaResolver(document)
        >>> parameter = resolver.resolve_parameter(operation.parameters[0])
    """

    _SECTIONS = {
        'parameters': Parameter,
        'requestBodies': RequestBody,
        'responses': Response,
    }

    def __init__(self, openapi: OpenAPI):
        """Initialize the schema resolver.

        Args:
            openapi: The OpenAPI document to resolve references from.
        """
        self.openapi = openapi

    def resolve_parameter(self, node: Parameter | Reference) -> Parameter:
        return self._resolve(node, 'parameters')

    def resolve_request_body(self, node: RequestBody | Reference) -> RequestBody:
        return self._resolve(node, 'requestBodies')

    def resolve_response(self, node: Response | Reference) -> Response:
        return self._resolve(node, 'responses')

    def _resolve(self, node: Any, section: str) -> Any:
        """Follow a chain of references within one components section.

        Raises:
            SchemaReferenceError: If a reference points outside the section, at a
                missing component, or back at itself.
        """
        visited: set[str] = set()
        while isinstance(node, Reference):
            ref = node.ref
            if ref in visited:
                raise SchemaReferenceError(ref, 'Circular reference')
            visited.add(ref)
            node = self._lookup(ref, section)

        expected = self._SECTIONS[section]
        if not isinstance(node, expected):
            raise SchemaReferenceError(
                str(node), f'Expected a {expected.__name__} object'
            )
        return node

    def _lookup(self, ref: str, section: str) -> Any:
        prefix = f'#/components/{section}/'
        if not ref.startswith('#/'):
            raise SchemaReferenceError(
                ref,
                'External references are not supported. '
                'Consider using a tool to bundle your OpenAPI document.',
            )
        if not ref.startswith(prefix):
            raise SchemaReferenceError(ref, f'Expected a reference into {prefix}')

        name = ref[len(prefix) :].replace('~1', '/').replace('~0', '~')
        components = self.openapi.components
        entries = getattr(components, section, None) if components else None
        if not entries or name not in entries:
            available = ', '.join(sorted(entries or {})[:10])
            raise SchemaReferenceError(
                ref,
                f"Component '{name}' not found"
                + (f'. Available: {available}' if available else ''),
            )
        return entries[name]
