"""Parameter and request body processing for OpenAPI operations.

This module provides the ParameterProcessor class that turns the parameters and
request body of an operation into IR nodes.
"""

import logging
import re
from typing import TYPE_CHECKING

from sdkgen.codegen.utils import to_pascal_case
from sdkgen.ir import IRParam, IRRequestBody, UnknownSchema

if TYPE_CHECKING:
    from sdkgen.codegen.converter import SchemaConverter
    from sdkgen.codegen.schema import SchemaResolver
    from sdkgen.openapi import MediaType, Operation, Parameter, Reference

logger = logging.getLogger(__name__)

__all__ = ['ParameterProcessor', 'is_json_media_type', 'path_template_params']

FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'

# Bodies sent as opaque payloads; their schema is not modeled
OPAQUE_CONTENT_TYPES = ('multipart/form-data', 'application/octet-stream')

_PATH_PARAM = re.compile(r'\{([^{}]+)\}')


def is_json_media_type(content_type: str) -> bool:
    """Whether a media type carries JSON, e.g. application/json or application/problem+json."""
    base = content_type.split(';', 1)[0].strip().lower()
    return base in ('application/json', 'text/json') or base.endswith('+json')


def path_template_params(path: str) -> tuple[str, ...]:
    """Parameter names in order of first appearance in a path template."""
    names: list[str] = []
    for name in _PATH_PARAM.findall(path):
        if name not in names:
            names.append(name)
    return tuple(names)


class ParameterProcessor:
    """Handles extraction of OpenAPI parameters and request bodies.

    Path and query parameters are kept, each sorted by name; header and cookie
    parameters are not modeled. Path-item level parameters apply to every
    operation of the path unless the operation redeclares the same name and
    location.

    Example:
        >>> processor = ParameterProcessor(converter, resolver)
        >>> path_params, query_params = processor.extract_parameters(
        ...     operation, 'ListPets', path_item.parameters
        ... )
        >>> body = processor.extract_request_body(operation, 'ListPets')
    """

    def __init__(self, converter: 'SchemaConverter', resolver: 'SchemaResolver'):
        """Initialize the parameter processor.

        Args:
            converter: The SchemaConverter for parameter and body schemas.
            resolver: The SchemaResolver for $ref parameters and bodies.
        """
        self.converter = converter
        self.resolver = resolver

    def extract_parameters(
        self,
        operation: 'Operation',
        base_name: str,
        inherited: 'list[Parameter | Reference] | None' = None,
    ) -> tuple[tuple[IRParam, ...], tuple[IRParam, ...]]:
        """Extract path and query parameters of an operation.

        Args:
            operation: The OpenAPI operation.
            base_name: Name the operation's synthetic models are derived from.
            inherited: Parameters declared on the path item.

        Returns:
            (path parameters, query parameters), each sorted by name.
        """
        merged: dict[tuple[str, str], 'Parameter'] = {}
        for node in [*(inherited or []), *(operation.parameters or [])]:
            param = self.resolver.resolve_parameter(node)
            merged[(param.name, param.in_)] = param

        path_params = []
        query_params = []
        for (name, location), param in merged.items():
            if location not in ('path', 'query'):
                logger.debug(f'Skipping {location} parameter {name!r}')
                continue
            ir_param = IRParam(
                name=name,
                required=bool(param.required) or location == 'path',
                schema=self.converter.convert(
                    self._parameter_schema(param), base_name + to_pascal_case(name)
                ),
                description=param.description,
            )
            if location == 'path':
                path_params.append(ir_param)
            else:
                query_params.append(ir_param)

        path_params.sort(key=lambda p: p.name)
        query_params.sort(key=lambda p: p.name)
        return tuple(path_params), tuple(query_params)

    def extract_request_body(
        self, operation: 'Operation', base_name: str
    ) -> IRRequestBody | None:
        """Extract the request body of an operation.

        The media type is chosen in this order: JSON, then form-urlencoded, then
        multipart/form-data or application/octet-stream (schema left unknown),
        then the first declared media type.

        Args:
            operation: The OpenAPI operation.
            base_name: Name the operation's synthetic models are derived from.

        Returns:
            The request body, or None if the operation declares none.
        """
        if operation.requestBody is None:
            return None

        body = self.resolver.resolve_request_body(operation.requestBody)
        if not body.content:
            return None

        content_type, media = self._pick_media_type(body.content)
        if content_type in OPAQUE_CONTENT_TYPES:
            schema = UnknownSchema()
        else:
            schema = self.converter.convert(media.schema_, f'{base_name}Body')

        return IRRequestBody(
            content_type=content_type,
            schema=schema,
            required=bool(body.required),
            description=body.description,
        )

    @staticmethod
    def _pick_media_type(
        content: 'dict[str, MediaType]',
    ) -> 'tuple[str, MediaType]':
        if 'application/json' in content:
            return 'application/json', content['application/json']
        for content_type, media in content.items():
            if is_json_media_type(content_type):
                return content_type, media
        if FORM_CONTENT_TYPE in content:
            return FORM_CONTENT_TYPE, content[FORM_CONTENT_TYPE]
        for content_type in OPAQUE_CONTENT_TYPES:
            if content_type in content:
                return content_type, content[content_type]
        return next(iter(content.items()))

    @staticmethod
    def _parameter_schema(param: 'Parameter'):
        if param.schema_ is not None:
            return param.schema_
        # Parameters may describe their value through content instead of schema
        for media in (param.content or {}).values():
            return media.schema_
        return None
