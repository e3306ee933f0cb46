"""Response processing for OpenAPI operations.

This module provides the ResponseProcessor class that picks the success response
of an operation and converts its schema.
"""

import logging
import re
from typing import TYPE_CHECKING

from sdkgen.codegen.processors.parameter_processor import is_json_media_type
from sdkgen.ir import IRResponse, ResponseKind

if TYPE_CHECKING:
    from sdkgen.codegen.converter import SchemaConverter
    from sdkgen.codegen.schema import SchemaResolver
    from sdkgen.openapi import Operation, Response

logger = logging.getLogger(__name__)

__all__ = ['ResponseProcessor']

PREFERRED_STATUS_CODES = ('200', '201')
NO_CONTENT_STATUS_CODE = '204'

_SUCCESS_CODE = re.compile(r'^2(\d\d|XX)$')


class ResponseProcessor:
    """Picks and converts the success response of an operation.

    Status codes are tried in this order: 200, 201, then any other 2xx code in
    sorted order. Within a response, a JSON media type is preferred over any
    other; a response without content is "no content", and so is 204 whatever it
    declares. An operation without a 2xx response gets the explicit unknown
    response.

    Example:
        >>> processor = ResponseProcessor(converter, resolver)
        >>> response = processor.extract_response(operation, 'GetPet')
        >>> response.kind
        <ResponseKind.CONTENT: 'content'>
    """

    def __init__(self, converter: 'SchemaConverter', resolver: 'SchemaResolver'):
        """Initialize the response processor.

        Args:
            converter: The SchemaConverter for response schemas.
            resolver: The SchemaResolver for $ref responses.
        """
        self.converter = converter
        self.resolver = resolver

    def extract_response(self, operation: 'Operation', base_name: str) -> IRResponse:
        """Extract the success response of an operation.

        Args:
            operation: The OpenAPI operation.
            base_name: Name the operation's synthetic models are derived from.

        Returns:
            The chosen response; never None.
        """
        responses = operation.responses or {}
        for code in self._candidate_codes(responses):
            response = self.resolver.resolve_response(responses[code])
            return self._build(code, response, base_name)

        logger.debug(
            f'No success response for {operation.operationId or "operation"}, '
            'using unknown response'
        )
        return IRResponse.unknown()

    @staticmethod
    def _candidate_codes(responses: dict) -> list[str]:
        preferred = [code for code in PREFERRED_STATUS_CODES if code in responses]
        others = sorted(
            code
            for code in responses
            if code not in PREFERRED_STATUS_CODES and _SUCCESS_CODE.match(code)
        )
        return preferred + others

    def _build(self, code: str, response: 'Response', base_name: str) -> IRResponse:
        content = response.content or {}
        if code == NO_CONTENT_STATUS_CODE or not content:
            return IRResponse.no_content(code, response.description)

        content_type = next(
            (ct for ct in content if is_json_media_type(ct)), next(iter(content))
        )
        return IRResponse(
            kind=ResponseKind.CONTENT,
            schema=self.converter.convert(
                content[content_type].schema_, f'{base_name}Response'
            ),
            description=response.description,
            content_type=content_type,
            status_code=code,
        )
