"""Collection of operations into services.

This module walks the paths of a document and builds one IROperation per declared
operation, grouped into IRServices by tag.
"""

import logging
from collections.abc import Collection

from sdkgen.codegen.converter import BuilderContext, SchemaConverter
from sdkgen.codegen.processors import ParameterProcessor, ResponseProcessor
from sdkgen.codegen.processors.parameter_processor import path_template_params
from sdkgen.codegen.schema import SchemaResolver
from sdkgen.codegen.utils import to_pascal_case
from sdkgen.ir import FALLBACK_TAG, IROperation, IRSecurityScheme, IRService
from sdkgen.openapi import OpenAPI, Operation, PathItem

logger = logging.getLogger(__name__)

__all__ = [
    'OperationCollector',
    'collect_security_schemes',
    'grouping_tag',
    'operation_base_name',
]


def grouping_tag(
    tags: list[str] | None, allowed: Collection[str] | None = None
) -> str | None:
    """The tag an operation is grouped under.

    Args:
        tags: The tags the operation declares.
        allowed: Tags that may be used for grouping; None allows every tag.

    Returns:
        The first declared tag that is allowed, the fallback tag for untagged
        operations, or None if the operation has tags but none is allowed.
    """
    if not tags:
        if allowed is None or FALLBACK_TAG in allowed:
            return FALLBACK_TAG
        return None
    for tag in tags:
        if allowed is None or tag in allowed:
            return tag
    return None


def operation_base_name(operation: Operation, method: str, path: str) -> str:
    """Name the synthetic models of an operation are derived from.

    >>> operation_base_name(Operation(operationId='list_pets'), 'GET', '/pets')
    'ListPets'
    >>> operation_base_name(Operation(), 'GET', '/pets/{petId}')
    'GetPetsPetId'
    """
    if operation.operationId:
        return to_pascal_case(operation.operationId)
    return to_pascal_case(f'{method} {path}')


class OperationCollector:
    """Builds the services of a document.

    Paths are walked in sorted order and methods in the fixed order GET, POST, PUT,
    PATCH, DELETE, OPTIONS, HEAD, TRACE. Schemas met along the way are converted
    with the shared build context, so nested shapes of request and response bodies
    are hoisted into the same registry as the component schemas.

    Example:
        >>> collector = OperationCollector(document, context)
        >>> services = collector.collect()
        >>> [service.tag for service in services]
        ['misc', 'pets', 'store']
    """

    def __init__(self, document: OpenAPI, context: BuilderContext):
        self.document = document
        self.converter = SchemaConverter(context)
        self.resolver = SchemaResolver(document)
        self.parameter_processor = ParameterProcessor(self.converter, self.resolver)
        self.response_processor = ResponseProcessor(self.converter, self.resolver)

    def collect(self, allowed_tags: Collection[str] | None = None) -> list[IRService]:
        """Build services sorted by tag, operations sorted by (path, method).

        Args:
            allowed_tags: Tags that may be used for grouping; None allows all.

        Returns:
            The non-empty services.
        """
        grouped: dict[str, list[IROperation]] = {}
        for path in sorted(self.document.paths):
            item = self.document.paths[path]
            for method, operation in item.operations():
                tag = grouping_tag(operation.tags, allowed_tags)
                if tag is None:
                    logger.debug(f'Skipping {method} {path}: no allowed tag')
                    continue
                grouped.setdefault(tag, []).append(
                    self.build_operation(path, method, operation, tag, item)
                )

        services = [
            IRService(
                tag=tag,
                operations=tuple(
                    sorted(operations, key=lambda op: (op.path, op.method))
                ),
            )
            for tag, operations in sorted(grouped.items())
        ]
        logger.debug(
            f'Collected {sum(len(s.operations) for s in services)} operations '
            f'in {len(services)} services'
        )
        return services

    def build_operation(
        self,
        path: str,
        method: str,
        operation: Operation,
        tag: str,
        item: PathItem | None = None,
    ) -> IROperation:
        base_name = operation_base_name(operation, method, path)
        path_params, query_params = self.parameter_processor.extract_parameters(
            operation, base_name, item.parameters if item else None
        )
        return IROperation(
            operation_id=operation.operationId,
            method=method,
            path=path,
            tag=tag,
            original_tags=tuple(operation.tags or ()),
            summary=operation.summary,
            description=operation.description,
            deprecated=bool(operation.deprecated),
            path_params=path_params,
            path_param_order=path_template_params(path),
            query_params=query_params,
            request_body=self.parameter_processor.extract_request_body(
                operation, base_name
            ),
            response=self.response_processor.extract_response(operation, base_name),
        )


def collect_security_schemes(document: OpenAPI) -> list[IRSecurityScheme]:
    """Security schemes of the document, sorted by key.

    Only the fields relevant to the scheme type are kept: scheme and bearer format
    for http, location and name for apiKey. OAuth2 flows are not modeled.
    """
    if document.components is None or not document.components.securitySchemes:
        return []

    schemes = []
    for key, scheme in sorted(document.components.securitySchemes.items()):
        fields = {'key': key, 'type': scheme.type}
        if scheme.type == 'http':
            fields.update(scheme=scheme.scheme, bearer_format=scheme.bearerFormat)
        elif scheme.type == 'apiKey':
            fields.update(in_=scheme.in_, name=scheme.name)
        schemes.append(IRSecurityScheme(**fields))
    return schemes
