from sdkgen.openapi.document import (
    HTTP_METHODS,
    Components,
    Info,
    MediaType,
    OpenAPI,
    Operation,
    Parameter,
    PathItem,
    Reference,
    RequestBody,
    Response,
    Schema,
    SchemaDiscriminator,
    SecurityScheme,
    TagObject,
    Type,
)

__all__ = [
    'HTTP_METHODS',
    'Components',
    'Info',
    'MediaType',
    'OpenAPI',
    'Operation',
    'Parameter',
    'PathItem',
    'Reference',
    'RequestBody',
    'Response',
    'Schema',
    'SchemaDiscriminator',
    'SecurityScheme',
    'TagObject',
    'Type',
]
