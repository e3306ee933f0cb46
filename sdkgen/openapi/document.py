"""OpenAPI 3.0 / 3.1 document models.

A single permissive model covers both minor versions: 3.0 ``nullable`` and 3.1
``type: [T, 'null']`` are both accepted, and extension keywords (``x-*``) are kept
as extra fields. Schema/Reference unions are discriminated on the presence of
``$ref`` rather than tried in turn.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator

__all__ = [
    'Components',
    'HTTP_METHODS',
    'Info',
    'MediaType',
    'OpenAPI',
    'Operation',
    'Parameter',
    'ParameterOrReference',
    'PathItem',
    'Reference',
    'RequestBody',
    'RequestBodyOrReference',
    'Response',
    'ResponseOrReference',
    'Schema',
    'SchemaOrReference',
    'SchemaDiscriminator',
    'SecurityScheme',
    'TagObject',
    'Type',
]


# Fixed order used when walking the operations of a path.
HTTP_METHODS = ('get', 'post', 'put', 'patch', 'delete', 'options', 'head', 'trace')


def _ref_or_object(data: Any) -> str:
    """Discriminator function telling a $ref apart from an inline object."""
    if isinstance(data, dict):
        return 'reference' if '$ref' in data else 'object'
    if isinstance(data, Reference):
        return 'reference'
    return 'object'


class Reference(BaseModel):
    """Reference object."""

    ref: str = Field(..., alias='$ref')
    summary: Optional[str] = None
    description: Optional[str] = None


class Type(Enum):
    """JSON Schema types."""

    array = 'array'
    boolean = 'boolean'
    integer = 'integer'
    number = 'number'
    object = 'object'
    string = 'string'
    null = 'null'


class SchemaDiscriminator(BaseModel):
    """Discriminator for polymorphism."""

    propertyName: str
    mapping: Optional[Dict[str, str]] = None


class Schema(BaseModel):
    """JSON Schema object as used by OpenAPI 3.0 and 3.1."""

    model_config = ConfigDict(extra='allow')

    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[Union[Type, List[Type]]] = None
    format: Optional[str] = None
    nullable: Optional[bool] = None  # 3.0 only
    enum: Optional[List[Any]] = None
    const: Optional[Any] = None

    # Composition keywords
    not_: Optional[SchemaOrReference] = Field(None, alias='not')
    allOf: Optional[List[SchemaOrReference]] = None
    oneOf: Optional[List[SchemaOrReference]] = None
    anyOf: Optional[List[SchemaOrReference]] = None
    discriminator: Optional[SchemaDiscriminator] = None

    # Array keywords
    items: Optional[SchemaOrReference] = None

    # Object keywords
    properties: Optional[Dict[str, SchemaOrReference]] = None
    required: Optional[List[str]] = None
    additionalProperties: Optional[Union[bool, SchemaOrReference]] = None

    # Annotations
    default: Optional[Any] = None
    example: Optional[Any] = None
    examples: Optional[List[Any]] = None
    deprecated: Optional[bool] = False
    readOnly: Optional[bool] = False
    writeOnly: Optional[bool] = False

    @property
    def types(self) -> list[Type]:
        """Declared types as a list, whichever spelling the document used."""
        if self.type is None:
            return []
        if isinstance(self.type, list):
            return list(self.type)
        return [self.type]


SchemaOrReference = Annotated[
    Union[Annotated[Reference, Tag('reference')], Annotated[Schema, Tag('object')]],
    Discriminator(_ref_or_object),
]


class MediaType(BaseModel):
    """Media type object."""

    model_config = ConfigDict(extra='allow')

    schema_: Optional[SchemaOrReference] = Field(None, alias='schema')
    example: Optional[Any] = None


class Parameter(BaseModel):
    """Parameter object."""

    model_config = ConfigDict(extra='allow')

    name: str
    in_: str = Field(..., alias='in')
    description: Optional[str] = None
    required: Optional[bool] = False
    deprecated: Optional[bool] = False
    schema_: Optional[SchemaOrReference] = Field(None, alias='schema')
    content: Optional[Dict[str, MediaType]] = None


ParameterOrReference = Annotated[
    Union[
        Annotated[Reference, Tag('reference')], Annotated[Parameter, Tag('object')]
    ],
    Discriminator(_ref_or_object),
]


class RequestBody(BaseModel):
    """Request body object."""

    model_config = ConfigDict(extra='allow')

    description: Optional[str] = None
    content: Dict[str, MediaType] = Field(default_factory=dict)
    required: Optional[bool] = False


RequestBodyOrReference = Annotated[
    Union[
        Annotated[Reference, Tag('reference')], Annotated[RequestBody, Tag('object')]
    ],
    Discriminator(_ref_or_object),
]


class Response(BaseModel):
    """Response object."""

    model_config = ConfigDict(extra='allow')

    description: Optional[str] = None
    content: Optional[Dict[str, MediaType]] = None


ResponseOrReference = Annotated[
    Union[Annotated[Reference, Tag('reference')], Annotated[Response, Tag('object')]],
    Discriminator(_ref_or_object),
]


class Operation(BaseModel):
    """Operation object."""

    model_config = ConfigDict(extra='allow')

    tags: Optional[List[str]] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    operationId: Optional[str] = None
    parameters: Optional[List[ParameterOrReference]] = None
    requestBody: Optional[RequestBodyOrReference] = None
    responses: Optional[Dict[str, ResponseOrReference]] = None
    deprecated: Optional[bool] = False
    security: Optional[List[Dict[str, List[str]]]] = None

    @field_validator('responses', mode='before')
    @classmethod
    def _stringify_status_codes(cls, value: Any) -> Any:
        # Unquoted YAML status codes load as integers
        if isinstance(value, dict):
            return {str(code): response for code, response in value.items()}
        return value


class PathItem(BaseModel):
    """Path item object."""

    model_config = ConfigDict(extra='allow')

    summary: Optional[str] = None
    description: Optional[str] = None
    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    patch: Optional[Operation] = None
    trace: Optional[Operation] = None
    parameters: Optional[List[ParameterOrReference]] = None

    def operations(self) -> list[tuple[str, Operation]]:
        """Declared operations as (UPPERCASE method, operation) pairs."""
        return [
            (method.upper(), getattr(self, method))
            for method in HTTP_METHODS
            if getattr(self, method) is not None
        ]


class SecurityScheme(BaseModel):
    """Security scheme object, reduced to what client generation needs."""

    model_config = ConfigDict(extra='allow')

    type: str
    description: Optional[str] = None
    name: Optional[str] = None
    in_: Optional[str] = Field(None, alias='in')
    scheme: Optional[str] = None
    bearerFormat: Optional[str] = None
    flows: Optional[Dict[str, Any]] = None
    openIdConnectUrl: Optional[str] = None


class Components(BaseModel):
    """Components object for reusable definitions."""

    model_config = ConfigDict(extra='allow')

    schemas: Optional[Dict[str, SchemaOrReference]] = None
    responses: Optional[Dict[str, ResponseOrReference]] = None
    parameters: Optional[Dict[str, ParameterOrReference]] = None
    requestBodies: Optional[Dict[str, RequestBodyOrReference]] = None
    securitySchemes: Optional[Dict[str, SecurityScheme]] = None


class Info(BaseModel):
    """API metadata."""

    model_config = ConfigDict(extra='allow', coerce_numbers_to_str=True)

    title: str
    version: str
    description: Optional[str] = None


class TagObject(BaseModel):
    """Tag declaration at document level."""

    model_config = ConfigDict(extra='allow')

    name: str
    description: Optional[str] = None


class OpenAPI(BaseModel):
    """OpenAPI 3.0 / 3.1 root document."""

    model_config = ConfigDict(extra='allow')

    openapi: Annotated[str, Field(pattern=r'^3\.\d+\.\d+(-.+)?$')]
    info: Info
    paths: Dict[str, PathItem] = Field(default_factory=dict)
    components: Optional[Components] = None
    tags: Optional[List[TagObject]] = None


# Rebuild models to resolve forward references
Schema.model_rebuild()
MediaType.model_rebuild()
Parameter.model_rebuild()
OpenAPI.model_rebuild()
