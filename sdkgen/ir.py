"""Intermediate Representation (IR) of an API description.

The IR is what emitters consume: services (operations grouped by tag), a flat
registry of named models, and the security schemes. Every class here is a frozen
pydantic model, so IR trees compare structurally with ``==``, cannot be mutated
once built and serialize with ``model_dump_json``.

``IRSchema`` is a closed union discriminated on ``kind``; code that dispatches on it
handles every member class and raises on anything else.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    'FALLBACK_TAG',
    'IR',
    'AllOfSchema',
    'AnyOfSchema',
    'ArraySchema',
    'BooleanSchema',
    'EnumSchema',
    'IRAnnotations',
    'IRDiscriminator',
    'IRField',
    'IRModelDef',
    'IROperation',
    'IRParam',
    'IRRequestBody',
    'IRResponse',
    'IRSchema',
    'IRSecurityScheme',
    'IRService',
    'IntegerSchema',
    'NotSchema',
    'NullSchema',
    'NumberSchema',
    'ObjectSchema',
    'OneOfSchema',
    'RefSchema',
    'ResponseKind',
    'SchemaKind',
    'StringSchema',
    'UnknownSchema',
    'walk_schema',
]

# Grouping tag of operations that declare no tags.
FALLBACK_TAG = 'misc'


class SchemaKind(str, Enum):
    UNKNOWN = 'unknown'
    STRING = 'string'
    NUMBER = 'number'
    INTEGER = 'integer'
    BOOLEAN = 'boolean'
    NULL = 'null'
    ARRAY = 'array'
    OBJECT = 'object'
    ENUM = 'enum'
    REF = 'ref'
    ONE_OF = 'oneOf'
    ANY_OF = 'anyOf'
    ALL_OF = 'allOf'
    NOT = 'not'


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class IRDiscriminator(_Frozen):
    """Property that selects among union members, with optional value mapping."""

    property_name: str
    mapping: dict[str, str] = Field(default_factory=dict)


class IRAnnotations(_Frozen):
    """Non-structural metadata some emitters render (docs, defaults, examples)."""

    title: Optional[str] = None
    description: Optional[str] = None
    deprecated: bool = False
    read_only: bool = False
    write_only: bool = False
    default: Any = None
    examples: tuple[Any, ...] = ()


class _SchemaNode(_Frozen):
    nullable: bool = False
    format: Optional[str] = None
    discriminator: Optional[IRDiscriminator] = None

    def as_nullable(self, nullable: bool = True):
        """Copy of this node with ``nullable`` set."""
        return self.model_copy(update={'nullable': nullable})


class UnknownSchema(_SchemaNode):
    kind: Literal['unknown'] = 'unknown'


class StringSchema(_SchemaNode):
    kind: Literal['string'] = 'string'


class NumberSchema(_SchemaNode):
    kind: Literal['number'] = 'number'


class IntegerSchema(_SchemaNode):
    kind: Literal['integer'] = 'integer'


class BooleanSchema(_SchemaNode):
    kind: Literal['boolean'] = 'boolean'


class NullSchema(_SchemaNode):
    kind: Literal['null'] = 'null'


class ArraySchema(_SchemaNode):
    kind: Literal['array'] = 'array'
    items: IRSchema


class ObjectSchema(_SchemaNode):
    kind: Literal['object'] = 'object'
    properties: tuple[IRField, ...] = ()
    additional_properties: Optional[IRSchema] = None

    def get_field(self, name: str) -> IRField | None:
        for field in self.properties:
            if field.name == name:
                return field
        return None


class EnumSchema(_SchemaNode):
    """Closed set of literal values.

    Attributes:
        values: Values spelled as strings, for emitters without typed literals.
        raw_values: The values as declared (str, int, float or bool).
        base_kind: The scalar kind the values share.
    """

    kind: Literal['enum'] = 'enum'
    values: tuple[str, ...] = ()
    raw_values: tuple[Any, ...] = ()
    base_kind: SchemaKind = SchemaKind.UNKNOWN


class RefSchema(_SchemaNode):
    kind: Literal['ref'] = 'ref'
    name: str


class OneOfSchema(_SchemaNode):
    kind: Literal['oneOf'] = 'oneOf'
    members: tuple[IRSchema, ...] = ()


class AnyOfSchema(_SchemaNode):
    kind: Literal['anyOf'] = 'anyOf'
    members: tuple[IRSchema, ...] = ()


class AllOfSchema(_SchemaNode):
    kind: Literal['allOf'] = 'allOf'
    members: tuple[IRSchema, ...] = ()


class NotSchema(_SchemaNode):
    kind: Literal['not'] = 'not'
    inner: IRSchema


IRSchema = Annotated[
    Union[
        UnknownSchema,
        StringSchema,
        NumberSchema,
        IntegerSchema,
        BooleanSchema,
        NullSchema,
        ArraySchema,
        ObjectSchema,
        EnumSchema,
        RefSchema,
        OneOfSchema,
        AnyOfSchema,
        AllOfSchema,
        NotSchema,
    ],
    Field(discriminator='kind'),
]


class IRField(_Frozen):
    name: str
    type: IRSchema
    required: bool = False
    annotations: IRAnnotations = Field(default_factory=IRAnnotations)


class IRModelDef(_Frozen):
    """A named model: a component schema or a hoisted anonymous shape."""

    name: str
    schema_: IRSchema = Field(..., alias='schema')
    annotations: IRAnnotations = Field(default_factory=IRAnnotations)


class IRParam(_Frozen):
    name: str
    required: bool = False
    schema_: IRSchema = Field(default_factory=UnknownSchema, alias='schema')
    description: Optional[str] = None


class IRRequestBody(_Frozen):
    content_type: str
    schema_: IRSchema = Field(default_factory=UnknownSchema, alias='schema')
    required: bool = False
    description: Optional[str] = None


class ResponseKind(str, Enum):
    CONTENT = 'content'
    NO_CONTENT = 'no_content'
    UNKNOWN = 'unknown'


class IRResponse(_Frozen):
    """The single success response chosen for an operation.

    ``kind`` is never left implicit: an operation without a usable 2xx response
    carries ``ResponseKind.UNKNOWN`` so emitters have to handle it.
    """

    kind: ResponseKind = ResponseKind.UNKNOWN
    schema_: Optional[IRSchema] = Field(None, alias='schema')
    description: Optional[str] = None
    content_type: Optional[str] = None
    status_code: Optional[str] = None

    @classmethod
    def no_content(
        cls, status_code: str, description: str | None = None
    ) -> 'IRResponse':
        return cls(
            kind=ResponseKind.NO_CONTENT,
            status_code=status_code,
            description=description,
        )

    @classmethod
    def unknown(cls) -> 'IRResponse':
        return cls(kind=ResponseKind.UNKNOWN, schema=UnknownSchema())


class IROperation(_Frozen):
    operation_id: Optional[str] = None
    method: str
    path: str
    tag: str
    original_tags: tuple[str, ...] = ()
    summary: Optional[str] = None
    description: Optional[str] = None
    deprecated: bool = False
    path_params: tuple[IRParam, ...] = ()
    path_param_order: tuple[str, ...] = ()
    query_params: tuple[IRParam, ...] = ()
    request_body: Optional[IRRequestBody] = None
    response: IRResponse = Field(default_factory=IRResponse.unknown)

    @property
    def effective_tags(self) -> tuple[str, ...]:
        """Tags used for filtering; untagged operations count as the fallback tag."""
        return self.original_tags or (FALLBACK_TAG,)

    @property
    def ordered_path_params(self) -> list[IRParam]:
        """Path parameters in the order they appear in the path template."""
        by_name = {param.name: param for param in self.path_params}
        ordered = [by_name[name] for name in self.path_param_order if name in by_name]
        ordered.extend(
            param for param in self.path_params if param.name not in self.path_param_order
        )
        return ordered

    def iter_schemas(self) -> Iterator[IRSchema]:
        """Every schema the operation uses: params, request body and response."""
        for param in self.path_params:
            yield param.schema_
        for param in self.query_params:
            yield param.schema_
        if self.request_body is not None:
            yield self.request_body.schema_
        if self.response.schema_ is not None:
            yield self.response.schema_


class IRService(_Frozen):
    tag: str
    operations: tuple[IROperation, ...] = ()


class IRSecurityScheme(_Frozen):
    key: str
    type: str
    scheme: Optional[str] = None
    in_: Optional[str] = Field(None, alias='in')
    name: Optional[str] = None
    bearer_format: Optional[str] = None


class IR(_Frozen):
    services: tuple[IRService, ...] = ()
    model_defs: tuple[IRModelDef, ...] = ()
    security_schemes: tuple[IRSecurityScheme, ...] = ()

    def model_names(self) -> list[str]:
        return [model.name for model in self.model_defs]

    def get_model(self, name: str) -> IRModelDef | None:
        for model in self.model_defs:
            if model.name == name:
                return model
        return None

    def get_service(self, tag: str) -> IRService | None:
        for service in self.services:
            if service.tag == tag:
                return service
        return None

    def iter_operations(self) -> Iterator[IROperation]:
        for service in self.services:
            yield from service.operations


def walk_schema(schema: IRSchema) -> Iterator[IRSchema]:
    """Yield ``schema`` and every node below it, depth first.

    Ref nodes are yielded but not followed.
    """
    stack = [schema]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, ArraySchema):
            stack.append(node.items)
        elif isinstance(node, ObjectSchema):
            if node.additional_properties is not None:
                stack.append(node.additional_properties)
            stack.extend(field.type for field in reversed(node.properties))
        elif isinstance(node, (OneOfSchema, AnyOfSchema, AllOfSchema)):
            stack.extend(reversed(node.members))
        elif isinstance(node, NotSchema):
            stack.append(node.inner)


for _model in (
    ArraySchema,
    ObjectSchema,
    OneOfSchema,
    AnyOfSchema,
    AllOfSchema,
    NotSchema,
    IRField,
    IRModelDef,
    IRParam,
    IRRequestBody,
    IRResponse,
    IROperation,
    IRService,
    IR,
):
    _model.model_rebuild()
