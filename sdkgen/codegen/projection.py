"""Projection of IR schemas onto the type system of a target.

This module provides:
- TypeExpr classes, a small target-neutral tree describing a type
- TargetVocabulary, what a target can express and how it spells it
- TypeProjector, which maps an IRSchema to a TypeExpr for one vocabulary

Projection never fails on a well-formed IR node. Constructs a target cannot
express are wrapped in ApproximatedType, so emitters can tell a deliberate
approximation from a faithful translation.
"""

import dataclasses
import json
import logging
from collections.abc import Callable, Collection
from typing import Any, Union

from sdkgen.codegen.utils import to_camel_case, to_pascal_case, to_snake_case
from sdkgen.exceptions import UnsupportedTargetError
from sdkgen.ir import (
    AllOfSchema,
    AnyOfSchema,
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    IntegerSchema,
    IRSchema,
    NotSchema,
    NullSchema,
    NumberSchema,
    ObjectSchema,
    OneOfSchema,
    RefSchema,
    SchemaKind,
    StringSchema,
    UnknownSchema,
)

logger = logging.getLogger(__name__)

__all__ = [
    'ApproximatedType',
    'BytesType',
    'InlineField',
    'InlineObjectType',
    'IntersectionType',
    'LiteralType',
    'MappingType',
    'NamedType',
    'NullType',
    'OptionalType',
    'ScalarType',
    'SequenceType',
    'TargetVocabulary',
    'TypeExpr',
    'TypeProjector',
    'UnionType',
    'UnknownType',
    'VOCABULARIES',
    'get_vocabulary',
]


# =============================================================================
# Type expressions
# =============================================================================


@dataclasses.dataclass(frozen=True)
class ScalarType:
    kind: SchemaKind  # STRING, NUMBER, INTEGER or BOOLEAN


@dataclasses.dataclass(frozen=True)
class BytesType:
    pass


@dataclasses.dataclass(frozen=True)
class NullType:
    pass


@dataclasses.dataclass(frozen=True)
class UnknownType:
    pass


@dataclasses.dataclass(frozen=True)
class SequenceType:
    item: 'TypeExpr'


@dataclasses.dataclass(frozen=True)
class MappingType:
    """String-keyed map."""

    value: 'TypeExpr'


@dataclasses.dataclass(frozen=True)
class NamedType:
    name: str


@dataclasses.dataclass(frozen=True)
class UnionType:
    members: tuple['TypeExpr', ...]


@dataclasses.dataclass(frozen=True)
class IntersectionType:
    members: tuple['TypeExpr', ...]


@dataclasses.dataclass(frozen=True)
class LiteralType:
    values: tuple[Any, ...]


@dataclasses.dataclass(frozen=True)
class OptionalType:
    inner: 'TypeExpr'


@dataclasses.dataclass(frozen=True)
class InlineField:
    name: str
    type: 'TypeExpr'
    required: bool = False


@dataclasses.dataclass(frozen=True)
class InlineObjectType:
    fields: tuple[InlineField, ...]


@dataclasses.dataclass(frozen=True)
class ApproximatedType:
    """A construct the target cannot express, replaced by ``inner``.

    Attributes:
        inner: The type used instead.
        reason: The construct that was approximated, e.g. 'union'.
    """

    inner: 'TypeExpr'
    reason: str


TypeExpr = Union[
    ScalarType,
    BytesType,
    NullType,
    UnknownType,
    SequenceType,
    MappingType,
    NamedType,
    UnionType,
    IntersectionType,
    LiteralType,
    OptionalType,
    InlineObjectType,
    ApproximatedType,
]


# =============================================================================
# Target vocabularies
# =============================================================================


@dataclasses.dataclass(frozen=True)
class TargetVocabulary:
    """What a target ecosystem can express and how it spells types.

    Attributes:
        name: Target identifier, as used in client configuration.
        scalars: Spelling of each scalar kind.
        bytes_type: Spelling of binary strings.
        null_type: Spelling of the null type.
        unknown_type: Spelling of an unconstrained value.
        sequence: Format string for sequences, with ``{item}``.
        mapping: Format string for string-keyed maps, with ``{value}``.
        named: Format string for model references, with ``{name}``.
        optional: Format string for nullable types, with ``{inner}``.
        union: Format string for unions, with ``{members}``, or None if the
            target has no unions.
        union_separator: Separator between union members.
        intersection_separator: Separator between intersection members, or None
            if the target has no intersections.
        literals: Which enums become literal types: 'all', 'string' or 'none'.
        literal: Format string for literal types, with ``{values}``.
        inline_objects: Whether anonymous object shapes can be spelled inline.
        model_name_case: Case conversion applied to referenced model names.
        method_name_case: Case conversion applied to method names.
    """

    name: str
    scalars: dict[SchemaKind, str]
    bytes_type: str
    null_type: str
    unknown_type: str
    sequence: str
    mapping: str
    named: str
    optional: str
    union: str | None
    union_separator: str = ', '
    intersection_separator: str | None = None
    literals: str = 'none'
    literal: str = '{values}'
    inline_objects: bool = False
    model_name_case: Callable[[str], str] | None = None
    method_name_case: Callable[[str], str] = to_camel_case

    @property
    def supports_unions(self) -> bool:
        return self.union is not None

    @property
    def supports_intersections(self) -> bool:
        return self.intersection_separator is not None

    def supports_literal(self, enum: EnumSchema) -> bool:
        if self.literals == 'all':
            return True
        return self.literals == 'string' and enum.base_kind is SchemaKind.STRING

    def model_name(self, name: str) -> str:
        return self.model_name_case(name) if self.model_name_case else name

    def method_name(self, name: str) -> str:
        return self.method_name_case(name)

    def render(self, expr: TypeExpr) -> str:
        """Spell a type expression in this target's syntax.

        >>> get_vocabulary('python').render(OptionalType(SequenceType(NamedType('Pet'))))
        'Optional[List[Pet]]'
        """
        if isinstance(expr, ScalarType):
            return self.scalars[expr.kind]
        if isinstance(expr, BytesType):
            return self.bytes_type
        if isinstance(expr, NullType):
            return self.null_type
        if isinstance(expr, UnknownType):
            return self.unknown_type
        if isinstance(expr, ApproximatedType):
            return self.render(expr.inner)
        if isinstance(expr, NamedType):
            return self.named.format(name=self.model_name(expr.name))
        if isinstance(expr, SequenceType):
            item = self.render(expr.item)
            if self._is_compound(expr.item) and self.sequence.startswith('Array<'):
                item = f'({item})'
            return self.sequence.format(item=item)
        if isinstance(expr, MappingType):
            return self.mapping.format(value=self.render(expr.value))
        if isinstance(expr, OptionalType):
            return self.optional.format(inner=self.render(expr.inner))
        if isinstance(expr, UnionType):
            members = self.union_separator.join(self.render(m) for m in expr.members)
            return (self.union or '{members}').format(members=members)
        if isinstance(expr, IntersectionType):
            separator = self.intersection_separator
            if separator is None:
                return self.render(expr.members[0]) if expr.members else self.unknown_type
            return separator.join(self.render(m) for m in expr.members)
        if isinstance(expr, LiteralType):
            values = self.union_separator.join(_literal_text(v) for v in expr.values)
            return self.literal.format(values=values)
        if isinstance(expr, InlineObjectType):
            parts = [
                f'{field.name}{"" if field.required else "?"}: {self.render(field.type)}'
                for field in expr.fields
            ]
            return '{' + '; '.join(parts) + '}'
        raise TypeError(f'Cannot render {type(expr).__name__}')

    @staticmethod
    def _is_compound(expr: TypeExpr) -> bool:
        return isinstance(expr, (UnionType, IntersectionType, LiteralType, OptionalType))


def _literal_text(value: Any) -> str:
    return json.dumps(value)


_TYPESCRIPT_SCALARS = {
    SchemaKind.STRING: 'string',
    SchemaKind.NUMBER: 'number',
    SchemaKind.INTEGER: 'number',
    SchemaKind.BOOLEAN: 'boolean',
}

VOCABULARIES: dict[str, TargetVocabulary] = {
    'typescript': TargetVocabulary(
        name='typescript',
        scalars=_TYPESCRIPT_SCALARS,
        bytes_type='Blob',
        null_type='null',
        unknown_type='unknown',
        sequence='Array<{item}>',
        mapping='Record<string, {value}>',
        named='Schema.{name}',
        optional='{inner} | null',
        union='{members}',
        union_separator=' | ',
        intersection_separator=' & ',
        literals='all',
        inline_objects=True,
        method_name_case=to_camel_case,
    ),
    'typescript-types': TargetVocabulary(
        name='typescript-types',
        scalars=_TYPESCRIPT_SCALARS,
        bytes_type='Blob',
        null_type='null',
        unknown_type='unknown',
        sequence='Array<{item}>',
        mapping='Record<string, {value}>',
        named='{name}',
        optional='{inner} | null',
        union='{members}',
        union_separator=' | ',
        intersection_separator=' & ',
        literals='all',
        inline_objects=True,
        method_name_case=to_camel_case,
    ),
    'python': TargetVocabulary(
        name='python',
        scalars={
            SchemaKind.STRING: 'str',
            SchemaKind.NUMBER: 'float',
            SchemaKind.INTEGER: 'int',
            SchemaKind.BOOLEAN: 'bool',
        },
        bytes_type='bytes',
        null_type='None',
        unknown_type='Any',
        sequence='List[{item}]',
        mapping='Dict[str, {value}]',
        named='{name}',
        optional='Optional[{inner}]',
        union='Union[{members}]',
        literals='string',
        literal='Literal[{values}]',
        method_name_case=to_snake_case,
    ),
    'go': TargetVocabulary(
        name='go',
        scalars={
            SchemaKind.STRING: 'string',
            SchemaKind.NUMBER: 'float64',
            SchemaKind.INTEGER: 'int64',
            SchemaKind.BOOLEAN: 'bool',
        },
        bytes_type='[]byte',
        null_type='interface{}',
        unknown_type='interface{}',
        sequence='[]{item}',
        mapping='map[string]{value}',
        named='{name}',
        optional='*{inner}',
        union=None,
        model_name_case=to_pascal_case,
        method_name_case=to_pascal_case,
    ),
}


def get_vocabulary(target: str) -> TargetVocabulary:
    """Look up the vocabulary of a target.

    Raises:
        UnsupportedTargetError: If no vocabulary is registered under ``target``.
    """
    try:
        return VOCABULARIES[target]
    except KeyError:
        raise UnsupportedTargetError(target, VOCABULARIES)


# =============================================================================
# Projector
# =============================================================================


class TypeProjector:
    """Maps IR schemas to type expressions for one target.

    Args:
        vocabulary: The target vocabulary, or its identifier.
        known_models: Names of the models the emitter will produce. When given,
            references to other names project to UnknownType.

    Example:
        >>> projector = TypeProjector('python')
        >>> projector.render(ArraySchema(items=RefSchema(name='Pet'), nullable=True))
        'Optional[List[Pet]]'
    """

    def __init__(
        self,
        vocabulary: TargetVocabulary | str,
        known_models: Collection[str] | None = None,
    ):
        if isinstance(vocabulary, str):
            vocabulary = get_vocabulary(vocabulary)
        self.vocabulary = vocabulary
        self.known_models = set(known_models) if known_models is not None else None

    def render(self, schema: IRSchema) -> str:
        return self.vocabulary.render(self.project(schema))

    def project(self, schema: IRSchema) -> TypeExpr:
        """Project a schema, wrapping it in OptionalType if it is nullable.

        A nullable schema whose projection is already NullType or OptionalType is
        not wrapped again.
        """
        expr = self._project_base(schema)
        if schema.nullable and not isinstance(expr, (NullType, OptionalType)):
            return OptionalType(expr)
        return expr

    def _project_base(self, schema: IRSchema) -> TypeExpr:
        vocabulary = self.vocabulary

        if isinstance(schema, StringSchema):
            if schema.format == 'binary':
                return BytesType()
            return ScalarType(SchemaKind.STRING)
        if isinstance(schema, NumberSchema):
            return ScalarType(SchemaKind.NUMBER)
        if isinstance(schema, IntegerSchema):
            return ScalarType(SchemaKind.INTEGER)
        if isinstance(schema, BooleanSchema):
            return ScalarType(SchemaKind.BOOLEAN)
        if isinstance(schema, NullSchema):
            return NullType()
        if isinstance(schema, UnknownSchema):
            return UnknownType()

        if isinstance(schema, RefSchema):
            if self.known_models is not None and schema.name not in self.known_models:
                logger.debug(f'Reference to unknown model {schema.name!r}')
                return UnknownType()
            return NamedType(schema.name)

        if isinstance(schema, ArraySchema):
            return SequenceType(self.project(schema.items))

        if isinstance(schema, (OneOfSchema, AnyOfSchema)):
            if not vocabulary.supports_unions:
                return ApproximatedType(UnknownType(), 'union')
            return UnionType(tuple(self.project(m) for m in schema.members))

        if isinstance(schema, AllOfSchema):
            members = tuple(self.project(m) for m in schema.members)
            if vocabulary.supports_intersections:
                return IntersectionType(members)
            if not members:
                return ApproximatedType(UnknownType(), 'intersection')
            return ApproximatedType(members[0], 'intersection')

        if isinstance(schema, NotSchema):
            return ApproximatedType(UnknownType(), 'negation')

        if isinstance(schema, EnumSchema):
            if not schema.values:
                return UnknownType()
            if vocabulary.supports_literal(schema):
                return LiteralType(schema.raw_values or schema.values)
            if schema.base_kind in vocabulary.scalars:
                return ScalarType(schema.base_kind)
            return ScalarType(SchemaKind.STRING)

        if isinstance(schema, ObjectSchema):
            return self._project_object(schema)

        raise TypeError(f'Unsupported IR schema node: {type(schema).__name__}')

    def _project_object(self, schema: ObjectSchema) -> TypeExpr:
        if schema.properties and self.vocabulary.inline_objects:
            return InlineObjectType(
                tuple(
                    InlineField(field.name, self.project(field.type), field.required)
                    for field in schema.properties
                )
            )
        if schema.additional_properties is not None and not schema.properties:
            return MappingType(self.project(schema.additional_properties))
        return MappingType(UnknownType())
