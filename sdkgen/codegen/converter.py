"""Conversion of OpenAPI schemas into IR schema nodes.

This module provides:
- BuilderContext, the model list and name set owned by one build
- SchemaConverter, which turns a Schema or Reference into an IRSchema and hoists
  nested anonymous objects and enums into named models
- build_model_registry, which converts every component schema of a document
"""

import json
import logging
from collections.abc import Callable
from typing import Any

from sdkgen.codegen.utils import to_pascal_case
from sdkgen.exceptions import ModelNameCollisionError
from sdkgen.ir import (
    AllOfSchema,
    AnyOfSchema,
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    IntegerSchema,
    IRAnnotations,
    IRDiscriminator,
    IRField,
    IRModelDef,
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
from sdkgen.openapi import OpenAPI, Reference, Schema, Type as DataType

logger = logging.getLogger(__name__)

__all__ = [
    'BuilderContext',
    'SchemaConverter',
    'build_model_registry',
    'extract_annotations',
    'reference_name',
]

_SCALAR_KINDS = {
    DataType.string: SchemaKind.STRING,
    DataType.integer: SchemaKind.INTEGER,
    DataType.number: SchemaKind.NUMBER,
    DataType.boolean: SchemaKind.BOOLEAN,
}


class BuilderContext:
    """Mutable state of a single IR build.

    Holds the registered models in registration order and the set of names already
    taken. A context is created per build and never shared, so two builds of the
    same document cannot influence each other.

    Args:
        strict: Raise ModelNameCollisionError instead of renaming a synthesized
            model whose name is taken by a different shape.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.models: list[IRModelDef] = []
        self.seen_names: set[str] = set()

    def add_component(self, model: IRModelDef) -> None:
        """Append a component model under its own name.

        Components are never renamed; a component that shares its name with an
        earlier synthesized model is resolved later by the deduplicator.
        """
        self.models.append(model)
        self.seen_names.add(model.name)

    def register(
        self, name: str, schema: IRSchema, annotations: IRAnnotations | None = None
    ) -> str:
        """Register a synthesized model and return the name it was stored under.

        If ``name`` is taken by a structurally equal schema the existing model is
        reused. Otherwise the name gets a numeric suffix (``Name2``, ``Name3``, ...)
        until it is free or matches an equal schema.

        Raises:
            ModelNameCollisionError: In strict mode, when ``name`` is taken by a
                different shape.
        """
        return self.register_shape(name, lambda candidate: schema, annotations)

    def register_shape(
        self,
        name: str,
        build: Callable[[str], IRSchema],
        annotations: IRAnnotations | None = None,
    ) -> str:
        """Register a model whose shape depends on the name it is stored under.

        ``build`` is called with each candidate name in turn. Models it registers
        itself (a hoisted object's own nested shapes) are dropped again when the
        candidate is rejected, so they always carry the final name as prefix.
        Naming otherwise follows ``register``.
        """
        candidate = name
        counter = 1
        while True:
            mark = len(self.models)
            schema = build(candidate)
            existing = self.get(candidate)
            if existing is None:
                break
            if existing.schema_ == schema:
                logger.debug(f'Reusing model {candidate!r} for an identical shape')
                return candidate
            self._rollback(mark)
            if self.strict:
                raise ModelNameCollisionError(name)
            counter += 1
            candidate = f'{name}{counter}'

        if candidate != name:
            logger.warning(
                f'Model name {name!r} is already used by a different shape, '
                f'registering it as {candidate!r}'
            )
        self.models.append(
            IRModelDef(
                name=candidate,
                schema=schema,
                annotations=annotations or IRAnnotations(),
            )
        )
        self.seen_names.add(candidate)
        return candidate

    def _rollback(self, mark: int) -> None:
        for model in self.models[mark:]:
            self.seen_names.discard(model.name)
        del self.models[mark:]

    def get(self, name: str) -> IRModelDef | None:
        for model in self.models:
            if model.name == name:
                return model
        return None


def reference_name(ref: str) -> str:
    """Final path segment of a $ref, with JSON pointer escapes undone."""
    return ref.rsplit('/', 1)[-1].replace('~1', '/').replace('~0', '~')


def extract_annotations(node: Schema | Reference | None) -> IRAnnotations:
    if node is None:
        return IRAnnotations()
    if isinstance(node, Reference):
        return IRAnnotations(description=node.description)

    examples = list(node.examples or [])
    if node.example is not None:
        examples.insert(0, node.example)
    return IRAnnotations(
        title=node.title,
        description=node.description,
        deprecated=bool(node.deprecated),
        read_only=bool(node.readOnly),
        write_only=bool(node.writeOnly),
        default=node.default,
        examples=tuple(examples),
    )


def _enum_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True)


def _enum_base_kind(node: Schema, values: list[Any]) -> SchemaKind:
    for declared in node.types:
        if declared in _SCALAR_KINDS:
            return _SCALAR_KINDS[declared]
    if not values:
        return SchemaKind.UNKNOWN
    first = values[0]
    # bool is a subclass of int
    if isinstance(first, bool):
        return SchemaKind.BOOLEAN
    if isinstance(first, int):
        return SchemaKind.INTEGER
    if isinstance(first, float):
        return SchemaKind.NUMBER
    if isinstance(first, str):
        return SchemaKind.STRING
    return SchemaKind.UNKNOWN


def _convert_discriminator(node: Schema) -> IRDiscriminator | None:
    if node.discriminator is None:
        return None
    mapping = {
        key: reference_name(target)
        for key, target in sorted((node.discriminator.mapping or {}).items())
    }
    return IRDiscriminator(
        property_name=node.discriminator.propertyName, mapping=mapping
    )


class SchemaConverter:
    """Recursive Schema/Reference to IRSchema conversion.

    Nested anonymous objects and enums are registered in the
    context under a synthetic name and replaced by a RefSchema. The synthetic name
    is ``parent[_Pascal(property)][_Item]``; a hoisted object's name becomes the
    parent name of its own properties, so ``Order.customer.address`` ends up as
    ``Order_Customer_Address``.

    Top-level shapes stay in place, and so do the members of a top-level
    composition: members are converted with the same parent and property as the
    composition itself.

    Example:
        >>> context = BuilderContext()
        >>> converter = SchemaConverter(context)
        >>> converter.convert(schema, 'Pet')
        ObjectSchema(...)
        >>> [model.name for model in context.models]
        ['Pet_Owner']
    """

    def __init__(self, context: BuilderContext):
        self.context = context

    def convert(
        self,
        node: Schema | Reference | None,
        parent_name: str,
        property_name: str = '',
        is_array_item: bool = False,
    ) -> IRSchema:
        """Convert a schema node.

        Args:
            node: The schema or reference to convert. None converts to Unknown.
            parent_name: Name of the enclosing model, used for synthetic names.
            property_name: Property under which the node appears, if any.
            is_array_item: Whether the node is the item schema of an array.

        Returns:
            The IR node. References are never dereferenced.

        Raises:
            ModelNameCollisionError: In strict mode, see BuilderContext.register.
        """
        if node is None:
            return UnknownSchema()
        if isinstance(node, Reference):
            return self._convert_reference(node)

        declared = node.types
        common = {
            'nullable': bool(node.nullable) or DataType.null in declared,
            'discriminator': _convert_discriminator(node),
        }

        if node.oneOf:
            return OneOfSchema(
                members=self._convert_members(
                    node.oneOf, parent_name, property_name, is_array_item
                ),
                **common,
            )
        if node.anyOf:
            return AnyOfSchema(
                members=self._convert_members(
                    node.anyOf, parent_name, property_name, is_array_item
                ),
                **common,
            )
        if node.allOf:
            return AllOfSchema(
                members=self._convert_members(
                    node.allOf, parent_name, property_name, is_array_item
                ),
                **common,
            )
        if node.not_ is not None:
            return NotSchema(
                inner=self.convert(
                    node.not_, parent_name, property_name, is_array_item
                ),
                **common,
            )

        if node.enum:
            return self._convert_enum(
                node, node.enum, common, parent_name, property_name, is_array_item
            )
        if node.const is not None:
            return self._convert_enum(
                node, [node.const], common, parent_name, property_name, is_array_item
            )

        kind = next((t for t in declared if t is not DataType.null), None)
        if kind is None and (
            node.properties is not None or node.additionalProperties not in (None, False)
        ):
            kind = DataType.object

        if kind is DataType.object:
            return self._convert_object(
                node, common, parent_name, property_name, is_array_item
            )
        if kind is DataType.array:
            return ArraySchema(
                items=self.convert(node.items, parent_name, property_name, True),
                format=node.format,
                **common,
            )
        if kind is DataType.string:
            return StringSchema(format=node.format, **common)
        if kind is DataType.integer:
            return IntegerSchema(format=node.format, **common)
        if kind is DataType.number:
            return NumberSchema(format=node.format, **common)
        if kind is DataType.boolean:
            return BooleanSchema(format=node.format, **common)
        if declared:
            # Only 'null' was declared
            return NullSchema(discriminator=common['discriminator'])

        unrecognized = sorted(
            key for key in (node.model_extra or {}) if not key.startswith('x-')
        )
        if unrecognized or node.format:
            location = self._synthetic_name(parent_name, property_name, is_array_item)
            logger.warning(
                f'Unrecognized schema at {location!r} '
                f'(keywords: {", ".join(unrecognized) or "format"}), using unknown type'
            )
        return UnknownSchema(format=node.format, **common)

    def _convert_reference(self, node: Reference) -> IRSchema:
        name = reference_name(node.ref)
        if not name:
            logger.warning(f'Reference {node.ref!r} has no name, using unknown type')
            return UnknownSchema()
        return RefSchema(name=name)

    def _convert_members(
        self,
        members: list[Schema | Reference],
        parent_name: str,
        property_name: str,
        is_array_item: bool,
    ) -> tuple[IRSchema, ...]:
        return tuple(
            self.convert(member, parent_name, property_name, is_array_item)
            for member in members
        )

    def _convert_enum(
        self,
        node: Schema,
        values: list[Any],
        common: dict[str, Any],
        parent_name: str,
        property_name: str,
        is_array_item: bool,
    ) -> IRSchema:
        literals = [value for value in values if value is not None]
        nullable = common['nullable'] or len(literals) < len(values)
        enum = EnumSchema(
            values=tuple(_enum_text(value) for value in literals),
            raw_values=tuple(literals),
            base_kind=_enum_base_kind(node, literals),
            format=node.format,
            nullable=nullable,
            discriminator=common['discriminator'],
        )
        if not self._is_nested(property_name, is_array_item):
            return enum

        name = self.context.register(
            self._synthetic_name(parent_name, property_name, is_array_item),
            enum,
            extract_annotations(node),
        )
        return RefSchema(name=name, nullable=nullable)

    def _convert_object(
        self,
        node: Schema,
        common: dict[str, Any],
        parent_name: str,
        property_name: str,
        is_array_item: bool,
    ) -> IRSchema:
        own_name = self._synthetic_name(parent_name, property_name, is_array_item)
        if not self._is_nested(property_name, is_array_item):
            return self._build_object(node, common, own_name)

        # Nested shapes are named after the final (possibly suffixed) name
        name = self.context.register_shape(
            own_name,
            lambda candidate: self._build_object(node, common, candidate),
            extract_annotations(node),
        )
        logger.debug(f'Hoisted nested object as {name!r}')
        return RefSchema(name=name, nullable=common['nullable'])

    def _build_object(
        self, node: Schema, common: dict[str, Any], own_name: str
    ) -> ObjectSchema:
        required = set(node.required or [])
        fields = [
            IRField(
                name=name,
                type=self.convert(prop, own_name, name),
                required=name in required,
                annotations=extract_annotations(prop),
            )
            for name, prop in sorted((node.properties or {}).items())
        ]

        additional = None
        extra = node.additionalProperties
        if extra is True:
            additional = UnknownSchema()
        elif isinstance(extra, Schema) and extra.properties and (
            not extra.types or DataType.object in extra.types
        ):
            # Declared fields take precedence over merged ones
            taken = {field.name for field in fields}
            extra_required = set(extra.required or [])
            fields.extend(
                IRField(
                    name=name,
                    type=self.convert(prop, own_name, name),
                    required=name in extra_required,
                    annotations=extract_annotations(prop),
                )
                for name, prop in sorted(extra.properties.items())
                if name not in taken
            )
            fields.sort(key=lambda field: field.name)
        elif isinstance(extra, (Schema, Reference)):
            additional = self.convert(extra, own_name, 'Properties')

        return ObjectSchema(
            properties=tuple(fields),
            additional_properties=additional,
            format=node.format,
            **common,
        )

    @staticmethod
    def _is_nested(property_name: str, is_array_item: bool) -> bool:
        return bool(property_name) or is_array_item

    @staticmethod
    def _synthetic_name(parent_name: str, property_name: str, is_array_item: bool) -> str:
        name = parent_name
        if property_name:
            name = f'{name}_{to_pascal_case(property_name)}'
        if is_array_item:
            name = f'{name}_Item'
        return name


def build_model_registry(
    document: OpenAPI, context: BuilderContext | None = None
) -> list[IRModelDef]:
    """Convert every component schema, in sorted name order.

    Each component is appended under its own name after the models hoisted out of
    it, so the result lists dependencies before the component that introduced them.

    Args:
        document: The OpenAPI document.
        context: Build context to register into. A fresh one is used if omitted.

    Returns:
        The context's model list.
    """
    context = context or BuilderContext()
    converter = SchemaConverter(context)
    schemas = {}
    if document.components is not None and document.components.schemas:
        schemas = document.components.schemas

    for name in sorted(schemas):
        node = schemas[name]
        schema = converter.convert(node, name)
        context.add_component(
            IRModelDef(name=name, schema=schema, annotations=extract_annotations(node))
        )

    logger.debug(
        f'Converted {len(schemas)} component schemas into {len(context.models)} models'
    )
    return context.models
