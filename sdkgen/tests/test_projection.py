"""Tests for per-target type projection."""

import pytest

from sdkgen.codegen.projection import (
    VOCABULARIES,
    ApproximatedType,
    BytesType,
    InlineField,
    InlineObjectType,
    IntersectionType,
    LiteralType,
    MappingType,
    NamedType,
    NullType,
    OptionalType,
    ScalarType,
    SequenceType,
    TypeProjector,
    UnionType,
    UnknownType,
    get_vocabulary,
)
from sdkgen.exceptions import UnsupportedTargetError
from sdkgen.ir import (
    AllOfSchema,
    AnyOfSchema,
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    IntegerSchema,
    IRField,
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

STRING_ENUM = EnumSchema(
    values=('asc', 'desc'), raw_values=('asc', 'desc'), base_kind=SchemaKind.STRING
)
INTEGER_ENUM = EnumSchema(values=('1', '2'), raw_values=(1, 2), base_kind=SchemaKind.INTEGER)


class TestVocabularies:
    """Tests for vocabulary lookup."""

    def test_known_targets(self):
        """Test the built-in targets."""
        assert sorted(VOCABULARIES) == ['go', 'python', 'typescript', 'typescript-types']

    def test_unknown_target(self):
        """Test an unknown target is reported with its value."""
        with pytest.raises(UnsupportedTargetError) as exc_info:
            get_vocabulary('cobol')
        assert exc_info.value.target == 'cobol'
        assert 'python' in exc_info.value.available

    def test_projector_accepts_identifier(self):
        """Test a projector can be created from a target identifier."""
        assert TypeProjector('go').vocabulary is VOCABULARIES['go']


class TestProjectionRules:
    """Tests for the target-independent projection rules."""

    @pytest.mark.parametrize('target', sorted(VOCABULARIES))
    def test_primitives(self, target):
        """Test primitive kinds map one to one."""
        projector = TypeProjector(target)
        assert projector.project(StringSchema()) == ScalarType(SchemaKind.STRING)
        assert projector.project(IntegerSchema()) == ScalarType(SchemaKind.INTEGER)
        assert projector.project(NumberSchema()) == ScalarType(SchemaKind.NUMBER)
        assert projector.project(BooleanSchema()) == ScalarType(SchemaKind.BOOLEAN)
        assert projector.project(NullSchema()) == NullType()
        assert projector.project(UnknownSchema()) == UnknownType()

    @pytest.mark.parametrize('target', sorted(VOCABULARIES))
    def test_binary_string(self, target):
        """Test binary strings become byte buffers."""
        assert TypeProjector(target).project(StringSchema(format='binary')) == BytesType()

    def test_array_and_ref(self):
        """Test sequences and named models."""
        projector = TypeProjector('python')
        assert projector.project(ArraySchema(items=RefSchema(name='Pet'))) == SequenceType(
            NamedType('Pet')
        )

    def test_unknown_ref_degrades(self):
        """Test references to models the emitter lacks become unknown."""
        projector = TypeProjector('python', known_models=['Pet'])
        assert projector.project(RefSchema(name='Pet')) == NamedType('Pet')
        assert projector.project(RefSchema(name='Missing')) == UnknownType()

    def test_union_supported(self):
        """Test unions map to union types where supported."""
        projector = TypeProjector('typescript')
        schema = OneOfSchema(members=(StringSchema(), RefSchema(name='Pet')))
        assert projector.project(schema) == UnionType(
            (ScalarType(SchemaKind.STRING), NamedType('Pet'))
        )
        any_of = AnyOfSchema(members=(StringSchema(),))
        assert projector.project(any_of) == UnionType((ScalarType(SchemaKind.STRING),))

    def test_union_unsupported(self):
        """Test unions are approximated on targets without them."""
        schema = OneOfSchema(members=(StringSchema(), RefSchema(name='Pet')))
        assert TypeProjector('go').project(schema) == ApproximatedType(UnknownType(), 'union')

    def test_intersection_supported(self):
        """Test allOf maps to an intersection where supported."""
        schema = AllOfSchema(members=(RefSchema(name='Base'), RefSchema(name='Extra')))
        assert TypeProjector('typescript').project(schema) == IntersectionType(
            (NamedType('Base'), NamedType('Extra'))
        )

    @pytest.mark.parametrize('target', ['python', 'go'])
    def test_intersection_unsupported_uses_first_member(self, target):
        """Test allOf falls back to its first member, marked as approximated."""
        schema = AllOfSchema(members=(RefSchema(name='Base'), RefSchema(name='Extra')))
        assert TypeProjector(target).project(schema) == ApproximatedType(
            NamedType('Base'), 'intersection'
        )

    def test_negation(self):
        """Test negation is approximated by an unknown type."""
        assert TypeProjector('python').project(NotSchema(inner=StringSchema())) == (
            ApproximatedType(UnknownType(), 'negation')
        )

    def test_enum_literals(self):
        """Test enums become literal types where supported."""
        assert TypeProjector('typescript').project(INTEGER_ENUM) == LiteralType((1, 2))
        assert TypeProjector('python').project(STRING_ENUM) == LiteralType(('asc', 'desc'))

    def test_enum_base_kind_fallback(self):
        """Test enums fall back to their base kind scalar."""
        assert TypeProjector('python').project(INTEGER_ENUM) == ScalarType(SchemaKind.INTEGER)
        assert TypeProjector('go').project(STRING_ENUM) == ScalarType(SchemaKind.STRING)

    def test_empty_enum(self):
        """Test an enum without values is unknown."""
        assert TypeProjector('typescript').project(EnumSchema()) == UnknownType()

    def test_objects(self):
        """Test inline objects and maps."""
        obj = ObjectSchema(
            properties=(IRField(name='id', type=StringSchema(), required=True),)
        )
        assert TypeProjector('typescript').project(obj) == InlineObjectType(
            (InlineField('id', ScalarType(SchemaKind.STRING), True),)
        )
        assert TypeProjector('python').project(obj) == MappingType(UnknownType())
        map_schema = ObjectSchema(additional_properties=IntegerSchema())
        assert TypeProjector('go').project(map_schema) == MappingType(
            ScalarType(SchemaKind.INTEGER)
        )


class TestNullable:
    """Tests for nullable wrapping."""

    @pytest.mark.parametrize('target', sorted(VOCABULARIES))
    def test_wraps_once(self, target):
        """Test nullable types get one optional wrapper."""
        projector = TypeProjector(target)
        assert projector.project(StringSchema(nullable=True)) == OptionalType(
            ScalarType(SchemaKind.STRING)
        )

    @pytest.mark.parametrize('target', sorted(VOCABULARIES))
    def test_null_is_not_wrapped(self, target):
        """Test a nullable null type stays the null type."""
        assert TypeProjector(target).project(NullSchema(nullable=True)) == NullType()

    def test_nested_nullable_items(self):
        """Test nullable items and a nullable array wrap separately."""
        schema = ArraySchema(items=RefSchema(name='Pet', nullable=True), nullable=True)
        assert TypeProjector('python').project(schema) == OptionalType(
            SequenceType(OptionalType(NamedType('Pet')))
        )


class TestRendering:
    """Tests for rendering type expressions per target."""

    @pytest.mark.parametrize(
        'target,expected',
        [
            ('typescript', 'Array<Schema.Pet> | null'),
            ('typescript-types', 'Array<Pet> | null'),
            ('python', 'Optional[List[Pet]]'),
            ('go', '*[]Pet'),
        ],
    )
    def test_nullable_array_of_refs(self, target, expected):
        """Test a nullable array of models in every target."""
        schema = ArraySchema(items=RefSchema(name='Pet'), nullable=True)
        assert TypeProjector(target).render(schema) == expected

    @pytest.mark.parametrize(
        'target,expected',
        [
            ('typescript', 'Record<string, number>'),
            ('python', 'Dict[str, int]'),
            ('go', 'map[string]int64'),
        ],
    )
    def test_map(self, target, expected):
        """Test maps of integers."""
        schema = ObjectSchema(additional_properties=IntegerSchema())
        assert TypeProjector(target).render(schema) == expected

    def test_typescript_union_and_literal(self):
        """Test TypeScript unions and literals."""
        projector = TypeProjector('typescript')
        assert projector.render(OneOfSchema(members=(StringSchema(), NumberSchema()))) == (
            'string | number'
        )
        assert projector.render(STRING_ENUM) == '"asc" | "desc"'
        assert projector.render(ArraySchema(items=STRING_ENUM)) == 'Array<("asc" | "desc")>'

    def test_typescript_inline_object(self):
        """Test TypeScript inline object shapes."""
        obj = ObjectSchema(
            properties=(
                IRField(name='id', type=StringSchema(), required=True),
                IRField(name='age', type=IntegerSchema()),
            )
        )
        assert TypeProjector('typescript').render(obj) == '{id: string; age?: number}'

    def test_python_literal_and_union(self):
        """Test Python literals and unions."""
        projector = TypeProjector('python')
        assert projector.render(STRING_ENUM) == 'Literal["asc", "desc"]'
        assert projector.render(AnyOfSchema(members=(StringSchema(), IntegerSchema()))) == (
            'Union[str, int]'
        )

    def test_go_names_and_bytes(self):
        """Test Go model names and byte slices."""
        projector = TypeProjector('go')
        assert projector.render(RefSchema(name='pet_owner')) == 'PetOwner'
        assert projector.render(StringSchema(format='binary')) == '[]byte'
        assert projector.render(AllOfSchema(members=(RefSchema(name='Base'),))) == 'Base'

    def test_method_name_casing(self):
        """Test each target cases method names its own way."""
        assert VOCABULARIES['typescript'].method_name('list_pets') == 'listPets'
        assert VOCABULARIES['python'].method_name('listPets') == 'list_pets'
        assert VOCABULARIES['go'].method_name('listPets') == 'ListPets'
