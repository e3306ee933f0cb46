"""Tests for the sdkgen exception hierarchy."""

import pytest

from sdkgen.exceptions import (
    CompilationError,
    ConfigurationError,
    HookError,
    InvalidFilterPatternError,
    ModelNameCollisionError,
    OutputError,
    SchemaError,
    SchemaLoadError,
    SchemaReferenceError,
    SchemaValidationError,
    SdkGenError,
    UnresolvedReferenceError,
    UnsupportedTargetError,
)


@pytest.mark.parametrize(
    'error,parent',
    [
        (SchemaLoadError('api.yaml'), SchemaError),
        (SchemaValidationError('api.yaml'), SchemaError),
        (SchemaReferenceError('#/x'), SchemaError),
        (ModelNameCollisionError('Pet'), CompilationError),
        (UnresolvedReferenceError(['Pet']), CompilationError),
        (InvalidFilterPatternError('('), ConfigurationError),
        (UnsupportedTargetError('cobol'), ConfigurationError),
        (HookError('pre-command', ['make']), SdkGenError),
        (OutputError('out'), SdkGenError),
    ],
)
def test_hierarchy(error, parent):
    """Test every error can be caught by its parent and by SdkGenError."""
    assert isinstance(error, parent)
    assert isinstance(error, SdkGenError)


def test_schema_load_error():
    cause = OSError('permission denied')
    error = SchemaLoadError('api.yaml', cause=cause)
    assert str(error) == "Failed to load schema from 'api.yaml': permission denied"
    assert error.cause is cause


def test_schema_validation_error():
    error = SchemaValidationError('api.yaml', ['info: Field required', 'paths: bad'])
    assert str(error) == (
        "Schema validation failed for 'api.yaml': info: Field required; paths: bad"
    )
    assert SchemaValidationError('api.yaml').errors == []


def test_configuration_error():
    error = ConfigurationError('Bad value', config_path='sdkgen.yaml', field='clients')
    assert str(error) == "Bad value in 'sdkgen.yaml' (field: clients)"
    assert error.message == str(error)


def test_invalid_filter_pattern_error():
    error = InvalidFilterPatternError('(', field='includeTags', reason='missing )')
    assert str(error) == "Invalid tag filter pattern '(': missing ) (field: includeTags)"
    assert error.pattern == '('


def test_unsupported_target_error():
    error = UnsupportedTargetError('cobol', {'python': None, 'go': None})
    assert error.available == ['go', 'python']
    assert str(error) == (
        "Unsupported client type: 'cobol' (available: go, python) (field: type)"
    )


def test_unresolved_reference_error():
    error = UnresolvedReferenceError({'Zeta', 'Alpha'})
    assert error.names == ['Alpha', 'Zeta']
    assert str(error) == 'Unresolved model references: Alpha, Zeta'


def test_hook_error_without_status():
    error = HookError('post-command', ('prettier',), cause=FileNotFoundError('prettier'))
    assert error.returncode is None
    assert str(error) == 'post-command (prettier) failed: prettier'
