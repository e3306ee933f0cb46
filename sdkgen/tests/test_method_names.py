"""Tests for method name resolution."""

import sys
from unittest.mock import MagicMock, patch

import pytest

from sdkgen.codegen.method_names import (
    derive_method_name,
    parse_operation_id,
    resolve_method_name,
)
from sdkgen.ir import IROperation


def _operation(method='GET', path='/pets', operation_id=None) -> IROperation:
    return IROperation(method=method, path=path, tag='pets', operation_id=operation_id)


class TestParseOperationId:
    """Tests for parse_operation_id."""

    def test_controller_prefix_is_stripped(self):
        """Test everything through Controller_ is removed."""
        assert parse_operation_id('PetsController_listPets') == 'listPets'

    def test_plain_id(self):
        """Test ids without the marker are used verbatim."""
        assert parse_operation_id('listPets') == 'listPets'

    def test_missing_id(self):
        """Test a missing id gives an empty name."""
        assert parse_operation_id(None) == ''
        assert parse_operation_id('') == ''


class TestDeriveMethodName:
    """Tests for derive_method_name."""

    @pytest.mark.parametrize(
        'method,path,expected',
        [
            ('GET', '/pets', 'list'),
            ('GET', '/pets/{petId}', 'get'),
            ('POST', '/pets', 'create'),
            ('PUT', '/pets/{petId}', 'update'),
            ('PATCH', '/pets/{petId}', 'update'),
            ('DELETE', '/pets/{petId}', 'delete'),
            ('HEAD', '/pets', 'head'),
        ],
    )
    def test_rest_names(self, method, path, expected):
        """Test names derived from method and path."""
        assert derive_method_name(_operation(method, path)) == expected


class TestResolveMethodName:
    """Tests for resolve_method_name."""

    def test_without_parser(self):
        """Test the built-in parsing is used without a parser."""
        assert resolve_method_name(_operation(operation_id='PetsController_list')) == 'list'
        assert resolve_method_name(_operation('POST')) == 'create'

    @patch('sdkgen.codegen.method_names.subprocess.run')
    def test_parser_output_wins(self, mock_run):
        """Test a successful parser's output is used."""
        mock_run.return_value = MagicMock(returncode=0, stdout='fetchAllPets\n')

        name = resolve_method_name(_operation(operation_id='listPets'), './parser')

        assert name == 'fetchAllPets'
        mock_run.assert_called_once_with(
            ['./parser', 'listPets', 'GET', '/pets'],
            capture_output=True,
            text=True,
            check=False,
        )

    @patch('sdkgen.codegen.method_names.subprocess.run')
    def test_parser_gets_empty_id(self, mock_run):
        """Test a missing operationId is passed as an empty argument."""
        mock_run.return_value = MagicMock(returncode=0, stdout='x')

        resolve_method_name(_operation(), './parser')

        assert mock_run.call_args[0][0] == ['./parser', '', 'GET', '/pets']

    @patch('sdkgen.codegen.method_names.subprocess.run')
    def test_parser_failure_falls_back(self, mock_run):
        """Test a non-zero exit falls back to the built-in name."""
        mock_run.return_value = MagicMock(returncode=1, stdout='ignored')

        assert resolve_method_name(_operation(operation_id='listPets'), './parser') == (
            'listPets'
        )

    @patch('sdkgen.codegen.method_names.subprocess.run')
    def test_parser_empty_output_falls_back(self, mock_run):
        """Test empty output falls back to the built-in name."""
        mock_run.return_value = MagicMock(returncode=0, stdout='  \n')

        assert resolve_method_name(_operation(), './parser') == 'list'

    @patch('sdkgen.codegen.method_names.subprocess.run')
    def test_parser_not_found_falls_back(self, mock_run):
        """Test a parser that cannot start falls back to the built-in name."""
        mock_run.side_effect = FileNotFoundError('no such file')

        assert resolve_method_name(_operation('DELETE', '/pets/{id}'), './parser') == (
            'delete'
        )

    @pytest.mark.skipif(sys.platform == 'win32', reason='needs a POSIX shell')
    def test_real_parser(self, tmp_path):
        """Test an executable parser on disk."""
        parser = tmp_path / 'parser.sh'
        parser.write_text('#!/bin/sh\necho "renamed_$2"\n')
        parser.chmod(0o755)

        assert resolve_method_name(_operation(operation_id='listPets'), str(parser)) == (
            'renamed_GET'
        )
