"""Method names of generated client operations.

The name is chosen in this order:

1. An external parser command, run as ``<parser> <operationId> <method> <path>``,
   whose trimmed stdout is used when it exits with status 0 and prints something.
2. The operationId, with everything up to and including ``Controller_`` removed
   (``PetsController_listPets`` becomes ``listPets``).
3. A name derived from the HTTP method and whether the path has a parameter.

The result is not yet cased; targets apply their own casing on top.
"""

import logging
import subprocess

from sdkgen.ir import IROperation

logger = logging.getLogger(__name__)

__all__ = ['derive_method_name', 'parse_operation_id', 'resolve_method_name']

CONTROLLER_MARKER = 'Controller_'

_METHOD_VERBS = {
    'POST': 'create',
    'PUT': 'update',
    'PATCH': 'update',
    'DELETE': 'delete',
}


def parse_operation_id(operation_id: str | None) -> str:
    """Built-in operationId parsing; empty string when there is no id."""
    if not operation_id:
        return ''
    index = operation_id.find(CONTROLLER_MARKER)
    if index >= 0:
        return operation_id[index + len(CONTROLLER_MARKER) :]
    return operation_id


def derive_method_name(operation: IROperation) -> str:
    """REST-style name from the HTTP method.

    GET is ``get`` on a path with a parameter and ``list`` otherwise; POST is
    ``create``, PUT and PATCH ``update``, DELETE ``delete``. Any other method is
    its lowercase name.
    """
    method = operation.method.upper()
    if method == 'GET':
        return 'get' if '{' in operation.path and '}' in operation.path else 'list'
    return _METHOD_VERBS.get(method, method.lower())


def _run_parser(parser: str, operation: IROperation) -> str:
    command = [parser, operation.operation_id or '', operation.method, operation.path]
    try:
        result = subprocess.run(command, capture_output=True, text=True, check=False)
    except OSError as e:
        logger.warning(f'Operation id parser {parser!r} could not be started: {e}')
        return ''
    if result.returncode != 0:
        logger.debug(
            f'Operation id parser exited with status {result.returncode} '
            f'for {operation.method} {operation.path}'
        )
        return ''
    return result.stdout.strip()


def resolve_method_name(operation: IROperation, parser: str | None = None) -> str:
    """Choose the method name of an operation.

    Args:
        operation: The operation to name.
        parser: Optional external parser command.

    Returns:
        The uncased method name.
    """
    if parser:
        name = _run_parser(parser, operation)
        if name:
            return name
    return parse_operation_id(operation.operation_id) or derive_method_name(operation)
