"""sdkgen - Compile OpenAPI documents into a language-agnostic client IR.

sdkgen converts an OpenAPI 3.x document into an intermediate representation of
services, operations and a flat, deterministically named model registry, narrows
that IR per client configuration (tag filtering and reachability pruning), and
hands it to a per-target emitter.

Quick Start:
    >>> from sdkgen import Codegen, get_config
    >>>
    >>> config = get_config('sdkgen.yaml')
    >>> Codegen(config).generate()

CLI Usage:
    $ sdkgen generate --config sdkgen.yaml
    $ sdkgen inspect ./api.yaml --include-tag '^pets$'
    $ sdkgen validate ./api.yaml
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _package_version

from sdkgen.codegen.codegen import Codegen, build_ir, derive_ir
from sdkgen.codegen.schema import SchemaLoader, SchemaResolver
from sdkgen.config import ClientConfig, GeneratorConfig, get_config
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
from sdkgen.ir import IR

__all__ = [
    # Main classes
    'Codegen',
    'IR',
    'build_ir',
    'derive_ir',
    'SchemaLoader',
    'SchemaResolver',
    # Configuration
    'ClientConfig',
    'GeneratorConfig',
    'get_config',
    # Exceptions
    'SdkGenError',
    'SchemaError',
    'SchemaLoadError',
    'SchemaValidationError',
    'SchemaReferenceError',
    'CompilationError',
    'ModelNameCollisionError',
    'UnresolvedReferenceError',
    'ConfigurationError',
    'InvalidFilterPatternError',
    'UnsupportedTargetError',
    'HookError',
    'OutputError',
]

try:
    __version__ = _package_version('sdkgen')
except PackageNotFoundError:
    __version__ = 'unknown'
