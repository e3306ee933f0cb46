"""Custom exceptions for sdkgen.

This module defines a hierarchy of exceptions used throughout sdkgen to provide
clear, actionable error messages for the different failure scenarios of a
generation run: loading the document, compiling it to IR, reading the
configuration, running hooks and writing output.
"""

from collections.abc import Iterable, Sequence


class SdkGenError(Exception):
    """Base exception for all sdkgen errors.

    All exceptions raised by sdkgen inherit from this class, making it easy
    to catch all sdkgen-related errors with a single except clause.

    Example:
        try:
            codegen.generate()
        except SdkGenError as e:
            print(f"sdkgen error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class SchemaError(SdkGenError):
    """Base exception for document-related errors."""

    pass


class SchemaLoadError(SchemaError):
    """Failed to load an OpenAPI document from a source.

    Attributes:
        source: The source path or URL that failed to load.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to load schema from '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class SchemaValidationError(SchemaError):
    """Document failed OpenAPI validation.

    Attributes:
        source: The source path or URL of the invalid document.
        errors: List of validation error messages.
    """

    def __init__(self, source: str, errors: list[str] | None = None):
        self.source = source
        self.errors = errors or []
        message = f"Schema validation failed for '{source}'"
        if errors:
            message += f': {"; ".join(errors)}'
        super().__init__(message)


class SchemaReferenceError(SchemaError):
    """Failed to resolve a $ref reference in the document.

    Attributes:
        reference: The $ref string that could not be resolved.
        reason: Explanation of why the reference couldn't be resolved.
    """

    def __init__(self, reference: str, reason: str | None = None):
        self.reference = reference
        self.reason = reason
        message = f"Failed to resolve reference '{reference}'"
        if reason:
            message += f': {reason}'
        super().__init__(message)


class CompilationError(SdkGenError):
    """Error while compiling a document into the intermediate representation."""

    pass


class ModelNameCollisionError(CompilationError):
    """Two structurally different shapes were given the same synthetic name.

    Only raised in strict mode; otherwise the second shape is renamed.

    Attributes:
        name: The colliding model name.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Synthetic model name '{name}' is already registered with a different shape"
        )


class UnresolvedReferenceError(CompilationError):
    """Surviving Ref nodes point at models that do not exist.

    Only raised in strict mode; otherwise the names are logged and projected
    as unknown types.

    Attributes:
        names: The unresolved model names, sorted.
    """

    def __init__(self, names: Iterable[str]):
        self.names = sorted(names)
        super().__init__(f'Unresolved model references: {", ".join(self.names)}')


class ConfigurationError(SdkGenError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class InvalidFilterPatternError(ConfigurationError):
    """A tag include/exclude expression is not a valid regular expression.

    Attributes:
        pattern: The offending expression text.
        reason: The compiler's error message.
    """

    def __init__(self, pattern: str, field: str | None = None, reason: str | None = None):
        self.pattern = pattern
        self.reason = reason
        message = f'Invalid tag filter pattern {pattern!r}'
        if reason:
            message += f': {reason}'
        super().__init__(message, field=field)


class UnsupportedTargetError(ConfigurationError):
    """A client asks for a target identifier no emitter knows about.

    Attributes:
        target: The unknown target identifier.
        available: The identifiers that are registered.
    """

    def __init__(self, target: str, available: Iterable[str] = ()):
        self.target = target
        self.available = sorted(available)
        message = f'Unsupported client type: {target!r}'
        if self.available:
            message += f' (available: {", ".join(self.available)})'
        super().__init__(message, field='type')


class HookError(SdkGenError):
    """A pre- or post-generation command failed.

    Files written before the failure are left on disk.

    Attributes:
        label: Which hook failed, e.g. 'pre-command'.
        command: The argument list that was executed.
        returncode: The exit status, or None if the command could not start.
    """

    def __init__(
        self,
        label: str,
        command: Sequence[str],
        returncode: int | None = None,
        cause: Exception | None = None,
    ):
        self.label = label
        self.command = list(command)
        self.returncode = returncode
        self.cause = cause
        message = f'{label} ({" ".join(self.command)}) failed'
        if returncode is not None:
            message += f' with exit status {returncode}'
        if cause:
            message += f': {cause}'
        super().__init__(message)


class OutputError(SdkGenError):
    """Error writing generated output.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)
