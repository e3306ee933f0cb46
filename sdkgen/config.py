import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sdkgen.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['sdkgen.yaml', 'sdkgen.yml']


class ClientConfig(BaseModel):
    """Represents a single client to be generated from the document."""

    model_config = ConfigDict(populate_by_name=True, extra='forbid')

    type: str = Field(..., description='Target identifier, e.g. typescript or python.')

    out_dir: str = Field(
        ..., alias='outDir', description='Output directory for the generated client.'
    )

    package_name: str = Field(
        ..., alias='packageName', description='Package name of the generated client.'
    )

    module_name: str | None = Field(
        None, alias='moduleName', description='Optional module name, for targets that need one.'
    )

    name: str = Field(..., description='Name of the client, used to select it on the command line.')

    include_tags: list[str] = Field(
        default_factory=list,
        alias='includeTags',
        description='Regular expressions; only operations with a matching tag are kept.',
    )

    exclude_tags: list[str] = Field(
        default_factory=list,
        alias='excludeTags',
        description='Regular expressions; operations with a matching tag are dropped.',
    )

    filter_mode: Literal['operation', 'service'] = Field(
        'operation',
        alias='filterMode',
        description='Whether tags are matched per operation or per service.',
    )

    operation_id_parser: str | None = Field(
        None,
        alias='operationIdParser',
        description='Executable run as <parser> <operationId> <method> <path> to name methods.',
    )

    pre_command: list[str] = Field(
        default_factory=list,
        alias='preCommand',
        description='Command run in the output directory before generation.',
    )

    post_command: list[str] = Field(
        default_factory=list,
        alias='postCommand',
        description='Command run in the output directory after generation.',
    )

    default_base_url: str | None = Field(
        None,
        alias='defaultBaseURL',
        description='Base URL used when the generated client is created without one.',
    )

    exclude: list[str] = Field(
        default_factory=list,
        description='Files or directories, relative to outDir, that are never written.',
    )

    def should_exclude_file(self, target_path: str | Path) -> bool:
        """Check whether a file is excluded from generation.

        ``target_path`` is compared relative to ``out_dir``; an exclude entry
        matches the file itself or any file below it when it names a directory.
        Paths outside ``out_dir`` are never excluded.
        """
        if not self.exclude:
            return False

        try:
            relative = os.path.relpath(
                os.path.abspath(target_path), os.path.abspath(self.out_dir)
            )
        except ValueError:
            return False
        relative = Path(relative).as_posix()
        if relative == '.' or relative.startswith('../'):
            return False

        for entry in self.exclude:
            normalized = Path(entry).as_posix().rstrip('/')
            if not normalized:
                continue
            if relative == normalized or relative.startswith(normalized + '/'):
                return True
        return False


class GeneratorConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='SDKGEN_', populate_by_name=True)

    spec: str = Field(..., description='Path or URL to the OpenAPI document.')

    name: str | None = Field(None, description='Name of the API, used in messages.')

    clients: list[ClientConfig] = Field(
        default_factory=list, description='Clients to generate.'
    )

    strict: bool = Field(
        False,
        description='Fail on model name collisions and unresolved references instead of warning.',
    )

    @model_validator(mode='after')
    def _check_unique_client_names(self) -> 'GeneratorConfig':
        seen = set()
        for client in self.clients:
            if client.name in seen:
                raise ValueError(f'Duplicate client name {client.name!r}')
            seen.add(client.name)
        return self

    def get_client(self, name: str) -> ClientConfig:
        for client in self.clients:
            if client.name == name:
                return client
        available = ', '.join(client.name for client in self.clients) or 'none'
        raise ConfigurationError(
            f'No client named {name!r} (available: {available})', field='clients'
        )


def load_yaml(path: str | Path) -> dict:
    return yaml.safe_load(Path(path).read_text(encoding='utf-8')) or {}


def _build(data: dict, source: str) -> GeneratorConfig:
    if not isinstance(data, dict):
        raise ConfigurationError('Configuration must be a mapping', config_path=source)
    try:
        return GeneratorConfig(**data)
    except ValidationError as e:
        errors = '; '.join(
            f'{".".join(str(part) for part in error["loc"])}: {error["msg"]}'
            for error in e.errors()
        )
        raise ConfigurationError(f'Invalid configuration ({errors})', config_path=source)


def get_config(path: str | None = None) -> GeneratorConfig:
    """Load configuration from a file, the working directory or pyproject.toml."""
    if path:
        if not Path(path).exists():
            raise ConfigurationError('Configuration file not found', config_path=path)
        try:
            return _build(load_yaml(path), path)
        except yaml.YAMLError as e:
            raise ConfigurationError(f'Invalid YAML: {e}', config_path=path)

    cwd = os.getcwd()

    for filename in DEFAULT_FILENAMES:
        path = Path(cwd) / filename
        if path.exists():
            try:
                return _build(load_yaml(path), str(path))
            except yaml.YAMLError as e:
                raise ConfigurationError(f'Invalid YAML: {e}', config_path=str(path))

    path = Path(os.getcwd()) / 'pyproject.toml'

    if path.exists():
        import tomllib

        pyproject = tomllib.loads(path.read_text())
        tools = pyproject.get('tool', {})

        if 'sdkgen' in tools:
            return _build(tools['sdkgen'], str(path))

    raise ConfigurationError(
        f'No configuration found (looked for {", ".join(DEFAULT_FILENAMES)} '
        'and [tool.sdkgen] in pyproject.toml)'
    )
