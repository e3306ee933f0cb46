"""Emitter interface and the built-in IR emitter.

This module provides the Emitter interface, the EmitterRegistry mapping target
identifiers to emitters, and IRJsonEmitter, which writes the derived IR of a
client together with a manifest of its types and method names as projected onto
the client's target.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from upath import UPath

from sdkgen.codegen.method_names import resolve_method_name
from sdkgen.codegen.projection import (
    VOCABULARIES,
    TargetVocabulary,
    TypeProjector,
    get_vocabulary,
)
from sdkgen.exceptions import OutputError, UnsupportedTargetError
from sdkgen.ir import IR, IROperation, ResponseKind

if TYPE_CHECKING:
    from sdkgen.config import ClientConfig

logger = logging.getLogger(__name__)

__all__ = ['Emitter', 'EmitterRegistry', 'IRJsonEmitter', 'default_registry']

IR_FILENAME = 'ir.json'
MANIFEST_FILENAME = 'manifest.json'


class Emitter(ABC):
    """Abstract base class for emitters.

    An Emitter renders the derived IR of one client into files under the
    client's output directory.
    """

    @abstractmethod
    def emit(self, client: 'ClientConfig', ir: IR) -> list[UPath]:
        """Write the client's files.

        Args:
            client: The client configuration; files it excludes must be skipped.
            ir: The derived IR of the client.

        Returns:
            The paths that were written.

        Raises:
            OutputError: If a file cannot be written.
        """
        pass


class EmitterRegistry:
    """Maps target identifiers to emitters."""

    def __init__(self):
        self._emitters: dict[str, Emitter] = {}

    def register(self, target: str, emitter: Emitter) -> None:
        self._emitters[target] = emitter

    def get(self, target: str) -> Emitter:
        """Look up the emitter of a target.

        Raises:
            UnsupportedTargetError: If no emitter is registered for ``target``.
        """
        try:
            return self._emitters[target]
        except KeyError:
            raise UnsupportedTargetError(target, self._emitters)

    def available(self) -> list[str]:
        return sorted(self._emitters)


class IRJsonEmitter(Emitter):
    """Writes ``ir.json`` and ``manifest.json`` into the output directory.

    ``ir.json`` is the derived IR as serialized by pydantic. ``manifest.json``
    lists the client's services with method names and rendered parameter, body
    and response types, and every model with its rendered type, using the
    target's vocabulary.

    Example:
        >>> emitter = IRJsonEmitter('typescript')
        >>> emitter.emit(client, derived_ir)
        [UPath('out/ir.json'), UPath('out/manifest.json')]
    """

    def __init__(self, vocabulary: TargetVocabulary | str):
        if isinstance(vocabulary, str):
            vocabulary = get_vocabulary(vocabulary)
        self.vocabulary = vocabulary

    def emit(self, client: 'ClientConfig', ir: IR) -> list[UPath]:
        out_dir = UPath(client.out_dir)
        files = {
            IR_FILENAME: ir.model_dump_json(indent=2, by_alias=True),
            MANIFEST_FILENAME: json.dumps(self.build_manifest(client, ir), indent=2),
        }

        written = []
        for filename, content in files.items():
            path = out_dir / filename
            if client.should_exclude_file(str(path)):
                logger.info(f'Skipping excluded file {path}')
                continue
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content + '\n', encoding='utf-8')
            except OSError as e:
                raise OutputError(str(path), cause=e)
            written.append(path)
        return written

    def build_manifest(self, client: 'ClientConfig', ir: IR) -> dict[str, Any]:
        projector = TypeProjector(self.vocabulary, known_models=ir.model_names())
        return {
            'target': self.vocabulary.name,
            'name': client.name,
            'packageName': client.package_name,
            'moduleName': client.module_name,
            'defaultBaseURL': client.default_base_url,
            'services': [
                {
                    'tag': service.tag,
                    'operations': [
                        self._describe_operation(client, projector, op)
                        for op in service.operations
                    ],
                }
                for service in ir.services
            ],
            'models': {
                model.name: projector.render(model.schema_) for model in ir.model_defs
            },
        }

    def _describe_operation(
        self, client: 'ClientConfig', projector: TypeProjector, op: IROperation
    ) -> dict[str, Any]:
        method_name = resolve_method_name(op, client.operation_id_parser)
        response = op.response
        if response.kind is ResponseKind.NO_CONTENT:
            response_type = None
        elif response.schema_ is None:
            response_type = self.vocabulary.unknown_type
        else:
            response_type = projector.render(response.schema_)

        return {
            'methodName': self.vocabulary.method_name(method_name),
            'method': op.method,
            'path': op.path,
            'pathParams': {
                param.name: projector.render(param.schema_)
                for param in op.ordered_path_params
            },
            'queryParams': {
                param.name: projector.render(param.schema_) for param in op.query_params
            },
            'requestBody': (
                projector.render(op.request_body.schema_) if op.request_body else None
            ),
            'response': response_type,
        }


def default_registry() -> EmitterRegistry:
    """Registry with an IRJsonEmitter for every known target vocabulary."""
    registry = EmitterRegistry()
    for name, vocabulary in VOCABULARIES.items():
        registry.register(name, IRJsonEmitter(vocabulary))
    return registry
