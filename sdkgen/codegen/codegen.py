"""Code generation module for sdkgen.

This module provides the main Codegen class that orchestrates a generation run,
and the two pure steps it is built from: ``build_ir``, which compiles a document
into its full IR, and ``derive_ir``, which narrows that IR to one client.
"""

import logging

from upath import UPath

from sdkgen.codegen.collector import OperationCollector, collect_security_schemes
from sdkgen.codegen.converter import BuilderContext, build_model_registry
from sdkgen.codegen.dedup import deduplicate_models
from sdkgen.codegen.emitter import EmitterRegistry, default_registry
from sdkgen.codegen.filtering import TagFilter
from sdkgen.codegen.hooks import run_command
from sdkgen.codegen.pruning import ReachabilityPruner
from sdkgen.codegen.schema import SchemaLoader
from sdkgen.config import ClientConfig, GeneratorConfig
from sdkgen.exceptions import ConfigurationError, OutputError
from sdkgen.ir import IR
from sdkgen.openapi import OpenAPI

logger = logging.getLogger(__name__)

__all__ = ['Codegen', 'build_ir', 'derive_ir']


def build_ir(document: OpenAPI, strict: bool = False) -> IR:
    """Compile a document into its full IR.

    Component schemas are converted first, in sorted order, then the operations;
    models hoisted out of operation schemas follow the component models.

    Args:
        document: The OpenAPI document.
        strict: Raise on synthetic model name collisions instead of renaming.

    Returns:
        The IR with every operation and every model.
    """
    context = BuilderContext(strict=strict)
    build_model_registry(document, context)
    services = OperationCollector(document, context).collect()
    return IR(
        services=tuple(services),
        model_defs=tuple(context.models),
        security_schemes=tuple(collect_security_schemes(document)),
    )


def derive_ir(ir: IR, client: ClientConfig, strict: bool = False) -> IR:
    """Narrow a full IR to what one client needs.

    Operations are filtered by the client's tag expressions, the model registry
    is pruned to the models reachable from the surviving operations, and the
    result is deduplicated. ``ir`` itself is left untouched.

    Raises:
        InvalidFilterPatternError: If a tag expression does not compile.
        UnresolvedReferenceError: In strict mode, if a reachable reference has
            no model.
    """
    tag_filter = TagFilter(client.include_tags, client.exclude_tags, client.filter_mode)
    services = tag_filter.filter_services(ir.services)
    pruned = ReachabilityPruner(strict=strict).prune(services, ir.model_defs)
    return IR(
        services=tuple(services),
        model_defs=tuple(deduplicate_models(pruned.model_defs)),
        security_schemes=ir.security_schemes,
    )


class Codegen:
    """Runs a generation for the clients of a configuration.

    The document is loaded and compiled once; every client then gets its own
    derived IR, handed to the emitter registered for the client's target.

    Attributes:
        config: The GeneratorConfig of the run.
        registry: The EmitterRegistry used to look up targets.

    Example:
        >>> from sdkgen.config import get_config
        >>> codegen = Codegen(get_config('sdkgen.yaml'))
        >>> codegen.generate()
        {'web': [UPath('sdks/web/ir.json'), UPath('sdks/web/manifest.json')]}
    """

    def __init__(
        self,
        config: GeneratorConfig,
        schema_loader: SchemaLoader | None = None,
        registry: EmitterRegistry | None = None,
    ):
        """Initialize the code generator.

        Args:
            config: The generator configuration.
            schema_loader: Optional custom schema loader. If not provided,
                          a default SchemaLoader will be created.
            registry: Optional emitter registry; defaults to the built-in one.
        """
        self.config = config
        self.registry = registry or default_registry()
        self._schema_loader = schema_loader or SchemaLoader()

    def load_document(self) -> OpenAPI:
        """Load the configured document.

        Raises:
            SchemaLoadError: If the document cannot be loaded from the source.
            SchemaValidationError: If the document is not valid OpenAPI 3.x.
        """
        return self._schema_loader.load(self.config.spec)

    def build_ir(self, document: OpenAPI) -> IR:
        return build_ir(document, strict=self.config.strict)

    def derive(self, ir: IR, client: ClientConfig) -> IR:
        return derive_ir(ir, client, strict=self.config.strict)

    def check_client(self, client: ClientConfig) -> None:
        """Fail early on a client that cannot be generated.

        Raises:
            UnsupportedTargetError: If no emitter handles the client's target.
            InvalidFilterPatternError: If a tag expression does not compile.
        """
        self.registry.get(client.type)
        TagFilter(client.include_tags, client.exclude_tags, client.filter_mode)

    def generate(self, client_name: str | None = None) -> dict[str, list[UPath]]:
        """Generate every configured client, or only the one named.

        All clients are checked before the document is loaded, so a bad target or
        tag expression fails the run without touching the filesystem. Hooks are
        not transactional: when a post-command fails, the files written before it
        stay on disk.

        Returns:
            The written paths per client name.

        Raises:
            ConfigurationError: If no client is configured or the named one is
                missing, or a client fails its checks.
            SchemaError: If the document cannot be loaded.
            HookError: If a pre- or post-command fails.
            OutputError: If the output directory cannot be created.
        """
        if client_name:
            clients = [self.config.get_client(client_name)]
        else:
            clients = list(self.config.clients)
        if not clients:
            raise ConfigurationError('No clients configured', field='clients')

        for client in clients:
            self.check_client(client)

        document = self.load_document()
        full_ir = self.build_ir(document)
        logger.info(
            f'Built IR for {self.config.name or document.info.title}: '
            f'{len(full_ir.services)} services, {len(full_ir.model_defs)} models'
        )

        results = {}
        for client in clients:
            results[client.name] = self.generate_client(client, full_ir)
        return results

    def generate_client(self, client: ClientConfig, full_ir: IR) -> list[UPath]:
        emitter = self.registry.get(client.type)
        directory = UPath(client.out_dir)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(str(directory), cause=e)

        run_command(client.pre_command, directory, 'pre-command')
        derived = self.derive(full_ir, client)
        written = emitter.emit(client, derived)
        run_command(client.post_command, directory, 'post-command')

        logger.info(
            f'Generated {client.name} ({client.type}): '
            f'{len(derived.services)} services, {len(derived.model_defs)} models'
        )
        return written
