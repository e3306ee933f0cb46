"""Compilation of OpenAPI documents into the sdkgen IR.

Main Components:
    - Codegen: The orchestrator of a generation run
    - SchemaConverter: Converts schemas into IR nodes and hoists nested shapes
    - OperationCollector: Groups operations into services
    - TagFilter: Include/exclude policy over operation tags
    - ReachabilityPruner: Keeps the models the surviving operations need
    - TypeProjector: Maps IR nodes onto a target's type vocabulary
    - SchemaLoader: Loads OpenAPI documents from URLs or files

Example:
    >>> from sdkgen.codegen import build_ir, derive_ir
    >>> from sdkgen.config import ClientConfig
    >>>
    >>> full = build_ir(document)
    >>> client = ClientConfig(type='typescript', outDir='out', packageName='api', name='web')
    >>> derived = derive_ir(full, client)
"""

from sdkgen.codegen.codegen import Codegen, build_ir, derive_ir
from sdkgen.codegen.collector import OperationCollector
from sdkgen.codegen.converter import BuilderContext, SchemaConverter, build_model_registry
from sdkgen.codegen.dedup import deduplicate_models
from sdkgen.codegen.emitter import Emitter, EmitterRegistry, IRJsonEmitter
from sdkgen.codegen.filtering import FilterMode, TagFilter
from sdkgen.codegen.projection import TargetVocabulary, TypeProjector, get_vocabulary
from sdkgen.codegen.pruning import ReachabilityPruner
from sdkgen.codegen.schema import SchemaLoader, SchemaResolver

__all__ = [
    # Orchestration
    'Codegen',
    'build_ir',
    'derive_ir',
    # Compilation
    'BuilderContext',
    'SchemaConverter',
    'build_model_registry',
    'OperationCollector',
    # Narrowing
    'FilterMode',
    'TagFilter',
    'ReachabilityPruner',
    'deduplicate_models',
    # Projection and output
    'TargetVocabulary',
    'TypeProjector',
    'get_vocabulary',
    'Emitter',
    'EmitterRegistry',
    'IRJsonEmitter',
    # Schema handling
    'SchemaLoader',
    'SchemaResolver',
]
