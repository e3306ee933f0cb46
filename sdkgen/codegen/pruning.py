"""Reachability pruning of the model registry.

After filtering, only the models transitively referenced by the surviving
operations are kept. References are followed through Ref nodes and through the
target names of discriminator mappings. Where a name has several definitions,
only the one deduplication keeps is followed.
"""

import dataclasses
import logging
from collections import deque
from collections.abc import Iterable, Iterator

from sdkgen.codegen.dedup import deduplicate_models
from sdkgen.exceptions import UnresolvedReferenceError
from sdkgen.ir import (
    IRModelDef,
    IRSchema,
    IRService,
    RefSchema,
    walk_schema,
)

logger = logging.getLogger(__name__)

__all__ = ['PruneResult', 'ReachabilityPruner', 'iter_references']


def iter_references(schema: IRSchema) -> Iterator[str]:
    """Model names a schema refers to, in traversal order (may repeat)."""
    for node in walk_schema(schema):
        if isinstance(node, RefSchema):
            yield node.name
        if node.discriminator is not None:
            yield from node.discriminator.mapping.values()


@dataclasses.dataclass
class PruneResult:
    """Outcome of a pruning pass.

    Attributes:
        model_defs: The reachable models, in registry order.
        reachable: Names of the reachable models, in registry order.
        unresolved: Referenced names with no model in the registry, sorted.
    """

    model_defs: list[IRModelDef]
    reachable: list[str]
    unresolved: list[str]


class ReachabilityPruner:
    """Computes the models reachable from a set of services.

    Args:
        strict: Raise UnresolvedReferenceError when a reachable reference has no
            model, instead of logging it.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def prune(
        self, services: Iterable[IRService], model_defs: Iterable[IRModelDef]
    ) -> PruneResult:
        model_defs = list(model_defs)
        # Traverse the definition deduplication will keep for each name
        registry = {model.name: model for model in deduplicate_models(model_defs)}

        queue = deque(
            name
            for service in services
            for operation in service.operations
            for schema in operation.iter_schemas()
            for name in iter_references(schema)
        )
        visited: set[str] = set()
        unresolved: set[str] = set()
        while queue:
            name = queue.popleft()
            if name in visited:
                continue
            visited.add(name)
            model = registry.get(name)
            if model is None:
                unresolved.add(name)
                continue
            queue.extend(iter_references(model.schema_))

        if unresolved:
            if self.strict:
                raise UnresolvedReferenceError(unresolved)
            logger.warning(
                f'Unresolved model references: {", ".join(sorted(unresolved))}'
            )

        kept = [model for model in model_defs if model.name in visited]
        reachable = []
        for model in kept:
            if model.name not in reachable:
                reachable.append(model.name)
        logger.debug(f'Kept {len(reachable)} of {len(registry)} models')
        return PruneResult(
            model_defs=kept, reachable=reachable, unresolved=sorted(unresolved)
        )
