"""Deduplication of the model registry by name."""

import logging
from collections.abc import Iterable

from sdkgen.ir import EnumSchema, IRModelDef

logger = logging.getLogger(__name__)

__all__ = ['deduplicate_models']


def deduplicate_models(model_defs: Iterable[IRModelDef]) -> list[IRModelDef]:
    """Keep one model per name.

    An enum definition beats any non-enum definition of the same name; otherwise
    the first definition wins. The result is ordered by each name's first
    appearance, and applying the function twice gives the same result as once.

    Example:
        >>> models = [IRModelDef(name='Status', schema=StringSchema()),
        ...           IRModelDef(name='Status', schema=EnumSchema(values=('a',)))]
        >>> [type(m.schema_).__name__ for m in deduplicate_models(models)]
        ['EnumSchema']
    """
    chosen: dict[str, IRModelDef] = {}
    for model in model_defs:
        existing = chosen.get(model.name)
        if existing is None:
            chosen[model.name] = model
            continue
        if isinstance(model.schema_, EnumSchema) and not isinstance(
            existing.schema_, EnumSchema
        ):
            logger.debug(f'Enum definition of {model.name!r} replaces an earlier one')
            chosen[model.name] = model
        elif existing != model:
            logger.debug(f'Dropping duplicate definition of {model.name!r}')
    return list(chosen.values())
