"""Tag based filtering of operations.

Include and exclude lists are regular expressions matched with search semantics,
so ``'user'`` matches the tags ``user`` and ``users-admin`` alike. Anchor the
expression (``'^user$'``) to match a tag exactly.
"""

import logging
import re
from collections.abc import Iterable, Sequence
from enum import Enum

from sdkgen.exceptions import InvalidFilterPatternError
from sdkgen.ir import FALLBACK_TAG, IRService

logger = logging.getLogger(__name__)

__all__ = ['FilterMode', 'TagFilter', 'compile_tag_patterns']


class FilterMode(str, Enum):
    """Granularity of tag filtering.

    OPERATION: each operation is tested against all of its declared tags.
    SERVICE: whole services are kept or dropped by their grouping tag.
    """

    OPERATION = 'operation'
    SERVICE = 'service'


def compile_tag_patterns(
    patterns: Iterable[str] | None, field: str | None = None
) -> list[re.Pattern]:
    """Compile tag filter expressions.

    Args:
        patterns: The expressions to compile.
        field: Configuration field the expressions come from, for error messages.

    Raises:
        InvalidFilterPatternError: If an expression does not compile.
    """
    compiled = []
    for pattern in patterns or ():
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise InvalidFilterPatternError(pattern, field=field, reason=str(e))
    return compiled


class TagFilter:
    """Include/exclude policy over tags.

    With a non-empty include list, a tag set passes only if at least one tag
    matches at least one include expression. A tag set with any tag matching an
    exclude expression never passes, whatever the include list says.

    Example:
        >>> tag_filter = TagFilter(include=['^pets$'], exclude=['internal'])
        >>> tag_filter.matches(['pets'])
        True
        >>> tag_filter.matches(['pets', 'internal'])
        False
    """

    def __init__(
        self,
        include: Sequence[str] | None = None,
        exclude: Sequence[str] | None = None,
        mode: FilterMode = FilterMode.OPERATION,
    ):
        self.include = compile_tag_patterns(include, field='includeTags')
        self.exclude = compile_tag_patterns(exclude, field='excludeTags')
        self.mode = FilterMode(mode)

    @property
    def is_noop(self) -> bool:
        return not self.include and not self.exclude

    def matches(self, tags: Iterable[str]) -> bool:
        """Whether a set of tags passes the filter.

        An empty tag set is treated as the fallback tag.
        """
        tags = list(tags) or [FALLBACK_TAG]
        if self.include and not any(
            pattern.search(tag) for tag in tags for pattern in self.include
        ):
            return False
        return not any(pattern.search(tag) for tag in tags for pattern in self.exclude)

    def filter_services(self, services: Iterable[IRService]) -> list[IRService]:
        """Narrow services to the operations that pass the filter.

        Services left without operations are dropped. The input is not modified.
        """
        result = []
        for service in services:
            if self.mode is FilterMode.SERVICE:
                kept = service.operations if self.matches([service.tag]) else ()
            else:
                kept = tuple(
                    op for op in service.operations if self.matches(op.effective_tags)
                )
            if not kept:
                logger.debug(f'Dropping service {service.tag!r}: no operations left')
                continue
            if len(kept) == len(service.operations):
                result.append(service)
            else:
                result.append(service.model_copy(update={'operations': kept}))
        return result
