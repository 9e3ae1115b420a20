"""
In-process cache tag invalidator.

Records invalidated tags with a counter per tag. A real deployment would
forward them to its page cache.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable

logger = logging.getLogger(__name__)


class MemoryCacheTags:
    def __init__(self) -> None:
        self.invalidations: Counter[str] = Counter()

    def invalidate_tags(self, tags: Iterable[str]) -> None:
        tags = list(tags)
        self.invalidations.update(tags)
        logger.debug("Invalidated cache tags: %s", ", ".join(tags))

    def was_invalidated(self, tag: str) -> bool:
        return self.invalidations[tag] > 0
