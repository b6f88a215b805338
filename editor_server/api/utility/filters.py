"""Path filtering for file listings."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence


class IncludeExcludeFilter:
    """Match paths against include and exclude regex patterns.

    A path matches when it matches at least one include pattern (or there are
    no include patterns) and none of the exclude patterns.  Patterns are
    applied with ``re.search``.
    """

    def __init__(
        self,
        *,
        includes: Sequence[str | re.Pattern[str]] = (),
        excludes: Sequence[str | re.Pattern[str]] = (),
    ) -> None:
        self.includes = [re.compile(p) for p in includes]
        self.excludes = [re.compile(p) for p in excludes]

    def matches(self, path: str) -> bool:
        if self.includes and not any(p.search(path) for p in self.includes):
            return False
        return not any(p.search(path) for p in self.excludes)

    def filter(self, paths: Iterable[str]) -> list[str]:
        return [path for path in paths if self.matches(path)]
