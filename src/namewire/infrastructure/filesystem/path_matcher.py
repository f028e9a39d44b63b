import fnmatch
import glob
import os
from pathlib import Path
from typing import Dict, List, Sequence, Union

from namewire.domain import IPathMatcher

EXCLUDE_PREFIX = "!"


class GlobPathMatcher(IPathMatcher):
    """Expands glob patterns into real file paths.

    Patterns are applied in order. A pattern starting with ``!`` removes the
    files it matches from those collected so far, either by expanding it like a
    positive pattern or by matching it against the collected real paths
    (``!*/b.py`` drops every ``b.py``). A later positive pattern may add them
    back. ``**`` matches recursively.

    Attributes:
        _base_path: Directory relative patterns are evaluated against.

    Example:
        >>> matcher = GlobPathMatcher(Path("services"))
        >>> matcher.match(["**/*.py", "!**/test_*.py"])
        ['/srv/app/services/db.py', '/srv/app/services/mailer.py']
    """

    def __init__(self, base_path: Union[str, Path, None] = None) -> None:
        self._base_path = Path(base_path) if base_path is not None else Path.cwd()

    def _expand(self, pattern: str) -> List[str]:
        full_pattern = os.path.join(str(self._base_path), pattern)
        return [
            os.path.realpath(path)
            for path in sorted(glob.glob(full_pattern, recursive=True))
            if os.path.isfile(path)
        ]

    def match(self, patterns: Union[str, Sequence[str]]) -> List[str]:
        """Expand patterns into an ordered, de-duplicated list of real paths.

        Args:
            patterns: A pattern or patterns; a leading ``!`` excludes matches.

        Returns:
            Real paths of matching files, in first-match order.
        """
        if isinstance(patterns, str):
            patterns = [patterns]

        # Dict keys keep insertion order and drop duplicates.
        matched: Dict[str, None] = {}
        for pattern in patterns:
            if pattern.startswith(EXCLUDE_PREFIX):
                excluded = pattern[len(EXCLUDE_PREFIX) :]
                for path in self._expand(excluded):
                    matched.pop(path, None)
                for path in [path for path in matched if fnmatch.fnmatch(path, excluded)]:
                    del matched[path]
            else:
                for path in self._expand(pattern):
                    matched.setdefault(path, None)
        return list(matched)
