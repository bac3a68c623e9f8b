from __future__ import annotations

from typing import Iterable, Iterator

MIN_PREFIX_LENGTH = 2
MAX_PREFIX_LENGTH = 5
EMPTY_BUCKET: frozenset[str] = frozenset()


###############################################################################
class PrefixSearchIndex:
    """
    Inverted index from short lowercase prefixes to canonical drug names.

    Every name of at least two characters is filed under each of its prefixes
    of length 2 through ``min(5, len(name))``. Buckets keep the original
    casing of the names so search results can be returned directly. The
    index is replaced wholesale on rebuild and is never patched in place.

    """

    __slots__ = ("buckets",)

    def __init__(self) -> None:
        self.buckets: dict[str, frozenset[str]] = {}

    # -------------------------------------------------------------------------
    @classmethod
    def build(cls, names: Iterable[str]) -> PrefixSearchIndex:
        index = cls()
        index.rebuild(names)
        return index

    # -------------------------------------------------------------------------
    def rebuild(self, names: Iterable[str]) -> None:
        staging: dict[str, set[str]] = {}
        for name in names:
            lowered = name.lower()
            upper_bound = min(MAX_PREFIX_LENGTH, len(lowered))
            for length in range(MIN_PREFIX_LENGTH, upper_bound + 1):
                staging.setdefault(lowered[:length], set()).add(name)
        self.buckets = {key: frozenset(values) for key, values in staging.items()}

    # -------------------------------------------------------------------------
    def lookup(self, prefix: str) -> frozenset[str]:
        if not prefix:
            return EMPTY_BUCKET
        return self.buckets.get(prefix.lower(), EMPTY_BUCKET)

    # -------------------------------------------------------------------------
    def items(self) -> Iterator[tuple[str, frozenset[str]]]:
        return iter(self.buckets.items())

    # -------------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self.buckets)

    # -------------------------------------------------------------------------
    def __contains__(self, prefix: object) -> bool:
        return isinstance(prefix, str) and prefix.lower() in self.buckets
