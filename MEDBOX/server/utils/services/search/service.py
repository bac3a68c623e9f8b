from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from MEDBOX.server.utils.configurations import (
    CatalogSettings,
    SearchSettings,
    server_settings,
)
from MEDBOX.server.utils.constants import FAST_PATH_MEDICATIONS
from MEDBOX.server.utils.logger import logger
from MEDBOX.server.utils.services.search.cache import CACHE_MISS, SearchResultCache
from MEDBOX.server.utils.services.search.catalog import (
    CatalogSnapshot,
    DrugCatalog,
    DrugCatalogLoader,
)
from MEDBOX.server.utils.services.search.scoring import score_match
from MEDBOX.server.utils.services.text.normalization import normalize_query


###############################################################################
@dataclass(frozen=True, slots=True)
class SearchResult:
    name: str
    score: float


###############################################################################
class DrugSearchService:
    """
    Fuzzy drug name search over the latest published catalog snapshot.

    Queries are answered from the prefix index, widened to neighbouring
    prefixes when too few candidates are found, scored, ranked and cached.
    While the first catalog load is still running on the seed list, a
    smaller fast path over the most common medications is used instead.

    """

    def __init__(
        self,
        catalog: DrugCatalog | None = None,
        loader: DrugCatalogLoader | None = None,
        settings: SearchSettings | None = None,
        catalog_settings: CatalogSettings | None = None,
        fast_path_names: Iterable[str] = FAST_PATH_MEDICATIONS,
    ) -> None:
        self.settings = settings or server_settings.search
        if catalog is None:
            catalog = loader.catalog if loader is not None else DrugCatalog()
        self.catalog = catalog
        self.loader = loader or DrugCatalogLoader(self.catalog, catalog_settings)
        self.cache: SearchResultCache[str, tuple[SearchResult, ...]] = (
            SearchResultCache(self.settings.cache_capacity)
        )
        self.fast_path_names = tuple(fast_path_names)
        self.loader.publish_seed()

    # -------------------------------------------------------------------------
    def search(self, query: str | None) -> list[SearchResult]:
        normalized = normalize_query(query)
        if not normalized:
            return []

        snapshot = self.catalog.current()
        if self.loader.is_loading and snapshot.seeded:
            return self.search_fast_path(normalized)

        cached = self.cache.get(normalized, snapshot.generation, CACHE_MISS)
        if cached is not CACHE_MISS:
            logger.debug("Search cache hit for '%s'", normalized)
            return list(cached)

        candidates = self.collect_candidates(normalized, snapshot)
        results = self.rank(
            normalized,
            candidates,
            self.settings.min_score,
            self.settings.max_results,
        )
        self.cache.put(normalized, tuple(results), snapshot.generation)
        return results

    # -------------------------------------------------------------------------
    def search_fast_path(self, normalized: str) -> list[SearchResult]:
        logger.debug("Catalog still loading; fast path search for '%s'", normalized)
        return self.rank(
            normalized,
            self.fast_path_names,
            self.settings.fast_path_min_score,
            self.settings.fast_path_max_results,
        )

    # -------------------------------------------------------------------------
    def collect_candidates(self, normalized: str, snapshot: CatalogSnapshot) -> set[str]:
        prefix = normalized[: self.settings.prefix_length]
        candidates = set(snapshot.index.lookup(prefix))
        logger.debug("Index lookup '%s' returned %d candidates", prefix, len(candidates))
        if len(candidates) < self.settings.min_candidates:
            for key, bucket in snapshot.index.items():
                if key in prefix or prefix in key:
                    candidates.update(bucket)
            logger.debug("Widened search for '%s' to %d candidates", prefix, len(candidates))
        if not candidates:
            candidates = set(snapshot.names)
        return candidates

    # -------------------------------------------------------------------------
    def rank(
        self,
        normalized: str,
        candidates: Iterable[str],
        min_score: float,
        max_results: int,
    ) -> list[SearchResult]:
        scored = []
        for name in candidates:
            score = score_match(normalized, name.lower())
            if score > min_score:
                scored.append(SearchResult(name=name, score=score))
        scored.sort(key=lambda result: (-result.score, result.name))
        return scored[:max_results]

    # -------------------------------------------------------------------------
    def load_catalog(self, source_path: str | None = None) -> bool:
        return self.loader.load(source_path)

    # -------------------------------------------------------------------------
    def is_catalog_loaded(self) -> bool:
        return self.loader.is_loaded

    # -------------------------------------------------------------------------
    def catalog_status(self) -> dict[str, Any]:
        snapshot = self.catalog.current()
        return {
            "loading": self.loader.is_loading,
            "loaded": self.loader.is_loaded,
            "names": len(snapshot.names),
            "generation": snapshot.generation,
        }

    # -------------------------------------------------------------------------
    def shutdown(self) -> None:
        self.loader.cancel()
