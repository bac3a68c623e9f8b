from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from MEDBOX.server.utils.configurations.base import (
    ensure_mapping,
    load_configuration_data,
)
from MEDBOX.server.utils.constants import (
    DEFAULT_CATALOG_FILENAME,
    SERVER_CONFIGURATION_FILE,
    SOURCES_PATH,
)
from MEDBOX.server.utils.types import (
    coerce_bool,
    coerce_fraction,
    coerce_int,
    coerce_positive_int,
    coerce_str,
    coerce_str_or_none,
)
from MEDBOX.server.utils.variables import env_variables


# [SERVER SETTINGS]
###############################################################################
@dataclass(frozen=True)
class FastAPISettings:
    title: str
    description: str
    version: str

# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class SearchSettings:
    cache_capacity: int
    min_candidates: int
    min_score: float
    fast_path_min_score: float
    max_results: int
    fast_path_max_results: int
    prefix_length: int

# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class CatalogSettings:
    source_path: str | None
    publish_interval: int
    max_rows: int
    brand_column: int
    generic_column: int
    min_name_length: int
    load_on_startup: bool

# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class RefillSettings:
    window_days: int
    refill_lead_days: int
    critical_days: int
    warning_days: int
    low_pills_threshold: int

# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ServerSettings:
    fastapi: FastAPISettings
    search: SearchSettings
    catalog: CatalogSettings
    refills: RefillSettings


# [BUILDER FUNCTIONS]
###############################################################################
def build_fastapi_settings(data: dict[str, Any]) -> FastAPISettings:
    payload = ensure_mapping(data)
    return FastAPISettings(
        title=coerce_str(payload.get("title"), "MEDBOX Medication Core"),
        version=coerce_str(payload.get("version"), "0.1.0"),
        description=coerce_str(
            payload.get("description"),
            "Medication name search and refill prediction backend",
        ),
    )

# -----------------------------------------------------------------------------
def build_search_settings(data: dict[str, Any]) -> SearchSettings:
    min_score = coerce_fraction(data.get("min_score"), 0.25)
    fast_path_min_score = coerce_fraction(data.get("fast_path_min_score"), 0.30)
    return SearchSettings(
        # Negative capacities are rejected by the cache itself.
        cache_capacity=coerce_int(data.get("cache_capacity"), 100),
        min_candidates=coerce_positive_int(data.get("min_candidates"), 20),
        min_score=min_score,
        fast_path_min_score=max(fast_path_min_score, min_score),
        max_results=coerce_positive_int(data.get("max_results"), 50),
        fast_path_max_results=coerce_positive_int(
            data.get("fast_path_max_results"),
            10,
        ),
        prefix_length=coerce_positive_int(data.get("prefix_length"), 3),
    )

# -----------------------------------------------------------------------------
def resolve_source_path(value: str | None) -> str | None:
    if not value:
        return None
    if os.path.isabs(value):
        return value
    return os.path.join(SOURCES_PATH, value)

# -----------------------------------------------------------------------------
def resolve_contained_source_path(
    value: str | None, root: str = SOURCES_PATH
) -> str | None:
    """
    Resolve a client-supplied catalog path, following symlinks and ``..``.
    Relative paths are taken from ``root``; anything that resolves outside
    ``root`` raises ValueError.

    """
    if not value:
        return None
    base = os.path.realpath(root)
    resolved = os.path.realpath(os.path.join(base, value))
    try:
        contained = os.path.commonpath([resolved, base]) == base
    except ValueError:
        contained = False
    if not contained:
        raise ValueError(f"Catalog source must be located under {base}")
    return resolved

# -----------------------------------------------------------------------------
def resolve_catalog_path(value: str | None) -> str | None:
    override = env_variables.get("MEDBOX_CATALOG_PATH")
    return resolve_source_path(override or value)

# -----------------------------------------------------------------------------
def build_catalog_settings(data: dict[str, Any]) -> CatalogSettings:
    source_value = (
        coerce_str_or_none(data.get("source_path"))
        if "source_path" in data
        else DEFAULT_CATALOG_FILENAME
    )
    return CatalogSettings(
        source_path=resolve_catalog_path(source_value),
        publish_interval=coerce_int(data.get("publish_interval"), 5_000),
        max_rows=coerce_int(data.get("max_rows"), 100_000),
        brand_column=coerce_int(data.get("brand_column"), 3),
        generic_column=coerce_int(data.get("generic_column"), 5),
        min_name_length=coerce_positive_int(data.get("min_name_length"), 3),
        load_on_startup=coerce_bool(data.get("load_on_startup"), True),
    )

# -----------------------------------------------------------------------------
def build_refill_settings(data: dict[str, Any]) -> RefillSettings:
    critical_days = coerce_int(data.get("critical_days"), 3)
    warning_days = coerce_int(data.get("warning_days"), 7)
    if warning_days < critical_days:
        warning_days = critical_days
    return RefillSettings(
        window_days=coerce_int(data.get("window_days"), 30),
        refill_lead_days=coerce_int(data.get("refill_lead_days"), 5),
        critical_days=critical_days,
        warning_days=warning_days,
        low_pills_threshold=coerce_int(data.get("low_pills_threshold"), 3),
    )

# -----------------------------------------------------------------------------
def build_server_settings(data: dict[str, Any] | Any) -> ServerSettings:
    payload = ensure_mapping(data)
    return ServerSettings(
        fastapi=build_fastapi_settings(ensure_mapping(payload.get("fastapi"))),
        search=build_search_settings(ensure_mapping(payload.get("search"))),
        catalog=build_catalog_settings(ensure_mapping(payload.get("catalog"))),
        refills=build_refill_settings(ensure_mapping(payload.get("refills"))),
    )


# [SERVER CONFIGURATION LOADER]
###############################################################################
def get_server_settings(config_path: str | None = None) -> ServerSettings:
    path = config_path or SERVER_CONFIGURATION_FILE
    payload = load_configuration_data(path)
    return build_server_settings(payload)


server_settings = get_server_settings()
