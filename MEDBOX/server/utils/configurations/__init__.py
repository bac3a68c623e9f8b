from __future__ import annotations

from MEDBOX.server.utils.configurations.base import (
    ensure_mapping,
    load_configuration_data,
)

from MEDBOX.server.utils.configurations.server import (
    CatalogSettings,
    FastAPISettings,
    RefillSettings,
    SearchSettings,
    ServerSettings,
    build_server_settings,
    get_server_settings,
    resolve_contained_source_path,
    server_settings,
)

__all__ = [
    "ensure_mapping",
    "load_configuration_data",
    "CatalogSettings",
    "FastAPISettings",
    "RefillSettings",
    "SearchSettings",
    "ServerSettings",
    "build_server_settings",
    "get_server_settings",
    "resolve_contained_source_path",
    "server_settings",
]
