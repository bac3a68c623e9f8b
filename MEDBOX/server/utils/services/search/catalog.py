from __future__ import annotations

import os
import threading
import time
from dataclasses import dataclass, field
from typing import Iterable

import pandas as pd
from pandas.io.parsers import TextFileReader

from MEDBOX.server.utils.configurations import CatalogSettings, server_settings
from MEDBOX.server.utils.constants import FALLBACK_MEDICATIONS, MISSING_FIELD_MARKERS
from MEDBOX.server.utils.logger import logger
from MEDBOX.server.utils.patterns import UNDECODABLE_CHAR
from MEDBOX.server.utils.services.search.index import PrefixSearchIndex
from MEDBOX.server.utils.services.text.normalization import (
    coerce_text,
    normalize_drug_name,
)


###############################################################################
@dataclass(frozen=True, slots=True)
class CatalogSnapshot:
    names: frozenset[str]
    index: PrefixSearchIndex = field(compare=False)
    generation: int = 0
    seeded: bool = False


###############################################################################
class DrugCatalog:
    """Holds the latest published (names, index) pair behind one reference."""

    def __init__(self) -> None:
        self.snapshot = CatalogSnapshot(
            names=frozenset(), index=PrefixSearchIndex(), generation=0
        )
        self.publish_lock = threading.Lock()

    # -------------------------------------------------------------------------
    def current(self) -> CatalogSnapshot:
        return self.snapshot

    # -------------------------------------------------------------------------
    def publish(self, names: Iterable[str], seeded: bool = False) -> CatalogSnapshot:
        frozen = frozenset(names)
        index = PrefixSearchIndex.build(frozen)
        with self.publish_lock:
            snapshot = CatalogSnapshot(
                names=frozen,
                index=index,
                generation=self.snapshot.generation + 1,
                seeded=seeded,
            )
            self.snapshot = snapshot
        return snapshot

    # -------------------------------------------------------------------------
    @property
    def generation(self) -> int:
        return self.snapshot.generation

    # -------------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self.snapshot.names)


###############################################################################
class DrugCatalogLoader:
    """
    Streams the drug products file into a DrugCatalog.

    The fallback seed list is published synchronously so searches have data
    immediately. The source file is then read with pandas in batches of
    ``publish_interval`` rows on a daemon thread, and the growing name set is
    published after every batch until the file ends or ``max_rows`` is reached.

    """

    def __init__(
        self,
        catalog: DrugCatalog,
        settings: CatalogSettings | None = None,
        seed: Iterable[str] = FALLBACK_MEDICATIONS,
    ) -> None:
        settings = settings or server_settings.catalog
        if settings.publish_interval <= 0:
            raise ValueError("Catalog publish interval must be positive")
        if settings.max_rows <= 0:
            raise ValueError("Catalog row cap must be positive")
        self.catalog = catalog
        self.settings = settings
        self.seed_names = tuple(seed)
        self.name_columns = sorted({settings.brand_column, settings.generic_column})
        self.lock = threading.Lock()
        self.cancel_event = threading.Event()
        self.worker: threading.Thread | None = None
        self.is_loading = False
        self.is_loaded = False

    # -------------------------------------------------------------------------
    def load(self, source_path: str | None = None, background: bool = True) -> bool:
        with self.lock:
            if self.is_loading:
                logger.debug("Drug catalog load already in progress; ignoring request")
                return False
            self.is_loading = True
            self.cancel_event.clear()

        self.publish_seed()
        path = source_path or self.settings.source_path
        if not path or not os.path.isfile(path):
            logger.warning(
                "Drug catalog source not available (%s); keeping %d fallback names",
                path,
                len(self.catalog),
            )
            self.finish_loading()
            return False

        if not background:
            self.run_stream(path)
            return True
        self.worker = threading.Thread(
            target=self.run_stream,
            args=(path,),
            name="drug-catalog-loader",
            daemon=True,
        )
        self.worker.start()
        return True

    # -------------------------------------------------------------------------
    def publish_seed(self) -> None:
        if len(self.catalog) > 0:
            return
        self.catalog.publish(self.seed_names, seeded=True)
        logger.info("Seeded drug catalog with %d fallback names", len(self.seed_names))

    # -------------------------------------------------------------------------
    def run_stream(self, path: str) -> None:
        try:
            self.stream_catalog(path)
        finally:
            self.finish_loading()

    # -------------------------------------------------------------------------
    def finish_loading(self) -> None:
        with self.lock:
            self.is_loading = False

    # -------------------------------------------------------------------------
    def cancel(self) -> None:
        self.cancel_event.set()

    # -------------------------------------------------------------------------
    def wait(self, timeout: float | None = None) -> bool:
        worker = self.worker
        if worker is not None:
            worker.join(timeout)
        return not self.is_loading

    # -------------------------------------------------------------------------
    def read_chunks(self, path: str) -> TextFileReader:
        return pd.read_csv(
            path,
            header=0,
            usecols=self.name_columns,
            dtype=str,
            keep_default_na=False,
            chunksize=self.settings.publish_interval,
            nrows=self.settings.max_rows,
            on_bad_lines="skip",
            encoding="utf-8",
            encoding_errors="replace",
        )

    # -------------------------------------------------------------------------
    def collect_names(self, chunk: pd.DataFrame, working: set[str]) -> None:
        # short rows come back padded with NaN in the name columns
        rows = chunk.dropna()
        if rows.empty:
            return
        undecodable = rows.apply(
            lambda column: column.str.contains(UNDECODABLE_CHAR, regex=False)
        )
        rows = rows[~undecodable.any(axis=1)]
        for value in rows.to_numpy().ravel():
            text = coerce_text(value)
            if text is None or text.lower() in MISSING_FIELD_MARKERS:
                continue
            normalized = normalize_drug_name(text)
            if len(normalized) >= self.settings.min_name_length:
                working.add(normalized)

    # -------------------------------------------------------------------------
    def stream_catalog(self, path: str) -> bool:
        started = time.perf_counter()
        working = set(self.catalog.current().names)
        rows = 0
        try:
            with self.read_chunks(path) as reader:
                batches = iter(reader)
                # a batch is only read once cancellation has been ruled out
                while not self.cancel_event.is_set():
                    chunk = next(batches, None)
                    if chunk is None:
                        break
                    rows += len(chunk)
                    self.collect_names(chunk, working)
                    self.catalog.publish(working)
                    logger.info(
                        "Processed %d catalog rows, %d unique drug names",
                        rows,
                        len(working),
                    )
        except (OSError, ValueError) as exc:
            logger.warning("Drug catalog streaming aborted for %s: %s", path, exc)
            return False

        if self.cancel_event.is_set():
            logger.info("Drug catalog load cancelled after %d rows", rows)
            return False

        if rows == 0:
            self.catalog.publish(working)
        if rows >= self.settings.max_rows:
            logger.info(
                "Drug catalog row cap of %d reached; stopped early",
                self.settings.max_rows,
            )
        self.is_loaded = True
        logger.info(
            "Drug catalog loaded: %d unique names from %d rows in %.2f s",
            len(working),
            rows,
            time.perf_counter() - started,
        )
        return True
