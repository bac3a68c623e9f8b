from __future__ import annotations

import time

from MEDBOX.server.utils.configurations import server_settings
from MEDBOX.server.utils.logger import logger
from MEDBOX.server.utils.services.search.service import DrugSearchService

SAMPLE_QUERIES = ("amox", "lisinopril", "metfrmin", "ibu", "vitamin d")
TOP_MATCHES = 5


# -----------------------------------------------------------------------------
def report_matches(service: DrugSearchService, queries: tuple[str, ...]) -> None:
    for query in queries:
        results = service.search(query)
        if not results:
            logger.info("'%s': no matches", query)
            continue
        summary = ", ".join(
            f"{result.name} ({result.score:.2f})" for result in results[:TOP_MATCHES]
        )
        logger.info("'%s': %d matches, top: %s", query, len(results), summary)


###############################################################################
if __name__ == "__main__":
    source = server_settings.catalog.source_path
    service = DrugSearchService()
    start = time.perf_counter()
    logger.info("Inspecting drug catalog at %s", source)
    service.loader.load(source, background=False)
    elapsed = time.perf_counter() - start
    status = service.catalog_status()
    logger.info(
        "Catalog ready in %.2f seconds: %d unique names (loaded=%s)",
        elapsed,
        status["names"],
        status["loaded"],
    )
    report_matches(service, SAMPLE_QUERIES)
