from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from MEDBOX.server.schemas.search import (
    CatalogLoadRequest,
    CatalogLoadResponse,
    CatalogStatusResponse,
    DrugMatch,
    DrugSearchResponse,
)
from MEDBOX.server.utils.configurations import resolve_contained_source_path
from MEDBOX.server.utils.constants import DRUG_CATALOG_ENDPOINT, DRUG_SEARCH_ENDPOINT
from MEDBOX.server.utils.logger import logger
from MEDBOX.server.utils.services.search.service import DrugSearchService

drug_search_service = DrugSearchService()
router = APIRouter(tags=["drugs"])


###############################################################################
class DrugSearchEndpoint:
    def __init__(self, *, router: APIRouter, service: DrugSearchService) -> None:
        self.router = router
        self.service = service

        self.router.add_api_route(
            DRUG_SEARCH_ENDPOINT,
            self.search_drugs,
            methods=["GET"],
            response_model=DrugSearchResponse,
        )
        self.router.add_api_route(
            DRUG_CATALOG_ENDPOINT,
            self.load_catalog,
            methods=["POST"],
            response_model=CatalogLoadResponse,
            status_code=status.HTTP_202_ACCEPTED,
        )
        self.router.add_api_route(
            DRUG_CATALOG_ENDPOINT,
            self.get_catalog_status,
            methods=["GET"],
            response_model=CatalogStatusResponse,
        )

    # -------------------------------------------------------------------------
    def search_drugs(
        self,
        query: str = Query("", max_length=200, description="Free-text drug name."),
    ) -> DrugSearchResponse:
        try:
            results = self.service.search(query)
        except Exception as exc:
            logger.exception("Drug search failed for '%s': %s", query, exc)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Drug search failed",
            ) from exc
        return DrugSearchResponse(
            query=query,
            count=len(results),
            results=[DrugMatch(name=item.name, score=item.score) for item in results],
        )

    # -------------------------------------------------------------------------
    def load_catalog(
        self, payload: CatalogLoadRequest | None = None
    ) -> CatalogLoadResponse:
        try:
            source_path = (
                resolve_contained_source_path(payload.source_path) if payload else None
            )
        except ValueError as exc:
            logger.warning("Rejected drug catalog source %r: %s", payload.source_path, exc)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Catalog source must be inside the sources directory",
            ) from exc
        logger.info("Drug catalog load requested (source: %s)", source_path or "default")
        started = self.service.load_catalog(source_path)
        catalog = self.service.catalog_status()
        return CatalogLoadResponse(
            started=started,
            loading=catalog["loading"],
            loaded=catalog["loaded"],
            names=catalog["names"],
        )

    # -------------------------------------------------------------------------
    def get_catalog_status(self) -> CatalogStatusResponse:
        return CatalogStatusResponse(**self.service.catalog_status())


endpoint = DrugSearchEndpoint(router=router, service=drug_search_service)
