from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from MEDBOX.server.routes.refills import router as refills_router
from MEDBOX.server.routes.search import drug_search_service
from MEDBOX.server.routes.search import router as search_router
from MEDBOX.server.utils.configurations import server_settings
from MEDBOX.server.utils.logger import logger


# -----------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if server_settings.catalog.load_on_startup:
        logger.info("Starting background drug catalog load")
        drug_search_service.load_catalog()
    yield
    drug_search_service.shutdown()


###############################################################################
app = FastAPI(
    title=server_settings.fastapi.title,
    version=server_settings.fastapi.version,
    description=server_settings.fastapi.description,
    lifespan=lifespan,
)

app.include_router(search_router)
app.include_router(refills_router)

@app.get("/")
def redirect_to_docs() -> RedirectResponse:
    return RedirectResponse(url="/docs")
