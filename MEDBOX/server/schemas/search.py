from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


###############################################################################
class DrugMatch(BaseModel):
    name: str = Field(..., description="Canonical drug name.")
    score: float = Field(..., ge=0.0, le=1.0, description="Similarity score.")


###############################################################################
class DrugSearchResponse(BaseModel):
    query: str = Field(..., description="Query as received.")
    count: int = Field(..., ge=0, description="Number of returned matches.")
    results: list[DrugMatch] = Field(default_factory=list)


###############################################################################
class CatalogLoadRequest(BaseModel):
    """
    Request to (re)load the drug catalog.
    - Omitting ``source_path`` uses the configured drug products file.
    """

    source_path: str | None = Field(
        None,
        max_length=4096,
        description="Path to a drug products CSV file (optional).",
        examples=["drug_products.csv"],
    )

    @field_validator("source_path", mode="before")
    @classmethod
    def _strip_path(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = str(value).strip()
        return stripped or None


###############################################################################
class CatalogStatusResponse(BaseModel):
    loading: bool
    loaded: bool
    names: int = Field(..., ge=0, description="Unique canonical names published.")
    generation: int = Field(..., ge=0, description="Published snapshot counter.")


###############################################################################
class CatalogLoadResponse(BaseModel):
    started: bool = Field(..., description="Whether a streaming load was started.")
    loading: bool
    loaded: bool
    names: int = Field(..., ge=0)
