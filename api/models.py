"""
Pydantic response models for the comps API.

These document the response shapes in the OpenAPI schema.  Routes return
cached payload dicts through JSONResponse, so nullable directory fields
(``carnegie``, ``webaddr``) are always present, as ``null`` when unknown.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# ── Health ────────────────────────────────────────────────────────────────────

class HealthOut(BaseModel):
    """Response body for GET /health."""
    ok: bool = Field(..., examples=[True])
    years: list[int] = Field(..., description="Dataset years available, ascending", examples=[[2019, 2020, 2021]])
    institutionsLoaded: int = Field(..., description="Institutions in the HD directory", examples=[6072])


# ── Comps ─────────────────────────────────────────────────────────────────────

class InstitutionFields(BaseModel):
    """Directory metadata joined onto each result row."""
    unitid: str = Field(..., description="IPEDS UNITID", examples=["100654"])
    instnm: str = Field(..., description="Institution name, or 'Unknown institution' if absent from HD",
                        examples=["Alabama A & M University"])
    stabbr: str | None = Field(None, description="State abbreviation", examples=["AL"])
    control: str | None = Field(None, description="Public | Private nonprofit | Private for-profit | Other | Unknown",
                                examples=["Public"])
    carnegie: str | None = Field(None, description="Carnegie basic classification code", examples=["16"])
    webaddr: str | None = Field(None, description="Institution website", examples=["www.aamu.edu/"])


class InstitutionComps(InstitutionFields):
    """One institution's completions for a single award level (or all levels summed)."""
    completions: dict[int, int] = Field(..., description="Completions keyed by year (years with matching rows only)",
                                        examples=[{2019: 10, 2020: 5}])
    total: int = Field(..., description="Sum of completions across years", examples=[15])


class CompsResponse(BaseModel):
    """Response body for GET /api/comps."""
    cip: str = Field(..., description="Normalized CIP code", examples=["51.2001"])
    awlevel: int | None = Field(None, description="Award-level filter; omitted when unfiltered", examples=[7])
    years: list[int] = Field(..., description="Dataset years scanned, ascending")
    results: list[InstitutionComps] = Field(..., description="Institutions sorted by descending total")


class AwardComps(BaseModel):
    """Completions for one award level."""
    completions: dict[int, int] = Field(..., examples=[{2019: 3}])
    total: int = Field(..., examples=[3])


class InstitutionAwards(InstitutionFields):
    """One institution's completions grouped by award level."""
    awards: dict[int, AwardComps] = Field(..., description="Keyed by AWLEVEL code")
    total: int = Field(..., description="Sum across all award levels and years")


class CompsByAwardResponse(BaseModel):
    """Response body for GET /api/comps/by-award."""
    cip: str = Field(..., examples=["51.2001"])
    years: list[int] = Field(...)
    results: list[InstitutionAwards] = Field(..., description="Institutions in first-encountered order")


# ── Error model ───────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """Standard error response body."""
    error: str = Field(..., description="Short error message", examples=["Missing required query param: cip"])
    detail: str | None = Field(None, description="Extended error detail")
