"""
Comps endpoints.

GET /api/comps?cip=51.2001&awlevel=7  → institutions × years, flat
GET /api/comps/by-award?cip=51.2001   → institutions × award levels × years

``cip`` is required (400 when missing or blank).  ``awlevel`` is optional;
a value that is not an integer is ignored and the query runs unfiltered.
Errors are rendered by the handlers registered in api/app.py.
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from api.dataset import get_service
from api.models import CompsByAwardResponse, CompsResponse, ErrorResponse
from ipeds.service import CompsService, parse_awlevel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comps", tags=["comps"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing cip"},
    500: {"model": ErrorResponse, "description": "Completions scan failed"},
}


@router.get(
    "",
    response_model=CompsResponse,
    responses=_ERROR_RESPONSES,
    summary="Completions by institution and year for one CIP code",
)
def get_comps(
    cip: str | None = Query(None, description="CIP code; 512001, 51.2 and 51.2001 all accepted"),
    awlevel: str | None = Query(None, description="Optional AWLEVEL filter (integer)"),
    service: CompsService = Depends(get_service),
) -> JSONResponse:
    """Return every institution reporting completions in *cip*, per year.

    Results are sorted by descending total.  Identical queries are served
    from the result cache without rescanning.
    """
    level = parse_awlevel(awlevel)
    if awlevel is not None and level is None:
        logger.debug("Ignoring non-integer awlevel=%r", awlevel)
    return JSONResponse(content=service.query(cip, level))


@router.get(
    "/by-award",
    response_model=CompsByAwardResponse,
    responses=_ERROR_RESPONSES,
    summary="Completions by institution, award level, and year for one CIP code",
)
def get_comps_by_award(
    cip: str | None = Query(None, description="CIP code; 512001, 51.2 and 51.2001 all accepted"),
    service: CompsService = Depends(get_service),
) -> JSONResponse:
    """Return completions grouped by award level for each institution.

    Institutions appear in the order they were first encountered.
    """
    return JSONResponse(content=service.query_by_award(cip))
