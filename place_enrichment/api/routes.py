"""API routes for place enrichment.

Exposes the process-wide ``SearchOrchestrator`` state so a UI can bind to
it. Every response carries the orchestrator's last error as an
``AppError`` envelope instead of raising.
"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from place_enrichment.config import get_settings
from place_enrichment.models import (
    AppError,
    EnrichedPlaceData,
    EnrichmentError,
    ErrorCode,
    PlaceProvider,
    SearchQuery,
    SearchResult,
)
from place_enrichment.services import SearchOrchestrator, create_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()

_PROVIDERS = {"google": PlaceProvider.GOOGLE, "apple": PlaceProvider.APPLE}


class SelectResultRequest(BaseModel):
    result_id: str = Field(..., min_length=1, description="Id of a result from the last search")


class ChangeProviderRequest(BaseModel):
    provider: Literal["google", "apple"]


class SearchStateResponse(BaseModel):
    """Snapshot of the orchestrator's observable state."""

    success: bool
    selected_provider: PlaceProvider
    results: list[SearchResult] = Field(default_factory=list)
    match_scores: list[float] = Field(default_factory=list)
    selected_result: Optional[SearchResult] = None
    enriched_details: Optional[EnrichedPlaceData] = None
    error: Optional[AppError] = None


class PhotoUrlResponse(BaseModel):
    success: bool
    url: Optional[str] = None
    error: Optional[AppError] = None


# Service instances
_orchestrator: SearchOrchestrator | None = None


def get_orchestrator() -> SearchOrchestrator:
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = create_orchestrator()
    return _orchestrator


async def close_orchestrator() -> None:
    global _orchestrator
    if _orchestrator is not None:
        await _orchestrator.close()
        _orchestrator = None


def _state_response(orchestrator: SearchOrchestrator) -> SearchStateResponse:
    error = orchestrator.last_error
    # No results is a soft error; results after a fallback mean the search worked.
    success = (
        error is None
        or error.code is ErrorCode.NO_RESULTS_FOUND
        or bool(orchestrator.search_results)
    )
    return SearchStateResponse(
        success=success,
        selected_provider=orchestrator.selected_provider,
        results=orchestrator.search_results,
        match_scores=[r.match_score for r in orchestrator.search_results],
        selected_result=orchestrator.selected_result,
        enriched_details=orchestrator.enriched_details,
        error=error.to_app_error() if error else None,
    )


@router.post("/search", response_model=SearchStateResponse)
async def search_places(query: SearchQuery) -> SearchStateResponse:
    """Search places with the selected provider, falling back to the other."""
    orchestrator = get_orchestrator()
    await orchestrator.search_places(query)
    return _state_response(orchestrator)


@router.post("/select", response_model=SearchStateResponse)
async def select_result(request: SelectResultRequest) -> SearchStateResponse:
    """Select a result from the last search and load its details."""
    orchestrator = get_orchestrator()
    result = next(
        (r for r in orchestrator.search_results if r.id == request.result_id), None
    )
    if result is None:
        logger.info(f"[API] Unknown result id: {request.result_id}")
        response = _state_response(orchestrator)
        response.success = False
        response.error = EnrichmentError.invalid_query().to_app_error()
        return response

    await orchestrator.select_result(result)
    response = _state_response(orchestrator)
    response.success = orchestrator.last_error is None
    return response


@router.put("/provider", response_model=SearchStateResponse)
async def change_provider(request: ChangeProviderRequest) -> SearchStateResponse:
    orchestrator = get_orchestrator()
    orchestrator.change_provider(_PROVIDERS[request.provider])
    return _state_response(orchestrator)


@router.post("/reset", response_model=SearchStateResponse)
async def reset() -> SearchStateResponse:
    orchestrator = get_orchestrator()
    orchestrator.reset()
    return _state_response(orchestrator)


@router.get("/state", response_model=SearchStateResponse)
async def get_state() -> SearchStateResponse:
    return _state_response(get_orchestrator())


@router.get("/photo", response_model=PhotoUrlResponse)
async def get_photo_url(
    reference: str = Query(..., description="Provider photo reference"),
    max_width: Optional[int] = Query(None, ge=1, le=1600),
) -> PhotoUrlResponse:
    """Resolve a photo reference with the selected provider."""
    orchestrator = get_orchestrator()
    width = max_width or get_settings().photo_max_width
    try:
        url = await orchestrator.get_photo_url(reference, width)
    except EnrichmentError as e:
        return PhotoUrlResponse(success=False, error=e.to_app_error())
    return PhotoUrlResponse(success=True, url=url)
