"""Candidate endpoints.

Application intake (POST /), the review status transition
(PUT /{id}/status), reviewer edits, listing and status statistics.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from app.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.core.exceptions import InvalidRequestError, NotFoundError
from app.db.supabase import SupabaseBackend, get_supabase
from app.models.campaign import StatusCounts
from app.models.candidate import CandidateCreate, CandidateUpdate, StatusChange
from app.models.enums import CandidateStatus
from app.services import candidates as candidates_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _fail(event: str, message: str, exc: Exception, **context: Any) -> HTTPException:
    logger.error(event, extra={**context, "error_message": str(exc)})
    return HTTPException(status_code=500, detail=message)


@router.get("", status_code=200)
async def list_candidates(
    campaign_id: str | None = Query(default=None),
    status: CandidateStatus | None = Query(default=None),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    client: SupabaseBackend = Depends(get_supabase),
) -> list[dict[str, Any]]:
    """Return one page of candidates, newest first."""
    try:
        return candidates_service.list_candidates(client, campaign_id, status, limit, offset)
    except Exception as exc:
        raise _fail("list_candidates_failed", "Failed to fetch candidates", exc) from exc


@router.get("/stats/overview", response_model=StatusCounts)
async def candidate_stats(
    campaign_id: str | None = Query(default=None),
    client: SupabaseBackend = Depends(get_supabase),
) -> StatusCounts:
    """Count candidates by status, optionally within one campaign."""
    try:
        return candidates_service.get_candidate_stats(client, campaign_id)
    except Exception as exc:
        raise _fail(
            "candidate_stats_failed",
            "Failed to fetch candidate stats",
            exc,
            campaign_id=campaign_id,
        ) from exc


@router.get("/campaign/{campaign_id}", status_code=200)
async def list_campaign_candidates(
    campaign_id: str,
    status: CandidateStatus | None = Query(default=None),
    client: SupabaseBackend = Depends(get_supabase),
) -> list[dict[str, Any]]:
    try:
        return candidates_service.list_campaign_candidates(client, campaign_id, status)
    except Exception as exc:
        raise _fail(
            "list_campaign_candidates_failed",
            "Failed to fetch campaign candidates",
            exc,
            campaign_id=campaign_id,
        ) from exc


@router.get("/{candidate_id}", status_code=200)
async def get_candidate(
    candidate_id: str,
    client: SupabaseBackend = Depends(get_supabase),
) -> dict[str, Any]:
    """Return a candidate with campaign and status history."""
    try:
        return candidates_service.get_candidate(client, candidate_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        raise _fail(
            "get_candidate_failed", "Failed to fetch candidate", exc, candidate_id=candidate_id
        ) from exc


@router.post("", status_code=201)
async def create_candidate(
    body: CandidateCreate,
    client: SupabaseBackend = Depends(get_supabase),
) -> dict[str, Any]:
    """Accept an application against an active campaign's published form."""
    try:
        return candidates_service.create_candidate(client, body)
    except InvalidRequestError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        raise _fail(
            "create_candidate_failed",
            "Failed to create candidate",
            exc,
            campaign_id=body.campaign_id,
        ) from exc


@router.put("/{candidate_id}/status", status_code=200)
async def change_candidate_status(
    candidate_id: str,
    body: StatusChange,
    client: SupabaseBackend = Depends(get_supabase),
) -> dict[str, Any]:
    """Move the candidate to a new status and append a history entry."""
    try:
        return candidates_service.change_status(client, candidate_id, body)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        raise _fail(
            "change_candidate_status_failed",
            "Failed to update candidate status",
            exc,
            candidate_id=candidate_id,
        ) from exc


@router.put("/{candidate_id}", status_code=200)
async def update_candidate(
    candidate_id: str,
    body: CandidateUpdate,
    client: SupabaseBackend = Depends(get_supabase),
) -> dict[str, Any]:
    """Write reviewer rating and notes."""
    try:
        return candidates_service.update_candidate(client, candidate_id, body)
    except InvalidRequestError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        raise _fail(
            "update_candidate_failed", "Failed to update candidate", exc, candidate_id=candidate_id
        ) from exc


@router.delete("/{candidate_id}", status_code=204)
async def delete_candidate(
    candidate_id: str,
    client: SupabaseBackend = Depends(get_supabase),
) -> Response:
    try:
        candidates_service.delete_candidate(client, candidate_id)
    except Exception as exc:
        raise _fail(
            "delete_candidate_failed", "Failed to delete candidate", exc, candidate_id=candidate_id
        ) from exc
    return Response(status_code=204)
