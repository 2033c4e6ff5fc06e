"""Campaign endpoints: CRUD, statistics and lookup by form."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response

from app.core.exceptions import InvalidRequestError, NotFoundError
from app.db.supabase import SupabaseBackend, get_supabase
from app.models.campaign import CampaignCreate, CampaignUpdate, StatusCounts
from app.services import campaigns as campaigns_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _fail(event: str, message: str, exc: Exception, **context: Any) -> HTTPException:
    logger.error(event, extra={**context, "error_message": str(exc)})
    return HTTPException(status_code=500, detail=message)


@router.get("", status_code=200)
async def list_campaigns(
    client: SupabaseBackend = Depends(get_supabase),
) -> list[dict[str, Any]]:
    """Return campaigns with their form title and candidate count."""
    try:
        return campaigns_service.list_campaigns(client)
    except Exception as exc:
        raise _fail("list_campaigns_failed", "Failed to fetch campaigns", exc) from exc


# Registered before /{campaign_id} so "by-form" is not read as an id
@router.get("/by-form/{form_id}", status_code=200)
async def get_campaign_by_form(
    form_id: str,
    client: SupabaseBackend = Depends(get_supabase),
) -> dict[str, Any]:
    """Return the most recently created campaign using *form_id*."""
    try:
        return campaigns_service.get_campaign_by_form(client, form_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        raise _fail(
            "get_campaign_by_form_failed",
            "Failed to fetch campaign by form",
            exc,
            form_id=form_id,
        ) from exc


@router.get("/{campaign_id}", status_code=200)
async def get_campaign(
    campaign_id: str,
    client: SupabaseBackend = Depends(get_supabase),
) -> dict[str, Any]:
    try:
        return campaigns_service.get_campaign(client, campaign_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        raise _fail(
            "get_campaign_failed", "Failed to fetch campaign", exc, campaign_id=campaign_id
        ) from exc


@router.post("", status_code=201)
async def create_campaign(
    body: CampaignCreate,
    client: SupabaseBackend = Depends(get_supabase),
) -> dict[str, Any]:
    try:
        return campaigns_service.create_campaign(client, body)
    except Exception as exc:
        raise _fail("create_campaign_failed", "Failed to create campaign", exc) from exc


@router.put("/{campaign_id}", status_code=200)
async def update_campaign(
    campaign_id: str,
    body: CampaignUpdate,
    client: SupabaseBackend = Depends(get_supabase),
) -> dict[str, Any]:
    try:
        return campaigns_service.update_campaign(client, campaign_id, body)
    except InvalidRequestError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        raise _fail(
            "update_campaign_failed", "Failed to update campaign", exc, campaign_id=campaign_id
        ) from exc


@router.delete("/{campaign_id}", status_code=204)
async def delete_campaign(
    campaign_id: str,
    client: SupabaseBackend = Depends(get_supabase),
) -> Response:
    try:
        campaigns_service.delete_campaign(client, campaign_id)
    except Exception as exc:
        raise _fail(
            "delete_campaign_failed", "Failed to delete campaign", exc, campaign_id=campaign_id
        ) from exc
    return Response(status_code=204)


@router.get("/{campaign_id}/stats", response_model=StatusCounts)
async def campaign_stats(
    campaign_id: str,
    client: SupabaseBackend = Depends(get_supabase),
) -> StatusCounts:
    """Count the campaign's candidates by review status."""
    try:
        return campaigns_service.get_campaign_stats(client, campaign_id)
    except Exception as exc:
        raise _fail(
            "campaign_stats_failed",
            "Failed to fetch campaign stats",
            exc,
            campaign_id=campaign_id,
        ) from exc
