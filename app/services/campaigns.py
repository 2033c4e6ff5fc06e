"""Campaign persistence and per-campaign statistics."""

from __future__ import annotations

import logging
from typing import Any

from app.core.exceptions import InvalidRequestError, NotFoundError
from app.models.campaign import CampaignCreate, CampaignUpdate, StatusCounts
from app.models.enums import CandidateStatus

logger = logging.getLogger(__name__)


def count_statuses(rows: list[dict[str, Any]]) -> StatusCounts:
    """Count candidate rows by their ``status`` column."""
    counts = {status.value: 0 for status in CandidateStatus}
    for row in rows:
        status = row.get("status")
        if status in counts:
            counts[status] += 1
    return StatusCounts(total=len(rows), **counts)


def list_campaigns(client: Any) -> list[dict[str, Any]]:
    """Return campaigns, newest first, with form title and candidate count."""
    result = (
        client.table("campaigns")
        .select("*, forms(title), candidates(count)")
        .order("created_at", desc=True)
        .execute()
    )
    return result.data or []


def get_campaign(client: Any, campaign_id: str) -> dict[str, Any]:
    """Return one campaign with its form and candidates embedded."""
    result = (
        client.table("campaigns")
        .select("*, forms(*), candidates(*)")
        .eq("id", campaign_id)
        .limit(1)
        .execute()
    )
    if not result.data:
        raise NotFoundError("Campaign not found")
    return result.data[0]


def get_campaign_by_form(client: Any, form_id: str) -> dict[str, Any]:
    """Return the most recently created campaign that uses *form_id*."""
    result = (
        client.table("campaigns")
        .select("*")
        .eq("form_id", form_id)
        .order("created_at", desc=True)
        .limit(1)
        .execute()
    )
    if not result.data:
        raise NotFoundError("No campaign found for form")
    return result.data[0]


def create_campaign(client: Any, payload: CampaignCreate) -> dict[str, Any]:
    result = (
        client.table("campaigns")
        .insert(payload.model_dump(mode="json"))
        .execute()
    )
    campaign = result.data[0]
    logger.info(
        "campaign_created",
        extra={"campaign_id": campaign.get("id"), "status": payload.status.value},
    )
    return campaign


def update_campaign(
    client: Any, campaign_id: str, payload: CampaignUpdate
) -> dict[str, Any]:
    """Write the attributes present in *payload*."""
    values = payload.model_dump(mode="json", exclude_unset=True)
    if not values:
        raise InvalidRequestError("No fields to update")
    result = (
        client.table("campaigns").update(values).eq("id", campaign_id).execute()
    )
    if not result.data:
        raise NotFoundError("Campaign not found")
    return result.data[0]


def delete_campaign(client: Any, campaign_id: str) -> None:
    client.table("campaigns").delete().eq("id", campaign_id).execute()


def get_campaign_stats(client: Any, campaign_id: str) -> StatusCounts:
    """Count the campaign's candidates by status."""
    result = (
        client.table("candidates")
        .select("status")
        .eq("campaign_id", campaign_id)
        .execute()
    )
    return count_statuses(result.data or [])
