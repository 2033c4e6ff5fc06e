"""Candidate record store and review-status state machine.

Any status may move to any other status; every transition, including the
implicit ``pending`` entry on creation, appends exactly one row to
``application_status_history``.  Each two-write sequence is paired with a
compensating write: a candidate whose first history row cannot be written
is deleted again, and a failed history write after a status change
restores the previous status.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from app.core.constants import DEFAULT_PAGE_SIZE, INITIAL_HISTORY_NOTE
from app.core.exceptions import InvalidRequestError, NotFoundError
from app.models.campaign import StatusCounts
from app.models.candidate import CandidateCreate, CandidateUpdate, StatusChange
from app.models.enums import CampaignStatus, CandidateStatus
from app.services.campaigns import count_statuses

logger = logging.getLogger(__name__)

HISTORY_TABLE = "application_status_history"


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def list_candidates(
    client: Any,
    campaign_id: str | None = None,
    status: CandidateStatus | None = None,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> list[dict[str, Any]]:
    """Return one page of candidates, newest first, with campaign title."""
    query = (
        client.table("candidates")
        .select("*, campaigns(title)")
        .order("created_at", desc=True)
        .range(offset, offset + limit - 1)
    )
    if campaign_id:
        query = query.eq("campaign_id", campaign_id)
    if status:
        query = query.eq("status", status.value)
    return query.execute().data or []


def list_campaign_candidates(
    client: Any,
    campaign_id: str,
    status: CandidateStatus | None = None,
) -> list[dict[str, Any]]:
    """Return every candidate of one campaign, newest first."""
    query = (
        client.table("candidates")
        .select("*")
        .eq("campaign_id", campaign_id)
        .order("created_at", desc=True)
    )
    if status:
        query = query.eq("status", status.value)
    return query.execute().data or []


def get_candidate(client: Any, candidate_id: str) -> dict[str, Any]:
    """Return a candidate with its campaign and status history embedded."""
    result = (
        client.table("candidates")
        .select(f"*, campaigns(*), {HISTORY_TABLE}(*)")
        .eq("id", candidate_id)
        .limit(1)
        .execute()
    )
    if not result.data:
        raise NotFoundError("Candidate not found")
    return result.data[0]


def get_status_history(client: Any, candidate_id: str) -> list[dict[str, Any]]:
    """Return the audit trail of a candidate, oldest first."""
    result = (
        client.table(HISTORY_TABLE)
        .select("*")
        .eq("candidate_id", candidate_id)
        .order("created_at")
        .execute()
    )
    return result.data or []


def get_candidate_stats(client: Any, campaign_id: str | None = None) -> StatusCounts:
    """Count candidates by status, optionally within one campaign."""
    query = client.table("candidates").select("status")
    if campaign_id:
        query = query.eq("campaign_id", campaign_id)
    return count_statuses(query.execute().data or [])


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------

def _check_parents(client: Any, campaign_id: str, form_id: str) -> None:
    """Verify the campaign accepts applications through *form_id*."""
    campaign_result = (
        client.table("campaigns")
        .select("id, status, form_id")
        .eq("id", campaign_id)
        .limit(1)
        .execute()
    )
    if not campaign_result.data:
        raise NotFoundError("Campaign not found")
    campaign = campaign_result.data[0]
    if campaign.get("status") != CampaignStatus.active.value:
        raise InvalidRequestError("Campaign is not active")
    if campaign.get("form_id") and campaign["form_id"] != form_id:
        raise InvalidRequestError("Form does not belong to campaign")

    form_result = (
        client.table("forms")
        .select("id, is_published")
        .eq("id", form_id)
        .limit(1)
        .execute()
    )
    if not form_result.data:
        raise NotFoundError("Form not found")
    if not form_result.data[0].get("is_published"):
        raise InvalidRequestError("Form is not published")


def _append_history(
    client: Any,
    candidate_id: str,
    status: CandidateStatus,
    notes: str = "",
    reviewed_by: str | None = None,
) -> None:
    entry: dict[str, Any] = {
        "candidate_id": candidate_id,
        "status": status.value,
        "notes": notes,
    }
    if reviewed_by:
        entry["reviewed_by"] = reviewed_by
    client.table(HISTORY_TABLE).insert(entry).execute()


def create_candidate(client: Any, payload: CandidateCreate) -> dict[str, Any]:
    """Create a ``pending`` candidate and its first history entry.

    Raises ``InvalidRequestError`` for missing required keys, an inactive
    campaign or an unpublished form, and ``NotFoundError`` for an unknown
    campaign or form.
    """
    if not (payload.campaign_id and payload.form_id and payload.email and payload.name):
        raise InvalidRequestError("Missing required fields")

    _check_parents(client, payload.campaign_id, payload.form_id)

    row = payload.model_dump(mode="json")
    row["status"] = CandidateStatus.pending.value
    result = client.table("candidates").insert(row).execute()
    candidate = result.data[0]

    try:
        _append_history(
            client, candidate["id"], CandidateStatus.pending, INITIAL_HISTORY_NOTE
        )
    except Exception:
        logger.error(
            "candidate_history_write_failed",
            extra={"candidate_id": candidate["id"], "compensation": "delete"},
        )
        client.table("candidates").delete().eq("id", candidate["id"]).execute()
        raise

    logger.info(
        "candidate_created",
        extra={
            "candidate_id": candidate["id"],
            "campaign_id": payload.campaign_id,
        },
    )
    return candidate


# ---------------------------------------------------------------------------
# Updates
# ---------------------------------------------------------------------------

def change_status(client: Any, candidate_id: str, change: StatusChange) -> dict[str, Any]:
    """Move a candidate to ``change.status`` and record the transition."""
    current = (
        client.table("candidates")
        .select("id, status")
        .eq("id", candidate_id)
        .limit(1)
        .execute()
    )
    if not current.data:
        raise NotFoundError("Candidate not found")
    previous_status = current.data[0]["status"]

    result = (
        client.table("candidates")
        .update(
            {
                "status": change.status.value,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }
        )
        .eq("id", candidate_id)
        .execute()
    )
    if not result.data:
        raise NotFoundError("Candidate not found")

    try:
        _append_history(
            client,
            candidate_id,
            change.status,
            change.notes or "",
            change.reviewed_by,
        )
    except Exception:
        logger.error(
            "candidate_history_write_failed",
            extra={"candidate_id": candidate_id, "compensation": "restore_status"},
        )
        client.table("candidates").update({"status": previous_status}).eq(
            "id", candidate_id
        ).execute()
        raise

    logger.info(
        "candidate_status_changed",
        extra={
            "candidate_id": candidate_id,
            "from_status": previous_status,
            "to_status": change.status.value,
        },
    )
    return result.data[0]


def update_candidate(client: Any, candidate_id: str, payload: CandidateUpdate) -> dict[str, Any]:
    """Write reviewer rating and/or notes."""
    values = payload.model_dump(exclude_unset=True)
    if not values:
        raise InvalidRequestError("No fields to update")
    result = client.table("candidates").update(values).eq("id", candidate_id).execute()
    if not result.data:
        raise NotFoundError("Candidate not found")
    return result.data[0]


def delete_candidate(client: Any, candidate_id: str) -> None:
    client.table("candidates").delete().eq("id", candidate_id).execute()
