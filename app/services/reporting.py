"""Reporting aggregation service for the dashboard endpoints.

Aggregates are recomputed on every request from the ``campaigns`` and
``candidates`` tables; counting happens in Python.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date, datetime, time, timedelta, timezone
from typing import Any

from app.core.constants import DEFAULT_REPORT_DAYS, MAX_RATING, MIN_RATING, TOP_CAMPAIGNS_LIMIT
from app.models.enums import CampaignStatus, CandidateStatus
from app.models.reporting import (
    CampaignPerformance,
    DailyTrendPoint,
    DashboardStats,
    RatingBucket,
    ReportOverview,
)

logger = logging.getLogger(__name__)


def _parse_timestamp(raw: Any) -> datetime | None:
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    if not isinstance(raw, str) or not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _rate(part: int, whole: int) -> float:
    return round(part / whole * 100, 1) if whole else 0.0


# ---------------------------------------------------------------------------
# GET /reports/dashboard
# ---------------------------------------------------------------------------

def get_dashboard_stats(client: Any) -> DashboardStats:
    """Return the headline counters shown on the dashboard."""
    campaigns = client.table("campaigns").select("status").execute().data or []
    candidates = client.table("candidates").select("status").execute().data or []

    campaign_status = Counter(row.get("status") for row in campaigns)
    candidate_status = Counter(row.get("status") for row in candidates)

    return DashboardStats(
        total_campaigns=len(campaigns),
        active_campaigns=campaign_status[CampaignStatus.active.value],
        total_applications=len(candidates),
        pending_reviews=candidate_status[CandidateStatus.pending.value],
        accepted_candidates=candidate_status[CandidateStatus.accepted.value],
        rejected_candidates=candidate_status[CandidateStatus.rejected.value],
    )


# ---------------------------------------------------------------------------
# GET /reports/overview
# ---------------------------------------------------------------------------

def _campaign_performance(
    campaigns: list[dict[str, Any]],
    candidates: list[dict[str, Any]],
) -> list[CampaignPerformance]:
    by_campaign: dict[str, Counter[str]] = {}
    for row in candidates:
        by_campaign.setdefault(row.get("campaign_id"), Counter())[row.get("status")] += 1

    performance: list[CampaignPerformance] = []
    for campaign in campaigns:
        counts = by_campaign.get(campaign["id"])
        if not counts:
            continue
        performance.append(
            CampaignPerformance(
                campaign_id=campaign["id"],
                title=campaign.get("title") or "",
                applications=sum(counts.values()),
                accepted=counts[CandidateStatus.accepted.value],
                rejected=counts[CandidateStatus.rejected.value],
                pending=counts[CandidateStatus.pending.value],
            )
        )
    return performance


def _daily_trend(
    candidates: list[dict[str, Any]],
    days: int,
    today: date,
) -> list[DailyTrendPoint]:
    points = {
        today - timedelta(days=offset): DailyTrendPoint(date=today - timedelta(days=offset))
        for offset in range(days - 1, -1, -1)
    }
    for row in candidates:
        created = _parse_timestamp(row.get("created_at"))
        if created is None:
            continue
        point = points.get(created.astimezone(timezone.utc).date())
        if point is None:
            continue
        point.applications += 1
        if row.get("status") == CandidateStatus.accepted.value:
            point.accepted += 1
        elif row.get("status") == CandidateStatus.rejected.value:
            point.rejected += 1
    return sorted(points.values(), key=lambda p: p.date)


def get_report_overview(
    client: Any,
    days: int = DEFAULT_REPORT_DAYS,
    campaign_id: str | None = None,
    now: datetime | None = None,
) -> ReportOverview:
    """Build the reporting page data for the trailing *days* window."""
    now = now or datetime.now(timezone.utc)
    today = now.astimezone(timezone.utc).date()
    # Window starts at midnight UTC of the first trend day
    first_day = today - timedelta(days=days - 1)
    cutoff = datetime.combine(first_day, time.min, tzinfo=timezone.utc)

    query = (
        client.table("candidates")
        .select("id, campaign_id, status, rating, created_at")
        .gte("created_at", cutoff.isoformat())
    )
    if campaign_id:
        query = query.eq("campaign_id", campaign_id)
    candidates = query.execute().data or []

    campaigns = (
        client.table("campaigns")
        .select("id, title")
        .order("created_at", desc=True)
        .execute()
        .data
        or []
    )

    status_counts = Counter(row.get("status") for row in candidates)
    total = len(candidates)
    accepted = status_counts[CandidateStatus.accepted.value]
    rejected = status_counts[CandidateStatus.rejected.value]

    performance = sorted(
        _campaign_performance(campaigns, candidates),
        key=lambda p: p.applications,
        reverse=True,
    )
    top = performance[:TOP_CAMPAIGNS_LIMIT]

    ratings = Counter(row.get("rating") for row in candidates)
    rating_distribution = [
        RatingBucket(rating=value, count=ratings[value])
        for value in range(MAX_RATING, MIN_RATING - 1, -1)
    ]

    logger.debug(
        "report_overview_computed",
        extra={"days": days, "campaign_id": campaign_id, "candidates": total},
    )

    return ReportOverview(
        days=days,
        campaign_id=campaign_id,
        total_applications=total,
        accepted=accepted,
        rejected=rejected,
        pending=status_counts[CandidateStatus.pending.value],
        acceptance_rate=_rate(accepted, total),
        rejection_rate=_rate(rejected, total),
        campaign_performance=performance,
        top_campaigns=top,
        daily_trend=_daily_trend(candidates, days, today),
        rating_distribution=rating_distribution,
    )
