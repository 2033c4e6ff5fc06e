"""Reporting dashboard data endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.constants import DEFAULT_REPORT_DAYS
from app.db.supabase import SupabaseBackend, get_supabase
from app.models.reporting import DashboardStats, ReportOverview
from app.services.reporting import get_dashboard_stats, get_report_overview

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboard", response_model=DashboardStats)
async def dashboard(
    client: SupabaseBackend = Depends(get_supabase),
) -> DashboardStats:
    """Return headline campaign and application counters."""
    try:
        return get_dashboard_stats(client)
    except Exception as exc:
        logger.error("dashboard_stats_failed", extra={"error_message": str(exc)})
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard stats") from exc


@router.get("/overview", response_model=ReportOverview)
async def report_overview(
    days: int = Query(default=DEFAULT_REPORT_DAYS, ge=1, le=365, description="Trailing window"),
    campaign_id: str | None = Query(default=None, description="Restrict to one campaign"),
    client: SupabaseBackend = Depends(get_supabase),
) -> ReportOverview:
    """Return application totals, rates, campaign performance and trends."""
    try:
        return get_report_overview(client, days=days, campaign_id=campaign_id)
    except Exception as exc:
        logger.error(
            "report_overview_failed",
            extra={"days": days, "campaign_id": campaign_id, "error_message": str(exc)},
        )
        raise HTTPException(status_code=500, detail="Failed to build report") from exc
