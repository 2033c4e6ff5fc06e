"""Response models for the reporting / dashboard endpoints.

These are API-layer response schemas, not direct table mappings.
"""

from datetime import date

from pydantic import BaseModel, Field


# --- Dashboard ---

class DashboardStats(BaseModel):
    """Headline counters for GET /api/reports/dashboard."""
    total_campaigns: int = 0
    active_campaigns: int = 0
    total_applications: int = 0
    pending_reviews: int = 0
    accepted_candidates: int = 0
    rejected_candidates: int = 0


# --- Overview report ---

class CampaignPerformance(BaseModel):
    """Application counts for one campaign inside the report window."""
    campaign_id: str
    title: str
    applications: int = 0
    accepted: int = 0
    rejected: int = 0
    pending: int = 0


class DailyTrendPoint(BaseModel):
    """Applications created on a single calendar day (UTC)."""
    date: date
    applications: int = 0
    accepted: int = 0
    rejected: int = 0


class RatingBucket(BaseModel):
    """Number of candidates with a given reviewer rating."""
    rating: int
    count: int = 0


class ReportOverview(BaseModel):
    """Full response for GET /api/reports/overview."""
    days: int
    campaign_id: str | None = None
    total_applications: int = 0
    accepted: int = 0
    rejected: int = 0
    pending: int = 0
    acceptance_rate: float = 0.0
    rejection_rate: float = 0.0
    campaign_performance: list[CampaignPerformance] = Field(default_factory=list)
    top_campaigns: list[CampaignPerformance] = Field(default_factory=list)
    daily_trend: list[DailyTrendPoint] = Field(default_factory=list)
    rating_distribution: list[RatingBucket] = Field(default_factory=list)
