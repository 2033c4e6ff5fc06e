"""Tests for the reporting service and /api/reports endpoints."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

NOW = datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc)


def _days_ago(days: int) -> str:
    return (NOW - timedelta(days=days)).isoformat()


class TestDashboard:
    """Headline counters for the dashboard."""

    def test_dashboard_counters(self, test_client: TestClient, fake_supabase) -> None:
        """Given campaigns and candidates, each counter is correct."""
        fake_supabase.seed("campaigns", title="A", status="active")
        fake_supabase.seed("campaigns", title="B", status="draft")
        for status in ("pending", "pending", "accepted", "rejected", "reviewing"):
            fake_supabase.seed("candidates", status=status)

        response = test_client.get("/api/reports/dashboard")
        assert response.status_code == 200
        assert response.json() == {
            "total_campaigns": 2,
            "active_campaigns": 1,
            "total_applications": 5,
            "pending_reviews": 2,
            "accepted_candidates": 1,
            "rejected_candidates": 1,
        }


class TestReportOverview:
    """Windowed report with rates, performance and trends."""

    def _seed(self, fake_supabase) -> tuple[dict, dict]:
        a = fake_supabase.seed("campaigns", title="Alpha", status="active")
        b = fake_supabase.seed("campaigns", title="Beta", status="active")
        fake_supabase.seed("campaigns", title="Empty", status="active")
        rows = [
            (a, "accepted", 5, 0),
            (a, "rejected", 2, 0),
            (a, "pending", None, 1),
            (b, "accepted", 5, 3),
            (b, "pending", 4, 40),  # outside the 30 day window
        ]
        for campaign, status, rating, age in rows:
            fake_supabase.seed(
                "candidates",
                campaign_id=campaign["id"],
                status=status,
                rating=rating,
                created_at=_days_ago(age),
            )
        return a, b

    def test_overview_window_totals_and_rates(self, fake_supabase) -> None:
        """Given a 30 day window, old applications are excluded from totals."""
        from app.services.reporting import get_report_overview

        a, b = self._seed(fake_supabase)
        report = get_report_overview(fake_supabase, days=30, now=NOW)

        assert report.total_applications == 4
        assert report.accepted == 2
        assert report.rejected == 1
        assert report.pending == 1
        assert report.acceptance_rate == 50.0
        assert report.rejection_rate == 25.0

        performance = {p.title: p for p in report.campaign_performance}
        assert set(performance) == {"Alpha", "Beta"}
        assert performance["Alpha"].applications == 3
        assert report.top_campaigns[0].title == "Alpha"

        ratings = {bucket.rating: bucket.count for bucket in report.rating_distribution}
        assert ratings == {5: 2, 4: 0, 3: 0, 2: 1, 1: 0}

    def test_daily_trend_has_one_point_per_day(self, fake_supabase) -> None:
        """Given a 7 day window, each day has one bucket."""
        from app.services.reporting import get_report_overview

        self._seed(fake_supabase)
        report = get_report_overview(fake_supabase, days=7, now=NOW)

        assert len(report.daily_trend) == 7
        assert report.daily_trend[-1].date == NOW.date()
        today = report.daily_trend[-1]
        assert (today.applications, today.accepted, today.rejected) == (2, 1, 1)
        assert report.daily_trend[-2].applications == 1
        assert report.daily_trend[-4].accepted == 1

    def test_campaign_filter(self, fake_supabase) -> None:
        """Given a campaign id, only that campaign is reported."""
        from app.services.reporting import get_report_overview

        _, b = self._seed(fake_supabase)
        report = get_report_overview(fake_supabase, days=30, campaign_id=b["id"], now=NOW)
        assert report.total_applications == 1
        assert [p.title for p in report.campaign_performance] == ["Beta"]

    def test_campaign_performance_is_ordered_by_applications(self, fake_supabase) -> None:
        """Given an older campaign with more applications, it is listed first."""
        from app.services.reporting import get_report_overview

        busy = fake_supabase.seed("campaigns", title="Busy", status="active")
        quiet = fake_supabase.seed("campaigns", title="Quiet", status="active")
        for campaign, count in ((busy, 3), (quiet, 1)):
            for _ in range(count):
                fake_supabase.seed(
                    "candidates",
                    campaign_id=campaign["id"],
                    status="pending",
                    created_at=_days_ago(0),
                )

        report = get_report_overview(fake_supabase, days=30, now=NOW)
        assert [p.title for p in report.campaign_performance] == ["Busy", "Quiet"]
        assert report.top_campaigns == report.campaign_performance

    def test_window_starts_at_midnight_of_first_trend_day(self, fake_supabase) -> None:
        """Given applications either side of the first day's midnight, totals match the trend."""
        from app.services.reporting import get_report_overview

        first_midnight = datetime(2026, 10, 13, tzinfo=timezone.utc)
        for created in (
            first_midnight - timedelta(minutes=30),
            first_midnight + timedelta(minutes=30),
            NOW,
        ):
            fake_supabase.seed("candidates", status="pending", created_at=created.isoformat())

        report = get_report_overview(fake_supabase, days=7, now=NOW)
        assert report.daily_trend[0].date == first_midnight.date()
        assert report.daily_trend[0].applications == 1
        assert report.total_applications == 2
        assert sum(p.applications for p in report.daily_trend) == report.total_applications

    def test_empty_report_has_zero_rates(self, fake_supabase) -> None:
        """Given no applications, rates are zero."""
        from app.services.reporting import get_report_overview

        report = get_report_overview(fake_supabase, days=3, now=NOW)
        assert report.total_applications == 0
        assert report.acceptance_rate == 0.0
        assert len(report.daily_trend) == 3

    def test_overview_endpoint(self, test_client: TestClient) -> None:
        """Given a days parameter, the endpoint returns that many trend points."""
        response = test_client.get("/api/reports/overview", params={"days": 14})
        assert response.status_code == 200
        body = response.json()
        assert body["days"] == 14
        assert len(body["daily_trend"]) == 14

    def test_overview_rejects_bad_window(self, test_client: TestClient) -> None:
        """Given a zero day window, the request is a 400."""
        assert test_client.get("/api/reports/overview", params={"days": 0}).status_code == 400
