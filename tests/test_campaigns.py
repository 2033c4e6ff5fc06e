"""Tests for /api/campaigns and campaign statistics."""

from __future__ import annotations

from fastapi.testclient import TestClient


class TestCampaignEndpoints:
    """CRUD, lookup and stats under /api/campaigns."""

    def test_create_defaults_to_draft(self, test_client: TestClient, published_form) -> None:
        """Given no status, a new campaign is a draft linked to its form."""
        response = test_client.post(
            "/api/campaigns",
            json={"title": "Data Analyst", "form_id": published_form["id"]},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "draft"
        assert body["form_id"] == published_form["id"]

    def test_create_rejects_unknown_status(self, test_client: TestClient) -> None:
        """Given a status outside the enum, creation is a 400."""
        response = test_client.post("/api/campaigns", json={"title": "X", "status": "archived"})
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request")

    def test_get_and_404(self, test_client: TestClient, active_campaign) -> None:
        """Given an existing id the campaign is returned, otherwise 404."""
        assert test_client.get(f"/api/campaigns/{active_campaign['id']}").json()["title"] == (
            "Frontend Engineer"
        )
        missing = test_client.get("/api/campaigns/nope")
        assert missing.status_code == 404
        assert missing.json() == {"error": "Campaign not found"}

    def test_update_writes_only_given_keys(self, test_client: TestClient, active_campaign) -> None:
        """Given only a status, the title is left as stored."""
        response = test_client.put(
            f"/api/campaigns/{active_campaign['id']}", json={"status": "paused"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "paused"
        assert body["title"] == "Frontend Engineer"

    def test_update_rejects_null_title(
        self, test_client: TestClient, fake_supabase, active_campaign
    ) -> None:
        """Given an explicit null title, the update is refused and the row is unchanged."""
        response = test_client.put(
            f"/api/campaigns/{active_campaign['id']}", json={"title": None}
        )
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request")
        stored = fake_supabase.rows("campaigns")[0]
        assert stored["title"] == "Frontend Engineer"

    def test_update_rejects_null_status(self, test_client: TestClient, active_campaign) -> None:
        """Given an explicit null status, the update is refused."""
        response = test_client.put(
            f"/api/campaigns/{active_campaign['id']}", json={"status": None}
        )
        assert response.status_code == 400

    def test_update_missing_campaign_is_404(self, test_client: TestClient) -> None:
        """Given an unknown id, update returns 404."""
        response = test_client.put("/api/campaigns/nope", json={"status": "closed"})
        assert response.status_code == 404

    def test_delete(self, test_client: TestClient, fake_supabase, active_campaign) -> None:
        """Given an existing campaign, delete returns 204 and removes the row."""
        assert test_client.delete(f"/api/campaigns/{active_campaign['id']}").status_code == 204
        assert fake_supabase.rows("campaigns") == []

    def test_list_newest_first(self, test_client: TestClient, fake_supabase) -> None:
        """Given two campaigns, the newest is listed first."""
        fake_supabase.seed("campaigns", title="Old", status="closed")
        fake_supabase.seed("campaigns", title="New", status="active")
        titles = [c["title"] for c in test_client.get("/api/campaigns").json()]
        assert titles == ["New", "Old"]

    def test_by_form_returns_most_recent(
        self, test_client: TestClient, fake_supabase, published_form, active_campaign
    ) -> None:
        """Given two campaigns on one form, the newest one is returned."""
        newer = fake_supabase.seed(
            "campaigns", title="Second round", status="active", form_id=published_form["id"]
        )
        response = test_client.get(f"/api/campaigns/by-form/{published_form['id']}")
        assert response.status_code == 200
        assert response.json()["id"] == newer["id"]

        missing = test_client.get("/api/campaigns/by-form/unused")
        assert missing.status_code == 404
        assert missing.json() == {"error": "No campaign found for form"}

    def test_stats_count_by_status(self, test_client: TestClient, fake_supabase, active_campaign) -> None:
        """Given candidates in several statuses, only this campaign's are counted."""
        for status in ("pending", "pending", "reviewing", "rejected"):
            fake_supabase.seed("candidates", campaign_id=active_campaign["id"], status=status)
        fake_supabase.seed("candidates", campaign_id="elsewhere", status="accepted")

        response = test_client.get(f"/api/campaigns/{active_campaign['id']}/stats")
        assert response.status_code == 200
        assert response.json() == {
            "total": 4,
            "pending": 2,
            "reviewing": 1,
            "accepted": 0,
            "rejected": 1,
        }


class TestCountStatuses:
    """Status bucketing of candidate rows."""

    def test_ignores_unknown_statuses_in_buckets(self) -> None:
        """Given an unknown status, it counts toward the total only."""
        from app.services.campaigns import count_statuses

        counts = count_statuses([{"status": "pending"}, {"status": "weird"}])
        assert counts.total == 2
        assert counts.pending == 1
        assert counts.accepted == 0
