"""
Tests for the search endpoints.
"""

from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from app.config import settings


class TestSearchListingsEndpoint:
    """Tests for GET /api/search/listings."""

    async def test_empty_database_uses_demo_catalog(self, api):
        response = await api.get("/api/search/listings", params={"intent": "buy"})

        assert response.status_code == 200
        body = response.json()
        assert [item["id"] for item in body["items"]] == ["4", "6", "1"]
        assert body["items"][0]["price_display"] == "₹ 68 Lac"
        assert body["total"] == 3
        assert all(item["demo"] for item in body["items"])

    async def test_fallback_can_be_disabled(self, api, monkeypatch):
        monkeypatch.setattr(settings, "search_fallback_enabled", False)

        response = await api.get("/api/search/listings")

        assert response.json()["items"] == []

    async def test_only_approved_listings_are_candidates(self, api, db, approved_listing, pending_listing):
        response = await api.get("/api/search/listings")

        ids = [item["id"] for item in response.json()["items"]]
        assert ids == [approved_listing.id]
        assert response.json()["items"][0]["demo"] is False

    async def test_garbage_numbers_do_not_error(self, api):
        response = await api.get(
            "/api/search/listings",
            params={"budgetMax": "lots", "page": "zero", "pageSize": "-1", "minBedrooms": "x"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["page"] == 1
        assert body["page_size"] == 10
        assert body["total"] == 8

    async def test_pagination_params(self, api):
        response = await api.get("/api/search/listings", params={"page": "2", "pageSize": "3"})

        body = response.json()
        assert len(body["items"]) == 3
        assert body["has_more"] is True

    async def test_marks_favorites_for_logged_in_user(self, api, db, buyer, buyer_headers, approved_listing):
        await api.post(f"/api/favorites/{approved_listing.id}/toggle", headers=buyer_headers)

        response = await api.get("/api/search/listings", headers=buyer_headers)

        assert response.json()["items"][0]["is_favorite"] is True

    async def test_city_filter_on_database_listings(self, api, owner, make_listing):
        await make_listing(owner, title="Mumbai flat", city="Mumbai", price_inr=9000000)
        await make_listing(owner, title="Pune flat", city="Pune", price_inr=5000000)

        response = await api.get("/api/search/listings", params={"city": "mum"})

        assert [item["title"] for item in response.json()["items"]] == ["Mumbai flat"]

    async def test_query_failure_falls_back_to_catalog(self, api):
        error = OperationalError("SELECT", {}, Exception("db down"))
        with patch("app.api.search.select", side_effect=error):
            response = await api.get("/api/search/listings", params={"intent": "sell"})

        assert response.status_code == 200
        assert [item["id"] for item in response.json()["items"]] == ["8", "3"]

    async def test_demo_cards_are_not_mutated_between_requests(self, api):
        await api.get("/api/search/listings")

        from app.services.catalog import DEMO_LISTINGS

        assert all(card.price_display == "" for card in DEMO_LISTINGS)


class TestSearchServicesEndpoint:
    """Tests for GET /api/search/services."""

    async def test_category_search_on_demo_catalog(self, api):
        response = await api.get("/api/search/services", params={"category": "loan"})

        body = response.json()
        assert [item["name"] for item in body["items"]] == ["Quick Home Loans"]

    async def test_country_keeps_providers_with_full_address(self, api):
        response = await api.get("/api/search/services", params={"country": "India", "pageSize": "20"})

        assert response.json()["total"] == 8
