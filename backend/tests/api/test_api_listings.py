"""
Tests for listing CRUD, auth and the tools endpoints.
"""

from app.config import settings


class TestAuth:
    async def test_register_then_me(self, api):
        response = await api.post(
            "/api/auth/register",
            json={"email": "New@Example.com", "name": "Neha", "password": "secret123", "phone": "+91 90000 11111"},
        )
        token = response.json()["access_token"]

        me = await api.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert me.json()["email"] == "new@example.com"
        assert me.json()["phone"] == "+919000011111"
        assert me.json()["is_admin"] is False

    async def test_duplicate_email_rejected(self, api, owner):
        response = await api.post(
            "/api/auth/register",
            json={"email": "owner@example.com", "name": "Again", "password": "secret123"},
        )

        assert response.status_code == 400

    async def test_login_with_wrong_password(self, api, owner):
        response = await api.post(
            "/api/auth/login", json={"email": "owner@example.com", "password": "nope"}
        )

        assert response.status_code == 401


class TestListingVisibility:
    """Tests for who can see which listing."""

    async def test_anyone_sees_approved(self, api, approved_listing):
        response = await api.get(f"/api/listings/{approved_listing.id}")

        assert response.status_code == 200
        assert response.json()["price_display"] == "₹ 75 Lac"
        assert response.json()["is_favorite"] is False

    async def test_pending_hidden_from_strangers(self, api, pending_listing, buyer_headers):
        anonymous = await api.get(f"/api/listings/{pending_listing.id}")
        stranger = await api.get(f"/api/listings/{pending_listing.id}", headers=buyer_headers)

        assert anonymous.status_code == 404
        assert stranger.status_code == 404

    async def test_owner_and_admin_see_pending(self, api, pending_listing, owner_headers, admin_headers):
        assert (await api.get(f"/api/listings/{pending_listing.id}", headers=owner_headers)).status_code == 200
        assert (await api.get(f"/api/listings/{pending_listing.id}", headers=admin_headers)).status_code == 200

    async def test_unknown_listing(self, api):
        response = await api.get("/api/listings/does-not-exist")

        assert response.status_code == 404
        assert response.json()["detail"] == "Listing not found"

    async def test_mine_lists_every_status(self, api, approved_listing, pending_listing, owner_headers):
        response = await api.get("/api/listings/mine", headers=owner_headers)

        assert {item["status"] for item in response.json()} == {"approved", "pending"}


class TestListingWrites:
    """Tests for owner create, edit and delete."""

    async def test_create_starts_pending(self, api, owner_headers):
        response = await api.post(
            "/api/listings",
            json={
                "title": "Retail Shop in Prime Location",
                "property_type": "Retail/Shop",
                "intent": "lease",
                "price_inr": 45000,
                "state": "Maharashtra",
                "city": "Mumbai",
            },
            headers=owner_headers,
        )

        assert response.status_code == 201
        assert response.json()["status"] == "pending"
        assert response.json()["price_display"] == "₹ 45 k"

    async def test_create_rejects_bad_intent(self, api, owner_headers):
        response = await api.post(
            "/api/listings",
            json={"title": "Shop", "property_type": "Retail", "intent": "swap", "state": "X", "city": "Y"},
            headers=owner_headers,
        )

        assert response.status_code == 422

    async def test_edit_rejected_listing_goes_back_to_review(self, api, make_listing, owner, owner_headers):
        listing = await make_listing(owner, status="rejected", rejection_reason="Blurry photos")

        response = await api.patch(
            f"/api/listings/{listing.id}", json={"media": ["/media/sharp.jpg"]}, headers=owner_headers
        )

        body = response.json()
        assert body["status"] == "pending"
        assert body["rejection_reason"] is None
        assert body["media"] == ["/media/sharp.jpg"]

    async def test_approved_listing_is_not_editable(self, api, approved_listing, owner_headers):
        response = await api.patch(
            f"/api/listings/{approved_listing.id}", json={"price_inr": 1}, headers=owner_headers
        )

        assert response.status_code == 409

    async def test_only_owner_can_delete(self, api, make_listing, owner, buyer_headers):
        listing = await make_listing(owner)

        response = await api.delete(f"/api/listings/{listing.id}", headers=buyer_headers)

        assert response.status_code == 403

    async def test_owner_deletes(self, api, approved_listing, owner_headers):
        response = await api.delete(f"/api/listings/{approved_listing.id}", headers=owner_headers)

        assert response.status_code == 204
        assert (await api.get(f"/api/listings/{approved_listing.id}")).status_code == 404


class TestMediaUpload:
    async def test_stores_image(self, api, owner_headers, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "media_root", str(tmp_path))

        response = await api.post(
            "/api/media",
            files={"file": ("front.png", b"\x89PNG fake", "image/png")},
            headers=owner_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["url"].startswith("/media/")
        assert body["url"].endswith(".png")
        assert (tmp_path / body["filename"]).read_bytes() == b"\x89PNG fake"

    async def test_rejects_other_types(self, api, owner_headers, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "media_root", str(tmp_path))

        response = await api.post(
            "/api/media",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=owner_headers,
        )

        assert response.status_code == 415
        assert list(tmp_path.iterdir()) == []


class TestAreaConvert:
    async def test_converts_with_aliases(self, api):
        response = await api.get(
            "/api/tools/area-convert", params={"value": 2, "from_unit": "acre", "to_unit": "Sq Ft"}
        )

        body = response.json()
        assert body["result"] == 87120
        assert body["to_unit"] == "sq.ft"
        assert body["display"] == "87120 sq.ft"

    async def test_negative_value_rejected(self, api):
        response = await api.get("/api/tools/area-convert", params={"value": -1})

        assert response.status_code == 422


class TestEmiQuote:
    """Tests for GET /api/tools/emi."""

    async def test_quote_for_loan_amount(self, api):
        response = await api.get(
            "/api/tools/emi",
            params={"loanAmount": 100000, "interestRate": 12, "tenureYears": 1},
        )

        body = response.json()
        assert body["months"] == 12
        assert body["emi"] == 8884.88
        assert body["emi_display"] == "₹ 8.9 k"

    async def test_loan_defaults_from_property_price(self, api):
        response = await api.get("/api/tools/emi", params={"propertyPrice": 5000000})

        body = response.json()
        assert body["loan_amount"] == 4000000
        assert body["interest_rate"] == 7.7
        assert body["months"] == 240
        assert body["total_interest"] > 0

    async def test_needs_an_amount(self, api):
        response = await api.get("/api/tools/emi")

        assert response.status_code == 422

    async def test_rejects_out_of_range_tenure(self, api):
        response = await api.get(
            "/api/tools/emi", params={"loanAmount": 100000, "tenureYears": 0}
        )

        assert response.status_code == 422
