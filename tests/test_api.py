"""End-to-end tests through the HTTP API."""

from decimal import Decimal

import pytest

from prorights.models import UserRole


async def register_license(client, business_headers, admin_headers):
    response = await client.post(
        "/business-licenses",
        json={
            "business_name": "The Lantern",
            "business_type": "bar",
            "contact_email": "owner@lantern.example",
            "address": "1 Quay Street",
        },
        headers=business_headers,
    )
    assert response.status_code == 201
    license_id = response.json()["id"]

    response = await client.patch(
        f"/business-licenses/{license_id}/status",
        json={"status": "active"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    return license_id


@pytest.fixture
async def catalog(client, seed_user):
    """A registered work with a full contributor split and an active license."""
    composer_a, headers_a = await seed_user(first_name="Ana")
    composer_b, _ = await seed_user(first_name="Ben")
    author, _ = await seed_user(first_name="Cleo")
    vocalist, _ = await seed_user(first_name="Dev")
    business, business_headers = await seed_user(role=UserRole.BUSINESS)
    _, admin_headers = await seed_user(role=UserRole.ADMIN)

    response = await client.post(
        "/works",
        json={
            "title": "Northern Quay",
            "iswc": "T-034524680-1",
            "contributors": [
                {"user_id": str(composer_a.id), "role": "composer"},
                {"user_id": str(composer_b.id), "role": "composer"},
                {"user_id": str(author.id), "role": "author"},
                {"user_id": str(vocalist.id), "role": "vocalist"},
            ],
        },
        headers=headers_a,
    )
    assert response.status_code == 201
    work_id = response.json()["id"]

    license_id = await register_license(client, business_headers, admin_headers)

    return {
        "work_id": work_id,
        "license_id": license_id,
        "artist_headers": headers_a,
        "business_headers": business_headers,
        "admin_headers": admin_headers,
    }


async def submit_usage(client, catalog, play_count=1000, start="2024-01-01", end="2024-02-01"):
    return await client.post(
        "/usage-reports",
        json={
            "license_id": catalog["license_id"],
            "work_id": catalog["work_id"],
            "play_count": play_count,
            "period_start": start,
            "period_end": end,
        },
        headers=catalog["business_headers"],
    )


class TestHealthAndFees:
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_fee_lookup_is_public(self, client):
        response = await client.get("/business-licenses/fee/radio")

        assert response.status_code == 200
        assert Decimal(response.json()["fee"]) == Decimal("5000.00")

    async def test_unknown_business_type(self, client):
        response = await client.get("/business-licenses/fee/spaceport")

        assert response.status_code == 422


class TestAuth:
    async def test_signup_then_login(self, client):
        response = await client.post(
            "/auth/signup",
            json={
                "email": "Mira@Example.com",
                "password": "harbour-99",
                "first_name": "Mira",
                "last_name": "Stone",
            },
        )
        assert response.status_code == 201
        assert response.json()["user"]["email"] == "mira@example.com"
        assert response.json()["user"]["role"] == "artist"

        response = await client.post(
            "/auth/login",
            json={"email": "mira@example.com", "password": "harbour-99"},
        )
        assert response.status_code == 200
        token = response.json()["token"]

        response = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["first_name"] == "Mira"

    async def test_duplicate_email(self, client):
        payload = {"email": "dup@example.com", "password": "secret-1", "first_name": "A", "last_name": "B"}
        await client.post("/auth/signup", json=payload)

        response = await client.post("/auth/signup", json=payload)

        assert response.status_code == 409

    async def test_admin_role_not_self_service(self, client):
        response = await client.post(
            "/auth/signup",
            json={
                "email": "root@example.com",
                "password": "secret-1",
                "first_name": "Root",
                "last_name": "User",
                "role": "admin",
            },
        )

        assert response.status_code == 400

    async def test_wrong_password(self, client):
        await client.post(
            "/auth/signup",
            json={"email": "x@example.com", "password": "right-pass", "first_name": "X", "last_name": "Y"},
        )

        response = await client.post("/auth/login", json={"email": "x@example.com", "password": "wrong-pass"})

        assert response.status_code == 401

    async def test_missing_token(self, client):
        response = await client.get("/works")

        assert response.status_code == 401

    async def test_invalid_token(self, client):
        response = await client.get("/works", headers={"Authorization": "Bearer nonsense"})

        assert response.status_code == 403


class TestWorksApi:
    async def test_registration_splits_by_role(self, client, catalog):
        response = await client.get(
            f"/works/{catalog['work_id']}/contributors",
            headers=catalog["artist_headers"],
        )

        assert response.status_code == 200
        body = response.json()
        split = [(c["role"], Decimal(c["percentage"])) for c in body["contributors"]]
        assert split == [
            ("composer", Decimal("20.00")),
            ("composer", Decimal("20.00")),
            ("author", Decimal("40.00")),
            ("vocalist", Decimal("20.00")),
        ]
        assert Decimal(body["total_percentage"]) == Decimal("100.00")
        assert body["contributors"][0]["user_name"].startswith("Ana")

    async def test_duplicate_contributor_rolls_back_registration(self, client, seed_user):
        artist, headers = await seed_user()

        response = await client.post(
            "/works",
            json={
                "title": "Twice",
                "contributors": [
                    {"user_id": str(artist.id), "role": "author"},
                    {"user_id": str(artist.id), "role": "author"},
                ],
            },
            headers=headers,
        )

        assert response.status_code == 409
        assert (await client.get("/works", headers=headers)).json() == []

    async def test_duplicate_iswc(self, client, catalog):
        response = await client.post(
            "/works",
            json={"title": "Copycat", "iswc": "T-034524680-1"},
            headers=catalog["artist_headers"],
        )

        assert response.status_code == 409

    async def test_add_contributor_recalculates(self, client, catalog, seed_user):
        second_author, _ = await seed_user()

        response = await client.post(
            f"/works/{catalog['work_id']}/contributors",
            json={"user_id": str(second_author.id), "role": "author"},
            headers=catalog["artist_headers"],
        )

        assert response.status_code == 201
        authors = [Decimal(c["percentage"]) for c in response.json()["contributors"] if c["role"] == "author"]
        assert authors == [Decimal("20.00"), Decimal("20.00")]

    async def test_admin_approves_work(self, client, catalog):
        url = f"/works/{catalog['work_id']}/status"

        response = await client.patch(url, json={"status": "approved"}, headers=catalog["admin_headers"])
        assert response.status_code == 200
        assert response.json()["status"] == "approved"

        response = await client.patch(url, json={"status": "rejected"}, headers=catalog["admin_headers"])
        assert response.status_code == 409

    async def test_unknown_work(self, client, catalog):
        response = await client.get(
            "/works/00000000-0000-0000-0000-000000000000",
            headers=catalog["artist_headers"],
        )

        assert response.status_code == 404


class TestUsageAndRoyaltiesApi:
    async def test_usage_report_creates_distributions(self, client, catalog):
        response = await submit_usage(client, catalog, play_count=1000)

        assert response.status_code == 201
        distributions = response.json()["distributions"]
        assert [Decimal(d["amount"]) for d in distributions] == [
            Decimal("2.00"),
            Decimal("2.00"),
            Decimal("4.00"),
            Decimal("2.00"),
        ]
        assert {d["payment_status"] for d in distributions} == {"pending"}

    async def test_empty_period_rejected(self, client, catalog):
        response = await submit_usage(client, catalog, start="2024-01-01", end="2024-01-01")

        assert response.status_code == 400
        assert "period_end" in response.json()["detail"]

    async def test_negative_play_count_rejected(self, client, catalog):
        response = await submit_usage(client, catalog, play_count=-1)

        assert response.status_code == 400

    async def test_artist_cannot_submit_usage(self, client, catalog):
        response = await client.post(
            "/usage-reports",
            json={
                "license_id": catalog["license_id"],
                "work_id": catalog["work_id"],
                "play_count": 10,
                "period_start": "2024-01-01",
                "period_end": "2024-02-01",
            },
            headers=catalog["artist_headers"],
        )

        assert response.status_code == 403

    async def test_paying_twice_conflicts(self, client, catalog):
        distributions = (await submit_usage(client, catalog)).json()["distributions"]
        url = f"/royalties/{distributions[0]['id']}/paid"

        first = await client.post(url, headers=catalog["admin_headers"])
        second = await client.post(url, headers=catalog["admin_headers"])

        assert first.status_code == 200
        assert first.json()["payment_status"] == "paid"
        assert first.json()["paid_at"] is not None
        assert second.status_code == 409

    async def test_distributions_cannot_be_recomputed(self, client, catalog):
        report_id = (await submit_usage(client, catalog)).json()["id"]

        response = await client.post(
            f"/usage-reports/{report_id}/distributions",
            headers=catalog["admin_headers"],
        )

        assert response.status_code == 400

    async def test_artist_sees_own_royalties_and_dashboard(self, client, catalog):
        distributions = (await submit_usage(client, catalog)).json()["distributions"]
        await client.post(f"/royalties/{distributions[0]['id']}/paid", headers=catalog["admin_headers"])

        royalties = (await client.get("/royalties", headers=catalog["artist_headers"])).json()
        assert len(royalties) == 1

        stats = (await client.get("/dashboard/stats", headers=catalog["artist_headers"])).json()
        assert stats["total_works"] == 1
        assert Decimal(stats["total_royalties"]) == Decimal("2.00")
        assert stats["active_licenses"] == 1
        assert stats["pending_approvals"] == 1


class TestUserSearch:
    async def test_finds_artists_only(self, client, seed_user):
        _, headers = await seed_user(first_name="Quinn")
        await seed_user(role=UserRole.BUSINESS, first_name="Quincy")

        response = await client.get("/users/search", params={"q": "quin"}, headers=headers)

        assert response.status_code == 200
        assert [u["first_name"] for u in response.json()] == ["Quinn"]
