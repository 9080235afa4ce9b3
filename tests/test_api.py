"""End-to-end tests for the HTTP routes."""

import pytest
from fastapi.testclient import TestClient

from config import Settings
from db import seed_data
from main import create_app


@pytest.fixture
def seeded_client(client):
    resp = client.get("/seed")
    assert resp.status_code == 200
    return client


@pytest.fixture
def broken_client(broken_settings):
    with TestClient(create_app(broken_settings)) as client:
        yield client


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


# ── Diagnostic ──


class TestDbTest:
    def test_success(self, client):
        resp = client.get("/api/db-test")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "success"
        assert body["message"] == "Database connection successful!"
        assert len(body["data"]) == 1
        assert "your_project" not in body

    def test_failure(self, broken_client):
        resp = broken_client.get("/api/db-test")
        assert resp.status_code == 500
        body = resp.json()
        assert body["status"] == "error"
        assert body["message"]


# ── Seed ──


class TestSeed:
    def test_seed_is_repeatable(self, client):
        first = client.get("/seed")
        second = client.get("/seed")
        assert first.status_code == second.status_code == 200
        assert first.json() == second.json() == {"message": "Database seeded successfully"}
        assert client.get("/dashboard/cards").json()["number_of_invoices"] == len(seed_data.invoices)

    def test_failure_returns_error(self, broken_client):
        resp = broken_client.get("/seed")
        assert resp.status_code == 500
        assert "error" in resp.json()


# ── Sample query ──


class TestSampleQuery:
    def test_lists_666_invoice(self, seeded_client):
        resp = seeded_client.get("/query")
        assert resp.status_code == 200
        assert resp.json() == [{"amount": 666, "name": "Evil Rabbit"}]

    def test_empty_store_returns_empty_list(self, client, empty_engine):
        # empty_engine shares the client's database file
        resp = client.get("/query")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_failure_returns_error(self, broken_client):
        resp = broken_client.get("/query")
        assert resp.status_code == 500
        assert "error" in resp.json()


# ── Dashboard ──


class TestDashboard:
    def test_revenue_chart(self, seeded_client):
        body = seeded_client.get("/dashboard/revenue-chart").json()
        assert body["type"] == "bar"
        assert len(body["bars"]) == 12

    def test_revenue(self, seeded_client):
        assert len(seeded_client.get("/dashboard/revenue").json()) == 12

    def test_latest_invoices(self, seeded_client):
        body = seeded_client.get("/dashboard/latest-invoices").json()
        assert len(body) == 5
        assert body[0]["amount"] == "$448.00"

    def test_cards(self, seeded_client):
        assert seeded_client.get("/dashboard/cards").json() == {
            "number_of_customers": 6,
            "number_of_invoices": 13,
            "total_paid_invoices": "$1,006.26",
            "total_pending_invoices": "$1,256.32",
        }

    def test_invoices_page(self, seeded_client):
        body = seeded_client.get("/dashboard/invoices", params={"query": "", "page": 3}).json()
        assert body["current_page"] == 3
        assert body["total_pages"] == 3
        assert body["pagination"] == [1, 2, 3]
        assert len(body["invoices"]["data"]) == 1

    def test_invoices_page_must_be_positive(self, seeded_client):
        resp = seeded_client.get("/dashboard/invoices", params={"page": 0})
        assert resp.status_code == 422
        assert resp.json()["error"]["type"] == "validation_error"

    def test_invoices_pages(self, seeded_client):
        resp = seeded_client.get("/dashboard/invoices/pages", params={"query": "paid"})
        assert resp.json() == {"total_pages": 2}

    def test_invoice_by_id(self, seeded_client):
        invoice = seed_data.invoices[0]
        body = seeded_client.get(f"/dashboard/invoices/{invoice['id']}").json()
        assert body["amount"] == invoice["amount"] / 100
        assert body["customer_id"] == invoice["customer_id"]

    def test_invoice_not_found(self, seeded_client):
        resp = seeded_client.get("/dashboard/invoices/does-not-exist")
        assert resp.status_code == 404
        assert resp.json()["error"]["type"] == "not_found"

    def test_customers(self, seeded_client):
        body = seeded_client.get("/dashboard/customers").json()
        assert body[0] == {"id": "cc27c14a-0acf-4f4a-a6c9-d45682c144b9", "name": "Amy Burns"}

    def test_customers_table(self, seeded_client):
        body = seeded_client.get("/dashboard/customers/table", params={"query": "evil"}).json()
        assert [row["name"] for row in body["data"]] == ["Evil Rabbit"]

    def test_database_error_is_reported_without_detail(self, client):
        # Tables have not been created yet
        resp = client.get("/dashboard/revenue")
        assert resp.status_code == 500
        assert resp.json() == {
            "status": "error",
            "error": {"code": 500, "message": "Failed to fetch revenue data.", "type": "database_error"},
        }


# ── Malformed connection string ──


class TestMalformedDatabaseUrl:
    @pytest.fixture
    def misconfigured_client(self, tmp_path):
        settings = Settings(DATABASE_URL="not a database url", BCRYPT_ROUNDS=4)
        with TestClient(create_app(settings)) as client:
            yield client

    def test_app_still_starts(self, misconfigured_client):
        assert misconfigured_client.get("/").status_code == 200

    def test_db_test_reports_error(self, misconfigured_client):
        resp = misconfigured_client.get("/api/db-test")
        assert resp.status_code == 500
        body = resp.json()
        assert body["status"] == "error"
        assert "Database is unavailable" in body["message"]

    def test_seed_reports_error(self, misconfigured_client):
        resp = misconfigured_client.get("/seed")
        assert resp.status_code == 500
        assert "error" in resp.json()

    def test_query_reports_error(self, misconfigured_client):
        resp = misconfigured_client.get("/query")
        assert resp.status_code == 500
        assert "error" in resp.json()

    def test_dashboard_reports_database_error(self, misconfigured_client):
        resp = misconfigured_client.get("/dashboard/revenue")
        assert resp.status_code == 500
        assert resp.json()["error"]["type"] == "database_error"

    def test_empty_url_also_starts(self):
        with TestClient(create_app(Settings(DATABASE_URL="", BCRYPT_ROUNDS=4))) as client:
            assert client.get("/api/db-test").json()["status"] == "error"
