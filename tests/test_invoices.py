"""
Integration tests for the invoice endpoints
"""

import re
from datetime import date, timedelta

import pytest


async def create_client(client, account, name="Soleil SARL"):
    response = await client.post("/api/clients", json={"company_name": name}, headers=account.headers)
    assert response.status_code == 201, response.text
    return response.json()


async def create_invoice(client, account, client_id, **fields):
    payload = {"client_id": client_id, **fields}
    response = await client.post("/api/invoices", json=payload, headers=account.headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_totals_are_computed_on_create(client, account):
    customer = await create_client(client, account)
    invoice = await create_invoice(
        client,
        account,
        customer["id"],
        items=[{"description": "A", "quantity": 2, "unitPrice": 5}],
    )
    assert invoice["subtotal_amount"] == 10
    assert invoice["total_amount"] == 10
    assert invoice["status"] == "draft"
    assert invoice["currency"] == "USD"
    assert invoice["issue_date"] == date.today().isoformat()
    assert invoice["items"] == [{"description": "A", "quantity": 2, "unitPrice": 5}]
    assert invoice["client"]["company_name"] == "Soleil SARL"
    assert re.fullmatch(r"FAC-\d{6}", invoice["invoice_number"])


@pytest.mark.asyncio
async def test_client_from_another_tenant_is_rejected(client, account, other_account):
    customer = await create_client(client, account)
    response = await client.post(
        "/api/invoices", json={"client_id": customer["id"], "items": []}, headers=other_account.headers
    )
    assert response.status_code == 400
    assert response.json() == {"message": "Client introuvable pour ce compte."}


@pytest.mark.asyncio
async def test_update_recomputes_totals_only_with_items(client, account):
    customer = await create_client(client, account)
    invoice = await create_invoice(
        client, account, customer["id"], items=[{"description": "A", "quantity": 1, "unitPrice": 10}]
    )

    response = await client.patch(
        f"/api/invoices/{invoice['id']}", json={"status": "sent", "currency": "eur"}, headers=account.headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "sent"
    assert response.json()["currency"] == "EUR"
    assert response.json()["total_amount"] == 10

    response = await client.patch(
        f"/api/invoices/{invoice['id']}",
        json={"items": [{"description": "B", "quantity": "3", "unitPrice": "7"}]},
        headers=account.headers,
    )
    assert response.status_code == 200
    assert response.json()["total_amount"] == 21
    assert response.json()["subtotal_amount"] == 21

    response = await client.patch(f"/api/invoices/{invoice['id']}", json={}, headers=account.headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_filters_by_status_and_number(client, account):
    customer = await create_client(client, account)
    draft = await create_invoice(client, account, customer["id"])
    await create_invoice(client, account, customer["id"], status="paid")

    response = await client.get("/api/invoices", params={"status": "draft"}, headers=account.headers)
    body = response.json()
    assert body["pagination"]["total"] == 1
    assert body["data"][0]["id"] == draft["id"]

    response = await client.get(
        "/api/invoices", params={"search": draft["invoice_number"]}, headers=account.headers
    )
    assert draft["id"] in [row["id"] for row in response.json()["data"]]


@pytest.mark.asyncio
async def test_summary_counts_all_time_paid_but_only_this_month_revenue(client, account):
    customer = await create_client(client, account)
    today = date.today()
    last_month = today.replace(day=1) - timedelta(days=1)

    await create_invoice(
        client, account, customer["id"], status="paid", issue_date=today.isoformat(),
        items=[{"description": "A", "quantity": 1, "unitPrice": 100}],
    )
    await create_invoice(
        client, account, customer["id"], status="sent", issue_date=today.isoformat(),
        items=[{"description": "B", "quantity": 1, "unitPrice": 50}],
    )
    await create_invoice(
        client, account, customer["id"], status="paid", issue_date=last_month.isoformat(),
        items=[{"description": "C", "quantity": 1, "unitPrice": 30}],
    )

    response = await client.get("/api/invoices/summary", headers=account.headers)
    assert response.status_code == 200
    assert response.json() == {"monthlyRevenue": 100, "outstanding": 50, "paid": 2}


@pytest.mark.asyncio
async def test_summary_is_tenant_scoped(client, account, other_account):
    customer = await create_client(client, account)
    await create_invoice(
        client, account, customer["id"], status="paid", items=[{"description": "A", "quantity": 1, "unitPrice": 100}]
    )

    response = await client.get("/api/invoices/summary", headers=other_account.headers)
    assert response.json() == {"monthlyRevenue": 0, "outstanding": 0, "paid": 0}


@pytest.mark.asyncio
async def test_analytics_over_an_explicit_range(client, account, other_account):
    customer = await create_client(client, account)
    await create_invoice(
        client, account, customer["id"], status="paid", issue_date="2026-01-10",
        items=[{"description": "Conseil", "quantity": 2, "unitPrice": 50}],
    )
    await create_invoice(
        client, account, customer["id"], status="sent", issue_date="2026-02-01",
        items=[{"description": "Conseil", "quantity": 1, "unitPrice": 25}],
    )
    await create_invoice(
        client, account, customer["id"], status="paid", issue_date="2026-03-05",
        items=[{"description": "Stylo", "quantity": 4, "unitPrice": 10}],
    )
    await create_invoice(
        client, account, customer["id"], status="paid", issue_date="2025-12-31",
        items=[{"description": "Hors période", "quantity": 1, "unitPrice": 999}],
    )

    params = {"period": "month", "start": "2026-01-01", "end": "2026-03-31"}
    response = await client.get("/api/invoices/analytics", params=params, headers=account.headers)
    assert response.status_code == 200, response.text
    assert response.json() == {
        "totals": {"revenue": 140, "outstanding": 25, "invoiceCount": 3, "averagePaymentDelay": 0},
        "charts": {
            "revenue": [
                {"label": "2026-01", "total": 100},
                {"label": "2026-02", "total": 0},
                {"label": "2026-03", "total": 40},
            ],
            "topClients": [{"company": "Soleil SARL", "total": 140}],
            "topProducts": [{"label": "Conseil", "total": 100}, {"label": "Stylo", "total": 40}],
        },
        "meta": {"period": "month", "startDate": "2026-01-01", "endDate": "2026-03-31"},
    }

    response = await client.get("/api/invoices/analytics", params=params, headers=other_account.headers)
    assert response.json()["totals"]["invoiceCount"] == 0
    assert response.json()["charts"]["topClients"] == []


@pytest.mark.asyncio
async def test_analytics_rejects_bad_ranges(client, account):
    response = await client.get(
        "/api/invoices/analytics",
        params={"start": "2026-03-01", "end": "2026-01-01"},
        headers=account.headers,
    )
    assert response.status_code == 400
    assert response.json() == {"message": "La date de fin doit être postérieure à la date de début."}

    response = await client.get("/api/invoices/analytics", params={"period": "week"}, headers=account.headers)
    assert response.status_code == 400

    response = await client.get("/api/invoices/analytics", params={"start": "hier"}, headers=account.headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_todo_lists(client, account):
    customer = await create_client(client, account)
    today = date.today()

    late = await create_invoice(
        client, account, customer["id"], status="sent", due_date=(today - timedelta(days=2)).isoformat()
    )
    soon = await create_invoice(
        client, account, customer["id"], status="sent", due_date=(today + timedelta(days=3)).isoformat()
    )
    draft = await create_invoice(client, account, customer["id"])
    await create_invoice(
        client, account, customer["id"], status="sent", due_date=(today + timedelta(days=30)).isoformat()
    )

    response = await client.get("/api/invoices/todo", headers=account.headers)
    assert response.status_code == 200
    body = response.json()
    assert [row["id"] for row in body["overdue"]] == [late["id"]]
    assert [row["id"] for row in body["dueSoon"]] == [soon["id"]]
    assert [row["id"] for row in body["drafts"]] == [draft["id"]]


@pytest.mark.asyncio
async def test_pdf_download(client, account):
    customer = await create_client(client, account)
    invoice = await create_invoice(
        client,
        account,
        customer["id"],
        notes="Paiement à 30 jours",
        items=[{"description": "Audit", "quantity": 2, "unitPrice": 150}],
    )

    response = await client.get(f"/api/invoices/pdf/{invoice['id']}", headers=account.headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == (
        f"attachment; filename=facture-{invoice['invoice_number']}.pdf"
    )
    assert response.content.startswith(b"%PDF")


@pytest.mark.asyncio
async def test_other_tenant_cannot_read_invoice(client, account, other_account):
    customer = await create_client(client, account)
    invoice = await create_invoice(client, account, customer["id"])

    for path in (f"/api/invoices/{invoice['id']}", f"/api/invoices/pdf/{invoice['id']}"):
        response = await client.get(path, headers=other_account.headers)
        assert response.status_code == 404
        assert response.json() == {"message": "Facture introuvable."}

    response = await client.delete(f"/api/invoices/{invoice['id']}", headers=account.headers)
    assert response.status_code == 204


@pytest.mark.asyncio
async def test_deleting_a_billed_client_is_a_conflict(client, account):
    customer = await create_client(client, account)
    await create_invoice(client, account, customer["id"])

    response = await client.delete(f"/api/clients/{customer['id']}", headers=account.headers)
    assert response.status_code == 409
