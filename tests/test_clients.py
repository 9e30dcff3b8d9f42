"""
Integration tests for the client endpoints and tenant isolation
"""

import pytest
from uuid import uuid4


async def create_client(client, account, **fields):
    payload = {"company_name": "Soleil SARL", **fields}
    response = await client.post("/api/clients", json=payload, headers=account.headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_requires_authentication(client):
    response = await client.get("/api/clients")
    assert response.status_code == 401
    assert response.json() == {"message": "Authentification requise."}


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client):
    response = await client.get("/api/clients", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.json() == {"message": "Session invalide."}


@pytest.mark.asyncio
async def test_create_injects_tenant_and_ignores_unknown_fields(client, account):
    created = await create_client(
        client, account, contact_name="Awa", email="awa@soleil.test", tenant_id=str(uuid4()), owner="x"
    )
    assert created["tenant_id"] == str(account.profile.tenant_id)
    assert created["company_name"] == "Soleil SARL"
    assert created["contact_name"] == "Awa"
    assert "owner" not in created


@pytest.mark.asyncio
async def test_create_requires_company_name(client, account):
    response = await client.post("/api/clients", json={"contact_name": "Awa"}, headers=account.headers)
    assert response.status_code == 400
    assert "message" in response.json()


@pytest.mark.asyncio
async def test_list_is_paginated_and_searchable(client, account):
    for name in ("Alpha", "Beta", "Gamma"):
        await create_client(client, account, company_name=name)

    response = await client.get("/api/clients", params={"page": 1, "pageSize": 2}, headers=account.headers)
    assert response.status_code == 200
    body = response.json()
    assert len(body["data"]) == 2
    assert body["pagination"] == {"page": 1, "pageSize": 2, "total": 3, "totalPages": 2}

    response = await client.get("/api/clients", params={"search": "bet"}, headers=account.headers)
    names = [row["company_name"] for row in response.json()["data"]]
    assert names == ["Beta"]


@pytest.mark.asyncio
async def test_update_and_delete(client, account):
    created = await create_client(client, account)

    response = await client.patch(
        f"/api/clients/{created['id']}", json={"phone": "+243 900 000 000"}, headers=account.headers
    )
    assert response.status_code == 200
    assert response.json()["phone"] == "+243 900 000 000"
    assert response.json()["company_name"] == "Soleil SARL"

    response = await client.patch(f"/api/clients/{created['id']}", json={}, headers=account.headers)
    assert response.status_code == 400

    response = await client.delete(f"/api/clients/{created['id']}", headers=account.headers)
    assert response.status_code == 204

    response = await client.get(f"/api/clients/{created['id']}", headers=account.headers)
    assert response.status_code == 404
    assert response.json() == {"message": "Client introuvable."}


@pytest.mark.asyncio
async def test_other_tenant_cannot_see_or_touch_client(client, account, other_account):
    created = await create_client(client, account)

    response = await client.get(f"/api/clients/{created['id']}", headers=other_account.headers)
    assert response.status_code == 404

    response = await client.patch(
        f"/api/clients/{created['id']}", json={"company_name": "Pirate"}, headers=other_account.headers
    )
    assert response.status_code == 404

    response = await client.delete(f"/api/clients/{created['id']}", headers=other_account.headers)
    assert response.status_code == 404

    response = await client.get("/api/clients", headers=other_account.headers)
    assert response.json()["data"] == []
    assert response.json()["pagination"]["total"] == 0

    response = await client.get(f"/api/clients/{created['id']}", headers=account.headers)
    assert response.json()["company_name"] == "Soleil SARL"


@pytest.mark.asyncio
async def test_malformed_id_is_a_bad_request(client, account):
    response = await client.get("/api/clients/not-a-uuid", headers=account.headers)
    assert response.status_code == 400
