from __future__ import annotations

"""JSON shape of the dashboard statistics consumed by the front end."""

OVERVIEW_KEYS = {"totalLucro", "totalStake", "totalApostas", "yieldPercent", "greenPercent", "redPercent"}
BREAKDOWN_KEYS = {"entradas", "lucro", "stake_total", "yield_percent"}


def test_overview_response_keys(api_client, registry):
    sheet = registry.insert("Joao", "sheet-nov", "NOVEMBRO!A1:Z1000")
    body = api_client.get("/api/dashboard/overview", params={"sheetDbId": str(sheet.id)}).json()

    assert set(body) == {"overview", "lucroPorDia", "porOperador", "porCasa", "porEsporte"}
    assert set(body["overview"]) == OVERVIEW_KEYS
    assert all(set(d) == {"date", "lucro"} for d in body["lucroPorDia"])
    assert all(set(b) == BREAKDOWN_KEYS | {"operador"} for b in body["porOperador"])
    assert all(set(b) == BREAKDOWN_KEYS | {"casa"} for b in body["porCasa"])
    assert all(set(b) == BREAKDOWN_KEYS | {"esporte"} for b in body["porEsporte"])


def test_sheet_response_keys(api_client):
    body = api_client.post("/api/sheets", json={"name": "Joao", "googleSheetId": "g"}).json()
    assert set(body) == {"id", "name", "google_sheet_id", "range", "created_at"}


def test_cache_status_keys(api_client, registry):
    sheet = registry.insert("Joao", "sheet-nov", "NOVEMBRO!A1:Z1000")
    api_client.get("/api/dashboard/overview", params={"sheetDbId": str(sheet.id)})
    entries = api_client.get("/api/dashboard/cache-status").json()
    assert len(entries) == 1
    assert set(entries[0]) == {"sheetId", "rows", "updatedAt"}
    assert entries[0]["rows"] == 4
