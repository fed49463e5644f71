from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from surebet_dashboard.api.app import create_app


def test_two_tabs_with_different_headers(app_config, registry, make_sheets_client):
    client = make_sheets_client(
        {
            "two-tabs": {
                "Janeiro A": [
                    ["DATA APOSTA", "LUCRO", "STAKE"],
                    ["01/01/2025", "100,50", "50,00"],
                ],
                "Janeiro B": [
                    ["Resumo do mes"],
                    ["Data Aposta (registro)", "Resultado", "Valor apostado"],
                    ["02/01/2025", "-20,00", "10,00"],
                ],
            }
        }
    )
    sheet = registry.insert("Joao", "two-tabs", "A1:Z1000")
    app = create_app(app_config, registry=registry, sheets_client=client)

    with TestClient(app) as api:
        body = api.get("/api/dashboard/overview", params={"sheetDbId": str(sheet.id)}).json()

    assert body["overview"]["totalApostas"] == 2
    assert body["overview"]["totalLucro"] == pytest.approx(80.5)
    assert body["overview"]["totalStake"] == pytest.approx(60)
    assert body["lucroPorDia"] == [
        {"date": "2025-01-01", "lucro": pytest.approx(100.5)},
        {"date": "2025-01-02", "lucro": pytest.approx(-20)},
    ]
    assert body["overview"]["greenPercent"] == pytest.approx(50)
    assert body["overview"]["redPercent"] == pytest.approx(50)
