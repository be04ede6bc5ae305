"""HTTP tests for the FastAPI surface with the store dependency overridden."""

import dataclasses

import pytest
from fastapi.testclient import TestClient

from catalog_lookup import main
from catalog_lookup.errors import ConfigurationError
from catalog_lookup.main import app, get_field_mapping
from catalog_lookup.notion_client import get_store
from catalog_lookup.schema import SCHEMAS

from .helpers import make_page


@pytest.fixture
def client_with(make_store):
    def factory(**transport_kwargs):
        store, transport = make_store(**transport_kwargs)
        app.dependency_overrides[get_store] = lambda: store
        return TestClient(app), transport

    yield factory
    app.dependency_overrides.clear()


def test_lookup_by_partial_gtin(client_with):
    client, _ = client_with(body={"results": [make_page("Produto X", gtin="0222490000")]})
    response = client.get("/api/lookup", params={"q": "222490"})
    assert response.status_code == 200
    assert response.json() == {
        "found": True,
        "items": [{"name": "Produto X", "preco": None, "img": None, "gtin": "0222490000"}],
    }


def test_lookup_by_explicit_name(client_with):
    pages = [make_page("Leite Integral", price=5), make_page("Leite Condensado Moça", price=8.5)]
    client, transport = client_with(body={"results": pages})
    response = client.get("/api/lookup", params={"name": "leite condensado"})
    body = response.json()
    assert body["found"] is True
    assert [item["name"] for item in body["items"]] == ["Leite Condensado Moça", "Leite Integral"]
    assert len(transport.requests) == 1


def test_empty_query_is_400_without_store_call(client_with):
    client, transport = client_with()
    response = client.get("/api/lookup", params={"q": ""})
    assert response.status_code == 400
    assert response.json() == {"error": "Informe um termo de busca"}
    assert transport.requests == []


def test_missing_query_param_is_400(client_with):
    client, _ = client_with()
    assert client.get("/api/lookup").status_code == 400


def test_not_found(client_with):
    client, _ = client_with(body={"results": []})
    response = client.get("/api/lookup", params={"q": "arroz"})
    assert response.status_code == 200
    assert response.json() == {"found": False, "items": []}


def test_upstream_error_echoes_store_status(client_with):
    details = {"object": "error", "code": "object_not_found"}
    client, _ = client_with(status_code=404, body=details)
    response = client.get("/api/lookup", params={"q": "arroz"})
    assert response.status_code == 404
    assert response.json() == {"error": "Erro ao consultar Notion", "details": details}


def test_non_object_store_result_is_502(client_with):
    client, _ = client_with(body={"results": [42]})
    response = client.get("/api/lookup", params={"q": "arroz"})
    assert response.status_code == 502
    assert response.json()["error"] == "Erro ao consultar Notion"


def test_internal_error_is_500(client_with):
    client, _ = client_with(body={"results": [make_page("Arroz")]})
    broken = dataclasses.replace(SCHEMAS["nome"], price_properties=None)
    app.dependency_overrides[get_field_mapping] = lambda: broken
    response = client.get("/api/lookup", params={"q": "arroz"})
    assert response.status_code == 500
    assert response.json()["error"] == "Erro interno"


def test_failure_outside_lookup_is_json_500(client_with):
    """Errors raised outside the lookup pipeline still get the JSON error body."""

    def exploding_mapping():
        raise RuntimeError("mapping table unavailable")

    client_with()
    app.dependency_overrides[get_field_mapping] = exploding_mapping
    response = TestClient(app, raise_server_exceptions=False).get("/api/lookup", params={"q": "arroz"})
    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"error": "Erro interno", "details": "mapping table unavailable"}


def test_unknown_schema_is_configuration_error(client_with, monkeypatch):
    client, transport = client_with()
    monkeypatch.setattr(main, "settings", dataclasses.replace(main.settings, catalog_schema="v9"))
    response = client.get("/api/lookup", params={"q": "arroz"})
    assert response.status_code == 500
    assert "v9" in response.json()["error"]
    assert transport.requests == []


def test_missing_credentials_is_500():
    def unconfigured():
        raise ConfigurationError()

    app.dependency_overrides[get_store] = unconfigured
    try:
        response = TestClient(app).get("/api/lookup", params={"q": "arroz"})
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 500
    assert response.json() == {"error": "Variáveis NOTION_TOKEN / NOTION_DB_ID não configuradas"}


def test_health():
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
