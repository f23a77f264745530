# tests/test_api.py

import pytest
import logging
from fastapi.testclient import TestClient

import showcase.main as main_module
from showcase.config import PLACEHOLDER_URL
from showcase.session import build_catalog_session
from tests.helpers import BASE_ORIGIN, FakeResponse, FakeSession, preview_url

test_log = logging.getLogger("tests")

PRODUCTS = [
  {"id": 1, "title": "Desk Lamp", "link": "http://x", "photo": None, "created_at": "2024-01-02"},
  {"id": 2, "title": "Mug", "link": "http://mug", "photo": "http://cdn/m.jpg", "created_at": "2024-01-01"},
  {"id": 3, "title": "Lamp Shade", "link": "http://shade", "photo": "/media/shade.jpg", "created_at": "2023-12-31"},
]


@pytest.fixture
def client(monkeypatch):
  http = FakeSession({
    f"{BASE_ORIGIN}/api/products": FakeResponse(json_data=PRODUCTS),
    preview_url("http://x"): FakeResponse(json_data={}),
  })
  monkeypatch.setattr(main_module, "build_catalog_session", lambda settings: build_catalog_session(settings, http=http))

  with TestClient(main_module.app, raise_server_exceptions=False) as test_client:
    assert test_client.app.state.catalog.wait(timeout=5)
    yield test_client


def test_list_products(client):
  response = client.get("/products")
  assert response.status_code == 200
  products = response.json()
  assert [p["id"] for p in products] == [1, 2, 3]
  assert products[0]["photo"] == PLACEHOLDER_URL
  assert products[2]["photo"] == f"{BASE_ORIGIN}/media/shade.jpg"
  test_log.info("test_list_products completed successfully.")


def test_list_products_with_search(client):
  response = client.get("/products", params={"search": "LAMP"})
  assert response.status_code == 200
  assert [p["title"] for p in response.json()] == ["Desk Lamp", "Lamp Shade"]


def test_status_after_settle(client):
  response = client.get("/status")
  assert response.status_code == 200
  assert response.json() == {"seeded": True, "settled": True, "total": 3, "version": 1}


def test_health_and_root(client):
  assert client.get("/health").json() == {"status": "ok"}
  assert "/products" in client.get("/").json()["messages"]


def test_store_closed_after_shutdown(monkeypatch):
  http = FakeSession({f"{BASE_ORIGIN}/api/products": FakeResponse(json_data=[])})
  monkeypatch.setattr(main_module, "build_catalog_session", lambda settings: build_catalog_session(settings, http=http))

  with TestClient(main_module.app) as test_client:
    session = test_client.app.state.catalog
    assert session.alive

  assert not session.alive
  assert session.store.closed


def test_global_exception_handler(client, monkeypatch, caplog):
  def broken(search=None):
    raise ValueError("This is a test error.")

  monkeypatch.setattr(client.app.state.catalog, "visible_products", broken)

  with caplog.at_level("ERROR"):
    response = client.get("/products")
  assert response.status_code == 500
  assert response.json() == {"detail": "Internal Server Error"}
  assert any("This is a test error." in message for message in caplog.messages)
