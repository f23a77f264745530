# tests/test_app.py

import importlib

import showcase.app as app_module


def test_api_url_defaults_to_view_api_port(monkeypatch):
  monkeypatch.delenv("SHOWCASE_API_URL", raising=False)
  module = importlib.reload(app_module)

  assert module.API_URL == "http://127.0.0.1:8080"


def test_api_url_from_environment(monkeypatch):
  monkeypatch.setenv("SHOWCASE_API_URL", "http://showcase.test:9000")
  module = importlib.reload(app_module)

  assert module.API_URL == "http://showcase.test:9000"
