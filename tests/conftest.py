# tests/conftest.py

import pytest

from showcase.config import get_settings, PLACEHOLDER_URL
from showcase.logger import configure_logging
from tests.helpers import API_KEY, BASE_ORIGIN, PREVIEW_HOST, FakeSession

configure_logging()


@pytest.fixture(autouse=True)
def set_test_env(monkeypatch):
  monkeypatch.setenv("APP_ENV", "testing")
  monkeypatch.setenv("LINK_PREVIEW_API_KEY", API_KEY)
  monkeypatch.setenv("LINK_PREVIEW_HOST", PREVIEW_HOST)
  monkeypatch.setenv("CATALOG_HOST", "localhost")
  monkeypatch.setenv("CATALOG_LOCAL_ORIGIN", BASE_ORIGIN)
  monkeypatch.delenv("RESOLUTION_MAX_CONCURRENCY", raising=False)
  get_settings.cache_clear()
  yield
  get_settings.cache_clear()


@pytest.fixture
def fake_http():
  return FakeSession()


@pytest.fixture
def placeholder():
  return PLACEHOLDER_URL
