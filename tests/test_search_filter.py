# tests/test_search_filter.py

import pytest

from showcase.models import ProductView
from showcase.search_filter import filter_products

PRODUCTS = [
  ProductView(id=1, title="Desk Lamp", photo="p"),
  ProductView(id=2, title="Coffee Mug", photo="p"),
  ProductView(id=3, title="LAMP shade", photo="p"),
  ProductView(id=4, title="", photo="p"),
]


@pytest.mark.parametrize("search", ["", None])
def test_empty_search_is_identity(search):
  assert filter_products(PRODUCTS, search) == PRODUCTS


def test_filter_preserves_order():
  assert [p.id for p in filter_products(PRODUCTS, "lamp")] == [1, 3]


@pytest.mark.parametrize("search", ["lamp", "LAMP", "LaMp"])
def test_filter_ignores_case(search):
  assert [p.id for p in filter_products(PRODUCTS, search)] == [1, 3]


def test_filter_matches_substrings_anywhere():
  assert [p.id for p in filter_products(PRODUCTS, "ee m")] == [2]
  assert filter_products(PRODUCTS, "chair") == []


def test_filter_does_not_mutate_input():
  products = tuple(PRODUCTS)
  filter_products(products, "mug")
  assert products == tuple(PRODUCTS)
