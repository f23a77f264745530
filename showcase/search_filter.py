# showcase/search_filter.py

from typing import Iterable, List, Optional

from showcase.models import ProductView


def filter_products(products: Iterable[ProductView], search: Optional[str] = None) -> List[ProductView]:
  """Records whose title contains 'search' (case-insensitive), in their original order."""
  if not search:
    return list(products)
  needle = search.casefold()
  return [p for p in products if needle in (p.title or "").casefold()]
