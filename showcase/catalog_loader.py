# showcase/catalog_loader.py

import re
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

import requests
from pydantic import ValidationError

from showcase.models import Product, ProductView
from showcase.product_store import ProductStore
from showcase.resolution_pipeline import ResolutionPipeline
from showcase.logger import get_logger
import showcase.exceptions as ex

log = get_logger(__name__)

PRODUCTS_PATH = "/api/products"
ABSOLUTE_URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def normalize_photo_url(photo: Optional[str], base_origin: str, placeholder_url: str) -> str:
  """
  Renderable photo URL for a backend record.

  - missing/empty photo -> placeholder
  - relative path       -> prefixed with the backend origin
  - absolute http(s)    -> unchanged
  """
  if not photo:
    return placeholder_url
  if not ABSOLUTE_URL_PATTERN.match(photo):
    if not photo.startswith("/"):
      photo = "/" + photo
    return f"{base_origin.rstrip('/')}{photo}"
  return photo


def sort_by_recency(products: Iterable[ProductView]) -> List[ProductView]:
  """Newest first. Stable for equal timestamps, undated records last."""
  return sorted(
    products,
    key=lambda p: (p.created_at is not None, p.created_at or _OLDEST),
    reverse=True
  )


def _always_alive() -> bool:
  return True


class CatalogLoader:
  """Loads the backend product list into a ProductStore and kicks off photo resolution."""

  def __init__(
      self,
      base_origin: str,
      placeholder_url: str,
      store: ProductStore,
      pipeline: ResolutionPipeline,
      http=None,
      timeout: float = 10
  ):
    self.base_origin = base_origin.rstrip("/")
    self.placeholder_url = placeholder_url
    self.store = store
    self.pipeline = pipeline
    self.http = http or requests
    self.timeout = timeout

  @property
  def products_url(self) -> str:
    return f"{self.base_origin}{PRODUCTS_PATH}"

  def fetch_products(self) -> List[Product]:
    """
    One GET to the product-listing endpoint.

    Raises:
      CatalogTimeoutError, CatalogConnectionError, CatalogHTTPError, CatalogParsingError
    """
    url = self.products_url
    log.info(f"[CATALOG] Fetching product list from {url}")

    try:
      response = self.http.get(url, timeout=self.timeout)
      response.raise_for_status()
    except requests.exceptions.Timeout as e:
      raise ex.CatalogTimeoutError(f"Request timed out while fetching {url}: {e}")
    except requests.exceptions.ConnectionError as e:
      raise ex.CatalogConnectionError(f"Connection error while fetching {url}: {e}")
    except requests.exceptions.HTTPError as e:
      status_code = e.response.status_code if e.response is not None else None
      raise ex.CatalogHTTPError(status_code=status_code, message=f"Returned HTTP {status_code} for {url}")
    except requests.exceptions.RequestException as e:
      raise ex.CatalogException(f"Generic request failure for {url}: {e}")

    try:
      payload = response.json()
    except ValueError as e:
      raise ex.CatalogParsingError(f"Product list is not JSON: {e}")

    if not isinstance(payload, list):
      raise ex.CatalogParsingError(f"Product list must be a JSON array, got {type(payload).__name__}")

    try:
      products = [Product(**item) for item in payload]
    except (TypeError, ValidationError) as e:
      raise ex.CatalogParsingError(f"Invalid product record: {e}")

    log.info(f"[CATALOG] Received {len(products)} products")
    return products

  def build_views(self, products: Iterable[Product]) -> List[ProductView]:
    """Backend records -> store records with renderable photos, newest first."""
    views = [
      ProductView(**{**p.model_dump(), "photo": normalize_photo_url(p.photo, self.base_origin, self.placeholder_url)})
      for p in products
    ]
    return sort_by_recency(views)

  def load(self, is_alive: Callable[[], bool] = _always_alive) -> bool:
    """
    Fetch, seed the store, then resolve placeholder photos. Blocks until every
    resolution task has settled.

    Returns:
      bool: False if the view went away before the seed could be applied

    Raises:
      CatalogException: the list could not be fetched; the store is left untouched
    """
    views = self.build_views(self.fetch_products())

    if not is_alive():
      log.info("[CATALOG] View torn down before the product list arrived, discarding result")
      return False

    generation = self.store.seed(views)
    candidates = self.pipeline.candidates(views)
    log.info(f"[CATALOG] {len(candidates)} of {len(views)} products need a preview image")

    self.pipeline.run(self.store, candidates, generation, is_alive)
    return True
