# showcase/session.py

import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import List, Optional

from showcase.catalog_loader import CatalogLoader
from showcase.config import Settings
from showcase.image_normalizer import crop_image_to_square
from showcase.models import ProductView
from showcase.preview_resolver import DEFAULT_POOL_SIZE, PreviewResolver, build_session
from showcase.product_store import ProductStore
from showcase.resolution_pipeline import ResolutionPipeline
from showcase.search_filter import filter_products
from showcase.logger import get_logger
import showcase.exceptions as ex

log = get_logger(__name__)


class CatalogSession:
  """
  Lifetime of one catalog consumer (a mounted view).

  mount() starts loading in the background and returns at once, so the view
  can render an empty grid and then the seeded one. teardown() clears the
  liveness flag and closes the store; nothing reaches the store after that.
  """

  def __init__(self, loader: CatalogLoader, store: ProductStore):
    self.loader = loader
    self.store = store
    self._alive = threading.Event()
    self._executor: Optional[ThreadPoolExecutor] = None
    self._future: Optional[Future] = None

  @property
  def alive(self) -> bool:
    return self._alive.is_set()

  @property
  def settled(self) -> bool:
    """True once the load and every resolution attempt have finished."""
    return self._future is not None and self._future.done()

  def mount(self) -> Future:
    if self._future is not None:
      raise RuntimeError("Catalog session is already mounted")
    self._alive.set()
    self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="catalog")
    self._future = self._executor.submit(self._load)
    log.info("[SESSION] Mounted, catalog load started")
    return self._future

  def _load(self) -> bool:
    try:
      return self.loader.load(is_alive=lambda: self._alive.is_set())
    except ex.CatalogException as e:
      log.error(f"[SESSION] Catalog load failed, store stays empty: {e}")
      return False
    except Exception as e:
      log.error(f"[SESSION] Unexpected error while loading catalog: {e}", exc_info=True)
      return False

  def wait(self, timeout: Optional[float] = None) -> bool:
    """Block until settled. Returns False on timeout."""
    if self._future is None:
      return False
    try:
      self._future.result(timeout=timeout)
    except FutureTimeoutError:
      return False
    except CancelledError:
      # Torn down before the load started
      pass
    return True

  def teardown(self, wait: bool = False, timeout: Optional[float] = None):
    self._alive.clear()
    self.store.close()
    if self._executor is not None:
      if wait:
        self.wait(timeout)
      self._executor.shutdown(wait=False, cancel_futures=True)
    log.info("[SESSION] Torn down")

  def visible_products(self, search: Optional[str] = None) -> List[ProductView]:
    return filter_products(self.store.snapshot(), search)


def build_catalog_session(settings: Settings, http=None) -> CatalogSession:
  """Wire store, resolver, pipeline and loader from settings."""
  store = ProductStore()
  preview_http = http or build_session(pool_size=settings.max_concurrency or DEFAULT_POOL_SIZE)
  resolver = PreviewResolver(
    api_key=settings.preview_api_key,
    host=settings.preview_host,
    timeout=settings.request_timeout,
    http=preview_http
  )
  pipeline = ResolutionPipeline(
    resolver=resolver,
    placeholder_url=settings.placeholder_url,
    normalizer=lambda url: crop_image_to_square(url, http=preview_http, timeout=settings.request_timeout),
    max_concurrency=settings.max_concurrency
  )
  loader = CatalogLoader(
    base_origin=settings.base_origin,
    placeholder_url=settings.placeholder_url,
    store=store,
    pipeline=pipeline,
    http=preview_http,
    timeout=settings.request_timeout
  )
  return CatalogSession(loader=loader, store=store)
