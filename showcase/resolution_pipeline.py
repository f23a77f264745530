# showcase/resolution_pipeline.py

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Tuple

from showcase.image_normalizer import crop_image_to_square
from showcase.models import ProductView
from showcase.preview_resolver import PreviewResolver
from showcase.product_store import ProductStore
from showcase.logger import get_logger
import showcase.exceptions as ex

log = get_logger(__name__)

Candidate = Tuple[int, ProductView]


def _always_alive() -> bool:
  return True


class ResolutionPipeline:
  """
  Replaces placeholder photos with square-cropped link previews.

  One task per candidate, all started together. Tasks don't wait on each
  other and fail on their own: a failed task leaves its record's placeholder
  in place and nothing else.
  """

  def __init__(
      self,
      resolver: PreviewResolver,
      placeholder_url: str,
      normalizer: Callable[[str], str] = crop_image_to_square,
      max_concurrency: Optional[int] = None
  ):
    self.resolver = resolver
    self.placeholder_url = placeholder_url
    self.normalizer = normalizer
    self.max_concurrency = max_concurrency

  def candidates(self, products: Sequence[ProductView]) -> List[Candidate]:
    """(index, record) for every record still showing the placeholder."""
    return [(idx, p) for idx, p in enumerate(products) if p.photo == self.placeholder_url]

  def run(
      self,
      store: ProductStore,
      candidates: Sequence[Candidate],
      generation: int,
      is_alive: Callable[[], bool] = _always_alive
  ) -> None:
    """
    Resolve every candidate concurrently and block until all tasks have settled.

    Args:
      store (ProductStore): store to merge results into
      candidates: (index, record) pairs captured right after seeding
      generation (int): token returned by store.seed()
      is_alive: liveness check of the consuming view
    """
    if not candidates:
      log.info("[RESOLVE] No products need a preview image")
      return

    workers = len(candidates)
    if self.max_concurrency:
      workers = min(workers, self.max_concurrency)

    log.info(f"[RESOLVE] Resolving preview images for {len(candidates)} products with {workers} workers")

    # One pooled connection per worker
    reserve_connections = getattr(self.resolver, "reserve_connections", None)
    if reserve_connections:
      reserve_connections(workers)

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="resolve") as executor:
      futures = [
        executor.submit(self.resolve_one, store, idx, product, generation, is_alive)
        for idx, product in candidates
      ]
    merged = sum(1 for f in futures if f.result())

    log.info(f"[RESOLVE] Settled {len(candidates)} tasks, {merged} photos replaced")

  def resolve_one(
      self,
      store: ProductStore,
      index: int,
      product: ProductView,
      generation: int,
      is_alive: Callable[[], bool] = _always_alive
  ) -> bool:
    """
    Single resolution attempt for one record. Never raises.

    Returns:
      bool: True if the record's photo was replaced
    """
    try:
      if not is_alive():
        log.debug(f"[RESOLVE] View gone, skipping product {product.id!r}")
        return False

      image_url = self.resolver.resolve(product.link)
      if not image_url:
        return False

      if not is_alive():
        log.debug(f"[RESOLVE] View gone after preview, dropping product {product.id!r}")
        return False

      cropped = self.normalizer(image_url)
      if not cropped:
        log.warning(f"[RESOLVE] Normalizer returned nothing for product {product.id!r}")
        return False

      if not is_alive():
        log.debug(f"[RESOLVE] View gone after crop, dropping product {product.id!r}")
        return False

      return store.update_photo(index, product.id, cropped, generation)
    except ex.PreviewException as e:
      log.warning(f"[RESOLVE] Preview failed for product {product.id!r} ({product.link}): {e}")
      return False
    except Exception as e:
      log.error(f"[RESOLVE] Unexpected error for product {product.id!r} ({product.link}): {e}", exc_info=True)
      return False
