# showcase/product_store.py

import threading
from typing import Iterable, Tuple, Union

from showcase.models import ProductView
from showcase.logger import get_logger

log = get_logger(__name__)


class ProductStore:
  """
  Ordered, render-visible collection of ProductView records for one consumer.

  Two mutations exist:
    - seed(): atomic replace of the whole collection, returns a generation token
    - update_photo(): targeted replace of one slot, addressed by index and id

  A targeted update only swaps the addressed slot, so concurrent updates to
  different records never overwrite each other. Updates carrying an old
  generation token, or arriving after close(), are rejected.
  """

  def __init__(self):
    self._lock = threading.Lock()
    self._products: Tuple[ProductView, ...] = ()
    self._generation = 0
    self._version = 0
    self._seeded = False
    self._closed = False

  def seed(self, products: Iterable[ProductView]) -> int:
    new_products = tuple(products)
    with self._lock:
      if self._closed:
        log.warning("[STORE] Seed ignored, store is closed")
        return self._generation
      self._products = new_products
      self._generation += 1
      self._version += 1
      self._seeded = True
      generation = self._generation
    log.info(f"[STORE] Seeded {len(new_products)} products (generation {generation})")
    return generation

  def update_photo(self, index: int, product_id: Union[int, str], photo: str, generation: int) -> bool:
    """
    Replace the photo of the record at 'index'.

    Returns:
      bool: True if the slot was updated, False if the update was rejected
    """
    if not photo:
      log.warning(f"[STORE] Rejected empty photo for product {product_id!r} at index {index}")
      return False

    with self._lock:
      if self._closed:
        reason = "store is closed"
      elif generation != self._generation:
        reason = f"stale generation {generation} (current {self._generation})"
      elif not 0 <= index < len(self._products):
        reason = f"index out of range ({len(self._products)} products)"
      elif self._products[index].id != product_id:
        reason = f"slot holds product {self._products[index].id!r}"
      else:
        reason = None
        current = self._products[index]
        products = list(self._products)
        products[index] = current.model_copy(update={"photo": photo})
        self._products = tuple(products)
        self._version += 1

    if reason:
      log.info(f"[STORE] Rejected photo update for product {product_id!r} at index {index}: {reason}")
      return False

    log.debug(f"[STORE] Updated photo for product {product_id!r} at index {index}")
    return True

  def snapshot(self) -> Tuple[ProductView, ...]:
    with self._lock:
      return self._products

  def close(self):
    with self._lock:
      self._closed = True
    log.info("[STORE] Closed, further mutations are ignored")

  @property
  def generation(self) -> int:
    with self._lock:
      return self._generation

  @property
  def version(self) -> int:
    with self._lock:
      return self._version

  @property
  def seeded(self) -> bool:
    with self._lock:
      return self._seeded

  @property
  def closed(self) -> bool:
    with self._lock:
      return self._closed

  def __len__(self) -> int:
    return len(self.snapshot())
