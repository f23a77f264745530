# showcase/preview_resolver.py

import requests
from requests.adapters import HTTPAdapter
from urllib.parse import quote
from typing import Optional
from pydantic import ValidationError

from showcase.models import PreviewResult
from showcase.logger import get_logger
import showcase.exceptions as ex

log = get_logger(__name__)

# Characters encodeURIComponent leaves alone
URI_COMPONENT_SAFE = "-_.!~*'()"


DEFAULT_POOL_SIZE = 10


def mount_adapters(session: requests.Session, pool_size: int):
  """Single attempt per request (no Retry), 'pool_size' connections kept per host."""
  adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size, max_retries=0)
  for prefix in ("https://", "http://"):
    previous = session.adapters.get(prefix)
    session.mount(prefix, adapter)
    if previous is not None:
      previous.close()


def build_session(pool_size: int = DEFAULT_POOL_SIZE) -> requests.Session:
  """Session for link-preview and image calls."""
  session = requests.session()
  mount_adapters(session, pool_size)
  return session


class PreviewResolver:
  """Asks the link-preview service for a representative image of a link."""

  def __init__(self, api_key: str, host: str = "api.linkpreview.net", timeout: float = 10, http=None):
    if not api_key:
      raise ValueError("A link preview API key is required")
    self.api_key = api_key
    self.host = host
    self.timeout = timeout
    self.http = http or build_session()
    self._pool_size = DEFAULT_POOL_SIZE

  def reserve_connections(self, count: int):
    """
    Grow the connection pool so 'count' concurrent calls can all keep their
    connection. Only applies to requests sessions.
    """
    if count <= self._pool_size or not isinstance(self.http, requests.Session):
      return
    mount_adapters(self.http, count)
    self._pool_size = count
    log.debug(f"[PREVIEW] Connection pool resized to {count}")

  def build_url(self, link: str) -> str:
    return f"https://{self.host}/?key={quote(self.api_key, safe=URI_COMPONENT_SAFE)}&q={quote(link, safe=URI_COMPONENT_SAFE)}"

  def resolve(self, link: Optional[str]) -> Optional[str]:
    """
    Return the preview image URL for 'link', or None when the service has none.

    Raises:
      PreviewTimeoutError, PreviewConnectionError, PreviewHTTPError, PreviewParsingError
    """
    if not link:
      log.debug("[PREVIEW] Skipping empty link")
      return None

    url = self.build_url(link)
    log.debug(f"[PREVIEW] Requesting preview for link: '{link}'")

    try:
      response = self.http.get(url, timeout=self.timeout)
      response.raise_for_status()
    except requests.exceptions.Timeout as e:
      raise ex.PreviewTimeoutError(f"Preview request timed out for '{link}': {e}")
    except requests.exceptions.ConnectionError as e:
      raise ex.PreviewConnectionError(f"Preview service unreachable for '{link}': {e}")
    except requests.exceptions.HTTPError as e:
      status_code = e.response.status_code if e.response is not None else None
      raise ex.PreviewHTTPError(status_code=status_code, message=f"Preview service returned HTTP {status_code} for '{link}'")
    except requests.exceptions.RequestException as e:
      raise ex.PreviewException(f"Preview request failed for '{link}': {e}")

    try:
      payload = response.json()
    except ValueError as e:
      raise ex.PreviewParsingError(f"Preview response for '{link}' is not JSON: {e}")

    if not isinstance(payload, dict):
      raise ex.PreviewParsingError(f"Preview response for '{link}' is not an object")

    try:
      result = PreviewResult(**payload)
    except ValidationError as e:
      raise ex.PreviewParsingError(f"Unexpected preview payload for '{link}': {e}")

    if not result.image:
      log.info(f"[PREVIEW] No image in preview for link: '{link}'")
      return None

    log.debug(f"[PREVIEW] Preview image for '{link}': {result.image}")
    return result.image
