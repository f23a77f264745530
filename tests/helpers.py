# tests/helpers.py

import base64
import threading
from io import BytesIO
from urllib.parse import quote

import requests
from PIL import Image

BASE_ORIGIN = "http://backend.test"
PREVIEW_HOST = "preview.test"
API_KEY = "test-key"


def make_image_bytes(width, height, fmt="PNG", color=(200, 40, 40)):
  buffer = BytesIO()
  with Image.new("RGB", (width, height), color) as img:
    img.save(buffer, format=fmt)
  return buffer.getvalue()


def make_data_url(width, height, fmt="PNG", color=(200, 40, 40)):
  encoded = base64.b64encode(make_image_bytes(width, height, fmt, color)).decode("ascii")
  return f"data:image/{fmt.lower()};base64,{encoded}"


def decode_data_url(data_url):
  """Open the image inside a base64 data URL (caller closes it)."""
  payload = data_url.split(",", 1)[1]
  return Image.open(BytesIO(base64.b64decode(payload)))


def data_url_size(data_url):
  with decode_data_url(data_url) as img:
    return img.size


class FakeResponse:
  def __init__(self, status_code=200, json_data=None, content=b""):
    self.status_code = status_code
    self._json_data = json_data
    self.content = content
    self.closed = False

  def json(self):
    if self._json_data is None:
      raise ValueError("No JSON body")
    return self._json_data

  def raise_for_status(self):
    if self.status_code >= 400:
      raise requests.exceptions.HTTPError(f"HTTP {self.status_code}", response=self)

  def close(self):
    self.closed = True


class FakeSession:
  """
  Stand-in for requests.Session keyed by URL.
  A route is a FakeResponse, an exception to raise, or a callable returning either.
  """

  def __init__(self, routes=None):
    self.routes = dict(routes or {})
    self.calls = []
    self._lock = threading.Lock()

  def get(self, url, **kwargs):
    with self._lock:
      self.calls.append(url)
    if url not in self.routes:
      raise requests.exceptions.ConnectionError(f"No route for {url}")
    target = self.routes[url]
    if callable(target):
      target = target()
    if isinstance(target, Exception):
      raise target
    return target


def preview_url(link):
  encoded = quote(link, safe="-_.!~*'()")
  return f"https://{PREVIEW_HOST}/?key={API_KEY}&q={encoded}"
