# showcase/image_normalizer.py

import base64
from io import BytesIO
from typing import Tuple

import requests
from PIL import Image, ImageOps

from showcase.logger import get_logger

log = get_logger(__name__)

JPEG_QUALITY = 92
DATA_URL_PREFIX = "data:"

headers = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/90.0.4430.212 Safari/537.36",
    "Accept": "image/avif,image/webp,image/apng,image/*,*/*;q=0.8"
}


def square_crop_box(width: int, height: int) -> Tuple[int, int, int, int]:
  """Centered square region (left, upper, right, lower) for a width x height image."""
  if width <= 0 or height <= 0:
    raise ValueError(f"Invalid image size {width}x{height}")
  size = min(width, height)
  sx = (width - size) // 2
  sy = (height - size) // 2
  return sx, sy, sx + size, sy + size


def crop_image_to_square(image_url: str, http=None, timeout: float = 10) -> str:
  """
  Crop the image behind 'image_url' to its centered square and return it as a JPEG data URL.

  Never raises: when the image can't be fetched or decoded, the original URL
  is returned unchanged so callers always get something renderable.

  Args:
    image_url (str): http(s) URL or data URL of the source image
    http: object with a requests-compatible get(); defaults to the requests module
    timeout (float): seconds for the image download

  Returns:
    str: 'data:image/jpeg;base64,...' on success, 'image_url' otherwise
  """
  try:
    content = _read_image_bytes(image_url, http or requests, timeout)
    data_url = _encode_square_jpeg(content)
  except Exception as e:
    log.warning(f"[NORMALIZE] Falling back to original image for '{_short(image_url)}': {e}")
    return image_url

  log.debug(f"[NORMALIZE] Cropped '{_short(image_url)}' to square ({len(data_url)} chars)")
  return data_url


def _read_image_bytes(image_url: str, http, timeout: float) -> bytes:
  if not image_url:
    raise ValueError("Empty image URL")

  if image_url.startswith(DATA_URL_PREFIX):
    meta, sep, payload = image_url.partition(",")
    if not sep or not meta.endswith(";base64"):
      raise ValueError("Only base64 data URLs are supported")
    return base64.b64decode(payload, validate=True)

  response = http.get(image_url, headers=headers, timeout=timeout)
  try:
    response.raise_for_status()
    return response.content
  finally:
    close = getattr(response, "close", None)
    if close:
      close()


def _encode_square_jpeg(content: bytes) -> str:
  buffer = BytesIO()
  with Image.open(BytesIO(content)) as img:
    img.load()
    # Crop the image as it is displayed, not as it is stored
    upright = ImageOps.exif_transpose(img)
    try:
      box = square_crop_box(upright.width, upright.height)
      square = upright.crop(box)
      try:
        rgb = square.convert("RGB")
        try:
          rgb.save(buffer, format="JPEG", quality=JPEG_QUALITY)
        finally:
          rgb.close()
      finally:
        square.close()
    finally:
      if upright is not img:
        upright.close()

  encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
  return f"data:image/jpeg;base64,{encoded}"


def _short(url: str, limit: int = 80) -> str:
  if url and len(url) > limit:
    return url[:limit] + "..."
  return url
