# showcase/config.py

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

PLACEHOLDER_URL = "https://via.placeholder.com/400x200?text=No+Image"
LOCAL_HOSTNAME = "localhost"


class Settings(BaseModel):
  model_config = ConfigDict(populate_by_name=True)

  app_env: str = Field(default="development", alias="APP_ENV")
  catalog_host: str = Field(default=LOCAL_HOSTNAME, alias="CATALOG_HOST")
  local_origin: str = Field(default="http://localhost:8000", alias="CATALOG_LOCAL_ORIGIN")
  deployed_origin: str = Field(default="http://192.168.0.103:8000", alias="CATALOG_DEPLOYED_ORIGIN")
  preview_host: str = Field(default="api.linkpreview.net", alias="LINK_PREVIEW_HOST")
  preview_api_key: str = Field(alias="LINK_PREVIEW_API_KEY")
  placeholder_url: str = Field(default=PLACEHOLDER_URL, alias="PLACEHOLDER_URL")
  request_timeout: float = Field(default=10.0, gt=0, alias="REQUEST_TIMEOUT")
  max_concurrency: Optional[int] = Field(default=None, ge=1, alias="RESOLUTION_MAX_CONCURRENCY")

  @property
  def base_origin(self) -> str:
    return select_base_origin(self.catalog_host, self.local_origin, self.deployed_origin)


def select_base_origin(hostname: str, local_origin: str, deployed_origin: str) -> str:
  """Local backend when running on localhost, deployed backend otherwise."""
  origin = local_origin if hostname == LOCAL_HOSTNAME else deployed_origin
  return origin.rstrip("/")


def _load_dotenv():
  # Repo root .env if present, otherwise whatever load_dotenv finds
  root_env = Path(__file__).resolve().parents[1] / ".env"
  if root_env.exists():
    load_dotenv(root_env)
  else:
    load_dotenv()


@lru_cache()
def get_settings() -> Settings:
  _load_dotenv()
  try:
    return Settings(**os.environ)
  except ValidationError as exc:
    missing = [str(e["loc"][0]) for e in exc.errors() if e["type"] == "missing"]
    if missing:
      raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}") from exc
    raise RuntimeError(f"Invalid configuration: {exc}") from exc
