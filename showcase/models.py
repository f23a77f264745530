# showcase/models.py

from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, Union
from datetime import datetime, timezone


class Product(BaseModel):
  """Product record as served by the backend listing endpoint."""
  model_config = ConfigDict(extra="ignore")

  id: Union[int, str]
  title: str = ""
  link: Optional[str] = None
  photo: Optional[str] = None
  created_at: Optional[datetime] = None

  @field_validator("title", mode="before")
  @classmethod
  def _title_not_null(cls, value):
    return "" if value is None else value

  @field_validator("created_at")
  @classmethod
  def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
    # Bare dates and naive timestamps are read as UTC so they sort against aware ones
    if value is not None and value.tzinfo is None:
      return value.replace(tzinfo=timezone.utc)
    return value


class ProductView(Product):
  """Product as held by the store: photo is always a renderable URL."""
  photo: str


class PreviewResult(BaseModel):
  model_config = ConfigDict(extra="ignore")

  image: Optional[str] = None
