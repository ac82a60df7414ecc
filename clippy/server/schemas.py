from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class PublishedEntry(BaseModel):
  id: str
  created_at: str
  text: str
  options: List[str] = Field(default_factory=list)
  transparent: bool = False
  render_url: str = Field(..., description="Relative URL of the rendered PNG (/r?...).")


class PublishedList(BaseModel):
  items: List[PublishedEntry]


class Health(BaseModel):
  status: str = "ok"
  cache_entries: int = 0
  published: int = 0
