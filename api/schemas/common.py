"""Common shared schemas used across multiple domains."""

from typing import Optional

from pydantic import BaseModel, Field


class Position(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class BuoyModel(BaseModel):
    name: str
    position: Position
    buoy_type: Optional[str] = None
    description: Optional[str] = None
