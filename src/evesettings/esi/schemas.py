"""
Schemas for ESI responses.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class CharacterInfo(BaseModel):
    """Public character information from GET /characters/{id}/."""
    name: str
    corporation_id: Optional[int] = None
    alliance_id: Optional[int] = None
    birthday: Optional[str] = None
    description: Optional[str] = None
    gender: Optional[str] = None
    race_id: Optional[int] = None
    bloodline_id: Optional[int] = None
    security_status: Optional[float] = None


class UniverseIDMatch(BaseModel):
    id: int
    name: str


class UniverseIDsResult(BaseModel):
    """Response of POST /universe/ids/; only the characters category is used."""
    characters: List[UniverseIDMatch] = Field(default_factory=list)
