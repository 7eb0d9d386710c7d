from pydantic import BaseModel, Field
from typing import Optional

from billiard_pro.models.player_model import DEFAULT_PROFILE_PHOTO

class PlayerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Display name of the player")
    nickname: Optional[str] = Field(None, description="Optional nickname")
    rating: int = Field(0, ge=0, description="Numeric strength score")
    profile_photo: str = Field(DEFAULT_PROFILE_PHOTO, description="URL of the player's photo")

class PlayerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    nickname: Optional[str] = None
    rating: Optional[int] = Field(None, ge=0)
    profile_photo: Optional[str] = None
