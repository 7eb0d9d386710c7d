from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field

DEFAULT_PROFILE_PHOTO = "https://picsum.photos/100/100"

class PlayerModel(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(min_length=1, max_length=100)
    nickname: Optional[str] = None
    rating: int = Field(default=0, ge=0) # Strength score, never changed by bracket logic
    profile_photo: str = DEFAULT_PROFILE_PHOTO

    class Config:
        from_attributes = True
