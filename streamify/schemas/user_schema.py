from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional

from .common_schema import Metadata


class UserPublic(BaseModel):
    id: str
    email: str
    full_name: str
    bio: str | None = ""
    profile_pic: str | None = ""
    native_lng: str | None = ""
    learning_lng: str | None = ""
    location: str | None = ""
    is_onboarded: bool = False
    friend_ids: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserEnvelope(BaseModel):
    user: UserPublic


class UserListEnvelope(BaseModel):
    users: List[UserPublic]
    metadata: Metadata
