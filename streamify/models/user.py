from beanie import Document, PydanticObjectId
from pydantic import Field, EmailStr
from typing import Optional, List
from datetime import datetime

USERS_COLLECTION = "users"


class User(Document):
    """
    A user in the 'users' collection.
    """
    email: EmailStr = Field(..., description="Unique email address of the user.")
    fullName: str = Field(..., description="Display name of the user.")
    bio: Optional[str] = Field(default="", description="Short biography.")
    profilePic: Optional[str] = Field(default="", description="URL of the profile picture.")
    nativeLanguage: Optional[str] = Field(default="", description="Language the user speaks natively.")
    learningLanguage: Optional[str] = Field(default="", description="Language the user is learning.")
    location: Optional[str] = Field(default="", description="Free-text location.")
    isOnboarded: bool = Field(default=False, description="Whether the user finished onboarding.")
    friendIds: List[PydanticObjectId] = Field(default_factory=list, description="IDs of the user's friends (set semantics).")
    createdAt: datetime = Field(default_factory=datetime.utcnow, description="When the user was created.")
    updatedAt: datetime = Field(default_factory=datetime.utcnow, description="When the user was last updated.")

    class Settings:
        name = USERS_COLLECTION
        indexes = [
            "email",
            "friendIds",
        ]
