from beanie import Document, PydanticObjectId
from pydantic import Field, model_validator
from pymongo import IndexModel, ASCENDING, DESCENDING
from typing import Literal
from datetime import datetime

FriendRequestStatus = Literal['Pending', 'Accepted']

STATUS_PENDING = 'Pending'
STATUS_ACCEPTED = 'Accepted'


def make_pair_key(user_a, user_b) -> str:
    """Order-independent key for the pair of users a request connects."""
    first, second = sorted([str(user_a), str(user_b)])
    return f"{first}:{second}"


class FriendRequest(Document):
    """
    A friend request between two users.
    """
    senderId: PydanticObjectId = Field(..., description="ID of the user sending the request.")
    recipientId: PydanticObjectId = Field(..., description="ID of the user receiving the request.")
    status: FriendRequestStatus = Field(default=STATUS_PENDING, description="Status of the request.")
    pairKey: str = Field(default="", description="Unordered sender/recipient key, unique per pair.")
    createdAt: datetime = Field(default_factory=datetime.utcnow, description="When the request was created.")
    updatedAt: datetime = Field(default_factory=datetime.utcnow, description="When the request was last updated.")

    @model_validator(mode="after")
    def fill_pair_key(self):
        if not self.pairKey:
            self.pairKey = make_pair_key(self.senderId, self.recipientId)
        return self

    class Settings:
        name = "friend_requests"
        indexes = [
            IndexModel([("pairKey", ASCENDING)], unique=True, name="unique_pair"),
            [("recipientId", ASCENDING), ("createdAt", DESCENDING)],
            [("senderId", ASCENDING), ("createdAt", DESCENDING)],
            "status",
        ]
