from pydantic import BaseModel
from datetime import datetime
from typing import List, Literal, Optional

from .common_schema import Metadata
from .user_schema import UserPublic

# "All" disables the status filter
StatusFilter = Literal['All', 'Pending', 'Accepted']


class FriendRequestPublic(BaseModel):
    id: str
    sender_id: str
    recipient_id: str
    status: str
    created_at: datetime
    updated_at: datetime


class FriendRequestWithSender(FriendRequestPublic):
    sender: Optional[UserPublic] = None


class FriendRequestWithRecipient(FriendRequestPublic):
    recipient: Optional[UserPublic] = None


class FriendRequestEnvelope(BaseModel):
    friend_request: FriendRequestPublic


class FriendRequestWithSenderList(BaseModel):
    friend_requests: List[FriendRequestWithSender]
    metadata: Metadata


class FriendRequestWithRecipientList(BaseModel):
    friend_requests: List[FriendRequestWithRecipient]
    metadata: Metadata
