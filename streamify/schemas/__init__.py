from .common_schema import Metadata, calculate_metadata
from .user_schema import UserPublic, UserEnvelope, UserListEnvelope
from .friend_request_schema import (
    StatusFilter,
    FriendRequestPublic,
    FriendRequestWithSender,
    FriendRequestWithRecipient,
    FriendRequestEnvelope,
    FriendRequestWithSenderList,
    FriendRequestWithRecipientList
)
