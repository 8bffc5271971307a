from .jwt_service import decode_access_token
from .user_service import UserService
from .friend_request_service import FriendRequestService, STATUS_ALL
from .friendship_service import FriendshipService

__all__ = [
    "decode_access_token",
    "UserService",
    "FriendRequestService",
    "STATUS_ALL",
    "FriendshipService"
]
