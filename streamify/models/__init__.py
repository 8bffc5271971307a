from .user import User, USERS_COLLECTION
from .friend_request import FriendRequest, FriendRequestStatus, STATUS_PENDING, STATUS_ACCEPTED, make_pair_key
from .database import init_db, close_db
