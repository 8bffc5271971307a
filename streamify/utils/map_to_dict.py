from ..schemas import UserPublic, FriendRequestPublic
from ..models import User, FriendRequest

# Helpers turning documents into the snake_case JSON shape of the API
def map_user_to_public_dict(user: User) -> dict:
    """Convert a User document into a JSON-serializable dictionary."""
    public_user = UserPublic(
        id=str(user.id),
        email=user.email,
        full_name=user.fullName,
        bio=user.bio,
        profile_pic=user.profilePic,
        native_lng=user.nativeLanguage,
        learning_lng=user.learningLanguage,
        location=user.location,
        is_onboarded=user.isOnboarded,
        friend_ids=[str(fid) for fid in user.friendIds],
        created_at=user.createdAt,
        updated_at=user.updatedAt
    )
    return public_user.model_dump()

def map_friend_request_to_public_dict(request: FriendRequest) -> dict:
    """Convert a FriendRequest document into a JSON-serializable dictionary."""
    public_request = FriendRequestPublic(
        id=str(request.id),
        sender_id=str(request.senderId),
        recipient_id=str(request.recipientId),
        status=request.status,
        created_at=request.createdAt,
        updated_at=request.updatedAt
    )
    return public_request.model_dump()
