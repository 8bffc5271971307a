from fastapi import APIRouter, Depends, Query, status
from ..services import UserService, FriendRequestService, FriendshipService
from ..schemas import (
    StatusFilter,
    UserEnvelope,
    UserListEnvelope,
    FriendRequestEnvelope,
    FriendRequestWithSenderList,
    FriendRequestWithRecipientList
)
from ..models import User
from ..security import get_current_user
from ..dependencies import get_user_service, get_friend_request_service, get_friendship_service
from ..utils import parse_object_id, map_user_to_public_dict, map_friend_request_to_public_dict

router = APIRouter(tags=["User"])

MAX_PAGE = 10_000_000
MAX_PAGE_SIZE = 100
MAX_QUERY_LENGTH = 100


# Recommended users for the current user
@router.get("/recommended", response_model=UserListEnvelope, response_model_exclude_none=True)
async def recommended(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    page_size: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    query: str = Query("", max_length=MAX_QUERY_LENGTH),
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """
    Users who are neither the current user nor already friends.
    """
    users, metadata = await user_service.recommended(current_user, page, page_size, query)
    return {
        "users": [map_user_to_public_dict(user) for user in users],
        "metadata": metadata
    }

# Friends of the current user
@router.get("/friends", response_model=UserListEnvelope, response_model_exclude_none=True)
async def my_friends(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    page_size: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    query: str = Query("", max_length=MAX_QUERY_LENGTH),
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    users, metadata = await user_service.my_friends(current_user, page, page_size, query)
    return {
        "users": [map_user_to_public_dict(user) for user in users],
        "metadata": metadata
    }

# Friend requests received by the current user
@router.get("/friends-request/from", response_model=FriendRequestWithSenderList, response_model_exclude_none=True)
async def get_all_from_friend_request(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    page_size: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    status: StatusFilter = Query("All"),
    search_sender: str = Query("", max_length=MAX_QUERY_LENGTH),
    current_user: User = Depends(get_current_user),
    friend_request_service: FriendRequestService = Depends(get_friend_request_service)
):
    friend_requests, metadata = await friend_request_service.get_all_from_friend_request(
        current_user_id=current_user.id,
        status=status,
        page=page,
        page_size=page_size,
        search_sender=search_sender
    )
    return {"friend_requests": friend_requests, "metadata": metadata}

# Friend requests sent by the current user
@router.get("/friends-request/send", response_model=FriendRequestWithRecipientList, response_model_exclude_none=True)
async def get_all_send_friend_request(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    page_size: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    status: StatusFilter = Query("All"),
    search_recipient: str = Query("", max_length=MAX_QUERY_LENGTH),
    current_user: User = Depends(get_current_user),
    friend_request_service: FriendRequestService = Depends(get_friend_request_service)
):
    friend_requests, metadata = await friend_request_service.get_all_send_friend_request(
        current_user_id=current_user.id,
        status=status,
        page=page,
        page_size=page_size,
        search_recipient=search_recipient
    )
    return {"friend_requests": friend_requests, "metadata": metadata}

# Send a friend request
@router.post("/friends-request/send/{recipient_id}", status_code=status.HTTP_201_CREATED, response_model=FriendRequestEnvelope)
async def request_friend(
    recipient_id: str,
    current_user: User = Depends(get_current_user),
    friendship_service: FriendshipService = Depends(get_friendship_service)
):
    recipient_oid = parse_object_id(recipient_id, "recipient id")
    friend_request = await friendship_service.request_friend(current_user, recipient_oid)
    return {"friend_request": map_friend_request_to_public_dict(friend_request)}

# Accept a friend request
@router.post("/friends-request/accept/{friend_request_id}", response_model=FriendRequestEnvelope)
async def accept_friend(
    friend_request_id: str,
    current_user: User = Depends(get_current_user),
    friendship_service: FriendshipService = Depends(get_friendship_service)
):
    """
    Accept a friend request addressed to the current user.
    """
    request_oid = parse_object_id(friend_request_id, "friend request id")
    friend_request = await friendship_service.accept_friend(current_user, request_oid)
    return {"friend_request": map_friend_request_to_public_dict(friend_request)}

# Public profile of a user
@router.get("/{user_id}", response_model=UserEnvelope)
async def get_user_by_id(
    user_id: str,
    current_user: User = Depends(get_current_user),
    friendship_service: FriendshipService = Depends(get_friendship_service)
):
    user_oid = parse_object_id(user_id, "user id")
    user = await friendship_service.get_user(user_oid)
    return {"user": map_user_to_public_dict(user)}
