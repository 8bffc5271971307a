from fastapi import Request
from .configs import Settings
from .services import UserService, FriendRequestService, FriendshipService

# Services are built once at startup and kept on app.state

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service

def get_friend_request_service(request: Request) -> FriendRequestService:
    return request.app.state.friend_request_service

def get_friendship_service(request: Request) -> FriendshipService:
    return request.app.state.friendship_service
