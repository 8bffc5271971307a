import logging
from bson import ObjectId
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from .configs import Settings
from .dependencies import get_settings, get_user_service
from .errors import NotFoundError
from .services import UserService, decode_access_token
from .models import User

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

credentials_exception = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)

async def get_current_user(
    token: str = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings),
    user_service: UserService = Depends(get_user_service)
) -> User:
    token_data = decode_access_token(token, settings.jwt)
    if not token_data or not token_data.user_id:
        logger.error("Token decode failed or missing subject")
        raise credentials_exception

    # The subject must be a valid ObjectId
    if not ObjectId.is_valid(token_data.user_id):
        logger.error(f"Invalid ObjectId format: {token_data.user_id}")
        raise credentials_exception

    try:
        return await user_service.get_by_id(ObjectId(token_data.user_id))
    except NotFoundError:
        logger.error(f"User not found with ID: {token_data.user_id}")
        raise credentials_exception
