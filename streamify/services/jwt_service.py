from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from pydantic import BaseModel
from ..configs import JWTSettings

# Lifetime of an access token when the caller does not choose one
ACCESS_TOKEN_EXPIRE_MINUTES = 120

class TokenData(BaseModel):
    """Payload decoded from an access token."""
    user_id: Optional[str] = None

def create_access_token(data: dict, settings: JWTSettings, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT access token. Tokens are issued by the account
    service; this helper mints them for tests and operator scripts.

    Args:
        data (dict): Claims to encode; `sub` holds the user id.
        settings (JWTSettings): Secret and algorithm used to sign the token.
        expires_delta (Optional[timedelta]): Token lifetime.

    Returns:
        str: The encoded JWT.
    """
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})

    return jwt.encode(to_encode, settings.auth_secret, algorithm=settings.algorithm)

def decode_access_token(token: str, settings: JWTSettings) -> Optional[TokenData]:
    """
    Decode an access token.

    Returns:
        Optional[TokenData]: The payload, or None if the token is invalid or expired.
    """
    try:
        payload = jwt.decode(token, settings.auth_secret, algorithms=[settings.algorithm])
        user_id: str = payload.get("sub")
        if user_id is None:
            return None
        token_data = TokenData(user_id=user_id)
    except JWTError:
        return None
    return token_data
