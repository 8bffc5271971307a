import functools
import logging
from fastapi import status
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class StreamifyError(Exception):
    """Base class for errors the HTTP layer turns into a JSON error body."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "the server encountered a problem and could not process your request"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(StreamifyError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "the requested resource could not be found"


class InvalidInputError(StreamifyError, ValueError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "bad request"


class ConflictError(InvalidInputError):
    """A duplicate of an existing record. Reported to clients as a bad request."""
    default_message = "record already exists"


class ForbiddenError(StreamifyError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "you are not permitted to perform this action"


class InternalError(StreamifyError):
    pass


class FriendshipInconsistencyError(InternalError):
    """
    A friend request was marked Accepted but the friend edges could not be
    written. Retrying the accept, or `FriendshipService.repair_friendship`,
    restores the edges.
    """

    def __init__(self, friend_request_id, message: str = None):
        self.friend_request_id = str(friend_request_id)
        super().__init__(message)


def store_operation(description: str):
    """
    Wrap a store coroutine so driver failures surface as `InternalError`.
    Domain errors raised inside pass through untouched.

    Inside a transaction (a `session` keyword is given) driver errors are
    re-raised as is: `with_transaction` needs their error labels to decide
    whether to retry, and the caller owning the session wraps them.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except PyMongoError as e:
                if kwargs.get("session") is not None:
                    raise
                logger.exception(f"Database error while trying to {description}")
                raise InternalError() from e
        return wrapper
    return decorator
