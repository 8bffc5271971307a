import logging
from typing import Optional
from beanie import PydanticObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError
from ..configs import Settings
from ..models import User, FriendRequest, STATUS_PENDING, STATUS_ACCEPTED
from ..errors import (
    NotFoundError,
    InvalidInputError,
    ConflictError,
    ForbiddenError,
    InternalError,
    FriendshipInconsistencyError
)
from .user_service import UserService
from .friend_request_service import FriendRequestService

logger = logging.getLogger(__name__)


class FriendshipService:
    """
    Friend request workflow on top of the user and friend request stores.

    Accepting a request writes three documents: the request status and one
    friend edge per user. With `db.use_transactions` the three writes share a
    MongoDB transaction. Without it the edge writes are retried and, if they
    still fail, the request is reported as inconsistent so that
    `repair_friendship` (or another accept) can finish the job.
    """

    def __init__(
        self,
        users: UserService,
        friend_requests: FriendRequestService,
        settings: Settings,
        client: Optional[AsyncIOMotorClient] = None
    ):
        self.users = users
        self.friend_requests = friend_requests
        self.settings = settings
        self.client = client

    async def get_user(self, user_id: PydanticObjectId) -> User:
        return await self.users.get_by_id(user_id)

    async def request_friend(self, actor: User, recipient_id: PydanticObjectId) -> FriendRequest:
        """
        Send a friend request from `actor` to `recipient_id`.
        """
        # An unknown recipient is reported like a malformed id
        try:
            recipient = await self.users.get_by_id(recipient_id)
        except NotFoundError:
            raise InvalidInputError("invalid recipient id value")

        if recipient.id == actor.id:
            raise InvalidInputError("cannot send friend request to yourself")

        if recipient.id in actor.friendIds:
            raise InvalidInputError(f"already friend with user {recipient.id}")

        if await self.friend_requests.check_existing(actor.id, recipient.id):
            raise ConflictError("friend request already exist between you and this user")

        friend_request = FriendRequest(
            senderId=actor.id,
            recipientId=recipient.id,
            status=STATUS_PENDING
        )
        friend_request = await self.friend_requests.create(friend_request)

        logger.info(f"User {actor.id} sent friend request {friend_request.id} to {recipient.id}")
        return friend_request

    async def accept_friend(self, actor: User, request_id: PydanticObjectId) -> FriendRequest:
        """
        Accept a friend request. Only its recipient may do so.
        Accepting an already accepted request re-applies the friend edges.
        """
        if self.settings.db.use_transactions and self.client is not None:
            try:
                async with await self.client.start_session() as session:
                    return await session.with_transaction(
                        lambda s: self._accept(actor, request_id, session=s)
                    )
            except PyMongoError as e:
                logger.exception(f"Transaction accepting friend request {request_id} failed")
                raise InternalError() from e

        return await self._accept(actor, request_id)

    async def repair_friendship(self, request_id: PydanticObjectId) -> bool:
        """
        Make sure an accepted request has both friend edges.
        Returns False for a request that is not accepted yet.
        """
        friend_request = await self.friend_requests.get_by_id(request_id)
        if friend_request.status != STATUS_ACCEPTED:
            return False

        await self._add_edges(friend_request)
        logger.info(f"Friend edges for request {friend_request.id} are in place")
        return True

    async def _accept(self, actor: User, request_id: PydanticObjectId, session=None) -> FriendRequest:
        friend_request = await self.friend_requests.get_by_id(request_id, session=session)

        # The sender can never accept their own request
        if friend_request.recipientId != actor.id:
            raise ForbiddenError()

        if friend_request.status != STATUS_ACCEPTED:
            friend_request.status = STATUS_ACCEPTED
            friend_request = await self.friend_requests.update(friend_request, session=session)

        if session is not None:
            # Any failure aborts the whole transaction
            await self._add_edges(friend_request, session=session)
        else:
            try:
                await self._add_edges(friend_request)
            except (InternalError, NotFoundError) as e:
                logger.error(
                    f"friendship_inconsistent: request {friend_request.id} is accepted "
                    f"but friend edges are missing",
                    extra={"friend_request_id": str(friend_request.id)}
                )
                raise FriendshipInconsistencyError(friend_request.id) from e

        logger.info(f"User {actor.id} accepted friend request {friend_request.id}")
        return friend_request

    async def _add_edges(self, friend_request: FriendRequest, session=None) -> None:
        # One edge per direction
        edges = [
            (friend_request.recipientId, friend_request.senderId),
            (friend_request.senderId, friend_request.recipientId),
        ]
        for owner_id, friend_id in edges:
            if session is not None:
                await self.users.add_friends(owner_id, friend_id, session=session)
            else:
                await self._add_friends_with_retries(owner_id, friend_id)

    async def _add_friends_with_retries(self, owner_id: PydanticObjectId, friend_id: PydanticObjectId) -> None:
        attempts = self.settings.accept_edge_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                await self.users.add_friends(owner_id, friend_id)
                return
            except InternalError:
                if attempt == attempts:
                    raise
                logger.warning(f"Adding friend {friend_id} to {owner_id} failed, retry {attempt}/{attempts - 1}")
