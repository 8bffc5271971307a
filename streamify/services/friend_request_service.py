import logging
from datetime import datetime
from typing import List, Optional, Tuple
from beanie import PydanticObjectId
from pymongo.errors import DuplicateKeyError
from ..models import User, FriendRequest, USERS_COLLECTION
from ..schemas import Metadata, calculate_metadata
from ..errors import NotFoundError, ConflictError, store_operation
from ..utils import page_offset, text_search_clause, map_user_to_public_dict, map_friend_request_to_public_dict

logger = logging.getLogger(__name__)

# Status filter value meaning "any status"
STATUS_ALL = "All"


def build_listing_pipeline(
    owner_field: str,
    owner_id: PydanticObjectId,
    other_field: str,
    alias: str,
    status: str = STATUS_ALL,
    search_text: Optional[str] = None
) -> list:
    """
    Aggregation stages selecting the requests where `owner_field` is the
    current user, joined with the profile of the other party under `alias`.
    """
    match = {owner_field: owner_id}
    if status and status != STATUS_ALL:
        match["status"] = status

    pipeline = [
        {"$match": match},
        {"$lookup": {
            "from": USERS_COLLECTION,
            "localField": other_field,
            "foreignField": "_id",
            "as": alias,
        }},
        {"$unwind": f"${alias}"},
    ]

    search = text_search_clause(["fullName"], search_text, prefix=f"{alias}.")
    if search:
        pipeline.append({"$match": search})

    return pipeline


class FriendRequestService:
    """
    Stores friend requests. Duplicate detection across a pair of users is
    backed by the unique `pairKey` index.
    """

    @store_operation("check existing friend request")
    async def check_existing(self, user_a: PydanticObjectId, user_b: PydanticObjectId, session=None) -> bool:
        """True if any request exists between the two users, in either direction and any status."""
        existing_request = await FriendRequest.find_one(
            {
                "$or": [
                    {"senderId": user_a, "recipientId": user_b},
                    {"senderId": user_b, "recipientId": user_a}
                ]
            },
            session=session
        )
        return existing_request is not None

    @store_operation("create friend request")
    async def create(self, request: FriendRequest, session=None) -> FriendRequest:
        now = datetime.utcnow()
        request.createdAt = now
        request.updatedAt = now

        try:
            await request.insert(session=session)
        except DuplicateKeyError as e:
            # Lost the race against a concurrent request for the same pair
            raise ConflictError("friend request already exist between you and this user") from e

        return request

    @store_operation("get friend request by id")
    async def get_by_id(self, request_id: PydanticObjectId, session=None) -> FriendRequest:
        request = await FriendRequest.get(request_id, session=session)
        if request is None:
            raise NotFoundError()
        return request

    @store_operation("update friend request")
    async def update(self, request: FriendRequest, session=None) -> FriendRequest:
        request.updatedAt = datetime.utcnow()

        result = await FriendRequest.get_motor_collection().update_one(
            {"_id": request.id},
            {"$set": {"status": request.status, "updatedAt": request.updatedAt}},
            session=session
        )
        if result.matched_count == 0:
            raise NotFoundError()

        return request

    async def get_all_from_friend_request(
        self,
        current_user_id: PydanticObjectId,
        status: str = STATUS_ALL,
        page: int = 1,
        page_size: int = 10,
        search_sender: Optional[str] = None
    ) -> Tuple[List[dict], Metadata]:
        """
        Requests received by the current user, each with the sender's profile.
        """
        pipeline = build_listing_pipeline(
            "recipientId", current_user_id, "senderId", "sender", status, search_sender
        )
        return await self._paginate(pipeline, "sender", page, page_size)

    async def get_all_send_friend_request(
        self,
        current_user_id: PydanticObjectId,
        status: str = STATUS_ALL,
        page: int = 1,
        page_size: int = 10,
        search_recipient: Optional[str] = None
    ) -> Tuple[List[dict], Metadata]:
        """
        Requests sent by the current user, each with the recipient's profile.
        """
        pipeline = build_listing_pipeline(
            "senderId", current_user_id, "recipientId", "recipient", status, search_recipient
        )
        return await self._paginate(pipeline, "recipient", page, page_size)

    @store_operation("list friend requests")
    async def _paginate(self, pipeline: list, alias: str, page: int, page_size: int) -> Tuple[List[dict], Metadata]:
        counted = await FriendRequest.aggregate(pipeline + [{"$count": "total"}]).to_list()
        total = counted[0]["total"] if counted else 0

        docs = await FriendRequest.aggregate(pipeline + [
            {"$sort": {"createdAt": -1, "_id": -1}},
            {"$skip": page_offset(page, page_size)},
            {"$limit": page_size},
        ]).to_list()

        result = []
        for doc in docs:
            profile = doc.pop(alias)
            item = map_friend_request_to_public_dict(FriendRequest.model_validate(doc))
            item[alias] = map_user_to_public_dict(User.model_validate(profile))
            result.append(item)

        return result, calculate_metadata(total, page, page_size)
