import logging
from datetime import datetime
from typing import List, Optional, Tuple
from beanie import PydanticObjectId, SortDirection
from ..models import User
from ..schemas import Metadata, calculate_metadata
from ..errors import NotFoundError, store_operation
from ..utils import page_offset, text_search_clause

logger = logging.getLogger(__name__)

# Profile fields matched by the free-text `query` parameter
SEARCH_FIELDS = ("fullName", "nativeLanguage", "learningLanguage", "location")


def build_recommended_filter(current_user: User, query: Optional[str] = None) -> dict:
    """Everyone except the current user and their friends, onboarded users only."""
    excluded_ids = [current_user.id, *current_user.friendIds]
    criteria = {
        "_id": {"$nin": excluded_ids},
        "isOnboarded": True,
    }
    criteria.update(text_search_clause(SEARCH_FIELDS, query))
    return criteria


def build_friends_filter(current_user: User, query: Optional[str] = None) -> dict:
    criteria = {"_id": {"$in": list(current_user.friendIds)}}
    criteria.update(text_search_clause(SEARCH_FIELDS, query))
    return criteria


class UserService:
    """
    Reads user documents and maintains the `friendIds` edge list.
    """

    @store_operation("get user by id")
    async def get_by_id(self, user_id: PydanticObjectId, session=None) -> User:
        user = await User.get(user_id, session=session)
        if user is None:
            raise NotFoundError()
        return user

    async def recommended(
        self,
        current_user: User,
        page: int = 1,
        page_size: int = 10,
        query: Optional[str] = None
    ) -> Tuple[List[User], Metadata]:
        """
        Users the current user may want to befriend.
        """
        criteria = build_recommended_filter(current_user, query)
        return await self._paginate(criteria, page, page_size)

    async def my_friends(
        self,
        current_user: User,
        page: int = 1,
        page_size: int = 10,
        query: Optional[str] = None
    ) -> Tuple[List[User], Metadata]:
        """
        Users whose id is in the current user's friend list.
        """
        criteria = build_friends_filter(current_user, query)
        return await self._paginate(criteria, page, page_size)

    @store_operation("add friend")
    async def add_friends(self, owner_id: PydanticObjectId, new_friend_id: PydanticObjectId, session=None) -> None:
        """
        Add `new_friend_id` to the owner's friend list. Calling it again is a no-op.
        Only one direction of the edge is written.
        """
        result = await User.get_motor_collection().update_one(
            {"_id": owner_id},
            {
                "$addToSet": {"friendIds": new_friend_id},
                "$set": {"updatedAt": datetime.utcnow()},
            },
            session=session
        )
        if result.matched_count == 0:
            raise NotFoundError(f"user {owner_id} could not be found")

    @store_operation("list users")
    async def _paginate(self, criteria: dict, page: int, page_size: int) -> Tuple[List[User], Metadata]:
        total = await User.find(criteria).count()

        # Sorting on _id keeps pages stable between requests
        users = await User.find(
            criteria,
            skip=page_offset(page, page_size),
            limit=page_size
        ).sort([("_id", SortDirection.ASCENDING)]).to_list()

        return users, calculate_metadata(total, page, page_size)
