import pytest
from unittest.mock import AsyncMock
from beanie import PydanticObjectId
from pymongo.errors import OperationFailure, PyMongoError

from streamify.errors import InternalError, NotFoundError
from streamify.models import User
from streamify.services import UserService
from streamify.services.user_service import build_recommended_filter


@pytest.fixture
def user_service():
    return UserService()


class TestUserService:

    @pytest.mark.asyncio
    async def test_get_by_id(self, user_service, make_user):
        user = await make_user("Ada Lovelace")

        found = await user_service.get_by_id(user.id)

        assert found.id == user.id
        assert found.fullName == "Ada Lovelace"

    @pytest.mark.asyncio
    async def test_get_by_id_not_found(self, user_service, db):
        with pytest.raises(NotFoundError):
            await user_service.get_by_id(PydanticObjectId())

    @pytest.mark.asyncio
    async def test_add_friends_is_idempotent(self, user_service, make_user):
        owner = await make_user()
        friend = await make_user()

        await user_service.add_friends(owner.id, friend.id)
        after_first = (await user_service.get_by_id(owner.id)).friendIds
        await user_service.add_friends(owner.id, friend.id)
        after_second = (await user_service.get_by_id(owner.id)).friendIds

        assert after_first == [friend.id]
        assert after_second == after_first

    @pytest.mark.asyncio
    async def test_add_friends_writes_one_direction(self, user_service, make_user):
        owner = await make_user()
        friend = await make_user()

        await user_service.add_friends(owner.id, friend.id)

        assert (await user_service.get_by_id(friend.id)).friendIds == []

    @pytest.mark.asyncio
    async def test_add_friends_unknown_owner(self, user_service, make_user):
        friend = await make_user()

        with pytest.raises(NotFoundError):
            await user_service.add_friends(PydanticObjectId(), friend.id)

    @pytest.mark.asyncio
    async def test_add_friends_driver_error_is_internal_error(self, user_service, monkeypatch):
        collection = AsyncMock()
        collection.update_one.side_effect = OperationFailure("connection reset")
        monkeypatch.setattr(User, "get_motor_collection", lambda: collection)

        with pytest.raises(InternalError):
            await user_service.add_friends(PydanticObjectId(), PydanticObjectId())

    @pytest.mark.asyncio
    async def test_add_friends_in_transaction_keeps_driver_error(self, user_service, monkeypatch):
        collection = AsyncMock()
        collection.update_one.side_effect = OperationFailure(
            "WriteConflict", code=112, details={"errorLabels": ["TransientTransactionError"]}
        )
        monkeypatch.setattr(User, "get_motor_collection", lambda: collection)

        with pytest.raises(PyMongoError) as exc_info:
            await user_service.add_friends(PydanticObjectId(), PydanticObjectId(), session=object())

        assert exc_info.value.has_error_label("TransientTransactionError")

    @pytest.mark.asyncio
    async def test_recommended_excludes_self_friends_and_not_onboarded(self, user_service, make_user):
        me = await make_user("Me")
        friend = await make_user("Friend")
        stranger = await make_user("Stranger")
        await make_user("Newcomer", isOnboarded=False)
        await user_service.add_friends(me.id, friend.id)
        me = await user_service.get_by_id(me.id)

        users, metadata = await user_service.recommended(me, page=1, page_size=10)

        assert [u.id for u in users] == [stranger.id]
        assert metadata.total_records == 1

    @pytest.mark.asyncio
    async def test_recommended_text_query_is_case_insensitive(self, user_service, make_user):
        me = await make_user("Me")
        await make_user("Kenji", nativeLanguage="japanese", learningLanguage="english")
        maria = await make_user("Maria", nativeLanguage="spanish", location="Madrid")

        users, _ = await user_service.recommended(me, query="SPAN")
        assert [u.id for u in users] == [maria.id]

        users, _ = await user_service.recommended(me, query="madrid")
        assert [u.id for u in users] == [maria.id]

    @pytest.mark.asyncio
    async def test_recommended_pages_are_disjoint(self, user_service, make_user):
        me = await make_user("Me")
        others = [await make_user() for _ in range(15)]

        first, first_meta = await user_service.recommended(me, page=1, page_size=10)
        second, second_meta = await user_service.recommended(me, page=2, page_size=10)

        first_ids = [u.id for u in first]
        second_ids = [u.id for u in second]
        assert len(first_ids) == 10
        assert len(second_ids) == 5
        assert set(first_ids).isdisjoint(second_ids)
        assert set(first_ids) | set(second_ids) == {u.id for u in others}
        assert first_meta.last_page == second_meta.last_page == 2

    @pytest.mark.asyncio
    async def test_recommended_empty_metadata(self, user_service, make_user):
        me = await make_user("Lonely")

        users, metadata = await user_service.recommended(me)

        assert users == []
        assert metadata.total_records is None

    @pytest.mark.asyncio
    async def test_my_friends(self, user_service, make_user):
        me = await make_user("Me")
        yuki = await make_user("Yuki")
        taro = await make_user("Taro")
        await make_user("Stranger")
        await user_service.add_friends(me.id, yuki.id)
        await user_service.add_friends(me.id, taro.id)
        me = await user_service.get_by_id(me.id)

        users, metadata = await user_service.my_friends(me)
        assert {u.id for u in users} == {yuki.id, taro.id}
        assert metadata.total_records == 2

        users, _ = await user_service.my_friends(me, query="yuk")
        assert [u.id for u in users] == [yuki.id]

    @pytest.mark.asyncio
    async def test_my_friends_without_friends(self, user_service, make_user):
        me = await make_user("Me")
        await make_user("Someone")

        users, _ = await user_service.my_friends(me)

        assert users == []


@pytest.mark.asyncio
async def test_recommended_filter_shape(make_user):
    me = await make_user("Me")

    criteria = build_recommended_filter(me, "")

    assert criteria == {"_id": {"$nin": [me.id]}, "isOnboarded": True}
