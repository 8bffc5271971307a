import pytest
import pytest_asyncio
from beanie import init_beanie
from mongomock_motor import AsyncMongoMockClient

from streamify.configs import Settings, DatabaseSettings, JWTSettings
from streamify.models import User
from streamify.models.database import DOCUMENT_MODELS


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        db=DatabaseSettings(_env_file=None, mongo_uri="mongodb://localhost:27017", database_name="streamify-test"),
        jwt=JWTSettings(_env_file=None, auth_secret="test-secret"),
        accept_edge_retries=2,
    )


@pytest_asyncio.fixture
async def db():
    """In-memory MongoDB with the Beanie models initialized."""
    client = AsyncMongoMockClient()
    await init_beanie(database=client.get_database("streamify-test"), document_models=DOCUMENT_MODELS)
    yield client


@pytest_asyncio.fixture
async def make_user(db):
    counter = {"n": 0}

    async def _make_user(full_name=None, **fields):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=f"user{n}@streamify.app",
            fullName=full_name or f"User {n}",
            nativeLanguage=fields.pop("nativeLanguage", "english"),
            learningLanguage=fields.pop("learningLanguage", "japanese"),
            isOnboarded=fields.pop("isOnboarded", True),
            **fields
        )
        await user.insert()
        return user

    return _make_user
