import os

os.environ.setdefault("DATABASE_URI", "sqlite://:memory:")
os.environ.setdefault("DUPLICATE_EMAIL_POLICY", "reject")

import pytest
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from helpers.tortoise_config import MODEL_MODULES


@pytest.fixture
async def db():
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": MODEL_MODULES},
        use_tz=True,
        timezone="UTC",
    )
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest.fixture
async def client(db):
    from main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
