from dotenv import load_dotenv
load_dotenv()
from tortoise import Tortoise
from contextlib import asynccontextmanager
import logging
import os


logger = logging.getLogger(__name__)

db_url = os.getenv("DATABASE_URI")
if not db_url:
    raise ValueError("DATABASE_URI environment variable is not set.")


MODEL_MODULES = [
    "models.user",
    "models.tag",
    "models.busy_slot",
]


def build_tortoise_config(url: str) -> dict:
    return {
        'connections': {
            'default': url
        },
        "apps": {
            "models": {
                "models": [*MODEL_MODULES, "aerich.models"],
                "default_connection": "default",
            }
        },
        "use_tz": True,
        "timezone": "UTC",
    }


TORTOISE_CONFIG = build_tortoise_config(db_url)


@asynccontextmanager
async def lifespan(_):
    await Tortoise.init(config=TORTOISE_CONFIG)
    logger.info("Database connections initialised")
    try:
        yield
    finally:
        await Tortoise.close_connections()
        logger.info("Database connections closed")
