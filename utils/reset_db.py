import argparse
import asyncio
import logging
import shutil

from core.config import settings
from core.database import engine
from models.base import Base, load_models

log = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


async def async_reset_database():
    load_models()

    log.info("Dropping all tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all, checkfirst=True)

    log.info("Recreating all tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)

    await engine.dispose()
    log.info("Database schema has been reset.")


def clear_uploads():
    shutil.rmtree(settings.UPLOADS_DIR, ignore_errors=True)
    log.info(f"Removed uploaded files under {settings.UPLOADS_DIR}")


def reset_database(with_uploads: bool = False):
    asyncio.run(async_reset_database())
    if with_uploads:
        clear_uploads()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Drop and recreate every BoxFit table.")
    parser.add_argument("--uploads", action="store_true", help="also delete the local uploads directory")
    args = parser.parse_args()
    reset_database(with_uploads=args.uploads)
