"""Run database migrations.

Usage:
    python -m bdaybot.scripts.db_migrate          # Apply all pending migrations
    python -m bdaybot.scripts.db_migrate --dry    # List pending migrations only
"""

import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

from bdaybot.shared.database import DatabaseManager, PoolConfig
from bdaybot.shared.migrations.runner import MigrationRunner

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


async def main(dry: bool) -> int:
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        print("ERROR: DATABASE_URL not set.")
        return 1

    database = DatabaseManager(database_url, PoolConfig(min_size=1, max_size=2))
    await database.connect()
    try:
        runner = MigrationRunner(database.pool)
        if dry:
            pending = await runner.list_pending()
            print(f"Pending: {len(pending)}")
            for version in pending:
                print(f"  -> {version}")
        else:
            applied = await runner.run_pending()
            print(f"Applied {len(applied)} migration(s).")
    finally:
        await database.disconnect()
    return 0


if __name__ == "__main__":
    load_dotenv()
    parser = argparse.ArgumentParser(description="Apply bdaybot database migrations")
    parser.add_argument("--dry", action="store_true", help="show pending migrations without applying")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.dry)))
