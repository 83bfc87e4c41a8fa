"""
Script to issue a user access key from the command line.

Useful before the admin console is set up, or to script key issuance.
Run it after the database migrations:
    python -m scripts.create_user_key --name "Alice" --key "alice-secret"

Under the ``generated`` key policy leave out ``--key``; the generated key is
printed once and cannot be recovered afterwards.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import settings
from app.core.exceptions import AppError
from app.database import async_session, engine
from app.dependencies.auth import get_session_codec
from app.services.auth import AuthService
from app.utils.logging_config import setup_logging, get_logger

# Setup logging
setup_logging()
logger = get_logger(__name__)


async def create_user_key(name: str, key: str = None) -> int:
    """Issue one key. Returns the process exit code."""
    logger.info("=" * 60)
    logger.info(f"Issuing user key for '{name}' (policy: {settings.USER_KEY_POLICY})")
    logger.info("=" * 60)

    try:
        async with async_session() as session:
            auth = AuthService(session, get_session_codec())
            created = await auth.create_user_key(name, key)
    except AppError as exc:
        logger.error(f"Could not issue key: {exc.message}")
        return 1
    finally:
        await engine.dispose()

    print("\n" + "=" * 60)
    print("USER KEY CREATED")
    print("=" * 60)
    print(f"User ID: {created.user.id}")
    print(f"Name:    {created.user.name}")
    print(f"Key:     {created.plain_key}")
    if created.user.plain_key is None:
        print("\nCopy this key now. It will not be shown again.")
    print("=" * 60 + "\n")
    return 0


def main():
    """Command-line entry point."""
    parser = argparse.ArgumentParser(
        description="Issue an access key for the Painting Gateway"
    )
    parser.add_argument(
        '--name',
        type=str,
        required=True,
        help='Owner name shown in the admin console'
    )
    parser.add_argument(
        '--key',
        type=str,
        help='Key to issue (custom policy only)'
    )

    args = parser.parse_args()

    sys.exit(asyncio.run(create_user_key(args.name.strip(), args.key)))


if __name__ == "__main__":
    main()
