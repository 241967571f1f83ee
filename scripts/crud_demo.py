"""
Contact CRUD demo.

Connects to the configured store, runs one insert/list/update/lookup/delete
pass over a sample contact and disconnects. Any storage failure is fatal:
it is logged and the process exits with status 1.

Usage:
    python -m scripts.crud_demo
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.config import settings
from core.logging import configure_logging, get_logger
from core.storage import StorageError, create_contact_repository
from manager.demo import ContactDemo


logger = get_logger(__name__)


async def run_demo() -> None:
    """Build the configured repository and run the demo against it."""
    repository = create_contact_repository(settings)
    await ContactDemo(repository).run()


def main() -> None:
    configure_logging()

    logger.info(
        "Starting contact demo",
        storage_backend=settings.storage_backend,
        database=settings.mongodb_database,
        collection=settings.mongodb_collection,
    )

    try:
        asyncio.run(run_demo())
    except StorageError as e:
        logger.error(
            "Contact demo failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
