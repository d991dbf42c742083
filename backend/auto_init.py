"""
Automatic initialization module.

Provisions the board index (analyzer, tokenizer, field mappings) when the
application starts. Runs as a detached task: request serving never waits on
it, and its outcome is reported only through the log.
"""
import asyncio
import logging
from typing import Optional

from backend.domains.board.index import build_index_mappings, build_index_settings
from backend.domains.shared.document_store import BaseDocumentStore

logger = logging.getLogger(__name__)


async def init_index(
    store: BaseDocumentStore,
    index_name: str,
    shards: Optional[int] = None,
    replicas: Optional[int] = None,
) -> bool:
    """
    Create the board index unless it already exists.

    An existence check that fails is treated as "absent" so that a flaky
    store does not prevent creation; the store rejects a duplicate create.

    Returns:
        True if a create request was accepted, False otherwise
    """
    try:
        exists = await store.exists(index_name)
    except Exception as e:
        logger.warning(f"Could not check index {index_name}: {e}. Proceeding with creation...")
        exists = False

    if exists:
        logger.info(f"Index already exists: {index_name}. Skipping initialization.")
        return False

    created = await store.create_index(
        settings=build_index_settings(shards, replicas),
        mappings=build_index_mappings(),
        index_name=index_name,
    )
    if created:
        logger.info(f"Created index {index_name}")
    return created


async def run_auto_init(
    store: BaseDocumentStore,
    index_name: str,
    shards: Optional[int] = None,
    replicas: Optional[int] = None,
) -> dict:
    """Run every startup initialization step, logging instead of raising."""
    logger.info("Starting auto initialization...")
    created = False
    try:
        created = await init_index(store, index_name, shards, replicas)
    except Exception as e:
        logger.error(f"Failed to initialize index {index_name}: {e}", exc_info=True)
    logger.info(f"Check index ({index_name}) on start executed.")
    return {"index": index_name, "created": created}


def schedule_auto_init(
    store: BaseDocumentStore,
    index_name: str,
    shards: Optional[int] = None,
    replicas: Optional[int] = None,
) -> asyncio.Task:
    """Start auto initialization in the background on the running loop."""
    return asyncio.get_running_loop().create_task(
        run_auto_init(store, index_name, shards, replicas),
        name=f"auto-init-{index_name}",
    )
