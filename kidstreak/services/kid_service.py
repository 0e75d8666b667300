"""Kid service for CRUD operations."""

import logging
import uuid

from kidstreak.core import db_client
from kidstreak.core.errors import translate_db_errors
from kidstreak.core.logging import span
from kidstreak.domain.create_models import KidCreate
from kidstreak.domain.kid import Kid
from kidstreak.domain.update_models import KidUpdate


logger = logging.getLogger(__name__)


def new_kid_id() -> str:
    """Generate a fresh kid ID."""
    return f"kid{uuid.uuid4().hex[:12]}"


async def add_kid(*, kid: KidCreate, kid_id: str | None = None) -> Kid:
    """Create a new kid.

    Args:
        kid: Validated kid payload
        kid_id: Explicit ID (seeding); generated when omitted

    Returns:
        Created kid

    Raises:
        PersistenceUnavailableError: If the database write fails
    """
    with span("kid_service.add_kid"), translate_db_errors("add_kid"):
        record = await db_client.create_record(
            collection="kids",
            data={"id": kid_id or new_kid_id(), **kid.model_dump(mode="json")},
        )
    logger.info("Created kid '%s'", kid.name, extra={"kid_id": record["id"]})
    return Kid.model_validate(record)


async def update_kid(*, kid_id: str, updates: KidUpdate) -> Kid:
    """Apply a partial update to a kid.

    Raises:
        NotFoundError: If the kid does not exist
        PersistenceUnavailableError: If the database write fails
    """
    data = updates.model_dump(mode="json", exclude_none=True)
    with span("kid_service.update_kid"), translate_db_errors("update_kid"):
        if not data:
            record = await db_client.get_record(collection="kids", record_id=kid_id)
        else:
            record = await db_client.update_record(collection="kids", record_id=kid_id, data=data)
    return Kid.model_validate(record)


async def delete_kid(*, kid_id: str) -> None:
    """Delete a kid along with their tasks and streak (cascading foreign keys).

    Raises:
        NotFoundError: If the kid does not exist
    """
    with span("kid_service.delete_kid"), translate_db_errors("delete_kid"):
        await db_client.delete_record(collection="kids", record_id=kid_id)
    logger.info("Deleted kid", extra={"kid_id": kid_id})


async def list_kids() -> list[Kid]:
    """List all kids ordered by name."""
    with span("kid_service.list_kids"), translate_db_errors("list_kids"):
        records = await db_client.list_records(collection="kids", sort="name")
    return [Kid.model_validate(record) for record in records]
