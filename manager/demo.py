"""
Contact CRUD demonstration driver.

Runs the fixed sequence connect -> insert -> list -> update -> lookup ->
delete -> disconnect against any contact repository, printing one status
line per step. Storage errors are not handled here; they propagate to
the caller after the connection has been closed.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from core.logging import get_logger
from core.storage import BaseContactRepository, Contact


logger = get_logger(__name__)


SAMPLE_CONTACT = Contact(
    name="John Doe",
    email="johndoe@example.com",
    phone="1234567890",
)

UPDATED_CONTACT = Contact(
    name="John Doe",
    email="johndoe@example.com",
    phone="9876543210",
)


@dataclass
class DemoResult:
    """What the demo observed along the way."""
    listed: list[Contact] = field(default_factory=list)
    found: Optional[Contact] = None
    updated: bool = False
    deleted: bool = False


class ContactDemo:
    """
    Drives one pass of the CRUD demonstration.

    Usage:
        demo = ContactDemo(create_contact_repository(settings))
        result = await demo.run()
    """

    def __init__(
        self,
        repository: BaseContactRepository,
        contact: Contact = SAMPLE_CONTACT,
        updated_contact: Contact = UPDATED_CONTACT,
        echo: Callable[[str], None] = print,
    ):
        self.repository = repository
        self.contact = contact
        self.updated_contact = updated_contact
        self._echo = echo

    async def run(self) -> DemoResult:
        result = DemoResult()

        await self.repository.connect()
        self._echo("Connected to MongoDB!")

        try:
            await self.repository.insert(self.contact)
            self._echo("Contact inserted successfully!")

            result.listed = await self.repository.find_all()
            self._echo("All contacts:")
            for contact in result.listed:
                self._echo(str(contact))

            result.updated = await self.repository.update_by_email(
                self.contact.email,
                self.updated_contact,
            )
            self._echo("Contact updated successfully!")

            result.found = await self.repository.find_by_email(self.contact.email)
            self._echo(f"Contact found by email: {result.found}")

            result.deleted = await self.repository.delete_by_email(self.contact.email)
            self._echo("Contact deleted successfully!")
        finally:
            await self.repository.close()

        self._echo("Disconnected from MongoDB!")

        logger.info(
            "Contact demo finished",
            listed=len(result.listed),
            updated=result.updated,
            deleted=result.deleted,
        )
        return result
