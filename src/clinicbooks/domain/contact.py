"""Contact domain service."""

from typing import Optional

from clinicbooks.database.base import Database
from clinicbooks.domain.entities import Contact
from clinicbooks.domain.errors import ConflictError, ValidationError, contact_id_taken

KNOWN_KINDS = ("patient", "supplier", "staff", "insurer")


def make_contact_id(kind: str, number: int) -> str:
    """Composite contact id such as ``patient-12``."""
    return f"{kind}-{number}"


class ContactService:
    """Service for managing patients, suppliers and other contacts."""

    def __init__(self, db: Database):
        """Initialize contact service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_contact(self, kind: str, name: str, number: Optional[int] = None) -> str:
        """Create a contact.

        Args:
            kind: Contact kind (patient, supplier, staff, insurer)
            name: Display name
            number: Numeric part of the id; next free number when omitted

        Returns:
            Composite contact id

        Raises:
            ValidationError: If kind is unknown or name is empty
            ConflictError: If the id already exists
        """
        kind = kind.strip().lower()
        if kind not in KNOWN_KINDS:
            raise ValidationError(
                f"Unknown contact kind '{kind}'. Supported kinds: {', '.join(KNOWN_KINDS)}"
            )
        if not name.strip():
            raise ValidationError("Contact name cannot be empty")

        if number is None:
            number = self._next_number(kind)
        contact_id = make_contact_id(kind, number)
        if self.db.get_contact(contact_id) is not None:
            raise ConflictError(contact_id_taken(contact_id))
        return self.db.create_contact(contact_id=contact_id, name=name.strip(), kind=kind)

    def _next_number(self, kind: str) -> int:
        highest = 0
        for contact in self.db.list_contacts(kind=kind):
            suffix = contact.id.rsplit("-", 1)[-1]
            if suffix.isdigit():
                highest = max(highest, int(suffix))
        return highest + 1

    def get_contact(self, contact_id: str) -> Optional[Contact]:
        return self.db.get_contact(contact_id)

    def list_contacts(self, kind: Optional[str] = None) -> list[Contact]:
        """List contacts.

        Args:
            kind: Optional kind to filter by

        Returns:
            List of contact entities
        """
        return self.db.list_contacts(kind=kind.lower() if kind else None)
