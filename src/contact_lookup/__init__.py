"""Read-only name and phone lookups against macOS Contacts.app (via osascript).

The three async lookups below are the package contract. ``ContactDirectory``
and the phone helpers stay importable from their own modules.
"""

from __future__ import annotations

from contact_lookup.directory import ContactDirectory
from contact_lookup.models import DirectorySnapshot

__all__ = [
    "get_all_numbers",
    "find_number",
    "find_contact_by_phone",
]


async def get_all_numbers() -> DirectorySnapshot:
    """Map contact names to their phone numbers. Returns {} on any failure."""
    return await ContactDirectory().aget_all_numbers()


async def find_number(name: str) -> list[str]:
    """Find phone numbers by full or partial contact name. Returns [] on any failure."""
    return await ContactDirectory().afind_number(name)


async def find_contact_by_phone(phone_number: str) -> str | None:
    """Find a contact name by phone number. Returns None on no match or failure."""
    return await ContactDirectory().afind_contact_by_phone(phone_number)
