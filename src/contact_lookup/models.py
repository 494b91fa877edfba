"""Data models for contact lookups."""

from __future__ import annotations

from dataclasses import dataclass, field

# Contact name -> phone numbers as stored in Contacts.app
DirectorySnapshot = dict[str, list[str]]


@dataclass
class Contact:
    """A contact read from Contacts.app."""

    name: str
    phones: list[str] = field(default_factory=list)
