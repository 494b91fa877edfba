"""Read-only contact lookups against macOS Contacts.app, with sync and async interfaces."""

from __future__ import annotations

import asyncio
import logging

from contact_lookup.applescript import (
    access_probe_script,
    all_numbers_script,
    name_search_script,
    parse_contact_record,
    phone_search_script,
    run_applescript,
    split_records,
)
from contact_lookup.config import MAX_CONTACTS
from contact_lookup.models import DirectorySnapshot
from contact_lookup.phone import normalize_phone, phone_matches

logger = logging.getLogger(__name__)


class ContactDirectory:
    """Look up names and phone numbers in Contacts.app.

    Every lookup checks access first and never raises: failures are logged
    and turned into an empty result (``{}``, ``[]`` or ``None``), so callers
    treat "not found" and "error" the same way.

    Args:
        max_contacts: Maximum number of contacts processed per call.
        timeout_ms: Optional timeout for each osascript call, in milliseconds.
            By default calls are not cancelled; see ``config.TIMEOUT_MS``.
    """

    def __init__(self, max_contacts: int = MAX_CONTACTS, timeout_ms: int | None = None):
        self.max_contacts = max_contacts
        self.timeout_ms = timeout_ms

    def _run(self, script: str) -> str:
        return run_applescript(script, timeout_ms=self.timeout_ms)

    # ---- Sync methods ----

    def check_access(self) -> bool:
        """Probe Contacts.app with a minimal read. Returns False instead of raising."""
        try:
            self._run(access_probe_script())
            return True
        except Exception as e:
            logger.error(f"Cannot access Contacts app: {e}")
            return False

    def get_all_numbers(self) -> DirectorySnapshot:
        """Map contact names to phone numbers for up to ``max_contacts`` contacts.

        Only contacts with at least one non-blank phone are included. Records
        that fail to parse are skipped. Same-named contacts collapse, last wins.
        """
        try:
            if not self.check_access():
                return {}

            output = self._run(all_numbers_script(self.max_contacts))

            numbers: DirectorySnapshot = {}
            kept = 0
            for line in split_records(output):
                if kept >= self.max_contacts:
                    break
                try:
                    contact = parse_contact_record(line)
                except ValueError as e:
                    logger.debug(f"Skipping contact record: {e}")
                    continue
                if not contact.phones:
                    continue
                numbers[contact.name] = contact.phones
                kept += 1

            logger.info(f"Fetched phone numbers for {len(numbers)} contacts")
            return numbers
        except Exception as e:
            logger.error(f"Error getting all contacts: {e}")
            return {}

    def find_number(self, name: str) -> list[str]:
        """Find phone numbers for contacts whose name contains ``name``.

        Tries a case-insensitive search in Contacts.app first. If that finds
        nothing, falls back to the first name in :meth:`get_all_numbers`
        containing the query.
        """
        if not name or not name.strip():
            return []

        try:
            if not self.check_access():
                return []

            search_name = name.lower()
            phones = self._search_numbers_by_name(search_name)
            if phones:
                return phones

            logger.warning(f"No direct match for {name!r}, scanning all contacts")
            return self._fallback_numbers_by_name(search_name)
        except Exception as e:
            logger.error(f"Error finding contact: {e}")
            return []

    def find_contact_by_phone(self, phone_number: str) -> str | None:
        """Find the name of the contact owning ``phone_number``.

        Tries raw substring matching in Contacts.app first. If that finds
        nothing, falls back to normalized matching over :meth:`get_all_numbers`.
        """
        if not phone_number or not phone_number.strip():
            return None

        try:
            if not self.check_access():
                return None

            search_number = normalize_phone(phone_number)
            found = self._search_name_by_phone(search_number)
            if found:
                return found

            logger.warning(f"No direct match for {phone_number!r}, scanning all contacts")
            return self._fallback_name_by_phone(search_number)
        except Exception as e:
            logger.error(f"Error finding contact by phone: {e}")
            return None

    # ---- Two-stage lookups ----

    def _search_numbers_by_name(self, search_name: str) -> list[str]:
        output = self._run(name_search_script(search_name, self.max_contacts))
        return [phone.strip() for phone in split_records(output)]

    def _fallback_numbers_by_name(self, search_name: str) -> list[str]:
        """First match wins; phones of different contacts are never merged."""
        all_numbers = self.get_all_numbers()
        for person_name, phones in all_numbers.items():
            if search_name in person_name.lower():
                return phones
        return []

    def _search_name_by_phone(self, search_number: str) -> str | None:
        output = self._run(phone_search_script(search_number, self.max_contacts))
        return output or None

    def _fallback_name_by_phone(self, search_number: str) -> str | None:
        all_numbers = self.get_all_numbers()
        for contact_name, numbers in all_numbers.items():
            normalized = [normalize_phone(num) for num in numbers]
            if any(phone_matches(num, search_number) for num in normalized):
                return contact_name
        return None

    # ---- Async wrappers (asyncio.to_thread) ----

    async def acheck_access(self) -> bool:
        """Async version of check_access."""
        return await asyncio.to_thread(self.check_access)

    async def aget_all_numbers(self) -> DirectorySnapshot:
        """Async version of get_all_numbers."""
        return await asyncio.to_thread(self.get_all_numbers)

    async def afind_number(self, name: str) -> list[str]:
        """Async version of find_number."""
        return await asyncio.to_thread(self.find_number, name)

    async def afind_contact_by_phone(self, phone_number: str) -> str | None:
        """Async version of find_contact_by_phone."""
        return await asyncio.to_thread(self.find_contact_by_phone, phone_number)
