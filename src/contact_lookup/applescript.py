"""Query Contacts.app through AppleScript / osascript."""

from __future__ import annotations

import logging
import subprocess

from contact_lookup.config import MAX_CONTACTS
from contact_lookup.exceptions import ContactsAccessError, ContactsQueryError
from contact_lookup.models import Contact

logger = logging.getLogger(__name__)

# Separators in script output: one contact per line, name and phones split by
# a tab, phones split by the ASCII unit separator.
FIELD_SEPARATOR = "\t"
PHONE_SEPARATOR = "\x1f"

# errAEEventNotPermitted, raised when Automation access to Contacts is denied
_NOT_PERMITTED_ERROR = "-1743"


def sanitize_applescript(text: str) -> str:
    """Sanitize a string for safe inclusion in AppleScript double-quoted strings."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def run_applescript(script: str, timeout_ms: int | None = None) -> str:
    """Execute an AppleScript via osascript and return its stripped stdout.

    Waits for osascript to finish unless ``timeout_ms`` is given.
    """
    logger.debug(f"Running AppleScript: {script[:200]}...")
    timeout = timeout_ms / 1000 if timeout_ms is not None else None
    try:
        result = subprocess.run(
            ["osascript", "-e", script],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise ContactsQueryError(f"AppleScript timed out after {timeout}s") from e
    except FileNotFoundError as e:
        raise ContactsQueryError("osascript not found (requires macOS)") from e

    if result.returncode != 0:
        stderr = result.stderr.strip()
        if _NOT_PERMITTED_ERROR in stderr or "Not authorized" in stderr:
            raise ContactsAccessError(f"Contacts access denied: {stderr}")
        raise ContactsQueryError(f"AppleScript failed: {stderr}")
    return result.stdout.strip()


def access_probe_script() -> str:
    return (
        'tell application "Contacts"\n'
        "    return name\n"
        "end tell"
    )


def all_numbers_script(max_contacts: int = MAX_CONTACTS) -> str:
    """Script listing up to ``max_contacts`` people that have phone numbers.

    Output is one ``name<TAB>phone<US>phone...`` line per person. People or
    phone entries that fail to read are skipped.
    """
    return f'''
tell application "Contacts"
    set output to ""
    set contactCount to 0
    set allPeople to people

    repeat with i from 1 to (count of allPeople)
        if contactCount >= {max_contacts} then exit repeat

        try
            set currentPerson to item i of allPeople
            set personName to name of currentPerson
            set personPhones to ""
            set phoneCount to 0

            try
                repeat with phoneItem in (phones of currentPerson)
                    try
                        set phoneValue to value of phoneItem
                        if phoneValue is not "" then
                            if phoneCount > 0 then set personPhones to personPhones & (character id 31)
                            set personPhones to personPhones & phoneValue
                            set phoneCount to phoneCount + 1
                        end if
                    end try
                end repeat
            end try

            if phoneCount > 0 then
                set output to output & personName & tab & personPhones & linefeed
                set contactCount to contactCount + 1
            end if
        end try
    end repeat

    return output
end tell
'''


def name_search_script(query: str, max_contacts: int = MAX_CONTACTS) -> str:
    """Script returning phones of people whose name contains ``query``, one per line."""
    safe_query = sanitize_applescript(query)

    return f'''
tell application "Contacts"
    set output to ""
    set searchText to "{safe_query}"
    set allPeople to people

    repeat with i from 1 to (count of allPeople)
        if i > {max_contacts} then exit repeat

        try
            set currentPerson to item i of allPeople
            set personName to name of currentPerson

            ignoring case
                set isMatch to (personName contains searchText)
            end ignoring

            if isMatch then
                try
                    repeat with phoneItem in (phones of currentPerson)
                        try
                            set phoneValue to value of phoneItem
                            if phoneValue is not "" then
                                set output to output & phoneValue & linefeed
                            end if
                        end try
                    end repeat
                end try
            end if
        end try
    end repeat

    return output
end tell
'''


def phone_search_script(search_number: str, max_contacts: int = MAX_CONTACTS) -> str:
    """Script returning the first person with a phone overlapping ``search_number``.

    Stored values are compared raw: a match is either value containing the
    other. Returns an empty string when nothing matches.
    """
    safe_number = sanitize_applescript(search_number)

    return f'''
tell application "Contacts"
    set foundName to ""
    set searchPhone to "{safe_number}"
    set allPeople to people

    repeat with i from 1 to (count of allPeople)
        if i > {max_contacts} then exit repeat
        if foundName is not "" then exit repeat

        try
            set currentPerson to item i of allPeople

            try
                repeat with phoneItem in (phones of currentPerson)
                    try
                        set phoneValue to value of phoneItem
                        if phoneValue contains searchPhone or searchPhone contains phoneValue then
                            set foundName to name of currentPerson
                            exit repeat
                        end if
                    end try
                end repeat
            end try
        end try
    end repeat

    return foundName
end tell
'''


def split_records(output: str | None) -> list[str]:
    """Split script output into non-blank record lines.

    Empty or missing output yields no records; a single line yields one.
    """
    if not output:
        return []
    return [line for line in output.split("\n") if line.strip()]


def parse_contact_record(line: str) -> Contact:
    """Parse one ``name<TAB>phones`` line into a Contact.

    Raises:
        ValueError: If the line has no name or no phone field.
    """
    name, sep, raw_phones = line.partition(FIELD_SEPARATOR)
    name = name.strip()
    if not sep or not name:
        raise ValueError(f"Malformed contact record: {line!r}")

    phones = [p.strip() for p in raw_phones.split(PHONE_SEPARATOR) if p.strip()]
    return Contact(name=name, phones=phones)
