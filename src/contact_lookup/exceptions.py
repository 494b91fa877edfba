"""Exception hierarchy for contact-lookup."""


class ContactLookupError(Exception):
    """Base exception for all contact-lookup errors."""


class ContactsAccessError(ContactLookupError):
    """Contacts.app is not reachable or access was denied."""


class ContactsQueryError(ContactLookupError):
    """An AppleScript query against Contacts.app failed."""
