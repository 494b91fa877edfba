"""Tests for the osascript bridge."""

import subprocess
from unittest.mock import patch, MagicMock

import pytest

from contact_lookup.applescript import (
    all_numbers_script,
    name_search_script,
    parse_contact_record,
    phone_search_script,
    run_applescript,
    sanitize_applescript,
    split_records,
)
from contact_lookup.exceptions import ContactsAccessError, ContactsQueryError


def test_sanitize_applescript():
    assert sanitize_applescript('hello "world"') == 'hello \\"world\\"'
    assert sanitize_applescript("back\\slash") == "back\\\\slash"


@patch("contact_lookup.applescript.subprocess.run")
def test_run_applescript_success(mock_run):
    mock_run.return_value = MagicMock(returncode=0, stdout="Contacts\n", stderr="")
    assert run_applescript('tell application "Contacts" to return name') == "Contacts"
    args, kwargs = mock_run.call_args
    assert args[0][0] == "osascript"
    assert kwargs["timeout"] is None


@patch("contact_lookup.applescript.subprocess.run")
def test_run_applescript_custom_timeout(mock_run):
    mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
    run_applescript("return 1", timeout_ms=1500)
    assert mock_run.call_args.kwargs["timeout"] == 1.5


@patch("contact_lookup.applescript.subprocess.run")
def test_run_applescript_failure(mock_run):
    mock_run.return_value = MagicMock(
        returncode=1, stdout="", stderr="execution error: Contacts got an error (-1728)"
    )
    with pytest.raises(ContactsQueryError, match="Contacts got an error"):
        run_applescript("return 1")


@patch("contact_lookup.applescript.subprocess.run")
def test_run_applescript_access_denied(mock_run):
    mock_run.return_value = MagicMock(
        returncode=1,
        stdout="",
        stderr="execution error: Not authorized to send Apple events to Contacts. (-1743)",
    )
    with pytest.raises(ContactsAccessError, match="access denied"):
        run_applescript("return 1")


@patch("contact_lookup.applescript.subprocess.run")
def test_run_applescript_timeout(mock_run):
    mock_run.side_effect = subprocess.TimeoutExpired(cmd="osascript", timeout=5)
    with pytest.raises(ContactsQueryError, match="timed out"):
        run_applescript("return 1")


@patch("contact_lookup.applescript.subprocess.run")
def test_run_applescript_missing_osascript(mock_run):
    mock_run.side_effect = FileNotFoundError("osascript")
    with pytest.raises(ContactsQueryError, match="requires macOS"):
        run_applescript("return 1")


def test_all_numbers_script_is_bounded():
    script = all_numbers_script(7)
    assert "if contactCount >= 7 then exit repeat" in script
    assert "character id 31" in script


def test_name_search_script_escapes_query():
    script = name_search_script('o"brien', 100)
    assert 'set searchText to "o\\"brien"' in script
    assert "ignoring case" in script
    assert "if i > 100 then exit repeat" in script


def test_phone_search_script_embeds_number():
    script = phone_search_script("+15551234", 50)
    assert 'set searchPhone to "+15551234"' in script
    assert "if i > 50 then exit repeat" in script


def test_split_records_empty():
    assert split_records("") == []
    assert split_records(None) == []


def test_split_records_single_and_many():
    assert split_records("555-1234") == ["555-1234"]
    assert split_records("a\n\n  \nb\n") == ["a", "b"]


def test_parse_contact_record():
    contact = parse_contact_record("John Smith\t555-1234\x1f+1 555 999 0000")
    assert contact.name == "John Smith"
    assert contact.phones == ["555-1234", "+1 555 999 0000"]


def test_parse_contact_record_drops_blank_phones():
    contact = parse_contact_record("Jane Doe\t \x1f555-1234\x1f")
    assert contact.phones == ["555-1234"]


def test_parse_contact_record_malformed():
    with pytest.raises(ValueError, match="Malformed"):
        parse_contact_record("no separator here")
    with pytest.raises(ValueError):
        parse_contact_record("\t555-1234")
