from datetime import date
from catalog.validation import (
    validate_copy_fields, escape, parse_iso_date,
    REQUIRED_FIELD_MISSING, INVALID_DATE_FORMAT,
)

def _fields(**over):
    base = {"book": "b-1", "imprint": "Penguin", "status": "Available", "due_back": ""}
    base.update(over)
    return base

def test_valid_fields_are_trimmed():
    r = validate_copy_fields(_fields(book="  b-1 ", imprint="\tPenguin Classics  "))
    assert r.ok
    assert r.draft.book_id == "b-1"
    assert r.draft.imprint == "Penguin Classics"
    assert r.draft.status == "Available"
    assert r.draft.due_back is None
    assert r.draft.id is None

def test_all_errors_are_collected_in_field_order():
    r = validate_copy_fields(_fields(book="   ", imprint="", due_back="2024-13-45"))
    assert not r.ok
    assert [(e.field, e.code) for e in r.errors] == [
        ("book", REQUIRED_FIELD_MISSING),
        ("imprint", REQUIRED_FIELD_MISSING),
        ("due_back", INVALID_DATE_FORMAT),
    ]
    assert r.errors[0].msg == "Book must be specified"
    assert r.errors[1].msg == "Imprint must be specified"
    assert r.errors[2].msg == "Invalid date"

def test_missing_keys_count_as_empty():
    r = validate_copy_fields({})
    assert [e.field for e in r.errors] == ["book", "imprint"]

def test_text_is_html_escaped():
    r = validate_copy_fields(_fields(imprint="<b>Tor & Co</b>", status="It's \"new\""))
    assert r.draft.imprint == "&lt;b&gt;Tor &amp; Co&lt;&#x2F;b&gt;"
    assert r.draft.status == "It&#x27;s &quot;new&quot;"

def test_escape_covers_backslash_and_backtick():
    assert escape("a\\b`c") == "a&#x5C;b&#96;c"

def test_status_is_not_checked_against_known_values():
    r = validate_copy_fields(_fields(status="Lost at sea"))
    assert r.ok
    assert r.draft.status == "Lost at sea"

def test_empty_or_missing_status_defaults_to_maintenance():
    assert validate_copy_fields(_fields(status="")).draft.status == "Maintenance"
    assert validate_copy_fields(_fields(status=None)).draft.status == "Maintenance"

def test_due_back_parses_iso_dates():
    r = validate_copy_fields(_fields(due_back="2024-05-01"))
    assert r.ok
    assert r.draft.due_back == date(2024, 5, 1)

def test_due_back_accepts_iso_datetime():
    assert parse_iso_date("2024-05-01T10:30:00") == date(2024, 5, 1)

def test_garbled_due_back_is_rejected_not_dropped():
    for bad in ("2024-05", "May 1st", "2024-02-30", "yesterday"):
        r = validate_copy_fields(_fields(due_back=bad))
        assert not r.ok, bad
        assert r.errors[0].field == "due_back"
        assert r.draft.due_back is None

def test_copy_id_is_carried_on_draft():
    r = validate_copy_fields(_fields(book=""), copy_id="abc")
    assert not r.ok
    assert r.draft.id == "abc"
