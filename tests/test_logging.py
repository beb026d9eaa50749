import json
import logging

from app.core.logging import ContextFilter, LogContext, StructuredFormatter, mask_phone


def make_record(**extra):
    record = logging.LogRecord("voicesite.test", logging.INFO, __file__, 1, "hello", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_mask_phone():
    assert mask_phone("+919876543210") == "+91******3210"
    assert mask_phone(mask_phone("+919876543210")) == "+91******3210"
    assert mask_phone("123") == "123"
    assert mask_phone("") == ""


def test_context_is_attached_and_masked():
    context_filter = ContextFilter()

    with LogContext(user_id="u-1", phone="+919876543210"):
        with LogContext(site_id="s-1"):
            record = make_record()
            context_filter.filter(record)

    assert record.user_id == "u-1"
    assert record.site_id == "s-1"
    assert record.phone == "+91******3210"

    data = json.loads(StructuredFormatter().format(record))
    assert data["message"] == "hello"
    assert data["user_id"] == "u-1"
    assert data["phone"] == "+91******3210"


def test_context_ends_with_block():
    with LogContext(user_id="u-1"):
        pass

    record = make_record()
    ContextFilter().filter(record)
    assert not hasattr(record, "user_id")


def test_extra_wins_over_context():
    with LogContext(user_id="u-1"):
        record = make_record(user_id="explicit")
        ContextFilter().filter(record)
    assert record.user_id == "explicit"
