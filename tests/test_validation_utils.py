from datetime import datetime, timedelta, timezone

import pytest

from utils.time_utils import days_left, is_expired
from utils.validation_utils import (
    audio_mime_type,
    file_extension,
    format_contact_number,
    generate_slug,
    normalize_phone,
    validate_phone_number,
)


@pytest.mark.parametrize("phone", ["9876543210", "+919876543210", "98765 43210", "+91 98765-43210"])
def test_valid_phones(phone):
    assert validate_phone_number(phone)
    assert normalize_phone(phone) == "+919876543210"


@pytest.mark.parametrize("phone", ["", "12345", "5876543210", "+449876543210", "98765432101"])
def test_invalid_phones(phone):
    assert not validate_phone_number(phone)


def test_format_contact_number():
    assert format_contact_number("98765 43210") == "+919876543210"
    assert format_contact_number("+919876543210") == "+919876543210"
    assert format_contact_number("044-2345678") == "+910442345678"
    assert format_contact_number("044-23456789") == "04423456789"
    assert format_contact_number("") is None
    assert format_contact_number(None) is None


def test_generate_slug():
    assert generate_slug("Vaigai Traders") == "vaigai-traders"
    assert generate_slug("Ram's  Store!") == "rams-store"
    assert generate_slug("a -- b") == "a-b"
    assert len(generate_slug("x" * 80)) == 50
    assert generate_slug("!!!").startswith("shop-")
    assert generate_slug("சரவணா").startswith("shop-")


def test_file_helpers():
    assert file_extension("Photo.PNG", "jpg") == "png"
    assert file_extension("blob", "jpg") == "jpg"
    assert file_extension(None, "webm") == "webm"
    assert audio_mime_type("voice.mp3") == "audio/mpeg"
    assert audio_mime_type("voice.unknown") == "audio/webm"
    assert audio_mime_type(None) == "audio/webm"


def test_days_left():
    now = datetime(2024, 1, 1, 12, 0)
    assert days_left(None, now) == 0
    assert days_left(now + timedelta(days=30), now) == 30
    assert days_left(now + timedelta(days=2, hours=1), now) == 3
    assert days_left(now - timedelta(days=1), now) == 0
    assert days_left(datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc), now) == 1


def test_is_expired():
    now = datetime(2024, 1, 1, 12, 0)
    assert is_expired(None, now)
    assert is_expired(now - timedelta(seconds=1), now)
    assert not is_expired(now + timedelta(minutes=5), now)
