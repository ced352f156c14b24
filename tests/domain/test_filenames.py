"""Tests for storage key construction."""

import pytest

from carlot.domain.filenames import (
    PUBLIC_BUCKETS,
    STORAGE_BUCKETS,
    asset_key,
    client_document_key,
    profile_photo_key,
    sanitize_filename,
)

NOW = 1_700_000_000.5


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("My Car Photo.JPG", "my_car_photo.jpg"),
        ("  spaced   out  .png", "spaced_out_.png"),
        ("🚗 front view 🚗.jpeg", "front_view_.jpeg"),
        ("ñandú#1?.pdf", "and1.pdf"),
        ("__edge__.txt", "edge_.txt"),
    ],
)
def test_sanitize_filename(raw: str, expected: str) -> None:
    assert sanitize_filename(raw, now=NOW) == expected


def test_sanitize_is_idempotent() -> None:
    once = sanitize_filename("Registration  Certificate (copy).PDF", now=NOW)

    assert sanitize_filename(once, now=NOW) == once


def test_name_that_sanitises_to_nothing_gets_fallback() -> None:
    assert sanitize_filename("🚗🚗", now=NOW) == "file_1700000000500"


def test_asset_key_layout() -> None:
    assert asset_key("v1", "c1", "Front View.jpg", now=NOW) == "v1/c1/1700000000500_front_view.jpg"


def test_client_and_profile_keys_keep_filename_under_vendor() -> None:
    assert client_document_key("v1", "ID Card.pdf", now=NOW) == "v1/1700000000500-ID Card.pdf"
    assert profile_photo_key("v1", "me.png", now=NOW) == "v1/1700000000500-me.png"


def test_public_buckets_are_known_buckets() -> None:
    assert PUBLIC_BUCKETS < STORAGE_BUCKETS
    assert "car-documents" not in PUBLIC_BUCKETS
