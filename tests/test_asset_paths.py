from __future__ import annotations

import pytest

from assets.paths import canonical_path, format_file_size, normalize_asset_path


@pytest.mark.parametrize(
    "stored, expected",
    [
        (None, None),
        ("", None),
        ("   ", None),
        ("https://cdn.example.com/a.png", "https://cdn.example.com/a.png"),
        ("http://cdn.example.com/a.png", "http://cdn.example.com/a.png"),
        ("/uploads/cars/a.png", "uploads/cars/a.png"),
        ("uploads/a.png", "uploads/cars/a.png"),
        ("a.png", "uploads/cars/a.png"),
        ("uploads/logos/a.png", "uploads/logos/a.png"),
        ("uploads\\cars\\a.png", "uploads/cars/a.png"),
    ],
)
def test_normalize_asset_path(stored, expected):
    assert normalize_asset_path(stored, "cars") == expected


def test_normalize_is_idempotent():
    once = normalize_asset_path("/uploads/a.png", "gallery")
    assert normalize_asset_path(once, "gallery") == once


def test_canonical_path_without_subdir():
    assert canonical_path("", "x.png") == "uploads/x.png"
    assert canonical_path("locations/main", "x.png") == "uploads/locations/main/x.png"


@pytest.mark.parametrize(
    "size, expected",
    [
        (None, "0MB"),
        (0, "0MB"),
        ("", "0MB"),
        (1024 * 1024, "1.0MB"),
        (3 * 1024 * 1024 // 2, "1.5MB"),
        ("2097152", "2.0MB"),
        ("4.2MB", "4.2MB"),
    ],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected
