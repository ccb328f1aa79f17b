from __future__ import annotations

from unittest.mock import patch

import pytest

from credhelper import pins
from credhelper.errors import NotFoundError, ValidationError
from credhelper.settings import Settings


def test_add_get_round_trip(settings: Settings) -> None:
    entry, replaced = pins.add("bank", "myaccount", 6, settings=settings)
    assert not replaced
    assert len(entry.pin) == 6 and entry.pin.isdigit()
    assert pins.get("bank", "myaccount", settings=settings) == entry


def test_default_length_is_four(settings: Settings) -> None:
    entry, _ = pins.add("google", "dummy@gmail.com", settings=settings)
    assert len(entry.pin) == 4


def test_add_replaces_in_place(settings: Settings) -> None:
    pins.add("a", "x", settings=settings)
    pins.add("b", "x", settings=settings)
    updated, replaced = pins.add("a", "x", 8, settings=settings)

    assert replaced
    entries = pins.list_entries(settings=settings)
    assert [e.name for e in entries] == ["a", "b"]
    assert entries[0] == updated


def test_get_missing(settings: Settings) -> None:
    pins.add("bank", "me", settings=settings)
    with pytest.raises(NotFoundError):
        pins.get("bank", "someone-else", settings=settings)


@pytest.mark.parametrize("length", [0, -1])
def test_non_positive_length_writes_nothing(settings: Settings, length: int) -> None:
    with pytest.raises(ValidationError):
        pins.add("bank", "me", length, settings=settings)
    assert not settings.pin_path.exists()


def test_identifiers_required(settings: Settings) -> None:
    with pytest.raises(ValidationError):
        pins.get("", "me", settings=settings)


def test_rejected_entry_is_validation_error(settings: Settings) -> None:
    with patch("credhelper.pins.generate_pin", return_value="12ab"):
        with pytest.raises(ValidationError):
            pins.add("bank", "me", 4, settings=settings)
    assert not settings.pin_path.exists()
