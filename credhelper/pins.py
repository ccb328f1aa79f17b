"""Numeric PIN generation and storage."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from .errors import NotFoundError, ValidationError
from .generators import DEFAULT_PIN_LENGTH, generate_pin
from .models import PinEntry
from .settings import Settings, get_settings
from .store import pin_store


logger = logging.getLogger(__name__)


def _require_key(name: str, account: str) -> None:
    if not name or not account:
        raise ValidationError("name and account cannot be empty")


def add(
    name: str,
    account: str,
    length: int = DEFAULT_PIN_LENGTH,
    settings: Optional[Settings] = None,
) -> tuple[PinEntry, bool]:
    """Generate a PIN for `name`/`account` and store it.

    Returns:
        The stored entry and whether it replaced an existing one.
    """
    _require_key(name, account)
    pin = generate_pin(length)
    try:
        entry = PinEntry(name=name, account=account, pin=pin)
    except PydanticValidationError as exc:
        raise ValidationError(str(exc)) from exc
    replaced = pin_store(settings or get_settings()).upsert(entry)
    logger.info("pin.add name=%s account=%s length=%d replaced=%s", name, account, length, replaced)
    return entry, replaced


def get(name: str, account: str, settings: Optional[Settings] = None) -> PinEntry:
    """Return the stored PIN for `name`/`account`.

    Raises:
        NotFoundError: if no entry matches.
    """
    _require_key(name, account)
    entry = pin_store(settings or get_settings()).find(name, account)
    if entry is None:
        raise NotFoundError(f"MPIN not found for {name} ({account})")
    return entry


def list_entries(settings: Optional[Settings] = None) -> list[PinEntry]:
    """Return stored PINs in insertion order."""
    return pin_store(settings or get_settings()).list()
