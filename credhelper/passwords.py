"""Password generation and storage."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .generators import DEFAULT_PASSWORD_LENGTH, PasswordPolicy, generate_password
from .models import PasswordEntry
from .settings import Settings, get_settings
from .store import password_store


logger = logging.getLogger(__name__)


def add(
    name: str,
    account: str,
    length: int = DEFAULT_PASSWORD_LENGTH,
    policy: Optional[PasswordPolicy] = None,
    settings: Optional[Settings] = None,
) -> tuple[PasswordEntry, bool]:
    """Generate a password for `name`/`account` and store it.

    The persisted `config` describes the resolved alphabet, including the
    fallback when no character classes were requested.

    Returns:
        The stored entry and whether it replaced an existing one.
    """
    if not name or not account:
        raise ValidationError("name and account are required")
    password, resolved = generate_password(length, policy or PasswordPolicy())

    try:
        entry = PasswordEntry(
            name=name,
            account=account,
            password=password,
            length=length,
            config=resolved.description,
        )
    except PydanticValidationError as exc:
        raise ValidationError(str(exc)) from exc

    replaced = password_store(settings or get_settings()).upsert(entry)
    logger.info(
        "password.add name=%s account=%s length=%d config=%s replaced=%s",
        name,
        account,
        length,
        resolved.description,
        replaced,
    )
    return entry, replaced


def list_entries(settings: Optional[Settings] = None) -> list[PasswordEntry]:
    """Return stored passwords in insertion order."""
    return password_store(settings or get_settings()).list()
