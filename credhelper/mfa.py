"""MFA (TOTP) entry management: setup, list and code generation.

Secrets are stored as given. They are normalized and decoded every time a
code is generated, and once at setup time to reject bad input early.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from .errors import NotFoundError, ValidationError
from .models import MFAEntry
from .settings import Settings, get_settings
from .store import mfa_store
from .totp import DEFAULT_PERIOD, TotpCode, decode_secret, totp, totp_window


logger = logging.getLogger(__name__)


def _require(**fields: str) -> None:
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ValidationError(f"{', '.join(missing)} required")


def setup(
    account: str,
    name: str,
    secret: str,
    period: int = DEFAULT_PERIOD,
    settings: Optional[Settings] = None,
) -> bool:
    """Store (or replace) the secret for `account`/`name`.

    The secret must decode and produce a code before anything is written.

    Returns:
        True if an existing entry was replaced.
    """
    _require(account=account, name=name, secret=secret)
    key = decode_secret(secret)
    totp(key, period, int(time.time()))

    try:
        entry = MFAEntry(account=account, name=name, secret=secret, period=period)
    except PydanticValidationError as exc:
        raise ValidationError(str(exc)) from exc

    replaced = mfa_store(settings or get_settings()).upsert(entry)
    logger.info("mfa.setup account=%s name=%s period=%d replaced=%s", account, name, period, replaced)
    return replaced


def list_entries(settings: Optional[Settings] = None) -> list[MFAEntry]:
    """Return stored MFA entries in insertion order."""
    return mfa_store(settings or get_settings()).list()


def _lookup(account: str, name: str, settings: Optional[Settings]) -> MFAEntry:
    _require(account=account, name=name)
    entry = mfa_store(settings or get_settings()).find(account, name)
    if entry is None:
        raise NotFoundError(f"MFA entry not found for account '{account}' and name '{name}'")
    return entry


def generate(
    account: str,
    name: str,
    now: Optional[int] = None,
    offset: int = 0,
    settings: Optional[Settings] = None,
) -> TotpCode:
    """Generate the current code for a stored entry.

    Raises:
        NotFoundError: if no entry matches `account`/`name`.
        CryptoInputError: if the stored secret no longer decodes.
    """
    entry = _lookup(account, name, settings)
    key = decode_secret(entry.secret)
    unix_time = int(now if now is not None else time.time())
    result = totp(key, entry.period, unix_time, offset)
    logger.debug(
        "mfa.generate account=%s name=%s time=%d offset=%d counter=%d remaining=%d",
        account,
        name,
        unix_time,
        offset,
        result.counter,
        result.remaining,
    )
    return result


def generate_window(
    account: str,
    name: str,
    steps: int = 2,
    now: Optional[int] = None,
    offset: int = 0,
    settings: Optional[Settings] = None,
) -> list[TotpCode]:
    """Codes for neighbouring periods around `now + offset`, for diagnosing
    clock drift. Each code's `offset` is relative to the shifted time.
    """
    entry = _lookup(account, name, settings)
    key = decode_secret(entry.secret)
    unix_time = int(now if now is not None else time.time())
    codes = totp_window(key, entry.period, unix_time + int(offset), steps)
    logger.debug("mfa.window account=%s name=%s steps=%d offset=%d", account, name, steps, offset)
    return codes
