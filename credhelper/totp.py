"""RFC 6238 TOTP engine built on RFC 4226 HOTP.

Everything here is a pure function of its arguments: no file access, no
printing, no logging. Callers that want tracing log around these calls.
"""

from __future__ import annotations

import base64
import binascii
import hmac
import re
import struct
import time
from dataclasses import dataclass
from hashlib import sha1
from typing import Optional

from .errors import CryptoInputError, ValidationError


DEFAULT_DIGITS = 6
DEFAULT_PERIOD = 30

_NON_BASE32 = re.compile(r"[^A-Z2-7]")
# Remainders 1, 3 and 6 are not valid unpadded lengths; leave them unpadded
# so decoding rejects them.
_PADDING = {0: "", 2: "======", 4: "====", 5: "===", 7: "="}


@dataclass(frozen=True, slots=True)
class TotpCode:
    """A generated code together with its time window."""

    code: str
    remaining: int
    counter: int
    offset: int = 0


def normalize_secret(secret: str) -> str:
    """Canonicalize a user-supplied Base32 secret.

    Drops non-ASCII characters, uppercases, drops anything else outside
    `A-Z2-7` (spaces, hyphens, existing padding), then pads with `=` to a
    multiple of 8.
    """
    ascii_only = secret.encode("ascii", "ignore").decode("ascii")
    cleaned = _NON_BASE32.sub("", ascii_only.upper())
    return cleaned + _PADDING.get(len(cleaned) % 8, "")


def decode_secret(secret: str) -> bytes:
    """Normalize and decode a Base32 secret into raw key bytes.

    Raises:
        CryptoInputError: if nothing usable remains or decoding fails.
    """
    normalized = normalize_secret(secret)
    if not normalized:
        raise CryptoInputError("invalid secret key: no Base32 characters found")
    try:
        return base64.b32decode(normalized)
    except binascii.Error as exc:
        raise CryptoInputError(f"invalid secret key after cleaning: {exc}") from exc


def _check_period(period: int) -> None:
    if isinstance(period, bool) or not isinstance(period, int) or period <= 0:
        raise ValidationError(f"period must be a positive integer, got {period!r}")


def time_counter(now: int, period: int) -> int:
    """Return the TOTP moving factor `floor(now / period)`."""
    _check_period(period)
    counter = int(now) // period
    if counter < 0:
        raise ValidationError("time counter must not be negative")
    return counter


def seconds_remaining(now: int, period: int) -> int:
    """Seconds until the counter rolls over; always in `[1, period]`."""
    _check_period(period)
    return period - (int(now) % period)


def truncate(digest: bytes) -> int:
    """RFC 4226 dynamic truncation to a non-negative 31-bit integer."""
    offset = digest[-1] & 0x0F
    (value,) = struct.unpack(">I", digest[offset : offset + 4])
    return value & 0x7FFFFFFF


def hotp(key: bytes, counter: int, digits: int = DEFAULT_DIGITS) -> str:
    """Generate an HOTP code using HMAC-SHA1.

    Args:
        key: Raw shared secret bytes.
        counter: Moving factor, packed as an 8-byte big-endian integer.
        digits: Number of digits in the output code.
    """
    counter_bytes = struct.pack(">Q", counter)
    digest = hmac.new(key, counter_bytes, sha1).digest()
    return str(truncate(digest) % (10**digits)).zfill(digits)


def totp(key: bytes, period: int, now: int, offset: int = 0) -> TotpCode:
    """Compute the TOTP code for `now + offset`.

    Args:
        key: Raw shared secret bytes.
        period: Time step in seconds.
        now: Unix time in seconds.
        offset: Seconds added to `now`; used for clock drift diagnosis.
    """
    shifted = int(now) + int(offset)
    counter = time_counter(shifted, period)
    return TotpCode(
        code=hotp(key, counter),
        remaining=seconds_remaining(shifted, period),
        counter=counter,
        offset=int(offset),
    )


def totp_for_secret(
    secret: str,
    period: int = DEFAULT_PERIOD,
    now: Optional[int] = None,
    offset: int = 0,
) -> TotpCode:
    """Decode a Base32 secret and compute its current TOTP code."""
    _check_period(period)
    key = decode_secret(secret)
    unix_time = int(now if now is not None else time.time())
    return totp(key, period, unix_time, offset)


def totp_window(key: bytes, period: int, now: int, steps: int = 2) -> list[TotpCode]:
    """Codes for `steps` periods either side of `now`, oldest first."""
    if steps < 0:
        raise ValidationError("steps must not be negative")
    return [totp(key, period, now, i * period) for i in range(-steps, steps + 1)]
