"""Error hierarchy shared by every credhelper component.

Components raise these and never exit the process. Only the click layer in
`credhelper.cli` turns them into a message and a non-zero exit status.
"""

from __future__ import annotations


class CredentialHelperError(Exception):
    """Base class for all errors surfaced to the command layer."""


class ConfigurationError(CredentialHelperError):
    """Home directory missing or configuration directory unusable."""


class StorageError(CredentialHelperError):
    """Backing file unreadable, unwritable, or holding malformed content."""


class ValidationError(CredentialHelperError):
    """Missing identifying fields or non-positive length/period."""


class EmptyAlphabetError(ValidationError):
    """Resolved password alphabet has no characters to sample from."""


class CryptoInputError(CredentialHelperError):
    """Shared secret fails Base32 normalization or decoding."""


class NotFoundError(CredentialHelperError):
    """Lookup by key found no matching entry."""
