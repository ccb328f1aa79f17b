"""Pydantic models for the three credential classes.

Field declaration order is the on-disk field order. Each model exposes a
`key` tuple used by the store for upsert and lookup.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class MFAEntry(BaseModel):
    """TOTP shared secret for one account/name pair.

    The secret is stored exactly as the user supplied it; normalization
    happens each time a code is generated.
    """

    account: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    secret: str = Field(..., min_length=1)
    period: int = Field(default=30, gt=0)

    @property
    def key(self) -> tuple[str, str]:
        return (self.account, self.name)


class PasswordEntry(BaseModel):
    """Generated password together with how it was generated."""

    name: str = Field(..., min_length=1)
    account: str = Field(..., min_length=1)
    password: str
    length: int = Field(..., gt=0)
    config: str = Field(default="", description="Character classes used")

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.account)


class PinEntry(BaseModel):
    """Generated numeric PIN."""

    name: str = Field(..., min_length=1)
    account: str = Field(..., min_length=1)
    pin: str = Field(..., pattern=r"^[0-9]+$")

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.account)
