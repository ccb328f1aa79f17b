"""Password and PIN generation over configurable alphabets.

Defines:
- sample: unbiased CSPRNG sampling from an arbitrary alphabet
- SpecialCharacters: which special characters a password may use
- PasswordPolicy: the caller's requested character classes
- ResolvedAlphabet: the concrete alphabet and description actually used
- generate_password / generate_pin

The policy is the user's intent and is never mutated. `PasswordPolicy.resolve`
applies the "nothing requested means everything" fallback exactly once and the
resolved description is what gets persisted.
"""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .errors import EmptyAlphabetError, ValidationError


LOWERCASE = string.ascii_lowercase
UPPERCASE = string.ascii_uppercase
DIGITS = string.digits
DEFAULT_SPECIAL = "!@#$%^&*()_+-=[]{}|;:,.<>?"

DEFAULT_PASSWORD_LENGTH = 16
DEFAULT_PIN_LENGTH = 4

# CLI sentinel selecting DEFAULT_SPECIAL
DEFAULT_SPECIAL_KEYWORD = "default"


def _check_length(length: int, what: str) -> None:
    if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
        raise ValidationError(f"{what} length must be greater than 0")


def sample(alphabet: str, length: int) -> str:
    """Draw `length` characters uniformly at random from `alphabet`.

    `secrets.randbelow` rejection-samples, so every character has the same
    probability regardless of the alphabet size.
    """
    if not alphabet:
        raise EmptyAlphabetError("no characters available for generation")
    size = len(alphabet)
    return "".join(alphabet[secrets.randbelow(size)] for _ in range(length))


class SpecialMode(str, Enum):
    """How special characters are chosen for a password."""

    NONE = "none"
    DEFAULT = "default"
    CUSTOM = "custom"


class SpecialCharacters(BaseModel):
    """Special character selection: none, the built-in set, or a custom set."""

    model_config = ConfigDict(frozen=True)

    mode: SpecialMode = SpecialMode.NONE
    chars: str = ""

    @classmethod
    def none(cls) -> SpecialCharacters:
        return cls(mode=SpecialMode.NONE)

    @classmethod
    def default(cls) -> SpecialCharacters:
        return cls(mode=SpecialMode.DEFAULT)

    @classmethod
    def custom(cls, chars: str) -> SpecialCharacters:
        return cls(mode=SpecialMode.CUSTOM, chars=chars)

    @classmethod
    def from_option(cls, value: str | None) -> SpecialCharacters:
        """Map the `-s` command line value onto a variant.

        An absent or empty value means no special characters, the keyword
        `default` selects the built-in set, anything else is used verbatim.
        """
        if not value:
            return cls.none()
        if value == DEFAULT_SPECIAL_KEYWORD:
            return cls.default()
        return cls.custom(value)

    @property
    def characters(self) -> str:
        if self.mode is SpecialMode.DEFAULT:
            return DEFAULT_SPECIAL
        if self.mode is SpecialMode.CUSTOM:
            return self.chars
        return ""


@dataclass(frozen=True, slots=True)
class ResolvedAlphabet:
    """Concrete alphabet produced from a policy."""

    alphabet: str
    description: str
    fallback_applied: bool = False


class PasswordPolicy(BaseModel):
    """Character classes requested for a password."""

    model_config = ConfigDict(frozen=True)

    include_lower: bool = False
    include_upper: bool = False
    include_digits: bool = False
    special: SpecialCharacters = Field(default_factory=SpecialCharacters.none)

    @property
    def is_empty_request(self) -> bool:
        """True when no class was requested and no special set was chosen."""
        return (
            not self.include_lower
            and not self.include_upper
            and not self.include_digits
            and self.special.mode is SpecialMode.NONE
        )

    def resolve(self) -> ResolvedAlphabet:
        """Build the alphabet and its description.

        An empty request falls back to all four classes with the default
        special set. An explicit custom set that happens to be empty does
        not trigger the fallback.
        """
        policy = self
        fallback = self.is_empty_request
        if fallback:
            policy = PasswordPolicy(
                include_lower=True,
                include_upper=True,
                include_digits=True,
                special=SpecialCharacters.default(),
            )

        parts: list[str] = []
        chunks: list[str] = []
        if policy.include_lower:
            chunks.append(LOWERCASE)
            parts.append("lowercase")
        if policy.include_upper:
            chunks.append(UPPERCASE)
            parts.append("uppercase")
        if policy.include_digits:
            chunks.append(DIGITS)
            parts.append("digits")
        special = policy.special.characters
        if special:
            chunks.append(special)
            parts.append(f"special({special})")

        # dict.fromkeys keeps first-seen order and drops repeats, so a
        # character listed twice is not sampled twice as often
        alphabet = "".join(dict.fromkeys("".join(chunks)))
        description = ", ".join(parts)
        if fallback:
            description += " (default)"
        return ResolvedAlphabet(alphabet=alphabet, description=description, fallback_applied=fallback)


def generate_password(length: int, policy: PasswordPolicy) -> tuple[str, ResolvedAlphabet]:
    """Generate a password and return it with the alphabet actually used.

    Raises:
        ValidationError: if `length` is not positive.
        EmptyAlphabetError: if the resolved alphabet is empty.
    """
    _check_length(length, "password")
    resolved = policy.resolve()
    if not resolved.alphabet:
        raise EmptyAlphabetError("no characters available for password generation")
    return sample(resolved.alphabet, length), resolved


def generate_pin(length: int = DEFAULT_PIN_LENGTH) -> str:
    """Generate `length` uniformly random decimal digits."""
    _check_length(length, "PIN")
    return sample(DIGITS, length)
