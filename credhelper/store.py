"""JSON file repository for credential entries.

One store instance owns one file holding `{"entries": [...]}`. Every
operation loads the whole collection and every mutation rewrites it.

Known limitation: there is no locking. Two processes writing the same file
concurrently are last-write-wins and one update is lost. Writes go through a
temporary sibling file and `os.replace`, so a reader never sees a half
written file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import ConfigurationError, StorageError
from .models import MFAEntry, PasswordEntry, PinEntry
from .settings import Settings


logger = logging.getLogger(__name__)

EntryT = TypeVar("EntryT", bound=BaseModel)

ENTRIES_FIELD = "entries"
DIR_MODE = 0o700


class JsonCredentialStore(Generic[EntryT]):
    """Ordered collection of entries persisted as a single JSON file.

    Entries must expose a `key` tuple. Upserting an existing key replaces the
    entry in place; a new key is appended, so order is insertion order.
    """

    def __init__(self, path: Path, model: type[EntryT]) -> None:
        self.path = Path(path)
        self.model = model

    def load(self) -> list[EntryT]:
        """Read all entries.

        Returns an empty list when the file does not exist or is empty.

        Raises:
            StorageError: if the file cannot be read or parsed.
        """
        if not self.path.exists():
            logger.debug("store.load.missing path=%s", self.path)
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"failed to read {self.path}: {exc}") from exc
        if not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageError(f"failed to parse {self.path}: {exc}") from exc
        if not isinstance(data, dict) or not isinstance(data.get(ENTRIES_FIELD, []), list):
            raise StorageError(
                f"failed to parse {self.path}: expected an object with an '{ENTRIES_FIELD}' list"
            )

        try:
            entries = [self.model.model_validate(item) for item in data.get(ENTRIES_FIELD, [])]
        except PydanticValidationError as exc:
            raise StorageError(f"malformed entry in {self.path}: {exc}") from exc
        logger.debug("store.load path=%s entries=%d", self.path, len(entries))
        return entries

    def save(self, entries: list[EntryT]) -> None:
        """Rewrite the file with `entries`.

        Raises:
            ConfigurationError: if the directory cannot be created.
            StorageError: if the file cannot be written.
        """
        directory = self.path.parent
        try:
            directory.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigurationError(f"failed to create config directory {directory}: {exc}") from exc

        payload = {ENTRIES_FIELD: [entry.model_dump(mode="json") for entry in entries]}
        data = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"

        tmp_name: Optional[str] = None
        try:
            # mkstemp creates the file readable and writable by the owner only
            fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f".{self.path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(data)
            os.replace(tmp_name, self.path)
        except (OSError, UnicodeEncodeError) as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"failed to write {self.path}: {exc}") from exc
        logger.debug("store.save path=%s entries=%d", self.path, len(entries))

    def upsert(self, entry: EntryT) -> bool:
        """Replace the entry with the same key, or append it.

        Returns:
            True if an existing entry was replaced.
        """
        entries = self.load()
        key = entry.key  # type: ignore[attr-defined]
        replaced = False
        for index, existing in enumerate(entries):
            if existing.key == key:  # type: ignore[attr-defined]
                entries[index] = entry
                replaced = True
                break
        else:
            entries.append(entry)
        self.save(entries)
        return replaced

    def find(self, *key: str) -> Optional[EntryT]:
        """Return the entry whose key equals `key`, or None."""
        for entry in self.load():
            if entry.key == key:  # type: ignore[attr-defined]
                return entry
        return None

    def list(self) -> list[EntryT]:
        """Return all entries in stored order."""
        return self.load()


def mfa_store(settings: Settings) -> JsonCredentialStore[MFAEntry]:
    return JsonCredentialStore(settings.mfa_path, MFAEntry)


def password_store(settings: Settings) -> JsonCredentialStore[PasswordEntry]:
    return JsonCredentialStore(settings.password_path, PasswordEntry)


def pin_store(settings: Settings) -> JsonCredentialStore[PinEntry]:
    return JsonCredentialStore(settings.pin_path, PinEntry)
