"""
Persistence backends.

Both backends hand out and accept the whole document at once: ``load()``
returns a fresh ``Store`` the caller may mutate freely, ``save()`` replaces the
persisted document or raises ``PersistenceError`` without touching it.
"""

from __future__ import annotations

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from yieldfarm.core.errors import PersistenceError
from yieldfarm.models import DEFAULT_WALLET_ADDRESS, Store, StoreSettings

logger = logging.getLogger(__name__)


def default_store(wallet_address: str = DEFAULT_WALLET_ADDRESS) -> Store:
    return Store(accounts=[], settings=StoreSettings(wallet_address=wallet_address))


class StoreBackend(ABC):
    """Whole-document persistence collaborator."""

    @abstractmethod
    def load(self) -> Store:
        """Return a private copy of the persisted document."""

    @abstractmethod
    def save(self, store: Store) -> None:
        """Replace the persisted document."""


class MemoryStore(StoreBackend):
    """In-process document, used for tests and the ``memory`` deployment."""

    def __init__(self, wallet_address: str = DEFAULT_WALLET_ADDRESS):
        self._document = default_store(wallet_address)

    def load(self) -> Store:
        # Deep copy so that mutations of a discarded load never leak back
        return self._document.model_copy(deep=True)

    def save(self, store: Store) -> None:
        self._document = store.model_copy(deep=True)


class JsonFileStore(StoreBackend):
    """Single pretty-printed JSON file, rewritten in full on every save."""

    def __init__(self, path: str | os.PathLike, wallet_address: str = DEFAULT_WALLET_ADDRESS):
        self.path = Path(path)
        self.wallet_address = wallet_address

    def _default(self) -> Store:
        return default_store(self.wallet_address)

    def initialize(self) -> None:
        """Create the parent directory and an empty document if missing."""
        if self.path.exists():
            return
        self.save(self._default())
        logger.info("Database initialized at %s", self.path)

    def load(self) -> Store:
        try:
            self.initialize()
            raw = self.path.read_text(encoding="utf-8")
            return Store.model_validate_json(raw)
        except (OSError, ValidationError, PersistenceError):
            # corrupt or unreadable: serve an empty but valid document
            logger.exception("Error reading database %s, falling back to empty store", self.path)
            return self._default()

    def save(self, store: Store) -> None:
        payload = store.model_dump_json(indent=2)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.exception("Error writing database %s", self.path)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError() from exc
