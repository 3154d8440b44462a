# Area: Core
"""
mental_poker._core.keys - Secret material custody
=================================================

The player's evolving key record ("Keys") has exactly one owner at a
time: the session, or the ledger command it was handed to. KeySlot
makes that explicit. take() empties the slot, put() refills it, and
both refuse to duplicate or read material that is not there.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from ..errors import KeyCustodyError

logger = logging.getLogger("mental_poker.core.keys")

K = TypeVar("K")


@dataclass(frozen=True)
class HandSecret:
    """The (secret, inverse) pair a hand's shuffle was encrypted with."""
    secret: Any
    inverse: Any


class KeySlot(Generic[K]):
    """Option slot for secret material that is moved, never copied."""

    def __init__(self) -> None:
        self._keys: Optional[K] = None

    @property
    def is_held(self) -> bool:
        return self._keys is not None

    def take(self) -> K:
        """Move the keys out; the slot is empty afterwards."""
        if self._keys is None:
            raise KeyCustodyError("No secret material held (already handed off?)")
        keys, self._keys = self._keys, None
        return keys

    def put(self, keys: K) -> None:
        """Move keys (back) in; refuses to overwrite material still held."""
        if keys is None:
            raise KeyCustodyError("Cannot store empty secret material")
        if self._keys is not None:
            raise KeyCustodyError("Secret material already held; refusing to duplicate")
        self._keys = keys

    def replace(self, keys: K) -> Optional[K]:
        """Install the keys of a new hand, returning (and dropping) the old ones."""
        old, self._keys = self._keys, None
        self.put(keys)
        if old is not None:
            logger.debug("Previous hand's secret material discarded")
        return old
