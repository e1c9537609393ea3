"""Atomic snapshot holder for the current permit list."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from .models import PermitEntity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PermitSnapshot:
    """Immutable permit list produced by one refresh."""

    sequence: int
    entities: tuple[PermitEntity, ...]
    days_back: Optional[int] = None
    fetched_at: Optional[datetime] = None

    @property
    def is_loaded(self) -> bool:
        return self.fetched_at is not None


class PermitStore:
    """Holds one snapshot reference; replacing it is a single swap.

    Requests are tagged with a monotonic sequence number. A completion older
    than the snapshot already committed is discarded.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._next_sequence = 0
        self._snapshot = PermitSnapshot(sequence=0, entities=())
        self._last_error: Optional[str] = None
        self._last_error_sequence = 0

    @property
    def snapshot(self) -> PermitSnapshot:
        return self._snapshot

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def begin_request(self) -> int:
        with self._lock:
            self._next_sequence += 1
            return self._next_sequence

    def commit(self, sequence: int, entities: Iterable[PermitEntity], days_back: Optional[int] = None) -> bool:
        snapshot = PermitSnapshot(
            sequence=sequence,
            entities=tuple(entities),
            days_back=days_back,
            fetched_at=datetime.now(timezone.utc),
        )
        with self._lock:
            if sequence <= self._snapshot.sequence:
                logger.warning(
                    "Dropping stale permit result #%d (current #%d)", sequence, self._snapshot.sequence
                )
                return False
            self._snapshot = snapshot
            if sequence >= self._last_error_sequence:
                self._last_error = None
        logger.info("Committed permit snapshot #%d with %d entities", sequence, len(snapshot.entities))
        return True

    def record_failure(self, sequence: int, error: str) -> bool:
        with self._lock:
            if sequence <= self._snapshot.sequence or sequence < self._last_error_sequence:
                return False
            self._last_error = error
            self._last_error_sequence = sequence
        return True
