"""
Mutation log for debugging.

Each dispatched mutation can be recorded as an immutable MutationRecord.
MutationLog keeps the most recent records in dispatch order, bounded by a
limit, and exports them as JSON-serializable dicts (provided the mutation
values themselves are).

Design:
- Records are frozen dataclasses with UUID identity
- Sequence numbers are monotonic per log, even after old records are evicted
- No references to state trees; only the descriptors
"""

from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List
import time
import uuid

from livestate.mutations import Mutation


@dataclass(frozen=True)
class MutationRecord:
    """One dispatched mutation, stamped with when and in which order."""
    id: str  # UUID string
    sequence: int
    timestamp: float
    mutation: Mutation

    @classmethod
    def create(cls, mutation: Mutation, sequence: int) -> 'MutationRecord':
        """Create a record with auto-generated ID and timestamp."""
        return cls(
            id=str(uuid.uuid4()),
            sequence=sequence,
            timestamp=time.time(),
            mutation=mutation,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Export to JSON-serializable dict."""
        return {
            'id': self.id,
            'sequence': self.sequence,
            'timestamp': self.timestamp,
            'mutation': self.mutation.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MutationRecord':
        """Import from dict (e.g., loaded from JSON)."""
        return cls(
            id=data['id'],
            sequence=data['sequence'],
            timestamp=data['timestamp'],
            mutation=Mutation.from_dict(data['mutation']),
        )


class MutationLog:
    """Bounded, ordered log of MutationRecords."""

    def __init__(self, limit: int):
        self.limit = limit
        self._records: Deque[MutationRecord] = deque(maxlen=limit)
        self._sequence = 0

    def record(self, mutation: Mutation) -> MutationRecord:
        self._sequence += 1
        entry = MutationRecord.create(mutation, self._sequence)
        self._records.append(entry)
        return entry

    def records(self) -> List[MutationRecord]:
        """Records from oldest to newest."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def clear(self) -> None:
        self._records.clear()

    def export_to_dict(self) -> Dict[str, Any]:
        return {
            'limit': self.limit,
            'records': [entry.to_dict() for entry in self._records],
        }
