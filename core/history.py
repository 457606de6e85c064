import uuid
from collections import deque
from dataclasses import dataclass
from typing import List, Optional

from core.components import CalculationResult
from core.config import DEFAULT_CONFIG
from core.models import CircuitConfiguration, EnvironmentalConditions

@dataclass(frozen=True)
class HistoryEntry:
    id: str
    timestamp: str
    circuit: CircuitConfiguration
    environment: Optional[EnvironmentalConditions]
    short_circuit_current_ka: Optional[float]
    result: CalculationResult

class CalculationHistory:
    """In-memory FIFO of past calculations, newest first. Oldest entries drop off at capacity."""

    def __init__(self, limit: int = DEFAULT_CONFIG.history_limit):
        self._entries = deque(maxlen=limit)

    def add(self, circuit: CircuitConfiguration, result: CalculationResult,
            environment: Optional[EnvironmentalConditions] = None,
            short_circuit_current_ka: Optional[float] = None) -> HistoryEntry:
        entry = HistoryEntry(
            id=uuid.uuid4().hex,
            timestamp=result.calculated_at,
            circuit=circuit,
            environment=environment,
            short_circuit_current_ka=short_circuit_current_ka,
            result=result,
        )
        self._entries.appendleft(entry)
        return entry

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def delete(self, entry_id: str) -> bool:
        entry = self.get(entry_id)
        if entry is None:
            return False
        self._entries.remove(entry)
        return True

    def clear(self) -> None:
        self._entries.clear()

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
