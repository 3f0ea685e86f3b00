from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .capture import CapturedToken
from .errors import SimulationLeakError
from .events import REAL, ExecutionContext
from .rules import Move
from .state import Color, GameSnapshot, Position


@dataclass(frozen=True)
class HistoryEntry:
    move: Move
    player: Color
    prior_snapshot: GameSnapshot
    resulting_snapshot: GameSnapshot
    captured_tokens: Tuple[CapturedToken, ...] = field(default_factory=tuple)
    deactivated_tokens: Tuple[Position, ...] = field(default_factory=tuple)
    context: ExecutionContext = REAL


class HistoryManager:
    """Linear undo/redo stacks of committed moves.

    Entries hold full snapshots on both sides of the move, so undo and redo
    replace the live state wholesale rather than re-deriving it.
    """

    def __init__(self) -> None:
        self._undo: List[HistoryEntry] = []
        self._redo: List[HistoryEntry] = []

    def record_move(self, entry: HistoryEntry) -> None:
        if entry.context.is_simulation:
            raise SimulationLeakError("Simulated moves must never be recorded in history.")
        self._undo.append(entry)
        self._redo.clear()

    def undo(self) -> Optional[HistoryEntry]:
        if not self._undo:
            return None
        entry = self._undo.pop()
        self._redo.append(entry)
        return entry

    def redo(self) -> Optional[HistoryEntry]:
        if not self._redo:
            return None
        entry = self._redo.pop()
        self._undo.append(entry)
        return entry

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    @property
    def entries(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._undo)

    def __len__(self) -> int:
        return len(self._undo)
