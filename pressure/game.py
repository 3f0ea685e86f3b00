from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from pressure.config import GameConfig
from pressure.core import (
    COMMITTED_AI,
    REAL,
    Color,
    EventBus,
    ExecutionContext,
    GameNotActiveError,
    GameResult,
    GameSnapshot,
    HistoryEntry,
    HistoryManager,
    InvalidMoveError,
    Move,
    MoveEngine,
    MoveOutcome,
    capture_winner,
    generate_moves,
    initialize_snapshot,
)
from pressure.core.events import (
    AI_MOVE_EXECUTED,
    AI_MOVE_SELECTED,
    AI_THINKING,
    GAME_INITIALIZED,
    GAME_OVER,
    REDO_COMPLETED,
    TURN_CHANGED,
    UNDO_COMPLETED,
)
from pressure.search import SearchConfig, SearchEngine, SearchTask

LOGGER = logging.getLogger(__name__)

WIN_ALL_CAPTURED = "All opponent tokens captured"
WIN_NO_MOVES = "No valid moves available"

SearchFactory = Callable[[MoveEngine, SearchConfig], SearchEngine]


def default_search_factory(engine: MoveEngine, config: SearchConfig) -> SearchEngine:
    return SearchEngine(engine, config)


@dataclass
class PendingAITurn:
    task: SearchTask
    player: Color
    version: int


class Game:
    """Turn controller owning the live snapshot.

    Human moves go through ``play_move``; AI turns are split into
    ``begin_ai_turn`` (returns a steppable search task) and
    ``finish_ai_turn`` (commits the result unless it went stale).
    """

    def __init__(
        self,
        events: Optional[EventBus] = None,
        engine: Optional[MoveEngine] = None,
        history: Optional[HistoryManager] = None,
        search_factory: Optional[SearchFactory] = None,
    ) -> None:
        self.events = events if events is not None else EventBus()
        self.engine = engine if engine is not None else MoveEngine(self.events)
        self.history = history if history is not None else HistoryManager()
        self.search_factory = search_factory or default_search_factory
        self.config = GameConfig()
        self.snapshot: GameSnapshot = initialize_snapshot(self.config.board_size)
        self._active = False
        self._version = 0
        self._pending: Optional[PendingAITurn] = None

    # ------------------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_ai_processing(self) -> bool:
        return self._pending is not None

    @property
    def version(self) -> int:
        return self._version

    @property
    def current_player(self) -> Color:
        return self.snapshot.current_player

    def is_ai_turn(self) -> bool:
        return self._active and self.config.is_ai(self.snapshot.current_player)

    def legal_moves(self) -> List[Move]:
        if not self._active:
            return []
        return generate_moves(self.snapshot.grid, self.snapshot.current_player)

    # ------------------------------------------------------------------
    def start(self, config: Optional[GameConfig] = None) -> GameSnapshot:
        self._cancel_pending()
        self.config = config or GameConfig()
        self.snapshot = initialize_snapshot(self.config.board_size)
        self.history.clear()
        self._active = True
        self._version += 1
        LOGGER.info(
            "game started: white=%s black=%s size=%d",
            self.config.white_player_type,
            self.config.black_player_type,
            self.config.board_size,
        )
        self.events.emit(
            GAME_INITIALIZED,
            {
                "currentPlayer": self.snapshot.current_player,
                "blackPlayerType": self.config.black_player_type,
                "whitePlayerType": self.config.white_player_type,
                "blackAILevel": self.config.black_ai_level,
                "whiteAILevel": self.config.white_ai_level,
            },
        )
        self._announce_turn()
        return self.snapshot

    def play_move(self, move: Move) -> MoveOutcome:
        if not self._active:
            raise GameNotActiveError("No game is running.")
        if self._pending is not None:
            raise InvalidMoveError("An AI move is being processed.")
        return self._commit(move, REAL)

    # ------------------------------------------------------------------
    # AI turns
    # ------------------------------------------------------------------
    def begin_ai_turn(self) -> SearchTask:
        if not self._active:
            raise GameNotActiveError("No game is running.")
        if self._pending is not None:
            return self._pending.task

        color = self.snapshot.current_player
        level = self.config.ai_level(color)
        searcher = self.search_factory(self.engine, SearchConfig(level=level))
        self.events.emit(AI_THINKING, {"player": color, "level": level})
        task = searcher.start(self.snapshot, color)
        self._pending = PendingAITurn(task=task, player=color, version=self._version)
        return task

    def finish_ai_turn(self) -> bool:
        """Run the pending search to completion and commit its move.

        Returns ``False`` when there is nothing to commit: no pending turn,
        a cancelled search, or a game that moved on since the search began.
        """
        pending = self._pending
        if pending is None:
            return False
        result = pending.task.run()
        self._pending = None

        if result.cancelled or not self._active or self._version != pending.version:
            LOGGER.warning(
                "discarding stale AI result for %s (version %d, now %d)",
                pending.player.name,
                pending.version,
                self._version,
            )
            return False
        if result.move is None:
            return False

        self.events.emit(AI_MOVE_SELECTED, {"player": pending.player, "move": result.move})
        self._commit(result.move, COMMITTED_AI)
        self.events.emit(AI_MOVE_EXECUTED, {"player": pending.player})
        return True

    def play_ai_turn(self) -> bool:
        self.begin_ai_turn()
        return self.finish_ai_turn()

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def undo(self) -> bool:
        self._cancel_pending()
        entry = self.history.undo()
        if entry is None:
            return False
        self._restore(entry.prior_snapshot)
        self.events.emit(
            UNDO_COMPLETED,
            {"currentPlayer": self.snapshot.current_player, "isGameActive": self._active},
        )
        return True

    def redo(self) -> bool:
        self._cancel_pending()
        entry = self.history.redo()
        if entry is None:
            return False
        self._restore(entry.resulting_snapshot)
        self.events.emit(
            REDO_COMPLETED,
            {"currentPlayer": self.snapshot.current_player, "isGameActive": self._active},
        )
        return True

    # ------------------------------------------------------------------
    def _commit(self, move: Move, context: ExecutionContext) -> MoveOutcome:
        color = self.snapshot.current_player
        prior = self.snapshot.copy()
        version = self._version
        try:
            outcome = self.engine.play_turn(self.snapshot.grid, move, color, context, validate=True)
            self.snapshot.ply_count += 1
            self._version += 1
            self._resolve_turn(color)
        except BaseException:
            # A failing listener must not leave a half-applied move behind.
            self.snapshot = prior
            self._version = version
            raise

        self.history.record_move(
            HistoryEntry(
                move=move,
                player=color,
                prior_snapshot=prior,
                resulting_snapshot=self.snapshot.copy(),
                captured_tokens=outcome.captured,
                deactivated_tokens=outcome.deactivated,
                context=context,
            )
        )

        if self.snapshot.is_terminal:
            self._active = False
            winner = self.snapshot.winner
            LOGGER.info("game over: %s wins (%s)", winner.name, self.snapshot.win_reason)
            self.events.emit(
                GAME_OVER,
                {"winner": winner, "reason": self.snapshot.win_reason, "forAISimulation": False},
            )
        else:
            self._announce_turn()
        return outcome

    def _resolve_turn(self, mover: Color) -> None:
        grid = self.snapshot.grid
        opponent = mover.opponent
        winner = capture_winner(grid, mover)
        if winner is not None:
            self._end(winner, WIN_ALL_CAPTURED)
        else:
            self.snapshot.current_player = opponent
            if not generate_moves(grid, opponent):
                self._end(mover, WIN_NO_MOVES)

    def _end(self, winner: Color, reason: str) -> None:
        self.snapshot.result = GameResult.for_winner(winner)
        self.snapshot.win_reason = reason

    def _restore(self, snapshot: GameSnapshot) -> None:
        self.snapshot = snapshot.copy()
        self._active = not self.snapshot.is_terminal
        self._version += 1

    def _announce_turn(self) -> None:
        color = self.snapshot.current_player
        self.events.emit(TURN_CHANGED, {"player": color, "isAI": self.config.is_ai(color)})

    def _cancel_pending(self) -> None:
        pending = self._pending
        if pending is None:
            return
        pending.task.cancel()
        self._pending = None
        self._version += 1
        LOGGER.warning("cancelled AI search for %s", pending.player.name)
