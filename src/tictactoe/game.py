"""Core rules for classic 3x3 tic-tac-toe."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class Player(str, Enum):
    X = "X"
    O = "O"

    def opponent(self) -> "Player":
        return Player.O if self is Player.X else Player.X


class Outcome(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


Cell = Optional[Player]

BOARD_SIZE = 9

# Rows, then columns, then the two diagonals. Scan order matters.
WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

REASON_FINISHED = "Game already finished"
REASON_OUT_OF_RANGE = "Cell index out of range"
REASON_OCCUPIED = "Cell already occupied"


@dataclass(frozen=True)
class MoveResult:
    """What ``play_move`` hands back to the UI layer.

    ``mark`` is only set on an accepted move; ``reason`` only on a rejected one.
    """

    accepted: bool
    index: int
    mark: Optional[Player]
    outcome: Outcome
    winner: Optional[Player]
    reason: Optional[str] = None


@dataclass
class GameEngine:
    board: List[Cell] = field(default_factory=lambda: [None] * BOARD_SIZE)
    current_player: Player = Player.X
    outcome: Outcome = Outcome.IN_PROGRESS
    winner: Optional[Player] = None
    winning_line: Optional[Tuple[int, int, int]] = None
    moves: List[Tuple[Player, int]] = field(default_factory=list)

    # ---- API used by UI ----

    @property
    def is_over(self) -> bool:
        return self.outcome is not Outcome.IN_PROGRESS

    def available_moves(self) -> List[int]:
        if self.is_over:
            return []
        return [i for i, c in enumerate(self.board) if c is None]

    def play_move(self, index: int) -> MoveResult:
        """Place the current player's mark at ``index``.

        Illegal moves are routine input, so they come back as a rejected
        result and leave the state untouched.
        """
        if self.is_over:
            return self._reject(index, REASON_FINISHED)
        # bool is an int subclass but never a cell index
        if not isinstance(index, int) or isinstance(index, bool):
            return self._reject(index, REASON_OUT_OF_RANGE)
        if not 0 <= index < BOARD_SIZE:
            return self._reject(index, REASON_OUT_OF_RANGE)
        if self.board[index] is not None:
            return self._reject(index, REASON_OCCUPIED)

        player = self.current_player
        self.board[index] = player
        self.moves.append((player, index))
        logger.debug("%s played cell %d", player.value, index)
        self._update_state()

        if self.outcome is Outcome.IN_PROGRESS:
            self.current_player = player.opponent()
        else:
            logger.debug("Game ended: %s (winner=%s)", self.outcome.value, self.winner)

        return MoveResult(
            accepted=True,
            index=index,
            mark=player,
            outcome=self.outcome,
            winner=self.winner,
        )

    def reset(self) -> None:
        self.board = [None] * BOARD_SIZE
        self.current_player = Player.X
        self.outcome = Outcome.IN_PROGRESS
        self.winner = None
        self.winning_line = None
        self.moves = []

    def status_message(self) -> str:
        if self.outcome is Outcome.WON and self.winner is not None:
            return f"Player {self.winner.value} has won!"
        if self.outcome is Outcome.DRAW:
            return "Game ended in a draw!"
        return f"It's Player {self.current_player.value}'s turn"

    def snapshot(self) -> Dict[str, object]:
        """JSON-ready view of the game for rendering."""
        return {
            "cells": [c.value if c is not None else "" for c in self.board],
            "currentPlayer": self.current_player.value,
            "outcome": self.outcome.value,
            "winner": self.winner.value if self.winner else None,
            "winningLine": list(self.winning_line) if self.winning_line else None,
            "status": self.status_message(),
            "moves": [{"player": p.value, "cellIndex": i} for p, i in self.moves],
        }

    # ---- helpers ----

    def _reject(self, index: int, reason: str) -> MoveResult:
        logger.debug("Rejected move at %r: %s", index, reason)
        return MoveResult(
            accepted=False,
            index=index,
            mark=None,
            outcome=self.outcome,
            winner=self.winner,
            reason=reason,
        )

    def _update_state(self) -> None:
        for line in WINNING_LINES:
            a, b, c = line
            v = self.board[a]
            if v is not None and v == self.board[b] == self.board[c]:
                self.outcome = Outcome.WON
                self.winner = v
                self.winning_line = line
                return
        if all(c is not None for c in self.board):
            self.outcome = Outcome.DRAW
