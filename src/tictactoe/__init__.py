"""Tic-tac-toe package exposing the game engine and the web application."""

from .game import GameEngine, MoveResult, Outcome, Player
from .ui import app

__all__ = ["GameEngine", "MoveResult", "Outcome", "Player", "app"]
