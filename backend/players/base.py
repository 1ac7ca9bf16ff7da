"""
Base player interface for headless sessions.
"""

from typing import List, Set, Tuple

from domain.constants import DIRECTIONS
from domain.game_state import GameState


class Player:
    """
    Base class/interface for scripted input.

    A player stands in for the keyboard/touch collaborator: it looks at a
    snapshot and returns the direction to request before the next tick.
    """

    def get_move(self, game_state: GameState) -> str:
        """
        Return a move direction given the current game state.

        Args:
            game_state: Current state of the game

        Returns:
            One of: "UP", "DOWN", "LEFT", "RIGHT"
        """
        raise NotImplementedError


def step(cell: Tuple[int, int], move: str, grid_size: int) -> Tuple[int, int]:
    """The neighbouring cell in a direction, wrapping at the edges."""
    dx, dy = DIRECTIONS[move]
    return ((cell[0] + dx) % grid_size, (cell[1] + dy) % grid_size)


def blocked_cells(game_state: GameState) -> Set[Tuple[int, int]]:
    """Cells that kill the snake if the head enters them next tick."""
    return set(game_state.walls) | set(game_state.snake)


def safe_moves(game_state: GameState) -> List[str]:
    """Directions whose next cell is neither wall nor body."""
    head = game_state.snake[0]
    blocked = blocked_cells(game_state)
    return [
        move for move in DIRECTIONS
        if step(head, move, game_state.grid_size) not in blocked
    ]
