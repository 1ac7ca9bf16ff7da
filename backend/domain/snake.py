"""
Snake entity for the game engine.
"""

from collections import deque
from typing import List, Optional, Tuple

from .constants import DIRECTIONS, GRID_SIZE, INITIAL_SNAKE, OPPOSITES, UP, VALID_MOVES


class Snake:
    """
    Represents the player's snake and owns its movement rules.

    Attributes:
        positions: deque of (x, y) from head at index 0 to tail at the end
        direction: the direction of the last applied move
        pending_direction: most recent requested direction not yet applied
        alive: whether this snake is still alive
        death_reason: 'self' when the snake ran into its own body
        grid_size: board width/height; both axes wrap around
    """

    def __init__(
        self,
        positions: Optional[List[Tuple[int, int]]] = None,
        direction: str = UP,
        grid_size: int = GRID_SIZE
    ):
        self.grid_size = grid_size
        self.positions = deque(positions if positions is not None else INITIAL_SNAKE)
        self.direction = direction
        self.pending_direction: Optional[str] = None
        self.alive = True
        self.death_reason: Optional[str] = None
        self._owed_growth = 0

    @property
    def head(self) -> Tuple[int, int]:
        """Return the head position (first element)."""
        return self.positions[0]

    def __len__(self):
        return len(self.positions)

    def __contains__(self, cell):
        return cell in self.positions

    def change_direction(self, direction: str) -> None:
        """
        Buffer a direction for the next move.

        Only the latest request is kept. Reversals are not rejected here but
        when the move is applied, against the direction actually travelled.
        """
        if direction not in VALID_MOVES:
            raise ValueError(f"Unknown direction '{direction}'")
        self.pending_direction = direction

    def grow(self) -> None:
        """Keep the tail on the next move, lengthening the snake by one."""
        self._owed_growth += 1

    def next_head(self) -> Tuple[int, int]:
        """Where the head would land if it moved in the current direction."""
        dx, dy = DIRECTIONS[self.direction]
        hx, hy = self.head
        return ((hx + dx) % self.grid_size, (hy + dy) % self.grid_size)

    def move(self) -> bool:
        """
        Advance one cell.

        Returns:
            True if the snake is alive after the move.
        """
        if not self.alive:
            return False

        pending = self.pending_direction
        self.pending_direction = None
        if pending is not None and pending != OPPOSITES[self.direction]:
            self.direction = pending

        new_head = self.next_head()

        # The tail cell still counts: it has not been vacated yet
        if new_head in self.positions:
            self.alive = False
            self.death_reason = "self"
            return False

        self.positions.appendleft(new_head)
        if self._owed_growth:
            self._owed_growth -= 1
        else:
            self.positions.pop()
        return True

    def reset(self) -> None:
        """Back to the three-cell spawn body heading up."""
        self.positions = deque(INITIAL_SNAKE)
        self.direction = UP
        self.pending_direction = None
        self.alive = True
        self.death_reason = None
        self._owed_growth = 0

    def __repr__(self):
        return f"<Snake head={self.head} len={len(self.positions)} dir={self.direction} alive={self.alive}>"
