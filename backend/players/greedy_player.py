"""
Greedy player - follows the shortest safe path to the fruit.
"""

from collections import deque
from typing import Dict, Optional, Tuple

from domain.constants import DIRECTIONS
from domain.game_state import GameState
from .base import blocked_cells, step
from .random_player import RandomPlayer


class GreedyPlayer(RandomPlayer):
    """
    Breadth-first search on the wrapping board from the head to the fruit
    (or the kiwi when no fruit is live), treating walls and the current body
    as blocked. Falls back to a random safe move when nothing is reachable.
    """

    def _first_move_towards(self, game_state: GameState, goal: Tuple[int, int]) -> Optional[str]:
        head = game_state.snake[0]
        blocked = blocked_cells(game_state)
        first_move: Dict[Tuple[int, int], str] = {}
        queue = deque()

        for move in DIRECTIONS:
            cell = step(head, move, game_state.grid_size)
            if cell in blocked or cell in first_move:
                continue
            first_move[cell] = move
            queue.append(cell)

        while queue:
            cell = queue.popleft()
            if cell == goal:
                return first_move[cell]
            for move in DIRECTIONS:
                nxt = step(cell, move, game_state.grid_size)
                if nxt in blocked or nxt in first_move:
                    continue
                first_move[nxt] = first_move[cell]
                queue.append(nxt)
        return None

    def get_move(self, game_state: GameState) -> str:
        goal = game_state.fruit or game_state.kiwi
        if goal is not None:
            move = self._first_move_towards(game_state, goal)
            if move is not None:
                return move
        return super().get_move(game_state)
