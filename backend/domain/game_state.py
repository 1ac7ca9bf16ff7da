"""
GameState entity - a snapshot of the session at a point in time.
"""

from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from .constants import GRID_SIZE


class GameState:
    """
    A snapshot of the session handed to whatever renders it.

    Attributes:
        phase: START, COUNTDOWN, PLAYING, DEATH or VICTORY
        mode: DAILY, CLASSIC or TUTORIAL (None before a mode is chosen)
        snake: list of (x, y), head first
        direction: the snake's current direction of travel
        fruit: (x, y) of the live fruit, or None
        kiwi: (x, y) of the live bonus item, or None
        walls: frozenset of wall cells
        score: fruits eaten
        bonus_score: points from kiwis
        lives: deaths so far (lower is better)
        elapsed_time: whole seconds of play
        target_fruits: fruits needed for victory, None when endless
        total_kiwis: kiwi quota, None when endless
        kiwi_count: kiwis eaten
        countdown: remaining countdown value while in COUNTDOWN
        speed: current tick interval in ms
        fruit_index: cursor into the fruit sequence
        daily_number: puzzle number for daily sessions
        next_puzzle_in: countdown text shown on a daily victory
        grid_size: board width/height
    """

    def __init__(
        self,
        phase: str,
        mode: Optional[str],
        snake: List[Tuple[int, int]],
        direction: str,
        fruit: Optional[Tuple[int, int]],
        kiwi: Optional[Tuple[int, int]],
        walls: FrozenSet[Tuple[int, int]],
        score: int,
        bonus_score: int,
        lives: int,
        elapsed_time: int,
        target_fruits: Optional[int],
        total_kiwis: Optional[int],
        kiwi_count: int,
        countdown: int,
        speed: int,
        fruit_index: int,
        daily_number: Optional[int] = None,
        next_puzzle_in: Optional[str] = None,
        grid_size: int = GRID_SIZE
    ):
        self.phase = phase
        self.mode = mode
        self.snake = snake
        self.direction = direction
        self.fruit = fruit
        self.kiwi = kiwi
        self.walls = walls
        self.score = score
        self.bonus_score = bonus_score
        self.lives = lives
        self.elapsed_time = elapsed_time
        self.target_fruits = target_fruits
        self.total_kiwis = total_kiwis
        self.kiwi_count = kiwi_count
        self.countdown = countdown
        self.speed = speed
        self.fruit_index = fruit_index
        self.daily_number = daily_number
        self.next_puzzle_in = next_puzzle_in
        self.grid_size = grid_size

    @property
    def total_score(self) -> int:
        return self.score + self.bonus_score

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation (tuples become lists when dumped)."""
        return {
            "phase": self.phase,
            "mode": self.mode,
            "snake": list(self.snake),
            "direction": self.direction,
            "fruit": self.fruit,
            "kiwi": self.kiwi,
            "walls": sorted(self.walls),
            "score": self.score,
            "bonus_score": self.bonus_score,
            "lives": self.lives,
            "elapsed_time": self.elapsed_time,
            "target_fruits": self.target_fruits,
            "total_kiwis": self.total_kiwis,
            "kiwi_count": self.kiwi_count,
            "countdown": self.countdown,
            "speed": self.speed,
            "fruit_index": self.fruit_index,
            "daily_number": self.daily_number,
            "next_puzzle_in": self.next_puzzle_in,
        }

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        # = wall
        F = fruit
        K = kiwi
        H = snake head
        o = snake body
        Row 0 is printed first, matching the screen where UP decreases y.
        """
        board = [['.' for _ in range(self.grid_size)] for _ in range(self.grid_size)]

        for wx, wy in self.walls:
            board[wy][wx] = '#'
        if self.fruit is not None:
            board[self.fruit[1]][self.fruit[0]] = 'F'
        if self.kiwi is not None:
            board[self.kiwi[1]][self.kiwi[0]] = 'K'

        for idx, (x, y) in enumerate(self.snake):
            board[y][x] = 'H' if idx == 0 else 'o'

        result = [f"{y:2d} {' '.join(board[y])}" for y in range(self.grid_size)]
        result.append("   " + " ".join(str(i % 10) for i in range(self.grid_size)))
        return "\n".join(result)

    def __repr__(self):
        return (
            f"<GameState phase={self.phase} mode={self.mode} score={self.score}"
            f"/{self.target_fruits} lives={self.lives} fruit={self.fruit}>"
        )
