"""
Obstacle layout generation.

A layout is a frozenset of wall cells. Every accepted layout leaves the spawn
area clear and keeps all free cells reachable from each other under the same
wrap-around topology the snake moves in.
"""

import logging
from collections import deque
from typing import FrozenSet, Iterable, List, Tuple

from .constants import GRID_SIZE, MAX_LEVEL_ATTEMPTS, SPAWN_POINT
from .rng import SeededRNG

logger = logging.getLogger(__name__)

Point = Tuple[int, int]

SCATTERED = 0
LINES = 1
RING = 2
SPIRAL = 3

PATTERN_NAMES = {
    SCATTERED: "scattered",
    LINES: "lines",
    RING: "ring",
    SPIRAL: "spiral",
}

# Half-extents of the cleared box around the spawn cell. The box is taller
# than it is wide so the initial body (heading up from the spawn) is covered.
SPAWN_CLEAR_DX = 1
SPAWN_CLEAR_DY = 2


def in_spawn_exclusion(cell: Point) -> bool:
    """True when the cell lies in the box kept free around the spawn point."""
    dx = abs(cell[0] - SPAWN_POINT[0])
    dy = abs(cell[1] - SPAWN_POINT[1])
    return dx <= SPAWN_CLEAR_DX and dy <= SPAWN_CLEAR_DY


def wrap_neighbors(cell: Point, grid_size: int = GRID_SIZE) -> List[Point]:
    """The four toroidal neighbours of a cell."""
    x, y = cell
    return [
        (x, (y - 1) % grid_size),
        (x, (y + 1) % grid_size),
        ((x - 1) % grid_size, y),
        ((x + 1) % grid_size, y),
    ]


def is_connected(walls: Iterable[Point], grid_size: int = GRID_SIZE) -> bool:
    """
    Check that the free cells form a single region.

    Breadth-first search from the first free cell (row-major order) with
    wrap-around neighbours; succeeds iff it visits every free cell and there
    is at least one free cell.
    """
    blocked = {
        (x, y) for x, y in walls
        if 0 <= x < grid_size and 0 <= y < grid_size
    }
    free = [
        (x, y)
        for y in range(grid_size)
        for x in range(grid_size)
        if (x, y) not in blocked
    ]
    if not free:
        return False

    start = free[0]
    visited = {start}
    queue = deque([start])
    while queue:
        cell = queue.popleft()
        for neighbor in wrap_neighbors(cell, grid_size):
            if neighbor not in blocked and neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)

    return len(visited) == len(free)


def _scattered(rng: SeededRNG) -> List[Point]:
    count = rng.next_int(10, 25)
    return [
        (rng.next_int(0, GRID_SIZE - 1), rng.next_int(0, GRID_SIZE - 1))
        for _ in range(count)
    ]


def _lines(rng: SeededRNG) -> List[Point]:
    walls: List[Point] = []
    vertical = rng.next() > 0.5
    count = rng.next_int(2, 4)
    for _ in range(count):
        fixed = rng.next_int(2, GRID_SIZE - 3)
        for i in range(GRID_SIZE):
            # Roughly one cell in five is left open
            if rng.next() > 0.2:
                walls.append((fixed, i) if vertical else (i, fixed))
    return walls


def _ring(rng: SeededRNG) -> List[Point]:
    walls: List[Point] = []
    inset = rng.next_int(3, 6)

    for x in range(inset, GRID_SIZE - inset):
        walls.append((x, inset))
        walls.append((x, GRID_SIZE - inset - 1))
    for y in range(inset, GRID_SIZE - inset):
        walls.append((inset, y))
        walls.append((GRID_SIZE - inset - 1, y))

    # Each gap removes a random segment and the one that slides into its slot
    gap_count = rng.next_int(2, 4)
    for _ in range(gap_count):
        if walls:
            idx = rng.next_int(0, len(walls) - 1)
            del walls[idx]
            if idx < len(walls):
                del walls[idx]
    return walls


def _spiral(rng: SeededRNG) -> List[Point]:
    walls: List[Point] = []
    x = y = GRID_SIZE // 2
    steps = 1
    heading = 0
    arms = [(0, -1), (1, 0), (0, 1), (-1, 0)]  # up, right, down, left

    for i in range(GRID_SIZE * 2):
        dx, dy = arms[heading]
        for _ in range(steps):
            x += dx
            y += dy
            if 0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE:
                if rng.next() > 0.3:
                    walls.append((x, y))
        heading = (heading + 1) % 4
        if i % 2 == 0:
            steps += 1
    return walls


_PATTERNS = {
    SCATTERED: _scattered,
    LINES: _lines,
    RING: _ring,
    SPIRAL: _spiral,
}


def generate_candidate(seed: str, attempt: int) -> Tuple[int, FrozenSet[Point]]:
    """
    Build one candidate layout for a given attempt.

    Returns:
        (pattern id, walls with the spawn exclusion already applied)
    """
    rng = SeededRNG(f"{seed}-{attempt}")
    pattern = rng.next_int(0, 3)
    cells = _PATTERNS[pattern](rng)
    walls = frozenset(cell for cell in cells if not in_spawn_exclusion(cell))
    return pattern, walls


def generate_level(seed: str, max_attempts: int = MAX_LEVEL_ATTEMPTS) -> FrozenSet[Point]:
    """
    Generate a fully traversable wall layout for a seed.

    Args:
        seed: daily key, or any string for non-daily modes
        max_attempts: candidates to try before giving up

    Returns:
        The first connected candidate, or an empty frozenset (open board)
        when every attempt fails.
    """
    for attempt in range(max_attempts):
        pattern, walls = generate_candidate(seed, attempt)
        if is_connected(walls):
            logger.debug(
                "Level for seed %r: %s pattern, %d walls (attempt %d)",
                seed, PATTERN_NAMES[pattern], len(walls), attempt,
            )
            return walls

    logger.warning(
        "No connected layout for seed %r after %d attempts; using an open board",
        seed, max_attempts,
    )
    return frozenset()
