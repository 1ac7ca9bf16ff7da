"""
Game constants for Snakle.
"""

# Board
GRID_SIZE = 20
SPAWN_POINT = (10, 10)
INITIAL_SNAKE = [(10, 10), (10, 11), (10, 12)]

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

# y grows downwards, so UP is a negative y step
DIRECTIONS = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

OPPOSITES = {
    UP: DOWN,
    DOWN: UP,
    LEFT: RIGHT,
    RIGHT: LEFT,
}

# Speed (ms per move)
INITIAL_SPEED = 150
MIN_SPEED = 80
SPEED_DECREMENT = 2

# Daily puzzle parameters
MIN_FRUITS = 10
MAX_FRUITS = 20
KIWI_DAY_CHANCE = 0.3
MIN_DAILY_KIWIS = 1
MAX_DAILY_KIWIS = 3
DAILY_SEQUENCE_LENGTH = 500
CLASSIC_SEQUENCE_LENGTH = 1000
TUTORIAL_SEQUENCE_LENGTH = 50

# Debug overrides
DEBUG_TARGET_FRUITS = 3
DEBUG_TOTAL_KIWIS = 1
DEBUG_WALLS = frozenset({(5, 5)})

# Spawning
FRUIT_LOOKAHEAD = 50
RANDOM_SPAWN_ATTEMPTS = 100
KIWI_LIFETIME_MS = 5000
KIWI_BONUS_POINTS = 5
CLASSIC_KIWI_EVERY = 15

# Level generation
MAX_LEVEL_ATTEMPTS = 100

# Timers
COUNTDOWN_START = 3
COUNTDOWN_STEP_MS = 1000
ELAPSED_TICK_MS = 100

# Modes
DAILY = "DAILY"
CLASSIC = "CLASSIC"
TUTORIAL = "TUTORIAL"
VALID_MODES = {DAILY, CLASSIC, TUTORIAL}

# Session phases
START = "START"
COUNTDOWN = "COUNTDOWN"
PLAYING = "PLAYING"
DEATH = "DEATH"
VICTORY = "VICTORY"

# Storage keys
DAILY_KEY_PREFIX = "daily:"
CLASSIC_HIGH_SCORE_KEY = "classic_high_score"
HAS_PLAYED_TUTORIAL_KEY = "has_played_tutorial"
