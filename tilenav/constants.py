"""
Shared constants for tile navigation.

Collision values follow the convention of the external collision buffer:
0 is open space the agent can occupy, 1 is solid terrain.
"""

OPEN = 0
SOLID = 1

# World units per grid cell
DEFAULT_CELL_SIZE = 32

# Rows probed below the take-off row when a jump arc ends in mid-air
DEFAULT_MAX_DROPS_AFTER_JUMP = 10

# Fixed depth coordinate of the world-space anchor returned for a goal
DEFAULT_ANCHOR_HEIGHT = 32.0

# Agent parameters used when none are supplied
DEFAULT_JUMP_HEIGHT = 3
DEFAULT_BODY_HEIGHT = 1
