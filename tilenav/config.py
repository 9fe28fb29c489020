from typing import Optional

from .constants import (
    DEFAULT_ANCHOR_HEIGHT,
    DEFAULT_BODY_HEIGHT,
    DEFAULT_CELL_SIZE,
    DEFAULT_JUMP_HEIGHT,
    DEFAULT_MAX_DROPS_AFTER_JUMP,
)
from .errors import ConfigError


class NavConfig:
    def __init__(
        self,
        jump_height: int = DEFAULT_JUMP_HEIGHT,
        body_height: int = DEFAULT_BODY_HEIGHT,
        cell_size: int = DEFAULT_CELL_SIZE,
        max_drops_after_jump: int = DEFAULT_MAX_DROPS_AFTER_JUMP,
        anchor_height: float = DEFAULT_ANCHOR_HEIGHT,
        max_search_steps: Optional[int] = None,
    ):
        self.jump_height = jump_height
        self.body_height = body_height
        self.cell_size = cell_size
        self.max_drops_after_jump = max_drops_after_jump
        self.anchor_height = anchor_height
        self.max_search_steps = max_search_steps

    def validate(self):
        """Raise ConfigError if any parameter is out of range."""
        if self.jump_height < 0:
            raise ConfigError(f"jump_height must be >= 0, got {self.jump_height}")
        if self.body_height < 1:
            raise ConfigError(f"body_height must be >= 1, got {self.body_height}")
        if self.cell_size <= 0:
            raise ConfigError(f"cell_size must be > 0, got {self.cell_size}")
        if self.max_drops_after_jump < 0:
            raise ConfigError(
                f"max_drops_after_jump must be >= 0, got {self.max_drops_after_jump}"
            )
        if self.max_search_steps is not None and self.max_search_steps <= 0:
            raise ConfigError(
                f"max_search_steps must be > 0, got {self.max_search_steps}"
            )
        return self

    @classmethod
    def from_args(cls, args=None):
        config = cls()
        if args is None:
            return config
        config.jump_height = args.jump_height
        config.body_height = args.body_height
        config.cell_size = args.cell_size
        config.max_drops_after_jump = args.max_drops
        config.max_search_steps = args.max_steps
        return config
