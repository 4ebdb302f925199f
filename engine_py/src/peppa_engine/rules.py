"""
Game configuration and validation.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    AI_MIXED, AI_TYPES, BOT_MAX_TIME, DEFAULT_PLAYER_NAME, PASS_PAUSE,
    PASS_SEQUENCES, ROUND_OPTIONS, SCORE_OPTIONS, TRICK_PAUSE, USER_TURN_TIME,
)


class GameConfig(BaseModel):
    """Configuration chosen at setup. Frozen once the game starts."""

    model_config = ConfigDict(frozen=True)

    player_name: str = Field(
        default="Charlie Bartom",
        description="Display name of the human player (seat 0)"
    )
    ai_type: str = Field(
        default="HAL",
        description="AI used by every bot, or MIXED for one of each"
    )
    max_rounds: int = Field(
        default=8,
        description="Number of rounds after which the game ends"
    )
    max_score: int = Field(
        default=100,
        description="Absolute cumulative score that ends the game"
    )
    pass_sequence_name: str = Field(
        default="DSC-",
        description="Pass-direction cycle: DSC- (right, left, across, none) or DS-C"
    )

    @field_validator('player_name')
    @classmethod
    def validate_player_name(cls, v):
        return v.strip() or DEFAULT_PLAYER_NAME

    @field_validator('ai_type')
    @classmethod
    def validate_ai_type(cls, v):
        if v not in AI_TYPES and v != AI_MIXED:
            raise ValueError(f'ai_type must be one of {AI_TYPES + [AI_MIXED]}, got {v!r}')
        return v

    @field_validator('max_rounds')
    @classmethod
    def validate_max_rounds(cls, v):
        if v not in ROUND_OPTIONS:
            raise ValueError(f'max_rounds must be one of {ROUND_OPTIONS}, got {v}')
        return v

    @field_validator('max_score')
    @classmethod
    def validate_max_score(cls, v):
        if v not in SCORE_OPTIONS:
            raise ValueError(f'max_score must be one of {SCORE_OPTIONS}, got {v}')
        return v

    @field_validator('pass_sequence_name')
    @classmethod
    def validate_pass_sequence(cls, v):
        if v not in PASS_SEQUENCES:
            raise ValueError(f'pass_sequence_name must be one of {list(PASS_SEQUENCES)}, got {v!r}')
        return v


class TimingConfig(BaseModel):
    """Presentation delays used by the scheduler. All zero for headless play."""

    model_config = ConfigDict(frozen=True)

    bot_pass_min: float = Field(default=1.0, ge=0, description="Minimum bot delay before choosing a pass")
    bot_pass_max: float = Field(default=2.0, ge=0, description="Maximum bot delay before choosing a pass")
    bot_think_min: float = Field(default=1.5, ge=0, description="Minimum bot thinking time per move")
    bot_think_max: float = Field(default=3.5, ge=0, description="Maximum bot thinking time per move")
    trick_pause: float = Field(default=TRICK_PAUSE, ge=0, description="Pause before a full trick is resolved")
    pass_pause: float = Field(default=PASS_PAUSE, ge=0, description="Pause before the exchange is executed")
    human_turn_time: float = Field(default=USER_TURN_TIME, ge=0, description="Human turn timer in seconds (0 = no timeout)")
    bot_turn_time: float = Field(default=BOT_MAX_TIME, ge=0, description="Bot turn timer in seconds (0 = no timeout)")

    @field_validator('bot_pass_max')
    @classmethod
    def validate_pass_range(cls, v, info):
        low = info.data.get('bot_pass_min', 0)
        if v < low:
            raise ValueError(f'bot_pass_max ({v}) must be >= bot_pass_min ({low})')
        return v

    @field_validator('bot_think_max')
    @classmethod
    def validate_think_range(cls, v, info):
        low = info.data.get('bot_think_min', 0)
        if v < low:
            raise ValueError(f'bot_think_max ({v}) must be >= bot_think_min ({low})')
        return v


# Default configuration instances
default_config = GameConfig()
default_timing = TimingConfig()
HEADLESS_TIMING = TimingConfig(
    bot_pass_min=0, bot_pass_max=0, bot_think_min=0, bot_think_max=0,
    trick_pause=0, pass_pause=0, human_turn_time=0, bot_turn_time=0,
)


def create_config(**overrides) -> GameConfig:
    """Create a GameConfig with optional overrides."""
    config_dict = default_config.model_dump()
    config_dict.update(overrides)
    return GameConfig(**config_dict)
