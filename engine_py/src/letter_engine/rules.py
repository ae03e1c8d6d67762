"""
Game rule configuration and validation.
"""

from typing import Dict

from pydantic import BaseModel, Field, field_validator


class RuleConfig(BaseModel):
    """Configuration for game rules and settings."""

    min_players: int = Field(
        default=2,
        ge=2,
        le=4,
        description="Minimum number of players required to start"
    )
    max_players: int = Field(
        default=4,
        ge=2,
        le=4,
        description="Maximum number of players allowed"
    )
    room_code_digits: int = Field(
        default=4,
        ge=3,
        le=8,
        description="Number of digits in a generated room code"
    )
    tokens_to_win_by_players: Dict[int, int] = Field(
        default_factory=lambda: {2: 7, 3: 5, 4: 4},
        description="Tokens needed to win the game, keyed by player count"
    )

    @field_validator('max_players')
    @classmethod
    def validate_max_players(cls, v, info):
        """Validate maximum players doesn't fall below minimum."""
        min_players = info.data.get('min_players', 2)
        if v < min_players:
            raise ValueError(f'max_players ({v}) must be >= min_players ({min_players})')
        return v

    @field_validator('tokens_to_win_by_players')
    @classmethod
    def validate_thresholds(cls, v):
        for count, tokens in v.items():
            if tokens < 1:
                raise ValueError(f'token threshold for {count} players must be positive')
        return v

    def tokens_to_win(self, player_count: int) -> int:
        """Tokens a player needs to win the game at this table size."""
        if player_count in self.tokens_to_win_by_players:
            return self.tokens_to_win_by_players[player_count]
        # Larger tables fall back to the threshold of the largest configured size
        return self.tokens_to_win_by_players[max(self.tokens_to_win_by_players)]

    def room_code_space(self) -> int:
        return 10 ** self.room_code_digits


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)
