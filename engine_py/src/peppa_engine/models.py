"""Game models and data structures"""

from dataclasses import dataclass, field
from typing import List, Optional

from .constants import (
    DIRECTION_RIGHT, HEARTS, PENALTY_QUEEN_ID, PHASE_SETUP, SPADES, SUIT_SYMBOLS,
)
from .rules import GameConfig


@dataclass(frozen=True)
class Card:
    id: str
    suit: str
    rank: str
    value: int  # 2..14

    @property
    def is_heart(self) -> bool:
        return self.suit == HEARTS

    @property
    def is_penalty_queen(self) -> bool:
        return self.id == PENALTY_QUEEN_ID

    def is_spade_honor(self) -> bool:
        """Ace or King of spades, the cards that can be forced to eat the queen."""
        return self.suit == SPADES and self.rank in ('A', 'K')

    def __str__(self) -> str:
        return f"{self.rank}{SUIT_SYMBOLS[self.suit]}"


@dataclass
class Player:
    id: int
    name: str
    is_human: bool = False
    ai_type: Optional[str] = None  # HAL | GEM | GPT52 for bots
    hand: List[Card] = field(default_factory=list)
    score: int = 0
    points_this_round: int = 0
    tricks_won: int = 0
    selected_to_pass: List[str] = field(default_factory=list)  # card ids
    score_history: List[int] = field(default_factory=list)

    def has_card(self, card_id: str) -> bool:
        return any(c.id == card_id for c in self.hand)

    def find_card(self, card_id: str) -> Optional[Card]:
        for c in self.hand:
            if c.id == card_id:
                return c
        return None


@dataclass(frozen=True)
class TrickPlay:
    player_id: int
    card: Card


@dataclass(frozen=True)
class CompletedTrick:
    plays: List[TrickPlay]
    winner_id: int
    value: int


@dataclass
class GameState:
    config: GameConfig
    players: List[Player] = field(default_factory=list)
    current_trick: List[TrickPlay] = field(default_factory=list)
    turn_index: int = 0
    lead_suit: Optional[str] = None
    hearts_broken: bool = False
    round_number: int = 1
    pass_direction: str = DIRECTION_RIGHT
    game_status: str = PHASE_SETUP
    winning_message: Optional[str] = None
    received_cards: List[Card] = field(default_factory=list)
    dealer_offset: int = 0
    trick_history: List[CompletedTrick] = field(default_factory=list)
    game_log: List[str] = field(default_factory=list)
    version: int = 0

    def get_player(self, player_id: int) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def has_played(self, player_id: int) -> bool:
        return any(t.player_id == player_id for t in self.current_trick)

    def increment_version(self):
        self.version += 1

    def log(self, line: str):
        self.game_log.append(line)
