"""Game constants and utilities"""

# Suits, in hand display order (alphabetical)
HEARTS = 'hearts'
SPADES = 'spades'
DIAMONDS = 'diamonds'
CLUBS = 'clubs'
SUITS = [CLUBS, DIAMONDS, HEARTS, SPADES]
SUIT_SYMBOLS = {HEARTS: '♥', SPADES: '♠', DIAMONDS: '♦', CLUBS: '♣'}
SUIT_LETTERS = {HEARTS: 'H', SPADES: 'S', DIAMONDS: 'D', CLUBS: 'C'}

RANKS = ['2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K', 'A']
RANK_VALUES = {rank: value for value, rank in enumerate(RANKS, start=2)}

VALUE_JACK = 11
VALUE_QUEEN = 12
VALUE_KING = 13

# Penalty queen ("Peppa")
PENALTY_QUEEN_ID = 'QS'

# Game phases
PHASE_SETUP = 'setup'
PHASE_DEALING = 'dealing'
PHASE_PASSING = 'passing'
PHASE_RECEIVING = 'receiving'
PHASE_PLAYING = 'playing'
PHASE_SCORING = 'scoring'
PHASE_GAME_OVER = 'gameOver'

# Pass directions
DIRECTION_LEFT = 'left'
DIRECTION_RIGHT = 'right'
DIRECTION_ACROSS = 'across'
DIRECTION_NONE = 'none'

SEQUENCE_DSC = 'DSC-'
SEQUENCE_DS_C = 'DS-C'
PASS_SEQUENCES = {
    SEQUENCE_DSC: [DIRECTION_RIGHT, DIRECTION_LEFT, DIRECTION_ACROSS, DIRECTION_NONE],
    SEQUENCE_DS_C: [DIRECTION_RIGHT, DIRECTION_LEFT, DIRECTION_NONE, DIRECTION_ACROSS],
}
DIRECTION_LABELS = {
    DIRECTION_RIGHT: 'D',
    DIRECTION_LEFT: 'S',
    DIRECTION_ACROSS: 'C',
    DIRECTION_NONE: '-',
}
# Seat offset of the player whose cards you receive
DIRECTION_SOURCE_OFFSET = {
    DIRECTION_LEFT: 1,
    DIRECTION_RIGHT: 3,
    DIRECTION_ACROSS: 2,
}

# AI types
AI_HAL = 'HAL'
AI_GEM = 'GEM'
AI_GPT52 = 'GPT52'
AI_MIXED = 'MIXED'
AI_TYPES = [AI_HAL, AI_GEM, AI_GPT52]
AI_LABELS = {AI_HAL: 'HAL-B', AI_GEM: 'GEM', AI_GPT52: 'GPT'}

AI_NAMES = [
    "Eto Demerzel", "Bomb #20", "HAL 9000", "Joshua WOPR",
    "MU-TH-UR 6000", "Skynet", "Nexus-6", "GERTY",
    "Robbie", "SAM-104", "T-800", "Roy Batty",
]

# Table
NUM_PLAYERS = 4
HAND_SIZE = 13
PASS_COUNT = 3
HUMAN_PLAYER_ID = 0
DEFAULT_PLAYER_NAME = 'Giocatore'

# Scoring
TRICK_BASE_POINTS = 10
PENALTY_QUEEN_POINTS = 26
SLAM_CHECK_TOTAL = 130
SLAM_WINNER_POINTS = 45
SLAM_LOSER_POINTS = -15

ROUND_OPTIONS = (4, 8, 12)
SCORE_OPTIONS = (50, 100)

# Timing (seconds)
USER_TURN_TIME = 40
BOT_MAX_TIME = 20
TRICK_PAUSE = 2.0
PASS_PAUSE = 1.0

# Error codes
ERROR_WRONG_PHASE = 'WRONG_PHASE'
ERROR_NOT_YOUR_TURN = 'NOT_YOUR_TURN'
ERROR_ALREADY_PLAYED = 'ALREADY_PLAYED'
ERROR_CARD_NOT_IN_HAND = 'CARD_NOT_IN_HAND'
ERROR_ILLEGAL_MOVE = 'ILLEGAL_MOVE'
ERROR_SELECTION_FULL = 'SELECTION_FULL'
ERROR_ALREADY_SELECTED = 'ALREADY_SELECTED'
ERROR_INVALID_SELECTION = 'INVALID_SELECTION'
ERROR_PASS_NOT_READY = 'PASS_NOT_READY'
ERROR_PLAYER_NOT_FOUND = 'PLAYER_NOT_FOUND'
ERROR_TRICK_INCOMPLETE = 'TRICK_INCOMPLETE'
ERROR_BOT = 'BOT_ERROR'


def card_id(rank: str, suit: str) -> str:
    return f"{rank}{SUIT_LETTERS[suit]}"


def source_seat(seat: int, direction: str) -> int:
    """Seat whose selected cards land in ``seat``'s hand for this direction."""
    return (seat + DIRECTION_SOURCE_OFFSET[direction]) % NUM_PLAYERS
