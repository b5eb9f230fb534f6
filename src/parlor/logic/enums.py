"""
String enum definitions for parlor game concepts.
"""

from enum import Enum


class SkillTier(str, Enum):
    """Strength of the three computer opponents, chosen once per match."""

    BASIC = "basic"
    ADVANCED = "advanced"


class RoundPhase(str, Enum):
    """Phase of the round state machine."""

    AWAITING_DRAW = "awaiting_draw"
    AWAITING_DISCARD = "awaiting_discard"
    AWAITING_RESPONSES = "awaiting_responses"
    FINISHED = "finished"


class MeldType(str, Enum):
    """Types of open or declared melds."""

    CHOW = "chow"
    PUNG = "pung"
    KONG = "kong"
    CONCEALED_KONG = "concealed_kong"


class KongType(str, Enum):
    """How a kong was formed."""

    CONCEALED = "concealed"  # four matching concealed tiles
    EXTENDED = "extended"  # self-drawn fourth tile added to an open pung
    CLAIMED = "claimed"  # discard completes three concealed tiles


class ClaimType(str, Enum):
    """Responses a seat can give to another seat's discard."""

    WIN = "win"
    KONG = "kong"
    PUNG = "pung"
    CHOW = "chow"


# claim priority: lower value = higher priority
CLAIM_PRIORITY: dict[ClaimType, int] = {
    ClaimType.WIN: 0,
    ClaimType.KONG: 1,
    ClaimType.PUNG: 2,
    ClaimType.CHOW: 3,
}

# score added to a seat's kong record per declared kong
KONG_RECORD_WEIGHT: dict[KongType, int] = {
    KongType.CONCEALED: 2,
    KongType.EXTENDED: 1,
    KongType.CLAIMED: 1,
}


class CommandType(str, Enum):
    """Commands the human seat can issue."""

    DISCARD = "discard"
    CONTINUE = "continue"
    CHOW = "chow"
    PUNG = "pung"
    KONG = "kong"
    MAHJONG = "mahjong"
    QUIT = "quit"
    RESTART = "restart"
    HELP = "help"
    PLAYED = "played"


class RoundOutcomeType(str, Enum):
    """Ways a round attempt can end."""

    WIN = "win"
    DRAW = "draw"
    QUIT = "quit"
    RESTART = "restart"


class DrawReason(str, Enum):
    """Why a round ended without a winner."""

    WALL_EXHAUSTED = "wall_exhausted"
    FAULT = "fault"


class GameErrorCode(str, Enum):
    """Error codes reported to the human seat for rejected commands."""

    NOT_YOUR_TURN = "not_your_turn"
    INVALID_DISCARD = "invalid_discard"
    INVALID_MELD = "invalid_meld"
    INVALID_WIN = "invalid_win"
    INVALID_INDEX = "invalid_index"
    INVALID_ACTION = "invalid_action"
