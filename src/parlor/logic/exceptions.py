"""Typed domain exceptions for game rule violations.

All human-facing rule violations use subclasses of GameRuleError rather than
raw ValueError. The round engine catches them at the input boundary and turns
them into ErrorEvent re-prompts, while anything else that escapes a round is
contained at the round boundary and downgraded to a draw.
"""

from parlor.logic.enums import GameErrorCode


class GameRuleError(Exception):
    """Base exception for game rule violations.

    Raised by domain logic (turn.py, melds.py, call_resolution.py) when the
    human seat asks for an action the rules do not allow. Caught by the round
    engine and converted to ErrorEvent responses.
    """

    code = GameErrorCode.INVALID_ACTION


class InvalidDiscardError(GameRuleError):
    """Discard is not allowed (not the seat's turn, etc.)."""

    code = GameErrorCode.INVALID_DISCARD


class InvalidMeldError(GameRuleError):
    """Meld call is invalid (no matching tiles, wrong discarder, etc.)."""

    code = GameErrorCode.INVALID_MELD


class InvalidWinError(GameRuleError):
    """Win declaration conditions not met."""

    code = GameErrorCode.INVALID_WIN


class InvalidActionError(GameRuleError):
    """Action is not valid in the current round phase."""

    code = GameErrorCode.INVALID_ACTION


class NotYourTurnError(InvalidActionError):
    """Seat tried to act outside its own decision point (e.g. discarding off turn)."""

    code = GameErrorCode.NOT_YOUR_TURN


class InvalidIndexError(GameRuleError):
    """A 1-based hand index supplied by the human is out of range."""

    code = GameErrorCode.INVALID_INDEX


class UnsupportedSettingsError(Exception):
    """Game settings contain values the engine cannot honor."""


class RoundInvariantError(Exception):
    """Raised when round state breaks a structural invariant.

    Indicates a programming fault, never a player mistake. The round engine
    abandons the round as a draw carrying the message as diagnostic.
    """
