"""
Hand scoring.

Every winning hand is worth the same base value; the winner's kong record is
added on top of it.
"""

from collections.abc import Sequence

from parlor.logic.state import Meld
from parlor.logic.win import is_winning_hand

BASE_POINTS = 1


def score_hand(tiles: Sequence[int], melds: Sequence[Meld], extra_tile: int | None = None) -> int:
    """
    Score a winning hand.

    Raises:
        ValueError: If the hand is not a winning hand

    """
    if not is_winning_hand(tiles, melds, extra_tile):
        raise ValueError("cannot score a hand that is not complete")
    return BASE_POINTS


def calculate_win_score(hand_points: int, kong_record: int) -> int:
    """Final score of a win: hand points plus the winner's kong record."""
    return hand_points + kong_record
