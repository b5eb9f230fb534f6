"""
Turn-seat operations: discards by hand index, self-declared kongs, win
outcomes, hints and the input requests shown to the human seat.

Functions return new state plus the events produced. Rule violations by the
human raise GameRuleError subclasses, which the round engine reports and
re-prompts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from parlor.logic.call_resolution import available_claims
from parlor.logic.enums import ClaimType, KongType, RoundPhase
from parlor.logic.events import GameEvent, HintEvent, MeldEvent, seat_target
from parlor.logic.exceptions import InvalidIndexError, InvalidMeldError, InvalidWinError
from parlor.logic.melds import call_concealed_kong, call_extended_kong, find_self_kong
from parlor.logic.round import discard_tile, meld_views
from parlor.logic.scoring import calculate_win_score, score_hand
from parlor.logic.shanten import calculate_shanten, suggest_discard
from parlor.logic.types import InputRequest, WinOutcome
from parlor.logic.win import can_win_on_discard, can_win_self_drawn

if TYPE_CHECKING:
    from parlor.logic.state import RoundState

logger = structlog.get_logger()


def tile_at_index(round_state: RoundState, seat: int, index: int) -> int:
    """
    Resolve a 1-based position in the seat's sorted concealed hand.

    Raises:
        InvalidIndexError: If index is outside the hand

    """
    tiles = round_state.players[seat].tiles
    if not (1 <= index <= len(tiles)):
        raise InvalidIndexError(f"index must be positive and bounded by hand length ({len(tiles)})")
    return tiles[index - 1]


def process_discard(round_state: RoundState, seat: int, tile_id: int) -> tuple[RoundState, list[GameEvent]]:
    """Discard a tile for the seat on turn and log it."""
    new_state, event = discard_tile(round_state, seat, tile_id)
    logger.debug("tile discarded", seat=seat, tile_id=tile_id)
    return new_state, [event]


def process_self_kong(round_state: RoundState, seat: int) -> tuple[RoundState, list[GameEvent]]:
    """
    Declare the seat's available concealed or extended kong.

    The replacement draw is performed by the caller.

    Raises:
        InvalidMeldError: If the seat holds no kong

    """
    player = round_state.players[seat]
    option = find_self_kong(player.tiles, player.melds)
    if option is None:
        raise InvalidMeldError("you have no tiles to kong")
    kong_type, kind = option
    if kong_type == KongType.CONCEALED:
        new_state, meld = call_concealed_kong(round_state, seat, kind)
    else:
        new_state, meld = call_extended_kong(round_state, seat, kind)
    logger.info("kong declared", seat=seat, kong_type=kong_type, kong_record=new_state.players[seat].kong_record)
    event = MeldEvent(
        meld_type=meld.meld_type,
        caller_seat=seat,
        from_seat=meld.from_seat,
        tile_ids=meld.tiles,
        called_tile_id=meld.called_tile,
        kong_record=new_state.players[seat].kong_record,
    )
    return new_state, [event]


def build_self_drawn_win(round_state: RoundState, seat: int, winning_tile: int | None) -> WinOutcome:
    """
    Build the outcome of a self-drawn win.

    Raises:
        InvalidWinError: If the seat's hand is not complete

    """
    player = round_state.players[seat]
    if not can_win_self_drawn(player.tiles, player.melds):
        raise InvalidWinError("your hand does not meet mahjong requirement")
    hand_points = score_hand(player.tiles, player.melds)
    return WinOutcome(
        winner_seat=seat,
        loser_seat=None,
        score=calculate_win_score(hand_points, player.kong_record),
        winning_tile=winning_tile,
        hand_points=hand_points,
        kong_bonus=player.kong_record,
    )


def build_discard_win(round_state: RoundState, seat: int) -> WinOutcome:
    """
    Build the outcome of a win on the current discard.

    Raises:
        InvalidWinError: If the discard does not complete the seat's hand

    """
    tile_id = round_state.current_discard
    if tile_id is None or round_state.discarder_seat is None:
        raise InvalidWinError("there is no discard to win on")
    player = round_state.players[seat]
    if not can_win_on_discard(player.tiles, player.melds, tile_id):
        raise InvalidWinError("your hand does not meet mahjong requirement")
    hand_points = score_hand(player.tiles, player.melds, tile_id)
    return WinOutcome(
        winner_seat=seat,
        loser_seat=round_state.discarder_seat,
        score=calculate_win_score(hand_points, player.kong_record),
        winning_tile=tile_id,
        hand_points=hand_points,
        kong_bonus=player.kong_record,
    )


def build_turn_request(
    round_state: RoundState,
    seat: int,
    *,
    drawn_tile: int | None,
    can_self_win: bool,
) -> InputRequest:
    """Describe the human's own-turn decision (discard, kong or mahjong)."""
    player = round_state.players[seat]
    return InputRequest(
        seat=seat,
        phase=RoundPhase.AWAITING_DISCARD,
        hand=player.tiles,
        melds=meld_views(player.melds),
        drawn_tile=drawn_tile,
        can_declare_win=can_self_win and can_win_self_drawn(player.tiles, player.melds),
        can_declare_kong=find_self_kong(player.tiles, player.melds) is not None,
    )


def build_response_request(round_state: RoundState, seat: int) -> InputRequest:
    """Describe the human's response decision on another seat's discard."""
    player = round_state.players[seat]
    claims, chow_options = available_claims(round_state, seat)
    return InputRequest(
        seat=seat,
        phase=RoundPhase.AWAITING_RESPONSES,
        hand=player.tiles,
        melds=meld_views(player.melds),
        current_discard=round_state.current_discard,
        discarder_seat=round_state.discarder_seat,
        available_claims=tuple(claims),
        chow_options=tuple(chow_options),
        can_declare_win=ClaimType.WIN in claims,
    )


def build_hint(request: InputRequest) -> HintEvent:
    """
    Answer a help request.

    On turn: whether mahjong or kong is possible, else the suggested discard
    and how many tiles the hand is from ready.
    In a response window: the claims available on the current discard.
    """
    if request.phase == RoundPhase.AWAITING_DISCARD:
        suggested = None
        shanten = None
        if not request.can_declare_win and not request.can_declare_kong:
            suggested = suggest_discard(request.hand)
            shanten = calculate_shanten(request.hand)
        return HintEvent(
            target=seat_target(request.seat),
            can_declare_win=request.can_declare_win,
            can_declare_kong=request.can_declare_kong,
            suggested_discard=suggested,
            shanten=shanten,
        )
    return HintEvent(
        target=seat_target(request.seat),
        can_declare_win=request.can_declare_win,
        available_claims=request.available_claims,
        chow_options=request.chow_options,
    )
