"""Call resolution: collect-then-resolve handling of discard claims.

Every seat other than the discarder answers the current discard with a claim
or a pass. Claims are then resolved by fixed priority (win > kong > pung >
chow), with ties going to the seat closest after the discarder. Arrival order
of responses never matters.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from parlor.logic.enums import CLAIM_PRIORITY, ClaimType, RoundPhase
from parlor.logic.events import GameEvent, MeldEvent
from parlor.logic.exceptions import InvalidMeldError, InvalidWinError, RoundInvariantError
from parlor.logic.melds import call_chow, call_claimed_kong, call_pung, can_chow, can_claim_kong, can_pung
from parlor.logic.settings import NUM_PLAYERS
from parlor.logic.state_utils import clear_current_discard, set_current_drawer, set_phase, settle_current_discard
from parlor.logic.tiles import tile_kind
from parlor.logic.win import can_win_on_discard

if TYPE_CHECKING:
    from collections.abc import Sequence

    from parlor.logic.state import Meld, RoundState
    from parlor.logic.types import Claim

logger = structlog.get_logger()


def responder_order(discarder_seat: int) -> list[int]:
    """Seats that may respond to a discard, starting just after the discarder."""
    return [(discarder_seat + offset) % NUM_PLAYERS for offset in range(1, NUM_PLAYERS)]


def _current_discard(round_state: RoundState) -> tuple[int, int]:
    if round_state.current_discard is None or round_state.discarder_seat is None:
        raise RoundInvariantError("no discard is open to claims")
    return round_state.current_discard, round_state.discarder_seat


def available_claims(round_state: RoundState, seat: int) -> tuple[list[ClaimType], list[tuple[int, int]]]:
    """
    List the claims a seat may make on the current discard.

    Returns (claim_types in priority order, chow_options).
    """
    tile_id, discarder_seat = _current_discard(round_state)
    if seat == discarder_seat:
        return [], []
    player = round_state.players[seat]
    claims: list[ClaimType] = []
    if can_win_on_discard(player.tiles, player.melds, tile_id):
        claims.append(ClaimType.WIN)
    if can_claim_kong(player.tiles, tile_id):
        claims.append(ClaimType.KONG)
    if can_pung(player.tiles, tile_id):
        claims.append(ClaimType.PUNG)
    chow_options = can_chow(player.tiles, tile_id, discarder_seat, seat)
    if chow_options:
        claims.append(ClaimType.CHOW)
    return claims, chow_options


def validate_claim(round_state: RoundState, claim: Claim) -> None:
    """
    Check that a claim on the current discard is legal.

    Raises:
        InvalidWinError: If the discard does not complete the hand
        InvalidMeldError: If the meld cannot be formed

    """
    tile_id, discarder_seat = _current_discard(round_state)
    if claim.seat == discarder_seat:
        raise InvalidMeldError("you cannot claim your own discard")
    player = round_state.players[claim.seat]

    if claim.claim_type == ClaimType.WIN:
        if not can_win_on_discard(player.tiles, player.melds, tile_id):
            raise InvalidWinError("your hand does not meet mahjong requirement")
    elif claim.claim_type == ClaimType.KONG:
        if not can_claim_kong(player.tiles, tile_id):
            raise InvalidMeldError("this discard is not valid to kong")
    elif claim.claim_type == ClaimType.PUNG:
        if not can_pung(player.tiles, tile_id):
            raise InvalidMeldError("this discard is not valid to pung")
    elif claim.claim_type == ClaimType.CHOW:
        if claim.seat != (discarder_seat + 1) % NUM_PLAYERS:
            raise InvalidMeldError("you can only chow your upper hand's tiles")
        options = can_chow(player.tiles, tile_id, discarder_seat, claim.seat)
        if claim.chow_tiles is None or not _matches_chow_option(claim.chow_tiles, options):
            raise InvalidMeldError("this discard is not valid to chow with the selected tiles")


def _matches_chow_option(chow_tiles: tuple[int, int], options: Sequence[tuple[int, int]]) -> bool:
    """Compare a chosen pair against the options by kind, ignoring copy ids and order."""
    chosen = sorted(tile_kind(t) for t in chow_tiles)
    return any(sorted(tile_kind(t) for t in option) == chosen for option in options)


def pick_best_claim(claims: Sequence[Claim], discarder_seat: int) -> Claim | None:
    """
    Pick the winning claim.

    Priority order: win(0) > kong(1) > pung(2) > chow(3).
    Tie-break: distance after the discarder (closer = higher priority).
    """
    if not claims:
        return None
    return min(
        claims,
        key=lambda c: (CLAIM_PRIORITY[c.claim_type], (c.seat - discarder_seat) % NUM_PLAYERS),
    )


def apply_meld_claim(round_state: RoundState, claim: Claim) -> tuple[RoundState, list[GameEvent], Meld]:
    """
    Move the current discard and matching hand tiles into the claimant's melds.

    Clears the current discard and points current_drawer at the seat after
    the claimant; the claimant itself discards next without drawing (after a
    replacement draw for a kong, which the caller performs).
    Returns (new_state, events, meld).
    """
    tile_id, discarder_seat = _current_discard(round_state)
    if claim.claim_type == ClaimType.PUNG:
        new_state, meld = call_pung(round_state, claim.seat, discarder_seat, tile_id)
    elif claim.claim_type == ClaimType.KONG:
        new_state, meld = call_claimed_kong(round_state, claim.seat, discarder_seat, tile_id)
    elif claim.claim_type == ClaimType.CHOW:
        if claim.chow_tiles is None:
            raise InvalidMeldError("chow claim needs two hand tiles")
        new_state, meld = call_chow(round_state, claim.seat, discarder_seat, tile_id, claim.chow_tiles)
    else:
        raise RoundInvariantError(f"{claim.claim_type} is not a meld claim")

    new_state = clear_current_discard(new_state)
    new_state = set_current_drawer(new_state, claim.seat + 1)
    new_state = set_phase(new_state, RoundPhase.AWAITING_DISCARD)

    logger.info(
        "discard claimed",
        claim_type=claim.claim_type,
        caller_seat=claim.seat,
        from_seat=discarder_seat,
        tile_id=tile_id,
    )
    event = MeldEvent(
        meld_type=meld.meld_type,
        caller_seat=claim.seat,
        from_seat=discarder_seat,
        tile_ids=meld.tiles,
        called_tile_id=tile_id,
        kong_record=new_state.players[claim.seat].kong_record,
    )
    return new_state, [event], meld


def resolve_all_passed(round_state: RoundState) -> RoundState:
    """Settle the unclaimed discard onto the pile; the next seat in turn draws."""
    new_state = settle_current_discard(round_state)
    return set_phase(new_state, RoundPhase.AWAITING_DRAW)
