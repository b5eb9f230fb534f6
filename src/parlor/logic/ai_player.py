"""
AI player decision making for the three computer seats.

AIPlayer is the passive base strategy: it never claims discards and never
declares a win. BasicAIPlayer discards a random tile (or always its last
tile, the deliberately readable "tell" seat). AdvancedAIPlayer declares wins,
discards by shanten and claims discards in win > pung > chow order.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from parlor.logic.enums import ClaimType, SkillTier
from parlor.logic.exceptions import RoundInvariantError
from parlor.logic.melds import can_chow, can_pung
from parlor.logic.settings import NUM_PLAYERS
from parlor.logic.shanten import suggest_discard
from parlor.logic.types import Claim, TurnDecision
from parlor.logic.win import can_win_on_discard, can_win_self_drawn

if TYPE_CHECKING:
    from collections.abc import Sequence

    from parlor.logic.state import RoundState, SeatState
    from parlor.logic.types import SeatConfig


class AIPlayer(ABC):
    """
    Base decision-maker for a computer seat.

    All decision methods are on this class so subclasses can override them.
    The base implementation never claims and never declares a win; every
    subclass chooses its own discards.
    """

    skill_tier: SkillTier = SkillTier.BASIC

    def should_declare_win(self, player: SeatState, round_state: RoundState) -> bool:
        """Decide whether to declare a self-drawn win."""
        return False

    def should_call_win(self, player: SeatState, discarded_tile: int, round_state: RoundState) -> bool:
        """Decide whether to win on another seat's discard."""
        return False

    def should_call_pung(self, player: SeatState, discarded_tile: int, round_state: RoundState) -> bool:
        """Decide whether to pung another seat's discard."""
        return False

    def should_call_chow(
        self,
        player: SeatState,
        discarded_tile: int,
        chow_options: Sequence[tuple[int, int]],
        round_state: RoundState,
    ) -> tuple[int, int] | None:
        """
        Choose a chow option, or return None to decline.

        Returns the chosen (tile_a, tile_b) pair from chow_options.
        """
        return None

    @abstractmethod
    def select_discard(self, player: SeatState, round_state: RoundState) -> int:
        """Choose the tile to discard from the player's concealed tiles."""

    def get_action(self, player: SeatState, round_state: RoundState) -> TurnDecision:
        """Determine the turn action: declare a win or discard a tile."""
        if self.should_declare_win(player, round_state):
            return TurnDecision(declare_win=True)
        return TurnDecision(discard_tile=self.select_discard(player, round_state))

    def get_claim(self, player: SeatState, round_state: RoundState) -> Claim | None:
        """
        Decide the response to the current discard.

        Returns None to pass.
        """
        discarded_tile = round_state.current_discard
        discarder_seat = round_state.discarder_seat
        if discarded_tile is None or discarder_seat is None or discarder_seat == player.seat:
            return None

        if self.should_call_win(player, discarded_tile, round_state):
            return Claim(seat=player.seat, claim_type=ClaimType.WIN)

        if self.should_call_pung(player, discarded_tile, round_state):
            return Claim(seat=player.seat, claim_type=ClaimType.PUNG)

        chow_options = can_chow(player.tiles, discarded_tile, discarder_seat, player.seat)
        if chow_options:
            chow_tiles = self.should_call_chow(player, discarded_tile, chow_options, round_state)
            if chow_tiles is not None:
                return Claim(seat=player.seat, claim_type=ClaimType.CHOW, chow_tiles=chow_tiles)

        return None


class BasicAIPlayer(AIPlayer):
    """
    Basic tier: random discards, no claims.

    With discard_last set, always discards the last (highest) tile of the sorted hand.
    """

    skill_tier = SkillTier.BASIC

    def __init__(self, rng: random.Random, *, discard_last: bool = False) -> None:
        self._rng = rng
        self.discard_last = discard_last

    def select_discard(self, player: SeatState, round_state: RoundState) -> int:
        if not player.tiles:
            raise ValueError("cannot select discard from empty hand")
        if self.discard_last:
            return player.tiles[-1]
        return self._rng.choice(player.tiles)


class AdvancedAIPlayer(AIPlayer):
    """Advanced tier: auto-declares wins, shanten-based discards, claims by priority."""

    skill_tier = SkillTier.ADVANCED

    def should_declare_win(self, player: SeatState, round_state: RoundState) -> bool:
        return can_win_self_drawn(player.tiles, player.melds)

    def should_call_win(self, player: SeatState, discarded_tile: int, round_state: RoundState) -> bool:
        return can_win_on_discard(player.tiles, player.melds, discarded_tile)

    def should_call_pung(self, player: SeatState, discarded_tile: int, round_state: RoundState) -> bool:
        return can_pung(player.tiles, discarded_tile)

    def should_call_chow(
        self,
        player: SeatState,
        discarded_tile: int,
        chow_options: Sequence[tuple[int, int]],
        round_state: RoundState,
    ) -> tuple[int, int] | None:
        return chow_options[0] if chow_options else None

    def select_discard(self, player: SeatState, round_state: RoundState) -> int:
        if not player.tiles:
            raise ValueError("cannot select discard from empty hand")
        return suggest_discard(player.tiles)


def create_ai_players(
    roster: Sequence[SeatConfig],
    skill_tier: SkillTier,
    rng: random.Random,
) -> dict[int, AIPlayer]:
    """
    Create one AI player per computer seat of the roster.

    In the basic tier the seat opposite the human is the discard-last seat.
    """
    human_seat = next((seat for seat, config in enumerate(roster) if config.is_human), None)
    if human_seat is None:
        raise RoundInvariantError("roster has no human seat")
    tell_seat = (human_seat + 2) % NUM_PLAYERS
    ai_players: dict[int, AIPlayer] = {}
    for seat, config in enumerate(roster):
        if config.is_human:
            continue
        if skill_tier == SkillTier.ADVANCED:
            ai_players[seat] = AdvancedAIPlayer()
        else:
            ai_players[seat] = BasicAIPlayer(rng, discard_last=seat == tell_seat)
    return ai_players
