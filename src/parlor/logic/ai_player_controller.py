"""
AI player controller as a pure decision-maker.

Maps computer seats to their AI players and exposes the decisions the round
engine needs. The controller never changes round state; the engine applies
the returned decisions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from parlor.logic.ai_player import AIPlayer
    from parlor.logic.state import RoundState
    from parlor.logic.types import Claim, TurnDecision

logger = structlog.get_logger()


class AIPlayerController:
    """
    Decision-maker for the computer seats.

    Provides methods to check AI seat identity and get AI decisions for turn
    actions and discard responses. Does not orchestrate round flow.
    """

    def __init__(self, ai_players: dict[int, AIPlayer]) -> None:
        self._ai_players = ai_players

    def _get_ai_player(self, seat: int) -> AIPlayer | None:
        return self._ai_players.get(seat)

    def is_ai_player(self, seat: int) -> bool:
        """Check if a seat is occupied by an AI player."""
        return seat in self._ai_players

    def get_turn_action(self, seat: int, round_state: RoundState) -> TurnDecision | None:
        """
        Get the AI player's turn decision.

        Returns None if seat is not an AI player.
        """
        ai_player = self._get_ai_player(seat)
        if ai_player is None:
            return None
        decision = ai_player.get_action(round_state.players[seat], round_state)
        logger.debug(
            "ai turn decision",
            seat=seat,
            declare_win=decision.declare_win,
            discard_tile=decision.discard_tile,
        )
        return decision

    def get_call_response(self, seat: int, round_state: RoundState) -> Claim | None:
        """
        Get the AI player's response to the current discard.

        Returns None if the AI player passes or seat is not an AI player.
        """
        ai_player = self._get_ai_player(seat)
        if ai_player is None:
            return None
        claim = ai_player.get_claim(round_state.players[seat], round_state)
        if claim is not None:
            logger.debug("ai claim", seat=seat, claim_type=claim.claim_type)
        return claim
