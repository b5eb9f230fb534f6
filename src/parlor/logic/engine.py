"""
Round engine: the per-round turn state machine.

One RoundEngine owns one RoundState for the lifetime of a round and drives
AWAITING_DRAW -> AWAITING_DISCARD -> AWAITING_RESPONSES until a terminal
outcome. Every terminal transition (win, wall exhaustion, quit, restart) is a
RoundOutcome value returned through the step methods; nothing is signalled
by raising. Human decisions are read from an InputSource, computer decisions
from the AIPlayerController.

Failure containment:
- GameRuleError from a human command is reported as an ErrorEvent and the
  same decision is asked again.
- Any other exception escaping a step abandons the round as a draw with a
  diagnostic message (logged with traceback).
"""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import structlog

from parlor.logic.ai_player import create_ai_players
from parlor.logic.ai_player_controller import AIPlayerController
from parlor.logic.call_resolution import (
    apply_meld_claim,
    pick_best_claim,
    resolve_all_passed,
    responder_order,
    validate_claim,
)
from parlor.logic.enums import ClaimType, CommandType, DrawReason, RoundPhase, SkillTier
from parlor.logic.events import ErrorEvent, GameEvent, PlayedViewEvent, RoundEndEvent, seat_target
from parlor.logic.exceptions import (
    GameRuleError,
    InvalidActionError,
    InvalidMeldError,
    InvalidWinError,
    NotYourTurnError,
    RoundInvariantError,
)
from parlor.logic.melds import chow_pair_from_indices
from parlor.logic.round import (
    build_played_view,
    draw_replacement_tile,
    draw_tile,
    init_round,
    meld_views,
)
from parlor.logic.settings import NUM_PLAYERS, GameSettings, validate_settings
from parlor.logic.state_utils import check_invariants
from parlor.logic.turn import (
    build_discard_win,
    build_hint,
    build_response_request,
    build_self_drawn_win,
    build_turn_request,
    process_discard,
    process_self_kong,
    tile_at_index,
)
from parlor.logic.types import (
    Claim,
    DrawOutcome,
    InputRequest,
    QuitOutcome,
    RestartOutcome,
    WinOutcome,
)
from parlor.logic.wall import create_wall

if TYPE_CHECKING:
    from parlor.logic.input_source import InputSource
    from parlor.logic.state import RoundState
    from parlor.logic.types import Command, RoundOutcome, SeatConfig
    from parlor.logic.wall import Wall

logger = structlog.get_logger()

EventListener = Callable[[GameEvent], None]


class RoundEngine:
    """
    Turn state machine for a single round.

    Construct with the house seat, the four-seat roster and the skill tier,
    then call run() once. The final state and every emitted event stay
    available on the engine afterwards.
    """

    def __init__(  # noqa: PLR0913
        self,
        house_seat: int,
        roster: Sequence[SeatConfig],
        skill_tier: SkillTier,
        input_source: InputSource,
        *,
        rng: random.Random | None = None,
        wall: Wall | None = None,
        settings: GameSettings | None = None,
        listener: EventListener | None = None,
        controller: AIPlayerController | None = None,
        initial_state: RoundState | None = None,
    ) -> None:
        self._settings = settings or GameSettings()
        validate_settings(self._settings)
        if not (0 <= house_seat < NUM_PLAYERS):
            raise ValueError(f"house_seat must be in [0, {NUM_PLAYERS - 1}], got {house_seat}")
        self._house_seat = house_seat
        self._roster = tuple(roster)
        self._skill_tier = skill_tier
        self._input_source = input_source
        self._rng = rng if rng is not None else random.Random()  # noqa: S311
        self._wall = wall
        self._listener = listener
        self._controller = controller

        self.state: RoundState | None = initial_state
        self.events: list[GameEvent] = []
        self.outcome: RoundOutcome | None = None

        # seat currently deciding its discard; current_drawer already points past it after a draw
        self._turn_seat: int | None = None
        self._drawn_tile: int | None = None
        self._can_self_win = False
        if initial_state is not None and initial_state.phase == RoundPhase.AWAITING_DISCARD:
            self._turn_seat = (initial_state.current_drawer - 1) % NUM_PLAYERS
            self._can_self_win = True

    @property
    def phase(self) -> RoundPhase:
        if self.outcome is not None:
            return RoundPhase.FINISHED
        if self.state is None:
            return RoundPhase.AWAITING_DRAW
        return self.state.phase

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def run(self) -> RoundOutcome:
        """
        Play the round to completion and return its single outcome.

        Never raises for anything that happens inside the round: unexpected
        faults become a draw carrying a diagnostic.
        """
        if self.outcome is not None:
            raise RuntimeError("round already finished")

        structlog.contextvars.bind_contextvars(house_seat=self._house_seat)
        try:
            try:
                outcome = self._play()
            except Exception as e:
                logger.exception("round aborted by internal fault")
                outcome = DrawOutcome(reason=DrawReason.FAULT, diagnostic=f"Fatal: {e}")
            self.outcome = outcome
            logger.info("round finished", outcome=outcome.type)
            try:
                self._emit(self._build_round_end_event(outcome))
            except Exception:
                # the outcome stands; only its delivery failed
                logger.exception("round end event not delivered")
            return outcome
        finally:
            structlog.contextvars.unbind_contextvars("house_seat")

    def _play(self) -> RoundOutcome:
        if self.state is None:
            wall = self._wall if self._wall is not None else create_wall(self._rng)
            self.state, events = init_round(self._house_seat, self._roster, wall, self._skill_tier)
            self._emit_all(events)
            self._check(on_turn_seat=None)
        if self._controller is None:
            self._controller = AIPlayerController(create_ai_players(self._roster, self._skill_tier, self._rng))

        while True:
            phase = self.state.phase
            if phase == RoundPhase.AWAITING_DRAW:
                outcome = self._draw_step()
            elif phase == RoundPhase.AWAITING_DISCARD:
                outcome = self._discard_step()
            elif phase == RoundPhase.AWAITING_RESPONSES:
                outcome = self._response_step()
            else:
                raise RoundInvariantError(f"cannot continue a round in phase {phase}")
            if outcome is not None:
                return outcome

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _draw_step(self) -> RoundOutcome | None:
        seat = self.state.current_drawer
        self.state, events, tile_id = draw_tile(self.state)
        self._emit_all(events)
        if tile_id is None:
            logger.info("wall exhausted", seat=seat, turn_count=self.state.turn_count)
            return DrawOutcome(reason=DrawReason.WALL_EXHAUSTED)
        logger.debug("tile drawn", seat=seat, tile_id=tile_id)
        self._turn_seat = seat
        self._drawn_tile = tile_id
        self._can_self_win = True
        self._check(on_turn_seat=seat)
        return None

    def _replacement_draw(self, seat: int) -> RoundOutcome | None:
        self.state, events, tile_id = draw_replacement_tile(self.state, seat)
        self._emit_all(events)
        if tile_id is None:
            logger.info("wall exhausted on kong replacement", seat=seat)
            return DrawOutcome(reason=DrawReason.WALL_EXHAUSTED)
        self._drawn_tile = tile_id
        self._can_self_win = True
        self._check(on_turn_seat=seat)
        return None

    def _discard_step(self) -> RoundOutcome | None:
        seat = self._turn_seat
        if seat is None:
            raise RoundInvariantError("no seat is on turn")
        if self._controller.is_ai_player(seat):
            return self._ai_turn(seat)
        return self._human_turn(seat)

    def _ai_turn(self, seat: int) -> RoundOutcome | None:
        decision = self._controller.get_turn_action(seat, self.state)
        if decision is None:
            raise RoundInvariantError(f"seat {seat} has no AI player")
        if decision.declare_win:
            if not self._can_self_win:
                raise RoundInvariantError(f"seat {seat} declared a win without drawing")
            return build_self_drawn_win(self.state, seat, self._drawn_tile)
        if decision.discard_tile is None:
            raise RoundInvariantError(f"seat {seat} chose neither a win nor a discard")
        self.state, events = process_discard(self.state, seat, decision.discard_tile)
        self._emit_all(events)
        self._check(on_turn_seat=None)
        return None

    def _human_turn(self, seat: int) -> RoundOutcome | None:
        while True:
            request = build_turn_request(
                self.state,
                seat,
                drawn_tile=self._drawn_tile,
                can_self_win=self._can_self_win,
            )
            command = self._request(request)
            if command.command == CommandType.QUIT:
                return QuitOutcome()
            if command.command == CommandType.RESTART:
                return RestartOutcome()
            if self._answer_info_command(command, request):
                continue
            try:
                outcome, finished = self._apply_turn_command(seat, command)
            except GameRuleError as e:
                self._report_error(seat, e)
                continue
            if outcome is not None or finished:
                return outcome

    def _apply_turn_command(self, seat: int, command: Command) -> tuple[RoundOutcome | None, bool]:
        """
        Apply a turn command of the human seat.

        Returns (outcome, finished): finished is True once the turn is over.
        """
        if command.command == CommandType.DISCARD:
            tile_id = tile_at_index(self.state, seat, command.index)
            self.state, events = process_discard(self.state, seat, tile_id)
            self._emit_all(events)
            self._check(on_turn_seat=None)
            return None, True

        if command.command == CommandType.KONG:
            self.state, events = process_self_kong(self.state, seat)
            self._emit_all(events)
            return self._replacement_draw(seat), False

        if command.command == CommandType.MAHJONG:
            if not self._can_self_win:
                raise InvalidWinError("you can only declare mahjong after drawing a tile")
            return build_self_drawn_win(self.state, seat, self._drawn_tile), True

        if command.command == CommandType.PUNG:
            raise InvalidMeldError("you can only pung other's tiles")
        if command.command == CommandType.CHOW:
            raise InvalidMeldError("you can only chow your upper hand's tiles")
        raise InvalidActionError("must take action: discard a tile, declare kong or mahjong")

    def _response_step(self) -> RoundOutcome | None:
        discarder_seat = self.state.discarder_seat
        if discarder_seat is None or self.state.current_discard is None:
            raise RoundInvariantError("response window without a current discard")

        claims: list[Claim] = []
        for seat in responder_order(discarder_seat):
            if self._controller.is_ai_player(seat):
                claim = self._controller.get_call_response(seat, self.state)
                if claim is not None:
                    validate_claim(self.state, claim)
                    claims.append(claim)
                continue
            response = self._human_response(seat)
            if isinstance(response, (QuitOutcome, RestartOutcome)):
                return response
            if response is not None:
                claims.append(response)

        best = pick_best_claim(claims, discarder_seat)
        if best is None:
            self.state = resolve_all_passed(self.state)
            self._check(on_turn_seat=None)
            return None

        if best.claim_type == ClaimType.WIN:
            logger.info("win on discard", winner_seat=best.seat, loser_seat=discarder_seat)
            return build_discard_win(self.state, best.seat)

        self.state, events, _meld = apply_meld_claim(self.state, best)
        self._emit_all(events)
        self._turn_seat = best.seat
        self._drawn_tile = None
        self._can_self_win = False
        if best.claim_type == ClaimType.KONG:
            return self._replacement_draw(best.seat)
        self._check(on_turn_seat=best.seat)
        return None

    def _human_response(self, seat: int) -> Claim | QuitOutcome | RestartOutcome | None:
        """Ask the human how to respond to the current discard; None means pass."""
        request = build_response_request(self.state, seat)
        if not self._settings.prompt_human_without_claims and not request.available_claims:
            return None

        while True:
            command = self._request(request)
            if command.command == CommandType.QUIT:
                return QuitOutcome()
            if command.command == CommandType.RESTART:
                return RestartOutcome()
            if self._answer_info_command(command, request):
                continue
            if command.command == CommandType.CONTINUE:
                return None
            try:
                claim = self._claim_from_command(seat, command)
                validate_claim(self.state, claim)
            except GameRuleError as e:
                self._report_error(seat, e)
                continue
            return claim

    def _claim_from_command(self, seat: int, command: Command) -> Claim:
        if command.command == CommandType.MAHJONG:
            return Claim(seat=seat, claim_type=ClaimType.WIN)
        if command.command == CommandType.KONG:
            return Claim(seat=seat, claim_type=ClaimType.KONG)
        if command.command == CommandType.PUNG:
            return Claim(seat=seat, claim_type=ClaimType.PUNG)
        if command.command == CommandType.CHOW:
            pair = chow_pair_from_indices(self.state.players[seat].tiles, command.index_1, command.index_2)
            return Claim(seat=seat, claim_type=ClaimType.CHOW, chow_tiles=pair)
        raise NotYourTurnError("It is not your turn to discard")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _request(self, request: InputRequest) -> Command:
        command = self._input_source.request_command(request)
        logger.debug("human command", seat=request.seat, phase=request.phase, command=command.command)
        return command

    def _answer_info_command(self, command: Command, request: InputRequest) -> bool:
        """Handle Help and Played, which never change state. Returns True if handled."""
        if command.command == CommandType.HELP:
            self._emit(build_hint(request))
            return True
        if command.command == CommandType.PLAYED:
            self._emit(PlayedViewEvent(target=seat_target(request.seat), view=build_played_view(self.state)))
            return True
        return False

    def _report_error(self, seat: int, error: GameRuleError) -> None:
        logger.info("command rejected", seat=seat, code=error.code, reason=str(error))
        self._emit(ErrorEvent(target=seat_target(seat), code=error.code, message=str(error)))

    def _check(self, *, on_turn_seat: int | None) -> None:
        if self._settings.check_invariants:
            check_invariants(self.state, on_turn_seat)

    def _emit(self, event: GameEvent) -> None:
        self.events.append(event)
        if self._listener is not None:
            self._listener(event)

    def _emit_all(self, events: Sequence[GameEvent]) -> None:
        for event in events:
            self._emit(event)

    def _build_round_end_event(self, outcome: RoundOutcome) -> RoundEndEvent:
        if not isinstance(outcome, WinOutcome) or self.state is None:
            return RoundEndEvent(result=outcome)
        winner = self.state.players[outcome.winner_seat]
        tiles = winner.tiles
        if outcome.loser_seat is not None and outcome.winning_tile is not None:
            tiles = tuple(sorted((*tiles, outcome.winning_tile)))
        return RoundEndEvent(result=outcome, winner_tiles=tiles, winner_melds=meld_views(winner.melds))


def start_round(  # noqa: PLR0913
    house_seat: int,
    roster: Sequence[SeatConfig],
    skill_tier: SkillTier,
    input_source: InputSource,
    *,
    rng: random.Random | None = None,
    wall: Wall | None = None,
    settings: GameSettings | None = None,
    listener: EventListener | None = None,
    controller: AIPlayerController | None = None,
) -> RoundOutcome:
    """
    Play one round and return its outcome.

    rng drives the wall shuffle and the basic-tier random discards; pass a
    seeded random.Random (or an explicit wall) for a reproducible round.
    """
    engine = RoundEngine(
        house_seat,
        roster,
        skill_tier,
        input_source,
        rng=rng,
        wall=wall,
        settings=settings,
        listener=listener,
        controller=controller,
    )
    return engine.run()
