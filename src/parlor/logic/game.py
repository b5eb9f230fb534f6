"""
Match initialization and progression: the score ledger around the rounds.

A match is a sequence of rounds played by start_round(). After each round
the ledger settles chip payments, rotates (or keeps) the house and decides
whether the match is over.
"""

from collections.abc import Callable, Sequence

import structlog
from pydantic import BaseModel, ConfigDict

from parlor.logic.ai_player import create_ai_players
from parlor.logic.ai_player_controller import AIPlayerController
from parlor.logic.engine import EventListener, start_round
from parlor.logic.enums import RoundOutcomeType, SkillTier
from parlor.logic.input_source import InputSource
from parlor.logic.rng import create_round_rng, determine_first_house, generate_seed, validate_seed_hex
from parlor.logic.round import create_players
from parlor.logic.settings import NUM_PLAYERS, GameSettings, validate_settings
from parlor.logic.types import RoundOutcome, SeatConfig, WinOutcome

logger = structlog.get_logger()

# stream 0 of the match seed feeds the computer seats; rounds use 1, 2, ...
_AI_STREAM = 0


class RoundRecord(BaseModel):
    """One scored (or abandoned) round in the match history."""

    model_config = ConfigDict(frozen=True)

    round_number: int
    house_seat: int
    outcome: RoundOutcome
    payments: tuple[int, ...]  # chip delta per seat


class PlayerStanding(BaseModel):
    model_config = ConfigDict(frozen=True)

    seat: int
    name: str
    score: int


class MatchState(BaseModel):
    """
    Score ledger state between rounds.

    round_number is 1-based. It only advances when the house passes to the
    next seat: a house win or a restart replays the same round number.
    """

    model_config = ConfigDict(frozen=True)

    roster: tuple[SeatConfig, ...]
    scores: tuple[int, ...]
    house_seat: int
    house_streak: int = 0
    round_number: int = 1
    termination_round: int
    skill_tier: SkillTier = SkillTier.BASIC
    seed: str = ""
    finished: bool = False
    history: tuple[RoundRecord, ...] = ()


def init_match(
    roster: Sequence[SeatConfig],
    settings: GameSettings | None = None,
    seed: str = "",
    *,
    skill_tier: SkillTier = SkillTier.BASIC,
) -> MatchState:
    """
    Initialize a new match.

    Every seat starts with starting_score chips. The first house is drawn
    from the seed; without a seed (test mode) the house is seat 0.
    """
    match_settings = settings or GameSettings()
    validate_settings(match_settings)
    # raises on a malformed roster before any round is played
    create_players(roster)

    if seed:
        validate_seed_hex(seed)
        house_seat = determine_first_house(seed)
    else:
        house_seat = 0

    return MatchState(
        roster=tuple(roster),
        scores=(match_settings.starting_score,) * NUM_PLAYERS,
        house_seat=house_seat,
        termination_round=match_settings.termination_round,
        skill_tier=skill_tier,
        seed=seed,
    )


def calculate_payments(match: MatchState, outcome: WinOutcome, settings: GameSettings) -> tuple[int, ...]:
    """
    Chip deltas per seat for a win.

    Each paying seat pays (base_payment + house_bonus) * payment_unit plus the
    win score, where house_bonus is house_streak + 1 when the house won.
    A self-drawn win is paid by the three other seats, a discard win by the
    discarder alone.
    """
    house_bonus = match.house_streak + 1 if outcome.winner_seat == match.house_seat else 0
    amount = (settings.base_payment + house_bonus) * settings.payment_unit + outcome.score

    if outcome.loser_seat is None:
        payers = [seat for seat in range(NUM_PLAYERS) if seat != outcome.winner_seat]
    else:
        payers = [outcome.loser_seat]

    deltas = [0] * NUM_PLAYERS
    for seat in payers:
        deltas[seat] -= amount
        deltas[outcome.winner_seat] += amount
    return tuple(deltas)


def apply_round_outcome(
    match: MatchState,
    outcome: RoundOutcome,
    settings: GameSettings | None = None,
) -> MatchState:
    """
    Settle a finished round and advance the match.

    - Win: payments are applied. A house win keeps the house and extends the
      streak; any other win rotates the house and resets the streak.
    - Draw: no payments, the house rotates.
    - Quit: the match ends as it stands.
    - Restart: nothing changes; the same round is played again.

    The match ends after the termination round unless the house won it. A
    house win does not count toward termination: the round number stays.
    """
    if match.finished:
        raise ValueError("match is already finished")
    match_settings = settings or GameSettings()

    if outcome.type == RoundOutcomeType.RESTART:
        logger.info("round restarted", round_number=match.round_number)
        return match

    if outcome.type == RoundOutcomeType.QUIT:
        logger.info("match quit", round_number=match.round_number)
        return match.model_copy(update={"finished": True})

    payments = (0,) * NUM_PLAYERS
    house_won = False
    if isinstance(outcome, WinOutcome):
        payments = calculate_payments(match, outcome, match_settings)
        house_won = outcome.winner_seat == match.house_seat

    scores = tuple(score + delta for score, delta in zip(match.scores, payments, strict=True))
    record = RoundRecord(
        round_number=match.round_number,
        house_seat=match.house_seat,
        outcome=outcome,
        payments=payments,
    )

    if house_won:
        new_house, new_streak = match.house_seat, match.house_streak + 1
    else:
        new_house, new_streak = (match.house_seat + 1) % NUM_PLAYERS, 0

    finished = match.round_number >= match.termination_round and not house_won

    logger.info(
        "round settled",
        round_number=match.round_number,
        outcome=outcome.type,
        payments=payments,
        house_seat=new_house,
        house_streak=new_streak,
        finished=finished,
    )

    return match.model_copy(
        update={
            "scores": scores,
            "house_seat": new_house,
            "house_streak": new_streak,
            "round_number": match.round_number if finished or house_won else match.round_number + 1,
            "finished": finished,
            "history": (*match.history, record),
        },
    )


def final_standings(match: MatchState) -> tuple[PlayerStanding, ...]:
    """Seats ordered by score, highest first; ties keep seat order."""
    standings = [
        PlayerStanding(seat=seat, name=config.name, score=match.scores[seat])
        for seat, config in enumerate(match.roster)
    ]
    return tuple(sorted(standings, key=lambda s: (-s.score, s.seat)))


def run_match(  # noqa: PLR0913
    roster: Sequence[SeatConfig],
    input_source: InputSource,
    *,
    settings: GameSettings | None = None,
    seed: str | None = None,
    skill_tier: SkillTier = SkillTier.BASIC,
    listener: EventListener | None = None,
    on_round_end: Callable[[MatchState], None] | None = None,
) -> MatchState:
    """
    Play rounds until the match is finished and return the final ledger.

    Each round attempt (including restarts) gets its own wall stream derived
    from the seed. The computer seats are created once for the whole match.
    """
    match_settings = settings or GameSettings()
    match_seed = seed or generate_seed()
    match = init_match(roster, match_settings, match_seed, skill_tier=skill_tier)

    ai_players = create_ai_players(roster, skill_tier, create_round_rng(match_seed, _AI_STREAM))
    controller = AIPlayerController(ai_players)
    logger.info("match started", house_seat=match.house_seat, skill_tier=skill_tier)

    attempt = 0
    while not match.finished:
        attempt += 1
        structlog.contextvars.bind_contextvars(round_number=match.round_number)
        try:
            outcome = start_round(
                match.house_seat,
                match.roster,
                match.skill_tier,
                input_source,
                rng=create_round_rng(match_seed, attempt),
                settings=match_settings,
                listener=listener,
                controller=controller,
            )
        finally:
            structlog.contextvars.unbind_contextvars("round_number")
        match = apply_round_outcome(match, outcome, match_settings)
        if on_round_end is not None:
            on_round_end(match)

    logger.info("match finished", scores=match.scores, rounds=len(match.history))
    return match
