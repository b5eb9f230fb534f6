"""
Unit tests for the match ledger: initialization, payments, house rotation
and termination.
"""

import pytest

from parlor.logic.enums import CommandType, DrawReason
from parlor.logic.exceptions import RoundInvariantError, UnsupportedSettingsError
from parlor.logic.game import (
    MatchState,
    apply_round_outcome,
    calculate_payments,
    final_standings,
    init_match,
    run_match,
)
from parlor.logic.mock import ScriptedInputSource
from parlor.logic.rng import determine_first_house
from parlor.logic.settings import GameSettings
from parlor.logic.types import DrawOutcome, QuitOutcome, RestartOutcome, SeatConfig, SimpleCommand, WinOutcome
from parlor.tests.conftest import create_roster

SEED = "ab" * 32


def _win(winner: int, loser: int | None = None, score: int = 2) -> WinOutcome:
    return WinOutcome(winner_seat=winner, loser_seat=loser, score=score, hand_points=score, kong_bonus=0)


def _match(**updates) -> MatchState:
    return init_match(create_roster()).model_copy(update=updates)


class TestInitMatch:
    def test_defaults(self):
        match = init_match(create_roster())

        assert match.scores == (5000, 5000, 5000, 5000)
        assert match.house_seat == 0
        assert match.round_number == 1
        assert match.termination_round == 8
        assert match.finished is False

    def test_seed_picks_first_house(self):
        match = init_match(create_roster(), seed=SEED)
        assert match.house_seat == determine_first_house(SEED)

    def test_invalid_seed(self):
        with pytest.raises(ValueError, match="64 hex characters"):
            init_match(create_roster(), seed="abc")

    def test_roster_needs_one_human(self):
        roster = [SeatConfig(name=f"Bot{i}") for i in range(4)]
        with pytest.raises(RoundInvariantError, match="exactly one human"):
            init_match(roster)

    def test_unsupported_settings(self):
        with pytest.raises(UnsupportedSettingsError, match="termination_round"):
            init_match(create_roster(), GameSettings(termination_round=0))


class TestCalculatePayments:
    def test_self_drawn_win_paid_by_everyone(self):
        match = _match(house_seat=0)
        payments = calculate_payments(match, _win(2, score=3), GameSettings())

        # (3 + 0) * 100 + 3 from each of three seats
        assert payments == (-303, -303, 909, -303)

    def test_discard_win_paid_by_discarder(self):
        match = _match(house_seat=0)
        payments = calculate_payments(match, _win(1, loser=3, score=2), GameSettings())

        assert payments == (0, 302, 0, -302)

    def test_house_bonus_grows_with_streak(self):
        match = _match(house_seat=1, house_streak=2)
        payments = calculate_payments(match, _win(1, loser=0, score=2), GameSettings())

        # (3 + 2 + 1) * 100 + 2
        assert payments == (-602, 602, 0, 0)

    def test_payments_sum_to_zero(self):
        match = _match(house_seat=3, house_streak=1)
        assert sum(calculate_payments(match, _win(3, score=7), GameSettings())) == 0


class TestApplyRoundOutcome:
    def test_house_win_keeps_house(self):
        match = apply_round_outcome(_match(house_seat=2), _win(2, loser=0))

        assert match.house_seat == 2
        assert match.house_streak == 1
        assert match.round_number == 1
        assert len(match.history) == 1

    def test_other_win_rotates_house(self):
        match = apply_round_outcome(_match(house_seat=2, house_streak=3), _win(1, loser=0))

        assert match.house_seat == 3
        assert match.house_streak == 0
        assert match.scores[1] > 5000

    def test_draw_rotates_house_without_payments(self):
        match = apply_round_outcome(_match(house_seat=3), DrawOutcome(reason=DrawReason.WALL_EXHAUSTED))

        assert match.house_seat == 0
        assert match.scores == (5000,) * 4
        assert match.history[0].payments == (0, 0, 0, 0)

    def test_fault_is_recorded_as_draw(self):
        outcome = DrawOutcome(reason=DrawReason.FAULT, diagnostic="Fatal: boom")
        match = apply_round_outcome(_match(), outcome)

        assert match.history[0].outcome.diagnostic == "Fatal: boom"
        assert match.round_number == 2

    def test_restart_changes_nothing(self):
        match = _match(house_seat=1, round_number=3)
        assert apply_round_outcome(match, RestartOutcome()) == match

    def test_quit_finishes_match(self):
        match = apply_round_outcome(_match(round_number=4), QuitOutcome())

        assert match.finished is True
        assert match.round_number == 4
        assert match.history == ()

    def test_last_round_ends_match(self):
        match = apply_round_outcome(_match(round_number=8), DrawOutcome())

        assert match.finished is True
        assert match.round_number == 8

    def test_house_win_extends_last_round(self):
        match = apply_round_outcome(_match(round_number=8, house_seat=0), _win(0))

        assert match.finished is False
        assert match.round_number == 8

    def test_house_streak_does_not_count_toward_termination(self):
        settings = GameSettings(termination_round=2)
        match = init_match(create_roster(), settings)

        match = apply_round_outcome(match, _win(0), settings)
        match = apply_round_outcome(match, _win(0, loser=2), settings)
        assert match.round_number == 1
        assert match.house_streak == 2

        match = apply_round_outcome(match, DrawOutcome(), settings)
        assert match.finished is False
        assert match.round_number == 2
        assert match.house_seat == 1

        match = apply_round_outcome(match, DrawOutcome(), settings)
        assert match.finished is True
        assert [record.round_number for record in match.history] == [1, 1, 1, 2]

    def test_finished_match_rejects_outcomes(self):
        with pytest.raises(ValueError, match="already finished"):
            apply_round_outcome(_match(finished=True), DrawOutcome())


class TestFinalStandings:
    def test_sorted_by_score_then_seat(self):
        match = _match(scores=(4000, 6000, 4000, 6000))

        standings = final_standings(match)

        assert [s.seat for s in standings] == [1, 3, 0, 2]
        assert standings[0].name == "Bot1"


class TestRunMatch:
    def test_autoplay_match_runs_to_termination(self):
        settings = GameSettings(termination_round=2)
        rounds = []

        match = run_match(
            create_roster(),
            ScriptedInputSource(autoplay=True),
            settings=settings,
            seed=SEED,
            on_round_end=rounds.append,
        )

        assert match.finished is True
        assert len(match.history) == 2
        assert len(rounds) == 2
        assert sum(match.scores) == 4 * 5000

    def test_same_seed_same_match(self):
        settings = GameSettings(termination_round=2)
        first = run_match(create_roster(), ScriptedInputSource(autoplay=True), settings=settings, seed=SEED)
        second = run_match(create_roster(), ScriptedInputSource(autoplay=True), settings=settings, seed=SEED)

        assert first == second

    def test_quit_ends_match_at_first_prompt(self):
        source = ScriptedInputSource([SimpleCommand(command=CommandType.QUIT)])
        match = run_match(create_roster(), source, seed=SEED)

        assert match.finished is True
        assert match.history == ()
        assert len(source.requests) == 1
