"""
Integration tests for complete rounds and matches.

The human seat autoplays (passes on every discard, discards its last tile),
so whole rounds run through the real engine, AI players and ledger with the
invariant checks enabled after every step.
"""

import random

import pytest

from parlor.logic.engine import RoundEngine
from parlor.logic.enums import DrawReason, RoundOutcomeType, SkillTier
from parlor.logic.events import DiscardEvent, MeldEvent, RoundEndEvent
from parlor.logic.game import run_match
from parlor.logic.mock import ScriptedInputSource
from parlor.logic.settings import GameSettings
from parlor.logic.state_utils import count_tiles
from parlor.logic.tiles import NUM_TILES
from parlor.logic.types import WinOutcome
from parlor.tests.conftest import create_roster

ROUND_SEEDS = range(25)


def _play(seed: int, skill_tier: SkillTier, house_seat: int = 0) -> RoundEngine:
    engine = RoundEngine(
        house_seat,
        create_roster(),
        skill_tier,
        ScriptedInputSource(autoplay=True),
        rng=random.Random(seed),
    )
    engine.run()
    return engine


class TestFullRounds:
    @pytest.mark.parametrize("seed", ROUND_SEEDS)
    def test_basic_round_ends_in_wall_exhaustion(self, seed):
        engine = _play(seed, SkillTier.BASIC, house_seat=seed % 4)

        assert engine.outcome.type == RoundOutcomeType.DRAW
        assert engine.outcome.reason == DrawReason.WALL_EXHAUSTED
        assert engine.state.wall.tiles == ()
        assert count_tiles(engine.state) == NUM_TILES
        # nobody claims in the basic tier
        assert not any(isinstance(e, MeldEvent) for e in engine.events)

    @pytest.mark.parametrize("seed", ROUND_SEEDS)
    def test_advanced_round_never_faults(self, seed):
        engine = _play(seed, SkillTier.ADVANCED, house_seat=seed % 4)

        assert engine.outcome.type in (RoundOutcomeType.WIN, RoundOutcomeType.DRAW)
        if engine.outcome.type == RoundOutcomeType.DRAW:
            assert engine.outcome.reason == DrawReason.WALL_EXHAUSTED
        assert isinstance(engine.events[-1], RoundEndEvent)

    def test_advanced_wins_are_scored(self):
        wins = [
            engine.outcome
            for engine in (_play(seed, SkillTier.ADVANCED) for seed in ROUND_SEEDS)
            if isinstance(engine.outcome, WinOutcome)
        ]

        assert wins
        for outcome in wins:
            assert outcome.winner_seat != 0
            assert outcome.hand_points >= 1
            assert outcome.score == outcome.hand_points + outcome.kong_bonus

    def test_same_seed_same_round(self):
        first = _play(7, SkillTier.ADVANCED)
        second = _play(7, SkillTier.ADVANCED)

        assert first.outcome == second.outcome
        assert first.events == second.events

    def test_discards_only_follow_draws(self):
        engine = _play(3, SkillTier.BASIC)
        discards = [e for e in engine.events if isinstance(e, DiscardEvent)]

        # every draw of the round but the failed last one ended in a discard
        assert len(discards) == engine.state.turn_count
        assert len(engine.state.discard_pile) == len(discards)


class TestFullMatch:
    @pytest.mark.parametrize("skill_tier", [SkillTier.BASIC, SkillTier.ADVANCED])
    def test_match_runs_to_termination(self, skill_tier):
        settings = GameSettings(termination_round=4)

        match = run_match(
            create_roster(),
            ScriptedInputSource(autoplay=True),
            settings=settings,
            seed="5a" * 32,
            skill_tier=skill_tier,
        )

        assert match.finished is True
        assert len(match.history) >= 4
        assert sum(match.scores) == 4 * settings.starting_score
        assert all(record.outcome.type != RoundOutcomeType.QUIT for record in match.history)
        for record in match.history:
            assert sum(record.payments) == 0

    def test_house_rotates_after_draws(self):
        match = run_match(
            create_roster(),
            ScriptedInputSource(autoplay=True),
            settings=GameSettings(termination_round=3),
            seed="5a" * 32,
        )

        houses = [record.house_seat for record in match.history]
        assert houses == [houses[0], (houses[0] + 1) % 4, (houses[0] + 2) % 4]
