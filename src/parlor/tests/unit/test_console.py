"""
Unit tests for the console front end: event rendering, prompting and the
command line entry point.
"""

import io
import logging

import pytest
import structlog

from parlor.console.app import COMPUTER_NAMES, build_roster, main
from parlor.console.input_source import RESPONSE_PROMPT, TURN_PROMPT, ConsoleInputSource
from parlor.console.renderer import ConsoleRenderer, describe_outcome, format_hand
from parlor.logic.enums import CommandType, DrawReason, GameErrorCode, RoundPhase
from parlor.logic.events import DiscardEvent, DrawEvent, ErrorEvent, HintEvent, RoundEndEvent
from parlor.logic.game import init_match
from parlor.logic.types import (
    DiscardCommand,
    DrawOutcome,
    InputRequest,
    QuitOutcome,
    SimpleCommand,
    WinOutcome,
)
from parlor.tests.helpers.tiles import tile, tiles

NAMES = ("Alice", "East Wind", "North Star", "West Lake")


def _renderer():
    out = io.StringIO()
    return ConsoleRenderer(0, NAMES, out=out), out


def _turn_request(hand):
    return InputRequest(seat=0, phase=RoundPhase.AWAITING_DISCARD, hand=tuple(hand))


class TestFormatting:
    def test_format_hand_numbers_positions(self):
        assert format_hand(tiles(man="19", pin="5")) == "1:1m 2:9m 3:5p"

    def test_describe_outcomes(self):
        names = dict(enumerate(NAMES))
        win = WinOutcome(winner_seat=2, loser_seat=0, score=4, hand_points=4, kong_bonus=0)
        assert describe_outcome(win, names.__getitem__) == "Mahjong! North Star won on Alice's discard, score 4"
        assert describe_outcome(DrawOutcome(), names.__getitem__) == "Wall exhausted, the round is a draw"
        fault = DrawOutcome(reason=DrawReason.FAULT, diagnostic="Fatal: boom")
        assert describe_outcome(fault, names.__getitem__) == "Round abandoned: Fatal: boom"
        assert describe_outcome(QuitOutcome(), names.__getitem__) == "You quit the game"


class TestConsoleRenderer:
    def test_own_draw_is_shown(self):
        renderer, out = _renderer()
        renderer(DrawEvent(target="seat_0", seat=0, tile_id=tile("5p"), tiles_remaining=40))
        assert "You drew tile 5p (40 left)" in out.getvalue()

    def test_computer_draw_is_hidden(self):
        renderer, out = _renderer()
        renderer(DrawEvent(target="seat_2", seat=2, tile_id=tile("5p"), tiles_remaining=40))
        assert out.getvalue() == ""

    def test_public_discard_uses_seat_name(self):
        renderer, out = _renderer()
        renderer(DiscardEvent(seat=3, tile_id=tile("7s")))
        assert "West Lake discarded 7s" in out.getvalue()

    def test_error_message(self):
        renderer, out = _renderer()
        error = ErrorEvent(target="seat_0", code=GameErrorCode.INVALID_MELD, message="you can only pung other's tiles")
        renderer(error)
        assert "Not allowed: you can only pung other's tiles" in out.getvalue()

    def test_hint_with_nothing_to_do(self):
        renderer, out = _renderer()
        renderer(HintEvent(target="seat_0"))
        assert "nothing to claim, continue" in out.getvalue()

    def test_hint_with_discard_advice(self):
        renderer, out = _renderer()
        renderer(HintEvent(target="seat_0", suggested_discard=tile("9s"), shanten=2))
        assert "Hint: consider discarding 9s; 2 tile(s) short of a ready hand" in out.getvalue()

    def test_hint_for_ready_hand(self):
        renderer, out = _renderer()
        renderer(HintEvent(target="seat_0", suggested_discard=tile("1m"), shanten=0))
        assert "a good discard leaves you ready" in out.getvalue()

    def test_round_end_shows_winning_hand(self):
        renderer, out = _renderer()
        win = WinOutcome(winner_seat=0, score=3, hand_points=3, kong_bonus=0)
        renderer(RoundEndEvent(result=win, winner_tiles=tuple(tiles(man="11"))))
        text = out.getvalue()
        assert "Mahjong! You won self-drawn, score 3" in text
        assert "Winning hand: 1m 1m" in text

    def test_render_standings(self):
        renderer, out = _renderer()
        match = init_match(build_roster("Alice"))
        renderer.render_standings(match)
        text = out.getvalue()
        assert "Scores after 0 round(s), house streak 0:" in text
        assert "You: 5000" in text
        assert "East Wind: 5000" in text


class TestConsoleInputSource:
    def test_reads_command(self):
        renderer, _ = _renderer()
        stdout = io.StringIO()
        source = ConsoleInputSource(renderer, stdin=io.StringIO("discard 2\n"), stdout=stdout)

        command = source.request_command(_turn_request(tiles(man="123")))

        assert command == DiscardCommand(index=2)
        assert TURN_PROMPT in stdout.getvalue()

    def test_reprompts_after_bad_line(self):
        renderer, _ = _renderer()
        stdout = io.StringIO()
        source = ConsoleInputSource(renderer, stdin=io.StringIO("what\ncontinue\n"), stdout=stdout)
        request = InputRequest(seat=0, phase=RoundPhase.AWAITING_RESPONSES, hand=tuple(tiles(man="1")))

        command = source.request_command(request)

        assert command == SimpleCommand(command=CommandType.CONTINUE)
        assert "Could not read that: unknown command 'what'" in stdout.getvalue()
        assert stdout.getvalue().count(RESPONSE_PROMPT) == 2

    def test_empty_line_passes_in_response_window(self):
        renderer, _ = _renderer()
        source = ConsoleInputSource(renderer, stdin=io.StringIO("\n"), stdout=io.StringIO())
        request = InputRequest(seat=0, phase=RoundPhase.AWAITING_RESPONSES, hand=tuple(tiles(man="1")))

        assert source.request_command(request) == SimpleCommand(command=CommandType.CONTINUE)

    def test_empty_line_on_turn_reprompts(self):
        renderer, _ = _renderer()
        stdout = io.StringIO()
        source = ConsoleInputSource(renderer, stdin=io.StringIO("\ndiscard 1\n"), stdout=stdout)

        command = source.request_command(_turn_request(tiles(man="12")))

        assert command == DiscardCommand(index=1)
        assert "Could not read that: empty command" in stdout.getvalue()
        assert stdout.getvalue().count(TURN_PROMPT) == 2

    def test_end_of_input_quits(self):
        renderer, _ = _renderer()
        source = ConsoleInputSource(renderer, stdin=io.StringIO(""), stdout=io.StringIO())
        assert source.request_command(_turn_request([])) == SimpleCommand(command=CommandType.QUIT)

    def test_request_shows_hand_and_discard(self):
        renderer, out = _renderer()
        source = ConsoleInputSource(renderer, stdin=io.StringIO("c\n"), stdout=io.StringIO())
        request = InputRequest(
            seat=0,
            phase=RoundPhase.AWAITING_RESPONSES,
            hand=tuple(tiles(pin="12")),
            current_discard=tile("3p"),
            discarder_seat=3,
        )

        source.request_command(request)

        text = out.getvalue()
        assert "West Lake discarded 3p" in text
        assert "Hand: 1:1p 2:2p" in text


class TestApp:
    @pytest.fixture(autouse=True)
    def _restore_logging(self):
        """main() configures logging for the terminal; put the test configuration back."""
        config = structlog.get_config()
        root = logging.getLogger()
        level = root.level
        yield
        for handler in root.handlers[:]:
            handler.close()
            root.removeHandler(handler)
        root.setLevel(level)
        structlog.configure(**config)

    def test_build_roster(self):
        roster = build_roster("Alice")
        assert [seat.name for seat in roster] == ["Alice", *COMPUTER_NAMES]
        assert [seat.is_human for seat in roster] == [True, False, False, False]

    def test_quit_at_first_prompt(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("quit\n"))

        exit_code = main(["--seed", "ab" * 32, "--name", "Alice"])

        assert exit_code == 0
        output = capsys.readouterr().out
        assert "You quit the game" in output
        assert "Final standings:" in output
        assert "Alice: 5000" in output

    def test_bad_seed(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(""))
        assert main(["--seed", "xyz"]) == 2
        assert "Cannot start match" in capsys.readouterr().err

    def test_rounds_must_be_positive(self, capsys):
        assert main(["--rounds", "0"]) == 2
        assert "--rounds must be at least 1" in capsys.readouterr().err
