from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

import structlog

from parlor.console.parser import CommandParseError, parse_command
from parlor.logic.enums import CommandType, RoundPhase
from parlor.logic.input_source import InputSource
from parlor.logic.types import SimpleCommand

if TYPE_CHECKING:
    from parlor.console.renderer import ConsoleRenderer
    from parlor.logic.types import Command, InputRequest

logger = structlog.get_logger()

TURN_PROMPT = "Your turn (discard N, kong, mahjong, help, played, quit, restart)> "
RESPONSE_PROMPT = "Respond (Enter to continue, chow I J, pung, kong, mahjong, help, played, quit)> "


class ConsoleInputSource(InputSource):
    """
    Reads commands for the human seat from a text stream.

    Lines that do not parse are reported and the prompt is shown again. An
    empty line at the response prompt passes on the discard. End of input is
    treated as Quit so a closed terminal ends the match cleanly.
    """

    def __init__(
        self,
        renderer: ConsoleRenderer,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self._renderer = renderer
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout

    def request_command(self, request: InputRequest) -> Command:
        self._renderer.render_request(request)
        responding = request.phase == RoundPhase.AWAITING_RESPONSES
        prompt = RESPONSE_PROMPT if responding else TURN_PROMPT
        while True:
            self._stdout.write(prompt)
            self._stdout.flush()
            line = self._stdin.readline()
            if not line:
                logger.info("input closed, quitting")
                return SimpleCommand(command=CommandType.QUIT)
            if responding and not line.strip():
                return SimpleCommand(command=CommandType.CONTINUE)
            try:
                return parse_command(line)
            except CommandParseError as e:
                print(f"Could not read that: {e}", file=self._stdout)
