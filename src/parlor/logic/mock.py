from collections.abc import Iterable

from parlor.logic.enums import CommandType, RoundPhase
from parlor.logic.input_source import InputSource
from parlor.logic.types import Command, DiscardCommand, InputRequest, SimpleCommand


class ScriptedInputSource(InputSource):
    """
    Input source that replays a fixed list of commands for the human seat.

    Every request is recorded in `requests` so tests can assert on what the
    human was asked. With autoplay enabled, an exhausted script keeps the
    round moving: pass on every discard, discard the last tile on turn.
    """

    def __init__(self, commands: Iterable[Command] = (), *, autoplay: bool = False) -> None:
        self._commands = list(commands)
        self._autoplay = autoplay
        self.requests: list[InputRequest] = []

    @property
    def remaining(self) -> int:
        return len(self._commands)

    def request_command(self, request: InputRequest) -> Command:
        self.requests.append(request)
        if self._commands:
            return self._commands.pop(0)
        if not self._autoplay:
            raise RuntimeError(f"no scripted command left for {request.phase} request")
        if request.phase == RoundPhase.AWAITING_RESPONSES:
            return SimpleCommand(command=CommandType.CONTINUE)
        return DiscardCommand(index=len(request.hand))
