"""
Text command parser for the human seat.

Commands are case-insensitive keywords separated by whitespace:

    discard N   chow I J   continue   pung   kong   mahjong
    quit        restart    help       played

Hand positions are 1-based. Range checks against the actual hand happen in
the round engine, so the parser only rejects text that is not a command.
"""

from parlor.logic.enums import CommandType
from parlor.logic.types import ChowCommand, Command, DiscardCommand, SimpleCommand

_KEYWORDS: dict[str, CommandType] = {command.value: command for command in CommandType}

# short forms accepted at the prompt
_ALIASES: dict[str, CommandType] = {
    "d": CommandType.DISCARD,
    "c": CommandType.CONTINUE,
    "h": CommandType.HELP,
    "q": CommandType.QUIT,
}


class CommandParseError(ValueError):
    """Input text is not a valid command."""


def _parse_position(token: str) -> int:
    try:
        value = int(token)
    except ValueError:
        raise CommandParseError(f"{token!r} is not a number") from None
    if value <= 0:
        raise CommandParseError(f"hand positions start at 1, got {value}")
    return value


def parse_command(text: str) -> Command:
    """
    Parse one line of input into a Command.

    Raises:
        CommandParseError: If the line is empty, the keyword is unknown or the
            argument count is wrong

    """
    tokens = text.strip().lower().split()
    if not tokens:
        raise CommandParseError("empty command")

    keyword, args = tokens[0], tokens[1:]
    command_type = _KEYWORDS.get(keyword) or _ALIASES.get(keyword)
    if command_type is None:
        raise CommandParseError(f"unknown command {keyword!r}, type 'help' for hints")

    if command_type == CommandType.DISCARD:
        if len(args) != 1:
            raise CommandParseError("usage: discard N")
        return DiscardCommand(index=_parse_position(args[0]))

    if command_type == CommandType.CHOW:
        if len(args) != 2:  # noqa: PLR2004
            raise CommandParseError("usage: chow I J")
        return ChowCommand(index_1=_parse_position(args[0]), index_2=_parse_position(args[1]))

    if args:
        raise CommandParseError(f"{command_type.value!r} takes no arguments")
    return SimpleCommand(command=command_type)
