"""Classification of input lines into shell commands."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from surr_cli.shared.exceptions import InvalidArgumentError


class CommandKind(Enum):
    EMPTY = "empty"
    HELP = "help"
    OPTIONS = "options"
    SET = "set"
    SAVE_PROFILE = "save_profile"
    SAVE_QUERY = "save_query"
    DELETE_PROFILE = "delete_profile"
    DELETE_QUERY = "delete_query"
    SHOW_PROFILES = "show_profiles"
    SHOW_QUERIES = "show_queries"
    RUN_PROFILE = "run_profile"
    RUN_QUERY = "run_query"
    QUERY = "query"


@dataclass(frozen=True, slots=True)
class Command:
    """A parsed input line.

    ``name`` carries the profile/query/variable name, ``value`` the `.set` value and
    ``text`` the literal query for QUERY commands.
    """

    kind: CommandKind
    name: str | None = None
    value: str | None = None
    text: str | None = None


ZERO_ARG_COMMANDS = {
    ".help": CommandKind.HELP,
    ".options": CommandKind.OPTIONS,
}

# (command, keyword) -> kind, for the `.<verb> profile|query <name>` family.
NAMED_COMMANDS: dict[str, dict[str, CommandKind]] = {
    ".save": {"profile": CommandKind.SAVE_PROFILE, "query": CommandKind.SAVE_QUERY},
    ".delete": {"profile": CommandKind.DELETE_PROFILE, "query": CommandKind.DELETE_QUERY},
    ".run": {"profile": CommandKind.RUN_PROFILE, "query": CommandKind.RUN_QUERY},
}

SHOW_COMMANDS = {"profiles": CommandKind.SHOW_PROFILES, "queries": CommandKind.SHOW_QUERIES}

META_COMMANDS = (".help", ".options", ".set", ".save", ".show", ".delete", ".run")


def parse_line(line: str) -> Command:
    """Turn one input line into a Command.

    Raises InvalidArgumentError with a usage message when a meta-command has the
    wrong number of arguments or an unknown keyword. Anything that is not a
    meta-command is a literal query and is kept verbatim.
    """
    parts = line.split()
    if not parts:
        return Command(CommandKind.EMPTY)

    stripped = line.strip()
    if stripped in ZERO_ARG_COMMANDS:
        return Command(ZERO_ARG_COMMANDS[stripped])

    head = parts[0]
    if head == ".set":
        if len(parts) != 3:
            raise InvalidArgumentError("Usage: .set <variable> <value>")
        return Command(CommandKind.SET, name=parts[1], value=parts[2])
    if head == ".show":
        return _parse_show(parts)
    if head in NAMED_COMMANDS:
        return _parse_named(head, parts)

    return Command(CommandKind.QUERY, text=line)


def _parse_show(parts: list[str]) -> Command:
    if len(parts) != 2:
        raise InvalidArgumentError("Usage: .show profiles|queries")
    kind = SHOW_COMMANDS.get(parts[1])
    if kind is None:
        raise InvalidArgumentError("Not a command. Use: profiles|queries")
    return Command(kind)


def _parse_named(head: str, parts: list[str]) -> Command:
    if len(parts) < 2:
        raise InvalidArgumentError(f"Usage: {head} profile|query <name>")
    keyword = parts[1]
    kind = NAMED_COMMANDS[head].get(keyword)
    if kind is None:
        raise InvalidArgumentError("Not a command. Use: profile|query")
    if len(parts) != 3:
        raise InvalidArgumentError(f"Usage: {head} {keyword} <name>")
    return Command(kind, name=parts[2])
