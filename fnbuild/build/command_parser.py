"""
Splits a build command into leading environment assignments and the command proper.
"""

import re
from typing import Dict, NamedTuple

# NAME='value', NAME="value" or NAME=value up to the next whitespace
ENV_ASSIGNMENT = re.compile(r"""(\w+)=(?:'([^']*)'|"([^"]*)"|(\S*))(?:\s+|$)""")


class ParsedCommand(NamedTuple):
    env: Dict[str, str]
    command: str


def parse_command(cmd: str) -> ParsedCommand:
    """
    Parse a compound shell command.

    Tokens are consumed from the left while they look like environment
    assignments. Quotes around a value are stripped. Scanning stops at the
    first token that is not an assignment; the remaining tokens are the
    command, rejoined with single spaces.

    Example:
        >>> parse_command("CGO_ENABLED=1 GOOS=linux go build -o x y")
        ParsedCommand(env={'CGO_ENABLED': '1', 'GOOS': 'linux'}, command='go build -o x y')
        >>> parse_command("FOO='a b' cmd arg")
        ParsedCommand(env={'FOO': 'a b'}, command='cmd arg')
    """
    text = cmd.strip()
    env: Dict[str, str] = {}
    position = 0

    while position < len(text):
        match = ENV_ASSIGNMENT.match(text, position)
        if not match:
            break
        name, single_quoted, double_quoted, bare = match.groups()
        if single_quoted is not None:
            env[name] = single_quoted
        elif double_quoted is not None:
            env[name] = double_quoted
        else:
            env[name] = bare
        position = match.end()

    return ParsedCommand(env=env, command=" ".join(text[position:].split()))
