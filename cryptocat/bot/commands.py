"""Command parsing and help text generation."""

from ..models import Command
from .messages import COMMAND_DESCRIPTIONS, HELP_HEADER, HELP_LINE

_COMMANDS_BY_NAME = {command.value: command for command in Command}


def parse_command(text: str, bot_username: str | None = None) -> Command | None:
    """Parse message text into a known command.

    Accepts ``/name``, ``/name@botname`` and trailing arguments. Names are
    matched case-insensitively.

    Args:
        text: Raw message text.
        bot_username: Username of this bot; commands addressed to another
            bot are rejected when it is known.

    Returns:
        Parsed Command, or None if the text is not one of our commands.
    """
    if not text or not text.startswith("/"):
        return None

    head = text.split(maxsplit=1)[0][1:]
    name, _, mention = head.partition("@")

    if mention and bot_username and mention.lower() != bot_username.lower():
        return None

    return _COMMANDS_BY_NAME.get(name.lower())


def build_help_text() -> str:
    """Build the /help reply from the static command table."""
    lines = [HELP_HEADER, ""]
    lines.extend(
        HELP_LINE.format(name=command.value, description=description)
        for command, description in COMMAND_DESCRIPTIONS
    )
    return "\n".join(lines)
