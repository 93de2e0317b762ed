"""Resolve server commands to executable paths.

Desktop launchers frequently start the application with a minimal ``PATH``
that lacks the directories a user's interactive shell adds (Homebrew, nvm,
cargo, ...). Commands such as ``npx`` or ``uvx`` then fail to spawn even
though they work from a terminal. ``resolve_command`` looks in those places
too before giving up.
"""

import os
import shutil
from pathlib import Path

from mcp_bridge.logging import get_logger

logger = get_logger("command_resolver")

USER_BIN_DIRS = (
    "/usr/local/bin",
    "/opt/homebrew/bin",
    "/opt/local/bin",
    "~/.local/bin",
    "~/.cargo/bin",
    "~/.bun/bin",
    "~/.deno/bin",
    "~/.volta/bin",
)


def _candidate_dirs() -> list[Path]:
    dirs = [Path(d).expanduser() for d in USER_BIN_DIRS]

    # Newest installed node version first
    nvm_root = Path("~/.nvm/versions/node").expanduser()
    if nvm_root.is_dir():
        dirs.extend(sorted(nvm_root.glob("*/bin"), reverse=True))

    return [d for d in dirs if d.is_dir()]


def resolve_command(command: str, search_path: str | None = None) -> str:
    """
    Resolve ``command`` to the path of an executable.

    Args:
        command: Logical command name, e.g. ``"npx"``.
        search_path: Overrides the host ``PATH`` for the first lookup.

    Returns:
        The resolved executable path, or ``command`` unchanged when it is
        already a path or cannot be found. Never raises, so a failing spawn
        still reports the original command.
    """
    if not command or os.sep in command or (os.altsep and os.altsep in command):
        return command

    try:
        found = shutil.which(command, path=search_path)
        if found:
            return found

        for directory in _candidate_dirs():
            found = shutil.which(command, path=str(directory))
            if found:
                logger.debug(f"Found {command} outside PATH in {directory}")
                return found
    except (OSError, ValueError) as e:
        logger.debug(f"Could not resolve command {command}: {e}")

    return command
