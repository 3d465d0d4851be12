"""Pure mapping from a logical action plus target to a ``Command``."""

from __future__ import annotations

from typing import Callable, Dict, Optional, Union

from scriptbridge.domain.entities import Command, CommandName, Target
from scriptbridge.domain.errors import NoActiveTargetError


def _with_script(cmd: CommandName, target: Optional[Target]) -> Command:
    if target is None:
        raise NoActiveTargetError()
    return Command(cmd=cmd, id=target.filename, name=target.filename, script=target.script)


def _stop(cmd: CommandName, target: Optional[Target]) -> Command:
    if target is None:
        raise NoActiveTargetError("No active editor to stop.")
    return Command(cmd=cmd, id=target.filename)


def _stop_all(cmd: CommandName, target: Optional[Target]) -> Command:
    return Command(cmd=cmd)


_SHAPES: Dict[CommandName, Callable[[CommandName, Optional[Target]], Command]] = {
    CommandName.RUN: _with_script,
    CommandName.RERUN: _with_script,
    CommandName.SAVE: _with_script,
    CommandName.STOP: _stop,
    CommandName.STOP_ALL: _stop_all,
}

_missing = set(CommandName) - set(_SHAPES)
if _missing:  # pragma: no cover - import-time guard
    raise RuntimeError(f"No command shape for: {sorted(m.value for m in _missing)}")


def build_command(cmd: Union[CommandName, str], target: Optional[Target] = None) -> Command:
    """Build the canonical record for ``cmd``.

    ``stop`` only uses ``target.filename``; ``stopAll`` ignores ``target``.

    Raises:
        ValueError: Unknown command name.
        NoActiveTargetError: A command that needs a target got none.
    """
    name = CommandName(cmd)
    return _SHAPES[name](name, target)


__all__ = ["build_command"]
