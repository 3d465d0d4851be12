"""Resolve, build, and send script commands to the server or one device."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from scriptbridge.domain.entities import Command, CommandName, Device, Target
from scriptbridge.domain.errors import SendError
from scriptbridge.domain.ports import TransportPort, UseCaseError
from scriptbridge.usecases.build_command import build_command
from scriptbridge.usecases.resolve_target import ResolveTarget

LOGGER = logging.getLogger(__name__)

_NEEDS_SCRIPT = (CommandName.RUN, CommandName.RERUN, CommandName.SAVE)


@dataclass
class SendCommand:
    """Use case: the full ``action -> target -> command -> send`` chain."""

    transport: TransportPort
    resolve: ResolveTarget

    def __call__(
        self,
        cmd: Union[CommandName, str],
        address: Optional[str] = None,
        *,
        device: Optional[Device] = None,
    ) -> Optional[Command]:
        """Build and send ``cmd``.

        Args:
            cmd: Logical action name.
            address: Optional explicit file address (run/rerun/save only).
            device: Send to this device only; ``None`` broadcasts.

        Returns:
            The command that was handed to the transport, or ``None`` if the
            send itself failed (logged, not raised).

        Raises:
            NoActiveTargetError: No address and no focused document.
            UseCaseError: ``DEVICE_GONE`` when ``device`` detached meanwhile.
        """
        name = CommandName(cmd)
        target: Optional[Target] = None
        if name in _NEEDS_SCRIPT:
            target = self.resolve(address)
        elif name is CommandName.STOP:
            target = Target(filename=self.resolve.active_filename(), script="")
        command = build_command(name, target)

        device_id = None
        if device is not None:
            # The registry may have dropped the device while the pick was open.
            live = self.transport.get_device_by_id(device.id)
            if live is None:
                raise UseCaseError(
                    "DEVICE_GONE",
                    f"Device {device.label} is no longer connected.",
                    meta={"device_id": device.id},
                )
            device_id = live.id

        if not self.dispatch(command, device_id=device_id):
            return None
        return command

    def dispatch(self, command: Command, *, device_id: Optional[str] = None) -> bool:
        """Hand a built command to the transport; failures are logged only."""
        try:
            self.transport.send_command(command.cmd.value, command.payload(), device_id=device_id)
        except Exception as exc:
            err = SendError(command.cmd.value, str(exc) or exc.__class__.__name__)
            LOGGER.error(err.message, exc_info=True)
            return False
        LOGGER.debug(
            "Sent %s for %s to %s",
            command.cmd.value,
            command.id or "-",
            device_id or "all devices",
        )
        return True


__all__ = ["SendCommand"]
