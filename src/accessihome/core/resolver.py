"""Command resolution against the device registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from accessihome.models import CommandAction, CommandIntent, LogSource

from .feedback import FeedbackEmitter
from .registry import DeviceRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Outcome of one resolver call."""

    device_id: str
    found: bool
    changed: bool = False
    is_on: bool | None = None
    message: str | None = None


def _label(state: bool) -> str:
    return "ON" if state else "OFF"


class CommandResolver:
    """Sole writer of device state.

    Every transition on a known device produces exactly one log entry;
    unknown ids produce nothing.
    """

    def __init__(self, registry: DeviceRegistry, feedback: FeedbackEmitter) -> None:
        self.registry = registry
        self.feedback = feedback

    def apply_toggle(
        self, device_id: str, source: LogSource = LogSource.MANUAL
    ) -> Resolution:
        device = self.registry.get(device_id)
        if device is None:
            logger.debug("Toggle for unknown device %s ignored", device_id)
            return Resolution(device_id=device_id, found=False)

        new_state = not device.is_on
        self.registry.set_on(device_id, new_state)
        message = f"{device.name} turned {_label(new_state)}"
        self.feedback.announce(message, source)
        return Resolution(
            device_id=device_id,
            found=True,
            changed=True,
            is_on=new_state,
            message=message,
        )

    def apply_explicit_state(
        self, device_id: str, desired: bool, source: LogSource = LogSource.VOICE
    ) -> Resolution:
        device = self.registry.get(device_id)
        if device is None:
            logger.debug("Set state for unknown device %s ignored", device_id)
            return Resolution(device_id=device_id, found=False)

        if device.is_on == desired:
            message = f"{device.name} is already {_label(desired)}"
            changed = False
        else:
            self.registry.set_on(device_id, desired)
            message = f"{device.name} turned {_label(desired)}"
            changed = True

        self.feedback.announce(message, source)
        return Resolution(
            device_id=device_id,
            found=True,
            changed=changed,
            is_on=desired,
            message=message,
        )

    def apply_intent(
        self, intent: CommandIntent, source: LogSource = LogSource.VOICE
    ) -> Resolution | None:
        """Dispatch an interpreter intent; None when it names no device action."""
        if not intent.is_device_command or intent.target_device_id is None:
            return None

        if intent.action is CommandAction.TOGGLE:
            return self.apply_toggle(intent.target_device_id, source)
        return self.apply_explicit_state(
            intent.target_device_id, intent.action is CommandAction.TURN_ON, source
        )
