"""
Command Gate - final whitelist check.

Enforces, after normalization and before serialization:
- The action is one of the whitelisted names
- ``params`` is a plain mapping
- Batch members satisfy the same rules

When a command fails the check it is replaced by a ``noop`` instead of
being passed to the renderer.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from loguru import logger

from biolens.core.contracts import Action, Command, is_allowed_action


class CommandGate:
    """
    Last line of defense between the normalizer and the renderer.

    The normalizer already falls back to ``noop`` for unknown actions; the
    gate re-checks so that a bad edit to a synonym table can never leak an
    unknown action downstream.
    """

    def validate(self, command: Command) -> Tuple[bool, Optional[str]]:
        """
        Check a command against the whitelist.

        Returns:
            Tuple of (is_valid, rejection_reason)
        """
        if not is_allowed_action(command.action):
            return (False, f"Unsupported action after normalization: {command.action}")
        if not isinstance(command.params, dict):
            return (False, "Command params must be an object.")
        return (True, None)

    def enforce(self, command: Command) -> Command:
        """Return ``command`` if it passes, otherwise an explanatory noop."""
        params = command.params if isinstance(command.params, dict) else {}
        candidate = Command(action=command.action, params=params)

        is_valid, reason = self.validate(candidate)
        if not is_valid:
            logger.warning(f"Command rejected by gate: {reason}")
            return Command.noop(reason)

        if candidate.action == Action.BATCH.value:
            members = params.get("commands")
            if isinstance(members, list):
                checked = [self._enforce_member(m) for m in members]
                return Command(action=candidate.action, params={**params, "commands": checked})

        return candidate

    def _enforce_member(self, member: Any) -> Dict[str, Any]:
        if not isinstance(member, dict):
            return Command.noop("Invalid batch member.").to_dict()
        return self.enforce(
            Command(action=member.get("action"), params=member.get("params"))
        ).to_dict()
