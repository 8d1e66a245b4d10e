"""
Safety Module - Command Guardrails.

Responsibilities:
- Final whitelist enforcement on normalized commands
- Replacement of anything unrecognized with an explanatory noop
"""

from .command_gate import CommandGate
