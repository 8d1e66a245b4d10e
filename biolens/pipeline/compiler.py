"""
Strict Compiler - pipeline entry point.

Raw model text in, strict command JSON out:
    extract -> parse -> normalize -> whitelist gate -> serialize

The returned string always decodes to {"action": <whitelisted>, "params": {...}}.
"""

from __future__ import annotations

from typing import Any, Optional

from loguru import logger

from biolens.core.contracts import Command
from biolens.intent.command_normalizer import CommandNormalizer
from biolens.intent.json_extractor import extract_candidate, parse_candidate
from biolens.safety.command_gate import CommandGate


def fallback_json(reason: Any = "noop") -> str:
    """Strict JSON for a noop carrying ``reason``."""
    return Command.noop(str(reason or "noop")).to_json()


class StrictCompiler:
    """Composes extraction, normalization and the whitelist gate."""

    def __init__(
        self,
        normalizer: Optional[CommandNormalizer] = None,
        gate: Optional[CommandGate] = None,
    ):
        self.normalizer = normalizer or CommandNormalizer()
        self.gate = gate or CommandGate()

    def compile_command(self, model_output: Any) -> Command:
        """Compile model output into a gated Command."""
        candidate = extract_candidate(model_output)
        parsed = parse_candidate(candidate)
        if parsed is None:
            return Command.noop("Model did not return valid JSON.")

        command = self.gate.enforce(self.normalizer.normalize(parsed))
        logger.debug(f"Compiled command: {command.action}")
        return command

    def compile(self, model_output: Any) -> str:
        """Compile model output into a strict command JSON string."""
        return self.compile_command(model_output).to_json()


_default_compiler = StrictCompiler()


def compile_strict_command(model_output: Any) -> str:
    """Module-level shortcut for :meth:`StrictCompiler.compile`."""
    return _default_compiler.compile(model_output)
