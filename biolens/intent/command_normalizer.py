"""
Command Normalizer.

Converts whatever JSON object the model produced into one of the
whitelisted commands:
- Action names are mapped through the synonym table
- Loose top-level fields are hoisted into ``params``
- Each action's parameters are coerced and validated
- Incomplete requests become ``clarify``; impossible ones become ``noop``
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from biolens.core.contracts import Action, Command, ACTION_WHITELIST
from biolens.intent.coercion import (
    clamp01,
    normalize_quality,
    normalize_representation,
    normalize_what,
    resolve_color,
    to_bool,
    to_finite,
    to_text,
)
from biolens.intent.target_resolver import TargetResolver
from biolens.intent.vocabulary import (
    ACTION_FALLBACK_KEYS,
    ACTION_SYNONYMS,
    COLOR_EXAMPLES,
    HOISTED_FIELDS,
    REPRESENTATIONS,
    TARGET_OPTIONS,
    VISIBILITY_OPTIONS,
)


DEFAULT_SPIN_SPEED = 1.0
DISTANCE_UNIT = "angstrom"

Handler = Callable[[str, str, Dict[str, Any], int], Command]


class CommandNormalizer:
    """
    Normalizer for decoded model output.

    Converts objects like:
        {"action": "color_residue", "chain": "a", "resId": "57", "color": "red"}
        {"cmd": "show_water"}
        {"action": "batch", "params": {"commands": [...]}}

    Into Command objects whose action is always whitelisted.
    """

    def __init__(
        self,
        target_resolver: Optional[TargetResolver] = None,
        max_batch_depth: int = 8,
    ):
        """
        Initialize command normalizer.

        Args:
            target_resolver: Resolver for target selectors (default instance if None)
            max_batch_depth: Deepest allowed nesting of batch commands
        """
        self.targets = target_resolver or TargetResolver()
        self.max_batch_depth = max_batch_depth

        self._handlers: Dict[str, Handler] = {
            Action.BATCH.value: self._normalize_batch,
            Action.SHOW.value: self._normalize_visibility,
            Action.HIDE.value: self._normalize_visibility,
            Action.SPIN.value: self._normalize_spin,
            Action.RESET_CAMERA.value: self._normalize_reset,
            Action.RESET_COLORS.value: self._normalize_reset,
            Action.SET_REPRESENTATION.value: self._normalize_representation,
            Action.SET_OPACITY.value: self._normalize_opacity,
            Action.FOCUS.value: self._normalize_targeted,
            Action.HIGHLIGHT.value: self._normalize_targeted,
            Action.LABEL.value: self._normalize_targeted,
            Action.COLOR.value: self._normalize_targeted,
            Action.MEASURE_DISTANCE.value: self._normalize_distance,
            Action.CLARIFY.value: self._normalize_clarify,
            Action.NOOP.value: self._normalize_noop,
        }

    def normalize(self, raw: Any, depth: int = 0) -> Command:
        """
        Normalize a decoded JSON value into a Command.

        Args:
            raw: Any value produced by the JSON parser
            depth: Current batch nesting level

        Returns:
            Command; never raises
        """
        if not isinstance(raw, dict):
            return Command.noop("Invalid JSON object from model.")

        requested = self._read_action(raw)
        action = self.resolve_action(requested)
        params = self._hoist_params(raw)

        handler = self._handlers.get(action)
        if handler is None:
            logger.warning(f"Unsupported action from model: {requested!r}")
            return Command.noop(f"Unsupported action from model: {requested or '(empty)'}")

        return handler(action, requested.lower(), params, depth)

    def resolve_action(self, requested: str) -> str:
        """Map an action spelling onto the whitelist; unknown names pass through."""
        if requested in ACTION_WHITELIST:
            return requested
        lowered = requested.lower()
        if lowered in ACTION_WHITELIST:
            return lowered
        mapped = ACTION_SYNONYMS.get(lowered)
        if mapped:
            logger.debug(f"Mapped action {requested!r} -> {mapped!r}")
            return mapped
        return requested

    def _read_action(self, raw: Dict[str, Any]) -> str:
        action = raw.get("action")
        if not isinstance(action, str):
            action = next((raw[k] for k in ACTION_FALLBACK_KEYS if raw.get(k)), None)
        return action.strip() if isinstance(action, str) else ""

    def _hoist_params(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        """Copy loose top-level fields into params; params wins on conflict."""
        source = raw.get("params")
        params = dict(source) if isinstance(source, dict) else {}
        for key in HOISTED_FIELDS:
            if raw.get(key) is not None and params.get(key) is None:
                params[key] = raw[key]
        return params

    # ------------------------------------------------------------
    # Per-action branches
    # ------------------------------------------------------------

    def _normalize_batch(self, action: str, hint: str, params: Dict[str, Any], depth: int) -> Command:
        if depth >= self.max_batch_depth:
            return Command.noop(f"batch nesting exceeds {self.max_batch_depth} levels.")

        commands = params.get("commands")
        if not isinstance(commands, list):
            commands = params.get("cmds")
        if not isinstance(commands, list) or not commands:
            return Command.noop("batch.commands is empty.")

        normalized = [self.normalize(item, depth + 1).to_dict() for item in commands]
        return Command(action=action, params={"commands": normalized})

    def _normalize_visibility(self, action: str, hint: str, params: Dict[str, Any], depth: int) -> Command:
        what = params.get("what")
        if not what:
            # show_ligand / hide_water style names carry the subject
            if "ligand" in hint:
                what = "ligand"
            if "water" in hint:
                what = "water"
        what = normalize_what(what)
        if not what:
            return Command.clarify(
                f"{action} needs 'what' (water/ligand).",
                list(VISIBILITY_OPTIONS),
            )
        return Command(action=action, params={"what": what})

    def _normalize_spin(self, action: str, hint: str, params: Dict[str, Any], depth: int) -> Command:
        enabled = to_bool(params.get("enabled")) if params.get("enabled") is not None else None
        if enabled is None:
            if "off" in hint:
                enabled = False
            else:
                enabled = True
        speed = to_finite(params.get("speed"))
        return Command(
            action=action,
            params={"enabled": enabled, "speed": DEFAULT_SPIN_SPEED if speed is None else speed},
        )

    def _normalize_reset(self, action: str, hint: str, params: Dict[str, Any], depth: int) -> Command:
        return Command(action=action, params={})

    def _normalize_representation(self, action: str, hint: str, params: Dict[str, Any], depth: int) -> Command:
        rep = normalize_representation(params.get("rep"))
        quality = normalize_quality(params.get("quality"))
        if not rep:
            return Command.clarify(
                "set_representation is missing 'rep' or uses an unsupported one.",
                list(REPRESENTATIONS),
            )
        return Command(action=action, params={"rep": rep, "quality": quality})

    def _normalize_opacity(self, action: str, hint: str, params: Dict[str, Any], depth: int) -> Command:
        opacity = clamp01(params.get("opacity"))
        target = self.targets.resolve(params.get("target"), params)
        if target is None:
            return self._clarify_target(action)
        return Command(action=action, params={"target": target.to_dict(), "opacity": opacity})

    def _normalize_targeted(self, action: str, hint: str, params: Dict[str, Any], depth: int) -> Command:
        """focus / highlight / label / color all need a target first."""
        target = self.targets.resolve(params.get("target"), params)
        if target is None:
            return self._clarify_target(action)

        if action == Action.LABEL.value:
            enabled = to_bool(params.get("enabled")) if params.get("enabled") is not None else None
            out: Dict[str, Any] = {
                "target": target.to_dict(),
                "enabled": True if enabled is None else enabled,
            }
            text = params.get("text")
            if text is not None and to_text(text):
                out["text"] = to_text(text)
            return Command(action=action, params=out)

        if action == Action.COLOR.value:
            color = resolve_color(params.get("color"))
            if not color:
                return Command.clarify(
                    "color is missing or unsupported (use #RRGGBB or a common color name).",
                    list(COLOR_EXAMPLES),
                )
            return Command(action=action, params={"target": target.to_dict(), "color": color})

        return Command(action=action, params={"target": target.to_dict()})

    def _normalize_distance(self, action: str, hint: str, params: Dict[str, Any], depth: int) -> Command:
        a = self.targets.resolve(params.get("a"), params, "a")
        b = self.targets.resolve(params.get("b"), params, "b")

        if a is None or b is None:
            return Command.clarify(
                "measure_distance needs two residue targets (a/b), e.g. chain A 10 and chain A 25.",
                [
                    "a: {type:'residue',chain:'A',resId:10}",
                    "b: {type:'residue',chain:'A',resId:25}",
                ],
            )

        # Only residue-to-residue (alpha carbon) distances are supported
        if not (a.is_residue and b.is_residue):
            return Command.noop("measure_distance currently supports residue-residue (CA) only.")

        return Command(
            action=action,
            params={"a": a.to_dict(), "b": b.to_dict(), "unit": DISTANCE_UNIT},
        )

    def _normalize_clarify(self, action: str, hint: str, params: Dict[str, Any], depth: int) -> Command:
        question = params.get("question")
        options = params.get("options")
        return Command.clarify(
            to_text(question) if question else "More information is needed.",
            [to_text(o) for o in options] if isinstance(options, list) else [],
        )

    def _normalize_noop(self, action: str, hint: str, params: Dict[str, Any], depth: int) -> Command:
        reason = params.get("reason")
        return Command.noop(to_text(reason) if reason else "noop")

    def _clarify_target(self, action: str) -> Command:
        logger.debug(f"{action}: no target resolved, asking for clarification")
        return Command.clarify(
            f"{action} needs an explicit target (chain/residue/range/ligand/all).",
            list(TARGET_OPTIONS),
        )


_default_normalizer = CommandNormalizer()


def normalize_command(raw: Any) -> Command:
    """Module-level shortcut for :meth:`CommandNormalizer.normalize`."""
    return _default_normalizer.normalize(raw)
