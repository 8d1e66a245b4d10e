"""
Core data contracts for the BioLens command compiler.

All pipeline stages exchange these types:
- Action: the closed set of commands the renderer understands
- Target: a selector for residues, ranges, chains, ligands or the whole scene
- Command: one action plus its parameters, always serializable to JSON
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# ============================================================
# ENUMERATIONS
# ============================================================

class Action(Enum):
    """Commands accepted by the rendering collaborator."""
    RESET_COLORS = "reset_colors"
    COLOR = "color"
    SET_REPRESENTATION = "set_representation"
    HIDE = "hide"
    SHOW = "show"
    SET_OPACITY = "set_opacity"
    FOCUS = "focus"
    RESET_CAMERA = "reset_camera"
    SPIN = "spin"
    HIGHLIGHT = "highlight"
    LABEL = "label"
    MEASURE_DISTANCE = "measure_distance"
    BATCH = "batch"
    # Sentinels: first-class members, not an error channel
    CLARIFY = "clarify"
    NOOP = "noop"


class TargetType(Enum):
    """Selector kinds for a Target."""
    RESIDUE = "residue"
    RANGE = "range"
    CHAIN = "chain"
    LIGAND = "ligand"
    PROTEIN = "protein"
    POLYMER = "polymer"
    ALL = "all"


ACTION_WHITELIST = frozenset(a.value for a in Action)
TARGET_TYPES = frozenset(t.value for t in TargetType)


def is_allowed_action(action: Any) -> bool:
    """True when ``action`` is one of the whitelisted command names."""
    return isinstance(action, str) and action in ACTION_WHITELIST


def utf8_safe(text: str) -> str:
    """Replace lone surrogates (legal in JSON escapes, not in UTF-8) with '?'."""
    return text.encode("utf-8", "replace").decode("utf-8")


# ============================================================
# CORE DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class Target:
    """
    Selector describing what part of a molecular scene a command touches.

    Field requirements per type:
    - residue: res_id
    - range: start_res_id and end_res_id (order is not checked)
    - chain: chain
    - ligand: res_name (uppercase, non-empty)
    - protein / polymer / all: nothing further
    """
    type: TargetType
    chain: Optional[str] = None
    res_id: Optional[int] = None
    start_res_id: Optional[int] = None
    end_res_id: Optional[int] = None
    res_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation, absent fields omitted."""
        out: Dict[str, Any] = {"type": self.type.value}
        if self.chain is not None:
            out["chain"] = self.chain
        if self.res_id is not None:
            out["resId"] = self.res_id
        if self.start_res_id is not None:
            out["startResId"] = self.start_res_id
        if self.end_res_id is not None:
            out["endResId"] = self.end_res_id
        if self.res_name is not None:
            out["resName"] = self.res_name
        return out

    @property
    def is_residue(self) -> bool:
        return self.type is TargetType.RESIDUE


@dataclass(frozen=True)
class Command:
    """
    A single normalized command.

    ``params`` only ever holds JSON-compatible values (targets are stored
    in their wire form).
    """
    action: str
    params: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def noop(cls, reason: str = "noop") -> Command:
        return cls(action=Action.NOOP.value, params={"reason": reason})

    @classmethod
    def clarify(cls, question: str, options: Optional[List[str]] = None) -> Command:
        return cls(
            action=Action.CLARIFY.value,
            params={"question": question, "options": list(options or [])},
        )

    @property
    def is_sentinel(self) -> bool:
        return self.action in (Action.CLARIFY.value, Action.NOOP.value)

    def to_dict(self) -> Dict[str, Any]:
        return {"action": self.action, "params": self.params}

    def to_json(self) -> str:
        return utf8_safe(json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":")))
