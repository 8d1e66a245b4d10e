"""
Vocabulary tables for command normalization.

Every loose spelling the model may produce is mapped onto one canonical
token here. Adding a spelling is a one-line data change; the normalizer
never branches on individual spellings.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Tuple


# ============================================================
# ACTIONS
# ============================================================

# Keys are lowercase; canonical action names resolve to themselves
# through the whitelist, so only variants are listed.
ACTION_SYNONYMS: Dict[str, str] = {
    # color
    "color_residue": "color",
    "color_chain": "color",
    "set_color": "color",
    "setcolour": "color",
    "set_color_residue": "color",
    "set_color_chain": "color",
    # focus
    "focus_ligand": "focus",
    "focus_residue": "focus",
    "focus_chain": "focus",
    "focus_on": "focus",
    "zoom": "focus",
    "zoom_to": "focus",
    "center": "focus",
    # camera
    "reset_view": "reset_camera",
    "resetcamera": "reset_camera",
    # show / hide
    "show_ligand": "show",
    "show_ligands": "show",
    "hide_ligand": "hide",
    "hide_ligands": "hide",
    "show_water": "show",
    "show_waters": "show",
    "hide_water": "hide",
    "hide_waters": "hide",
    # opacity
    "opacity": "set_opacity",
    "set_transparency": "set_opacity",
    "transparency": "set_opacity",
    "set_opacity_residue": "set_opacity",
    # representation
    "representation": "set_representation",
    "set_rep": "set_representation",
    "set_style": "set_representation",
    "style": "set_representation",
    # distance
    "distance": "measure_distance",
    "measure": "measure_distance",
    "measure_distance_ca": "measure_distance",
    # highlight / label
    "highlight_residue": "highlight",
    "highlight_chain": "highlight",
    "label_residue": "label",
    "label_chain": "label",
    # spin
    "spin_on": "spin",
    "spin_off": "spin",
    "rotate": "spin",
    "auto_rotate": "spin",
    "toggle_spin": "spin",
    # colors reset
    "clear_colors": "reset_colors",
    # sentinels
    "ask": "clarify",
    "question": "clarify",
    "none": "noop",
    "nothing": "noop",
}

# Field names copied from the top level of a raw command into ``params``
# when ``params`` does not define them already.
HOISTED_FIELDS: Tuple[str, ...] = (
    "chain", "chainId", "resId", "residue_number",
    "start", "end", "startResId", "endResId",
    "resName", "ligand",
    "color", "opacity", "enabled", "speed",
    "what", "rep", "quality",
    "a", "b", "unit", "commands",
    "target", "text", "question", "options", "reason",
)

# Raw keys that may carry the action name when ``action`` is not a string.
ACTION_FALLBACK_KEYS: Tuple[str, ...] = ("cmd", "command", "type")


# ============================================================
# COLORS
# ============================================================

COLOR_NAMES: Dict[str, str] = {
    "red": "#ff0000", "红": "#ff0000", "红色": "#ff0000",
    "blue": "#0000ff", "蓝": "#0000ff", "蓝色": "#0000ff",
    "green": "#00ff00", "绿": "#00ff00", "绿色": "#00ff00",
    "yellow": "#ffff00", "黄": "#ffff00", "黄色": "#ffff00",
    "white": "#ffffff", "白": "#ffffff", "白色": "#ffffff",
    "black": "#000000", "黑": "#000000", "黑色": "#000000",
    "gray": "#808080", "grey": "#808080", "灰": "#808080", "灰色": "#808080",
    "orange": "#ff7f00", "橙": "#ff7f00", "橙色": "#ff7f00",
    "purple": "#8000ff", "violet": "#8000ff", "紫": "#8000ff", "紫色": "#8000ff",
}

# Suggested answers when a color cannot be resolved
COLOR_EXAMPLES: Tuple[str, ...] = ("#ff0000", "#0000ff", "#00ff00", "#ffff00")


# ============================================================
# REPRESENTATIONS
# ============================================================

REPRESENTATIONS: Tuple[str, ...] = ("cartoon", "surface", "sticks", "lines", "spheres")

REPRESENTATION_SYNONYMS: Dict[str, str] = {
    "cartoon": "cartoon",
    "ribbon": "cartoon",
    "surface": "surface",
    "sticks": "sticks",
    "stick": "sticks",
    "ball-and-stick": "sticks",
    "ball_and_stick": "sticks",
    "bns": "sticks",
    "lines": "lines",
    "line": "lines",
    "wire": "lines",
    "spheres": "spheres",
    "sphere": "spheres",
    "spacefill": "spheres",
    "vdw": "spheres",
}

QUALITY_LEVELS: FrozenSet[str] = frozenset({"auto", "low", "medium", "high"})
DEFAULT_QUALITY = "auto"


# ============================================================
# SHOW / HIDE
# ============================================================

VISIBILITY_OPTIONS: Tuple[str, ...] = ("water", "ligand")

WHAT_SYNONYMS: Dict[str, str] = {
    "water": "water",
    "solvent": "water",
    "hoh": "water",
    "wat": "water",
    "水": "water",
    "水分子": "water",
    "ligand": "ligand",
    "drug": "ligand",
    "het": "ligand",
    "配体": "ligand",
    "药": "ligand",
    "药物": "ligand",
}


# ============================================================
# TARGETS
# ============================================================

# Suggested answers when a command needs a target and none resolves
TARGET_OPTIONS: Tuple[str, ...] = ("chain", "residue", "range", "ligand", "all")

# Flags in a parameter bag that select the whole scene when set to true
WHOLE_SCENE_FLAGS: Tuple[str, ...] = ("global", "all", "whole", "entire")


# ============================================================
# BOOLEANS
# ============================================================

TRUE_WORDS: FrozenSet[str] = frozenset({"true", "yes", "on", "1", "开", "开启", "是"})
FALSE_WORDS: FrozenSet[str] = frozenset({"false", "no", "off", "0", "关", "关闭", "否"})
