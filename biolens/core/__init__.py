"""
Core contracts shared by every pipeline stage.

Pipeline execution order (one-way, no feedback):
1. Extract a JSON candidate from raw model text
2. Parse it (parse failure becomes a noop)
3. Normalize action name, parameters and targets
4. Re-check the action against the whitelist
5. Serialize {action, params}
"""

from .contracts import (
    Action,
    TargetType,
    Target,
    Command,
    ACTION_WHITELIST,
    TARGET_TYPES,
    is_allowed_action,
    utf8_safe,
)
