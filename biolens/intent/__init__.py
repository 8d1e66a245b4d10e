"""
Intent Parsing Module.

Responsibilities:
- Model output -> JSON candidate
- Target resolution (residue, range, chain, ligand, whole scene)
- Action and parameter normalization
- LLM provider access
"""

from .json_extractor import extract_candidate, parse_candidate
from .target_resolver import TargetResolver, normalize_target, sanitize_target
from .command_normalizer import CommandNormalizer, normalize_command
