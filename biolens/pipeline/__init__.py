"""
Main Pipeline Module.

Compiles raw model output into strict, renderer-safe command JSON.
"""

from .compiler import StrictCompiler, compile_strict_command, fallback_json
