"""
BioLens command compiler.

Turns free-form molecular-visualization requests (English or Chinese),
as phrased by a language model, into one strict command that a Mol*
viewer can execute unconditionally.

Top Priorities (strict order):
1. Every output is valid JSON with a whitelisted action
2. Missing information is asked for, never guessed
3. Loose spellings are mapped through data tables, not code branches
"""

from biolens.pipeline.compiler import compile_strict_command

__version__ = "0.1.0"
__author__ = "BioLens Team"
