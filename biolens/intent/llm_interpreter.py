"""
LLM-Powered Command Interpreter.

Sends the user's request to a DeepSeek (OpenAI-compatible) chat model and
turns the completion into something the viewer can use:
- command mode: the completion is compiled into strict command JSON
- answer mode: the completion is returned as plain text

Provider failures never escape; they come back as a noop command.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import openai
from loguru import logger
from openai import OpenAI

from biolens.config import Settings
from biolens.core.contracts import utf8_safe
from biolens.intent.command_normalizer import CommandNormalizer
from biolens.pipeline.compiler import StrictCompiler, fallback_json


MODE_COMMAND = "command"
MODE_ANSWER = "answer"
MAX_ERROR_DETAILS = 1200


SYSTEM_PROMPT_ANSWER = """You are a concise, professional assistant for biomolecular structure visualization.
Answer the user's question directly in natural language, clearly and accurately, without digressing.
Reply in the language the user writes in (English or Chinese)."""


# The protocol below must stay in step with the normalizer whitelist and
# the renderer's target handling.
SYSTEM_PROMPT_COMMAND = """You are a Mol* PDB visualization command compiler. Your only task: translate the user's
natural-language instruction (English or Chinese) into ONE JSON object the viewer can execute directly.

# 0) Hard rules
- Output pure JSON only: a single object, no explanations, no Markdown, no code fences.
- The JSON must parse with a strict parser: double quotes, no trailing commas, no comments.
- Top level is exactly {"action":"<string>","params":{...}}; params is always an object ({} when empty).

# 1) Action whitelist (case-sensitive; choose exactly one)
reset_colors, color, set_representation, hide, show, set_opacity, focus, reset_camera,
spin, highlight, label, measure_distance, batch, clarify, noop

# 2) Target schema
Every action that selects something uses params.target:
target = {
  "type": "residue" | "range" | "chain" | "ligand" | "protein" | "polymer" | "all",
  "chain": "A",
  "resId": 100,
  "startResId": 10,
  "endResId": 50,
  "resName": "ATP"
}
- chain is an uppercase letter such as "A"
- resId / startResId / endResId are integers
- ligand resName is uppercase (ATP, HEM)
- If the user does not give enough information (e.g. "color some residue red" without number/chain),
  output action="clarify".

# 3) Params per action
color:              {"target": <target>, "color": "#RRGGBB"}
set_representation: {"rep": "cartoon"|"surface"|"sticks"|"lines"|"spheres", "quality": "auto"|"low"|"medium"|"high"}
show / hide:        {"what": "water"|"ligand"}
set_opacity:        {"target": <target>, "opacity": 0.0-1.0}
focus:              {"target": <target>}
reset_camera:       {}
spin:               {"enabled": true|false, "speed": 1.0}
highlight:          {"target": <target>}
label:              {"target": <target>, "enabled": true|false, "text": "optional"}
measure_distance:   {"a": <target>, "b": <target>, "unit": "angstrom"}  (residue-residue by CA only)
batch:              {"commands": [{"action": "...", "params": {...}}, ...]}
clarify:            {"question": "one sentence asking for the missing information", "options": ["option 1", "option 2"]}
noop:               {"reason": "short reason"}

# 4) Color words (always output hex)
red 红 -> #ff0000, blue 蓝 -> #0000ff, green 绿 -> #00ff00, yellow 黄 -> #ffff00,
white 白 -> #ffffff, black 黑 -> #000000, gray/grey 灰 -> #808080,
orange 橙 -> #ff7f00, purple/violet 紫 -> #8000ff

# 5) Now process the real user input."""


@dataclass
class ChatResult:
    """Envelope returned to the UI for one request."""
    mode: str
    raw: str
    result: str
    model: Optional[str] = None
    error: Optional[str] = None
    details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Present fields only; text is made UTF-8 encodable."""
        return {
            k: utf8_safe(v) if isinstance(v, str) else v
            for k, v in asdict(self).items()
            if v is not None
        }


def resolve_mode(mode: Any) -> str:
    """Only an explicit "answer" selects answer mode."""
    return MODE_ANSWER if mode == MODE_ANSWER else MODE_COMMAND


class LLMInterpreter:
    """
    LLM-powered request interpreter.

    The model proposes a command; the StrictCompiler decides what is sent
    to the renderer.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        compiler: Optional[StrictCompiler] = None,
    ):
        """
        Initialize LLM interpreter.

        Args:
            settings: Provider settings (defaults if None)
            compiler: Strict compiler for command mode
        """
        self.settings = settings or Settings()
        self.compiler = compiler or StrictCompiler(
            CommandNormalizer(max_batch_depth=self.settings.max_batch_depth)
        )
        self.model = self.settings.model

        self._client: Optional[OpenAI] = None
        if self.settings.api_key:
            self._client = OpenAI(
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                timeout=self.settings.timeout_s,
            )
            logger.info(f"LLM interpreter initialized with {self.model}")
        else:
            logger.warning("LLM interpreter not available (no DEEPSEEK_API_KEY)")

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def interpret(self, message: str, mode: Any = MODE_COMMAND) -> ChatResult:
        """
        Interpret a user request.

        Args:
            message: The user's request (any natural language)
            mode: "command" (default) or "answer"

        Returns:
            ChatResult; provider failures are reported inside it
        """
        resolved = resolve_mode(mode)

        if not self.is_available:
            reason = "Server misconfigured: missing DEEPSEEK_API_KEY"
            return ChatResult(mode=resolved, raw="", result=fallback_json(reason), error=reason)

        try:
            content = self._complete(resolved, message)
        except openai.APIStatusError as e:
            reason = f"DeepSeek API failed: HTTP {e.status_code}"
            logger.error(reason)
            return ChatResult(
                mode=resolved,
                raw="",
                result=fallback_json(reason),
                error=reason,
                details=self._error_details(e),
            )
        except Exception as e:
            reason = f"Internal Server Error: {e}"
            logger.error(f"LLM interpretation failed: {e}")
            return ChatResult(
                mode=MODE_COMMAND, raw="", result=fallback_json(reason), error=str(e),
            )

        if resolved == MODE_ANSWER:
            text = content.strip()
            return ChatResult(mode=MODE_ANSWER, raw=text, result=text, model=self.model)

        strict = self.compiler.compile(content)
        logger.info(f"Interpreted {message!r} -> {strict}")
        return ChatResult(mode=MODE_COMMAND, raw=content, result=strict, model=self.model)

    def _complete(self, mode: str, message: str) -> str:
        """Run one chat completion and return the message content."""
        if mode == MODE_ANSWER:
            system_prompt = SYSTEM_PROMPT_ANSWER
            temperature = self.settings.answer_temperature
        else:
            system_prompt = SYSTEM_PROMPT_COMMAND
            temperature = self.settings.command_temperature

        response = self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": message},
            ],
            stream=False,
            temperature=temperature,
            top_p=1,
            max_tokens=self.settings.max_tokens,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    @staticmethod
    def _error_details(error: openai.APIStatusError) -> str:
        try:
            body = error.response.text
        except Exception:
            body = str(error)
        return (body or "")[:MAX_ERROR_DETAILS]
