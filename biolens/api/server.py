"""
HTTP surface for the chat compiler.

Routes:
- POST /api/chat: {message, mode} in, ChatResponse envelope out
- GET  /health:   liveness and configured model

Every /api/chat response carries ``Cache-Control: no-store`` and a
``result`` that is strict command JSON (or answer text).
"""

import asyncio
import json
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from biolens.config import Settings
from biolens.intent.llm_interpreter import ChatResult, LLMInterpreter, MODE_COMMAND, resolve_mode
from biolens.pipeline.compiler import fallback_json
from .schemas import ChatRequest, ChatResponse


def _envelope(status_code: int, result: ChatResult, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    body = ChatResponse(**result.to_dict()).model_dump(exclude_none=True)
    return JSONResponse(
        status_code=status_code,
        content=body,
        headers={"Cache-Control": "no-store", **(headers or {})},
    )


async def _read_request(request: Request) -> Optional[ChatRequest]:
    """Parse the body leniently; anything but a JSON object yields None."""
    raw = await request.body()
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as e:
        logger.warning(f"[chat] request body is not JSON: {e}")
        return None
    if not isinstance(data, dict):
        return None
    return ChatRequest.model_validate(data)


def create_app(settings: Optional[Settings] = None, interpreter: Optional[Any] = None) -> FastAPI:
    settings = settings or Settings()
    app = FastAPI(title="BioLens command API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.interpreter = interpreter or LLMInterpreter(settings)

    @app.post("/api/chat")
    async def chat(request: Request):
        req = await _read_request(request)
        mode = resolve_mode(req.mode if req else None)
        message = req.message.strip() if req and isinstance(req.message, str) else ""
        if not message:
            logger.warning("[chat] rejected empty message")
            return _envelope(400, ChatResult(
                mode=mode,
                raw="",
                result=fallback_json("Invalid request: message must be a non-empty string"),
                error="Invalid request",
            ))

        result = await asyncio.to_thread(app.state.interpreter.interpret, message, mode)
        if result.error:
            logger.error(f"[chat] {result.error}")
        return _envelope(200, result)

    @app.api_route("/api/chat", methods=["GET", "PUT", "PATCH", "DELETE"])
    def chat_method_not_allowed():
        return _envelope(
            405,
            ChatResult(
                mode=MODE_COMMAND,
                raw="",
                result=fallback_json("Method Not Allowed"),
                error="Method Not Allowed",
            ),
            headers={"Allow": "POST"},
        )

    @app.get("/health")
    def health():
        return {"ok": True, "model": settings.model}

    return app
