"""
Request and response models for the chat endpoint.

The request model accepts any JSON values; the endpoint answers bad input
with its own 400 envelope instead of a validation error.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    # Left untyped so a non-string message is answered with our 400 envelope
    message: Any = Field(default=None, description="User request, e.g. 'color residue 57 of chain A red'")
    mode: Optional[Any] = Field(default=None, description="'command' (default) or 'answer'")


class ChatResponse(BaseModel):
    mode: str
    raw: str = ""
    result: str
    model: Optional[str] = None
    error: Optional[str] = None
    details: Optional[str] = None
