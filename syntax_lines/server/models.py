"""Pydantic request/response models for the HTTP API.

WHY: FastAPI validates request bodies against these models and uses
them to generate the OpenAPI documentation at /docs.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- RuleName values match DuplicateRule values exactly
- TokenModel is the two-field wire object renderers depend on
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class RuleName(str, Enum):
    """Duplicate rule names accepted by the API."""

    first_wins = "first_wins"
    last_wins = "last_wins"


class HighlightRequest(BaseModel):
    """Body of POST /highlight."""

    code: str = Field(description="Source text to highlight (UTF-8).")
    language: Optional[str] = Field(
        default=None,
        description="Language whose highlight query to use. Defaults to the server default (rust).",
    )
    rule: Optional[RuleName] = Field(
        default=None,
        description="Duplicate resolution rule. Defaults to the server default (last_wins).",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {"code": "fn main() {\n    println!(\"hi\");\n}\n"},
        ]
    }}


class TokenModel(BaseModel):
    """One highlighted fragment of a line."""

    node_type: str = Field(description="Capture name, or 'none' for plain text.")
    element_text: str = Field(description="Exact source text of the fragment.")


class LanguageListResponse(BaseModel):
    """Languages that ship a highlight query."""

    languages: List[str] = Field(description="Language identifiers usable in requests.")
    default: str = Field(description="Language used when a request names none.")


class ErrorResponse(BaseModel):
    """Standard JSON error body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
