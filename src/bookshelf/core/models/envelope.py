"""Uniform JSON response shape returned by every book endpoint."""

from typing import Any

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel


class Envelope(BaseModel):
    message: str | None = None
    data: Any | None = None
    error: str | None = None

    def to_content(self) -> dict[str, Any]:
        """Serialize for a JSON response, omitting keys that were not set."""
        return jsonable_encoder(self, exclude_none=True)
