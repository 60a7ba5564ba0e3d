"""Wire envelopes exchanged over the RPC websocket.

Request:
{
    "id": <req-id>,
    "method": "math.add",
    "params": [2, 3]
}

Response:
{
    "id": <req-id>,
    "result": <value> | null,
    "error": null | "<description>"
}
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError

from jsonrpcws.utils.exceptions import (
    FUNCTION_NOT_FOUND,
    INVALID_REQUEST,
    UNSPECIFIED_FAILURE,
)


class RequestEnvelope(BaseModel):
    """Inbound call. `method` and `params` are optional here so that an
    incomplete frame still yields its id for the error response."""

    model_config = ConfigDict(extra="ignore")

    id: Any = None
    method: Any = None
    params: Any = None

    def is_valid(self) -> bool:
        """True when the frame names a method and carries a params list."""
        if not isinstance(self.method, str) or not self.method:
            return False
        return isinstance(self.params, list)


class ResponseEnvelope(BaseModel):
    """Outbound result or error for one request id."""

    id: Any = None
    result: Any = None
    error: str | None = None

    @classmethod
    def success(cls, request_id: Any, value: Any) -> "ResponseEnvelope":
        return cls(id=request_id, result=value, error=None)

    @classmethod
    def failure(cls, request_id: Any, description: str | None) -> "ResponseEnvelope":
        return cls(id=request_id, result=None, error=description or UNSPECIFIED_FAILURE)

    @classmethod
    def invalid_request(cls, request_id: Any) -> "ResponseEnvelope":
        return cls.failure(request_id, INVALID_REQUEST)

    @classmethod
    def not_found(cls, request_id: Any) -> "ResponseEnvelope":
        return cls.failure(request_id, FUNCTION_NOT_FOUND)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_wire(self) -> str:
        """Serialize to JSON text. Raises TypeError/ValueError for results
        json cannot encode."""
        return json.dumps({"id": self.id, "result": self.result, "error": self.error})


def parse_request(raw: str | bytes) -> RequestEnvelope:
    """Parse one inbound frame.

    Frames that are not JSON objects come back as an empty envelope, which
    fails `is_valid()` and is answered with "Invalid Request".
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError):
        return RequestEnvelope()
    if not isinstance(data, dict):
        return RequestEnvelope()
    try:
        return RequestEnvelope.model_validate(data)
    except PydanticValidationError:
        return RequestEnvelope(id=data.get("id"))
