"""Message codec: one line of JSON text to an envelope, and back."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from toolhost.protocol.errors import DecodeError, InvalidRequestError
from toolhost.protocol.models import Envelope, JsonRpcNotification, JsonRpcRequest, JsonRpcResponse


def decode(line: str) -> Envelope:
    """Parse *line* into a request (``id`` present) or a notification.

    Raises:
        DecodeError: *line* is not valid JSON.
        InvalidRequestError: the JSON is not a valid envelope.
    """
    try:
        data: Any = json.loads(line)
    except json.JSONDecodeError as exc:
        raise DecodeError(str(exc)) from exc

    if not isinstance(data, dict):
        raise InvalidRequestError("message must be a JSON object")

    model = JsonRpcRequest if "id" in data else JsonRpcNotification
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidRequestError(
            _summarize(exc),
            request_id=data.get("id"),
            is_notification="id" not in data,
        ) from exc


def encode(response: JsonRpcResponse) -> str:
    """Serialize *response* as a single line of compact JSON."""
    return json.dumps(response.to_wire(), ensure_ascii=False, separators=(",", ":"))


def _summarize(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "message"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)
