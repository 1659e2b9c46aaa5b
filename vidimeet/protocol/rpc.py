from __future__ import annotations
import json
import uuid
from typing import Any, Dict, Optional, Tuple

from .types import (
    ANSWER, ERROR, ICE_CANDIDATE, MATCHED, MESSAGE, OFFER, USER_DISCONNECTED,
)


class FrameError(ValueError):
    """Raised when an inbound frame is not a JSON object with a type."""


def new_connection_id() -> str:
    return uuid.uuid4().hex


def new_room_id() -> str:
    return str(uuid.uuid4())


def frame(type_: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {"type": type_, "payload": payload or {}}


# server side builders
def evt_matched(room_id: str, partner_id: str) -> Dict[str, Any]:
    return frame(MATCHED, {"roomId": room_id, "partnerId": partner_id})


def evt_offer(room_id: str, offer: Any, sender_id: str) -> Dict[str, Any]:
    # partnerId lets the answering side address its reply
    return frame(OFFER, {"roomId": room_id, "offer": offer, "partnerId": sender_id})


def evt_answer(room_id: str, answer: Any) -> Dict[str, Any]:
    return frame(ANSWER, {"roomId": room_id, "answer": answer})


def evt_ice_candidate(room_id: str, candidate: Any) -> Dict[str, Any]:
    return frame(ICE_CANDIDATE, {"roomId": room_id, "candidate": candidate})


def evt_message(message: Any) -> Dict[str, Any]:
    return frame(MESSAGE, {"message": message})


def evt_user_disconnected() -> Dict[str, Any]:
    return frame(USER_DISCONNECTED)


def evt_error(message: str) -> Dict[str, Any]:
    return frame(ERROR, {"message": message})


def encode(obj: Dict[str, Any]) -> str:
    return json.dumps(obj)


def decode(raw: str | bytes) -> Tuple[str, Any]:
    """Split a raw frame into (type, payload).

    The payload is returned as sent (``{}`` when absent) so the handler
    layer decides what counts as malformed.
    """
    try:
        obj = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        raise FrameError("invalid JSON") from e
    if not isinstance(obj, dict):
        raise FrameError("frame is not an object")
    t = obj.get("type")
    if not isinstance(t, str) or not t:
        raise FrameError("missing type")
    payload = obj.get("payload")
    return t, ({} if payload is None else payload)
