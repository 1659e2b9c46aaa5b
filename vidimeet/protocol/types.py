# vidimeet/protocol/types.py
from __future__ import annotations

# ---- Event names (client -> server) ----
JOIN_POOL = "join-pool"
OFFER = "offer"
ANSWER = "answer"
ICE_CANDIDATE = "ice-candidate"
MESSAGE = "message"
REPORT = "report"
LEAVE_ROOM = "leave-room"

# ---- Event names (server -> client) ----
MATCHED = "matched"
USER_DISCONNECTED = "user-disconnected"
ERROR = "error"
# OFFER, ANSWER, ICE_CANDIDATE and MESSAGE are relayed under their own name

# signalling kinds that go through the relay path
SIGNAL_KINDS = (OFFER, ANSWER, ICE_CANDIDATE, MESSAGE)

# payload key that carries the relayed body for each kind
SIGNAL_BODY_KEY = {
    OFFER: "offer",
    ANSWER: "answer",
    ICE_CANDIDATE: "candidate",
    MESSAGE: "message",
}

# ---- Error messages ----
ERR_BAD_JSON = "Invalid JSON format"
ERR_INTERNAL = "An error occurred"
ERR_UNKNOWN_EVENT = "Unknown event"

# Minimal shape docs (for human readers)
# Frame: { "type": <event name>, "payload": {...} }
# matched:       { "roomId": "<uuid4>", "partnerId": "<conn id>" }
# offer:         { "roomId", "offer", "partnerId" }
# answer:        { "roomId", "answer" }
# ice-candidate: { "roomId", "candidate" }
# message:       { "message" }
