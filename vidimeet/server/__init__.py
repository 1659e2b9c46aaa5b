from .matchmaker import Matchmaker, Outbound, Room
from .session import ConnectionRegistry

__all__ = [
    "ConnectionRegistry",
    "Matchmaker",
    "Outbound",
    "Room",
]
