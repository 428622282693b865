"""Game domain services: state machine, scoring, room and session registries.

This package contains pure domain logic that socket handlers and HTTP routes
import, keeping transport concerns separated from core game mechanics.
"""
from .registry import RoomRegistry
from .sessions import SessionRegistry
from .state_machine import ActionResult

__all__ = ['ActionResult', 'RoomRegistry', 'SessionRegistry']
