"""Capabilities the engine needs from the outside world.

The Google transports in google_api.py implement these; tests use in-memory fakes.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from .models import FileSnapshot

class AuditSource(Protocol):
    def fetch_moves(self, scope_folder_id: str, start: datetime, end: datetime,
                    actor_ip: Optional[str] = None) -> List[Dict[str, Any]]:
        """Every 'move into scope_folder_id' activity in the window, all pages."""
        ...

class FileStateSource(Protocol):
    def fetch_state(self, file_id: str) -> FileSnapshot:
        ...

class MoveTransport(Protocol):
    def apply_move(self, file_id: str, add_parent: str, remove_parent: str) -> None:
        """One atomic reparenting. Raises TransportError on failure."""
        ...
