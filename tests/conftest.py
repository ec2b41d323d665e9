"""Shared fixtures: in-memory stand-ins for the audit log and Drive."""
from datetime import datetime

import pytest

from driverestore.errors import TransportError
from driverestore.models import FileSnapshot, RunParams

ROOT = "ROOT"

def move_activity(file_id, file_name, folder_id, folder_name):
    return {
        "kind": "admin#reports#activity",
        "events": [{
            "type": "access",
            "name": "move",
            "parameters": [
                {"name": "doc_id", "value": file_id},
                {"name": "doc_title", "value": file_name},
                {"name": "source_folder_id", "multiValue": [folder_id]},
                {"name": "source_folder_title", "multiValue": [folder_name]},
                {"name": "destination_folder_id", "multiValue": [ROOT]},
            ],
        }],
    }

class FakeAudit:
    def __init__(self, activities=None, error=None):
        self.activities = list(activities or [])
        self.error = error
        self.calls = []

    def fetch_moves(self, scope_folder_id, start, end, actor_ip=None):
        self.calls.append((scope_folder_id, start, end, actor_ip))
        if self.error:
            raise self.error
        return list(self.activities)

class FakeDrive:
    """Tracks parents per file and applies moves the way Drive does."""

    def __init__(self, parents=None):
        self.parents = {fid: set(p) for fid, p in (parents or {}).items()}
        self.trashed = set()
        self.fail_moves = set()
        self.fail_fetches = set()
        self.moves = []
        self.fetches = []

    def fetch_state(self, file_id):
        self.fetches.append(file_id)
        if file_id in self.fail_fetches:
            raise TransportError("HTTP 500: backend error", status=500)
        if file_id not in self.parents:
            return FileSnapshot(file_id, frozenset(), exists=False)
        return FileSnapshot(file_id, frozenset(self.parents[file_id]),
                            trashed=file_id in self.trashed)

    def apply_move(self, file_id, add_parent, remove_parent):
        if file_id in self.fail_moves:
            raise TransportError("HTTP 403: insufficient permissions", status=403)
        self.moves.append((file_id, add_parent, remove_parent))
        current = self.parents[file_id]
        current.discard(remove_parent)
        current.add(add_parent)

@pytest.fixture
def params():
    return RunParams(
        scope_folder_id=ROOT,
        start=datetime(2024, 3, 1, 9, 0, 0),
        end=datetime(2024, 3, 1, 11, 0, 0),
    )

@pytest.fixture
def xyz_activities():
    return [
        move_activity("X", "x.docx", "F1", "Finance"),
        move_activity("Y", "y.xlsx", "F1", "Finance"),
        move_activity("Z", "z.pdf", "F2", "Legal"),
    ]

@pytest.fixture
def drive():
    return FakeDrive({"X": {ROOT}, "Y": {ROOT}, "Z": {ROOT}})
