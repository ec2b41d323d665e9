from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

@dataclass(frozen=True)
class RestoreRecord:
    file_id: str
    file_name: str
    origin_folder_id: str
    origin_folder_name: str

    def __post_init__(self):
        if not self.file_id:
            raise ValueError("RestoreRecord needs a file_id")
        if not self.origin_folder_id:
            raise ValueError("RestoreRecord needs an origin_folder_id")

@dataclass(frozen=True)
class FolderGroup:
    origin_folder_id: str
    origin_folder_name: str
    records: Tuple[RestoreRecord, ...]

    def __len__(self) -> int:
        return len(self.records)

@dataclass(frozen=True)
class FileSnapshot:
    file_id: str
    parent_ids: frozenset
    trashed: bool = False
    exists: bool = True
    name: str = ""

class Outcome(str, Enum):
    MOVED = "moved"
    DRIFTED = "drifted"  # skipped
    SIMULATED = "simulated"
    FAILED = "failed"

@dataclass(frozen=True)
class RecordResult:
    record: RestoreRecord
    outcome: Outcome
    reason: str = ""  # e.g. "parent changed", transport error text
    parent_ids: frozenset = frozenset()  # parents seen during validation
    percent: float = 0.0

@dataclass(frozen=True)
class MalformedEvent:
    index: int
    reason: str
    raw: Dict[str, Any]

@dataclass(frozen=True)
class RunParams:
    scope_folder_id: str
    start: datetime
    end: datetime
    actor_ip: Optional[str] = None
    simulate: bool = False

@dataclass
class RunPlan:
    """Parsed and grouped audit window, ready to be processed."""
    params: RunParams
    groups: List[FolderGroup]
    malformed: List[MalformedEvent] = field(default_factory=list)

    @property
    def total_records(self) -> int:
        return sum(len(g) for g in self.groups)
