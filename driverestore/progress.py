from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional

from .models import FolderGroup, Outcome, RestoreRecord

@dataclass(frozen=True)
class ProgressEvent:
    """Something a console or log can render. Never fed back into the run."""
    kind: str  # "group" | "record"
    group_index: int
    group_count: int
    group_size: int
    folder_id: str
    folder_name: str
    file_id: str = ""
    file_name: str = ""
    outcome: Optional[Outcome] = None
    reason: str = ""
    percent: float = 0.0

class RunStats:
    """Counters for one run. Seeded with the record total before processing starts."""

    def __init__(self, total_records: int, listener: Optional[Callable[[ProgressEvent], None]] = None):
        self.total_records = total_records
        self.processed_count = 0
        self.moved_count = 0
        self.skipped_count = 0
        self.simulated_count = 0
        self.failed_count = 0
        self.group_index = 0
        self.group_count = 0
        self.group_size = 0
        self.listener = listener

    @property
    def percent(self) -> float:
        if self.total_records == 0:
            return 100.0
        pct = Decimal(self.processed_count * 100) / Decimal(self.total_records)
        return float(pct.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

    def begin_group(self, index: int, count: int, group: FolderGroup) -> None:
        self.group_index = index
        self.group_count = count
        self.group_size = len(group)
        self._emit(ProgressEvent(
            kind="group",
            group_index=index,
            group_count=count,
            group_size=len(group),
            folder_id=group.origin_folder_id,
            folder_name=group.origin_folder_name,
            percent=self.percent,
        ))

    def record(self, rec: RestoreRecord, outcome: Outcome, reason: str = "") -> float:
        self.processed_count += 1
        if outcome is Outcome.MOVED:
            self.moved_count += 1
        elif outcome is Outcome.DRIFTED:
            self.skipped_count += 1
        elif outcome is Outcome.SIMULATED:
            self.simulated_count += 1
        else:
            self.failed_count += 1

        pct = self.percent
        self._emit(ProgressEvent(
            kind="record",
            group_index=self.group_index,
            group_count=self.group_count,
            group_size=self.group_size,
            folder_id=rec.origin_folder_id,
            folder_name=rec.origin_folder_name,
            file_id=rec.file_id,
            file_name=rec.file_name,
            outcome=outcome,
            reason=reason,
            percent=pct,
        ))
        return pct

    def as_dict(self) -> dict:
        return {
            "total_records": self.total_records,
            "processed": self.processed_count,
            "moved": self.moved_count,
            "skipped": self.skipped_count,
            "simulated": self.simulated_count,
            "failed": self.failed_count,
            "percent": self.percent,
        }

    def _emit(self, event: ProgressEvent) -> None:
        if self.listener is not None:
            self.listener(event)
